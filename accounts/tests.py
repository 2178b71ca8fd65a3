import json
from unittest import mock

from django.conf import settings
from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from accounts.backends import AdminEmailBackend

User = get_user_model()


class AdminEmailBackendTests(TestCase):
    def setUp(self):
        self.backend = AdminEmailBackend()
        self.admin = User.objects.create_superuser(
            username='admin', email='admin@example.com', password='correct-horse'
        )

    def test_email_or_username(self):
        self.assertEqual(self.backend.authenticate(None, email='ADMIN@example.com', password='correct-horse'),
                         self.admin)
        self.assertEqual(self.backend.authenticate(None, username='admin', password='correct-horse'), self.admin)
        self.assertIsNone(self.backend.authenticate(None, email='admin@example.com', password='wrong'))
        self.assertIsNone(self.backend.authenticate(None, email='nobody@example.com', password='correct-horse'))

    def test_shared_address_is_settled_by_password(self):
        other = User.objects.create_user(username='deputy', email='admin@example.com', password='other-pass')
        self.assertEqual(self.backend.authenticate(None, email='admin@example.com', password='other-pass'), other)
        self.assertEqual(self.backend.authenticate(None, email='admin@example.com', password='correct-horse'),
                         self.admin)

    def test_unconfirmed_account(self):
        User.objects.create_user(
            username='pending', email='pending@example.com', password='secret-pass', is_active=False
        )
        self.assertIsNone(self.backend.authenticate(None, email='pending@example.com', password='secret-pass'))
        self.assertTrue(self.backend.is_unconfirmed('Pending@example.com', 'secret-pass'))
        self.assertFalse(self.backend.is_unconfirmed('pending@example.com', 'wrong'))
        self.assertFalse(self.backend.is_unconfirmed('admin@example.com', 'correct-horse'))


class LoginViewTests(TestCase):
    def setUp(self):
        self.url = reverse('accounts:login')
        self.admin = User.objects.create_superuser(
            username='admin', email='admin@example.com', password='correct-horse'
        )

    def post(self, payload):
        return self.client.post(self.url, json.dumps(payload), content_type='application/json')

    def test_missing_fields(self):
        response = self.post({'email': 'admin@example.com'})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Please enter both email and password')

    @mock.patch('accounts.views.authenticate')
    def test_malformed_email_never_reaches_backend(self, mock_authenticate):
        response = self.post({'email': 'not-an-email', 'password': 'whatever'})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Please enter a valid email address')
        mock_authenticate.assert_not_called()

    def test_wrong_password(self):
        response = self.post({'email': 'admin@example.com', 'password': 'nope'})
        self.assertEqual(response.status_code, 401)
        self.assertNotIn('_auth_user_id', self.client.session)

    def test_unconfirmed_account(self):
        User.objects.create_user(
            username='pending', email='pending@example.com', password='secret-pass', is_active=False
        )
        response = self.post({'email': 'pending@example.com', 'password': 'secret-pass'})
        self.assertEqual(response.status_code, 403)

        response = self.post({'email': 'pending@example.com', 'password': 'wrong-pass'})
        self.assertEqual(response.status_code, 401)

    def test_successful_login_is_case_insensitive(self):
        response = self.post({'email': 'Admin@Example.com', 'password': 'correct-horse'})
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['email'], 'admin@example.com')
        self.assertTrue(data['is_admin'])
        self.assertEqual(data['session_timeout_seconds'], settings.ADMIN_INACTIVITY_TIMEOUT)
        self.assertEqual(int(self.client.session['_auth_user_id']), self.admin.pk)

    def test_session_and_logout(self):
        self.client.force_login(self.admin)
        response = self.client.get(reverse('accounts:session'))
        self.assertTrue(response.json()['authenticated'])

        self.client.post(reverse('accounts:logout'))
        response = self.client.get(reverse('accounts:session'))
        self.assertFalse(response.json()['authenticated'])


class InactivityTimeoutTests(TestCase):
    def test_session_expires_after_thirty_idle_minutes(self):
        self.assertEqual(settings.SESSION_COOKIE_AGE, 30 * 60)
        self.assertTrue(settings.SESSION_SAVE_EVERY_REQUEST)
