import json
import time
from decimal import Decimal
from unittest import mock

from django.core import mail
from django.test import TestCase, override_settings
from django.urls import reverse

from awards.models import Award
from core.models import ActivityLog
from entries.exceptions import WebhookSignatureError
from entries.models import Entry, Invoice
from entries.payments import compute_signature, verify_webhook_signature
from organisations.models import Organisation

WEBHOOK_SECRET = 'whsec_test_secret'


def signed_header(payload, secret=WEBHOOK_SECRET, timestamp=None):
    timestamp = int(time.time()) if timestamp is None else timestamp
    return f"t={timestamp},v1={compute_signature(payload, secret, timestamp)}"


class SignatureTests(TestCase):
    def setUp(self):
        self.payload = json.dumps({'id': 'evt_1', 'type': 'payment_intent.succeeded'}).encode()

    def test_valid_signature_returns_event(self):
        event = verify_webhook_signature(self.payload, signed_header(self.payload), WEBHOOK_SECRET)
        self.assertEqual(event['id'], 'evt_1')

    def test_any_matching_v1_is_accepted(self):
        header = signed_header(self.payload) + ",v1=deadbeef"
        self.assertEqual(verify_webhook_signature(self.payload, header, WEBHOOK_SECRET)['id'], 'evt_1')

    def test_wrong_secret(self):
        with self.assertRaises(WebhookSignatureError):
            verify_webhook_signature(self.payload, signed_header(self.payload, secret='other'), WEBHOOK_SECRET)

    def test_tampered_payload(self):
        header = signed_header(self.payload)
        with self.assertRaises(WebhookSignatureError):
            verify_webhook_signature(self.payload + b' ', header, WEBHOOK_SECRET)

    def test_stale_timestamp(self):
        old = int(time.time()) - 3600
        with self.assertRaises(WebhookSignatureError):
            verify_webhook_signature(self.payload, signed_header(self.payload, timestamp=old), WEBHOOK_SECRET)

    def test_malformed_header(self):
        for header in ('', 'garbage', 't=abc,v1=00'):
            with self.assertRaises(WebhookSignatureError):
                verify_webhook_signature(self.payload, header, WEBHOOK_SECRET)

    def test_missing_secret(self):
        with self.assertRaises(WebhookSignatureError):
            verify_webhook_signature(self.payload, signed_header(self.payload), '')


@override_settings(STRIPE_WEBHOOK_SECRET=WEBHOOK_SECRET)
class WebhookViewTests(TestCase):
    def setUp(self):
        self.url = reverse('entries:stripe_webhook')
        award = Award.objects.create(award_name="Best Exporter", year=2024)
        org = Organisation.objects.create(company_name="Acme Ltd")
        self.entry = Entry.objects.create(
            organisation=org, award=award,
            entry_title="Global growth", why_should_win="Because.",
            contact_name="Sam Taylor", contact_email="sam@acme.test",
            entry_fee=Decimal('195.00'), payment_reference='cs_test_1',
        )

    def send(self, event, header=None):
        payload = json.dumps(event).encode()
        return self.client.post(
            self.url, payload, content_type='application/json',
            HTTP_STRIPE_SIGNATURE=header if header is not None else signed_header(payload),
        )

    def checkout_completed(self):
        return {
            'id': 'evt_checkout',
            'type': 'checkout.session.completed',
            'data': {'object': {
                'id': 'cs_test_1',
                'payment_intent': 'pi_test_1',
                'amount_total': 20096,
                'currency': 'gbp',
                'metadata': {'entry_id': str(self.entry.pk), 'entry_number': self.entry.entry_number},
            }},
        }

    def test_unsigned_request_rejected(self):
        response = self.send(self.checkout_completed(), header='t=1,v1=bad')
        self.assertEqual(response.status_code, 400)
        self.entry.refresh_from_db()
        self.assertEqual(self.entry.payment_status, Entry.PaymentStatus.PENDING)

    def test_checkout_completed_marks_entry_paid(self):
        response = self.send(self.checkout_completed())
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'received': True})

        self.entry.refresh_from_db()
        self.assertEqual(self.entry.payment_status, Entry.PaymentStatus.PAID)
        self.assertEqual(self.entry.status, Entry.Status.SUBMITTED)
        self.assertEqual(self.entry.payment_reference, 'pi_test_1')
        self.assertIsNotNone(self.entry.submission_date)

        invoice = Invoice.objects.get(entry=self.entry)
        self.assertEqual(invoice.total_amount, Decimal('200.96'))
        self.assertEqual(invoice.currency, 'GBP')
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ['sam@acme.test'])
        self.assertTrue(ActivityLog.objects.filter(action='payment_completed').exists())

    def test_repeat_delivery_is_ignored(self):
        self.send(self.checkout_completed())
        self.send(self.checkout_completed())
        self.assertEqual(Invoice.objects.filter(entry=self.entry).count(), 1)
        self.assertEqual(len(mail.outbox), 1)

    def test_payment_failed_notifies_entrant(self):
        event = {
            'id': 'evt_failed',
            'type': 'payment_intent.payment_failed',
            'data': {'object': {
                'id': 'pi_test_2',
                'metadata': {'entry_id': str(self.entry.pk)},
                'last_payment_error': {'message': 'Your card has insufficient funds.'},
            }},
        }
        response = self.send(event)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(mail.outbox), 1)
        self.assertIn('insufficient funds', mail.outbox[0].body)
        self.assertTrue(ActivityLog.objects.filter(action='payment_failed', entity_id=str(self.entry.pk)).exists())

    def test_charge_refunded(self):
        self.send(self.checkout_completed())
        event = {
            'id': 'evt_refund',
            'type': 'charge.refunded',
            'data': {'object': {'id': 'ch_test_1', 'payment_intent': 'pi_test_1', 'metadata': {}}},
        }
        response = self.send(event)
        self.assertEqual(response.status_code, 200)
        self.entry.refresh_from_db()
        self.assertEqual(self.entry.payment_status, Entry.PaymentStatus.REFUNDED)
        self.assertEqual(Invoice.objects.get(entry=self.entry).status, Invoice.Status.REFUNDED)

    def test_unknown_event_is_acknowledged(self):
        response = self.send({'id': 'evt_x', 'type': 'customer.created', 'data': {'object': {}}})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'received': True})

    def test_non_numeric_entry_id_is_acknowledged(self):
        event = self.checkout_completed()
        event['data']['object']['metadata']['entry_id'] = 'abc'
        response = self.send(event)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'received': True})
        self.entry.refresh_from_db()
        self.assertEqual(self.entry.payment_status, Entry.PaymentStatus.PENDING)
        self.assertFalse(Invoice.objects.exists())

    def test_refund_with_non_numeric_entry_id_uses_reference(self):
        self.send(self.checkout_completed())
        event = {
            'id': 'evt_refund',
            'type': 'charge.refunded',
            'data': {'object': {'id': 'ch_test_1', 'payment_intent': 'pi_test_1', 'metadata': {'entry_id': 'x1'}}},
        }
        response = self.send(event)
        self.assertEqual(response.status_code, 200)
        self.entry.refresh_from_db()
        self.assertEqual(self.entry.payment_status, Entry.PaymentStatus.REFUNDED)


class VerifyPaymentTests(TestCase):
    def setUp(self):
        award = Award.objects.create(award_name="Best Exporter", year=2024)
        org = Organisation.objects.create(company_name="Acme Ltd")
        self.entry = Entry.objects.create(
            organisation=org, award=award, entry_title="Global growth", why_should_win="Because.",
            contact_name="Sam Taylor", contact_email="sam@acme.test", entry_fee=Decimal('195.00'),
        )

    @mock.patch('entries.views.StripeGateway')
    def test_known_entry(self, gateway_class):
        gateway_class.return_value.retrieve_checkout_session.return_value = {
            'payment_status': 'paid', 'metadata': {'entry_id': str(self.entry.pk)},
        }
        data = self.client.get(reverse('entries:verify_payment', args=['cs_test_1'])).json()
        self.assertTrue(data['paid'])
        self.assertEqual(data['entry']['entry_number'], self.entry.entry_number)

    @mock.patch('entries.views.StripeGateway')
    def test_non_numeric_entry_id(self, gateway_class):
        gateway_class.return_value.retrieve_checkout_session.return_value = {
            'payment_status': 'unpaid', 'metadata': {'entry_id': 'abc'},
        }
        response = self.client.get(reverse('entries:verify_payment', args=['cs_test_1']))
        self.assertEqual(response.status_code, 200)
        self.assertIsNone(response.json()['entry'])
