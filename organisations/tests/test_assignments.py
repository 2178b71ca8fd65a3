import datetime
import json
from unittest import mock

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from awards.models import Award
from core.models import ActivityLog
from organisations import services
from organisations.exceptions import AlreadyAssignedError, InvalidAssignmentStatusError, InvalidJudgeScoreError
from organisations.models import Assignment, Organisation

User = get_user_model()


class AssignmentServiceTests(TestCase):
    def setUp(self):
        self.award = Award.objects.create(award_name="Best Exporter", year=2024)
        self.acme = Organisation.objects.create(company_name="Acme Ltd", email="info@acme.test")
        self.globex = Organisation.objects.create(company_name="Globex plc")
        self.assignment = services.assign_organisation(self.award, self.acme, assigned_by='admin@example.com')

    def test_duplicate_assignment_rejected(self):
        with self.assertRaises(AlreadyAssignedError):
            services.assign_organisation(self.award, self.acme)
        self.assertEqual(Assignment.objects.filter(award=self.award).count(), 1)

    def test_bulk_assign_skips_existing(self):
        created = services.bulk_assign(self.award, [self.acme.pk, self.globex.pk])
        self.assertEqual(created, 1)
        self.assertEqual(Assignment.objects.filter(award=self.award).count(), 2)

    @mock.patch('organisations.services.timezone.localdate', return_value=datetime.date(2024, 11, 5))
    def test_winner_sets_announcement_date(self, _localdate):
        services.change_status(self.assignment, Assignment.Status.WINNER, performed_by='admin@example.com')
        self.assignment.refresh_from_db()
        self.award.refresh_from_db()
        self.assertEqual(self.assignment.announcement_date, datetime.date(2024, 11, 5))
        self.assertEqual(self.award.winner, "Acme Ltd")
        self.assertTrue(
            ActivityLog.objects.filter(entity_type='assignment', entity_id=str(self.assignment.pk)).exists()
        )

    def test_other_statuses_leave_announcement_date_alone(self):
        for status in (Assignment.Status.SHORTLISTED, Assignment.Status.REJECTED, Assignment.Status.NOMINATED):
            services.change_status(self.assignment, status)
            self.assignment.refresh_from_db()
            self.assertIsNone(self.assignment.announcement_date)

        previous = datetime.date(2023, 6, 1)
        Assignment.objects.filter(pk=self.assignment.pk).update(announcement_date=previous)
        self.assignment.refresh_from_db()
        services.change_status(self.assignment, Assignment.Status.SHORTLISTED)
        self.assignment.refresh_from_db()
        self.assertEqual(self.assignment.announcement_date, previous)

    def test_demoted_winner_is_cleared_from_award(self):
        services.change_status(self.assignment, Assignment.Status.WINNER)
        self.assignment.refresh_from_db()
        announced = self.assignment.announcement_date

        services.change_status(self.assignment, Assignment.Status.REJECTED)
        self.assignment.refresh_from_db()
        self.award.refresh_from_db()
        self.assertEqual(self.award.winner, '')
        self.assertEqual(self.assignment.announcement_date, announced)

    def test_demoted_winner_hands_award_to_remaining_winner(self):
        other = services.assign_organisation(self.award, self.globex)
        services.change_status(other, Assignment.Status.WINNER)
        services.change_status(self.assignment, Assignment.Status.WINNER)
        self.award.refresh_from_db()
        self.assertEqual(self.award.winner, "Acme Ltd")

        services.change_status(self.assignment, Assignment.Status.SHORTLISTED)
        self.award.refresh_from_db()
        self.assertEqual(self.award.winner, "Globex plc")

    def test_removing_winner_clears_award(self):
        services.change_status(self.assignment, Assignment.Status.WINNER)
        services.remove_assignment(self.assignment)
        self.award.refresh_from_db()
        self.assertEqual(self.award.winner, '')

    def test_unknown_status(self):
        with self.assertRaises(InvalidAssignmentStatusError):
            services.change_status(self.assignment, 'champion')

    def test_judge_score_bounds(self):
        services.set_judge_score(self.assignment, '7')
        self.assertEqual(self.assignment.judge_score, 7)
        with self.assertRaises(InvalidJudgeScoreError):
            services.set_judge_score(self.assignment, 11)
        with self.assertRaises(InvalidJudgeScoreError):
            services.set_judge_score(self.assignment, 'high')

    def test_search(self):
        orgs = services.load_organisations()
        self.assertEqual([o.company_name for o in services.filter_organisations(orgs, 'ACME')], ["Acme Ltd"])
        self.assertEqual(len(services.filter_organisations(orgs, '')), 2)


class AssignmentViewTests(TestCase):
    def setUp(self):
        self.admin = User.objects.create_superuser(username='admin', email='admin@example.com', password='pw')
        self.client.force_login(self.admin)
        self.award = Award.objects.create(award_name="Best Exporter", year=2024)
        self.org = Organisation.objects.create(company_name="Acme Ltd")

    def test_assign_then_duplicate_conflicts(self):
        url = reverse('organisations:assign_organisation', args=[self.award.pk])
        payload = json.dumps({'organisation_id': self.org.pk})
        first = self.client.post(url, payload, content_type='application/json')
        self.assertEqual(first.status_code, 201)
        second = self.client.post(url, payload, content_type='application/json')
        self.assertEqual(second.status_code, 409)

    def test_assign_with_bad_id_is_not_found(self):
        url = reverse('organisations:assign_organisation', args=[self.award.pk])
        response = self.client.post(url, json.dumps({'organisation_id': 'abc'}), content_type='application/json')
        self.assertEqual(response.status_code, 404)

    def test_award_assignments_lists_available(self):
        other = Organisation.objects.create(company_name="Globex plc")
        services.assign_organisation(self.award, self.org)
        response = self.client.get(reverse('organisations:award_assignments', args=[self.award.pk]))
        data = response.json()
        self.assertEqual([a['company_name'] for a in data['assignments']], ["Acme Ltd"])
        self.assertEqual([o['id'] for o in data['available_organisations']], [other.pk])

    def test_status_view_demotes_winner(self):
        assignment = services.assign_organisation(self.award, self.org)
        services.change_status(assignment, Assignment.Status.WINNER)
        url = reverse('organisations:change_assignment_status', args=[assignment.pk])
        response = self.client.post(url, json.dumps({'status': 'rejected'}), content_type='application/json')
        self.assertEqual(response.status_code, 200)
        self.award.refresh_from_db()
        self.assertEqual(self.award.winner, '')
