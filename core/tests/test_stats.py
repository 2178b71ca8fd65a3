from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from awards.models import Award
from core.models import ActivityLog
from core.stats import dashboard_stats
from entries.models import Entry, Invoice
from organisations.models import Assignment, Organisation

User = get_user_model()


class DashboardStatsTests(TestCase):
    def setUp(self):
        self.acme = Organisation.objects.create(company_name="Acme Ltd")
        self.globex = Organisation.objects.create(company_name="Globex plc")
        a1 = Award.objects.create(award_name="Exporter", year=2023, category="Trade", sector="Retail", region="London")
        a2 = Award.objects.create(award_name="Innovator", year=2024, category="Trade", sector="Tech",
                                  status=Award.Status.APPROVED)
        a3 = Award.objects.create(award_name="Employer", year=2024, category="People", status=Award.Status.PENDING)
        Assignment.objects.create(award=a1, organisation=self.acme, status='winner')
        Assignment.objects.create(award=a2, organisation=self.acme, status='winner')
        Assignment.objects.create(award=a3, organisation=self.globex, status='winner')
        Assignment.objects.create(award=a3, organisation=self.acme, status='nominated')

        entry = Entry.objects.create(
            organisation=self.acme, award=a2, entry_title="Growth", why_should_win="Because.",
            contact_name="Sam", contact_email="sam@acme.test", entry_fee=Decimal('195.00'),
            status=Entry.Status.SUBMITTED,
        )
        Invoice.objects.create(entry=entry, total_amount=Decimal('200.96'))
        Invoice.objects.create(entry=entry, total_amount=Decimal('50.00'), status=Invoice.Status.REFUNDED)
        ActivityLog.record(entry, 'payment_completed')

    def test_totals(self):
        stats = dashboard_stats()
        self.assertEqual(stats['totals']['awards'], 3)
        self.assertEqual(stats['totals']['pending_awards'], 2)
        self.assertEqual(stats['totals']['organisations'], 2)
        self.assertEqual(stats['totals']['winners'], 3)
        self.assertEqual(stats['entries_by_status']['submitted'], 1)
        self.assertEqual(stats['entries_by_status']['draft'], 0)
        self.assertEqual(stats['revenue'], '200.96')

    def test_revenue_has_two_decimal_places(self):
        Invoice.objects.create(organisation=self.acme, total_amount=Decimal('0.04'))
        self.assertEqual(dashboard_stats()['revenue'], '201.00')

    def test_revenue_without_invoices(self):
        Invoice.objects.all().delete()
        self.assertEqual(dashboard_stats()['revenue'], '0.00')

    def test_breakdowns(self):
        stats = dashboard_stats()
        self.assertEqual(stats['winners_by_year'], [{'year': 2023, 'count': 1}, {'year': 2024, 'count': 2}])
        self.assertEqual(stats['awards_by_category'][0], {'name': 'Trade', 'count': 2})
        self.assertEqual({row['name'] for row in stats['awards_by_sector']}, {'Retail', 'Tech'})
        self.assertEqual(stats['top_companies'][0], {'company_name': 'Acme Ltd', 'wins': 2})
        self.assertEqual(stats['recent_activity'][0]['action'], 'payment_completed')

    def test_endpoint(self):
        admin = User.objects.create_superuser(username='admin', email='admin@example.com', password='pw')
        self.client.force_login(admin)
        response = self.client.get(reverse('core:dashboard_stats'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['totals']['awards'], 3)
