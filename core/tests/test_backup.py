import json
import os
import tempfile
from decimal import Decimal
from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import TestCase
from django.urls import reverse

from awards.models import Award
from core.backup import BACKUP_TABLES, build_backup_snapshot, dump_snapshot
from core.models import ActivityLog
from entries.models import Entry, Invoice
from organisations.models import Assignment, Organisation
from voting.models import Vote

User = get_user_model()


class BackupTestCase(TestCase):
    def setUp(self):
        self.award = Award.objects.create(
            award_name="Best Exporter", year=2024, sector="Trade", category="Export",
            entry_fee=Decimal('250.00'),
        )
        self.org = Organisation.objects.create(company_name="Acme Ltd")
        self.assignment = Assignment.objects.create(award=self.award, organisation=self.org, status='winner')
        self.entry = Entry.objects.create(
            organisation=self.org, award=self.award, entry_title="Global growth", why_should_win="Because.",
            contact_name="Sam", contact_email="sam@acme.test", entry_fee=Decimal('250.00'),
            status=Entry.Status.SUBMITTED, payment_status=Entry.PaymentStatus.PAID,
            is_public=True, allow_public_voting=True, public_votes=1,
        )
        Invoice.objects.create(organisation=self.org, entry=self.entry, total_amount=Decimal('257.55'))
        Vote.objects.create(entry=self.entry, voter_email='voter@example.com')
        ActivityLog.record(self.entry, 'payment_completed')


class SnapshotTests(BackupTestCase):
    def test_round_trip_preserves_counts_and_values(self):
        snapshot = json.loads(dump_snapshot(build_backup_snapshot()))

        self.assertEqual(snapshot['version'], '1.0.0')
        self.assertIn('exportDate', snapshot)
        self.assertEqual(set(snapshot['tables']), set(BACKUP_TABLES))
        for name, model in BACKUP_TABLES.items():
            self.assertEqual(snapshot['metadata']['totalRecords'][name], model.objects.count())
            self.assertEqual(len(snapshot['tables'][name]), model.objects.count())

        award_row = snapshot['tables']['awards'][0]
        self.assertEqual(award_row['award_name'], "Best Exporter")
        self.assertEqual(Decimal(award_row['entry_fee']), Decimal('250.00'))
        entry_row = snapshot['tables']['entries'][0]
        self.assertEqual(entry_row['entry_number'], self.entry.entry_number)
        self.assertEqual(entry_row['organisation_id'], self.org.pk)
        self.assertEqual(Decimal(snapshot['tables']['invoices'][0]['total_amount']), Decimal('257.55'))

    def test_empty_database(self):
        for model in reversed(list(BACKUP_TABLES.values())):
            model.objects.all().delete()
        snapshot = build_backup_snapshot()
        self.assertTrue(all(count == 0 for count in snapshot['metadata']['totalRecords'].values()))


class BackupEndpointTests(BackupTestCase):
    def setUp(self):
        super().setUp()
        self.admin = User.objects.create_superuser(username='admin', email='admin@example.com', password='pw')

    def test_download_requires_admin(self):
        response = self.client.get(reverse('core:download_backup'))
        self.assertEqual(response.status_code, 302)

    def test_download(self):
        self.client.force_login(self.admin)
        response = self.client.get(reverse('core:download_backup'))
        self.assertEqual(response.status_code, 200)
        self.assertIn('attachment; filename="awards_cms_backup_', response['Content-Disposition'])
        data = json.loads(response.content)
        self.assertEqual(data['metadata']['totalRecords']['votes'], 1)

    def test_system_info(self):
        self.client.force_login(self.admin)
        data = self.client.get(reverse('core:system_info')).json()
        self.assertEqual(data['record_counts']['entries'], 1)
        self.assertEqual(data['session_timeout_seconds'], 1800)

    def test_export_command(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, 'backup.json')
            out = StringIO()
            call_command('export_backup', output=path, stdout=out)
            with open(path, encoding='utf-8') as backup_file:
                data = json.load(backup_file)
        self.assertEqual(data['metadata']['totalRecords']['awards'], 1)
        self.assertIn('Backup written to', out.getvalue())
