from decimal import Decimal

from django.test import RequestFactory, SimpleTestCase, TestCase

from awards.models import Award
from core.context import AdminContext
from core.paging import load_all
from core.utils import client_ip, format_money, parse_int


class LoadAllTests(TestCase):
    def setUp(self):
        for i in range(7):
            Award.objects.create(award_name=f"Award {i}", year=2024)

    def test_reads_across_pages(self):
        self.assertEqual(len(load_all(Award.objects.all(), page_size=3)), 7)

    def test_exact_multiple_of_page_size(self):
        Award.objects.create(award_name="Award 7", year=2024)
        rows = load_all(Award.objects.all(), page_size=4)
        self.assertEqual(len(rows), 8)
        self.assertEqual(len({a.pk for a in rows}), 8)

    def test_empty_table(self):
        Award.objects.all().delete()
        self.assertEqual(load_all(Award.objects.all(), page_size=3), [])

    def test_rejects_bad_page_size(self):
        with self.assertRaises(ValueError):
            load_all(Award.objects.all(), page_size=-1)


class RequestHelperTests(SimpleTestCase):
    def setUp(self):
        self.factory = RequestFactory()

    def test_client_ip_prefers_forwarded_for(self):
        request = self.factory.get('/', HTTP_X_FORWARDED_FOR='203.0.113.5, 10.0.0.2')
        self.assertEqual(client_ip(request), '203.0.113.5')

    def test_client_ip_falls_back_to_remote_addr(self):
        request = self.factory.get('/', REMOTE_ADDR='192.0.2.10')
        self.assertEqual(client_ip(request), '192.0.2.10')

    def test_client_ip_unknown(self):
        request = self.factory.get('/')
        request.META.pop('REMOTE_ADDR', None)
        self.assertEqual(client_ip(request), 'unknown')

    def test_parse_int(self):
        self.assertEqual(parse_int(' 2024 '), 2024)
        self.assertIsNone(parse_int('abc'))
        self.assertEqual(parse_int('', default=3), 3)

    def test_format_money(self):
        self.assertEqual(format_money(Decimal('200.960000000000')), '200.96')
        self.assertEqual(format_money(None), '0.00')

    def test_admin_context(self):
        ctx = AdminContext(user_email='admin@example.com', params={'year': '2024', 'search': '  acme '})
        self.assertEqual(ctx.integer('year'), 2024)
        self.assertEqual(ctx.text('search'), 'acme')
        self.assertEqual(ctx.text('missing'), '')
