"""
Test suite for the reports module
Tests: dashboard summary and caching, sales/inventory/expense reports, spreadsheet export
"""
from datetime import date, timedelta

from django.core.cache import cache
from django.test import TestCase
from django.utils import timezone
from rest_framework import status

from natea.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from natea.inventory.models import StockAdjustment
from natea.pos.models import Sale
from .export import export_filename, render_spreadsheet, sales_sheet


class DashboardSummaryTests(TestCase):
    """Test the cached dashboard summary"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.product = TestDataFactory.create_product(sale_price=10000)
        cache.clear()

    def test_empty_day(self):
        response = self.client.get('/api/v1/reports/dashboard/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['today_revenue'], 0)
        self.assertEqual(response.data['payment_method_totals'], {'tunai': 0, 'qris': 0, 'dana': 0, 'trf': 0})

    def test_totals_for_today(self):
        """Only today's sales are summed, grouped per payment method"""
        TestDataFactory.create_sale([(self.product, 2)], payment_method='tunai')
        TestDataFactory.create_sale([(self.product, 1)], payment_method='qris', total_tax=500)
        TestDataFactory.create_sale([(self.product, 5)], payment_method='dana',
                                    created_at=timezone.now() - timedelta(days=2))

        response = self.client.get('/api/v1/reports/dashboard/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['today_revenue'], 30500)
        self.assertEqual(response.data['total_quantity_sold'], 3)
        self.assertEqual(response.data['transaction_count'], 2)
        self.assertEqual(response.data['payment_method_totals'], {'tunai': 20000, 'qris': 10500, 'dana': 0, 'trf': 0})

    def test_summary_is_cached_until_sales_change(self):
        sale = TestDataFactory.create_sale([(self.product, 1)])
        response = self.client.get('/api/v1/reports/dashboard/')
        self.assertEqual(response.data['today_revenue'], 10000)

        # Queryset updates bypass signals, so the cached value is served
        Sale.objects.filter(pk=sale.pk).update(amount=99999)
        response = self.client.get('/api/v1/reports/dashboard/')
        self.assertEqual(response.data['today_revenue'], 10000)

        with self.captureOnCommitCallbacks(execute=True):
            TestDataFactory.create_sale([(self.product, 1)])
        response = self.client.get('/api/v1/reports/dashboard/')
        self.assertEqual(response.data['today_revenue'], 109999)

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/reports/dashboard/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class SalesReportTests(TestCase):
    """Test the sales report and its export"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.product = TestDataFactory.create_product(name='Teh <Melati> & Lemon', sale_price=12000, hpp=4000)

    def test_line_items_and_totals(self):
        other = TestDataFactory.create_product(name='Roti', sale_price=8000, hpp=3000)
        sale = TestDataFactory.create_sale([(self.product, 2), (other, 1)], payment_method='trf', total_tax=1000)

        response = self.client.get('/api/v1/reports/sales/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['line_items']), 2)
        first = response.data['line_items'][0]
        self.assertEqual(first['sale_id'], sale.id)
        self.assertEqual(first['payment_method'], 'Transfer')
        self.assertEqual(first['line_total'], 24000)
        self.assertEqual(first['cogs'], 4000)
        self.assertEqual(response.data['totals'], {'revenue': 33000, 'quantity': 3, 'transaction_count': 1})

    def test_date_range(self):
        TestDataFactory.create_sale([(self.product, 1)], created_at=timezone.now() - timedelta(days=10))
        response = self.client.get('/api/v1/reports/sales/')
        self.assertEqual(response.data['line_items'], [])

        date_from = (timezone.localdate() - timedelta(days=30)).isoformat()
        response = self.client.get(f'/api/v1/reports/sales/?from={date_from}')
        self.assertEqual(len(response.data['line_items']), 1)

    def test_export_xls(self):
        """?format=xls returns an Excel-readable attachment with escaped cells"""
        TestDataFactory.create_sale([(self.product, 2)])
        response = self.client.get('/api/v1/reports/sales/?format=xls')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response['Content-Type'].startswith('application/vnd.ms-excel'))
        self.assertEqual(response['Content-Disposition'],
                         f'attachment; filename="Laporan_Penjualan_{timezone.localdate().isoformat()}.xls"')
        content = response.content.decode('utf-8')
        self.assertIn('<x:Name>Laporan Penjualan</x:Name>', content)
        self.assertIn('<th>Tanggal &amp; Jam</th>', content)
        self.assertIn('Teh &lt;Melati&gt; &amp; Lemon', content)
        self.assertIn('<td class="number">24000</td>', content)

    def test_export_endpoint(self):
        TestDataFactory.create_sale([(self.product, 1)])
        response = self.client.get('/api/v1/reports/sales/export/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('attachment;', response['Content-Disposition'])

    def test_export_empty_report(self):
        response = self.client.get('/api/v1/reports/sales/?format=xls')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Tidak ada transaksi untuk diekspor.')
        self.assertEqual(response['Content-Type'], 'application/json')

    def test_invalid_date(self):
        response = self.client.get('/api/v1/reports/sales/?from=2024/01/01')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class InventoryAndExpenseReportTests(TestCase):
    """Test the inventory and expense reports"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_inventory_report(self):
        item = TestDataFactory.create_inventory_item(item_name='Sedotan', initial_stock=2, minimum_stock=5)
        TestDataFactory.create_inventory_item(item_name='Gelas', initial_stock=50, minimum_stock=5)
        StockAdjustment.objects.create(item=item, item_name=item.item_name, item_size=item.size,
                                       adjustment_type='reduce', quantity=1, final_stock_after=1)

        self.client.logout()
        response = self.client.get('/api/v1/reports/inventory/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['items']), 2)
        self.assertEqual(response.data['low_stock_count'], 1)
        self.assertEqual(response.data['adjustments'][0]['signed_quantity'], -1)

    def test_inventory_export(self):
        item = TestDataFactory.create_inventory_item(item_name='Sedotan')
        StockAdjustment.objects.create(item=item, item_name=item.item_name, adjustment_type='add', quantity=3,
                                       final_stock_after=23, description='Restock <pagi>')
        response = self.client.get('/api/v1/reports/inventory/export/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('Laporan_Inventori_', response['Content-Disposition'])
        self.assertIn('Restock &lt;pagi&gt;', response.content.decode('utf-8'))

    def test_expense_report(self):
        TestDataFactory.create_expense(item='Gas', nominal_amount=20000, quantity=1, date=date(2024, 5, 3))
        TestDataFactory.create_expense(item='Gula', nominal_amount=15000, quantity=2, date=date(2024, 5, 10))
        TestDataFactory.create_expense(item='Listrik', nominal_amount=100000, quantity=1, date=date(2024, 6, 1))

        response = self.client.get('/api/v1/reports/expenses/?month_year=2024-05')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['records']), 2)
        self.assertEqual(response.data['grand_total'], 50000)

        response = self.client.get('/api/v1/reports/expenses/')
        self.assertEqual(response.data['grand_total'], 150000)

    def test_expense_export(self):
        TestDataFactory.create_expense(item='Gas', category='operasional', nominal_amount=20000, quantity=1)
        response = self.client.get('/api/v1/reports/expenses/?format=xls')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        content = response.content.decode('utf-8')
        self.assertIn('<x:Name>Laporan Pengeluaran</x:Name>', content)
        self.assertIn('Operasional', content)
        self.assertIn('Grand Total', content)


class SpreadsheetExportTests(TestCase):
    """Test the sheet builder and renderer directly"""

    def test_export_filename(self):
        self.assertEqual(export_filename('Laporan_Penjualan', date(2024, 5, 17)), 'Laporan_Penjualan_2024-05-17.xls')

    def test_sales_sheet_columns(self):
        sheet = sales_sheet([])
        self.assertEqual(
            [c['title'] for c in sheet['columns']],
            ['ID Transaksi', 'Tanggal & Jam', 'Metode Pembayaran', 'Produk', 'Qty', 'HPP', 'Harga Jual', 'Harga Total'],
        )
        html = render_spreadsheet(sheet)
        self.assertIn('<th class="number">Qty</th>', html)
        self.assertIn('xmlns:x="urn:schemas-microsoft-com:office:excel"', html)
