"""
Test suite for the POS module
Tests: cart operations, checkout, direct sales, sale queries, sale edits and deletion
"""
from datetime import timedelta
from unittest import mock

from django.core.cache import cache
from django.db import transaction
from django.test import TestCase
from django.utils import timezone
from rest_framework import status

from natea.core.cache_utils import cache_dashboard_summary, dashboard_summary_cache_key
from natea.core.models import AuditLog
from natea.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from .models import Cart, Sale, SaleItem
from .utils import calculate_sale_totals, parse_date_range


class SaleUtilsTests(TestCase):
    """Test total calculation and date parsing helpers"""

    def test_calculate_sale_totals(self):
        lines = [{'quantity': 2, 'unit_price': 15000}, {'quantity': 1, 'unit_price': 8000}]
        self.assertEqual(calculate_sale_totals(lines, 1000), (39000, 3))

    def test_calculate_sale_totals_empty(self):
        self.assertEqual(calculate_sale_totals([]), (0, 0))

    def test_parse_date_range_defaults_to_today(self):
        today = timezone.localdate()
        self.assertEqual(parse_date_range(), (today, today))

    def test_parse_date_range_rejects_bad_input(self):
        with self.assertRaises(ValueError):
            parse_date_range('2024-13-01', '2024-12-31')
        with self.assertRaises(ValueError):
            parse_date_range('2024-02-01', '2024-01-01')


class CartTests(TestCase):
    """Test the per-user server-side cart"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.product = TestDataFactory.create_product(name='Teh Tarik', sale_price=15000, hpp=6000)

    def test_get_cart_creates_empty_cart(self):
        response = self.client.get('/api/v1/cart/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['items'], [])
        self.assertEqual(response.data['total'], 0)

    def test_add_to_cart_merges_quantities(self):
        """Adding the same product twice results in one line"""
        response = self.client.post('/api/v1/cart/items/', {'product': self.product.id, 'quantity': 2}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        response = self.client.post('/api/v1/cart/items/', {'product': self.product.id, 'quantity': 3}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['items']), 1)
        self.assertEqual(response.data['items'][0]['quantity'], 5)
        self.assertEqual(response.data['items'][0]['subtotal'], 75000)
        self.assertEqual(response.data['total'], 75000)
        self.assertEqual(response.data['item_count'], 5)

    def test_add_to_cart_rejects_zero_quantity(self):
        response = self.client.post('/api/v1/cart/items/', {'product': self.product.id, 'quantity': 0}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_and_remove_item(self):
        response = self.client.post('/api/v1/cart/items/', {'product': self.product.id, 'quantity': 1}, format='json')
        item_id = response.data['items'][0]['id']

        response = self.client.patch(f'/api/v1/cart/items/{item_id}/', {'quantity': 4}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total'], 60000)

        response = self.client.delete(f'/api/v1/cart/items/{item_id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['items'], [])

    def test_carts_are_per_user(self):
        """Another user cannot touch a line in someone else's cart"""
        response = self.client.post('/api/v1/cart/items/', {'product': self.product.id, 'quantity': 1}, format='json')
        item_id = response.data['items'][0]['id']

        other = AuthenticatedAPIClient().authenticate_user(TestDataFactory.create_user())
        response = other.delete(f'/api/v1/cart/items/{item_id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_clear_cart(self):
        self.client.post('/api/v1/cart/items/', {'product': self.product.id, 'quantity': 1}, format='json')
        response = self.client.delete('/api/v1/cart/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['items'], [])

    def test_cart_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/cart/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_checkout_empty_cart(self):
        response = self.client.post('/api/v1/cart/checkout/', {'payment_method': 'tunai'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Cart is empty')

    def test_checkout_records_sale_and_empties_cart(self):
        other = TestDataFactory.create_product(name='Roti', sale_price=8000, hpp=3000)
        self.client.post('/api/v1/cart/items/', {'product': self.product.id, 'quantity': 2}, format='json')
        self.client.post('/api/v1/cart/items/', {'product': other.id, 'quantity': 1}, format='json')

        response = self.client.post('/api/v1/cart/checkout/', {'payment_method': 'qris', 'total_tax': 1000}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['amount'], 39000)
        self.assertEqual(response.data['total_quantity'], 3)
        self.assertEqual(response.data['payment_method_label'], 'QRIS')
        self.assertEqual([i['cogs'] for i in response.data['items']], [6000, 3000])

        self.assertEqual(Cart.objects.get(user=self.user, status='completed').items.count(), 0)
        response = self.client.get('/api/v1/cart/')
        self.assertEqual(response.data['items'], [])
        self.assertTrue(AuditLog.objects.filter(action='cart_checkout').exists())

    def test_repeated_checkout_of_same_cart_records_one_sale(self):
        """A second checkout that picked up the cart before the first committed finds it completed"""
        self.client.post('/api/v1/cart/items/', {'product': self.product.id, 'quantity': 2}, format='json')
        cart = Cart.objects.get(user=self.user, status='active')

        response = self.client.post('/api/v1/cart/checkout/', {'payment_method': 'tunai'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        with mock.patch('natea.pos.views.get_active_cart', return_value=cart):
            response = self.client.post('/api/v1/cart/checkout/', {'payment_method': 'tunai'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Cart is empty')
        self.assertEqual(Sale.objects.count(), 1)


class SaleTests(TestCase):
    """Test direct sale recording, queries, updates and deletion"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.product = TestDataFactory.create_product(name='Lemon Tea', sale_price=12000, hpp=5000)

    def test_record_sale(self):
        """Amount is the line totals plus tax"""
        data = {
            'items': [{'product': self.product.id, 'quantity': 3}],
            'payment_method': 'dana',
            'total_tax': 500,
        }
        response = self.client.post('/api/v1/sales/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['amount'], 36500)
        self.assertEqual(response.data['total_quantity'], 3)
        item = response.data['items'][0]
        self.assertEqual(item['product_name'], 'Lemon Tea')
        self.assertEqual(item['unit_price'], 12000)
        self.assertEqual(item['line_total'], 36000)
        self.assertEqual(Sale.objects.get().created_by, self.user)

    def test_record_sale_custom_price(self):
        data = {
            'items': [{'product': self.product.id, 'quantity': 1, 'unit_price': 10000, 'cogs': 4000}],
            'payment_method': 'tunai',
        }
        response = self.client.post('/api/v1/sales/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['amount'], 10000)
        self.assertEqual(response.data['items'][0]['cogs'], 4000)

    def test_record_sale_requires_items(self):
        response = self.client.post('/api/v1/sales/', {'items': [], 'payment_method': 'tunai'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Minimal harus ada satu item produk.', response.data['items'])

    def test_record_sale_rejects_unknown_payment_method(self):
        data = {'items': [{'product': self.product.id, 'quantity': 1}], 'payment_method': 'cek'}
        response = self.client.post('/api/v1/sales/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('payment_method', response.data)

    def test_query_sales_by_range(self):
        """Sales are filtered by local day, inclusive, newest first (ties by id)"""
        today = timezone.localtime()
        old = TestDataFactory.create_sale([(self.product, 1)], created_at=today - timedelta(days=3))
        first = TestDataFactory.create_sale([(self.product, 1)], created_at=today)
        second = TestDataFactory.create_sale([(self.product, 2)], created_at=today)

        response = self.client.get('/api/v1/sales/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([s['id'] for s in response.data['results']], [second.id, first.id])

        date_from = (today - timedelta(days=3)).date().isoformat()
        response = self.client.get(f'/api/v1/sales/?from={date_from}&to={today.date().isoformat()}')
        self.assertEqual(response.data['count'], 3)
        self.assertEqual(response.data['results'][-1]['id'], old.id)

    def test_query_sales_invalid_date(self):
        response = self.client.get('/api/v1/sales/?from=31-12-2024')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_sale_replaces_lines(self):
        sale = TestDataFactory.create_sale([(self.product, 1)])
        other = TestDataFactory.create_product(name='Kopi Susu', sale_price=18000, hpp=7000)
        data = {
            'items': [
                {'product': self.product.id, 'quantity': 2, 'unit_price': 12000},
                {'product': other.id, 'quantity': 1, 'unit_price': 18000},
            ],
            'payment_method': 'trf',
            'total_tax': 0,
        }
        response = self.client.put(f'/api/v1/sales/{sale.id}/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['amount'], 42000)
        self.assertEqual(response.data['total_quantity'], 3)
        self.assertEqual(response.data['payment_method'], 'trf')
        self.assertEqual(SaleItem.objects.filter(sale=sale).count(), 2)
        self.assertTrue(AuditLog.objects.filter(action='sale_update', object_id=str(sale.id)).exists())

    def test_update_sale_validation(self):
        sale = TestDataFactory.create_sale([(self.product, 1)])

        response = self.client.put(f'/api/v1/sales/{sale.id}/', {'items': [], 'payment_method': 'tunai'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        data = {'items': [{'product': self.product.id, 'quantity': 0, 'unit_price': 12000}], 'payment_method': 'tunai'}
        response = self.client.put(f'/api/v1/sales/{sale.id}/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('quantity lebih dari 0', str(response.data))

        data = {'items': [{'product': self.product.id, 'quantity': 1, 'unit_price': 0}], 'payment_method': 'tunai'}
        response = self.client.put(f'/api/v1/sales/{sale.id}/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('harga jual lebih dari 0', str(response.data))

        sale.refresh_from_db()
        self.assertEqual(sale.amount, 12000)

    def test_delete_sale(self):
        sale = TestDataFactory.create_sale([(self.product, 1)])
        response = self.client.delete(f'/api/v1/sales/{sale.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Sale.objects.filter(pk=sale.id).exists())

        response = self.client.delete(f'/api/v1/sales/{sale.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_deleting_product_keeps_sale_lines(self):
        sale = TestDataFactory.create_sale([(self.product, 2)])
        self.product.delete()
        item = SaleItem.objects.get(sale=sale)
        self.assertIsNone(item.product)
        self.assertEqual(item.product_name, 'Lemon Tea')

    def test_sale_changes_invalidate_dashboard_cache(self):
        cache_key = dashboard_summary_cache_key()
        cache_dashboard_summary(cache_key, {'today_revenue': 1})
        self.assertIsNotNone(cache.get(cache_key))

        data = {'items': [{'product': self.product.id, 'quantity': 1}], 'payment_method': 'tunai'}
        with self.captureOnCommitCallbacks(execute=True):
            self.client.post('/api/v1/sales/', data, format='json')
        self.assertIsNone(cache.get(cache_key))

    def test_dashboard_cache_cleared_only_after_commit(self):
        """A summary cached while the sale transaction is open must not survive the commit"""
        cache_key = dashboard_summary_cache_key()
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            with transaction.atomic():
                TestDataFactory.create_sale([(self.product, 1)])
                cache_dashboard_summary(cache_key, {'today_revenue': 0})
                self.assertIsNotNone(cache.get(cache_key))
        self.assertTrue(callbacks)
        self.assertIsNone(cache.get(cache_key))

    def test_deleting_sale_invalidates_dashboard_cache(self):
        sale = TestDataFactory.create_sale([(self.product, 1)])
        cache_key = dashboard_summary_cache_key()
        cache_dashboard_summary(cache_key, {'today_revenue': 12000})

        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.delete(f'/api/v1/sales/{sale.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertIsNone(cache.get(cache_key))
