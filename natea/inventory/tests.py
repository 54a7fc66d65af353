"""
Test suite for the inventory module
Tests: item CRUD and validation, stock adjustments, low stock, reports, name utilities
"""
from datetime import timedelta
from unittest import mock

from django.test import TestCase
from django.utils import timezone
from rest_framework import status

from natea.core.models import AuditLog
from natea.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from .models import InventoryItem, StockAdjustment
from .serializers import InventoryItemSerializer, DUPLICATE_NAME_MESSAGE
from .utils import normalize_inventory_name, is_duplicate_inventory_name, is_low_stock, filter_low_stock_items


class InventoryUtilsTests(TestCase):
    """Test pure inventory helpers"""

    def test_normalize_inventory_name(self):
        self.assertEqual(normalize_inventory_name('  Gula Aren '), 'gula aren')

    def test_duplicate_name_is_case_insensitive(self):
        items = [{'id': 1, 'item_name': 'Gula Aren'}, {'id': 2, 'item_name': 'Susu'}]
        self.assertTrue(is_duplicate_inventory_name(' gula aren', items))
        self.assertFalse(is_duplicate_inventory_name('Kopi', items))

    def test_duplicate_name_excludes_self(self):
        items = [{'id': 1, 'item_name': 'Gula Aren'}]
        self.assertFalse(is_duplicate_inventory_name('Gula Aren', items, exclude_id=1))

    def test_blank_name_is_never_duplicate(self):
        items = [{'id': 1, 'item_name': ''}]
        self.assertFalse(is_duplicate_inventory_name('   ', items))

    def test_low_stock_includes_equal(self):
        items = [
            {'item_name': 'a', 'final_stock': 5, 'minimum_stock': 5},
            {'item_name': 'b', 'final_stock': 6, 'minimum_stock': 5},
            {'item_name': 'c', 'final_stock': 0, 'minimum_stock': 1},
        ]
        self.assertTrue(is_low_stock(items[0]))
        self.assertEqual([i['item_name'] for i in filter_low_stock_items(items)], ['a', 'c'])

    def test_model_low_stock_matches_helper(self):
        at_minimum = TestDataFactory.create_inventory_item(item_name='Gelas', initial_stock=5, minimum_stock=5)
        above = TestDataFactory.create_inventory_item(item_name='Sedotan', initial_stock=6, minimum_stock=5)
        self.assertTrue(at_minimum.is_low_stock)
        self.assertFalse(above.is_low_stock)
        self.assertEqual(filter_low_stock_items(InventoryItem.objects.all()), [at_minimum])


class InventoryItemTests(TestCase):
    """Test inventory item endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def _payload(self, **overrides):
        data = {
            'item_name': 'Gula Aren',
            'category': 'Bahan Utama',
            'size': 'Kecil',
            'unit': 'Pack',
            'initial_stock': 20,
            'reject': 2,
            'minimum_stock': 5,
        }
        data.update(overrides)
        return data

    def test_create_computes_final_stock(self):
        """Final stock is initial stock minus reject"""
        response = self.client.post('/api/v1/inventory/', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['final_stock'], 18)
        self.assertFalse(response.data['is_low_stock'])
        self.assertTrue(AuditLog.objects.filter(action='create', model_name='InventoryItem').exists())

    def test_create_rejects_duplicate_name(self):
        """Names are unique ignoring case and surrounding whitespace"""
        TestDataFactory.create_inventory_item(item_name='Gula Aren')
        response = self.client.post('/api/v1/inventory/', self._payload(item_name='  gula aren '), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('item_name', response.data)

    def test_create_rejects_blank_name(self):
        for name in ('', '   '):
            response = self.client.post('/api/v1/inventory/', self._payload(item_name=name), format='json')
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
            self.assertEqual(response.data['item_name'], ['Item barang wajib diisi'])
        self.assertFalse(InventoryItem.objects.exists())

    def test_update_rejects_blank_name(self):
        item = TestDataFactory.create_inventory_item(item_name='Susu')
        response = self.client.patch(f'/api/v1/inventory/{item.id}/', {'item_name': '  '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('item_name', response.data)

    def test_update_rejects_rename_to_existing_name(self):
        TestDataFactory.create_inventory_item(item_name='Gula Aren')
        item = TestDataFactory.create_inventory_item(item_name='Susu')

        response = self.client.patch(f'/api/v1/inventory/{item.id}/', {'item_name': 'GULA AREN'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['item_name'], [DUPLICATE_NAME_MESSAGE])

        response = self.client.put(f'/api/v1/inventory/{item.id}/', self._payload(item_name='gula aren'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('item_name', response.data)
        item.refresh_from_db()
        self.assertEqual(item.item_name, 'Susu')

    def test_concurrent_duplicate_create_returns_400(self):
        """A name taken between validation and save is reported as a duplicate, not a server error"""
        TestDataFactory.create_inventory_item(item_name='Gula Aren')
        with mock.patch.object(InventoryItemSerializer, 'validate_item_name', lambda self, value: value):
            response = self.client.post('/api/v1/inventory/', self._payload(item_name='gula aren'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['item_name'], [DUPLICATE_NAME_MESSAGE])
        self.assertEqual(InventoryItem.objects.count(), 1)

    def test_concurrent_duplicate_rename_returns_400(self):
        TestDataFactory.create_inventory_item(item_name='Gula Aren')
        item = TestDataFactory.create_inventory_item(item_name='Susu')
        with mock.patch.object(InventoryItemSerializer, 'validate_item_name', lambda self, value: value):
            response = self.client.patch(f'/api/v1/inventory/{item.id}/', {'item_name': 'Gula Aren'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['item_name'], [DUPLICATE_NAME_MESSAGE])

    def test_create_rejects_reject_above_initial(self):
        response = self.client.post('/api/v1/inventory/', self._payload(initial_stock=3, reject=4), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('reject', response.data)

    def test_create_rejects_negative_and_unknown_values(self):
        response = self.client.post('/api/v1/inventory/', self._payload(minimum_stock=-1), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.post('/api/v1/inventory/', self._payload(unit='Liter'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_create_requires_authentication(self):
        self.client.logout()
        response = self.client.post('/api/v1/inventory/', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_list_is_public(self):
        TestDataFactory.create_inventory_item(item_name='Susu')
        self.client.logout()
        response = self.client.get('/api/v1/inventory/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

    def test_update_keeps_own_name(self):
        """Updating an item with its own name is not a duplicate"""
        item = TestDataFactory.create_inventory_item(item_name='Susu', initial_stock=10)
        response = self.client.patch(f'/api/v1/inventory/{item.id}/', {'item_name': 'SUSU', 'minimum_stock': 3}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['item_name'], 'SUSU')
        self.assertEqual(response.data['final_stock'], 10)

    def test_update_recomputes_final_stock(self):
        item = TestDataFactory.create_inventory_item(initial_stock=10)
        response = self.client.patch(f'/api/v1/inventory/{item.id}/', {'reject': 4}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['final_stock'], 6)

    def test_update_missing_item(self):
        response = self.client.patch('/api/v1/inventory/9999/', {'reject': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_item(self):
        item = TestDataFactory.create_inventory_item()
        response = self.client.delete(f'/api/v1/inventory/{item.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(InventoryItem.objects.filter(pk=item.id).exists())

    def test_options(self):
        response = self.client.get('/api/v1/inventory/options/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['units'], ['Pack', 'Pcs', 'Gram', 'ml'])


class StockAdjustmentTests(TestCase):
    """Test stock adjustments, low stock and the adjustment report"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.item = TestDataFactory.create_inventory_item(item_name='Cup Plastik', initial_stock=10, minimum_stock=3)

    def test_add_stock(self):
        response = self.client.post(f'/api/v1/inventory/{self.item.id}/adjust/',
                                    {'quantity': 5, 'is_addition': True, 'description': 'Restock'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.item.refresh_from_db()
        self.assertEqual(self.item.final_stock, 15)
        adjustment = StockAdjustment.objects.get()
        self.assertEqual(adjustment.adjustment_type, 'add')
        self.assertEqual(adjustment.final_stock_after, 15)
        self.assertEqual(adjustment.created_by, self.user)
        self.assertTrue(AuditLog.objects.filter(action='stock_adjust').exists())

    def test_reduce_stock(self):
        response = self.client.post(f'/api/v1/inventory/{self.item.id}/adjust/',
                                    {'quantity': 4, 'is_addition': False}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['item']['final_stock'], 6)
        self.assertEqual(response.data['adjustment']['signed_quantity'], -4)

    def test_reduce_below_zero_fails(self):
        """A reduction larger than the stock leaves the item untouched"""
        response = self.client.post(f'/api/v1/inventory/{self.item.id}/adjust/',
                                    {'quantity': 11, 'is_addition': False}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Stock cannot go below zero', response.data['error'])
        self.item.refresh_from_db()
        self.assertEqual(self.item.final_stock, 10)
        self.assertEqual(StockAdjustment.objects.count(), 0)

    def test_zero_quantity_fails(self):
        response = self.client.post(f'/api/v1/inventory/{self.item.id}/adjust/',
                                    {'quantity': 0, 'is_addition': True}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('quantity', response.data)

    def test_adjust_missing_item(self):
        response = self.client.post('/api/v1/inventory/9999/adjust/', {'quantity': 1, 'is_addition': True}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_low_stock(self):
        """Items at or under their minimum are listed"""
        TestDataFactory.create_inventory_item(item_name='Sedotan', initial_stock=3, minimum_stock=3)
        TestDataFactory.create_inventory_item(item_name='Es Batu', initial_stock=1, minimum_stock=2)
        response = self.client.get('/api/v1/inventory/low-stock/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 2)
        self.assertEqual([i['item_name'] for i in response.data['results']], ['Es Batu', 'Sedotan'])

    def test_reports_filters(self):
        other = TestDataFactory.create_inventory_item(item_name='Susu')
        self.client.post(f'/api/v1/inventory/{self.item.id}/adjust/', {'quantity': 2, 'is_addition': True}, format='json')
        self.client.post(f'/api/v1/inventory/{other.id}/adjust/', {'quantity': 1, 'is_addition': False}, format='json')
        old = StockAdjustment.objects.create(item=self.item, item_name=self.item.item_name, adjustment_type='reduce', quantity=1)
        StockAdjustment.objects.filter(pk=old.pk).update(created_at=timezone.now() - timedelta(days=10))

        response = self.client.get('/api/v1/inventory/reports/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 3)
        self.assertEqual(response.data[0]['item_name'], 'Susu')

        response = self.client.get('/api/v1/inventory/reports/?item=cup')
        self.assertEqual(len(response.data), 2)

        response = self.client.get('/api/v1/inventory/reports/?type=reduce')
        self.assertEqual(len(response.data), 2)

        response = self.client.get('/api/v1/inventory/reports/?days=7')
        self.assertEqual(len(response.data), 2)

    def test_reports_invalid_type(self):
        response = self.client.get('/api/v1/inventory/reports/?type=sideways')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
