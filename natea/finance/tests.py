"""
Test suite for the finance module
Tests: cash transactions, cash summary, expense records and their filters
"""
from datetime import date

from django.test import TestCase
from rest_framework import status

from natea.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from .models import ExpenseRecord


class CashTransactionTests(TestCase):
    """Test cash ledger endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_cash_transaction(self):
        data = {
            'transaction_type': 'in',
            'amount': 250000,
            'payment_method': 'qris',
            'description': 'Modal awal',
            'transaction_date': '2024-05-01',
        }
        response = self.client.post('/api/v1/cash-transactions/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['payment_method_label'], 'QRIS')
        self.assertEqual(response.data['created_by_username'], self.user.username)

    def test_amount_must_be_positive(self):
        data = {'transaction_type': 'out', 'amount': 0, 'transaction_date': '2024-05-01'}
        response = self.client.post('/api/v1/cash-transactions/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('amount', response.data)

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/cash-transactions/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_list_filters(self):
        TestDataFactory.create_cash_transaction('in', 100000, transaction_date=date(2024, 5, 1))
        TestDataFactory.create_cash_transaction('out', 30000, transaction_date=date(2024, 5, 2))
        TestDataFactory.create_cash_transaction('in', 50000, transaction_date=date(2024, 6, 1))

        response = self.client.get('/api/v1/cash-transactions/?date_from=2024-05-01&date_to=2024-05-31')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)
        self.assertEqual(response.data[0]['transaction_date'], '2024-05-02')

        response = self.client.get('/api/v1/cash-transactions/?type=in')
        self.assertEqual(len(response.data), 2)

    def test_cash_summary(self):
        """Balance is cash in minus cash out"""
        TestDataFactory.create_cash_transaction('in', 100000)
        TestDataFactory.create_cash_transaction('in', 20000)
        TestDataFactory.create_cash_transaction('out', 45000)
        response = self.client.get('/api/v1/cash-transactions/summary/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'total_in': 120000, 'total_out': 45000, 'balance': 75000})

    def test_delete_cash_transaction(self):
        transaction_obj = TestDataFactory.create_cash_transaction()
        response = self.client.delete(f'/api/v1/cash-transactions/{transaction_obj.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)


class ExpenseRecordTests(TestCase):
    """Test expense endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def _payload(self, **overrides):
        data = {
            'date': '2024-05-17',
            'month_year': '2024-05',
            'item': 'Gula Pasir',
            'category': 'bahan-baku',
            'nominal_amount': 14500,
            'quantity': 3,
            'pic_name': 'Sari',
        }
        data.update(overrides)
        return data

    def test_create_computes_total(self):
        """Total is nominal times quantity, computed server-side"""
        response = self.client.post('/api/v1/expenses/', self._payload(total=1), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['total'], 43500)
        self.assertEqual(response.data['category_label'], 'Bahan Baku')

    def test_fractional_nominal_rounds_to_whole_rupiah(self):
        response = self.client.post('/api/v1/expenses/', self._payload(nominal_amount='1500.5', quantity=2), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['nominal_amount'], 1501)
        self.assertEqual(response.data['total'], 3002)

        response = self.client.post('/api/v1/expenses/', self._payload(nominal_amount=999.4, quantity=1), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['nominal_amount'], 999)
        self.assertEqual(ExpenseRecord.objects.get(pk=response.data['id']).total, 999)

    def test_month_year_defaults_to_date(self):
        payload = self._payload()
        del payload['month_year']
        response = self.client.post('/api/v1/expenses/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['month_year'], '2024-05')

    def test_month_year_format(self):
        response = self.client.post('/api/v1/expenses/', self._payload(month_year='05-2024'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('month_year', response.data)

    def test_validation(self):
        response = self.client.post('/api/v1/expenses/', self._payload(nominal_amount=-1), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.post('/api/v1/expenses/', self._payload(category='gaji'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.post('/api/v1/expenses/', self._payload(item='  '), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_filters(self):
        TestDataFactory.create_expense(item='Gas', category='operasional', date=date(2024, 5, 2))
        TestDataFactory.create_expense(item='Susu', category='bahan-baku', date=date(2024, 5, 20))
        TestDataFactory.create_expense(item='Sabun', category='lain-lain', date=date(2024, 6, 1))

        response = self.client.get('/api/v1/expenses/?month_year=2024-05')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([e['item'] for e in response.data], ['Susu', 'Gas'])

        response = self.client.get('/api/v1/expenses/?category=lain-lain')
        self.assertEqual([e['item'] for e in response.data], ['Sabun'])

    def test_update_recomputes_total(self):
        expense = TestDataFactory.create_expense(nominal_amount=1000, quantity=2)
        response = self.client.patch(f'/api/v1/expenses/{expense.id}/', {'quantity': 5}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total'], 5000)
        self.assertEqual(ExpenseRecord.objects.get(pk=expense.id).total, 5000)

    def test_options(self):
        response = self.client.get('/api/v1/expenses/options/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['categories'][0], {'value': 'bahan-baku', 'label': 'Bahan Baku'})
