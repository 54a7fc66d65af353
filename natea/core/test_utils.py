"""
Test utilities and factories for creating test data
"""
import random
import string

from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from natea.catalog.models import Product
from natea.inventory.models import InventoryItem
from natea.pos.models import Sale, SaleItem
from natea.pos.utils import recalculate_sale_totals
from natea.finance.models import CashTransaction, ExpenseRecord

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', role='user', is_superuser=False):
        """Create a test user"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        return User.objects.create_user(
            username=username,
            email=email,
            password=password,
            role=role,
            is_superuser=is_superuser,
        )

    @staticmethod
    def create_admin(username=None):
        """Create a user holding the admin role"""
        return TestDataFactory.create_user(username=username, role=User.ROLE_ADMIN)

    @staticmethod
    def create_product(name=None, sale_price=15000, hpp=6000, category='Minuman', size='Medium'):
        """Create a test product"""
        if not name:
            name = f'Product_{TestDataFactory.random_string(6)}'
        return Product.objects.create(
            name=name,
            category=category,
            size=size,
            sale_price=sale_price,
            hpp=hpp,
        )

    @staticmethod
    def create_inventory_item(item_name=None, initial_stock=20, reject=0, minimum_stock=5,
                              category='Bahan Utama', size='Kecil', unit='Pcs'):
        """Create a test inventory item"""
        if not item_name:
            item_name = f'Item_{TestDataFactory.random_string(6)}'
        return InventoryItem.objects.create(
            item_name=item_name,
            category=category,
            size=size,
            unit=unit,
            initial_stock=initial_stock,
            reject=reject,
            final_stock=initial_stock - reject,
            minimum_stock=minimum_stock,
        )

    @staticmethod
    def create_sale(items=None, payment_method='tunai', total_tax=0, user=None, created_at=None):
        """
        Create a sale with its lines.

        items: list of (product, quantity) or (product, quantity, unit_price) tuples
        """
        if items is None:
            items = [(TestDataFactory.create_product(), 1)]
        sale = Sale.objects.create(
            payment_method=payment_method,
            total_tax=total_tax,
            created_by=user,
        )
        for entry in items:
            product, quantity = entry[0], entry[1]
            unit_price = entry[2] if len(entry) > 2 else product.sale_price
            SaleItem.objects.create(
                sale=sale,
                product=product,
                product_name=product.name,
                quantity=quantity,
                unit_price=unit_price,
                cogs=product.hpp,
            )
        recalculate_sale_totals(sale)
        if created_at is not None:
            Sale.objects.filter(pk=sale.pk).update(created_at=created_at)
            sale.refresh_from_db()
        return sale

    @staticmethod
    def create_cash_transaction(transaction_type='in', amount=50000, payment_method='tunai', transaction_date=None, user=None):
        """Create a test cash transaction"""
        return CashTransaction.objects.create(
            transaction_type=transaction_type,
            amount=amount,
            payment_method=payment_method,
            description=f'Test {transaction_type}',
            transaction_date=transaction_date or timezone.localdate(),
            created_by=user,
        )

    @staticmethod
    def create_expense(item=None, category='bahan-baku', nominal_amount=10000, quantity=2, date=None, user=None):
        """Create a test expense record"""
        date = date or timezone.localdate()
        return ExpenseRecord.objects.create(
            date=date,
            month_year=date.strftime('%Y-%m'),
            item=item or f'Expense_{TestDataFactory.random_string(6)}',
            category=category,
            nominal_amount=nominal_amount,
            quantity=quantity,
            total=nominal_amount * quantity,
            pic_name='Tester',
            created_by=user,
        )


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
