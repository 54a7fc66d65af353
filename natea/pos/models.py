from django.db import models
from django.utils import timezone
from natea.catalog.models import Product
from natea.core.models import User

PAYMENT_METHODS = ['tunai', 'qris', 'dana', 'trf']


class Cart(models.Model):
    """Server-side cart, one active cart per user"""
    STATUS_CHOICES = [
        ('active', 'Active'),
        ('completed', 'Completed'),
    ]

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='carts')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Cart #{self.pk} ({self.user.username}, {self.status})"

    @property
    def total(self):
        return sum(item.subtotal for item in self.items.all())

    class Meta:
        db_table = 'carts'
        ordering = ['-created_at']


class CartItem(models.Model):
    """Cart items"""
    cart = models.ForeignKey(Cart, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='cart_items')
    quantity = models.PositiveIntegerField()
    added_at = models.DateTimeField(auto_now_add=True)

    @property
    def subtotal(self):
        return self.product.sale_price * self.quantity

    class Meta:
        db_table = 'cart_items'
        ordering = ['added_at', 'id']
        unique_together = ['cart', 'product']


class Sale(models.Model):
    """A recorded sale transaction"""
    PAYMENT_METHOD_CHOICES = [
        ('tunai', 'Tunai'),
        ('qris', 'QRIS'),
        ('dana', 'DANA'),
        ('trf', 'Transfer'),
    ]

    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    payment_method = models.CharField(max_length=10, choices=PAYMENT_METHOD_CHOICES)
    total_tax = models.BigIntegerField(default=0)
    # amount = sum(quantity * unit_price) + total_tax
    amount = models.BigIntegerField(default=0)
    total_quantity = models.PositiveIntegerField(default=0)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='sales')
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Sale #{self.pk} ({self.payment_method}, {self.amount})"

    class Meta:
        db_table = 'sales'
        ordering = ['-created_at', '-id']


class SaleItem(models.Model):
    """Sale line; product name, price and cogs are snapshots taken when the sale was recorded"""
    sale = models.ForeignKey(Sale, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey(Product, on_delete=models.SET_NULL, null=True, blank=True, related_name='sale_items')
    product_name = models.CharField(max_length=200)
    quantity = models.PositiveIntegerField()
    unit_price = models.PositiveIntegerField()
    cogs = models.PositiveIntegerField(default=0)

    @property
    def line_total(self):
        return self.quantity * self.unit_price

    class Meta:
        db_table = 'sale_items'
        ordering = ['id']
