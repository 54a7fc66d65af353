from django.db import models
from natea.core.models import User
from .utils import normalize_inventory_name, is_low_stock as item_is_low_stock

INVENTORY_CATEGORIES = ['Bahan Utama', 'Pendukung', 'Lain-Lain']
INVENTORY_SIZES = ['Kecil', 'Besar', 'Jumbo']
INVENTORY_UNITS = ['Pack', 'Pcs', 'Gram', 'ml']


class InventoryItem(models.Model):
    """Raw material / supply tracked in stock"""
    CATEGORY_CHOICES = [(c, c) for c in INVENTORY_CATEGORIES]
    SIZE_CHOICES = [(s, s) for s in INVENTORY_SIZES]
    UNIT_CHOICES = [(u, u) for u in INVENTORY_UNITS]

    item_name = models.CharField(max_length=200)
    # Normalized item_name, enforces case-insensitive uniqueness
    name_key = models.CharField(max_length=200, unique=True, editable=False)
    category = models.CharField(max_length=50, choices=CATEGORY_CHOICES)
    size = models.CharField(max_length=50, choices=SIZE_CHOICES)
    unit = models.CharField(max_length=20, choices=UNIT_CHOICES)
    initial_stock = models.PositiveIntegerField(default=0)
    reject = models.PositiveIntegerField(default=0)
    final_stock = models.PositiveIntegerField(default=0)
    minimum_stock = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.item_name} ({self.size})"

    @property
    def is_low_stock(self):
        return item_is_low_stock(self)

    def save(self, *args, **kwargs):
        self.item_name = self.item_name.strip()
        self.name_key = normalize_inventory_name(self.item_name)
        super().save(*args, **kwargs)

    class Meta:
        db_table = 'inventory_items'
        ordering = ['item_name']


class StockAdjustment(models.Model):
    """Stock adjustment history (in/out) shown in the inventory report"""
    ADJUSTMENT_TYPE_CHOICES = [
        ('add', 'Stock In'),
        ('reduce', 'Stock Out'),
    ]

    item = models.ForeignKey(InventoryItem, on_delete=models.SET_NULL, null=True, blank=True, related_name='adjustments')
    # Snapshots so history survives renames and deletions
    item_name = models.CharField(max_length=200)
    item_size = models.CharField(max_length=50, blank=True)
    adjustment_type = models.CharField(max_length=10, choices=ADJUSTMENT_TYPE_CHOICES)
    quantity = models.PositiveIntegerField()
    final_stock_after = models.PositiveIntegerField(default=0)
    description = models.TextField(blank=True)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, related_name='stock_adjustments')
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    @property
    def signed_quantity(self):
        return self.quantity if self.adjustment_type == 'add' else -self.quantity

    class Meta:
        db_table = 'stock_adjustments'
        ordering = ['-created_at', '-id']
