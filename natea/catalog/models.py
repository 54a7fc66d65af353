from django.core.validators import MinValueValidator
from django.db import models

PRODUCT_CATEGORIES = [
    'Minuman',
    'Makanan',
    'Snack',
    'Lainnya',
]

PRODUCT_SIZES = [
    'Small',
    'Medium',
    'Large',
    'Extra Large',
]


class Product(models.Model):
    """Sellable product (menu item) shown at the POS"""
    CATEGORY_CHOICES = [(c, c) for c in PRODUCT_CATEGORIES]
    SIZE_CHOICES = [(s, s) for s in PRODUCT_SIZES]

    name = models.CharField(max_length=200, db_index=True)
    category = models.CharField(max_length=50, choices=CATEGORY_CHOICES, default='Minuman')
    size = models.CharField(max_length=50, choices=SIZE_CHOICES)
    sale_price = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    hpp = models.PositiveIntegerField(default=0, help_text='Cost of goods sold per unit (HPP)')
    image = models.ImageField(upload_to='products/', blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} ({self.size})"

    class Meta:
        db_table = 'products'
        ordering = ['-created_at', '-id']
