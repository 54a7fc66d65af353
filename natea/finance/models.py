from django.core.validators import MinValueValidator, RegexValidator
from django.db import models
from natea.core.models import User

EXPENSE_CATEGORIES = ['bahan-baku', 'operasional', 'lain-lain']

month_year_validator = RegexValidator(
    regex=r'^\d{4}-(0[1-9]|1[0-2])$',
    message='Format bulan harus YYYY-MM',
)


class CashTransaction(models.Model):
    """Cash ledger entry (money in or out)"""
    TRANSACTION_TYPE_CHOICES = [
        ('in', 'Cash In'),
        ('out', 'Cash Out'),
    ]
    PAYMENT_METHOD_CHOICES = [
        ('tunai', 'Tunai'),
        ('qris', 'QRIS'),
        ('dana', 'DANA'),
        ('trf', 'Transfer'),
    ]

    transaction_type = models.CharField(max_length=3, choices=TRANSACTION_TYPE_CHOICES)
    amount = models.PositiveBigIntegerField(validators=[MinValueValidator(1)])
    payment_method = models.CharField(max_length=10, choices=PAYMENT_METHOD_CHOICES, default='tunai')
    description = models.TextField(blank=True)
    transaction_date = models.DateField(db_index=True)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='cash_transactions')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.get_transaction_type_display()} {self.amount} ({self.transaction_date})"

    class Meta:
        db_table = 'cash_transactions'
        ordering = ['-transaction_date', '-created_at', '-id']


class ExpenseRecord(models.Model):
    """Business expense entry"""
    CATEGORY_CHOICES = [
        ('bahan-baku', 'Bahan Baku'),
        ('operasional', 'Operasional'),
        ('lain-lain', 'Lain-lain'),
    ]

    date = models.DateField()
    month_year = models.CharField(max_length=7, db_index=True, validators=[month_year_validator])
    item = models.CharField(max_length=200)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES)
    nominal_amount = models.PositiveBigIntegerField()
    quantity = models.PositiveIntegerField()
    # nominal_amount * quantity, computed on save
    total = models.PositiveBigIntegerField(default=0)
    pic_name = models.CharField(max_length=150)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='expenses')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.item} ({self.month_year})"

    def save(self, *args, **kwargs):
        if not self.month_year and self.date:
            self.month_year = self.date.strftime('%Y-%m')
        self.total = self.nominal_amount * self.quantity
        super().save(*args, **kwargs)

    class Meta:
        db_table = 'expense_records'
        ordering = ['-date', '-created_at', '-id']
