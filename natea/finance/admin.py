from django.contrib import admin
from .models import CashTransaction, ExpenseRecord


@admin.register(CashTransaction)
class CashTransactionAdmin(admin.ModelAdmin):
    list_display = ['transaction_date', 'transaction_type', 'amount', 'payment_method', 'description', 'created_by']
    list_filter = ['transaction_type', 'payment_method', 'transaction_date']
    search_fields = ['description']
    date_hierarchy = 'transaction_date'


@admin.register(ExpenseRecord)
class ExpenseRecordAdmin(admin.ModelAdmin):
    list_display = ['date', 'month_year', 'item', 'category', 'nominal_amount', 'quantity', 'total', 'pic_name']
    list_filter = ['category', 'month_year']
    search_fields = ['item', 'pic_name']
    readonly_fields = ['total', 'created_at']
