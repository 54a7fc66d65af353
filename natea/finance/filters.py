import django_filters

from .models import CashTransaction, ExpenseRecord


class CashTransactionFilter(django_filters.FilterSet):
    date_from = django_filters.DateFilter(field_name='transaction_date', lookup_expr='gte')
    date_to = django_filters.DateFilter(field_name='transaction_date', lookup_expr='lte')
    type = django_filters.ChoiceFilter(field_name='transaction_type', choices=CashTransaction.TRANSACTION_TYPE_CHOICES)

    class Meta:
        model = CashTransaction
        fields = ['date_from', 'date_to', 'type', 'payment_method']


class ExpenseRecordFilter(django_filters.FilterSet):
    month_year = django_filters.CharFilter(field_name='month_year')
    category = django_filters.ChoiceFilter(choices=ExpenseRecord.CATEGORY_CHOICES)

    class Meta:
        model = ExpenseRecord
        fields = ['month_year', 'category']
