from datetime import timedelta

import django_filters
from django.utils import timezone

from .models import StockAdjustment


class StockAdjustmentFilter(django_filters.FilterSet):
    item = django_filters.CharFilter(field_name='item_name', lookup_expr='icontains')
    type = django_filters.ChoiceFilter(field_name='adjustment_type', choices=StockAdjustment.ADJUSTMENT_TYPE_CHOICES)
    days = django_filters.NumberFilter(method='filter_days_back')

    def filter_days_back(self, queryset, name, value):
        if value is None or value < 0:
            return queryset
        since = timezone.now() - timedelta(days=int(value))
        return queryset.filter(created_at__gte=since)

    class Meta:
        model = StockAdjustment
        fields = ['item', 'type', 'days']
