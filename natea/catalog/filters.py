import django_filters
from .models import Product


class ProductFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(field_name='name', lookup_expr='icontains')
    category = django_filters.ChoiceFilter(choices=Product.CATEGORY_CHOICES)
    size = django_filters.ChoiceFilter(choices=Product.SIZE_CHOICES)

    class Meta:
        model = Product
        fields = ['search', 'category', 'size']
