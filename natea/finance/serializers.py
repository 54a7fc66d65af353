from decimal import Decimal, ROUND_HALF_UP

from rest_framework import serializers
from natea.core.formatting import get_expense_category_label, get_payment_method_label
from .models import CashTransaction, ExpenseRecord, month_year_validator


class WholeRupiahField(serializers.DecimalField):
    """Accepts fractional amounts and rounds them half up to whole Rupiah"""

    def __init__(self, **kwargs):
        kwargs.setdefault('max_digits', 20)
        kwargs.setdefault('decimal_places', 2)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        return int(value.quantize(Decimal('1'), rounding=ROUND_HALF_UP))

    def to_representation(self, value):
        return int(value)


class CashTransactionSerializer(serializers.ModelSerializer):
    amount = serializers.IntegerField(min_value=1, error_messages={'min_value': 'Nominal harus lebih dari 0.'})
    payment_method_label = serializers.SerializerMethodField()
    created_by_username = serializers.CharField(source='created_by.username', read_only=True, default=None)

    class Meta:
        model = CashTransaction
        fields = ['id', 'transaction_type', 'amount', 'payment_method', 'payment_method_label', 'description',
                  'transaction_date', 'created_by_username', 'created_at']
        read_only_fields = ['created_at']

    def get_payment_method_label(self, obj):
        return get_payment_method_label(obj.payment_method)


class ExpenseRecordSerializer(serializers.ModelSerializer):
    month_year = serializers.CharField(max_length=7, required=False, allow_blank=True, validators=[month_year_validator])
    item = serializers.CharField(max_length=200, trim_whitespace=True)
    nominal_amount = WholeRupiahField(min_value=0, error_messages={'min_value': 'Nominal harus berupa angka positif.'})
    quantity = serializers.IntegerField(min_value=0, error_messages={'min_value': 'Quantity harus berupa angka positif.'})
    pic_name = serializers.CharField(max_length=150, trim_whitespace=True)
    category_label = serializers.SerializerMethodField()
    created_by_username = serializers.CharField(source='created_by.username', read_only=True, default=None)

    class Meta:
        model = ExpenseRecord
        fields = ['id', 'date', 'month_year', 'item', 'category', 'category_label', 'nominal_amount', 'quantity',
                  'total', 'pic_name', 'created_by_username', 'created_at']
        read_only_fields = ['total', 'created_at']

    def get_category_label(self, obj):
        return get_expense_category_label(obj.category)

    def validate(self, attrs):
        date = attrs.get('date', self.instance.date if self.instance else None)
        if not attrs.get('month_year') and date is not None and ('month_year' in attrs or self.instance is None):
            attrs['month_year'] = date.strftime('%Y-%m')
        return attrs
