from rest_framework import serializers
from .models import InventoryItem, StockAdjustment
from .utils import normalize_inventory_name, is_duplicate_inventory_name

DUPLICATE_NAME_MESSAGE = 'Item name already exists. Please use a different name.'


class InventoryItemSerializer(serializers.ModelSerializer):
    item_name = serializers.CharField(max_length=200, trim_whitespace=True, error_messages={'blank': 'Item barang wajib diisi'})
    initial_stock = serializers.IntegerField(min_value=0)
    reject = serializers.IntegerField(min_value=0, default=0)
    final_stock = serializers.IntegerField(min_value=0, required=False)
    minimum_stock = serializers.IntegerField(min_value=0, default=0)
    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = InventoryItem
        fields = ['id', 'item_name', 'category', 'size', 'unit', 'initial_stock', 'reject',
                  'final_stock', 'minimum_stock', 'is_low_stock', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def validate_item_name(self, value):
        candidates = InventoryItem.objects.filter(name_key=normalize_inventory_name(value)).values('id', 'item_name')
        exclude_id = self.instance.pk if self.instance is not None else None
        if is_duplicate_inventory_name(value, candidates, exclude_id=exclude_id):
            raise serializers.ValidationError(DUPLICATE_NAME_MESSAGE)
        return value

    def validate(self, attrs):
        instance = self.instance
        initial_stock = attrs.get('initial_stock', instance.initial_stock if instance else 0)
        reject = attrs.get('reject', instance.reject if instance else 0)

        if reject > initial_stock:
            raise serializers.ValidationError({'reject': 'Reject tidak boleh lebih besar dari stok awal'})

        if instance is None:
            attrs['final_stock'] = initial_stock - reject
        elif 'final_stock' not in attrs and ('initial_stock' in attrs or 'reject' in attrs):
            attrs['final_stock'] = initial_stock - reject
        return attrs


class StockAdjustmentSerializer(serializers.ModelSerializer):
    signed_quantity = serializers.IntegerField(read_only=True)
    created_by_username = serializers.CharField(source='created_by.username', read_only=True, default=None)

    class Meta:
        model = StockAdjustment
        fields = ['id', 'item', 'item_name', 'item_size', 'adjustment_type', 'quantity', 'signed_quantity',
                  'final_stock_after', 'description', 'created_by_username', 'created_at']


class StockAdjustmentRequestSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1, error_messages={'min_value': 'Quantity must be a positive number'})
    is_addition = serializers.BooleanField()
    description = serializers.CharField(allow_blank=True, default='')
