from django.db import transaction
from rest_framework import serializers

from natea.catalog.models import Product
from natea.core.formatting import get_payment_method_label
from .models import Cart, CartItem, Sale, SaleItem
from .utils import recalculate_sale_totals

EMPTY_SALE_MESSAGE = 'Minimal harus ada satu item produk.'
INVALID_QUANTITY_MESSAGE = 'Semua item harus memiliki quantity lebih dari 0.'
INVALID_PRICE_MESSAGE = 'Semua item harus memiliki harga jual lebih dari 0.'


class CartItemSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    product_size = serializers.CharField(source='product.size', read_only=True)
    sale_price = serializers.IntegerField(source='product.sale_price', read_only=True)
    subtotal = serializers.IntegerField(read_only=True)

    class Meta:
        model = CartItem
        fields = ['id', 'product', 'product_name', 'product_size', 'sale_price', 'quantity', 'subtotal']


class CartSerializer(serializers.ModelSerializer):
    items = CartItemSerializer(many=True, read_only=True)
    total = serializers.IntegerField(read_only=True)
    item_count = serializers.SerializerMethodField()

    class Meta:
        model = Cart
        fields = ['id', 'status', 'items', 'item_count', 'total', 'created_at', 'updated_at']

    def get_item_count(self, obj):
        return sum(item.quantity for item in obj.items.all())


class CartAddSerializer(serializers.Serializer):
    product = serializers.PrimaryKeyRelatedField(queryset=Product.objects.all())
    quantity = serializers.IntegerField(min_value=1, default=1)


class CartItemUpdateSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1)


class CheckoutSerializer(serializers.Serializer):
    payment_method = serializers.ChoiceField(choices=Sale.PAYMENT_METHOD_CHOICES)
    total_tax = serializers.IntegerField(min_value=0, default=0)


class SaleItemSerializer(serializers.ModelSerializer):
    line_total = serializers.IntegerField(read_only=True)

    class Meta:
        model = SaleItem
        fields = ['id', 'product', 'product_name', 'quantity', 'unit_price', 'cogs', 'line_total']


class SaleSerializer(serializers.ModelSerializer):
    items = SaleItemSerializer(many=True, read_only=True)
    payment_method_label = serializers.SerializerMethodField()
    created_by_username = serializers.CharField(source='created_by.username', read_only=True, default=None)

    class Meta:
        model = Sale
        fields = ['id', 'created_at', 'payment_method', 'payment_method_label', 'total_tax', 'amount',
                  'total_quantity', 'created_by_username', 'items', 'updated_at']

    def get_payment_method_label(self, obj):
        return get_payment_method_label(obj.payment_method)


class SaleItemInputSerializer(serializers.Serializer):
    """
    One sale line as submitted by the console.

    ``unit_price``, ``cogs`` and ``product_name`` fall back to the product's
    current sale price, HPP and name when omitted.
    """
    product = serializers.PrimaryKeyRelatedField(queryset=Product.objects.all(), required=False, allow_null=True)
    product_name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    quantity = serializers.IntegerField(error_messages={'invalid': INVALID_QUANTITY_MESSAGE})
    unit_price = serializers.IntegerField(required=False, allow_null=True)
    cogs = serializers.IntegerField(required=False, allow_null=True, min_value=0)

    def validate(self, attrs):
        product = attrs.get('product')
        if attrs['quantity'] <= 0:
            raise serializers.ValidationError({'quantity': INVALID_QUANTITY_MESSAGE})

        if attrs.get('unit_price') is None and product is not None:
            attrs['unit_price'] = product.sale_price
        if attrs.get('unit_price') is None or attrs['unit_price'] <= 0:
            raise serializers.ValidationError({'unit_price': INVALID_PRICE_MESSAGE})

        if attrs.get('cogs') is None:
            attrs['cogs'] = product.hpp if product is not None else 0

        if not attrs.get('product_name'):
            if product is None:
                raise serializers.ValidationError({'product': 'Produk wajib dipilih'})
            attrs['product_name'] = product.name
        return attrs


class SaleWriteSerializer(serializers.Serializer):
    """Records a sale directly or replaces the lines of an existing one"""
    items = SaleItemInputSerializer(many=True)
    payment_method = serializers.ChoiceField(choices=Sale.PAYMENT_METHOD_CHOICES)
    total_tax = serializers.IntegerField(min_value=0, default=0)

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError(EMPTY_SALE_MESSAGE)
        return value

    def _write_items(self, sale, items):
        SaleItem.objects.bulk_create([
            SaleItem(
                sale=sale,
                product=item.get('product'),
                product_name=item['product_name'],
                quantity=item['quantity'],
                unit_price=item['unit_price'],
                cogs=item['cogs'],
            )
            for item in items
        ])

    def create(self, validated_data):
        items = validated_data.pop('items')
        with transaction.atomic():
            sale = Sale.objects.create(**validated_data)
            self._write_items(sale, items)
            recalculate_sale_totals(sale)
        return sale

    def update(self, instance, validated_data):
        items = validated_data.pop('items')
        with transaction.atomic():
            instance.payment_method = validated_data['payment_method']
            instance.total_tax = validated_data.get('total_tax', 0)
            instance.save(update_fields=['payment_method', 'total_tax', 'updated_at'])
            instance.items.all().delete()
            self._write_items(instance, items)
            recalculate_sale_totals(instance)
        return instance
