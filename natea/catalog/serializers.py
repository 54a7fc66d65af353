from rest_framework import serializers
from .models import Product


class ProductSerializer(serializers.ModelSerializer):
    name = serializers.CharField(max_length=200, trim_whitespace=True, error_messages={'blank': 'Nama produk wajib diisi'})
    sale_price = serializers.IntegerField(min_value=1)
    hpp = serializers.IntegerField(min_value=0, default=0)
    image = serializers.ImageField(required=False, allow_null=True, use_url=True)

    class Meta:
        model = Product
        fields = ['id', 'name', 'category', 'size', 'sale_price', 'hpp', 'image', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def validate_image(self, value):
        # An explicit null clears the image; the model stores that as ''
        return value or ''
