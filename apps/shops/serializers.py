from decimal import Decimal
from rest_framework import serializers
from .models import Shop, Product
from apps.users.serializers import PublicUserSerializer


class ProductSerializer(serializers.ModelSerializer):
    name = serializers.CharField(max_length=150, trim_whitespace=True)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.00'))

    class Meta:
        model = Product
        fields = ['id', 'shop', 'seller', 'name', 'price', 'description', 'image_url', 'created_at']
        read_only_fields = ['id', 'shop', 'seller', 'created_at']


class ShopSerializer(serializers.ModelSerializer):
    seller_id = serializers.ReadOnlyField(source='seller.id')
    name = serializers.CharField(max_length=150, trim_whitespace=True)
    product_count = serializers.SerializerMethodField()

    class Meta:
        model = Shop
        fields = [
            'seller_id', 'name', 'description', 'address', 'image_url',
            'product_count', 'created_at', 'updated_at'
        ]
        read_only_fields = ['seller_id', 'product_count', 'created_at', 'updated_at']

    def get_product_count(self, obj):
        return obj.products.count()


class StorefrontSerializer(serializers.Serializer):
    shop = ShopSerializer()
    seller = PublicUserSerializer()
    products = ProductSerializer(many=True)
