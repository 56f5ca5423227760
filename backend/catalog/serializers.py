from rest_framework import serializers
from .models import Product
from backend.inventory.serializers import InventorySerializer


class ProductSerializer(serializers.ModelSerializer):
    inventory = InventorySerializer(read_only=True)

    class Meta:
        model = Product
        fields = ['id', 'name', 'description', 'sku', 'category', 'unit_of_measure', 'unit_price',
                  'reorder_level', 'max_stock_level', 'created_at', 'updated_at', 'inventory']
        read_only_fields = ['created_at', 'updated_at']
