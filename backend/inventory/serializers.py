from rest_framework import serializers
from .models import MAX_QUANTITY, Inventory, InventoryTransaction

# Primary keys are 64-bit BigAutoFields
MAX_ID = 9223372036854775807


class InventorySerializer(serializers.ModelSerializer):
    product_id = serializers.IntegerField(read_only=True)
    quantity_available = serializers.IntegerField(read_only=True)

    class Meta:
        model = Inventory
        fields = ['id', 'product_id', 'quantity_on_hand', 'quantity_reserved', 'quantity_available', 'last_updated']
        read_only_fields = ['quantity_on_hand', 'last_updated']


class InventoryListSerializer(InventorySerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    product_sku = serializers.CharField(source='product.sku', read_only=True)
    reorder_level = serializers.IntegerField(source='product.reorder_level', read_only=True)

    class Meta(InventorySerializer.Meta):
        fields = InventorySerializer.Meta.fields + ['product_name', 'product_sku', 'reorder_level']


class ReservationSerializer(serializers.ModelSerializer):
    """Only the reserved quantity is writable; on-hand changes go through transactions"""
    class Meta:
        model = Inventory
        fields = ['quantity_reserved']
        extra_kwargs = {'quantity_reserved': {'required': True}}

    def validate_quantity_reserved(self, value):
        if self.instance is not None and value > self.instance.quantity_on_hand:
            raise serializers.ValidationError(
                f'Cannot reserve more than the {self.instance.quantity_on_hand} units on hand'
            )
        return value


class InventoryTransactionSerializer(serializers.ModelSerializer):
    product_id = serializers.IntegerField(read_only=True)
    product_name = serializers.CharField(source='product.name', read_only=True)
    product_sku = serializers.CharField(source='product.sku', read_only=True)
    staff_id = serializers.IntegerField(read_only=True)
    staff_name = serializers.CharField(source='staff.full_name', read_only=True, default=None)
    quantity_change = serializers.IntegerField(read_only=True)

    class Meta:
        model = InventoryTransaction
        fields = ['id', 'product_id', 'product_name', 'product_sku', 'transaction_type', 'quantity',
                  'quantity_change', 'reference_number', 'notes', 'created_by', 'staff_id', 'staff_name',
                  'created_at']


class InventoryTransactionCreateSerializer(serializers.Serializer):
    """Validates a transaction request; existence of product/staff is checked when recording"""
    product_id = serializers.IntegerField(min_value=1, max_value=MAX_ID)
    transaction_type = serializers.ChoiceField(choices=InventoryTransaction.TRANSACTION_TYPE_CHOICES)
    quantity = serializers.IntegerField(min_value=-MAX_QUANTITY, max_value=MAX_QUANTITY)
    reference_number = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    created_by = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    staff_id = serializers.IntegerField(required=False, allow_null=True, min_value=1, max_value=MAX_ID)

    def validate(self, attrs):
        transaction_type = attrs['transaction_type']
        quantity = attrs['quantity']
        if transaction_type == InventoryTransaction.RECEIVE and quantity <= 0:
            raise serializers.ValidationError({'quantity': 'Receive quantity must be positive'})
        if transaction_type == InventoryTransaction.ISSUE and quantity <= 0:
            raise serializers.ValidationError({'quantity': 'Issue quantity must be positive'})
        if quantity == 0:
            raise serializers.ValidationError({'quantity': 'Quantity cannot be zero'})
        return attrs
