from rest_framework import serializers
from .models import Asset, AssetMaintenance


class AssetSerializer(serializers.ModelSerializer):
    class Meta:
        model = Asset
        fields = ['id', 'asset_tag', 'name', 'description', 'category', 'brand', 'model', 'serial_number',
                  'purchase_date', 'purchase_price', 'current_value', 'location', 'status', 'assigned_to',
                  'warranty_expiry', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']


class AssetMaintenanceSerializer(serializers.ModelSerializer):
    asset_id = serializers.IntegerField()
    asset_name = serializers.CharField(source='asset.name', read_only=True)
    asset_tag = serializers.CharField(source='asset.asset_tag', read_only=True)

    class Meta:
        model = AssetMaintenance
        fields = ['id', 'asset_id', 'asset_name', 'asset_tag', 'maintenance_type', 'description', 'cost',
                  'performed_date', 'performed_by', 'next_due_date', 'created_at']
        read_only_fields = ['created_at']

    def validate(self, attrs):
        performed_date = attrs.get('performed_date')
        next_due_date = attrs.get('next_due_date')
        if performed_date and next_due_date and next_due_date < performed_date:
            raise serializers.ValidationError({'next_due_date': 'Next due date cannot be before the performed date'})
        return attrs
