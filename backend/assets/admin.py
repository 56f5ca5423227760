from django.contrib import admin
from .models import Asset, AssetMaintenance


class AssetMaintenanceInline(admin.TabularInline):
    model = AssetMaintenance
    extra = 0
    fields = ['maintenance_type', 'performed_date', 'performed_by', 'cost', 'next_due_date']


@admin.register(Asset)
class AssetAdmin(admin.ModelAdmin):
    list_display = ['asset_tag', 'name', 'category', 'status', 'location', 'assigned_to', 'current_value', 'warranty_expiry']
    list_filter = ['status', 'category', 'purchase_date']
    search_fields = ['asset_tag', 'name', 'serial_number', 'brand', 'model']
    ordering = ['name']
    inlines = [AssetMaintenanceInline]
    readonly_fields = ['created_at', 'updated_at']


@admin.register(AssetMaintenance)
class AssetMaintenanceAdmin(admin.ModelAdmin):
    list_display = ['asset', 'maintenance_type', 'performed_date', 'performed_by', 'cost', 'next_due_date']
    list_filter = ['maintenance_type', 'performed_date']
    search_fields = ['asset__asset_tag', 'asset__name', 'description', 'performed_by']
    ordering = ['-performed_date']
    readonly_fields = ['created_at']
