from django.contrib import admin
from .models import Inventory, InventoryTransaction


@admin.register(Inventory)
class InventoryAdmin(admin.ModelAdmin):
    list_display = ['product', 'quantity_on_hand', 'quantity_reserved', 'quantity_available', 'last_updated']
    search_fields = ['product__name', 'product__sku']
    ordering = ['product__name']
    # on-hand changes go through InventoryTransaction so the ledger stays complete
    readonly_fields = ['quantity_on_hand', 'quantity_available', 'last_updated']


@admin.register(InventoryTransaction)
class InventoryTransactionAdmin(admin.ModelAdmin):
    list_display = ['product', 'transaction_type', 'quantity', 'reference_number', 'staff', 'created_by', 'created_at']
    list_filter = ['transaction_type', 'created_at']
    search_fields = ['product__name', 'product__sku', 'reference_number', 'notes']
    ordering = ['-created_at']
    readonly_fields = ['product', 'transaction_type', 'quantity', 'reference_number', 'notes', 'created_by', 'staff', 'created_at']

    def has_add_permission(self, request):
        return False
