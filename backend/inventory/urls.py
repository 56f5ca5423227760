from django.urls import path
from .views import (
    inventory_list, inventory_detail,
    transaction_list_create, transaction_detail,
    product_transactions,
)

urlpatterns = [
    # Inventory level endpoints (keyed by product id)
    path('inventory/', inventory_list, name='inventory-list'),
    path('inventory/<int:product_id>/', inventory_detail, name='inventory-detail'),

    # InventoryTransaction endpoints
    path('transactions/', transaction_list_create, name='transaction-list-create'),
    path('transactions/<int:pk>/', transaction_detail, name='transaction-detail'),
    path('products/<int:pk>/transactions/', product_transactions, name='product-transactions'),
]
