from django.urls import path
from . import views

urlpatterns = [
    path('reports/inventory/', views.inventory_report, name='inventory-report'),
    path('reports/assets/', views.asset_report, name='asset-report'),
    path('reports/low-stock/', views.low_stock_report, name='low-stock-report'),
    path('reports/transactions/', views.transaction_report, name='transaction-report'),
    path('reports/maintenance/', views.maintenance_report, name='maintenance-report'),
    path('reports/dashboard/', views.dashboard, name='dashboard'),
]
