from django.urls import path
from .views import (
    asset_list_create, asset_detail,
    maintenance_list_create, asset_maintenance_list,
)

urlpatterns = [
    path('assets/', asset_list_create, name='asset-list-create'),
    path('assets/maintenance/', maintenance_list_create, name='maintenance-list-create'),
    path('assets/<int:pk>/', asset_detail, name='asset-detail'),
    path('assets/<int:pk>/maintenance/', asset_maintenance_list, name='asset-maintenance-list'),
]
