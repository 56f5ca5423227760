"""
URL configuration for backend project.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.2/topics/http/urls/
Every app mounts its routes under the versioned `api/v1/` prefix.
"""
from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "Inventory & Asset Tracker Admin"
admin.site.site_title = "Inventory & Asset Tracker Admin Portal"
admin.site.index_title = "Inventory, assets and staff"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('backend.core.urls')),
    path('api/v1/', include('backend.catalog.urls')),
    path('api/v1/', include('backend.inventory.urls')),
    path('api/v1/', include('backend.staff.urls')),
    path('api/v1/', include('backend.assets.urls')),
    path('api/v1/', include('backend.reports.urls')),
]
