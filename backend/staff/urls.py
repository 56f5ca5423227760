from django.urls import path
from .views import staff_list_create, staff_active_list, staff_detail

urlpatterns = [
    path('staff/', staff_list_create, name='staff-list-create'),
    path('staff/active/', staff_active_list, name='staff-active-list'),
    path('staff/<int:pk>/', staff_detail, name='staff-detail'),
]
