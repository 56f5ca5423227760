from django.contrib import admin
from .models import Staff


@admin.register(Staff)
class StaffAdmin(admin.ModelAdmin):
    list_display = ['employee_id', 'first_name', 'last_name', 'email', 'department', 'position', 'status', 'hire_date']
    list_filter = ['status', 'department', 'hire_date']
    search_fields = ['employee_id', 'first_name', 'last_name', 'email']
    ordering = ['first_name', 'last_name']
    readonly_fields = ['created_at', 'updated_at']
