from rest_framework import serializers
from .models import Staff


class StaffSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = Staff
        fields = ['id', 'employee_id', 'first_name', 'last_name', 'full_name', 'email', 'phone',
                  'department', 'position', 'hire_date', 'status', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {
            'email': {'allow_blank': True},
        }

    def validate_email(self, value):
        # Blank emails are stored as NULL so they never collide on the unique index
        return value or None
