import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import ProtectedError
from .models import Staff
from .serializers import StaffSerializer
from backend.core.utils import (
    create_audit_log, error_response, save_or_conflict,
    serializer_changes, validation_error_response,
)

logger = logging.getLogger('backend.staff')

DUPLICATE_STAFF_MESSAGE = 'Staff member with this employee ID or email already exists'


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def staff_list_create(request):
    """List all staff members or create a new staff member"""
    if request.method == 'GET':
        queryset = Staff.objects.order_by('first_name', 'last_name', 'id')
        department = request.query_params.get('department', None)
        status_filter = request.query_params.get('status', None)

        if department:
            queryset = queryset.filter(department__iexact=department)
        if status_filter:
            queryset = queryset.filter(status=status_filter.upper())

        serializer = StaffSerializer(queryset, many=True)
        return Response(serializer.data)

    logger.info(f"User {request.user.username} creating staff member with data: {request.data}")
    serializer = StaffSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer, DUPLICATE_STAFF_MESSAGE, logger)

    staff, conflict = save_or_conflict(serializer, DUPLICATE_STAFF_MESSAGE, logger)
    if conflict:
        return conflict

    logger.info(f"Staff member {staff.employee_id} created by {request.user.username}")
    create_audit_log(
        request=request,
        action='create',
        model_name='Staff',
        object_id=staff.id,
        object_name=staff.full_name,
        object_reference=staff.employee_id,
        changes=serializer_changes(serializer.validated_data),
    )
    return Response(StaffSerializer(staff).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def staff_active_list(request):
    """List active staff members only (used to pick who performed a transaction)"""
    queryset = Staff.objects.filter(status='ACTIVE').order_by('first_name', 'last_name', 'id')
    serializer = StaffSerializer(queryset, many=True)
    return Response(serializer.data)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def staff_detail(request, pk):
    """Retrieve, update or delete a staff member"""
    try:
        staff = Staff.objects.get(pk=pk)
    except Staff.DoesNotExist:
        logger.warning(f"Staff member {pk} not found")
        return error_response('Staff member not found', status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        return Response(StaffSerializer(staff).data)

    if request.method in ('PUT', 'PATCH'):
        logger.info(f"User {request.user.username} updating staff member {pk} with data: {request.data}")
        serializer = StaffSerializer(staff, data=request.data, partial=request.method == 'PATCH')
        if not serializer.is_valid():
            return validation_error_response(serializer, DUPLICATE_STAFF_MESSAGE, logger)

        staff, conflict = save_or_conflict(serializer, DUPLICATE_STAFF_MESSAGE, logger)
        if conflict:
            return conflict

        create_audit_log(
            request=request,
            action='update',
            model_name='Staff',
            object_id=staff.id,
            object_name=staff.full_name,
            object_reference=staff.employee_id,
            changes=serializer_changes(serializer.validated_data),
        )
        return Response(StaffSerializer(staff).data)

    # DELETE
    logger.info(f"User {request.user.username} deleting staff member {pk} ({staff.employee_id})")
    full_name, employee_id = staff.full_name, staff.employee_id
    try:
        staff.delete()
    except ProtectedError:
        logger.warning(f"Staff member {pk} is referenced by inventory transactions; delete refused")
        return error_response(
            'Staff member is referenced by inventory transactions and cannot be deleted',
            status.HTTP_409_CONFLICT,
        )
    create_audit_log(
        request=request,
        action='delete',
        model_name='Staff',
        object_id=pk,
        object_name=full_name,
        object_reference=employee_id,
    )
    return Response(status=status.HTTP_204_NO_CONTENT)
