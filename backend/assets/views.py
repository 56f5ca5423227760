import logging
from django.db.models import Q
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from .models import Asset, AssetMaintenance
from .serializers import AssetSerializer, AssetMaintenanceSerializer
from backend.core.utils import (
    create_audit_log, error_response, save_or_conflict,
    serializer_changes, validation_error_response,
)

logger = logging.getLogger('backend.assets')

DUPLICATE_TAG_MESSAGE = 'Asset with this asset tag already exists'


# Asset views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def asset_list_create(request):
    """List all assets or create a new asset"""
    if request.method == 'GET':
        queryset = Asset.objects.order_by('name', 'id')
        category = request.query_params.get('category', None)
        status_filter = request.query_params.get('status', None)
        search = request.query_params.get('search', None)

        if category:
            queryset = queryset.filter(category__iexact=category)
        if status_filter:
            queryset = queryset.filter(status=status_filter.upper())
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search) |
                Q(asset_tag__icontains=search) |
                Q(serial_number__icontains=search)
            )

        serializer = AssetSerializer(queryset, many=True)
        return Response(serializer.data)

    logger.info(f"User {request.user.username} creating asset with data: {request.data}")
    serializer = AssetSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer, DUPLICATE_TAG_MESSAGE, logger)

    asset, conflict = save_or_conflict(serializer, DUPLICATE_TAG_MESSAGE, logger)
    if conflict:
        return conflict

    logger.info(f"Asset {asset.asset_tag} created by {request.user.username}")
    create_audit_log(
        request=request,
        action='create',
        model_name='Asset',
        object_id=asset.id,
        object_name=asset.name,
        object_reference=asset.asset_tag,
        changes=serializer_changes(serializer.validated_data),
    )
    return Response(AssetSerializer(asset).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def asset_detail(request, pk):
    """Retrieve, update or delete an asset"""
    try:
        asset = Asset.objects.get(pk=pk)
    except Asset.DoesNotExist:
        logger.warning(f"Asset {pk} not found")
        return error_response('Asset not found', status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        return Response(AssetSerializer(asset).data)

    if request.method in ('PUT', 'PATCH'):
        logger.info(f"User {request.user.username} updating asset {pk} with data: {request.data}")
        serializer = AssetSerializer(asset, data=request.data, partial=request.method == 'PATCH')
        if not serializer.is_valid():
            return validation_error_response(serializer, DUPLICATE_TAG_MESSAGE, logger)

        asset, conflict = save_or_conflict(serializer, DUPLICATE_TAG_MESSAGE, logger)
        if conflict:
            return conflict

        create_audit_log(
            request=request,
            action='update',
            model_name='Asset',
            object_id=asset.id,
            object_name=asset.name,
            object_reference=asset.asset_tag,
            changes=serializer_changes(serializer.validated_data),
        )
        return Response(AssetSerializer(asset).data)

    # DELETE cascades to the asset's maintenance records
    logger.info(f"User {request.user.username} deleting asset {pk} ({asset.asset_tag})")
    asset_name, asset_tag = asset.name, asset.asset_tag
    asset.delete()
    create_audit_log(
        request=request,
        action='delete',
        model_name='Asset',
        object_id=pk,
        object_name=asset_name,
        object_reference=asset_tag,
    )
    return Response(status=status.HTTP_204_NO_CONTENT)


# Maintenance views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def maintenance_list_create(request):
    """List all maintenance records or log maintenance against an asset"""
    if request.method == 'GET':
        queryset = AssetMaintenance.objects.select_related('asset').order_by('-performed_date', '-id')
        serializer = AssetMaintenanceSerializer(queryset, many=True)
        return Response(serializer.data)

    serializer = AssetMaintenanceSerializer(data=request.data)
    if not serializer.is_valid():
        logger.warning(f"Maintenance record validation failed: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    asset_id = serializer.validated_data['asset_id']
    try:
        asset = Asset.objects.get(pk=asset_id)
    except Asset.DoesNotExist:
        logger.warning(f"Maintenance record rejected: asset {asset_id} not found")
        return error_response('Asset not found', status.HTTP_404_NOT_FOUND)

    record = serializer.save()
    logger.info(f"Maintenance '{record.maintenance_type}' logged for asset {asset.asset_tag} by {request.user.username}")
    create_audit_log(
        request=request,
        action='maintenance_record',
        model_name='AssetMaintenance',
        object_id=record.id,
        object_name=asset.name,
        object_reference=asset.asset_tag,
        changes=serializer_changes(serializer.validated_data),
    )
    return Response(AssetMaintenanceSerializer(record).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def asset_maintenance_list(request, pk):
    """List an asset's maintenance history, most recent first"""
    if not Asset.objects.filter(pk=pk).exists():
        return error_response('Asset not found', status.HTTP_404_NOT_FOUND)
    queryset = AssetMaintenance.objects.filter(asset_id=pk).select_related('asset').order_by('-performed_date', '-id')
    serializer = AssetMaintenanceSerializer(queryset, many=True)
    return Response(serializer.data)
