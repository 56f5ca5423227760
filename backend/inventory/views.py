import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from .models import Inventory, InventoryTransaction
from .serializers import (
    InventorySerializer, InventoryListSerializer, ReservationSerializer,
    InventoryTransactionSerializer, InventoryTransactionCreateSerializer, MAX_ID,
)
from .services import InventoryError, ReservationError, record_transaction, set_reserved_quantity
from backend.catalog.models import Product
from backend.staff.models import Staff
from backend.core.utils import create_audit_log, error_response

logger = logging.getLogger('backend.inventory')


def parse_id(value):
    """Query-string id filter; raises ValueError unless it is a positive 64-bit integer"""
    parsed = int(value)
    if not 1 <= parsed <= MAX_ID:
        raise ValueError(value)
    return parsed


# Inventory views
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def inventory_list(request):
    """List inventory levels for all products"""
    queryset = Inventory.objects.select_related('product').order_by('product__name', 'product_id')
    serializer = InventoryListSerializer(queryset, many=True)
    return Response(serializer.data)


@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def inventory_detail(request, product_id):
    """Retrieve a product's inventory level or change its reserved quantity"""
    try:
        inventory = Inventory.objects.select_related('product').get(product_id=product_id)
    except Inventory.DoesNotExist:
        logger.warning(f"Inventory for product {product_id} not found")
        return error_response('Inventory record not found', status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        return Response(InventoryListSerializer(inventory).data)

    serializer = ReservationSerializer(inventory, data=request.data)
    if not serializer.is_valid():
        logger.warning(f"Reservation update for product {product_id} failed validation: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    previous = inventory.quantity_reserved
    try:
        inventory = set_reserved_quantity(inventory, serializer.validated_data['quantity_reserved'])
    except ReservationError as e:
        logger.warning(f"Reservation update for product {product_id} rejected: {e}")
        return error_response(str(e), status.HTTP_400_BAD_REQUEST)
    logger.info(f"Reserved quantity for product {product_id} changed {previous} -> {inventory.quantity_reserved}")
    create_audit_log(
        request=request,
        action='reservation_change',
        model_name='Inventory',
        object_id=inventory.id,
        object_name=inventory.product.name,
        object_reference=inventory.product.sku,
        changes={'quantity_reserved': {'old': previous, 'new': inventory.quantity_reserved}},
    )
    return Response(InventorySerializer(inventory).data)


# InventoryTransaction views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def transaction_list_create(request):
    """List inventory transactions (newest first) or record a new one"""
    if request.method == 'GET':
        queryset = InventoryTransaction.objects.select_related('product', 'staff')
        product_id = request.query_params.get('product_id', None)
        staff_id = request.query_params.get('staff_id', None)
        transaction_type = request.query_params.get('transaction_type', None)

        try:
            if product_id:
                queryset = queryset.filter(product_id=parse_id(product_id))
            if staff_id:
                queryset = queryset.filter(staff_id=parse_id(staff_id))
        except ValueError:
            return error_response('product_id and staff_id must be positive integers', status.HTTP_400_BAD_REQUEST)
        if transaction_type:
            queryset = queryset.filter(transaction_type=transaction_type.upper())

        queryset = queryset.order_by('-created_at', '-id')
        serializer = InventoryTransactionSerializer(queryset, many=True)
        return Response(serializer.data)

    serializer = InventoryTransactionCreateSerializer(data=request.data)
    if not serializer.is_valid():
        logger.warning(f"Transaction validation failed: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    created_by = data.get('created_by') or request.user.username

    try:
        inventory_transaction, inventory = record_transaction(
            product_id=data['product_id'],
            transaction_type=data['transaction_type'],
            quantity=data['quantity'],
            reference_number=data.get('reference_number') or None,
            notes=data.get('notes') or None,
            created_by=created_by,
            staff_id=data.get('staff_id'),
        )
    except Product.DoesNotExist:
        logger.warning(f"Transaction rejected: product {data['product_id']} not found")
        return error_response('Product not found', status.HTTP_404_NOT_FOUND)
    except Staff.DoesNotExist:
        logger.warning(f"Transaction rejected: staff member {data.get('staff_id')} not found")
        return error_response('Staff member not found', status.HTTP_404_NOT_FOUND)
    except InventoryError as e:
        return error_response(str(e), status.HTTP_400_BAD_REQUEST)

    create_audit_log(
        request=request,
        action='inventory_transaction',
        model_name='InventoryTransaction',
        object_id=inventory_transaction.id,
        object_name=inventory_transaction.product.name,
        object_reference=inventory_transaction.reference_number or inventory_transaction.product.sku,
        changes={
            'transaction_type': inventory_transaction.transaction_type,
            'quantity': inventory_transaction.quantity,
            'staff_id': inventory_transaction.staff_id,
            'new_quantity_on_hand': inventory.quantity_on_hand,
        },
    )
    return Response(InventoryTransactionSerializer(inventory_transaction).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def transaction_detail(request, pk):
    """Retrieve an inventory transaction"""
    try:
        inventory_transaction = InventoryTransaction.objects.select_related('product', 'staff').get(pk=pk)
    except InventoryTransaction.DoesNotExist:
        return error_response('Transaction not found', status.HTTP_404_NOT_FOUND)
    return Response(InventoryTransactionSerializer(inventory_transaction).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def product_transactions(request, pk):
    """List a product's transactions, newest first"""
    if not Product.objects.filter(pk=pk).exists():
        return error_response('Product not found', status.HTTP_404_NOT_FOUND)
    queryset = InventoryTransaction.objects.filter(product_id=pk).select_related('product', 'staff').order_by('-created_at', '-id')
    serializer = InventoryTransactionSerializer(queryset, many=True)
    return Response(serializer.data)
