import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from .models import Product
from .serializers import ProductSerializer
from .filters import ProductFilter
from backend.core.utils import (
    create_audit_log, error_response, save_or_conflict,
    serializer_changes, validation_error_response,
)

logger = logging.getLogger('backend.catalog')

DUPLICATE_SKU_MESSAGE = 'Product with this SKU already exists'


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def product_list_create(request):
    """List all products with their inventory, or create a new product"""
    try:
        if request.method == 'GET':
            queryset = Product.objects.select_related('inventory').order_by('name', 'id')
            filterset = ProductFilter(request.query_params, queryset=queryset)
            if not filterset.is_valid():
                return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
            serializer = ProductSerializer(filterset.qs, many=True)
            return Response(serializer.data)

        logger.info(f"User {request.user.username} creating product with data: {request.data}")
        serializer = ProductSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer, DUPLICATE_SKU_MESSAGE, logger)

        product, conflict = save_or_conflict(serializer, DUPLICATE_SKU_MESSAGE, logger)
        if conflict:
            return conflict

        # Inventory row is created by the post_save signal; reload so it is nested
        product = Product.objects.select_related('inventory').get(pk=product.pk)
        logger.info(f"Product '{product.name}' ({product.sku}) created by {request.user.username}")
        create_audit_log(
            request=request,
            action='create',
            model_name='Product',
            object_id=product.id,
            object_name=product.name,
            object_reference=product.sku,
            changes=serializer_changes(serializer.validated_data),
        )
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)
    except Exception as e:
        logger.error(f"Unexpected error in product_list_create: {str(e)}", exc_info=True)
        return error_response('An unexpected error occurred', status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def product_detail(request, pk):
    """Retrieve, update or delete a product"""
    try:
        product = Product.objects.select_related('inventory').get(pk=pk)
    except Product.DoesNotExist:
        logger.warning(f"Product {pk} not found")
        return error_response('Product not found', status.HTTP_404_NOT_FOUND)

    try:
        if request.method == 'GET':
            return Response(ProductSerializer(product).data)

        if request.method in ('PUT', 'PATCH'):
            partial = request.method == 'PATCH'
            logger.info(f"User {request.user.username} updating product {pk} with data: {request.data}")
            serializer = ProductSerializer(product, data=request.data, partial=partial)
            if not serializer.is_valid():
                return validation_error_response(serializer, DUPLICATE_SKU_MESSAGE, logger)

            product, conflict = save_or_conflict(serializer, DUPLICATE_SKU_MESSAGE, logger)
            if conflict:
                return conflict

            logger.info(f"Product {pk} updated successfully")
            create_audit_log(
                request=request,
                action='update',
                model_name='Product',
                object_id=product.id,
                object_name=product.name,
                object_reference=product.sku,
                changes=serializer_changes(serializer.validated_data),
            )
            return Response(ProductSerializer(product).data)

        # DELETE cascades to the inventory row and the product's transactions
        logger.info(f"User {request.user.username} deleting product {pk} ({product.name})")
        product_name, product_sku = product.name, product.sku
        product.delete()
        create_audit_log(
            request=request,
            action='delete',
            model_name='Product',
            object_id=pk,
            object_name=product_name,
            object_reference=product_sku,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)
    except Exception as e:
        logger.error(f"Unexpected error in product_detail for pk {pk}: {str(e)}", exc_info=True)
        return error_response('An unexpected error occurred', status.HTTP_500_INTERNAL_SERVER_ERROR)
