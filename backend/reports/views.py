import logging
from datetime import datetime, time
from decimal import Decimal

from django.db.models import Count, DecimalField, ExpressionWrapper, F, FloatField, Q, Sum, Value
from django.db.models.functions import Cast, Coalesce, NullIf
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.assets.models import Asset, AssetMaintenance
from backend.assets.serializers import AssetMaintenanceSerializer
from backend.catalog.models import Product
from backend.core.utils import error_response
from backend.inventory.models import Inventory, InventoryTransaction
from backend.inventory.serializers import InventoryTransactionSerializer

logger = logging.getLogger('backend.reports')

DASHBOARD_LOW_STOCK_ROWS = 5

stock_value = ExpressionWrapper(
    F('product__unit_price') * F('quantity_on_hand'),
    output_field=DecimalField(max_digits=20, decimal_places=2),
)


def category_label(field):
    """Group key for a nullable category column; blank and NULL both become 'Uncategorized'"""
    return Coalesce(NullIf(field, Value('')), Value('Uncategorized'))


def category_breakdown(queryset, category_field, value_expression):
    rows = queryset.annotate(
        category_name=category_label(category_field),
    ).values('category_name').annotate(
        count=Count('id'),
        value=Sum(value_expression),
    ).order_by()

    categories = [
        {
            'category': row['category_name'],
            'count': row['count'],
            'value': float(row['value'] or Decimal('0.00')),
        }
        for row in rows
    ]
    categories.sort(key=lambda c: (-c['value'], c['category']))
    return categories


def inventory_summary(include_categories=True):
    totals = Inventory.objects.aggregate(
        total_value=Sum(stock_value),
        low_stock_items=Count('id', filter=Q(quantity_on_hand__gt=0, quantity_on_hand__lte=F('product__reorder_level'))),
        out_of_stock_items=Count('id', filter=Q(quantity_on_hand=0)),
    )
    summary = {
        'total_products': Product.objects.count(),
        'total_value': float(totals['total_value'] or Decimal('0.00')),
        'low_stock_items': totals['low_stock_items'],
        'out_of_stock_items': totals['out_of_stock_items'],
    }
    if include_categories:
        summary['categories'] = category_breakdown(Inventory.objects.all(), 'product__category', stock_value)
    return summary


def asset_summary(include_categories=True):
    totals = Asset.objects.aggregate(
        total_assets=Count('id'),
        total_value=Sum('current_value'),
        active_assets=Count('id', filter=Q(status='ACTIVE')),
        maintenance_assets=Count('id', filter=Q(status='MAINTENANCE')),
    )
    summary = {
        'total_assets': totals['total_assets'],
        'total_value': float(totals['total_value'] or Decimal('0.00')),
        'active_assets': totals['active_assets'],
        'maintenance_assets': totals['maintenance_assets'],
    }
    if include_categories:
        summary['categories'] = category_breakdown(Asset.objects.all(), 'category', F('current_value'))
    return summary


def low_stock_rows():
    """Products at or below their reorder level, most depleted (relative to reorder level) first"""
    queryset = Product.objects.filter(
        inventory__quantity_on_hand__lte=F('reorder_level'),
    ).annotate(
        quantity_on_hand=F('inventory__quantity_on_hand'),
        stock_ratio=ExpressionWrapper(
            Cast('inventory__quantity_on_hand', FloatField()) / NullIf(Cast('reorder_level', FloatField()), Value(0.0)),
            output_field=FloatField(),
        ),
    ).order_by(F('stock_ratio').asc(nulls_last=True), 'name', 'id')

    return [
        {
            'id': product.id,
            'name': product.name,
            'sku': product.sku,
            'category': product.category,
            'quantity_on_hand': product.quantity_on_hand,
            'reorder_level': product.reorder_level,
            'unit_price': float(product.unit_price),
        }
        for product in queryset
    ]


def parse_report_bound(value, end_of_day=False):
    """
    Parse a report date filter. A bare YYYY-MM-DD covers the whole day;
    an ISO datetime is used as-is (naive values are in the current timezone).
    Raises ValueError for anything else.
    """
    parsed_date = parse_date(value)
    if parsed_date is not None:
        bound = datetime.combine(parsed_date, time.max if end_of_day else time.min)
    else:
        bound = parse_datetime(value)
        if bound is None:
            raise ValueError(value)
    if timezone.is_naive(bound):
        bound = timezone.make_aware(bound)
    return bound


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def inventory_report(request):
    """Inventory totals with a per-category value breakdown"""
    return Response(inventory_summary())


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def asset_report(request):
    """Asset totals with a per-category value breakdown"""
    return Response(asset_summary())


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def low_stock_report(request):
    return Response({'products': low_stock_rows()})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def transaction_report(request):
    """Transaction history, newest first, optionally bounded by start_date / end_date"""
    queryset = InventoryTransaction.objects.select_related('product', 'staff')
    bounds = {}
    for param, end_of_day in (('start_date', False), ('end_date', True)):
        value = request.query_params.get(param)
        if not value:
            continue
        try:
            bounds[param] = parse_report_bound(value, end_of_day=end_of_day)
        except ValueError:
            logger.warning(f"Transaction report rejected malformed {param}: {value!r}")
            return error_response(
                f'Invalid {param}: expected YYYY-MM-DD or an ISO 8601 datetime',
                status.HTTP_400_BAD_REQUEST,
            )

    if 'start_date' in bounds:
        queryset = queryset.filter(created_at__gte=bounds['start_date'])
    if 'end_date' in bounds:
        queryset = queryset.filter(created_at__lte=bounds['end_date'])

    queryset = queryset.order_by('-created_at', '-id')
    serializer = InventoryTransactionSerializer(queryset, many=True)
    return Response({'transactions': serializer.data})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def maintenance_report(request):
    queryset = AssetMaintenance.objects.select_related('asset').order_by('-performed_date', '-id')
    serializer = AssetMaintenanceSerializer(queryset, many=True)
    return Response({'maintenance': serializer.data})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard(request):
    """Headline numbers for the landing page"""
    try:
        low_stock = low_stock_rows()
        return Response({
            'inventory': inventory_summary(include_categories=False),
            'assets': asset_summary(include_categories=False),
            'low_stock': low_stock[:DASHBOARD_LOW_STOCK_ROWS],
            'low_stock_count': len(low_stock),
        })
    except Exception as e:
        logger.error(f"Error building dashboard: {str(e)}", exc_info=True)
        return error_response('An unexpected error occurred', status.HTTP_500_INTERNAL_SERVER_ERROR)
