import django_filters
from django.db.models import F, Q
from .models import Product


def is_truthy(value):
    """Query-string booleans arrive as strings ('true'/'false')"""
    if isinstance(value, str):
        return value.strip().lower() in ('true', '1', 'yes')
    return bool(value)


class ProductFilter(django_filters.FilterSet):
    """Product list filtering using django-filter"""

    # Name / SKU / description substring search
    search = django_filters.CharFilter(method='filter_search', label='Search')
    category = django_filters.CharFilter(field_name='category', lookup_expr='iexact')

    # Stock status filters, evaluated against the product's inventory row
    low_stock = django_filters.CharFilter(method='filter_low_stock', label='Low Stock')
    out_of_stock = django_filters.CharFilter(method='filter_out_of_stock', label='Out of Stock')

    class Meta:
        model = Product
        fields = ['search', 'category', 'low_stock', 'out_of_stock']

    def filter_search(self, queryset, name, value):
        """Every whitespace-separated word must appear in name, SKU or description"""
        words = value.split() if value else []
        for word in words:
            queryset = queryset.filter(
                Q(name__icontains=word) | Q(sku__icontains=word) | Q(description__icontains=word)
            )
        return queryset

    def filter_low_stock(self, queryset, name, value):
        """In stock, but at or below the reorder level"""
        if not is_truthy(value):
            return queryset
        return queryset.filter(
            inventory__quantity_on_hand__gt=0,
            inventory__quantity_on_hand__lte=F('reorder_level'),
        )

    def filter_out_of_stock(self, queryset, name, value):
        if not is_truthy(value):
            return queryset
        return queryset.filter(inventory__quantity_on_hand=0)
