"""
Properties Filters - DealFlow Backend API
Django REST Framework filters for property listings.

Provides filtering capabilities for:
- Workflow filtering (status)
- Classification filtering (category, catalog type, property type)
- Geographic filtering (city, state, multiple cities)
- Price and size filtering (price range, bedrooms)
- Date filtering (creation)
"""

from django.db import models
from django.db.models import Max, Min
from django_filters import rest_framework as filters
from django_filters import BooleanFilter, CharFilter, ChoiceFilter, DateFilter, NumberFilter

from .models import CATALOG_TYPE_CHOICES, CATEGORY_CHOICES, STATUS_CHOICES, Property


# =============================================================================
# PROPERTY FILTERS
# =============================================================================

class PropertyFilter(filters.FilterSet):
    """
    Filtering for listings.

    Usage:
        GET /api/v1/properties/?category=Residential&city=pune&min_price=5000000
        GET /api/v1/properties/?cities=Pune,Mumbai&min_bedrooms=2
    """

    status = ChoiceFilter(choices=STATUS_CHOICES)
    category = ChoiceFilter(choices=CATEGORY_CHOICES)
    catalog_type = ChoiceFilter(choices=CATALOG_TYPE_CHOICES)

    # =============================================================================
    # LOCATION FILTERS
    # =============================================================================

    city = CharFilter(
        field_name='city',
        lookup_expr='icontains',
        help_text='Filter by city name (partial match)'
    )

    state = CharFilter(
        field_name='state',
        lookup_expr='iexact',
        help_text='Filter by state (exact match)'
    )

    cities = CharFilter(
        method='filter_multiple_cities',
        help_text='Filter by multiple cities (comma-separated)'
    )

    pincode = CharFilter(
        field_name='pincode',
        lookup_expr='istartswith',
        help_text='Filter by pincode (prefix match)'
    )

    # =============================================================================
    # PRICE AND SIZE FILTERS
    # =============================================================================

    min_price = NumberFilter(
        field_name='listing_price',
        lookup_expr='gte',
        help_text='Minimum listing price'
    )

    max_price = NumberFilter(
        field_name='listing_price',
        lookup_expr='lte',
        help_text='Maximum listing price'
    )

    bedrooms = NumberFilter(field_name='bedrooms', lookup_expr='exact')

    min_bedrooms = NumberFilter(
        field_name='bedrooms',
        lookup_expr='gte',
        help_text='Minimum number of bedrooms'
    )

    has_coordinates = BooleanFilter(
        method='filter_has_coordinates',
        help_text='Filter by presence of lat/lng coordinates'
    )

    # =============================================================================
    # TEMPORAL FILTERS
    # =============================================================================

    created_after = DateFilter(
        field_name='created_at',
        lookup_expr='date__gte',
        help_text='Filter by creation date (YYYY-MM-DD)'
    )

    created_before = DateFilter(
        field_name='created_at',
        lookup_expr='date__lte',
        help_text='Filter by creation date (YYYY-MM-DD)'
    )

    class Meta:
        model = Property
        fields = ['property_type', 'rera_approved', 'furnishing_status', 'listed_by', 'price_type']

    # =============================================================================
    # CUSTOM FILTER METHODS
    # =============================================================================

    def filter_multiple_cities(self, queryset, name, value):
        """Filter by multiple cities (comma-separated list)"""
        if not value:
            return queryset

        query = models.Q()
        for city in (c.strip() for c in value.split(',')):
            if city:
                query |= models.Q(city__iexact=city)
        return queryset.filter(query)

    def filter_has_coordinates(self, queryset, name, value):
        """Filter by presence of geographic coordinates"""
        if value is True:
            return queryset.filter(latitude__isnull=False, longitude__isnull=False)
        elif value is False:
            return queryset.filter(
                models.Q(latitude__isnull=True) | models.Q(longitude__isnull=True)
            )
        return queryset


# =============================================================================
# FILTER OPTIONS
# =============================================================================

def get_property_filter_options(queryset):
    """
    Values the frontend needs to build its filter widgets.

    Returns:
        {'categories': [...], 'catalog_types': [...], 'cities': [...],
         'price_range': {'min': ..., 'max': ...}}
    """
    prices = queryset.aggregate(min=Min('listing_price'), max=Max('listing_price'))
    return {
        'categories': sorted(set(queryset.values_list('category', flat=True))),
        'catalog_types': sorted(set(queryset.exclude(catalog_type='').values_list('catalog_type', flat=True))),
        'cities': sorted(set(queryset.values_list('city', flat=True))),
        'price_range': prices,
    }
