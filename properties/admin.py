"""
Properties Admin - DealFlow Backend
Django admin configuration for property types, listings and slides.
"""

from django.contrib import admin
from django.db import models
from django.forms import TextInput
from django.utils.html import format_html

from .models import STATUS_FOR_SALE, STATUS_PENDING, Property, PropertySlide, PropertyType


# =============================================================================
# INLINE ADMIN CLASSES
# =============================================================================

class PropertySlideInline(admin.TabularInline):
    """Inline editing of slides within the listing admin"""
    model = PropertySlide
    extra = 0
    fields = ['position', 'title', 'image']

    formfield_overrides = {
        models.CharField: {'widget': TextInput(attrs={'size': '30'})},
    }


# =============================================================================
# MAIN ADMIN CLASSES
# =============================================================================

@admin.register(PropertyType)
class PropertyTypeAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'listing_count']
    list_filter = ['category']
    search_fields = ['name']

    def listing_count(self, obj):
        return obj.properties.count()
    listing_count.short_description = 'Listings'


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    """
    Admin interface for listings.

    Features:
    - Filtering by status, category, catalog type and city
    - Inline slide editing
    - Bulk publish action for pending listings
    """

    list_display = [
        'title',
        'category',
        'city',
        'listing_price',
        'status_badge',
        'views',
        'contact_email',
        'created_at',
    ]

    list_filter = ['status', 'category', 'catalog_type', 'rera_approved', 'state', 'created_at']
    search_fields = ['title', 'locality', 'city', 'contact_name', 'contact_email']
    readonly_fields = ['views', 'created_at', 'updated_at']
    raw_id_fields = ['owner']
    inlines = [PropertySlideInline]
    list_per_page = 25
    actions = ['publish_selected']

    fieldsets = (
        ('Catalog', {
            'fields': (
                'title', 'meta_description', 'meta_keywords', 'category', 'property_type',
                'property_age', 'rera_approved', 'feature_image', 'catalog_type', 'overview',
            ),
        }),
        ('Dimensions', {
            'fields': (
                ('built_up_area', 'is_built_up_area_enabled'),
                ('carpet_area', 'is_carpet_area_enabled'),
                ('super_built_up_area', 'is_super_built_up_area_enabled'),
                'unit_of_measurement',
                ('total_floors', 'is_total_floors_enabled'),
                ('floor_number', 'is_floor_number_enabled'),
                ('bedrooms', 'is_bedrooms_enabled'),
                ('bathrooms', 'is_bathrooms_enabled'),
                ('balconies', 'is_balconies_enabled'),
                ('parking_spaces', 'is_parking_spaces_enabled'),
                'servant_room',
            ),
            'classes': ('collapse',)
        }),
        ('Amenities & Interiors', {
            'fields': ('amenities', 'furnishing_status', 'flooring_type', 'kitchen_type', 'furniture_included'),
            'classes': ('collapse',)
        }),
        ('Location', {
            'fields': (
                'locality', 'address_line', 'city', 'state', 'country', 'pincode', 'landmark',
                ('latitude', 'longitude'),
            ),
        }),
        ('Connectivity', {
            'fields': (
                'bus_stop', 'metro_station', 'hospital_distance', 'mall_distance',
                'airport_distance', 'school_distance', 'other_connectivity',
            ),
            'classes': ('collapse',)
        }),
        ('Pricing', {
            'fields': (
                'listing_price', 'price_type', 'maintenance_charge', 'security_deposit',
                'booking_amount', 'registration_charge', 'loan_available', 'earning_rules',
            ),
        }),
        ('Contact', {
            'fields': (
                'listed_by', 'contact_name', 'contact_phone', 'contact_alt_phone', 'contact_email',
                'agency_name', 'rera_id', 'contact_time',
            ),
        }),
        ('Workflow', {
            'fields': ('status', 'modification_notes', 'owner', 'views', 'created_at', 'updated_at'),
        }),
    )

    def status_badge(self, obj):
        colour = 'orange' if obj.status == STATUS_PENDING else 'green' if obj.status == STATUS_FOR_SALE else 'gray'
        return format_html('<span style="color: {};">{}</span>', colour, obj.status)
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'

    def publish_selected(self, request, queryset):
        updated = queryset.filter(status=STATUS_PENDING).update(status=STATUS_FOR_SALE, modification_notes='')
        self.message_user(request, f'Published {updated} listing(s).')
    publish_selected.short_description = 'Verify and publish selected pending listings'
