"""
API Serializers for DealFlow Properties.

Implements different serializer classes for different API use cases:
- List views (summary data for grids and maps)
- Detail views (the complete listing form)
- Workflow payloads (status change, modification request)

The listing form is split into sections that the frontend submits one at
a time; PROPERTY_FORM_SECTIONS lets the API validate a single section.
"""

import logging

from rest_framework import serializers

from services import BusinessRuleError
from services.business_logic import PARTNER_ROLES, validate_earning_rule

from .models import STATUS_CHOICES, Property, PropertySlide, PropertyType

logger = logging.getLogger(__name__)


# Dimension fields that are only required when their enabled flag is set
TOGGLED_DIMENSIONS = [
    ('is_built_up_area_enabled', 'built_up_area'),
    ('is_carpet_area_enabled', 'carpet_area'),
    ('is_super_built_up_area_enabled', 'super_built_up_area'),
    ('is_total_floors_enabled', 'total_floors'),
    ('is_floor_number_enabled', 'floor_number'),
    ('is_bedrooms_enabled', 'bedrooms'),
    ('is_bathrooms_enabled', 'bathrooms'),
    ('is_balconies_enabled', 'balconies'),
    ('is_parking_spaces_enabled', 'parking_spaces'),
]

# section name → (all fields, required fields)
PROPERTY_FORM_SECTIONS = {
    'catalog': (
        ['title', 'meta_description', 'meta_keywords', 'category', 'property_type',
         'property_age', 'rera_approved', 'feature_image', 'catalog_type'],
        ['title', 'category'],
    ),
    'overview': (['overview'], []),
    'dimensions': (
        ['unit_of_measurement', 'servant_room'] + [name for pair in TOGGLED_DIMENSIONS for name in pair],
        [],
    ),
    'amenities': (['amenities'], []),
    'interiors': (['furnishing_status', 'flooring_type', 'kitchen_type', 'furniture_included'], []),
    'location': (
        ['locality', 'address_line', 'city', 'state', 'country', 'pincode', 'landmark',
         'latitude', 'longitude'],
        ['city', 'state'],
    ),
    'connectivity': (
        ['bus_stop', 'metro_station', 'hospital_distance', 'mall_distance', 'airport_distance',
         'school_distance', 'other_connectivity'],
        [],
    ),
    'pricing': (
        ['listing_price', 'price_type', 'maintenance_charge', 'security_deposit', 'booking_amount',
         'registration_charge', 'loan_available'],
        ['listing_price'],
    ),
    'contact': (
        ['listed_by', 'contact_name', 'contact_phone', 'contact_alt_phone', 'contact_email',
         'agency_name', 'rera_id', 'contact_time'],
        ['contact_name', 'contact_phone', 'contact_email'],
    ),
}


# =============================================================================
# PROPERTY TYPES AND SLIDES
# =============================================================================

class PropertyTypeSerializer(serializers.ModelSerializer):
    class Meta:
        model = PropertyType
        fields = ['id', 'name', 'category', 'created_at']
        read_only_fields = ['id', 'created_at']


class PropertySlideSerializer(serializers.ModelSerializer):
    class Meta:
        model = PropertySlide
        fields = ['id', 'title', 'image', 'position']
        read_only_fields = ['id']


# =============================================================================
# PROPERTY SERIALIZERS
# =============================================================================

class PropertyListSerializer(serializers.ModelSerializer):
    """
    Summary serializer for list views, catalog pages and featured blocks.
    """

    property_type_name = serializers.CharField(source='property_type.name', read_only=True, default=None)

    class Meta:
        model = Property
        fields = [
            'id',
            'title',
            'category',
            'property_type',
            'property_type_name',
            'catalog_type',
            'feature_image',
            'locality',
            'city',
            'state',
            'listing_price',
            'price_type',
            'bedrooms',
            'is_bedrooms_enabled',
            'status',
            'views',
            'latitude',
            'longitude',
            'created_at',
        ]
        read_only_fields = fields


class PropertyDetailSerializer(serializers.ModelSerializer):
    """
    Complete listing serializer used for create, update and retrieve.

    Workflow fields (status, views, modification notes, owner) are read
    only here and change through the viewset actions.
    """

    slides = PropertySlideSerializer(many=True, read_only=True)
    property_type_name = serializers.CharField(source='property_type.name', read_only=True, default=None)
    owner_code = serializers.CharField(source='owner.user_code', read_only=True, default=None)
    full_address = serializers.CharField(read_only=True)
    amenities = serializers.ListField(child=serializers.CharField(max_length=100), required=False)

    class Meta:
        model = Property
        exclude = ['owner']
        read_only_fields = [
            'id', 'status', 'views', 'modification_notes', 'created_at', 'updated_at',
        ]

    def validate_earning_rules(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError("Earning rules must be an object keyed by partner role.")
        cleaned = {}
        for role, rule in value.items():
            if role not in PARTNER_ROLES:
                raise serializers.ValidationError(f"'{role}' is not a partner role.")
            try:
                cleaned[role] = validate_earning_rule(rule)
            except BusinessRuleError as e:
                raise serializers.ValidationError({role: str(e)})
        return cleaned

    def validate(self, data):
        errors = {}

        def current(field):
            if field in data:
                return data[field]
            return getattr(self.instance, field, None) if self.instance else None

        for flag, field in TOGGLED_DIMENSIONS:
            if current(flag) and current(field) is None:
                errors[field] = f"{field.replace('_', ' ').capitalize()} is required when enabled."

        total_floors = current('total_floors')
        floor_number = current('floor_number')
        if total_floors is not None and floor_number is not None and floor_number > total_floors:
            errors['floor_number'] = "Floor number cannot exceed total floors."

        property_type = current('property_type')
        category = current('category')
        if property_type is not None and category and property_type.category != category:
            errors['property_type'] = f"'{property_type.name}' is not a {category} property type."

        if errors:
            raise serializers.ValidationError(errors)
        return data


class PropertySectionSerializer(serializers.Serializer):
    section = serializers.ChoiceField(choices=list(PROPERTY_FORM_SECTIONS))

    def validate(self, data):
        """Validate one form section in isolation."""
        fields, required = PROPERTY_FORM_SECTIONS[data['section']]
        payload = {key: value for key, value in self.initial_data.items() if key in fields}

        missing = {field: "This field is required." for field in required if payload.get(field) in (None, '')}
        if missing:
            raise serializers.ValidationError(missing)

        detail = PropertyDetailSerializer(data=payload, partial=True, context=self.context)
        detail.is_valid(raise_exception=True)
        return data


class PropertyStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=STATUS_CHOICES)


class ModificationRequestSerializer(serializers.Serializer):
    notes = serializers.CharField(max_length=2000)
