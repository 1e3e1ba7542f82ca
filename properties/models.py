"""
Properties models for the DealFlow platform.

This module implements the listing catalogue:
- PropertyType: admin-managed property types grouped by category
- Property: a listing, captured by a ten-section form (catalog, slides,
  overview, dimensions, amenities, interiors, location, connectivity,
  pricing, contact) plus admin workflow fields
- PropertySlide: ordered slideshow images of a listing

Listings created by non-admins start in 'Pending Verification' and only
become visible to partners and the public once an admin verifies them.
"""

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from decimal import Decimal
import logging

logger = logging.getLogger(__name__)


# =============================================================================
# CHOICES
# =============================================================================

STATUS_PENDING = 'Pending Verification'
STATUS_FOR_SALE = 'For Sale'
STATUS_UNDER_CONTRACT = 'Under Contract'
STATUS_SOLD = 'Sold'

STATUS_CHOICES = [
    (STATUS_PENDING, 'Pending Verification'),
    (STATUS_FOR_SALE, 'For Sale'),
    (STATUS_UNDER_CONTRACT, 'Under Contract'),
    (STATUS_SOLD, 'Sold'),
]

# Allowed admin status changes after verification
STATUS_TRANSITIONS = {
    STATUS_PENDING: [STATUS_FOR_SALE],
    STATUS_FOR_SALE: [STATUS_UNDER_CONTRACT, STATUS_SOLD],
    STATUS_UNDER_CONTRACT: [STATUS_FOR_SALE, STATUS_SOLD],
    STATUS_SOLD: [],
}

CATEGORY_CHOICES = [
    ('Residential', 'Residential'),
    ('Commercial', 'Commercial'),
    ('Land', 'Land'),
    ('Industrial', 'Industrial'),
    ('Agriculture', 'Agriculture'),
    ('Rental', 'Rental'),
    ('Other', 'Other'),
]

AGE_CHOICES = [
    ('New', 'New'),
    ('<1 year', '<1 year'),
    ('1 - 5 years', '1 - 5 years'),
    ('5 - 10 years', '5 - 10 years'),
    ('10+ years', '10+ years'),
]

CATALOG_TYPE_CHOICES = [
    ('New Project', 'New Project'),
    ('Project', 'Project'),
    ('Resales', 'Resales'),
    ('Rental', 'Rental'),
    ('Other', 'Other'),
]

UNIT_CHOICES = [
    ('sq. ft', 'sq. ft'),
    ('sq. m', 'sq. m'),
    ('acres', 'acres'),
    ('other', 'other'),
]

FURNISHING_CHOICES = [
    ('fully', 'Fully furnished'),
    ('semi', 'Semi furnished'),
    ('unfurnished', 'Unfurnished'),
]

FLOORING_CHOICES = [
    ('vitrified', 'Vitrified'),
    ('marble', 'Marble'),
    ('wood', 'Wood'),
    ('other', 'Other'),
]

KITCHEN_CHOICES = [
    ('modular', 'Modular'),
    ('normal', 'Normal'),
]

PRICE_TYPE_CHOICES = [
    ('fixed', 'Fixed'),
    ('negotiable', 'Negotiable'),
    ('auction', 'Auction'),
]

LISTED_BY_CHOICES = [
    ('Owner', 'Owner'),
    ('Agent', 'Agent'),
    ('Builder', 'Builder'),
    ('Team', 'Team'),
]

CONTACT_TIME_CHOICES = [
    ('Morning', 'Morning'),
    ('Afternoon', 'Afternoon'),
    ('Evening', 'Evening'),
]


# =============================================================================
# PROPERTY TYPE
# =============================================================================

class PropertyType(models.Model):
    """Admin-managed type such as Apartment, Villa or Plot."""

    name = models.CharField(max_length=100)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['category', 'name']
        verbose_name = 'Property Type'
        verbose_name_plural = 'Property Types'
        constraints = [
            models.UniqueConstraint(fields=['category', 'name'], name='unique_property_type_per_category'),
        ]

    def __str__(self):
        return f"{self.name} ({self.category})"


# =============================================================================
# PROPERTY
# =============================================================================

class Property(models.Model):
    """
    A real-estate listing.

    Dimension fields come in pairs with an is_*_enabled flag; a disabled
    dimension is hidden from the listing page even if a value is stored.
    """

    # Catalog
    title = models.CharField(max_length=255)
    meta_description = models.TextField(blank=True)
    meta_keywords = models.CharField(max_length=500, blank=True)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, db_index=True)
    property_type = models.ForeignKey(
        PropertyType,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='properties'
    )
    property_age = models.CharField(max_length=20, choices=AGE_CHOICES, blank=True)
    rera_approved = models.BooleanField(default=False)
    feature_image = models.FileField(upload_to='properties/features/', blank=True)
    catalog_type = models.CharField(max_length=20, choices=CATALOG_TYPE_CHOICES, blank=True, db_index=True)

    # Overview
    overview = models.TextField(blank=True)

    # Dimensions
    built_up_area = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    is_built_up_area_enabled = models.BooleanField(default=False)
    carpet_area = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    is_carpet_area_enabled = models.BooleanField(default=False)
    super_built_up_area = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    is_super_built_up_area_enabled = models.BooleanField(default=False)
    unit_of_measurement = models.CharField(max_length=10, choices=UNIT_CHOICES, default='sq. ft')
    total_floors = models.PositiveIntegerField(null=True, blank=True)
    is_total_floors_enabled = models.BooleanField(default=False)
    floor_number = models.IntegerField(null=True, blank=True)
    is_floor_number_enabled = models.BooleanField(default=False)
    bedrooms = models.PositiveIntegerField(null=True, blank=True)
    is_bedrooms_enabled = models.BooleanField(default=False)
    bathrooms = models.PositiveIntegerField(null=True, blank=True)
    is_bathrooms_enabled = models.BooleanField(default=False)
    balconies = models.PositiveIntegerField(null=True, blank=True)
    is_balconies_enabled = models.BooleanField(default=False)
    servant_room = models.BooleanField(default=False)
    parking_spaces = models.PositiveIntegerField(null=True, blank=True)
    is_parking_spaces_enabled = models.BooleanField(default=False)

    # Amenities
    amenities = models.JSONField(default=list, blank=True)

    # Interiors
    furnishing_status = models.CharField(max_length=20, choices=FURNISHING_CHOICES, blank=True)
    flooring_type = models.CharField(max_length=20, choices=FLOORING_CHOICES, blank=True)
    kitchen_type = models.CharField(max_length=20, choices=KITCHEN_CHOICES, blank=True)
    furniture_included = models.TextField(blank=True)

    # Location
    locality = models.CharField(max_length=200, blank=True)
    address_line = models.CharField(max_length=500, blank=True)
    city = models.CharField(max_length=100, db_index=True)
    state = models.CharField(max_length=100, db_index=True)
    country = models.CharField(max_length=100, default='India')
    pincode = models.CharField(max_length=10, blank=True)
    landmark = models.CharField(max_length=200, blank=True)
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)

    # Connectivity
    bus_stop = models.CharField(max_length=100, blank=True)
    metro_station = models.CharField(max_length=100, blank=True)
    hospital_distance = models.CharField(max_length=100, blank=True)
    mall_distance = models.CharField(max_length=100, blank=True)
    airport_distance = models.CharField(max_length=100, blank=True)
    school_distance = models.CharField(max_length=100, blank=True)
    other_connectivity = models.TextField(blank=True)

    # Pricing
    listing_price = models.DecimalField(
        max_digits=14, decimal_places=2, validators=[MinValueValidator(Decimal('0'))]
    )
    price_type = models.CharField(max_length=20, choices=PRICE_TYPE_CHOICES, default='fixed')
    maintenance_charge = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    security_deposit = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    booking_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    registration_charge = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    loan_available = models.BooleanField(default=False)

    # Contact
    listed_by = models.CharField(max_length=20, choices=LISTED_BY_CHOICES, default='Owner')
    contact_name = models.CharField(max_length=200)
    contact_phone = models.CharField(max_length=20)
    contact_alt_phone = models.CharField(max_length=20, blank=True)
    contact_email = models.EmailField(db_index=True)
    agency_name = models.CharField(max_length=200, blank=True)
    rera_id = models.CharField(max_length=100, blank=True)
    contact_time = models.CharField(max_length=20, choices=CONTACT_TIME_CHOICES, blank=True)

    # Admin
    status = models.CharField(max_length=30, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    views = models.PositiveIntegerField(default=0)
    modification_notes = models.TextField(blank=True)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='properties'
    )
    earning_rules = models.JSONField(
        default=dict,
        blank=True,
        help_text="Per partner role: {'affiliate': {'type': 'flat_amount', 'value': '5000'}}"
    )

    # Metadata
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'Property'
        verbose_name_plural = 'Properties'
        indexes = [
            models.Index(fields=['status', 'category'], name='properties__status_5b1c7e_idx'),
            models.Index(fields=['city', 'state'], name='properties__city_8d2f41_idx'),
        ]

    def __str__(self):
        return f"{self.title} ({self.status})"

    @property
    def full_address(self):
        """Comma separated address used for geocoding and display."""
        parts = [self.address_line, self.locality, self.city, self.state, self.pincode, self.country]
        return ', '.join(p for p in parts if p)

    @property
    def has_coordinates(self):
        return self.latitude is not None and self.longitude is not None

    @property
    def area_sq_ft(self):
        """The first enabled area measured in square feet, for per sq ft earnings."""
        if self.unit_of_measurement != 'sq. ft':
            return None
        for enabled, value in (
            (self.is_super_built_up_area_enabled, self.super_built_up_area),
            (self.is_built_up_area_enabled, self.built_up_area),
            (self.is_carpet_area_enabled, self.carpet_area),
        ):
            if enabled and value:
                return value
        return None

    def can_transition_to(self, new_status):
        return new_status in STATUS_TRANSITIONS.get(self.status, [])


class PropertySlide(models.Model):
    """One slideshow image of a listing."""

    property = models.ForeignKey(Property, on_delete=models.CASCADE, related_name='slides')
    title = models.CharField(max_length=200, blank=True)
    image = models.FileField(upload_to='properties/slides/')
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ['property', 'position', 'id']
        verbose_name = 'Property Slide'
        verbose_name_plural = 'Property Slides'

    def __str__(self):
        return self.title or f"Slide {self.position}"
