"""
Leads models for the DealFlow platform.

- Lead: a prospective buyer for a listing, owned by a partner, with a
  sales status and a deal (booking) status. Team leads can forward a
  lead to a team member, which creates a copy owned by the member.
- Appointment: a site visit scheduled from a lead
- Inquiry: an enquiry submitted on a partner's micro-website
- Requirement: a property requirement posted by a customer
"""

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


# =============================================================================
# LEAD STATUSES
# =============================================================================

LEAD_NEW = 'New lead'
LEAD_CONTACTED = 'Contacted'
LEAD_INTERESTED = 'Interested'
LEAD_VISIT_SCHEDULED = 'Site visit scheduled'
LEAD_VISITED = 'Site visited'
LEAD_NEGOTIATION = 'In negotiation'
LEAD_BOOKING_CONFIRMED = 'Booking confirmed'
LEAD_DEAL_CLOSED = 'Deal closed'
LEAD_FOLLOW_UP = 'Follow-up required'
LEAD_LOST = 'Lost lead'
LEAD_FORWARDED = 'Forwarded'

LEAD_STATUS_CHOICES = [(s, s) for s in [
    LEAD_NEW,
    LEAD_CONTACTED,
    LEAD_INTERESTED,
    LEAD_VISIT_SCHEDULED,
    LEAD_VISITED,
    LEAD_NEGOTIATION,
    LEAD_BOOKING_CONFIRMED,
    LEAD_DEAL_CLOSED,
    LEAD_FOLLOW_UP,
    LEAD_LOST,
    LEAD_FORWARDED,
]]


# =============================================================================
# DEAL STATUSES
# =============================================================================

DEAL_NEW = 'New lead'
DEAL_BOOKING_FORM_FILLED = 'booking form filled'
DEAL_REGISTRATION_DONE = 'registration done'
DEAL_HANDOVER = 'handover/possession given'
DEAL_CANCELLED = 'booking cancelled'

DEAL_STATUSES = [
    DEAL_NEW,
    'Contacted',
    'Interested',
    'site visit scheduled',
    'site visit done',
    'negotiation in progress',
    DEAL_BOOKING_FORM_FILLED,
    'booking amount received',
    'property reserved',
    'kyc documents collected',
    'agreement drafted',
    'agreement signed',
    'part payment pending',
    'payment in progress',
    DEAL_REGISTRATION_DONE,
    DEAL_HANDOVER,
    DEAL_CANCELLED,
]

DEAL_STATUS_CHOICES = [(s, s) for s in DEAL_STATUSES]

# Deal stages shown on the booking management board
ACTIVE_DEAL_STAGES = DEAL_STATUSES[
    DEAL_STATUSES.index(DEAL_BOOKING_FORM_FILLED):DEAL_STATUSES.index(DEAL_REGISTRATION_DONE) + 1
]


# =============================================================================
# LEAD
# =============================================================================

class Lead(models.Model):
    """A prospective buyer, optionally linked to a listing and a registered customer."""

    # Declared before the listing FK, which shadows the builtin inside the class body.
    @property
    def is_forwarded(self):
        return self.status == LEAD_FORWARDED

    name = models.CharField(max_length=200)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=20)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    country = models.CharField(max_length=100, default='India')
    notes = models.TextField(blank=True)

    property = models.ForeignKey(
        'properties.Property',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='leads'
    )
    partner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='leads'
    )
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='customer_leads'
    )

    status = models.CharField(max_length=30, choices=LEAD_STATUS_CHOICES, default=LEAD_NEW, db_index=True)
    deal_status = models.CharField(max_length=40, choices=DEAL_STATUS_CHOICES, default=DEAL_NEW, db_index=True)

    # Forwarding
    forwarded_to = models.JSONField(
        null=True,
        blank=True,
        help_text="{'partner_id': ..., 'partner_name': ..., 'lead_copy_id': ...}"
    )
    is_copy = models.BooleanField(default=False)
    original_lead = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='copies'
    )

    # Closing
    sale_amount = models.DecimalField(
        max_digits=14, decimal_places=2, null=True, blank=True,
        validators=[MinValueValidator(Decimal('0'))]
    )
    earning_credited = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['partner', 'status'], name='leads_lead_partner_3f6c2d_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.status})"


# =============================================================================
# APPOINTMENT
# =============================================================================

class Appointment(models.Model):
    """A site visit for a lead."""

    STATUS_SCHEDULED = 'Scheduled'
    STATUS_COMPLETED = 'Completed'
    STATUS_CANCELLED = 'Cancelled'
    STATUS_PENDING_VERIFICATION = 'Pending Verification'
    STATUS_REJECTED = 'Rejected'

    STATUS_CHOICES = [
        (STATUS_SCHEDULED, 'Scheduled'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
        (STATUS_PENDING_VERIFICATION, 'Pending Verification'),
        (STATUS_REJECTED, 'Rejected'),
    ]

    lead = models.ForeignKey(Lead, on_delete=models.CASCADE, related_name='appointments')
    property = models.ForeignKey(
        'properties.Property',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='appointments'
    )
    partner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='appointments'
    )
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='customer_appointments'
    )
    visit_date = models.DateTimeField()
    status = models.CharField(max_length=30, choices=STATUS_CHOICES, default=STATUS_SCHEDULED, db_index=True)
    notes = models.TextField(blank=True)
    visit_proof = models.FileField(upload_to='appointments/proofs/', blank=True)
    rejection_reason = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-visit_date']

    def __str__(self):
        return f"Visit for {self.lead.name} on {self.visit_date:%Y-%m-%d} ({self.status})"


# =============================================================================
# INQUIRY
# =============================================================================

class Inquiry(models.Model):
    """An enquiry submitted on a partner's micro-website."""

    STATUS_NEW = 'New'
    STATUS_CONTACTED = 'Contacted'
    STATUS_CLOSED = 'Closed'

    STATUS_CHOICES = [
        (STATUS_NEW, 'New'),
        (STATUS_CONTACTED, 'Contacted'),
        (STATUS_CLOSED, 'Closed'),
    ]

    partner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='inquiries')
    name = models.CharField(max_length=200)
    email = models.EmailField()
    phone = models.CharField(max_length=20)
    message = models.TextField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_NEW)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name_plural = 'Inquiries'

    def __str__(self):
        return f"{self.name} -> {self.partner_id} ({self.status})"


# =============================================================================
# REQUIREMENT
# =============================================================================

class Requirement(models.Model):
    """A property requirement posted by a customer."""

    FURNISHING_CHOICES = [
        ('unfurnished', 'Unfurnished'),
        ('semi-furnished', 'Semi-furnished'),
        ('fully-furnished', 'Fully-furnished'),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='requirements'
    )
    name = models.CharField(max_length=200)
    email = models.EmailField()
    phone = models.CharField(max_length=20)
    property_type = models.CharField(max_length=100)
    preferred_location = models.CharField(max_length=200)
    min_budget = models.DecimalField(max_digits=14, decimal_places=2, validators=[MinValueValidator(Decimal('0'))])
    max_budget = models.DecimalField(max_digits=14, decimal_places=2, validators=[MinValueValidator(Decimal('0'))])
    min_size = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    max_size = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    furnishing = models.CharField(max_length=20, choices=FURNISHING_CHOICES, blank=True)
    amenities = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.name}: {self.property_type} in {self.preferred_location}"
