"""
Accounts models for the DealFlow platform.

This module implements the people on the platform and the records that
move them between states:
- User: admins, partners (five tiers), sellers and customers in one table,
  distinguished by role, with a public user_code (e.g. PAF482913)
- RegistrationPayment: registration fee attempts through the payment gateway
- TeamRequest: invitations from a team lead to an unattached partner
- UserDocument: files a user keeps in their personal document store

Status transitions live in accounts.services; models only hold state.
"""

import logging

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models

from services.business_logic import (
    DOCUMENT_ID_PREFIX,
    PARTNER_ROLES,
    ROLE_ADMIN,
    ROLE_CUSTOMER,
    ROLE_DISPLAY_NAMES,
    ROLE_SELLER,
    generate_unique_user_code,
)

logger = logging.getLogger(__name__)


# =============================================================================
# CHOICES
# =============================================================================

ROLE_CHOICES = [(role, ROLE_DISPLAY_NAMES[role]) for role in PARTNER_ROLES] + [
    (ROLE_ADMIN, 'Admin'),
    (ROLE_SELLER, 'Seller'),
    (ROLE_CUSTOMER, 'Customer'),
]

STATUS_ACTIVE = 'active'
STATUS_INACTIVE = 'inactive'
STATUS_PENDING = 'pending'
STATUS_PENDING_APPROVAL = 'pending_approval'
STATUS_PENDING_VERIFICATION = 'pending_verification'
STATUS_PENDING_UPGRADE = 'pending_upgrade'
STATUS_REJECTED = 'rejected'
STATUS_SUSPENDED = 'suspended'

STATUS_CHOICES = [
    (STATUS_ACTIVE, 'Active'),
    (STATUS_INACTIVE, 'Inactive'),
    (STATUS_PENDING, 'Pending'),
    (STATUS_PENDING_APPROVAL, 'Pending Approval'),
    (STATUS_PENDING_VERIFICATION, 'Pending Verification'),
    (STATUS_PENDING_UPGRADE, 'Pending Upgrade'),
    (STATUS_REJECTED, 'Rejected'),
    (STATUS_SUSPENDED, 'Suspended'),
]

# Statuses allowed to obtain API tokens
LOGIN_STATUSES = {STATUS_ACTIVE, STATUS_PENDING_UPGRADE}

PAYMENT_PAID = 'paid'
PAYMENT_PENDING = 'pending'
PAYMENT_PENDING_APPROVAL = 'pending_approval'
PAYMENT_NOT_REQUIRED = 'not_required'
PAYMENT_FAILED = 'failed'

PAYMENT_STATUS_CHOICES = [
    (PAYMENT_PAID, 'Paid'),
    (PAYMENT_PENDING, 'Pending'),
    (PAYMENT_PENDING_APPROVAL, 'Pending Approval'),
    (PAYMENT_NOT_REQUIRED, 'Not Required'),
    (PAYMENT_FAILED, 'Failed'),
]

KYC_VERIFIED = 'verified'
KYC_PENDING = 'pending'
KYC_REJECTED = 'rejected'

KYC_STATUS_CHOICES = [
    (KYC_VERIFIED, 'Verified'),
    (KYC_PENDING, 'Pending'),
    (KYC_REJECTED, 'Rejected'),
]

GENDER_CHOICES = [
    ('male', 'Male'),
    ('female', 'Female'),
    ('other', 'Other'),
]


# =============================================================================
# USER
# =============================================================================

class UserManager(BaseUserManager):
    """Email-keyed manager; every user gets a role-prefixed user_code."""

    use_in_migrations = True

    def get_by_natural_key(self, email):
        return self.get(email__iexact=email)

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError('An email address is required')
        email = self.normalize_email(email).lower()
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', False)
        extra_fields.setdefault('is_superuser', False)
        extra_fields.setdefault('role', ROLE_CUSTOMER)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', ROLE_ADMIN)
        extra_fields.setdefault('status', STATUS_ACTIVE)
        return self._create_user(email, password, **extra_fields)

    def partners(self):
        return self.filter(role__in=PARTNER_ROLES)

    def sellers(self):
        return self.filter(role=ROLE_SELLER)

    def customers(self):
        return self.filter(role=ROLE_CUSTOMER)


class User(AbstractUser):
    """
    A platform user.

    Partners, sellers, customers and admins share one table. Role-specific
    fields (business details, KYC documents, team lead) stay blank for
    roles that do not use them.
    """

    username = None
    email = models.EmailField(unique=True)

    user_code = models.CharField(
        max_length=20,
        unique=True,
        blank=True,
        help_text="Public identifier, role prefix + 6 digits (e.g. PAF482913)"
    )
    name = models.CharField(max_length=200, blank=True)
    phone = models.CharField(max_length=20, blank=True)
    whatsapp = models.CharField(max_length=20, blank=True)

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_CUSTOMER, db_index=True)
    status = models.CharField(max_length=30, choices=STATUS_CHOICES, default=STATUS_ACTIVE, db_index=True)

    # Personal details
    profile_image = models.FileField(upload_to='profiles/', blank=True)
    dob = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, blank=True)
    qualification = models.CharField(max_length=100, blank=True)
    address = models.TextField(blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    pincode = models.CharField(max_length=10, blank=True)

    # Business details
    business_name = models.CharField(max_length=200, blank=True)
    business_logo = models.FileField(upload_to='business_logos/', blank=True)
    business_type = models.CharField(max_length=100, blank=True)
    gstn = models.CharField(max_length=20, blank=True)
    business_age = models.PositiveIntegerField(null=True, blank=True)
    area_covered = models.CharField(max_length=200, blank=True)

    # KYC
    aadhar_number = models.CharField(max_length=20, blank=True)
    aadhar_file = models.FileField(upload_to='kyc/aadhar/', blank=True)
    pan_number = models.CharField(max_length=20, blank=True)
    pan_file = models.FileField(upload_to='kyc/pan/', blank=True)
    rera_number = models.CharField(max_length=50, blank=True)
    rera_certificate = models.FileField(upload_to='kyc/rera/', blank=True)
    kyc_status = models.CharField(max_length=20, choices=KYC_STATUS_CHOICES, default=KYC_PENDING)

    # Sub-admin permissions; an admin with an empty list has full access
    permissions = models.JSONField(default=list, blank=True)

    # Registration fee
    payment_status = models.CharField(max_length=20, choices=PAYMENT_STATUS_CHOICES, blank=True)
    payment_details = models.JSONField(null=True, blank=True)

    # Lifecycle notes
    deactivation_reason = models.TextField(blank=True)
    reactivation_reason = models.TextField(blank=True)
    suspension_reason = models.TextField(blank=True)
    rejection_reason = models.TextField(blank=True)

    team_lead = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='team_members'
    )
    upgrade_request = models.JSONField(
        null=True,
        blank=True,
        help_text="{'new_role': ..., 'requested_at': ...} while an upgrade is pending"
    )

    # Metadata
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        indexes = [
            models.Index(fields=['role', 'status'], name='accounts_us_role_2a9a8c_idx'),
        ]

    def __str__(self):
        return f"{self.display_name} ({self.user_code})"

    def save(self, *args, **kwargs):
        if self.email:
            self.email = self.email.strip().lower()
        if not self.user_code:
            self.user_code = generate_unique_user_code(self.role, User)
        if not self.name and (self.first_name or self.last_name):
            self.name = f"{self.first_name} {self.last_name}".strip()
        # Token issuance and JWT authentication both honour is_active
        self.is_active = self.status in LOGIN_STATUSES
        super().save(*args, **kwargs)

    # =========================================================================
    # ROLE HELPERS
    # =========================================================================

    @property
    def display_name(self):
        return self.name or f"{self.first_name} {self.last_name}".strip() or self.email

    @property
    def is_partner(self):
        return self.role in PARTNER_ROLES

    @property
    def is_seller(self):
        return self.role == ROLE_SELLER

    @property
    def is_customer(self):
        return self.role == ROLE_CUSTOMER

    @property
    def is_platform_admin(self):
        return self.role == ROLE_ADMIN or self.is_superuser

    @property
    def is_full_admin(self):
        return self.is_superuser or (self.role == ROLE_ADMIN and not self.permissions)

    def has_admin_permission(self, permission):
        if not self.is_platform_admin:
            return False
        return self.is_full_admin or permission in (self.permissions or [])

    @property
    def can_login(self):
        return self.status in LOGIN_STATUSES


# =============================================================================
# REGISTRATION PAYMENTS
# =============================================================================

class RegistrationPayment(models.Model):
    """One pay-page attempt for a partner's registration fee."""

    STATUS_INITIATED = 'initiated'
    STATUS_SUCCESS = 'success'
    STATUS_FAILED = 'failed'

    STATUS_CHOICES = [
        (STATUS_INITIATED, 'Initiated'),
        (STATUS_SUCCESS, 'Success'),
        (STATUS_FAILED, 'Failed'),
    ]

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='registration_payments')
    merchant_transaction_id = models.CharField(max_length=64, unique=True)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_INITIATED)
    provider_reference_id = models.CharField(max_length=100, blank=True)
    gateway_transaction_id = models.CharField(max_length=100, blank=True)
    callback_payload = models.JSONField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'Registration Payment'
        verbose_name_plural = 'Registration Payments'

    def __str__(self):
        return f"{self.merchant_transaction_id} ({self.status})"

    @property
    def is_final(self):
        return self.status != self.STATUS_INITIATED


# =============================================================================
# TEAM REQUESTS
# =============================================================================

class TeamRequest(models.Model):
    """A team lead's invitation for another partner to join their team."""

    STATUS_PENDING = 'pending'
    STATUS_ACCEPTED = 'accepted'
    STATUS_REJECTED = 'rejected'

    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_ACCEPTED, 'Accepted'),
        (STATUS_REJECTED, 'Rejected'),
    ]

    requester = models.ForeignKey(User, on_delete=models.CASCADE, related_name='sent_team_requests')
    recipient = models.ForeignKey(User, on_delete=models.CASCADE, related_name='received_team_requests')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    requested_at = models.DateTimeField(auto_now_add=True)
    responded_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['-requested_at']
        verbose_name = 'Team Request'
        verbose_name_plural = 'Team Requests'

    def __str__(self):
        return f"{self.requester.user_code} -> {self.recipient.user_code} ({self.status})"


# =============================================================================
# PERSONAL DOCUMENTS
# =============================================================================

class UserDocument(models.Model):
    """A file a user keeps in their own document store."""

    document_code = models.CharField(max_length=20, unique=True, editable=False)
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='documents')
    title = models.CharField(max_length=200)
    file = models.FileField(upload_to='accounts/documents/')
    file_name = models.CharField(max_length=255, blank=True)
    file_type = models.CharField(max_length=100, blank=True)
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-uploaded_at']
        verbose_name = 'User Document'
        verbose_name_plural = 'User Documents'

    def __str__(self):
        return f"{self.document_code}: {self.title}"

    def save(self, *args, **kwargs):
        if not self.document_code:
            self.document_code = generate_unique_user_code(DOCUMENT_ID_PREFIX, UserDocument, field='document_code')
        super().save(*args, **kwargs)
