"""
API Serializers for DealFlow accounts.

This module defines:
- Read serializers for users (summary, detail, own profile)
- Registration serializers (quick sign-up, customer OTP sign-up, sub-admins)
- Step serializers for the partner (4 steps) and seller (3 steps)
  onboarding wizards; the final submission serializers inherit every step
  so a submission is validated exactly like the steps were
- Lifecycle, upgrade and team request payloads
- JWT token serializer that refuses accounts which are not active
"""

import logging

from rest_framework import exceptions, serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from services.business_logic import (
    ADMIN_PERMISSIONS,
    PARTNER_ROLES,
    ROLE_SELLER,
    get_role_display_name,
)

from .models import GENDER_CHOICES, RegistrationPayment, TeamRequest, User, UserDocument

logger = logging.getLogger(__name__)


# =============================================================================
# USER READ SERIALIZERS
# =============================================================================

class UserSummarySerializer(serializers.ModelSerializer):
    """Compact user representation for nested and list payloads."""

    role_display = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'id', 'user_code', 'name', 'email', 'phone', 'role', 'role_display',
            'status', 'city', 'state',
        ]
        read_only_fields = fields

    def get_role_display(self, obj):
        return get_role_display_name(obj.role)


class UserDetailSerializer(serializers.ModelSerializer):
    """Everything an admin sees about a user."""

    role_display = serializers.SerializerMethodField()
    team_lead = UserSummarySerializer(read_only=True)

    class Meta:
        model = User
        fields = [
            'id', 'user_code', 'name', 'first_name', 'last_name', 'email', 'phone', 'whatsapp',
            'role', 'role_display', 'status', 'profile_image', 'dob', 'gender', 'qualification',
            'address', 'city', 'state', 'pincode',
            'business_name', 'business_logo', 'business_type', 'gstn', 'business_age', 'area_covered',
            'aadhar_number', 'aadhar_file', 'pan_number', 'pan_file', 'rera_number', 'rera_certificate',
            'kyc_status', 'permissions', 'payment_status', 'payment_details',
            'deactivation_reason', 'reactivation_reason', 'suspension_reason', 'rejection_reason',
            'team_lead', 'upgrade_request', 'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_role_display(self, obj):
        return get_role_display_name(obj.role)


class ProfileSerializer(serializers.ModelSerializer):
    """
    A user's own profile.

    Role, status, KYC, payment and permission fields are read-only here;
    they only change through admin workflows.
    """

    role_display = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'id', 'user_code', 'email', 'role', 'role_display', 'status', 'kyc_status', 'payment_status',
            'permissions', 'name', 'first_name', 'last_name', 'phone', 'whatsapp', 'profile_image',
            'dob', 'gender', 'qualification', 'address', 'city', 'state', 'pincode',
            'business_name', 'business_logo', 'business_type', 'gstn', 'business_age', 'area_covered',
            'team_lead', 'upgrade_request', 'created_at',
        ]
        read_only_fields = [
            'id', 'user_code', 'email', 'role', 'role_display', 'status', 'kyc_status',
            'payment_status', 'permissions', 'team_lead', 'upgrade_request', 'created_at',
        ]

    def get_role_display(self, obj):
        return get_role_display_name(obj.role)


class RegistrationPaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = RegistrationPayment
        fields = [
            'id', 'merchant_transaction_id', 'amount', 'status',
            'provider_reference_id', 'gateway_transaction_id', 'created_at',
        ]
        read_only_fields = fields


# =============================================================================
# REGISTRATION SERIALIZERS
# =============================================================================

class QuickRegistrationSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    email = serializers.EmailField()
    password = serializers.CharField(min_length=6, write_only=True)
    role = serializers.ChoiceField(choices=PARTNER_ROLES + [ROLE_SELLER])


class SendOTPSerializer(serializers.Serializer):
    email = serializers.EmailField()
    name = serializers.CharField(max_length=200, required=False, allow_blank=True)


class CustomerRegistrationSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    email = serializers.EmailField()
    phone = serializers.CharField(min_length=10, max_length=20)
    password = serializers.CharField(min_length=6, write_only=True)
    otp = serializers.RegexField(r'^\d{6}$', error_messages={'invalid': 'Enter the 6-digit OTP.'})


class CustomerVerificationSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=['approve', 'reject'])


class SubAdminSerializer(serializers.Serializer):
    first_name = serializers.CharField(max_length=150)
    last_name = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(min_length=6, write_only=True)
    permissions = serializers.ListField(
        child=serializers.ChoiceField(choices=ADMIN_PERMISSIONS),
        allow_empty=False,
        error_messages={'empty': 'Select at least one permission.'},
    )


# =============================================================================
# ONBOARDING WIZARD STEPS
# =============================================================================

class PasswordConfirmationMixin:
    """Adds the password/confirm_password check to a step's validate()."""

    def validate(self, attrs):
        attrs = super().validate(attrs)
        if attrs.get('password') != attrs.get('confirm_password'):
            raise serializers.ValidationError({'confirm_password': ["Passwords don't match."]})
        return attrs


class SellerPersonalStepSerializer(PasswordConfirmationMixin, serializers.Serializer):
    """Seller step 1: who the seller is and how to reach them."""

    full_name = serializers.CharField(max_length=200)
    email = serializers.EmailField()
    phone = serializers.CharField(min_length=10, max_length=20)
    dob = serializers.DateField()
    password = serializers.CharField(min_length=6, write_only=True)
    confirm_password = serializers.CharField(write_only=True)
    address = serializers.CharField()
    city = serializers.CharField(max_length=100)
    state = serializers.CharField(max_length=100)
    pincode = serializers.CharField(min_length=6, max_length=10)


class PartnerPersonalStepSerializer(SellerPersonalStepSerializer):
    """Partner step 1 adds gender, qualification and an optional photo."""

    gender = serializers.ChoiceField(choices=GENDER_CHOICES)
    qualification = serializers.CharField(max_length=100)
    profile_image = serializers.FileField(required=False, allow_null=True)


class PartnerBusinessStepSerializer(serializers.Serializer):
    business_type = serializers.CharField(max_length=100)
    partner_role = serializers.ChoiceField(choices=PARTNER_ROLES)
    gstn = serializers.CharField(max_length=20, required=False, allow_blank=True)
    business_age = serializers.IntegerField(min_value=0)
    area_covered = serializers.CharField(max_length=200)
    business_logo = serializers.FileField(required=False, allow_null=True)


class SellerBusinessStepSerializer(serializers.Serializer):
    business_name = serializers.CharField(max_length=200)
    business_type = serializers.CharField(max_length=100)
    business_logo = serializers.FileField(required=False, allow_null=True)


class KYCStepSerializer(serializers.Serializer):
    aadhar_number = serializers.CharField(min_length=12, max_length=20)
    aadhar_file = serializers.FileField()
    pan_number = serializers.CharField(min_length=10, max_length=20)
    pan_file = serializers.FileField()


class SellerKYCStepSerializer(KYCStepSerializer):
    rera_number = serializers.CharField(max_length=50, required=False, allow_blank=True)
    rera_certificate = serializers.FileField(required=False, allow_null=True)


class ReviewStepSerializer(serializers.Serializer):
    """Final review step; nothing new is collected."""
    pass


class PartnerOnboardingSerializer(PartnerPersonalStepSerializer, PartnerBusinessStepSerializer,
                                  KYCStepSerializer):
    """Full partner submission: every step re-validated together."""
    pass


class SellerOnboardingSerializer(SellerPersonalStepSerializer, SellerBusinessStepSerializer,
                                 SellerKYCStepSerializer):
    """Full seller submission: every step re-validated together."""
    pass


PARTNER_WIZARD_STEPS = {
    'personal': PartnerPersonalStepSerializer,
    'business': PartnerBusinessStepSerializer,
    'kyc': KYCStepSerializer,
    'review': ReviewStepSerializer,
}

SELLER_WIZARD_STEPS = {
    'personal': SellerPersonalStepSerializer,
    'business': SellerBusinessStepSerializer,
    'kyc': SellerKYCStepSerializer,
}


def get_step_serializer(steps, step):
    """
    Resolve a wizard step by name or 1-based number.

    Raises:
        ValidationError: For unknown steps
    """
    names = list(steps)
    key = str(step or '').strip().lower()
    if key.isdigit() and 1 <= int(key) <= len(names):
        key = names[int(key) - 1]
    if key not in steps:
        raise serializers.ValidationError({'step': [f"Unknown step. Choose one of: {', '.join(names)}."]})
    return steps[key]


# =============================================================================
# LIFECYCLE, UPGRADE AND TEAM PAYLOADS
# =============================================================================

class ReasonSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=1000, allow_blank=True, required=False, default='')


class SellerStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=['active', 'inactive'])


class KYCReviewSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=['verify', 'reject'])
    reason = serializers.CharField(max_length=1000, allow_blank=True, required=False, default='')


class UpgradeRequestSerializer(serializers.Serializer):
    new_role = serializers.ChoiceField(choices=PARTNER_ROLES)


class UpgradeDecisionSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=['approve', 'reject'])


class TeamRequestSerializer(serializers.ModelSerializer):
    requester = UserSummarySerializer(read_only=True)
    recipient = UserSummarySerializer(read_only=True)
    recipient_id = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.filter(role__in=PARTNER_ROLES),
        source='recipient',
        write_only=True,
    )

    class Meta:
        model = TeamRequest
        fields = ['id', 'requester', 'recipient', 'recipient_id', 'status', 'requested_at', 'responded_at']
        read_only_fields = ['id', 'requester', 'recipient', 'status', 'requested_at', 'responded_at']


class TeamRequestResponseSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=['accept', 'reject'])


# =============================================================================
# PERSONAL DOCUMENTS
# =============================================================================

class UserDocumentSerializer(serializers.ModelSerializer):
    class Meta:
        model = UserDocument
        fields = ['id', 'document_code', 'title', 'file', 'file_name', 'file_type', 'uploaded_at']
        read_only_fields = ['id', 'document_code', 'file_name', 'file_type', 'uploaded_at']


# =============================================================================
# AUTHENTICATION
# =============================================================================

class DealFlowTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    JWT login by email.

    Accounts that are inactive, suspended, rejected or still pending get a
    specific message instead of the generic credentials error.
    """

    def validate(self, attrs):
        email = (attrs.get(self.username_field) or '').strip().lower()
        attrs[self.username_field] = email

        user = User.objects.filter(email__iexact=email).first()
        if user is not None and user.check_password(attrs.get('password', '')) and not user.can_login:
            logger.warning(f"Login refused for {user.user_code}: status {user.status}")
            raise exceptions.AuthenticationFailed(
                f"Your account is {user.get_status_display().lower()}. Please contact support.",
                code='account_not_active',
            )

        data = super().validate(attrs)
        data['user'] = ProfileSerializer(self.user).data
        return data
