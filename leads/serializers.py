"""
API Serializers for leads, appointments, inquiries and requirements.
"""

from decimal import Decimal

from rest_framework import serializers

from accounts.models import User
from services.business_logic import PARTNER_ROLES, ROLE_CUSTOMER

from .models import (
    DEAL_STATUS_CHOICES,
    LEAD_FORWARDED,
    LEAD_STATUS_CHOICES,
    Appointment,
    Inquiry,
    Lead,
    Requirement,
)


# =============================================================================
# LEADS
# =============================================================================

class LeadSerializer(serializers.ModelSerializer):
    """
    Lead read/write serializer.

    partner and customer are addressed by user code. status, deal_status
    and forwarding fields change only through the workflow actions.
    """

    partner_id = serializers.SlugRelatedField(
        source='partner', slug_field='user_code', required=False, allow_null=True,
        queryset=User.objects.filter(role__in=PARTNER_ROLES)
    )
    partner_name = serializers.CharField(source='partner.display_name', read_only=True, default=None)
    customer_id = serializers.SlugRelatedField(
        source='customer', slug_field='user_code', required=False, allow_null=True,
        queryset=User.objects.filter(role=ROLE_CUSTOMER)
    )
    property_title = serializers.CharField(source='property.title', read_only=True, default=None)

    class Meta:
        model = Lead
        fields = [
            'id', 'name', 'email', 'phone', 'city', 'state', 'country', 'notes',
            'property', 'property_title', 'partner_id', 'partner_name', 'customer_id',
            'status', 'deal_status', 'forwarded_to', 'is_copy', 'original_lead',
            'sale_amount', 'earning_credited', 'created_at', 'updated_at',
        ]
        read_only_fields = [
            'id', 'status', 'deal_status', 'forwarded_to', 'is_copy', 'original_lead',
            'earning_credited', 'created_at', 'updated_at',
        ]

    def validate_phone(self, value):
        digits = ''.join(ch for ch in value if ch.isdigit())
        if len(digits) < 10:
            raise serializers.ValidationError("Phone number must have at least 10 digits.")
        return value


class LeadStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[c for c in LEAD_STATUS_CHOICES if c[0] != LEAD_FORWARDED])
    sale_amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=Decimal('0'), required=False, allow_null=True
    )


class DealStatusSerializer(serializers.Serializer):
    deal_status = serializers.ChoiceField(choices=DEAL_STATUS_CHOICES)


class ForwardLeadSerializer(serializers.Serializer):
    partner_id = serializers.SlugRelatedField(
        slug_field='user_code', queryset=User.objects.filter(role__in=PARTNER_ROLES)
    )


class ReassignConsultantSerializer(serializers.Serializer):
    customer_id = serializers.SlugRelatedField(
        slug_field='user_code', queryset=User.objects.filter(role=ROLE_CUSTOMER)
    )
    partner_id = serializers.SlugRelatedField(
        slug_field='user_code', queryset=User.objects.filter(role__in=PARTNER_ROLES)
    )


# =============================================================================
# APPOINTMENTS
# =============================================================================

class AppointmentSerializer(serializers.ModelSerializer):
    lead_name = serializers.CharField(source='lead.name', read_only=True)
    property_title = serializers.CharField(source='property.title', read_only=True, default=None)
    partner_code = serializers.CharField(source='partner.user_code', read_only=True, default=None)

    class Meta:
        model = Appointment
        fields = [
            'id', 'lead', 'lead_name', 'property', 'property_title', 'partner_code', 'customer',
            'visit_date', 'status', 'notes', 'visit_proof', 'rejection_reason',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class ScheduleAppointmentSerializer(serializers.Serializer):
    visit_date = serializers.DateTimeField()
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class VisitProofSerializer(serializers.Serializer):
    visit_proof = serializers.FileField()


class AppointmentReviewSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=['verify', 'reject'])
    reason = serializers.CharField(required=False, allow_blank=True, default='')

    def validate(self, data):
        if data['action'] == 'reject' and not data['reason'].strip():
            raise serializers.ValidationError({'reason': "A reason is required to reject a visit."})
        return data


# =============================================================================
# INQUIRIES AND REQUIREMENTS
# =============================================================================

class InquirySerializer(serializers.ModelSerializer):
    class Meta:
        model = Inquiry
        fields = ['id', 'name', 'email', 'phone', 'message', 'status', 'created_at']
        read_only_fields = ['id', 'created_at']


class RequirementSerializer(serializers.ModelSerializer):
    amenities = serializers.ListField(child=serializers.CharField(max_length=100), required=False)

    class Meta:
        model = Requirement
        fields = [
            'id', 'name', 'email', 'phone', 'property_type', 'preferred_location',
            'min_budget', 'max_budget', 'min_size', 'max_size', 'furnishing', 'amenities',
            'created_at',
        ]
        read_only_fields = ['id', 'created_at']

    def validate(self, data):
        errors = {}
        if data['min_budget'] > data['max_budget']:
            errors['max_budget'] = "Maximum budget must be greater than or equal to minimum budget."
        min_size, max_size = data.get('min_size'), data.get('max_size')
        if min_size is not None and max_size is not None and min_size > max_size:
            errors['max_size'] = "Maximum size must be greater than or equal to minimum size."
        if errors:
            raise serializers.ValidationError(errors)
        return data
