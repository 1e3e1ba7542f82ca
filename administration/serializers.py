"""
Serializers for platform settings.

Each AppSetting key has its own serializer so admins get field-level
validation errors instead of a free-form JSON editor.
"""

from decimal import Decimal

from rest_framework import serializers

from services import BusinessRuleError
from services.business_logic import PARTNER_ROLES, validate_earning_rule

MAX_CATALOG_ITEMS = 6


class MaintenanceSettingSerializer(serializers.Serializer):
    is_enabled = serializers.BooleanField()
    message = serializers.CharField(max_length=500, allow_blank=True, required=False)


class RegistrationFeesSerializer(serializers.Serializer):
    """One non-negative fee per partner role."""

    affiliate = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'), required=False)
    super_affiliate = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'), required=False)
    associate = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'), required=False)
    channel = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'), required=False)
    franchisee = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'), required=False)

    def to_storage(self):
        return {role: str(amount) for role, amount in self.validated_data.items()}


class EarningRuleSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=[
        'reward_points', 'commission_percentage', 'flat_amount', 'per_sq_ft'
    ])
    value = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0'))
    total_sq_ft = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)

    def validate(self, attrs):
        try:
            return validate_earning_rule(attrs)
        except BusinessRuleError as e:
            raise serializers.ValidationError({e.field or 'non_field_errors': [str(e)]})


class EarningRulesSerializer(serializers.Serializer):
    """Earning rule per partner role; roles without a rule are omitted."""

    affiliate = EarningRuleSerializer(required=False)
    super_affiliate = EarningRuleSerializer(required=False)
    associate = EarningRuleSerializer(required=False)
    channel = EarningRuleSerializer(required=False)
    franchisee = EarningRuleSerializer(required=False)

    def to_storage(self):
        return {role: dict(rule) for role, rule in self.validated_data.items() if role in PARTNER_ROLES}


class BusinessProfileSerializer(serializers.Serializer):
    business_name = serializers.CharField(max_length=200, allow_blank=True, required=False)
    business_logo = serializers.URLField(allow_blank=True, required=False)


class ContactDetailsSerializer(serializers.Serializer):
    contact_name = serializers.CharField(max_length=200, allow_blank=True, required=False)
    phone = serializers.CharField(max_length=20, allow_blank=True, required=False)
    email = serializers.EmailField(allow_blank=True, required=False)
    address = serializers.CharField(allow_blank=True, required=False)


class CatalogField(serializers.ListField):
    """Up to six property ids."""

    def __init__(self, **kwargs):
        kwargs.setdefault('child', serializers.IntegerField(min_value=1))
        kwargs.setdefault('max_length', MAX_CATALOG_ITEMS)
        kwargs.setdefault('required', False)
        super().__init__(**kwargs)


class WebsiteDefaultsSerializer(serializers.Serializer):
    business_profile = BusinessProfileSerializer(required=False)
    contact_details = ContactDetailsSerializer(required=False)
    featured_catalog = CatalogField()
    partner_featured_catalog = CatalogField()
    recommended_catalog = CatalogField()

    def to_storage(self, current):
        merged = dict(current)
        for key, value in self.validated_data.items():
            merged[key] = dict(value) if isinstance(value, dict) else list(value)
        return merged


class DashboardStatsSerializer(serializers.Serializer):
    partners_by_role = serializers.DictField(child=serializers.IntegerField())
    partners_by_status = serializers.DictField(child=serializers.IntegerField())
    sellers = serializers.IntegerField()
    customers = serializers.IntegerField()
    listings_by_status = serializers.DictField(child=serializers.IntegerField())
    leads = serializers.IntegerField()
    pending_withdrawals = serializers.IntegerField()
