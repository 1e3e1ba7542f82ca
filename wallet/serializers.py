"""
API Serializers for the wallet app.
"""

from decimal import Decimal

from rest_framework import serializers

from accounts.models import User

from .models import (
    Payable,
    Receivable,
    RewardOffer,
    RewardTransaction,
    Wallet,
    WalletTransaction,
    WithdrawalRequest,
)
from .services import MANAGE_ACTIONS, MANAGE_TOPUP


class UserCodeField(serializers.SlugRelatedField):
    """Refers to a user by public user code."""

    def __init__(self, **kwargs):
        kwargs.setdefault('slug_field', 'user_code')
        kwargs.setdefault('queryset', User.objects.all())
        super().__init__(**kwargs)


# =============================================================================
# WALLET
# =============================================================================

class WalletSerializer(serializers.ModelSerializer):
    user_code = serializers.CharField(source='user.user_code', read_only=True)

    class Meta:
        model = Wallet
        fields = ['user_code', 'balance', 'reward_points', 'updated_at']
        read_only_fields = fields


class WalletTransactionSerializer(serializers.ModelSerializer):
    from_user_code = serializers.CharField(source='from_user.user_code', read_only=True, default=None)
    to_user_code = serializers.CharField(source='to_user.user_code', read_only=True, default=None)

    class Meta:
        model = WalletTransaction
        fields = [
            'id', 'type', 'amount', 'from_user_code', 'to_user_code', 'payment_method',
            'proof', 'status', 'balance_after', 'notes', 'lead', 'created_at',
        ]
        read_only_fields = fields


class ManageWalletSerializer(serializers.Serializer):
    """Admin top-up or credit, confirmed with the admin's password."""

    transaction_type = serializers.ChoiceField(choices=MANAGE_ACTIONS)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('1'))
    recipient_id = UserCodeField(required=False, allow_null=True)
    payment_method = serializers.ChoiceField(choices=WalletTransaction.PAYMENT_METHOD_CHOICES)
    proof = serializers.FileField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    admin_password = serializers.CharField(write_only=True, style={'input_type': 'password'})

    def validate(self, data):
        if data['transaction_type'] != MANAGE_TOPUP and not data.get('recipient_id'):
            raise serializers.ValidationError({'recipient_id': "Recipient ID is required."})
        return data


# =============================================================================
# REWARDS
# =============================================================================

class RewardTransactionSerializer(serializers.ModelSerializer):
    from_user_code = serializers.CharField(source='from_user.user_code', read_only=True, default=None)
    to_user_code = serializers.CharField(source='to_user.user_code', read_only=True, default=None)
    offer_title = serializers.CharField(source='offer.title', read_only=True, default=None)

    class Meta:
        model = RewardTransaction
        fields = ['id', 'type', 'points', 'from_user_code', 'to_user_code', 'offer', 'offer_title',
                  'notes', 'created_at']
        read_only_fields = fields


class SendRewardSerializer(serializers.Serializer):
    partner_id = UserCodeField()
    points = serializers.IntegerField(min_value=1)
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class ClaimRewardSerializer(serializers.Serializer):
    points = serializers.IntegerField(min_value=1)


class RewardOfferSerializer(serializers.ModelSerializer):
    details = serializers.CharField(min_length=10)

    class Meta:
        model = RewardOffer
        fields = ['id', 'offer_code', 'title', 'image', 'points', 'details', 'is_active', 'created_at']
        read_only_fields = ['id', 'offer_code', 'created_at']


# =============================================================================
# WITHDRAWALS
# =============================================================================

class WithdrawalRequestSerializer(serializers.ModelSerializer):
    user_code = serializers.CharField(source='user.user_code', read_only=True)
    user_name = serializers.CharField(source='user.display_name', read_only=True)
    seller_id = UserCodeField(source='seller', required=False, allow_null=True)

    class Meta:
        model = WithdrawalRequest
        fields = [
            'id', 'user_code', 'user_name', 'seller_id', 'amount', 'notes', 'status',
            'rejection_reason', 'requested_at', 'processed_at',
        ]
        read_only_fields = ['id', 'status', 'rejection_reason', 'requested_at', 'processed_at']


class WithdrawalDecisionSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=['approve', 'reject'])
    reason = serializers.CharField(required=False, allow_blank=True, default='')


# =============================================================================
# BILLING
# =============================================================================

class BillingEntrySerializer(serializers.ModelSerializer):
    user_id = UserCodeField(source='user', required=False, allow_null=True)
    party_name = serializers.CharField(required=False, allow_blank=True)

    class Meta:
        fields = ['id', 'user_id', 'party_name', 'amount', 'notes', 'date', 'status']
        read_only_fields = ['id', 'date']

    def validate(self, data):
        user = data.get('user')
        if not data.get('party_name'):
            if user is None and not (self.instance and self.instance.party_name):
                raise serializers.ValidationError({'party_name': "Provide a user ID or a party name."})
            if user is not None:
                data['party_name'] = user.display_name
        return data


class PayableSerializer(BillingEntrySerializer):
    class Meta(BillingEntrySerializer.Meta):
        model = Payable


class ReceivableSerializer(BillingEntrySerializer):
    class Meta(BillingEntrySerializer.Meta):
        model = Receivable
