"""
Wallet Admin - DealFlow Backend
Django admin configuration for wallets, ledgers, withdrawals and billing.

Ledger rows are read only; balances change through wallet.services.
"""

from django.contrib import admin

from .models import (
    Payable,
    Receivable,
    RewardOffer,
    RewardTransaction,
    Wallet,
    WalletTransaction,
    WithdrawalRequest,
)


# =============================================================================
# INLINE ADMIN CLASSES
# =============================================================================

class WalletTransactionInline(admin.TabularInline):
    model = WalletTransaction
    extra = 0
    fields = ['type', 'amount', 'balance_after', 'payment_method', 'created_at']
    readonly_fields = fields
    can_delete = False
    ordering = ['-created_at']

    def has_add_permission(self, request, obj=None):
        return False


# =============================================================================
# MAIN ADMIN CLASSES
# =============================================================================

@admin.register(Wallet)
class WalletAdmin(admin.ModelAdmin):
    list_display = ['user', 'balance', 'reward_points', 'updated_at']
    search_fields = ['user__user_code', 'user__email', 'user__name']
    readonly_fields = ['user', 'balance', 'reward_points', 'updated_at']
    inlines = [WalletTransactionInline]


@admin.register(WalletTransaction)
class WalletTransactionAdmin(admin.ModelAdmin):
    list_display = ['id', 'wallet', 'type', 'amount', 'balance_after', 'payment_method', 'created_at']
    list_filter = ['type', 'payment_method', 'created_at']
    search_fields = ['wallet__user__user_code', 'from_user__user_code', 'to_user__user_code']
    readonly_fields = [f.name for f in WalletTransaction._meta.fields]

    def has_add_permission(self, request):
        return False


@admin.register(RewardTransaction)
class RewardTransactionAdmin(admin.ModelAdmin):
    list_display = ['id', 'type', 'points', 'from_user', 'to_user', 'offer', 'created_at']
    list_filter = ['type', 'created_at']
    search_fields = ['from_user__user_code', 'to_user__user_code']
    readonly_fields = [f.name for f in RewardTransaction._meta.fields]

    def has_add_permission(self, request):
        return False


@admin.register(RewardOffer)
class RewardOfferAdmin(admin.ModelAdmin):
    list_display = ['offer_code', 'title', 'points', 'is_active', 'created_at']
    list_filter = ['is_active']
    search_fields = ['offer_code', 'title']
    readonly_fields = ['offer_code', 'created_at']


@admin.register(WithdrawalRequest)
class WithdrawalRequestAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'seller', 'amount', 'status', 'requested_at', 'processed_at']
    list_filter = ['status', 'requested_at']
    search_fields = ['user__user_code', 'seller__user_code']
    readonly_fields = ['status', 'processed_by', 'requested_at', 'processed_at']
    raw_id_fields = ['user', 'seller']


@admin.register(Payable, Receivable)
class BillingEntryAdmin(admin.ModelAdmin):
    list_display = ['party_name', 'user', 'amount', 'status', 'date']
    list_filter = ['status', 'date']
    search_fields = ['party_name', 'user__user_code', 'notes']
    raw_id_fields = ['user']
