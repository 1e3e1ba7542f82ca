# ===== WALLET LEDGER =====
"""
Wallet and reward ledger operations.

Every operation follows the same pattern inside transaction.atomic:
1. lock the wallet row(s) with select_for_update()
2. compute the new balance or point total from the locked value
3. write the ledger row and the balance mutation together

A failed check raises before anything is written, so the ledger and the
balances can never drift apart.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from administration.models import AppSetting
from leads.models import Lead
from services import BusinessRuleError, InsufficientFundsError, InvalidTransitionError, PermissionDeniedError
from services.business_logic import calculate_earning, resolve_earning_rule

from .models import RewardOffer, RewardTransaction, Wallet, WalletTransaction, WithdrawalRequest

logger = logging.getLogger(__name__)

MANAGE_TOPUP = WalletTransaction.TYPE_TOPUP
MANAGE_SEND_PARTNER = WalletTransaction.TYPE_SEND_PARTNER
MANAGE_SEND_CUSTOMER = WalletTransaction.TYPE_SEND_CUSTOMER
MANAGE_ACTIONS = [MANAGE_TOPUP, MANAGE_SEND_PARTNER, MANAGE_SEND_CUSTOMER]


def reward_point_value() -> Decimal:
    return Decimal(str(getattr(settings, 'REWARD_POINT_VALUE', '1')))


def minimum_withdrawal() -> Decimal:
    return Decimal(str(getattr(settings, 'MIN_WITHDRAWAL_AMOUNT', '100')))


# =============================================================================
# WALLET ACCESS
# =============================================================================

def get_wallet(user) -> Wallet:
    """Return the user's wallet, creating an empty one on first use."""
    wallet, _ = Wallet.objects.get_or_create(user=user)
    return wallet


def _locked_wallet(user) -> Wallet:
    Wallet.objects.get_or_create(user=user)
    return Wallet.objects.select_for_update().get(user=user)


def _move_balance(wallet: Wallet, tx_type: str, delta: Decimal, **ledger) -> WalletTransaction:
    """Apply delta to a locked wallet and write the matching ledger row."""
    new_balance = wallet.balance + delta
    if new_balance < 0:
        raise InsufficientFundsError("Insufficient wallet balance.", field='amount')

    wallet.balance = new_balance
    wallet.save(update_fields=['balance', 'updated_at'])
    return WalletTransaction.objects.create(
        wallet=wallet,
        type=tx_type,
        amount=abs(delta),
        balance_after=new_balance,
        **ledger
    )


def _require_positive(amount, field: str = 'amount', minimum=Decimal('1')):
    if amount is None or amount < minimum:
        raise BusinessRuleError(f"Must be at least {minimum}.", field=field)


# =============================================================================
# ADMIN WALLET MANAGEMENT
# =============================================================================

@transaction.atomic
def manage_wallet(admin, admin_password: str, action: str, amount: Decimal,
                  recipient=None, payment_method: str = '', proof=None, notes: str = '') -> WalletTransaction:
    """
    Top up the admin's wallet or credit a partner or customer.

    The admin must re-enter their password; a wrong password is reported
    against admin_password.
    """
    if not admin.is_platform_admin:
        raise PermissionDeniedError("Only admins can manage wallets.")
    if not admin_password or not admin.check_password(admin_password):
        raise BusinessRuleError("Incorrect password.", field='admin_password', code='invalid_password')
    if action not in MANAGE_ACTIONS:
        raise BusinessRuleError(f"Unknown wallet action '{action}'.", field='transaction_type')
    _require_positive(amount)

    if action == MANAGE_TOPUP:
        target = admin
    else:
        if recipient is None:
            raise BusinessRuleError("Recipient ID is required.", field='recipient_id')
        role_matches = recipient.is_partner if action == MANAGE_SEND_PARTNER else recipient.is_customer
        if not role_matches:
            raise BusinessRuleError(
                f"{recipient.user_code} is not a {'partner' if action == MANAGE_SEND_PARTNER else 'customer'}.",
                field='recipient_id',
            )
        target = recipient

    wallet = _locked_wallet(target)
    entry = _move_balance(
        wallet, action, amount,
        from_user=admin,
        to_user=target,
        payment_method=payment_method,
        proof=proof or '',
        notes=notes,
    )
    logger.info(f"Wallet {action} of {amount} to {target.user_code} by {admin.user_code}")
    return entry


# =============================================================================
# REWARDS
# =============================================================================

@transaction.atomic
def send_rewards(admin, partner, points: int, notes: str = '') -> RewardTransaction:
    if not partner.is_partner:
        raise BusinessRuleError("Rewards can only be sent to partners.", field='partner_id')
    _require_positive(points, field='points', minimum=1)

    wallet = _locked_wallet(partner)
    wallet.reward_points += points
    wallet.save(update_fields=['reward_points', 'updated_at'])

    entry = RewardTransaction.objects.create(
        type=RewardTransaction.TYPE_SENT,
        points=points,
        from_user=admin,
        to_user=partner,
        notes=notes,
    )
    logger.info(f"{points} reward points sent to {partner.user_code} by {admin.user_code}")
    return entry


def _debit_points(wallet: Wallet, points: int) -> None:
    if points > wallet.reward_points:
        raise InsufficientFundsError(
            f"You only have {wallet.reward_points} reward points.", field='points'
        )
    wallet.reward_points -= points


@transaction.atomic
def claim_rewards(partner, points: int) -> Dict[str, Any]:
    """
    Convert reward points into wallet balance.

    Returns:
        {'reward_transaction': ..., 'wallet_transaction': ..., 'amount': Decimal}
    """
    _require_positive(points, field='points', minimum=1)

    wallet = _locked_wallet(partner)
    _debit_points(wallet, points)
    wallet.save(update_fields=['reward_points', 'updated_at'])

    amount = (Decimal(points) * reward_point_value()).quantize(Decimal('0.01'))
    reward_entry = RewardTransaction.objects.create(
        type=RewardTransaction.TYPE_CLAIMED,
        points=points,
        from_user=partner,
        notes=f"Claimed for {amount}",
    )
    wallet_entry = _move_balance(
        wallet, WalletTransaction.TYPE_REWARD_CLAIM, amount,
        to_user=partner,
        notes=f"{points} reward points claimed",
    )
    logger.info(f"{partner.user_code} claimed {points} points for {amount}")
    return {'reward_transaction': reward_entry, 'wallet_transaction': wallet_entry, 'amount': amount}


@transaction.atomic
def redeem_offer(partner, offer: RewardOffer) -> RewardTransaction:
    """Spend reward points on a catalogue offer."""
    if not offer.is_active:
        raise BusinessRuleError("This offer is no longer available.", field='offer')

    wallet = _locked_wallet(partner)
    _debit_points(wallet, offer.points)
    wallet.save(update_fields=['reward_points', 'updated_at'])

    entry = RewardTransaction.objects.create(
        type=RewardTransaction.TYPE_CLAIMED,
        points=offer.points,
        from_user=partner,
        offer=offer,
        notes=f"Redeemed {offer.title}",
    )
    logger.info(f"{partner.user_code} redeemed offer {offer.offer_code}")
    return entry


# =============================================================================
# WITHDRAWALS
# =============================================================================

def request_withdrawal(user, amount: Decimal, seller=None, notes: str = '') -> WithdrawalRequest:
    """
    Open a withdrawal request. The wallet is debited on approval.

    Partners must name the seller who pays them out.
    """
    minimum = minimum_withdrawal()
    if amount is None or amount < minimum:
        raise BusinessRuleError(f"Minimum withdrawal amount is {minimum}.", field='amount')
    if user.is_partner and seller is None:
        raise BusinessRuleError("Seller ID is required.", field='seller_id')
    if seller is not None and not seller.is_seller:
        raise BusinessRuleError(f"{seller.user_code} is not a seller.", field='seller_id')
    if amount > get_wallet(user).balance:
        raise InsufficientFundsError("Insufficient wallet balance.", field='amount')

    withdrawal = WithdrawalRequest.objects.create(user=user, seller=seller, amount=amount, notes=notes)
    logger.info(f"Withdrawal {withdrawal.pk} of {amount} requested by {user.user_code}")
    return withdrawal


@transaction.atomic
def process_withdrawal(withdrawal: WithdrawalRequest, approver, approve: bool,
                       reason: str = '') -> WithdrawalRequest:
    withdrawal = WithdrawalRequest.objects.select_for_update().get(pk=withdrawal.pk)

    if not (approver.is_platform_admin or (approver.is_seller and withdrawal.seller_id == approver.pk)):
        raise PermissionDeniedError("You cannot process this withdrawal request.")
    if withdrawal.status != WithdrawalRequest.STATUS_PENDING:
        raise InvalidTransitionError(
            f"This request has already been {withdrawal.status.lower()}.", field='status'
        )

    if approve:
        wallet = _locked_wallet(withdrawal.user)
        _move_balance(
            wallet, WalletTransaction.TYPE_WITHDRAWAL, -withdrawal.amount,
            from_user=withdrawal.user,
            to_user=withdrawal.seller,
            notes=f"Withdrawal request {withdrawal.pk}",
        )
        withdrawal.status = WithdrawalRequest.STATUS_APPROVED
    else:
        withdrawal.status = WithdrawalRequest.STATUS_REJECTED
        withdrawal.rejection_reason = reason

    withdrawal.processed_by = approver
    withdrawal.processed_at = timezone.now()
    withdrawal.save()
    logger.info(f"Withdrawal {withdrawal.pk} {withdrawal.status.lower()} by {approver.user_code}")
    return withdrawal


def withdrawals_for(user):
    queryset = WithdrawalRequest.objects.select_related('user', 'seller')
    if user.is_platform_admin:
        return queryset
    if user.is_seller:
        return queryset.filter(seller=user)
    return queryset.filter(user=user)


# =============================================================================
# DEAL EARNINGS
# =============================================================================

def credit_earning(lead) -> Optional[Any]:
    """
    Credit the partner of a closed lead.

    The property's rule for the partner's role wins over the platform
    default. Must be called inside the transaction that closes the lead.

    Returns:
        The ledger row written, or None when no rule applies
    """
    lead = Lead.objects.select_for_update().select_related('partner', 'property').get(pk=lead.pk)
    if lead.earning_credited or lead.partner is None:
        return None

    property_rules = lead.property.earning_rules if lead.property else {}
    rule = resolve_earning_rule(lead.partner.role, property_rules, AppSetting.get_default_earning_rules())
    if rule is None:
        logger.warning(f"No earning rule for {lead.partner.role}; lead {lead.pk} closed without credit")
        return None

    sale_amount = lead.sale_amount
    if sale_amount is None and lead.property is not None:
        sale_amount = lead.property.listing_price
    area = lead.property.area_sq_ft if lead.property else None
    result = calculate_earning(rule, sale_amount or 0, area)

    wallet = _locked_wallet(lead.partner)
    if result.is_points:
        wallet.reward_points += result.reward_points
        wallet.save(update_fields=['reward_points', 'updated_at'])
        entry = RewardTransaction.objects.create(
            type=RewardTransaction.TYPE_EARNED,
            points=result.reward_points,
            to_user=lead.partner,
            notes=f"Deal closed on lead {lead.pk}",
        )
    else:
        entry = _move_balance(
            wallet, WalletTransaction.TYPE_EARNING, result.amount,
            to_user=lead.partner,
            lead=lead,
            notes=f"{result.rule_type} earning on lead {lead.pk}",
        )

    lead.earning_credited = True
    lead.save(update_fields=['earning_credited', 'updated_at'])
    logger.info(
        f"Earning credited to {lead.partner.user_code} for lead {lead.pk}: "
        f"{result.amount} / {result.reward_points} pts"
    )
    return entry


# =============================================================================
# HISTORY
# =============================================================================

def wallet_history(user) -> List[Dict[str, Any]]:
    """Wallet transactions and withdrawal requests of a user, newest first."""
    entries = []
    for tx in WalletTransaction.objects.filter(wallet__user=user):
        entries.append({
            'kind': 'transaction',
            'id': tx.pk,
            'type': tx.type,
            'amount': tx.amount,
            'status': tx.status,
            'balance_after': tx.balance_after,
            'notes': tx.notes,
            'date': tx.created_at,
        })
    for withdrawal in WithdrawalRequest.objects.filter(user=user):
        entries.append({
            'kind': 'withdrawal',
            'id': withdrawal.pk,
            'type': WalletTransaction.TYPE_WITHDRAWAL,
            'amount': withdrawal.amount,
            'status': withdrawal.status,
            'balance_after': None,
            'notes': withdrawal.notes,
            'date': withdrawal.requested_at,
        })
    entries.sort(key=lambda entry: entry['date'], reverse=True)
    return entries
