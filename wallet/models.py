"""
Wallet models for the DealFlow platform.

- Wallet: one per user, holding a currency balance and reward points
- WalletTransaction: ledger of balance movements
- RewardTransaction: ledger of reward point movements
- RewardOffer: catalogue items partners can redeem with points
- WithdrawalRequest: a request to pay out wallet balance
- Payable / Receivable: manual billing entries kept by admins

Every balance change writes its ledger row in the same transaction as the
balance update (see wallet.services).
"""

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinLengthValidator, MinValueValidator
from django.db import models

from services.business_logic import REWARD_ID_PREFIX, generate_unique_user_code


# =============================================================================
# WALLET
# =============================================================================

class Wallet(models.Model):
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='wallet')
    balance = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    reward_points = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Wallet'
        verbose_name_plural = 'Wallets'

    def __str__(self):
        return f"Wallet of {self.user_id}: {self.balance} / {self.reward_points} pts"


# =============================================================================
# LEDGERS
# =============================================================================

class WalletTransaction(models.Model):
    """One balance movement on one wallet."""

    TYPE_TOPUP = 'topup'
    TYPE_SEND_PARTNER = 'send_partner'
    TYPE_SEND_CUSTOMER = 'send_customer'
    TYPE_REWARD_CLAIM = 'reward_claim'
    TYPE_WITHDRAWAL = 'withdrawal'
    TYPE_EARNING = 'earning'

    TYPE_CHOICES = [
        (TYPE_TOPUP, 'Top up'),
        (TYPE_SEND_PARTNER, 'Sent to partner'),
        (TYPE_SEND_CUSTOMER, 'Sent to customer'),
        (TYPE_REWARD_CLAIM, 'Reward claim'),
        (TYPE_WITHDRAWAL, 'Withdrawal'),
        (TYPE_EARNING, 'Deal earning'),
    ]

    PAYMENT_METHOD_CHOICES = [
        ('cash', 'Cash'),
        ('cheque', 'Cheque'),
        ('debit_card', 'Debit card'),
        ('credit_card', 'Credit card'),
        ('gpay', 'Google Pay'),
        ('phonepe', 'PhonePe'),
        ('paytm', 'Paytm'),
        ('upi', 'UPI'),
        ('other', 'Other'),
    ]

    STATUS_COMPLETED = 'Completed'
    STATUS_CHOICES = [
        (STATUS_COMPLETED, 'Completed'),
    ]

    wallet = models.ForeignKey(Wallet, on_delete=models.CASCADE, related_name='transactions')
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, db_index=True)
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    from_user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='wallet_transactions_sent'
    )
    to_user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='wallet_transactions_received'
    )
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, blank=True)
    proof = models.FileField(upload_to='wallet/proofs/', blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_COMPLETED)
    balance_after = models.DecimalField(max_digits=14, decimal_places=2)
    notes = models.TextField(blank=True)
    lead = models.ForeignKey(
        'leads.Lead', on_delete=models.SET_NULL, null=True, blank=True, related_name='wallet_transactions'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.type} {self.amount} (wallet {self.wallet_id})"


class RewardTransaction(models.Model):
    """One reward point movement."""

    TYPE_SENT = 'sent'
    TYPE_CLAIMED = 'claimed'
    TYPE_EARNED = 'earned'

    TYPE_CHOICES = [
        (TYPE_SENT, 'Sent'),
        (TYPE_CLAIMED, 'Claimed'),
        (TYPE_EARNED, 'Earned'),
    ]

    type = models.CharField(max_length=10, choices=TYPE_CHOICES, db_index=True)
    points = models.PositiveIntegerField()
    from_user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='reward_transactions_sent'
    )
    to_user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='reward_transactions_received'
    )
    offer = models.ForeignKey(
        'RewardOffer', on_delete=models.SET_NULL, null=True, blank=True, related_name='redemptions'
    )
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.type} {self.points} pts"


class RewardOffer(models.Model):
    """A reward partners can redeem with points."""

    offer_code = models.CharField(max_length=20, unique=True, blank=True)
    title = models.CharField(max_length=200)
    image = models.FileField(upload_to='wallet/offers/', blank=True)
    points = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    details = models.TextField(validators=[MinLengthValidator(10)])
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['points', 'title']

    def __str__(self):
        return f"{self.title} ({self.points} pts)"

    def save(self, *args, **kwargs):
        if not self.offer_code:
            self.offer_code = generate_unique_user_code(REWARD_ID_PREFIX, RewardOffer, field='offer_code')
        super().save(*args, **kwargs)


# =============================================================================
# WITHDRAWALS
# =============================================================================

class WithdrawalRequest(models.Model):
    STATUS_PENDING = 'Pending'
    STATUS_APPROVED = 'Approved'
    STATUS_REJECTED = 'Rejected'

    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_APPROVED, 'Approved'),
        (STATUS_REJECTED, 'Rejected'),
    ]

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='withdrawal_requests')
    seller = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='seller_withdrawal_requests'
    )
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    notes = models.TextField(blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    rejection_reason = models.TextField(blank=True)
    processed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='processed_withdrawals'
    )
    requested_at = models.DateTimeField(auto_now_add=True)
    processed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['-requested_at']

    def __str__(self):
        return f"Withdrawal {self.amount} by {self.user_id} ({self.status})"


# =============================================================================
# BILLING
# =============================================================================

class BillingEntry(models.Model):
    """Shared fields of payables and receivables."""

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    party_name = models.CharField(max_length=200)
    amount = models.DecimalField(max_digits=14, decimal_places=2, validators=[MinValueValidator(Decimal('1'))])
    notes = models.TextField(blank=True)
    date = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True
        ordering = ['-date']

    def __str__(self):
        return f"{self.party_name}: {self.amount} ({self.status})"


class Payable(BillingEntry):
    STATUS_PENDING = 'Pending'
    STATUS_PAID = 'Paid'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_PAID, 'Paid'),
    ]

    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING)


class Receivable(BillingEntry):
    STATUS_PENDING = 'Pending'
    STATUS_PAID = 'Paid'
    STATUS_OVERDUE = 'Overdue'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_PAID, 'Paid'),
        (STATUS_OVERDUE, 'Overdue'),
    ]

    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING)
