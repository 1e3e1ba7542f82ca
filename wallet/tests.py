# ===== WALLET APP TEST SUITE =====
"""
Test suite for wallets, rewards, withdrawals and billing
File: wallet/tests.py

Test Coverage:
- Admin wallet management (password check, recipient roles)
- Reward points (send, claim, offer redemption)
- Withdrawal requests and processing
- Merged wallet history
- API endpoints including payables and receivables
"""

from decimal import Decimal

from django.test import TestCase, override_settings
from django.urls import reverse

from rest_framework.test import APITestCase
from rest_framework import status

from accounts.models import User
from services import BusinessRuleError, InsufficientFundsError, InvalidTransitionError, PermissionDeniedError

from . import services as wallet_services
from .models import Payable, RewardOffer, RewardTransaction, WalletTransaction, WithdrawalRequest


def make_user(email, role='affiliate', password='secret123', **extra):
    return User.objects.create_user(email=email, password=password, role=role, **extra)


def fund(user, amount):
    wallet = wallet_services.get_wallet(user)
    wallet.balance = Decimal(amount)
    wallet.save()
    return wallet


def give_points(user, points):
    wallet = wallet_services.get_wallet(user)
    wallet.reward_points = points
    wallet.save()
    return wallet


# =============================================================================
# ADMIN WALLET MANAGEMENT TESTS
# =============================================================================

class ManageWalletTest(TestCase):
    """Test admin top-ups and credits"""

    def setUp(self):
        self.admin = make_user('admin@example.com', role='admin', password='adminpass')
        self.partner = make_user('asha@example.com', role='affiliate')
        self.customer = make_user('cara@example.com', role='customer')

    def test_topup_credits_admin(self):
        entry = wallet_services.manage_wallet(
            self.admin, 'adminpass', 'topup', Decimal('1000'), payment_method='upi'
        )
        self.assertEqual(entry.type, WalletTransaction.TYPE_TOPUP)
        self.assertEqual(entry.balance_after, Decimal('1000'))
        self.assertEqual(wallet_services.get_wallet(self.admin).balance, Decimal('1000.00'))

    def test_wrong_password(self):
        with self.assertRaises(BusinessRuleError) as ctx:
            wallet_services.manage_wallet(self.admin, 'nope', 'topup', Decimal('10'))
        self.assertEqual(ctx.exception.code, 'invalid_password')
        self.assertEqual(ctx.exception.field, 'admin_password')
        self.assertFalse(WalletTransaction.objects.exists())

    def test_send_partner_credits_recipient(self):
        wallet_services.manage_wallet(
            self.admin, 'adminpass', 'send_partner', Decimal('250'), recipient=self.partner
        )
        self.assertEqual(wallet_services.get_wallet(self.partner).balance, Decimal('250.00'))
        self.assertEqual(wallet_services.get_wallet(self.admin).balance, Decimal('0.00'))

    def test_recipient_role_must_match(self):
        with self.assertRaises(BusinessRuleError) as ctx:
            wallet_services.manage_wallet(
                self.admin, 'adminpass', 'send_customer', Decimal('250'), recipient=self.partner
            )
        self.assertEqual(ctx.exception.field, 'recipient_id')

    def test_amount_must_be_at_least_one(self):
        with self.assertRaises(BusinessRuleError):
            wallet_services.manage_wallet(self.admin, 'adminpass', 'topup', Decimal('0.50'))

    def test_non_admin_rejected(self):
        with self.assertRaises(PermissionDeniedError):
            wallet_services.manage_wallet(self.partner, 'secret123', 'topup', Decimal('10'))


# =============================================================================
# REWARD TESTS
# =============================================================================

class RewardPointsTest(TestCase):
    """Test sending, claiming and redeeming reward points"""

    def setUp(self):
        self.admin = make_user('admin@example.com', role='admin')
        self.partner = make_user('asha@example.com', role='affiliate')

    def test_send_rewards(self):
        entry = wallet_services.send_rewards(self.admin, self.partner, 40, notes='Top seller')
        self.assertEqual(entry.type, RewardTransaction.TYPE_SENT)
        self.assertEqual(wallet_services.get_wallet(self.partner).reward_points, 40)

    def test_send_rewards_only_to_partners(self):
        seller = make_user('sam@example.com', role='seller')
        with self.assertRaises(BusinessRuleError):
            wallet_services.send_rewards(self.admin, seller, 40)

    @override_settings(REWARD_POINT_VALUE='2.50')
    def test_claim_converts_points(self):
        give_points(self.partner, 100)

        result = wallet_services.claim_rewards(self.partner, 40)

        wallet = wallet_services.get_wallet(self.partner)
        self.assertEqual(result['amount'], Decimal('100.00'))
        self.assertEqual(wallet.reward_points, 60)
        self.assertEqual(wallet.balance, Decimal('100.00'))
        self.assertEqual(result['wallet_transaction'].type, WalletTransaction.TYPE_REWARD_CLAIM)

    def test_claim_more_than_held(self):
        give_points(self.partner, 10)
        with self.assertRaises(InsufficientFundsError):
            wallet_services.claim_rewards(self.partner, 11)
        self.assertEqual(wallet_services.get_wallet(self.partner).reward_points, 10)

    def test_redeem_offer_debits_points_only(self):
        give_points(self.partner, 500)
        offer = RewardOffer.objects.create(title='Weekend stay', points=300, details='Two nights for two')

        entry = wallet_services.redeem_offer(self.partner, offer)

        wallet = wallet_services.get_wallet(self.partner)
        self.assertEqual(entry.offer, offer)
        self.assertEqual(wallet.reward_points, 200)
        self.assertEqual(wallet.balance, Decimal('0.00'))
        self.assertTrue(offer.offer_code)

    def test_inactive_offer(self):
        give_points(self.partner, 500)
        offer = RewardOffer.objects.create(
            title='Old offer', points=100, details='No longer offered', is_active=False
        )
        with self.assertRaises(BusinessRuleError):
            wallet_services.redeem_offer(self.partner, offer)


# =============================================================================
# WITHDRAWAL TESTS
# =============================================================================

class WithdrawalTest(TestCase):
    """Test withdrawal requests and their processing"""

    def setUp(self):
        self.admin = make_user('admin@example.com', role='admin')
        self.seller = make_user('sam@example.com', role='seller')
        self.partner = make_user('asha@example.com', role='affiliate')
        fund(self.partner, '1000')

    def test_minimum_amount(self):
        with self.assertRaises(BusinessRuleError) as ctx:
            wallet_services.request_withdrawal(self.partner, Decimal('99'), seller=self.seller)
        self.assertEqual(ctx.exception.field, 'amount')

    def test_partner_must_name_seller(self):
        with self.assertRaises(BusinessRuleError) as ctx:
            wallet_services.request_withdrawal(self.partner, Decimal('200'))
        self.assertEqual(ctx.exception.field, 'seller_id')

    def test_named_user_must_be_seller(self):
        other = make_user('other@example.com', role='channel')
        with self.assertRaises(BusinessRuleError):
            wallet_services.request_withdrawal(self.partner, Decimal('200'), seller=other)

    def test_insufficient_balance(self):
        with self.assertRaises(InsufficientFundsError):
            wallet_services.request_withdrawal(self.partner, Decimal('5000'), seller=self.seller)

    def test_request_does_not_debit(self):
        withdrawal = wallet_services.request_withdrawal(self.partner, Decimal('400'), seller=self.seller)
        self.assertEqual(withdrawal.status, WithdrawalRequest.STATUS_PENDING)
        self.assertEqual(wallet_services.get_wallet(self.partner).balance, Decimal('1000.00'))

    def test_seller_approves(self):
        withdrawal = wallet_services.request_withdrawal(self.partner, Decimal('400'), seller=self.seller)

        withdrawal = wallet_services.process_withdrawal(withdrawal, self.seller, approve=True)

        self.assertEqual(withdrawal.status, WithdrawalRequest.STATUS_APPROVED)
        self.assertEqual(withdrawal.processed_by, self.seller)
        self.assertEqual(wallet_services.get_wallet(self.partner).balance, Decimal('600.00'))
        self.assertTrue(WalletTransaction.objects.filter(type=WalletTransaction.TYPE_WITHDRAWAL).exists())

    def test_admin_rejects(self):
        withdrawal = wallet_services.request_withdrawal(self.partner, Decimal('400'), seller=self.seller)

        withdrawal = wallet_services.process_withdrawal(withdrawal, self.admin, approve=False, reason='Docs missing')

        self.assertEqual(withdrawal.status, WithdrawalRequest.STATUS_REJECTED)
        self.assertEqual(withdrawal.rejection_reason, 'Docs missing')
        self.assertEqual(wallet_services.get_wallet(self.partner).balance, Decimal('1000.00'))

    def test_other_seller_cannot_process(self):
        other_seller = make_user('other@example.com', role='seller')
        withdrawal = wallet_services.request_withdrawal(self.partner, Decimal('400'), seller=self.seller)
        with self.assertRaises(PermissionDeniedError):
            wallet_services.process_withdrawal(withdrawal, other_seller, approve=True)

    def test_processed_request_is_final(self):
        withdrawal = wallet_services.request_withdrawal(self.partner, Decimal('400'), seller=self.seller)
        wallet_services.process_withdrawal(withdrawal, self.admin, approve=True)
        with self.assertRaises(InvalidTransitionError):
            wallet_services.process_withdrawal(withdrawal, self.admin, approve=True)

    def test_approval_rechecks_balance(self):
        withdrawal = wallet_services.request_withdrawal(self.partner, Decimal('800'), seller=self.seller)
        fund(self.partner, '300')
        with self.assertRaises(InsufficientFundsError):
            wallet_services.process_withdrawal(withdrawal, self.admin, approve=True)
        withdrawal.refresh_from_db()
        self.assertEqual(withdrawal.status, WithdrawalRequest.STATUS_PENDING)

    def test_history_merges_entries(self):
        wallet_services.request_withdrawal(self.partner, Decimal('400'), seller=self.seller)
        wallet_services.send_rewards(self.admin, self.partner, 10)
        wallet_services.claim_rewards(self.partner, 10)

        history = wallet_services.wallet_history(self.partner)

        self.assertEqual({entry['kind'] for entry in history}, {'transaction', 'withdrawal'})
        self.assertEqual(len(history), 2)


# =============================================================================
# API ENDPOINT TESTS
# =============================================================================

class WalletAPITest(APITestCase):
    """Test wallet endpoints and permissions"""

    def setUp(self):
        self.admin = make_user('admin@example.com', role='admin', password='adminpass')
        self.seller = make_user('sam@example.com', role='seller')
        self.partner = make_user('asha@example.com', role='affiliate')

    def test_my_wallet(self):
        fund(self.partner, '250')
        self.client.force_authenticate(user=self.partner)

        response = self.client.get(reverse('wallet:my-wallet'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Decimal(response.data['balance']), Decimal('250'))
        self.assertEqual(response.data['user_code'], self.partner.user_code)

    def test_manage_wallet_send_partner(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(reverse('wallet:manage'), {
            'transaction_type': 'send_partner',
            'amount': '500',
            'recipient_id': self.partner.user_code,
            'payment_method': 'upi',
            'admin_password': 'adminpass',
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data['to_user_code'], self.partner.user_code)

    def test_manage_wallet_wrong_password(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(reverse('wallet:manage'), {
            'transaction_type': 'topup',
            'amount': '500',
            'payment_method': 'cash',
            'admin_password': 'wrong',
        })
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'invalid_password')
        self.assertIn('admin_password', response.data['details'])

    def test_manage_wallet_requires_recipient(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(reverse('wallet:manage'), {
            'transaction_type': 'send_partner',
            'amount': '500',
            'payment_method': 'cash',
            'admin_password': 'adminpass',
        })
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('recipient_id', response.data)

    def test_manage_wallet_admin_only(self):
        self.client.force_authenticate(user=self.partner)
        response = self.client.post(reverse('wallet:manage'), {})
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_send_and_claim_rewards(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(
            reverse('wallet:reward-transaction-send'),
            {'partner_id': self.partner.user_code, 'points': 30},
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        self.client.force_authenticate(user=self.partner)
        response = self.client.post(reverse('wallet:reward-transaction-claim'), {'points': 20})
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['wallet']['reward_points'], 10)

    def test_claim_without_points(self):
        self.client.force_authenticate(user=self.partner)
        response = self.client.post(reverse('wallet:reward-transaction-claim'), {'points': 5})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'insufficient_funds')

    def test_partner_sees_only_active_offers(self):
        RewardOffer.objects.create(title='Live', points=10, details='Available right now')
        RewardOffer.objects.create(title='Gone', points=10, details='Withdrawn from catalogue', is_active=False)
        self.client.force_authenticate(user=self.partner)

        response = self.client.get(reverse('wallet:reward-offer-list'))

        self.assertEqual([offer['title'] for offer in response.data], ['Live'])

    def test_offer_details_min_length(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(
            reverse('wallet:reward-offer-list'), {'title': 'Short', 'points': 5, 'details': 'tiny'}
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('details', response.data)

    def test_partner_cannot_create_offers(self):
        self.client.force_authenticate(user=self.partner)
        response = self.client.post(
            reverse('wallet:reward-offer-list'), {'title': 'Mine', 'points': 5, 'details': 'Long enough text'}
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_withdrawal_flow(self):
        fund(self.partner, '1000')
        self.client.force_authenticate(user=self.partner)
        response = self.client.post(
            reverse('wallet:withdrawal-list'), {'amount': '300', 'seller_id': self.seller.user_code}
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        withdrawal_id = response.data['id']

        self.client.force_authenticate(user=self.seller)
        self.assertEqual(self.client.get(reverse('wallet:withdrawal-list')).data['count'], 1)
        response = self.client.post(
            reverse('wallet:withdrawal-process', args=[withdrawal_id]), {'action': 'approve'}
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], WithdrawalRequest.STATUS_APPROVED)

        self.client.force_authenticate(user=self.partner)
        history = self.client.get(reverse('wallet:history')).data
        self.assertEqual(len(history), 2)

    def test_withdrawal_without_seller(self):
        fund(self.partner, '1000')
        self.client.force_authenticate(user=self.partner)
        response = self.client.post(reverse('wallet:withdrawal-list'), {'amount': '300'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('seller_id', response.data['details'])

    def test_partner_cannot_process(self):
        fund(self.partner, '1000')
        withdrawal = wallet_services.request_withdrawal(self.partner, Decimal('300'), seller=self.seller)
        self.client.force_authenticate(user=self.partner)
        response = self.client.post(
            reverse('wallet:withdrawal-process', args=[withdrawal.pk]), {'action': 'approve'}
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class BillingAPITest(APITestCase):
    """Test payables and receivables"""

    def setUp(self):
        self.admin = make_user('admin@example.com', role='admin')
        self.partner = make_user('asha@example.com', role='affiliate', first_name='Asha')

    def test_payable_with_user_fills_party_name(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(
            reverse('wallet:payable-list'), {'user_id': self.partner.user_code, 'amount': '1200'}
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(Payable.objects.get().party_name, self.partner.display_name)

    def test_entry_needs_party(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(reverse('wallet:receivable-list'), {'amount': '1200'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('party_name', response.data)

    def test_receivable_status(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(reverse('wallet:receivable-list'), {
            'party_name': 'Acme Builders', 'amount': '5000', 'status': 'Overdue',
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'Overdue')

    def test_billing_is_admin_only(self):
        self.client.force_authenticate(user=self.partner)
        response = self.client.get(reverse('wallet:payable-list'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
