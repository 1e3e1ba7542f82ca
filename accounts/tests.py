# ===== ACCOUNTS APP TEST SUITE =====
"""
Test suite for accounts app functionality
File: accounts/tests.py

Test Coverage:
- User model: user codes, login gating, admin permissions
- Registration (quick sign-up, customer OTP sign-up, sub-admins)
- Partner onboarding with and without a registration fee
- Payment gateway callback handling
- Partner lifecycle, seller status, KYC and upgrades
- Team requests
- Personal document store
- API endpoints and JWT login
"""

from decimal import Decimal
from unittest.mock import patch, Mock

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from django.urls import reverse

from rest_framework.test import APITestCase
from rest_framework import status

from administration.models import AppSetting, KEY_REGISTRATION_FEES
from services import (
    BusinessRuleError,
    DuplicateAccountError,
    InvalidTransitionError,
    PaymentGatewayError,
    PermissionDeniedError,
)

from . import services as account_services
from .models import (
    KYC_REJECTED,
    KYC_VERIFIED,
    PAYMENT_FAILED,
    PAYMENT_NOT_REQUIRED,
    PAYMENT_PAID,
    STATUS_ACTIVE,
    STATUS_INACTIVE,
    STATUS_PENDING,
    STATUS_PENDING_UPGRADE,
    STATUS_PENDING_VERIFICATION,
    STATUS_SUSPENDED,
    RegistrationPayment,
    TeamRequest,
    User,
    UserDocument,
)


def make_user(email, role='affiliate', status=STATUS_ACTIVE, password='secret123', **extra):
    return User.objects.create_user(email=email, password=password, role=role, status=status, **extra)


# =============================================================================
# USER MODEL TESTS
# =============================================================================

class UserModelTest(TestCase):
    """Test user codes, login gating and admin permission checks"""

    def test_user_code_uses_role_prefix(self):
        partner = make_user('asha@example.com', role='affiliate')
        seller = make_user('sel@example.com', role='seller')
        customer = make_user('cus@example.com', role='customer')

        self.assertTrue(partner.user_code.startswith('PAF'))
        self.assertTrue(seller.user_code.startswith('SEL'))
        self.assertTrue(customer.user_code.startswith('CUS'))
        self.assertEqual(len(partner.user_code), 9)

    def test_user_code_is_stable_across_saves(self):
        partner = make_user('asha@example.com')
        code = partner.user_code
        partner.city = 'Pune'
        partner.save()
        partner.refresh_from_db()
        self.assertEqual(partner.user_code, code)

    def test_email_is_lowercased(self):
        user = make_user('Mixed.Case@Example.COM')
        self.assertEqual(user.email, 'mixed.case@example.com')

    def test_is_active_follows_status(self):
        user = make_user('asha@example.com', status=STATUS_PENDING)
        self.assertFalse(user.is_active)

        user.status = STATUS_PENDING_UPGRADE
        user.save()
        self.assertTrue(user.is_active)

        user.status = STATUS_SUSPENDED
        user.save()
        self.assertFalse(user.is_active)

    def test_admin_permissions(self):
        full_admin = make_user('admin@example.com', role='admin')
        sub_admin = make_user('sub@example.com', role='admin', permissions=['manageLeads'])
        partner = make_user('asha@example.com')

        self.assertTrue(full_admin.is_full_admin)
        self.assertTrue(full_admin.has_admin_permission('sendMessages'))
        self.assertTrue(sub_admin.has_admin_permission('manageLeads'))
        self.assertFalse(sub_admin.has_admin_permission('manageDeals'))
        self.assertFalse(partner.has_admin_permission('manageLeads'))

    def test_name_built_from_first_and_last(self):
        user = make_user('ravi@example.com', first_name='Ravi', last_name='Kumar')
        self.assertEqual(user.name, 'Ravi Kumar')
        self.assertEqual(user.display_name, 'Ravi Kumar')


# =============================================================================
# REGISTRATION TESTS
# =============================================================================

class RegistrationServiceTest(TestCase):
    """Test self sign-up, customer registration and sub-admins"""

    def test_quick_partner_is_active(self):
        user = account_services.register_quick('Asha Rani', 'asha@example.com', 'secret123', 'affiliate')
        self.assertEqual(user.status, STATUS_ACTIVE)
        self.assertEqual(user.first_name, 'Asha')
        self.assertEqual(user.last_name, 'Rani')
        self.assertTrue(user.check_password('secret123'))

    def test_quick_seller_waits_for_activation(self):
        user = account_services.register_quick('Sam Seller', 'sam@example.com', 'secret123', 'seller')
        self.assertEqual(user.status, STATUS_PENDING)
        self.assertFalse(user.is_active)

    def test_quick_rejects_other_roles(self):
        with self.assertRaises(BusinessRuleError) as ctx:
            account_services.register_quick('Eve', 'eve@example.com', 'secret123', 'admin')
        self.assertEqual(ctx.exception.field, 'role')

    def test_duplicate_email_is_rejected(self):
        make_user('asha@example.com')
        with self.assertRaises(DuplicateAccountError):
            account_services.register_quick('Asha', 'ASHA@example.com', 'secret123', 'affiliate')

    def test_customer_requires_valid_otp(self):
        otp_service = Mock()
        otp_service.verify_otp.return_value = False
        data = {
            'name': 'Cara Customer', 'email': 'cara@example.com', 'phone': '9876543210',
            'password': 'secret123', 'otp': '123456',
        }
        with self.assertRaises(BusinessRuleError) as ctx:
            account_services.register_customer(data, otp_service)
        self.assertEqual(ctx.exception.code, 'invalid_otp')
        self.assertFalse(User.objects.filter(email='cara@example.com').exists())

    def test_customer_starts_pending_verification(self):
        otp_service = Mock()
        otp_service.verify_otp.return_value = True
        data = {
            'name': 'Cara Customer', 'email': 'cara@example.com', 'phone': '9876543210',
            'password': 'secret123', 'otp': '123456',
        }
        customer = account_services.register_customer(data, otp_service)

        otp_service.verify_otp.assert_called_once_with('cara@example.com', '123456')
        self.assertEqual(customer.status, STATUS_PENDING_VERIFICATION)
        self.assertTrue(customer.user_code.startswith('CUS'))

    def test_verify_customer_approve_and_reject(self):
        approved = make_user('a@example.com', role='customer', status=STATUS_PENDING_VERIFICATION)
        rejected = make_user('r@example.com', role='customer', status=STATUS_PENDING_VERIFICATION)

        result = account_services.verify_customer(approved, approve=True)
        self.assertEqual(result.status, STATUS_ACTIVE)

        self.assertIsNone(account_services.verify_customer(rejected, approve=False))
        self.assertFalse(User.objects.filter(pk=rejected.pk).exists())

    def test_create_sub_admin(self):
        admin = account_services.create_sub_admin({
            'first_name': 'Sub', 'last_name': 'Admin', 'email': 'sub@example.com',
            'password': 'secret123', 'permissions': ['manageLeads', 'manageLeads', 'sendMessages'],
        })
        self.assertEqual(admin.role, 'admin')
        self.assertEqual(admin.permissions, ['manageLeads', 'sendMessages'])
        self.assertTrue(admin.user_code.startswith('ADM'))

    def test_create_sub_admin_rejects_unknown_permission(self):
        with self.assertRaises(BusinessRuleError):
            account_services.create_sub_admin({
                'first_name': 'Sub', 'last_name': 'Admin', 'email': 'sub@example.com',
                'password': 'secret123', 'permissions': ['launchRockets'],
            })


# =============================================================================
# PARTNER ONBOARDING AND PAYMENT TESTS
# =============================================================================

class PartnerOnboardingTest(TestCase):
    """Test the onboarding payment branch and gateway callbacks"""

    def setUp(self):
        self.data = {
            'partner_role': 'affiliate',
            'full_name': 'Asha Rani',
            'email': 'asha@example.com',
            'password': 'secret123',
            'phone': '9876543210',
            'city': 'Pune',
        }

    def test_no_fee_activates_partner(self):
        result = account_services.onboard_partner(self.data)
        partner = result['partner']

        self.assertFalse(result['requires_payment'])
        self.assertIsNone(result['redirect_url'])
        self.assertEqual(partner.status, STATUS_ACTIVE)
        self.assertEqual(partner.payment_status, PAYMENT_NOT_REQUIRED)
        self.assertEqual(partner.city, 'Pune')

    @override_settings(PAYMENT_ENABLED=True)
    def test_fee_opens_payment(self):
        AppSetting.set_value(KEY_REGISTRATION_FEES, {'affiliate': '499'})
        client = Mock()
        client.initiate_payment.return_value = 'https://pay.example.com/page'

        result = account_services.onboard_partner(self.data, client=client)
        partner = User.objects.get(email='asha@example.com')

        self.assertTrue(result['requires_payment'])
        self.assertEqual(result['redirect_url'], 'https://pay.example.com/page')
        self.assertEqual(partner.status, STATUS_PENDING)
        self.assertEqual(result['payment'].amount, Decimal('499.00'))
        self.assertTrue(result['payment'].merchant_transaction_id.startswith(f"TX_{partner.user_code}_"))

    @override_settings(PAYMENT_ENABLED=False)
    def test_fee_ignored_when_payments_disabled(self):
        AppSetting.set_value(KEY_REGISTRATION_FEES, {'affiliate': '499'})
        result = account_services.onboard_partner(self.data)
        self.assertFalse(result['requires_payment'])

    @override_settings(PAYMENT_ENABLED=True)
    def test_gateway_failure_marks_payment_failed(self):
        AppSetting.set_value(KEY_REGISTRATION_FEES, {'affiliate': '499'})
        client = Mock()
        client.initiate_payment.side_effect = PaymentGatewayError('down')

        with self.assertRaises(PaymentGatewayError):
            account_services.onboard_partner(self.data, client=client)

        partner = User.objects.get(email='asha@example.com')
        self.assertEqual(partner.payment_status, PAYMENT_FAILED)
        self.assertEqual(partner.registration_payments.get().status, RegistrationPayment.STATUS_FAILED)

    def _pending_payment(self):
        partner = make_user('asha@example.com', status=STATUS_PENDING, payment_status='pending')
        payment = RegistrationPayment.objects.create(
            user=partner, merchant_transaction_id=f"TX_{partner.user_code}_1700000000000",
            amount=Decimal('499.00'),
        )
        return partner, payment

    def test_confirmed_callback_activates_partner(self):
        partner, payment = self._pending_payment()
        client = Mock()
        client.is_paid.return_value = True

        result = account_services.handle_payment_callback(
            payment.merchant_transaction_id,
            {'code': 'PAYMENT_SUCCESS', 'transactionId': 'T123', 'providerReferenceId': 'P456'},
            client=client,
        )
        partner.refresh_from_db()

        self.assertEqual(result.status, RegistrationPayment.STATUS_SUCCESS)
        self.assertEqual(partner.status, STATUS_ACTIVE)
        self.assertEqual(partner.payment_status, PAYMENT_PAID)
        self.assertEqual(partner.payment_details['transaction_id'], 'T123')

    def test_unconfirmed_callback_fails_payment(self):
        partner, payment = self._pending_payment()
        client = Mock()
        client.is_paid.return_value = False

        account_services.handle_payment_callback(
            payment.merchant_transaction_id, {'code': 'PAYMENT_SUCCESS'}, client=client
        )
        partner.refresh_from_db()
        self.assertEqual(partner.payment_status, PAYMENT_FAILED)
        self.assertEqual(partner.status, STATUS_PENDING)

    def test_repeated_callback_is_ignored(self):
        partner, payment = self._pending_payment()
        payment.status = RegistrationPayment.STATUS_SUCCESS
        payment.save()
        client = Mock()

        account_services.handle_payment_callback(
            payment.merchant_transaction_id, {'code': 'PAYMENT_ERROR'}, client=client
        )
        payment.refresh_from_db()
        self.assertEqual(payment.status, RegistrationPayment.STATUS_SUCCESS)
        client.is_paid.assert_not_called()

    def test_unknown_transaction_returns_none(self):
        self.assertIsNone(account_services.handle_payment_callback('TX_NOPE_1', {'code': 'PAYMENT_SUCCESS'}))

    def test_retry_requires_outstanding_fee(self):
        partner = make_user('asha@example.com', payment_status=PAYMENT_PAID)
        with self.assertRaises(InvalidTransitionError):
            account_services.retry_registration_payment(partner)


# =============================================================================
# LIFECYCLE TESTS
# =============================================================================

class PartnerLifecycleTest(TestCase):
    """Test deactivate, reactivate, suspend, KYC and upgrades"""

    def setUp(self):
        self.partner = make_user('asha@example.com', role='affiliate')

    def test_deactivate_and_reactivate(self):
        partner = account_services.deactivate_partner(self.partner, 'Inactive for months')
        self.assertEqual(partner.status, STATUS_INACTIVE)
        self.assertEqual(partner.deactivation_reason, 'Inactive for months')
        self.assertFalse(partner.is_active)

        partner = account_services.reactivate_partner(partner, 'Back in business')
        self.assertEqual(partner.status, STATUS_ACTIVE)
        self.assertEqual(partner.reactivation_reason, 'Back in business')

    def test_reason_is_required(self):
        with self.assertRaises(BusinessRuleError) as ctx:
            account_services.deactivate_partner(self.partner, '   ')
        self.assertEqual(ctx.exception.field, 'reason')

    def test_reactivate_requires_inactive(self):
        with self.assertRaises(InvalidTransitionError):
            account_services.reactivate_partner(self.partner, 'Why not')

    def test_suspend_and_unsuspend(self):
        partner = account_services.suspend_partner(self.partner, 'Fraud check')
        self.assertEqual(partner.status, STATUS_SUSPENDED)

        partner = account_services.unsuspend_partner(partner)
        self.assertEqual(partner.status, STATUS_ACTIVE)
        self.assertEqual(partner.suspension_reason, '')
        self.assertIn('Fraud check', partner.reactivation_reason)

    def test_lifecycle_rejects_non_partners(self):
        seller = make_user('sel@example.com', role='seller')
        with self.assertRaises(BusinessRuleError):
            account_services.suspend_partner(seller, 'No')

    def test_seller_status(self):
        seller = make_user('sel@example.com', role='seller', status=STATUS_PENDING)
        seller = account_services.set_seller_status(seller, STATUS_ACTIVE)
        self.assertEqual(seller.status, STATUS_ACTIVE)

        with self.assertRaises(InvalidTransitionError):
            account_services.set_seller_status(seller, STATUS_ACTIVE)

    def test_kyc_review(self):
        partner = account_services.review_kyc(self.partner, approve=False, reason='Blurry PAN')
        self.assertEqual(partner.kyc_status, KYC_REJECTED)
        self.assertEqual(partner.rejection_reason, 'Blurry PAN')

        partner = account_services.review_kyc(partner, approve=True)
        self.assertEqual(partner.kyc_status, KYC_VERIFIED)
        self.assertEqual(partner.rejection_reason, '')

    def test_upgrade_approved(self):
        partner = account_services.request_upgrade(self.partner, 'channel')
        self.assertEqual(partner.status, STATUS_PENDING_UPGRADE)
        self.assertEqual(partner.upgrade_request['new_role'], 'channel')

        partner = account_services.resolve_upgrade(partner, approve=True)
        self.assertEqual(partner.role, 'channel')
        self.assertEqual(partner.status, STATUS_ACTIVE)
        self.assertIsNone(partner.upgrade_request)

    def test_upgrade_rejected_keeps_role(self):
        account_services.request_upgrade(self.partner, 'associate')
        partner = account_services.resolve_upgrade(self.partner, approve=False)
        self.assertEqual(partner.role, 'affiliate')
        self.assertEqual(partner.status, STATUS_ACTIVE)

    def test_upgrade_must_move_up(self):
        channel = make_user('ch@example.com', role='channel')
        with self.assertRaises(BusinessRuleError):
            account_services.request_upgrade(channel, 'affiliate')


# =============================================================================
# TEAM TESTS
# =============================================================================

class TeamRequestTest(TestCase):
    """Test team invitations between partners"""

    def setUp(self):
        self.lead = make_user('lead@example.com', role='associate')
        self.member = make_user('member@example.com', role='affiliate')

    def test_available_partners(self):
        make_user('channel@example.com', role='channel')
        available = list(account_services.available_partners(self.lead))
        self.assertEqual(available, [self.member])

    def test_accept_joins_team(self):
        team_request = account_services.send_team_request(self.lead, self.member)
        team_request = account_services.respond_to_team_request(team_request, self.member, accept=True)

        self.member.refresh_from_db()
        self.assertEqual(team_request.status, TeamRequest.STATUS_ACCEPTED)
        self.assertEqual(self.member.team_lead, self.lead)
        self.assertIsNotNone(team_request.responded_at)

    def test_reject_leaves_member_unattached(self):
        team_request = account_services.send_team_request(self.lead, self.member)
        account_services.respond_to_team_request(team_request, self.member, accept=False)
        self.member.refresh_from_db()
        self.assertIsNone(self.member.team_lead)

    def test_duplicate_pending_request(self):
        account_services.send_team_request(self.lead, self.member)
        with self.assertRaises(BusinessRuleError) as ctx:
            account_services.send_team_request(self.lead, self.member)
        self.assertEqual(ctx.exception.code, 'duplicate_request')

    def test_cannot_invite_higher_tier(self):
        channel = make_user('channel@example.com', role='channel')
        with self.assertRaises(PermissionDeniedError):
            account_services.send_team_request(self.lead, channel)

    def test_only_recipient_can_respond(self):
        team_request = account_services.send_team_request(self.lead, self.member)
        with self.assertRaises(PermissionDeniedError):
            account_services.respond_to_team_request(team_request, self.lead, accept=True)

    def test_already_answered(self):
        team_request = account_services.send_team_request(self.lead, self.member)
        account_services.respond_to_team_request(team_request, self.member, accept=False)
        with self.assertRaises(InvalidTransitionError):
            account_services.respond_to_team_request(team_request, self.member, accept=True)


# =============================================================================
# API ENDPOINT TESTS
# =============================================================================

class AuthenticationAPITest(APITestCase):
    """Test JWT login and public registration"""

    def test_login_returns_tokens_and_profile(self):
        partner = make_user('asha@example.com')
        response = self.client.post(
            reverse('token_obtain_pair'), {'email': 'ASHA@example.com', 'password': 'secret123'}
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)
        self.assertEqual(response.data['user']['user_code'], partner.user_code)

    def test_login_refused_for_suspended_account(self):
        make_user('asha@example.com', status=STATUS_SUSPENDED)
        response = self.client.post(
            reverse('token_obtain_pair'), {'email': 'asha@example.com', 'password': 'secret123'}
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertIn('suspended', str(response.data['detail']))

    def test_quick_registration(self):
        response = self.client.post(reverse('accounts:register'), {
            'name': 'Asha Rani', 'email': 'asha@example.com', 'password': 'secret123', 'role': 'affiliate',
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['user_code'].startswith('PAF'))

    def test_duplicate_registration_conflicts(self):
        make_user('asha@example.com')
        response = self.client.post(reverse('accounts:register'), {
            'name': 'Asha Rani', 'email': 'asha@example.com', 'password': 'secret123', 'role': 'affiliate',
        })
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['code'], 'duplicate_account')

    @patch('accounts.services.PhonePeClient')
    def test_payment_callback_redirects_to_frontend(self, mock_client_class):
        mock_client_class.return_value.is_paid.return_value = True
        partner = make_user('asha@example.com', status=STATUS_PENDING, payment_status='pending')
        payment = RegistrationPayment.objects.create(
            user=partner, merchant_transaction_id=f"TX_{partner.user_code}_1", amount=Decimal('499.00'),
        )

        response = self.client.post(
            f"{reverse('payment-callback')}?merchantTransactionId={payment.merchant_transaction_id}",
            {'code': 'PAYMENT_SUCCESS', 'transactionId': 'T1'},
        )

        self.assertEqual(response.status_code, status.HTTP_302_FOUND)
        self.assertTrue(response['Location'].endswith('/manage-partner?payment=success'))
        partner.refresh_from_db()
        self.assertEqual(partner.status, STATUS_ACTIVE)

    @override_settings(FRONTEND_BASE_URL='https://dealflow.example.com/')
    def test_payment_callback_unknown_transaction_redirects_with_nodata(self):
        response = self.client.post(
            f"{reverse('payment-callback')}?merchantTransactionId=TX_NOPE_1",
            {'code': 'PAYMENT_SUCCESS'},
        )

        self.assertEqual(response.status_code, status.HTTP_302_FOUND)
        self.assertEqual(
            response['Location'],
            'https://dealflow.example.com/manage-partner?payment=failed&reason=nodata'
        )

    def test_payment_callback_without_transaction_id_redirects_with_nodata(self):
        response = self.client.post(reverse('payment-callback'), {'code': 'PAYMENT_SUCCESS'})

        self.assertEqual(response.status_code, status.HTTP_302_FOUND)
        self.assertTrue(response['Location'].endswith('/manage-partner?payment=failed&reason=nodata'))


class PartnerManagementAPITest(APITestCase):
    """Test admin partner endpoints and permissions"""

    def setUp(self):
        self.admin = make_user('admin@example.com', role='admin')
        self.partner = make_user('asha@example.com', role='affiliate')

    def test_list_partners(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.get(reverse('accounts:partner-list'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)

    def test_sub_admin_without_permission_is_forbidden(self):
        sub_admin = make_user('sub@example.com', role='admin', permissions=['manageLeads'])
        self.client.force_authenticate(user=sub_admin)
        response = self.client.get(reverse('accounts:partner-list'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_partner_cannot_manage_partners(self):
        self.client.force_authenticate(user=self.partner)
        response = self.client.get(reverse('accounts:partner-list'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_deactivate_endpoint(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(
            reverse('accounts:partner-deactivate', args=[self.partner.pk]), {'reason': 'Left'}
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], STATUS_INACTIVE)

    def test_upgrade_queue_and_decision(self):
        account_services.request_upgrade(self.partner, 'channel')
        self.client.force_authenticate(user=self.admin)

        response = self.client.get(reverse('accounts:partner-upgrade-requests'))
        self.assertEqual([row['email'] for row in response.data], [self.partner.email])

        response = self.client.post(
            reverse('accounts:partner-upgrade-decision', args=[self.partner.pk]), {'action': 'approve'}
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['role'], 'channel')
        self.assertEqual(response.data['status'], STATUS_ACTIVE)

    def test_activation_panel_lists_reactivated_partners(self):
        account_services.deactivate_partner(self.partner, 'Paused')
        account_services.reactivate_partner(self.partner, 'Resumed')
        make_user('ravi@example.com', role='channel')
        self.client.force_authenticate(user=self.admin)

        response = self.client.get(reverse('accounts:partner-activation-panel'))

        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['email'], self.partner.email)

    def test_deactivate_without_reason(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(reverse('accounts:partner-deactivate', args=[self.partner.pk]), {})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('reason', response.data['details'])

    def test_unsuspend_active_partner_conflicts(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(reverse('accounts:partner-unsuspend', args=[self.partner.pk]))
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_validate_business_step(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(reverse('accounts:partner-validate-step'), {
            'step': 2,
            'business_type': 'Brokerage',
            'partner_role': 'affiliate',
            'business_age': 3,
            'area_covered': 'Pune West',
        })
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['valid'])

    def test_validate_personal_step_password_mismatch(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(reverse('accounts:partner-validate-step'), {
            'step': 'personal',
            'full_name': 'New Partner',
            'email': 'new@example.com',
            'phone': '9876543210',
            'dob': '1990-01-01',
            'password': 'secret123',
            'confirm_password': 'secret999',
            'address': '1 MG Road',
            'city': 'Pune',
            'state': 'Maharashtra',
            'pincode': '411001',
            'gender': 'female',
            'qualification': 'MBA',
        })
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('confirm_password', response.data)

    def test_unknown_wizard_step(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(reverse('accounts:partner-validate-step'), {'step': 'payment'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_only_full_admin_creates_sub_admins(self):
        sub_admin = make_user('sub@example.com', role='admin', permissions=['manageLeads'])
        self.client.force_authenticate(user=sub_admin)
        response = self.client.post(reverse('accounts:admin-user-list'), {
            'first_name': 'A', 'last_name': 'B', 'email': 'ab@example.com',
            'password': 'secret123', 'permissions': ['manageLeads'],
        })
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class TeamAPITest(APITestCase):
    """Test team endpoints"""

    def setUp(self):
        self.lead = make_user('lead@example.com', role='franchisee')
        self.member = make_user('member@example.com', role='affiliate')

    def test_affiliate_cannot_send_requests(self):
        self.client.force_authenticate(user=self.member)
        response = self.client.post(reverse('accounts:team-request-list'), {'recipient_id': self.lead.pk})
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_invite_and_accept(self):
        self.client.force_authenticate(user=self.lead)
        response = self.client.post(reverse('accounts:team-request-list'), {'recipient_id': self.member.pk})
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        self.client.force_authenticate(user=self.member)
        incoming = self.client.get(reverse('accounts:team-request-list'))
        self.assertEqual(len(incoming.data), 1)

        response = self.client.post(
            reverse('accounts:team-request-respond', args=[response.data['id']]), {'action': 'accept'}
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        self.client.force_authenticate(user=self.lead)
        members = self.client.get(reverse('accounts:team-request-members'))
        self.assertEqual([m['user_code'] for m in members.data], [self.member.user_code])


# =============================================================================
# DOCUMENT STORE TESTS
# =============================================================================

class UserDocumentAPITest(APITestCase):
    """Test the personal document store"""

    def setUp(self):
        self.partner = make_user('asha@example.com')
        self.other = make_user('omar@example.com', role='channel')
        self.client.force_authenticate(user=self.partner)

    def _upload(self, title='PAN card', name='pan.pdf', content=b'%PDF-1.4 test', content_type='application/pdf'):
        return self.client.post(
            reverse('accounts:document-list'),
            {'title': title, 'file': SimpleUploadedFile(name, content, content_type=content_type)},
            format='multipart',
        )

    def test_upload_generates_code_and_records_file(self):
        response = self._upload()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertTrue(response.data['document_code'].startswith('DOC'))
        self.assertEqual(len(response.data['document_code']), 9)
        self.assertEqual(response.data['file_name'], 'pan.pdf')
        self.assertEqual(response.data['file_type'], 'application/pdf')
        self.assertEqual(UserDocument.objects.get().user, self.partner)

    def test_blank_title_rejected(self):
        response = self._upload(title='   ')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('title', response.data)

    def test_disallowed_upload_is_blocked(self):
        response = self._upload(name='run.exe', content=b'MZ', content_type='application/octet-stream')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(UserDocument.objects.exists())

    def test_users_only_see_and_delete_own_documents(self):
        code = self._upload().data['document_code']

        self.client.force_authenticate(user=self.other)
        self.assertEqual(self.client.get(reverse('accounts:document-list')).data['count'], 0)
        response = self.client.delete(reverse('accounts:document-detail', args=[code]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

        self.client.force_authenticate(user=self.partner)
        self.assertEqual(self.client.get(reverse('accounts:document-list')).data['count'], 1)
        response = self.client.delete(reverse('accounts:document-detail', args=[code]))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(UserDocument.objects.exists())

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)
        response = self.client.get(reverse('accounts:document-list'))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
