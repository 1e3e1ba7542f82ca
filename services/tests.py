# ===== SERVICES LAYER TEST SUITE =====
"""
Test suite for the services layer
File: services/tests.py

Test Coverage:
- User code generation and role catalogue rules
- Earning rule validation and calculation
- Registration payment decision
- PhonePe request signing, initiation and status checks
- OTP issue/verify lifecycle
- Geocoding with the Google Maps API mocked out
"""

import base64
import hashlib
import json
from decimal import Decimal
from unittest.mock import patch, Mock

import requests
from django.core import mail
from django.core.cache import cache
from django.test import SimpleTestCase, TestCase, override_settings

from . import (
    BusinessRuleError,
    GeocodingServiceError,
    InvalidTransitionError,
    PaymentGatewayError,
    check_service_health,
    safe_geocode_address,
)
from .business_logic import (
    ADDABLE_ROLES,
    UPGRADE_PATHS,
    calculate_earning,
    can_build_team,
    decide_registration_payment,
    generate_user_id,
    get_upgrade_options,
    resolve_earning_rule,
    split_full_name,
    validate_earning_rule,
    validate_upgrade,
)
from .geocoding import GeocodingService
from .otp import OTPService
from .payments import PhonePeClient, build_merchant_transaction_id, parse_user_code


# =============================================================================
# ROLE CATALOGUE TESTS
# =============================================================================

class RoleCatalogueTest(SimpleTestCase):
    """Test user code generation and team/upgrade rules"""

    def test_generate_user_id_format(self):
        code = generate_user_id('PAF')
        self.assertTrue(code.startswith('PAF'))
        self.assertEqual(len(code), 9)
        self.assertTrue(100000 <= int(code[3:]) <= 999999)

    @patch('services.business_logic.random.randint', return_value=123456)
    def test_generate_user_id_uses_six_digit_range(self, mock_randint):
        self.assertEqual(generate_user_id('SEL'), 'SEL123456')
        mock_randint.assert_called_once_with(100000, 999999)

    def test_split_full_name(self):
        self.assertEqual(split_full_name('Asha Rani Verma'), ('Asha', 'Rani Verma'))
        self.assertEqual(split_full_name('Ravi'), ('Ravi', ''))
        self.assertEqual(split_full_name('   '), ('', ''))

    def test_addable_roles(self):
        self.assertEqual(
            ADDABLE_ROLES['franchisee'],
            ['channel', 'associate', 'super_affiliate', 'affiliate']
        )
        self.assertEqual(ADDABLE_ROLES['associate'], ['super_affiliate', 'affiliate'])
        self.assertFalse(can_build_team('affiliate'))
        self.assertFalse(can_build_team('super_affiliate'))
        self.assertTrue(can_build_team('channel'))

    def test_upgrade_paths(self):
        self.assertEqual(UPGRADE_PATHS['affiliate'], ['super_affiliate', 'associate', 'channel'])
        self.assertEqual(UPGRADE_PATHS['channel'], [])
        self.assertEqual(UPGRADE_PATHS['franchisee'], [])

    def test_upgrade_options_include_features(self):
        options = get_upgrade_options('associate')
        self.assertEqual(len(options), 1)
        self.assertEqual(options[0]['role'], 'channel')
        self.assertEqual(options[0]['name'], 'Channel Partner')
        self.assertIn('Regional exclusivity options', options[0]['features'])

    def test_validate_upgrade_rejects_downgrade(self):
        validate_upgrade('affiliate', 'channel')
        with self.assertRaises(BusinessRuleError) as ctx:
            validate_upgrade('channel', 'affiliate')
        self.assertEqual(ctx.exception.field, 'new_role')

    def test_exception_status_codes(self):
        self.assertEqual(BusinessRuleError('x').status_code, 400)
        self.assertEqual(InvalidTransitionError('x').status_code, 409)
        self.assertEqual(InvalidTransitionError('x').code, 'invalid_transition')


# =============================================================================
# EARNING RULE TESTS
# =============================================================================

class EarningCalculationTest(SimpleTestCase):
    """Test the four earning rule types"""

    def test_reward_points(self):
        result = calculate_earning({'type': 'reward_points', 'value': 250}, sale_amount=1000000)
        self.assertTrue(result.is_points)
        self.assertEqual(result.reward_points, 250)
        self.assertEqual(result.amount, Decimal('0.00'))

    def test_commission_percentage_rounds_to_two_places(self):
        result = calculate_earning({'type': 'commission_percentage', 'value': '1.5'}, sale_amount='333333')
        self.assertEqual(result.amount, Decimal('5000.00'))

        result = calculate_earning({'type': 'commission_percentage', 'value': '2.5'}, sale_amount='1234.57')
        self.assertEqual(result.amount, Decimal('30.86'))

    def test_flat_amount(self):
        result = calculate_earning({'type': 'flat_amount', 'value': 15000})
        self.assertEqual(result.amount, Decimal('15000.00'))

    def test_per_sq_ft_uses_rule_area(self):
        result = calculate_earning({'type': 'per_sq_ft', 'value': 10, 'total_sq_ft': 1200})
        self.assertEqual(result.amount, Decimal('12000.00'))

    def test_per_sq_ft_area_override(self):
        result = calculate_earning({'type': 'per_sq_ft', 'value': 10, 'total_sq_ft': 1200}, area_sq_ft=900)
        self.assertEqual(result.amount, Decimal('9000.00'))

    def test_per_sq_ft_requires_positive_area(self):
        with self.assertRaises(BusinessRuleError) as ctx:
            validate_earning_rule({'type': 'per_sq_ft', 'value': 10, 'total_sq_ft': 0})
        self.assertEqual(ctx.exception.field, 'total_sq_ft')

    def test_unknown_rule_type(self):
        with self.assertRaises(BusinessRuleError):
            validate_earning_rule({'type': 'bonus', 'value': 1})

    def test_negative_value_rejected(self):
        with self.assertRaises(BusinessRuleError):
            validate_earning_rule({'type': 'flat_amount', 'value': -5})

    def test_resolve_prefers_property_rule(self):
        property_rules = {'affiliate': {'type': 'flat_amount', 'value': 500}}
        default_rules = {
            'affiliate': {'type': 'reward_points', 'value': 10},
            'channel': {'type': 'commission_percentage', 'value': 1},
        }
        self.assertEqual(resolve_earning_rule('affiliate', property_rules, default_rules)['type'], 'flat_amount')
        self.assertEqual(resolve_earning_rule('channel', property_rules, default_rules)['type'], 'commission_percentage')
        self.assertIsNone(resolve_earning_rule('franchisee', property_rules, default_rules))


# =============================================================================
# REGISTRATION PAYMENT DECISION TESTS
# =============================================================================

class RegistrationPaymentDecisionTest(SimpleTestCase):

    def test_payment_required_when_enabled_and_fee_positive(self):
        required, amount = decide_registration_payment('channel', {'channel': '4999'}, True)
        self.assertTrue(required)
        self.assertEqual(amount, Decimal('4999.00'))

    def test_payment_not_required_when_disabled(self):
        self.assertEqual(
            decide_registration_payment('channel', {'channel': '4999'}, False),
            (False, Decimal('0'))
        )

    def test_payment_not_required_for_zero_or_missing_fee(self):
        self.assertFalse(decide_registration_payment('affiliate', {'affiliate': 0}, True)[0])
        self.assertFalse(decide_registration_payment('affiliate', {}, True)[0])
        self.assertFalse(decide_registration_payment('affiliate', None, True)[0])


# =============================================================================
# PAYMENT GATEWAY TESTS
# =============================================================================

class PhonePeClientTest(SimpleTestCase):
    """Test request signing and API handling with requests mocked"""

    def setUp(self):
        self.client = PhonePeClient(
            merchant_id='MERCHANT1',
            salt_key='salt-key',
            salt_index=1,
            base_url='https://gateway.example/apis/hermes',
        )

    def test_pay_payload_amount_in_paisa(self):
        payload = self.client.build_pay_payload(
            Decimal('4999.50'), 'TX_PCH123456_1', 'PCH123456',
            'https://app.example/done', 'https://api.example/callback'
        )
        self.assertEqual(payload['amount'], 499950)
        self.assertEqual(payload['redirectMode'], 'POST')
        self.assertEqual(payload['paymentInstrument'], {'type': 'PAY_PAGE'})
        self.assertEqual(payload['mobileNumber'], '9999999999')

    @patch('services.payments.requests.post')
    def test_initiate_payment_signs_request(self, mock_post):
        mock_post.return_value = Mock(json=Mock(return_value={
            'success': True,
            'data': {'instrumentResponse': {'redirectInfo': {'url': 'https://pay.example/page'}}},
        }))

        url = self.client.initiate_payment(
            Decimal('100'), 'TX_PAF111111_5', 'PAF111111',
            'https://app.example/done', 'https://api.example/callback'
        )

        self.assertEqual(url, 'https://pay.example/page')
        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], 'https://gateway.example/apis/hermes/pg/v1/pay')
        encoded = kwargs['json']['request']
        decoded = json.loads(base64.b64decode(encoded))
        self.assertEqual(decoded['merchantTransactionId'], 'TX_PAF111111_5')
        expected = hashlib.sha256(f"{encoded}/pg/v1/pay" "salt-key".encode()).hexdigest() + '###1'
        self.assertEqual(kwargs['headers']['X-VERIFY'], expected)

    @patch('services.payments.requests.post')
    def test_initiate_payment_gateway_refusal(self, mock_post):
        mock_post.return_value = Mock(json=Mock(return_value={'success': False, 'message': 'Bad merchant'}))
        with self.assertRaises(PaymentGatewayError) as ctx:
            self.client.initiate_payment(Decimal('100'), 'TX_A_1', 'A', 'r', 'c')
        self.assertIn('Bad merchant', str(ctx.exception))

    @patch('services.payments.requests.post', side_effect=requests.ConnectionError('down'))
    def test_initiate_payment_network_error(self, mock_post):
        with self.assertRaises(PaymentGatewayError):
            self.client.initiate_payment(Decimal('100'), 'TX_A_1', 'A', 'r', 'c')

    def test_initiate_payment_requires_credentials(self):
        client = PhonePeClient(merchant_id='', salt_key='', salt_index=1, base_url='https://x')
        with self.assertRaises(PaymentGatewayError):
            client.initiate_payment(Decimal('100'), 'TX_A_1', 'A', 'r', 'c')

    @patch('services.payments.requests.get')
    def test_check_status_path_and_signature(self, mock_get):
        mock_get.return_value = Mock(json=Mock(return_value={'code': 'PAYMENT_SUCCESS'}))

        self.assertTrue(self.client.is_paid('TX_PAF111111_5'))

        args, kwargs = mock_get.call_args
        path = '/pg/v1/status/MERCHANT1/TX_PAF111111_5'
        self.assertEqual(args[0], f'https://gateway.example/apis/hermes{path}')
        expected = hashlib.sha256(f"{path}salt-key".encode()).hexdigest() + '###1'
        self.assertEqual(kwargs['headers']['X-VERIFY'], expected)

    def test_transaction_id_round_trip(self):
        txid = build_merchant_transaction_id('PFR654321', 1700000000000)
        self.assertEqual(txid, 'TX_PFR654321_1700000000000')
        self.assertEqual(parse_user_code(txid), 'PFR654321')

    def test_parse_user_code_rejects_malformed_ids(self):
        self.assertIsNone(parse_user_code(None))
        self.assertIsNone(parse_user_code('garbage'))
        self.assertIsNone(parse_user_code('PAY_ABC_1'))


# =============================================================================
# OTP SERVICE TESTS
# =============================================================================

@override_settings(EMAIL_BACKEND='django.core.mail.backends.locmem.EmailBackend')
class OTPServiceTest(SimpleTestCase):

    def setUp(self):
        cache.clear()
        self.service = OTPService(ttl_seconds=300)

    @patch('services.otp.OTPService.generate_code', return_value='654321')
    def test_send_otp_emails_code(self, mock_code):
        self.service.send_otp('buyer@example.com', 'Meera')
        self.assertEqual(len(mail.outbox), 1)
        self.assertIn('654321', mail.outbox[0].body)
        self.assertIn('Meera', mail.outbox[0].body)
        self.assertEqual(mail.outbox[0].to, ['buyer@example.com'])

    @patch('services.otp.OTPService.generate_code', return_value='654321')
    def test_verify_is_single_use(self, mock_code):
        self.service.send_otp('buyer@example.com', 'Meera')
        self.assertTrue(self.service.verify_otp('buyer@example.com', '654321'))
        self.assertFalse(self.service.verify_otp('buyer@example.com', '654321'))

    @patch('services.otp.OTPService.generate_code', return_value='654321')
    def test_wrong_code_keeps_otp(self, mock_code):
        self.service.send_otp('buyer@example.com', 'Meera')
        self.assertFalse(self.service.verify_otp('buyer@example.com', '000000'))
        self.assertTrue(self.service.verify_otp('buyer@example.com', '654321'))

    def test_missing_otp(self):
        self.assertFalse(self.service.verify_otp('nobody@example.com', '123456'))

    @patch('services.otp.time.time')
    @patch('services.otp.OTPService.generate_code', return_value='654321')
    def test_expired_otp_is_deleted(self, mock_code, mock_time):
        mock_time.return_value = 1000.0
        self.service.send_otp('buyer@example.com', 'Meera')

        mock_time.return_value = 1000.0 + 301
        self.assertFalse(self.service.verify_otp('buyer@example.com', '654321'))
        self.assertIsNone(cache.get('otp:buyer@example.com'))

    def test_generated_code_is_six_digits(self):
        code = OTPService.generate_code()
        self.assertEqual(len(code), 6)
        self.assertTrue(code.isdigit())


# =============================================================================
# GEOCODING SERVICE TESTS
# =============================================================================

class GeocodingServiceTest(SimpleTestCase):
    """Test geocoding with the Google Maps API mocked"""

    def setUp(self):
        self.service = GeocodingService(api_key='test-key')
        self.ok_response = {
            'status': 'OK',
            'results': [{'geometry': {'location': {'lat': 12.9716, 'lng': 77.5946}}}],
        }

    @patch('services.geocoding.requests.get')
    def test_geocode_address_success(self, mock_get):
        mock_get.return_value = Mock(json=Mock(return_value=self.ok_response), raise_for_status=Mock())
        self.assertEqual(self.service.geocode_address('MG Road, Bengaluru'), (12.9716, 77.5946))
        self.assertEqual(mock_get.call_args.kwargs['params']['key'], 'test-key')

    @patch('services.geocoding.requests.get')
    def test_zero_results_returns_none(self, mock_get):
        mock_get.return_value = Mock(json=Mock(return_value={'status': 'ZERO_RESULTS', 'results': []}),
                                     raise_for_status=Mock())
        self.assertIsNone(self.service.geocode_address('Nowhere'))

    @patch('services.geocoding.requests.get')
    def test_quota_exceeded_raises(self, mock_get):
        mock_get.return_value = Mock(json=Mock(return_value={'status': 'OVER_QUERY_LIMIT'}),
                                     raise_for_status=Mock())
        with self.assertRaises(GeocodingServiceError):
            self.service.geocode_address('MG Road')

    def test_missing_key_raises(self):
        with self.assertRaises(GeocodingServiceError):
            GeocodingService(api_key='').geocode_address('MG Road')

    def test_empty_address(self):
        self.assertIsNone(self.service.geocode_address('  '))

    @override_settings(GOOGLE_MAPS_API_KEY='')
    def test_safe_geocode_swallows_service_errors(self):
        self.assertIsNone(safe_geocode_address('MG Road'))


# =============================================================================
# HEALTH CHECK TESTS
# =============================================================================

class ServiceHealthTest(SimpleTestCase):

    @override_settings(PAYMENT_ENABLED=True, PHONEPE_MERCHANT_ID='M1', GOOGLE_MAPS_API_KEY='')
    def test_health_report(self):
        health = check_service_health()
        self.assertTrue(health['payments']['enabled'])
        self.assertTrue(health['payments']['merchant_configured'])
        self.assertFalse(health['geocoding']['api_key_configured'])
