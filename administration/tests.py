# ===== ADMINISTRATION APP TEST SUITE =====
"""
Test suite for platform settings and the admin dashboard
File: administration/tests.py

Test Coverage:
- AppSetting defaults, merging and seeding
- Settings endpoints (maintenance, registration fees, earning rules, website defaults)
- Maintenance mode middleware
- Dashboard counts
"""

from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from django.urls import reverse

from rest_framework.test import APITestCase
from rest_framework import status

from accounts.models import User

from .models import (
    AppSetting,
    DEFAULT_MAINTENANCE_MESSAGE,
    KEY_MAINTENANCE,
    KEY_REGISTRATION_FEES,
    SETTING_DEFAULTS,
)


# =============================================================================
# APP SETTING MODEL TESTS
# =============================================================================

class AppSettingModelTest(TestCase):
    """Test defaults and merging of stored settings"""

    def test_first_read_creates_default_row(self):
        self.assertFalse(AppSetting.objects.filter(key=KEY_MAINTENANCE).exists())

        value = AppSetting.get_maintenance()

        self.assertEqual(value, {'is_enabled': False, 'message': DEFAULT_MAINTENANCE_MESSAGE})
        self.assertTrue(AppSetting.objects.filter(key=KEY_MAINTENANCE).exists())

    def test_stored_value_is_merged_over_default(self):
        AppSetting.set_value(KEY_REGISTRATION_FEES, {'channel': '2500'})
        fees = AppSetting.get_registration_fees()

        self.assertEqual(fees['channel'], '2500')
        self.assertEqual(fees['affiliate'], '0')

    def test_blank_maintenance_message_falls_back(self):
        AppSetting.set_value(KEY_MAINTENANCE, {'is_enabled': True, 'message': ''})
        self.assertEqual(AppSetting.get_maintenance()['message'], DEFAULT_MAINTENANCE_MESSAGE)

    def test_defaults_are_not_shared_between_reads(self):
        defaults = AppSetting.get_website_defaults()
        defaults['featured_catalog'].append(99)
        self.assertEqual(AppSetting.get_website_defaults()['featured_catalog'], [])

    def test_seed_command_is_idempotent(self):
        out = StringIO()
        call_command('seed_platform_settings', stdout=out)
        self.assertEqual(AppSetting.objects.count(), len(SETTING_DEFAULTS))

        call_command('seed_platform_settings', stdout=out)
        self.assertEqual(AppSetting.objects.count(), len(SETTING_DEFAULTS))
        self.assertIn('0 setting(s) created', out.getvalue())


# =============================================================================
# SETTINGS API TESTS
# =============================================================================

class SettingsAPITest(APITestCase):
    """Test the settings endpoints"""

    def setUp(self):
        self.admin = User.objects.create_user(email='admin@example.com', password='secret123', role='admin')
        self.partner = User.objects.create_user(email='asha@example.com', password='secret123', role='affiliate')

    def test_maintenance_is_public_to_read(self):
        response = self.client.get(reverse('administration:maintenance'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['is_enabled'])

    def test_partner_cannot_change_maintenance(self):
        self.client.force_authenticate(user=self.partner)
        response = self.client.put(reverse('administration:maintenance'), {'is_enabled': True})
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_update_registration_fees(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.put(
            reverse('administration:registration-fees'), {'associate': '1500.00'}
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['associate'], '1500.00')
        self.assertEqual(AppSetting.get_registration_fees()['associate'], '1500.00')

    def test_negative_fee_rejected(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.put(reverse('administration:registration-fees'), {'channel': '-1'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_earning_rules(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.put(reverse('administration:earning-rules'), {
            'affiliate': {'type': 'commission_percentage', 'value': '2.5'},
        })
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            AppSetting.get_default_earning_rules()['affiliate'],
            {'type': 'commission_percentage', 'value': '2.50'}
        )

    def test_per_sq_ft_rule_needs_area(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.put(reverse('administration:earning-rules'), {
            'channel': {'type': 'per_sq_ft', 'value': '10'},
        })
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_website_defaults_catalog_limit(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.put(
            reverse('administration:website-defaults'), {'featured_catalog': [1, 2, 3, 4, 5, 6, 7]}
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_website_defaults_partial_update(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.put(reverse('administration:website-defaults'), {
            'business_profile': {'business_name': 'DealFlow Realty'},
        })
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        defaults = AppSetting.get_website_defaults()
        self.assertEqual(defaults['business_profile']['business_name'], 'DealFlow Realty')
        self.assertEqual(defaults['featured_catalog'], [])


# =============================================================================
# MAINTENANCE MIDDLEWARE TESTS
# =============================================================================

class MaintenanceModeTest(APITestCase):
    """Test that maintenance mode blocks API traffic except exempt paths"""

    def setUp(self):
        self.partner = User.objects.create_user(email='asha@example.com', password='secret123', role='affiliate')
        AppSetting.set_value(KEY_MAINTENANCE, {'is_enabled': True, 'message': 'Back at noon'})

    def test_api_returns_503(self):
        self.client.force_authenticate(user=self.partner)
        response = self.client.get('/api/v1/properties/')

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()['message'], 'Back at noon')
        self.assertTrue(response.json()['maintenance'])

    def test_settings_and_health_stay_reachable(self):
        self.assertEqual(self.client.get(reverse('administration:maintenance')).status_code, 200)
        self.assertEqual(self.client.get(reverse('health-check')).status_code, 200)


# =============================================================================
# DASHBOARD TESTS
# =============================================================================

class DashboardAPITest(APITestCase):
    """Test the admin dashboard counts"""

    def setUp(self):
        self.admin = User.objects.create_user(email='admin@example.com', password='secret123', role='admin')
        User.objects.create_user(email='a1@example.com', password='x', role='affiliate')
        User.objects.create_user(email='a2@example.com', password='x', role='affiliate', status='suspended')
        User.objects.create_user(email='ch@example.com', password='x', role='channel')
        User.objects.create_user(email='sel@example.com', password='x', role='seller')

    def test_dashboard_counts(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.get(reverse('administration:dashboard'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['partners_by_role']['affiliate'], 2)
        self.assertEqual(response.data['partners_by_role']['franchisee'], 0)
        self.assertEqual(response.data['partners_by_status']['suspended'], 1)
        self.assertEqual(response.data['sellers'], 1)
        self.assertEqual(response.data['customers'], 0)
        self.assertEqual(response.data['pending_withdrawals'], 0)

    def test_dashboard_requires_admin(self):
        seller = User.objects.get(email='sel@example.com')
        self.client.force_authenticate(user=seller)
        response = self.client.get(reverse('administration:dashboard'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
