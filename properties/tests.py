# ===== PROPERTIES APP TEST SUITE =====
"""
Comprehensive test suite for properties app functionality
File: properties/tests.py

Test Coverage:
- Property and PropertyType model behaviour
- Listing visibility per role
- Create/edit workflow (pending verification, owner edits)
- Admin verification workflow (verify, reject, modification, status)
- Serializer validation (toggled dimensions, floors, types, earning rules)
- Section validation, filters and filter options
- Geocoding action and management command with the service mocked out
"""

from decimal import Decimal
from io import StringIO
from unittest.mock import patch

from django.core.management import call_command
from django.db import IntegrityError
from django.test import TestCase
from django.urls import reverse

from rest_framework.test import APITestCase
from rest_framework import status

from accounts.models import User
from services import InvalidTransitionError, PermissionDeniedError

from . import services as property_services
from .models import (
    STATUS_FOR_SALE,
    STATUS_PENDING,
    STATUS_SOLD,
    STATUS_UNDER_CONTRACT,
    Property,
    PropertyType,
)
from .serializers import PropertyDetailSerializer


def make_property(**overrides):
    data = {
        'title': '2BHK in Baner',
        'category': 'Residential',
        'city': 'Pune',
        'state': 'Maharashtra',
        'listing_price': Decimal('6500000'),
        'contact_name': 'Sam Seller',
        'contact_phone': '9876543210',
        'contact_email': 'sam@example.com',
        'status': STATUS_FOR_SALE,
    }
    data.update(overrides)
    return Property.objects.create(**data)


LISTING_PAYLOAD = {
    'title': '3BHK Villa',
    'category': 'Residential',
    'city': 'Pune',
    'state': 'Maharashtra',
    'listing_price': '12500000.00',
    'contact_name': 'Sam Seller',
    'contact_phone': '9876543210',
    'contact_email': 'sam@example.com',
}


# =============================================================================
# PROPERTY MODEL TESTS
# =============================================================================

class PropertyModelTest(TestCase):
    """Test Property model helpers"""

    def test_full_address_skips_blanks(self):
        prop = make_property(address_line='12 Lane', locality='Baner', pincode='411045')
        self.assertEqual(prop.full_address, '12 Lane, Baner, Pune, Maharashtra, 411045, India')

    def test_status_transitions(self):
        prop = make_property(status=STATUS_FOR_SALE)
        self.assertTrue(prop.can_transition_to(STATUS_UNDER_CONTRACT))
        self.assertTrue(prop.can_transition_to(STATUS_SOLD))
        self.assertFalse(prop.can_transition_to(STATUS_PENDING))

        prop.status = STATUS_SOLD
        self.assertFalse(prop.can_transition_to(STATUS_FOR_SALE))

    def test_area_sq_ft_uses_first_enabled_area(self):
        prop = make_property(
            built_up_area=Decimal('1200'), is_built_up_area_enabled=True,
            carpet_area=Decimal('950'), is_carpet_area_enabled=True,
        )
        self.assertEqual(prop.area_sq_ft, Decimal('1200'))

        prop.unit_of_measurement = 'acres'
        self.assertIsNone(prop.area_sq_ft)

    def test_property_type_unique_per_category(self):
        PropertyType.objects.create(name='Villa', category='Residential')
        PropertyType.objects.create(name='Villa', category='Commercial')
        with self.assertRaises(IntegrityError):
            PropertyType.objects.create(name='Villa', category='Residential')


# =============================================================================
# LISTING WORKFLOW SERVICE TESTS
# =============================================================================

class ListingWorkflowTest(TestCase):
    """Test creation, edits and the verification workflow"""

    def setUp(self):
        self.admin = User.objects.create_user(email='admin@example.com', password='x', role='admin')
        self.seller = User.objects.create_user(email='sam@example.com', password='x', role='seller')
        self.partner = User.objects.create_user(email='asha@example.com', password='x', role='affiliate')

    def _data(self):
        data = dict(LISTING_PAYLOAD)
        data['listing_price'] = Decimal(data['listing_price'])
        return data

    def test_seller_listing_starts_pending(self):
        data = self._data()
        data['status'] = STATUS_FOR_SALE
        prop = property_services.create_property(data, self.seller)
        self.assertEqual(prop.status, STATUS_PENDING)
        self.assertEqual(prop.owner, self.seller)

    def test_admin_listing_is_published(self):
        prop = property_services.create_property(self._data(), self.admin)
        self.assertEqual(prop.status, STATUS_FOR_SALE)
        self.assertIsNone(prop.owner)

    def test_owner_edit_returns_listing_to_pending(self):
        prop = make_property(modification_notes='Add photos')
        prop = property_services.update_property(prop, {'title': 'Updated'}, self.seller)
        self.assertEqual(prop.status, STATUS_PENDING)
        self.assertEqual(prop.modification_notes, '')
        self.assertEqual(prop.title, 'Updated')

    def test_admin_edit_keeps_status(self):
        prop = make_property()
        prop = property_services.update_property(prop, {'title': 'Updated'}, self.admin)
        self.assertEqual(prop.status, STATUS_FOR_SALE)

    def test_non_owner_cannot_edit(self):
        prop = make_property()
        with self.assertRaises(PermissionDeniedError):
            property_services.update_property(prop, {'title': 'Mine now'}, self.partner)

    def test_visibility(self):
        public = make_property()
        pending_own = make_property(status=STATUS_PENDING, title='Own draft')
        pending_other = make_property(status=STATUS_PENDING, contact_email='other@example.com')

        self.assertEqual(set(property_services.visible_properties(self.partner)), {public})
        self.assertEqual(set(property_services.visible_properties(self.seller)), {public, pending_own})
        self.assertEqual(
            set(property_services.visible_properties(self.admin)), {public, pending_own, pending_other}
        )

    def test_verify_only_pending(self):
        prop = make_property(status=STATUS_PENDING)
        prop = property_services.verify_property(prop)
        self.assertEqual(prop.status, STATUS_FOR_SALE)

        with self.assertRaises(InvalidTransitionError):
            property_services.verify_property(prop)

    def test_reject_deletes_listing(self):
        prop = make_property(status=STATUS_PENDING)
        property_services.reject_property(prop)
        self.assertFalse(Property.objects.filter(pk=prop.pk).exists())

    def test_request_modification(self):
        prop = make_property()
        prop = property_services.request_modification(prop, 'Fix the price')
        self.assertEqual(prop.status, STATUS_PENDING)
        self.assertEqual(prop.modification_notes, 'Fix the price')

    def test_change_status(self):
        prop = make_property()
        prop = property_services.change_status(prop, STATUS_UNDER_CONTRACT)
        prop = property_services.change_status(prop, STATUS_SOLD)
        self.assertEqual(prop.status, STATUS_SOLD)

        with self.assertRaises(InvalidTransitionError):
            property_services.change_status(prop, STATUS_FOR_SALE)

    def test_record_view(self):
        prop = make_property()
        property_services.record_view(prop)
        property_services.record_view(prop)
        self.assertEqual(prop.views, 2)


# =============================================================================
# SERIALIZER VALIDATION TESTS
# =============================================================================

class PropertySerializerTest(TestCase):
    """Test listing form validation"""

    def test_enabled_dimension_requires_value(self):
        serializer = PropertyDetailSerializer(data=dict(LISTING_PAYLOAD, is_bedrooms_enabled=True))
        self.assertFalse(serializer.is_valid())
        self.assertIn('bedrooms', serializer.errors)

    def test_floor_number_cannot_exceed_total(self):
        serializer = PropertyDetailSerializer(data=dict(LISTING_PAYLOAD, total_floors=4, floor_number=7))
        self.assertFalse(serializer.is_valid())
        self.assertIn('floor_number', serializer.errors)

    def test_property_type_must_match_category(self):
        shop = PropertyType.objects.create(name='Shop', category='Commercial')
        serializer = PropertyDetailSerializer(data=dict(LISTING_PAYLOAD, property_type=shop.pk))
        self.assertFalse(serializer.is_valid())
        self.assertIn('property_type', serializer.errors)

    def test_earning_rules_are_normalised(self):
        serializer = PropertyDetailSerializer(data=dict(
            LISTING_PAYLOAD, earning_rules={'affiliate': {'type': 'flat_amount', 'value': 5000}}
        ))
        self.assertTrue(serializer.is_valid(), serializer.errors)
        self.assertEqual(
            serializer.validated_data['earning_rules'],
            {'affiliate': {'type': 'flat_amount', 'value': '5000'}}
        )

    def test_earning_rules_reject_unknown_role(self):
        serializer = PropertyDetailSerializer(data=dict(
            LISTING_PAYLOAD, earning_rules={'seller': {'type': 'flat_amount', 'value': 5000}}
        ))
        self.assertFalse(serializer.is_valid())
        self.assertIn('earning_rules', serializer.errors)


# =============================================================================
# API ENDPOINT TESTS
# =============================================================================

class PropertyAPITest(APITestCase):
    """Test listing endpoints and permissions"""

    def setUp(self):
        self.admin = User.objects.create_user(email='admin@example.com', password='x', role='admin')
        self.seller = User.objects.create_user(email='sam@example.com', password='x', role='seller')
        self.partner = User.objects.create_user(email='asha@example.com', password='x', role='affiliate')
        self.public = make_property(title='Public flat')
        self.pending = make_property(title='Draft', status=STATUS_PENDING)

    def test_anonymous_sees_verified_listings(self):
        response = self.client.get(reverse('properties:property-list'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([p['title'] for p in response.data['results']], ['Public flat'])

    def test_pending_detail_hidden_from_partners(self):
        self.client.force_authenticate(user=self.partner)
        response = self.client.get(reverse('properties:property-detail', args=[self.pending.pk]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_retrieve_counts_views(self):
        self.client.get(reverse('properties:property-detail', args=[self.public.pk]))
        response = self.client.get(reverse('properties:property-detail', args=[self.public.pk]))
        self.assertEqual(response.data['views'], 2)

    def test_seller_creates_pending_listing(self):
        self.client.force_authenticate(user=self.seller)
        response = self.client.post(reverse('properties:property-list'), LISTING_PAYLOAD)

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data['status'], STATUS_PENDING)
        self.assertEqual(response.data['owner_code'], self.seller.user_code)

    def test_create_requires_authentication(self):
        response = self.client.post(reverse('properties:property-list'), LISTING_PAYLOAD)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_owner_patch_resets_status(self):
        self.client.force_authenticate(user=self.seller)
        response = self.client.patch(
            reverse('properties:property-detail', args=[self.public.pk]), {'title': 'Renamed'}
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], STATUS_PENDING)

    def test_non_owner_patch_forbidden(self):
        self.client.force_authenticate(user=self.partner)
        response = self.client.patch(
            reverse('properties:property-detail', args=[self.public.pk]), {'title': 'Mine'}
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_my_properties(self):
        self.client.force_authenticate(user=self.seller)
        response = self.client.get(reverse('properties:property-my-properties'))
        self.assertEqual(response.data['count'], 2)

    def test_admin_verify(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(reverse('properties:property-verify', args=[self.pending.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], STATUS_FOR_SALE)

    def test_admin_reject(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(reverse('properties:property-reject', args=[self.pending.pk]))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Property.objects.filter(pk=self.pending.pk).exists())

    def test_invalid_status_change_conflicts(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(
            reverse('properties:property-set-status', args=[self.public.pk]), {'status': STATUS_PENDING}
        )
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['code'], 'invalid_transition')

    def test_sub_admin_needs_manage_listings(self):
        sub_admin = User.objects.create_user(
            email='sub@example.com', password='x', role='admin', permissions=['manageLeads']
        )
        self.client.force_authenticate(user=sub_admin)
        response = self.client.get(reverse('properties:property-pending'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_pending_queue(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.get(reverse('properties:property-pending'))
        self.assertEqual([p['title'] for p in response.data], ['Draft'])

    def test_filters(self):
        make_property(title='Mumbai flat', city='Mumbai', listing_price=Decimal('25000000'))
        url = reverse('properties:property-list')

        response = self.client.get(url, {'min_price': '10000000'})
        self.assertEqual([p['title'] for p in response.data['results']], ['Mumbai flat'])

        response = self.client.get(url, {'cities': 'pune, mumbai'})
        self.assertEqual(response.data['count'], 2)

    def test_filter_options(self):
        response = self.client.get(reverse('properties:property-filter-options'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['cities'], ['Pune'])
        self.assertEqual(response.data['categories'], ['Residential'])

    def test_validate_section(self):
        self.client.force_authenticate(user=self.seller)
        url = reverse('properties:property-validate-section')

        response = self.client.post(url, {'section': 'contact', 'contact_name': 'Sam', 'contact_phone': '98'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('contact_email', response.data)

        response = self.client.post(url, {'section': 'pricing', 'listing_price': '100000'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_property_types_public_read_admin_write(self):
        PropertyType.objects.create(name='Apartment', category='Residential')
        response = self.client.get(reverse('properties:property-type-list'))
        self.assertEqual(len(response.data), 1)

        self.client.force_authenticate(user=self.seller)
        response = self.client.post(
            reverse('properties:property-type-list'), {'name': 'Plot', 'category': 'Land'}
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    @patch('properties.services.GeocodingService')
    def test_geocode_action(self, mock_service_class):
        mock_service_class.return_value.geocode_property.return_value = True
        self.client.force_authenticate(user=self.admin)

        response = self.client.post(reverse('properties:property-geocode', args=[self.public.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['geocoded'])
        mock_service_class.return_value.geocode_property.assert_called_once()


# =============================================================================
# MANAGEMENT COMMAND TESTS
# =============================================================================

class GeocodeCommandTest(TestCase):
    """Test the geocode_properties command with the service mocked out"""

    @patch('properties.management.commands.geocode_properties.GeocodingService')
    def test_geocodes_missing_coordinates(self, mock_service_class):
        make_property()
        make_property(title='Located', latitude=18.5, longitude=73.8)
        mock_service_class.return_value.batch_geocode_properties.return_value = {
            'total': 1, 'success': 1, 'skipped': 0, 'failed': 0, 'failed_ids': [],
        }
        out = StringIO()

        call_command('geocode_properties', '--delay', '0', stdout=out)

        queryset = mock_service_class.return_value.batch_geocode_properties.call_args[0][0]
        self.assertEqual(queryset.count(), 1)
        self.assertIn('Successfully geocoded: 1', out.getvalue())

    def test_nothing_to_do(self):
        make_property(latitude=18.5, longitude=73.8)
        out = StringIO()
        call_command('geocode_properties', stdout=out)
        self.assertIn('All listings already have coordinates', out.getvalue())
