# ===== MARKETING APP TEST SUITE =====
"""
Test suite for marketing kits and partner micro-sites
File: marketing/tests.py

Test Coverage:
- Micro-site rendering over website defaults
- Featured catalog selection
- Website section updates
- Public site endpoints (home, catalog, contact, card)
- Marketing kit permissions
"""

from decimal import Decimal

from django.test import TestCase, override_settings
from django.urls import reverse

from rest_framework.test import APITestCase
from rest_framework import status

from accounts.models import User
from administration.models import AppSetting, KEY_WEBSITE_DEFAULTS
from administration.serializers import WebsiteDefaultsSerializer
from leads.models import Inquiry
from properties.models import Property

from . import services as marketing_services
from .models import MarketingKit


def make_user(email, role='affiliate', **extra):
    return User.objects.create_user(email=email, password='secret123', role=role, **extra)


def make_property(title, **overrides):
    data = {
        'title': title,
        'category': 'Residential',
        'city': 'Pune',
        'state': 'Maharashtra',
        'listing_price': Decimal('4500000'),
        'contact_name': 'Sam Seller',
        'contact_phone': '9876543210',
        'contact_email': 'sam@example.com',
        'status': 'For Sale',
    }
    data.update(overrides)
    return Property.objects.create(**data)


# =============================================================================
# RENDERING TESTS
# =============================================================================

class RenderSiteTest(TestCase):
    """Test merging partner content over the platform defaults"""

    def setUp(self):
        self.partner = make_user('asha@example.com', name='Asha Rao', phone='9876500000')
        serializer = WebsiteDefaultsSerializer(data={
            'business_profile': {'business_name': 'DealFlow Realty'},
            'contact_details': {'contact_name': 'DealFlow Desk', 'phone': '1800-000-000'},
        })
        serializer.is_valid(raise_exception=True)
        AppSetting.set_value(KEY_WEBSITE_DEFAULTS, serializer.to_storage(AppSetting.get_website_defaults()))

    def test_blank_sections_use_defaults(self):
        site = marketing_services.render_site(self.partner)

        self.assertEqual(site['business_profile'], {'business_name': 'DealFlow Realty', 'business_logo': None})
        self.assertEqual(site['contact_details'], {
            'contact_name': 'DealFlow Desk', 'phone': '1800-000-000', 'email': None, 'address': None,
        })
        self.assertEqual(site['partner']['user_code'], self.partner.user_code)

    def test_filled_section_replaces_default(self):
        website = marketing_services.get_website(self.partner)
        website.contact_email = 'asha@rao.example.com'
        website.save()

        site = marketing_services.render_site(self.partner)

        self.assertEqual(site['contact_details']['email'], 'asha@rao.example.com')
        self.assertNotIn('1800-000-000', site['contact_details'].values())
        self.assertEqual(site['business_profile']['business_name'], 'DealFlow Realty')

    def test_contact_keys_match_with_and_without_defaults(self):
        default_keys = set(marketing_services.render_site(self.partner)['contact_details'])

        website = marketing_services.get_website(self.partner)
        website.contact_name = 'Asha Rao'
        website.save()

        self.assertEqual(set(marketing_services.render_site(self.partner)['contact_details']), default_keys)

    def test_social_links_drop_unknown_and_blank(self):
        website = marketing_services.get_website(self.partner)
        website.social_links = {'instagram': 'https://instagram.com/asha', 'facebook': '', 'myspace': 'x'}
        website.save()

        self.assertEqual(
            marketing_services.render_site(self.partner)['social_links'],
            {'instagram': 'https://instagram.com/asha'}
        )

    @override_settings(FRONTEND_BASE_URL='https://dealflow.example.com/')
    def test_business_card(self):
        card = marketing_services.business_card(self.partner)
        self.assertEqual(card['phone'], '9876500000')
        self.assertEqual(card['site_url'], f'https://dealflow.example.com/site/{self.partner.user_code}')


class SiteCatalogTest(TestCase):
    """Test featured property selection"""

    def setUp(self):
        self.partner = make_user('asha@example.com')
        self.listings = [make_property(f'Listing {i}') for i in range(8)]

    def test_featured_follow_partner_order_and_cap(self):
        ids = [prop.pk for prop in reversed(self.listings)]
        website = marketing_services.get_website(self.partner)
        website.featured_catalog = ids
        website.save()

        catalog = marketing_services.site_catalog(self.partner)

        self.assertEqual([prop.pk for prop in catalog['featured']], ids[:6])
        self.assertEqual(len(catalog['properties']), 8)

    def test_featured_skips_listings_not_for_sale(self):
        sold = make_property('Sold one', status='Sold')
        website = marketing_services.get_website(self.partner)
        website.featured_catalog = [sold.pk, self.listings[0].pk]
        website.save()

        catalog = marketing_services.site_catalog(self.partner)

        self.assertEqual(catalog['featured'], [self.listings[0]])
        self.assertNotIn(sold, catalog['properties'])

    def test_featured_falls_back_to_platform_default(self):
        AppSetting.set_value(KEY_WEBSITE_DEFAULTS, {'partner_featured_catalog': [self.listings[2].pk]})
        catalog = marketing_services.site_catalog(self.partner)
        self.assertEqual(catalog['featured'], [self.listings[2]])

    def test_search_and_category(self):
        make_property('Warehouse', category='Industrial', city='Nashik')
        catalog = marketing_services.site_catalog(self.partner, search='nashik', category='Industrial')
        self.assertEqual([prop.title for prop in catalog['properties']], ['Warehouse'])


# =============================================================================
# PARTNER WEBSITE API TESTS
# =============================================================================

class WebsiteAPITest(APITestCase):
    """Test editing a micro-site section by section"""

    def setUp(self):
        self.partner = make_user('asha@example.com')
        self.client.force_authenticate(user=self.partner)

    def test_get_own_website(self):
        response = self.client.get(reverse('marketing:my-website'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['site_url'].endswith(f'/site/{self.partner.user_code}'))

    def test_update_contact_section(self):
        response = self.client.put(
            reverse('marketing:website-section', args=['contact-details']),
            {'contact_name': 'Asha', 'contact_email': 'asha@rao.example.com'},
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(marketing_services.get_website(self.partner).contact_name, 'Asha')

    def test_social_links_validate_urls(self):
        response = self.client.patch(
            reverse('marketing:website-section', args=['social-links']), {'instagram': 'not a url'}
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_featured_catalog_limit(self):
        ids = [make_property(f'L{i}').pk for i in range(7)]
        response = self.client.put(
            reverse('marketing:website-section', args=['featured-catalog']), {'featured_catalog': ids}
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.put(
            reverse('marketing:website-section', args=['featured-catalog']), {'featured_catalog': ids[:6]}
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['featured_catalog'], ids[:6])

    def test_unknown_section(self):
        response = self.client.put(reverse('marketing:website-section', args=['colours']), {})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_sellers_have_no_website(self):
        seller = make_user('sam@example.com', role='seller')
        self.client.force_authenticate(user=seller)
        response = self.client.get(reverse('marketing:my-website'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_add_slide(self):
        response = self.client.post(reverse('marketing:website-slide-list'), {'title': 'Diwali offers'})
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(marketing_services.get_website(self.partner).slides.count(), 1)


# =============================================================================
# PUBLIC SITE API TESTS
# =============================================================================

class PublicSiteAPITest(APITestCase):
    """Test the anonymous micro-site endpoints"""

    def setUp(self):
        self.partner = make_user('asha@example.com')
        self.listing = make_property('Riverside 3BHK')

    def test_home(self):
        response = self.client.get(reverse('site:home', args=[self.partner.user_code]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['partner']['user_code'], self.partner.user_code)

    def test_inactive_partner_is_hidden(self):
        suspended = make_user('sus@example.com', status='suspended')
        response = self.client.get(reverse('site:home', args=[suspended.user_code]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_seller_code_is_not_a_site(self):
        seller = make_user('sam@example.com', role='seller')
        response = self.client.get(reverse('site:card', args=[seller.user_code]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_catalog(self):
        response = self.client.get(reverse('site:catalog', args=[self.partner.user_code]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['properties']), 1)
        self.assertIn('Residential', response.data['categories'])

    def test_contact_creates_inquiry(self):
        response = self.client.post(reverse('site:contact', args=[self.partner.user_code]), {
            'name': 'Vik Visitor', 'email': 'vik@example.com', 'phone': '9876512345',
            'message': 'Is the riverside flat still available?',
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        inquiry = Inquiry.objects.get()
        self.assertEqual(inquiry.partner, self.partner)
        self.assertEqual(inquiry.status, Inquiry.STATUS_NEW)

    def test_contact_validation(self):
        response = self.client.post(
            reverse('site:contact', args=[self.partner.user_code]), {'name': 'Vik', 'email': 'bad'}
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Inquiry.objects.exists())


# =============================================================================
# MARKETING KIT TESTS
# =============================================================================

class MarketingKitAPITest(APITestCase):
    """Test kit publishing permissions"""

    def setUp(self):
        self.admin = make_user('admin@example.com', role='admin')
        self.partner = make_user('asha@example.com')

    def test_admin_publishes_kit(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(
            reverse('marketing:kit-list'), {'title': 'Festive poster', 'kit_type': 'Poster'}
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        kit = MarketingKit.objects.get()
        self.assertTrue(kit.kit_code)
        self.assertEqual(kit.created_by, self.admin)

    def test_partner_lists_but_cannot_publish(self):
        MarketingKit.objects.create(title='Brochure', kit_type='Brochure')
        self.client.force_authenticate(user=self.partner)

        self.assertEqual(len(self.client.get(reverse('marketing:kit-list')).data), 1)
        response = self.client.post(reverse('marketing:kit-list'), {'title': 'Mine'})
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
