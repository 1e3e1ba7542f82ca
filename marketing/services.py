"""
Micro-site services.

Partners edit their PartnerWebsite section by section; the public
renderer merges it over the platform's website defaults. Partner values
win per section: a section the partner has filled in replaces the default
section as a whole.
"""

import logging
from typing import Any, Dict, List, Optional

from django.conf import settings
from django.db.models import Q
from django.http import Http404

from accounts.models import STATUS_ACTIVE, User
from administration.models import AppSetting
from leads.models import Inquiry
from properties.models import CATEGORY_CHOICES, STATUS_FOR_SALE, Property
from services.business_logic import PARTNER_ROLES, get_role_display_name

from .models import MAX_FEATURED_PROPERTIES, SOCIAL_NETWORKS, PartnerWebsite

logger = logging.getLogger(__name__)


# =============================================================================
# PARTNER SIDE
# =============================================================================

def get_website(partner) -> PartnerWebsite:
    website, created = PartnerWebsite.objects.get_or_create(partner=partner)
    if created:
        logger.info(f"Created micro-site for {partner.user_code}")
    return website


def clean_social_links(links: Optional[Dict[str, str]]) -> Dict[str, str]:
    """Known networks with a non-empty URL."""
    return {
        network: url
        for network, url in (links or {}).items()
        if network in SOCIAL_NETWORKS and url
    }


def public_partner(user_code: str) -> User:
    """
    Look up an active partner by user code.

    Raises:
        Http404: Unknown code, non-partner or non-active partner
    """
    try:
        return User.objects.get(user_code=user_code, role__in=PARTNER_ROLES, status=STATUS_ACTIVE)
    except User.DoesNotExist:
        raise Http404("Partner not found.")


def site_url(partner) -> str:
    return f"{settings.FRONTEND_BASE_URL.rstrip('/')}/site/{partner.user_code}"


# =============================================================================
# RENDERING
# =============================================================================

def _file_url(field, request=None) -> Optional[str]:
    if not field:
        return None
    return request.build_absolute_uri(field.url) if request else field.url


def _pick(partner_section: Dict[str, Any], default_section: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if any(value for value in partner_section.values()):
        return partner_section
    default_section = default_section or {}
    return {key: default_section.get(key) for key in partner_section}


def render_site(partner, request=None) -> Dict[str, Any]:
    """
    Public micro-site payload for a partner.

    Returns:
        Dictionary with partner, business_profile, slides, contact_details,
        about_legal and social_links keys
    """
    website = get_website(partner)
    defaults = AppSetting.get_website_defaults()

    business_profile = _pick(
        {
            'business_name': website.business_name,
            'business_logo': _file_url(website.business_logo, request),
        },
        defaults.get('business_profile'),
    )
    contact_details = _pick(
        {
            'contact_name': website.contact_name,
            'phone': website.contact_phone,
            'email': website.contact_email,
            'address': website.contact_address,
        },
        defaults.get('contact_details'),
    )

    return {
        'partner': {
            'user_code': partner.user_code,
            'name': partner.display_name,
            'role': partner.role,
            'role_display': get_role_display_name(partner.role),
        },
        'business_profile': business_profile,
        'slides': [
            {
                'title': slide.title,
                'banner_image': _file_url(slide.banner_image, request),
                'link_url': slide.link_url,
            }
            for slide in website.slides.all()
        ],
        'contact_details': contact_details,
        'about_legal': {
            'about_text': website.about_text,
            'terms_link': _file_url(website.terms_file, request),
            'privacy_link': _file_url(website.privacy_file, request),
            'disclaimer_link': _file_url(website.disclaimer_file, request),
        },
        'social_links': clean_social_links(website.social_links),
    }


def featured_ids(partner) -> List[int]:
    """The partner's featured catalog, or the platform's partner-featured default."""
    website = get_website(partner)
    ids = website.featured_catalog or AppSetting.get_website_defaults().get('partner_featured_catalog') or []
    return [int(pk) for pk in ids]


def site_catalog(partner, search: str = '', category: str = '') -> Dict[str, Any]:
    """
    Listings shown on a micro-site.

    Every For Sale listing is on offer; featured properties are the first
    six featured ids present in that list, in featured order.
    """
    queryset = Property.objects.filter(status=STATUS_FOR_SALE).select_related('property_type')
    if category:
        queryset = queryset.filter(category=category)
    if search:
        queryset = queryset.filter(
            Q(title__icontains=search) | Q(city__icontains=search) | Q(locality__icontains=search)
        )

    properties = list(queryset.order_by('-created_at'))
    by_id = {prop.pk: prop for prop in properties}
    featured = [by_id[pk] for pk in featured_ids(partner) if pk in by_id][:MAX_FEATURED_PROPERTIES]

    return {
        'categories': [value for value, _ in CATEGORY_CHOICES],
        'featured': featured,
        'properties': properties,
    }


def submit_contact(partner, data: Dict[str, Any]) -> Inquiry:
    inquiry = Inquiry.objects.create(partner=partner, **data)
    logger.info(f"Micro-site enquiry {inquiry.pk} received for {partner.user_code}")
    return inquiry


def business_card(partner, request=None) -> Dict[str, Any]:
    """Digital business card: the partner's contact facts plus micro-site links."""
    site = render_site(partner, request)
    return {
        'user_code': partner.user_code,
        'name': partner.display_name,
        'role_display': get_role_display_name(partner.role),
        'phone': partner.phone,
        'whatsapp': partner.whatsapp,
        'email': partner.email,
        'profile_image': _file_url(partner.profile_image, request),
        'business_profile': site['business_profile'],
        'contact_details': site['contact_details'],
        'social_links': site['social_links'],
        'site_url': site_url(partner),
    }
