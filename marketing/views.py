"""
Views for the marketing app.

Partner and admin endpoints (under /api/v1/marketing/):
- kits/                      marketing kits (admins create/delete, partners list)
- website/                   own micro-site content
- website/<section>/         update one section
- website/slides/            slideshow entries

Public micro-site endpoints (under /api/v1/site/<user_code>/):
- /            rendered site
- catalog/     For Sale listings with featured properties
- contact/     enquiry form
- card/        digital business card
"""

import logging

from django.http import Http404
from rest_framework import status, viewsets
from rest_framework.decorators import api_view, permission_classes
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsPartner, IsPlatformAdmin
from leads.serializers import InquirySerializer
from properties.serializers import PropertyListSerializer

from . import services as marketing_services
from .models import MarketingKit
from .serializers import (
    AboutLegalSerializer,
    BusinessProfileSerializer,
    ContactDetailsSerializer,
    FeaturedCatalogSerializer,
    MarketingKitSerializer,
    PartnerWebsiteSerializer,
    SiteContactSerializer,
    SocialLinksSerializer,
    WebsiteSlideSerializer,
)

logger = logging.getLogger(__name__)


# =============================================================================
# MARKETING KITS
# =============================================================================

class MarketingKitViewSet(viewsets.ModelViewSet):
    queryset = MarketingKit.objects.prefetch_related('files')
    serializer_class = MarketingKitSerializer
    parser_classes = [MultiPartParser, FormParser, JSONParser]
    pagination_class = None

    def get_permissions(self):
        if self.action in ['list', 'retrieve']:
            return [IsAuthenticated()]
        return [IsPlatformAdmin()]

    def perform_create(self, serializer):
        kit = serializer.save(created_by=self.request.user)
        logger.info(f"Marketing kit {kit.kit_code} published by {self.request.user.user_code}")


# =============================================================================
# PARTNER WEBSITE
# =============================================================================

WEBSITE_SECTIONS = {
    'business-profile': BusinessProfileSerializer,
    'contact-details': ContactDetailsSerializer,
    'about-legal': AboutLegalSerializer,
    'social-links': SocialLinksSerializer,
    'featured-catalog': FeaturedCatalogSerializer,
}


class MyWebsiteView(APIView):
    permission_classes = [IsPartner]

    def get(self, request):
        website = marketing_services.get_website(request.user)
        return Response(PartnerWebsiteSerializer(website, context={'request': request}).data)


class WebsiteSectionView(APIView):
    """
    Update one micro-site section.

    PUT/PATCH /api/v1/marketing/website/<section>/ where section is one of
    business-profile, contact-details, about-legal, social-links,
    featured-catalog.
    """

    permission_classes = [IsPartner]
    parser_classes = [MultiPartParser, FormParser, JSONParser]

    def put(self, request, section):
        serializer_class = WEBSITE_SECTIONS.get(section)
        if serializer_class is None:
            raise Http404(f"Unknown website section '{section}'.")

        website = marketing_services.get_website(request.user)
        serializer = serializer_class(
            website, data=request.data, partial=request.method == 'PATCH',
            context={'request': request}
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()

        logger.info(f"Website section '{section}' updated by {request.user.user_code}")
        return Response(serializer.data)

    patch = put


class WebsiteSlideViewSet(viewsets.ModelViewSet):
    serializer_class = WebsiteSlideSerializer
    permission_classes = [IsPartner]
    parser_classes = [MultiPartParser, FormParser, JSONParser]
    pagination_class = None

    def get_queryset(self):
        return marketing_services.get_website(self.request.user).slides.all()

    def perform_create(self, serializer):
        serializer.save(website=marketing_services.get_website(self.request.user))


# =============================================================================
# PUBLIC MICRO-SITE
# =============================================================================

@api_view(['GET'])
@permission_classes([AllowAny])
def site_view(request, user_code):
    partner = marketing_services.public_partner(user_code)
    return Response(marketing_services.render_site(partner, request))


@api_view(['GET'])
@permission_classes([AllowAny])
def site_catalog_view(request, user_code):
    """
    GET /api/v1/site/<user_code>/catalog/?search=&category=
    """
    partner = marketing_services.public_partner(user_code)
    catalog = marketing_services.site_catalog(
        partner,
        search=request.query_params.get('search', '').strip(),
        category=request.query_params.get('category', '').strip(),
    )
    context = {'request': request}
    return Response({
        'categories': catalog['categories'],
        'featured': PropertyListSerializer(catalog['featured'], many=True, context=context).data,
        'properties': PropertyListSerializer(catalog['properties'], many=True, context=context).data,
    })


@api_view(['POST'])
@permission_classes([AllowAny])
def site_contact_view(request, user_code):
    partner = marketing_services.public_partner(user_code)
    serializer = SiteContactSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    inquiry = marketing_services.submit_contact(partner, serializer.validated_data)
    return Response(InquirySerializer(inquiry).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([AllowAny])
def site_card_view(request, user_code):
    partner = marketing_services.public_partner(user_code)
    return Response(marketing_services.business_card(partner, request))
