"""
Views for the properties app.

This module defines the API viewsets for property types and listings,
including filtering, search, and the verification workflow actions.
"""

import logging

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import HasAdminPermission, IsPlatformAdmin
from dealflow.pagination import StandardPagination
from services import GeocodingServiceError

from . import services as property_services
from .filters import PropertyFilter, get_property_filter_options
from .models import STATUS_PENDING, Property, PropertyType
from .serializers import (
    ModificationRequestSerializer,
    PropertyDetailSerializer,
    PropertyListSerializer,
    PropertySectionSerializer,
    PropertySlideSerializer,
    PropertyStatusSerializer,
    PropertyTypeSerializer,
)

logger = logging.getLogger(__name__)


# =============================================================================
# PROPERTY TYPE VIEWSET
# =============================================================================

class PropertyTypeViewSet(viewsets.ModelViewSet):
    """
    Property types. Anyone may read; admins manage.
    """
    queryset = PropertyType.objects.all()
    serializer_class = PropertyTypeSerializer
    pagination_class = None
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ['category']

    def get_permissions(self):
        if self.action in ['list', 'retrieve']:
            return [AllowAny()]
        return [IsPlatformAdmin()]


# =============================================================================
# PROPERTY VIEWSET
# =============================================================================

class PropertyViewSet(viewsets.ModelViewSet):
    """
    API endpoint for listings.

    Supports:
    - List/retrieve (verified listings for everyone, all listings for admins)
    - Create (sellers and partners submit for verification; admins publish)
    - Update by the owner (sends the listing back for verification) or admins
    - Filtering by status, category, catalog type, city, state, price, bedrooms
    - Search by title, locality, city
    - Workflow actions: verify, reject, request-modification, status
    - my-properties, pending, filter-options, validate-section, slides, geocode

    Pagination:
    - Default: 20 results per page
    - Customizable via ?page_size=X parameter
    """
    pagination_class = StandardPagination
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = PropertyFilter

    search_fields = ['title', 'locality', 'city']

    ordering_fields = ['listing_price', 'created_at', 'views', 'title', 'city']
    ordering = ['-created_at']

    admin_actions = ['verify', 'reject', 'request_modification', 'set_status', 'pending', 'geocode', 'destroy']

    def get_permissions(self):
        if self.action in ['list', 'retrieve', 'filter_options']:
            return [AllowAny()]
        if self.action in self.admin_actions:
            return [HasAdminPermission('manageListings')()]
        return [IsAuthenticated()]

    def get_serializer_class(self):
        if self.action in ['list', 'my_properties', 'pending']:
            return PropertyListSerializer
        return PropertyDetailSerializer

    def get_queryset(self):
        queryset = property_services.visible_properties(self.request.user)
        if self.action == 'retrieve':
            queryset = queryset.prefetch_related('slides')
        return queryset

    def perform_create(self, serializer):
        serializer.instance = property_services.create_property(serializer.validated_data, self.request.user)

    def perform_update(self, serializer):
        serializer.instance = property_services.update_property(
            serializer.instance, serializer.validated_data, self.request.user
        )

    def retrieve(self, request, *args, **kwargs):
        prop = property_services.record_view(self.get_object())
        return Response(self.get_serializer(prop).data)

    @action(detail=False, methods=['get'], url_path='my-properties')
    def my_properties(self, request):
        """Listings whose contact email (or owner) is the current user."""
        queryset = self.filter_queryset(property_services.owned_properties(request.user))
        page = self.paginate_queryset(queryset)
        serializer = self.get_serializer(page if page is not None else queryset, many=True)
        if page is not None:
            return self.get_paginated_response(serializer.data)
        return Response(serializer.data)

    @action(detail=False, methods=['get'])
    def pending(self, request):
        queryset = Property.objects.filter(status=STATUS_PENDING).order_by('created_at')
        return Response(self.get_serializer(queryset, many=True).data)

    @action(detail=False, methods=['get'], url_path='filter-options')
    def filter_options(self, request):
        return Response(get_property_filter_options(self.get_queryset()))

    @action(detail=False, methods=['post'], url_path='validate-section')
    def validate_section(self, request):
        serializer = PropertySectionSerializer(data=request.data, context=self.get_serializer_context())
        serializer.is_valid(raise_exception=True)
        return Response({'valid': True, 'section': serializer.validated_data['section']})

    # -------------------------------------------------------------------------
    # Workflow
    # -------------------------------------------------------------------------

    @action(detail=True, methods=['post'])
    def verify(self, request, pk=None):
        prop = property_services.verify_property(self.get_object())
        return Response(PropertyDetailSerializer(prop, context={'request': request}).data)

    @action(detail=True, methods=['post'])
    def reject(self, request, pk=None):
        property_services.reject_property(self.get_object())
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post'], url_path='request-modification')
    def request_modification(self, request, pk=None):
        serializer = ModificationRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        prop = property_services.request_modification(self.get_object(), serializer.validated_data['notes'])
        return Response(PropertyDetailSerializer(prop, context={'request': request}).data)

    @action(detail=True, methods=['post'], url_path='status')
    def set_status(self, request, pk=None):
        serializer = PropertyStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        prop = property_services.change_status(self.get_object(), serializer.validated_data['status'])
        return Response(PropertyDetailSerializer(prop, context={'request': request}).data)

    @action(detail=True, methods=['post'])
    def geocode(self, request, pk=None):
        prop = self.get_object()
        try:
            located = property_services.geocode(prop)
        except GeocodingServiceError as e:
            logger.error(f"Geocoding listing {prop.pk} failed: {e}")
            return Response({'error': 'Geocoding failed', 'details': str(e)}, status=status.HTTP_502_BAD_GATEWAY)
        return Response({
            'geocoded': located,
            'latitude': prop.latitude,
            'longitude': prop.longitude,
        })

    @action(detail=True, methods=['get', 'post'])
    def slides(self, request, pk=None):
        prop = self.get_object()
        if request.method == 'GET':
            return Response(PropertySlideSerializer(prop.slides.all(), many=True).data)

        if not (request.user.is_platform_admin or property_services.is_owner(prop, request.user)):
            return Response({'error': 'You can only add slides to your own listings.'},
                            status=status.HTTP_403_FORBIDDEN)
        serializer = PropertySlideSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save(property=prop)
        return Response(serializer.data, status=status.HTTP_201_CREATED)
