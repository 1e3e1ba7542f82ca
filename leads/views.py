"""
Views for the leads app.

Endpoints (under /api/v1/leads/):
- /                          leads scoped to the user; create, update
- /{id}/status/              sales status (admin or owning seller)
- /{id}/deal-status/         deal status, syncs the customer's status
- /{id}/forward/, retake/    hand a lead to a team member and take it back
- /{id}/schedule/            schedule a site visit
- /bookings/                 leads in active deal stages
- /consultant/               partner and seller behind a customer's leads
- /reassign-consultant/      move a customer's leads to another partner
- /report/, /leaderboard/, /visitors/
- /appointments/             site visits; proof/, review/, cancel/
- /inquiries/                micro-site enquiries
- /requirements/             customer requirements
"""

import logging

from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.models import User
from accounts.serializers import UserSummarySerializer
from accounts.permissions import HasAdminPermission, IsAdminOrSeller, IsPartner, IsPlatformAdmin
from dealflow.pagination import StandardPagination
from services.business_logic import PARTNER_ROLES, ROLE_CUSTOMER

from . import services as lead_services
from .models import Inquiry, Requirement
from .serializers import (
    AppointmentReviewSerializer,
    AppointmentSerializer,
    DealStatusSerializer,
    ForwardLeadSerializer,
    InquirySerializer,
    LeadSerializer,
    LeadStatusSerializer,
    ReassignConsultantSerializer,
    RequirementSerializer,
    ScheduleAppointmentSerializer,
    VisitProofSerializer,
)

logger = logging.getLogger(__name__)


def require_admin_permission(user, permission):
    """Sub-admins need the named permission; sellers pass through."""
    if user.is_platform_admin and not user.has_admin_permission(permission):
        raise PermissionDenied(f"Admin permission '{permission}' required.")


# =============================================================================
# LEAD VIEWSET
# =============================================================================

class LeadViewSet(viewsets.ModelViewSet):
    """
    API endpoint for leads.

    Supports:
    - List/retrieve leads visible to the user
    - Create (partners for themselves, admins for any partner)
    - Filtering by status, deal status, property, copy flag
    - Search by name, email, phone, city
    - Workflow actions (status, deal-status, forward, retake, schedule)
    - Reports (bookings, report, leaderboard, visitors)
    """
    serializer_class = LeadSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = StandardPagination
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['status', 'deal_status', 'property', 'is_copy']
    search_fields = ['name', 'email', 'phone', 'city']
    ordering_fields = ['created_at', 'updated_at', 'name']
    ordering = ['-created_at']

    def get_queryset(self):
        return lead_services.leads_for(self.request.user)

    def get_permissions(self):
        if self.action in ['status', 'deal_status']:
            return [IsAdminOrSeller()]
        if self.action in ['forward']:
            return [IsPartner()]
        if self.action == 'reassign_consultant':
            return [HasAdminPermission('manageLeads')()]
        if self.action in ['destroy', 'leaderboard', 'visitors']:
            return [IsPlatformAdmin()]
        return super().get_permissions()

    def perform_create(self, serializer):
        require_admin_permission(self.request.user, 'manageLeads')
        serializer.instance = lead_services.create_lead(serializer.validated_data, self.request.user)

    def perform_update(self, serializer):
        user = self.request.user
        lead = serializer.instance
        if user.is_platform_admin:
            require_admin_permission(user, 'manageLeads')
        elif lead.partner_id != user.pk:
            raise PermissionDenied("You can only edit your own leads.")
        if not user.is_platform_admin:
            serializer.validated_data.pop('partner', None)
        serializer.save()

    # -------------------------------------------------------------------------
    # Workflow
    # -------------------------------------------------------------------------

    @action(detail=True, methods=['post'])
    def status(self, request, pk=None):
        require_admin_permission(request.user, 'manageLeads')
        serializer = LeadStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        lead = lead_services.update_lead_status(
            self.get_object(),
            serializer.validated_data['status'],
            request.user,
            sale_amount=serializer.validated_data.get('sale_amount'),
        )
        return Response(LeadSerializer(lead).data)

    @action(detail=True, methods=['post'], url_path='deal-status')
    def deal_status(self, request, pk=None):
        require_admin_permission(request.user, 'manageDeals')
        serializer = DealStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        lead = lead_services.update_deal_status(
            self.get_object(), serializer.validated_data['deal_status'], request.user
        )
        return Response(LeadSerializer(lead).data)

    @action(detail=True, methods=['post'])
    def forward(self, request, pk=None):
        serializer = ForwardLeadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        copy = lead_services.forward_lead(self.get_object(), serializer.validated_data['partner_id'], request.user)
        return Response(LeadSerializer(copy).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'])
    def retake(self, request, pk=None):
        lead = lead_services.retake_lead(self.get_object(), request.user)
        return Response(LeadSerializer(lead).data)

    @action(detail=True, methods=['post'])
    def schedule(self, request, pk=None):
        serializer = ScheduleAppointmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        appointment = lead_services.schedule_appointment(
            self.get_object(),
            serializer.validated_data['visit_date'],
            request.user,
            notes=serializer.validated_data['notes'],
        )
        return Response(AppointmentSerializer(appointment).data, status=status.HTTP_201_CREATED)

    # -------------------------------------------------------------------------
    # Consultants
    # -------------------------------------------------------------------------

    @action(detail=False, methods=['get'])
    def consultant(self, request):
        """
        GET /api/v1/leads/consultant/                  (customers: own)
        GET /api/v1/leads/consultant/?customer=CUS123456 (admins)
        """
        if request.user.is_platform_admin and request.query_params.get('customer'):
            customer = get_object_or_404(User, user_code=request.query_params['customer'], role=ROLE_CUSTOMER)
        elif request.user.is_customer:
            customer = request.user
        else:
            raise PermissionDenied("Choose a customer with ?customer=<user code>.")

        consultants = lead_services.consultants_for(customer)
        return Response({
            role: UserSummarySerializer(user).data if user else None
            for role, user in consultants.items()
        })

    @action(detail=False, methods=['post'], url_path='reassign-consultant')
    def reassign_consultant(self, request):
        serializer = ReassignConsultantSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        updated = lead_services.reassign_customer_partner(
            serializer.validated_data['customer_id'], serializer.validated_data['partner_id']
        )
        return Response({'updated': updated})

    # -------------------------------------------------------------------------
    # Reports
    # -------------------------------------------------------------------------

    @action(detail=False, methods=['get'])
    def bookings(self, request):
        queryset = self.filter_queryset(lead_services.booking_leads(request.user))
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(LeadSerializer(page, many=True).data)
        return Response(LeadSerializer(queryset, many=True).data)

    @action(detail=False, methods=['get'])
    def report(self, request):
        """
        Monthly and status breakdown for a partner.

        GET /api/v1/leads/report/?year=2026            (partners: own)
        GET /api/v1/leads/report/?partner=PAF123456     (admins)
        """
        if request.user.is_platform_admin and request.query_params.get('partner'):
            partner = get_object_or_404(
                User, user_code=request.query_params['partner'], role__in=PARTNER_ROLES
            )
        elif request.user.is_partner:
            partner = request.user
        else:
            raise PermissionDenied("Choose a partner with ?partner=<user code>.")

        year = request.query_params.get('year')
        year = int(year) if year and year.isdigit() else None
        return Response(lead_services.partner_lead_report(partner, year))

    @action(detail=False, methods=['get'])
    def leaderboard(self, request):
        limit = request.query_params.get('limit', '10')
        return Response(lead_services.leaderboard(int(limit) if limit.isdigit() else 10))

    @action(detail=False, methods=['get'])
    def visitors(self, request):
        return Response(lead_services.visitors_report())


# =============================================================================
# APPOINTMENT VIEWSET
# =============================================================================

class AppointmentViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Site visits.

    - POST {id}/proof/    partner uploads visit proof (multipart)
    - POST {id}/review/   admin verifies or rejects the proof
    - POST {id}/cancel/   partner or admin cancels
    """

    serializer_class = AppointmentSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = StandardPagination
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ['status', 'property', 'lead']
    ordering_fields = ['visit_date', 'created_at']
    ordering = ['-visit_date']

    def get_queryset(self):
        return lead_services.appointments_for(self.request.user)

    def get_permissions(self):
        if self.action == 'proof':
            return [IsPartner()]
        if self.action == 'review':
            return [HasAdminPermission('manageLeads')()]
        return super().get_permissions()

    @action(detail=True, methods=['post'], parser_classes=[MultiPartParser, FormParser])
    def proof(self, request, pk=None):
        serializer = VisitProofSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        appointment = lead_services.submit_visit_proof(
            self.get_object(), serializer.validated_data['visit_proof'], request.user
        )
        return Response(self.get_serializer(appointment).data)

    @action(detail=True, methods=['post'])
    def review(self, request, pk=None):
        serializer = AppointmentReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        appointment = lead_services.verify_appointment(
            self.get_object(),
            approve=serializer.validated_data['action'] == 'verify',
            reason=serializer.validated_data['reason'],
        )
        return Response(self.get_serializer(appointment).data)

    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        appointment = lead_services.cancel_appointment(self.get_object(), request.user)
        return Response(self.get_serializer(appointment).data)


# =============================================================================
# INQUIRIES AND REQUIREMENTS
# =============================================================================

class InquiryViewSet(mixins.UpdateModelMixin, viewsets.ReadOnlyModelViewSet):
    """Micro-site enquiries: partners see their own, admins see all."""

    serializer_class = InquirySerializer
    permission_classes = [IsAuthenticated]
    pagination_class = StandardPagination
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ['status']
    search_fields = ['name', 'email', 'phone']
    http_method_names = ['get', 'patch', 'head', 'options']

    def get_queryset(self):
        queryset = Inquiry.objects.select_related('partner')
        if self.request.user.is_platform_admin:
            return queryset
        return queryset.filter(partner=self.request.user)


class RequirementViewSet(mixins.CreateModelMixin, mixins.DestroyModelMixin, viewsets.ReadOnlyModelViewSet):
    """Customers post requirements; admins list every requirement."""

    serializer_class = RequirementSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = StandardPagination
    parser_classes = [JSONParser, FormParser, MultiPartParser]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ['furnishing', 'property_type']
    search_fields = ['name', 'preferred_location', 'property_type']

    def get_queryset(self):
        if self.request.user.is_platform_admin:
            return Requirement.objects.select_related('user')
        return Requirement.objects.filter(user=self.request.user)

    def perform_create(self, serializer):
        requirement = serializer.save(user=self.request.user)
        logger.info(f"Requirement {requirement.pk} posted by {self.request.user.user_code}")
