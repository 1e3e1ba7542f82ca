"""
Views for the support app.

Endpoints (under /api/v1/support/):
- categories/, resources/     resource centre (admins write, users read)
- tickets/                    own tickets (all for admins); {id}/resolve/
- messages/                   inbox; send/, sent/, unread-count/, {id}/mark-read/
"""

import logging

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import IsPlatformAdmin
from dealflow.pagination import StandardPagination

from . import services as support_services
from .models import Resource, ResourceCategory
from .serializers import (
    MessageSerializer,
    ResourceCategorySerializer,
    ResourceSerializer,
    SendMessageSerializer,
    SupportTicketSerializer,
    TicketResolutionSerializer,
)

logger = logging.getLogger(__name__)


class AdminWriteMixin:
    """Authenticated users read; platform admins write."""

    def get_permissions(self):
        if self.action in ['list', 'retrieve']:
            return [IsAuthenticated()]
        return [IsPlatformAdmin()]


# =============================================================================
# RESOURCE CENTRE
# =============================================================================

class ResourceCategoryViewSet(AdminWriteMixin, viewsets.ModelViewSet):
    queryset = ResourceCategory.objects.all()
    serializer_class = ResourceCategorySerializer
    pagination_class = None


class ResourceViewSet(AdminWriteMixin, viewsets.ModelViewSet):
    queryset = Resource.objects.select_related('category')
    serializer_class = ResourceSerializer
    pagination_class = StandardPagination
    parser_classes = [JSONParser, MultiPartParser, FormParser]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ['category', 'content_type']
    search_fields = ['title', 'article_content']


# =============================================================================
# SUPPORT TICKETS
# =============================================================================

class SupportTicketViewSet(mixins.CreateModelMixin, viewsets.ReadOnlyModelViewSet):
    """
    Support tickets.

    Users raise tickets and follow their own; admins see every ticket and
    set the status and resolution via {id}/resolve/.
    """

    serializer_class = SupportTicketSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = StandardPagination
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ['status', 'category']
    search_fields = ['subject', 'description', 'user__user_code']

    def get_queryset(self):
        return support_services.tickets_for(self.request.user)

    def get_permissions(self):
        if self.action == 'resolve':
            return [IsPlatformAdmin()]
        return super().get_permissions()

    def perform_create(self, serializer):
        ticket = serializer.save(user=self.request.user)
        logger.info(f"Support ticket {ticket.pk} opened by {self.request.user.user_code}")

    @action(detail=True, methods=['patch', 'post'])
    def resolve(self, request, pk=None):
        ticket = self.get_object()
        serializer = TicketResolutionSerializer(ticket, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info(f"Support ticket {ticket.pk} set to {ticket.status} by {request.user.user_code}")
        return Response(self.get_serializer(ticket).data)


# =============================================================================
# MESSAGES
# =============================================================================

class MessageViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = MessageSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = StandardPagination

    def get_queryset(self):
        if self.action == 'sent':
            return support_services.sent_by(self.request.user)
        return support_services.inbox_for(self.request.user)

    @action(detail=False, methods=['post'])
    def send(self, request):
        serializer = SendMessageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        message = support_services.send_message(
            request.user,
            data['subject'],
            data['body'],
            recipient=data.get('recipient_id'),
            group=data.get('recipient_group', ''),
        )
        return Response(self.get_serializer(message).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['get'])
    def sent(self, request):
        page = self.paginate_queryset(self.get_queryset())
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return Response(self.get_serializer(self.get_queryset(), many=True).data)

    @action(detail=False, methods=['get'], url_path='unread-count')
    def unread_count(self, request):
        return Response({'unread': support_services.unread_count(request.user)})

    @action(detail=True, methods=['post'], url_path='mark-read')
    def mark_read(self, request, pk=None):
        message = support_services.mark_read(self.get_object(), request.user)
        return Response(self.get_serializer(message).data)
