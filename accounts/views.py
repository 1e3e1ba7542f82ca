"""
Views for the accounts app.

Endpoints (all under /api/v1/accounts/ unless noted):
- register/, otp/send/, register/customer/   public sign-up
- profile/                                   own profile
- partners/                                  admin partner management, onboarding wizard
- sellers/                                   admin seller management, onboarding wizard
- customers/                                 admin customer verification
- admins/                                    sub-admin accounts
- upgrade/options/, upgrade/request/         partner plan upgrades
- team-requests/                             team building
- documents/                                 own document store
- /api/v1/payments/callback/                 payment gateway callback
"""

import logging

from django.conf import settings
from django.http import HttpResponseRedirect
from rest_framework import filters, generics, mixins, status, viewsets
from rest_framework.decorators import (
    action,
    api_view,
    authentication_classes,
    parser_classes,
    permission_classes,
)
from rest_framework.exceptions import PermissionDenied
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework_simplejwt.views import TokenObtainPairView

from services.business_logic import (
    PARTNER_ROLES,
    ROLE_ADMIN,
    can_build_team,
    get_role_display_name,
    get_upgrade_options,
)
from services.otp import otp_service

from . import services as account_services
from .models import (
    STATUS_ACTIVE,
    STATUS_PENDING_UPGRADE,
    STATUS_PENDING_VERIFICATION,
    RegistrationPayment,
    TeamRequest,
    User,
    UserDocument,
)
from .permissions import HasAdminPermission, IsPartner, IsPlatformAdmin
from .serializers import (
    PARTNER_WIZARD_STEPS,
    SELLER_WIZARD_STEPS,
    CustomerRegistrationSerializer,
    CustomerVerificationSerializer,
    DealFlowTokenObtainPairSerializer,
    KYCReviewSerializer,
    PartnerOnboardingSerializer,
    ProfileSerializer,
    QuickRegistrationSerializer,
    ReasonSerializer,
    RegistrationPaymentSerializer,
    SellerOnboardingSerializer,
    SellerStatusSerializer,
    SendOTPSerializer,
    SubAdminSerializer,
    TeamRequestResponseSerializer,
    TeamRequestSerializer,
    UpgradeDecisionSerializer,
    UpgradeRequestSerializer,
    UserDetailSerializer,
    UserDocumentSerializer,
    UserSummarySerializer,
    get_step_serializer,
)

logger = logging.getLogger(__name__)


# =============================================================================
# AUTHENTICATION
# =============================================================================

class DealFlowTokenObtainPairView(TokenObtainPairView):
    """POST /api/v1/auth/token/ with {email, password}."""
    serializer_class = DealFlowTokenObtainPairSerializer


# =============================================================================
# PUBLIC REGISTRATION
# =============================================================================

class QuickRegistrationView(APIView):
    """Self sign-up for partners and sellers."""

    permission_classes = [AllowAny]

    def post(self, request):
        serializer = QuickRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = account_services.register_quick(**serializer.validated_data)
        return Response(UserSummarySerializer(user).data, status=status.HTTP_201_CREATED)


class SendOTPView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = SendOTPSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        otp_service.send_otp(
            serializer.validated_data['email'].lower(),
            serializer.validated_data.get('name', ''),
        )
        return Response({'sent': True})


class CustomerRegistrationView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = CustomerRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = account_services.register_customer(serializer.validated_data, otp_service)
        return Response(UserSummarySerializer(user).data, status=status.HTTP_201_CREATED)


class ProfileView(generics.RetrieveUpdateAPIView):
    """GET/PATCH the authenticated user's own profile."""

    serializer_class = ProfileSerializer
    permission_classes = [IsAuthenticated]

    def get_object(self):
        return self.request.user


# =============================================================================
# SHARED ADMIN VIEWSET BEHAVIOUR
# =============================================================================

class WizardMixin:
    """validate-step and onboard actions for an onboarding wizard."""

    wizard_steps = None

    def _validate_step(self, request):
        step_serializer_class = get_step_serializer(self.wizard_steps, request.data.get('step'))
        serializer = step_serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        return Response({'valid': True, 'step': request.data.get('step')})


class ManagedUserViewSet(viewsets.ReadOnlyModelViewSet):
    """Read-only admin listing of one class of user, filtered by status."""

    serializer_class = UserDetailSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['status', 'role', 'kyc_status', 'payment_status', 'city', 'state']
    search_fields = ['name', 'email', 'user_code', 'phone', 'city', 'business_name']
    ordering_fields = ['created_at', 'name', 'user_code']
    ordering = ['-created_at']

    def get_serializer_class(self):
        if self.action == 'list':
            return UserSummarySerializer
        return UserDetailSerializer


# =============================================================================
# PARTNERS
# =============================================================================

class PartnerViewSet(WizardMixin, ManagedUserViewSet):
    """
    Partner management for admins holding managePartners.

    Supports:
    - List/retrieve partners (filter by status, role, KYC and payment status)
    - Four-step onboarding wizard with per-step validation
    - Deactivate, reactivate, suspend and unsuspend
    - KYC review and upgrade request decisions
    """

    permission_classes = [HasAdminPermission('managePartners')]
    wizard_steps = PARTNER_WIZARD_STEPS

    def get_queryset(self):
        return User.objects.filter(role__in=PARTNER_ROLES).select_related('team_lead')

    @action(detail=False, methods=['post'], url_path='validate-step')
    def validate_step(self, request):
        return self._validate_step(request)

    @action(detail=False, methods=['post'])
    def onboard(self, request):
        """
        Final wizard submission.

        Returns 201 with the partner when no fee is due, or 201 with
        requires_payment and the gateway redirect_url when it is.
        """
        serializer = PartnerOnboardingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = account_services.onboard_partner(serializer.validated_data, request=request)
        body = {
            'requires_payment': result['requires_payment'],
            'redirect_url': result['redirect_url'],
            'partner': UserDetailSerializer(result['partner'], context={'request': request}).data,
        }
        if result['payment'] is not None:
            body['payment'] = RegistrationPaymentSerializer(result['payment']).data
        return Response(body, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'], url_path='retry-payment')
    def retry_payment(self, request, pk=None):
        redirect_url = account_services.retry_registration_payment(self.get_object())
        return Response({'requires_payment': True, 'redirect_url': redirect_url})

    @action(detail=True, methods=['get'])
    def payments(self, request, pk=None):
        partner = self.get_object()
        return Response(RegistrationPaymentSerializer(partner.registration_payments.all(), many=True).data)

    def _lifecycle(self, request, operation):
        serializer = ReasonSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        partner = operation(self.get_object(), serializer.validated_data['reason'])
        return Response(UserDetailSerializer(partner, context={'request': request}).data)

    @action(detail=True, methods=['post'])
    def deactivate(self, request, pk=None):
        return self._lifecycle(request, account_services.deactivate_partner)

    @action(detail=True, methods=['post'])
    def reactivate(self, request, pk=None):
        return self._lifecycle(request, account_services.reactivate_partner)

    @action(detail=True, methods=['post'])
    def suspend(self, request, pk=None):
        return self._lifecycle(request, account_services.suspend_partner)

    @action(detail=True, methods=['post'])
    def unsuspend(self, request, pk=None):
        partner = account_services.unsuspend_partner(self.get_object())
        return Response(UserDetailSerializer(partner, context={'request': request}).data)

    @action(detail=True, methods=['post'])
    def kyc(self, request, pk=None):
        serializer = KYCReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        partner = account_services.review_kyc(
            self.get_object(),
            approve=serializer.validated_data['action'] == 'verify',
            reason=serializer.validated_data['reason'],
        )
        return Response(UserDetailSerializer(partner, context={'request': request}).data)

    @action(detail=False, methods=['get'], url_path='activation-panel')
    def activation_panel(self, request):
        """Active partners that were reactivated, with the reactivation reason."""
        queryset = self.filter_queryset(
            self.get_queryset().filter(status=STATUS_ACTIVE).exclude(reactivation_reason='')
        )
        return Response(UserDetailSerializer(queryset, many=True, context={'request': request}).data)

    @action(detail=False, methods=['get'], url_path='upgrade-requests')
    def upgrade_requests(self, request):
        queryset = self.get_queryset().filter(status=STATUS_PENDING_UPGRADE)
        return Response(UserDetailSerializer(queryset, many=True, context={'request': request}).data)

    @action(detail=True, methods=['post'], url_path='upgrade-decision')
    def upgrade_decision(self, request, pk=None):
        serializer = UpgradeDecisionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        partner = account_services.resolve_upgrade(
            self.get_object(), approve=serializer.validated_data['action'] == 'approve'
        )
        return Response(UserDetailSerializer(partner, context={'request': request}).data)


# =============================================================================
# SELLERS
# =============================================================================

class SellerViewSet(WizardMixin, ManagedUserViewSet):
    """Seller management for admins holding manageSellers."""

    permission_classes = [HasAdminPermission('manageSellers')]
    wizard_steps = SELLER_WIZARD_STEPS

    def get_queryset(self):
        return User.objects.sellers()

    @action(detail=False, methods=['post'], url_path='validate-step')
    def validate_step(self, request):
        return self._validate_step(request)

    @action(detail=False, methods=['post'])
    def onboard(self, request):
        serializer = SellerOnboardingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        seller = account_services.onboard_seller(serializer.validated_data)
        return Response(
            UserDetailSerializer(seller, context={'request': request}).data,
            status=status.HTTP_201_CREATED
        )

    @action(detail=True, methods=['post'], url_path='status')
    def set_status(self, request, pk=None):
        serializer = SellerStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        seller = account_services.set_seller_status(self.get_object(), serializer.validated_data['status'])
        return Response(UserDetailSerializer(seller, context={'request': request}).data)

    @action(detail=True, methods=['post'])
    def kyc(self, request, pk=None):
        serializer = KYCReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        seller = account_services.review_kyc(
            self.get_object(),
            approve=serializer.validated_data['action'] == 'verify',
            reason=serializer.validated_data['reason'],
        )
        return Response(UserDetailSerializer(seller, context={'request': request}).data)


# =============================================================================
# CUSTOMERS
# =============================================================================

class CustomerViewSet(ManagedUserViewSet):
    permission_classes = [IsPlatformAdmin]

    def get_queryset(self):
        return User.objects.customers()

    @action(detail=False, methods=['get'])
    def pending(self, request):
        queryset = self.get_queryset().filter(status=STATUS_PENDING_VERIFICATION)
        return Response(UserSummarySerializer(queryset, many=True).data)

    @action(detail=True, methods=['post'])
    def verify(self, request, pk=None):
        serializer = CustomerVerificationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        customer = account_services.verify_customer(
            self.get_object(), approve=serializer.validated_data['action'] == 'approve'
        )
        if customer is None:
            return Response(status=status.HTTP_204_NO_CONTENT)
        return Response(UserSummarySerializer(customer).data)


# =============================================================================
# SUB-ADMINS
# =============================================================================

class AdminUserViewSet(mixins.CreateModelMixin, viewsets.ReadOnlyModelViewSet):
    """Admin accounts; only full admins may create sub-admins."""

    permission_classes = [IsPlatformAdmin]
    serializer_class = UserDetailSerializer

    def get_queryset(self):
        return User.objects.filter(role=ROLE_ADMIN)

    def create(self, request, *args, **kwargs):
        if not request.user.is_full_admin:
            raise PermissionDenied('Only full administrators can create admin accounts.')
        serializer = SubAdminSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        admin_user = account_services.create_sub_admin(serializer.validated_data)
        return Response(
            UserDetailSerializer(admin_user, context={'request': request}).data,
            status=status.HTTP_201_CREATED
        )


# =============================================================================
# UPGRADES (PARTNER SIDE)
# =============================================================================

class UpgradeOptionsView(APIView):
    permission_classes = [IsPartner]

    def get(self, request):
        return Response({
            'current_role': request.user.role,
            'current_role_display': get_role_display_name(request.user.role),
            'status': request.user.status,
            'upgrade_request': request.user.upgrade_request,
            'options': get_upgrade_options(request.user.role),
        })


class UpgradeRequestView(APIView):
    permission_classes = [IsPartner]

    def post(self, request):
        serializer = UpgradeRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        partner = account_services.request_upgrade(request.user, serializer.validated_data['new_role'])
        return Response(ProfileSerializer(partner, context={'request': request}).data)


# =============================================================================
# TEAMS
# =============================================================================

class TeamRequestViewSet(mixins.ListModelMixin, mixins.CreateModelMixin, viewsets.GenericViewSet):
    """
    Team building between partners.

    - GET  team-requests/                     incoming pending requests
    - POST team-requests/ {recipient_id}      invite a partner (team leads only)
    - POST team-requests/{id}/respond/        accept or reject
    - GET  team-requests/available-partners/  partners the user may invite
    - GET  team-requests/members/             the user's team
    - GET  team-requests/sent-count/          pending requests the user sent
    """

    serializer_class = TeamRequestSerializer
    permission_classes = [IsPartner]
    pagination_class = None

    def get_queryset(self):
        if self.action == 'respond':
            return TeamRequest.objects.filter(recipient=self.request.user)
        return TeamRequest.objects.filter(
            recipient=self.request.user, status=TeamRequest.STATUS_PENDING
        ).select_related('requester', 'recipient')

    def _require_team_lead(self):
        if not can_build_team(self.request.user.role):
            raise PermissionDenied('Only franchisee, channel and associate partners can build teams.')

    def create(self, request, *args, **kwargs):
        self._require_team_lead()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        team_request = account_services.send_team_request(
            request.user, serializer.validated_data['recipient']
        )
        return Response(self.get_serializer(team_request).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'])
    def respond(self, request, pk=None):
        serializer = TeamRequestResponseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        team_request = account_services.respond_to_team_request(
            self.get_object(), request.user, accept=serializer.validated_data['action'] == 'accept'
        )
        return Response(self.get_serializer(team_request).data)

    @action(detail=False, methods=['get'], url_path='available-partners')
    def available_partners(self, request):
        self._require_team_lead()
        partners = account_services.available_partners(request.user)
        return Response(UserSummarySerializer(partners, many=True).data)

    @action(detail=False, methods=['get'])
    def members(self, request):
        return Response(UserSummarySerializer(request.user.team_members.all(), many=True).data)

    @action(detail=False, methods=['get'], url_path='sent-count')
    def sent_count(self, request):
        count = TeamRequest.objects.filter(
            requester=request.user, status=TeamRequest.STATUS_PENDING
        ).count()
        return Response({'pending_sent': count})


# =============================================================================
# PERSONAL DOCUMENTS
# =============================================================================

class UserDocumentViewSet(mixins.CreateModelMixin,
                          mixins.ListModelMixin,
                          mixins.RetrieveModelMixin,
                          mixins.DestroyModelMixin,
                          viewsets.GenericViewSet):
    """
    The signed-in user's own documents.

    Uploads are multipart (title, file) and pass through the upload
    security middleware like every other API upload.
    """

    serializer_class = UserDocumentSerializer
    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]
    lookup_field = 'document_code'

    def get_queryset(self):
        return UserDocument.objects.filter(user=self.request.user)

    def perform_create(self, serializer):
        upload = serializer.validated_data['file']
        document = serializer.save(
            user=self.request.user,
            file_name=upload.name,
            file_type=getattr(upload, 'content_type', '') or '',
        )
        logger.info(f"Document {document.document_code} uploaded by {self.request.user.user_code}")

    def perform_destroy(self, instance):
        logger.info(f"Document {instance.document_code} deleted by {self.request.user.user_code}")
        instance.file.delete(save=False)
        instance.delete()


# =============================================================================
# PAYMENT GATEWAY CALLBACK
# =============================================================================

@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
@parser_classes([FormParser, MultiPartParser, JSONParser])
def payment_callback(request):
    """
    POST /api/v1/payments/callback/?merchantTransactionId=TX_<user_code>_<ms>

    Applies the gateway result and redirects the browser back to the
    frontend partner pages.
    """
    merchant_transaction_id = request.query_params.get('merchantTransactionId')
    payload = {
        key: request.data.get(key)
        for key in ('code', 'merchantId', 'transactionId', 'providerReferenceId')
    }

    payment = account_services.handle_payment_callback(merchant_transaction_id, payload)
    frontend = settings.FRONTEND_BASE_URL.rstrip('/')

    if payment is None:
        return HttpResponseRedirect(f"{frontend}/manage-partner?payment=failed&reason=nodata")
    if payment.status == RegistrationPayment.STATUS_SUCCESS:
        return HttpResponseRedirect(f"{frontend}/manage-partner?payment=success")
    if payment.status == RegistrationPayment.STATUS_INITIATED:
        return HttpResponseRedirect(f"{frontend}/manage-partner?payment=pending")
    return HttpResponseRedirect(f"{frontend}/manage-partner/add?payment=failed")
