"""
Views for the wallet app.

Endpoints (under /api/v1/wallet/):
- me/                         own wallet balance and points
- history/                    own wallet transactions and withdrawals
- transactions/               wallet ledger (own, or all for admins)
- manage/                     admin top-up or credit (password confirmed)
- rewards/                    reward ledger; send/ (admin), claim/ (partner)
- offers/                     reward offers; {id}/redeem/ (partner)
- withdrawals/                withdrawal requests; {id}/process/
- payables/, receivables/     admin billing entries
"""

import logging

from django.db.models import Q
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdminOrSeller, IsPartner, IsPlatformAdmin
from dealflow.pagination import StandardPagination

from . import services as wallet_services
from .models import Payable, Receivable, RewardOffer, RewardTransaction, WalletTransaction
from .serializers import (
    ClaimRewardSerializer,
    ManageWalletSerializer,
    PayableSerializer,
    ReceivableSerializer,
    RewardOfferSerializer,
    RewardTransactionSerializer,
    SendRewardSerializer,
    WalletSerializer,
    WalletTransactionSerializer,
    WithdrawalDecisionSerializer,
    WithdrawalRequestSerializer,
)

logger = logging.getLogger(__name__)


# =============================================================================
# WALLET
# =============================================================================

class MyWalletView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(WalletSerializer(wallet_services.get_wallet(request.user)).data)


class WalletHistoryView(APIView):
    """Merged wallet transactions and withdrawal requests, newest first."""

    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(wallet_services.wallet_history(request.user))


class ManageWalletView(APIView):
    permission_classes = [IsPlatformAdmin]

    def post(self, request):
        serializer = ManageWalletSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        entry = wallet_services.manage_wallet(
            request.user,
            data['admin_password'],
            data['transaction_type'],
            data['amount'],
            recipient=data.get('recipient_id'),
            payment_method=data['payment_method'],
            proof=data.get('proof'),
            notes=data['notes'],
        )
        return Response(WalletTransactionSerializer(entry).data, status=status.HTTP_201_CREATED)


class WalletTransactionViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = WalletTransactionSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = StandardPagination
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ['type', 'payment_method']
    ordering_fields = ['created_at', 'amount']
    ordering = ['-created_at']

    def get_queryset(self):
        queryset = WalletTransaction.objects.select_related('wallet__user', 'from_user', 'to_user')
        if self.request.user.is_platform_admin:
            return queryset
        return queryset.filter(wallet__user=self.request.user)


# =============================================================================
# REWARDS
# =============================================================================

class RewardTransactionViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Reward point ledger.

    - GET  rewards/          own reward movements (all for admins)
    - POST rewards/send/     admin sends points to a partner
    - POST rewards/claim/    partner converts points to wallet balance
    """

    serializer_class = RewardTransactionSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = StandardPagination
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ['type']

    def get_queryset(self):
        queryset = RewardTransaction.objects.select_related('from_user', 'to_user', 'offer')
        user = self.request.user
        if user.is_platform_admin:
            return queryset
        return queryset.filter(Q(to_user=user) | Q(from_user=user))

    def get_permissions(self):
        if self.action == 'send':
            return [IsPlatformAdmin()]
        if self.action == 'claim':
            return [IsPartner()]
        return super().get_permissions()

    @action(detail=False, methods=['post'])
    def send(self, request):
        serializer = SendRewardSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        entry = wallet_services.send_rewards(
            request.user,
            serializer.validated_data['partner_id'],
            serializer.validated_data['points'],
            serializer.validated_data['notes'],
        )
        return Response(RewardTransactionSerializer(entry).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['post'])
    def claim(self, request):
        serializer = ClaimRewardSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = wallet_services.claim_rewards(request.user, serializer.validated_data['points'])
        return Response({
            'amount': result['amount'],
            'reward_transaction': RewardTransactionSerializer(result['reward_transaction']).data,
            'wallet_transaction': WalletTransactionSerializer(result['wallet_transaction']).data,
            'wallet': WalletSerializer(wallet_services.get_wallet(request.user)).data,
        }, status=status.HTTP_201_CREATED)


class RewardOfferViewSet(viewsets.ModelViewSet):
    serializer_class = RewardOfferSerializer
    pagination_class = None

    def get_queryset(self):
        queryset = RewardOffer.objects.all()
        if not self.request.user.is_platform_admin:
            queryset = queryset.filter(is_active=True)
        return queryset

    def get_permissions(self):
        if self.action in ['list', 'retrieve']:
            return [IsAuthenticated()]
        if self.action == 'redeem':
            return [IsPartner()]
        return [IsPlatformAdmin()]

    @action(detail=True, methods=['post'])
    def redeem(self, request, pk=None):
        entry = wallet_services.redeem_offer(request.user, self.get_object())
        return Response(RewardTransactionSerializer(entry).data, status=status.HTTP_201_CREATED)


# =============================================================================
# WITHDRAWALS
# =============================================================================

class WithdrawalRequestViewSet(mixins.CreateModelMixin, viewsets.ReadOnlyModelViewSet):
    """
    Withdrawal requests.

    Admins see every request, sellers the requests naming them, everyone
    else their own. Admins and the named seller process pending requests.
    """

    serializer_class = WithdrawalRequestSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = StandardPagination
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ['status']
    ordering = ['-requested_at']

    def get_queryset(self):
        return wallet_services.withdrawals_for(self.request.user)

    def get_permissions(self):
        if self.action == 'process':
            return [IsAdminOrSeller()]
        return super().get_permissions()

    def perform_create(self, serializer):
        serializer.instance = wallet_services.request_withdrawal(
            self.request.user,
            serializer.validated_data['amount'],
            seller=serializer.validated_data.get('seller'),
            notes=serializer.validated_data.get('notes', ''),
        )

    @action(detail=True, methods=['post'])
    def process(self, request, pk=None):
        serializer = WithdrawalDecisionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        withdrawal = wallet_services.process_withdrawal(
            self.get_object(),
            request.user,
            approve=serializer.validated_data['action'] == 'approve',
            reason=serializer.validated_data['reason'],
        )
        return Response(self.get_serializer(withdrawal).data)


# =============================================================================
# BILLING
# =============================================================================

class PayableViewSet(viewsets.ModelViewSet):
    queryset = Payable.objects.select_related('user')
    serializer_class = PayableSerializer
    permission_classes = [IsPlatformAdmin]
    pagination_class = StandardPagination
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ['status']
    search_fields = ['party_name', 'user__user_code', 'notes']


class ReceivableViewSet(PayableViewSet):
    queryset = Receivable.objects.select_related('user')
    serializer_class = ReceivableSerializer
