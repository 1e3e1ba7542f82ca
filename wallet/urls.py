"""
URL configuration for the wallet app.

Included by the main project URLs at /api/v1/wallet/.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import (
    ManageWalletView,
    MyWalletView,
    PayableViewSet,
    ReceivableViewSet,
    RewardOfferViewSet,
    RewardTransactionViewSet,
    WalletHistoryView,
    WalletTransactionViewSet,
    WithdrawalRequestViewSet,
)

app_name = 'wallet'

router = DefaultRouter()
router.register(r'transactions', WalletTransactionViewSet, basename='wallet-transaction')
router.register(r'rewards', RewardTransactionViewSet, basename='reward-transaction')
router.register(r'offers', RewardOfferViewSet, basename='reward-offer')
router.register(r'withdrawals', WithdrawalRequestViewSet, basename='withdrawal')
router.register(r'payables', PayableViewSet, basename='payable')
router.register(r'receivables', ReceivableViewSet, basename='receivable')

urlpatterns = [
    path('me/', MyWalletView.as_view(), name='my-wallet'),
    path('history/', WalletHistoryView.as_view(), name='history'),
    path('manage/', ManageWalletView.as_view(), name='manage'),
    path('', include(router.urls)),
]
