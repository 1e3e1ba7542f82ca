"""
URL configuration for the accounts app.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import (
    AdminUserViewSet,
    CustomerRegistrationView,
    CustomerViewSet,
    PartnerViewSet,
    ProfileView,
    QuickRegistrationView,
    SellerViewSet,
    SendOTPView,
    TeamRequestViewSet,
    UpgradeOptionsView,
    UpgradeRequestView,
    UserDocumentViewSet,
)

app_name = 'accounts'

router = DefaultRouter()
router.register(r'partners', PartnerViewSet, basename='partner')
router.register(r'sellers', SellerViewSet, basename='seller')
router.register(r'customers', CustomerViewSet, basename='customer')
router.register(r'admins', AdminUserViewSet, basename='admin-user')
router.register(r'team-requests', TeamRequestViewSet, basename='team-request')
router.register(r'documents', UserDocumentViewSet, basename='document')

urlpatterns = [
    path('register/', QuickRegistrationView.as_view(), name='register'),
    path('register/customer/', CustomerRegistrationView.as_view(), name='register-customer'),
    path('otp/send/', SendOTPView.as_view(), name='otp-send'),
    path('profile/', ProfileView.as_view(), name='profile'),
    path('upgrade/options/', UpgradeOptionsView.as_view(), name='upgrade-options'),
    path('upgrade/request/', UpgradeRequestView.as_view(), name='upgrade-request'),
    path('', include(router.urls)),
]
