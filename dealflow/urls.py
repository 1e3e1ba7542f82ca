"""
URL configuration for the dealflow project.

Every API endpoint lives under /api/v1/. App URLconfs are included below;
the health, info and error handlers are defined here.
"""

import sys

from django.conf import settings
from django.contrib import admin
from django.db import connection
from django.http import JsonResponse
from django.urls import include, path
from django.utils import timezone
from django.views.decorators.cache import cache_control
from django.views.decorators.http import require_http_methods
from rest_framework_simplejwt.views import TokenRefreshView, TokenVerifyView

from accounts.views import DealFlowTokenObtainPairView, payment_callback
from services import check_service_health


# =============================================================================
# HEALTH CHECK ENDPOINT
# =============================================================================

@require_http_methods(["GET"])
@cache_control(no_cache=True, must_revalidate=True, no_store=True)
def health_check(request):
    """
    Health check endpoint for deployment monitoring.

    Returns:
        JSON response with system status and database connectivity
    """
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")

        return JsonResponse({
            "status": "healthy",
            "database": "connected",
            "python_version": f"{sys.version_info.major}.{sys.version_info.minor}",
            "timestamp": timezone.now().isoformat(),
            "services": check_service_health(),
        }, status=200)

    except Exception as e:
        return JsonResponse({
            "status": "unhealthy",
            "database": "error",
            "error": str(e) if settings.DEBUG else "Database connection failed"
        }, status=503)


# =============================================================================
# API INFO ENDPOINT
# =============================================================================

@require_http_methods(["GET"])
def api_info(request):
    """
    API information endpoint for frontend integration.

    Returns:
        JSON response with API version and the main endpoint groups
    """
    return JsonResponse({
        "api_name": "DealFlow API",
        "version": "1.0",
        "description": "Real estate partner platform: listings, leads, wallets and micro-sites",
        "endpoints": {
            "authentication": {
                "token_obtain": "/api/v1/auth/token/",
                "token_refresh": "/api/v1/auth/token/refresh/",
                "token_verify": "/api/v1/auth/token/verify/",
            },
            "accounts": {
                "register": "/api/v1/accounts/register/",
                "partners": "/api/v1/accounts/partners/",
                "sellers": "/api/v1/accounts/sellers/",
                "customers": "/api/v1/accounts/customers/",
                "team_requests": "/api/v1/accounts/team-requests/",
            },
            "properties": {
                "list_create": "/api/v1/properties/",
                "types": "/api/v1/properties/types/",
                "pending": "/api/v1/properties/pending/",
            },
            "leads": {
                "list_create": "/api/v1/leads/",
                "appointments": "/api/v1/leads/appointments/",
                "inquiries": "/api/v1/leads/inquiries/",
                "requirements": "/api/v1/leads/requirements/",
            },
            "wallet": {
                "me": "/api/v1/wallet/me/",
                "rewards": "/api/v1/wallet/rewards/",
                "withdrawals": "/api/v1/wallet/withdrawals/",
            },
            "marketing": {
                "kits": "/api/v1/marketing/kits/",
                "website": "/api/v1/marketing/website/",
                "public_site": "/api/v1/site/{user_code}/",
            },
            "support": {
                "resources": "/api/v1/support/resources/",
                "tickets": "/api/v1/support/tickets/",
                "messages": "/api/v1/support/messages/",
            },
            "administration": {
                "settings": "/api/v1/settings/{maintenance|registration-fees|earning-rules|website-defaults}/",
                "dashboard": "/api/v1/admin/dashboard/",
            },
            "utilities": {
                "health": "/api/v1/health/",
                "payment_callback": "/api/v1/payments/callback/",
            },
        },
    })


# =============================================================================
# MAIN URL PATTERNS
# =============================================================================

urlpatterns = [
    # Django Admin Interface
    path('admin/', admin.site.urls),

    # Health and System Status
    path('api/v1/health/', health_check, name='health-check'),
    path('api/v1/info/', api_info, name='api-info'),

    # Authentication Endpoints (JWT)
    path('api/v1/auth/token/', DealFlowTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('api/v1/auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('api/v1/auth/token/verify/', TokenVerifyView.as_view(), name='token_verify'),

    # Core Application Endpoints
    path('api/v1/accounts/', include('accounts.urls')),
    path('api/v1/properties/', include('properties.urls')),
    path('api/v1/leads/', include('leads.urls')),
    path('api/v1/wallet/', include('wallet.urls')),
    path('api/v1/marketing/', include('marketing.urls')),
    path('api/v1/site/', include('marketing.site_urls')),
    path('api/v1/support/', include('support.urls')),
    path('api/v1/payments/callback/', payment_callback, name='payment-callback'),
    path('api/v1/', include('administration.urls')),

    # API root
    path('api/v1/', api_info, name='api-root'),
    path('api/', api_info, name='api-default'),
]


# =============================================================================
# DEVELOPMENT URL PATTERNS
# =============================================================================

if settings.DEBUG:
    from django.conf.urls.static import static

    urlpatterns += [
        *static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT),
        path('api-auth/', include('rest_framework.urls')),
    ]


# =============================================================================
# CUSTOM ERROR HANDLERS
# =============================================================================

def custom_404_handler(request, exception):
    """Custom 404 handler for API endpoints"""
    if request.path.startswith('/api/'):
        return JsonResponse({
            'error': 'API endpoint not found',
            'message': f'The requested endpoint {request.path} does not exist',
            'available_endpoints': '/api/v1/info/'
        }, status=404)

    from django.views.defaults import page_not_found
    return page_not_found(request, exception)


def custom_500_handler(request):
    """Custom 500 handler for API endpoints"""
    if request.path.startswith('/api/'):
        return JsonResponse({
            'error': 'Internal server error',
            'message': 'An unexpected error occurred',
            'contact': 'Please contact support if this error persists'
        }, status=500)

    from django.views.defaults import server_error
    return server_error(request)


handler404 = custom_404_handler
handler500 = custom_500_handler
