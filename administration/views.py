"""
Views for the administration app.

Platform settings are exposed as one GET/PUT endpoint per AppSetting key.
Maintenance status can be read by anyone so clients can show the
maintenance banner before login.
"""

import logging

from django.db.models import Count
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.models import User
from accounts.permissions import IsPlatformAdmin
from leads.models import Lead
from properties.models import Property
from services.business_logic import PARTNER_ROLES
from wallet.models import WithdrawalRequest

from .models import (
    AppSetting,
    KEY_DEFAULT_EARNING_RULES,
    KEY_REGISTRATION_FEES,
    KEY_WEBSITE_DEFAULTS,
)
from .serializers import (
    DashboardStatsSerializer,
    EarningRulesSerializer,
    MaintenanceSettingSerializer,
    RegistrationFeesSerializer,
    WebsiteDefaultsSerializer,
)

logger = logging.getLogger(__name__)


# =============================================================================
# SETTINGS ENDPOINTS
# =============================================================================

class MaintenanceSettingView(APIView):
    """
    GET  /api/v1/settings/maintenance/  (public)
    PUT  /api/v1/settings/maintenance/  (admin)
    """

    def get_permissions(self):
        if self.request.method == 'GET':
            return [AllowAny()]
        return [IsPlatformAdmin()]

    def get(self, request):
        return Response(AppSetting.get_maintenance())

    def put(self, request):
        serializer = MaintenanceSettingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        current = AppSetting.get_maintenance()
        current.update(serializer.validated_data)
        AppSetting.set_value('maintenance', current)

        logger.info(f"Maintenance mode set to {current['is_enabled']} by {request.user.user_code}")
        return Response(AppSetting.get_maintenance())


class RegistrationFeesView(APIView):
    """GET/PUT /api/v1/settings/registration-fees/"""

    permission_classes = [IsPlatformAdmin]

    def get(self, request):
        return Response(AppSetting.get_registration_fees())

    def put(self, request):
        serializer = RegistrationFeesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        fees = AppSetting.get_registration_fees()
        fees.update(serializer.to_storage())
        AppSetting.set_value(KEY_REGISTRATION_FEES, fees)
        return Response(fees)


class EarningRulesView(APIView):
    """GET/PUT /api/v1/settings/earning-rules/"""

    permission_classes = [IsPlatformAdmin]

    def get(self, request):
        return Response(AppSetting.get_default_earning_rules())

    def put(self, request):
        serializer = EarningRulesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        rules = AppSetting.get_default_earning_rules()
        rules.update(serializer.to_storage())
        AppSetting.set_value(KEY_DEFAULT_EARNING_RULES, rules)
        return Response(rules)


class WebsiteDefaultsView(APIView):
    """GET/PUT /api/v1/settings/website-defaults/"""

    permission_classes = [IsPlatformAdmin]

    def get(self, request):
        return Response(AppSetting.get_website_defaults())

    def put(self, request):
        serializer = WebsiteDefaultsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        defaults = serializer.to_storage(AppSetting.get_website_defaults())
        AppSetting.set_value(KEY_WEBSITE_DEFAULTS, defaults)
        return Response(defaults)


# =============================================================================
# DASHBOARD
# =============================================================================

def _count_by(queryset, field):
    return {
        row[field]: row['total']
        for row in queryset.values(field).annotate(total=Count('id')).order_by(field)
    }


class DashboardStatsView(APIView):
    """
    GET /api/v1/admin/dashboard/

    Headline counts for the admin dashboard.
    """

    permission_classes = [IsPlatformAdmin]

    def get(self, request):
        partners = User.objects.filter(role__in=PARTNER_ROLES)

        partners_by_role = {role: 0 for role in PARTNER_ROLES}
        partners_by_role.update(_count_by(partners, 'role'))

        stats = {
            'partners_by_role': partners_by_role,
            'partners_by_status': _count_by(partners, 'status'),
            'sellers': User.objects.sellers().count(),
            'customers': User.objects.customers().count(),
            'listings_by_status': _count_by(Property.objects.all(), 'status'),
            'leads': Lead.objects.filter(is_copy=False).count(),
            'pending_withdrawals': WithdrawalRequest.objects.filter(
                status=WithdrawalRequest.STATUS_PENDING
            ).count(),
        }
        return Response(DashboardStatsSerializer(stats).data, status=status.HTTP_200_OK)
