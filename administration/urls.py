"""
URL configuration for the administration app.
"""

from django.urls import path

from .views import (
    DashboardStatsView,
    EarningRulesView,
    MaintenanceSettingView,
    RegistrationFeesView,
    WebsiteDefaultsView,
)

app_name = 'administration'

urlpatterns = [
    path('settings/maintenance/', MaintenanceSettingView.as_view(), name='maintenance'),
    path('settings/registration-fees/', RegistrationFeesView.as_view(), name='registration-fees'),
    path('settings/earning-rules/', EarningRulesView.as_view(), name='earning-rules'),
    path('settings/website-defaults/', WebsiteDefaultsView.as_view(), name='website-defaults'),
    path('admin/dashboard/', DashboardStatsView.as_view(), name='dashboard'),
]
