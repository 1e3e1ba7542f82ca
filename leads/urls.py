"""
URL configuration for the leads app.

Included by the main project URLs at /api/v1/leads/.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import AppointmentViewSet, InquiryViewSet, LeadViewSet, RequirementViewSet

app_name = 'leads'

router = DefaultRouter()
router.register(r'appointments', AppointmentViewSet, basename='appointment')
router.register(r'inquiries', InquiryViewSet, basename='inquiry')
router.register(r'requirements', RequirementViewSet, basename='requirement')
router.register(r'', LeadViewSet, basename='lead')

urlpatterns = [
    path('', include(router.urls)),
]
