"""
URL configuration for the support app.

Included by the main project URLs at /api/v1/support/.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import MessageViewSet, ResourceCategoryViewSet, ResourceViewSet, SupportTicketViewSet

app_name = 'support'

router = DefaultRouter()
router.register(r'categories', ResourceCategoryViewSet, basename='resource-category')
router.register(r'resources', ResourceViewSet, basename='resource')
router.register(r'tickets', SupportTicketViewSet, basename='ticket')
router.register(r'messages', MessageViewSet, basename='message')

urlpatterns = [
    path('', include(router.urls)),
]
