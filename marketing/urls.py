"""
URL configuration for the marketing app.

Included by the main project URLs at /api/v1/marketing/.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import MarketingKitViewSet, MyWebsiteView, WebsiteSectionView, WebsiteSlideViewSet

app_name = 'marketing'

router = DefaultRouter()
router.register(r'kits', MarketingKitViewSet, basename='kit')
router.register(r'website/slides', WebsiteSlideViewSet, basename='website-slide')

urlpatterns = [
    path('website/', MyWebsiteView.as_view(), name='my-website'),
    path('', include(router.urls)),
    path('website/<slug:section>/', WebsiteSectionView.as_view(), name='website-section'),
]
