"""
URL configuration for properties app.

URL Structure Generated:
========================

Property Type Endpoints:
- /types/                             - Property type list/create (GET, POST)
- /types/{id}/                        - Property type detail/update/delete

Listing Endpoints:
- /                                   - Listing list/create (GET, POST)
- /{id}/                              - Listing detail/update/delete (GET, PUT, PATCH, DELETE)
- /my-properties/                     - Listings owned by the current user (GET)
- /pending/                           - Listings awaiting verification (GET, admin)
- /filter-options/                    - Values for filter widgets (GET)
- /validate-section/                  - Validate one listing form section (POST)
- /{id}/verify/                       - Publish a pending listing (POST, admin)
- /{id}/reject/                       - Delete a pending listing (POST, admin)
- /{id}/request-modification/         - Ask the owner for changes (POST, admin)
- /{id}/status/                       - Move along the sale workflow (POST, admin)
- /{id}/geocode/                      - Manual geocoding (POST, admin)
- /{id}/slides/                       - Slideshow images (GET, POST)

This URLs file gets included by the main project URLs at:
/api/v1/properties/ -> properties.urls
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import PropertyTypeViewSet, PropertyViewSet

app_name = 'properties'


# =============================================================================
# ROUTER CONFIGURATION
# =============================================================================

router = DefaultRouter()

# Types must be registered before the root listing routes so that
# 'types/' is not captured as a listing primary key.
router.register(r'types', PropertyTypeViewSet, basename='property-type')
router.register(r'', PropertyViewSet, basename='property')


# =============================================================================
# MAIN URL PATTERNS
# =============================================================================

urlpatterns = [
    path('', include(router.urls)),
]
