"""
Public micro-site URLs, included at /api/v1/site/.
"""

from django.urls import path

from .views import site_card_view, site_catalog_view, site_contact_view, site_view

app_name = 'site'

urlpatterns = [
    path('<str:user_code>/', site_view, name='home'),
    path('<str:user_code>/catalog/', site_catalog_view, name='catalog'),
    path('<str:user_code>/contact/', site_contact_view, name='contact'),
    path('<str:user_code>/card/', site_card_view, name='card'),
]
