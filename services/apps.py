"""
Django application configuration for the services app.

The services app holds the business rules shared between apps and the
clients for third-party integrations (payment gateway, OTP email,
geocoding). It defines no models.
"""

from django.apps import AppConfig


class ServicesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'services'
    verbose_name = 'Services'
