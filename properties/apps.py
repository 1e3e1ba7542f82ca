"""
Properties App Configuration - DealFlow Backend
Django app configuration for the properties application.
"""

from django.apps import AppConfig


class PropertiesConfig(AppConfig):
    """
    Configuration for the Properties app.

    This app manages:
    - Property types grouped by category
    - Listings captured through the ten-section listing form
    - The verification workflow (pending, for sale, under contract, sold)
    - Geocoding of listing addresses
    """

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'properties'
    verbose_name = 'Property Listings'
