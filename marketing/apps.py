"""
Django application configuration for the marketing app.
"""

from django.apps import AppConfig


class MarketingConfig(AppConfig):
    """Marketing kits and partner micro-sites."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'marketing'
    verbose_name = 'Marketing'
