"""
Django application configuration for the support app.
"""

from django.apps import AppConfig


class SupportConfig(AppConfig):
    """Resource centre, support tickets and platform messages."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'support'
    verbose_name = 'Support'
