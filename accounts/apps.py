"""
Django application configuration for the accounts app.
"""

from django.apps import AppConfig


class AccountsConfig(AppConfig):
    """
    Users of every role, onboarding wizards, registration payments,
    partner lifecycle and teams.
    """

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'accounts'
    verbose_name = 'Accounts & Partners'
