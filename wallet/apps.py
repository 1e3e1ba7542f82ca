"""
Django application configuration for the wallet app.
"""

from django.apps import AppConfig


class WalletConfig(AppConfig):
    """Wallet balances, reward points, withdrawals and billing entries."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'wallet'
    verbose_name = 'Wallet & Billing'
