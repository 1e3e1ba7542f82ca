"""
Django application configuration for the leads app.
"""

from django.apps import AppConfig


class LeadsConfig(AppConfig):
    """
    Configuration for the Leads app.

    This app manages:
    - Partner leads and their sales and deal statuses
    - Lead forwarding within a partner team
    - Site visit appointments and visit proof review
    - Micro-site enquiries and customer requirements
    """

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'leads'
    verbose_name = 'Leads & Deals'
