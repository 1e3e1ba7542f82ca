"""
Administration models for the DealFlow platform.

AppSetting is a small key/JSON store for settings admins change at
runtime: registration fees, default earning rules, micro-site defaults and
maintenance mode. Each key has a default so a fresh database behaves
sensibly before anything is saved.
"""

import copy
import logging

from django.db import models

from services.business_logic import PARTNER_ROLES

logger = logging.getLogger(__name__)


DEFAULT_MAINTENANCE_MESSAGE = "We are currently down for maintenance. Please check back later."

KEY_MAINTENANCE = 'maintenance'
KEY_REGISTRATION_FEES = 'registration_fees'
KEY_DEFAULT_EARNING_RULES = 'default_earning_rules'
KEY_WEBSITE_DEFAULTS = 'website_defaults'

SETTING_DEFAULTS = {
    KEY_MAINTENANCE: {
        'is_enabled': False,
        'message': DEFAULT_MAINTENANCE_MESSAGE,
    },
    KEY_REGISTRATION_FEES: {role: '0' for role in PARTNER_ROLES},
    KEY_DEFAULT_EARNING_RULES: {},
    KEY_WEBSITE_DEFAULTS: {
        'business_profile': {},
        'contact_details': {},
        'featured_catalog': [],
        'partner_featured_catalog': [],
        'recommended_catalog': [],
    },
}

SETTING_KEY_CHOICES = [
    (KEY_MAINTENANCE, 'Maintenance Mode'),
    (KEY_REGISTRATION_FEES, 'Registration Fees'),
    (KEY_DEFAULT_EARNING_RULES, 'Default Earning Rules'),
    (KEY_WEBSITE_DEFAULTS, 'Website Defaults'),
]


class AppSetting(models.Model):
    """One runtime-editable platform setting."""

    key = models.CharField(max_length=50, unique=True, choices=SETTING_KEY_CHOICES)
    value = models.JSONField(default=dict, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['key']
        verbose_name = 'App Setting'
        verbose_name_plural = 'App Settings'

    def __str__(self):
        return self.get_key_display()

    # =========================================================================
    # GENERIC ACCESSORS
    # =========================================================================

    @classmethod
    def get_value(cls, key):
        """
        Return the stored value merged over its default.

        The row is created with the default on first read.
        """
        default = copy.deepcopy(SETTING_DEFAULTS.get(key, {}))
        setting, created = cls.objects.get_or_create(key=key, defaults={'value': default})
        if created:
            logger.info(f"Created default app setting '{key}'")
            return default
        if isinstance(default, dict) and isinstance(setting.value, dict):
            default.update(setting.value)
            return default
        return setting.value

    @classmethod
    def set_value(cls, key, value):
        setting, _ = cls.objects.update_or_create(key=key, defaults={'value': value})
        logger.info(f"Updated app setting '{key}'")
        return setting.value

    # =========================================================================
    # TYPED ACCESSORS
    # =========================================================================

    @classmethod
    def get_maintenance(cls):
        """{'is_enabled': bool, 'message': str}"""
        value = cls.get_value(KEY_MAINTENANCE)
        return {
            'is_enabled': bool(value.get('is_enabled')),
            'message': value.get('message') or DEFAULT_MAINTENANCE_MESSAGE,
        }

    @classmethod
    def get_registration_fees(cls):
        return cls.get_value(KEY_REGISTRATION_FEES)

    @classmethod
    def get_default_earning_rules(cls):
        return cls.get_value(KEY_DEFAULT_EARNING_RULES)

    @classmethod
    def get_website_defaults(cls):
        return cls.get_value(KEY_WEBSITE_DEFAULTS)

    @classmethod
    def seed_defaults(cls):
        """Create every missing setting row; existing rows are untouched."""
        created_keys = []
        for key, default in SETTING_DEFAULTS.items():
            _, created = cls.objects.get_or_create(key=key, defaults={'value': copy.deepcopy(default)})
            if created:
                created_keys.append(key)
        return created_keys
