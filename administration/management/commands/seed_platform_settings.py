# administration/management/commands/seed_platform_settings.py
"""
Django management command to create the default platform settings.

Existing settings are left untouched, so the command is safe to run on
every deploy.

Usage:
    python manage.py seed_platform_settings
"""

from django.core.management.base import BaseCommand

from administration.models import AppSetting, SETTING_DEFAULTS


class Command(BaseCommand):
    help = 'Create default AppSetting rows (maintenance, fees, earning rules, website defaults)'

    def handle(self, *args, **options):
        created = AppSetting.seed_defaults()

        for key in SETTING_DEFAULTS:
            if key in created:
                self.stdout.write(self.style.SUCCESS(f'✓ Created {key}'))
            else:
                self.stdout.write(f'⊘ {key} already exists')

        self.stdout.write(self.style.SUCCESS(f'{len(created)} setting(s) created'))
