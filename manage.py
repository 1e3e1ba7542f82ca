#!/usr/bin/env python
"""
Django's command-line utility for administrative tasks.

DealFlow Backend Management Script
==================================

Development:
  python manage.py runserver                  # Start development server
  python manage.py migrate                    # Apply migrations
  python manage.py createsuperuser            # Create admin user
  python manage.py test                       # Run tests

DealFlow Specific Commands:
  python manage.py seed_platform_settings     # Create default platform settings
  python manage.py geocode_properties         # Geocode listings missing coordinates
"""

import os
import sys


def main():
    """Run administrative tasks."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'dealflow.settings')

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?\n"
            "Try: pip install -e ."
        ) from exc

    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
