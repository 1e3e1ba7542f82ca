"""
ASGI config for the dealflow project.

Exposes the module-level ``application`` for ASGI servers such as Uvicorn
or Daphne.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'dealflow.settings')

application = get_asgi_application()
