"""
WSGI config for the dealflow project.

Exposes the module-level ``application`` used by gunicorn and other WSGI
servers (``gunicorn dealflow.wsgi:application``).
"""

import json
import logging
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'dealflow.settings')

# Initialize Django application early to avoid AppRegistryNotReady errors
django_application = get_wsgi_application()

logger = logging.getLogger(__name__)


# =============================================================================
# PRODUCTION WSGI APPLICATION
# =============================================================================

def application(environ, start_response):
    """
    Production WSGI application.

    - /wsgi-health/ answers without entering Django
    - Errors escaping Django are logged and returned as a JSON 500
    """
    if environ.get('PATH_INFO') == '/wsgi-health/':
        start_response('200 OK', [
            ('Content-Type', 'application/json'),
            ('Cache-Control', 'no-cache'),
        ])
        return [b'{"status": "healthy", "service": "dealflow-wsgi"}']

    try:
        return django_application(environ, start_response)
    except Exception as e:
        logger.exception(f"WSGI application error: {e}")
        start_response('500 Internal Server Error', [
            ('Content-Type', 'application/json'),
            ('Cache-Control', 'no-cache'),
        ])
        return [json.dumps({
            "error": "Internal server error",
            "message": "The server encountered an unexpected condition",
            "service": "dealflow-wsgi",
        }).encode('utf-8')]
