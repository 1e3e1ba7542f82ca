"""
Project-wide DRF exception handler.

Business rule violations raised from the service layer are turned into
consistent JSON error bodies here, so views can call services without
wrapping every call in try/except.
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from services import BusinessRuleError, ServiceIntegrationError

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """
    Map domain exceptions to HTTP responses, defer everything else to DRF.

    Response shape:
        {
            "error": "Insufficient wallet balance.",
            "code": "insufficient_funds",
            "details": {"amount": ["Insufficient wallet balance."]}
        }
    """
    if isinstance(exc, BusinessRuleError):
        view = context.get('view')
        logger.warning(
            f"Business rule rejected in {view.__class__.__name__ if view else 'unknown view'}: {exc}"
        )
        body = {'error': str(exc), 'code': exc.code}
        if exc.field:
            body['details'] = {exc.field: [str(exc)]}
        elif exc.details:
            body['details'] = exc.details
        return Response(body, status=exc.status_code)

    if isinstance(exc, ServiceIntegrationError):
        logger.error(f"Integration failure: {exc}")
        return Response(
            {
                'error': 'Upstream service failure',
                'details': str(exc),
            },
            status=status.HTTP_502_BAD_GATEWAY
        )

    return exception_handler(exc, context)
