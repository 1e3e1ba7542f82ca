# ===== SERVICES INTEGRATION LAYER =====
"""
Centralized service layer for the DealFlow backend.
Provides consistent interfaces and error handling for business rules,
payment gateway, OTP delivery and geocoding.
"""

import logging
from typing import Optional, Dict, Any, Tuple
from django.conf import settings

logger = logging.getLogger(__name__)


# =============================================================================
# SERVICE INTEGRATION EXCEPTIONS
# =============================================================================

class ServiceIntegrationError(Exception):
    """Base exception for third-party integration errors."""
    pass


class PaymentGatewayError(ServiceIntegrationError):
    """Raised when the payment gateway cannot be reached or refuses a request."""
    pass


class GeocodingServiceError(ServiceIntegrationError):
    """Raised when geocoding operations fail."""
    pass


class OTPError(ServiceIntegrationError):
    """Raised when a one-time password cannot be delivered."""
    pass


# =============================================================================
# BUSINESS RULE EXCEPTIONS
# =============================================================================

class BusinessRuleError(Exception):
    """
    Raised when a requested operation violates a business rule.

    Rendered by dealflow.exceptions.api_exception_handler as
    {"error": message, "code": code, "details": {field: [message]}}.
    """

    status_code = 400
    default_code = 'business_rule'

    def __init__(self, message: str, field: Optional[str] = None,
                 code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.field = field
        self.code = code or self.default_code
        self.details = details


class InsufficientFundsError(BusinessRuleError):
    """Raised when a wallet or reward balance cannot cover a debit."""
    default_code = 'insufficient_funds'


class InvalidTransitionError(BusinessRuleError):
    """Raised when a status change is not allowed from the current state."""
    status_code = 409
    default_code = 'invalid_transition'


class DuplicateAccountError(BusinessRuleError):
    """Raised when an email address is already registered."""
    status_code = 409
    default_code = 'duplicate_account'


class PermissionDeniedError(BusinessRuleError):
    """Raised when the acting user's role does not allow the operation."""
    status_code = 403
    default_code = 'permission_denied'


# =============================================================================
# GEOCODING SERVICE INTEGRATION
# =============================================================================

def safe_geocode_address(full_address: str) -> Optional[Tuple[float, float]]:
    """
    Geocode an address, returning None instead of raising.

    Args:
        full_address: Complete address string

    Returns:
        Tuple of (latitude, longitude) or None if geocoding fails
    """
    from .geocoding import geocode_address

    try:
        return geocode_address(full_address)
    except GeocodingServiceError as e:
        logger.warning(f"Geocoding failed for address '{full_address}': {str(e)}")
        return None


# =============================================================================
# HEALTH CHECK SERVICES
# =============================================================================

def check_service_health() -> Dict[str, Dict[str, Any]]:
    """
    Report configuration status of every integrated service.

    Returns:
        Dictionary with health status of each service
    """
    return {
        'geocoding': {
            'available': True,
            'api_key_configured': bool(getattr(settings, 'GOOGLE_MAPS_API_KEY', '')),
        },
        'payments': {
            'enabled': bool(getattr(settings, 'PAYMENT_ENABLED', False)),
            'merchant_configured': bool(getattr(settings, 'PHONEPE_MERCHANT_ID', '')),
        },
        'email': {
            'backend': getattr(settings, 'EMAIL_BACKEND', ''),
        },
    }


# =============================================================================
# EXPORT FOR EASY IMPORTS
# =============================================================================

__all__ = [
    'safe_geocode_address',
    'check_service_health',
    'ServiceIntegrationError',
    'PaymentGatewayError',
    'GeocodingServiceError',
    'OTPError',
    'BusinessRuleError',
    'InsufficientFundsError',
    'InvalidTransitionError',
    'DuplicateAccountError',
    'PermissionDeniedError',
]
