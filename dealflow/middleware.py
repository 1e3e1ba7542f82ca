# ===== SECURITY MIDDLEWARE =====
"""
Custom middleware for the DealFlow platform.
Provides rate limiting, upload validation, maintenance mode and security monitoring.
"""

import logging
from typing import Dict, Any
from django.core.cache import cache
from django.http import JsonResponse
from django.conf import settings

logger = logging.getLogger(__name__)


def get_client_ip(request) -> str:
    """Get real client IP address."""
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        return x_forwarded_for.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR', 'unknown')


class RateLimitMiddleware:
    """
    Rate limiting for authentication, OTP, registration and payment endpoints.
    Fixed window counters kept in the Django cache.
    """

    def __init__(self, get_response):
        self.get_response = get_response

        self.rate_limits = {
            '/api/v1/auth/': {'requests': 20, 'window': 900},  # 20/15min
            '/api/v1/accounts/otp/': {'requests': 5, 'window': 900},
            '/api/v1/accounts/register/': {'requests': 10, 'window': 3600},
            '/api/v1/payments/': {'requests': 30, 'window': 3600},
        }

    def __call__(self, request):
        enabled = getattr(settings, 'RATE_LIMIT_ENABLED', True)
        if enabled and request.method == 'POST' and not self._check_rate_limit(request):
            return JsonResponse(
                {
                    'error': 'Rate limit exceeded',
                    'message': 'Too many requests. Please try again later.',
                    'retry_after': self._get_retry_after(request)
                },
                status=429
            )

        return self.get_response(request)

    def _check_rate_limit(self, request) -> bool:
        """Check if request is within rate limits."""
        endpoint = self._get_endpoint_pattern(request.path)
        if endpoint is None:
            return True

        limit_config = self.rate_limits[endpoint]
        cache_key = f"rate_limit:{self._get_user_identifier(request)}:{endpoint}"

        current_count = cache.get(cache_key, 0)
        if current_count >= limit_config['requests']:
            logger.warning(f"Rate limit exceeded for {self._get_user_identifier(request)} on {endpoint}")
            return False

        cache.set(cache_key, current_count + 1, limit_config['window'])
        return True

    def _get_user_identifier(self, request) -> str:
        user = getattr(request, 'user', None)
        if user is not None and user.is_authenticated:
            return f"user_{user.pk}"
        return f"ip_{get_client_ip(request)}"

    def _get_endpoint_pattern(self, path: str):
        for pattern in self.rate_limits:
            if path.startswith(pattern):
                return pattern
        return None

    def _get_retry_after(self, request) -> int:
        endpoint = self._get_endpoint_pattern(request.path)
        return self.rate_limits.get(endpoint, {}).get('window', 900)


class FileUploadSecurityMiddleware:
    """
    Validates every uploaded file: KYC documents, listing images,
    marketing kit assets, visit proofs and payment proofs.
    """

    def __init__(self, get_response):
        self.get_response = get_response

        self.allowed_extensions = {'pdf', 'png', 'jpg', 'jpeg', 'webp', 'zip'}
        self.allowed_mime_types = {
            'application/pdf',
            'image/png',
            'image/jpeg',
            'image/webp',
            'application/zip',
            'application/x-zip-compressed',
            'application/octet-stream',
        }
        self.magic_numbers = {
            'pdf': [b'%PDF'],
            'png': [b'\x89PNG'],
            'jpg': [b'\xff\xd8\xff'],
            'jpeg': [b'\xff\xd8\xff'],
            'zip': [b'PK\x03\x04'],
        }

        self.max_file_size = getattr(settings, 'MAX_UPLOAD_FILE_SIZE', 10 * 1024 * 1024)

        # Malicious patterns to check in filenames
        self.dangerous_patterns = ['../', '..\\', '<script', '<?php', '<%']

    def __call__(self, request):
        if request.method == 'POST' and request.path.startswith('/api/'):
            content_type = request.META.get('CONTENT_TYPE', '')
            if content_type.startswith('multipart/form-data'):
                validation_result = self._validate_file_upload(request)
                if not validation_result['valid']:
                    logger.warning(f"Rejected upload on {request.path}: {validation_result['message']}")
                    return JsonResponse(
                        {
                            'error': 'Invalid file upload',
                            'message': validation_result['message'],
                            'details': validation_result.get('details', {})
                        },
                        status=400
                    )

        return self.get_response(request)

    def _validate_file_upload(self, request) -> Dict[str, Any]:
        for field_name, uploaded_file in request.FILES.items():
            if uploaded_file.size > self.max_file_size:
                return {
                    'valid': False,
                    'message': f'File size exceeds limit of {self.max_file_size // (1024 * 1024)}MB',
                    'details': {'field': field_name, 'file_size': uploaded_file.size, 'max_size': self.max_file_size}
                }

            file_extension = self._get_file_extension(uploaded_file.name)
            if file_extension not in self.allowed_extensions:
                return {
                    'valid': False,
                    'message': f'File type not allowed. Allowed types: {", ".join(sorted(self.allowed_extensions))}',
                    'details': {'field': field_name, 'file_extension': file_extension}
                }

            if uploaded_file.content_type not in self.allowed_mime_types:
                return {
                    'valid': False,
                    'message': 'Invalid file type detected',
                    'details': {'field': field_name, 'mime_type': uploaded_file.content_type}
                }

            if self._contains_malicious_patterns(uploaded_file.name):
                return {
                    'valid': False,
                    'message': 'Filename contains invalid characters',
                    'details': {'field': field_name, 'filename': uploaded_file.name}
                }

            if not self._has_valid_signature(uploaded_file, file_extension):
                return {
                    'valid': False,
                    'message': f'File content does not match .{file_extension} format',
                    'details': {'field': field_name}
                }

        return {'valid': True}

    def _get_file_extension(self, filename: str) -> str:
        return filename.lower().rsplit('.', 1)[-1] if '.' in filename else ''

    def _contains_malicious_patterns(self, filename: str) -> bool:
        filename_lower = filename.lower()
        return any(pattern in filename_lower for pattern in self.dangerous_patterns)

    def _has_valid_signature(self, uploaded_file, extension: str) -> bool:
        signatures = self.magic_numbers.get(extension)
        if not signatures:
            return True

        uploaded_file.seek(0)
        header = uploaded_file.read(8)
        uploaded_file.seek(0)
        return any(header.startswith(signature) for signature in signatures)


class MaintenanceModeMiddleware:
    """
    Returns 503 for API traffic while the maintenance setting is enabled.

    Health checks, authentication and platform settings stay reachable so
    administrators can switch maintenance off again.
    """

    exempt_prefixes = (
        '/admin/',
        '/api/v1/health/',
        '/api/v1/auth/',
        '/api/v1/settings/',
    )

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if request.path.startswith('/api/') and not request.path.startswith(self.exempt_prefixes):
            from administration.models import AppSetting

            config = AppSetting.get_maintenance()
            if config['is_enabled']:
                return JsonResponse(
                    {
                        'error': 'Service unavailable',
                        'maintenance': True,
                        'message': config['message'],
                    },
                    status=503
                )

        return self.get_response(request)


class SecurityAuditMiddleware:
    """
    Security audit middleware for logging and monitoring suspicious activities.
    """

    def __init__(self, get_response):
        self.get_response = get_response

        self.suspicious_patterns = [
            'select * from',
            'union select',
            '<script>',
            'javascript:',
            '../',
            'cmd.exe',
            '/etc/passwd',
        ]

    def __call__(self, request):
        if self._is_suspicious_request(request):
            self._log_suspicious_activity(request)

        response = self.get_response(request)

        if getattr(response, 'status_code', None) == 401:
            self._log_failed_auth(request)

        return response

    def _is_suspicious_request(self, request) -> bool:
        for value in request.GET.values():
            if any(pattern in value.lower() for pattern in self.suspicious_patterns):
                return True

        content_type = request.META.get('CONTENT_TYPE', '')
        if request.method == 'POST' and content_type.startswith('application/json'):
            body = request.body.decode('utf-8', errors='ignore').lower()
            if any(pattern in body for pattern in self.suspicious_patterns):
                return True

        return False

    def _log_suspicious_activity(self, request):
        logger.warning(
            f"Suspicious request detected - IP: {get_client_ip(request)}, Path: {request.path}",
            extra={
                'ip_address': get_client_ip(request),
                'path': request.path,
                'method': request.method,
                'user_agent': request.META.get('HTTP_USER_AGENT', 'Unknown')
            }
        )

    def _log_failed_auth(self, request):
        logger.warning(
            f"Failed authentication attempt from {get_client_ip(request)}",
            extra={
                'ip_address': get_client_ip(request),
                'path': request.path,
                'user_agent': request.META.get('HTTP_USER_AGENT', 'Unknown')
            }
        )
