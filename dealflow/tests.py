# ===== PROJECT-LEVEL TEST SUITE =====
"""
Test suite for project URLs, error handling and middleware
File: dealflow/tests.py

Test Coverage:
- Health check and API info endpoints
- JSON 404 responses for API paths
- Domain exception rendering
- Rate limiting and upload validation middleware
"""

from django.core.cache import cache
from django.core.files.uploadedfile import SimpleUploadedFile
from django.http import HttpResponse
from django.test import RequestFactory, TestCase, override_settings
from django.urls import reverse

from rest_framework.test import APITestCase
from rest_framework import status

from services import BusinessRuleError, InsufficientFundsError, InvalidTransitionError

from .exceptions import api_exception_handler
from .middleware import FileUploadSecurityMiddleware, RateLimitMiddleware, get_client_ip


def ok_response(request):
    return HttpResponse('ok')


# =============================================================================
# URL TESTS
# =============================================================================

class ProjectEndpointsTest(APITestCase):
    """Test the endpoints defined at project level"""

    def test_health_check(self):
        response = self.client.get(reverse('health-check'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['status'], 'healthy')
        self.assertIn('payments', response.json()['services'])

    def test_api_info(self):
        response = self.client.get(reverse('api-info'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('wallet', response.json()['endpoints'])

    def test_unknown_api_path_returns_json(self):
        response = self.client.get('/api/v1/does-not-exist/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json()['error'], 'API endpoint not found')


# =============================================================================
# EXCEPTION HANDLER TESTS
# =============================================================================

class ExceptionHandlerTest(TestCase):
    """Test rendering of domain errors"""

    def test_business_rule_with_field(self):
        response = api_exception_handler(BusinessRuleError("Too small.", field='amount'), {})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data, {
            'error': 'Too small.', 'code': 'business_rule', 'details': {'amount': ['Too small.']},
        })

    def test_status_codes_per_error(self):
        self.assertEqual(api_exception_handler(InsufficientFundsError("No funds"), {}).status_code, 400)
        self.assertEqual(api_exception_handler(InvalidTransitionError("Nope"), {}).status_code, 409)

    def test_other_exceptions_are_not_handled(self):
        self.assertIsNone(api_exception_handler(ValueError("boom"), {}))


# =============================================================================
# MIDDLEWARE TESTS
# =============================================================================

class RateLimitMiddlewareTest(TestCase):
    """Test the fixed window counters"""

    def setUp(self):
        cache.clear()
        self.factory = RequestFactory()
        self.middleware = RateLimitMiddleware(ok_response)

    def tearDown(self):
        cache.clear()

    def test_forwarded_ip_is_used(self):
        request = self.factory.get('/', HTTP_X_FORWARDED_FOR='203.0.113.5, 10.0.0.1')
        self.assertEqual(get_client_ip(request), '203.0.113.5')

    @override_settings(RATE_LIMIT_ENABLED=True)
    def test_otp_limit(self):
        for _ in range(5):
            response = self.middleware(self.factory.post('/api/v1/accounts/otp/send/'))
            self.assertEqual(response.status_code, 200)

        response = self.middleware(self.factory.post('/api/v1/accounts/otp/send/'))
        self.assertEqual(response.status_code, 429)

    @override_settings(RATE_LIMIT_ENABLED=True)
    def test_unlisted_paths_are_not_counted(self):
        for _ in range(30):
            response = self.middleware(self.factory.post('/api/v1/leads/'))
        self.assertEqual(response.status_code, 200)

    @override_settings(RATE_LIMIT_ENABLED=False)
    def test_disabled(self):
        for _ in range(10):
            response = self.middleware(self.factory.post('/api/v1/accounts/otp/send/'))
        self.assertEqual(response.status_code, 200)


class FileUploadSecurityMiddlewareTest(TestCase):
    """Test upload validation"""

    def setUp(self):
        self.factory = RequestFactory()
        self.middleware = FileUploadSecurityMiddleware(ok_response)

    def test_valid_pdf(self):
        upload = SimpleUploadedFile('aadhar.pdf', b'%PDF-1.4 test', content_type='application/pdf')
        response = self.middleware(self.factory.post('/api/v1/accounts/onboard/', {'aadhar_file': upload}))
        self.assertEqual(response.status_code, 200)

    def test_disallowed_extension(self):
        upload = SimpleUploadedFile('run.exe', b'MZ', content_type='application/octet-stream')
        response = self.middleware(self.factory.post('/api/v1/accounts/onboard/', {'aadhar_file': upload}))
        self.assertEqual(response.status_code, 400)

    def test_signature_mismatch(self):
        upload = SimpleUploadedFile('photo.png', b'not really a png', content_type='image/png')
        response = self.middleware(self.factory.post('/api/v1/leads/appointments/1/proof/', {'visit_proof': upload}))
        self.assertEqual(response.status_code, 400)
