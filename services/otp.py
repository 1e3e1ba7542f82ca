# services/otp.py
"""
One-time passwords for customer email verification.

Codes are six digits, live in the Django cache for OTP_TTL_SECONDS and can
be used once.
"""

import logging
import random
import time
from typing import Optional

from django.conf import settings
from django.core.cache import cache
from django.core.mail import send_mail

from . import OTPError

logger = logging.getLogger(__name__)


class OTPService:
    """
    Issue and verify email OTPs.

    The cache entry stores the expiry timestamp alongside the code so an
    expired code is reported (and removed) even on backends that keep keys
    slightly longer than requested.
    """

    cache_prefix = 'otp'

    def __init__(self, ttl_seconds: Optional[int] = None):
        self.ttl_seconds = ttl_seconds or getattr(settings, 'OTP_TTL_SECONDS', 300)

    def _key(self, email: str) -> str:
        return f"{self.cache_prefix}:{email.strip().lower()}"

    @staticmethod
    def generate_code() -> str:
        return str(random.randint(100000, 999999))

    def send_otp(self, email: str, name: str = '') -> None:
        """
        Store a fresh code for email and mail it.

        Raises:
            OTPError: If the email could not be sent
        """
        code = self.generate_code()
        expires_at = time.time() + self.ttl_seconds
        cache.set(self._key(email), {'otp': code, 'expires_at': expires_at}, self.ttl_seconds)

        body = f"Hi {name or 'there'}, your One-Time Password for verification is: {code}"
        try:
            send_mail(
                'Your OTP for Verification',
                body,
                settings.DEFAULT_FROM_EMAIL,
                [email],
                fail_silently=False,
            )
        except Exception as e:
            cache.delete(self._key(email))
            logger.error(f"Failed to send OTP to {email}: {str(e)}")
            raise OTPError(f"Could not send OTP: {str(e)}")

        logger.info(f"OTP sent to {email}")

    def verify_otp(self, email: str, otp: str) -> bool:
        """
        Check a submitted code.

        Missing or mismatched codes return False. Expired codes are deleted
        and return False. A match deletes the code and returns True.
        """
        key = self._key(email)
        stored = cache.get(key)

        if not stored:
            logger.warning(f"No OTP found for email: {email}")
            return False

        if time.time() > stored['expires_at']:
            logger.warning(f"OTP for {email} has expired")
            cache.delete(key)
            return False

        if str(otp).strip() == stored['otp']:
            cache.delete(key)
            logger.info(f"OTP for {email} verified")
            return True

        logger.warning(f"Invalid OTP submitted for {email}")
        return False


otp_service = OTPService()
