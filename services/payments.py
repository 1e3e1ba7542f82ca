# services/payments.py
"""
PhonePe pay-page client for partner registration fees.

Requests are signed with the merchant salt:
    X-VERIFY = sha256(base64_payload + api_path + salt_key) + '###' + salt_index
Status checks sign the path alone:
    X-VERIFY = sha256('/pg/v1/status/{merchant_id}/{txn_id}' + salt_key) + '###' + salt_index
"""

import base64
import hashlib
import json
import logging
from decimal import Decimal
from typing import Any, Dict, Optional

import requests
from django.conf import settings

from . import PaymentGatewayError

logger = logging.getLogger(__name__)

PAY_PATH = '/pg/v1/pay'
STATUS_PATH = '/pg/v1/status'
PAYMENT_SUCCESS = 'PAYMENT_SUCCESS'

# The pay page requires a mobile number even though the payer enters their own
DUMMY_MOBILE_NUMBER = '9999999999'


class PhonePeClient:
    """
    Thin wrapper around the PhonePe hermes API.
    """

    def __init__(self, merchant_id: Optional[str] = None, salt_key: Optional[str] = None,
                 salt_index: Optional[int] = None, base_url: Optional[str] = None,
                 timeout: int = 15):
        self.merchant_id = merchant_id if merchant_id is not None else settings.PHONEPE_MERCHANT_ID
        self.salt_key = salt_key if salt_key is not None else settings.PHONEPE_SALT_KEY
        self.salt_index = salt_index if salt_index is not None else settings.PHONEPE_SALT_INDEX
        self.base_url = (base_url or settings.PHONEPE_BASE_URL).rstrip('/')
        self.timeout = timeout

    # -------------------------------------------------------------------------
    # Signing helpers
    # -------------------------------------------------------------------------

    def sign(self, value: str) -> str:
        digest = hashlib.sha256(f"{value}{self.salt_key}".encode('utf-8')).hexdigest()
        return f"{digest}###{self.salt_index}"

    def build_pay_payload(self, amount: Decimal, merchant_transaction_id: str,
                          merchant_user_id: str, redirect_url: str,
                          callback_url: str) -> Dict[str, Any]:
        return {
            'merchantId': self.merchant_id,
            'merchantTransactionId': merchant_transaction_id,
            'merchantUserId': merchant_user_id,
            'amount': int(Decimal(str(amount)) * 100),  # paisa
            'redirectUrl': redirect_url,
            'redirectMode': 'POST',
            'callbackUrl': callback_url,
            'mobileNumber': DUMMY_MOBILE_NUMBER,
            'paymentInstrument': {
                'type': 'PAY_PAGE',
            },
        }

    @staticmethod
    def encode_payload(payload: Dict[str, Any]) -> str:
        return base64.b64encode(json.dumps(payload).encode('utf-8')).decode('ascii')

    # -------------------------------------------------------------------------
    # API calls
    # -------------------------------------------------------------------------

    def initiate_payment(self, amount: Decimal, merchant_transaction_id: str,
                         merchant_user_id: str, redirect_url: str,
                         callback_url: str) -> str:
        """
        Create a pay-page session.

        Returns:
            URL of the hosted payment page the payer must be redirected to

        Raises:
            PaymentGatewayError: On network failure or a non-success response
        """
        if not self.merchant_id or not self.salt_key:
            raise PaymentGatewayError("Payment gateway credentials are not configured")

        payload = self.build_pay_payload(
            amount, merchant_transaction_id, merchant_user_id, redirect_url, callback_url
        )
        encoded = self.encode_payload(payload)
        headers = {
            'accept': 'application/json',
            'Content-Type': 'application/json',
            'X-VERIFY': self.sign(f"{encoded}{PAY_PATH}"),
        }

        try:
            response = requests.post(
                f"{self.base_url}{PAY_PATH}",
                json={'request': encoded},
                headers=headers,
                timeout=self.timeout,
            )
            data = response.json()
        except requests.RequestException as e:
            logger.error(f"Network error initiating payment {merchant_transaction_id}: {str(e)}")
            raise PaymentGatewayError(f"Could not reach payment gateway: {str(e)}")
        except ValueError:
            logger.error(f"Non-JSON response initiating payment {merchant_transaction_id}")
            raise PaymentGatewayError("Payment gateway returned an invalid response")

        if not data.get('success'):
            message = data.get('message') or 'An error occurred during payment initiation.'
            logger.error(f"Payment initiation refused for {merchant_transaction_id}: {message}")
            raise PaymentGatewayError(message)

        try:
            redirect = data['data']['instrumentResponse']['redirectInfo']['url']
        except (KeyError, TypeError):
            raise PaymentGatewayError("Payment gateway response did not include a redirect URL")

        logger.info(f"Payment {merchant_transaction_id} initiated for {amount}")
        return redirect

    def check_status(self, merchant_transaction_id: str) -> Dict[str, Any]:
        """
        Query the gateway for the final state of a transaction.

        Returns:
            Decoded JSON body; 'code' is PAYMENT_SUCCESS for paid transactions

        Raises:
            PaymentGatewayError: On network failure or an undecodable response
        """
        path = f"{STATUS_PATH}/{self.merchant_id}/{merchant_transaction_id}"
        headers = {
            'accept': 'application/json',
            'Content-Type': 'application/json',
            'X-VERIFY': self.sign(path),
            'X-MERCHANT-ID': self.merchant_id,
        }

        try:
            response = requests.get(f"{self.base_url}{path}", headers=headers, timeout=self.timeout)
            return response.json()
        except requests.RequestException as e:
            logger.error(f"Network error checking payment {merchant_transaction_id}: {str(e)}")
            raise PaymentGatewayError(f"Could not reach payment gateway: {str(e)}")
        except ValueError:
            raise PaymentGatewayError("Payment gateway returned an invalid response")

    def is_paid(self, merchant_transaction_id: str) -> bool:
        return self.check_status(merchant_transaction_id).get('code') == PAYMENT_SUCCESS


def parse_user_code(merchant_transaction_id: Optional[str]) -> Optional[str]:
    """
    Extract the user code from a 'TX_<user_code>_<millis>' transaction id.
    """
    parts = (merchant_transaction_id or '').split('_')
    if len(parts) < 3 or parts[0] != 'TX' or not parts[1]:
        return None
    return parts[1]


def build_merchant_transaction_id(user_code: str, millis: int) -> str:
    return f"TX_{user_code}_{millis}"
