"""
Razorpay-compatible payment gateway client.

Orders are created over the REST API with basic auth (key id / secret);
checkout signatures are HMAC-SHA256 of "<order_id>|<payment_id>" keyed
with the secret.
"""
import hashlib
import hmac
import logging
from decimal import Decimal, ROUND_HALF_UP

import requests
from django.conf import settings

from .exceptions import PaymentGatewayError

logger = logging.getLogger(__name__)


def to_minor_units(amount):
    """Decimal major units -> integer minor units (paise, cents)."""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class RazorpayGateway:

    def __init__(self, key_id, key_secret, api_url=None, timeout=None):
        self.key_id = key_id
        self.key_secret = key_secret
        self.api_url = (api_url or getattr(settings, "RAZORPAY_API_URL", "https://api.razorpay.com/v1")).rstrip("/")
        self.timeout = timeout or getattr(settings, "OUTBOUND_HTTP_TIMEOUT", 30)

    def create_order(self, amount, currency, receipt, notes=None):
        """
        Create a gateway order.

        Args:
            amount (Decimal): amount in major units
            currency (str): ISO currency code
            receipt (str): our reference, shown on the gateway dashboard
            notes (dict): free-form metadata stored with the order

        Returns:
            dict: the gateway order (``id``, ``amount`` in minor units, ``currency``, ...)
        """
        payload = {
            "amount": to_minor_units(amount),
            "currency": currency,
            "receipt": receipt,
            "notes": notes or {},
        }
        try:
            response = requests.post(
                f"{self.api_url}/orders",
                json=payload,
                auth=(self.key_id, self.key_secret),
                timeout=self.timeout,
            )
            response.raise_for_status()
            order = response.json()
        except requests.exceptions.RequestException as e:
            logger.error("Gateway order creation failed for %s: %s", receipt, e)
            raise PaymentGatewayError() from e
        except ValueError as e:
            logger.error("Gateway returned a non-JSON response for %s", receipt)
            raise PaymentGatewayError() from e

        logger.info("Gateway order %s created for %s", order.get("id"), receipt)
        return order

    def expected_signature(self, order_id, payment_id):
        message = f"{order_id}|{payment_id}".encode()
        return hmac.new(self.key_secret.encode(), message, hashlib.sha256).hexdigest()

    def verify_signature(self, order_id, payment_id, signature):
        if not signature:
            return False
        return hmac.compare_digest(self.expected_signature(order_id, payment_id), signature)


def get_gateway():
    """The configured gateway, or None when no keys are set."""
    key_id = getattr(settings, "RAZORPAY_KEY_ID", "")
    key_secret = getattr(settings, "RAZORPAY_KEY_SECRET", "")
    if not (key_id and key_secret):
        return None
    return RazorpayGateway(key_id, key_secret)
