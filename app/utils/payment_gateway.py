"""
Minimal Stripe PaymentIntent client over the REST API.

Only the two calls the payment flow needs: create an intent for the
checkout form, and retrieve one to verify a claimed payment.
"""
import logging
from typing import Dict, Optional

import requests

from app import config
from app.utils.exceptions import PaymentGatewayError

logger = logging.getLogger(__name__)


class StripeGateway:
    def __init__(self, secret_key: str, api_base: str = config.STRIPE_API_BASE, timeout: float = 10.0):
        self.secret_key = secret_key
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout

    def _request(self, method: str, path: str, data: Optional[Dict] = None) -> Dict:
        url = f"{self.api_base}{path}"
        try:
            response = requests.request(
                method,
                url,
                data=data,
                auth=(self.secret_key, ""),
                timeout=self.timeout
            )
        except requests.exceptions.Timeout:
            raise PaymentGatewayError("Payment gateway timed out")
        except requests.exceptions.RequestException as e:
            raise PaymentGatewayError(f"Payment gateway unreachable: {e}")

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code >= 400:
            error = body.get("error", {}) if isinstance(body, dict) else {}
            message = error.get("message") or f"HTTP {response.status_code}"
            logger.warning("Gateway %s %s failed: %s", method, path, message)
            raise PaymentGatewayError(f"Payment gateway error: {message}")

        return body

    def create_payment_intent(self, amount: float, currency: str, metadata: Optional[Dict] = None) -> Dict:
        """Create an intent; ``amount`` is in major units and sent in minor units"""
        data = {
            "amount": int(round(amount * 100)),
            "currency": currency,
        }
        for key, value in (metadata or {}).items():
            data[f"metadata[{key}]"] = str(value)

        return self._request("POST", "/payment_intents", data=data)

    def retrieve_payment_intent(self, intent_id: str) -> Dict:
        return self._request("GET", f"/payment_intents/{intent_id}")


def get_payment_gateway() -> Optional[StripeGateway]:
    """FastAPI dependency; None when no gateway key is configured"""
    if not config.STRIPE_SECRET_KEY:
        return None
    return StripeGateway(config.STRIPE_SECRET_KEY)
