"""
Order Service — Creates pending orders with the payment gateway.

An order is not a payment: nothing here touches the ledger. Only a verified
completion becomes a PaymentRecord.
"""
import secrets
import time
from typing import Any, Dict, Optional

import httpx

from payledger.config import Settings
from payledger.exceptions import ConfigurationError, GatewayError, GatewayErrorKind
from payledger.utils.logger import get_logger
from payledger.utils.validators import to_minor_units, validate_currency, validate_order_amount

logger = get_logger(__name__)


def new_receipt_token(prefix: str = "order") -> str:
    """Time-based receipt token with a random suffix."""
    return f"{prefix}_{int(time.time() * 1000)}_{secrets.token_hex(5)[:9]}"


def _error_description(response: httpx.Response) -> Optional[str]:
    """Razorpay puts the reason in error.description; anything else is ignored."""
    try:
        body = response.json()
    except ValueError:
        return None
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and isinstance(error.get("description"), str):
        return error["description"]
    return None


class RazorpayGateway:
    """Minimal Razorpay Orders API client with an explicit timeout."""

    def __init__(self, settings: Settings, transport: Optional[httpx.BaseTransport] = None):
        if not settings.gateway_configured:
            raise ConfigurationError("Razorpay not configured. Please check your API keys.")
        self.environment = settings.environment
        self._client = httpx.Client(
            base_url=settings.RAZORPAY_API_URL,
            auth=(settings.razorpay_key_id, settings.RAZORPAY_KEY_SECRET),
            timeout=settings.GATEWAY_TIMEOUT_SECONDS,
            transport=transport,
        )

    def create_order(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST /orders. Never retried: a blind retry could create a duplicate order."""
        try:
            response = self._client.post("/orders", json=payload)
        except httpx.TimeoutException as e:
            raise GatewayError(GatewayErrorKind.TIMEOUT) from e
        except httpx.TransportError as e:
            raise GatewayError(GatewayErrorKind.UNAVAILABLE) from e

        if response.is_success:
            try:
                order = response.json()
            except ValueError:
                order = None
            if not isinstance(order, dict):
                logger.error(f"Gateway returned an unreadable order body: HTTP {response.status_code}")
                raise GatewayError(GatewayErrorKind.UNKNOWN, gateway_status=response.status_code)
            return order

        description = _error_description(response)
        logger.error(f"Gateway rejected order: HTTP {response.status_code} {description or ''}".rstrip())
        raise GatewayError.from_status(response.status_code, description)

    def close(self) -> None:
        self._client.close()


class OrderService:
    def __init__(self, settings: Settings, gateway: Optional[RazorpayGateway] = None):
        self.settings = settings
        self._gateway = gateway

    @property
    def gateway(self) -> RazorpayGateway:
        if self._gateway is None:
            # Refuse rather than fabricate an order when credentials are absent.
            self._gateway = RazorpayGateway(self.settings)
        return self._gateway

    def close(self) -> None:
        if self._gateway is not None:
            self._gateway.close()

    def build_order_payload(
        self,
        amount: float,
        currency: str,
        plan: str,
        user_id: Optional[str] = None,
        user_email: Optional[str] = None,
    ) -> Dict[str, Any]:
        return {
            "amount": to_minor_units(amount),
            "currency": currency,
            "receipt": new_receipt_token(),
            "notes": {
                "planId": plan,
                "userId": user_id or "anonymous",
                "userEmail": user_email or "unknown",
                "environment": self.settings.environment,
            },
        }

    def create_order(
        self,
        amount: Optional[float],
        currency: Optional[str],
        plan: Optional[str],
        user_id: Optional[str] = None,
        user_email: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Validate, convert to paise and ask the gateway for a new order."""
        amount = validate_order_amount(amount)
        currency = validate_currency(currency or self.settings.DEFAULT_CURRENCY, self.settings.SUPPORTED_CURRENCIES)
        gateway = self.gateway

        payload = self.build_order_payload(amount, currency, plan or "", user_id, user_email)
        logger.info(
            f"Creating order: amount={payload['amount']} {currency}, receipt={payload['receipt']}, "
            f"plan={plan}, environment={gateway.environment}"
        )
        order = gateway.create_order(payload)
        logger.info(f"Order created successfully: {order.get('id')} ({gateway.environment.upper()})")
        return order

    def create_mock_order(self, amount: float, currency: Optional[str], plan: Optional[str],
                          user_id: Optional[str] = None) -> Dict[str, Any]:
        """Fabricated order for local testing. Never sent to the gateway."""
        amount = validate_order_amount(amount)
        currency = validate_currency(currency or self.settings.DEFAULT_CURRENCY, self.settings.SUPPORTED_CURRENCIES)
        now_ms = int(time.time() * 1000)
        order = {
            "id": f"mock_order_{now_ms}",
            "amount": to_minor_units(amount),
            "currency": currency,
            "receipt": f"mock_receipt_{now_ms}",
            "status": "created",
            "notes": {"planId": plan, "userId": user_id or "anonymous", "mock": "true"},
        }
        logger.info(f"Mock order created: {order['id']}")
        return order
