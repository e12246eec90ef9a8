"""
Payment Errors — Exception taxonomy shared by services and routes.

Each error carries the HTTP status and the short, non-sensitive message that
is returned to the client. Internal detail stays in the logs.
"""
from enum import Enum
from typing import Optional

INVALID_SIGNATURE = "Invalid signature"


class PaymentError(Exception):
    """Base exception for payment backend errors."""

    status_code = 500
    public_message = "Request failed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.public_message)
        self.message = message or self.public_message


class ConfigurationError(PaymentError):
    """A required secret or credential is missing."""

    status_code = 500
    public_message = "Payment gateway not configured"


class PaymentValidationError(PaymentError):
    """Malformed or missing input, rejected before any gateway call or ledger write."""

    status_code = 400
    public_message = "Invalid request"


class AccessDenied(PaymentError):
    status_code = 403
    public_message = "Invalid payment or access denied"


class RecordNotFound(PaymentError):
    status_code = 404
    public_message = "Not found"


class GatewayErrorKind(Enum):
    """Classification of gateway failures."""

    AUTHENTICATION = "authentication"
    BAD_REQUEST = "bad_request"
    FORBIDDEN = "forbidden"
    RATE_LIMITED = "rate_limited"
    TIMEOUT = "timeout"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"


_GATEWAY_MESSAGES = {
    GatewayErrorKind.AUTHENTICATION: "Payment gateway authentication failed. Please check the API keys.",
    GatewayErrorKind.BAD_REQUEST: "Invalid request parameters.",
    GatewayErrorKind.FORBIDDEN: "Access denied. Please check the payment gateway account status.",
    GatewayErrorKind.RATE_LIMITED: "Payment gateway is rate limiting requests. Please retry shortly.",
    GatewayErrorKind.TIMEOUT: "Payment gateway timed out. Please retry.",
    GatewayErrorKind.UNAVAILABLE: "Payment gateway is unavailable. Please retry.",
    GatewayErrorKind.UNKNOWN: "Failed to create order",
}

_GATEWAY_STATUS = {
    GatewayErrorKind.AUTHENTICATION: 502,
    GatewayErrorKind.BAD_REQUEST: 400,
    GatewayErrorKind.FORBIDDEN: 502,
    GatewayErrorKind.RATE_LIMITED: 503,
    GatewayErrorKind.TIMEOUT: 504,
    GatewayErrorKind.UNAVAILABLE: 503,
    GatewayErrorKind.UNKNOWN: 502,
}

_RETRYABLE = {GatewayErrorKind.RATE_LIMITED, GatewayErrorKind.TIMEOUT, GatewayErrorKind.UNAVAILABLE}


class GatewayError(PaymentError):
    """The external payment gateway rejected or failed a request."""

    def __init__(
        self,
        kind: GatewayErrorKind,
        message: Optional[str] = None,
        gateway_status: Optional[int] = None,
    ):
        super().__init__(message or _GATEWAY_MESSAGES[kind])
        self.kind = kind
        self.gateway_status = gateway_status
        self.status_code = _GATEWAY_STATUS[kind]

    @property
    def retryable(self) -> bool:
        return self.kind in _RETRYABLE

    @classmethod
    def from_status(cls, status: int, description: Optional[str] = None) -> "GatewayError":
        """Classify a gateway HTTP status into an error kind."""
        if status == 401:
            kind = GatewayErrorKind.AUTHENTICATION
        elif status == 400:
            kind = GatewayErrorKind.BAD_REQUEST
        elif status == 403:
            kind = GatewayErrorKind.FORBIDDEN
        elif status == 429:
            kind = GatewayErrorKind.RATE_LIMITED
        elif status >= 500:
            kind = GatewayErrorKind.UNAVAILABLE
        else:
            kind = GatewayErrorKind.UNKNOWN

        message = None
        if kind in (GatewayErrorKind.BAD_REQUEST, GatewayErrorKind.UNKNOWN) and description:
            message = f"{_GATEWAY_MESSAGES[kind]} {description}".strip()
        return cls(kind, message=message, gateway_status=status)
