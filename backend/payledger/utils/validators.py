"""
Validators — Rule-based checks applied before any gateway call or ledger write.
"""
import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Mapping, Optional

from payledger.exceptions import PaymentValidationError

# Upper bound on a single amount in major units. Keeps ledger sums finite.
MAX_AMOUNT = 10_000_000


def validate_order_amount(amount: Optional[float]) -> float:
    """Order amounts are major units and must be strictly positive."""
    if amount is None or isinstance(amount, bool) or not math.isfinite(amount) or not 0 < amount <= MAX_AMOUNT:
        raise PaymentValidationError("Invalid amount provided")
    return float(amount)


def validate_currency(currency: Optional[str], supported: list[str]) -> str:
    code = (currency or "").strip().upper()
    if code not in supported:
        raise PaymentValidationError(f"Unsupported currency: {currency}")
    return code


def require_fields(values: Mapping[str, Optional[str]], message: str = "Missing required parameters") -> None:
    """Reject when any of the named values is missing or blank."""
    missing = [name for name, value in values.items() if not value or not str(value).strip()]
    if missing:
        raise PaymentValidationError(message)


def to_minor_units(amount: float) -> int:
    """INR has two decimal subunits: rupees to paise, rounded to nearest."""
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
