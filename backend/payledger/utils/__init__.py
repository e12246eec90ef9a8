from payledger.utils.hashing import generate_signature, verify_signature
from payledger.utils.validators import validate_order_amount, validate_currency, require_fields

__all__ = [
    "generate_signature", "verify_signature",
    "validate_order_amount", "validate_currency", "require_fields",
]
