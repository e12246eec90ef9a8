"""
Cryptographic Utilities — HMAC-SHA256 gateway signatures.

The gateway signs ``order_id|payment_id`` with the shared key secret and
returns the hex digest to the client after checkout.
"""
import hashlib
import hmac


def signature_payload(order_id: str, payment_id: str) -> bytes:
    return f"{order_id}|{payment_id}".encode("utf-8")


def generate_signature(order_id: str, payment_id: str, secret: bytes) -> str:
    """Hex HMAC-SHA256 of ``order_id|payment_id`` keyed with ``secret``."""
    return hmac.new(secret, signature_payload(order_id, payment_id), hashlib.sha256).hexdigest()


def verify_signature(order_id: str, payment_id: str, signature: str, secret: bytes) -> bool:
    """True iff ``signature`` was issued by the gateway for this order/payment pair.

    Pure and deterministic. Uses a constant-time comparison.
    """
    expected = generate_signature(order_id, payment_id, secret)
    return hmac.compare_digest(expected.encode("ascii"), signature.encode("utf-8"))
