"""
Verification Service — Turns a claimed payment completion into a ledger entry.

Every call appends exactly one record, whatever the outcome:
- authentic signature  -> ``success`` record, PaymentSucceeded published
- signature mismatch   -> ``failed`` record, reason "Invalid signature"
- any other fault      -> ``failed`` record, reason is the fault message
"""
from datetime import datetime
from typing import Callable, Optional

from payledger.config import Settings
from payledger.exceptions import ConfigurationError, INVALID_SIGNATURE
from payledger.schemas.schemas import PaymentClaim, PaymentRecord, VerificationOutcome
from payledger.services.events import EventBus, PaymentSucceeded
from payledger.services.ledger import Ledger, new_record_id
from payledger.services.plan_catalog import resolve_display
from payledger.utils.hashing import verify_signature
from payledger.utils.logger import get_logger

logger = get_logger(__name__)

PAYMENT_METHOD = "razorpay"
GENERIC_FAILURE = "Payment verification failed"


class IncompleteClaim(ValueError):
    """A gateway proof field or the user id is absent from the claim."""


class VerificationService:
    """Single writer of the ledger."""

    def __init__(
        self,
        ledger: Ledger,
        settings: Settings,
        events: Optional[EventBus] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.ledger = ledger
        self.settings = settings
        self.events = events
        self.clock = clock

    def _secret(self) -> bytes:
        secret = self.settings.signing_secret
        if not secret:
            raise ConfigurationError("Payment verification not configured on server")
        return secret

    def _build_record(self, claim: PaymentClaim, status: str, failure_reason: Optional[str]) -> PaymentRecord:
        now = self.clock()
        plan = claim.plan_id or "unknown"
        plan_name, plan_duration = resolve_display(plan, claim.plan_name, claim.plan_duration)
        return PaymentRecord(
            id=new_record_id(),
            user_id=claim.user_id or "unknown",
            user_name=claim.user_name or "",
            user_email=claim.user_email or "",
            amount=claim.amount or 0,
            currency=self.settings.DEFAULT_CURRENCY,
            plan=plan,
            plan_name=plan_name,
            plan_duration=plan_duration,
            status=status,
            payment_method=PAYMENT_METHOD,
            gateway_order_id=claim.gateway_order_id or "",
            gateway_payment_id=claim.gateway_payment_id or "",
            created_at=now,
            updated_at=now,
            failure_reason=failure_reason,
        )

    @staticmethod
    def _require_complete(claim: PaymentClaim) -> None:
        missing = [
            name for name in ("gateway_order_id", "gateway_payment_id", "gateway_signature", "user_id")
            if not getattr(claim, name)
        ]
        if missing:
            raise IncompleteClaim(f"Missing claim fields: {', '.join(missing)}")

    def verify_payment(self, claim: PaymentClaim) -> VerificationOutcome:
        """Classify and record one payment attempt.

        Raises:
            ConfigurationError: the signing secret is not configured. Nothing
                is recorded; the request cannot be judged either way.
        """
        secret = self._secret()

        try:
            self._require_complete(claim)
            authentic = verify_signature(
                claim.gateway_order_id, claim.gateway_payment_id, claim.gateway_signature, secret
            )
            status, reason = ("success", None) if authentic else ("failed", INVALID_SIGNATURE)
            record = self.ledger.append(self._build_record(claim, status, reason))
        except Exception as e:
            logger.exception(f"Error verifying payment for order {claim.gateway_order_id}: {e}")
            record = self.ledger.append(self._build_record(claim, "failed", str(e) or GENERIC_FAILURE))
            logger.info(f"Payment error stored in ledger with ID: {record.id}")
            return VerificationOutcome(
                success=False,
                payment_id=record.id,
                error=GENERIC_FAILURE,
                internal_fault=True,
            )

        if not authentic:
            logger.warning(
                f"Invalid signature for order {record.gateway_order_id} "
                f"payment {record.gateway_payment_id}; failure stored with ID: {record.id}"
            )
            return VerificationOutcome(success=False, payment_id=record.id, error=INVALID_SIGNATURE)

        logger.info(
            f"Payment verified for user {record.user_id}, plan {record.plan}, "
            f"amount {record.amount} {record.currency}; stored with ID: {record.id}"
        )
        self._publish(PaymentSucceeded(record))
        return VerificationOutcome(
            success=True,
            payment_id=record.id,
            order_id=record.gateway_order_id,
            gateway_payment_id=record.gateway_payment_id,
            plan_id=record.plan,
            message="Payment verified successfully",
        )

    def _publish(self, event: PaymentSucceeded) -> None:
        if self.events is None:
            return
        try:
            self.events.publish(event)
        except Exception as e:
            # The record is committed; a dispatch failure must not change the response.
            logger.error(f"Failed to schedule payment notification for {event.record.id}: {e}")
