"""
Entitlement Service — Does a user hold a successful purchase for a resource?

Access granted by a successful record never expires (lifetime purchases).
"""
from typing import Optional

from payledger.exceptions import AccessDenied
from payledger.schemas.schemas import PaymentRecord, PurchaseSummary
from payledger.services.ledger import Ledger
from payledger.utils.validators import require_fields


class EntitlementService:
    def __init__(self, ledger: Ledger):
        self.ledger = ledger

    def has_purchased(self, user_id: str, plan_or_payment_id: str) -> bool:
        """True if the user has a successful record for this plan or gateway payment id."""
        return self.ledger.first(
            lambda p: p.user_id == user_id
            and p.status == "success"
            and plan_or_payment_id in (p.plan, p.gateway_payment_id)
        ) is not None

    def check_access(self, user_id: Optional[str], gateway_payment_id: Optional[str]) -> PaymentRecord:
        """Return the granting record, or raise AccessDenied.

        Requires an exact (user id, gateway payment id, success) match. A wrong
        user, an unknown payment id and a failed attempt are indistinguishable
        to the caller.
        """
        require_fields({"userId": user_id, "paymentId": gateway_payment_id})

        record = self.ledger.first(
            lambda p: p.gateway_payment_id == gateway_payment_id
            and p.user_id == user_id
            and p.status == "success"
        )
        if record is None:
            raise AccessDenied()
        return record

    def list_purchases(self, user_id: Optional[str]) -> list[PurchaseSummary]:
        """Successful purchases for a user, in purchase order."""
        require_fields({"userId": user_id}, "Missing user ID")

        return [
            PurchaseSummary(
                id=p.id,
                user_id=p.user_id,
                user_name=p.user_name or "User",
                user_email=p.user_email or "",
                plan=p.plan,
                plan_name=p.plan_name or "Plan",
                amount=p.amount or 0,
                currency=p.currency or "INR",
                payment_id=p.gateway_payment_id or "",
                order_id=p.gateway_order_id or "",
                purchase_date=p.created_at,
                plan_duration=p.plan_duration or "Plan",
            )
            for p in self.ledger.find(lambda p: p.user_id == user_id and p.status == "success")
        ]
