"""
Payment Entry Model — Durable, append-only ledger table.
One row per verification attempt; rows are inserted and never updated.
"""
from sqlalchemy import Column, String, Integer, Float, DateTime, Text

from payledger.database import Base


class PaymentEntry(Base):
    __tablename__ = "payments"

    seq = Column(Integer, primary_key=True, autoincrement=True)   # Append order
    id = Column(String(32), unique=True, nullable=False, index=True)

    user_id = Column(String(128), nullable=False, index=True)
    user_name = Column(String(256), default="")
    user_email = Column(String(256), default="")

    amount = Column(Float, nullable=False, default=0)              # Major units (INR, not paise)
    currency = Column(String(3), nullable=False, default="INR")

    plan = Column(String(64), nullable=False, index=True)
    plan_name = Column(String(128), nullable=False)
    plan_duration = Column(String(64), nullable=False)

    status = Column(String(16), nullable=False, index=True)        # success | failed
    payment_method = Column(String(32), nullable=False, default="razorpay")
    gateway_order_id = Column(String(64), default="")
    gateway_payment_id = Column(String(64), default="", index=True)

    created_at = Column(DateTime, nullable=False, index=True)
    updated_at = Column(DateTime, nullable=False)
    failure_reason = Column(Text, nullable=True)
