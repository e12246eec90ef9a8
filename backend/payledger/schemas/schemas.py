"""
Pydantic Schemas — Ledger records plus request & response models for the API.

Wire names are camelCase; Python attributes are snake_case.
"""
from datetime import datetime
from typing import Optional, Dict, List, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from payledger.utils.validators import MAX_AMOUNT

PaymentStatus = Literal["success", "failed"]
TimeFilter = Literal["all", "month", "week"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ──────────────── Ledger ────────────────

class PaymentRecord(CamelModel):
    """One verification attempt. Immutable once appended to the ledger."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    user_id: str
    user_name: str = ""
    user_email: str = ""
    amount: float = Field(0, ge=0, le=MAX_AMOUNT, allow_inf_nan=False)
    currency: str = "INR"
    plan: str
    plan_name: str
    plan_duration: str
    status: PaymentStatus
    payment_method: str = "razorpay"
    gateway_order_id: str = ""
    gateway_payment_id: str = ""
    created_at: datetime
    updated_at: datetime
    failure_reason: Optional[str] = None


class PaymentClaim(BaseModel):
    """Caller-submitted proof of a completed payment.

    Only the three gateway fields are authenticated; the rest is advisory
    display data. Every field is optional here so that an incomplete claim
    still reaches the verifier and is recorded as a failed attempt.
    """

    model_config = ConfigDict(populate_by_name=True)

    gateway_order_id: Optional[str] = Field(
        None, validation_alias=AliasChoices("razorpay_order_id", "gatewayOrderId", "gateway_order_id")
    )
    gateway_payment_id: Optional[str] = Field(
        None, validation_alias=AliasChoices("razorpay_payment_id", "gatewayPaymentId", "gateway_payment_id")
    )
    gateway_signature: Optional[str] = Field(
        None, validation_alias=AliasChoices("razorpay_signature", "gatewaySignature", "gateway_signature")
    )
    plan_id: Optional[str] = Field(None, validation_alias=AliasChoices("planId", "plan_id"))
    user_id: Optional[str] = Field(None, validation_alias=AliasChoices("userId", "user_id"))
    user_name: Optional[str] = Field(None, validation_alias=AliasChoices("userName", "user_name"))
    user_email: Optional[str] = Field(None, validation_alias=AliasChoices("userEmail", "user_email"))
    plan_name: Optional[str] = Field(None, validation_alias=AliasChoices("planName", "plan_name"))
    plan_duration: Optional[str] = Field(None, validation_alias=AliasChoices("planDuration", "plan_duration"))
    amount: Optional[float] = Field(
        None, ge=0, le=MAX_AMOUNT, allow_inf_nan=False, description="Amount in INR (major units)"
    )


class VerificationOutcome(CamelModel):
    success: bool
    payment_id: str = Field(..., description="Ledger record id")
    order_id: Optional[str] = None
    gateway_payment_id: Optional[str] = None
    plan_id: Optional[str] = None
    error: Optional[str] = None
    message: str = ""
    internal_fault: bool = Field(False, exclude=True)


# ──────────────── Orders ────────────────

class CreateOrderRequest(CamelModel):
    amount: float = Field(..., description="Amount in major currency units (e.g. rupees)")
    currency: str = "INR"
    plan_id: str
    user_id: Optional[str] = None
    user_email: Optional[str] = None


class CreateOrderResponse(CamelModel):
    success: bool = True
    order: Dict
    environment: str


# ──────────────── Analytics ────────────────

class PaymentStats(CamelModel):
    total_revenue: float = 0
    monthly_revenue: float = 0
    total_payments: int = 0
    successful_payments: int = 0
    failed_payments: int = 0
    average_order_value: float = 0
    revenue_by_plan: Dict[str, float] = {}
    success_rate: float = 0


class PaymentStatsResponse(CamelModel):
    success: bool = True
    stats: PaymentStats


class PaymentListResponse(CamelModel):
    success: bool = True
    payments: List[PaymentRecord]
    total: int


class ReceiptResponse(CamelModel):
    success: bool = True
    receipt: PaymentRecord


# ──────────────── Entitlement ────────────────

class UserPurchasesRequest(CamelModel):
    user_id: Optional[str] = None


class PurchaseSummary(CamelModel):
    id: str
    user_id: str
    user_name: str
    user_email: str
    plan: str
    plan_name: str
    amount: float
    currency: str
    payment_id: str
    order_id: str
    purchase_date: datetime
    plan_duration: str
    status: str = "active"


class UserPurchasesResponse(CamelModel):
    success: bool = True
    purchases: List[PurchaseSummary]
    total_purchases: int


class AccessRequest(CamelModel):
    user_id: Optional[str] = None
    payment_id: Optional[str] = Field(
        None, validation_alias=AliasChoices("paymentId", "gatewayPaymentId", "payment_id")
    )


class AccessResponse(CamelModel):
    success: bool = True
    message: str = "Access granted"
    payment: PaymentRecord


class DownloadResponse(CamelModel):
    success: bool = True
    download_url: str
    file_name: str
    file_size: str = "Unknown"
    mobile_instructions: str = (
        "If download doesn't start automatically on mobile, "
        "please copy the link and open it in a new tab."
    )


# ──────────────── Generic ────────────────

class HealthResponse(CamelModel):
    status: str
    message: str
    environment: str
    gateway_configured: bool
    mailer_configured: bool
    ledger_backend: str
    ledger_size: int
    uptime_seconds: float
    timestamp: datetime


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    kind: Optional[str] = None
    retryable: Optional[bool] = None
