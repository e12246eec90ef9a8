"""
Payment Routes — Gateway order creation and payment verification.
"""
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from payledger.config import Settings
from payledger.dependencies import get_app_settings, get_order_service, get_verification_service
from payledger.schemas.schemas import (
    CreateOrderRequest, CreateOrderResponse, PaymentClaim, VerificationOutcome,
)
from payledger.services.order_service import OrderService
from payledger.services.verification_service import VerificationService
from payledger.utils.rate_limiter import rate_limit

router = APIRouter(prefix="/api", tags=["Payment"])


@router.post("/create-order", response_model=CreateOrderResponse)
def create_order(
    payload: CreateOrderRequest,
    orders: OrderService = Depends(get_order_service),
    _throttle: bool = Depends(rate_limit("create-order")),
):
    """Create a pending order with the payment gateway."""
    order = orders.create_order(
        payload.amount, payload.currency, payload.plan_id,
        user_id=payload.user_id, user_email=payload.user_email,
    )
    return CreateOrderResponse(order=order, environment=orders.gateway.environment)


@router.post("/mock-create-order", response_model=CreateOrderResponse)
def mock_create_order(
    payload: CreateOrderRequest,
    orders: OrderService = Depends(get_order_service),
    settings: Settings = Depends(get_app_settings),
):
    """Fabricated order for local front-end testing (disabled unless ENABLE_MOCK_ORDERS)."""
    if not settings.ENABLE_MOCK_ORDERS:
        raise HTTPException(status_code=404, detail="Not Found")
    order = orders.create_mock_order(payload.amount, payload.currency, payload.plan_id, user_id=payload.user_id)
    return CreateOrderResponse(order=order, environment="mock")


@router.post("/verify-payment", response_model=VerificationOutcome, response_model_exclude_none=True)
def verify_payment(
    claim: PaymentClaim,
    verifier: VerificationService = Depends(get_verification_service),
    _throttle: bool = Depends(rate_limit("verify-payment")),
):
    """Verify the gateway signature and record the attempt in the ledger.

    A failure still returns the ledger id of the recorded failed attempt.
    """
    outcome = verifier.verify_payment(claim)
    if outcome.success:
        return outcome

    status_code = 500 if outcome.internal_fault else 400
    return JSONResponse(
        status_code=status_code,
        content=outcome.model_dump(by_alias=True, exclude_none=True),
    )
