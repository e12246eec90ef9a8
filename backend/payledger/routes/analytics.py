"""
Analytics Routes — Revenue dashboard queries and receipt lookup.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from payledger.dependencies import get_analytics_service
from payledger.schemas.schemas import (
    PaymentListResponse, PaymentStatsResponse, ReceiptResponse, TimeFilter,
)
from payledger.services.analytics_service import AnalyticsService, DEFAULT_LIMIT

router = APIRouter(prefix="/api", tags=["Analytics"])


@router.get("/payments", response_model=PaymentListResponse)
def list_payments(
    time_filter: TimeFilter = Query("all", alias="timeFilter"),
    plan_filter: str = Query("all", alias="planFilter"),
    limit: Optional[int] = Query(DEFAULT_LIMIT, ge=0),
    analytics: AnalyticsService = Depends(get_analytics_service),
):
    """Ledger records, newest first."""
    payments = analytics.list_payments(time_filter, plan_filter, limit)
    return PaymentListResponse(payments=payments, total=len(payments))


@router.get("/payment-stats", response_model=PaymentStatsResponse)
def payment_stats(
    time_filter: TimeFilter = Query("all", alias="timeFilter"),
    plan_filter: str = Query("all", alias="planFilter"),
    analytics: AnalyticsService = Depends(get_analytics_service),
):
    """Revenue, success rate and per-plan breakdown."""
    return PaymentStatsResponse(stats=analytics.compute_stats(time_filter, plan_filter))


@router.get("/receipts/{record_id}", response_model=ReceiptResponse)
def get_receipt(record_id: str, analytics: AnalyticsService = Depends(get_analytics_service)):
    """Full ledger record by id."""
    return ReceiptResponse(receipt=analytics.receipt(record_id))
