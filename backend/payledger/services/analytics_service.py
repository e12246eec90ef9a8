"""
Analytics Service — Revenue statistics over ledger snapshots.

Read-only. Time windows use local process time:
- month: since the first instant of the current calendar month
- week:  since now minus 7 days
- all:   everything
"""
from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional

from payledger.exceptions import PaymentValidationError, RecordNotFound
from payledger.schemas.schemas import PaymentRecord, PaymentStats
from payledger.services.ledger import Ledger
from payledger.services.plan_catalog import REVENUE_PLAN_KEYS

DEFAULT_LIMIT = 50


def month_start(now: datetime) -> datetime:
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def _revenue(records: Iterable[PaymentRecord]) -> float:
    return sum(p.amount for p in records)


class AnalyticsService:
    def __init__(self, ledger: Ledger, clock: Callable[[], datetime] = datetime.now):
        self.ledger = ledger
        self.clock = clock

    def window_start(self, time_filter: str) -> Optional[datetime]:
        now = self.clock()
        if time_filter == "month":
            return month_start(now)
        if time_filter == "week":
            return now - timedelta(days=7)
        if time_filter == "all":
            return None
        raise PaymentValidationError(f"Invalid timeFilter: {time_filter}")

    def filter_payments(self, time_filter: str = "all", plan_filter: str = "all") -> list[PaymentRecord]:
        since = self.window_start(time_filter)
        records = self.ledger.snapshot()
        if since is not None:
            records = [p for p in records if p.created_at >= since]
        if plan_filter and plan_filter != "all":
            records = [p for p in records if p.plan == plan_filter]
        return records

    def receipt(self, record_id: str) -> PaymentRecord:
        record = self.ledger.get(record_id)
        if record is None:
            raise RecordNotFound("Receipt not found")
        return record

    def list_payments(self, time_filter: str = "all", plan_filter: str = "all",
                      limit: Optional[int] = DEFAULT_LIMIT) -> list[PaymentRecord]:
        """Filtered records, newest first, truncated to ``limit``."""
        if limit is not None and limit < 0:
            raise PaymentValidationError("Invalid limit")
        records = sorted(self.filter_payments(time_filter, plan_filter), key=lambda p: p.created_at, reverse=True)
        if limit:
            records = records[:limit]
        return records

    def compute_stats(self, time_filter: str = "all", plan_filter: str = "all") -> PaymentStats:
        records = self.filter_payments(time_filter, plan_filter)
        successful = [p for p in records if p.status == "success"]
        failed = [p for p in records if p.status == "failed"]

        current_month = month_start(self.clock())
        total_revenue = _revenue(successful)

        return PaymentStats(
            total_revenue=total_revenue,
            monthly_revenue=_revenue(p for p in successful if p.created_at >= current_month),
            total_payments=len(records),
            successful_payments=len(successful),
            failed_payments=len(failed),
            average_order_value=total_revenue / len(successful) if successful else 0,
            revenue_by_plan={
                plan: _revenue(p for p in successful if p.plan == plan) for plan in REVENUE_PLAN_KEYS
            },
            success_rate=len(successful) / len(records) * 100 if records else 0,
        )
