from datetime import datetime, timedelta

import pytest

from payledger.exceptions import PaymentValidationError, RecordNotFound
from payledger.services.analytics_service import AnalyticsService

NOW = datetime(2026, 10, 19, 12, 0, 0)


@pytest.fixture
def analytics(ledger):
    return AnalyticsService(ledger, clock=lambda: NOW)


def test_empty_ledger_stats_are_zero(analytics):
    stats = analytics.compute_stats("all", "all")

    assert stats.total_revenue == 0
    assert stats.average_order_value == 0
    assert stats.success_rate == 0
    assert stats.total_payments == 0
    assert stats.revenue_by_plan == {"basic": 0, "intermediate": 0, "advanced": 0, "styles-tones": 0}
    assert analytics.list_payments() == []


def test_revenue_average_and_success_rate(analytics, ledger, make_record):
    for amount in (100, 200, 300):
        ledger.append(make_record(amount=amount, created_at=NOW))
    ledger.append(make_record(amount=50, status="failed", created_at=NOW))

    stats = analytics.compute_stats("all", "all")

    assert stats.total_revenue == 600
    assert stats.average_order_value == 200
    assert stats.success_rate == 75
    assert stats.successful_payments == 3
    assert stats.failed_payments == 1
    assert stats.total_payments == 4


def test_revenue_by_plan_counts_only_successful(analytics, ledger, make_record):
    ledger.append(make_record(amount=499, plan="styles-tones", created_at=NOW))
    ledger.append(make_record(amount=100, plan="basic", created_at=NOW))
    ledger.append(make_record(amount=999, plan="advanced", status="failed", created_at=NOW))
    ledger.append(make_record(amount=7, plan="custom", created_at=NOW))

    stats = analytics.compute_stats()

    assert stats.revenue_by_plan == {"basic": 100, "intermediate": 0, "advanced": 0, "styles-tones": 499}
    assert stats.total_revenue == 606


def test_time_filters(analytics, ledger, make_record):
    ledger.append(make_record(amount=1, created_at=NOW - timedelta(days=2)))             # week + month
    ledger.append(make_record(amount=10, created_at=datetime(2026, 10, 1, 0, 0, 0)))     # month only
    ledger.append(make_record(amount=100, created_at=datetime(2026, 9, 30, 23, 59)))     # neither
    ledger.append(make_record(amount=1000, created_at=datetime(2025, 1, 1)))

    assert analytics.compute_stats("all").total_revenue == 1111
    assert analytics.compute_stats("month").total_revenue == 11
    assert analytics.compute_stats("week").total_revenue == 1


def test_monthly_revenue_ignores_outer_time_filter(analytics, ledger, make_record):
    ledger.append(make_record(amount=10, created_at=NOW))
    ledger.append(make_record(amount=90, created_at=datetime(2026, 8, 1)))

    stats = analytics.compute_stats("all")
    assert stats.total_revenue == 100
    assert stats.monthly_revenue == 10


def test_plan_filter(analytics, ledger, make_record):
    ledger.append(make_record(amount=10, plan="basic", created_at=NOW))
    ledger.append(make_record(amount=20, plan="advanced", created_at=NOW))
    ledger.append(make_record(amount=30, plan="basic", status="failed", created_at=NOW))

    stats = analytics.compute_stats("all", "basic")
    assert stats.total_payments == 2
    assert stats.total_revenue == 10
    assert stats.success_rate == 50


@pytest.mark.parametrize("time_filter", ["all", "month", "week"])
@pytest.mark.parametrize("plan_filter", ["all", "basic", "advanced", "none"])
def test_status_counts_add_up(analytics, ledger, make_record, time_filter, plan_filter):
    for days, status, plan in [(0, "success", "basic"), (3, "failed", "basic"),
                               (10, "success", "advanced"), (40, "failed", "advanced")]:
        ledger.append(make_record(status=status, plan=plan, created_at=NOW - timedelta(days=days)))

    stats = analytics.compute_stats(time_filter, plan_filter)
    assert stats.successful_payments + stats.failed_payments == stats.total_payments


def test_list_payments_newest_first_with_limit(analytics, ledger, make_record):
    records = [make_record(created_at=NOW - timedelta(hours=h)) for h in (5, 1, 3, 2, 4)]
    for record in records:
        ledger.append(record)

    listed = analytics.list_payments("all", "all", limit=2)

    assert [r.created_at for r in listed] == [NOW - timedelta(hours=1), NOW - timedelta(hours=2)]


def test_list_payments_default_limit(analytics, ledger, make_record):
    for _ in range(60):
        ledger.append(make_record(created_at=NOW))
    assert len(analytics.list_payments()) == 50


def test_invalid_filters_are_rejected(analytics):
    with pytest.raises(PaymentValidationError):
        analytics.compute_stats("year")
    with pytest.raises(PaymentValidationError):
        analytics.list_payments(limit=-1)


def test_receipt_lookup(analytics, ledger, make_record):
    record = ledger.append(make_record())
    assert analytics.receipt(record.id) == record
    with pytest.raises(RecordNotFound):
        analytics.receipt("missing")
