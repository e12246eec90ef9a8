import pytest

from payledger.exceptions import AccessDenied, PaymentValidationError
from payledger.services.entitlement_service import EntitlementService


@pytest.fixture
def entitlements(ledger, make_record):
    ledger.append(make_record(user_id="u1", gateway_payment_id="pay_ok", plan="styles-tones"))
    ledger.append(make_record(user_id="u1", gateway_payment_id="pay_failed", status="failed"))
    ledger.append(make_record(user_id="u2", gateway_payment_id="pay_other", plan="basic"))
    return EntitlementService(ledger)


def test_check_access_grants_exact_triple(entitlements):
    record = entitlements.check_access("u1", "pay_ok")
    assert record.gateway_payment_id == "pay_ok"
    assert record.user_id == "u1"


@pytest.mark.parametrize("user_id, payment_id", [
    ("u2", "pay_ok"),         # wrong user
    ("u1", "pay_unknown"),    # unknown payment id
    ("u1", "pay_failed"),     # failed attempt
    ("u1", "pay_other"),      # someone else's payment
])
def test_check_access_denies_any_mismatch(entitlements, user_id, payment_id):
    with pytest.raises(AccessDenied):
        entitlements.check_access(user_id, payment_id)


def test_check_access_requires_both_ids(entitlements):
    with pytest.raises(PaymentValidationError):
        entitlements.check_access("", "pay_ok")
    with pytest.raises(PaymentValidationError):
        entitlements.check_access("u1", None)


def test_has_purchased_by_plan_or_payment_id(entitlements):
    assert entitlements.has_purchased("u1", "styles-tones")
    assert entitlements.has_purchased("u1", "pay_ok")
    assert not entitlements.has_purchased("u1", "basic")
    assert not entitlements.has_purchased("u1", "pay_failed")
    assert entitlements.has_purchased("u2", "basic")


def test_list_purchases_only_successful_for_user(entitlements):
    purchases = entitlements.list_purchases("u1")

    assert len(purchases) == 1
    summary = purchases[0]
    assert summary.payment_id == "pay_ok"
    assert summary.order_id == "order_1"
    assert summary.status == "active"
    assert summary.plan == "styles-tones"


def test_list_purchases_unknown_user_is_empty(entitlements):
    assert entitlements.list_purchases("nobody") == []


def test_list_purchases_requires_user(entitlements):
    with pytest.raises(PaymentValidationError):
        entitlements.list_purchases(None)
