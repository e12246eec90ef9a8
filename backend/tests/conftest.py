"""
Pytest configuration and fixtures.
"""
from datetime import datetime
from typing import Any, Callable, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from payledger.config import Settings
from payledger.dependencies import Services
from payledger.main import create_app
from payledger.schemas.schemas import PaymentRecord
from payledger.services.events import EventBus
from payledger.services.ledger import InMemoryLedger, new_record_id
from payledger.services.order_service import RazorpayGateway
from payledger.utils.hashing import generate_signature
from payledger.utils.rate_limiter import reset_rate_limits

SECRET = "s3cr3t"


class RecordingEventBus(EventBus):
    """Keeps published events instead of dispatching them."""

    def __init__(self):
        super().__init__(max_workers=1)
        self.published: list = []

    def publish(self, event: object) -> list:
        self.published.append(event)
        return []


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Test settings: test-mode gateway keys, no mailer, no rate limit."""
    return Settings(
        _env_file=None,
        RAZORPAY_KEY_ID="rzp_test_key123",
        RAZORPAY_KEY_SECRET=SECRET,
        RAZORPAY_API_URL="https://gateway.test/v1",
        LEDGER_BACKEND="memory",
        STYLES_FILE_ID="styles-file-id",
        TONES_FILE_ID="tones-file-id",
        RATE_LIMIT_REQUESTS=0,
        LOG_DIR=str(tmp_path / "logs"),
    )


@pytest.fixture
def ledger() -> InMemoryLedger:
    return InMemoryLedger()


@pytest.fixture
def event_bus() -> RecordingEventBus:
    bus = RecordingEventBus()
    yield bus
    bus.shutdown()


@pytest.fixture
def gateway_handler() -> dict:
    """Mutable holder for the mock gateway's request handler."""
    def default(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"id": "order_test_1", "amount": 49900, "currency": "INR", "status": "created"})

    return {"handler": default, "requests": []}


@pytest.fixture
def gateway(settings, gateway_handler) -> RazorpayGateway:
    def dispatch(request: httpx.Request) -> httpx.Response:
        gateway_handler["requests"].append(request)
        return gateway_handler["handler"](request)

    gw = RazorpayGateway(settings, transport=httpx.MockTransport(dispatch))
    yield gw
    gw.close()


@pytest.fixture
def services(settings, ledger, event_bus, gateway) -> Services:
    return Services(settings, ledger=ledger, events=event_bus, gateway=gateway)


@pytest.fixture
def client(settings, services) -> TestClient:
    reset_rate_limits()
    app = create_app(settings, services=services)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sign() -> Callable[[str, str], str]:
    def _sign(order_id: str, payment_id: str) -> str:
        return generate_signature(order_id, payment_id, SECRET.encode())
    return _sign


@pytest.fixture
def make_record() -> Callable[..., PaymentRecord]:
    """Build a ledger record directly, bypassing verification."""
    def _make(
        amount: float = 100,
        status: str = "success",
        plan: str = "basic",
        user_id: str = "user-1",
        created_at: Optional[datetime] = None,
        gateway_payment_id: str = "pay_1",
        **overrides: Any,
    ) -> PaymentRecord:
        created = created_at or datetime.now()
        fields = dict(
            id=new_record_id(),
            user_id=user_id,
            amount=amount,
            plan=plan,
            plan_name="Plan",
            plan_duration="Plan",
            status=status,
            gateway_order_id="order_1",
            gateway_payment_id=gateway_payment_id,
            created_at=created,
            updated_at=created,
            failure_reason=None if status == "success" else "Invalid signature",
        )
        fields.update(overrides)
        return PaymentRecord(**fields)
    return _make
