"""
Service wiring — builds the ledger and services once per application and
exposes them to routes as FastAPI dependencies.
"""
from typing import Optional

from fastapi import Request

from payledger.config import Settings
from payledger.database import init_db, make_engine, make_session_factory
from payledger.services.analytics_service import AnalyticsService
from payledger.services.entitlement_service import EntitlementService
from payledger.services.events import EventBus
from payledger.services.ledger import InMemoryLedger, Ledger, SqlLedger
from payledger.services.notification_service import NotificationService
from payledger.services.order_service import OrderService, RazorpayGateway
from payledger.services.verification_service import VerificationService


def build_ledger(settings: Settings) -> Ledger:
    backend = settings.LEDGER_BACKEND.lower()
    if backend == "memory":
        return InMemoryLedger()
    if backend == "sql":
        engine = make_engine(settings.DATABASE_URL, echo=settings.DEBUG)
        init_db(engine)
        return SqlLedger(make_session_factory(engine))
    raise ValueError(f"Unknown LEDGER_BACKEND: {settings.LEDGER_BACKEND}")


class Services:
    """Everything a request handler may need, sharing one ledger."""

    def __init__(
        self,
        settings: Settings,
        ledger: Optional[Ledger] = None,
        events: Optional[EventBus] = None,
        gateway: Optional[RazorpayGateway] = None,
        notifier: Optional[NotificationService] = None,
    ):
        self.settings = settings
        self.ledger = ledger if ledger is not None else build_ledger(settings)
        self.events = events if events is not None else EventBus()
        self.notifier = notifier if notifier is not None else NotificationService(settings)
        self.notifier.register(self.events)

        self.verification = VerificationService(self.ledger, settings, self.events)
        self.orders = OrderService(settings, gateway)
        self.entitlements = EntitlementService(self.ledger)
        self.analytics = AnalyticsService(self.ledger)

    def close(self) -> None:
        self.events.shutdown(wait=False)
        self.orders.close()


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_app_settings(request: Request) -> Settings:
    return request.app.state.services.settings


def get_verification_service(request: Request) -> VerificationService:
    return get_services(request).verification


def get_order_service(request: Request) -> OrderService:
    return get_services(request).orders


def get_entitlement_service(request: Request) -> EntitlementService:
    return get_services(request).entitlements


def get_analytics_service(request: Request) -> AnalyticsService:
    return get_services(request).analytics
