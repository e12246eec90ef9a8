from payledger.services.ledger import Ledger, InMemoryLedger, SqlLedger
from payledger.services.verification_service import VerificationService
from payledger.services.order_service import OrderService, RazorpayGateway
from payledger.services.entitlement_service import EntitlementService
from payledger.services.analytics_service import AnalyticsService
from payledger.services.events import EventBus, PaymentSucceeded
from payledger.services.notification_service import NotificationService

__all__ = [
    "Ledger", "InMemoryLedger", "SqlLedger",
    "VerificationService", "OrderService", "RazorpayGateway",
    "EntitlementService", "AnalyticsService",
    "EventBus", "PaymentSucceeded", "NotificationService",
]
