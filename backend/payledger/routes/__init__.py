from payledger.routes.payment import router as payment_router
from payledger.routes.analytics import router as analytics_router
from payledger.routes.access import router as access_router

__all__ = ["payment_router", "analytics_router", "access_router"]
