"""
Paid Content Payments — FastAPI Application Entry Point

Aggregates all routers, configures middleware and error envelopes, and wires
the ledger and services on startup.
"""
import time
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from payledger.config import Settings, get_settings
from payledger.dependencies import Services
from payledger.exceptions import GatewayError, PaymentError
from payledger.routes import payment_router, analytics_router, access_router
from payledger.schemas.schemas import ErrorResponse, HealthResponse
from payledger.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    body = ErrorResponse(error=message, **extra)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        logger.error(f"Gateway error on {request.url.path}: {exc.kind.value} (HTTP {exc.gateway_status})")
        return _error(exc.status_code, exc.message, kind=exc.kind.value, retryable=exc.retryable)

    @app.exception_handler(PaymentError)
    async def payment_error_handler(request: Request, exc: PaymentError):
        if exc.status_code >= 500:
            logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        first = exc.errors()[0] if exc.errors() else {}
        field = ".".join(str(part) for part in first.get("loc", ())[1:])
        message = f"Invalid {field}: {first.get('msg')}" if field else "Invalid request"
        return _error(400, message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return _error(500, "Internal server error")


def create_app(settings: Optional[Settings] = None, services: Optional[Services] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    # ─── Application Instance ───────────────────────────────────────────
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description=(
            "Payment backend for paid content: gateway order creation, signature "
            "verification, an append-only payment ledger, revenue analytics and "
            "entitlement-gated downloads."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.services = services or Services(settings)
    app.state.boot_time = time.time()

    # ─── Startup / Shutdown ──────────────────────────────────────────────
    @app.on_event("startup")
    def on_startup():
        """Log boot info. Secrets are reported as set/missing only."""
        logger.info(
            f"\n{'='*60}\n"
            f"  {settings.APP_NAME} v{settings.APP_VERSION}\n"
            f"  TIME: {datetime.now().isoformat()}\n"
            f"  GATEWAY: {settings.environment.upper()} "
            f"(key id: {settings.razorpay_key_id or 'missing'}, "
            f"secret: {'set' if settings.RAZORPAY_KEY_SECRET else 'missing'})\n"
            f"  LEDGER: {app.state.services.ledger.name}\n"
            f"  MAILER: {'configured' if settings.mailer_configured else 'disabled'}\n"
            f"  DEBUG: {settings.DEBUG}\n"
            f"{'='*60}"
        )
        if not settings.gateway_configured:
            logger.warning("Razorpay keys are missing: RAZORPAY_KEY_ID and RAZORPAY_KEY_SECRET are required")

    @app.on_event("shutdown")
    def on_shutdown():
        app.state.services.close()

    # ─── Middleware ──────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log every API request with timing."""
        start = time.time()
        response = await call_next(request)
        duration = round((time.time() - start) * 1000, 1)

        if request.url.path.startswith("/api"):
            logger.info(f"-> {request.method} {request.url.path} -> {response.status_code} ({duration}ms)")

        return response

    register_error_handlers(app)

    # ─── API Routers ─────────────────────────────────────────────────────
    app.include_router(payment_router)
    app.include_router(analytics_router)
    app.include_router(access_router)

    @app.get("/api/health", tags=["Health"], response_model=HealthResponse)
    def health():
        """Service status including gateway mode and ledger size."""
        services: Services = app.state.services
        return HealthResponse(
            status="ok",
            message=f"{settings.APP_NAME} is running",
            environment=settings.environment,
            gateway_configured=settings.gateway_configured,
            mailer_configured=settings.mailer_configured,
            ledger_backend=services.ledger.name,
            ledger_size=len(services.ledger),
            uptime_seconds=round(time.time() - app.state.boot_time, 1),
            timestamp=datetime.now(),
        )

    return app


app = create_app()
