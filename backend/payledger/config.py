"""
Application Configuration — Environment & Settings
Centralizes all config from .env with Pydantic Settings for validation.
"""
from pathlib import Path
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve paths relative to backend/ directory
BASE_DIR = Path(__file__).resolve().parent.parent

LIVE_KEY_PREFIX = "rzp_live_"
TEST_KEY_PREFIX = "rzp_test_"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # --- Core ---
    APP_NAME: str = "Paid Content Payments API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # --- Payment Gateway (Razorpay) ---
    RAZORPAY_KEY_ID: str = ""
    RAZORPAY_KEY_SECRET: str = ""
    RAZORPAY_API_URL: str = "https://api.razorpay.com/v1"
    GATEWAY_TIMEOUT_SECONDS: float = 10.0

    # --- Ledger ---
    LEDGER_BACKEND: str = "memory"  # memory | sql
    DATABASE_URL: str = f"sqlite:///{BASE_DIR / 'data' / 'payments.db'}"
    DEFAULT_CURRENCY: str = "INR"
    SUPPORTED_CURRENCIES: list[str] = ["INR"]

    # --- Mailer ---
    EMAIL_USER: str = ""
    EMAIL_PASS: str = ""
    EMAIL_FROM_NAME: str = "Paid Content"
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 465

    # --- Downloads ---
    STYLES_FILE_ID: str = ""
    STYLES_FILE_NAME: str = "Indian_Styles_Package.zip"
    TONES_FILE_ID: str = ""
    TONES_FILE_NAME: str = "Indian_Tones_Package.zip"

    # --- Security / HTTP ---
    ENABLE_MOCK_ORDERS: bool = False
    RATE_LIMIT_REQUESTS: int = 10          # per client per window; 0 disables
    RATE_LIMIT_WINDOW_SECONDS: int = 60
    CORS_ORIGINS: list[str] = ["*"]

    # --- Logging ---
    LOG_DIR: str = str(BASE_DIR / "logs")
    LOG_LEVEL: str = "INFO"

    @property
    def razorpay_key_id(self) -> str:
        """Key id with a mode prefix; bare ids are treated as test keys."""
        key_id = self.RAZORPAY_KEY_ID.strip()
        if key_id and not key_id.startswith((TEST_KEY_PREFIX, LIVE_KEY_PREFIX)):
            return f"{TEST_KEY_PREFIX}{key_id}"
        return key_id

    @property
    def signing_secret(self) -> Optional[bytes]:
        if not self.RAZORPAY_KEY_SECRET:
            return None
        return self.RAZORPAY_KEY_SECRET.encode("utf-8")

    @property
    def gateway_configured(self) -> bool:
        return bool(self.RAZORPAY_KEY_ID and self.RAZORPAY_KEY_SECRET)

    @property
    def environment(self) -> str:
        """Gateway environment tag: live | test | unconfigured."""
        if not self.gateway_configured:
            return "unconfigured"
        return "live" if self.razorpay_key_id.startswith(LIVE_KEY_PREFIX) else "test"

    @property
    def mailer_configured(self) -> bool:
        return bool(self.EMAIL_USER and self.EMAIL_PASS)


@lru_cache()
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()
