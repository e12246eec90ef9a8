"""
Simple Memory-based Rate Limiter.
Fixed window per client IP and route scope. In a multi-instance deployment,
use Redis or a dedicated middleware like slowapi.
"""
import threading
import time
from typing import Dict, Tuple

from fastapi import Depends, HTTPException, Request

from payledger.config import Settings
from payledger.dependencies import get_app_settings

# In-memory storage: {(scope, ip): (window_start, count)}
_rate_limit_store: Dict[Tuple[str, str], Tuple[float, int]] = {}
_lock = threading.Lock()


def reset_rate_limits() -> None:
    with _lock:
        _rate_limit_store.clear()


def _prune(now: float, window: int) -> None:
    """Drop expired windows. Caller holds the lock."""
    expired = [key for key, (start, _) in _rate_limit_store.items() if now - start > window]
    for key in expired:
        del _rate_limit_store[key]


def rate_limit(scope: str):
    """
    Dependency for rate limiting, sized from settings.
    Example: Depends(rate_limit("verify-payment"))
    """
    def limiter(request: Request, settings: Settings = Depends(get_app_settings)):
        requests, window = settings.RATE_LIMIT_REQUESTS, settings.RATE_LIMIT_WINDOW_SECONDS
        if requests <= 0:
            return True

        key = (scope, request.client.host if request.client else "unknown")
        now = time.time()

        with _lock:
            _prune(now, window)
            last_ts, count = _rate_limit_store.get(key, (now, 0))

            if count >= requests:
                raise HTTPException(
                    status_code=429,
                    detail=f"Rate limit exceeded. Try again in {int(window - (now - last_ts))} seconds.",
                )

            _rate_limit_store[key] = (last_ts, count + 1)
        return True

    return limiter
