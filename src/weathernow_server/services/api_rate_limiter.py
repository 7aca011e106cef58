"""
Rate limiting for the announcement API (slowapi)

Kiosks poll often and share one limit class; admin mutations get a tighter
one. Every application gets its own Limiter built from the Settings it was
created with, so limits (and API_RATE_LIMIT_ENABLED=false) apply per app.
"""

from typing import Callable

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from weathernow_server.utils.config import Settings

FALLBACK_RETRY_SECONDS = 60


def get_client_ip(request: Request) -> str:
    """Client address, honouring a reverse proxy's X-Forwarded-For / X-Real-IP."""
    chain = request.headers.get("X-Forwarded-For", "")
    first_hop = chain.split(",")[0].strip()
    return first_hop or request.headers.get("X-Real-IP") or get_remote_address(request)


def create_limiter(app_settings: Settings) -> Limiter:
    """Limiter with its own in-memory counters for one application."""
    enabled = app_settings.api_rate_limit_enabled
    return Limiter(
        key_func=get_client_ip,
        enabled=enabled,
        default_limits=[app_settings.api_rate_limit_default] if enabled else [],
        storage_uri="memory://",
    )


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """429 in the same ``detail`` shape as the API's other errors."""
    retry_after = int(getattr(exc, "retry_after", FALLBACK_RETRY_SECONDS) or FALLBACK_RETRY_SECONDS)
    logger.warning(f"🚦 {get_client_ip(request)} hit the rate limit on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=429,
        content={"detail": f"Too many requests, retry in {retry_after}s", "retry_after": retry_after},
        headers={"Retry-After": str(retry_after)},
    )


def setup_rate_limiter(app: FastAPI, limiter: Limiter, app_settings: Settings) -> None:
    """
    Attach a limiter to an application.

    Args:
        app: FastAPI application being built
        limiter: The application's limiter (see create_limiter)
        app_settings: Settings the application was created with
    """
    app.state.limiter = limiter
    if not limiter.enabled:
        logger.info("🚦 API rate limiting disabled")
        return

    app.add_middleware(SlowAPIMiddleware)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    logger.info(
        f"🚦 API rate limiting: polls {app_settings.api_rate_limit_poll}, "
        f"admin {app_settings.api_rate_limit_admin}, other {app_settings.api_rate_limit_default}"
    )


def route_limit(limiter: Limiter, limit_value: str) -> Callable:
    """
    Decorator applying ``limit_value`` to an endpoint.

    The endpoint needs a ``request: Request`` parameter. A disabled limiter
    passes requests straight through.
    """
    return limiter.limit(limit_value)


__all__ = [
    "get_client_ip",
    "create_limiter",
    "setup_rate_limiter",
    "route_limit",
]
