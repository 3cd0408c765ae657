"""
Rate Limiting Service

Implements rate limiting using slowapi to slow down password guessing and
signup spam. Only the credential-handling POST routes are decorated.

Key Features:
=============
1. IP-based rate limiting (proxy headers honoured)
2. Limit configurable via RATE_LIMIT_AUTH
3. In-memory storage by default, Redis via RATE_LIMIT_STORAGE_URI
4. Rendered 429 error page
"""

import logging

from fastapi import Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import Response

from app.config import get_settings
from app.rendering import render_error

logger = logging.getLogger(__name__)
settings = get_settings()


def get_client_ip(request: Request) -> str:
    """
    Get client IP address for rate limiting.

    Handles common proxy headers to get the real client IP.
    Falls back to direct connection IP if no proxy headers.
    """
    # X-Forwarded-For can contain multiple IPs; first is the client
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    # X-Real-IP header (nginx)
    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    return get_remote_address(request)


def create_limiter() -> Limiter:
    """Create and configure the rate limiter."""
    limiter = Limiter(
        key_func=get_client_ip,
        storage_uri=settings.rate_limit_storage_uri,
        strategy="fixed-window",
        enabled=settings.rate_limit_enabled,
    )

    logger.info(
        f"Rate limiter initialized - enabled: {settings.rate_limit_enabled}, "
        f"auth limit: {settings.rate_limit_auth}"
    )

    return limiter


limiter = create_limiter()


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """
    Render the error page with 429 Too Many Requests and a Retry-After header.
    """
    logger.warning(f"Rate limit exceeded for {get_client_ip(request)}: {exc.detail}")

    response = render_error(
        request,
        status_code=429,
        message="Too many requests. Please slow down.",
    )
    response.headers["Retry-After"] = str(60)
    return response
