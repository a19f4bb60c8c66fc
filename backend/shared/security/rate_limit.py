"""
Rate limiting using slowapi, keyed by client IP.
Protects the login endpoint from credential stuffing.

Usage:
    from shared.security.rate_limit import limiter, login_rate_limit

    @router.post("/login")
    @limiter.limit(login_rate_limit)
    def login(request: Request, ...):
        ...
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from shared.config.settings import settings
from shared.config.logging import get_logger

logger = get_logger(__name__)

limiter = Limiter(key_func=get_remote_address)


def login_rate_limit() -> str:
    """Limit expression for login attempts, read from settings."""
    return settings.login_rate_limit_string


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    Handler for rate limit exceeded errors.
    Returns the standard error envelope with retry information.
    """
    logger.warning(
        "Rate limit exceeded",
        path=request.url.path,
        ip_address=get_remote_address(request),
        limit=str(exc.detail),
    )
    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "message": "Too many requests. Please try again later.",
        },
        headers={"Retry-After": str(settings.login_rate_window)},
    )
