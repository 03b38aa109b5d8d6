"""
Rate Limiting for StaffHub API
==============================
Implements rate limiting using slowapi, keyed by client address.

Only the credential endpoints are limited:
- /auth/login: LOGIN_RATE_LIMIT (brute force protection)
- /auth/register: REGISTER_RATE_LIMIT

Storage defaults to process memory; point RATE_LIMIT_STORAGE_URI at Redis
when running more than one worker.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse

from staffhub.core.config import settings
from staffhub.core.logging_config import logger


def get_client_identifier(request: Request) -> str:
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(
    key_func=get_client_identifier,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """Reply with 429 and a Retry-After hint"""
    logger.warning(
        f"[RateLimit] Exceeded for {get_client_identifier(request)} on {request.url.path}: {exc.detail}"
    )

    return JSONResponse(
        status_code=429,
        content={"message": "Too many requests. Please slow down."},
        headers={"Retry-After": "60"},
    )


def login_rate_limit():
    return limiter.limit(settings.LOGIN_RATE_LIMIT)


def register_rate_limit():
    return limiter.limit(settings.REGISTER_RATE_LIMIT)
