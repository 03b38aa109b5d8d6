"""
StaffHub - HTTP Middleware

RequestLoggingMiddleware tags each request with an id (taken from the
X-Request-ID header when the client sends one), times it and writes one access
log line through ``logger.log_request``. RequestSizeLimitMiddleware refuses
bodies whose declared length is over the upload limit before they are read.
"""

import time
from typing import Callable, Iterable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from staffhub.core.config import settings
from staffhub.core.logging_config import (
    logger,
    set_request_id,
    set_user_id,
    generate_request_id,
)


REQUEST_ID_HEADER = "X-Request-ID"
RESPONSE_TIME_HEADER = "X-Response-Time"

# Exact paths kept out of the access log
QUIET_PATHS = frozenset({
    f"{settings.API_PREFIX}/health",
    "/",
    "/favicon.ico",
    "/docs",
    "/redoc",
    "/openapi.json",
})
# Path prefixes kept out of the access log (static blobs)
QUIET_PREFIXES = ("/uploads/",)


def is_quiet_path(path: str, quiet_paths: Iterable[str] = QUIET_PATHS) -> bool:
    return path in quiet_paths or path.startswith(QUIET_PREFIXES)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Request id propagation, timing headers and the access log"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_request_id()
        set_request_id(request_id)
        started = time.perf_counter()
        quiet = is_quiet_path(request.url.path)

        try:
            response = await call_next(request)
        except Exception as exc:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.log_error_with_context(
                exc,
                context=f"{request.method} {request.url.path}",
                duration_ms=elapsed_ms,
            )
            raise
        finally:
            set_user_id("")

        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers[RESPONSE_TIME_HEADER] = f"{elapsed_ms:.2f}ms"

        if not quiet:
            logger.log_request(
                request.method,
                request.url.path,
                response.status_code,
                elapsed_ms,
                client_ip=request.client.host if request.client else None,
            )

        set_request_id("")
        return response


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests whose Content-Length exceeds ``max_size`` with 413"""

    def __init__(self, app: ASGIApp, max_size: int):
        super().__init__(app)
        self.max_size = max_size

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        declared = request.headers.get("content-length", "")

        if declared.isdigit() and int(declared) > self.max_size:
            limit_mb = self.max_size // (1024 * 1024)
            logger.warning(
                f"[Upload] Rejected {request.method} {request.url.path}: "
                f"{declared} bytes declared, limit {self.max_size}"
            )
            return JSONResponse(
                status_code=413,
                content={"message": f"Request body too large. Maximum size is {limit_mb}MB"},
            )

        return await call_next(request)
