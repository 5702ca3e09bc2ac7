"""
Request observability middleware.

CorrelationMiddleware binds the correlation ID for the lifetime of a
request; RequestLoggingMiddleware writes one summary line per request.
Health checks are logged at DEBUG so they do not flood the log.

Dependencies: fastapi, starlette, user_portal.observability
System role: Request/response observability injection
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from user_portal.observability.correlation import (
    CORRELATION_HEADER,
    clear_correlation_id,
    set_correlation_id,
)

logger = logging.getLogger(__name__)


def _peer(request: Request) -> str | None:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and latency of each request."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        context = {
            "method": request.method,
            "path": request.url.path,
            "client_ip": _peer(request),
        }

        try:
            response: Response = await call_next(request)
        except Exception as e:
            logger.exception(
                f"{request.method} {request.url.path} failed",
                extra={
                    **context,
                    "elapsed_ms": round((time.perf_counter() - started) * 1000, 2),
                    "error_type": type(e).__name__,
                },
            )
            raise

        level = logging.DEBUG if request.url.path.endswith(("/health", "/health/db", "/health/ldap")) else logging.INFO
        logger.log(
            level,
            f"{request.method} {request.url.path} -> {response.status_code}",
            extra={
                **context,
                "status_code": response.status_code,
                "elapsed_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )
        return response


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Bind the correlation ID and echo it in the response headers."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_HEADER))
        try:
            response: Response = await call_next(request)
        finally:
            clear_correlation_id()
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
