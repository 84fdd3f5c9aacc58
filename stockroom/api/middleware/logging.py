"""
Request logging middleware.

Each request gets a short id (or reuses the caller's X-Request-ID) bound
into the structlog context, so store and use case events logged while
serving it carry the same id.
"""

import time
import uuid
from collections.abc import Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from stockroom.config import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Polled by load balancers and containers; logged at debug only
HEALTH_CHECK_PATHS = frozenset({"/health", "/api/health"})


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log start, completion and failure of every HTTP request."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        request.state.request_id = request_id
        log = logger.debug if request.url.path in HEALTH_CHECK_PATHS else logger.info

        started = time.perf_counter()
        with structlog.contextvars.bound_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        ):
            log(
                "request_started",
                client=request.client.host if request.client else "unknown",
            )
            try:
                response = await call_next(request)
            except Exception as e:
                logger.error(
                    "request_failed",
                    error=str(e),
                    duration_ms=round((time.perf_counter() - started) * 1000, 2),
                )
                raise

            duration_ms = (time.perf_counter() - started) * 1000
            log("request_completed", status=response.status_code, duration_ms=round(duration_ms, 2))

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
        return response
