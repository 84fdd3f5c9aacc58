"""
Error handling middleware.

Every error leaves the API in the same JSON shape (ErrorResponse):
error_code, message, hint, detail and path. Domain errors are mapped by
category; transient failures additionally carry a Retry-After header.
"""

from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from stockroom.application.dto.responses import ErrorResponse
from stockroom.config import get_logger
from stockroom.core.exceptions import (
    ConflictError,
    ConsistencyError,
    NotFoundError,
    StockroomError,
    TransientError,
    ValidationError,
)

logger = get_logger(__name__)

# First matching category wins
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    ConsistencyError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    TransientError: status.HTTP_503_SERVICE_UNAVAILABLE,
    ValueError: status.HTTP_400_BAD_REQUEST,
}

RETRY_AFTER_SECONDS = 5

HINT_MAP: dict[str, str] = {
    "PRODUCT_NOT_FOUND": "Check the product ID and try GET /api/products to list products.",
    "ALERT_NOT_FOUND": "Check the alert ID and try GET /api/alerts to list alerts.",
    "REORDER_POINT_NOT_FOUND": "Set one with PUT /api/products/{id}/reorder-point.",
    "DUPLICATE_SKU": "A product with this SKU already exists. Use a different SKU.",
    "LEDGER_MISMATCH": "Stock and movement history disagree. Inspect GET /api/inventory/movements.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "DATABASE_ERROR": "The database is busy or unavailable. Retry shortly.",
    "NOTIFICATION_FAILED": "Live delivery failed; the alert is still stored.",
}

STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    404: "The requested resource was not found. Verify the ID.",
    405: "Check the HTTP method for this endpoint.",
    409: "The request conflicts with existing data.",
    422: "The request could not be processed. Check the input format.",
    500: "An internal error occurred. Check server logs.",
    503: "The service is temporarily unavailable. Retry later.",
}

HTTP_ERROR_CODES: dict[int, str] = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    422: "UNPROCESSABLE_ENTITY",
}


def _hint(error_code: str, status_code: int) -> str:
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def status_for(exc: Exception) -> int:
    """HTTP status for an exception, 500 when it falls in no known category."""
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_json(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    detail: str | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        error_code=error_code,
        message=message,
        hint=_hint(error_code, status_code),
        detail=detail,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json"),
        headers=headers,
    )


def build_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Log an exception and convert it to the standard error body."""
    status_code = status_for(exc)

    if isinstance(exc, StockroomError):
        error_code, message = exc.code, exc.message
        detail = str(exc.details) if exc.details else None
    else:
        error_code, message, detail = exc.__class__.__name__, str(exc), None

    if status_code >= 500:
        logger.error(
            "request_error",
            error_code=error_code,
            error=message,
            exc_info=None if isinstance(exc, TransientError) else exc,
        )
    else:
        logger.warning("request_rejected", error_code=error_code, error=message)

    headers = None
    if isinstance(exc, TransientError):
        headers = {"Retry-After": str(RETRY_AFTER_SECONDS)}
    return _error_json(request, status_code, error_code, message, detail, headers)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Last line of defence for exceptions no handler claimed."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            return build_error_response(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register handlers for domain, request validation and HTTP errors."""

    @app.exception_handler(StockroomError)
    async def domain_exception_handler(request: Request, exc: StockroomError) -> JSONResponse:
        return build_error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        problems = [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        ]
        return _error_json(
            request,
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "VALIDATION_ERROR",
            "Request validation failed",
            detail="; ".join(problems),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        error_code = HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
        return _error_json(
            request,
            exc.status_code,
            error_code,
            str(exc.detail) if exc.detail else "An error occurred",
            headers=getattr(exc, "headers", None),
        )
