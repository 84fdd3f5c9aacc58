"""
Domain exceptions for the Stockroom application.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class StockroomError(Exception):
    """Base exception for all Stockroom errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Validation Exceptions
class ValidationError(StockroomError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


# Lookup Exceptions
class NotFoundError(StockroomError):
    """Referenced record does not exist."""

    pass


class ProductNotFoundError(NotFoundError):
    """Product not found in storage."""

    def __init__(self, product_id: int):
        super().__init__(
            f"Product not found: {product_id}",
            code="PRODUCT_NOT_FOUND",
            details={"product_id": product_id},
        )


class AlertNotFoundError(NotFoundError):
    """Alert not found in storage."""

    def __init__(self, alert_id: int):
        super().__init__(
            f"Alert not found: {alert_id}",
            code="ALERT_NOT_FOUND",
            details={"alert_id": alert_id},
        )


class ConflictError(StockroomError):
    """Write would violate a uniqueness rule."""

    pass


class DuplicateSkuError(ConflictError):
    """Product with the same SKU already exists."""

    def __init__(self, sku: str):
        super().__init__(
            f"SKU already exists: {sku}",
            code="DUPLICATE_SKU",
            details={"sku": sku},
        )


# Integrity Exceptions
class ConsistencyError(StockroomError):
    """Materialized stock disagrees with the movement ledger."""

    def __init__(self, product_id: int, recorded: int, replayed: int):
        super().__init__(
            f"Ledger mismatch for product {product_id}: "
            f"recorded {recorded}, replayed {replayed}",
            code="LEDGER_MISMATCH",
            details={
                "product_id": product_id,
                "recorded": recorded,
                "replayed": replayed,
            },
        )


# Transient Exceptions
class TransientError(StockroomError):
    """A backing service is temporarily unavailable. Safe to retry."""

    pass


class DatabaseError(TransientError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class NotificationError(TransientError):
    """Alert delivery to live viewers failed."""

    def __init__(self, reason: str):
        super().__init__(
            f"Notification delivery failed: {reason}",
            code="NOTIFICATION_FAILED",
            details={"reason": reason},
        )
