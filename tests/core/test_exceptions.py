"""Tests for domain exceptions."""

import pytest

from stockroom.core.exceptions import (
    AlertNotFoundError,
    ConflictError,
    ConsistencyError,
    DatabaseError,
    DuplicateSkuError,
    NotFoundError,
    NotificationError,
    ProductNotFoundError,
    StockroomError,
    TransientError,
    ValidationError,
)


class TestStockroomError:
    """Tests for the base exception."""

    def test_defaults(self):
        error = StockroomError("boom")
        assert error.message == "boom"
        assert error.code == "StockroomError"
        assert error.details == {}
        assert str(error) == "boom"

    def test_to_dict(self):
        error = StockroomError("boom", code="X", details={"a": 1})
        assert error.to_dict() == {"error": "X", "message": "boom", "details": {"a": 1}}


class TestErrorKinds:
    """Each error belongs to the kind the API maps to a status."""

    @pytest.mark.parametrize(
        "error,kind",
        [
            (ProductNotFoundError(1), NotFoundError),
            (AlertNotFoundError(1), NotFoundError),
            (DuplicateSkuError("A-1"), ConflictError),
            (DatabaseError("select", "locked"), TransientError),
            (NotificationError("gone"), TransientError),
        ],
    )
    def test_hierarchy(self, error, kind):
        assert isinstance(error, kind)
        assert isinstance(error, StockroomError)

    def test_validation_error_details(self):
        error = ValidationError("quantity", "must be positive", -3)
        assert error.code == "VALIDATION_ERROR"
        assert error.details == {
            "field": "quantity",
            "message": "must be positive",
            "value": "-3",
        }
        assert "quantity" in error.message

    def test_validation_error_truncates_value(self):
        error = ValidationError("name", "too long", "x" * 500)
        assert len(error.details["value"]) == 100

    def test_product_not_found(self):
        error = ProductNotFoundError(42)
        assert error.code == "PRODUCT_NOT_FOUND"
        assert error.details == {"product_id": 42}

    def test_consistency_error(self):
        error = ConsistencyError(3, recorded=10, replayed=7)
        assert error.code == "LEDGER_MISMATCH"
        assert error.details == {"product_id": 3, "recorded": 10, "replayed": 7}
        assert "recorded 10, replayed 7" in error.message
