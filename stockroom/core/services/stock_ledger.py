"""
Stock ledger rules.

Pure functions shared by every path that changes a product's stock or
thresholds. Persistence applies them inside a transaction.
"""

from collections.abc import Iterable
from typing import Any

from stockroom.core.entities.inventory import MovementType, StockMovement
from stockroom.core.entities.product import Product, ProductStatus
from stockroom.core.exceptions import ValidationError


def derive_status(
    stock: int,
    min_stock: int,
    current: ProductStatus | None = None,
) -> ProductStatus:
    """
    Status category for a stock level.

    DISCONTINUED is a manual state and is never replaced here.
    """
    if current == ProductStatus.DISCONTINUED:
        return current
    if stock == 0:
        return ProductStatus.OUT_OF_STOCK
    if stock <= min_stock:
        return ProductStatus.LOW_STOCK
    return ProductStatus.IN_STOCK


def validate_movement(movement_type: Any, quantity: Any) -> MovementType:
    """Check a requested movement and return its normalized type."""
    try:
        mtype = MovementType(movement_type)
    except ValueError:
        raise ValidationError(
            "type",
            f"must be one of {', '.join(t.value for t in MovementType)}",
            movement_type,
        ) from None

    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError("quantity", "must be an integer", quantity)
    if quantity <= 0:
        raise ValidationError("quantity", "must be a positive integer", quantity)

    return mtype


def compute_new_stock(current: int, movement_type: MovementType, quantity: int) -> int:
    """Stock level after one movement. Never negative."""
    if movement_type == MovementType.IN:
        return current + quantity
    if movement_type == MovementType.ADJUSTMENT:
        return quantity
    # OUT and TRANSFER both deduct; excess is clamped at zero
    return max(0, current - quantity)


def apply_movement(
    product: Product, movement_type: MovementType, quantity: int
) -> Product:
    """Return a copy of `product` with the movement applied."""
    mtype = validate_movement(movement_type, quantity)
    new_stock = compute_new_stock(product.current_stock, mtype, quantity)
    return product.model_copy(
        update={
            "current_stock": new_stock,
            "status": derive_status(new_stock, product.min_stock, product.status),
        }
    )


def replay(movements: Iterable[StockMovement], initial: int = 0) -> int:
    """Fold a product's movements, oldest first, into a stock level."""
    stock = initial
    for movement in movements:
        stock = compute_new_stock(stock, movement.movement_type, movement.quantity)
    return stock
