"""Inventory domain entities."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class MovementType(str, Enum):
    """Types of stock movements."""

    IN = "IN"
    OUT = "OUT"
    ADJUSTMENT = "ADJUSTMENT"
    TRANSFER = "TRANSFER"


class StockMovement(BaseModel):
    """Records a single immutable stock movement."""

    id: int | None = None
    product_id: int  # FK → products.id
    movement_type: MovementType
    quantity: int  # always positive
    reason: str | None = None
    reference: str | None = None  # e.g., PO number, order number
    created_at: datetime = Field(default_factory=datetime.utcnow)
