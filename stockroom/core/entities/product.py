"""Product catalog entities."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class ProductStatus(str, Enum):
    """Stock status category of a product."""

    IN_STOCK = "IN_STOCK"
    LOW_STOCK = "LOW_STOCK"
    OUT_OF_STOCK = "OUT_OF_STOCK"
    DISCONTINUED = "DISCONTINUED"


class Product(BaseModel):
    """
    A stocked product.

    current_stock is a running total materialized from the movement
    ledger; status is always derived from it.
    """

    id: int | None = None
    name: str
    category: str
    sku: str
    description: str | None = None
    current_stock: int = Field(default=0, ge=0)
    min_stock: int = Field(default=0, ge=0)
    max_stock: int = Field(default=100, ge=1)
    unit_price: float = Field(default=0.0, ge=0)
    lead_time_days: int = Field(default=7, ge=1)
    status: ProductStatus = ProductStatus.IN_STOCK
    trend_score: float = Field(default=5.0, ge=0, le=10)
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def stock_value(self) -> float:
        """Value of stock on hand at unit price."""
        return self.current_stock * self.unit_price


class ReorderPoint(BaseModel):
    """Replenishment threshold configured for a product."""

    id: int | None = None
    product_id: int
    reorder_level: int = Field(ge=0)
    reorder_quantity: int = Field(ge=1)
    lead_time_days: int = Field(default=7, ge=1)
    safety_stock: int = Field(default=0, ge=0)
    is_active: bool = True
