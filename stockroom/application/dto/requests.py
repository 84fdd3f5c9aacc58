"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

from stockroom.core.entities.trend import SocialPlatform


# --- Products ---


class CreateProductRequest(BaseModel):
    """Request to create a product.

    Opening stock is recorded as an ADJUSTMENT movement so the ledger
    always explains current_stock.
    """

    name: str = Field(..., min_length=1, description="Product name")
    category: str = Field(..., min_length=1, description="Product category")
    sku: str = Field(..., min_length=1, description="Unique stock keeping unit")
    description: str | None = Field(default=None, description="Free-form description")
    initial_stock: int = Field(default=0, ge=0, description="Opening stock level")
    min_stock: int = Field(default=0, ge=0, description="Low-stock threshold")
    max_stock: int = Field(default=100, ge=1, description="Target maximum stock")
    unit_price: float = Field(default=0.0, ge=0, description="Price per unit")
    lead_time_days: int = Field(default=7, ge=1, description="Supplier lead time")
    trend_score: float = Field(
        default=5.0,
        ge=0,
        le=10,
        description="Demand trend score (0 cold .. 10 hot)",
    )


class UpdateProductRequest(BaseModel):
    """Partial product update.

    Stock levels cannot be edited here; post a movement instead.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1)
    category: str | None = Field(default=None, min_length=1)
    description: str | None = None
    min_stock: int | None = Field(default=None, ge=0)
    max_stock: int | None = Field(default=None, ge=1)
    unit_price: float | None = Field(default=None, ge=0)
    lead_time_days: int | None = Field(default=None, ge=1)
    trend_score: float | None = Field(default=None, ge=0, le=10)
    discontinued: bool | None = Field(
        default=None,
        description="Mark as DISCONTINUED (true) or return to stock-derived status (false)",
    )
    is_active: bool | None = None

    @field_validator(
        "name",
        "category",
        "min_stock",
        "max_stock",
        "unit_price",
        "lead_time_days",
        "trend_score",
        "is_active",
    )
    @classmethod
    def not_null(cls, v):
        # Omit a field to leave it unchanged; only description can be cleared
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class ReorderPointRequest(BaseModel):
    """Create or replace a product's reorder point."""

    reorder_level: int = Field(..., ge=0, description="Stock level that triggers reorder")
    reorder_quantity: int = Field(..., ge=1, description="Quantity to order")
    lead_time_days: int = Field(default=7, ge=1)
    safety_stock: int = Field(default=0, ge=0)
    is_active: bool = True


# --- Inventory ---


class StockMovementRequest(BaseModel):
    """Request to record a stock movement.

    Type and quantity are checked by the ledger rules rather than the
    schema so that bad values surface as VALIDATION_ERROR.
    """

    model_config = ConfigDict(populate_by_name=True)

    product_id: int = Field(..., description="Product ID")
    movement_type: str = Field(
        ...,
        alias="type",
        description="IN, OUT, ADJUSTMENT or TRANSFER",
        examples=["IN", "OUT"],
    )
    quantity: int = Field(..., description="Positive quantity (absolute level for ADJUSTMENT)")
    reason: str | None = Field(default=None, description="Why the movement happened")
    reference: str | None = Field(
        default=None,
        description="External reference (PO number, order number)",
    )


# --- Sales ---


class SalesPointRequest(BaseModel):
    """Create or replace the sales row of a product for one day."""

    product_id: int = Field(..., description="Product ID")
    sales_date: date = Field(..., description="Day the figures apply to")
    forecast_quantity: float = Field(default=0.0, ge=0, description="Planned quantity")
    actual_quantity: float | None = Field(
        default=None,
        ge=0,
        description="Observed quantity once the day has closed",
    )


# --- Social trends ---


class TrendRequest(BaseModel):
    """Record a topic observed on a social platform."""

    name: str = Field(..., min_length=1, max_length=200, description="Hashtag or topic")
    platform: SocialPlatform
    mentions: int = Field(default=0, ge=0)
    change: float = Field(default=0.0, description="Percent change in mentions")
    sentiment: str | None = Field(default=None, max_length=20)
    keywords: list[str] = Field(
        default_factory=list,
        description="Words matched against product names",
    )
