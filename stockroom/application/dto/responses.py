"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field

from stockroom.core.entities.alert import Alert
from stockroom.core.entities.inventory import StockMovement
from stockroom.core.entities.product import Product, ReorderPoint
from stockroom.core.entities.sales import ForecastRecord, SalesDataPoint
from stockroom.core.entities.trend import TrendData


class ProviderHealthResponse(BaseModel):
    """Dependency health status."""

    name: str
    available: bool
    latency_ms: float | None = None
    connections_in_use: int | None = None
    pool_size: int | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ProviderHealthResponse | None = None
    scheduler_running: bool | None = None
    websocket_clients: int | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. PRODUCT_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class PaginatedResponse(BaseModel):
    """Base for paginated responses."""

    total: int
    limit: int
    offset: int
    has_more: bool


# --- Products ---


class ProductResponse(BaseModel):
    """Product response DTO."""

    id: int
    name: str
    category: str
    sku: str
    description: str | None = None
    current_stock: int
    min_stock: int
    max_stock: int
    unit_price: float
    stock_value: float
    lead_time_days: int
    status: str
    trend_score: float
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, product: Product) -> "ProductResponse":
        return cls(
            id=product.id,  # type: ignore[arg-type]
            name=product.name,
            category=product.category,
            sku=product.sku,
            description=product.description,
            current_stock=product.current_stock,
            min_stock=product.min_stock,
            max_stock=product.max_stock,
            unit_price=product.unit_price,
            stock_value=product.stock_value,
            lead_time_days=product.lead_time_days,
            status=product.status.value,
            trend_score=product.trend_score,
            is_active=product.is_active,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class ProductListResponse(BaseModel):
    """List of products."""

    products: list[ProductResponse]
    count: int


class ReorderPointResponse(BaseModel):
    """Reorder point response DTO."""

    id: int | None = None
    product_id: int
    reorder_level: int
    reorder_quantity: int
    lead_time_days: int
    safety_stock: int
    is_active: bool

    @classmethod
    def from_entity(cls, reorder_point: ReorderPoint) -> "ReorderPointResponse":
        return cls(**reorder_point.model_dump())


# --- Inventory ---


class StockMovementResponse(BaseModel):
    """Stock movement response DTO."""

    id: int
    product_id: int
    movement_type: str
    quantity: int
    reason: str | None = None
    reference: str | None = None
    created_at: datetime

    @classmethod
    def from_entity(cls, movement: StockMovement) -> "StockMovementResponse":
        return cls(
            id=movement.id,  # type: ignore[arg-type]
            product_id=movement.product_id,
            movement_type=movement.movement_type.value,
            quantity=movement.quantity,
            reason=movement.reason,
            reference=movement.reference,
            created_at=movement.created_at,
        )


class MovementResultResponse(BaseModel):
    """Response for a recorded movement: the movement and resulting product."""

    movement: StockMovementResponse
    product: ProductResponse


class MovementListResponse(PaginatedResponse):
    """Paginated stock movement history."""

    movements: list[StockMovementResponse]


class LedgerVerificationResponse(BaseModel):
    """Result of replaying a product's movement ledger."""

    product_id: int
    recorded_stock: int
    replayed_stock: int
    movement_count: int
    consistent: bool


class ReorderRecommendationResponse(BaseModel):
    """Replenishment suggestion for a low or out-of-stock product."""

    product: ProductResponse
    reorder_point: ReorderPointResponse | None = None
    suggested_quantity: int
    urgency: str


# --- Sales & forecasts ---


class SalesPointResponse(BaseModel):
    """Sales data row response DTO."""

    id: int
    product_id: int
    sales_date: date
    forecast_quantity: float
    actual_quantity: float | None = None

    @classmethod
    def from_entity(cls, point: SalesDataPoint) -> "SalesPointResponse":
        return cls(**point.model_dump())


class ForecastRecordResponse(BaseModel):
    """One algorithm's forecast."""

    id: int | None = None
    product_id: int
    forecast_date: date
    quantity: int
    confidence: int
    algorithm: str
    created_at: datetime

    @classmethod
    def from_entity(cls, record: ForecastRecord) -> "ForecastRecordResponse":
        return cls(
            id=record.id,
            product_id=record.product_id,
            forecast_date=record.forecast_date,
            quantity=record.quantity,
            confidence=record.confidence,
            algorithm=record.algorithm.value,
            created_at=record.created_at,
        )


class ForecastRunResponse(BaseModel):
    """Result of forecasting one product on demand."""

    product_id: int
    skipped: bool
    history_size: int
    forecasts: list[ForecastRecordResponse] = Field(default_factory=list)


class ForecastListResponse(BaseModel):
    """Stored forecasts of a product over a date window."""

    product_id: int
    start: date
    end: date
    forecasts: list[ForecastRecordResponse]


class ForecastSweepResponse(BaseModel):
    """Summary of a full forecast pass."""

    forecasted: list[int]
    skipped: list[int]
    failed: list[int]
    records_written: int


# --- Alerts ---


class AlertResponse(BaseModel):
    """Alert response DTO."""

    id: int
    alert_type: str
    title: str
    message: str
    action: str | None = None
    product_id: int | None = None
    priority: str
    is_read: bool
    is_resolved: bool
    resolved_at: datetime | None = None
    created_at: datetime

    @classmethod
    def from_entity(cls, alert: Alert) -> "AlertResponse":
        return cls(
            id=alert.id,  # type: ignore[arg-type]
            alert_type=alert.alert_type.value,
            title=alert.title,
            message=alert.message,
            action=alert.action,
            product_id=alert.product_id,
            priority=alert.priority.value,
            is_read=alert.is_read,
            is_resolved=alert.is_resolved,
            resolved_at=alert.resolved_at,
            created_at=alert.created_at,
        )


class AlertListResponse(PaginatedResponse):
    """Paginated alerts, highest priority first."""

    alerts: list[AlertResponse]


class AlertStatsResponse(BaseModel):
    """Alert counters."""

    total: int
    unread: int
    open: int
    by_priority: dict[str, int]
    by_type: dict[str, int]


class AlertSweepResponse(BaseModel):
    """Alerts opened by one monitor pass."""

    created: list[AlertResponse]
    count: int


# --- Analytics ---


class CategorySummaryResponse(BaseModel):
    """Per-category rollup of active products."""

    category: str
    product_count: int
    total_stock: int


class DashboardSummaryResponse(BaseModel):
    """Headline inventory figures."""

    total_products: int
    low_stock_products: int
    out_of_stock_products: int
    total_stock_units: int
    total_stock_value: float


class DashboardResponse(BaseModel):
    """Dashboard analytics."""

    summary: DashboardSummaryResponse
    recent_movements: list[StockMovementResponse]
    categories: list[CategorySummaryResponse]
    alerts: AlertStatsResponse


class DailySalesResponse(BaseModel):
    """Forecast and actual units summed over products for one day."""

    sales_date: date
    forecast: float
    actual: float


class SalesAnalyticsResponse(BaseModel):
    """Daily sales totals over a trailing window."""

    start: date
    days: int
    daily_sales: list[DailySalesResponse]
    total_forecast: float
    total_actual: float


# --- Social trends ---


class TrendResponse(BaseModel):
    """Social trend response DTO."""

    id: int | None = None
    name: str
    platform: str
    mentions: int
    change: float
    sentiment: str | None = None
    keywords: list[str] = Field(default_factory=list)
    created_at: datetime

    @classmethod
    def from_entity(cls, trend: TrendData) -> "TrendResponse":
        return cls(
            id=trend.id,
            name=trend.name,
            platform=trend.platform.value,
            mentions=trend.mentions,
            change=trend.change,
            sentiment=trend.sentiment,
            keywords=list(trend.keywords),
            created_at=trend.created_at,
        )


class RelatedProductResponse(BaseModel):
    """Product a trend's keywords matched."""

    id: int
    name: str
    current_stock: int
    status: str


class TrendImpactResponse(BaseModel):
    """A rising trend, the products it touches and what to do about them."""

    trend: TrendResponse
    related_products: list[RelatedProductResponse]
    recommended_action: str
