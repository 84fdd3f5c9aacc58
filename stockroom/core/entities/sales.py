"""Sales history and forecast entities."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field


class ForecastAlgorithm(str, Enum):
    """Algorithm that produced a forecast record."""

    LINEAR = "linear"
    SEASONAL = "seasonal"
    TREND_ADJUSTED = "trend-adjusted"


class SalesDataPoint(BaseModel):
    """
    One day of sales for a product.

    actual_quantity stays None until the day closes; forecast_quantity
    is the planning figure recorded for that day.
    """

    id: int | None = None
    product_id: int
    sales_date: date
    forecast_quantity: float = Field(default=0.0, ge=0)
    actual_quantity: float | None = Field(default=None, ge=0)

    @property
    def observed(self) -> float:
        """Actual quantity when known, otherwise the planning figure."""
        if self.actual_quantity is not None:
            return self.actual_quantity
        return self.forecast_quantity


class ForecastRecord(BaseModel):
    """Demand prediction written by the forecast engine."""

    id: int | None = None
    product_id: int
    forecast_date: date
    quantity: int = Field(ge=0)
    confidence: int = Field(ge=0, le=100)
    algorithm: ForecastAlgorithm
    created_at: datetime = Field(default_factory=datetime.utcnow)


class DailySalesTotal(BaseModel):
    """Forecast and actual units summed over all products for one day."""

    sales_date: date
    forecast: float = 0.0
    actual: float = 0.0
