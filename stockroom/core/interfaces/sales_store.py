"""Abstract interface for sales history and forecast storage."""

from abc import ABC, abstractmethod
from datetime import date

from stockroom.core.entities.sales import DailySalesTotal, ForecastRecord, SalesDataPoint


class ISalesStore(ABC):
    """Interface for sales data and forecast record persistence."""

    @abstractmethod
    async def upsert_sales_point(self, point: SalesDataPoint) -> SalesDataPoint:
        """Create or replace the sales row for (product, date)."""
        pass

    @abstractmethod
    async def get_recent_sales(
        self, product_id: int, limit: int = 30
    ) -> list[SalesDataPoint]:
        """Most recent sales rows for a product, newest first."""
        pass

    @abstractmethod
    async def list_actuals_since(self, since: date) -> list[SalesDataPoint]:
        """Rows dated on or after `since` whose actual quantity is known."""
        pass

    @abstractmethod
    async def daily_totals(self, since: date) -> list[DailySalesTotal]:
        """Forecast and actual totals per day from `since` on; unknown actuals count as 0."""
        pass

    @abstractmethod
    async def list_products_with_history(self, min_rows: int) -> list[int]:
        """IDs of active products with at least `min_rows` sales rows."""
        pass

    @abstractmethod
    async def add_forecasts(self, records: list[ForecastRecord]) -> list[ForecastRecord]:
        """Append forecast records."""
        pass

    @abstractmethod
    async def list_forecasts(
        self, product_id: int, start: date, end: date
    ) -> list[ForecastRecord]:
        """Forecast records for a product within [start, end], by date."""
        pass
