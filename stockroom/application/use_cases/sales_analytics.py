"""Daily sales totals over a trailing window."""

from collections.abc import Callable
from datetime import date, timedelta

from stockroom.application.dto.responses import DailySalesResponse, SalesAnalyticsResponse
from stockroom.core.clock import utc_today
from stockroom.core.exceptions import ValidationError
from stockroom.core.interfaces.sales_store import ISalesStore

MAX_WINDOW_DAYS = 365


class SalesAnalyticsUseCase:
    """Forecast against actual units per day, summed over all products."""

    def __init__(
        self,
        sales_store: ISalesStore | None = None,
        clock: Callable[[], date] = utc_today,
    ):
        self._sales_store = sales_store
        self._clock = clock

    async def _get_store(self) -> ISalesStore:
        if self._sales_store is None:
            from stockroom.infrastructure.storage.sqlite import get_sales_store

            self._sales_store = await get_sales_store()
        return self._sales_store

    async def execute(self, days: int = 30) -> SalesAnalyticsResponse:
        if days < 1 or days > MAX_WINDOW_DAYS:
            raise ValidationError("days", f"must be between 1 and {MAX_WINDOW_DAYS}", days)

        store = await self._get_store()
        start = self._clock() - timedelta(days=days)
        totals = await store.daily_totals(start)
        return SalesAnalyticsResponse(
            start=start,
            days=days,
            daily_sales=[
                DailySalesResponse(sales_date=t.sales_date, forecast=t.forecast, actual=t.actual)
                for t in totals
            ],
            total_forecast=round(sum(t.forecast for t in totals), 2),
            total_actual=round(sum(t.actual for t in totals), 2),
        )
