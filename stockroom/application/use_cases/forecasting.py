"""Forecast use cases: on-demand product forecast, sweep, stored lookups."""

from collections.abc import Callable
from datetime import date, timedelta

from stockroom.application.dto.responses import (
    ForecastListResponse,
    ForecastRecordResponse,
    ForecastRunResponse,
    ForecastSweepResponse,
)
from stockroom.core.clock import utc_today
from stockroom.core.exceptions import ProductNotFoundError, ValidationError
from stockroom.core.interfaces.product_store import IProductStore
from stockroom.core.interfaces.sales_store import ISalesStore
from stockroom.core.services import ForecastEngine, ForecastOutcome, ForecastSweepResult

MAX_LOOKAHEAD_DAYS = 365


class _EngineUseCase:
    def __init__(self, engine: ForecastEngine | None = None):
        self._engine = engine

    async def _get_engine(self) -> ForecastEngine:
        if self._engine is None:
            from stockroom.application.services import get_forecast_engine

            self._engine = await get_forecast_engine()
        return self._engine


class ForecastProductUseCase(_EngineUseCase):
    """Forecast one product now, with the same logic as the sweep."""

    async def execute(self, product_id: int) -> ForecastOutcome:
        engine = await self._get_engine()
        return await engine.forecast_product(product_id)

    def to_response(self, outcome: ForecastOutcome) -> ForecastRunResponse:
        return ForecastRunResponse(
            product_id=outcome.product_id,
            skipped=outcome.skipped,
            history_size=outcome.history_size,
            forecasts=[ForecastRecordResponse.from_entity(r) for r in outcome.records],
        )


class RunForecastSweepUseCase(_EngineUseCase):
    """Forecast every active product with enough history."""

    async def execute(self) -> ForecastSweepResult:
        engine = await self._get_engine()
        return await engine.run_sweep()

    def to_response(self, result: ForecastSweepResult) -> ForecastSweepResponse:
        return ForecastSweepResponse(
            forecasted=sorted(result.forecasted),
            skipped=sorted(result.skipped),
            failed=sorted(result.failed),
            records_written=result.records_written,
        )


class ListForecastsUseCase:
    """Stored forecasts dated from today through today + days."""

    def __init__(
        self,
        product_store: IProductStore | None = None,
        sales_store: ISalesStore | None = None,
        clock: Callable[[], date] = utc_today,
    ):
        self._product_store = product_store
        self._sales_store = sales_store
        self._clock = clock

    async def _get_stores(self) -> tuple[IProductStore, ISalesStore]:
        if self._product_store is None or self._sales_store is None:
            from stockroom.infrastructure.storage.sqlite import (
                get_product_store,
                get_sales_store,
            )

            self._product_store = self._product_store or await get_product_store()
            self._sales_store = self._sales_store or await get_sales_store()
        return self._product_store, self._sales_store

    async def execute(self, product_id: int, days: int = 7) -> ForecastListResponse:
        if days < 1 or days > MAX_LOOKAHEAD_DAYS:
            raise ValidationError("days", f"must be between 1 and {MAX_LOOKAHEAD_DAYS}", days)

        product_store, sales_store = await self._get_stores()
        if await product_store.get_product(product_id) is None:
            raise ProductNotFoundError(product_id)

        start = self._clock()
        end = start + timedelta(days=days)
        records = await sales_store.list_forecasts(product_id, start, end)
        return ForecastListResponse(
            product_id=product_id,
            start=start,
            end=end,
            forecasts=[ForecastRecordResponse.from_entity(r) for r in records],
        )
