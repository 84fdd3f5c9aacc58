"""
Forecast Engine.

Produces three independent short-horizon demand estimates per product
from its recent sales history:

- linear: least-squares trend over the chronological series
- seasonal: 7-day mean scaled by a day-of-week multiplier
- trend-adjusted: 3-day mean scaled by the product's trend score

The engine never picks a winner; every estimate is written as its own
ForecastRecord. Scheduled sweeps and on-demand requests share
compute_forecasts().
"""

from __future__ import annotations

import asyncio
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import date, timedelta

import numpy as np

from stockroom.config import get_logger
from stockroom.core.clock import utc_today
from stockroom.core.entities.product import Product
from stockroom.core.entities.sales import ForecastAlgorithm, ForecastRecord, SalesDataPoint
from stockroom.core.exceptions import ProductNotFoundError
from stockroom.core.interfaces.product_store import IProductStore
from stockroom.core.interfaces.sales_store import ISalesStore

logger = get_logger(__name__)

# Sunday .. Saturday
SEASONAL_MULTIPLIERS: tuple[float, ...] = (0.9, 1.1, 1.2, 1.1, 1.3, 1.4, 1.0)

LINEAR_CONFIDENCE_FLOOR = 30
CONFIDENCE_CEILING = 95


@dataclass(frozen=True)
class ForecastEstimate:
    """Output of one forecasting algorithm."""

    algorithm: ForecastAlgorithm
    quantity: int
    confidence: int


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def observed_series(points: Sequence[SalesDataPoint]) -> list[float]:
    """Observed daily quantities in chronological order (oldest first)."""
    ordered = sorted(points, key=lambda p: p.sales_date)
    return [p.observed for p in ordered]


def linear_regression_forecast(series: Sequence[float]) -> ForecastEstimate:
    """Fit y = slope*x + intercept over x = 0..n-1 and project to x = n."""
    n = len(series)
    if n == 0:
        raise ValueError("linear forecast needs at least one observation")

    y = np.asarray(series, dtype=float)
    x = np.arange(n, dtype=float)
    if n == 1:
        slope, intercept = 0.0, float(y[0])
    else:
        slope, intercept = (float(c) for c in np.polyfit(x, y, 1))

    residuals = (slope * x + intercept) - y
    mse = float(np.mean(residuals**2))
    confidence = min(CONFIDENCE_CEILING, max(LINEAR_CONFIDENCE_FLOOR, 95 - 2 * mse))

    return ForecastEstimate(
        algorithm=ForecastAlgorithm.LINEAR,
        quantity=round_half_up(max(0.0, slope * n + intercept)),
        confidence=round_half_up(confidence),
    )


def seasonal_forecast(series: Sequence[float], today: date) -> ForecastEstimate:
    """Mean of the last 7 observations times today's weekday multiplier."""
    recent = list(series[-7:])
    if not recent:
        raise ValueError("seasonal forecast needs at least one observation")

    average = float(np.mean(recent))
    multiplier = SEASONAL_MULTIPLIERS[today.isoweekday() % 7]

    return ForecastEstimate(
        algorithm=ForecastAlgorithm.SEASONAL,
        quantity=round_half_up(max(0.0, average * multiplier)),
        confidence=min(CONFIDENCE_CEILING, 60 + 5 * len(recent)),
    )


def trend_adjusted_forecast(series: Sequence[float], trend_score: float) -> ForecastEstimate:
    """Mean of the last 3 observations scaled into [0.8, 1.2] by trend score."""
    recent = list(series[-3:])
    if not recent:
        raise ValueError("trend-adjusted forecast needs at least one observation")

    baseline = float(np.mean(recent))
    multiplier = 0.8 + (trend_score / 10) * 0.4

    return ForecastEstimate(
        algorithm=ForecastAlgorithm.TREND_ADJUSTED,
        quantity=round_half_up(max(0.0, baseline * multiplier)),
        confidence=round_half_up(min(CONFIDENCE_CEILING, 50 + 4 * trend_score)),
    )


def compute_forecasts(
    product: Product,
    points: Sequence[SalesDataPoint],
    today: date,
    horizon_days: int = 7,
    min_history: int = 7,
) -> list[ForecastRecord]:
    """
    Run all three algorithms for one product.

    Returns an empty list when fewer than `min_history` rows are given.
    """
    if product.id is None:
        raise ValueError("product must be persisted before forecasting")
    if len(points) < min_history:
        return []

    series = observed_series(points)
    estimates = [
        linear_regression_forecast(series),
        seasonal_forecast(series, today),
        trend_adjusted_forecast(series, product.trend_score),
    ]

    target = today + timedelta(days=horizon_days)
    return [
        ForecastRecord(
            product_id=product.id,
            forecast_date=target,
            quantity=e.quantity,
            confidence=e.confidence,
            algorithm=e.algorithm,
        )
        for e in estimates
    ]


@dataclass
class ForecastOutcome:
    """Result of forecasting one product."""

    product_id: int
    records: list[ForecastRecord] = field(default_factory=list)
    skipped: bool = False
    history_size: int = 0


@dataclass
class ForecastSweepResult:
    """Summary of a full-catalog forecast pass."""

    forecasted: list[int] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)
    records_written: int = 0


class ForecastEngine:
    """
    Reads sales history and writes forecast records.

    Depends only on core interfaces.
    """

    def __init__(
        self,
        product_store: IProductStore,
        sales_store: ISalesStore,
        history_window: int = 30,
        min_history: int = 7,
        horizon_days: int = 7,
        concurrency: int = 4,
        clock: Callable[[], date] = utc_today,
    ) -> None:
        self._product_store = product_store
        self._sales_store = sales_store
        self.history_window = history_window
        self.min_history = min_history
        self.horizon_days = horizon_days
        self.concurrency = max(1, concurrency)
        self._clock = clock

    async def forecast_product(
        self, product_id: int, today: date | None = None
    ) -> ForecastOutcome:
        """
        Forecast a single product on demand.

        Raises ProductNotFoundError for unknown products. Insufficient
        history yields a skipped outcome, not an error.
        """
        product = await self._product_store.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return await self._forecast(product, today or self._clock())

    async def run_sweep(self, today: date | None = None) -> ForecastSweepResult:
        """Forecast every active product with enough history."""
        today = today or self._clock()
        result = ForecastSweepResult()

        product_ids = await self._sales_store.list_products_with_history(
            self.min_history
        )
        logger.info("forecast_sweep_started", candidates=len(product_ids))

        semaphore = asyncio.Semaphore(self.concurrency)

        async def run_one(product_id: int) -> None:
            async with semaphore:
                try:
                    product = await self._product_store.get_product(product_id)
                    if product is None or not product.is_active:
                        result.skipped.append(product_id)
                        return
                    outcome = await self._forecast(product, today)
                except Exception:
                    logger.warning(
                        "forecast_product_failed",
                        product_id=product_id,
                        exc_info=True,
                    )
                    result.failed.append(product_id)
                    return

            if outcome.skipped:
                result.skipped.append(product_id)
            else:
                result.forecasted.append(product_id)
                result.records_written += len(outcome.records)

        await asyncio.gather(*(run_one(pid) for pid in product_ids))

        logger.info(
            "forecast_sweep_complete",
            forecasted=len(result.forecasted),
            skipped=len(result.skipped),
            failed=len(result.failed),
            records=result.records_written,
        )
        return result

    async def _forecast(self, product: Product, today: date) -> ForecastOutcome:
        assert product.id is not None
        points = await self._sales_store.get_recent_sales(
            product.id, limit=self.history_window
        )
        records = compute_forecasts(
            product,
            points,
            today,
            horizon_days=self.horizon_days,
            min_history=self.min_history,
        )
        if not records:
            logger.info(
                "forecast_skipped_insufficient_history",
                product_id=product.id,
                rows=len(points),
                required=self.min_history,
            )
            return ForecastOutcome(
                product_id=product.id, skipped=True, history_size=len(points)
            )

        saved = await self._sales_store.add_forecasts(records)
        logger.info(
            "forecast_generated",
            product_id=product.id,
            forecast_date=records[0].forecast_date.isoformat(),
            quantities={r.algorithm.value: r.quantity for r in saved},
        )
        return ForecastOutcome(
            product_id=product.id, records=saved, history_size=len(points)
        )
