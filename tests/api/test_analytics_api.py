"""API tests for forecast and dashboard endpoints."""

from datetime import date, timedelta
from unittest.mock import AsyncMock

import pytest

from stockroom.api.dependencies import (
    get_dashboard_use_case,
    get_forecast_product_use_case,
    get_forecast_sweep_use_case,
    get_list_forecasts_use_case,
    get_sales_analytics_use_case,
)
from stockroom.api.main import app
from stockroom.application.use_cases import (
    ForecastProductUseCase,
    GetDashboardUseCase,
    ListForecastsUseCase,
    RunForecastSweepUseCase,
    SalesAnalyticsUseCase,
)
from stockroom.core.entities import DailySalesTotal, ForecastAlgorithm, ForecastRecord
from stockroom.core.exceptions import ProductNotFoundError
from stockroom.core.services import ForecastOutcome, ForecastSweepResult

TODAY = date(2024, 1, 15)


@pytest.fixture
def mock_engine():
    engine = AsyncMock()
    app.dependency_overrides[get_forecast_product_use_case] = lambda: ForecastProductUseCase(
        engine
    )
    app.dependency_overrides[get_forecast_sweep_use_case] = lambda: RunForecastSweepUseCase(
        engine
    )
    return engine


@pytest.fixture
def mock_product_store():
    return AsyncMock()


@pytest.fixture
def mock_sales_store():
    return AsyncMock()


@pytest.fixture(autouse=True)
def list_forecasts_use_case(mock_product_store, mock_sales_store):
    app.dependency_overrides[get_list_forecasts_use_case] = lambda: ListForecastsUseCase(
        mock_product_store, mock_sales_store, clock=lambda: TODAY
    )


class TestForecastAPI:
    """Tests for /api/analytics/forecast."""

    async def test_stored_forecasts(
        self, async_client, mock_product_store, mock_sales_store, make_product
    ):
        mock_product_store.get_product.return_value = make_product()
        mock_sales_store.list_forecasts.return_value = [
            ForecastRecord(
                id=1,
                product_id=1,
                forecast_date=TODAY + timedelta(days=7),
                quantity=51,
                confidence=95,
                algorithm=ForecastAlgorithm.LINEAR,
            )
        ]

        response = await async_client.get("/api/analytics/forecast/1", params={"days": 14})

        assert response.status_code == 200
        data = response.json()
        assert data["start"] == "2024-01-15"
        assert data["end"] == "2024-01-29"
        assert data["forecasts"][0]["algorithm"] == "linear"

    @pytest.mark.parametrize("days", [0, 400])
    async def test_days_out_of_range(self, async_client, days):
        response = await async_client.get("/api/analytics/forecast/1", params={"days": days})

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_generate_for_product(self, async_client, mock_engine):
        mock_engine.forecast_product.return_value = ForecastOutcome(
            product_id=1,
            history_size=30,
            records=[
                ForecastRecord(
                    product_id=1,
                    forecast_date=TODAY + timedelta(days=7),
                    quantity=45,
                    confidence=95,
                    algorithm=ForecastAlgorithm.SEASONAL,
                )
            ],
        )

        response = await async_client.post("/api/analytics/forecast/1")

        assert response.status_code == 200
        data = response.json()
        assert data["skipped"] is False
        assert data["forecasts"][0]["quantity"] == 45

    async def test_generate_unknown_product(self, async_client, mock_engine):
        mock_engine.forecast_product.side_effect = ProductNotFoundError(8)

        response = await async_client.post("/api/analytics/forecast/8")

        assert response.status_code == 404

    async def test_sweep_route_is_not_an_id(self, async_client, mock_engine):
        mock_engine.run_sweep.return_value = ForecastSweepResult(
            forecasted=[2, 1], skipped=[3], failed=[4], records_written=6
        )

        response = await async_client.post("/api/analytics/forecast/sweep")

        assert response.status_code == 200
        assert response.json() == {
            "forecasted": [1, 2],
            "skipped": [3],
            "failed": [4],
            "records_written": 6,
        }
        mock_engine.forecast_product.assert_not_awaited()


class TestDashboardAPI:
    """Tests for /api/analytics/dashboard."""

    async def test_dashboard(self, async_client, make_product):
        product_store = AsyncMock()
        product_store.list_active.return_value = [make_product(current_stock=4)]
        inventory_store = AsyncMock()
        inventory_store.list_movements.return_value = []
        alert_store = AsyncMock()
        alert_store.get_stats.return_value = {
            "total": 2,
            "unread": 1,
            "open": 2,
            "by_priority": {"CRITICAL": 1, "LOW": 1},
            "by_type": {"STOCK_OUT": 1, "TREND_SPIKE": 1},
        }
        app.dependency_overrides[get_dashboard_use_case] = lambda: GetDashboardUseCase(
            product_store, inventory_store, alert_store
        )

        response = await async_client.get("/api/analytics/dashboard")

        assert response.status_code == 200
        data = response.json()
        assert data["summary"]["total_products"] == 1
        assert data["summary"]["total_stock_value"] == 100.0
        assert data["alerts"]["unread"] == 1


class TestSalesAnalyticsAPI:
    """Tests for /api/analytics/sales."""

    async def test_daily_totals(self, async_client, mock_sales_store):
        mock_sales_store.daily_totals.return_value = [
            DailySalesTotal(sales_date=TODAY, forecast=30, actual=27)
        ]
        app.dependency_overrides[get_sales_analytics_use_case] = lambda: SalesAnalyticsUseCase(
            mock_sales_store, clock=lambda: TODAY
        )

        response = await async_client.get("/api/analytics/sales", params={"days": 7})

        assert response.status_code == 200
        assert response.json() == {
            "start": "2024-01-08",
            "days": 7,
            "daily_sales": [{"sales_date": "2024-01-15", "forecast": 30.0, "actual": 27.0}],
            "total_forecast": 30.0,
            "total_actual": 27.0,
        }

    async def test_days_out_of_range(self, async_client, mock_sales_store):
        app.dependency_overrides[get_sales_analytics_use_case] = lambda: SalesAnalyticsUseCase(
            mock_sales_store
        )

        response = await async_client.get("/api/analytics/sales", params={"days": 0})

        assert response.status_code == 400
