"""Tests for the alert monitor."""

from datetime import date, datetime, timedelta
from itertools import count
from unittest.mock import AsyncMock

import pytest

from stockroom.core.entities import (
    AlertPriority,
    AlertType,
    ReorderPoint,
    SalesDataPoint,
)
from stockroom.core.exceptions import DatabaseError, NotificationError
from stockroom.core.services.alert_monitor import AlertMonitor, forecast_deviation

NOW = datetime(2024, 1, 15, 12, 0, 0)


def deviation_point(actual, forecast, product_id=1, sales_date=date(2024, 1, 14)):
    return SalesDataPoint(
        product_id=product_id,
        sales_date=sales_date,
        forecast_quantity=forecast,
        actual_quantity=actual,
    )


@pytest.fixture
def mock_product_store() -> AsyncMock:
    store = AsyncMock()
    store.list_active.return_value = []
    store.list_active_reorder_points.return_value = {}
    return store


@pytest.fixture
def mock_alert_store() -> AsyncMock:
    """create_if_absent assigns IDs and never suppresses by default."""
    store = AsyncMock()
    ids = count(1)

    async def create_if_absent(alert, dedup_types, since=None):
        alert.id = next(ids)
        return alert

    store.create_if_absent.side_effect = create_if_absent
    return store


@pytest.fixture
def mock_sales_store() -> AsyncMock:
    store = AsyncMock()
    store.list_actuals_since.return_value = []
    return store


@pytest.fixture
def mock_notifier() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def monitor(mock_product_store, mock_alert_store, mock_sales_store, mock_notifier):
    return AlertMonitor(
        product_store=mock_product_store,
        alert_store=mock_alert_store,
        sales_store=mock_sales_store,
        notifier=mock_notifier,
        clock=lambda: NOW,
    )


class TestForecastDeviation:
    """Tests for forecast_deviation()."""

    def test_relative_gap(self):
        assert forecast_deviation(deviation_point(80, 50)) == pytest.approx(0.6)
        assert forecast_deviation(deviation_point(20, 50)) == pytest.approx(0.6)

    def test_missing_actual(self):
        assert forecast_deviation(deviation_point(None, 50)) is None

    def test_zero_forecast_is_undefined(self):
        assert forecast_deviation(deviation_point(10, 0)) is None


class TestStockChecks:
    """Stock-out, low-stock and reorder checks."""

    async def test_stock_out_opens_critical_alert(
        self, monitor, mock_product_store, mock_alert_store, make_product
    ):
        mock_product_store.list_active.return_value = [make_product(current_stock=0)]

        created = await monitor.run_sweep()

        assert len(created) == 1
        alert = created[0]
        assert alert.alert_type == AlertType.STOCK_OUT
        assert alert.priority == AlertPriority.CRITICAL
        assert alert.message == "Wireless Mouse is out of stock"
        args = mock_alert_store.create_if_absent.await_args
        assert args.args[1] == [AlertType.STOCK_OUT, AlertType.STOCK_LOW]

    async def test_low_stock_opens_high_alert(
        self, monitor, mock_product_store, make_product
    ):
        mock_product_store.list_active.return_value = [
            make_product(current_stock=4, min_stock=10)
        ]

        created = await monitor.run_sweep()

        assert [a.alert_type for a in created] == [AlertType.STOCK_LOW]
        assert created[0].priority == AlertPriority.HIGH
        assert "(4/10)" in created[0].message

    async def test_at_minimum_counts_as_low(
        self, monitor, mock_product_store, make_product
    ):
        mock_product_store.list_active.return_value = [
            make_product(current_stock=10, min_stock=10)
        ]

        created = await monitor.run_sweep()

        assert [a.alert_type for a in created] == [AlertType.STOCK_LOW]

    async def test_healthy_stock_opens_nothing(
        self, monitor, mock_product_store, mock_alert_store, make_product
    ):
        mock_product_store.list_active.return_value = [make_product(current_stock=50)]

        created = await monitor.run_sweep()

        assert created == []
        mock_alert_store.create_if_absent.assert_not_awaited()

    async def test_duplicate_is_suppressed(
        self, monitor, mock_product_store, mock_alert_store, mock_notifier, make_product
    ):
        """An unresolved alert of a matching type blocks a new one."""
        mock_product_store.list_active.return_value = [make_product(current_stock=0)]
        mock_alert_store.create_if_absent.side_effect = None
        mock_alert_store.create_if_absent.return_value = None

        created = await monitor.run_sweep()

        assert created == []
        mock_notifier.publish.assert_not_awaited()

    async def test_reorder_point_reached(
        self, monitor, mock_product_store, make_product
    ):
        mock_product_store.list_active.return_value = [
            make_product(current_stock=15, min_stock=10)
        ]
        mock_product_store.list_active_reorder_points.return_value = {
            1: ReorderPoint(product_id=1, reorder_level=20, reorder_quantity=100)
        }

        created = await monitor.run_sweep()

        assert [a.alert_type for a in created] == [AlertType.REORDER_NEEDED]
        assert created[0].priority == AlertPriority.HIGH
        assert "Suggested quantity: 100" in created[0].message

    async def test_reorder_and_stock_out_together(
        self, monitor, mock_product_store, make_product
    ):
        mock_product_store.list_active.return_value = [make_product(current_stock=0)]
        mock_product_store.list_active_reorder_points.return_value = {
            1: ReorderPoint(product_id=1, reorder_level=5, reorder_quantity=50)
        }

        created = await monitor.run_sweep()

        assert [a.alert_type for a in created] == [
            AlertType.STOCK_OUT,
            AlertType.REORDER_NEEDED,
        ]

    async def test_reorder_point_not_reached(
        self, monitor, mock_product_store, make_product
    ):
        mock_product_store.list_active.return_value = [make_product(current_stock=50)]
        mock_product_store.list_active_reorder_points.return_value = {
            1: ReorderPoint(product_id=1, reorder_level=20, reorder_quantity=100)
        }

        assert await monitor.run_sweep() == []


class TestDeviationChecks:
    """Forecast deviation checks over recent actuals."""

    @pytest.mark.parametrize(
        "actual,priority",
        [(80, AlertPriority.HIGH), (70, AlertPriority.MEDIUM), (20, AlertPriority.HIGH)],
    )
    async def test_deviation_priority(
        self, monitor, mock_product_store, mock_sales_store, make_product, actual, priority
    ):
        mock_product_store.list_active.return_value = [make_product()]
        mock_sales_store.list_actuals_since.return_value = [deviation_point(actual, 50)]

        created = await monitor.run_sweep()

        assert len(created) == 1
        assert created[0].alert_type == AlertType.FORECAST_DEVIATION
        assert created[0].priority == priority

    async def test_message_reports_percentage(
        self, monitor, mock_product_store, mock_sales_store, make_product
    ):
        mock_product_store.list_active.return_value = [make_product()]
        mock_sales_store.list_actuals_since.return_value = [deviation_point(80, 50)]

        created = await monitor.run_sweep()

        assert created[0].message == (
            "Wireless Mouse sales deviated 60% from forecast (Actual: 80, Forecast: 50)"
        )

    @pytest.mark.parametrize("actual,forecast", [(60, 50), (65, 50), (10, 0)])
    async def test_within_threshold_or_undefined(
        self, monitor, mock_product_store, mock_sales_store, make_product, actual, forecast
    ):
        """Exactly 30% is not over the threshold; zero forecast is skipped."""
        mock_product_store.list_active.return_value = [make_product()]
        mock_sales_store.list_actuals_since.return_value = [
            deviation_point(actual, forecast)
        ]

        assert await monitor.run_sweep() == []

    async def test_window_and_dedup_scope(
        self, monitor, mock_product_store, mock_sales_store, mock_alert_store, make_product
    ):
        mock_product_store.list_active.return_value = [make_product()]
        mock_sales_store.list_actuals_since.return_value = [deviation_point(80, 50)]

        await monitor.run_sweep()

        mock_sales_store.list_actuals_since.assert_awaited_once_with(date(2024, 1, 13))
        args = mock_alert_store.create_if_absent.await_args
        assert args.args[1] == [AlertType.FORECAST_DEVIATION]
        assert args.kwargs["since"] == NOW - timedelta(days=3)

    async def test_inactive_products_ignored(
        self, monitor, mock_product_store, mock_sales_store, make_product
    ):
        mock_product_store.list_active.return_value = [make_product(id=1)]
        mock_sales_store.list_actuals_since.return_value = [
            deviation_point(80, 50, product_id=2)
        ]

        assert await monitor.run_sweep() == []


class TestNotificationAndErrors:
    """Delivery and persistence failure behavior."""

    async def test_created_alert_is_published(
        self, monitor, mock_product_store, mock_notifier, make_product
    ):
        mock_product_store.list_active.return_value = [make_product(current_stock=0)]

        created = await monitor.run_sweep()

        mock_notifier.publish.assert_awaited_once_with(created[0])

    async def test_notification_failure_keeps_alert(
        self, monitor, mock_product_store, mock_notifier, make_product
    ):
        mock_product_store.list_active.return_value = [make_product(current_stock=0)]
        mock_notifier.publish.side_effect = NotificationError("no viewers")

        created = await monitor.run_sweep()

        assert len(created) == 1
        assert created[0].id == 1

    async def test_without_notifier(
        self, mock_product_store, mock_alert_store, mock_sales_store, make_product
    ):
        monitor = AlertMonitor(mock_product_store, mock_alert_store, mock_sales_store)
        mock_product_store.list_active.return_value = [make_product(current_stock=0)]

        assert len(await monitor.run_sweep(now=NOW)) == 1

    async def test_persistence_error_aborts_sweep(
        self, monitor, mock_product_store, mock_alert_store, make_product
    ):
        mock_product_store.list_active.return_value = [make_product(current_stock=0)]
        mock_alert_store.create_if_absent.side_effect = DatabaseError("insert", "locked")

        with pytest.raises(DatabaseError):
            await monitor.run_sweep()
