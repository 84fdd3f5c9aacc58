"""
Alert Monitor.

Scans product and sales state on every tick and opens deduplicated
alerts. Alerts are never resolved here; an operator resolves them.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta

from stockroom.config import get_logger
from stockroom.core.clock import utcnow
from stockroom.core.entities.alert import Alert, AlertPriority, AlertType
from stockroom.core.entities.product import Product, ReorderPoint
from stockroom.core.entities.sales import SalesDataPoint
from stockroom.core.interfaces.alert_store import IAlertStore
from stockroom.core.interfaces.notifier import INotificationSink
from stockroom.core.interfaces.product_store import IProductStore
from stockroom.core.interfaces.sales_store import ISalesStore

logger = get_logger(__name__)

STOCK_LEVEL_TYPES = [AlertType.STOCK_OUT, AlertType.STOCK_LOW]


def forecast_deviation(point: SalesDataPoint) -> float | None:
    """Relative gap between actual and forecast, None when undefined."""
    if point.actual_quantity is None or point.forecast_quantity <= 0:
        return None
    return abs(point.actual_quantity - point.forecast_quantity) / point.forecast_quantity


class AlertMonitor:
    """
    Periodic threshold checks over active products.

    Persistence errors propagate and abort the tick; notification
    failures are logged and never undo a created alert.
    """

    def __init__(
        self,
        product_store: IProductStore,
        alert_store: IAlertStore,
        sales_store: ISalesStore,
        notifier: INotificationSink | None = None,
        deviation_threshold: float = 0.30,
        high_deviation_threshold: float = 0.50,
        deviation_window_days: int = 3,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._product_store = product_store
        self._alert_store = alert_store
        self._sales_store = sales_store
        self._notifier = notifier
        self.deviation_threshold = deviation_threshold
        self.high_deviation_threshold = high_deviation_threshold
        self.deviation_window_days = deviation_window_days
        self._clock = clock

    async def run_sweep(self, now: datetime | None = None) -> list[Alert]:
        """Run every check once and return the alerts created."""
        now = now or self._clock()
        products = await self._product_store.list_active()

        created: list[Alert] = []
        created.extend(await self.check_stock_levels(products))
        created.extend(await self.check_forecast_deviations(products, now))

        logger.info(
            "alert_sweep_complete",
            products=len(products),
            created=len(created),
        )
        return created

    async def check_stock_levels(self, products: list[Product]) -> list[Alert]:
        """Stock-out, low-stock and reorder point checks."""
        reorder_points = await self._product_store.list_active_reorder_points()
        created: list[Alert] = []

        for product in products:
            alert = await self._check_stock(product)
            if alert is not None:
                created.append(alert)

            reorder_point = reorder_points.get(product.id)  # type: ignore[arg-type]
            if reorder_point is not None:
                alert = await self._check_reorder(product, reorder_point)
                if alert is not None:
                    created.append(alert)

        return created

    async def check_forecast_deviations(
        self, products: list[Product], now: datetime
    ) -> list[Alert]:
        """Compare recent actual sales against their forecast figures."""
        # Today plus the previous (window - 1) calendar days
        first_day = now.date() - timedelta(days=self.deviation_window_days - 1)
        window_start = now - timedelta(days=self.deviation_window_days)
        by_id = {p.id: p for p in products}

        points = await self._sales_store.list_actuals_since(first_day)
        created: list[Alert] = []

        for point in points:
            product = by_id.get(point.product_id)
            if product is None:
                continue

            deviation = forecast_deviation(point)
            if deviation is None or deviation <= self.deviation_threshold:
                continue

            priority = (
                AlertPriority.HIGH
                if deviation > self.high_deviation_threshold
                else AlertPriority.MEDIUM
            )
            alert = Alert(
                alert_type=AlertType.FORECAST_DEVIATION,
                title="Forecast Deviation Alert",
                message=(
                    f"{product.name} sales deviated {round(deviation * 100)}% from "
                    f"forecast (Actual: {point.actual_quantity:g}, "
                    f"Forecast: {point.forecast_quantity:g})"
                ),
                action="Review forecasting model",
                product_id=product.id,
                priority=priority,
            )
            saved = await self._open(
                alert, [AlertType.FORECAST_DEVIATION], since=window_start
            )
            if saved is not None:
                created.append(saved)

        return created

    async def _check_stock(self, product: Product) -> Alert | None:
        if product.current_stock == 0:
            alert = Alert(
                alert_type=AlertType.STOCK_OUT,
                title="Stock Out Alert",
                message=f"{product.name} is out of stock",
                action="Reorder immediately",
                product_id=product.id,
                priority=AlertPriority.CRITICAL,
            )
        elif product.current_stock <= product.min_stock:
            alert = Alert(
                alert_type=AlertType.STOCK_LOW,
                title="Low Stock Warning",
                message=(
                    f"{product.name} stock is below minimum threshold "
                    f"({product.current_stock}/{product.min_stock})"
                ),
                action="Review reorder requirements",
                product_id=product.id,
                priority=AlertPriority.HIGH,
            )
        else:
            return None

        return await self._open(alert, STOCK_LEVEL_TYPES)

    async def _check_reorder(
        self, product: Product, reorder_point: ReorderPoint
    ) -> Alert | None:
        if product.current_stock > reorder_point.reorder_level:
            return None

        alert = Alert(
            alert_type=AlertType.REORDER_NEEDED,
            title="Reorder Needed",
            message=(
                f"{product.name} has reached reorder point. "
                f"Suggested quantity: {reorder_point.reorder_quantity}"
            ),
            action="Create purchase order",
            product_id=product.id,
            priority=AlertPriority.HIGH,
        )
        return await self._open(alert, [AlertType.REORDER_NEEDED])

    async def _open(
        self,
        alert: Alert,
        dedup_types: list[AlertType],
        since: datetime | None = None,
    ) -> Alert | None:
        saved = await self._alert_store.create_if_absent(alert, dedup_types, since=since)
        if saved is None:
            return None

        logger.info(
            "alert_opened",
            alert_id=saved.id,
            type=saved.alert_type.value,
            product_id=saved.product_id,
            priority=saved.priority.value,
        )
        await self._notify(saved)
        return saved

    async def _notify(self, alert: Alert) -> None:
        if self._notifier is None:
            return
        try:
            await self._notifier.publish(alert)
        except Exception:
            logger.warning("alert_notification_failed", alert_id=alert.id, exc_info=True)
