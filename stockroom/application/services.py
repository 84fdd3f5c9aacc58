"""
Service factory functions for dependency injection.

This module wires infrastructure implementations to core services and
registers the background jobs. Use cases should import from here.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

from typing import TYPE_CHECKING

from stockroom.config import Settings, get_logger, get_settings
from stockroom.core.services import AlertMonitor, ForecastEngine
from stockroom.infrastructure.scheduling import JobScheduler

if TYPE_CHECKING:
    from stockroom.core.interfaces import (
        IAlertStore,
        INotificationSink,
        IProductStore,
        ISalesStore,
    )

logger = get_logger(__name__)

ALERT_JOB = "alert-monitor"
FORECAST_JOB = "forecast-sweep"

# Singleton service instances
_forecast_engine: ForecastEngine | None = None
_alert_monitor: AlertMonitor | None = None


async def get_forecast_engine(
    product_store: "IProductStore | None" = None,
    sales_store: "ISalesStore | None" = None,
    settings: Settings | None = None,
) -> ForecastEngine:
    """
    Get or create the ForecastEngine.

    Store arguments override the SQLite singletons; passing any
    override builds a fresh, uncached engine.
    """
    global _forecast_engine

    overridden = product_store is not None or sales_store is not None
    if _forecast_engine is not None and not overridden:
        return _forecast_engine

    # Lazy import infrastructure to avoid circular imports
    from stockroom.infrastructure.storage.sqlite import get_product_store, get_sales_store

    cfg = (settings or get_settings()).forecast
    engine = ForecastEngine(
        product_store=product_store or await get_product_store(),
        sales_store=sales_store or await get_sales_store(),
        history_window=cfg.history_window,
        min_history=cfg.min_history,
        horizon_days=cfg.horizon_days,
        concurrency=cfg.sweep_concurrency,
    )
    if not overridden:
        _forecast_engine = engine
    return engine


async def get_alert_monitor(
    product_store: "IProductStore | None" = None,
    alert_store: "IAlertStore | None" = None,
    sales_store: "ISalesStore | None" = None,
    notifier: "INotificationSink | None" = None,
    settings: Settings | None = None,
) -> AlertMonitor:
    """
    Get or create the AlertMonitor.

    The WebSocket hub is the default notification sink.
    """
    global _alert_monitor

    overridden = any(
        dep is not None for dep in (product_store, alert_store, sales_store, notifier)
    )
    if _alert_monitor is not None and not overridden:
        return _alert_monitor

    from stockroom.infrastructure.notifications import get_websocket_hub
    from stockroom.infrastructure.storage.sqlite import (
        get_alert_store,
        get_product_store,
        get_sales_store,
    )

    cfg = (settings or get_settings()).alerts
    monitor = AlertMonitor(
        product_store=product_store or await get_product_store(),
        alert_store=alert_store or await get_alert_store(),
        sales_store=sales_store or await get_sales_store(),
        notifier=notifier or get_websocket_hub(),
        deviation_threshold=cfg.deviation_threshold,
        high_deviation_threshold=cfg.high_deviation_threshold,
        deviation_window_days=cfg.deviation_window_days,
    )
    if not overridden:
        _alert_monitor = monitor
    return monitor


def build_scheduler(
    forecast_engine: ForecastEngine,
    alert_monitor: AlertMonitor,
    settings: Settings | None = None,
) -> JobScheduler:
    """Register the alert monitor and forecast sweep as periodic jobs."""
    cfg = (settings or get_settings()).scheduler
    scheduler = JobScheduler()
    scheduler.add_job(
        ALERT_JOB,
        alert_monitor.run_sweep,
        interval_seconds=cfg.alert_interval_seconds,
        run_on_start=cfg.run_on_start,
    )
    scheduler.add_job(
        FORECAST_JOB,
        forecast_engine.run_sweep,
        interval_seconds=cfg.forecast_interval_seconds,
        run_on_start=cfg.run_on_start,
    )
    logger.info(
        "scheduler_configured",
        alert_interval=cfg.alert_interval_seconds,
        forecast_interval=cfg.forecast_interval_seconds,
    )
    return scheduler


def reset_services() -> None:
    """Reset all singleton instances (useful for testing)."""
    global _forecast_engine, _alert_monitor
    _forecast_engine = None
    _alert_monitor = None
