"""
Dependency injection container for FastAPI.

Provides store, service and use case instances to route handlers.
Tests replace these through app.dependency_overrides.
"""

from functools import lru_cache

from fastapi import Request

from stockroom.application.services import get_alert_monitor, get_forecast_engine
from stockroom.application.use_cases import (
    CreateProductUseCase,
    DeactivateProductUseCase,
    ForecastProductUseCase,
    GetDashboardUseCase,
    ListForecastsUseCase,
    ListMovementsUseCase,
    ListTrendsUseCase,
    MarkAlertReadUseCase,
    RecordMovementUseCase,
    RecordSalesUseCase,
    RecordTrendUseCase,
    ReorderRecommendationsUseCase,
    ResolveAlertUseCase,
    RunAlertSweepUseCase,
    RunForecastSweepUseCase,
    SalesAnalyticsUseCase,
    SetReorderPointUseCase,
    TrendImpactUseCase,
    UpdateProductUseCase,
    VerifyLedgerUseCase,
)
from stockroom.config import Settings, get_settings
from stockroom.infrastructure.notifications import WebSocketHub, get_websocket_hub
from stockroom.infrastructure.scheduling import JobScheduler
from stockroom.infrastructure.storage.sqlite import (
    SQLiteAlertStore,
    SQLiteInventoryStore,
    SQLiteProductStore,
    SQLiteSalesStore,
    get_alert_store,
    get_inventory_store,
    get_product_store,
    get_sales_store,
)


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Stores
async def get_prod_store() -> SQLiteProductStore:
    """Get product store."""
    return await get_product_store()


async def get_inv_store() -> SQLiteInventoryStore:
    """Get inventory ledger store."""
    return await get_inventory_store()


async def get_sale_store() -> SQLiteSalesStore:
    """Get sales and forecast store."""
    return await get_sales_store()


async def get_alrt_store() -> SQLiteAlertStore:
    """Get alert store."""
    return await get_alert_store()


# Infrastructure
def get_hub() -> WebSocketHub:
    """Get the WebSocket hub used as the alert notification sink."""
    return get_websocket_hub()


def get_scheduler(request: Request) -> JobScheduler | None:
    """Scheduler started by the lifespan handler, if any."""
    return getattr(request.app.state, "scheduler", None)


# Product use cases
def get_create_product_use_case() -> CreateProductUseCase:
    return CreateProductUseCase()


def get_update_product_use_case() -> UpdateProductUseCase:
    return UpdateProductUseCase()


def get_deactivate_product_use_case() -> DeactivateProductUseCase:
    return DeactivateProductUseCase()


def get_set_reorder_point_use_case() -> SetReorderPointUseCase:
    return SetReorderPointUseCase()


# Inventory use cases
def get_record_movement_use_case() -> RecordMovementUseCase:
    return RecordMovementUseCase()


def get_list_movements_use_case() -> ListMovementsUseCase:
    return ListMovementsUseCase()


def get_verify_ledger_use_case() -> VerifyLedgerUseCase:
    return VerifyLedgerUseCase()


def get_reorder_recommendations_use_case() -> ReorderRecommendationsUseCase:
    return ReorderRecommendationsUseCase()


# Sales and forecast use cases
def get_record_sales_use_case() -> RecordSalesUseCase:
    return RecordSalesUseCase()


async def get_forecast_product_use_case() -> ForecastProductUseCase:
    return ForecastProductUseCase(await get_forecast_engine())


async def get_forecast_sweep_use_case() -> RunForecastSweepUseCase:
    return RunForecastSweepUseCase(await get_forecast_engine())


def get_list_forecasts_use_case() -> ListForecastsUseCase:
    return ListForecastsUseCase()


def get_dashboard_use_case() -> GetDashboardUseCase:
    return GetDashboardUseCase()


def get_sales_analytics_use_case() -> SalesAnalyticsUseCase:
    return SalesAnalyticsUseCase()


# Alert use cases
async def get_alert_sweep_use_case() -> RunAlertSweepUseCase:
    return RunAlertSweepUseCase(await get_alert_monitor())


def get_mark_alert_read_use_case() -> MarkAlertReadUseCase:
    return MarkAlertReadUseCase()


def get_resolve_alert_use_case() -> ResolveAlertUseCase:
    return ResolveAlertUseCase()


# Trend use cases
def get_list_trends_use_case() -> ListTrendsUseCase:
    return ListTrendsUseCase()


def get_record_trend_use_case() -> RecordTrendUseCase:
    return RecordTrendUseCase()


def get_trend_impact_use_case() -> TrendImpactUseCase:
    return TrendImpactUseCase()
