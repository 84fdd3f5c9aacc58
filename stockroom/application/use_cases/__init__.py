"""Application use cases."""

from stockroom.application.use_cases.dashboard import GetDashboardUseCase
from stockroom.application.use_cases.forecasting import (
    ForecastProductUseCase,
    ListForecastsUseCase,
    RunForecastSweepUseCase,
)
from stockroom.application.use_cases.manage_alerts import (
    MarkAlertReadUseCase,
    ResolveAlertUseCase,
    RunAlertSweepUseCase,
)
from stockroom.application.use_cases.manage_products import (
    CreateProductUseCase,
    DeactivateProductUseCase,
    SetReorderPointUseCase,
    UpdateProductUseCase,
)
from stockroom.application.use_cases.record_movement import (
    ListMovementsUseCase,
    MovementResult,
    RecordMovementUseCase,
)
from stockroom.application.use_cases.record_sales import RecordSalesUseCase
from stockroom.application.use_cases.reorder_recommendations import (
    ReorderRecommendationsUseCase,
)
from stockroom.application.use_cases.sales_analytics import SalesAnalyticsUseCase
from stockroom.application.use_cases.trends import (
    ListTrendsUseCase,
    RecordTrendUseCase,
    TrendImpactUseCase,
)
from stockroom.application.use_cases.verify_ledger import VerifyLedgerUseCase

__all__ = [
    "CreateProductUseCase",
    "UpdateProductUseCase",
    "DeactivateProductUseCase",
    "SetReorderPointUseCase",
    "RecordMovementUseCase",
    "ListMovementsUseCase",
    "MovementResult",
    "VerifyLedgerUseCase",
    "ReorderRecommendationsUseCase",
    "RecordSalesUseCase",
    "ForecastProductUseCase",
    "RunForecastSweepUseCase",
    "ListForecastsUseCase",
    "RunAlertSweepUseCase",
    "MarkAlertReadUseCase",
    "ResolveAlertUseCase",
    "GetDashboardUseCase",
    "SalesAnalyticsUseCase",
    "ListTrendsUseCase",
    "RecordTrendUseCase",
    "TrendImpactUseCase",
]
