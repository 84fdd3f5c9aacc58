"""Core domain services."""

from stockroom.core.services.alert_monitor import AlertMonitor
from stockroom.core.services.forecast_engine import (
    ForecastEngine,
    ForecastOutcome,
    ForecastSweepResult,
    compute_forecasts,
)
from stockroom.core.services.trend_impact import TrendImpact, analyze_trend_impact

__all__ = [
    "AlertMonitor",
    "ForecastEngine",
    "ForecastOutcome",
    "ForecastSweepResult",
    "compute_forecasts",
    "TrendImpact",
    "analyze_trend_impact",
]
