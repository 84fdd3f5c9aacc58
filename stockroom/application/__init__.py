"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services
3. Providing factory functions for dependency injection

Use cases are the only entry point for API handlers that change state.
"""

from stockroom.application.services import (
    build_scheduler,
    get_alert_monitor,
    get_forecast_engine,
    reset_services,
)
from stockroom.application.use_cases import (
    CreateProductUseCase,
    ForecastProductUseCase,
    RecordMovementUseCase,
    RunAlertSweepUseCase,
    RunForecastSweepUseCase,
    VerifyLedgerUseCase,
)

__all__ = [
    # Use Cases
    "CreateProductUseCase",
    "RecordMovementUseCase",
    "VerifyLedgerUseCase",
    "ForecastProductUseCase",
    "RunForecastSweepUseCase",
    "RunAlertSweepUseCase",
    # Service factories
    "get_forecast_engine",
    "get_alert_monitor",
    "build_scheduler",
    "reset_services",
]
