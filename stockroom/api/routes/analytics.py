"""Forecast, sales and dashboard endpoints."""

from fastapi import APIRouter, Depends, Query

from stockroom.api.dependencies import (
    get_dashboard_use_case,
    get_forecast_product_use_case,
    get_forecast_sweep_use_case,
    get_list_forecasts_use_case,
    get_sales_analytics_use_case,
)
from stockroom.application.dto.responses import (
    DashboardResponse,
    ErrorResponse,
    ForecastListResponse,
    ForecastRunResponse,
    ForecastSweepResponse,
    SalesAnalyticsResponse,
)
from stockroom.application.use_cases import (
    ForecastProductUseCase,
    GetDashboardUseCase,
    ListForecastsUseCase,
    RunForecastSweepUseCase,
    SalesAnalyticsUseCase,
)

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    use_case: GetDashboardUseCase = Depends(get_dashboard_use_case),
) -> DashboardResponse:
    """Inventory summary, recent movements, categories and alert counters."""
    return await use_case.execute()


@router.get(
    "/sales",
    response_model=SalesAnalyticsResponse,
    responses={400: {"model": ErrorResponse}},
)
async def sales_analytics(
    days: int = Query(default=30),
    use_case: SalesAnalyticsUseCase = Depends(get_sales_analytics_use_case),
) -> SalesAnalyticsResponse:
    """Forecast and actual units per day over the last `days` days."""
    return await use_case.execute(days=days)


# Registered before /forecast/{product_id} so "sweep" is not parsed as an ID
@router.post("/forecast/sweep", response_model=ForecastSweepResponse)
async def run_forecast_sweep(
    use_case: RunForecastSweepUseCase = Depends(get_forecast_sweep_use_case),
) -> ForecastSweepResponse:
    """Forecast every active product with enough history now."""
    result = await use_case.execute()
    return use_case.to_response(result)


@router.get(
    "/forecast/{product_id}",
    response_model=ForecastListResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_forecast(
    product_id: int,
    days: int = Query(default=7),
    use_case: ListForecastsUseCase = Depends(get_list_forecasts_use_case),
) -> ForecastListResponse:
    """Stored forecasts from today through today + days."""
    return await use_case.execute(product_id, days=days)


@router.post(
    "/forecast/{product_id}",
    response_model=ForecastRunResponse,
    responses={404: {"model": ErrorResponse}},
)
async def generate_forecast(
    product_id: int,
    use_case: ForecastProductUseCase = Depends(get_forecast_product_use_case),
) -> ForecastRunResponse:
    """Run all forecasting algorithms for one product now."""
    outcome = await use_case.execute(product_id)
    return use_case.to_response(outcome)
