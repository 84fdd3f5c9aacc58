"""Social trend endpoints."""

from fastapi import APIRouter, Depends, Query, status

from stockroom.api.dependencies import (
    get_list_trends_use_case,
    get_record_trend_use_case,
    get_trend_impact_use_case,
)
from stockroom.application.dto.requests import TrendRequest
from stockroom.application.dto.responses import (
    ErrorResponse,
    TrendImpactResponse,
    TrendResponse,
)
from stockroom.application.use_cases import (
    ListTrendsUseCase,
    RecordTrendUseCase,
    TrendImpactUseCase,
)

router = APIRouter(prefix="/api/trends", tags=["trends"])


@router.get(
    "",
    response_model=list[TrendResponse],
    responses={400: {"model": ErrorResponse}},
)
async def list_trends(
    platform: str | None = Query(default=None, description="e.g. TWITTER, TIKTOK"),
    limit: int = Query(default=10),
    use_case: ListTrendsUseCase = Depends(get_list_trends_use_case),
) -> list[TrendResponse]:
    """Most mentioned trends first."""
    return await use_case.execute(platform=platform, limit=limit)


@router.post("", response_model=TrendResponse, status_code=status.HTTP_201_CREATED)
async def record_trend(
    request: TrendRequest,
    use_case: RecordTrendUseCase = Depends(get_record_trend_use_case),
) -> TrendResponse:
    return await use_case.execute(request)


@router.get("/inventory-impact", response_model=list[TrendImpactResponse])
async def inventory_impact(
    use_case: TrendImpactUseCase = Depends(get_trend_impact_use_case),
) -> list[TrendImpactResponse]:
    """Rising trends with the active products their keywords match."""
    return await use_case.execute()
