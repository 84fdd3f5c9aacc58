"""Alert endpoints."""

from fastapi import APIRouter, Depends, Query

from stockroom.api.dependencies import (
    get_alert_sweep_use_case,
    get_alrt_store,
    get_mark_alert_read_use_case,
    get_resolve_alert_use_case,
)
from stockroom.application.dto.responses import (
    AlertListResponse,
    AlertResponse,
    AlertStatsResponse,
    AlertSweepResponse,
    ErrorResponse,
)
from stockroom.application.use_cases import (
    MarkAlertReadUseCase,
    ResolveAlertUseCase,
    RunAlertSweepUseCase,
)
from stockroom.core.entities.alert import AlertPriority
from stockroom.infrastructure.storage.sqlite import SQLiteAlertStore

router = APIRouter(prefix="/api/alerts", tags=["alerts"])


@router.get("", response_model=AlertListResponse)
async def list_alerts(
    is_read: bool | None = None,
    is_resolved: bool | None = None,
    priority: AlertPriority | None = None,
    limit: int = Query(default=20, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    store: SQLiteAlertStore = Depends(get_alrt_store),
) -> AlertListResponse:
    """Alerts ordered by priority (highest first), then newest first."""
    alerts = await store.list_alerts(
        is_read=is_read,
        is_resolved=is_resolved,
        priority=priority,
        limit=limit,
        offset=offset,
    )
    total = await store.count_alerts(
        is_read=is_read, is_resolved=is_resolved, priority=priority
    )
    return AlertListResponse(
        alerts=[AlertResponse.from_entity(a) for a in alerts],
        total=total,
        limit=limit,
        offset=offset,
        has_more=offset + len(alerts) < total,
    )


@router.get("/stats", response_model=AlertStatsResponse)
async def alert_stats(
    store: SQLiteAlertStore = Depends(get_alrt_store),
) -> AlertStatsResponse:
    """Alert counters by priority and type."""
    return AlertStatsResponse(**await store.get_stats())


@router.post("/sweep", response_model=AlertSweepResponse)
async def run_alert_sweep(
    use_case: RunAlertSweepUseCase = Depends(get_alert_sweep_use_case),
) -> AlertSweepResponse:
    """Run every alert check now."""
    created = await use_case.execute()
    return use_case.to_response(created)


@router.put(
    "/{alert_id}/read",
    response_model=AlertResponse,
    responses={404: {"model": ErrorResponse}},
)
async def mark_alert_read(
    alert_id: int,
    use_case: MarkAlertReadUseCase = Depends(get_mark_alert_read_use_case),
) -> AlertResponse:
    """Mark an alert as read."""
    return AlertResponse.from_entity(await use_case.execute(alert_id))


@router.put(
    "/{alert_id}/resolve",
    response_model=AlertResponse,
    responses={404: {"model": ErrorResponse}},
)
async def resolve_alert(
    alert_id: int,
    use_case: ResolveAlertUseCase = Depends(get_resolve_alert_use_case),
) -> AlertResponse:
    """Resolve an alert."""
    return AlertResponse.from_entity(await use_case.execute(alert_id))
