"""Inventory ledger endpoints."""

from fastapi import APIRouter, Depends, Query, status

from stockroom.api.dependencies import (
    get_list_movements_use_case,
    get_record_movement_use_case,
    get_reorder_recommendations_use_case,
    get_verify_ledger_use_case,
)
from stockroom.application.dto.requests import StockMovementRequest
from stockroom.application.dto.responses import (
    ErrorResponse,
    LedgerVerificationResponse,
    MovementListResponse,
    MovementResultResponse,
    ReorderRecommendationResponse,
)
from stockroom.application.use_cases import (
    ListMovementsUseCase,
    RecordMovementUseCase,
    ReorderRecommendationsUseCase,
    VerifyLedgerUseCase,
)
from stockroom.core.entities.inventory import MovementType

router = APIRouter(prefix="/api/inventory", tags=["inventory"])


@router.post(
    "/movements",
    response_model=MovementResultResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def record_movement(
    request: StockMovementRequest,
    use_case: RecordMovementUseCase = Depends(get_record_movement_use_case),
) -> MovementResultResponse:
    """Record a stock movement and return the updated product."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get("/movements", response_model=MovementListResponse)
async def list_movements(
    product_id: int | None = None,
    movement_type: MovementType | None = Query(default=None, alias="type"),
    limit: int = Query(default=20, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    use_case: ListMovementsUseCase = Depends(get_list_movements_use_case),
) -> MovementListResponse:
    """Movement history, newest first."""
    return await use_case.execute(
        product_id=product_id,
        movement_type=movement_type,
        limit=limit,
        offset=offset,
    )


@router.get(
    "/reorder-recommendations",
    response_model=list[ReorderRecommendationResponse],
)
async def reorder_recommendations(
    use_case: ReorderRecommendationsUseCase = Depends(get_reorder_recommendations_use_case),
) -> list[ReorderRecommendationResponse]:
    """Low and out-of-stock products with a suggested order, most urgent first."""
    return await use_case.execute()


@router.get(
    "/{product_id}/verify",
    response_model=LedgerVerificationResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def verify_ledger(
    product_id: int,
    strict: bool = False,
    use_case: VerifyLedgerUseCase = Depends(get_verify_ledger_use_case),
) -> LedgerVerificationResponse:
    """Replay the movement ledger and compare with current stock."""
    return await use_case.execute(product_id, strict=strict)
