"""Sales history endpoints."""

from fastapi import APIRouter, Depends, status

from stockroom.api.dependencies import get_record_sales_use_case
from stockroom.application.dto.requests import SalesPointRequest
from stockroom.application.dto.responses import ErrorResponse, SalesPointResponse
from stockroom.application.use_cases import RecordSalesUseCase

router = APIRouter(prefix="/api/sales", tags=["sales"])


@router.post(
    "",
    response_model=SalesPointResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
async def record_sales(
    request: SalesPointRequest,
    use_case: RecordSalesUseCase = Depends(get_record_sales_use_case),
) -> SalesPointResponse:
    """Create or replace the sales figures of a product for one day."""
    point = await use_case.execute(request)
    return SalesPointResponse.from_entity(point)
