"""Record Sales Use Case: upsert one day of sales for a product."""

from stockroom.application.dto.requests import SalesPointRequest
from stockroom.config import get_logger
from stockroom.core.entities.sales import SalesDataPoint
from stockroom.core.exceptions import ProductNotFoundError
from stockroom.core.interfaces.product_store import IProductStore
from stockroom.core.interfaces.sales_store import ISalesStore

logger = get_logger(__name__)


class RecordSalesUseCase:
    """Create or replace the (product, date) sales row."""

    def __init__(
        self,
        product_store: IProductStore | None = None,
        sales_store: ISalesStore | None = None,
    ):
        self._product_store = product_store
        self._sales_store = sales_store

    async def _get_stores(self) -> tuple[IProductStore, ISalesStore]:
        if self._product_store is None or self._sales_store is None:
            from stockroom.infrastructure.storage.sqlite import (
                get_product_store,
                get_sales_store,
            )

            self._product_store = self._product_store or await get_product_store()
            self._sales_store = self._sales_store or await get_sales_store()
        return self._product_store, self._sales_store

    async def execute(self, request: SalesPointRequest) -> SalesDataPoint:
        product_store, sales_store = await self._get_stores()
        if await product_store.get_product(request.product_id) is None:
            raise ProductNotFoundError(request.product_id)

        point = await sales_store.upsert_sales_point(
            SalesDataPoint(
                product_id=request.product_id,
                sales_date=request.sales_date,
                forecast_quantity=request.forecast_quantity,
                actual_quantity=request.actual_quantity,
            )
        )
        return point
