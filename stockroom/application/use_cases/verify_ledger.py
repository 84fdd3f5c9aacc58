"""Verify Ledger Use Case: replay movements against the running total."""

from stockroom.application.dto.responses import LedgerVerificationResponse
from stockroom.config import get_logger
from stockroom.core.exceptions import ConsistencyError, ProductNotFoundError
from stockroom.core.interfaces.inventory_store import IInventoryStore
from stockroom.core.interfaces.product_store import IProductStore
from stockroom.core.services.stock_ledger import replay

logger = get_logger(__name__)


class VerifyLedgerUseCase:
    """
    Fold a product's full movement history from zero and compare the
    result with its stored current_stock.
    """

    def __init__(
        self,
        product_store: IProductStore | None = None,
        inventory_store: IInventoryStore | None = None,
    ):
        self._product_store = product_store
        self._inventory_store = inventory_store

    async def _get_stores(self) -> tuple[IProductStore, IInventoryStore]:
        if self._product_store is None or self._inventory_store is None:
            from stockroom.infrastructure.storage.sqlite import (
                get_inventory_store,
                get_product_store,
            )

            self._product_store = self._product_store or await get_product_store()
            self._inventory_store = self._inventory_store or await get_inventory_store()
        return self._product_store, self._inventory_store

    async def execute(self, product_id: int, strict: bool = False) -> LedgerVerificationResponse:
        """
        Replay the ledger.

        With strict=True a mismatch raises ConsistencyError instead of
        being reported.
        """
        product_store, inventory_store = await self._get_stores()
        product = await product_store.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        movements = await inventory_store.get_ledger(product_id)
        replayed = replay(movements)
        consistent = replayed == product.current_stock

        if not consistent:
            logger.error(
                "ledger_mismatch",
                product_id=product_id,
                recorded=product.current_stock,
                replayed=replayed,
                movements=len(movements),
            )
            if strict:
                raise ConsistencyError(product_id, product.current_stock, replayed)

        return LedgerVerificationResponse(
            product_id=product_id,
            recorded_stock=product.current_stock,
            replayed_stock=replayed,
            movement_count=len(movements),
            consistent=consistent,
        )
