"""Record Movement Use Case: validated, atomic stock ledger entry."""

from dataclasses import dataclass

from stockroom.application.dto.requests import StockMovementRequest
from stockroom.application.dto.responses import (
    MovementListResponse,
    MovementResultResponse,
    ProductResponse,
    StockMovementResponse,
)
from stockroom.config import get_logger
from stockroom.core.entities.inventory import MovementType, StockMovement
from stockroom.core.entities.product import Product
from stockroom.core.interfaces.inventory_store import IInventoryStore
from stockroom.core.services import stock_ledger

logger = get_logger(__name__)


@dataclass
class MovementResult:
    """Result of recording a movement."""

    movement: StockMovement
    product: Product


class RecordMovementUseCase:
    """Apply one IN/OUT/ADJUSTMENT/TRANSFER movement to a product."""

    def __init__(self, inventory_store: IInventoryStore | None = None):
        self._inventory_store = inventory_store

    async def _get_inventory_store(self) -> IInventoryStore:
        if self._inventory_store is None:
            from stockroom.infrastructure.storage.sqlite import get_inventory_store

            self._inventory_store = await get_inventory_store()
        return self._inventory_store

    async def execute(self, request: StockMovementRequest) -> MovementResult:
        """
        Validate and apply the movement.

        Raises ValidationError before any write for an unknown type or a
        non-positive quantity, ProductNotFoundError for unknown products.
        """
        movement_type = stock_ledger.validate_movement(
            request.movement_type, request.quantity
        )
        logger.info(
            "record_movement_started",
            product_id=request.product_id,
            type=movement_type.value,
            quantity=request.quantity,
        )

        store = await self._get_inventory_store()
        movement, product = await store.apply_movement(
            request.product_id,
            movement_type,
            request.quantity,
            reason=request.reason,
            reference=request.reference,
        )

        logger.info(
            "record_movement_complete",
            movement_id=movement.id,
            product_id=product.id,
            stock=product.current_stock,
            status=product.status.value,
        )
        return MovementResult(movement=movement, product=product)

    def to_response(self, result: MovementResult) -> MovementResultResponse:
        """Convert result to API response."""
        return MovementResultResponse(
            movement=StockMovementResponse.from_entity(result.movement),
            product=ProductResponse.from_entity(result.product),
        )


class ListMovementsUseCase:
    """Paginated movement history, newest first."""

    def __init__(self, inventory_store: IInventoryStore | None = None):
        self._inventory_store = inventory_store

    async def _get_inventory_store(self) -> IInventoryStore:
        if self._inventory_store is None:
            from stockroom.infrastructure.storage.sqlite import get_inventory_store

            self._inventory_store = await get_inventory_store()
        return self._inventory_store

    async def execute(
        self,
        product_id: int | None = None,
        movement_type: MovementType | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> MovementListResponse:
        store = await self._get_inventory_store()
        movements = await store.list_movements(
            product_id=product_id,
            movement_type=movement_type,
            limit=limit,
            offset=offset,
        )
        total = await store.count_movements(
            product_id=product_id, movement_type=movement_type
        )
        return MovementListResponse(
            movements=[StockMovementResponse.from_entity(m) for m in movements],
            total=total,
            limit=limit,
            offset=offset,
            has_more=offset + len(movements) < total,
        )
