"""Product catalog use cases: create, update, deactivate, reorder points."""

from stockroom.application.dto.requests import (
    CreateProductRequest,
    ReorderPointRequest,
    UpdateProductRequest,
)
from stockroom.config import get_logger
from stockroom.core.entities.product import Product, ProductStatus, ReorderPoint
from stockroom.core.exceptions import ProductNotFoundError, ValidationError
from stockroom.core.interfaces.inventory_store import IInventoryStore
from stockroom.core.interfaces.product_store import IProductStore
from stockroom.core.services.stock_ledger import derive_status

logger = get_logger(__name__)

OPENING_BALANCE_REASON = "Opening balance"

# Product fields an update may clear
NULLABLE_FIELDS = frozenset({"description"})


class _ProductUseCase:
    """Lazy store resolution shared by the product use cases."""

    def __init__(
        self,
        product_store: IProductStore | None = None,
        inventory_store: IInventoryStore | None = None,
    ):
        self._product_store = product_store
        self._inventory_store = inventory_store

    async def _get_product_store(self) -> IProductStore:
        if self._product_store is None:
            from stockroom.infrastructure.storage.sqlite import get_product_store

            self._product_store = await get_product_store()
        return self._product_store

    async def _get_inventory_store(self) -> IInventoryStore:
        if self._inventory_store is None:
            from stockroom.infrastructure.storage.sqlite import get_inventory_store

            self._inventory_store = await get_inventory_store()
        return self._inventory_store

    async def _require_product(self, product_id: int) -> Product:
        store = await self._get_product_store()
        product = await store.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product


class CreateProductUseCase(_ProductUseCase):
    """Create a product, booking opening stock through the ledger."""

    async def execute(self, request: CreateProductRequest) -> Product:
        if request.min_stock > request.max_stock:
            raise ValidationError(
                "min_stock", "must not exceed max_stock", request.min_stock
            )

        product = Product(
            name=request.name,
            category=request.category,
            sku=request.sku,
            description=request.description,
            current_stock=0,
            min_stock=request.min_stock,
            max_stock=request.max_stock,
            unit_price=request.unit_price,
            lead_time_days=request.lead_time_days,
            status=derive_status(0, request.min_stock),
            trend_score=request.trend_score,
        )
        if request.initial_stock > 0:
            inventory = await self._get_inventory_store()
            _, product = await inventory.open_product(
                product, request.initial_stock, reason=OPENING_BALANCE_REASON
            )
        else:
            store = await self._get_product_store()
            product = await store.create_product(product)

        logger.info(
            "product_registered",
            product_id=product.id,
            sku=product.sku,
            stock=product.current_stock,
        )
        return product


class UpdateProductUseCase(_ProductUseCase):
    """Apply a partial update. Stock is never edited directly."""

    async def execute(self, product_id: int, request: UpdateProductRequest) -> Product:
        product = await self._require_product(product_id)

        changes = {
            field: value
            for field, value in request.model_dump(
                exclude_unset=True, exclude={"discontinued"}
            ).items()
            if value is not None or field in NULLABLE_FIELDS
        }
        updated = product.model_copy(update=changes)
        if updated.min_stock > updated.max_stock:
            raise ValidationError(
                "min_stock", "must not exceed max_stock", updated.min_stock
            )

        if request.discontinued is True:
            updated.status = ProductStatus.DISCONTINUED
        elif request.discontinued is False:
            # Any non-discontinued status lets the store re-derive it
            updated.status = ProductStatus.IN_STOCK

        store = await self._get_product_store()
        updated = await store.update_product(updated)
        logger.info(
            "product_changed",
            product_id=product_id,
            fields=sorted(request.model_dump(exclude_unset=True)),
            status=updated.status.value,
        )
        return updated


class DeactivateProductUseCase(_ProductUseCase):
    """Soft-delete: the product and its ledger are kept."""

    async def execute(self, product_id: int) -> Product:
        product = await self._require_product(product_id)
        if not product.is_active:
            return product

        product.is_active = False
        store = await self._get_product_store()
        product = await store.update_product(product)
        logger.info("product_deactivated", product_id=product_id)
        return product


class SetReorderPointUseCase(_ProductUseCase):
    """Create or replace the reorder point of a product."""

    async def execute(self, product_id: int, request: ReorderPointRequest) -> ReorderPoint:
        await self._require_product(product_id)
        store = await self._get_product_store()
        reorder_point = await store.upsert_reorder_point(
            ReorderPoint(product_id=product_id, **request.model_dump())
        )
        logger.info(
            "reorder_point_set",
            product_id=product_id,
            reorder_level=reorder_point.reorder_level,
            reorder_quantity=reorder_point.reorder_quantity,
        )
        return reorder_point
