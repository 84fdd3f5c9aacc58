"""Abstract interface for the stock movement ledger."""

from abc import ABC, abstractmethod

from stockroom.core.entities.inventory import MovementType, StockMovement
from stockroom.core.entities.product import Product


class IInventoryStore(ABC):
    """Interface for stock movement persistence."""

    @abstractmethod
    async def apply_movement(
        self,
        product_id: int,
        movement_type: MovementType,
        quantity: int,
        reason: str | None = None,
        reference: str | None = None,
    ) -> tuple[StockMovement, Product]:
        """
        Append a movement and update the product's running total.

        Both writes happen in one transaction. Raises
        ProductNotFoundError if the product does not exist.
        """
        pass

    @abstractmethod
    async def open_product(
        self,
        product: Product,
        opening_stock: int,
        reason: str | None = None,
    ) -> tuple[StockMovement, Product]:
        """
        Create a product and book its opening stock as an ADJUSTMENT.

        Both rows are written in one transaction. Raises DuplicateSkuError
        if the SKU is taken.
        """
        pass

    @abstractmethod
    async def list_movements(
        self,
        product_id: int | None = None,
        movement_type: MovementType | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[StockMovement]:
        """List movements, newest first."""
        pass

    @abstractmethod
    async def count_movements(
        self,
        product_id: int | None = None,
        movement_type: MovementType | None = None,
    ) -> int:
        """Count movements matching the filters."""
        pass

    @abstractmethod
    async def get_ledger(self, product_id: int) -> list[StockMovement]:
        """All movements of a product, oldest first."""
        pass
