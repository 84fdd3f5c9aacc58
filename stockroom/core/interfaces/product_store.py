"""Abstract interface for product catalog storage."""

from abc import ABC, abstractmethod

from stockroom.core.entities.product import Product, ProductStatus, ReorderPoint


class IProductStore(ABC):
    """Interface for product and reorder point persistence."""

    @abstractmethod
    async def create_product(self, product: Product) -> Product:
        """Create a new product. Raises DuplicateSkuError on SKU clash."""
        pass

    @abstractmethod
    async def get_product(self, product_id: int) -> Product | None:
        """Get product by ID."""
        pass

    @abstractmethod
    async def update_product(self, product: Product) -> Product:
        """Update descriptive fields, thresholds, status and active flag."""
        pass

    @abstractmethod
    async def list_products(
        self,
        category: str | None = None,
        status: ProductStatus | None = None,
        search: str | None = None,
        active_only: bool = True,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Product]:
        """List products with optional filters."""
        pass

    @abstractmethod
    async def list_active(self) -> list[Product]:
        """List every active product."""
        pass

    @abstractmethod
    async def count_by_status(self) -> dict[ProductStatus, int]:
        """Count active products per status."""
        pass

    @abstractmethod
    async def get_reorder_point(self, product_id: int) -> ReorderPoint | None:
        """Get the reorder point configured for a product."""
        pass

    @abstractmethod
    async def upsert_reorder_point(self, reorder_point: ReorderPoint) -> ReorderPoint:
        """Create or replace the reorder point of a product."""
        pass

    @abstractmethod
    async def list_active_reorder_points(self) -> dict[int, ReorderPoint]:
        """Active reorder points keyed by product ID."""
        pass
