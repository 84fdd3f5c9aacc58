"""Reorder recommendations for products running low."""

from stockroom.application.dto.responses import (
    ProductResponse,
    ReorderPointResponse,
    ReorderRecommendationResponse,
)
from stockroom.core.entities.alert import AlertPriority
from stockroom.core.entities.product import Product, ProductStatus, ReorderPoint
from stockroom.core.interfaces.product_store import IProductStore

NEEDS_REORDER = (ProductStatus.OUT_OF_STOCK, ProductStatus.LOW_STOCK)


def reorder_urgency(product: Product) -> AlertPriority:
    """CRITICAL when out, HIGH at half the minimum or below, else MEDIUM."""
    if product.status == ProductStatus.OUT_OF_STOCK:
        return AlertPriority.CRITICAL
    if product.current_stock <= product.min_stock * 0.5:
        return AlertPriority.HIGH
    return AlertPriority.MEDIUM


def suggested_quantity(product: Product, reorder_point: ReorderPoint | None) -> int:
    """Configured reorder quantity, or enough to refill to max_stock."""
    if reorder_point is not None:
        return reorder_point.reorder_quantity
    return max(0, product.max_stock - product.current_stock)


class ReorderRecommendationsUseCase:
    """List active low/out-of-stock products with a suggested order."""

    def __init__(self, product_store: IProductStore | None = None):
        self._product_store = product_store

    async def _get_product_store(self) -> IProductStore:
        if self._product_store is None:
            from stockroom.infrastructure.storage.sqlite import get_product_store

            self._product_store = await get_product_store()
        return self._product_store

    async def execute(self) -> list[ReorderRecommendationResponse]:
        store = await self._get_product_store()
        products = [p for p in await store.list_active() if p.status in NEEDS_REORDER]
        reorder_points = await store.list_active_reorder_points()

        recommendations = []
        for product in products:
            reorder_point = reorder_points.get(product.id)  # type: ignore[arg-type]
            recommendations.append(
                ReorderRecommendationResponse(
                    product=ProductResponse.from_entity(product),
                    reorder_point=(
                        ReorderPointResponse.from_entity(reorder_point)
                        if reorder_point
                        else None
                    ),
                    suggested_quantity=suggested_quantity(product, reorder_point),
                    urgency=reorder_urgency(product).value,
                )
            )

        recommendations.sort(key=lambda r: AlertPriority(r.urgency).rank, reverse=True)
        return recommendations
