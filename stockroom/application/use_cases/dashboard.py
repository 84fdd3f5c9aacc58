"""Dashboard analytics over active products, movements and alerts."""

from collections import defaultdict

from stockroom.application.dto.responses import (
    AlertStatsResponse,
    CategorySummaryResponse,
    DashboardResponse,
    DashboardSummaryResponse,
    StockMovementResponse,
)
from stockroom.core.entities.product import Product, ProductStatus
from stockroom.core.interfaces.alert_store import IAlertStore
from stockroom.core.interfaces.inventory_store import IInventoryStore
from stockroom.core.interfaces.product_store import IProductStore

RECENT_MOVEMENTS = 10


def summarize_products(products: list[Product]) -> DashboardSummaryResponse:
    return DashboardSummaryResponse(
        total_products=len(products),
        low_stock_products=sum(1 for p in products if p.status == ProductStatus.LOW_STOCK),
        out_of_stock_products=sum(
            1 for p in products if p.status == ProductStatus.OUT_OF_STOCK
        ),
        total_stock_units=sum(p.current_stock for p in products),
        total_stock_value=round(sum(p.stock_value for p in products), 2),
    )


def summarize_categories(products: list[Product]) -> list[CategorySummaryResponse]:
    counts: dict[str, int] = defaultdict(int)
    stock: dict[str, int] = defaultdict(int)
    for product in products:
        counts[product.category] += 1
        stock[product.category] += product.current_stock
    return [
        CategorySummaryResponse(category=c, product_count=counts[c], total_stock=stock[c])
        for c in sorted(counts, key=lambda c: (-counts[c], c))
    ]


class GetDashboardUseCase:
    """Headline figures for the operator dashboard."""

    def __init__(
        self,
        product_store: IProductStore | None = None,
        inventory_store: IInventoryStore | None = None,
        alert_store: IAlertStore | None = None,
    ):
        self._product_store = product_store
        self._inventory_store = inventory_store
        self._alert_store = alert_store

    async def _resolve_stores(self) -> None:
        from stockroom.infrastructure.storage.sqlite import (
            get_alert_store,
            get_inventory_store,
            get_product_store,
        )

        if self._product_store is None:
            self._product_store = await get_product_store()
        if self._inventory_store is None:
            self._inventory_store = await get_inventory_store()
        if self._alert_store is None:
            self._alert_store = await get_alert_store()

    async def execute(self) -> DashboardResponse:
        await self._resolve_stores()
        assert self._product_store and self._inventory_store and self._alert_store

        products = await self._product_store.list_active()
        movements = await self._inventory_store.list_movements(limit=RECENT_MOVEMENTS)
        stats = await self._alert_store.get_stats()

        return DashboardResponse(
            summary=summarize_products(products),
            recent_movements=[StockMovementResponse.from_entity(m) for m in movements],
            categories=summarize_categories(products),
            alerts=AlertStatsResponse(**stats),
        )
