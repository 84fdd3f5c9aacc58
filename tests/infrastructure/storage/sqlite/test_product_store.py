"""Tests for SQLiteProductStore."""

import pytest

from stockroom.core.entities import Product, ProductStatus, ReorderPoint
from stockroom.core.exceptions import DuplicateSkuError, ProductNotFoundError
from stockroom.infrastructure.storage.sqlite import SQLiteProductStore


@pytest.fixture
def store(pool) -> SQLiteProductStore:
    return SQLiteProductStore(pool)


def new_product(sku: str = "WM-001", **overrides) -> Product:
    data = {
        "name": "Wireless Mouse",
        "category": "Electronics",
        "sku": sku,
        "current_stock": 0,
        "min_stock": 10,
        "status": ProductStatus.OUT_OF_STOCK,
    }
    data.update(overrides)
    return Product(**data)


class TestCreateAndGet:
    """Tests for create_product() and get_product()."""

    async def test_round_trip(self, store):
        created = await store.create_product(new_product(unit_price=19.5))

        fetched = await store.get_product(created.id)

        assert created.id is not None
        assert fetched.sku == "WM-001"
        assert fetched.unit_price == 19.5
        assert fetched.status == ProductStatus.OUT_OF_STOCK
        assert fetched.is_active is True

    async def test_missing_returns_none(self, store):
        assert await store.get_product(404) is None

    async def test_duplicate_sku_rejected(self, store):
        await store.create_product(new_product())

        with pytest.raises(DuplicateSkuError):
            await store.create_product(new_product(name="Other"))


class TestUpdate:
    """Tests for update_product()."""

    async def test_updates_fields(self, store):
        product = await store.create_product(new_product())

        product.name = "Ergonomic Mouse"
        product.min_stock = 0
        updated = await store.update_product(product)

        fetched = await store.get_product(product.id)
        assert fetched.name == "Ergonomic Mouse"
        assert updated.status == ProductStatus.OUT_OF_STOCK

    async def test_stock_is_not_written(self, store, pool):
        """current_stock stays as stored and status follows it."""
        product = await store.create_product(new_product())
        async with pool.transaction() as conn:
            await conn.execute(
                "UPDATE products SET current_stock = 40 WHERE id = ?", (product.id,)
            )

        product.current_stock = 999
        updated = await store.update_product(product)

        assert updated.current_stock == 40
        assert updated.status == ProductStatus.IN_STOCK
        assert (await store.get_product(product.id)).current_stock == 40

    async def test_discontinued_kept(self, store):
        product = await store.create_product(new_product())

        product.status = ProductStatus.DISCONTINUED
        updated = await store.update_product(product)

        assert updated.status == ProductStatus.DISCONTINUED

    async def test_missing_product(self, store):
        with pytest.raises(ProductNotFoundError):
            await store.update_product(new_product().model_copy(update={"id": 77}))


class TestListing:
    """Tests for list_products(), list_active() and count_by_status()."""

    @pytest.fixture
    async def catalog(self, store):
        await store.create_product(new_product("A-1", name="Alpha", category="Tools"))
        await store.create_product(
            new_product(
                "B-1",
                name="Bravo",
                category="Office",
                current_stock=50,
                status=ProductStatus.IN_STOCK,
            )
        )
        hidden = await store.create_product(new_product("C-1", name="Charlie"))
        hidden.is_active = False
        await store.update_product(hidden)

    async def test_active_only_by_default(self, store, catalog):
        names = [p.name for p in await store.list_products()]
        assert names == ["Alpha", "Bravo"]

    async def test_include_inactive(self, store, catalog):
        products = await store.list_products(active_only=False)
        assert len(products) == 3

    async def test_filters(self, store, catalog):
        assert [p.sku for p in await store.list_products(category="Office")] == ["B-1"]
        by_status = await store.list_products(status=ProductStatus.OUT_OF_STOCK)
        assert [p.sku for p in by_status] == ["A-1"]
        assert [p.sku for p in await store.list_products(search="brav")] == ["B-1"]

    async def test_pagination(self, store, catalog):
        page = await store.list_products(limit=1, offset=1)
        assert [p.name for p in page] == ["Bravo"]

    async def test_list_active(self, store, catalog):
        assert [p.sku for p in await store.list_active()] == ["A-1", "B-1"]

    async def test_count_by_status(self, store, catalog):
        counts = await store.count_by_status()
        assert counts[ProductStatus.OUT_OF_STOCK] == 1
        assert counts[ProductStatus.IN_STOCK] == 1
        assert counts[ProductStatus.DISCONTINUED] == 0


class TestReorderPoints:
    """Tests for reorder point persistence."""

    async def test_upsert_replaces(self, store):
        product = await store.create_product(new_product())

        first = await store.upsert_reorder_point(
            ReorderPoint(product_id=product.id, reorder_level=20, reorder_quantity=100)
        )
        second = await store.upsert_reorder_point(
            ReorderPoint(product_id=product.id, reorder_level=5, reorder_quantity=40)
        )

        fetched = await store.get_reorder_point(product.id)
        assert first.id == second.id
        assert fetched.reorder_level == 5
        assert fetched.reorder_quantity == 40

    async def test_missing(self, store):
        assert await store.get_reorder_point(1) is None

    async def test_active_map(self, store):
        a = await store.create_product(new_product("A-1"))
        b = await store.create_product(new_product("B-1"))
        await store.upsert_reorder_point(
            ReorderPoint(product_id=a.id, reorder_level=1, reorder_quantity=1)
        )
        await store.upsert_reorder_point(
            ReorderPoint(
                product_id=b.id, reorder_level=1, reorder_quantity=1, is_active=False
            )
        )

        points = await store.list_active_reorder_points()

        assert list(points) == [a.id]
