"""API tests for product endpoints."""

from unittest.mock import AsyncMock

import pytest

from stockroom.api.dependencies import (
    get_create_product_use_case,
    get_deactivate_product_use_case,
    get_prod_store,
    get_set_reorder_point_use_case,
    get_update_product_use_case,
)
from stockroom.api.main import app
from stockroom.application.use_cases import (
    CreateProductUseCase,
    DeactivateProductUseCase,
    SetReorderPointUseCase,
    UpdateProductUseCase,
)
from stockroom.core.entities import MovementType, ProductStatus, ReorderPoint, StockMovement
from stockroom.core.exceptions import DuplicateSkuError


@pytest.fixture
def mock_product_store():
    store = AsyncMock()

    async def create_product(product):
        product.id = 1
        return product

    store.create_product.side_effect = create_product
    store.update_product.side_effect = lambda product: product
    store.upsert_reorder_point.side_effect = lambda rp: rp
    app.dependency_overrides[get_prod_store] = lambda: store
    return store


@pytest.fixture
def mock_inventory_store():
    return AsyncMock()


@pytest.fixture(autouse=True)
def product_use_cases(mock_product_store, mock_inventory_store):
    app.dependency_overrides[get_create_product_use_case] = lambda: CreateProductUseCase(
        mock_product_store, mock_inventory_store
    )
    app.dependency_overrides[get_update_product_use_case] = lambda: UpdateProductUseCase(
        mock_product_store
    )
    app.dependency_overrides[get_deactivate_product_use_case] = (
        lambda: DeactivateProductUseCase(mock_product_store)
    )
    app.dependency_overrides[get_set_reorder_point_use_case] = (
        lambda: SetReorderPointUseCase(mock_product_store)
    )


class TestProductsAPI:
    """Tests for /api/products."""

    async def test_list_products(self, async_client, mock_product_store, make_product):
        mock_product_store.list_products.return_value = [make_product()]

        response = await async_client.get(
            "/api/products", params={"category": "Electronics", "status": "IN_STOCK"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 1
        assert data["products"][0]["sku"] == "WM-001"
        kwargs = mock_product_store.list_products.await_args.kwargs
        assert kwargs["category"] == "Electronics"
        assert kwargs["status"] == ProductStatus.IN_STOCK
        assert kwargs["active_only"] is True

    async def test_get_product(self, async_client, mock_product_store, make_product):
        mock_product_store.get_product.return_value = make_product(current_stock=4)

        response = await async_client.get("/api/products/1")

        assert response.status_code == 200
        assert response.json()["current_stock"] == 4
        assert response.json()["stock_value"] == 100.0

    async def test_get_product_not_found(self, async_client, mock_product_store):
        mock_product_store.get_product.return_value = None

        response = await async_client.get("/api/products/42")

        assert response.status_code == 404
        data = response.json()
        assert data["error_code"] == "PRODUCT_NOT_FOUND"
        assert data["hint"]
        assert data["path"] == "/api/products/42"

    async def test_create_with_opening_stock(
        self, async_client, mock_inventory_store, mock_product_store, make_product
    ):
        mock_inventory_store.open_product.return_value = (
            StockMovement(product_id=1, movement_type=MovementType.ADJUSTMENT, quantity=30),
            make_product(current_stock=30),
        )

        response = await async_client.post(
            "/api/products",
            json={
                "name": "Wireless Mouse",
                "category": "Electronics",
                "sku": "WM-001",
                "initial_stock": 30,
                "min_stock": 10,
            },
        )

        assert response.status_code == 201
        assert response.json()["current_stock"] == 30
        mock_inventory_store.open_product.assert_awaited_once()
        mock_product_store.create_product.assert_not_awaited()

    async def test_create_duplicate_sku(self, async_client, mock_product_store):
        mock_product_store.create_product.side_effect = DuplicateSkuError("WM-001")

        response = await async_client.post(
            "/api/products",
            json={"name": "Mouse", "category": "Electronics", "sku": "WM-001"},
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "DUPLICATE_SKU"

    async def test_create_min_above_max(self, async_client):
        response = await async_client.post(
            "/api/products",
            json={
                "name": "Mouse",
                "category": "Electronics",
                "sku": "WM-001",
                "min_stock": 500,
                "max_stock": 100,
            },
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_create_missing_fields(self, async_client):
        response = await async_client.post("/api/products", json={"name": "Mouse"})

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_update_rejects_stock_edit(self, async_client):
        response = await async_client.put("/api/products/1", json={"current_stock": 5})

        assert response.status_code == 422

    async def test_update_rejects_null_fields(self, async_client, mock_product_store):
        for body in ({"is_active": None}, {"min_stock": None}):
            response = await async_client.put("/api/products/1", json=body)

            assert response.status_code == 422
            assert response.json()["error_code"] == "VALIDATION_ERROR"
        mock_product_store.update_product.assert_not_awaited()

    async def test_discontinue(self, async_client, mock_product_store, make_product):
        mock_product_store.get_product.return_value = make_product()

        response = await async_client.put("/api/products/1", json={"discontinued": True})

        assert response.status_code == 200
        assert response.json()["status"] == "DISCONTINUED"

    async def test_soft_delete(self, async_client, mock_product_store, make_product):
        mock_product_store.get_product.return_value = make_product()

        response = await async_client.delete("/api/products/1")

        assert response.status_code == 200
        assert response.json()["is_active"] is False


class TestReorderPointAPI:
    """Tests for /api/products/{id}/reorder-point."""

    async def test_get_missing(self, async_client, mock_product_store):
        mock_product_store.get_reorder_point.return_value = None

        response = await async_client.get("/api/products/1/reorder-point")

        assert response.status_code == 404
        assert response.json()["error_code"] == "REORDER_POINT_NOT_FOUND"

    async def test_get(self, async_client, mock_product_store):
        mock_product_store.get_reorder_point.return_value = ReorderPoint(
            id=3, product_id=1, reorder_level=20, reorder_quantity=100
        )

        response = await async_client.get("/api/products/1/reorder-point")

        assert response.status_code == 200
        assert response.json()["reorder_quantity"] == 100

    async def test_put(self, async_client, mock_product_store, make_product):
        mock_product_store.get_product.return_value = make_product()

        response = await async_client.put(
            "/api/products/1/reorder-point",
            json={"reorder_level": 20, "reorder_quantity": 100},
        )

        assert response.status_code == 200
        assert response.json()["product_id"] == 1
        assert response.json()["reorder_level"] == 20
