"""Pytest configuration and fixtures."""

import os
import tempfile
from collections.abc import AsyncGenerator, Callable
from datetime import date, timedelta
from pathlib import Path

# Keep settings away from ./data and background jobs off during tests
os.environ.setdefault("STORAGE_DATA_DIR", tempfile.mkdtemp(prefix="stockroom-test-"))
os.environ.setdefault("SCHEDULER_ENABLED", "false")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from stockroom.core.entities import Product, ProductStatus, SalesDataPoint
from stockroom.infrastructure.storage.sqlite import ConnectionPool
from stockroom.infrastructure.storage.sqlite.migrations import initialize_database


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest_asyncio.fixture
async def pool(temp_db_path: Path) -> AsyncGenerator[ConnectionPool, None]:
    """Connection pool over a freshly migrated database."""
    await initialize_database(temp_db_path, create_backup_before=False)
    connection_pool = ConnectionPool(temp_db_path, pool_size=2, busy_timeout=5000)
    await connection_pool.initialize()
    yield connection_pool
    await connection_pool.close()


@pytest.fixture
def make_product() -> Callable[..., Product]:
    """Factory for product entities with sensible defaults."""

    def _make(**overrides) -> Product:
        data = {
            "id": 1,
            "name": "Wireless Mouse",
            "category": "Electronics",
            "sku": "WM-001",
            "current_stock": 50,
            "min_stock": 10,
            "max_stock": 200,
            "unit_price": 25.0,
            "status": ProductStatus.IN_STOCK,
            "trend_score": 5.0,
        }
        data.update(overrides)
        return Product(**data)

    return _make


@pytest.fixture
def sales_history() -> Callable[..., list[SalesDataPoint]]:
    """Build consecutive daily sales rows ending on `end`."""

    def _build(
        actuals: list[float | None],
        product_id: int = 1,
        end: date = date(2024, 1, 14),
        forecast: float = 0.0,
    ) -> list[SalesDataPoint]:
        start = end - timedelta(days=len(actuals) - 1)
        return [
            SalesDataPoint(
                product_id=product_id,
                sales_date=start + timedelta(days=i),
                forecast_quantity=forecast,
                actual_quantity=actual,
            )
            for i, actual in enumerate(actuals)
        ]

    return _build


@pytest_asyncio.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Async client over the app; tests override dependencies as needed."""
    from stockroom.api.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
