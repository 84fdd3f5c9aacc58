"""SQLite implementation of product catalog storage."""

from datetime import datetime

import aiosqlite

from stockroom.config import get_logger
from stockroom.core.entities.product import Product, ProductStatus, ReorderPoint
from stockroom.core.exceptions import DuplicateSkuError, ProductNotFoundError
from stockroom.core.interfaces.product_store import IProductStore
from stockroom.core.services.stock_ledger import derive_status
from stockroom.infrastructure.storage.sqlite.connection import ConnectionPool

logger = get_logger(__name__)


def parse_timestamp(value: str | None) -> datetime:
    """Parse an ISO timestamp column, defaulting to now."""
    if value:
        try:
            return datetime.fromisoformat(value)
        except (ValueError, TypeError):
            pass
    return datetime.utcnow()


async def insert_product(conn: aiosqlite.Connection, product: Product) -> int:
    """Insert a product row on an open connection; returns the new id."""
    try:
        cursor = await conn.execute(
            """
            INSERT INTO products (
                name, category, sku, description, current_stock,
                min_stock, max_stock, unit_price, lead_time_days,
                status, trend_score, is_active, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                product.name,
                product.category,
                product.sku,
                product.description,
                product.current_stock,
                product.min_stock,
                product.max_stock,
                product.unit_price,
                product.lead_time_days,
                product.status.value,
                product.trend_score,
                1 if product.is_active else 0,
                product.created_at.isoformat(),
                product.updated_at.isoformat(),
            ),
        )
    except aiosqlite.IntegrityError as e:
        if "sku" in str(e).lower():
            raise DuplicateSkuError(product.sku) from e
        raise
    return cursor.lastrowid  # type: ignore[return-value]


class SQLiteProductStore(IProductStore):
    """SQLite implementation of product and reorder point storage."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    async def create_product(self, product: Product) -> Product:
        """Create a new product."""
        now = datetime.utcnow()
        product.created_at = now
        product.updated_at = now
        async with self._pool.transaction() as conn:
            product.id = await insert_product(conn, product)

        logger.info("product_created", product_id=product.id, sku=product.sku)
        return product

    async def get_product(self, product_id: int) -> Product | None:
        """Get product by ID."""
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT * FROM products WHERE id = ?", (product_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return row_to_product(row)

    async def update_product(self, product: Product) -> Product:
        """
        Update descriptive fields, thresholds, status and active flag.

        current_stock is owned by the movement ledger and is not written
        here. Status is re-derived from the stored stock in the same
        transaction; a DISCONTINUED status is kept as given.
        """
        product.updated_at = datetime.utcnow()
        async with self._pool.transaction(immediate=True) as conn:
            cursor = await conn.execute(
                "SELECT current_stock FROM products WHERE id = ?", (product.id,)
            )
            row = await cursor.fetchone()
            if row is None:
                raise ProductNotFoundError(product.id)  # type: ignore[arg-type]

            product.current_stock = row["current_stock"]
            product.status = derive_status(
                product.current_stock, product.min_stock, product.status
            )
            await conn.execute(
                """
                UPDATE products SET
                    name = ?, category = ?, description = ?,
                    min_stock = ?, max_stock = ?, unit_price = ?,
                    lead_time_days = ?, status = ?, trend_score = ?,
                    is_active = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    product.name,
                    product.category,
                    product.description,
                    product.min_stock,
                    product.max_stock,
                    product.unit_price,
                    product.lead_time_days,
                    product.status.value,
                    product.trend_score,
                    1 if product.is_active else 0,
                    product.updated_at.isoformat(),
                    product.id,
                ),
            )
        logger.info("product_updated", product_id=product.id)
        return product

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
        clauses: list[str] = []
        params: list = []
        if active_only:
            clauses.append("is_active = 1")
        if category:
            clauses.append("category = ?")
            params.append(category)
        if status is not None:
            clauses.append("status = ?")
            params.append(status.value)
        if search:
            clauses.append("(name LIKE ? OR sku LIKE ?)")
            params.extend([f"%{search}%", f"%{search}%"])

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM products
                {where}
                ORDER BY name
                LIMIT ? OFFSET ?
                """,
                (*params, limit, offset),
            )
            rows = await cursor.fetchall()
            return [row_to_product(row) for row in rows]

    async def list_active(self) -> list[Product]:
        """List every active product."""
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT * FROM products WHERE is_active = 1 ORDER BY id"
            )
            rows = await cursor.fetchall()
            return [row_to_product(row) for row in rows]

    async def count_by_status(self) -> dict[ProductStatus, int]:
        """Count active products per status."""
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                """
                SELECT status, COUNT(*) AS n FROM products
                WHERE is_active = 1
                GROUP BY status
                """
            )
            rows = await cursor.fetchall()
        counts = {status: 0 for status in ProductStatus}
        for row in rows:
            counts[ProductStatus(row["status"])] = row["n"]
        return counts

    async def get_reorder_point(self, product_id: int) -> ReorderPoint | None:
        """Get the reorder point configured for a product."""
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT * FROM reorder_points WHERE product_id = ?", (product_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_reorder_point(row)

    async def upsert_reorder_point(self, reorder_point: ReorderPoint) -> ReorderPoint:
        """Create or replace the reorder point of a product."""
        async with self._pool.transaction() as conn:
            await conn.execute(
                """
                INSERT INTO reorder_points (
                    product_id, reorder_level, reorder_quantity,
                    lead_time_days, safety_stock, is_active
                ) VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(product_id) DO UPDATE SET
                    reorder_level = excluded.reorder_level,
                    reorder_quantity = excluded.reorder_quantity,
                    lead_time_days = excluded.lead_time_days,
                    safety_stock = excluded.safety_stock,
                    is_active = excluded.is_active
                """,
                (
                    reorder_point.product_id,
                    reorder_point.reorder_level,
                    reorder_point.reorder_quantity,
                    reorder_point.lead_time_days,
                    reorder_point.safety_stock,
                    1 if reorder_point.is_active else 0,
                ),
            )
            cursor = await conn.execute(
                "SELECT id FROM reorder_points WHERE product_id = ?",
                (reorder_point.product_id,),
            )
            row = await cursor.fetchone()
            reorder_point.id = row["id"]
        logger.info(
            "reorder_point_saved",
            product_id=reorder_point.product_id,
            reorder_level=reorder_point.reorder_level,
        )
        return reorder_point

    async def list_active_reorder_points(self) -> dict[int, ReorderPoint]:
        """Active reorder points keyed by product ID."""
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT * FROM reorder_points WHERE is_active = 1"
            )
            rows = await cursor.fetchall()
        points = [self._row_to_reorder_point(row) for row in rows]
        return {p.product_id: p for p in points}

    @staticmethod
    def _row_to_reorder_point(row: aiosqlite.Row) -> ReorderPoint:
        return ReorderPoint(
            id=row["id"],
            product_id=row["product_id"],
            reorder_level=row["reorder_level"],
            reorder_quantity=row["reorder_quantity"],
            lead_time_days=row["lead_time_days"],
            safety_stock=row["safety_stock"],
            is_active=bool(row["is_active"]),
        )


def row_to_product(row: aiosqlite.Row) -> Product:
    """Convert a database row to a Product entity."""
    return Product(
        id=row["id"],
        name=row["name"],
        category=row["category"],
        sku=row["sku"],
        description=row["description"],
        current_stock=row["current_stock"],
        min_stock=row["min_stock"],
        max_stock=row["max_stock"],
        unit_price=float(row["unit_price"]),
        lead_time_days=row["lead_time_days"],
        status=ProductStatus(row["status"]),
        trend_score=float(row["trend_score"]),
        is_active=bool(row["is_active"]),
        created_at=parse_timestamp(row["created_at"]),
        updated_at=parse_timestamp(row["updated_at"]),
    )
