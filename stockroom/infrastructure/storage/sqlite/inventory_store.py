"""SQLite implementation of the stock movement ledger."""

from datetime import datetime

import aiosqlite

from stockroom.config import get_logger
from stockroom.core.entities.inventory import MovementType, StockMovement
from stockroom.core.entities.product import Product
from stockroom.core.exceptions import ProductNotFoundError
from stockroom.core.interfaces.inventory_store import IInventoryStore
from stockroom.core.services import stock_ledger
from stockroom.infrastructure.storage.sqlite.connection import ConnectionPool
from stockroom.infrastructure.storage.sqlite.product_store import (
    insert_product,
    parse_timestamp,
    row_to_product,
)

logger = get_logger(__name__)


async def insert_movement(conn: aiosqlite.Connection, movement: StockMovement) -> int:
    cursor = await conn.execute(
        """
        INSERT INTO stock_movements (
            product_id, movement_type, quantity,
            reason, reference, created_at
        ) VALUES (?, ?, ?, ?, ?, ?)
        """,
        (
            movement.product_id,
            movement.movement_type.value,
            movement.quantity,
            movement.reason,
            movement.reference,
            movement.created_at.isoformat(),
        ),
    )
    return cursor.lastrowid  # type: ignore[return-value]


class SQLiteInventoryStore(IInventoryStore):
    """SQLite implementation of stock movement storage."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    async def apply_movement(
        self,
        product_id: int,
        movement_type: MovementType,
        quantity: int,
        reason: str | None = None,
        reference: str | None = None,
    ) -> tuple[StockMovement, Product]:
        """Append a movement and update the product total in one transaction."""
        async with self._pool.transaction(immediate=True) as conn:
            cursor = await conn.execute(
                "SELECT * FROM products WHERE id = ?", (product_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                raise ProductNotFoundError(product_id)

            before = row_to_product(row)
            product = stock_ledger.apply_movement(before, movement_type, quantity)
            product.updated_at = datetime.utcnow()

            await conn.execute(
                """
                UPDATE products SET
                    current_stock = ?, status = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    product.current_stock,
                    product.status.value,
                    product.updated_at.isoformat(),
                    product_id,
                ),
            )

            movement = StockMovement(
                product_id=product_id,
                movement_type=movement_type,
                quantity=quantity,
                reason=reason,
                reference=reference,
            )
            movement.id = await insert_movement(conn, movement)

        logger.info(
            "stock_movement_recorded",
            movement_id=movement.id,
            product_id=product_id,
            type=movement.movement_type.value,
            qty=quantity,
            old_stock=before.current_stock,
            new_stock=product.current_stock,
        )
        return movement, product

    async def open_product(
        self,
        product: Product,
        opening_stock: int,
        reason: str | None = None,
    ) -> tuple[StockMovement, Product]:
        """
        Insert a product together with its opening ADJUSTMENT.

        Either both rows are written or neither is, so a failed attempt
        can be retried with the same SKU.
        """
        now = datetime.utcnow()
        product.created_at = now
        product.updated_at = now
        product = stock_ledger.apply_movement(
            product.model_copy(update={"current_stock": 0}),
            MovementType.ADJUSTMENT,
            opening_stock,
        )

        async with self._pool.transaction(immediate=True) as conn:
            product.id = await insert_product(conn, product)
            movement = StockMovement(
                product_id=product.id,
                movement_type=MovementType.ADJUSTMENT,
                quantity=opening_stock,
                reason=reason,
                created_at=now,
            )
            movement.id = await insert_movement(conn, movement)

        logger.info(
            "product_opened",
            product_id=product.id,
            sku=product.sku,
            movement_id=movement.id,
            stock=product.current_stock,
        )
        return movement, product

    async def list_movements(
        self,
        product_id: int | None = None,
        movement_type: MovementType | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[StockMovement]:
        """List movements, newest first."""
        where, params = self._filters(product_id, movement_type)
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM stock_movements
                {where}
                ORDER BY id DESC
                LIMIT ? OFFSET ?
                """,
                (*params, limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_movement(row) for row in rows]

    async def count_movements(
        self,
        product_id: int | None = None,
        movement_type: MovementType | None = None,
    ) -> int:
        """Count movements matching the filters."""
        where, params = self._filters(product_id, movement_type)
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                f"SELECT COUNT(*) FROM stock_movements {where}", tuple(params)
            )
            row = await cursor.fetchone()
            return row[0]

    async def get_ledger(self, product_id: int) -> list[StockMovement]:
        """All movements of a product, oldest first."""
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM stock_movements
                WHERE product_id = ?
                ORDER BY id ASC
                """,
                (product_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_movement(row) for row in rows]

    @staticmethod
    def _filters(
        product_id: int | None, movement_type: MovementType | None
    ) -> tuple[str, list]:
        clauses: list[str] = []
        params: list = []
        if product_id is not None:
            clauses.append("product_id = ?")
            params.append(product_id)
        if movement_type is not None:
            clauses.append("movement_type = ?")
            params.append(movement_type.value)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        return where, params

    @staticmethod
    def _row_to_movement(row: aiosqlite.Row) -> StockMovement:
        """Convert a database row to a StockMovement entity."""
        return StockMovement(
            id=row["id"],
            product_id=row["product_id"],
            movement_type=MovementType(row["movement_type"]),
            quantity=row["quantity"],
            reason=row["reason"],
            reference=row["reference"],
            created_at=parse_timestamp(row["created_at"]),
        )
