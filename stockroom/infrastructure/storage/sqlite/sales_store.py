"""SQLite implementation of sales history and forecast storage."""

from datetime import date

import aiosqlite

from stockroom.config import get_logger
from stockroom.core.entities.sales import (
    DailySalesTotal,
    ForecastAlgorithm,
    ForecastRecord,
    SalesDataPoint,
)
from stockroom.core.interfaces.sales_store import ISalesStore
from stockroom.infrastructure.storage.sqlite.connection import ConnectionPool
from stockroom.infrastructure.storage.sqlite.product_store import parse_timestamp

logger = get_logger(__name__)


class SQLiteSalesStore(ISalesStore):
    """SQLite implementation of sales data and forecast records."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    async def upsert_sales_point(self, point: SalesDataPoint) -> SalesDataPoint:
        """Create or replace the sales row for (product, date)."""
        async with self._pool.transaction() as conn:
            await conn.execute(
                """
                INSERT INTO sales_data (
                    product_id, sales_date, forecast_quantity, actual_quantity
                ) VALUES (?, ?, ?, ?)
                ON CONFLICT(product_id, sales_date) DO UPDATE SET
                    forecast_quantity = excluded.forecast_quantity,
                    actual_quantity = excluded.actual_quantity
                """,
                (
                    point.product_id,
                    point.sales_date.isoformat(),
                    point.forecast_quantity,
                    point.actual_quantity,
                ),
            )
            cursor = await conn.execute(
                "SELECT id FROM sales_data WHERE product_id = ? AND sales_date = ?",
                (point.product_id, point.sales_date.isoformat()),
            )
            row = await cursor.fetchone()
            point.id = row["id"]
        logger.info(
            "sales_point_saved",
            product_id=point.product_id,
            sales_date=point.sales_date.isoformat(),
        )
        return point

    async def get_recent_sales(
        self, product_id: int, limit: int = 30
    ) -> list[SalesDataPoint]:
        """Most recent sales rows for a product, newest first."""
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM sales_data
                WHERE product_id = ?
                ORDER BY sales_date DESC
                LIMIT ?
                """,
                (product_id, limit),
            )
            rows = await cursor.fetchall()
            return [self._row_to_sales_point(row) for row in rows]

    async def list_actuals_since(self, since: date) -> list[SalesDataPoint]:
        """Rows dated on or after `since` with a known actual quantity."""
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM sales_data
                WHERE actual_quantity IS NOT NULL
                  AND sales_date >= ?
                ORDER BY sales_date ASC, product_id ASC
                """,
                (since.isoformat(),),
            )
            rows = await cursor.fetchall()
            return [self._row_to_sales_point(row) for row in rows]

    async def daily_totals(self, since: date) -> list[DailySalesTotal]:
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                """
                SELECT sales_date,
                       SUM(forecast_quantity) AS forecast,
                       SUM(COALESCE(actual_quantity, 0)) AS actual
                FROM sales_data
                WHERE sales_date >= ?
                GROUP BY sales_date
                ORDER BY sales_date ASC
                """,
                (since.isoformat(),),
            )
            rows = await cursor.fetchall()
            return [
                DailySalesTotal(
                    sales_date=date.fromisoformat(row["sales_date"]),
                    forecast=float(row["forecast"] or 0),
                    actual=float(row["actual"] or 0),
                )
                for row in rows
            ]

    async def list_products_with_history(self, min_rows: int) -> list[int]:
        """IDs of active products with at least `min_rows` sales rows."""
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                """
                SELECT s.product_id
                FROM sales_data s
                JOIN products p ON p.id = s.product_id
                WHERE p.is_active = 1
                GROUP BY s.product_id
                HAVING COUNT(*) >= ?
                ORDER BY s.product_id
                """,
                (min_rows,),
            )
            rows = await cursor.fetchall()
            return [row[0] for row in rows]

    async def add_forecasts(self, records: list[ForecastRecord]) -> list[ForecastRecord]:
        """Append forecast records."""
        async with self._pool.transaction() as conn:
            for record in records:
                cursor = await conn.execute(
                    """
                    INSERT INTO forecast_data (
                        product_id, forecast_date, quantity,
                        confidence, algorithm, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        record.product_id,
                        record.forecast_date.isoformat(),
                        record.quantity,
                        record.confidence,
                        record.algorithm.value,
                        record.created_at.isoformat(),
                    ),
                )
                record.id = cursor.lastrowid
        return records

    async def list_forecasts(
        self, product_id: int, start: date, end: date
    ) -> list[ForecastRecord]:
        """Forecast records for a product within [start, end], by date."""
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM forecast_data
                WHERE product_id = ?
                  AND forecast_date BETWEEN ? AND ?
                ORDER BY forecast_date ASC, id ASC
                """,
                (product_id, start.isoformat(), end.isoformat()),
            )
            rows = await cursor.fetchall()
            return [self._row_to_forecast(row) for row in rows]

    @staticmethod
    def _row_to_sales_point(row: aiosqlite.Row) -> SalesDataPoint:
        actual = row["actual_quantity"]
        return SalesDataPoint(
            id=row["id"],
            product_id=row["product_id"],
            sales_date=date.fromisoformat(row["sales_date"]),
            forecast_quantity=float(row["forecast_quantity"]),
            actual_quantity=float(actual) if actual is not None else None,
        )

    @staticmethod
    def _row_to_forecast(row: aiosqlite.Row) -> ForecastRecord:
        return ForecastRecord(
            id=row["id"],
            product_id=row["product_id"],
            forecast_date=date.fromisoformat(row["forecast_date"]),
            quantity=row["quantity"],
            confidence=row["confidence"],
            algorithm=ForecastAlgorithm(row["algorithm"]),
            created_at=parse_timestamp(row["created_at"]),
        )
