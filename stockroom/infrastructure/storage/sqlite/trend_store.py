"""SQLite implementation of social trend storage."""

import json

import aiosqlite

from stockroom.config import get_logger
from stockroom.core.entities.trend import SocialPlatform, TrendData
from stockroom.core.interfaces.trend_store import ITrendStore
from stockroom.infrastructure.storage.sqlite.connection import ConnectionPool
from stockroom.infrastructure.storage.sqlite.product_store import parse_timestamp

logger = get_logger(__name__)


class SQLiteTrendStore(ITrendStore):
    """SQLite implementation of social trend storage."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    async def create_trend(self, trend: TrendData) -> TrendData:
        async with self._pool.transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO trend_data (
                    name, platform, mentions, change, sentiment, keywords, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    trend.name,
                    trend.platform.value,
                    trend.mentions,
                    trend.change,
                    trend.sentiment,
                    json.dumps(trend.keywords),
                    trend.created_at.isoformat(),
                ),
            )
            trend.id = cursor.lastrowid
        logger.info("trend_recorded", trend_id=trend.id, platform=trend.platform.value)
        return trend

    async def list_trends(
        self, platform: SocialPlatform | None = None, limit: int = 10
    ) -> list[TrendData]:
        query = "SELECT * FROM trend_data"
        params: list = []
        if platform is not None:
            query += " WHERE platform = ?"
            params.append(platform.value)
        query += " ORDER BY mentions DESC, id ASC LIMIT ?"
        params.append(limit)

        async with self._pool.acquire() as conn:
            cursor = await conn.execute(query, tuple(params))
            rows = await cursor.fetchall()
            return [self._row_to_trend(row) for row in rows]

    async def list_rising(self, min_change: float, min_mentions: int) -> list[TrendData]:
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM trend_data
                WHERE change > ? AND mentions > ?
                ORDER BY change DESC, id ASC
                """,
                (min_change, min_mentions),
            )
            rows = await cursor.fetchall()
            return [self._row_to_trend(row) for row in rows]

    @staticmethod
    def _row_to_trend(row: aiosqlite.Row) -> TrendData:
        try:
            keywords = json.loads(row["keywords"] or "[]")
        except json.JSONDecodeError:
            logger.warning("trend_keywords_unreadable", trend_id=row["id"])
            keywords = []
        return TrendData(
            id=row["id"],
            name=row["name"],
            platform=SocialPlatform(row["platform"]),
            mentions=row["mentions"],
            change=row["change"],
            sentiment=row["sentiment"],
            keywords=keywords,
            created_at=parse_timestamp(row["created_at"]),
        )
