"""
SQLite implementation of alert storage.

Handles deduplicated creation, read/resolve flags and statistics.
"""

from datetime import datetime

import aiosqlite

from stockroom.config import get_logger
from stockroom.core.entities.alert import Alert, AlertPriority, AlertType
from stockroom.core.interfaces.alert_store import IAlertStore
from stockroom.infrastructure.storage.sqlite.connection import ConnectionPool
from stockroom.infrastructure.storage.sqlite.product_store import parse_timestamp

logger = get_logger(__name__)

PRIORITY_ORDER = """
    CASE priority
        WHEN 'CRITICAL' THEN 3
        WHEN 'HIGH' THEN 2
        WHEN 'MEDIUM' THEN 1
        ELSE 0
    END
"""

INSERT_ALERT = """
    INSERT INTO alerts (
        alert_type, title, message, action, product_id, priority,
        is_read, is_resolved, resolved_at, created_at
    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
"""


class SQLiteAlertStore(IAlertStore):
    """SQLite implementation of alert storage."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    async def create(self, alert: Alert) -> Alert:
        """Create an alert unconditionally."""
        async with self._pool.transaction() as conn:
            await self._insert(conn, alert)
        logger.info("alert_created", alert_id=alert.id, type=alert.alert_type.value)
        return alert

    async def create_if_absent(
        self,
        alert: Alert,
        dedup_types: list[AlertType],
        since: datetime | None = None,
    ) -> Alert | None:
        """Create an alert unless a matching unresolved one exists."""
        placeholders = ", ".join("?" for _ in dedup_types)
        query = f"""
            SELECT id FROM alerts
            WHERE product_id IS ?
              AND alert_type IN ({placeholders})
              AND is_resolved = 0
        """
        params: list = [alert.product_id, *(t.value for t in dedup_types)]
        if since is not None:
            query += " AND created_at >= ?"
            params.append(since.isoformat())
        query += " LIMIT 1"

        async with self._pool.transaction(immediate=True) as conn:
            cursor = await conn.execute(query, tuple(params))
            existing = await cursor.fetchone()
            if existing is not None:
                logger.debug(
                    "alert_suppressed_duplicate",
                    existing_id=existing["id"],
                    type=alert.alert_type.value,
                    product_id=alert.product_id,
                )
                return None
            await self._insert(conn, alert)

        return alert

    async def get(self, alert_id: int) -> Alert | None:
        """Get alert by ID."""
        async with self._pool.acquire() as conn:
            cursor = await conn.execute("SELECT * FROM alerts WHERE id = ?", (alert_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_entity(row)

    async def list_alerts(
        self,
        is_read: bool | None = None,
        is_resolved: bool | None = None,
        priority: AlertPriority | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[Alert]:
        """List alerts by priority (highest first), then newest first."""
        where, params = self._filters(is_read, is_resolved, priority)
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM alerts
                {where}
                ORDER BY {PRIORITY_ORDER} DESC, created_at DESC, id DESC
                LIMIT ? OFFSET ?
                """,
                (*params, limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_entity(row) for row in rows]

    async def count_alerts(
        self,
        is_read: bool | None = None,
        is_resolved: bool | None = None,
        priority: AlertPriority | None = None,
    ) -> int:
        """Count alerts matching the filters."""
        where, params = self._filters(is_read, is_resolved, priority)
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                f"SELECT COUNT(*) FROM alerts {where}", tuple(params)
            )
            row = await cursor.fetchone()
            return row[0]

    async def mark_read(self, alert_id: int) -> Alert | None:
        """Flag an alert as read."""
        async with self._pool.transaction() as conn:
            cursor = await conn.execute(
                "UPDATE alerts SET is_read = 1 WHERE id = ?", (alert_id,)
            )
            if cursor.rowcount == 0:
                return None
        return await self.get(alert_id)

    async def resolve(self, alert_id: int) -> Alert | None:
        """Resolve an alert and stamp resolved_at."""
        resolved_at = datetime.utcnow()
        async with self._pool.transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE alerts SET is_resolved = 1, resolved_at = ?
                WHERE id = ? AND is_resolved = 0
                """,
                (resolved_at.isoformat(), alert_id),
            )
            changed = cursor.rowcount > 0
        if changed:
            logger.info("alert_resolved", alert_id=alert_id)
        return await self.get(alert_id)

    async def get_stats(self) -> dict:
        """Totals by priority and type plus unread count."""
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                """
                SELECT
                    COUNT(*) AS total,
                    COALESCE(SUM(CASE WHEN is_read = 0 THEN 1 ELSE 0 END), 0) AS unread,
                    COALESCE(SUM(CASE WHEN is_resolved = 0 THEN 1 ELSE 0 END), 0) AS open
                FROM alerts
                """
            )
            totals = await cursor.fetchone()

            cursor = await conn.execute(
                "SELECT priority, COUNT(*) AS n FROM alerts GROUP BY priority"
            )
            by_priority = {row["priority"]: row["n"] for row in await cursor.fetchall()}

            cursor = await conn.execute(
                "SELECT alert_type, COUNT(*) AS n FROM alerts GROUP BY alert_type"
            )
            by_type = {row["alert_type"]: row["n"] for row in await cursor.fetchall()}

        return {
            "total": totals["total"],
            "unread": totals["unread"],
            "open": totals["open"],
            "by_priority": by_priority,
            "by_type": by_type,
        }

    @staticmethod
    async def _insert(conn: aiosqlite.Connection, alert: Alert) -> None:
        cursor = await conn.execute(
            INSERT_ALERT,
            (
                alert.alert_type.value,
                alert.title,
                alert.message,
                alert.action,
                alert.product_id,
                alert.priority.value,
                1 if alert.is_read else 0,
                1 if alert.is_resolved else 0,
                alert.resolved_at.isoformat() if alert.resolved_at else None,
                alert.created_at.isoformat(),
            ),
        )
        alert.id = cursor.lastrowid

    @staticmethod
    def _filters(
        is_read: bool | None,
        is_resolved: bool | None,
        priority: AlertPriority | None,
    ) -> tuple[str, list]:
        clauses: list[str] = []
        params: list = []
        if is_read is not None:
            clauses.append("is_read = ?")
            params.append(1 if is_read else 0)
        if is_resolved is not None:
            clauses.append("is_resolved = ?")
            params.append(1 if is_resolved else 0)
        if priority is not None:
            clauses.append("priority = ?")
            params.append(priority.value)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        return where, params

    @staticmethod
    def _row_to_entity(row: aiosqlite.Row) -> Alert:
        """Convert a database row to an Alert entity."""
        resolved_at = None
        if row["resolved_at"]:
            resolved_at = parse_timestamp(row["resolved_at"])
        return Alert(
            id=row["id"],
            alert_type=AlertType(row["alert_type"]),
            title=row["title"],
            message=row["message"],
            action=row["action"],
            product_id=row["product_id"],
            priority=AlertPriority(row["priority"]),
            is_read=bool(row["is_read"]),
            is_resolved=bool(row["is_resolved"]),
            resolved_at=resolved_at,
            created_at=parse_timestamp(row["created_at"]),
        )
