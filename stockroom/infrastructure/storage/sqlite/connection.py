"""
Async SQLite connection pool with aiosqlite.

Stores receive a ConnectionPool at construction and acquire a
connection per unit of work. Ledger writes use transaction(immediate=True)
so the read of current stock and the write of the new total happen under
one write lock.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from stockroom.config import get_logger, get_settings
from stockroom.core.exceptions import DatabaseError

logger = get_logger(__name__)

# Applied to every pooled connection; busy_timeout is added per pool
CONNECTION_PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA foreign_keys=ON",
)


class ConnectionPool:
    """Fixed-size pool of aiosqlite connections to one database file."""

    def __init__(
        self,
        db_path: Path,
        pool_size: int = 5,
        busy_timeout: int = 30000,
        acquire_timeout: float = 10.0,
    ):
        if pool_size < 1:
            raise ValueError("pool_size must be at least 1")
        self.db_path = db_path
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout
        self.acquire_timeout = acquire_timeout

        self._idle: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue(maxsize=pool_size)
        self._connections: list[aiosqlite.Connection] = []
        self._initialized = False
        self._lock = asyncio.Lock()

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def in_use(self) -> int:
        """Connections currently checked out."""
        return len(self._connections) - self._idle.qsize()

    async def initialize(self) -> None:
        """Open all connections. Safe to call more than once."""
        async with self._lock:
            if self._initialized:
                return

            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            for _ in range(self.pool_size):
                conn = await self.open_connection()
                self._connections.append(conn)
                self._idle.put_nowait(conn)

            self._initialized = True
            logger.info(
                "connection_pool_initialized",
                db_path=str(self.db_path),
                pool_size=self.pool_size,
            )

    async def open_connection(self) -> aiosqlite.Connection:
        """Open a standalone connection configured like the pooled ones."""
        conn = await aiosqlite.connect(self.db_path)
        for pragma in CONNECTION_PRAGMAS:
            await conn.execute(pragma)
        await conn.execute(f"PRAGMA busy_timeout={int(self.busy_timeout)}")
        conn.row_factory = aiosqlite.Row
        return conn

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Check out a connection for the duration of the block.

        Raises DatabaseError when no connection frees up within
        acquire_timeout seconds.
        """
        if not self._initialized:
            await self.initialize()

        try:
            conn = await asyncio.wait_for(self._idle.get(), timeout=self.acquire_timeout)
        except asyncio.TimeoutError:
            logger.warning("connection_pool_exhausted", pool_size=self.pool_size)
            raise DatabaseError(
                "acquire", f"no connection available after {self.acquire_timeout}s"
            ) from None

        try:
            yield conn
        finally:
            self._idle.put_nowait(conn)

    @asynccontextmanager
    async def transaction(
        self, immediate: bool = False
    ) -> AsyncIterator[aiosqlite.Connection]:
        """
        Check out a connection inside a transaction.

        Commits when the block exits normally and rolls back otherwise.
        SQLite operational failures (locked database, bad SQL) surface as
        DatabaseError; other exceptions propagate unchanged.
        """
        async with self.acquire() as conn:
            try:
                if immediate:
                    await conn.execute("BEGIN IMMEDIATE")
                yield conn
                await conn.commit()
            except aiosqlite.OperationalError as e:
                await conn.rollback()
                raise DatabaseError("transaction", str(e)) from e
            except BaseException:
                await conn.rollback()
                raise

    async def close(self) -> None:
        """Close every connection; the pool can be initialized again afterwards."""
        async with self._lock:
            for conn in self._connections:
                await conn.close()
            self._connections.clear()
            self._idle = asyncio.Queue(maxsize=self.pool_size)
            self._initialized = False
            logger.info("connection_pool_closed", db_path=str(self.db_path))


_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """Application-wide pool built from storage settings."""
    global _pool
    if _pool is None:
        storage = get_settings().storage
        _pool = ConnectionPool(
            db_path=storage.db_path,
            pool_size=storage.pool_size,
            busy_timeout=storage.busy_timeout,
            acquire_timeout=storage.acquire_timeout,
        )
        await _pool.initialize()
    return _pool


async def close_pool() -> None:
    """Close the application-wide pool if it was opened."""
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None
