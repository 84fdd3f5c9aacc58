"""SQLite storage implementations."""

from stockroom.infrastructure.storage.sqlite.alert_store import SQLiteAlertStore
from stockroom.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_pool,
)
from stockroom.infrastructure.storage.sqlite.inventory_store import SQLiteInventoryStore
from stockroom.infrastructure.storage.sqlite.product_store import SQLiteProductStore
from stockroom.infrastructure.storage.sqlite.sales_store import SQLiteSalesStore
from stockroom.infrastructure.storage.sqlite.trend_store import SQLiteTrendStore

# Singleton instances bound to the application pool
_product_store: SQLiteProductStore | None = None
_inventory_store: SQLiteInventoryStore | None = None
_sales_store: SQLiteSalesStore | None = None
_alert_store: SQLiteAlertStore | None = None
_trend_store: SQLiteTrendStore | None = None


async def get_product_store() -> SQLiteProductStore:
    """Get singleton product store instance."""
    global _product_store
    if _product_store is None:
        _product_store = SQLiteProductStore(await get_pool())
    return _product_store


async def get_inventory_store() -> SQLiteInventoryStore:
    """Get singleton inventory store instance."""
    global _inventory_store
    if _inventory_store is None:
        _inventory_store = SQLiteInventoryStore(await get_pool())
    return _inventory_store


async def get_sales_store() -> SQLiteSalesStore:
    """Get singleton sales store instance."""
    global _sales_store
    if _sales_store is None:
        _sales_store = SQLiteSalesStore(await get_pool())
    return _sales_store


async def get_alert_store() -> SQLiteAlertStore:
    """Get singleton alert store instance."""
    global _alert_store
    if _alert_store is None:
        _alert_store = SQLiteAlertStore(await get_pool())
    return _alert_store


async def get_trend_store() -> SQLiteTrendStore:
    """Get singleton trend store instance."""
    global _trend_store
    if _trend_store is None:
        _trend_store = SQLiteTrendStore(await get_pool())
    return _trend_store


async def close_storage() -> None:
    """Close the pool and drop store singletons bound to it."""
    global _product_store, _inventory_store, _sales_store, _alert_store, _trend_store
    await close_pool()
    _product_store = None
    _inventory_store = None
    _sales_store = None
    _alert_store = None
    _trend_store = None


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "close_storage",
    # Store classes
    "SQLiteProductStore",
    "SQLiteInventoryStore",
    "SQLiteSalesStore",
    "SQLiteAlertStore",
    "SQLiteTrendStore",
    # Factory functions
    "get_product_store",
    "get_inventory_store",
    "get_sales_store",
    "get_alert_store",
    "get_trend_store",
]
