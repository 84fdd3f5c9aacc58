"""Core interfaces (ports) implemented by the infrastructure layer."""

from stockroom.core.interfaces.alert_store import IAlertStore
from stockroom.core.interfaces.inventory_store import IInventoryStore
from stockroom.core.interfaces.notifier import INotificationSink
from stockroom.core.interfaces.product_store import IProductStore
from stockroom.core.interfaces.sales_store import ISalesStore
from stockroom.core.interfaces.trend_store import ITrendStore

__all__ = [
    "IAlertStore",
    "IInventoryStore",
    "INotificationSink",
    "IProductStore",
    "ISalesStore",
    "ITrendStore",
]
