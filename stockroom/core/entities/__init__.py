"""Domain entities."""

from stockroom.core.entities.alert import Alert, AlertPriority, AlertType
from stockroom.core.entities.inventory import MovementType, StockMovement
from stockroom.core.entities.product import Product, ProductStatus, ReorderPoint
from stockroom.core.entities.sales import (
    DailySalesTotal,
    ForecastAlgorithm,
    ForecastRecord,
    SalesDataPoint,
)
from stockroom.core.entities.trend import SocialPlatform, TrendAction, TrendData

__all__ = [
    # Product
    "Product",
    "ProductStatus",
    "ReorderPoint",
    # Inventory
    "MovementType",
    "StockMovement",
    # Sales
    "SalesDataPoint",
    "ForecastRecord",
    "ForecastAlgorithm",
    "DailySalesTotal",
    # Trends
    "TrendData",
    "SocialPlatform",
    "TrendAction",
    # Alerts
    "Alert",
    "AlertType",
    "AlertPriority",
]
