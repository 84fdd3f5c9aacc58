"""API route modules."""

from stockroom.api.routes.alerts import router as alerts_router
from stockroom.api.routes.analytics import router as analytics_router
from stockroom.api.routes.health import router as health_router
from stockroom.api.routes.inventory import router as inventory_router
from stockroom.api.routes.products import router as products_router
from stockroom.api.routes.sales import router as sales_router
from stockroom.api.routes.trends import router as trends_router
from stockroom.api.routes.ws import router as ws_router

__all__ = [
    "health_router",
    "products_router",
    "inventory_router",
    "sales_router",
    "analytics_router",
    "trends_router",
    "alerts_router",
    "ws_router",
]
