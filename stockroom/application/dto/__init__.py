"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from stockroom.application.dto.requests import (
    CreateProductRequest,
    ReorderPointRequest,
    SalesPointRequest,
    StockMovementRequest,
    TrendRequest,
    UpdateProductRequest,
)
from stockroom.application.dto.responses import (
    AlertListResponse,
    AlertResponse,
    AlertStatsResponse,
    AlertSweepResponse,
    CategorySummaryResponse,
    DashboardResponse,
    DailySalesResponse,
    DashboardSummaryResponse,
    ErrorResponse,
    ForecastListResponse,
    ForecastRecordResponse,
    ForecastRunResponse,
    ForecastSweepResponse,
    HealthResponse,
    LedgerVerificationResponse,
    MovementListResponse,
    MovementResultResponse,
    PaginatedResponse,
    ProductListResponse,
    ProductResponse,
    ProviderHealthResponse,
    RelatedProductResponse,
    ReorderPointResponse,
    ReorderRecommendationResponse,
    SalesAnalyticsResponse,
    SalesPointResponse,
    StockMovementResponse,
    TrendImpactResponse,
    TrendResponse,
)

__all__ = [
    # Requests
    "CreateProductRequest",
    "UpdateProductRequest",
    "ReorderPointRequest",
    "StockMovementRequest",
    "SalesPointRequest",
    "TrendRequest",
    # Responses
    "ErrorResponse",
    "HealthResponse",
    "ProviderHealthResponse",
    "PaginatedResponse",
    "ProductResponse",
    "ProductListResponse",
    "ReorderPointResponse",
    "StockMovementResponse",
    "MovementResultResponse",
    "MovementListResponse",
    "LedgerVerificationResponse",
    "ReorderRecommendationResponse",
    "SalesPointResponse",
    "ForecastRecordResponse",
    "ForecastRunResponse",
    "ForecastListResponse",
    "ForecastSweepResponse",
    "AlertResponse",
    "AlertListResponse",
    "AlertStatsResponse",
    "AlertSweepResponse",
    "CategorySummaryResponse",
    "DashboardSummaryResponse",
    "DashboardResponse",
    "DailySalesResponse",
    "SalesAnalyticsResponse",
    "TrendResponse",
    "RelatedProductResponse",
    "TrendImpactResponse",
]
