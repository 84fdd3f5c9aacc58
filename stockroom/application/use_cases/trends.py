"""
Social trend use cases.

Trends are recorded as reported and listed by reach. The impact view
takes rising trends and matches them against active products, so buyers
see which stock lines a spike in attention is likely to hit.
"""

from stockroom.application.dto.requests import TrendRequest
from stockroom.application.dto.responses import (
    RelatedProductResponse,
    TrendImpactResponse,
    TrendResponse,
)
from stockroom.config import get_logger
from stockroom.core.entities.trend import SocialPlatform, TrendData
from stockroom.core.exceptions import ValidationError
from stockroom.core.interfaces.product_store import IProductStore
from stockroom.core.interfaces.trend_store import ITrendStore
from stockroom.core.services.trend_impact import (
    RISING_MIN_CHANGE,
    RISING_MIN_MENTIONS,
    analyze_trend_impact,
)

logger = get_logger(__name__)

MAX_TREND_LIMIT = 100


async def _default_trend_store() -> ITrendStore:
    from stockroom.infrastructure.storage.sqlite import get_trend_store

    return await get_trend_store()


class ListTrendsUseCase:
    """Most mentioned trends, optionally for one platform."""

    def __init__(self, trend_store: ITrendStore | None = None):
        self._store = trend_store

    async def execute(
        self, platform: str | None = None, limit: int = 10
    ) -> list[TrendResponse]:
        if limit < 1 or limit > MAX_TREND_LIMIT:
            raise ValidationError("limit", f"must be between 1 and {MAX_TREND_LIMIT}", limit)

        selected = None
        if platform:
            try:
                selected = SocialPlatform(platform.upper())
            except ValueError:
                raise ValidationError(
                    "platform",
                    f"must be one of {', '.join(p.value for p in SocialPlatform)}",
                    platform,
                ) from None

        self._store = self._store or await _default_trend_store()
        trends = await self._store.list_trends(platform=selected, limit=limit)
        return [TrendResponse.from_entity(t) for t in trends]


class RecordTrendUseCase:
    def __init__(self, trend_store: ITrendStore | None = None):
        self._store = trend_store

    async def execute(self, request: TrendRequest) -> TrendResponse:
        self._store = self._store or await _default_trend_store()
        trend = TrendData(
            name=request.name.strip(),
            platform=request.platform,
            mentions=request.mentions,
            change=request.change,
            sentiment=request.sentiment,
            keywords=[k.strip() for k in request.keywords if k.strip()],
        )
        created = await self._store.create_trend(trend)
        return TrendResponse.from_entity(created)


class TrendImpactUseCase:
    """Rising trends matched to the active products they mention."""

    def __init__(
        self,
        trend_store: ITrendStore | None = None,
        product_store: IProductStore | None = None,
    ):
        self._trend_store = trend_store
        self._product_store = product_store

    async def _get_stores(self) -> tuple[ITrendStore, IProductStore]:
        if self._product_store is None:
            from stockroom.infrastructure.storage.sqlite import get_product_store

            self._product_store = await get_product_store()
        self._trend_store = self._trend_store or await _default_trend_store()
        return self._trend_store, self._product_store

    async def execute(self) -> list[TrendImpactResponse]:
        trend_store, product_store = await self._get_stores()
        rising = await trend_store.list_rising(RISING_MIN_CHANGE, RISING_MIN_MENTIONS)
        if not rising:
            return []

        products = await product_store.list_active()
        impacts = analyze_trend_impact(rising, products)
        logger.debug(
            "trend_impact_analyzed",
            rising=len(rising),
            matched=sum(1 for i in impacts if i.related_products),
        )
        return [
            TrendImpactResponse(
                trend=TrendResponse.from_entity(impact.trend),
                related_products=[
                    RelatedProductResponse(
                        id=p.id,
                        name=p.name,
                        current_stock=p.current_stock,
                        status=p.status.value,
                    )
                    for p in impact.related_products
                ],
                recommended_action=impact.recommended_action.value,
            )
            for impact in impacts
        ]
