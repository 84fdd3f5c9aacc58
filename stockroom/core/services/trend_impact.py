"""
Trend impact analysis.

Rising social trends are matched to active products by keyword: a
keyword hits a product when it occurs inside any word of the product
name, case-insensitively. Strongly rising trends suggest restocking the
matched products; the rest are worth watching.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from stockroom.core.entities.product import Product
from stockroom.core.entities.trend import TrendAction, TrendData

# A trend is rising above both of these
RISING_MIN_CHANGE = 20.0
RISING_MIN_MENTIONS = 1000

INCREASE_STOCK_CHANGE = 50.0


@dataclass
class TrendImpact:
    trend: TrendData
    recommended_action: TrendAction
    related_products: list[Product] = field(default_factory=list)


def recommend(trend: TrendData) -> TrendAction:
    if trend.change > INCREASE_STOCK_CHANGE:
        return TrendAction.INCREASE_STOCK
    return TrendAction.MONITOR


def matches(product: Product, keywords: Iterable[str]) -> bool:
    words = product.name.lower().split()
    needles = [k.strip().lower() for k in keywords if k.strip()]
    return any(needle in word for needle in needles for word in words)


def analyze_trend_impact(
    trends: Iterable[TrendData], products: list[Product]
) -> list[TrendImpact]:
    """One entry per trend, in the order given, with the products it touches."""
    return [
        TrendImpact(
            trend=trend,
            recommended_action=recommend(trend),
            related_products=[p for p in products if matches(p, trend.keywords)],
        )
        for trend in trends
    ]
