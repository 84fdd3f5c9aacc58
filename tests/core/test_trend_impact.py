"""Tests for trend-to-product matching."""

import pytest

from stockroom.core.entities import SocialPlatform, TrendAction, TrendData
from stockroom.core.services.trend_impact import analyze_trend_impact, matches, recommend


def trend(change: float = 30.0, keywords: list[str] | None = None) -> TrendData:
    return TrendData(
        name="#WirelessEarbuds",
        platform=SocialPlatform.TWITTER,
        mentions=12500,
        change=change,
        keywords=keywords if keywords is not None else ["wireless", "earbuds"],
    )


class TestMatches:
    """Tests for matches()."""

    def test_keyword_inside_a_word(self, make_product):
        """A keyword may be part of a longer word of the name."""
        assert matches(make_product(name="Bluetooth Earbuds Pro"), ["bud"])

    def test_case_insensitive(self, make_product):
        assert matches(make_product(name="wireless mouse"), ["WIRELESS"])

    def test_no_match_across_words(self, make_product):
        assert not matches(make_product(name="Yoga Mat"), ["yoga mat"])

    def test_blank_keywords_ignored(self, make_product):
        assert not matches(make_product(name="Desk Lamp"), ["", "  "])


class TestRecommend:
    @pytest.mark.parametrize(
        ("change", "action"),
        [
            (78.9, TrendAction.INCREASE_STOCK),
            (50.0, TrendAction.MONITOR),
            (24.7, TrendAction.MONITOR),
        ],
    )
    def test_threshold(self, change: float, action: TrendAction):
        assert recommend(trend(change=change)) == action


class TestAnalyzeTrendImpact:
    """Tests for analyze_trend_impact()."""

    def test_relates_matching_products(self, make_product):
        earbuds = make_product(id=1, name="Wireless Earbuds")
        lamp = make_product(id=2, name="Desk Lamp")

        [impact] = analyze_trend_impact([trend()], [earbuds, lamp])

        assert impact.related_products == [earbuds]
        assert impact.recommended_action == TrendAction.MONITOR

    def test_keeps_trend_order_and_unmatched_trends(self, make_product):
        fast = trend(change=78.9, keywords=["summer"])
        slow = trend(change=24.7, keywords=["earbuds"])

        impacts = analyze_trend_impact([fast, slow], [make_product(name="Wireless Earbuds")])

        assert [i.trend for i in impacts] == [fast, slow]
        assert impacts[0].related_products == []
        assert impacts[0].recommended_action == TrendAction.INCREASE_STOCK
        assert len(impacts[1].related_products) == 1
