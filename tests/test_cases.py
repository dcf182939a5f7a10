"""Tests for rule-based bull and bear cases."""

import pytest

from domain import MarketTrend, Volatility, generate_bear_case, generate_bull_case

from conftest import make_context, make_indicators


class TestBullCase:
    def test_accumulation_without_trend(self, context):
        bull = generate_bull_case(context, 0.2, 0.4)

        assert bull.key == "ACCUMULATION"
        assert "ACME" in bull.argument
        assert bull.catalysts == [
            "30-day uptrend intact",
            "MACD bullish crossover confirmed",
            "Positive on-balance volume trend",
        ]
        assert bull.risks == ["General market risk"]
        assert bull.score == 65
        assert bull.confidence == pytest.approx(0.65)
        assert bull.time_horizon == "Medium-term (1-3 months)"

    def test_trend_intact(self):
        ctx = make_context(trend=MarketTrend.BULLISH)
        bull = generate_bull_case(ctx, 0.0, 0.0)
        assert bull.key == "TREND INTACT"
        assert bull.score == 60

    def test_oversold_bounce(self):
        ctx = make_context(price_change_30d=-8.0, indicators=make_indicators(rsi=25.0))
        bull = generate_bull_case(ctx, -0.5, -0.5)
        assert bull.key == "OVERSOLD BOUNCE"
        assert "Oversold RSI signals reversal potential" in bull.catalysts
        # Negative vectors add nothing; oversold RSI adds 10
        assert bull.score == 60

    def test_score_capped(self):
        ctx = make_context(trend=MarketTrend.BULLISH, indicators=make_indicators(rsi=25.0))
        bull = generate_bull_case(ctx, 1.0, 1.0)
        assert bull.score == 95
        assert len(bull.catalysts) <= 4

    def test_risks(self):
        ind = make_indicators(rsi=75.0, bollinger_upper=99.0)
        ctx = make_context(indicators=ind, volatility=Volatility.HIGH)
        bull = generate_bull_case(ctx, 0.0, 0.0)
        assert bull.risks == [
            "RSI overbought - potential pullback",
            "Trading above upper Bollinger Band",
            "Elevated volatility",
        ]

    def test_short_horizon_in_strong_trend(self):
        ctx = make_context(indicators=make_indicators(adx=35.0))
        assert generate_bull_case(ctx, 0.0, 0.0).time_horizon == "Short-term (1-2 weeks)"

    def test_half_point_rounds_up(self, context):
        # 50 + 0.5 * 25 = 62.5
        assert generate_bull_case(context, 0.5, 0.0).score == 63


class TestBearCase:
    def test_resistance_default(self, context):
        bear = generate_bear_case(context, 0.2, 0.4)

        assert bear.key == "RESISTANCE"
        assert bear.catalysts == ["Approaching resistance zone"]
        assert bear.risks == ["Unexpected positive catalyst"]
        assert bear.score == 50
        assert bear.time_horizon == "Short-term (1-4 weeks)"

    def test_trend_break(self):
        ctx = make_context(trend=MarketTrend.BEARISH, indicators=make_indicators(macd=-0.3, macd_histogram=-0.1))
        bear = generate_bear_case(ctx, -0.4, -0.4)
        assert bear.key == "TREND BREAK"
        assert "MACD momentum weakening" in bear.catalysts
        # 50 + 10 + 10 + 10
        assert bear.score == 80

    def test_overbought(self):
        ctx = make_context(indicators=make_indicators(rsi=78.0, stoch_k=85.0))
        bear = generate_bear_case(ctx, 0.0, 0.0)
        assert bear.key == "OVERBOUGHT"
        assert "Overbought RSI (>70)" in bear.catalysts
        assert "Stochastic overbought" in bear.catalysts
        assert bear.score == 60

    def test_extended_rally(self):
        ctx = make_context(price_change_30d=20.0)
        assert generate_bear_case(ctx, 0.0, 0.0).key == "EXTENDED RALLY"

    def test_score_capped(self):
        ind = make_indicators(rsi=75.0)
        ctx = make_context(trend=MarketTrend.BEARISH, indicators=ind)
        assert generate_bear_case(ctx, -1.0, -1.0).score == 90

    def test_risks(self):
        ind = make_indicators(rsi=25.0, adx=35.0)
        ctx = make_context(trend=MarketTrend.BULLISH, indicators=ind)
        bear = generate_bear_case(ctx, 0.6, 0.0)
        assert bear.risks == [
            "Oversold bounce possible",
            "Primary trend remains bullish",
            "Strong trend could continue",
            "Positive sentiment momentum",
        ]

    def test_half_point_rounds_up(self, context):
        # 50 + 0.5 * 25 = 62.5
        assert generate_bear_case(context, -0.5, 0.0).score == 63

    def test_deterministic(self, context):
        assert generate_bear_case(context, -0.3, 0.1) == generate_bear_case(context, -0.3, 0.1)
