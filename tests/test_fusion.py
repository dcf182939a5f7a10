"""Tests for signal fusion and market context assembly."""

import pytest

from domain import (
    MarketTrend,
    NewsSentiment,
    Verdict,
    Volatility,
    build_market_context,
    classify_trend,
    classify_volatility,
    coherence,
    compute_vectors,
    confidence_level,
    decide_verdict,
    percent_change,
)
from domain.fusion import price_vector, sentiment_vector, volume_vector

from conftest import make_history, make_indicators, make_news, make_quote


class TestVectors:
    def test_sentiment_vector_without_news(self):
        ind = make_indicators(rsi=55.0, macd_histogram=0.1)
        # 0.4 * 0 + 0.3 * 0.1 + 0.3 * 0.5
        assert sentiment_vector(ind, []) == pytest.approx(0.18)

    def test_sentiment_vector_with_news(self):
        ind = make_indicators(rsi=50.0, macd_histogram=-0.2)
        news = [make_news("a", 0.5), make_news("b", 0.3)]
        assert sentiment_vector(ind, news) == pytest.approx(0.4 * 0.4 - 0.15)

    def test_sentiment_vector_extremes(self):
        # 0.4 * 1 + 0.3 * 1 + 0.3 * 0.5, never reaches the clamp
        bullish = make_indicators(rsi=100.0, macd_histogram=1.0)
        news = [make_news("x", 1.0, NewsSentiment.BULLISH)]
        assert sentiment_vector(bullish, news) == pytest.approx(0.85)

        bearish = make_indicators(rsi=0.0, macd_histogram=-1.0)
        news = [make_news("y", -1.0, NewsSentiment.BEARISH)]
        assert sentiment_vector(bearish, news) == pytest.approx(-0.85)

    def test_price_vector(self):
        quote = make_quote(price=100.0, change_percent=1.0)
        ind = make_indicators(sma50=97.0, adx=22.0)
        assert price_vector(quote, ind) == pytest.approx(0.05 + 0.3 - 0.1)

    def test_zero_change_counts_as_negative_direction(self):
        quote = make_quote(price=100.0, change_percent=0.0)
        ind = make_indicators(sma50=97.0, adx=30.0)
        assert price_vector(quote, ind) == pytest.approx(0.3 - 0.2)

    def test_price_vector_clamped(self):
        quote = make_quote(price=100.0, change_percent=50.0)
        ind = make_indicators(sma50=90.0, adx=40.0)
        assert price_vector(quote, ind) == 1.0

        crash = make_quote(price=100.0, change_percent=-50.0)
        ind = make_indicators(sma50=110.0, adx=40.0)
        assert price_vector(crash, ind) == -1.0

    def test_volume_vector_binary(self):
        assert volume_vector(make_indicators(obv=10.0)) == 0.5
        assert volume_vector(make_indicators(obv=0.0)) == -0.5
        assert volume_vector(make_indicators(obv=-10.0)) == -0.5

    def test_compute_vectors_combined(self):
        vectors = compute_vectors(make_quote(), make_indicators(), [])
        assert vectors.combined == pytest.approx((vectors.sentiment + vectors.price) / 2)
        for v in vectors:
            assert -1.0 <= v <= 1.0


class TestCoherence:
    def test_identical_vectors(self):
        assert coherence(0.2, 0.2) == 1.0

    def test_opposite_extremes(self):
        assert coherence(1.0, -1.0) == 0.0

    def test_partial(self):
        assert coherence(0.5, -0.5) == pytest.approx(0.5)

    def test_bounded_over_vector_range(self):
        grid = [i / 10 for i in range(-10, 11)]
        for sentiment in grid:
            for price in grid:
                assert 0.0 <= coherence(sentiment, price) <= 1.0


class TestVerdict:
    def test_overbought_overrides_everything(self):
        assert decide_verdict(0.9, 0.9, 1.0, 85.0) == Verdict.SELL

    def test_oversold_overrides_everything(self):
        assert decide_verdict(-0.9, -0.9, 1.0, 15.0) == Verdict.BUY

    def test_rsi_thresholds_are_strict(self):
        assert decide_verdict(0.0, 0.0, 1.0, 80.0) == Verdict.HOLD
        assert decide_verdict(0.0, 0.0, 1.0, 20.0) == Verdict.HOLD

    def test_low_coherence_holds(self):
        assert decide_verdict(0.9, 0.9, 0.5, 50.0) == Verdict.HOLD

    @pytest.mark.parametrize("combined,expected", [
        (0.7, Verdict.STRONG_BUY),
        (0.6, Verdict.BUY),
        (0.3, Verdict.BUY),
        (0.2, Verdict.HOLD),
        (0.0, Verdict.HOLD),
        (-0.2, Verdict.HOLD),
        (-0.3, Verdict.SELL),
        (-0.7, Verdict.STRONG_SELL),
    ])
    def test_bands(self, combined, expected):
        assert decide_verdict(combined, combined, 1.0, 50.0) == expected

    def test_confidence_level(self):
        assert confidence_level(1.0, 50.0) == pytest.approx(0.85)
        assert confidence_level(0.0, 0.0) == 0.0



class TestAnalysisCycle:
    def test_uptrend_without_news(self):
        quote = make_quote(price=150.0, change_percent=2.0)
        ind = make_indicators(sma50=140.0, adx=30.0, rsi=55.0, macd_histogram=0.5)

        vectors = compute_vectors(quote, ind, [])
        # 0.3 * 0.1 + 0.3 * 0.5
        assert vectors.sentiment == pytest.approx(0.18)
        # 0.5 * 0.2 + 0.3 + 0.2
        assert vectors.price == pytest.approx(0.6)

        score = coherence(vectors.sentiment, vectors.price)
        assert score == pytest.approx(0.79)
        assert vectors.combined == pytest.approx(0.39)
        assert decide_verdict(vectors.sentiment, vectors.price, score, ind.rsi) == Verdict.BUY
        assert confidence_level(score, ind.adx) == pytest.approx(0.79 * 0.7 + 0.09)


class TestClassification:
    def test_bullish_trend(self):
        assert classify_trend(100.0, make_indicators(sma50=95.0, macd=0.5)) == MarketTrend.BULLISH

    def test_bearish_trend(self):
        assert classify_trend(90.0, make_indicators(sma50=95.0, macd=-0.5)) == MarketTrend.BEARISH

    def test_mixed_is_sideways(self):
        assert classify_trend(100.0, make_indicators(sma50=95.0, macd=-0.5)) == MarketTrend.SIDEWAYS

    @pytest.mark.parametrize("atr,expected", [
        (0.5, Volatility.LOW),
        (1.5, Volatility.MEDIUM),
        (3.0, Volatility.HIGH),
        (5.0, Volatility.EXTREME),
    ])
    def test_volatility_buckets(self, atr, expected):
        assert classify_volatility(atr, 100.0) == expected

    def test_volatility_without_price(self):
        assert classify_volatility(5.0, 0.0) == Volatility.LOW


class TestMarketContext:
    def test_percent_change(self):
        assert percent_change(110.0, 100.0) == pytest.approx(10.0)
        assert percent_change(110.0, 0.0) == 0.0

    def test_changes_from_history(self):
        history = make_history(60, start=80.0, step=0.3)
        quote = make_quote(price=100.0, change_percent=1.5)
        ctx = build_market_context(quote, history, make_indicators(), [])

        assert ctx.price_change_24h == 1.5
        assert ctx.price_change_7d == pytest.approx(percent_change(100.0, history[6].close))
        assert ctx.price_change_30d == pytest.approx(percent_change(100.0, history[29].close))
        assert ctx.ticker == "ACME"
        assert ctx.volume_change == 0.0

    def test_short_history_means_no_change(self):
        ctx = build_market_context(make_quote(), make_history(5), make_indicators(), [])
        assert ctx.price_change_7d == 0.0
        assert ctx.price_change_30d == 0.0

    def test_trend_and_volatility(self):
        ind = make_indicators(sma50=95.0, macd=0.5, atr=3.0)
        ctx = build_market_context(make_quote(price=100.0), [], ind, [])
        assert ctx.market_trend == MarketTrend.BULLISH
        assert ctx.volatility == Volatility.HIGH
