"""
Signal fusion - vectors, coherence and verdict.

Pure functions that reduce a quote, an indicator bundle and news into three
bounded vectors and a discrete verdict. No I/O.

Evaluation order of the verdict matters:
1. RSI extremes (overbought SELL, oversold BUY) short-circuit everything
2. Low coherence between sentiment and price forces HOLD
3. Magnitude bands on the combined vector
"""

from typing import NamedTuple

from .enums import MarketTrend, Verdict, Volatility
from .models import IndicatorBundle, NewsItem, Quote


# Verdict thresholds
RSI_OVERBOUGHT = 80.0
RSI_OVERSOLD = 20.0
MIN_COHERENCE = 0.6
STRONG_BAND = 0.6
WEAK_BAND = 0.2

# ADX above this is a trending market
TREND_ADX = 25.0


class Vectors(NamedTuple):
    """Sentiment, price and volume vectors, each in [-1, 1]."""
    sentiment: float
    price: float
    volume: float

    @property
    def combined(self) -> float:
        return (self.sentiment + self.price) / 2


def _clamp(value: float, low: float = -1.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def average_news_score(news: list[NewsItem]) -> float:
    """Mean sentiment score, 0.0 when there is no news."""
    if not news:
        return 0.0
    return sum(item.sentiment_score for item in news) / len(news)


def sentiment_vector(indicators: IndicatorBundle, news: list[NewsItem]) -> float:
    """0.4 * news + 0.3 * RSI deviation + 0.3 * MACD histogram sign (+/-0.5)."""
    rsi_sentiment = (indicators.rsi - 50) / 50
    macd_sentiment = 0.5 if indicators.macd_histogram > 0 else -0.5
    return _clamp(
        average_news_score(news) * 0.4 + rsi_sentiment * 0.3 + macd_sentiment * 0.3
    )


def price_vector(quote: Quote, indicators: IndicatorBundle) -> float:
    """
    0.5 * change%/10, +/-0.3 for price vs SMA50, and a trend term.

    The trend term is +0.2 when ADX > 25 else -0.1, multiplied by the sign
    of the change with zero counted as negative.
    """
    price_change = quote.change_percent / 10
    above_sma = 0.3 if quote.price > indicators.sma50 else -0.3
    trend_strength = 0.2 if indicators.adx > TREND_ADX else -0.1
    direction = 1 if price_change > 0 else -1
    return _clamp(price_change * 0.5 + above_sma + trend_strength * direction)


def volume_vector(indicators: IndicatorBundle) -> float:
    """Binary OBV signal."""
    return 0.5 if indicators.obv > 0 else -0.5


def compute_vectors(
    quote: Quote,
    indicators: IndicatorBundle,
    news: list[NewsItem],
) -> Vectors:
    """Compute all three vectors for one analysis cycle."""
    return Vectors(
        sentiment=sentiment_vector(indicators, news),
        price=price_vector(quote, indicators),
        volume=volume_vector(indicators),
    )


def coherence(sentiment: float, price: float) -> float:
    """Agreement of the two primary vectors: 1 - |s - p| / 2, in [0, 1]."""
    return 1 - abs(sentiment - price) / 2


def decide_verdict(
    sentiment: float,
    price: float,
    coherence_score: float,
    rsi: float,
) -> Verdict:
    """Map vectors, coherence and RSI to a verdict. Stateless."""
    combined = (sentiment + price) / 2

    if rsi > RSI_OVERBOUGHT:
        return Verdict.SELL
    if rsi < RSI_OVERSOLD:
        return Verdict.BUY

    if coherence_score < MIN_COHERENCE:
        return Verdict.HOLD

    if combined > STRONG_BAND:
        return Verdict.STRONG_BUY
    if combined > WEAK_BAND:
        return Verdict.BUY
    if combined < -STRONG_BAND:
        return Verdict.STRONG_SELL
    if combined < -WEAK_BAND:
        return Verdict.SELL
    return Verdict.HOLD


def confidence_level(coherence_score: float, adx: float) -> float:
    """Verdict confidence: 70% coherence, 30% trend strength."""
    return coherence_score * 0.7 + (adx / 100) * 0.3


def classify_trend(price: float, indicators: IndicatorBundle) -> MarketTrend:
    """Bullish above SMA50 with positive MACD, bearish below with negative."""
    if price > indicators.sma50 and indicators.macd > 0:
        return MarketTrend.BULLISH
    if price < indicators.sma50 and indicators.macd < 0:
        return MarketTrend.BEARISH
    return MarketTrend.SIDEWAYS


def classify_volatility(atr: float, price: float) -> Volatility:
    """Bucket ATR as a percent of price."""
    atr_percent = atr / price * 100 if price else 0.0
    if atr_percent < 1:
        return Volatility.LOW
    if atr_percent < 2:
        return Volatility.MEDIUM
    if atr_percent < 4:
        return Volatility.HIGH
    return Volatility.EXTREME
