"""
Rule-based bull and bear cases.

Deterministic thesis generation from a MarketContext and the two primary
vectors. Used whenever the external reasoning service is not configured or
returns an unusable response.

Scoring:
- Start at 50
- Add up to 25 each for a supporting sentiment and price vector
- +10 when the market trend supports the case
- +10 when RSI is extreme in the case's favour
- Clamp to [20, 95] (bull) or [20, 90] (bear)
- Round half up to a whole score
"""

import math

from .enums import MarketTrend, Volatility
from .models import CaseAnalysis, MarketContext


MAX_CATALYSTS = 4

BULL_SCORE_RANGE = (20, 95)
BEAR_SCORE_RANGE = (20, 90)


def _clamp(value: float, bounds: tuple[int, int]) -> float:
    low, high = bounds
    return min(high, max(low, value))


def _round_half_up(score: float) -> int:
    return math.floor(score + 0.5)


def generate_bull_case(
    context: MarketContext,
    sentiment_vector: float,
    price_vector: float,
) -> CaseAnalysis:
    """Build the bull thesis from trend, RSI band, MACD and volume."""
    ind = context.indicators
    ticker = context.ticker
    catalysts: list[str] = []
    risks: list[str] = []

    # Trend
    if context.market_trend == MarketTrend.BULLISH:
        argument = (
            f"{ticker} maintains bullish structure with price above key moving "
            f"averages and positive momentum."
        )
        key = "TREND INTACT"
        catalysts.append("Price above SMA50/200")
    elif context.price_change_30d > 0:
        argument = (
            f"Despite consolidation, {ticker} shows accumulation patterns and "
            f"building momentum."
        )
        key = "ACCUMULATION"
        catalysts.append("30-day uptrend intact")
    else:
        argument = (
            f"{ticker} at technical support levels presents potential reversal "
            f"opportunity."
        )
        key = "OVERSOLD BOUNCE"
        catalysts.append("Near support levels")

    # RSI
    if ind.rsi < 30:
        catalysts.append("Oversold RSI signals reversal potential")
    elif ind.rsi < 50:
        catalysts.append("RSI has room to expand")

    if ind.macd > 0 and ind.macd_histogram > 0:
        catalysts.append("MACD bullish crossover confirmed")

    if ind.obv > 0:
        catalysts.append("Positive on-balance volume trend")

    # Risks to the bull thesis
    if ind.rsi > 70:
        risks.append("RSI overbought - potential pullback")
    if context.current_price > ind.bollinger_upper:
        risks.append("Trading above upper Bollinger Band")
    if context.volatility in (Volatility.HIGH, Volatility.EXTREME):
        risks.append("Elevated volatility")
    if not risks:
        risks.append("General market risk")

    score = 50.0
    if sentiment_vector > 0:
        score += sentiment_vector * 25
    if price_vector > 0:
        score += price_vector * 25
    if context.market_trend == MarketTrend.BULLISH:
        score += 10
    if ind.rsi < 30:
        score += 10
    score = _clamp(score, BULL_SCORE_RANGE)

    return CaseAnalysis(
        score=_round_half_up(score),
        argument=argument,
        key=key,
        catalysts=catalysts[:MAX_CATALYSTS],
        risks=risks,
        time_horizon="Short-term (1-2 weeks)" if ind.adx > 30 else "Medium-term (1-3 months)",
        confidence=score / 100,
    )


def generate_bear_case(
    context: MarketContext,
    sentiment_vector: float,
    price_vector: float,
) -> CaseAnalysis:
    """Build the bear thesis from trend, RSI band, 30-day change and stretch."""
    ind = context.indicators
    ticker = context.ticker
    catalysts: list[str] = []
    risks: list[str] = []

    if context.market_trend == MarketTrend.BEARISH:
        argument = (
            f"{ticker} remains in downtrend with price below key resistance and "
            f"negative momentum."
        )
        key = "TREND BREAK"
        catalysts.append("Price below SMA50/200")
    elif ind.rsi > 70:
        argument = f"Overbought conditions in {ticker} suggest mean reversion is likely."
        key = "OVERBOUGHT"
        catalysts.append("RSI signals exhaustion")
    elif context.price_change_30d > 15:
        argument = (
            f"Extended rally in {ticker} increases probability of profit-taking "
            f"pullback."
        )
        key = "EXTENDED RALLY"
        catalysts.append("30-day gains overextended")
    else:
        argument = f"{ticker} faces resistance at current levels with mixed technical signals."
        key = "RESISTANCE"
        catalysts.append("Approaching resistance zone")

    if ind.rsi > 70:
        catalysts.append("Overbought RSI (>70)")
    if ind.macd < 0 or ind.macd_histogram < 0:
        catalysts.append("MACD momentum weakening")
    if context.current_price > ind.bollinger_upper:
        catalysts.append("Price extended above Bollinger upper band")
    if ind.stoch_k > 80:
        catalysts.append("Stochastic overbought")

    # Risks to the bear thesis
    if ind.rsi < 30:
        risks.append("Oversold bounce possible")
    if context.market_trend == MarketTrend.BULLISH:
        risks.append("Primary trend remains bullish")
    if ind.adx > 30:
        risks.append("Strong trend could continue")
    if sentiment_vector > 0.5:
        risks.append("Positive sentiment momentum")
    if not risks:
        risks.append("Unexpected positive catalyst")

    score = 50.0
    if sentiment_vector < 0:
        score += abs(sentiment_vector) * 25
    if price_vector < 0:
        score += abs(price_vector) * 25
    if context.market_trend == MarketTrend.BEARISH:
        score += 10
    if ind.rsi > 70:
        score += 10
    score = _clamp(score, BEAR_SCORE_RANGE)

    return CaseAnalysis(
        score=_round_half_up(score),
        argument=argument,
        key=key,
        catalysts=catalysts[:MAX_CATALYSTS],
        risks=risks,
        time_horizon="Short-term (1-4 weeks)",
        confidence=score / 100,
    )
