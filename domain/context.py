"""
Market context assembly - pure domain logic.

Derives multi-day price changes, trend and volatility classification from
the acquired quote and history.
"""

from .fusion import classify_trend, classify_volatility
from .models import (
    EventsCalendar,
    HistoricalBar,
    IndicatorBundle,
    MarketContext,
    NewsItem,
    OptionsFlow,
    Quote,
    SocialSentiment,
)


def _close_ago(history: list[HistoricalBar], days: int, fallback: float) -> float:
    """Close `days` bars back in a most-recent-first series."""
    index = days - 1
    if index < len(history) and history[index].close > 0:
        return history[index].close
    return fallback


def percent_change(current: float, previous: float) -> float:
    if not previous:
        return 0.0
    return (current - previous) / previous * 100


def build_market_context(
    quote: Quote,
    history: list[HistoricalBar],
    indicators: IndicatorBundle,
    news: list[NewsItem],
    options_flow: OptionsFlow | None = None,
    events_calendar: EventsCalendar | None = None,
    social_sentiment: SocialSentiment | None = None,
) -> MarketContext:
    """
    Build the MarketContext read by the forecast synthesizer.

    7-day and 30-day changes compare the live price with the 7th and 30th
    most recent closes; a missing close counts as no change.
    """
    price = quote.price
    return MarketContext(
        ticker=quote.symbol,
        current_price=price,
        price_change_24h=quote.change_percent,
        price_change_7d=percent_change(price, _close_ago(history, 7, price)),
        price_change_30d=percent_change(price, _close_ago(history, 30, price)),
        volume_24h=quote.volume,
        volume_change=0.0,
        indicators=indicators,
        recent_news=news,
        history=history,
        market_trend=classify_trend(price, indicators),
        volatility=classify_volatility(indicators.atr, price),
        options_flow=options_flow,
        events_calendar=events_calendar,
        social_sentiment=social_sentiment,
    )
