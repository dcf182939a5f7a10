"""Shared fixtures for the VectorScope test suite."""

from datetime import datetime, timedelta

import pytest

from config import VectorScopeConfig
from domain import (
    EarningsEvent,
    EventsCalendar,
    HistoricalBar,
    IndicatorBundle,
    MarketContext,
    MarketTrend,
    NewsItem,
    NewsSentiment,
    OptionsFlow,
    OptionType,
    Quote,
    SocialSentiment,
    UnusualOption,
    Volatility,
)
from orchestration import Analyzer


FIXED_NOW = datetime(2025, 3, 14, 15, 30, 0)


def make_indicators(**overrides) -> IndicatorBundle:
    """Neutral-ish indicator bundle for a ~$100 stock."""
    values = {
        "rsi": 55.0,
        "macd": 0.4,
        "macd_signal": 0.3,
        "macd_histogram": 0.1,
        "sma20": 99.0,
        "sma50": 97.0,
        "sma200": 90.0,
        "ema12": 99.5,
        "ema26": 98.5,
        "bollinger_upper": 104.0,
        "bollinger_middle": 99.0,
        "bollinger_lower": 94.0,
        "atr": 1.5,
        "adx": 22.0,
        "stoch_k": 60.0,
        "stoch_d": 60.0,
        "obv": 1_500_000.0,
        "vwap": 100.2,
    }
    values.update(overrides)
    return IndicatorBundle(**values)


def make_quote(symbol: str = "ACME", price: float = 100.0, change_percent: float = 1.0, **overrides) -> Quote:
    values = {
        "symbol": symbol,
        "price": price,
        "change": price * change_percent / 100,
        "change_percent": change_percent,
        "high": price * 1.01,
        "low": price * 0.99,
        "open": price * 0.995,
        "previous_close": price / (1 + change_percent / 100),
        "volume": 2_000_000,
        "timestamp": int(FIXED_NOW.timestamp() * 1000),
    }
    values.update(overrides)
    return Quote(**values)


def make_history(count: int = 60, start: float = 80.0, step: float = 0.3) -> list[HistoricalBar]:
    """Most-recent-first daily bars trending up from `start`."""
    bars = []
    for i in range(count):
        close = start + step * (count - 1 - i)
        bars.append(HistoricalBar(
            date=(FIXED_NOW.date() - timedelta(days=i)).isoformat(),
            open=close - 0.2,
            high=close + 1.0,
            low=close - 1.0,
            close=close,
            volume=1_000_000 + i * 1000,
        ))
    return bars


def make_news(title: str, score: float, sentiment: NewsSentiment = NewsSentiment.NEUTRAL, hours_ago: int = 1) -> NewsItem:
    return NewsItem(
        title=title,
        source="Reuters",
        sentiment=sentiment,
        sentiment_score=score,
        timestamp=FIXED_NOW - timedelta(hours=hours_ago),
    )


def make_context(
    price: float = 100.0,
    trend: MarketTrend = MarketTrend.SIDEWAYS,
    volatility: Volatility = Volatility.MEDIUM,
    indicators: IndicatorBundle | None = None,
    news: list[NewsItem] | None = None,
    **overrides,
) -> MarketContext:
    values = {
        "ticker": "ACME",
        "current_price": price,
        "price_change_24h": 1.0,
        "price_change_7d": 2.0,
        "price_change_30d": 5.0,
        "volume_24h": 2_000_000,
        "indicators": indicators or make_indicators(),
        "recent_news": news or [],
        "market_trend": trend,
        "volatility": volatility,
    }
    values.update(overrides)
    return MarketContext(**values)


def make_flow(pcr: float = 1.0, unusual: list[UnusualOption] | None = None, estimated: bool = False) -> OptionsFlow:
    return OptionsFlow(
        ticker="ACME",
        fetched_at=FIXED_NOW,
        put_call_ratio=pcr,
        total_call_volume=10_000,
        total_put_volume=int(10_000 * pcr),
        unusual_activity=unusual or [],
        implied_volatility=32.0,
        iv_percentile=45,
        sentiment=NewsSentiment.NEUTRAL,
        estimated=estimated,
    )


def make_unusual(sentiment: NewsSentiment) -> UnusualOption:
    bullish = sentiment == NewsSentiment.BULLISH
    return UnusualOption(
        type=OptionType.CALL if bullish else OptionType.PUT,
        strike=105.0 if bullish else 95.0,
        expiry="2025-03-21",
        volume=5_000,
        open_interest=1_000,
        premium=250_000.0,
        sentiment=sentiment,
    )


def make_calendar(surprise: float | None, days_to_earnings: int | None = None) -> EventsCalendar:
    recent = EarningsEvent(date="2025-01-30", title="Q4 Earnings Report", surprise=surprise)
    return EventsCalendar(
        ticker="ACME",
        fetched_at=FIXED_NOW,
        recent_earnings=recent,
        days_to_earnings=days_to_earnings,
    )


def make_social(overall: float = 0.4, mentions: int = 40) -> SocialSentiment:
    return SocialSentiment(
        ticker="ACME",
        fetched_at=FIXED_NOW,
        overall_score=overall,
        trending_score=30,
        bullish_posts=25,
        bearish_posts=15,
        total_mentions=mentions,
        sentiment_change_24h=0.05,
    )


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def indicators():
    return make_indicators()


@pytest.fixture
def quote():
    return make_quote()


@pytest.fixture
def history():
    return make_history()


@pytest.fixture
def context():
    return make_context()


# ============================================================================
# Fake providers
# ============================================================================

class FakeQuoteProvider:
    def __init__(self, name: str, quote: Quote | None = None, error: Exception | None = None, configured: bool = True):
        self.source_name = name
        self.is_configured = configured
        self._quote = quote
        self._error = error
        self.calls = 0

    def fetch_quote(self, ticker: str) -> Quote:
        self.calls += 1
        if self._error is not None:
            raise self._error
        return self._quote


class FakeHistoryProvider:
    def __init__(self, name: str, bars: list[HistoricalBar] | None = None, error: Exception | None = None, configured: bool = True):
        self.source_name = name
        self.is_configured = configured
        self._bars = bars
        self._error = error
        self.calls = 0

    def fetch_history(self, ticker: str) -> list[HistoricalBar]:
        self.calls += 1
        if self._error is not None:
            raise self._error
        return self._bars


class FakeNewsProvider:
    source_name = "fake_news"

    def __init__(self, news: list[NewsItem] | None = None, error: Exception | None = None, configured: bool = True):
        self.is_configured = configured
        self._news = news or []
        self._error = error

    def fetch_news(self, ticker: str) -> list[NewsItem]:
        if self._error is not None:
            raise self._error
        return self._news


class FakeSecondaryProvider:
    """Options, events and social provider in one; each returns its value or raises."""

    def __init__(self, options=None, events=None, social=None, error: Exception | None = None):
        self._options = options
        self._events = events
        self._social = social
        self._error = error
        self.calls = 0

    def _serve(self, value):
        self.calls += 1
        if self._error is not None:
            raise self._error
        return value

    def fetch_options_flow(self, ticker, price):
        return self._serve(self._options)

    def fetch_events(self, ticker):
        return self._serve(self._events)

    def fetch_social(self, ticker, news):
        return self._serve(self._social)


@pytest.fixture
def sample_news():
    return [
        make_news("Acme rallies on strong guidance", 0.45, NewsSentiment.BULLISH),
        make_news("Acme faces supply concern", -0.25, NewsSentiment.BEARISH, hours_ago=5),
    ]


def run_analysis(news=None, secondary=None, include_secondary=True):
    """Full offline analysis of ACME over fake providers."""
    secondary = secondary or FakeSecondaryProvider(
        options=make_flow(0.8),
        events=make_calendar(6.0, days_to_earnings=30),
        social=make_social(),
    )
    analyzer = Analyzer(
        VectorScopeConfig(),
        quote_providers=[FakeQuoteProvider("fake_quote", quote=make_quote(price=100.0, change_percent=1.2))],
        history_providers=[FakeHistoryProvider("fake_history", bars=make_history(60))],
        news_provider=FakeNewsProvider(news or []),
        options_provider=secondary,
        events_provider=secondary,
        social_provider=secondary,
    )
    return analyzer.analyze("ACME", include_secondary=include_secondary, now=FIXED_NOW)
