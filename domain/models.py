"""
Domain models - pure data structures with validation.

These are immutable data carriers with no business logic.
All models are JSON-serializable and self-validating.
"""

from datetime import datetime, timedelta
from typing import Annotated

from pydantic import BaseModel, Field, model_validator
from pydantic.alias_generators import to_camel
from pydantic.functional_validators import AfterValidator

from .enums import (
    Direction,
    EventImpact,
    EventType,
    ForecastOrigin,
    MarketTrend,
    NewsSentiment,
    OptionType,
    SignalLabel,
    SignalStrength,
    Verdict,
    Volatility,
)


FORECAST_WINDOW = timedelta(hours=72)
FORECAST_WINDOW_MS = int(FORECAST_WINDOW.total_seconds() * 1000)

# Frozen, camelCase on the wire, snake_case in Python
_FROZEN = {
    "frozen": True,
    "extra": "forbid",
    "alias_generator": to_camel,
    "populate_by_name": True,
}


# ============================================================================
# Custom validators
# ============================================================================

def _validate_symbol(v: str) -> str:
    """Normalize a ticker symbol; any non-empty string is accepted."""
    v = v.upper().strip()
    if not v:
        raise ValueError("symbol cannot be empty")
    return v


def _validate_iso_date(v: str) -> str:
    """Validate an ISO calendar day (YYYY-MM-DD)."""
    datetime.strptime(v, "%Y-%m-%d")
    return v


Symbol = Annotated[str, AfterValidator(_validate_symbol)]
IsoDate = Annotated[str, AfterValidator(_validate_iso_date)]
UnitScore = Annotated[float, Field(ge=-1.0, le=1.0)]


# ============================================================================
# Market data
# ============================================================================

class Quote(BaseModel):
    """
    Canonical real-time quote.

    A zero price means the provider had no data; providers must never
    construct a Quote from it.
    """
    model_config = _FROZEN

    symbol: Symbol
    price: float = Field(gt=0)
    change: float = 0.0
    change_percent: float = 0.0
    high: float = Field(ge=0)
    low: float = Field(ge=0)
    open: float = Field(ge=0)
    previous_close: float = Field(ge=0)
    volume: int = Field(default=0, ge=0)
    market_cap: float | None = Field(default=None, ge=0)
    timestamp: int = Field(description="Epoch milliseconds")


class HistoricalBar(BaseModel):
    """One daily OHLCV bar."""
    model_config = _FROZEN

    date: IsoDate
    open: float = Field(ge=0)
    high: float = Field(ge=0)
    low: float = Field(ge=0)
    close: float = Field(ge=0)
    volume: int = Field(ge=0)

    @model_validator(mode="after")
    def high_above_low(self) -> "HistoricalBar":
        if self.high < self.low:
            raise ValueError(f"high ({self.high}) must be >= low ({self.low})")
        return self


class IndicatorBundle(BaseModel):
    """Snapshot of the technical indicators for one analysis cycle."""
    model_config = _FROZEN

    rsi: float
    macd: float
    macd_signal: float
    macd_histogram: float
    sma20: float
    sma50: float
    sma200: float
    ema12: float
    ema26: float
    bollinger_upper: float
    bollinger_middle: float
    bollinger_lower: float
    atr: float
    adx: float
    stoch_k: float
    stoch_d: float
    obv: float
    vwap: float


class NewsItem(BaseModel):
    """Company headline with derived sentiment."""
    model_config = _FROZEN

    title: str
    source: str
    sentiment: NewsSentiment
    sentiment_score: UnitScore
    timestamp: datetime
    url: str | None = None


# ============================================================================
# Secondary signals
# ============================================================================

class UnusualOption(BaseModel):
    model_config = _FROZEN

    type: OptionType
    strike: float
    expiry: str
    volume: int = Field(ge=0)
    open_interest: int = Field(ge=0)
    premium: float = Field(ge=0, description="Total premium in $")
    sentiment: NewsSentiment


class OptionsFlow(BaseModel):
    """Options chain snapshot; `estimated` is set when synthesized."""
    model_config = _FROZEN

    ticker: Symbol
    fetched_at: datetime
    put_call_ratio: float = Field(ge=0)
    total_call_volume: int = Field(ge=0)
    total_put_volume: int = Field(ge=0)
    unusual_activity: list[UnusualOption] = Field(default_factory=list, max_length=5)
    implied_volatility: float = Field(ge=0, description="Percent")
    iv_percentile: int = Field(ge=0, le=100)
    sentiment: NewsSentiment
    estimated: bool = False


class EarningsEvent(BaseModel):
    model_config = _FROZEN

    date: IsoDate
    type: EventType = EventType.EARNINGS
    title: str
    estimate: float | None = None
    actual: float | None = None
    surprise: float | None = Field(default=None, description="Beat/miss percent")
    impact: EventImpact = EventImpact.HIGH


class EventsCalendar(BaseModel):
    model_config = _FROZEN

    ticker: Symbol
    fetched_at: datetime
    upcoming_earnings: EarningsEvent | None = None
    days_to_earnings: int | None = None
    recent_earnings: EarningsEvent | None = None
    upcoming_events: list[EarningsEvent] = Field(default_factory=list, max_length=5)
    has_near_term_catalyst: bool = False


class PlatformSentiment(BaseModel):
    model_config = _FROZEN

    reddit: UnitScore = 0.0
    twitter: UnitScore = 0.0
    stocktwits: UnitScore = 0.0


class SocialSentiment(BaseModel):
    model_config = _FROZEN

    ticker: Symbol
    fetched_at: datetime
    overall_score: UnitScore
    trending_score: int = Field(ge=0, le=100)
    bullish_posts: int = Field(ge=0)
    bearish_posts: int = Field(ge=0)
    total_mentions: int = Field(ge=0)
    sentiment_change_24h: float
    top_keywords: list[str] = Field(default_factory=list, max_length=5)
    platforms: PlatformSentiment = Field(default_factory=PlatformSentiment)


class SignalScore(BaseModel):
    """One independently scored secondary signal."""
    model_config = _FROZEN

    name: str
    score: float = Field(ge=-100, le=100)
    weight: float = Field(ge=0, le=1)
    confidence: float = Field(ge=0, le=100)
    signal: SignalLabel


class MultiSignalAnalysis(BaseModel):
    """Weighted combination of secondary signals, for display only."""
    model_config = _FROZEN

    technical_score: SignalScore
    options_score: SignalScore
    sentiment_score: SignalScore
    social_score: SignalScore
    event_score: SignalScore
    combined_score: float = Field(ge=-100, le=100)
    combined_confidence: float = Field(ge=0, le=100)
    signal_strength: SignalStrength


# ============================================================================
# Forecast
# ============================================================================

class CaseAnalysis(BaseModel):
    """Bull or bear thesis with conviction score."""
    model_config = _FROZEN

    score: int = Field(ge=0, le=100)
    argument: str
    key: str = Field(description="Momentum key (bull) or resistance key (bear)")
    catalysts: list[str] = Field(default_factory=list)
    risks: list[str] = Field(default_factory=list)
    time_horizon: str
    confidence: float = Field(ge=0, le=1)


class Prediction72H(BaseModel):
    """
    72-hour directional prediction.

    Built only through `domain.forecast.make_prediction`, which is shared
    by the external and rule-based paths.
    """
    model_config = _FROZEN

    direction: Direction
    confidence: float = Field(ge=30, le=95)
    predicted_change: float
    price_target: float = Field(ge=0)
    support_level: float = Field(ge=0)
    resistance_level: float = Field(ge=0)
    reasoning: str
    key_factors: list[str] = Field(default_factory=list)
    risk_factors: list[str] = Field(default_factory=list)
    start: int = Field(description="Epoch milliseconds")
    end: int = Field(description="Epoch milliseconds")
    origin: ForecastOrigin

    @model_validator(mode="after")
    def spans_72_hours(self) -> "Prediction72H":
        if self.end - self.start != FORECAST_WINDOW_MS:
            raise ValueError("prediction window must span exactly 72 hours")
        return self


# ============================================================================
# Analysis context and result
# ============================================================================

class MarketContext(BaseModel):
    """Everything the forecast synthesizer reads for one ticker."""
    model_config = _FROZEN

    ticker: Symbol
    current_price: float = Field(gt=0)
    price_change_24h: float
    price_change_7d: float
    price_change_30d: float
    volume_24h: int = Field(ge=0)
    volume_change: float = 0.0
    indicators: IndicatorBundle
    recent_news: list[NewsItem] = Field(default_factory=list)
    history: list[HistoricalBar] = Field(default_factory=list)
    market_trend: MarketTrend
    volatility: Volatility
    options_flow: OptionsFlow | None = None
    events_calendar: EventsCalendar | None = None
    social_sentiment: SocialSentiment | None = None


class AnalysisResult(BaseModel):
    """Terminal aggregate of one analysis cycle. Read-only once returned."""
    model_config = _FROZEN

    ticker: Symbol
    timestamp: int = Field(description="Epoch milliseconds")

    sentiment_vector: UnitScore
    price_vector: UnitScore
    volume_vector: UnitScore
    coherence: float = Field(ge=0, le=1)

    verdict: Verdict
    confidence_level: float = Field(ge=0, le=1)

    quote: Quote
    history: list[HistoricalBar]
    indicators: IndicatorBundle

    bull_case: CaseAnalysis
    bear_case: CaseAnalysis
    prediction: Prediction72H

    news: list[NewsItem] = Field(default_factory=list)
    overall_sentiment: UnitScore
    volatility_index: float = Field(ge=0)
    trend_strength: float = Field(ge=0, le=1)

    options_flow: OptionsFlow | None = None
    events_calendar: EventsCalendar | None = None
    social_sentiment: SocialSentiment | None = None
    multi_signal: MultiSignalAnalysis | None = None

    # Sources that served fallback or synthetic data for this cycle
    degraded_sources: list[str] = Field(default_factory=list)
