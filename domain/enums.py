from enum import Enum


class Verdict(str, Enum):
    """Discrete recommendation produced by signal fusion."""
    STRONG_BUY = "STRONG_BUY"
    BUY = "BUY"
    HOLD = "HOLD"
    SELL = "SELL"
    STRONG_SELL = "STRONG_SELL"


class Direction(str, Enum):
    """72-hour forecast direction."""
    UP = "UP"
    DOWN = "DOWN"
    SIDEWAYS = "SIDEWAYS"


class NewsSentiment(str, Enum):
    """Headline sentiment label."""
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class MarketTrend(str, Enum):
    """Trend derived from price vs SMA50 and MACD sign."""
    BULLISH = "bullish"
    BEARISH = "bearish"
    SIDEWAYS = "sideways"


class Volatility(str, Enum):
    """Volatility bucket from ATR as a percent of price."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EXTREME = "extreme"


class SignalLabel(str, Enum):
    """Label for a secondary signal score."""
    STRONG_BUY = "strong_buy"
    BUY = "buy"
    NEUTRAL = "neutral"
    SELL = "sell"
    STRONG_SELL = "strong_sell"


class SignalStrength(str, Enum):
    """Overall strength of the combined secondary signals."""
    STRONG = "strong"
    MODERATE = "moderate"
    WEAK = "weak"


class OptionType(str, Enum):
    CALL = "CALL"
    PUT = "PUT"


class EventType(str, Enum):
    """Calendar event type."""
    EARNINGS = "earnings"
    DIVIDEND = "dividend"
    SPLIT = "split"
    CONFERENCE = "conference"
    FDA = "fda"
    OTHER = "other"


class EventImpact(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ForecastOrigin(str, Enum):
    """Which path produced a forecast."""
    EXTERNAL = "external"
    RULE_BASED = "rule_based"
