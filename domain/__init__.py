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
from .models import (
    FORECAST_WINDOW,
    FORECAST_WINDOW_MS,
    AnalysisResult,
    CaseAnalysis,
    EarningsEvent,
    EventsCalendar,
    HistoricalBar,
    IndicatorBundle,
    MarketContext,
    MultiSignalAnalysis,
    NewsItem,
    OptionsFlow,
    PlatformSentiment,
    Prediction72H,
    Quote,
    SignalScore,
    SocialSentiment,
    UnusualOption,
)
from .fusion import (
    Vectors,
    average_news_score,
    classify_trend,
    classify_volatility,
    coherence,
    compute_vectors,
    confidence_level,
    decide_verdict,
)
from .context import build_market_context, percent_change
from .cases import generate_bear_case, generate_bull_case
from .forecast import (
    MalformedReasoningResponse,
    ReasonedForecast,
    build_prompt,
    key_levels,
    make_prediction,
    parse_reasoning_response,
    rule_based_forecast,
    rule_based_prediction,
)
from .signals import DEFAULT_WEIGHTS, combine_signals, label_for
from .sentiment import analyze_sentiment, extract_keywords, sentiment_score

__all__ = [
    # Enums
    "Direction",
    "EventImpact",
    "EventType",
    "ForecastOrigin",
    "MarketTrend",
    "NewsSentiment",
    "OptionType",
    "SignalLabel",
    "SignalStrength",
    "Verdict",
    "Volatility",
    # Models
    "FORECAST_WINDOW",
    "FORECAST_WINDOW_MS",
    "AnalysisResult",
    "CaseAnalysis",
    "EarningsEvent",
    "EventsCalendar",
    "HistoricalBar",
    "IndicatorBundle",
    "MarketContext",
    "MultiSignalAnalysis",
    "NewsItem",
    "OptionsFlow",
    "PlatformSentiment",
    "Prediction72H",
    "Quote",
    "SignalScore",
    "SocialSentiment",
    "UnusualOption",
    # Fusion
    "Vectors",
    "average_news_score",
    "classify_trend",
    "classify_volatility",
    "coherence",
    "compute_vectors",
    "confidence_level",
    "decide_verdict",
    # Context and forecast
    "build_market_context",
    "percent_change",
    "generate_bull_case",
    "generate_bear_case",
    "MalformedReasoningResponse",
    "ReasonedForecast",
    "build_prompt",
    "key_levels",
    "make_prediction",
    "parse_reasoning_response",
    "rule_based_forecast",
    "rule_based_prediction",
    # Secondary signals
    "DEFAULT_WEIGHTS",
    "combine_signals",
    "label_for",
    # Sentiment
    "analyze_sentiment",
    "extract_keywords",
    "sentiment_score",
]
