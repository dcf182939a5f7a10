from .base import BaseAdapter
from .alpha_vantage import AlphaVantageAdapter
from .events import EarningsCalendarAdapter, build_calendar
from .finnhub import FinnhubAdapter
from .reasoning import AnthropicReasoningAdapter
from .stocktwits import StockTwitsAdapter, StreamTally, build_social_sentiment
from .synthetic import SyntheticHistoryAdapter, estimate_options_flow, generate_history
from .yahoo import (
    YahooChartAdapter,
    YahooOptionsAdapter,
    YahooQuoteAdapter,
    fetch_next_earnings_date,
)

__all__ = [
    "BaseAdapter",
    "YahooQuoteAdapter",
    "YahooChartAdapter",
    "YahooOptionsAdapter",
    "fetch_next_earnings_date",
    "FinnhubAdapter",
    "AlphaVantageAdapter",
    "StockTwitsAdapter",
    "StreamTally",
    "build_social_sentiment",
    "EarningsCalendarAdapter",
    "build_calendar",
    "SyntheticHistoryAdapter",
    "generate_history",
    "estimate_options_flow",
    "AnthropicReasoningAdapter",
]
