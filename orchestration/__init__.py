from .acquisition import (
    DegradationLog,
    HistoryChain,
    NewsFetcher,
    QuoteChain,
    SecondaryFetcher,
)
from .forecast import synthesize_forecast
from .pipeline import Analyzer, analyze, normalize_ticker

__all__ = [
    "Analyzer",
    "analyze",
    "normalize_ticker",
    "synthesize_forecast",
    "DegradationLog",
    "QuoteChain",
    "HistoryChain",
    "NewsFetcher",
    "SecondaryFetcher",
]
