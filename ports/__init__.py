from .sources import (
    AdapterError,
    DataDegraded,
    DataError,
    ErrorCode,
    EventsProvider,
    ExternalReasoningFailed,
    FetchError,
    HistoryProvider,
    NewsProvider,
    OptionsProvider,
    ParseError,
    QuoteProvider,
    QuoteUnavailable,
    RateLimitError,
    ReasoningService,
    SocialProvider,
    ValidationError,
)

__all__ = [
    # Protocols
    "QuoteProvider",
    "HistoryProvider",
    "NewsProvider",
    "OptionsProvider",
    "EventsProvider",
    "SocialProvider",
    "ReasoningService",
    # Errors
    "AdapterError",
    "RateLimitError",
    "FetchError",
    "ParseError",
    "DataError",
    "ValidationError",
    "QuoteUnavailable",
    "DataDegraded",
    "ExternalReasoningFailed",
    "ErrorCode",
]
