"""
Provider ports and error types.

This module defines the protocols the acquisition layer depends on and the
structured error taxonomy shared by every adapter.
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from domain.forecast import ReasonedForecast
from domain.models import (
    EventsCalendar,
    HistoricalBar,
    MarketContext,
    NewsItem,
    OptionsFlow,
    Quote,
    SocialSentiment,
)


# ============================================================================
# Error Codes
# ============================================================================

class ErrorCode(str, Enum):
    """Error codes for structured error handling."""

    # Network errors (1xx)
    NETWORK_TIMEOUT = "E101"
    NETWORK_CONNECTION = "E102"
    NETWORK_DNS = "E103"
    NETWORK_SSL = "E104"

    # HTTP errors (2xx)
    HTTP_CLIENT_ERROR = "E201"
    HTTP_SERVER_ERROR = "E202"
    HTTP_RATE_LIMITED = "E203"
    HTTP_UNAUTHORIZED = "E204"
    HTTP_FORBIDDEN = "E205"
    HTTP_NOT_FOUND = "E206"

    # Parse errors (3xx)
    PARSE_JSON = "E301"
    PARSE_DATE = "E304"
    PARSE_RESPONSE = "E305"

    # Data errors (4xx)
    DATA_MISSING = "E401"
    DATA_INVALID = "E402"
    DATA_EMPTY = "E404"
    DATA_DEGRADED = "E405"

    # Validation errors (5xx)
    VALIDATION_TICKER = "E501"
    VALIDATION_PARAM = "E502"
    VALIDATION_CONFIG = "E503"

    # External reasoning errors (6xx)
    REASONING_FAILED = "E601"

    # Internal errors (9xx)
    UNKNOWN = "E999"


# ============================================================================
# Error Classes
# ============================================================================

class AdapterError(Exception):
    """
    Base exception for adapter failures.

    Provides structured error information for debugging and monitoring.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN,
        source: str | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        self.code = code
        self.source = source
        self.context = context or {}
        self.cause = cause
        self.timestamp = datetime.now()

        parts = [f"[{code.value}]"]
        if source:
            parts.append(f"[{source}]")
        parts.append(message)

        self.message = message
        super().__init__(" ".join(parts))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "code": self.code.value,
            "message": self.message,
            "source": self.source,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None,
        }


class RateLimitError(AdapterError):
    """Raised on HTTP 429 or a provider's in-body throttling notice."""

    def __init__(
        self,
        retry_after: timedelta | None = None,
        source: str | None = None,
        notice: str | None = None,
    ):
        self.retry_after = retry_after
        self.notice = notice

        msg = "Rate limit exceeded"
        if retry_after:
            msg += f", retry after {retry_after.total_seconds():.0f}s"

        context: dict[str, Any] = {}
        if retry_after:
            context["retry_after_seconds"] = retry_after.total_seconds()
        if notice:
            context["notice"] = notice[:200]

        super().__init__(
            message=msg,
            code=ErrorCode.HTTP_RATE_LIMITED,
            source=source,
            context=context,
        )


class FetchError(AdapterError):
    """Raised when a request fails at the network or HTTP level."""

    def __init__(
        self,
        source: str,
        reason: str,
        code: ErrorCode = ErrorCode.UNKNOWN,
        url: str | None = None,
        status_code: int | None = None,
        cause: Exception | None = None,
    ):
        self.reason = reason
        self.url = url
        self.status_code = status_code

        context: dict[str, Any] = {"reason": reason}
        if url:
            context["url"] = url
        if status_code:
            context["status_code"] = status_code

        super().__init__(
            message=reason,
            code=code,
            source=source,
            context=context,
            cause=cause,
        )

    @classmethod
    def from_http_error(
        cls,
        source: str,
        status_code: int,
        url: str | None = None,
        response_body: str | None = None,
    ) -> AdapterError:
        """Create the error for a non-2xx response; 429 maps to RateLimitError."""
        if status_code == 429:
            return RateLimitError(source=source)

        if 400 <= status_code < 500:
            code = ErrorCode.HTTP_CLIENT_ERROR
            if status_code == 401:
                code = ErrorCode.HTTP_UNAUTHORIZED
            elif status_code == 403:
                code = ErrorCode.HTTP_FORBIDDEN
            elif status_code == 404:
                code = ErrorCode.HTTP_NOT_FOUND
        else:
            code = ErrorCode.HTTP_SERVER_ERROR

        reason = f"HTTP {status_code}"
        if response_body:
            reason += f": {response_body[:100]}"

        return cls(
            source=source,
            reason=reason,
            code=code,
            url=url,
            status_code=status_code,
        )

    @classmethod
    def from_network_error(
        cls,
        source: str,
        error: Exception,
        url: str | None = None,
    ) -> "FetchError":
        """Create FetchError from a network exception."""
        error_str = str(error).lower()

        if "timeout" in error_str or "timed out" in error_str:
            code = ErrorCode.NETWORK_TIMEOUT
            reason = "Request timed out"
        elif "ssl" in error_str or "certificate" in error_str:
            code = ErrorCode.NETWORK_SSL
            reason = "SSL/TLS error"
        elif "name resolution" in error_str or "nodename" in error_str:
            code = ErrorCode.NETWORK_DNS
            reason = "DNS resolution failed"
        else:
            code = ErrorCode.NETWORK_CONNECTION
            reason = f"Connection error: {error}"

        return cls(
            source=source,
            reason=reason,
            code=code,
            url=url,
            cause=error,
        )


class ParseError(AdapterError):
    """Raised when a response body cannot be decoded or has the wrong shape."""

    def __init__(
        self,
        source: str,
        format_type: str,
        reason: str,
        raw_content: str | None = None,
        cause: Exception | None = None,
    ):
        code_map = {
            "json": ErrorCode.PARSE_JSON,
            "date": ErrorCode.PARSE_DATE,
            "response": ErrorCode.PARSE_RESPONSE,
        }
        code = code_map.get(format_type, ErrorCode.UNKNOWN)

        context = {"format": format_type}
        if raw_content:
            context["raw_preview"] = raw_content[:200]

        super().__init__(
            message=f"Failed to parse {format_type}: {reason}",
            code=code,
            source=source,
            context=context,
            cause=cause,
        )


class DataError(AdapterError):
    """Raised when a response parses but holds no usable data."""

    def __init__(
        self,
        source: str,
        reason: str,
        code: ErrorCode = ErrorCode.DATA_INVALID,
        field: str | None = None,
        expected: Any = None,
        actual: Any = None,
    ):
        context = {"reason": reason}
        if field:
            context["field"] = field
        if expected is not None:
            context["expected"] = str(expected)
        if actual is not None:
            context["actual"] = str(actual)

        super().__init__(
            message=reason,
            code=code,
            source=source,
            context=context,
        )

    @classmethod
    def missing(cls, source: str, field: str) -> "DataError":
        """Create error for missing required field."""
        return cls(
            source=source,
            reason=f"Missing required field: {field}",
            code=ErrorCode.DATA_MISSING,
            field=field,
        )

    @classmethod
    def empty(cls, source: str, description: str = "No data") -> "DataError":
        """Create error for empty result set."""
        return cls(
            source=source,
            reason=description,
            code=ErrorCode.DATA_EMPTY,
        )


class ValidationError(AdapterError):
    """Raised when input validation fails."""

    def __init__(
        self,
        reason: str,
        field: str,
        value: Any = None,
        source: str | None = None,
    ):
        context = {"field": field}
        if value is not None:
            context["value"] = str(value)[:50]

        super().__init__(
            message=reason,
            code=ErrorCode.VALIDATION_PARAM,
            source=source,
            context=context,
        )

    @classmethod
    def invalid_ticker(cls, ticker: str, reason: str = "Invalid format") -> "ValidationError":
        """Create error for invalid ticker symbol."""
        error = cls(
            reason=f"Invalid ticker '{ticker}': {reason}",
            field="ticker",
            value=ticker,
        )
        error.code = ErrorCode.VALIDATION_TICKER
        return error


class QuoteUnavailable(AdapterError):
    """
    Every quote provider failed for a ticker.

    The only error `analyze()` surfaces for a failed scan.
    """

    def __init__(self, ticker: str, reason: str | None = None, attempts: list[str] | None = None):
        self.ticker = ticker
        self.reason = reason or f"No quote data available for {ticker}"
        self.attempts = attempts or []

        super().__init__(
            message=self.reason,
            code=ErrorCode.DATA_MISSING,
            source="quote",
            context={"ticker": ticker, "attempts": self.attempts},
        )


class DataDegraded(AdapterError):
    """
    A non-critical source served fallback, synthetic or no data.

    Recorded on the analysis result and passed to callbacks; never raised
    out of the pipeline.
    """

    def __init__(self, kind: str, served_by: str, reason: str = ""):
        self.kind = kind
        self.served_by = served_by
        self.reason = reason

        message = f"{kind} served by {served_by}"
        if reason:
            message += f" ({reason})"

        super().__init__(
            message=message,
            code=ErrorCode.DATA_DEGRADED,
            source=kind,
            context={"served_by": served_by},
        )

    @property
    def label(self) -> str:
        """Short form stored on AnalysisResult.degraded_sources."""
        return f"{self.kind}:{self.served_by}"


class ExternalReasoningFailed(AdapterError):
    """The reasoning service failed, timed out or replied off-contract."""

    def __init__(self, reason: str, cause: Exception | None = None):
        super().__init__(
            message=reason,
            code=ErrorCode.REASONING_FAILED,
            source="reasoning",
            cause=cause,
        )


# ============================================================================
# Provider protocols
# ============================================================================

@runtime_checkable
class QuoteProvider(Protocol):
    """
    One quote source in the fallback chain.

    Implementations must never return a Quote built from a zero price, and
    fail with an AdapterError instead.
    """

    @property
    def source_name(self) -> str:
        ...

    def fetch_quote(self, ticker: str) -> Quote:
        """
        Raises:
            FetchError: Network or HTTP failure
            ParseError: Unexpected response shape
            DataError: No usable price
        """
        ...


@runtime_checkable
class HistoryProvider(Protocol):
    """One daily-history source; returns most-recent-first bars."""

    @property
    def source_name(self) -> str:
        ...

    def fetch_history(self, ticker: str) -> list[HistoricalBar]:
        """
        Raises:
            RateLimitError: Provider throttled the request
            FetchError: Network or HTTP failure
            DataError: Empty series
        """
        ...


@runtime_checkable
class NewsProvider(Protocol):
    @property
    def source_name(self) -> str:
        ...

    def fetch_news(self, ticker: str) -> list[NewsItem]:
        ...


@runtime_checkable
class OptionsProvider(Protocol):
    def fetch_options_flow(self, ticker: str, price: float) -> OptionsFlow:
        ...


@runtime_checkable
class EventsProvider(Protocol):
    def fetch_events(self, ticker: str) -> EventsCalendar:
        ...


@runtime_checkable
class SocialProvider(Protocol):
    def fetch_social(self, ticker: str, news: list[NewsItem]) -> SocialSentiment:
        ...


@runtime_checkable
class ReasoningService(Protocol):
    """External reasoning over a MarketContext."""

    def reason(self, context: MarketContext) -> ReasonedForecast:
        """
        Raises:
            ExternalReasoningFailed: Any failure, including malformed replies
        """
        ...
