"""
Base adapter with shared HTTP handling and structured logging.

All HTTP adapters inherit from BaseAdapter to get:
- Injected configuration (credentials, timeout, user agent)
- Standardized HTTP error mapping to the ports error taxonomy
- Structured logging at request/response boundaries

Adapters hold no per-request state, so one instance may serve concurrent
analyses.
"""

import json
import logging
import math
import re
import time
import urllib.error
import urllib.parse
import urllib.request
from abc import ABC, abstractmethod
from typing import Any

from config import VectorScopeConfig, get_config
from ports import FetchError, ParseError, ValidationError

logger = logging.getLogger(__name__)

_TICKER_PATTERN = re.compile(r"^[A-Z0-9.\-^=]{1,12}$")

# Raised while reading a JSON payload whose shape differs from the documented one
SHAPE_ERRORS = (KeyError, IndexError, TypeError, ValueError, AttributeError, OverflowError)


class BaseAdapter(ABC):
    """
    Base class for all HTTP data source adapters.

    Args:
        config: Configuration to read credentials and HTTP settings from.
            Defaults to the cached global config.
        timeout: Per-request timeout in seconds, overriding the config.
    """

    def __init__(self, config: VectorScopeConfig | None = None, timeout: float | None = None):
        self._config = config or get_config()
        self._timeout = timeout or self._config.http.timeout_seconds

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Unique identifier for this data source."""
        ...

    @property
    def timeout(self) -> float:
        return self._timeout

    # ========================================================================
    # HTTP Helpers (shared by all adapters)
    # ========================================================================

    def _build_url(self, base: str, params: dict[str, Any] | None = None) -> str:
        if not params:
            return base
        query = urllib.parse.urlencode({k: v for k, v in params.items() if v is not None})
        return f"{base}?{query}"

    def _request(
        self,
        req: urllib.request.Request,
        timeout: float | None = None,
    ) -> bytes:
        """
        Execute a prepared request with standardized error handling.

        Raises:
            RateLimitError: On 429 response
            FetchError: On other HTTP or network errors
        """
        url = req.full_url
        timeout = timeout or self._timeout

        logger.debug(
            f"HTTP {req.get_method()} {url}",
            extra={"source": self.source_name, "url": url},
        )
        start_time = time.monotonic()

        try:
            with urllib.request.urlopen(req, timeout=timeout) as resp:
                data = resp.read()
                elapsed = time.monotonic() - start_time

                logger.debug(
                    f"HTTP {resp.status} ({len(data)} bytes, {elapsed:.2f}s)",
                    extra={
                        "source": self.source_name,
                        "url": url,
                        "status": resp.status,
                        "size": len(data),
                        "elapsed_ms": int(elapsed * 1000),
                    },
                )
                return data

        except urllib.error.HTTPError as e:
            elapsed = time.monotonic() - start_time
            logger.warning(
                f"HTTP {e.code} from {self.source_name} ({elapsed:.2f}s)",
                extra={
                    "source": self.source_name,
                    "url": url,
                    "status": e.code,
                    "elapsed_ms": int(elapsed * 1000),
                },
            )
            raise FetchError.from_http_error(
                source=self.source_name,
                status_code=e.code,
                url=url,
                response_body=str(e.reason),
            ) from e

        except (urllib.error.URLError, TimeoutError) as e:
            elapsed = time.monotonic() - start_time
            reason = getattr(e, "reason", e)
            logger.warning(
                f"Network error for {self.source_name}: {reason} ({elapsed:.2f}s)",
                extra={
                    "source": self.source_name,
                    "url": url,
                    "error": str(reason),
                    "elapsed_ms": int(elapsed * 1000),
                },
            )
            raise FetchError.from_network_error(
                source=self.source_name,
                error=e,
                url=url,
            ) from e

    def _http_get(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> bytes:
        """
        Make HTTP GET request.

        Args:
            url: URL to fetch
            headers: Additional headers (User-Agent added automatically)
            timeout: Request timeout (defaults to the adapter timeout)

        Returns:
            Response body as bytes
        """
        req_headers = {"User-Agent": self._config.http.user_agent}
        if headers:
            req_headers.update(headers)
        return self._request(urllib.request.Request(url, headers=req_headers), timeout)

    def _decode_json(self, data: bytes, url: str) -> Any:
        try:
            return json.loads(data.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(
                f"JSON parse error from {self.source_name}: {e}",
                extra={"source": self.source_name, "url": url, "error": str(e)},
            )
            raise ParseError(
                source=self.source_name,
                format_type="json",
                reason=str(e),
                raw_content=data.decode("utf-8", errors="replace")[:500],
                cause=e,
            ) from e

    def _http_get_json(
        self,
        url: str,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """
        Make HTTP GET request and parse JSON response.

        Raises:
            FetchError: On HTTP or network errors
            ParseError: On JSON parse errors
        """
        return self._decode_json(self._http_get(url, headers), url)

    def _http_post_json(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> Any:
        """POST a JSON body and parse the JSON response."""
        req_headers = {
            "User-Agent": self._config.http.user_agent,
            "Content-Type": "application/json",
        }
        if headers:
            req_headers.update(headers)

        req = urllib.request.Request(
            url,
            data=json.dumps(payload).encode("utf-8"),
            headers=req_headers,
            method="POST",
        )
        return self._decode_json(self._request(req, timeout), url)

    def _malformed(self, what: str, error: Exception) -> ParseError:
        """ParseError for a payload that decoded but has an unexpected shape."""
        logger.warning(
            f"Malformed {what} from {self.source_name}: {error!r}",
            extra={"source": self.source_name, "error": repr(error)},
        )
        return ParseError(
            source=self.source_name,
            format_type="response",
            reason=f"unexpected {what} shape: {error!r}",
            cause=error,
        )

    # ========================================================================
    # Input Validation Helpers
    # ========================================================================

    def _validate_ticker(self, ticker: str) -> str:
        """
        Validate and normalize ticker symbol.

        Raises:
            ValidationError: If ticker is invalid
        """
        if not ticker or not ticker.strip():
            raise ValidationError.invalid_ticker(ticker, "Ticker cannot be empty")

        ticker = ticker.upper().strip()

        # Letters, digits, dots, dashes; ^ and = for indices and FX pairs
        if not _TICKER_PATTERN.match(ticker):
            raise ValidationError.invalid_ticker(
                ticker,
                "Must be 1-12 letters, numbers, dots, or dashes",
            )

        return ticker


def to_float(value: Any, default: float = 0.0) -> float:
    """Coerce provider numbers (possibly strings or null) to float."""
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def to_int(value: Any, default: int = 0) -> int:
    number = to_float(value, float(default))
    return int(number) if math.isfinite(number) else default
