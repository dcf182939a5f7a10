"""
Alpha Vantage adapter.

Second link of the history chain. Free tier allows 25 requests/day; a
throttled response is still HTTP 200 with a "Note" or "Information" key
instead of data.

Get a key at: https://www.alphavantage.co/support/#api-key
"""

import logging

from domain.models import HistoricalBar
from ports import DataError, ErrorCode, ParseError, RateLimitError

from .base import SHAPE_ERRORS, BaseAdapter, to_float, to_int

logger = logging.getLogger(__name__)

SERIES_KEY = "Time Series (Daily)"
THROTTLE_KEYS = ("Note", "Information")


class AlphaVantageAdapter(BaseAdapter):
    """TIME_SERIES_DAILY history, string-encoded values parsed to numbers."""

    BASE_URL = "https://www.alphavantage.co/query"

    @property
    def source_name(self) -> str:
        return "alpha_vantage"

    @property
    def is_configured(self) -> bool:
        return bool(self._config.api_keys.alpha_vantage)

    def fetch_history(self, ticker: str) -> list[HistoricalBar]:
        """
        Most recent daily bars, newest first.

        Raises:
            RateLimitError: Body carries a throttling notice
            DataError: No time series in the body
        """
        ticker = self._validate_ticker(ticker)
        if not self.is_configured:
            raise DataError(
                source=self.source_name,
                reason="Alpha Vantage API key not configured",
                code=ErrorCode.VALIDATION_CONFIG,
            )

        url = self._build_url(self.BASE_URL, {
            "function": "TIME_SERIES_DAILY",
            "symbol": ticker,
            "outputsize": "compact",
            "apikey": self._config.api_keys.alpha_vantage,
        })
        data = self._http_get_json(url)

        if not isinstance(data, dict):
            raise ParseError(self.source_name, "response", "response is not an object")

        for key in THROTTLE_KEYS:
            if key in data:
                raise RateLimitError(source=self.source_name, notice=str(data[key]))

        series = data.get(SERIES_KEY)
        if not isinstance(series, dict) or not series:
            raise DataError.empty(self.source_name, f"No daily series for {ticker}")

        limit = self._config.acquisition.history_bars
        bars: list[HistoricalBar] = []
        # ISO dates sort lexically; newest first
        for day in sorted(series, reverse=True):
            if len(bars) >= limit:
                break
            values = series[day]
            try:
                bars.append(HistoricalBar(
                    date=day,
                    open=to_float(values.get("1. open")),
                    high=to_float(values.get("2. high")),
                    low=to_float(values.get("3. low")),
                    close=to_float(values.get("4. close")),
                    volume=to_int(values.get("5. volume")),
                ))
            except SHAPE_ERRORS as e:
                logger.debug(f"Skipping malformed {ticker} bar for {day}: {e}")

        if not bars:
            raise DataError.empty(self.source_name, f"No usable bars for {ticker}")

        logger.debug(f"Fetched {len(bars)} daily bars for {ticker} from Alpha Vantage")
        return bars
