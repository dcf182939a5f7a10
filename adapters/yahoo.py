"""
Yahoo Finance adapters.

Most reliable free source for:
- Real-time quotes (v7 quote endpoint, v8 chart endpoint as backup)
- Daily price history (v8 chart)
- Options chains (v7 options)
- Next earnings date (via yfinance)

No API key required.
"""

import logging
import urllib.parse
from datetime import date, datetime, timezone
from typing import Any

from domain.enums import NewsSentiment, OptionType
from domain.models import HistoricalBar, OptionsFlow, Quote, UnusualOption
from ports import DataError, ParseError

from .base import SHAPE_ERRORS, BaseAdapter, to_float, to_int

logger = logging.getLogger(__name__)

BASE_URL = "https://query1.finance.yahoo.com"

# Unusual activity: volume above half the open interest and above this floor
UNUSUAL_MIN_VOLUME = 1000
UNUSUAL_OI_RATIO = 0.5
MAX_UNUSUAL = 5
# Strikes within this fraction of spot count as at-the-money
ATM_BAND = 0.05
DEFAULT_IV = 0.3


def _now_ms() -> int:
    return int(datetime.now().timestamp() * 1000)


def _iso_day(epoch_seconds: float) -> str:
    return datetime.fromtimestamp(epoch_seconds, tz=timezone.utc).date().isoformat()


def _series_value(series: list[Any] | None, index: int) -> Any:
    if not isinstance(series, list) or index >= len(series):
        return None
    return series[index]


def iv_percentile(iv: float) -> int:
    """Bucket an implied volatility (fraction) into a rough percentile."""
    if iv < 0.15:
        return 10
    if iv < 0.20:
        return 25
    if iv < 0.25:
        return 40
    if iv < 0.30:
        return 55
    if iv < 0.40:
        return 70
    if iv < 0.50:
        return 85
    return 95


class _YahooAdapter(BaseAdapter):
    """Shared Yahoo helpers."""

    def _chart_result(self, ticker: str, range_: str) -> dict[str, Any]:
        symbol = urllib.parse.quote(ticker)
        url = self._build_url(
            f"{BASE_URL}/v8/finance/chart/{symbol}",
            {"interval": "1d", "range": range_},
        )
        data = self._http_get_json(url)

        if not isinstance(data, dict):
            raise ParseError(self.source_name, "response", "chart response is not an object")

        try:
            results = (data.get("chart") or {}).get("result") or []
            result = results[0] if results else None
        except SHAPE_ERRORS as e:
            raise self._malformed("chart", e) from e

        if not result:
            raise DataError.empty(self.source_name, f"No chart data for {ticker}")
        if not isinstance(result, dict):
            raise ParseError(self.source_name, "response", "chart result is not an object")
        return result

    def _meta_and_quotes(self, result: dict[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
        """The chart's meta block and its first indicators.quote block."""
        try:
            meta = result.get("meta") or {}
            quotes = ((result.get("indicators") or {}).get("quote") or [{}])[0] or {}
        except SHAPE_ERRORS as e:
            raise self._malformed("chart", e) from e
        if not isinstance(meta, dict) or not isinstance(quotes, dict):
            raise ParseError(self.source_name, "response", "chart meta or quote block is not an object")
        return meta, quotes


class YahooQuoteAdapter(_YahooAdapter):
    """
    Yahoo v7 quote endpoint.

    First link of the quote chain.
    """

    @property
    def source_name(self) -> str:
        return "yahoo_quote"

    def fetch_quote(self, ticker: str) -> Quote:
        ticker = self._validate_ticker(ticker)
        url = self._build_url(f"{BASE_URL}/v7/finance/quote", {"symbols": ticker})
        data = self._http_get_json(url)

        if not isinstance(data, dict):
            raise ParseError(self.source_name, "response", "quote response is not an object")

        try:
            results = (data.get("quoteResponse") or {}).get("result") or []
            quote = results[0] if results else None
        except SHAPE_ERRORS as e:
            raise self._malformed("quote", e) from e

        if not quote:
            raise DataError.empty(self.source_name, f"No quote for {ticker}")
        if not isinstance(quote, dict):
            raise ParseError(self.source_name, "response", "quote result is not an object")

        price = to_float(quote.get("regularMarketPrice"))
        if price <= 0:
            raise DataError.missing(self.source_name, "regularMarketPrice")

        return Quote(
            symbol=ticker,
            price=price,
            change=to_float(quote.get("regularMarketChange")),
            change_percent=to_float(quote.get("regularMarketChangePercent")),
            high=to_float(quote.get("regularMarketDayHigh")) or price,
            low=to_float(quote.get("regularMarketDayLow")) or price,
            open=to_float(quote.get("regularMarketOpen")) or price,
            previous_close=to_float(quote.get("regularMarketPreviousClose")) or price,
            volume=to_int(quote.get("regularMarketVolume")),
            market_cap=to_float(quote.get("marketCap")) or None,
            timestamp=_now_ms(),
        )


class YahooChartAdapter(_YahooAdapter):
    """
    Yahoo v8 chart endpoint.

    Second link of the quote chain (1-day range) and first link of the
    history chain (configured range, 6 months by default).
    """

    @property
    def source_name(self) -> str:
        return "yahoo_chart"

    def fetch_quote(self, ticker: str) -> Quote:
        ticker = self._validate_ticker(ticker)
        result = self._chart_result(ticker, "1d")
        meta, quotes = self._meta_and_quotes(result)

        price = to_float(meta.get("regularMarketPrice"))
        if price <= 0:
            raise DataError.missing(self.source_name, "meta.regularMarketPrice")

        previous_close = to_float(meta.get("previousClose")) or price
        change = price - previous_close

        def first(field: str, meta_field: str, default: float) -> float:
            return (
                to_float(_series_value(quotes.get(field), 0))
                or to_float(meta.get(meta_field))
                or default
            )

        return Quote(
            symbol=ticker,
            price=price,
            change=change,
            change_percent=change / previous_close * 100 if previous_close else 0.0,
            high=first("high", "regularMarketDayHigh", price),
            low=first("low", "regularMarketDayLow", price),
            open=first("open", "regularMarketOpen", price),
            previous_close=previous_close,
            volume=to_int(first("volume", "regularMarketVolume", 0.0)),
            timestamp=_now_ms(),
        )

    def fetch_history(self, ticker: str) -> list[HistoricalBar]:
        """
        Daily bars, most recent first.

        Bars with a null close are skipped; missing open/high/low default to
        the close and missing volume to 0.
        """
        ticker = self._validate_ticker(ticker)
        acquisition = self._config.acquisition
        result = self._chart_result(ticker, acquisition.history_range)

        _, quotes = self._meta_and_quotes(result)
        timestamps = result.get("timestamp") or []
        closes = quotes.get("close") or []
        if not isinstance(timestamps, list) or not isinstance(closes, list):
            raise ParseError(self.source_name, "response", "chart timestamp or close series is not a list")

        bars: list[HistoricalBar] = []
        for i in range(len(timestamps) - 1, -1, -1):
            if len(bars) >= acquisition.history_bars:
                break

            close = _series_value(closes, i)
            if close is None:
                continue

            try:
                close = float(close)
                bars.append(HistoricalBar(
                    date=_iso_day(timestamps[i]),
                    open=to_float(_series_value(quotes.get("open"), i)) or close,
                    high=to_float(_series_value(quotes.get("high"), i)) or close,
                    low=to_float(_series_value(quotes.get("low"), i)) or close,
                    close=close,
                    volume=to_int(_series_value(quotes.get("volume"), i)),
                ))
            except (*SHAPE_ERRORS, OSError) as e:
                logger.debug(f"Skipping malformed {ticker} bar at index {i}: {e}")

        if not bars:
            raise DataError.empty(self.source_name, f"No price history for {ticker}")

        logger.debug(f"Fetched {len(bars)} daily bars for {ticker} from Yahoo")
        return bars


class YahooOptionsAdapter(_YahooAdapter):
    """Nearest-expiry options chain summarized into an OptionsFlow."""

    @property
    def source_name(self) -> str:
        return "yahoo_options"

    def fetch_options_flow(self, ticker: str, price: float) -> OptionsFlow:
        ticker = self._validate_ticker(ticker)
        data = self._http_get_json(f"{BASE_URL}/v7/finance/options/{urllib.parse.quote(ticker)}")

        if not isinstance(data, dict):
            raise ParseError(self.source_name, "response", "options response is not an object")

        try:
            results = (data.get("optionChain") or {}).get("result") or []
            chains = (results[0].get("options") or []) if results else []
        except SHAPE_ERRORS as e:
            raise self._malformed("options chain", e) from e
        if not chains:
            raise DataError.empty(self.source_name, f"No options chain for {ticker}")

        try:
            calls = chains[0].get("calls") or []
            puts = chains[0].get("puts") or []

            call_volume = sum(to_int(c.get("volume")) for c in calls)
            put_volume = sum(to_int(p.get("volume")) for p in puts)

            atm_calls = [
                c for c in calls
                if to_float(c.get("strike")) and abs(to_float(c.get("strike")) - price) < price * ATM_BAND
            ]
            if atm_calls:
                avg_iv = sum(to_float(c.get("impliedVolatility"), DEFAULT_IV) for c in atm_calls) / len(atm_calls)
            else:
                avg_iv = DEFAULT_IV

            unusual = [
                self._unusual(contract, OptionType.CALL, price) for contract in calls
            ] + [
                self._unusual(contract, OptionType.PUT, price) for contract in puts
            ]
        except (*SHAPE_ERRORS, OSError) as e:
            raise self._malformed("options chain", e) from e

        put_call_ratio = put_volume / call_volume if call_volume > 0 else 1.0
        unusual = sorted((u for u in unusual if u), key=lambda u: u.premium, reverse=True)

        sentiment = NewsSentiment.NEUTRAL
        if put_call_ratio < 0.7:
            sentiment = NewsSentiment.BULLISH
        elif put_call_ratio > 1.3:
            sentiment = NewsSentiment.BEARISH

        unusual_calls = sum(1 for u in unusual if u.type == OptionType.CALL)
        unusual_puts = len(unusual) - unusual_calls
        if unusual_calls > unusual_puts + 2:
            sentiment = NewsSentiment.BULLISH
        elif unusual_puts > unusual_calls + 2:
            sentiment = NewsSentiment.BEARISH

        return OptionsFlow(
            ticker=ticker,
            fetched_at=datetime.now(),
            put_call_ratio=round(put_call_ratio, 2),
            total_call_volume=call_volume,
            total_put_volume=put_volume,
            unusual_activity=unusual[:MAX_UNUSUAL],
            implied_volatility=round(avg_iv * 100, 1),
            iv_percentile=iv_percentile(avg_iv),
            sentiment=sentiment,
        )

    @staticmethod
    def _unusual(contract: dict[str, Any], option_type: OptionType, price: float) -> UnusualOption | None:
        volume = to_int(contract.get("volume"))
        open_interest = to_int(contract.get("openInterest"))
        if not open_interest or volume <= open_interest * UNUSUAL_OI_RATIO or volume <= UNUSUAL_MIN_VOLUME:
            return None

        expiration = contract.get("expiration")
        if isinstance(expiration, dict):
            expiry = expiration.get("fmt") or "Unknown"
        elif isinstance(expiration, (int, float)):
            expiry = _iso_day(expiration)
        else:
            expiry = "Unknown"

        return UnusualOption(
            type=option_type,
            strike=to_float(contract.get("strike")) or price,
            expiry=expiry,
            volume=volume,
            open_interest=open_interest,
            premium=(to_float(contract.get("lastPrice")) or 1.0) * volume * 100,
            sentiment=NewsSentiment.BULLISH if option_type == OptionType.CALL else NewsSentiment.BEARISH,
        )


def fetch_next_earnings_date(ticker: str) -> date | None:
    """
    Next earnings date from Yahoo via yfinance, or None.

    Used when Finnhub has no upcoming earnings for the ticker.
    """
    import yfinance as yf

    calendar = yf.Ticker(ticker).calendar
    if not calendar:
        return None

    # yfinance returns a dict with a list of dates under "Earnings Date"
    dates = calendar.get("Earnings Date") if isinstance(calendar, dict) else None
    if not dates:
        return None

    today = date.today()
    upcoming = []
    for value in dates:
        day = value.date() if isinstance(value, datetime) else value
        if isinstance(day, date) and day > today:
            upcoming.append(day)
    return min(upcoming) if upcoming else None
