"""
Finnhub adapter for stock data.

Fallback and supplementary source for:
- Real-time quotes (last link of the quote chain)
- Company news (the only news source)
- Earnings calendar

Free tier: 60 API calls/minute.
Requires free API key from: https://finnhub.io/register

Setup:
1. Register at https://finnhub.io/register (free)
2. Get API key from dashboard
3. Set in vectorscope.toml: [api_keys] finnhub = "your_key"
   Or environment: export VECTORSCOPE_FINNHUB_KEY="your_key"

API docs: https://finnhub.io/docs/api
"""

import logging
import math
from datetime import date, datetime, timedelta, timezone
from typing import Any

from domain.models import EarningsEvent, NewsItem, Quote
from domain.sentiment import analyze_sentiment, sentiment_score
from ports import DataError, ErrorCode, ParseError

from .base import SHAPE_ERRORS, BaseAdapter, to_float, to_int

logger = logging.getLogger(__name__)


class FinnhubAdapter(BaseAdapter):
    """
    Finnhub data adapter.

    Every endpoint needs a key; `is_configured` is False without one and
    the acquisition layer skips this adapter.
    """

    BASE_URL = "https://finnhub.io/api/v1"

    @property
    def source_name(self) -> str:
        return "finnhub"

    @property
    def is_configured(self) -> bool:
        return bool(self._config.api_keys.finnhub)

    def _get(self, path: str, params: dict[str, Any]) -> Any:
        if not self.is_configured:
            raise DataError(
                source=self.source_name,
                reason="Finnhub API key not configured",
                code=ErrorCode.VALIDATION_CONFIG,
            )
        url = self._build_url(f"{self.BASE_URL}{path}", {**params, "token": self._config.api_keys.finnhub})
        return self._http_get_json(url)

    def fetch_quote(self, ticker: str) -> Quote:
        """Fetch real-time quote.

        Endpoint: /quote?symbol={ticker}
        Returns: c, d, dp, h, l, o, pc, t (t in epoch seconds)
        """
        ticker = self._validate_ticker(ticker)
        data = self._get("/quote", {"symbol": ticker})

        if not isinstance(data, dict):
            raise ParseError(self.source_name, "response", "quote response is not an object")

        current = to_float(data.get("c"))
        if current <= 0:
            raise DataError.empty(
                source=self.source_name,
                description=f"No quote data for {ticker}",
            )

        logger.debug(f"Fetched Finnhub quote for {ticker}: ${current:.2f}")

        return Quote(
            symbol=ticker,
            price=current,
            change=to_float(data.get("d")),
            change_percent=to_float(data.get("dp")),
            high=to_float(data.get("h")),
            low=to_float(data.get("l")),
            open=to_float(data.get("o")),
            previous_close=to_float(data.get("pc")),
            volume=0,
            timestamp=to_int(data.get("t")) * 1000,
        )

    def fetch_news(self, ticker: str) -> list[NewsItem]:
        """
        Company news over the configured lookback window ending today.

        Endpoint: /company-news?symbol=&from=&to=
        """
        ticker = self._validate_ticker(ticker)
        acquisition = self._config.acquisition
        today = date.today()
        start = today - timedelta(days=acquisition.news_lookback_days)

        data = self._get("/company-news", {
            "symbol": ticker,
            "from": start.isoformat(),
            "to": today.isoformat(),
        })

        if not isinstance(data, list):
            raise ParseError(self.source_name, "response", "company-news response is not a list")

        items: list[NewsItem] = []
        for raw in data[:acquisition.news_limit]:
            try:
                headline = (raw.get("headline") or "").strip()
                if not headline:
                    continue
                text = f"{headline} {raw.get('summary') or ''}"
                items.append(NewsItem(
                    title=headline,
                    source=raw.get("source") or self.source_name,
                    sentiment=analyze_sentiment(text),
                    sentiment_score=sentiment_score(text),
                    timestamp=datetime.fromtimestamp(to_float(raw.get("datetime")), tz=timezone.utc),
                    url=raw.get("url") or None,
                ))
            except (*SHAPE_ERRORS, OSError) as e:
                logger.debug(f"Skipping malformed news item for {ticker}: {e}")

        logger.debug(f"Fetched {len(items)} news items for {ticker}")
        return items

    def fetch_earnings(self, ticker: str, window_days: int | None = None) -> list[EarningsEvent]:
        """
        Earnings reports within +/- window_days of today.

        Endpoint: /calendar/earnings?symbol=&from=&to=
        """
        ticker = self._validate_ticker(ticker)
        window = timedelta(days=window_days or self._config.acquisition.events_window_days)
        today = date.today()

        data = self._get("/calendar/earnings", {
            "symbol": ticker,
            "from": (today - window).isoformat(),
            "to": (today + window).isoformat(),
        })

        if not isinstance(data, dict):
            raise ParseError(self.source_name, "response", "earnings response is not an object")

        rows = data.get("earningsCalendar") or []
        if not isinstance(rows, list):
            raise ParseError(self.source_name, "response", "earningsCalendar is not a list")

        events: list[EarningsEvent] = []
        for raw in rows:
            try:
                event = self._earnings_event(raw)
            except SHAPE_ERRORS as e:
                logger.debug(f"Skipping malformed earnings row for {ticker}: {e}")
                continue
            if event:
                events.append(event)
        return events

    @staticmethod
    def _earnings_event(raw: dict[str, Any]) -> EarningsEvent | None:
        try:
            day = date.fromisoformat(raw.get("date") or "")
        except ValueError:
            return None

        estimate = raw.get("epsEstimate")
        actual = raw.get("epsActual")
        surprise = None
        if estimate is not None and actual is not None and estimate != 0:
            surprise = (actual - estimate) / abs(estimate) * 100

        quarter = math.ceil(day.month / 3)
        return EarningsEvent(
            date=day.isoformat(),
            title=f"Q{quarter} Earnings Report",
            estimate=estimate,
            actual=actual,
            surprise=surprise,
        )
