"""
Market data acquisition with provider fallback chains.

Each chain is an ordered list of provider strategies tried left to right;
the first success short-circuits. Failures are caught per provider, logged
and fall through. No retries.

- Quote: exhaustion raises QuoteUnavailable (the only fatal failure)
- History: ends in the synthetic walk, so it always yields bars
- News and secondary signals: degrade to empty or estimated data

Every fallback is recorded as a DataDegraded event on a per-request
DegradationLog; nothing is shared between analyses.
"""

import logging
import threading
from typing import Callable, Sequence

from pydantic import ValidationError as PydanticValidationError

from adapters.synthetic import estimate_options_flow
from domain.models import (
    EventsCalendar,
    HistoricalBar,
    NewsItem,
    OptionsFlow,
    Quote,
    SocialSentiment,
)
from ports import (
    AdapterError,
    DataDegraded,
    EventsProvider,
    HistoryProvider,
    NewsProvider,
    OptionsProvider,
    QuoteProvider,
    QuoteUnavailable,
    SocialProvider,
)

logger = logging.getLogger(__name__)

# Provider failures that fall through to the next link
PROVIDER_ERRORS = (AdapterError, PydanticValidationError)


def _is_configured(provider: object) -> bool:
    """Providers without credentials expose is_configured = False."""
    return getattr(provider, "is_configured", True)


def _name(provider: object) -> str:
    return getattr(provider, "source_name", type(provider).__name__)


class DegradationLog:
    """Collects DataDegraded events for one analysis request."""

    def __init__(self, on_degraded: Callable[[DataDegraded], None] | None = None):
        self._events: list[DataDegraded] = []
        self._lock = threading.Lock()
        self._on_degraded = on_degraded

    def record(self, kind: str, served_by: str, reason: str = "") -> DataDegraded:
        event = DataDegraded(kind, served_by, reason)
        with self._lock:
            self._events.append(event)

        logger.warning(
            f"Degraded data: {event.message}",
            extra={"kind": kind, "served_by": served_by},
        )
        if self._on_degraded is not None:
            self._on_degraded(event)
        return event

    @property
    def events(self) -> list[DataDegraded]:
        with self._lock:
            return list(self._events)

    @property
    def labels(self) -> list[str]:
        return [event.label for event in self.events]


class QuoteChain:
    """Quote providers in priority order."""

    def __init__(self, providers: Sequence[QuoteProvider]):
        self.providers = list(providers)

    def fetch(self, ticker: str) -> Quote:
        """
        Raises:
            QuoteUnavailable: Every configured provider failed
        """
        attempts: list[str] = []

        for provider in self.providers:
            name = _name(provider)
            if not _is_configured(provider):
                logger.debug(f"Skipping unconfigured quote provider {name}")
                continue

            attempts.append(name)
            try:
                quote = provider.fetch_quote(ticker)
            except PROVIDER_ERRORS as e:
                logger.warning(
                    f"Quote provider {name} failed for {ticker}: {e}",
                    extra={"source": name, "ticker": ticker},
                )
                continue

            logger.debug(f"Quote for {ticker} served by {name}: ${quote.price:.2f}")
            return quote

        raise QuoteUnavailable(
            ticker,
            reason=f"Unable to fetch quote for {ticker}. Please check the symbol and try again.",
            attempts=attempts,
        )


class HistoryChain:
    """History providers in priority order; the primary is the first one."""

    def __init__(self, providers: Sequence[HistoryProvider]):
        self.providers = list(providers)

    def fetch(self, ticker: str, log: DegradationLog) -> list[HistoricalBar]:
        primary = _name(self.providers[0]) if self.providers else None

        for provider in self.providers:
            name = _name(provider)
            if not _is_configured(provider):
                logger.debug(f"Skipping unconfigured history provider {name}")
                continue

            try:
                bars = provider.fetch_history(ticker)
            except PROVIDER_ERRORS as e:
                logger.warning(
                    f"History provider {name} failed for {ticker}: {e}",
                    extra={"source": name, "ticker": ticker},
                )
                continue

            if not bars:
                logger.warning(f"History provider {name} returned no bars for {ticker}")
                continue

            if name != primary:
                log.record("history", name, f"{primary} unavailable")
            return bars

        log.record("history", "none", "all history providers failed")
        return []


class NewsFetcher:
    """Single news source; any failure yields no news."""

    def __init__(self, provider: NewsProvider | None):
        self.provider = provider

    def fetch(self, ticker: str, log: DegradationLog) -> list[NewsItem]:
        if self.provider is None or not _is_configured(self.provider):
            log.record("news", "none", "news provider not configured")
            return []

        try:
            return self.provider.fetch_news(ticker)
        except PROVIDER_ERRORS as e:
            log.record("news", "none", str(e))
            return []


class SecondaryFetcher:
    """Options, events and social providers. Never raises."""

    def __init__(
        self,
        options: OptionsProvider | None = None,
        events: EventsProvider | None = None,
        social: SocialProvider | None = None,
        seed: int | None = None,
    ):
        self.options = options
        self.events = events
        self.social = social
        self.seed = seed

    def fetch_options(self, ticker: str, price: float, log: DegradationLog) -> OptionsFlow:
        if self.options is not None:
            try:
                return self.options.fetch_options_flow(ticker, price)
            except PROVIDER_ERRORS as e:
                reason = str(e)
        else:
            reason = "options provider not configured"

        log.record("options", "estimated", reason)
        return estimate_options_flow(ticker, price, seed=self.seed)

    def fetch_events(self, ticker: str, log: DegradationLog) -> EventsCalendar | None:
        if self.events is None:
            return None
        try:
            return self.events.fetch_events(ticker)
        except PROVIDER_ERRORS as e:
            log.record("events", "none", str(e))
            return None

    def fetch_social(self, ticker: str, news: list[NewsItem], log: DegradationLog) -> SocialSentiment | None:
        if self.social is None:
            return None
        try:
            return self.social.fetch_social(ticker, news)
        except PROVIDER_ERRORS as e:
            log.record("social", "none", str(e))
            return None
