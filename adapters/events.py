"""
Earnings calendar assembly.

Finnhub's earnings calendar is the primary source. When it has no upcoming
report (or no key is configured) the next earnings date comes from Yahoo
via yfinance.
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from datetime import date, datetime
from typing import Callable

from domain.enums import EventImpact, EventType
from domain.models import EarningsEvent, EventsCalendar
from ports import AdapterError

from .finnhub import FinnhubAdapter
from .yahoo import fetch_next_earnings_date

logger = logging.getLogger(__name__)

MAX_UPCOMING = 5
NEAR_TERM_DAYS = 14
DEFAULT_LOOKUP_TIMEOUT = 10.0


def days_until(day: str, now: datetime) -> int:
    """Whole days until midnight of `day`, rounded up."""
    target = datetime.combine(date.fromisoformat(day), datetime.min.time())
    return math.ceil((target - now).total_seconds() / 86400)


def build_calendar(
    ticker: str,
    events: list[EarningsEvent],
    now: datetime | None = None,
    fallback_date: date | None = None,
) -> EventsCalendar:
    """
    Split earnings into the nearest upcoming and the latest past report.

    Args:
        fallback_date: Next earnings date to use when `events` holds no
            future report.
    """
    now = now or datetime.now()
    today = now.date()

    upcoming = sorted(
        (e for e in events if date.fromisoformat(e.date) > today),
        key=lambda e: e.date,
    )
    past = sorted(
        (e for e in events if date.fromisoformat(e.date) <= today),
        key=lambda e: e.date,
    )

    next_earnings = upcoming[0] if upcoming else None
    if next_earnings is None and fallback_date and fallback_date > today:
        next_earnings = EarningsEvent(
            date=fallback_date.isoformat(),
            type=EventType.EARNINGS,
            title="Upcoming Earnings Report",
            impact=EventImpact.HIGH,
        )

    days = days_until(next_earnings.date, now) if next_earnings else None

    return EventsCalendar(
        ticker=ticker,
        fetched_at=now,
        upcoming_earnings=next_earnings,
        days_to_earnings=days,
        recent_earnings=past[-1] if past else None,
        upcoming_events=upcoming[:MAX_UPCOMING],
        has_near_term_catalyst=days is not None and days <= NEAR_TERM_DAYS,
    )


class EarningsCalendarAdapter:
    """
    Events provider combining Finnhub and the Yahoo earnings date.

    Args:
        finnhub: Earnings calendar source; skipped when absent or unkeyed.
        next_earnings_date: Yahoo lookup used when Finnhub has no upcoming report.
        timeout: Seconds to wait for the Yahoo lookup before giving up.
    """

    def __init__(
        self,
        finnhub: FinnhubAdapter | None = None,
        next_earnings_date: Callable[[str], date | None] = fetch_next_earnings_date,
        timeout: float | None = None,
    ):
        self._finnhub = finnhub
        self._next_earnings_date = next_earnings_date
        self._timeout = timeout or DEFAULT_LOOKUP_TIMEOUT

    @property
    def source_name(self) -> str:
        return "earnings_calendar"

    def fetch_events(self, ticker: str) -> EventsCalendar:
        ticker = ticker.upper().strip()
        events: list[EarningsEvent] = []

        if self._finnhub is not None and self._finnhub.is_configured:
            try:
                events = self._finnhub.fetch_earnings(ticker)
            except AdapterError as e:
                logger.warning(f"Finnhub earnings calendar failed for {ticker}: {e}")

        today = date.today()
        fallback = None
        if not any(date.fromisoformat(e.date) > today for e in events):
            fallback = self._lookup_next_earnings_date(ticker)

        return build_calendar(ticker, events, fallback_date=fallback)

    def _lookup_next_earnings_date(self, ticker: str) -> date | None:
        """Yahoo earnings date bounded by the lookup timeout; None on any failure."""
        executor = ThreadPoolExecutor(max_workers=1)
        future = executor.submit(self._next_earnings_date, ticker)
        try:
            return future.result(timeout=self._timeout)
        except FutureTimeoutError:
            logger.warning(f"Yahoo earnings date lookup timed out for {ticker} after {self._timeout:.1f}s")
            return None
        except Exception as e:
            # yfinance raises a wide range of errors on bad symbols or schema drift
            logger.warning(f"Yahoo earnings date lookup failed for {ticker}: {e}")
            return None
        finally:
            # A timed-out lookup keeps running in its worker thread
            executor.shutdown(wait=False)
