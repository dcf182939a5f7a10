"""
Synthetic market data.

Last-resort providers that always succeed:
- SyntheticHistoryAdapter: mean-reverting random walk around a base price
- estimate_options_flow: plausible options summary when no chain is available

Both draw from a `random.Random` seeded per ticker (or from the config) so
a given symbol reproduces the same data. Results are flagged as degraded by
the acquisition layer.
"""

import hashlib
import logging
import random
from datetime import date, datetime, timedelta

from domain.enums import NewsSentiment
from domain.models import HistoricalBar, OptionsFlow

logger = logging.getLogger(__name__)

# Approximate late-2024 prices; unknown symbols draw a base in [100, 300)
BASE_PRICES = {
    "AAPL": 254, "GOOGL": 193, "MSFT": 437, "AMZN": 227, "TSLA": 455,
    "NVDA": 137, "META": 604, "NFLX": 925, "AMD": 119, "INTC": 20,
    "SPY": 600, "QQQ": 531, "DIS": 112, "PYPL": 89, "COIN": 330,
    "BA": 178, "JPM": 243, "V": 318, "WMT": 91, "JNJ": 145,
    "BTC-USD": 94000, "ETH-USD": 3400, "SOL-USD": 190, "XRP-USD": 2.2,
}

SYNTHETIC_BARS = 100
STEP_VOLATILITY = 0.03
MEAN_REVERSION = 0.02
MIN_PRICE = 0.01


def ticker_seed(ticker: str) -> int:
    """Stable seed for a symbol, independent of PYTHONHASHSEED."""
    return int.from_bytes(hashlib.sha256(ticker.upper().encode("utf-8")).digest()[:8], "big")


def base_price(ticker: str, rng: random.Random) -> float:
    price = BASE_PRICES.get(ticker.upper())
    if price is not None:
        return float(price)
    return 100 + rng.random() * 200


def generate_history(
    ticker: str,
    seed: int | None = None,
    bars: int = SYNTHETIC_BARS,
    end: date | None = None,
) -> list[HistoricalBar]:
    """
    Random walk with mean reversion, most recent bar first.

    Each step moves by up to 1.5% of the base price plus 2% of the distance
    back to it. Daily range is 1-3% either side of the close; the open is
    drawn inside that range.
    """
    rng = random.Random(ticker_seed(ticker) if seed is None else seed)
    base = base_price(ticker, rng)
    end = end or date.today()
    price = base

    history: list[HistoricalBar] = []
    for days_back in range(bars - 1, -1, -1):
        change = (rng.random() - 0.5) * base * STEP_VOLATILITY
        reversion = (base - price) * MEAN_REVERSION
        price = max(MIN_PRICE, price + change + reversion)

        volatility = rng.random() * 0.02 + 0.01
        high = price * (1 + volatility)
        low = price * (1 - volatility)
        open_ = low + rng.random() * (high - low)

        close = max(MIN_PRICE, round(price, 2))
        open_ = max(MIN_PRICE, round(open_, 2))
        # Rounding must not push open/close outside the bar
        high = max(round(high, 2), open_, close)
        low = min(max(MIN_PRICE, round(low, 2)), open_, close)

        history.append(HistoricalBar(
            date=(end - timedelta(days=days_back)).isoformat(),
            open=open_,
            high=high,
            low=low,
            close=close,
            volume=rng.randrange(1_000_000, 11_000_000),
        ))

    history.reverse()
    return history


class SyntheticHistoryAdapter:
    """Always-available history provider backed by `generate_history`."""

    def __init__(self, seed: int | None = None, bars: int = SYNTHETIC_BARS):
        self._seed = seed
        self._bars = bars

    @property
    def source_name(self) -> str:
        return "synthetic"

    def fetch_history(self, ticker: str) -> list[HistoricalBar]:
        logger.warning(f"Serving synthetic price history for {ticker}")
        return generate_history(ticker.upper().strip(), seed=self._seed, bars=self._bars)


def estimate_options_flow(ticker: str, price: float, seed: int | None = None) -> OptionsFlow:
    """
    Estimated options summary scaled to the share price.

    Put/call ratio in [0.7, 1.3), IV in [25, 45)%, IV percentile in [40, 70).
    """
    rng = random.Random(ticker_seed(ticker) if seed is None else seed)

    base_volume = int(price * 1000)
    put_call_ratio = 0.7 + rng.random() * 0.6
    call_volume = base_volume + int(rng.random() * base_volume)
    put_volume = int(call_volume * put_call_ratio)

    sentiment = NewsSentiment.NEUTRAL
    if put_call_ratio < 0.8:
        sentiment = NewsSentiment.BULLISH
    elif put_call_ratio > 1.2:
        sentiment = NewsSentiment.BEARISH

    return OptionsFlow(
        ticker=ticker,
        fetched_at=datetime.now(),
        put_call_ratio=round(put_call_ratio, 2),
        total_call_volume=call_volume,
        total_put_volume=put_volume,
        unusual_activity=[],
        implied_volatility=round(25 + rng.random() * 20, 1),
        iv_percentile=40 + rng.randrange(30),
        sentiment=sentiment,
        estimated=True,
    )
