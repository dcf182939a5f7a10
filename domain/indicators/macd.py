"""MACD (Moving Average Convergence Divergence) indicator."""

from typing import NamedTuple

from domain.indicators.moving_averages import ema


class MACDResult(NamedTuple):
    macd: float
    signal: float
    histogram: float


def macd_history(closes: list[float], fast: int = 12, slow: int = 26) -> list[float]:
    """MACD value at every index, recomputed from scratch.

    Index i < slow is 0. For i >= slow the fast and slow EMAs are computed
    over closes[0..i] in full, so the cost is quadratic in the series
    length. An incremental recurrence gives different values at early
    indices, so the full recomputation is kept.
    """
    history = []
    for i in range(len(closes)):
        if i < slow:
            history.append(0.0)
            continue
        window = closes[:i + 1]
        history.append(ema(window, fast) - ema(window, slow))
    return history


def macd(
    closes: list[float],
    fast: int = 12,
    slow: int = 26,
    signal: int = 9,
) -> MACDResult:
    """Calculate MACD line, signal line and histogram.

    MACD Line = EMA(fast) - EMA(slow) over all closes
    Signal Line = EMA(signal) of the last `signal` MACD history values
    Histogram = MACD Line - Signal Line

    Args:
        closes: Oldest-first closing prices
        fast: Fast EMA period (default: 12)
        slow: Slow EMA period (default: 26)
        signal: Signal line EMA period (default: 9)

    Returns:
        MACDResult(macd, signal, histogram)
    """
    macd_line = ema(closes, fast) - ema(closes, slow)
    history = macd_history(closes, fast, slow)
    signal_line = ema(history[-signal:], signal)
    return MACDResult(macd_line, signal_line, macd_line - signal_line)
