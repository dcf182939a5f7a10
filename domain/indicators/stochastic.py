"""Stochastic Oscillator."""

from typing import NamedTuple


class StochasticResult(NamedTuple):
    k: float
    d: float


def stochastic(
    highs: list[float],
    lows: list[float],
    closes: list[float],
    period: int = 14,
) -> StochasticResult:
    """Calculate Stochastic %K for the latest close; %D equals %K.

    %K = 100 * (Close - Lowest Low) / (Highest High - Lowest Low + 0.001)

    Args:
        highs: Oldest-first high prices
        lows: Oldest-first low prices
        closes: Oldest-first closing prices
        period: Lookback period (default: 14)

    Returns:
        StochasticResult(k, d), both clamped to 0-100; (50, 50) with fewer
        than `period` bars.

    Notes:
        - %D is not smoothed. It is defined as equal to %K.
    """
    if len(closes) < period:
        return StochasticResult(50.0, 50.0)

    highest_high = max(highs[-period:])
    lowest_low = min(lows[-period:])

    k = (closes[-1] - lowest_low) / (highest_high - lowest_low + 0.001) * 100
    k = min(100.0, max(0.0, k))
    return StochasticResult(k, k)
