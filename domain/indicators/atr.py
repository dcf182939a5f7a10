"""Average True Range (ATR) indicator."""

from domain.indicators.moving_averages import sma


def true_ranges(highs: list[float], lows: list[float], closes: list[float]) -> list[float]:
    """True range for every bar after the first.

    True Range = max(high - low, abs(high - prev_close), abs(low - prev_close))
    """
    return [
        max(
            highs[i] - lows[i],
            abs(highs[i] - closes[i - 1]),
            abs(lows[i] - closes[i - 1]),
        )
        for i in range(1, len(highs))
    ]


def atr(
    highs: list[float],
    lows: list[float],
    closes: list[float],
    period: int = 14,
) -> float:
    """Calculate Average True Range as a simple average.

    ATR = SMA(period) of the trailing true ranges (no Wilder smoothing).

    Args:
        highs: Oldest-first high prices
        lows: Oldest-first low prices
        closes: Oldest-first closing prices
        period: ATR period (default: 14)

    Returns:
        ATR value, or 0.0 when fewer than period+1 bars
    """
    if len(highs) != len(lows) or len(highs) != len(closes):
        raise ValueError("highs, lows, and closes must have same length")

    if len(highs) < period + 1:
        return 0.0

    return sma(true_ranges(highs, lows, closes)[-period:], period)
