"""Average Directional Index (ADX), simplified form."""

from domain.indicators.atr import atr

NEUTRAL_ADX = 25.0


def adx(
    highs: list[float],
    lows: list[float],
    closes: list[float],
    period: int = 14,
) -> float:
    """Calculate a single-window ADX without Wilder smoothing.

    Directional moves over the last `period` bars are summed into +DM/-DM
    only when one direction strictly dominates and is positive.

    +DI = +DM / period / ATR * 100
    -DI = -DM / period / ATR * 100
    DX  = |+DI - -DI| / (+DI + -DI + 0.001) * 100

    Args:
        highs: Oldest-first high prices
        lows: Oldest-first low prices
        closes: Oldest-first closing prices
        period: ADX period (default: 14)

    Returns:
        DX clamped to 0-100; 25.0 (neutral) with fewer than period+1 bars
        or a zero ATR.

    Notes:
        - This is not the textbook ADX; the simplified value is the
          intended output.
    """
    if len(highs) < period + 1:
        return NEUTRAL_ADX

    average_range = atr(highs, lows, closes, period)
    if average_range == 0:
        return NEUTRAL_ADX

    plus_dm = 0.0
    minus_dm = 0.0

    for i in range(len(highs) - period, len(highs)):
        up_move = highs[i] - highs[i - 1]
        down_move = lows[i - 1] - lows[i]

        if up_move > down_move and up_move > 0:
            plus_dm += up_move
        if down_move > up_move and down_move > 0:
            minus_dm += down_move

    plus_di = (plus_dm / period / average_range) * 100
    minus_di = (minus_dm / period / average_range) * 100

    dx = abs(plus_di - minus_di) / (plus_di + minus_di + 0.001) * 100
    return min(100.0, max(0.0, dx))
