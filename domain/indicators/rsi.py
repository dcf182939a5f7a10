"""Relative Strength Index (RSI) indicator."""


def rsi(closes: list[float], period: int = 14) -> float:
    """Calculate RSI from simple averages of the last `period` deltas.

    No Wilder smoothing: gains and losses over the trailing window are
    summed and divided by `period`.

    Args:
        closes: Oldest-first closing prices
        period: RSI period (default: 14)

    Returns:
        RSI on a 0-100 scale. 50.0 when fewer than period+1 closes,
        100.0 when there are no losses in the window.

    Example:
        >>> rsi(list(range(1, 20)))
        100.0
    """
    if len(closes) < period + 1:
        return 50.0

    gains = 0.0
    losses = 0.0
    for i in range(len(closes) - period, len(closes)):
        change = closes[i] - closes[i - 1]
        if change > 0:
            gains += change
        else:
            losses += abs(change)

    avg_gain = gains / period
    avg_loss = losses / period

    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100.0 - (100.0 / (1.0 + rs))
