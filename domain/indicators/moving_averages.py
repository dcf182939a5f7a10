"""Moving average indicators."""


def sma(values: list[float], period: int) -> float:
    """Calculate Simple Moving Average of the most recent values.

    Args:
        values: Oldest-first list of values
        period: Number of trailing values to average

    Returns:
        Mean of the last `period` values. With fewer than `period` values
        the most recent value is returned, or 0.0 for an empty list.

    Example:
        >>> sma([10, 11, 12, 13, 14, 15], 3)
        14.0
        >>> sma([10, 11], 3)
        11
    """
    if len(values) < period:
        return values[-1] if values else 0.0
    window = values[-period:]
    return sum(window) / period


def ema(values: list[float], period: int) -> float:
    """Calculate Exponential Moving Average over the whole series.

    Seeded with the first value (not an SMA), then smoothed with
    k = 2/(period+1) from oldest to newest across every input value.

    Args:
        values: Oldest-first list of values
        period: Smoothing period

    Returns:
        Final EMA value, or 0.0 for an empty list

    Example:
        >>> ema([10, 10, 10], 12)
        10.0
    """
    if not values:
        return 0.0

    k = 2.0 / (period + 1)
    result = float(values[0])
    for value in values[1:]:
        result = value * k + result * (1 - k)
    return result
