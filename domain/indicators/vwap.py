"""Volume Weighted Average Price (VWAP), single-bar approximation."""


def vwap(high: float, low: float, close: float, volume: float) -> float:
    """Typical price of one bar.

    Typical Price = (High + Low + Close) / 3, used when the bar traded
    any volume; otherwise the close.

    Example:
        >>> vwap(102, 100, 101, 1000)
        101.0
        >>> vwap(102, 100, 101.5, 0)
        101.5
    """
    typical_price = (high + low + close) / 3.0
    return typical_price if volume > 0 else close
