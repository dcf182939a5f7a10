"""Bollinger Bands indicator."""

from typing import NamedTuple

from domain.indicators.moving_averages import sma


class BollingerBands(NamedTuple):
    upper: float
    middle: float
    lower: float


def population_stdev(values: list[float]) -> float:
    """Population standard deviation (divide by N); 0.0 for an empty list."""
    if not values:
        return 0.0
    mean = sum(values) / len(values)
    variance = sum((x - mean) ** 2 for x in values) / len(values)
    return variance ** 0.5


def bollinger_bands(
    closes: list[float],
    period: int = 20,
    std_dev: float = 2.0,
) -> BollingerBands:
    """Calculate Bollinger Bands for the most recent bar.

    Upper Band = SMA + (std_dev * standard_deviation)
    Middle Band = SMA
    Lower Band = SMA - (std_dev * standard_deviation)

    Args:
        closes: Oldest-first closing prices
        period: Period for SMA and standard deviation (default: 20)
        std_dev: Number of standard deviations for bands (default: 2.0)

    Example:
        >>> bollinger_bands([100] * 25)
        BollingerBands(upper=100.0, middle=100.0, lower=100.0)
    """
    middle = sma(closes, period)
    band = std_dev * population_stdev(closes[-period:])
    return BollingerBands(middle + band, middle, middle - band)
