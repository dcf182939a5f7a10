"""Base types for technical indicators."""

from dataclasses import dataclass
from typing import Iterable

from domain.models import HistoricalBar


@dataclass(frozen=True)
class OHLCVData:
    """Oldest-first price and volume columns.

    Attributes:
        opens: List of opening prices
        highs: List of high prices
        lows: List of low prices
        closes: List of closing prices
        volumes: List of volume data

    Example:
        >>> data = OHLCVData(
        ...     opens=[100.0, 101.0, 102.0],
        ...     highs=[102.0, 103.0, 104.0],
        ...     lows=[99.0, 100.0, 101.0],
        ...     closes=[101.0, 102.0, 103.0],
        ...     volumes=[1000000, 1100000, 1200000]
        ... )
    """
    opens: list[float]
    highs: list[float]
    lows: list[float]
    closes: list[float]
    volumes: list[float]

    @classmethod
    def from_bars(cls, bars: Iterable[HistoricalBar]) -> "OHLCVData":
        """Build columns from most-recent-first bars, reversing to oldest-first."""
        ordered = list(bars)[::-1]
        return cls(
            opens=[b.open for b in ordered],
            highs=[b.high for b in ordered],
            lows=[b.low for b in ordered],
            closes=[b.close for b in ordered],
            volumes=[b.volume for b in ordered],
        )

    def __len__(self) -> int:
        return len(self.closes)
