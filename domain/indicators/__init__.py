"""Technical indicators for the analysis engine.

Pure functions over oldest-first series. Each returns the value for the
most recent bar. Several are deliberately simplified (single-window ADX,
unsmoothed %D, single-bar VWAP); the formulas here are the reference.

Indicators:
    - RSI: simple-average Relative Strength Index
    - MACD: EMA(12) - EMA(26), signal from a fully recomputed history
    - Bollinger Bands: SMA(20) +/- 2 population standard deviations
    - ATR: simple average of the last 14 true ranges
    - ADX: single-window directional index
    - Stochastic: %K with %D equal to %K
    - Moving Averages: SMA, EMA (seeded with the first value)
    - Volume: OBV, single-bar VWAP

Example:
    >>> from domain.indicators import rsi, macd, compute_indicators
    >>>
    >>> closes = [44, 44.34, 44.09, 43.61, 44.33, 44.83, 45.10, 45.42,
    ...           45.84, 46.08, 45.89, 46.03, 45.61, 46.28, 46.28, 46.00]
    >>>
    >>> value = rsi(closes, period=14)
    >>> macd_line, signal_line, histogram = macd(closes)
"""

from domain.indicators.adx import adx
from domain.indicators.atr import atr, true_ranges
from domain.indicators.base import OHLCVData
from domain.indicators.bollinger import BollingerBands, bollinger_bands, population_stdev
from domain.indicators.bundle import MAX_BARS, MIN_BARS, compute_indicators, default_indicators
from domain.indicators.macd import MACDResult, macd, macd_history
from domain.indicators.moving_averages import ema, sma
from domain.indicators.obv import obv
from domain.indicators.rsi import rsi
from domain.indicators.stochastic import StochasticResult, stochastic
from domain.indicators.vwap import vwap

__all__ = [
    # Base types
    "OHLCVData",
    "BollingerBands",
    "MACDResult",
    "StochasticResult",
    # Trend and momentum
    "rsi",
    "macd",
    "macd_history",
    "bollinger_bands",
    "population_stdev",
    "atr",
    "true_ranges",
    "adx",
    "stochastic",
    # Moving averages
    "sma",
    "ema",
    # Volume
    "obv",
    "vwap",
    # Bundle
    "compute_indicators",
    "default_indicators",
    "MAX_BARS",
    "MIN_BARS",
]
