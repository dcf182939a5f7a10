"""Full indicator bundle for one historical series."""

from domain.models import HistoricalBar, IndicatorBundle
from domain.indicators.adx import NEUTRAL_ADX, adx
from domain.indicators.atr import atr
from domain.indicators.base import OHLCVData
from domain.indicators.bollinger import bollinger_bands
from domain.indicators.macd import macd
from domain.indicators.moving_averages import ema, sma
from domain.indicators.obv import obv
from domain.indicators.rsi import rsi
from domain.indicators.stochastic import stochastic
from domain.indicators.vwap import vwap

# About six months of trading days
MAX_BARS = 100
# EMA(26) needs at least this many bars
MIN_BARS = 26


def default_indicators() -> IndicatorBundle:
    """Bundle returned when the series is too short to compute."""
    return IndicatorBundle(
        rsi=50.0,
        macd=0.0,
        macd_signal=0.0,
        macd_histogram=0.0,
        sma20=0.0,
        sma50=0.0,
        sma200=0.0,
        ema12=0.0,
        ema26=0.0,
        bollinger_upper=0.0,
        bollinger_middle=0.0,
        bollinger_lower=0.0,
        atr=0.0,
        adx=NEUTRAL_ADX,
        stoch_k=50.0,
        stoch_d=50.0,
        obv=0.0,
        vwap=0.0,
    )


def compute_indicators(history: list[HistoricalBar]) -> IndicatorBundle:
    """
    Compute the indicator bundle from a most-recent-first series.

    The series is capped at MAX_BARS and reversed to oldest-first before
    any indicator runs. Fewer than MIN_BARS bars yields
    `default_indicators()`.
    """
    history = history[:MAX_BARS]
    if len(history) < MIN_BARS:
        return default_indicators()

    data = OHLCVData.from_bars(history)
    closes, highs, lows, volumes = data.closes, data.highs, data.lows, data.volumes

    macd_line, macd_signal, macd_hist = macd(closes)
    bands = bollinger_bands(closes, 20)
    stoch = stochastic(highs, lows, closes, 14)

    return IndicatorBundle(
        rsi=rsi(closes, 14),
        macd=macd_line,
        macd_signal=macd_signal,
        macd_histogram=macd_hist,
        sma20=sma(closes, 20),
        sma50=sma(closes, 50),
        sma200=sma(closes, min(200, len(closes))),
        ema12=ema(closes, 12),
        ema26=ema(closes, 26),
        bollinger_upper=bands.upper,
        bollinger_middle=bands.middle,
        bollinger_lower=bands.lower,
        atr=atr(highs, lows, closes, 14),
        adx=adx(highs, lows, closes, 14),
        stoch_k=stoch.k,
        stoch_d=stoch.d,
        obv=obv(closes, volumes),
        vwap=vwap(highs[-1], lows[-1], closes[-1], volumes[-1]),
    )
