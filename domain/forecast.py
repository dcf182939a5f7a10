"""
72-hour forecast synthesis - pure domain logic.

Two producers share one output type:
1. External reasoning: `build_prompt` renders the request and
   `parse_reasoning_response` validates and clamps the reply.
2. Rule-based: `rule_based_prediction` derives the same fields from the
   vectors, the bull/bear scores and the indicators.

Both construct their Prediction72H through `make_prediction`, so callers
can only tell them apart by the text content and the `origin` tag.
"""

import json
import re
from datetime import datetime
from typing import Any, NamedTuple

from .cases import generate_bear_case, generate_bull_case
from .enums import Direction, ForecastOrigin, MarketTrend
from .models import (
    FORECAST_WINDOW_MS,
    CaseAnalysis,
    MarketContext,
    Prediction72H,
)


# ============================================================================
# Constants
# ============================================================================

# Model-level bounds for any prediction
CONFIDENCE_RANGE = (30.0, 95.0)
MAX_PREDICTED_CHANGE = 25.0

# Rule-based confidence is narrower
RULE_CONFIDENCE_RANGE = (35.0, 90.0)
BASE_CONFIDENCE = {"strong": 70.0, "weak": 55.0, "sideways": 50.0}

STRONG_COMBINED = 0.3
FLAT_COMBINED = 0.15
SCORE_GAP = 10

CHASING_PENALTY = 15.0
TREND_BONUS = 10.0
RSI_CHASE_HIGH = 75.0
RSI_CHASE_LOW = 25.0

# Support/resistance distance from SMA50
LEVEL_BAND = 0.02

TOP_HEADLINES = 5
_JSON_BLOCK = re.compile(r"\{[\s\S]*\}")


class MalformedReasoningResponse(ValueError):
    """Reasoning reply has no usable JSON object or misses required fields."""


class ReasonedForecast(NamedTuple):
    """Bull case, bear case and prediction from one producer."""
    bull_case: CaseAnalysis
    bear_case: CaseAnalysis
    prediction: Prediction72H


# ============================================================================
# Shared constructor
# ============================================================================

def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _epoch_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def key_levels(context: MarketContext) -> tuple[float, float]:
    """
    Support and resistance around the current price.

    Support is the lower of the lower Bollinger band and SMA50 - 2%,
    resistance the higher of the upper band and SMA50 + 2%. When the
    indicators are defaults (SMA50 of 0) the levels sit 2% around price.
    """
    ind = context.indicators
    if ind.sma50 <= 0:
        price = context.current_price
        return price * (1 - LEVEL_BAND), price * (1 + LEVEL_BAND)

    support = min(ind.bollinger_lower, ind.sma50 * (1 - LEVEL_BAND))
    resistance = max(ind.bollinger_upper, ind.sma50 * (1 + LEVEL_BAND))
    return max(0.0, support), max(0.0, resistance)


def make_prediction(
    *,
    direction: Direction,
    confidence: float,
    predicted_change: float,
    current_price: float,
    support_level: float,
    resistance_level: float,
    reasoning: str,
    key_factors: list[str],
    risk_factors: list[str],
    origin: ForecastOrigin,
    now: datetime | None = None,
) -> Prediction72H:
    """
    Validating constructor for every Prediction72H.

    Clamps confidence and predicted change, derives the price target from
    the change and stamps a window of exactly 72 hours from `now`.
    """
    predicted_change = round(_clamp(predicted_change, -MAX_PREDICTED_CHANGE, MAX_PREDICTED_CHANGE), 2)
    start = _epoch_ms(now or datetime.now())

    return Prediction72H(
        direction=direction,
        confidence=round(_clamp(confidence, *CONFIDENCE_RANGE), 1),
        predicted_change=predicted_change,
        price_target=round(current_price * (1 + predicted_change / 100), 2),
        support_level=round(max(0.0, support_level), 2),
        resistance_level=round(max(0.0, resistance_level), 2),
        reasoning=reasoning,
        key_factors=list(key_factors),
        risk_factors=list(risk_factors),
        start=start,
        end=start + FORECAST_WINDOW_MS,
        origin=origin,
    )


# ============================================================================
# Rule-based path
# ============================================================================

def _choose_direction(combined: float, gap: float) -> tuple[Direction, str]:
    """Direction and its strength: 'strong', 'weak' or 'sideways'."""
    if combined > STRONG_COMBINED and gap > SCORE_GAP:
        return Direction.UP, "strong"
    if combined < -STRONG_COMBINED and gap < -SCORE_GAP:
        return Direction.DOWN, "strong"
    if abs(combined) < FLAT_COMBINED or abs(gap) < SCORE_GAP:
        return Direction.SIDEWAYS, "sideways"
    return (Direction.UP if combined > 0 else Direction.DOWN), "weak"


def _agrees_with_trend(direction: Direction, trend: MarketTrend) -> bool:
    return (
        (direction == Direction.UP and trend == MarketTrend.BULLISH)
        or (direction == Direction.DOWN and trend == MarketTrend.BEARISH)
        or (direction == Direction.SIDEWAYS and trend == MarketTrend.SIDEWAYS)
    )


def rule_based_prediction(
    context: MarketContext,
    sentiment_vector: float,
    price_vector: float,
    bull_case: CaseAnalysis,
    bear_case: CaseAnalysis,
    now: datetime | None = None,
) -> Prediction72H:
    """
    Deterministic 72-hour prediction.

    Direction:
    - UP when combined > 0.3 and bull beats bear by more than 10
    - DOWN symmetrically
    - SIDEWAYS when |combined| < 0.15 or the score gap is under 10
    - otherwise a weak bias following the sign of combined

    Confidence starts from the strength's base, loses 15 (and the move is
    halved) when chasing an RSI extreme, gains 10 when the call agrees with
    the market trend, and is clamped to [35, 90].
    """
    ind = context.indicators
    price = context.current_price
    combined = (sentiment_vector + price_vector) / 2
    gap = bull_case.score - bear_case.score

    direction, strength = _choose_direction(combined, gap)
    confidence = BASE_CONFIDENCE[strength]

    atr_percent = ind.atr / price * 100 if price else 0.0
    magnitude = min(8.0, max(0.5, abs(combined) * 4 + atr_percent * 0.5))

    if direction == Direction.SIDEWAYS:
        predicted_change = _clamp(combined, -1.0, 1.0)
    else:
        sign = 1 if direction == Direction.UP else -1
        predicted_change = sign * magnitude * (1.0 if strength == "strong" else 0.6)

    key_factors: list[str] = []
    risk_factors: list[str] = []

    chasing = (
        (direction == Direction.UP and ind.rsi > RSI_CHASE_HIGH)
        or (direction == Direction.DOWN and ind.rsi < RSI_CHASE_LOW)
    )
    if chasing:
        confidence -= CHASING_PENALTY
        predicted_change /= 2
        risk_factors.append(f"RSI at {ind.rsi:.1f} - move may already be priced in")

    if _agrees_with_trend(direction, context.market_trend):
        confidence += TREND_BONUS
        key_factors.append(f"Call aligned with {context.market_trend.value} market trend")

    confidence = _clamp(confidence, *RULE_CONFIDENCE_RANGE)

    # Supporting evidence
    key_factors.append(f"Combined vector {combined:+.2f}")
    key_factors.append(f"Bull/bear conviction {bull_case.score}/{bear_case.score}")
    if ind.macd_histogram > 0:
        key_factors.append("MACD histogram positive")
    elif ind.macd_histogram < 0:
        key_factors.append("MACD histogram negative")
    if ind.adx > 25:
        key_factors.append(f"Trending market (ADX {ind.adx:.0f})")

    # What could invalidate it
    if direction == Direction.UP:
        risk_factors.extend(bull_case.risks[:2])
    elif direction == Direction.DOWN:
        risk_factors.extend(bear_case.risks[:2])
    else:
        risk_factors.append("Breakout from range in either direction")
    if context.volatility.value in ("high", "extreme"):
        risk_factors.append(f"{context.volatility.value.capitalize()} volatility")

    support, resistance = key_levels(context)

    label = {"strong": "Strong", "weak": "Weak", "sideways": "Range-bound"}[strength]
    reasoning = (
        f"{label} {direction.value} outlook for {context.ticker} over the next 72 hours. "
        f"Sentiment and price vectors average {combined:+.2f} with "
        f"{bull_case.score}/{bear_case.score} bull/bear conviction, "
        f"RSI {ind.rsi:.1f} and a {context.market_trend.value} trend."
    )

    return make_prediction(
        direction=direction,
        confidence=confidence,
        predicted_change=predicted_change,
        current_price=price,
        support_level=support,
        resistance_level=resistance,
        reasoning=reasoning,
        key_factors=key_factors,
        risk_factors=risk_factors,
        origin=ForecastOrigin.RULE_BASED,
        now=now,
    )


# ============================================================================
# External reasoning path
# ============================================================================

def build_prompt(context: MarketContext) -> str:
    """Render the reasoning request for one ticker."""
    ind = context.indicators
    price = context.current_price
    headlines = "\n".join(f"- {n.title}" for n in context.recent_news[:TOP_HEADLINES])

    return f"""Analyze {context.ticker} stock and provide a bull case, a bear case and a 72-hour prediction.

CURRENT MARKET DATA:
- Price: ${price:.2f}
- 24h Change: {context.price_change_24h:.2f}%
- 7d Change: {context.price_change_7d:.2f}%
- 30d Change: {context.price_change_30d:.2f}%
- Market Trend: {context.market_trend.value}
- Volatility: {context.volatility.value}

TECHNICAL INDICATORS:
- RSI(14): {ind.rsi:.1f}
- MACD: {ind.macd:.3f} (signal {ind.macd_signal:.3f}, histogram {ind.macd_histogram:.3f})
- Price vs SMA50: {"ABOVE" if price > ind.sma50 else "BELOW"}
- Price vs SMA200: {"ABOVE" if price > ind.sma200 else "BELOW"}
- Bollinger Bands: {ind.bollinger_lower:.2f} / {ind.bollinger_middle:.2f} / {ind.bollinger_upper:.2f}
- ATR(14): {ind.atr:.2f}
- ADX (Trend Strength): {ind.adx:.1f}
- Stochastic: {ind.stoch_k:.1f}

RECENT NEWS:
{headlines or "No recent news available"}

Respond in this EXACT JSON format:
{{
  "bullCase": {{
    "argument": "One compelling sentence for the bull thesis",
    "momentumKey": "One key bullish catalyst (2-3 words)",
    "catalysts": ["catalyst 1", "catalyst 2", "catalyst 3"],
    "risks": ["risk to bull thesis"],
    "conviction": 75
  }},
  "bearCase": {{
    "argument": "One compelling sentence for the bear thesis",
    "resistanceKey": "One key bearish concern (2-3 words)",
    "catalysts": ["bear catalyst 1", "bear catalyst 2"],
    "risks": ["risk to bear thesis"],
    "conviction": 65
  }},
  "prediction72h": {{
    "direction": "UP | DOWN | SIDEWAYS",
    "confidence": 60,
    "predictedChange": 1.5,
    "supportLevel": 0.0,
    "resistanceLevel": 0.0,
    "reasoning": "Two sentences explaining the call",
    "keyFactors": ["factor 1", "factor 2"],
    "riskFactors": ["risk 1"]
  }}
}}"""


def _number(payload: dict[str, Any], key: str, required: bool = True) -> float | None:
    value = payload.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        if required:
            raise MalformedReasoningResponse(f"'{key}' must be a number, got {value!r}")
        return None
    return float(value)


def _text(payload: dict[str, Any], key: str, default: str | None = None) -> str:
    value = payload.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    if default is not None:
        return default
    raise MalformedReasoningResponse(f"'{key}' must be a non-empty string")


def _strings(payload: dict[str, Any], key: str) -> list[str]:
    value = payload.get(key, [])
    if not isinstance(value, list):
        raise MalformedReasoningResponse(f"'{key}' must be a list")
    return [str(item) for item in value if str(item).strip()]


def _section(parsed: dict[str, Any], key: str) -> dict[str, Any]:
    section = parsed.get(key)
    if not isinstance(section, dict):
        raise MalformedReasoningResponse(f"missing '{key}' object")
    return section


def _case(section: dict[str, Any], key_field: str, default_key: str, time_horizon: str) -> CaseAnalysis:
    conviction = _clamp(_number(section, "conviction"), 0.0, 100.0)
    return CaseAnalysis(
        score=round(conviction),
        argument=_text(section, "argument"),
        key=_text(section, key_field, default=default_key).upper(),
        catalysts=_strings(section, "catalysts"),
        risks=_strings(section, "risks"),
        time_horizon=time_horizon,
        confidence=conviction / 100,
    )


def parse_reasoning_response(
    text: str,
    context: MarketContext,
    now: datetime | None = None,
) -> ReasonedForecast:
    """
    Parse and clamp a reasoning reply into a ReasonedForecast.

    The outermost {...} block of `text` must be a JSON object with
    `bullCase`, `bearCase` and `prediction72h` objects.

    Raises:
        MalformedReasoningResponse: On missing JSON, bad types or
            missing required fields
    """
    match = _JSON_BLOCK.search(text or "")
    if not match:
        raise MalformedReasoningResponse("no JSON object in response")

    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise MalformedReasoningResponse(f"invalid JSON: {e}") from e

    if not isinstance(parsed, dict):
        raise MalformedReasoningResponse("response JSON is not an object")

    ind = context.indicators
    bull_horizon = "Short-term (1-2 weeks)" if ind.adx > 30 else "Medium-term (1-3 months)"

    bull = _case(_section(parsed, "bullCase"), "momentumKey", "MOMENTUM", bull_horizon)
    bear = _case(_section(parsed, "bearCase"), "resistanceKey", "RESISTANCE", "Short-term (1-4 weeks)")

    pred = _section(parsed, "prediction72h")
    raw_direction = _text(pred, "direction").upper()
    try:
        direction = Direction(raw_direction)
    except ValueError as e:
        raise MalformedReasoningResponse(f"unknown direction {raw_direction!r}") from e

    default_support, default_resistance = key_levels(context)
    support = _number(pred, "supportLevel", required=False)
    resistance = _number(pred, "resistanceLevel", required=False)

    prediction = make_prediction(
        direction=direction,
        confidence=_number(pred, "confidence"),
        predicted_change=_number(pred, "predictedChange"),
        current_price=context.current_price,
        support_level=support if support and support > 0 else default_support,
        resistance_level=resistance if resistance and resistance > 0 else default_resistance,
        reasoning=_text(pred, "reasoning"),
        key_factors=_strings(pred, "keyFactors"),
        risk_factors=_strings(pred, "riskFactors"),
        origin=ForecastOrigin.EXTERNAL,
        now=now,
    )
    return ReasonedForecast(bull, bear, prediction)


def rule_based_forecast(
    context: MarketContext,
    sentiment_vector: float,
    price_vector: float,
    now: datetime | None = None,
) -> ReasonedForecast:
    """Bull case, bear case and prediction without external reasoning."""
    bull = generate_bull_case(context, sentiment_vector, price_vector)
    bear = generate_bear_case(context, sentiment_vector, price_vector)
    prediction = rule_based_prediction(context, sentiment_vector, price_vector, bull, bear, now)
    return ReasonedForecast(bull, bear, prediction)
