"""
Secondary signal scoring.

Each scorer maps one input (vectors, options flow, news, social buzz or the
earnings calendar) to a SignalScore on a -100..+100 scale with its own
confidence. `combine_signals` folds them into a weighted MultiSignalAnalysis.

The result is supplementary: it never feeds back into the verdict or the
72-hour prediction.
"""

from .enums import NewsSentiment, SignalLabel, SignalStrength
from .fusion import Vectors, average_news_score
from .models import (
    EventsCalendar,
    MultiSignalAnalysis,
    NewsItem,
    OptionsFlow,
    SignalScore,
    SocialSentiment,
)


DEFAULT_WEIGHTS = {
    "technical": 0.35,
    "options": 0.20,
    "sentiment": 0.15,
    "social": 0.15,
    "events": 0.15,
}

# Confidence when a signal had nothing to score
NO_DATA_CONFIDENCE = 20.0
NO_EVENT_CONFIDENCE = 30.0

UNUSUAL_BIAS = 15.0
MAX_SURPRISE_SCORE = 50.0
# Earnings this close make the next move a coin flip
BINARY_EVENT_DAYS = 7


def _clamp(value: float, low: float = -100.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def label_for(score: float) -> SignalLabel:
    if score >= 50:
        return SignalLabel.STRONG_BUY
    if score >= 15:
        return SignalLabel.BUY
    if score <= -50:
        return SignalLabel.STRONG_SELL
    if score <= -15:
        return SignalLabel.SELL
    return SignalLabel.NEUTRAL


def _signal(name: str, score: float, weight: float, confidence: float) -> SignalScore:
    score = round(_clamp(score), 1)
    return SignalScore(
        name=name,
        score=score,
        weight=weight,
        confidence=round(_clamp(confidence, 0.0, 100.0), 1),
        signal=label_for(score),
    )


def technical_score(
    vectors: Vectors,
    coherence_score: float,
    weight: float = DEFAULT_WEIGHTS["technical"],
) -> SignalScore:
    """Combined sentiment/price vector scaled to +/-100; confidence is coherence."""
    return _signal("technical", vectors.combined * 100, weight, coherence_score * 100)


def options_score(
    flow: OptionsFlow | None,
    weight: float = DEFAULT_WEIGHTS["options"],
) -> SignalScore:
    """
    Put/call ratio around 1.0, with a bias for one-sided unusual activity.

    A PCR of 0.7 scores +50, 1.3 scores -50. Estimated flows are scored the
    same way but carry low confidence.
    """
    if flow is None:
        return _signal("options", 0.0, weight, NO_DATA_CONFIDENCE)

    score = (1 - flow.put_call_ratio) / 0.3 * 50

    bullish = sum(1 for o in flow.unusual_activity if o.sentiment == NewsSentiment.BULLISH)
    bearish = sum(1 for o in flow.unusual_activity if o.sentiment == NewsSentiment.BEARISH)
    if bullish > bearish:
        score += UNUSUAL_BIAS
    elif bearish > bullish:
        score -= UNUSUAL_BIAS

    if flow.estimated:
        confidence = 40.0
    else:
        confidence = 60.0 + min(20.0, len(flow.unusual_activity) * 5.0)
    return _signal("options", score, weight, confidence)


def news_sentiment_score(
    news: list[NewsItem],
    weight: float = DEFAULT_WEIGHTS["sentiment"],
) -> SignalScore:
    """Average headline score; more headlines, more confidence."""
    if not news:
        return _signal("sentiment", 0.0, weight, NO_DATA_CONFIDENCE)
    confidence = min(90.0, 30.0 + 10.0 * len(news))
    return _signal("sentiment", average_news_score(news) * 100, weight, confidence)


def social_score(
    social: SocialSentiment | None,
    weight: float = DEFAULT_WEIGHTS["social"],
) -> SignalScore:
    if social is None:
        return _signal("social", 0.0, weight, NO_DATA_CONFIDENCE)
    confidence = min(85.0, 30.0 + social.total_mentions / 2)
    return _signal("social", social.overall_score * 100, weight, confidence)


def event_score(
    calendar: EventsCalendar | None,
    weight: float = DEFAULT_WEIGHTS["events"],
) -> SignalScore:
    """
    Last EPS surprise, 10% beat or miss saturating at +/-50.

    Imminent earnings halve the score and cut confidence.
    """
    recent = calendar.recent_earnings if calendar else None
    if recent is None or recent.surprise is None:
        return _signal("events", 0.0, weight, NO_EVENT_CONFIDENCE)

    score = _clamp(recent.surprise * 5, -MAX_SURPRISE_SCORE, MAX_SURPRISE_SCORE)
    confidence = 60.0

    days = calendar.days_to_earnings
    if days is not None and days <= BINARY_EVENT_DAYS:
        score *= 0.5
        confidence -= 15.0
    return _signal("events", score, weight, confidence)


def _strength(score: float, confidence: float) -> SignalStrength:
    if abs(score) >= 40 and confidence >= 60:
        return SignalStrength.STRONG
    if abs(score) >= 15:
        return SignalStrength.MODERATE
    return SignalStrength.WEAK


def combine_signals(
    vectors: Vectors,
    coherence_score: float,
    news: list[NewsItem],
    options_flow: OptionsFlow | None = None,
    events_calendar: EventsCalendar | None = None,
    social_sentiment: SocialSentiment | None = None,
    weights: dict[str, float] | None = None,
) -> MultiSignalAnalysis:
    """
    Score every secondary signal and fold them into one weighted view.

    Args:
        weights: Per-signal weights keyed like DEFAULT_WEIGHTS. Normalized
            by their sum, so they need not add up to exactly 1.
    """
    w = {**DEFAULT_WEIGHTS, **(weights or {})}

    technical = technical_score(vectors, coherence_score, w["technical"])
    options = options_score(options_flow, w["options"])
    sentiment = news_sentiment_score(news, w["sentiment"])
    social = social_score(social_sentiment, w["social"])
    events = event_score(events_calendar, w["events"])

    scores = (technical, options, sentiment, social, events)
    total_weight = sum(s.weight for s in scores) or 1.0
    combined = sum(s.score * s.weight for s in scores) / total_weight
    confidence = sum(s.confidence * s.weight for s in scores) / total_weight

    combined = round(_clamp(combined), 1)
    confidence = round(_clamp(confidence, 0.0, 100.0), 1)

    return MultiSignalAnalysis(
        technical_score=technical,
        options_score=options,
        sentiment_score=sentiment,
        social_score=social,
        event_score=events,
        combined_score=combined,
        combined_confidence=confidence,
        signal_strength=_strength(combined, confidence),
    )
