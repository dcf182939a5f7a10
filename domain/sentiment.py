"""
Headline sentiment - keyword lexicon scoring.

Pure functions, no I/O. Used by the news adapter to label headlines and by
the social sentiment estimate.
"""

import hashlib
import random
import re
from collections import Counter

from .enums import NewsSentiment


BULLISH_WORDS = (
    "surge", "rally", "gain", "rise", "jump", "soar", "bullish", "upgrade",
    "beat", "growth", "profit", "outperform", "buy", "strong", "momentum",
    "breakthrough",
)

BEARISH_WORDS = (
    "drop", "fall", "decline", "plunge", "crash", "bearish", "downgrade",
    "miss", "loss", "sell", "weak", "concern", "fear", "risk", "warning",
    "cut",
)

# Base score per label before variance
LABEL_SCORES = {
    NewsSentiment.BULLISH: 0.3,
    NewsSentiment.BEARISH: -0.3,
    NewsSentiment.NEUTRAL: 0.0,
}

SCORE_VARIANCE = 0.4

STOP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "is", "it", "as", "by", "with", "that", "this", "be", "are",
    "was", "were", "has", "have", "had", "do", "does", "did", "will",
    "would", "could", "should", "may", "might", "can", "stock", "shares",
    "price", "market",
})


def analyze_sentiment(text: str) -> NewsSentiment:
    """
    Label text by counting lexicon stems it contains.

    Substring match, so "gains" and "rising" count. The side with more
    distinct stems wins; a tie is neutral.
    """
    lower = text.lower()
    bull_count = sum(1 for word in BULLISH_WORDS if word in lower)
    bear_count = sum(1 for word in BEARISH_WORDS if word in lower)

    if bull_count > bear_count:
        return NewsSentiment.BULLISH
    if bear_count > bull_count:
        return NewsSentiment.BEARISH
    return NewsSentiment.NEUTRAL


def _text_jitter(text: str) -> float:
    """Variance in [-0.2, 0.2) that is stable for a given text."""
    seed = int.from_bytes(hashlib.sha256(text.encode("utf-8")).digest()[:8], "big")
    return (random.Random(seed).random() - 0.5) * SCORE_VARIANCE


def sentiment_score(text: str) -> float:
    """Score text in [-1, 1]: label base of +/-0.3 plus per-text variance."""
    base = LABEL_SCORES[analyze_sentiment(text)]
    return max(-1.0, min(1.0, base + _text_jitter(text)))


def extract_keywords(titles: list[str], limit: int = 10) -> list[str]:
    """Most frequent title words longer than three letters, stop words removed."""
    counts: Counter[str] = Counter()
    for title in titles:
        for word in re.split(r"\W+", title.lower()):
            if len(word) > 3 and word not in STOP_WORDS:
                counts[word] += 1
    # Counter.most_common keeps first-seen order among ties
    return [word for word, _ in counts.most_common(limit)]
