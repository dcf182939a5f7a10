"""
Forecast synthesis: external reasoning with a deterministic fallback.
"""

import logging
from datetime import datetime

from domain.forecast import ReasonedForecast, rule_based_forecast
from domain.fusion import Vectors
from domain.models import MarketContext
from ports import ExternalReasoningFailed, ReasoningService

logger = logging.getLogger(__name__)


def synthesize_forecast(
    context: MarketContext,
    vectors: Vectors,
    reasoning: ReasoningService | None = None,
    now: datetime | None = None,
) -> ReasonedForecast:
    """
    Bull case, bear case and 72-hour prediction for one context.

    Uses the reasoning service when one is given. Any
    ExternalReasoningFailed is logged and answered with the rule-based
    forecast; it never reaches the caller.
    """
    if reasoning is not None:
        try:
            return reasoning.reason(context)
        except ExternalReasoningFailed as e:
            logger.warning(
                f"External reasoning failed for {context.ticker}, using rule-based forecast: {e}",
                extra={"ticker": context.ticker, "error": e.to_dict()},
            )

    return rule_based_forecast(context, vectors.sentiment, vectors.price, now=now)
