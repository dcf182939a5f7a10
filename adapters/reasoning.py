"""
External reasoning adapter (Anthropic Messages API).

Sends the rendered MarketContext prompt and parses the reply into a bull
case, a bear case and a 72-hour prediction. Every failure mode surfaces as
ExternalReasoningFailed so the synthesizer can fall back to rules.
"""

import logging
from datetime import datetime

from domain.forecast import (
    MalformedReasoningResponse,
    ReasonedForecast,
    build_prompt,
    parse_reasoning_response,
)
from domain.models import MarketContext
from ports import AdapterError, ExternalReasoningFailed

from .base import BaseAdapter

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a quantitative equity analyst. Reply with a single JSON object "
    "and nothing else."
)


class AnthropicReasoningAdapter(BaseAdapter):
    """ReasoningService backed by the Messages API."""

    @property
    def source_name(self) -> str:
        return "anthropic"

    @property
    def is_configured(self) -> bool:
        return self._config.reasoning_enabled

    def complete(self, prompt: str) -> str:
        """Send one user message and return the first text block."""
        reasoning = self._config.reasoning
        payload = {
            "model": reasoning.model,
            "max_tokens": reasoning.max_tokens,
            "system": SYSTEM_PROMPT,
            "messages": [{"role": "user", "content": prompt}],
        }
        headers = {
            "x-api-key": self._config.api_keys.anthropic or "",
            "anthropic-version": reasoning.anthropic_version,
        }

        data = self._http_post_json(
            reasoning.api_url,
            payload,
            headers=headers,
            timeout=min(self._timeout, reasoning.timeout_seconds),
        )

        blocks = data.get("content") if isinstance(data, dict) else None
        if not blocks or not isinstance(blocks, list):
            raise ExternalReasoningFailed("response has no content blocks")
        for block in blocks:
            if isinstance(block, dict) and block.get("type", "text") == "text":
                text = block.get("text")
                return text if isinstance(text, str) else ""
        raise ExternalReasoningFailed("response has no text block")

    def reason(self, context: MarketContext) -> ReasonedForecast:
        """
        Raises:
            ExternalReasoningFailed: Not configured, HTTP failure, timeout
                or a reply that breaks the response contract
        """
        if not self.is_configured:
            raise ExternalReasoningFailed("reasoning service not configured")

        started = datetime.now()
        try:
            text = self.complete(build_prompt(context))
            forecast = parse_reasoning_response(text, context, now=started)
        except ExternalReasoningFailed:
            raise
        except MalformedReasoningResponse as e:
            raise ExternalReasoningFailed(f"malformed response: {e}", cause=e) from e
        except AdapterError as e:
            raise ExternalReasoningFailed(f"request failed: {e.message}", cause=e) from e

        logger.info(
            f"External forecast for {context.ticker}: {forecast.prediction.direction.value}",
            extra={
                "source": self.source_name,
                "ticker": context.ticker,
                "elapsed_ms": int((datetime.now() - started).total_seconds() * 1000),
            },
        )
        return forecast
