"""
Analysis pipeline.

Coordinates all components for one ticker:
1. Data fetching (quote, history, news in parallel)
2. Indicators, market context, vectors, coherence, verdict
3. Secondary signals (options, events, social) in parallel, optional
4. Forecast synthesis (external reasoning or rule-based)

Only a failed quote ends the analysis; every other source degrades.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Callable

from pydantic import ValidationError as PydanticValidationError

from adapters import (
    AlphaVantageAdapter,
    AnthropicReasoningAdapter,
    EarningsCalendarAdapter,
    FinnhubAdapter,
    StockTwitsAdapter,
    SyntheticHistoryAdapter,
    YahooChartAdapter,
    YahooOptionsAdapter,
    YahooQuoteAdapter,
)
from config import ConfigError, VectorScopeConfig, get_config
from domain import (
    AnalysisResult,
    build_market_context,
    coherence,
    combine_signals,
    compute_vectors,
    confidence_level,
    decide_verdict,
)
from domain.indicators import compute_indicators
from ports import (
    DataDegraded,
    EventsProvider,
    HistoryProvider,
    NewsProvider,
    OptionsProvider,
    QuoteProvider,
    ReasoningService,
    SocialProvider,
    ValidationError,
)

from .acquisition import (
    DegradationLog,
    HistoryChain,
    NewsFetcher,
    QuoteChain,
    SecondaryFetcher,
)
from .forecast import synthesize_forecast

logger = logging.getLogger(__name__)


def normalize_ticker(ticker: str) -> str:
    """
    Raises:
        ValidationError: Empty ticker
    """
    normalized = (ticker or "").strip().upper()
    if not normalized:
        raise ValidationError.invalid_ticker(ticker or "", "Ticker cannot be empty")
    return normalized


class Analyzer:
    """
    Runs analysis cycles against a fixed set of providers.

    Every provider is injectable; those left as None are built from the
    config. Instances hold no per-request state and can be reused.
    """

    def __init__(
        self,
        config: VectorScopeConfig | None = None,
        *,
        quote_providers: list[QuoteProvider] | None = None,
        history_providers: list[HistoryProvider] | None = None,
        news_provider: NewsProvider | None = None,
        options_provider: OptionsProvider | None = None,
        events_provider: EventsProvider | None = None,
        social_provider: SocialProvider | None = None,
        reasoning: ReasoningService | None = None,
    ):
        self.config = config or get_config()
        cfg = self.config

        finnhub = FinnhubAdapter(cfg)
        chart = YahooChartAdapter(cfg)

        self.quotes = QuoteChain(
            quote_providers if quote_providers is not None
            else [YahooQuoteAdapter(cfg), chart, finnhub]
        )
        self.history = HistoryChain(
            history_providers if history_providers is not None
            else [
                chart,
                AlphaVantageAdapter(cfg),
                SyntheticHistoryAdapter(seed=cfg.acquisition.synthetic_seed),
            ]
        )
        self.news = NewsFetcher(news_provider if news_provider is not None else finnhub)
        self.secondary = SecondaryFetcher(
            options=options_provider if options_provider is not None else YahooOptionsAdapter(cfg),
            events=(
                events_provider if events_provider is not None
                else EarningsCalendarAdapter(finnhub, timeout=cfg.http.timeout_seconds)
            ),
            social=social_provider if social_provider is not None else StockTwitsAdapter(cfg),
            seed=cfg.acquisition.synthetic_seed,
        )

        if reasoning is None and cfg.reasoning_enabled:
            reasoning = AnthropicReasoningAdapter(cfg)
        self.reasoning = reasoning

    def analyze(
        self,
        ticker: str,
        *,
        include_secondary: bool = True,
        on_degraded: Callable[[DataDegraded], None] | None = None,
        now: datetime | None = None,
    ) -> AnalysisResult:
        """
        Run one analysis cycle.

        Raises:
            ValidationError: Empty ticker
            QuoteUnavailable: Every quote provider failed
        """
        ticker = normalize_ticker(ticker)
        started = datetime.now()
        log = DegradationLog(on_degraded)

        with ThreadPoolExecutor(max_workers=3) as executor:
            quote_future = executor.submit(self.quotes.fetch, ticker)
            history_future = executor.submit(self.history.fetch, ticker, log)
            news_future = executor.submit(self.news.fetch, ticker, log)

            history = history_future.result()
            news = news_future.result()
            quote = quote_future.result()

        indicators = compute_indicators(history)
        vectors = compute_vectors(quote, indicators, news)
        coherence_score = coherence(vectors.sentiment, vectors.price)
        verdict = decide_verdict(vectors.sentiment, vectors.price, coherence_score, indicators.rsi)

        options_flow = events_calendar = social_sentiment = multi_signal = None
        if include_secondary:
            with ThreadPoolExecutor(max_workers=3) as executor:
                options_future = executor.submit(self.secondary.fetch_options, ticker, quote.price, log)
                events_future = executor.submit(self.secondary.fetch_events, ticker, log)
                social_future = executor.submit(self.secondary.fetch_social, ticker, news, log)

                options_flow = options_future.result()
                events_calendar = events_future.result()
                social_sentiment = social_future.result()

            multi_signal = combine_signals(
                vectors,
                coherence_score,
                news,
                options_flow=options_flow,
                events_calendar=events_calendar,
                social_sentiment=social_sentiment,
                weights=self.config.signal_weights.as_dict(),
            )

        context = build_market_context(
            quote,
            history,
            indicators,
            news,
            options_flow=options_flow,
            events_calendar=events_calendar,
            social_sentiment=social_sentiment,
        )
        bull, bear, prediction = synthesize_forecast(context, vectors, self.reasoning, now=now)

        result = AnalysisResult(
            ticker=ticker,
            timestamp=int((now or datetime.now()).timestamp() * 1000),
            sentiment_vector=round(vectors.sentiment, 3),
            price_vector=round(vectors.price, 3),
            volume_vector=round(vectors.volume, 3),
            coherence=round(coherence_score, 3),
            verdict=verdict,
            confidence_level=round(confidence_level(coherence_score, indicators.adx), 3),
            quote=quote,
            history=history,
            indicators=indicators,
            bull_case=bull,
            bear_case=bear,
            prediction=prediction,
            news=news,
            overall_sentiment=round(vectors.sentiment, 3),
            volatility_index=indicators.atr / quote.price,
            trend_strength=indicators.adx / 100,
            options_flow=options_flow,
            events_calendar=events_calendar,
            social_sentiment=social_sentiment,
            multi_signal=multi_signal,
            degraded_sources=log.labels,
        )

        elapsed = datetime.now() - started
        logger.info(
            f"Analyzed {ticker}: {verdict.value}, {prediction.direction.value} "
            f"({prediction.origin.value}) in {elapsed.total_seconds():.2f}s",
            extra={
                "ticker": ticker,
                "verdict": verdict.value,
                "degraded": len(result.degraded_sources),
                "elapsed_ms": int(elapsed.total_seconds() * 1000),
            },
        )
        return result


def analyze(
    ticker: str,
    *,
    config: VectorScopeConfig | None = None,
    timeout: float | None = None,
    include_secondary: bool = True,
    on_degraded: Callable[[DataDegraded], None] | None = None,
) -> AnalysisResult:
    """
    Analyze one ticker with the default providers.

    Args:
        ticker: Symbol, case-insensitive
        config: Configuration (defaults to the cached global config)
        timeout: Seconds per outbound call, overriding the config
        include_secondary: Fetch options, events and social signals
        on_degraded: Called with each DataDegraded event

    Raises:
        ConfigError: Timeout outside the configured bounds
        ValidationError: Empty ticker
        QuoteUnavailable: Every quote provider failed
    """
    try:
        cfg = (config or get_config()).with_timeout(timeout)
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid timeout: {timeout!r}", field="timeout") from e
    return Analyzer(cfg).analyze(
        ticker,
        include_secondary=include_secondary,
        on_degraded=on_degraded,
    )
