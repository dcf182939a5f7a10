"""Tests for provider fallback chains and degradation tracking."""

from unittest.mock import patch

import pytest

from adapters import FinnhubAdapter, SyntheticHistoryAdapter, YahooChartAdapter, YahooQuoteAdapter
from config import ApiKeysConfig, VectorScopeConfig
from domain import Quote
from orchestration import (
    DegradationLog,
    HistoryChain,
    NewsFetcher,
    QuoteChain,
    SecondaryFetcher,
)
from ports import DataDegraded, DataError, FetchError, QuoteUnavailable, RateLimitError

from conftest import (
    FakeHistoryProvider,
    FakeNewsProvider,
    FakeQuoteProvider,
    FakeSecondaryProvider,
    make_flow,
    make_quote,
)


class ZeroPriceProvider:
    """Builds a Quote from a zero price, which the model rejects."""
    source_name = "zero"

    def fetch_quote(self, ticker: str) -> Quote:
        return Quote(symbol=ticker, price=0, high=0, low=0, open=0, previous_close=0, timestamp=0)


# ============================================================================
# Degradation log
# ============================================================================

class TestDegradationLog:
    def test_records_and_labels(self):
        log = DegradationLog()
        event = log.record("history", "synthetic", "yahoo_chart unavailable")

        assert isinstance(event, DataDegraded)
        assert event.label == "history:synthetic"
        assert log.labels == ["history:synthetic"]
        assert len(log.events) == 1

    def test_callback(self):
        received = []
        log = DegradationLog(on_degraded=received.append)
        log.record("options", "estimated")
        assert [e.label for e in received] == ["options:estimated"]

    def test_events_is_a_copy(self):
        log = DegradationLog()
        log.record("news", "none")
        log.events.clear()
        assert log.labels == ["news:none"]


# ============================================================================
# Quote chain
# ============================================================================

class TestQuoteChain:
    def test_first_success_short_circuits(self):
        first = FakeQuoteProvider("yahoo_quote", quote=make_quote(price=101.0))
        second = FakeQuoteProvider("yahoo_chart", quote=make_quote(price=99.0))

        quote = QuoteChain([first, second]).fetch("ACME")

        assert quote.price == 101.0
        assert second.calls == 0

    def test_falls_through_on_adapter_error(self):
        first = FakeQuoteProvider("yahoo_quote", error=FetchError("yahoo_quote", "HTTP 503"))
        second = FakeQuoteProvider("yahoo_chart", error=RateLimitError(source="yahoo_chart"))
        third = FakeQuoteProvider("finnhub", quote=make_quote(price=98.0))

        assert QuoteChain([first, second, third]).fetch("ACME").price == 98.0
        assert first.calls == second.calls == third.calls == 1

    def test_zero_price_falls_through(self):
        fallback = FakeQuoteProvider("finnhub", quote=make_quote())
        assert QuoteChain([ZeroPriceProvider(), fallback]).fetch("ACME") == make_quote()

    def test_unconfigured_skipped(self):
        skipped = FakeQuoteProvider("finnhub", quote=make_quote(), configured=False)
        failing = FakeQuoteProvider("yahoo_quote", error=DataError.empty("yahoo_quote"))

        with pytest.raises(QuoteUnavailable) as exc_info:
            QuoteChain([failing, skipped]).fetch("ACME")

        assert skipped.calls == 0
        assert exc_info.value.attempts == ["yahoo_quote"]

    def test_exhaustion_message(self):
        failing = FakeQuoteProvider("yahoo_quote", error=FetchError("yahoo_quote", "HTTP 404"))

        with pytest.raises(QuoteUnavailable) as exc_info:
            QuoteChain([failing]).fetch("NOPE")

        error = exc_info.value
        assert error.ticker == "NOPE"
        assert error.message == "Unable to fetch quote for NOPE. Please check the symbol and try again."

    def test_malformed_payload_falls_through(self):
        config = VectorScopeConfig()
        yahoo = YahooQuoteAdapter(config)
        chart = YahooChartAdapter(config)
        chart_payload = {"chart": {"result": [{"meta": {"regularMarketPrice": 101.0, "previousClose": 100.0}}]}}

        with patch.object(yahoo, "_http_get_json", return_value={"quoteResponse": {"result": ["ACME"]}}), \
             patch.object(chart, "_http_get_json", return_value=chart_payload):
            quote = QuoteChain([yahoo, chart]).fetch("ACME")

        assert quote.price == 101.0

    def test_malformed_payload_on_every_provider(self):
        yahoo = YahooQuoteAdapter(VectorScopeConfig())
        with patch.object(yahoo, "_http_get_json", return_value={"quoteResponse": "down"}):
            with pytest.raises(QuoteUnavailable) as exc_info:
                QuoteChain([yahoo]).fetch("ACME")
        assert exc_info.value.attempts == ["yahoo_quote"]


# ============================================================================
# History chain
# ============================================================================

class TestHistoryChain:
    def test_primary_not_degraded(self, history):
        log = DegradationLog()
        bars = HistoryChain([FakeHistoryProvider("yahoo_chart", bars=history)]).fetch("ACME", log)
        assert bars == history
        assert log.labels == []

    def test_fallback_is_degraded(self, history):
        log = DegradationLog()
        chain = HistoryChain([
            FakeHistoryProvider("yahoo_chart", error=FetchError("yahoo_chart", "HTTP 500")),
            FakeHistoryProvider("alpha_vantage", bars=history),
        ])
        assert chain.fetch("ACME", log) == history
        assert log.labels == ["history:alpha_vantage"]

    def test_empty_result_falls_through(self, history):
        log = DegradationLog()
        chain = HistoryChain([
            FakeHistoryProvider("yahoo_chart", bars=[]),
            FakeHistoryProvider("alpha_vantage", bars=history),
        ])
        assert chain.fetch("ACME", log) == history

    def test_unconfigured_skipped(self, history):
        log = DegradationLog()
        skipped = FakeHistoryProvider("alpha_vantage", bars=history, configured=False)
        chain = HistoryChain([
            FakeHistoryProvider("yahoo_chart", error=RateLimitError(source="yahoo_chart")),
            skipped,
            SyntheticHistoryAdapter(),
        ])
        bars = chain.fetch("ACME", log)

        assert skipped.calls == 0
        assert len(bars) == 100
        assert log.labels == ["history:synthetic"]

    def test_all_fail(self):
        log = DegradationLog()
        chain = HistoryChain([FakeHistoryProvider("yahoo_chart", error=DataError.empty("yahoo_chart"))])
        assert chain.fetch("ACME", log) == []
        assert log.labels == ["history:none"]

    def test_null_timestamp_falls_back_to_synthetic(self):
        log = DegradationLog()
        chart = YahooChartAdapter(VectorScopeConfig())
        payload = {"chart": {"result": [{
            "timestamp": [None],
            "indicators": {"quote": [{"close": [100.0]}]},
        }]}}

        with patch.object(chart, "_http_get_json", return_value=payload):
            bars = HistoryChain([chart, SyntheticHistoryAdapter()]).fetch("ACME", log)

        assert len(bars) == 100
        assert log.labels == ["history:synthetic"]


# ============================================================================
# News and secondary signals
# ============================================================================

class TestNewsFetcher:
    def test_success(self, sample_news):
        log = DegradationLog()
        assert NewsFetcher(FakeNewsProvider(sample_news)).fetch("ACME", log) == sample_news
        assert log.labels == []

    @pytest.mark.parametrize("provider", [
        None,
        FakeNewsProvider(configured=False),
        FakeNewsProvider(error=FetchError("finnhub", "HTTP 500")),
    ])
    def test_degrades_to_empty(self, provider):
        log = DegradationLog()
        assert NewsFetcher(provider).fetch("ACME", log) == []
        assert log.labels == ["news:none"]

    def test_malformed_items_yield_no_news(self):
        log = DegradationLog()
        finnhub = FinnhubAdapter(VectorScopeConfig(api_keys=ApiKeysConfig(finnhub="fh-key")))

        with patch.object(finnhub, "_http_get_json", return_value=[None]):
            assert NewsFetcher(finnhub).fetch("ACME", log) == []
        assert log.labels == []

    def test_malformed_payload_degrades(self):
        log = DegradationLog()
        finnhub = FinnhubAdapter(VectorScopeConfig(api_keys=ApiKeysConfig(finnhub="fh-key")))

        with patch.object(finnhub, "_http_get_json", return_value={"error": "x"}):
            assert NewsFetcher(finnhub).fetch("ACME", log) == []
        assert log.labels == ["news:none"]


class TestSecondaryFetcher:
    def test_options_success(self):
        log = DegradationLog()
        flow = make_flow(0.8)
        fetcher = SecondaryFetcher(options=FakeSecondaryProvider(options=flow))
        assert fetcher.fetch_options("ACME", 100.0, log) == flow
        assert log.labels == []

    def test_options_estimated_on_failure(self):
        log = DegradationLog()
        fetcher = SecondaryFetcher(options=FakeSecondaryProvider(error=DataError.empty("yahoo_options")), seed=5)
        flow = fetcher.fetch_options("ACME", 100.0, log)

        assert flow.estimated is True
        assert log.labels == ["options:estimated"]

    def test_options_estimated_without_provider(self):
        log = DegradationLog()
        assert SecondaryFetcher().fetch_options("ACME", 100.0, log).estimated is True
        assert log.labels == ["options:estimated"]

    def test_missing_providers_yield_none(self, sample_news):
        log = DegradationLog()
        fetcher = SecondaryFetcher()
        assert fetcher.fetch_events("ACME", log) is None
        assert fetcher.fetch_social("ACME", sample_news, log) is None
        assert log.labels == []

    def test_failures_degrade(self, sample_news):
        log = DegradationLog()
        broken = FakeSecondaryProvider(error=FetchError("x", "HTTP 500"))
        fetcher = SecondaryFetcher(events=broken, social=broken)

        assert fetcher.fetch_events("ACME", log) is None
        assert fetcher.fetch_social("ACME", sample_news, log) is None
        assert log.labels == ["events:none", "social:none"]
