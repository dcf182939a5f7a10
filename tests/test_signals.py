"""Tests for secondary signal scoring."""

import pytest

from domain import (
    NewsSentiment,
    SignalLabel,
    SignalStrength,
    Vectors,
    combine_signals,
    label_for,
)
from domain.signals import (
    event_score,
    news_sentiment_score,
    options_score,
    social_score,
    technical_score,
)

from conftest import make_calendar, make_flow, make_news, make_social, make_unusual


class TestLabels:
    @pytest.mark.parametrize("score,expected", [
        (50.0, SignalLabel.STRONG_BUY),
        (15.0, SignalLabel.BUY),
        (14.9, SignalLabel.NEUTRAL),
        (-14.9, SignalLabel.NEUTRAL),
        (-15.0, SignalLabel.SELL),
        (-50.0, SignalLabel.STRONG_SELL),
    ])
    def test_label_for(self, score, expected):
        assert label_for(score) == expected


class TestScorers:
    def test_technical(self):
        signal = technical_score(Vectors(0.4, 0.2, 0.5), 0.9)
        assert signal.score == 30.0
        assert signal.confidence == 90.0
        assert signal.signal == SignalLabel.BUY
        assert signal.weight == 0.35

    def test_options_missing(self):
        signal = options_score(None)
        assert (signal.score, signal.confidence) == (0.0, 20.0)

    @pytest.mark.parametrize("pcr,expected", [(0.7, 50.0), (1.0, 0.0), (1.3, -50.0)])
    def test_options_put_call_ratio(self, pcr, expected):
        assert options_score(make_flow(pcr)).score == pytest.approx(expected)

    def test_options_unusual_bias(self):
        flow = make_flow(1.0, [make_unusual(NewsSentiment.BULLISH)] * 2 + [make_unusual(NewsSentiment.BEARISH)])
        signal = options_score(flow)
        assert signal.score == 15.0
        assert signal.confidence == 75.0

    def test_options_estimated_low_confidence(self):
        assert options_score(make_flow(0.85, estimated=True)).confidence == 40.0

    def test_options_score_clamped(self):
        assert options_score(make_flow(0.0)).score == 100.0

    def test_news(self):
        news = [make_news("a", 0.3), make_news("b", 0.2)]
        signal = news_sentiment_score(news)
        assert signal.score == 25.0
        assert signal.confidence == 50.0

    def test_news_empty(self):
        signal = news_sentiment_score([])
        assert (signal.score, signal.confidence) == (0.0, 20.0)

    def test_news_confidence_capped(self):
        news = [make_news(str(i), 0.1) for i in range(10)]
        assert news_sentiment_score(news).confidence == 90.0

    def test_social(self):
        signal = social_score(make_social(overall=0.4, mentions=40))
        assert signal.score == 40.0
        assert signal.confidence == 50.0

    def test_social_missing(self):
        assert social_score(None).confidence == 20.0

    def test_event_missing(self):
        assert (event_score(None).score, event_score(None).confidence) == (0.0, 30.0)
        assert event_score(make_calendar(None)).confidence == 30.0

    def test_event_surprise(self):
        signal = event_score(make_calendar(4.0, days_to_earnings=40))
        assert signal.score == 20.0
        assert signal.confidence == 60.0

    def test_event_surprise_saturates(self):
        assert event_score(make_calendar(-25.0)).score == -50.0

    def test_imminent_earnings_dampen(self):
        signal = event_score(make_calendar(4.0, days_to_earnings=3))
        assert signal.score == 10.0
        assert signal.confidence == 45.0


class TestCombineSignals:
    def test_defaults_without_secondary_data(self):
        result = combine_signals(Vectors(0.4, 0.2, 0.5), 0.9, [])

        assert result.technical_score.score == 30.0
        assert result.combined_score == pytest.approx(10.5)
        # 90*.35 + 20*.2 + 20*.15 + 20*.15 + 30*.15
        assert result.combined_confidence == pytest.approx(46.0)
        assert result.signal_strength == SignalStrength.WEAK

    def test_weights_normalized(self):
        weights = {"technical": 1.0, "options": 0.0, "sentiment": 0.0, "social": 0.0, "events": 0.0}
        result = combine_signals(Vectors(0.4, 0.2, 0.5), 0.9, [], weights=weights)
        assert result.combined_score == 30.0
        assert result.combined_confidence == 90.0
        assert result.signal_strength == SignalStrength.MODERATE

    def test_strong(self):
        weights = {"technical": 1.0, "options": 0.0, "sentiment": 0.0, "social": 0.0, "events": 0.0}
        result = combine_signals(Vectors(0.8, 0.6, 0.5), 0.9, [], weights=weights)
        assert result.combined_score == 70.0
        assert result.signal_strength == SignalStrength.STRONG

    def test_all_signals(self):
        result = combine_signals(
            Vectors(0.5, 0.5, 0.5),
            1.0,
            [make_news("a", 0.5)],
            options_flow=make_flow(0.7),
            events_calendar=make_calendar(10.0, days_to_earnings=30),
        )
        for signal in (result.technical_score, result.options_score, result.sentiment_score, result.event_score):
            assert signal.score == 50.0
        assert result.social_score.score == 0.0
        assert -100 <= result.combined_score <= 100
