"""
Plain-text and markdown rendering of an AnalysisResult.

Pure formatting logic - no I/O except the optional stream write.
"""

import sys
from datetime import datetime
from typing import TextIO

from domain import AnalysisResult, CaseAnalysis, Direction, Verdict


def _conviction_bar(score: float, width: int = 10) -> str:
    """Render a 0-100 score as a text bar."""
    filled = int(round(score / 100 * width))
    return "█" * filled + "░" * (width - filled) + f" {score:.0f}/100"


def _direction_arrow(direction: Direction) -> str:
    return {
        Direction.UP: "↑",
        Direction.DOWN: "↓",
        Direction.SIDEWAYS: "→",
    }[direction]


def _verdict_badge(verdict: Verdict) -> str:
    return f"**{verdict.value.replace('_', ' ')}**"


def _format_ms(epoch_ms: int) -> str:
    return datetime.fromtimestamp(epoch_ms / 1000).strftime("%Y-%m-%d %H:%M")


def summarize(result: AnalysisResult) -> str:
    """
    One-paragraph context summary.

    Price and daily change, both theses with their scores, RSI, the SMA50
    relation and vector coherence.
    """
    quote = result.quote
    relation = "above" if quote.price > result.indicators.sma50 else "below"
    sign = "+" if quote.change_percent >= 0 else ""

    return (
        f"{result.ticker} is trading at ${quote.price:.2f} "
        f"({sign}{quote.change_percent:.2f}%). "
        f"Bull Case ({result.bull_case.score}/100): {result.bull_case.argument} "
        f"Bear Case ({result.bear_case.score}/100): {result.bear_case.argument} "
        f"Technical outlook: RSI at {result.indicators.rsi:.1f}, "
        f"price {relation} SMA50. "
        f"Vector coherence: {result.coherence * 100:.0f}%."
    )


def _case_section(title: str, case: CaseAnalysis) -> list[str]:
    lines = [
        f"### {title}: {case.key}",
        "",
        f"**Conviction:** {_conviction_bar(case.score)}",
        "",
        case.argument,
        "",
    ]
    if case.catalysts:
        lines.append("Catalysts:")
        lines.extend(f"- {c}" for c in case.catalysts)
        lines.append("")
    if case.risks:
        lines.append("Risks:")
        lines.extend(f"- {r}" for r in case.risks)
        lines.append("")
    lines.append(f"*{case.time_horizon}*")
    lines.append("")
    return lines


def generate_markdown_report(result: AnalysisResult) -> str:
    """Full markdown report for one analysis."""
    quote = result.quote
    ind = result.indicators
    pred = result.prediction

    lines = [
        f"# {result.ticker} - {_format_ms(result.timestamp)}",
        "",
        f"**Price:** ${quote.price:.2f} ({quote.change_percent:+.2f}%) | "
        f"**Verdict:** {_verdict_badge(result.verdict)} | "
        f"**Confidence:** {result.confidence_level * 100:.0f}%",
        "",
        "---",
        "",
        "## Vectors",
        "",
        "| Vector | Value |",
        "|--------|-------|",
        f"| Sentiment | {result.sentiment_vector:+.3f} |",
        f"| Price | {result.price_vector:+.3f} |",
        f"| Volume | {result.volume_vector:+.3f} |",
        f"| Coherence | {result.coherence:.3f} |",
        "",
        "## Technicals",
        "",
        f"- RSI(14): {ind.rsi:.1f}",
        f"- MACD: {ind.macd:.3f} / signal {ind.macd_signal:.3f} / hist {ind.macd_histogram:.3f}",
        f"- SMA 20/50/200: {ind.sma20:.2f} / {ind.sma50:.2f} / {ind.sma200:.2f}",
        f"- Bollinger: {ind.bollinger_lower:.2f} - {ind.bollinger_upper:.2f}",
        f"- ATR: {ind.atr:.2f} | ADX: {ind.adx:.1f} | Stoch %K: {ind.stoch_k:.1f}",
        "",
        "## Adversarial Analysis",
        "",
    ]
    lines.extend(_case_section("Bull", result.bull_case))
    lines.extend(_case_section("Bear", result.bear_case))

    lines.extend([
        "## 72-Hour Prediction",
        "",
        f"{_direction_arrow(pred.direction)} **{pred.direction.value}** "
        f"{pred.predicted_change:+.2f}% → ${pred.price_target:.2f} "
        f"(confidence {pred.confidence:.0f}%, {pred.origin.value.replace('_', '-')})",
        "",
        f"Support ${pred.support_level:.2f} | Resistance ${pred.resistance_level:.2f}",
        "",
        pred.reasoning,
        "",
    ])

    if result.multi_signal:
        ms = result.multi_signal
        lines.extend([
            "## Multi-Signal",
            "",
            "| Signal | Score | Weight | Confidence |",
            "|--------|-------|--------|------------|",
        ])
        for score in (ms.technical_score, ms.options_score, ms.sentiment_score, ms.social_score, ms.event_score):
            lines.append(
                f"| {score.name} | {score.score:+.1f} ({score.signal.value}) "
                f"| {score.weight:.2f} | {score.confidence:.0f} |"
            )
        lines.append("")
        lines.append(
            f"**Combined:** {ms.combined_score:+.1f} "
            f"({ms.signal_strength.value}, confidence {ms.combined_confidence:.0f})"
        )
        lines.append("")

    if result.news:
        lines.append("## News")
        lines.append("")
        for item in result.news[:5]:
            lines.append(f"- [{item.sentiment.value}] {item.title} ({item.source})")
        lines.append("")

    if result.degraded_sources:
        lines.append(f"*Degraded sources: {', '.join(result.degraded_sources)}*")
        lines.append("")

    return "\n".join(lines)


def write_report(result: AnalysisResult, output: TextIO | None = None) -> None:
    """Write the markdown report to `output` (stdout by default)."""
    (output or sys.stdout).write(generate_markdown_report(result) + "\n")
