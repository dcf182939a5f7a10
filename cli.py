"""
VectorScope CLI - adversarial market analysis for one ticker.

Usage:
    vectorscope analyze TICKER [--json] [--format FORMAT] [--output FILE]
                               [--no-secondary] [--timeout S]
                               [--config PATH] [--verbose]
"""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from config import ConfigError, get_config, load_config
from orchestration import analyze
from ports import QuoteUnavailable, ValidationError
from presentation import generate_markdown_report, summarize, to_json


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def cmd_analyze(args: argparse.Namespace) -> int:
    """Analyze one ticker and print the result."""
    try:
        config = load_config(args.config) if args.config else get_config()
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    try:
        result = analyze(
            args.ticker,
            config=config,
            timeout=args.timeout,
            include_secondary=not args.no_secondary,
        )
    except (QuoteUnavailable, ValidationError) as e:
        print(f"ERROR: {e.message}", file=sys.stderr)
        return 1
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    output_format = "json" if args.json else args.format
    if output_format == "json":
        content = to_json(result)
    elif output_format == "summary":
        content = summarize(result)
    else:
        content = generate_markdown_report(result)

    if args.output:
        Path(args.output).write_text(content)
        print(f"Analysis written to {args.output}", file=sys.stderr)
    else:
        print(content)

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    load_dotenv()

    parser = argparse.ArgumentParser(
        prog="vectorscope",
        description="Adversarial market analysis and 72-hour forecasts",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser("analyze", help="Analyze one ticker")
    analyze_parser.add_argument("ticker", help="Ticker symbol, e.g. AAPL or BTC-USD")
    analyze_parser.add_argument("--json", action="store_true", help="Shortcut for --format json")
    analyze_parser.add_argument(
        "-f", "--format",
        choices=["markdown", "summary", "json"],
        default="markdown",
        help="Output format",
    )
    analyze_parser.add_argument("-o", "--output", help="Output file path")
    analyze_parser.add_argument(
        "--no-secondary",
        action="store_true",
        help="Skip options, events and social signals",
    )
    analyze_parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds per outbound request",
    )
    analyze_parser.add_argument("--config", help="Path to a TOML config file")
    analyze_parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    analyze_parser.set_defaults(func=cmd_analyze)

    args = parser.parse_args(argv)
    _configure_logging(getattr(args, "verbose", False))
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
