"""Command-line interface for the ticker dashboard."""

from __future__ import annotations

import argparse
import sys

from tickerdash.config import SYMBOLS, Settings
from tickerdash.domain.models import TIMEFRAME_MS, EntryKind
from tickerdash.runtime import record_trade, render_history, run, show_portfolio


def parse_trade(value: str) -> tuple[float, float]:
    """Parse `QTY@PRICE` into positive floats."""
    quantity_text, separator, price_text = value.partition("@")
    if not separator:
        raise argparse.ArgumentTypeError("trade must look like QTY@PRICE, e.g. 10@11000")
    try:
        quantity = float(quantity_text)
        price = float(price_text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid trade '{value}'") from exc
    if quantity <= 0 or price <= 0:
        raise argparse.ArgumentTypeError("trade quantity and price must be positive")
    return quantity, price


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""
    parser = argparse.ArgumentParser(description="Polling crypto ticker dashboard")
    parser.add_argument("--symbol", type=str, help=f"Symbol ({', '.join(SYMBOLS)})")
    parser.add_argument("--interval-seconds", type=int, help="Seconds between ticker polls")
    parser.add_argument("--max-polls", type=int, help="Stop after a fixed number of polls")
    parser.add_argument("--ledger-db", type=str, help="SQLite ledger database path")
    parser.add_argument("--events-dir", type=str, help="Run outputs directory")
    parser.add_argument("--timeframe", choices=list(TIMEFRAME_MS), help="History timeframe")
    parser.add_argument("--history-source", choices=["mock", "yfinance"], help="History source")
    parser.add_argument("--no-report", action="store_true", help="Skip the HTML dashboard")
    parser.add_argument("--buy", type=parse_trade, metavar="QTY@PRICE", help="Record a buy")
    parser.add_argument("--sell", type=parse_trade, metavar="QTY@PRICE", help="Record a sell")
    parser.add_argument(
        "--portfolio",
        action="store_true",
        help="List ledger entries and portfolio value at the current price, then exit",
    )
    parser.add_argument(
        "--history",
        action="store_true",
        help="Write a historical candlestick report for --timeframe, then exit",
    )
    return parser


def apply_cli_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Apply CLI values onto environment-derived settings."""
    actions = [
        name
        for name, enabled in (
            ("--buy", args.buy is not None),
            ("--sell", args.sell is not None),
            ("--portfolio", args.portfolio),
            ("--history", args.history),
        )
        if enabled
    ]
    if len(actions) > 1:
        raise ValueError(f"Use only one action flag: {', '.join(actions)}")
    if args.max_polls is not None and actions:
        raise ValueError("--max-polls only applies to live polling")

    overrides: dict[str, object] = {}
    if args.symbol:
        overrides["symbol"] = args.symbol
    if args.interval_seconds is not None:
        overrides["poll_interval_seconds"] = args.interval_seconds
    if args.max_polls is not None:
        overrides["max_polls"] = args.max_polls
    if args.ledger_db:
        overrides["ledger_db_path"] = args.ledger_db
    if args.events_dir:
        overrides["events_dir"] = args.events_dir
    if args.timeframe:
        overrides["timeframe"] = args.timeframe
    if args.history_source:
        overrides["history_source"] = args.history_source
    if args.no_report:
        overrides["write_report"] = False
    return settings.with_overrides(**overrides)


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = apply_cli_overrides(Settings.from_env(), args)
    except ValueError as exc:
        print(f"Configuration error: {exc}")
        return 2
    if args.buy is not None:
        return record_trade(settings, EntryKind.BUY, *args.buy)
    if args.sell is not None:
        return record_trade(settings, EntryKind.SELL, *args.sell)
    if args.portfolio:
        return show_portfolio(settings)
    if args.history:
        return render_history(settings)
    return run(settings)


if __name__ == "__main__":
    sys.exit(main())
