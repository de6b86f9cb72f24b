"""Ticker and history data sources."""

from .base import HistorySource, TickerSource
from .history import MockHistorySource, generate_history, records_to_frame
from .indodax import IndodaxTickerClient, parse_ticker
from .yfinance_history import YFinanceHistorySource

__all__ = [
    "HistorySource",
    "IndodaxTickerClient",
    "MockHistorySource",
    "TickerSource",
    "YFinanceHistorySource",
    "generate_history",
    "parse_ticker",
    "records_to_frame",
]
