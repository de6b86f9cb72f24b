"""Ledger aggregation and persistence."""

from .ledger import Ledger, PortfolioSummary, summarize
from .store import DEFAULT_LEDGER_KEY, SqliteLedgerStore

__all__ = ["DEFAULT_LEDGER_KEY", "Ledger", "PortfolioSummary", "SqliteLedgerStore", "summarize"]
