"""Ticker and history source contracts."""

from __future__ import annotations

from typing import Protocol

from tickerdash.config import SymbolSpec
from tickerdash.domain.models import OhlcvRecord, TickerSnapshot


class TickerSource(Protocol):
    """Interface for latest-ticker retrieval."""

    def fetch(self, spec: SymbolSpec) -> TickerSnapshot:
        """Return the latest ticker snapshot for a symbol."""


class HistorySource(Protocol):
    """Interface for historical candle backfill."""

    def get_history(self, spec: SymbolSpec, current_price: float) -> list[OhlcvRecord]:
        """Return chronologically ordered candles ending near `current_price`."""
