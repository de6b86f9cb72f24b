"""Domain models."""

from .models import (
    TIMEFRAME_MS,
    Direction,
    EntryKind,
    LedgerEntry,
    OhlcvRecord,
    PricePoint,
    TickerSnapshot,
    TimeFrame,
    direction_of,
)

__all__ = [
    "TIMEFRAME_MS",
    "Direction",
    "EntryKind",
    "LedgerEntry",
    "OhlcvRecord",
    "PricePoint",
    "TickerSnapshot",
    "TimeFrame",
    "direction_of",
]
