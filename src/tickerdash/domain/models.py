"""Core ticker, candle and ledger models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Literal, Self

TimeFrame = Literal["15m", "1h", "1d", "1M"]

TIMEFRAME_MS: dict[str, int] = {
    "15m": 15 * 60 * 1000,
    "1h": 60 * 60 * 1000,
    "1d": 24 * 60 * 60 * 1000,
    "1M": 30 * 24 * 60 * 60 * 1000,
}


class Direction(StrEnum):
    """Candle direction used for coloring."""

    UP = "up"
    DOWN = "down"


class EntryKind(StrEnum):
    """Supported ledger entry kinds."""

    BUY = "buy"
    SELL = "sell"


def direction_of(open_price: float, close_price: float) -> Direction:
    """Ties resolve to up."""
    return Direction.UP if close_price >= open_price else Direction.DOWN


@dataclass(frozen=True)
class OhlcvRecord:
    """One sampling period's price summary."""

    timestamp: int
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0

    def __post_init__(self) -> None:
        if min(self.open, self.high, self.low, self.close) <= 0:
            raise ValueError("OHLC prices must be positive")
        if self.volume < 0:
            raise ValueError("volume must be non-negative")
        if self.low > min(self.open, self.close) or self.high < max(self.open, self.close):
            raise ValueError("OHLC record violates low <= open/close <= high")

    @classmethod
    def repaired(
        cls,
        timestamp: int,
        open: float,
        high: float,
        low: float,
        close: float,
        volume: float = 0.0,
    ) -> Self:
        """Build a record, widening high/low so they bound open and close."""
        return cls(
            timestamp=int(timestamp),
            open=float(open),
            high=max(float(open), float(close), float(high)),
            low=min(float(open), float(close), float(low)),
            close=float(close),
            volume=float(volume),
        )

    @property
    def direction(self) -> Direction:
        return direction_of(self.open, self.close)

    @property
    def change_pct(self) -> float:
        return (self.close - self.open) / self.open * 100.0


@dataclass(frozen=True)
class PricePoint:
    """Single price sample for line charts."""

    timestamp: int
    price: float


@dataclass(frozen=True)
class TickerSnapshot:
    """Parsed ticker payload for one symbol."""

    symbol: str
    last: float
    high: float
    low: float
    buy: float
    sell: float
    volume_base: float
    volume_quote: float
    server_time: int

    @property
    def is_up(self) -> bool:
        """Last price sits above the midpoint of the 24h range."""
        return self.last > (self.high + self.low) / 2


@dataclass(frozen=True)
class LedgerEntry:
    """Single buy or sell transaction."""

    id: str
    kind: EntryKind
    quantity: float
    unit_price: float
    timestamp: datetime

    def __post_init__(self) -> None:
        if self.quantity <= 0:
            raise ValueError("quantity must be positive")
        if self.unit_price <= 0:
            raise ValueError("unit_price must be positive")

    @property
    def notional(self) -> float:
        return self.quantity * self.unit_price
