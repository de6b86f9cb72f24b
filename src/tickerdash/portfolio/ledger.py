"""Buy/sell ledger and the portfolio metrics derived from it."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Self
from uuid import uuid4

from tickerdash.domain.models import EntryKind, LedgerEntry
from tickerdash.errors import LedgerError


@dataclass(frozen=True)
class PortfolioSummary:
    """Metrics re-derived from the full ledger on every call."""

    net_quantity: float
    net_capital: float
    market_value: float
    pnl: float
    pnl_pct: float


def summarize(entries: Iterable[LedgerEntry], current_price: float) -> PortfolioSummary:
    """Fold the ledger into holdings, capital deployed and mark-to-market P&L."""
    net_quantity = 0.0
    net_capital = 0.0
    for entry in entries:
        if entry.kind == EntryKind.BUY:
            net_quantity += entry.quantity
            net_capital += entry.notional
        else:
            net_quantity -= entry.quantity
            net_capital -= entry.notional
    market_value = net_quantity * current_price
    pnl = market_value - net_capital
    pnl_pct = pnl / net_capital * 100.0 if net_capital > 0 else 0.0
    return PortfolioSummary(
        net_quantity=net_quantity,
        net_capital=net_capital,
        market_value=market_value,
        pnl=pnl,
        pnl_pct=pnl_pct,
    )


def _new_entry_id() -> str:
    return uuid4().hex


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True)
class Ledger:
    """Append-only, immutable list of ledger entries."""

    entries: tuple[LedgerEntry, ...] = ()
    id_factory: Callable[[], str] = field(default=_new_entry_id, repr=False, compare=False)
    clock: Callable[[], datetime] = field(default=_utc_now, repr=False, compare=False)

    def record(self, kind: EntryKind | str, quantity: float, unit_price: float) -> Self:
        """Return a new ledger with one more entry."""
        try:
            entry = LedgerEntry(
                id=self.id_factory(),
                kind=EntryKind(kind),
                quantity=float(quantity),
                unit_price=float(unit_price),
                timestamp=self.clock(),
            )
        except ValueError as exc:
            raise LedgerError(str(exc)) from exc
        return type(self)(
            entries=(*self.entries, entry),
            id_factory=self.id_factory,
            clock=self.clock,
        )

    def buy(self, quantity: float, unit_price: float) -> Self:
        return self.record(EntryKind.BUY, quantity, unit_price)

    def sell(self, quantity: float, unit_price: float) -> Self:
        return self.record(EntryKind.SELL, quantity, unit_price)

    def summarize(self, current_price: float) -> PortfolioSummary:
        return summarize(self.entries, current_price)

    def newest_first(self) -> list[LedgerEntry]:
        return list(reversed(self.entries))

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[LedgerEntry]:
        return iter(self.entries)


def entry_to_record(entry: LedgerEntry) -> dict[str, Any]:
    """Convert an entry to a JSON-friendly mapping."""
    return {
        "id": entry.id,
        "type": entry.kind.value,
        "amount": entry.quantity,
        "price": entry.unit_price,
        "date": entry.timestamp.isoformat(),
    }


def entry_from_record(record: dict[str, Any]) -> LedgerEntry:
    """Parse one stored mapping; raises `LedgerError` on bad data."""
    try:
        timestamp = datetime.fromisoformat(str(record["date"]).replace("Z", "+00:00"))
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=UTC)
        return LedgerEntry(
            id=str(record["id"]),
            kind=EntryKind(str(record["type"]).lower()),
            quantity=float(record["amount"]),
            unit_price=float(record["price"]),
            timestamp=timestamp,
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise LedgerError(f"Invalid ledger record {record!r}: {exc}") from exc
