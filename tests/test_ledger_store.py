from __future__ import annotations

import sqlite3

import pytest

from tickerdash.errors import LedgerError
from tickerdash.portfolio.ledger import Ledger
from tickerdash.portfolio.store import SqliteLedgerStore


def test_store_round_trips_ledger_across_reopen(tmp_path) -> None:
    db_path = str(tmp_path / "state" / "portfolio.db")
    with SqliteLedgerStore(db_path) as store:
        assert len(store.load()) == 0
        store.save(Ledger().buy(10, 100).sell(4, 150))

    with SqliteLedgerStore(db_path) as store:
        ledger = store.load()

    assert [entry.kind.value for entry in ledger] == ["buy", "sell"]
    assert ledger.summarize(120).pnl == pytest.approx(320)


def test_save_rewrites_the_whole_ledger(tmp_path) -> None:
    db_path = str(tmp_path / "portfolio.db")
    with SqliteLedgerStore(db_path) as store:
        store.save(Ledger().buy(1, 10).buy(2, 20))
        store.save(Ledger().buy(5, 50))
        ledger = store.load()

    assert len(ledger) == 1
    assert ledger.entries[0].quantity == 5


def test_ledgers_under_different_keys_are_isolated(tmp_path) -> None:
    db_path = str(tmp_path / "portfolio.db")
    with SqliteLedgerStore(db_path, key="btc-portfolio") as store:
        store.save(Ledger().buy(1, 10))
    with SqliteLedgerStore(db_path) as store:
        assert len(store.load()) == 0


def test_corrupt_payload_raises_ledger_error(tmp_path) -> None:
    db_path = str(tmp_path / "portfolio.db")
    SqliteLedgerStore(db_path).close()
    connection = sqlite3.connect(db_path)
    connection.execute(
        "INSERT INTO kv(key, value, updated_ts) VALUES(?, ?, ?)",
        ("xrp-portfolio", "{not json", "2025-01-01"),
    )
    connection.commit()
    connection.close()

    with SqliteLedgerStore(db_path) as store:
        with pytest.raises(LedgerError):
            store.load()
