"""SQLite-backed durable storage for the ledger."""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import UTC, datetime
from pathlib import Path

from tickerdash.errors import LedgerError
from tickerdash.portfolio.ledger import Ledger, entry_from_record, entry_to_record

DEFAULT_LEDGER_KEY = "xrp-portfolio"

logger = logging.getLogger(__name__)


class SqliteLedgerStore:
    """Key/value store holding the whole ledger as one JSON list.

    The ledger is loaded once and rewritten wholesale on every save; there
    is no incremental persistence.
    """

    def __init__(self, db_path: str, key: str = DEFAULT_LEDGER_KEY) -> None:
        path = Path(db_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.key = key
        self.connection = sqlite3.connect(path)
        self.connection.row_factory = sqlite3.Row
        self._initialize_schema()

    def load(self) -> Ledger:
        row = self.connection.execute(
            "SELECT value FROM kv WHERE key = ?",
            (self.key,),
        ).fetchone()
        if row is None:
            return Ledger()
        try:
            records = json.loads(row["value"])
        except json.JSONDecodeError as exc:
            raise LedgerError(f"Stored ledger under '{self.key}' is not valid JSON") from exc
        if not isinstance(records, list):
            raise LedgerError(f"Stored ledger under '{self.key}' is not a list")
        entries = tuple(entry_from_record(record) for record in records)
        logger.debug("loaded %d ledger entries from %s", len(entries), self.key)
        return Ledger(entries=entries)

    def save(self, ledger: Ledger) -> None:
        payload = json.dumps([entry_to_record(entry) for entry in ledger.entries])
        self.connection.execute(
            """
            INSERT OR REPLACE INTO kv(key, value, updated_ts)
            VALUES(?, ?, ?)
            """,
            (self.key, payload, datetime.now(tz=UTC).isoformat()),
        )
        self.connection.commit()

    def close(self) -> None:
        self.connection.close()

    def __enter__(self) -> SqliteLedgerStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _initialize_schema(self) -> None:
        self.connection.execute(
            """
            CREATE TABLE IF NOT EXISTS kv(
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_ts TEXT NOT NULL
            )
            """
        )
        self.connection.commit()
