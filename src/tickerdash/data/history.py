"""Mock historical candle backfill and frame conversions."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime

import numpy as np
import pandas as pd

from tickerdash.config import SymbolSpec
from tickerdash.domain.models import TIMEFRAME_MS, OhlcvRecord

VOLATILITY = {"15m": 0.02, "1h": 0.05, "1d": 0.1, "1M": 0.2}
DEFAULT_COUNTS = {"15m": 96, "1h": 168, "1d": 90, "1M": 24}
SETTLE_CANDLES = 5


def generate_history(
    current_price: float,
    timeframe: str,
    count: int | None = None,
    rng: np.random.Generator | None = None,
    now_ms: int | None = None,
) -> list[OhlcvRecord]:
    """Bounded random walk that drifts back toward `current_price`.

    Each candle's close moves at most `volatility / 2` from its open and its
    wicks extend at most `volatility / 2` beyond the open. The last few
    closes are nudged toward the current price.
    """
    if current_price <= 0:
        raise ValueError("current_price must be positive")
    if timeframe not in TIMEFRAME_MS:
        raise ValueError(f"Unsupported timeframe '{timeframe}'")
    total = DEFAULT_COUNTS[timeframe] if count is None else count
    if total <= 0:
        return []
    generator = rng or np.random.default_rng()
    interval = TIMEFRAME_MS[timeframe]
    volatility = VOLATILITY[timeframe]
    now = now_ms if now_ms is not None else int(datetime.now(tz=UTC).timestamp() * 1000)

    rows: list[dict[str, float]] = []
    price = current_price * (0.85 + generator.random() * 0.3)
    for step in range(total - 1, -1, -1):
        change = (generator.random() - 0.5) * volatility
        trend = abs(generator.random() - 0.5)
        open_price = price
        close_price = open_price * (1 + change)
        rows.append(
            {
                "timestamp": now - step * interval,
                "open": open_price,
                "high": max(open_price, close_price, open_price * (1 + trend * volatility)),
                "low": min(open_price, close_price, open_price * (1 - trend * volatility)),
                "close": close_price,
                "volume": generator.random() * 1_000_000 + 100_000,
            }
        )
        price = close_price

    last = len(rows) - 1
    adjustment = (current_price - rows[last]["close"]) / SETTLE_CANDLES
    first = last - (SETTLE_CANDLES - 1)
    for index in range(max(0, first), last + 1):
        factor = (index - first) / (SETTLE_CANDLES - 1)
        rows[index]["close"] += adjustment * factor

    return [
        OhlcvRecord.repaired(
            timestamp=int(row["timestamp"]),
            open=row["open"],
            high=row["high"],
            low=row["low"],
            close=row["close"],
            volume=row["volume"],
        )
        for row in rows
    ]


class MockHistorySource:
    """History source backed by `generate_history`."""

    def __init__(self, timeframe: str, seed: int | None = None) -> None:
        if timeframe not in TIMEFRAME_MS:
            raise ValueError(f"Unsupported timeframe '{timeframe}'")
        self.timeframe = timeframe
        self.rng = np.random.default_rng(seed)

    def get_history(self, spec: SymbolSpec, current_price: float) -> list[OhlcvRecord]:
        _ = spec
        return generate_history(current_price, self.timeframe, rng=self.rng)


def records_to_frame(records: Sequence[OhlcvRecord]) -> pd.DataFrame:
    """Convert records to an OHLCV frame indexed by UTC timestamps."""
    columns = ["open", "high", "low", "close", "volume"]
    if not records:
        return pd.DataFrame(columns=columns, index=pd.DatetimeIndex([], tz="UTC"))
    frame = pd.DataFrame(
        {
            "open": [record.open for record in records],
            "high": [record.high for record in records],
            "low": [record.low for record in records],
            "close": [record.close for record in records],
            "volume": [record.volume for record in records],
        },
        index=pd.to_datetime([record.timestamp for record in records], unit="ms", utc=True),
    )
    return frame[columns]


def frame_to_records(frame: pd.DataFrame) -> list[OhlcvRecord]:
    """Convert an OHLCV frame with a datetime index back to records."""
    records: list[OhlcvRecord] = []
    index = pd.to_datetime(frame.index, utc=True)
    for timestamp, row in zip(index, frame.itertuples(index=False)):
        records.append(
            OhlcvRecord.repaired(
                timestamp=int(timestamp.value // 1_000_000),
                open=float(row.open),
                high=float(row.high),
                low=float(row.low),
                close=float(row.close),
                volume=max(0.0, float(row.volume)),
            )
        )
    return records
