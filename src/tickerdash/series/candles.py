"""Fold ticker price samples into fixed-interval candles."""

from __future__ import annotations

from dataclasses import dataclass

from tickerdash.domain.models import OhlcvRecord
from tickerdash.series.window import RollingWindow


@dataclass
class CandleBuilder:
    """Aggregate live samples into interval-aligned OHLCV candles.

    A sample inside the newest candle's bucket updates it in place
    (`replace_last`); a sample in a later bucket opens a new candle.
    Candle volume is the increase of the cumulative 24h volume reading
    since the previous sample, clamped at zero when the 24h window rolls.
    """

    interval_ms: int = 60_000
    _bucket_start: int | None = None
    _last_volume: float | None = None

    def __post_init__(self) -> None:
        if self.interval_ms <= 0:
            raise ValueError("interval_ms must be positive")

    def bucket_of(self, timestamp_ms: int) -> int:
        return timestamp_ms - timestamp_ms % self.interval_ms

    def add(
        self,
        window: RollingWindow[OhlcvRecord],
        timestamp_ms: int,
        price: float,
        volume_24h: float = 0.0,
    ) -> RollingWindow[OhlcvRecord]:
        volume_delta = 0.0
        if self._last_volume is not None:
            volume_delta = max(0.0, volume_24h - self._last_volume)
        self._last_volume = volume_24h

        bucket = self.bucket_of(timestamp_ms)
        current = window.latest
        if current is None or self._bucket_start is None or bucket > self._bucket_start:
            self._bucket_start = bucket
            opened = OhlcvRecord.repaired(
                timestamp=bucket,
                open=price,
                high=price,
                low=price,
                close=price,
                volume=volume_delta,
            )
            return window.append(opened)

        updated = OhlcvRecord.repaired(
            timestamp=current.timestamp,
            open=current.open,
            high=max(current.high, price),
            low=min(current.low, price),
            close=price,
            volume=current.volume + volume_delta,
        )
        return window.replace_last(updated)
