"""Live ticker feed maintaining rolling candle and price windows."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from tickerdash.config import SymbolSpec
from tickerdash.data.base import TickerSource
from tickerdash.domain.models import OhlcvRecord, PricePoint, TickerSnapshot
from tickerdash.errors import DataSourceError
from tickerdash.series.candles import CandleBuilder
from tickerdash.series.window import RollingWindow

FETCH_ERROR_MESSAGE = "Failed to fetch ticker data"

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(datetime.now(tz=UTC).timestamp() * 1000)


@dataclass(frozen=True)
class FeedState:
    """Immutable view of the feed handed to renderers."""

    snapshot: TickerSnapshot | None
    candles: tuple[OhlcvRecord, ...]
    points: tuple[PricePoint, ...]
    loading: bool
    error: str | None
    polls: int = 0

    @property
    def has_data(self) -> bool:
        return self.snapshot is not None


class LiveTickerFeed:
    """Poll one symbol and keep bounded windows of derived data."""

    def __init__(
        self,
        source: TickerSource,
        spec: SymbolSpec,
        candle_capacity: int = 20,
        point_capacity: int = 50,
        candle_interval_ms: int = 60_000,
        clock: Callable[[], int] = _now_ms,
        on_update: Callable[[FeedState], None] | None = None,
    ) -> None:
        self.source = source
        self.spec = spec
        self.clock = clock
        self.on_update = on_update
        self._builder = CandleBuilder(interval_ms=candle_interval_ms)
        self._candles: RollingWindow[OhlcvRecord] = RollingWindow(candle_capacity)
        self._points: RollingWindow[PricePoint] = RollingWindow(point_capacity)
        self._snapshot: TickerSnapshot | None = None
        self._loading = True
        self._error: str | None = None
        self._polls = 0
        self._lock = threading.Lock()

    @property
    def state(self) -> FeedState:
        with self._lock:
            return FeedState(
                snapshot=self._snapshot,
                candles=self._candles.items,
                points=self._points.items,
                loading=self._loading,
                error=self._error,
                polls=self._polls,
            )

    def poll(self) -> FeedState:
        """Fetch one snapshot; failures set the error flag and keep old data."""
        try:
            snapshot = self.source.fetch(self.spec)
        except DataSourceError as exc:
            logger.warning("%s: %s", self.spec.pair, exc)
            with self._lock:
                self._error = FETCH_ERROR_MESSAGE
                self._loading = False
                self._polls += 1
        else:
            self._apply(snapshot)
        state = self.state
        if self.on_update is not None:
            self.on_update(state)
        return state

    def _apply(self, snapshot: TickerSnapshot) -> None:
        timestamp = self.clock()
        with self._lock:
            self._snapshot = snapshot
            self._error = None
            self._loading = False
            self._polls += 1
            if snapshot.last <= 0:
                logger.warning("%s: ticker has no usable last price", self.spec.pair)
                return
            self._points = self._points.append(PricePoint(timestamp=timestamp, price=snapshot.last))
            self._candles = self._builder.add(
                self._candles,
                timestamp_ms=timestamp,
                price=snapshot.last,
                volume_24h=snapshot.volume_base,
            )
