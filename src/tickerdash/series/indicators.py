"""Moving-average indicators over candle closes."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Sequence

import pandas as pd

from tickerdash.domain.models import OhlcvRecord

DEFAULT_PERIODS = (5, 20)


def moving_average(records: Sequence[OhlcvRecord], period: int) -> list[float | None]:
    """Mean close over `[i - period + 1, i]`, or None before the window fills."""
    if period <= 0:
        raise ValueError("period must be positive")
    if not records:
        return []
    close = pd.Series([record.close for record in records], dtype="float64")
    averaged = close.rolling(window=period).mean()
    return [None if pd.isna(value) else float(value) for value in averaged]


def moving_averages(
    records: Sequence[OhlcvRecord],
    periods: Iterable[int] = DEFAULT_PERIODS,
) -> dict[int, list[float | None]]:
    """Compute several moving averages keyed by period."""
    return {period: moving_average(records, period) for period in periods}


class RunningAverage:
    """Incremental moving average with O(1) updates per sample."""

    def __init__(self, period: int) -> None:
        if period <= 0:
            raise ValueError("period must be positive")
        self.period = period
        self._values: deque[float] = deque(maxlen=period)
        self._total = 0.0

    def update(self, value: float) -> float | None:
        """Add one close and return the current average, if defined."""
        if len(self._values) == self.period:
            self._total -= self._values[0]
        self._values.append(float(value))
        self._total += float(value)
        return self.value

    @property
    def value(self) -> float | None:
        if len(self._values) < self.period:
            return None
        return self._total / self.period

    def reset(self) -> None:
        self._values.clear()
        self._total = 0.0

    def series(self, closes: Iterable[float]) -> list[float | None]:
        """Feed a whole sequence from scratch and collect every output."""
        self.reset()
        return [self.update(close) for close in closes]
