from __future__ import annotations

import pytest

from tickerdash.domain.models import OhlcvRecord
from tickerdash.series.candles import CandleBuilder
from tickerdash.series.window import RollingWindow


def test_samples_in_one_interval_update_the_newest_candle() -> None:
    builder = CandleBuilder(interval_ms=60_000)
    window: RollingWindow[OhlcvRecord] = RollingWindow(20)

    window = builder.add(window, 0, 100.0, volume_24h=1000)
    window = builder.add(window, 30_000, 105.0, volume_24h=1500)
    window = builder.add(window, 45_000, 98.0, volume_24h=1400)
    window = builder.add(window, 60_000, 101.0, volume_24h=1600)

    first, second = window.items
    assert (first.open, first.high, first.low, first.close) == (100.0, 105.0, 98.0, 98.0)
    assert first.volume == pytest.approx(500)
    assert first.timestamp == 0
    assert (second.open, second.close, second.timestamp) == (101.0, 101.0, 60_000)
    assert second.volume == pytest.approx(200)


def test_candle_window_is_bounded() -> None:
    builder = CandleBuilder(interval_ms=1_000)
    window: RollingWindow[OhlcvRecord] = RollingWindow(3)
    for second in range(5):
        window = builder.add(window, second * 1_000 + 10, 100.0 + second)

    assert [candle.timestamp for candle in window] == [2_000, 3_000, 4_000]


def test_non_positive_interval_is_rejected() -> None:
    with pytest.raises(ValueError):
        CandleBuilder(interval_ms=0)
