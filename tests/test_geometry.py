from __future__ import annotations

import pytest

from tickerdash.charts.geometry import (
    Rect,
    ValueDomain,
    layout_candles,
    line_paths,
    map_candle,
    reference_levels,
    volume_bars,
)
from tickerdash.domain.models import Direction, OhlcvRecord

EPSILON = 1e-9


def _record(
    open_: float, high: float, low: float, close: float, volume: float = 0.0
) -> OhlcvRecord:
    return OhlcvRecord(timestamp=0, open=open_, high=high, low=low, close=close, volume=volume)


def test_map_candle_scales_prices_into_slot() -> None:
    candle = map_candle(_record(105, 110, 100, 102), Rect(0, 0, 10, 100))

    assert candle.direction == Direction.DOWN
    assert (candle.wick.x1, candle.wick.y1, candle.wick.x2, candle.wick.y2) == (5, 0, 5, 100)
    assert candle.body.y == pytest.approx(50)
    assert candle.body.height == pytest.approx(30)
    assert candle.body.x == pytest.approx(2)
    assert candle.body.width == pytest.approx(6)


@pytest.mark.parametrize(
    ("open_", "high", "low", "close"),
    [
        (105, 110, 100, 102),
        (100, 110, 100, 110),
        (100, 110, 100, 100),
        (110, 110, 100, 110),
        (104, 110, 100, 104),
        (100.5, 101, 100, 100.6),
    ],
)
@pytest.mark.parametrize("slot", [Rect(10, 20, 10, 100), Rect(0, 0, 4, 3), Rect(0, 5, 8, 1)])
def test_body_always_sits_within_wick_range(
    open_: float, high: float, low: float, close: float, slot: Rect
) -> None:
    candle = map_candle(_record(open_, high, low, close), slot)

    assert candle.body.y >= candle.wick.y1 - EPSILON
    assert candle.body.bottom <= candle.wick.y2 + EPSILON
    assert candle.body.height >= 1.0
    assert candle.wick.y1 == pytest.approx(slot.y)
    assert candle.wick.y2 == pytest.approx(slot.bottom)


def test_doji_body_is_floored_to_minimum_height() -> None:
    candle = map_candle(_record(100, 110, 100, 100), Rect(0, 20, 10, 100))

    assert candle.direction == Direction.UP
    assert candle.body.height == pytest.approx(1.0)
    assert candle.body.bottom == pytest.approx(120)


def test_flat_candle_becomes_centered_marker() -> None:
    candle = map_candle(_record(100, 100, 100, 100), Rect(0, 0, 10, 40))

    assert candle.flat
    assert candle.wick.y1 == candle.wick.y2 == pytest.approx(20)
    assert candle.body.height == pytest.approx(1.0)
    assert candle.body.y == pytest.approx(19.5)


def test_invalid_body_ratio_is_rejected() -> None:
    with pytest.raises(ValueError):
        map_candle(_record(100, 110, 90, 105), Rect(0, 0, 10, 10), body_ratio=0)


def test_layout_candles_uses_equal_columns_and_shared_domain() -> None:
    records = [
        OhlcvRecord(index, open=100 + index, high=105 + index, low=95 + index, close=101 + index)
        for index in range(4)
    ]
    viewport = Rect(0, 0, 400, 200)
    candles = layout_candles(records, viewport)

    assert len(candles) == 4
    assert [candle.wick.x1 for candle in candles] == [50, 150, 250, 350]
    assert min(candle.wick.y1 for candle in candles) == pytest.approx(0)
    assert max(candle.wick.y2 for candle in candles) == pytest.approx(200)
    assert candles[0].wick.y2 > candles[-1].wick.y2


def test_layout_candles_with_no_records_is_empty() -> None:
    assert layout_candles([], Rect(0, 0, 100, 100)) == []


def test_line_paths_break_at_missing_values() -> None:
    domain = ValueDomain(0, 10)
    viewport = Rect(0, 0, 50, 100)

    paths = line_paths([None, None, 2.0, 3.0, 4.0], viewport, domain)
    assert len(paths) == 1
    assert [x for x, _ in paths[0]] == [25, 35, 45]
    assert paths[0][0][1] == pytest.approx(80)

    assert len(line_paths([1.0, None, 3.0], viewport, domain)) == 2
    assert line_paths([None, None], viewport, domain) == []


def test_volume_bars_scale_to_peak_and_anchor_at_bottom() -> None:
    records = [_record(100, 110, 90, 105, volume=50), _record(105, 110, 90, 95, volume=100)]
    bars = volume_bars(records, Rect(0, 100, 20, 40))

    assert bars[0].rect.height == pytest.approx(20)
    assert bars[1].rect.height == pytest.approx(40)
    assert all(bar.rect.bottom == pytest.approx(140) for bar in bars)
    assert bars[1].direction == Direction.DOWN


def test_volume_bars_with_zero_volume_are_flat() -> None:
    bars = volume_bars([_record(100, 110, 90, 105)], Rect(0, 0, 10, 10))
    assert bars[0].rect.height == 0


def test_value_domain_widens_flat_input() -> None:
    domain = ValueDomain.from_values([100.0, 100.0])

    assert domain.minimum < 100 < domain.maximum
    assert domain.to_y(100, Rect(0, 0, 10, 50)) == pytest.approx(25)
    with pytest.raises(ValueError):
        ValueDomain.from_values([])
    with pytest.raises(ValueError):
        ValueDomain(5, 5)


def test_reference_levels_are_interior_and_even() -> None:
    assert reference_levels(ValueDomain(0, 100)) == pytest.approx([20, 40, 60, 80])
