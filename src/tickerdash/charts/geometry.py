"""Screen-space geometry for candlestick, line and volume charts.

Coordinates follow the usual screen convention: x grows to the right and
y grows downward, so larger prices map to smaller y values. Everything in
this module is a pure function of its inputs.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Self

from tickerdash.domain.models import Direction, OhlcvRecord

DEFAULT_BODY_RATIO = 0.6
MIN_BODY_HEIGHT = 1.0


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle; also used for slots and viewports."""

    x: float
    y: float
    width: float
    height: float

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2


@dataclass(frozen=True)
class Segment:
    """Line segment between two points."""

    x1: float
    y1: float
    x2: float
    y2: float


@dataclass(frozen=True)
class CandleGeometry:
    """Drawable primitives for one candle: wick first, body on top."""

    timestamp: int
    wick: Segment
    body: Rect
    direction: Direction
    flat: bool = False


@dataclass(frozen=True)
class VolumeBar:
    timestamp: int
    rect: Rect
    direction: Direction


@dataclass(frozen=True)
class ValueDomain:
    """Closed price interval mapped onto a viewport's vertical extent."""

    minimum: float
    maximum: float

    def __post_init__(self) -> None:
        if self.maximum <= self.minimum:
            raise ValueError("domain maximum must exceed minimum")

    @classmethod
    def from_values(cls, values: Sequence[float], padding: float = 0.0) -> Self:
        """Span the values, widened by `padding` as a fraction of the range.

        A flat input (every value equal) is widened around its value so the
        domain never has zero extent.
        """
        if not values:
            raise ValueError("cannot build a domain from no values")
        if padding < 0:
            raise ValueError("padding must be non-negative")
        low = float(min(values))
        high = float(max(values))
        span = high - low
        if span <= 0:
            half = max(abs(low) * 0.01, 1.0)
            return cls(low - half, high + half)
        return cls(low - span * padding, high + span * padding)

    @classmethod
    def from_records(cls, records: Sequence[OhlcvRecord], padding: float = 0.0) -> Self:
        values = [record.low for record in records] + [record.high for record in records]
        return cls.from_values(values, padding=padding)

    @property
    def span(self) -> float:
        return self.maximum - self.minimum

    def to_y(self, value: float, viewport: Rect) -> float:
        return viewport.y + (self.maximum - value) / self.span * viewport.height


def map_candle(
    record: OhlcvRecord,
    slot: Rect,
    body_ratio: float = DEFAULT_BODY_RATIO,
    min_body: float = MIN_BODY_HEIGHT,
) -> CandleGeometry:
    """Map one record onto a slot whose vertical extent is its own [low, high].

    The body is centered horizontally at `body_ratio` of the slot width and
    never drawn thinner than `min_body` pixels, so doji candles stay visible.
    A candle with `high == low` becomes a flat marker at the slot's vertical
    center instead of dividing by a zero range.
    """
    if not 0 < body_ratio <= 1:
        raise ValueError("body_ratio must be in (0, 1]")
    if slot.width < 0 or slot.height < 0:
        raise ValueError("slot dimensions must be non-negative")

    center_x = slot.center_x
    body_width = slot.width * body_ratio
    body_x = slot.x + (slot.width - body_width) / 2
    span = record.high - record.low

    if span <= 0:
        line_y = slot.y + slot.height / 2
        return CandleGeometry(
            timestamp=record.timestamp,
            wick=Segment(center_x, line_y, center_x, line_y),
            body=Rect(body_x, line_y - min_body / 2, body_width, min_body),
            direction=record.direction,
            flat=True,
        )

    scale = slot.height / span

    def to_y(value: float) -> float:
        return slot.y + (record.high - value) * scale

    wick_top = to_y(record.high)
    wick_bottom = to_y(record.low)
    body_top = to_y(max(record.open, record.close))
    body_height = abs(record.close - record.open) * scale
    if body_height < min_body:
        body_height = min_body
        # keep a floored body inside the wick when the slot is tall enough
        if wick_bottom - wick_top >= min_body:
            body_top = min(body_top, wick_bottom - min_body)
        else:
            body_top = wick_top

    return CandleGeometry(
        timestamp=record.timestamp,
        wick=Segment(center_x, wick_top, center_x, wick_bottom),
        body=Rect(body_x, body_top, body_width, body_height),
        direction=record.direction,
    )


def column_width(count: int, viewport: Rect) -> float:
    return viewport.width / count if count else 0.0


def layout_candles(
    records: Sequence[OhlcvRecord],
    viewport: Rect,
    domain: ValueDomain | None = None,
    body_ratio: float = DEFAULT_BODY_RATIO,
) -> list[CandleGeometry]:
    """Lay out records left to right in equal columns over a shared domain."""
    if not records:
        return []
    value_domain = domain or ValueDomain.from_records(records)
    width = column_width(len(records), viewport)
    candles: list[CandleGeometry] = []
    for index, record in enumerate(records):
        top = value_domain.to_y(record.high, viewport)
        bottom = value_domain.to_y(record.low, viewport)
        slot = Rect(viewport.x + index * width, top, width, bottom - top)
        candles.append(map_candle(record, slot, body_ratio=body_ratio))
    return candles


def line_paths(
    values: Sequence[float | None],
    viewport: Rect,
    domain: ValueDomain,
) -> list[list[tuple[float, float]]]:
    """Map a series onto disjoint polylines, breaking at every missing value."""
    width = column_width(len(values), viewport)
    paths: list[list[tuple[float, float]]] = []
    current: list[tuple[float, float]] = []
    for index, value in enumerate(values):
        if value is None:
            if current:
                paths.append(current)
                current = []
            continue
        x = viewport.x + (index + 0.5) * width
        current.append((x, domain.to_y(value, viewport)))
    if current:
        paths.append(current)
    return paths


def volume_bars(
    records: Sequence[OhlcvRecord],
    viewport: Rect,
    body_ratio: float = DEFAULT_BODY_RATIO,
) -> list[VolumeBar]:
    """Bottom-anchored bars scaled to the largest volume in the series."""
    if not records:
        return []
    peak = max(record.volume for record in records)
    width = column_width(len(records), viewport)
    bar_width = width * body_ratio
    bars: list[VolumeBar] = []
    for index, record in enumerate(records):
        height = record.volume / peak * viewport.height if peak > 0 else 0.0
        x = viewport.x + index * width + (width - bar_width) / 2
        bars.append(
            VolumeBar(
                timestamp=record.timestamp,
                rect=Rect(x, viewport.bottom - height, bar_width, height),
                direction=record.direction,
            )
        )
    return bars


def reference_levels(domain: ValueDomain, divisions: int = 5) -> list[float]:
    """Evenly spaced interior price levels for horizontal guide lines."""
    if divisions < 2:
        return []
    step = domain.span / divisions
    return [domain.minimum + step * index for index in range(1, divisions)]
