"""Display formatters for prices, volumes, percentages and times."""

from __future__ import annotations

import math
from datetime import datetime, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

VOLUME_UNITS = (
    (1_000_000_000.0, "B"),
    (1_000_000.0, "M"),
    (1_000.0, "K"),
)


def as_float(value: Any) -> float | None:
    """Coerce numbers and numeric strings, returning None for blanks and junk."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if not math.isfinite(number):
        return None
    return number


def format_idr(amount: float | str | None) -> str:
    """Format an amount as Indonesian rupiah with zero decimals, e.g. `Rp 11.000`."""
    number = as_float(amount)
    if number is None:
        number = 0.0
    rounded = Decimal(str(number)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    grouped = f"{abs(int(rounded)):,}".replace(",", ".")
    sign = "-" if rounded < 0 else ""
    return f"{sign}Rp {grouped}"


def format_volume(volume: float | str | None) -> str:
    """Compact magnitude formatting: 1_500_000 -> `1.5M`, missing -> `0`."""
    number = as_float(volume)
    if number is None:
        return "0"
    for threshold, suffix in VOLUME_UNITS:
        if number >= threshold:
            return f"{number / threshold:.1f}{suffix}"
    return f"{number:.0f}"


def format_percentage(current: float, previous: float) -> str:
    """Signed percentage change from `previous` to `current`."""
    if previous == 0:
        return "0.00%"
    change = (current - previous) / previous * 100.0
    sign = "+" if change >= 0 else ""
    return f"{sign}{change:.2f}%"


def format_signed_percent(value: float) -> str:
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.2f}%"


def format_time(timestamp_ms: int, tz: tzinfo | None = None) -> str:
    """Format an epoch-millisecond timestamp as `HH:MM`."""
    return _to_datetime(timestamp_ms, tz).strftime("%H:%M")


def format_axis_label(timestamp_ms: int, timeframe: str, tz: tzinfo | None = None) -> str:
    """Axis tick label whose granularity follows the chart timeframe."""
    moment = _to_datetime(timestamp_ms, tz)
    if timeframe == "1d":
        return moment.strftime("%d/%m")
    if timeframe == "1M":
        return moment.strftime("%b %y")
    return moment.strftime("%H:%M")


def _to_datetime(timestamp_ms: int, tz: tzinfo | None) -> datetime:
    return datetime.fromtimestamp(timestamp_ms / 1000.0, tz=tz)
