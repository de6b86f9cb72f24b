"""Chart geometry and Plotly rendering."""

from .geometry import (
    CandleGeometry,
    Rect,
    Segment,
    ValueDomain,
    VolumeBar,
    layout_candles,
    line_paths,
    map_candle,
    reference_levels,
    volume_bars,
)
from .report import candlestick_figure, price_line_figure, write_dashboard

__all__ = [
    "CandleGeometry",
    "Rect",
    "Segment",
    "ValueDomain",
    "VolumeBar",
    "candlestick_figure",
    "layout_candles",
    "line_paths",
    "map_candle",
    "price_line_figure",
    "reference_levels",
    "volume_bars",
    "write_dashboard",
]
