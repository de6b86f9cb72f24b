"""Plotly HTML dashboard drawn from precomputed chart geometry."""

from __future__ import annotations

import html
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import plotly.graph_objects as go

from tickerdash.charts.geometry import (
    Rect,
    ValueDomain,
    column_width,
    layout_candles,
    line_paths,
    reference_levels,
    volume_bars,
)
from tickerdash.domain.models import Direction, OhlcvRecord, PricePoint
from tickerdash.formatting import format_axis_label, format_idr
from tickerdash.series.indicators import moving_averages

COLORS = {
    Direction.UP: "#00d4aa",
    Direction.DOWN: "#ff6b6b",
}
MA_COLORS = {5: "#f59e0b", 20: "#8b5cf6"}
LINE_COLOR = "#10b981"
GRID_COLOR = "#4b5563"
MAX_X_TICKS = 8


def _base_figure(title: str, width: int, height: int) -> go.Figure:
    figure = go.Figure()
    figure.update_layout(
        title=title,
        template="plotly_dark",
        width=width,
        height=height,
        showlegend=True,
        margin={"l": 110, "r": 20, "t": 50, "b": 40},
    )
    figure.update_xaxes(range=[0, width], showgrid=False, zeroline=False)
    figure.update_yaxes(range=[height, 0], showgrid=False, zeroline=False)
    return figure


def _placeholder(figure: go.Figure, message: str) -> go.Figure:
    figure.add_annotation(
        text=message,
        x=0.5,
        y=0.5,
        xref="paper",
        yref="paper",
        showarrow=False,
        font={"size": 16},
    )
    figure.update_xaxes(showticklabels=False)
    figure.update_yaxes(showticklabels=False)
    return figure


def _path_trace(paths: list[list[tuple[float, float]]], name: str, color: str) -> go.Scatter:
    xs: list[float | None] = []
    ys: list[float | None] = []
    for path in paths:
        if xs:
            xs.append(None)
            ys.append(None)
        xs.extend(x for x, _ in path)
        ys.extend(y for _, y in path)
    return go.Scatter(
        x=xs,
        y=ys,
        mode="lines+markers" if any(len(path) == 1 for path in paths) else "lines",
        name=name,
        connectgaps=False,
        line={"color": color, "width": 2},
        marker={"size": 3},
    )


def _x_ticks(
    timestamps: Sequence[int], viewport: Rect, timeframe: str
) -> tuple[list[float], list[str]]:
    width = column_width(len(timestamps), viewport)
    step = max(1, len(timestamps) // MAX_X_TICKS)
    values: list[float] = []
    labels: list[str] = []
    for index in range(0, len(timestamps), step):
        values.append(viewport.x + (index + 0.5) * width)
        labels.append(format_axis_label(timestamps[index], timeframe))
    return values, labels


def _y_ticks(domain: ValueDomain, viewport: Rect) -> tuple[list[float], list[str]]:
    levels = reference_levels(domain)
    positions = [domain.to_y(level, viewport) for level in levels]
    return positions, [format_idr(level) for level in levels]


def candlestick_figure(
    records: Sequence[OhlcvRecord],
    title: str,
    timeframe: str = "15m",
    width: int = 960,
    height: int = 560,
    ma_periods: Sequence[int] = (5, 20),
) -> go.Figure:
    """Candles, moving averages and volume bars as shapes in pixel space."""
    figure = _base_figure(title, width, height)
    if not records:
        return _placeholder(figure, "No data available")

    price_view = Rect(0.0, 0.0, float(width), height * 0.72)
    volume_view = Rect(0.0, height * 0.78, float(width), height * 0.22)
    domain = ValueDomain.from_records(records, padding=0.05)

    shapes: list[dict[str, Any]] = []
    for level_y in _y_ticks(domain, price_view)[0]:
        shapes.append(
            {
                "type": "line",
                "x0": price_view.x,
                "x1": price_view.x + price_view.width,
                "y0": level_y,
                "y1": level_y,
                "line": {"color": GRID_COLOR, "width": 1, "dash": "dot"},
            }
        )
    for candle in layout_candles(records, price_view, domain=domain):
        color = COLORS[candle.direction]
        shapes.append(
            {
                "type": "line",
                "x0": candle.wick.x1,
                "y0": candle.wick.y1,
                "x1": candle.wick.x2,
                "y1": candle.wick.y2,
                "line": {"color": color, "width": 1},
            }
        )
        shapes.append(
            {
                "type": "rect",
                "x0": candle.body.x,
                "y0": candle.body.y,
                "x1": candle.body.x + candle.body.width,
                "y1": candle.body.bottom,
                "line": {"color": color, "width": 1},
                "fillcolor": color,
            }
        )
    for bar in volume_bars(records, volume_view):
        shapes.append(
            {
                "type": "rect",
                "x0": bar.rect.x,
                "y0": bar.rect.y,
                "x1": bar.rect.x + bar.rect.width,
                "y1": bar.rect.bottom,
                "line": {"width": 0},
                "fillcolor": COLORS[bar.direction],
                "opacity": 0.5,
            }
        )
    figure.update_layout(shapes=shapes)

    for period, values in moving_averages(records, ma_periods).items():
        paths = line_paths(values, price_view, domain)
        if paths:
            figure.add_trace(_path_trace(paths, f"MA{period}", MA_COLORS.get(period, "#e5e7eb")))

    x_values, x_labels = _x_ticks([record.timestamp for record in records], price_view, timeframe)
    y_values, y_labels = _y_ticks(domain, price_view)
    figure.update_xaxes(tickmode="array", tickvals=x_values, ticktext=x_labels)
    figure.update_yaxes(tickmode="array", tickvals=y_values, ticktext=y_labels)
    return figure


def price_line_figure(
    points: Sequence[PricePoint],
    title: str,
    width: int = 960,
    height: int = 320,
) -> go.Figure:
    """Realtime price line from sampled points."""
    figure = _base_figure(title, width, height)
    if not points:
        return _placeholder(figure, "Waiting for price samples")
    viewport = Rect(0.0, 0.0, float(width), float(height))
    domain = ValueDomain.from_values([point.price for point in points], padding=0.05)
    paths = line_paths([point.price for point in points], viewport, domain)
    figure.add_trace(_path_trace(paths, "price", LINE_COLOR))
    x_values, x_labels = _x_ticks([point.timestamp for point in points], viewport, "15m")
    y_values, y_labels = _y_ticks(domain, viewport)
    figure.update_xaxes(tickmode="array", tickvals=x_values, ticktext=x_labels)
    figure.update_yaxes(tickmode="array", tickvals=y_values, ticktext=y_labels)
    return figure


def _summary_table(title: str, rows: Mapping[str, str]) -> str:
    cells = "".join(
        f"<tr><th>{html.escape(label)}</th><td>{html.escape(value)}</td></tr>"
        for label, value in rows.items()
    )
    return f"<h2>{html.escape(title)}</h2><table>{cells}</table>"


def _list_block(title: str, items: Sequence[str]) -> str:
    entries = "".join(f"<li>{html.escape(item)}</li>" for item in items)
    return f"<h2>{html.escape(title)}</h2><ul>{entries}</ul>"


def write_dashboard(
    output_html_path: str | Path,
    title: str,
    figures: Sequence[go.Figure],
    sections: Mapping[str, Mapping[str, str]] | None = None,
    lists: Mapping[str, Sequence[str]] | None = None,
) -> Path:
    """Write figures plus summary tables into one standalone HTML page."""
    output = Path(output_html_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    html_parts = [
        "<html><head><meta charset='utf-8'>",
        f"<title>{html.escape(title)}</title></head><body>",
        f"<h1>{html.escape(title)}</h1>",
    ]
    for name, rows in (sections or {}).items():
        html_parts.append(_summary_table(name, rows))
    for index, figure in enumerate(figures):
        include_plotlyjs: str | bool = "cdn" if index == 0 else False
        html_parts.append(figure.to_html(full_html=False, include_plotlyjs=include_plotlyjs))
    for name, items in (lists or {}).items():
        html_parts.append(_list_block(name, items))
    html_parts.append("</body></html>")
    output.write_text("".join(html_parts), encoding="utf-8")
    return output
