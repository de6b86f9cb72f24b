"""Runtime wiring for the live dashboard and one-shot commands."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any
from uuid import uuid4

from tickerdash.charts.report import candlestick_figure, price_line_figure, write_dashboard
from tickerdash.config import Settings
from tickerdash.data.base import HistorySource, TickerSource
from tickerdash.data.history import MockHistorySource
from tickerdash.data.indodax import IndodaxTickerClient
from tickerdash.data.yfinance_history import YFinanceHistorySource
from tickerdash.domain.models import EntryKind, TickerSnapshot
from tickerdash.errors import DataSourceError, LedgerError
from tickerdash.feed import FeedState, LiveTickerFeed
from tickerdash.formatting import format_idr, format_signed_percent, format_volume
from tickerdash.logging.event_sink import DashboardEvent, JsonlEventSink
from tickerdash.logging.logger import HumanLogger
from tickerdash.news import format_time_ago, mock_news
from tickerdash.polling import PollingSubscription
from tickerdash.portfolio.ledger import PortfolioSummary
from tickerdash.portfolio.store import SqliteLedgerStore
from tickerdash.prediction import Prediction, predict


def run(settings: Settings, source: TickerSource | None = None) -> int:
    """Poll the ticker until interrupted or `max_polls` is reached."""
    ticker_source = source or build_ticker_source(settings)
    human_logger = HumanLogger(level=settings.log_level)
    store = build_ledger_store(settings)
    try:
        return _run_with_store(settings, ticker_source, store, human_logger)
    finally:
        store.close()


def _run_with_store(
    settings: Settings,
    ticker_source: TickerSource,
    store: SqliteLedgerStore,
    human_logger: HumanLogger,
) -> int:
    spec = settings.symbol_spec
    try:
        ledger = store.load()
    except LedgerError as exc:
        human_logger.error(str(exc))
        return 1

    run_id = uuid4().hex
    run_directory = Path(settings.events_dir) / run_id
    run_directory.mkdir(parents=True, exist_ok=True)
    event_sink = JsonlEventSink(run_directory / "events.jsonl")
    report_path = run_directory / "dashboard.html"

    done = threading.Event()
    predictions: list[Prediction] = []
    predictions_lock = threading.Lock()

    def on_update(state: FeedState) -> None:
        try:
            emit_poll_event(event_sink, run_id, spec.symbol, state)
            if state.error:
                human_logger.error(state.error)
            elif state.snapshot is not None:
                human_logger.ticker(state.snapshot)
                if state.candles:
                    human_logger.candle(spec.symbol, state.candles[-1])
                if not predictions:
                    refresh_predictions(state.snapshot)
        finally:
            if settings.max_polls is not None and state.polls >= settings.max_polls:
                done.set()

    def refresh_predictions(snapshot: TickerSnapshot | None = None) -> None:
        current = snapshot or feed.state.snapshot
        if current is None or current.last <= 0:
            return
        with predictions_lock:
            predictions[:] = predict(current.last)
            human_logger.predictions(spec.symbol, predictions)

    feed = LiveTickerFeed(
        source=ticker_source,
        spec=spec,
        candle_capacity=settings.candle_window,
        point_capacity=settings.point_window,
        candle_interval_ms=settings.candle_interval_seconds * 1000,
        on_update=on_update,
    )

    human_logger.run_started(run_id, spec.symbol, settings.poll_interval_seconds)
    event_sink.emit(
        DashboardEvent(
            run_id=run_id,
            symbol=spec.symbol,
            event_type="run_started",
            payload={"interval_seconds": settings.poll_interval_seconds},
        )
    )

    exit_code = 0
    try:
        with PollingSubscription(feed.poll, settings.poll_interval_seconds, name="ticker"):
            with PollingSubscription(
                refresh_predictions,
                settings.prediction_interval_seconds,
                name="prediction",
                run_immediately=False,
            ):
                done.wait()
    except KeyboardInterrupt:
        exit_code = 0
    finally:
        state = feed.state
        summary = None
        if state.snapshot is not None:
            summary = ledger.summarize(state.snapshot.last)
            human_logger.portfolio(spec.symbol, summary)
        if settings.write_report:
            write_live_report(report_path, settings, state, summary, predictions)
            human_logger.report(str(report_path))

    return exit_code


def show_portfolio(settings: Settings, source: TickerSource | None = None) -> int:
    """Print ledger entries and metrics at the current market price."""
    spec = settings.symbol_spec
    human_logger = HumanLogger(level=settings.log_level)
    store = build_ledger_store(settings)
    try:
        ledger = store.load()
    except LedgerError as exc:
        human_logger.error(str(exc))
        return 1
    finally:
        store.close()

    current_price = 0.0
    try:
        snapshot = (source or build_ticker_source(settings)).fetch(spec)
        current_price = snapshot.last
    except DataSourceError as exc:
        human_logger.error(f"price unavailable, valuing at zero: {exc}")

    for entry in ledger.newest_first():
        human_logger.ledger_entry(spec.symbol, entry)
    human_logger.portfolio(spec.symbol, ledger.summarize(current_price))
    return 0


def record_trade(
    settings: Settings,
    kind: EntryKind | str,
    quantity: float,
    unit_price: float,
) -> int:
    """Append one ledger entry and persist the whole ledger."""
    spec = settings.symbol_spec
    human_logger = HumanLogger(level=settings.log_level)
    store = build_ledger_store(settings)
    try:
        ledger = store.load().record(kind, quantity, unit_price)
        store.save(ledger)
    except LedgerError as exc:
        human_logger.error(str(exc))
        return 1
    finally:
        store.close()
    human_logger.ledger_entry(spec.symbol, ledger.entries[-1])
    human_logger.portfolio(spec.symbol, ledger.summarize(unit_price))
    return 0


def render_history(
    settings: Settings,
    source: TickerSource | None = None,
    history: HistorySource | None = None,
    output_path: str | Path | None = None,
) -> int:
    """Backfill history for the configured timeframe and write a chart report."""
    spec = settings.symbol_spec
    human_logger = HumanLogger(level=settings.log_level)
    try:
        snapshot = (source or build_ticker_source(settings)).fetch(spec)
        if snapshot.last <= 0:
            raise DataSourceError(f"{spec.pair}: ticker has no usable last price")
        records = (history or build_history_source(settings)).get_history(spec, snapshot.last)
    except DataSourceError as exc:
        human_logger.error(f"Failed to fetch historical data: {exc}")
        return 1

    default_name = f"history-{spec.symbol}-{settings.timeframe}.html"
    output = Path(output_path or Path(settings.events_dir) / default_name)
    figure = candlestick_figure(
        records,
        title=f"{spec.symbol}/IDR {settings.timeframe} history",
        timeframe=settings.timeframe,
    )
    write_dashboard(
        output,
        title=f"{spec.label} history",
        figures=[figure],
        sections={"Ticker": ticker_rows(snapshot)},
    )
    human_logger.report(str(output))
    return 0


def write_live_report(
    path: str | Path,
    settings: Settings,
    state: FeedState,
    summary: PortfolioSummary | None,
    predictions: list[Prediction],
) -> Path:
    spec = settings.symbol_spec
    sections: dict[str, dict[str, str]] = {}
    if state.snapshot is not None:
        sections["Ticker"] = ticker_rows(state.snapshot)
    if state.error:
        sections["Status"] = {"error": state.error}
    if summary is not None:
        sections["Portfolio"] = portfolio_rows(spec.symbol, summary)
    if predictions:
        sections["Prediction (simulated)"] = {
            item.horizon: f"{format_idr(item.price)} {item.trend} ({item.confidence:.0f}%)"
            for item in predictions
        }
    news = [
        f"{item.title} ({item.source}, {format_time_ago(item.published_at)})"
        for item in mock_news()
    ]
    figures = [
        candlestick_figure(state.candles, title=f"{spec.symbol}/IDR realtime candlestick"),
        price_line_figure(state.points, title=f"{spec.symbol}/IDR realtime price"),
    ]
    return write_dashboard(
        path,
        title=f"{spec.label} dashboard",
        figures=figures,
        sections=sections,
        lists={"News (sample)": news},
    )


def ticker_rows(snapshot: TickerSnapshot) -> dict[str, str]:
    return {
        "last": format_idr(snapshot.last),
        "high 24h": format_idr(snapshot.high),
        "low 24h": format_idr(snapshot.low),
        f"volume 24h ({snapshot.symbol})": format_volume(snapshot.volume_base),
        "volume 24h (IDR)": format_volume(snapshot.volume_quote),
    }


def portfolio_rows(symbol: str, summary: PortfolioSummary) -> dict[str, str]:
    return {
        f"total {symbol}": f"{summary.net_quantity:.2f}",
        "invested": format_idr(summary.net_capital),
        "current value": format_idr(summary.market_value),
        "pnl": f"{format_idr(summary.pnl)} ({format_signed_percent(summary.pnl_pct)})",
    }


def emit_poll_event(
    event_sink: JsonlEventSink,
    run_id: str,
    symbol: str,
    state: FeedState,
) -> None:
    payload: dict[str, Any] = {"polls": state.polls, "error": state.error}
    if state.snapshot is not None:
        payload.update(
            {
                "last": state.snapshot.last,
                "high": state.snapshot.high,
                "low": state.snapshot.low,
                "volume": state.snapshot.volume_base,
                "server_time": state.snapshot.server_time,
            }
        )
    event_sink.emit(
        DashboardEvent(
            run_id=run_id,
            symbol=symbol,
            event_type="poll_error" if state.error else "poll",
            payload=payload,
        )
    )


def build_ticker_source(settings: Settings) -> TickerSource:
    return IndodaxTickerClient(
        base_url=settings.ticker_base_url,
        timeout=settings.request_timeout_seconds,
    )


def build_history_source(settings: Settings) -> HistorySource:
    """Select history backfill implementation."""
    if settings.history_source == "yfinance":
        return YFinanceHistorySource(timeframe=settings.timeframe)
    return MockHistorySource(timeframe=settings.timeframe)


def build_ledger_store(settings: Settings) -> SqliteLedgerStore:
    return SqliteLedgerStore(settings.ledger_db_path, key=settings.ledger_key)

