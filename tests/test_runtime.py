from __future__ import annotations

from pathlib import Path

import pytest

from tickerdash.config import Settings, SymbolSpec
from tickerdash.data.history import MockHistorySource
from tickerdash.domain.models import EntryKind, TickerSnapshot
from tickerdash.errors import DataSourceError
from tickerdash.logging.event_sink import load_events
from tickerdash.portfolio.ledger import Ledger
from tickerdash.portfolio.store import SqliteLedgerStore
from tickerdash.runtime import (
    build_history_source,
    record_trade,
    render_history,
    run,
    show_portfolio,
)


class StaticSource:
    def __init__(self, last: float = 12_000.0) -> None:
        self.last = last
        self.calls = 0

    def fetch(self, spec: SymbolSpec) -> TickerSnapshot:
        self.calls += 1
        return TickerSnapshot(
            symbol=spec.symbol,
            last=self.last,
            high=self.last * 1.05,
            low=self.last * 0.95,
            buy=self.last,
            sell=self.last,
            volume_base=1_500_000.0,
            volume_quote=1_500_000.0 * self.last,
            server_time=1_700_000_000,
        )


class FailingSource:
    def fetch(self, spec: SymbolSpec) -> TickerSnapshot:
        raise DataSourceError(f"{spec.pair} unavailable")


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        ledger_db_path=str(tmp_path / "state" / "portfolio.db"),
        events_dir=str(tmp_path / "runs"),
    )


def test_record_trade_persists_entries(settings: Settings) -> None:
    assert record_trade(settings, EntryKind.BUY, 10, 100) == 0
    assert record_trade(settings, "sell", 4, 150) == 0

    with SqliteLedgerStore(settings.ledger_db_path) as store:
        summary = store.load().summarize(120)
    assert summary.net_quantity == pytest.approx(6)
    assert summary.pnl == pytest.approx(320)


def test_record_trade_rejects_invalid_quantity(settings: Settings) -> None:
    assert record_trade(settings, EntryKind.BUY, 0, 100) == 1
    with SqliteLedgerStore(settings.ledger_db_path) as store:
        assert len(store.load()) == 0


def test_show_portfolio_tolerates_price_failures(settings: Settings) -> None:
    record_trade(settings, EntryKind.BUY, 1, 100)

    assert show_portfolio(settings, source=StaticSource()) == 0
    assert show_portfolio(settings, source=FailingSource()) == 0


def test_render_history_writes_report(settings: Settings, tmp_path) -> None:
    output = tmp_path / "history.html"
    code = render_history(
        settings,
        source=StaticSource(),
        history=MockHistorySource("1h", seed=5),
        output_path=output,
    )

    assert code == 0
    assert "XRP - Ripple history" in output.read_text(encoding="utf-8")


def test_render_history_defaults_to_events_dir(settings: Settings) -> None:
    assert render_history(settings, source=StaticSource(), history=MockHistorySource("1h")) == 0
    assert (Path(settings.events_dir) / "history-XRP-1h.html").exists()


def test_render_history_fails_without_price(settings: Settings) -> None:
    assert render_history(settings, source=FailingSource()) == 1
    assert render_history(settings, source=StaticSource(last=0.0)) == 1


def test_build_history_source_follows_settings(settings: Settings) -> None:
    assert isinstance(build_history_source(settings), MockHistorySource)


def test_run_stops_after_max_polls_and_writes_outputs(settings: Settings) -> None:
    record_trade(settings, EntryKind.BUY, 2, 10_000)
    source = StaticSource()

    code = run(settings.with_overrides(max_polls=1), source=source)

    assert code == 0
    assert source.calls >= 1
    run_dirs = list(Path(settings.events_dir).iterdir())
    assert len(run_dirs) == 1
    events = load_events(run_dirs[0] / "events.jsonl")
    assert events[0]["event_type"] == "run_started"
    assert events[1]["event_type"] == "poll"
    assert events[1]["payload"]["last"] == 12_000.0
    report = (run_dirs[0] / "dashboard.html").read_text(encoding="utf-8")
    assert "Portfolio" in report
    assert "Rp 12.000" in report


def test_run_records_fetch_errors(settings: Settings) -> None:
    code = run(settings.with_overrides(max_polls=1, write_report=False), source=FailingSource())

    assert code == 0
    run_dir = next(Path(settings.events_dir).iterdir())
    events = load_events(run_dir / "events.jsonl")
    assert events[-1]["event_type"] == "poll_error"
    assert events[-1]["payload"]["error"] == "Failed to fetch ticker data"
    assert not (run_dir / "dashboard.html").exists()


def test_run_reports_predictions_from_first_snapshot(settings: Settings) -> None:
    code = run(settings.with_overrides(max_polls=1), source=StaticSource())

    assert code == 0
    run_dir = next(Path(settings.events_dir).iterdir())
    report = (run_dir / "dashboard.html").read_text(encoding="utf-8")
    assert "Prediction (simulated)" in report
    assert "1 hour" in report


def test_run_finishes_when_event_sink_fails(settings: Settings, monkeypatch) -> None:
    def failing_emit(*args, **kwargs) -> None:
        raise OSError("disk full")

    monkeypatch.setattr("tickerdash.runtime.emit_poll_event", failing_emit)

    assert run(settings.with_overrides(max_polls=1), source=StaticSource()) == 0


def test_run_closes_store_when_run_directory_cannot_be_created(
    settings: Settings, tmp_path, monkeypatch
) -> None:
    closed: list[bool] = []

    class TrackingStore:
        def load(self) -> Ledger:
            return Ledger()

        def close(self) -> None:
            closed.append(True)

    blocker = tmp_path / "not-a-directory"
    blocker.write_text("", encoding="utf-8")
    monkeypatch.setattr("tickerdash.runtime.build_ledger_store", lambda _: TrackingStore())

    with pytest.raises(OSError):
        run(settings.with_overrides(events_dir=str(blocker)), source=StaticSource())
    assert closed == [True]
