from __future__ import annotations

from tickerdash.logging.event_sink import DashboardEvent, JsonlEventSink, load_events


def test_events_are_appended_as_json_lines(tmp_path) -> None:
    sink = JsonlEventSink(tmp_path / "run" / "events.jsonl")
    sink.emit(DashboardEvent(run_id="r1", symbol="XRP", event_type="poll", payload={"last": 1.0}))
    sink.emit(DashboardEvent(run_id="r1", symbol="XRP", event_type="poll_error"))

    records = load_events(sink.path)

    assert [record["event_type"] for record in records] == ["poll", "poll_error"]
    assert records[0]["payload"] == {"last": 1.0}
    assert records[1]["payload"] == {}
    assert "ts" in records[0]


def test_load_events_for_missing_file_is_empty(tmp_path) -> None:
    assert load_events(tmp_path / "missing.jsonl") == []
