from __future__ import annotations

import sys
from types import SimpleNamespace

import pandas as pd
import pytest

from tickerdash.config import SYMBOLS
from tickerdash.data.yfinance_history import YFinanceHistorySource
from tickerdash.errors import DataSourceError


def _install_fake_yfinance(monkeypatch, frame: pd.DataFrame, calls: list[dict]) -> None:
    class FakeTicker:
        def __init__(self, symbol: str) -> None:
            self.symbol = symbol

        def history(self, **kwargs):
            calls.append({"symbol": self.symbol, **kwargs})
            return frame

    monkeypatch.setitem(sys.modules, "yfinance", SimpleNamespace(Ticker=FakeTicker))


def test_history_maps_symbol_interval_and_columns(monkeypatch) -> None:
    index = pd.date_range("2025-01-01", periods=3, freq="h", tz="UTC")
    frame = pd.DataFrame(
        {
            "Open": [100.0, 101.0, 102.0],
            "High": [103.0, 104.0, 105.0],
            "Low": [99.0, 100.0, 101.0],
            "Close": [101.0, 102.0, 103.0],
            "Volume": [1000, 1100, 1200],
        },
        index=index,
    )
    calls: list[dict] = []
    _install_fake_yfinance(monkeypatch, frame, calls)

    records = YFinanceHistorySource(timeframe="1h").get_history(SYMBOLS["BTC"], 0.0)

    assert calls[0]["symbol"] == "BTC-IDR"
    assert calls[0]["interval"] == "60m"
    assert calls[0]["period"] == "60d"
    assert [record.close for record in records] == [101.0, 102.0, 103.0]
    assert records[0].timestamp == int(index[0].timestamp() * 1000)
    assert records[-1].volume == 1200.0


def test_non_positive_rows_are_dropped(monkeypatch) -> None:
    index = pd.date_range("2025-01-01", periods=2, freq="D", tz="UTC")
    frame = pd.DataFrame(
        {"Open": [0.0, 10.0], "High": [1.0, 11.0], "Low": [0.0, 9.0], "Close": [1.0, 10.5]},
        index=index,
    )
    _install_fake_yfinance(monkeypatch, frame, [])

    records = YFinanceHistorySource(timeframe="1d").get_history(SYMBOLS["ETH"], 0.0)

    assert len(records) == 1
    assert records[0].volume == 0.0


@pytest.mark.parametrize(
    "frame",
    [
        pd.DataFrame(),
        pd.DataFrame({"Close": [1.0]}, index=pd.date_range("2025-01-01", periods=1, tz="UTC")),
    ],
)
def test_empty_or_incomplete_payload_raises(monkeypatch, frame: pd.DataFrame) -> None:
    _install_fake_yfinance(monkeypatch, frame, [])
    with pytest.raises(DataSourceError):
        YFinanceHistorySource(timeframe="1d").get_history(SYMBOLS["XRP"], 0.0)


def test_monthly_timeframe_uses_longest_period() -> None:
    source = YFinanceHistorySource(timeframe="1M")
    assert (source.interval, source.period) == ("1mo", "max")
