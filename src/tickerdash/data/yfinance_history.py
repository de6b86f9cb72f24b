"""Yahoo Finance history backfill."""

from __future__ import annotations

import re
from typing import Any

import pandas as pd

from tickerdash.config import SymbolSpec
from tickerdash.data.history import DEFAULT_COUNTS, frame_to_records
from tickerdash.domain.models import OhlcvRecord
from tickerdash.errors import DataSourceError


class YFinanceHistorySource:
    """Fetch IDR-quoted OHLCV candles from Yahoo Finance via yfinance."""

    def __init__(self, timeframe: str, quote: str = "IDR") -> None:
        self.timeframe = timeframe
        self.interval = self._normalize_interval(timeframe)
        self.period = self._period_for_interval(self.interval)
        self.quote = quote.strip().upper()

    def get_history(self, spec: SymbolSpec, current_price: float) -> list[OhlcvRecord]:
        _ = current_price
        import yfinance as yf

        ticker = self._resolve_yfinance_symbol(spec)
        try:
            history = yf.Ticker(ticker).history(
                period=self.period,
                interval=self.interval,
                auto_adjust=False,
                actions=False,
            )
        except Exception as exc:
            raise DataSourceError(f"yfinance request failed for {ticker}: {exc}") from exc

        frame = self._normalize_history(history, ticker)
        frame = frame.tail(DEFAULT_COUNTS.get(self.timeframe, len(frame)))
        return frame_to_records(frame)

    def _resolve_yfinance_symbol(self, spec: SymbolSpec) -> str:
        return f"{spec.symbol.upper()}-{self.quote}"

    @staticmethod
    def _normalize_history(history: Any, ticker: str) -> pd.DataFrame:
        if history is None:
            raise DataSourceError(f"yfinance returned no rows for {ticker}")
        frame = pd.DataFrame(history).copy()
        if frame.empty:
            raise DataSourceError(f"yfinance returned no rows for {ticker}")

        columns = {
            name: YFinanceHistorySource._pick_column(frame, name)
            for name in ("open", "high", "low", "close", "volume")
        }
        if any(columns[name] is None for name in ("open", "high", "low", "close")):
            raise DataSourceError(f"yfinance payload missing OHLC columns for {ticker}")

        normalized = pd.DataFrame(index=pd.to_datetime(frame.index, utc=True))
        for name in ("open", "high", "low", "close"):
            normalized[name] = pd.to_numeric(frame[columns[name]], errors="coerce").to_numpy()
        if columns["volume"] is None:
            normalized["volume"] = 0.0
        else:
            volume = pd.to_numeric(frame[columns["volume"]], errors="coerce").fillna(0.0)
            normalized["volume"] = volume.to_numpy()
        normalized = normalized.sort_index()
        normalized = normalized.dropna(subset=["open", "high", "low", "close"])
        positive = (normalized[["open", "high", "low", "close"]] > 0).all(axis=1)
        return normalized[positive]

    @staticmethod
    def _pick_column(frame: pd.DataFrame, field: str) -> Any | None:
        for column in frame.columns:
            key = YFinanceHistorySource._column_key(column)
            if key == field or key.startswith(f"{field}_"):
                return column
        return None

    @staticmethod
    def _column_key(value: Any) -> str:
        if isinstance(value, tuple):
            text = "_".join(str(part) for part in value if part is not None)
        else:
            text = str(value)
        return re.sub(r"[^a-zA-Z0-9]+", "_", text).strip("_").lower()

    @staticmethod
    def _normalize_interval(value: str) -> str:
        mapping = {"15m": "15m", "1h": "60m", "1d": "1d", "1M": "1mo"}
        return mapping.get(value.strip(), "1d")

    @staticmethod
    def _period_for_interval(interval: str) -> str:
        if interval in {"15m", "60m"}:
            return "60d"
        if interval == "1d":
            return "1y"
        return "max"
