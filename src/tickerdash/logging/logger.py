"""Concise human-readable dashboard logger."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from tickerdash.domain.models import LedgerEntry, OhlcvRecord, TickerSnapshot
from tickerdash.formatting import format_idr, format_signed_percent, format_time, format_volume
from tickerdash.portfolio.ledger import PortfolioSummary
from tickerdash.prediction import Prediction


class HumanLogger:
    """Console logger with fixed line types."""

    def __init__(self, level: str = "INFO") -> None:
        self._logger = logging.getLogger("tickerdash")
        self._logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        self._logger.propagate = False
        if not self._logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter("%(asctime)s | %(message)s", "%Y-%m-%d %H:%M:%S")
            handler.setFormatter(formatter)
            self._logger.addHandler(handler)

    def run_started(self, run_id: str, symbol: str, interval_seconds: int) -> None:
        self._logger.info(
            "start | %s | run %s | every %ss",
            symbol,
            self._short_id(run_id),
            interval_seconds,
        )

    def ticker(self, snapshot: TickerSnapshot) -> None:
        arrow = "up" if snapshot.is_up else "down"
        self._logger.info(
            "ticker | %s | last %s | high %s | low %s | vol %s | %s",
            snapshot.symbol,
            format_idr(snapshot.last),
            format_idr(snapshot.high),
            format_idr(snapshot.low),
            format_volume(snapshot.volume_base),
            arrow,
        )

    def candle(self, symbol: str, candle: OhlcvRecord) -> None:
        self._logger.info(
            "candle | %s | %s | o %s | h %s | l %s | c %s | %s",
            symbol,
            format_time(candle.timestamp),
            format_idr(candle.open),
            format_idr(candle.high),
            format_idr(candle.low),
            format_idr(candle.close),
            candle.direction.value,
        )

    def portfolio(self, symbol: str, summary: PortfolioSummary) -> None:
        self._logger.info(
            "portfolio | %s %s | invested %s | value %s | pnl %s (%s)",
            self._format_qty(summary.net_quantity),
            symbol,
            format_idr(summary.net_capital),
            format_idr(summary.market_value),
            format_idr(summary.pnl),
            format_signed_percent(summary.pnl_pct),
        )

    def ledger_entry(self, symbol: str, entry: LedgerEntry) -> None:
        self._logger.info(
            "ledger | %s | %s %s | at %s | %s",
            entry.kind.value,
            self._format_qty(entry.quantity),
            symbol,
            format_idr(entry.unit_price),
            entry.timestamp.strftime("%Y-%m-%d %H:%M"),
        )

    def predictions(self, symbol: str, predictions: Sequence[Prediction]) -> None:
        for prediction in predictions:
            self._logger.info(
                "prediction | %s | %s | %s | %s | confidence %.0f%%",
                symbol,
                prediction.horizon,
                format_idr(prediction.price),
                prediction.trend,
                prediction.confidence,
            )

    def report(self, path: str) -> None:
        self._logger.info("report | %s", path)

    def error(self, message: str) -> None:
        self._logger.error("error | %s", message)

    @staticmethod
    def _short_id(value: str | None, head: int = 10) -> str:
        if not value:
            return ""
        return str(value)[:head]

    @staticmethod
    def _format_qty(value: float, precision: int = 8) -> str:
        normalized = 0.0 if abs(float(value)) < 1e-9 else float(value)
        text = f"{normalized:.{max(0, precision)}f}".rstrip("0").rstrip(".")
        if text in {"", "-", "-0"}:
            return "0"
        return text
