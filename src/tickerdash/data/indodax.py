"""INDODAX public ticker client."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from time import sleep
from typing import Any

import requests

from tickerdash.config import SymbolSpec
from tickerdash.domain.models import TickerSnapshot
from tickerdash.errors import DataSourceError
from tickerdash.formatting import as_float

logger = logging.getLogger(__name__)


class IndodaxTickerClient:
    """Fetch ticker snapshots from `<base_url>/<pair>`."""

    def __init__(
        self,
        base_url: str = "https://indodax.com/api/ticker",
        timeout: int = 10,
        max_retries: int = 1,
        session: requests.Session | None = None,
    ) -> None:
        if max_retries <= 0:
            raise ValueError("max_retries must be positive")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    def fetch(self, spec: SymbolSpec) -> TickerSnapshot:
        payload = self._request_with_retry(f"{self.base_url}/{spec.pair}")
        return parse_ticker(payload, spec)

    def _request_with_retry(self, url: str) -> Mapping[str, Any]:
        for attempt in range(1, self.max_retries + 1):
            try:
                response = self.session.get(url, timeout=self.timeout)
            except requests.RequestException as exc:
                if attempt == self.max_retries:
                    raise DataSourceError(f"Ticker request failed: {exc}") from exc
                sleep(float(attempt))
                continue
            if response.status_code == 429 or response.status_code >= 500:
                if attempt == self.max_retries:
                    raise DataSourceError(f"Ticker server error: {response.status_code}")
                sleep(float(attempt))
                continue
            if response.status_code >= 400:
                detail = response.text.strip() or "No response body"
                raise DataSourceError(f"Ticker error {response.status_code}: {detail}")
            try:
                payload = response.json()
            except ValueError as exc:
                raise DataSourceError("Ticker response is not valid JSON") from exc
            if not isinstance(payload, Mapping):
                raise DataSourceError("Ticker response is not a JSON object")
            return payload
        raise DataSourceError("Ticker request exhausted retries")


def parse_ticker(payload: Mapping[str, Any], spec: SymbolSpec) -> TickerSnapshot:
    """Map a raw `{"ticker": {...}}` payload onto a snapshot.

    Numeric fields arrive as strings; missing or malformed values become 0.
    """
    ticker = payload.get("ticker")
    if not isinstance(ticker, Mapping):
        raise DataSourceError(f"{spec.pair}: payload missing ticker object")
    if ticker.get(spec.volume_field) is None:
        logger.debug("%s: ticker has no %s field", spec.pair, spec.volume_field)
    server_time = as_float(ticker.get("server_time"))
    return TickerSnapshot(
        symbol=spec.symbol,
        last=_number(ticker, "last"),
        high=_number(ticker, "high"),
        low=_number(ticker, "low"),
        buy=_number(ticker, "buy"),
        sell=_number(ticker, "sell"),
        volume_base=_number(ticker, spec.volume_field),
        volume_quote=_number(ticker, "vol_idr"),
        server_time=int(server_time) if server_time is not None else 0,
    )


def _number(ticker: Mapping[str, Any], key: str) -> float:
    value = as_float(ticker.get(key))
    return 0.0 if value is None else value
