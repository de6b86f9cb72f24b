"""Environment and CLI runtime configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Self

from dotenv import load_dotenv

from tickerdash.domain.models import TIMEFRAME_MS
from tickerdash.errors import ConfigError


@dataclass(frozen=True)
class SymbolSpec:
    """Ticker pair and volume field for one tradable symbol."""

    symbol: str
    pair: str
    volume_field: str
    label: str


SYMBOLS: dict[str, SymbolSpec] = {
    "XRP": SymbolSpec("XRP", "xrpidr", "vol_xrp", "XRP - Ripple"),
    "BTC": SymbolSpec("BTC", "btcidr", "vol_btc", "BTC - Bitcoin"),
    "ETH": SymbolSpec("ETH", "ethidr", "vol_eth", "ETH - Ethereum"),
    "BNB": SymbolSpec("BNB", "bnbidr", "vol_bnb", "BNB - Binance Coin"),
    "USDT": SymbolSpec("USDT", "usdtidr", "vol_usdt", "USDT - Tether"),
    "ADA": SymbolSpec("ADA", "adaidr", "vol_ada", "ADA - Cardano"),
}

HISTORY_SOURCES = {"mock", "yfinance"}


def parse_bool(value: str | None, default: bool) -> bool:
    """Parse truthy environment strings."""
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def parse_optional_positive_int(value: str | None, *, field_name: str) -> int | None:
    """Parse optional positive integer values from env strings."""
    if value is None:
        return None
    text = value.strip()
    if not text:
        return None
    parsed = int(text)
    if parsed <= 0:
        raise ValueError(f"{field_name} must be positive")
    return parsed


def normalize_symbol(value: str | None, default: str = "XRP") -> str:
    """Normalize symbol input such as `xrp`, `XRPIDR` or `xrp/idr`."""
    if value is None or not value.strip():
        return default
    compact = value.strip().upper().replace("/", "").replace("-", "")
    if compact.endswith("IDR") and len(compact) > 3:
        compact = compact[:-3]
    return compact


def normalize_timeframe(value: str | None, default: str = "1h") -> str:
    """Normalize timeframe selector values."""
    mapping = {
        "15m": "15m",
        "15min": "15m",
        "1h": "1h",
        "1hour": "1h",
        "60m": "1h",
        "1d": "1d",
        "1day": "1d",
        "day": "1d",
        "1mo": "1M",
        "1month": "1M",
        "month": "1M",
    }
    if value is None or not value.strip():
        return default
    text = value.strip()
    if text == "1M":
        return "1M"
    return mapping.get(text.lower(), text)


def resolve_symbol(symbol: str) -> SymbolSpec:
    """Return the symbol spec or raise for unsupported symbols."""
    spec = SYMBOLS.get(symbol)
    if spec is None:
        supported = ", ".join(SYMBOLS)
        raise ConfigError(f"Unknown symbol '{symbol}'. Supported: {supported}")
    return spec


@dataclass(frozen=True)
class Settings:
    """Immutable runtime settings."""

    symbol: str = "XRP"
    ticker_base_url: str = "https://indodax.com/api/ticker"
    poll_interval_seconds: int = 10
    prediction_interval_seconds: int = 30
    max_polls: int | None = None
    candle_window: int = 20
    point_window: int = 50
    candle_interval_seconds: int = 60
    request_timeout_seconds: int = 10
    ledger_db_path: str = "state/portfolio.db"
    ledger_key: str = "xrp-portfolio"
    events_dir: str = "runs"
    timeframe: str = "1h"
    history_source: str = "mock"
    write_report: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Self:
        """Create settings from environment variables."""
        load_dotenv()
        raw = cls(
            symbol=normalize_symbol(os.getenv("SYMBOL")),
            ticker_base_url=str(
                os.getenv("TICKER_BASE_URL", "https://indodax.com/api/ticker")
            ).strip(),
            poll_interval_seconds=int(os.getenv("POLL_INTERVAL_SECONDS", "10")),
            prediction_interval_seconds=int(os.getenv("PREDICTION_INTERVAL_SECONDS", "30")),
            max_polls=parse_optional_positive_int(
                os.getenv("MAX_POLLS"),
                field_name="max_polls",
            ),
            candle_window=int(os.getenv("CANDLE_WINDOW", "20")),
            point_window=int(os.getenv("POINT_WINDOW", "50")),
            candle_interval_seconds=int(os.getenv("CANDLE_INTERVAL_SECONDS", "60")),
            request_timeout_seconds=int(os.getenv("REQUEST_TIMEOUT_SECONDS", "10")),
            ledger_db_path=str(os.getenv("LEDGER_DB_PATH", "state/portfolio.db")).strip(),
            ledger_key=str(os.getenv("LEDGER_KEY", "xrp-portfolio")).strip(),
            events_dir=str(os.getenv("EVENTS_DIR", "runs")).strip(),
            timeframe=normalize_timeframe(os.getenv("TIMEFRAME")),
            history_source=str(os.getenv("HISTORY_SOURCE", "mock")).strip().lower(),
            write_report=parse_bool(os.getenv("WRITE_REPORT"), True),
            log_level=str(os.getenv("LOG_LEVEL", "INFO")).strip().upper(),
        )
        return raw.validate()

    def with_overrides(self, **kwargs: object) -> Self:
        """Return a new settings object with updated values."""
        overrides = dict(kwargs)
        symbol_override = overrides.get("symbol")
        if isinstance(symbol_override, str):
            overrides["symbol"] = normalize_symbol(symbol_override, default=self.symbol)
        timeframe_override = overrides.get("timeframe")
        if isinstance(timeframe_override, str):
            overrides["timeframe"] = normalize_timeframe(timeframe_override, default=self.timeframe)
        updated = replace(self, **overrides)
        return updated.validate()

    @property
    def symbol_spec(self) -> SymbolSpec:
        return resolve_symbol(self.symbol)

    def ticker_url(self) -> str:
        return f"{self.ticker_base_url.rstrip('/')}/{self.symbol_spec.pair}"

    def validate(self) -> Self:
        """Validate settings fields."""
        resolve_symbol(self.symbol)
        if self.poll_interval_seconds <= 0:
            raise ConfigError("poll_interval_seconds must be positive")
        if self.prediction_interval_seconds <= 0:
            raise ConfigError("prediction_interval_seconds must be positive")
        if self.max_polls is not None and self.max_polls <= 0:
            raise ConfigError("max_polls must be positive")
        if self.candle_window <= 0:
            raise ConfigError("candle_window must be positive")
        if self.point_window <= 0:
            raise ConfigError("point_window must be positive")
        if self.candle_interval_seconds <= 0:
            raise ConfigError("candle_interval_seconds must be positive")
        if self.request_timeout_seconds <= 0:
            raise ConfigError("request_timeout_seconds must be positive")
        if not self.ledger_key:
            raise ConfigError("ledger_key must not be empty")
        if self.timeframe not in TIMEFRAME_MS:
            supported = ", ".join(TIMEFRAME_MS)
            raise ConfigError(f"timeframe must be one of {supported}")
        if self.history_source not in HISTORY_SOURCES:
            raise ConfigError("history_source must be one of mock, yfinance")
        return self
