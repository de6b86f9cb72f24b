"""Custom exceptions for clearer error handling across the dashboard."""


class TickerDashError(Exception):
    """Base exception for all dashboard errors."""


class ConfigError(TickerDashError, ValueError):
    """Raised when environment or CLI configuration is invalid."""


class DataSourceError(TickerDashError):
    """Raised when ticker or history retrieval fails."""


class LedgerError(TickerDashError, ValueError):
    """Raised when a ledger mutation or stored ledger is invalid."""
