"""Logging helpers."""

from .event_sink import DashboardEvent, JsonlEventSink, load_events
from .logger import HumanLogger

__all__ = ["DashboardEvent", "HumanLogger", "JsonlEventSink", "load_events"]
