"""Polling crypto ticker dashboard."""

__version__ = "0.1.0"
