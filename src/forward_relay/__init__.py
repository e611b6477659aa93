"""Relay for hub forward action events."""

__version__ = "0.1.0"
