"""Shed Load Overseas courier portal."""

__version__ = "0.1.0"
