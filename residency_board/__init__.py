"""Residency Board: residency listings synced from an external source."""

__version__ = "0.1.0"
