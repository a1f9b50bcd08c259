"""Collect a diagnostic bundle (specs, descriptions, logs) from a px-backup namespace."""

__version__ = "0.1.0"
