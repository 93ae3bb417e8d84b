"""Offline-first reminder manager: local mirror, sync engine and record store."""

__version__ = "0.1.0"
