"""Procedural fish organisms: genetics, rendering and ledger sync."""

__version__ = "0.1.0"
