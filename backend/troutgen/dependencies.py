"""FastAPI dependency injection."""

from __future__ import annotations

from troutgen.config import Settings, settings
from troutgen.genetics.table import TraitTable, get_table


def get_settings() -> Settings:
    return settings


def get_trait_table() -> TraitTable:
    return get_table()
