"""Shared test fixtures."""

from __future__ import annotations

import pytest

from troutgen.config import Settings
from troutgen.genetics.model import Organism, spawn
from troutgen.spawner.cipher import Cipher

ROOT_SECRET = bytes(range(32))

# Unit squares and a concave notch used across the kernel tests
SQUARE = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)]
SHIFTED_SQUARE = [(5.0, 5.0), (15.0, 5.0), (15.0, 15.0), (5.0, 15.0)]
FAR_SQUARE = [(100.0, 100.0), (110.0, 100.0), (110.0, 110.0), (100.0, 110.0)]
NOTCHED = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (5.0, 5.0), (0.0, 10.0)]


def make_settings(**overrides) -> Settings:
    """Settings for orchestrator tests: no retry pauses, no checkpoint."""
    values = {
        "network_id": 0x5AFF,
        "retry_attempts": 3,
        "retry_delay_seconds": 0.0,
        "batch_size": 30,
        "linear_scan_threshold": 64,
        "cache_checkpoint_path": None,
        "submit_gas_limit": None,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def cipher() -> Cipher:
    return Cipher(ROOT_SECRET)


@pytest.fixture(scope="session")
def root_organism() -> Organism:
    return spawn(7)


@pytest.fixture(scope="session")
def other_root() -> Organism:
    return spawn(8)
