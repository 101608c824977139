"""Failure taxonomy for the orchestrator and its collaborators."""

from __future__ import annotations


class SpawnerError(Exception):
    """Base class for orchestration failures."""


class TransientIOError(SpawnerError):
    """A collaborator call failed in a way that may succeed on retry."""


class MissingDependencyError(SpawnerError):
    """A parent artifact is absent, or only one parent is declared."""


class LegacyFormatError(SpawnerError):
    """A stored artifact predates the current schema or does not decode."""


class SubmissionError(SpawnerError):
    """The ledger rejected or failed to confirm a batch of results."""


class CipherError(SpawnerError):
    """Decryption failed: wrong binding, tampered box or unknown key id."""
