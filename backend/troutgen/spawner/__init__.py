from troutgen.spawner.cache import Posted, ResolvedUnposted, SpawnCache, Unresolved
from troutgen.spawner.cipher import Cipher
from troutgen.spawner.errors import (
    CipherError,
    LegacyFormatError,
    MissingDependencyError,
    SpawnerError,
    SubmissionError,
    TransientIOError,
)
from troutgen.spawner.ledger import HttpLedger, InMemoryLedger, Ledger, Receipt
from troutgen.spawner.orchestrator import SpawnReport, Spawner
from troutgen.spawner.storage import IpfsStorage, MemoryStorage, Storage

__all__ = [
    "Cipher",
    "CipherError",
    "HttpLedger",
    "InMemoryLedger",
    "IpfsStorage",
    "Ledger",
    "LegacyFormatError",
    "MemoryStorage",
    "MissingDependencyError",
    "Posted",
    "Receipt",
    "ResolvedUnposted",
    "SpawnCache",
    "SpawnReport",
    "Spawner",
    "SpawnerError",
    "Storage",
    "SubmissionError",
    "TransientIOError",
    "Unresolved",
]
