"""Per-run lookup cache of item state, with an optional JSON checkpoint.

Each item is in exactly one state:

- ``Unresolved``: the stored artifact is absent or stale.
- ``ResolvedUnposted``: a fresh artifact is stored but not yet on the ledger.
- ``Posted``: the ledger points at a current artifact.

The checkpoint only seeds hints for the next run; entries read back from it
carry no organism and are re-checked against storage before reuse.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Union

from pydantic import ValidationError

from troutgen.genetics.model import Organism
from troutgen.spawner.descriptor import ArtifactDescriptor

logger = logging.getLogger(__name__)

CHECKPOINT_VERSION = 1


@dataclass(frozen=True)
class Unresolved:
    previous_cid: str | None = None
    previous: dict[str, Any] | None = None

    @property
    def history(self) -> list[str]:
        """Generations for the next artifact: the old history plus the old content id."""
        if self.previous_cid is None:
            return []
        generations = (self.previous or {}).get("generations") or []
        return [str(g) for g in generations] + [self.previous_cid]


@dataclass(frozen=True)
class ResolvedUnposted:
    content_id: str
    descriptor: ArtifactDescriptor
    organism: Organism | None = None


@dataclass(frozen=True)
class Posted:
    content_id: str
    descriptor: ArtifactDescriptor
    organism: Organism | None = None


CacheEntry = Union[Unresolved, ResolvedUnposted, Posted]

_TAGS = {ResolvedUnposted: "resolved_unposted", Posted: "posted"}


@dataclass
class SpawnCache:
    entries: dict[int, CacheEntry] = field(default_factory=dict)

    def get(self, item: int) -> CacheEntry | None:
        return self.entries.get(item)

    def set(self, item: int, entry: CacheEntry) -> None:
        self.entries[item] = entry

    def content_id(self, item: int) -> str | None:
        entry = self.entries.get(item)
        if isinstance(entry, (ResolvedUnposted, Posted)):
            return entry.content_id
        if isinstance(entry, Unresolved):
            return entry.previous_cid
        return None

    def mark_posted(self, item: int) -> None:
        entry = self.entries.get(item)
        if not isinstance(entry, ResolvedUnposted):
            raise KeyError(f"Item {item} has no unposted result")
        self.entries[item] = Posted(entry.content_id, entry.descriptor, entry.organism)

    def unposted(self) -> list[int]:
        return sorted(i for i, e in self.entries.items() if isinstance(e, ResolvedUnposted))

    def __len__(self) -> int:
        return len(self.entries)

    # -- Checkpoint ----------------------------------------------------------

    def to_json(self) -> dict[str, Any]:
        entries = {}
        for item, entry in sorted(self.entries.items()):
            tag = _TAGS.get(type(entry))
            if tag is None:
                continue
            entries[str(item)] = {
                "state": tag,
                "cid": entry.content_id,
                "descriptor": entry.descriptor.to_json(),
            }
        return {"version": CHECKPOINT_VERSION, "entries": entries}

    def save(self, path: str | os.PathLike[str]) -> None:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        tmp = target.with_suffix(target.suffix + ".tmp")
        tmp.write_text(json.dumps(self.to_json(), indent=2), encoding="utf-8")
        tmp.replace(target)

    @classmethod
    def load(cls, path: str | os.PathLike[str]) -> SpawnCache:
        """Read a checkpoint; a missing or unreadable file gives an empty cache."""
        source = Path(path)
        if not source.exists():
            return cls()
        try:
            data = json.loads(source.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable cache checkpoint %s: %s", source, e)
            return cls()
        if not isinstance(data, dict) or data.get("version") != CHECKPOINT_VERSION:
            logger.warning("Ignoring cache checkpoint %s with unknown version", source)
            return cls()

        cache = cls()
        for key, raw in (data.get("entries") or {}).items():
            try:
                descriptor = ArtifactDescriptor.model_validate(raw["descriptor"])
                entry_type = ResolvedUnposted if raw["state"] == "resolved_unposted" else Posted
                cache.set(int(key), entry_type(str(raw["cid"]), descriptor))
            except (KeyError, TypeError, ValueError, ValidationError) as e:
                logger.warning("Skipping checkpoint entry %s: %s", key, e)
        logger.info("Loaded %d cache hints from %s", len(cache), source)
        return cache
