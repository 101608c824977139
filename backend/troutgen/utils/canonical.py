"""Canonical JSON encoding shared by digests, content ids and cipher bindings. No engine imports."""

from __future__ import annotations

import hashlib
import json
from typing import Any


def canonical_json(obj: Any) -> bytes:
    """Sorted keys, no whitespace, UTF-8."""
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def digest_seed(obj: Any) -> int:
    """32-bit seed from the SHA-256 of ``obj``'s canonical encoding."""
    return int.from_bytes(hashlib.sha256(canonical_json(obj)).digest()[:4], "little")
