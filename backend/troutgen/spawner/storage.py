"""Content-addressed blob storage."""

from __future__ import annotations

import base64
import hashlib
from typing import Protocol

import httpx

from troutgen.spawner.errors import MissingDependencyError, TransientIOError


class Storage(Protocol):
    async def store(self, blob: bytes) -> str: ...

    async def fetch(self, cid: str) -> bytes: ...


def memory_cid(blob: bytes) -> str:
    """``b`` followed by the lowercase unpadded base32 of the blob's SHA-256."""
    digest = hashlib.sha256(blob).digest()
    return "b" + base64.b32encode(digest).decode("ascii").rstrip("=").lower()


class MemoryStorage:
    def __init__(self) -> None:
        self.blobs: dict[str, bytes] = {}

    async def store(self, blob: bytes) -> str:
        cid = memory_cid(blob)
        self.blobs[cid] = blob
        return cid

    async def fetch(self, cid: str) -> bytes:
        try:
            return self.blobs[cid]
        except KeyError:
            raise MissingDependencyError(f"Content {cid} not found") from None


class IpfsStorage:
    """Storage through a Kubo node's RPC API."""

    def __init__(self, api_url: str, timeout: float = 30.0, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def store(self, blob: bytes) -> str:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    f"{self.api_url}/api/v0/add",
                    params={"cid-version": 1, "pin": "true"},
                    files={"file": ("blob", blob)},
                )
                response.raise_for_status()
                return str(response.json()["Hash"])
        except httpx.HTTPError as e:
            raise TransientIOError(f"IPFS add failed: {e}") from e

    async def fetch(self, cid: str) -> bytes:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(f"{self.api_url}/api/v0/cat", params={"arg": cid})
                response.raise_for_status()
                return response.content
        except httpx.HTTPError as e:
            raise TransientIOError(f"IPFS cat {cid} failed: {e}") from e
