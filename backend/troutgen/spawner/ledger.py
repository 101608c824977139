"""The ledger collaborator: item supply, parentage, artifact URIs and result submission."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

import httpx

from troutgen.spawner.errors import MissingDependencyError, SubmissionError, TransientIOError

logger = logging.getLogger(__name__)

EMPTY_URI = "ipfs://"


@dataclass(frozen=True)
class Receipt:
    status: int
    tx_hash: str = ""


class Ledger(Protocol):
    async def total_supply(self) -> int: ...

    async def parents(self, item: int) -> tuple[int, int]: ...

    async def artifact_uri(self, item: int) -> str: ...

    async def submit_results(
        self, ids: list[int], aux: bytes, encoded_cids: bytes, opts: dict[str, Any]
    ) -> Receipt: ...


@dataclass
class InMemoryLedger:
    """Ledger held in memory for development and tests.

    Items are numbered from 1. A root has parents ``(0, 0)``. Accepted
    results must cover strictly ascending ids; ``fail_submissions`` makes
    every submission return a failed receipt.
    """

    parentage: dict[int, tuple[int, int]] = field(default_factory=dict)
    uris: dict[int, str] = field(default_factory=dict)
    fail_submissions: bool = False
    submissions: list[list[int]] = field(default_factory=list)
    reads: int = 0

    def add_item(self, left: int = 0, right: int = 0, uri: str = EMPTY_URI) -> int:
        item = len(self.parentage) + 1
        self.parentage[item] = (left, right)
        self.uris[item] = uri
        return item

    def _check(self, item: int) -> None:
        if item not in self.parentage:
            raise MissingDependencyError(f"No such item: {item}")

    async def total_supply(self) -> int:
        self.reads += 1
        return len(self.parentage)

    async def parents(self, item: int) -> tuple[int, int]:
        self.reads += 1
        self._check(item)
        return self.parentage[item]

    async def artifact_uri(self, item: int) -> str:
        self.reads += 1
        self._check(item)
        return self.uris[item]

    async def submit_results(
        self, ids: list[int], aux: bytes, encoded_cids: bytes, opts: dict[str, Any]
    ) -> Receipt:
        if self.fail_submissions:
            return Receipt(status=0)
        cids = json.loads(encoded_cids.decode("utf-8"))
        if len(cids) != len(ids):
            raise SubmissionError(f"Got {len(ids)} ids but {len(cids)} content ids")
        if any(b <= a for a, b in zip(ids, ids[1:])):
            raise SubmissionError(f"Result ids must be strictly ascending: {ids}")
        for item, cid in zip(ids, cids):
            self._check(item)
            self.uris[item] = f"ipfs://{cid}"
        self.submissions.append(list(ids))
        return Receipt(status=1, tx_hash=f"0x{len(self.submissions):064x}")


class HttpLedger:
    """Client for a ledger gateway speaking JSON over HTTP."""

    def __init__(self, base_url: str, timeout: float = 30.0, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self._transport) as client:
                response = await client.request(method, path, **kwargs)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPError as e:
            raise TransientIOError(f"{method} {path} failed: {e}") from e

    async def total_supply(self) -> int:
        data = await self._request("GET", "/supply")
        return int(data["totalSupply"])

    async def parents(self, item: int) -> tuple[int, int]:
        data = await self._request("GET", f"/items/{item}/parents")
        return int(data["left"]), int(data["right"])

    async def artifact_uri(self, item: int) -> str:
        data = await self._request("GET", f"/items/{item}/uri")
        return str(data["uri"])

    async def submit_results(
        self, ids: list[int], aux: bytes, encoded_cids: bytes, opts: dict[str, Any]
    ) -> Receipt:
        payload = {"ids": ids, "aux": aux.hex(), "encodedCids": encoded_cids.hex(), "opts": opts}
        data = await self._request("POST", "/results", json=payload)
        return Receipt(status=int(data.get("status", 0)), tx_hash=str(data.get("txHash", "")))
