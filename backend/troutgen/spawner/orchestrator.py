"""Keep the ledger's items in sync with generated artifacts.

One pass discovers the items whose artifacts are missing or stale, resolves
their parents, computes and stores a fresh artifact for each and commits the
results to the ledger in ascending batches. Everything a pass learns goes
into the cache, so a later pass resumes where a failed one stopped.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import asdict, dataclass, field
from typing import Any, TypeVar

from pydantic import ValidationError

from troutgen.config import Settings
from troutgen.genetics.model import Genotype, Organism, as_genotype, breed, spawn, with_trait
from troutgen.genetics.rules import GeneticsConfigError
from troutgen.render import OverlayOptions, render
from troutgen.spawner.cache import Posted, ResolvedUnposted, SpawnCache, Unresolved
from troutgen.spawner.cipher import Cipher
from troutgen.spawner.descriptor import (
    CURRENT_FORMAT_VERSION,
    ArtifactDescriptor,
    ArtifactDocument,
    Attributes,
    OrganismId,
    format_version_of,
)
from troutgen.spawner.errors import (
    LegacyFormatError,
    MissingDependencyError,
    SpawnerError,
    SubmissionError,
)
from troutgen.spawner.ledger import EMPTY_URI, HttpLedger, Ledger
from troutgen.spawner.naming import describe, organism_name
from troutgen.spawner.retry import retry
from troutgen.spawner.storage import IpfsStorage, Storage
from troutgen.utils.canonical import canonical_json

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_SEED = 2**32


def cid_from_uri(uri: str) -> str | None:
    """Content id behind an ``ipfs://`` URI; None for an empty or placeholder URI."""
    if not uri or uri == EMPTY_URI:
        return None
    return uri.removeprefix(EMPTY_URI)


@dataclass
class SpawnReport:
    discovered: list[int] = field(default_factory=list)
    computed: list[int] = field(default_factory=list)
    reused: list[int] = field(default_factory=list)
    batches: list[list[int]] = field(default_factory=list)
    posted: list[int] = field(default_factory=list)
    failure: str | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    def to_dict(self) -> dict[str, Any]:
        return {**asdict(self), "ok": self.ok}


class Spawner:
    def __init__(
        self,
        ledger: Ledger,
        storage: Storage,
        cipher: Cipher,
        settings: Settings,
        cache: SpawnCache | None = None,
    ) -> None:
        self.ledger = ledger
        self.storage = storage
        self.cipher = cipher
        self.settings = settings
        self.cache = cache if cache is not None else SpawnCache()

    @classmethod
    def from_settings(cls, settings: Settings) -> Spawner:
        """Wire up the HTTP ledger, IPFS storage and cipher named by ``settings``."""
        if not settings.ledger_url or not settings.ipfs_api_url:
            raise ValueError("ledger_url and ipfs_api_url must both be configured")
        cache = SpawnCache.load(settings.cache_checkpoint_path) if settings.cache_checkpoint_path else None
        return cls(
            HttpLedger(settings.ledger_url, settings.http_timeout_seconds),
            IpfsStorage(settings.ipfs_api_url, settings.http_timeout_seconds),
            Cipher.from_hex(settings.root_secret_hex, settings.encryption_key_id),
            settings,
            cache,
        )

    @property
    def network(self) -> int:
        return self.settings.network_id

    async def _retry(self, func: Callable[[], Awaitable[T]], operation_name: str) -> T:
        return await retry(
            func,
            attempts=self.settings.retry_attempts,
            delay=self.settings.retry_delay_seconds,
            operation_name=operation_name,
        )

    # -- Pass ----------------------------------------------------------------

    async def run(self) -> SpawnReport:
        report = SpawnReport()
        try:
            report.discovered = await self.discover()
        except SpawnerError as e:
            logger.error("Discovery failed: %s", e)
            report.failure = f"discovery: {type(e).__name__}: {e}"
            return report
        if not report.discovered:
            logger.info("Nothing to spawn")
            return report

        size = max(1, self.settings.batch_size)
        for start in range(0, len(report.discovered), size):
            chunk = report.discovered[start:start + size]
            try:
                results = await self._resolve_batch(chunk, report)
                if results is None:
                    return report
                if not await self._submit(results, report):
                    return report
            finally:
                self._checkpoint()
        logger.info(
            "Spawn pass done: %d computed, %d reused, %d posted",
            len(report.computed), len(report.reused), len(report.posted),
        )
        return report

    async def _resolve_batch(self, chunk: list[int], report: SpawnReport) -> list[tuple[int, str]] | None:
        results = []
        for item in chunk:
            started = time.perf_counter()
            try:
                cid, reused = await self.resolve_item(item)
            except (SpawnerError, ValueError) as e:
                logger.exception("Failed to spawn item %d", item)
                report.failure = f"item {item}: {type(e).__name__}: {e}"
                return None
            (report.reused if reused else report.computed).append(item)
            results.append((item, cid))
            logger.info(
                "Item %d %s as %s in %.1fms",
                item, "reused" if reused else "computed", cid, (time.perf_counter() - started) * 1000,
            )
        return results

    async def _submit(self, results: list[tuple[int, str]], report: SpawnReport) -> bool:
        results = sorted(results)
        ids = [item for item, _ in results]
        encoded_cids = canonical_json([cid for _, cid in results])
        opts = {} if self.settings.submit_gas_limit is None else {"gasLimit": self.settings.submit_gas_limit}
        try:
            receipt = await self.ledger.submit_results(ids, b"", encoded_cids, opts)
            if receipt.status != 1:
                raise SubmissionError(f"Ledger did not accept items {ids} (status {receipt.status})")
        except SpawnerError as e:
            logger.error("Failed to post results for items %s: %s", ids, e)
            report.failure = f"submission of {ids}: {e}"
            return False
        for item in ids:
            self.cache.mark_posted(item)
        report.batches.append(ids)
        report.posted.extend(ids)
        logger.info("Posted %d results (%d..%d) in %s", len(ids), ids[0], ids[-1], receipt.tx_hash or "-")
        return True

    def _checkpoint(self) -> None:
        if self.settings.cache_checkpoint_path:
            self.cache.save(self.settings.cache_checkpoint_path)

    # -- Discovery -----------------------------------------------------------

    async def discover(self) -> list[int]:
        """Ids whose artifacts need (re)spawning, ascending."""
        total = await self._retry(self.ledger.total_supply, "total supply")
        if total <= 0:
            return []
        if total > self.settings.linear_scan_threshold:
            frontier = await self.find_frontier(total)
            logger.info("Frontier at %d of %d items", frontier, total)
            return list(range(frontier, total + 1))

        stale = await asyncio.gather(*(self.probe(item) for item in range(1, total + 1)))
        tasks = [item for item, s in zip(range(1, total + 1), stale) if s]
        logger.info("Found %d of %d items needing spawn", len(tasks), total)
        return tasks

    async def find_frontier(self, total: int) -> int:
        """First stale id, assuming every item before it is current."""
        lo, hi = 1, total + 1
        while lo < hi:
            mid = lo + (hi - lo) // 2
            if await self.probe(mid):
                hi = mid
            else:
                lo = mid + 1
        return lo

    async def probe(self, item: int) -> bool:
        """True when ``item`` has no artifact or one in an older format."""
        uri = await self._retry(lambda: self.ledger.artifact_uri(item), f"uri of item {item}")
        cid = cid_from_uri(uri)
        cached = self.cache.get(item)

        if cid is not None and isinstance(cached, (ResolvedUnposted, Posted)) and cached.content_id == cid:
            self.cache.set(item, Posted(cid, cached.descriptor, cached.organism))
            return False

        properties = None
        if cid is not None:
            properties = await self._read_artifact(item, cid)
            if format_version_of(properties) == CURRENT_FORMAT_VERSION:
                try:
                    self.cache.set(item, Posted(cid, ArtifactDescriptor.model_validate(properties)))
                    return False
                except ValidationError as e:
                    logger.info("Item %d has a malformed descriptor: %s", item, e)

        if not isinstance(cached, ResolvedUnposted):
            self.cache.set(item, Unresolved(cid, properties))
        return True

    async def _fetch_properties(self, cid: str) -> dict[str, Any]:
        raw = await self._retry(lambda: self.storage.fetch(cid), f"fetch of {cid}")
        try:
            document = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise LegacyFormatError(f"Artifact {cid} is not JSON: {e}") from e
        if not isinstance(document, dict) or not isinstance(document.get("properties"), dict):
            raise LegacyFormatError(f"Artifact {cid} has no properties")
        return document["properties"]

    async def _read_artifact(self, item: int, cid: str) -> dict[str, Any] | None:
        """Properties of an item's stored artifact; None when it is gone or does not decode."""
        try:
            return await self._fetch_properties(cid)
        except (LegacyFormatError, MissingDependencyError) as e:
            logger.info("Item %d has an unreadable artifact: %s", item, e)
            return None

    async def _previous_artifact(self, item: int) -> Unresolved:
        """The artifact the ledger points at now, which the next one supersedes."""
        uri = await self._retry(lambda: self.ledger.artifact_uri(item), f"uri of item {item}")
        cid = cid_from_uri(uri)
        if cid is None:
            return Unresolved()
        return Unresolved(cid, await self._read_artifact(item, cid))

    # -- Resolution ----------------------------------------------------------

    async def resolve_item(self, item: int) -> tuple[str, bool]:
        """Content id of a current artifact for ``item``, and whether it was reused."""
        entry = self.cache.get(item)
        if entry is None:
            await self.probe(item)
            entry = self.cache.get(item)
        if isinstance(entry, (ResolvedUnposted, Posted)) and await self._reusable(item, entry):
            if isinstance(entry, Posted):
                self.cache.set(item, ResolvedUnposted(entry.content_id, entry.descriptor, entry.organism))
            return entry.content_id, True

        previous = entry if isinstance(entry, Unresolved) else await self._previous_artifact(item)
        left_id, right_id = await self._retry(lambda: self.ledger.parents(item), f"parents of item {item}")
        if (left_id == 0) != (right_id == 0):
            raise MissingDependencyError(f"Item {item} declares only one parent ({left_id}, {right_id})")

        parents = None
        if left_id:
            parents = await asyncio.gather(self.resolve_parent(left_id), self.resolve_parent(right_id))

        seed = self.entropy_seed(item)
        attributes = self.attributes_for(item, root=parents is None)
        organism, svg = await asyncio.to_thread(self._compute, parents, seed, attributes)

        payload = canonical_json({"seed": seed, **organism.to_dict()})
        descriptor = ArtifactDescriptor(
            left=parents[0][0] if parents else None,
            right=parents[1][0] if parents else None,
            self_id=OrganismId(chain_id=self.network, token_id=item),
            attributes=attributes,
            encrypted_traits=self.cipher.encrypt(payload, {"tokenId": item}),
            generations=previous.history,
            format_version=CURRENT_FORMAT_VERSION,
        )
        cid = await self._store(descriptor, svg)
        self.cache.set(item, ResolvedUnposted(cid, descriptor, organism))
        return cid, False

    async def _reusable(self, item: int, entry: ResolvedUnposted | Posted) -> bool:
        """Whether a cached result can go into a batch without recomputing it.

        Results from this pass carry their organism; checkpoint hints are
        checked against storage first.
        """
        if entry.organism is not None:
            return True
        try:
            properties = await self._fetch_properties(entry.content_id)
        except SpawnerError as e:
            logger.info("Cached result for item %d is not retrievable: %s", item, e)
            return False
        if format_version_of(properties) != CURRENT_FORMAT_VERSION:
            return False
        return (properties.get("self") or {}).get("tokenId") == item

    async def resolve_parent(self, item: int) -> tuple[OrganismId, Genotype]:
        entry = self.cache.get(item)
        if isinstance(entry, (ResolvedUnposted, Posted)) and entry.organism is not None:
            return entry.descriptor.self_id, entry.organism.genotype

        cid = self.cache.content_id(item)
        if cid is None:
            uri = await self._retry(lambda: self.ledger.artifact_uri(item), f"uri of item {item}")
            cid = cid_from_uri(uri)
        if cid is None:
            raise MissingDependencyError(f"Parent item {item} has no artifact")

        if isinstance(entry, (ResolvedUnposted, Posted)) and entry.content_id == cid:
            descriptor = entry.descriptor
        else:
            properties = await self._fetch_properties(cid)
            if format_version_of(properties) != CURRENT_FORMAT_VERSION:
                raise LegacyFormatError(f"Parent item {item} has a format {format_version_of(properties)} artifact")
            try:
                descriptor = ArtifactDescriptor.model_validate(properties)
            except ValidationError as e:
                raise LegacyFormatError(f"Parent item {item} has a malformed descriptor") from e

        plaintext = self.cipher.decrypt(descriptor.encrypted_traits, {"tokenId": item})
        try:
            genotype = as_genotype(json.loads(plaintext.decode("utf-8"))["genotype"])
        except (UnicodeDecodeError, json.JSONDecodeError, KeyError, TypeError, GeneticsConfigError) as e:
            raise LegacyFormatError(f"Parent item {item} has undecodable traits: {e}") from e
        return descriptor.self_id, genotype

    # -- Computation ---------------------------------------------------------

    def entropy_seed(self, item: int) -> int:
        material = self.cipher.derive_key(f"troutgen/entropy/{self.network}/{item}")
        return int.from_bytes(material, "little") % MAX_SEED

    def attributes_for(self, item: int, root: bool) -> Attributes:
        s = self.settings
        return Attributes(
            genesis=root and item <= s.genesis_cutoff,
            seasonal=self.network == s.seasonal_network and s.seasonal_first <= item <= s.seasonal_last,
        )

    @staticmethod
    def _compute(
        parents: list[tuple[OrganismId, Genotype]] | None, seed: int, attributes: Attributes
    ) -> tuple[Organism, str]:
        if parents is None:
            organism = spawn(seed)
            if attributes.genesis:
                organism = with_trait(organism, "color", "rainbow")
        else:
            organism = breed(parents[0][1], parents[1][1], seed)
        svg = render(organism.phenotype, OverlayOptions(seasonal=bool(attributes.seasonal)), seed)
        return organism, svg

    async def _store(self, descriptor: ArtifactDescriptor, svg: str) -> str:
        names = self.settings.network_names
        image_cid = await self._retry(lambda: self.storage.store(svg.encode("utf-8")), "image store")
        document = ArtifactDocument(
            name=organism_name(descriptor.self_id, names),
            description=describe(descriptor, names),
            image=f"ipfs://{image_cid}",
            properties=descriptor,
        )
        blob = canonical_json(document.model_dump(by_alias=True, mode="json"))
        return await self._retry(lambda: self.storage.store(blob), "metadata store")
