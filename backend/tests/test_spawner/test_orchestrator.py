"""Tests for the spawn orchestrator against in-memory collaborators."""

import asyncio
import json

import pytest

from troutgen.genetics.model import as_genotype, spawn
from troutgen.spawner import (
    InMemoryLedger,
    MemoryStorage,
    MissingDependencyError,
    ResolvedUnposted,
    SpawnCache,
    Spawner,
    SpawnReport,
)
from troutgen.spawner.cache import Posted
from troutgen.spawner.descriptor import ArtifactDescriptor, ArtifactDocument, OrganismId
from troutgen.spawner.errors import CipherError, TransientIOError
from troutgen.spawner.ledger import EMPTY_URI
from troutgen.spawner.orchestrator import cid_from_uri
from troutgen.utils.canonical import canonical_json
from tests.conftest import make_settings


def _publish(ledger, storage, cipher, item, organism=None):
    """Store a current artifact for ``item`` and point the ledger at it."""
    organism = organism or spawn(item)
    descriptor = ArtifactDescriptor(
        self_id=OrganismId(chain_id=0x5AFF, token_id=item),
        encrypted_traits=cipher.encrypt(canonical_json(organism.to_dict()), {"tokenId": item}),
    )
    document = ArtifactDocument(name="n", description="d", image="ipfs://bimage", properties=descriptor)
    cid = asyncio.run(storage.store(canonical_json(document.model_dump(by_alias=True, mode="json"))))
    ledger.uris[item] = f"ipfs://{cid}"
    return cid


def _document(storage, ledger, item):
    cid = cid_from_uri(ledger.uris[item])
    return json.loads(storage.blobs[cid])


def _ledger(n):
    ledger = InMemoryLedger()
    for _ in range(n):
        ledger.add_item()
    return ledger


class FlakyStorage(MemoryStorage):
    """Passes ``healthy_stores`` stores, then fails ``failures`` of them (None: all)."""

    def __init__(self, healthy_stores=0, failures=None):
        super().__init__()
        self.healthy_stores = healthy_stores
        self.failures = failures
        self.failed = 0

    async def store(self, blob):
        if self.healthy_stores > 0:
            self.healthy_stores -= 1
        elif self.failures is None or self.failed < self.failures:
            self.failed += 1
            raise TransientIOError("storage unavailable")
        return await super().store(blob)


class UnreachableLedger(InMemoryLedger):
    async def total_supply(self):
        self.reads += 1
        raise TransientIOError("ledger unreachable")


def test_cid_from_uri():
    assert cid_from_uri("ipfs://") is None
    assert cid_from_uri("") is None
    assert cid_from_uri("ipfs://bafy") == "bafy"


@pytest.mark.parametrize("threshold", [64, 5])
def test_discovers_frontier(cipher, threshold):
    ledger = _ledger(10)
    storage = MemoryStorage()
    for item in range(1, 7):
        _publish(ledger, storage, cipher, item)
    spawner = Spawner(ledger, storage, cipher, make_settings(linear_scan_threshold=threshold))
    assert asyncio.run(spawner.discover()) == [7, 8, 9, 10]
    assert isinstance(spawner.cache.get(6), Posted)


def test_binary_search_reads_fewer_items(cipher):
    reads = {}
    for threshold in (64, 5):
        ledger = _ledger(10)
        storage = MemoryStorage()
        for item in range(1, 7):
            _publish(ledger, storage, cipher, item)
        spawner = Spawner(ledger, storage, cipher, make_settings(linear_scan_threshold=threshold))
        asyncio.run(spawner.discover())
        reads[threshold] = ledger.reads
    assert reads[5] < reads[64]


def test_empty_ledger_has_nothing_to_do(cipher):
    spawner = Spawner(InMemoryLedger(), MemoryStorage(), cipher, make_settings())
    report = asyncio.run(spawner.run())
    assert report.ok
    assert report.discovered == []


def test_submission_sorts_ids(cipher):
    ledger = _ledger(9)
    spawner = Spawner(ledger, MemoryStorage(), cipher, make_settings())
    results = []
    for item in (7, 3, 9, 1):
        descriptor = ArtifactDescriptor(
            self_id=OrganismId(chain_id=0x5AFF, token_id=item),
            encrypted_traits=cipher.encrypt(b"{}", {"tokenId": item}),
        )
        spawner.cache.set(item, ResolvedUnposted(f"b{item}", descriptor))
        results.append((item, f"b{item}"))

    report = SpawnReport()
    assert asyncio.run(spawner._submit(results, report))
    assert ledger.submissions == [[1, 3, 7, 9]]
    assert ledger.uris[3] == "ipfs://b3"
    assert report.batches == [[1, 3, 7, 9]]
    assert all(isinstance(spawner.cache.get(i), Posted) for i in (1, 3, 7, 9))


def test_cached_results_are_reused_in_ascending_batches(cipher):
    ledger = _ledger(9)
    storage = MemoryStorage()
    spawner = Spawner(ledger, storage, cipher, make_settings(batch_size=3))
    for item in range(1, 10):
        if item in (1, 3, 7, 9):
            organism = spawn(item)
            descriptor = ArtifactDescriptor(
                self_id=OrganismId(chain_id=0x5AFF, token_id=item),
                encrypted_traits=cipher.encrypt(b"{}", {"tokenId": item}),
            )
            spawner.cache.set(item, ResolvedUnposted(f"b{item}", descriptor, organism))
        else:
            _publish(ledger, storage, cipher, item)

    report = asyncio.run(spawner.run())
    assert report.ok
    assert report.discovered == [1, 3, 7, 9]
    assert report.reused == [1, 3, 7, 9]
    assert report.computed == []
    assert ledger.submissions == [[1, 3, 7], [9]]


def test_half_declared_parents_fail(cipher):
    ledger = InMemoryLedger()
    ledger.add_item()
    ledger.add_item(left=1, right=0)
    storage = MemoryStorage()
    _publish(ledger, storage, cipher, 1)
    spawner = Spawner(ledger, storage, cipher, make_settings())

    with pytest.raises(MissingDependencyError):
        asyncio.run(spawner.resolve_item(2))

    report = asyncio.run(spawner.run())
    assert not report.ok
    assert report.failure.startswith("item 2: MissingDependencyError")
    assert ledger.submissions == []


def test_failed_submission_keeps_results_for_next_pass(cipher):
    ledger = _ledger(1)
    ledger.fail_submissions = True
    spawner = Spawner(ledger, MemoryStorage(), cipher, make_settings())

    report = asyncio.run(spawner.run())
    assert not report.ok
    assert report.computed == [1]
    assert report.posted == []
    assert spawner.cache.unposted() == [1]

    ledger.fail_submissions = False
    again = asyncio.run(spawner.run())
    assert again.ok
    assert again.reused == [1]
    assert again.computed == []
    assert again.posted == [1]
    assert ledger.uris[1] != "ipfs://"


def test_checkpoint_hints_survive_restart(cipher, tmp_path):
    path = tmp_path / "cache.json"
    ledger = _ledger(1)
    ledger.fail_submissions = True
    storage = MemoryStorage()
    settings = make_settings(cache_checkpoint_path=str(path))
    asyncio.run(Spawner(ledger, storage, cipher, settings).run())
    assert path.exists()

    ledger.fail_submissions = False
    restarted = Spawner(ledger, storage, cipher, settings, SpawnCache.load(path))
    report = asyncio.run(restarted.run())
    assert report.reused == [1]
    assert report.posted == [1]


def test_checkpoint_hint_missing_from_storage_is_recomputed(cipher, tmp_path):
    path = tmp_path / "cache.json"
    ledger = _ledger(1)
    ledger.fail_submissions = True
    settings = make_settings(cache_checkpoint_path=str(path))
    asyncio.run(Spawner(ledger, MemoryStorage(), cipher, settings).run())

    ledger.fail_submissions = False
    restarted = Spawner(ledger, MemoryStorage(), cipher, settings, SpawnCache.load(path))
    report = asyncio.run(restarted.run())
    assert report.computed == [1]
    assert report.reused == []


def test_breeding_pass(cipher):
    ledger = InMemoryLedger()
    ledger.add_item()
    ledger.add_item()
    ledger.add_item(1, 2)
    storage = MemoryStorage()
    spawner = Spawner(ledger, storage, cipher, make_settings())

    report = asyncio.run(spawner.run())
    assert report.ok
    assert report.computed == [1, 2, 3]
    assert report.batches == [[1, 2, 3]]

    root = _document(storage, ledger, 1)
    assert root["properties"]["attributes"]["genesis"] is True
    assert root["properties"]["formatVersion"] == 3
    assert root["name"] == "Sapphire Testnet TROUT #1"
    assert root["description"].endswith("has existed since before the dawn of time.")
    assert root["image"].startswith("ipfs://")
    assert storage.blobs[cid_from_uri(root["image"])].startswith(b"<?xml")

    child = _document(storage, ledger, 3)
    props = child["properties"]
    assert props["left"] == {"chainId": 0x5AFF, "tokenId": 1}
    assert props["right"] == {"chainId": 0x5AFF, "tokenId": 2}
    assert props["attributes"]["genesis"] is False
    assert "was born to Sapphire Testnet TROUT #1 and Sapphire Testnet TROUT #2" in child["description"]

    descriptor = ArtifactDescriptor.model_validate(props)
    payload = json.loads(cipher.decrypt(descriptor.encrypted_traits, {"tokenId": 3}))
    as_genotype(payload["genotype"])
    assert payload["seed"] == spawner.entropy_seed(3)

    genesis = json.loads(cipher.decrypt(ArtifactDescriptor.model_validate(root["properties"]).encrypted_traits, {"tokenId": 1}))
    assert genesis["phenotype"]["color"] == "rainbow"


def test_parents_from_earlier_pass_are_decrypted(cipher):
    ledger = InMemoryLedger()
    ledger.add_item()
    ledger.add_item()
    storage = MemoryStorage()
    _publish(ledger, storage, cipher, 1)
    _publish(ledger, storage, cipher, 2)
    ledger.add_item(1, 2)

    spawner = Spawner(ledger, storage, cipher, make_settings())
    report = asyncio.run(spawner.run())
    assert report.ok
    assert report.discovered == [3]
    assert report.computed == [3]


def test_parent_sealed_for_another_item_fails(cipher):
    ledger = InMemoryLedger()
    ledger.add_item()
    ledger.add_item()
    storage = MemoryStorage()
    _publish(ledger, storage, cipher, 1)
    cid = _publish(ledger, storage, cipher, 2)
    ledger.uris[1] = f"ipfs://{cid}"
    ledger.add_item(1, 2)

    spawner = Spawner(ledger, storage, cipher, make_settings())
    with pytest.raises(CipherError):
        asyncio.run(spawner.resolve_parent(1))


def test_stale_artifact_extends_generations(cipher):
    ledger = _ledger(1)
    storage = MemoryStorage()
    legacy = {"properties": {"version": 2, "generations": ["bzero"]}}
    legacy_cid = asyncio.run(storage.store(canonical_json(legacy)))
    ledger.uris[1] = f"ipfs://{legacy_cid}"

    spawner = Spawner(ledger, storage, cipher, make_settings())
    report = asyncio.run(spawner.run())
    assert report.computed == [1]
    props = _document(storage, ledger, 1)["properties"]
    assert props["generations"] == ["bzero", legacy_cid]


def test_recomputed_hint_keeps_generations(cipher, tmp_path):
    path = tmp_path / "cache.json"
    legacy = canonical_json({"properties": {"version": 2, "generations": ["bzero"]}})
    ledger = _ledger(1)
    ledger.fail_submissions = True
    storage = MemoryStorage()
    legacy_cid = asyncio.run(storage.store(legacy))
    ledger.uris[1] = f"ipfs://{legacy_cid}"
    settings = make_settings(cache_checkpoint_path=str(path))
    asyncio.run(Spawner(ledger, storage, cipher, settings).run())

    # the unposted result is lost, the legacy artifact is not
    ledger.fail_submissions = False
    fresh = MemoryStorage()
    asyncio.run(fresh.store(legacy))
    restarted = Spawner(ledger, fresh, cipher, settings, SpawnCache.load(path))
    report = asyncio.run(restarted.run())
    assert report.computed == [1]
    assert report.posted == [1]
    props = _document(fresh, ledger, 1)["properties"]
    assert props["generations"] == ["bzero", legacy_cid]


def test_undecodable_artifact_counts_as_stale(cipher):
    ledger = _ledger(1)
    storage = MemoryStorage()
    junk = asyncio.run(storage.store(b"\x89PNG not json"))
    ledger.uris[1] = f"ipfs://{junk}"
    spawner = Spawner(ledger, storage, cipher, make_settings())
    assert asyncio.run(spawner.probe(1)) is True
    assert spawner.cache.get(1).history == [junk]


def test_entropy_seed_is_stable_per_item(cipher):
    spawner = Spawner(InMemoryLedger(), MemoryStorage(), cipher, make_settings())
    assert spawner.entropy_seed(5) == spawner.entropy_seed(5)
    assert spawner.entropy_seed(5) != spawner.entropy_seed(6)
    assert 0 <= spawner.entropy_seed(5) < 2**32
    other_network = Spawner(InMemoryLedger(), MemoryStorage(), cipher, make_settings(network_id=1337))
    assert other_network.entropy_seed(5) != spawner.entropy_seed(5)


def test_item_attributes(cipher):
    testnet = Spawner(InMemoryLedger(), MemoryStorage(), cipher, make_settings())
    assert testnet.attributes_for(137, root=True).genesis is True
    assert testnet.attributes_for(138, root=True).genesis is False
    assert testnet.attributes_for(5, root=False).genesis is False
    assert testnet.attributes_for(236, root=True).seasonal is False

    mainnet = Spawner(InMemoryLedger(), MemoryStorage(), cipher, make_settings(network_id=0x5AFE))
    assert mainnet.attributes_for(236, root=True).seasonal is True
    assert mainnet.attributes_for(241, root=False).seasonal is True
    assert mainnet.attributes_for(242, root=True).seasonal is False


def test_from_settings_requires_urls():
    with pytest.raises(ValueError):
        Spawner.from_settings(make_settings(ledger_url="", ipfs_api_url=""))


def test_report_dict():
    report = SpawnReport(discovered=[1], failure="boom")
    data = report.to_dict()
    assert data["ok"] is False
    assert data["discovered"] == [1]


def test_discovery_failure_is_reported(cipher):
    ledger = UnreachableLedger()
    ledger.add_item()
    spawner = Spawner(ledger, MemoryStorage(), cipher, make_settings())
    report = asyncio.run(spawner.run())
    assert not report.ok
    assert report.failure.startswith("discovery: TransientIOError")
    assert report.discovered == []
    assert ledger.reads == 3
    assert ledger.submissions == []


def test_unknown_parent_fails_item(cipher):
    ledger = InMemoryLedger()
    ledger.add_item(5, 6)
    spawner = Spawner(ledger, MemoryStorage(), cipher, make_settings())
    report = asyncio.run(spawner.run())
    assert not report.ok
    assert report.failure.startswith("item 1: MissingDependencyError")
    assert ledger.submissions == []


def test_transient_store_failures_are_retried(cipher):
    ledger = _ledger(2)
    storage = FlakyStorage(failures=2)
    spawner = Spawner(ledger, storage, cipher, make_settings(retry_attempts=3))
    report = asyncio.run(spawner.run())
    assert report.ok
    assert report.computed == [1, 2]
    assert report.posted == [1, 2]
    assert storage.failed == 2


def test_exhausted_retries_stop_the_pass(cipher):
    ledger = _ledger(3)
    # item 1 stores its image and metadata, then storage goes down
    storage = FlakyStorage(healthy_stores=2)
    spawner = Spawner(ledger, storage, cipher, make_settings(batch_size=1, retry_attempts=3))
    report = asyncio.run(spawner.run())
    assert not report.ok
    assert report.failure.startswith("item 2: TransientIOError")
    assert storage.failed == 3
    assert report.batches == [[1]]
    assert report.posted == [1]
    assert ledger.submissions == [[1]]
    assert ledger.uris[1] != EMPTY_URI
    assert ledger.uris[2] == EMPTY_URI
    assert ledger.uris[3] == EMPTY_URI
