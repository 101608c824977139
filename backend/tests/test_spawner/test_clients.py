"""Tests for the ledger and storage clients."""

import asyncio
import json

import httpx
import pytest

from troutgen.spawner.errors import MissingDependencyError, SubmissionError, TransientIOError
from troutgen.spawner.ledger import EMPTY_URI, HttpLedger, InMemoryLedger
from troutgen.spawner.storage import IpfsStorage, MemoryStorage, memory_cid


def test_memory_ledger_numbers_items_from_one():
    ledger = InMemoryLedger()
    assert ledger.add_item() == 1
    assert ledger.add_item(1, 1) == 2
    assert asyncio.run(ledger.total_supply()) == 2
    assert asyncio.run(ledger.parents(2)) == (1, 1)
    assert asyncio.run(ledger.artifact_uri(1)) == EMPTY_URI


def test_memory_ledger_unknown_item():
    ledger = InMemoryLedger()
    ledger.add_item()
    with pytest.raises(MissingDependencyError):
        asyncio.run(ledger.parents(2))
    with pytest.raises(MissingDependencyError):
        asyncio.run(ledger.artifact_uri(2))


def test_memory_ledger_records_submission():
    ledger = InMemoryLedger()
    ledger.add_item()
    ledger.add_item()
    receipt = asyncio.run(ledger.submit_results([1, 2], b"", json.dumps(["ba", "bb"]).encode(), {}))
    assert receipt.status == 1
    assert ledger.uris == {1: "ipfs://ba", 2: "ipfs://bb"}
    assert ledger.submissions == [[1, 2]]


def test_memory_ledger_rejects_unsorted_ids():
    ledger = InMemoryLedger()
    ledger.add_item()
    ledger.add_item()
    with pytest.raises(SubmissionError):
        asyncio.run(ledger.submit_results([2, 1], b"", b'["a","b"]', {}))


def test_memory_ledger_failed_receipt():
    ledger = InMemoryLedger(fail_submissions=True)
    ledger.add_item()
    assert asyncio.run(ledger.submit_results([1], b"", b'["a"]', {})).status == 0
    assert ledger.uris[1] == EMPTY_URI


def test_memory_storage_is_content_addressed():
    storage = MemoryStorage()
    cid = asyncio.run(storage.store(b"trout"))
    assert cid == memory_cid(b"trout")
    assert cid.startswith("b") and cid == cid.lower()
    assert asyncio.run(storage.fetch(cid)) == b"trout"


def test_memory_storage_missing_content():
    with pytest.raises(MissingDependencyError):
        asyncio.run(MemoryStorage().fetch("bmissing"))


def _ledger_handler(request: httpx.Request) -> httpx.Response:
    path = request.url.path
    if path == "/supply":
        return httpx.Response(200, json={"totalSupply": 12})
    if path == "/items/3/parents":
        return httpx.Response(200, json={"left": 1, "right": 2})
    if path == "/items/3/uri":
        return httpx.Response(200, json={"uri": "ipfs://bafy"})
    if path == "/results":
        body = json.loads(request.content)
        assert body["ids"] == [1, 2]
        assert bytes.fromhex(body["encodedCids"]) == b'["a","b"]'
        return httpx.Response(200, json={"status": 1, "txHash": "0xabc"})
    return httpx.Response(500)


def test_http_ledger_calls():
    ledger = HttpLedger("http://ledger.test/", transport=httpx.MockTransport(_ledger_handler))
    assert asyncio.run(ledger.total_supply()) == 12
    assert asyncio.run(ledger.parents(3)) == (1, 2)
    assert asyncio.run(ledger.artifact_uri(3)) == "ipfs://bafy"
    receipt = asyncio.run(ledger.submit_results([1, 2], b"", b'["a","b"]', {}))
    assert receipt.status == 1
    assert receipt.tx_hash == "0xabc"


def test_http_ledger_server_error_is_transient():
    ledger = HttpLedger("http://ledger.test", transport=httpx.MockTransport(_ledger_handler))
    with pytest.raises(TransientIOError):
        asyncio.run(ledger.parents(99))


def test_ipfs_storage_add_and_cat():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/v0/add":
            assert request.url.params["cid-version"] == "1"
            return httpx.Response(200, json={"Hash": "bafyblob"})
        if request.url.path == "/api/v0/cat":
            assert request.url.params["arg"] == "bafyblob"
            return httpx.Response(200, content=b"payload")
        return httpx.Response(404)

    storage = IpfsStorage("http://ipfs.test:5001", transport=httpx.MockTransport(handler))
    assert asyncio.run(storage.store(b"payload")) == "bafyblob"
    assert asyncio.run(storage.fetch("bafyblob")) == b"payload"


def test_ipfs_storage_error_is_transient():
    storage = IpfsStorage("http://ipfs.test:5001", transport=httpx.MockTransport(lambda r: httpx.Response(503)))
    with pytest.raises(TransientIOError):
        asyncio.run(storage.fetch("bafy"))
