"""Tests for the spawn cache and its checkpoint file."""

import json

import pytest

from troutgen.spawner.cache import Posted, ResolvedUnposted, SpawnCache, Unresolved
from troutgen.spawner.descriptor import ArtifactDescriptor, Box, OrganismId


def _descriptor(item):
    return ArtifactDescriptor(
        self_id=OrganismId(chain_id=0x5AFF, token_id=item),
        encrypted_traits=Box(key_id=1, nonce="bm9uY2U", data="ZGF0YQ"),
        generations=["bold"],
    )


def test_history_appends_previous_cid():
    assert Unresolved().history == []
    assert Unresolved("b1").history == ["b1"]
    assert Unresolved("b2", {"generations": ["b0", "b1"]}).history == ["b0", "b1", "b2"]


def test_mark_posted_moves_state():
    cache = SpawnCache()
    cache.set(3, ResolvedUnposted("b3", _descriptor(3)))
    assert cache.unposted() == [3]
    cache.mark_posted(3)
    assert isinstance(cache.get(3), Posted)
    assert cache.unposted() == []


def test_mark_posted_requires_unposted_result():
    cache = SpawnCache()
    cache.set(1, Unresolved())
    with pytest.raises(KeyError):
        cache.mark_posted(1)
    with pytest.raises(KeyError):
        cache.mark_posted(2)


def test_content_id_by_state():
    cache = SpawnCache()
    cache.set(1, Unresolved("old"))
    cache.set(2, Posted("b2", _descriptor(2)))
    assert cache.content_id(1) == "old"
    assert cache.content_id(2) == "b2"
    assert cache.content_id(3) is None


def test_checkpoint_round_trip(tmp_path):
    path = tmp_path / "state" / "cache.json"
    cache = SpawnCache()
    cache.set(1, Posted("b1", _descriptor(1)))
    cache.set(2, ResolvedUnposted("b2", _descriptor(2)))
    cache.set(3, Unresolved("b3"))
    cache.save(path)

    loaded = SpawnCache.load(path)
    assert len(loaded) == 2
    assert isinstance(loaded.get(1), Posted)
    assert isinstance(loaded.get(2), ResolvedUnposted)
    assert loaded.get(2).descriptor == _descriptor(2)
    assert loaded.get(2).organism is None
    assert loaded.get(3) is None


def test_checkpoint_uses_wire_names(tmp_path):
    path = tmp_path / "cache.json"
    cache = SpawnCache()
    cache.set(1, Posted("b1", _descriptor(1)))
    cache.save(path)
    data = json.loads(path.read_text())
    assert data["version"] == 1
    assert data["entries"]["1"]["descriptor"]["self"] == {"chainId": 0x5AFF, "tokenId": 1}


def test_missing_checkpoint_is_empty(tmp_path):
    assert len(SpawnCache.load(tmp_path / "nope.json")) == 0


def test_unreadable_checkpoint_is_empty(tmp_path):
    path = tmp_path / "cache.json"
    path.write_text("{not json")
    assert len(SpawnCache.load(path)) == 0
    path.write_text(json.dumps({"version": 99, "entries": {}}))
    assert len(SpawnCache.load(path)) == 0


def test_bad_checkpoint_entry_is_skipped(tmp_path):
    path = tmp_path / "cache.json"
    good = {"state": "posted", "cid": "b1", "descriptor": _descriptor(1).to_json()}
    path.write_text(json.dumps({"version": 1, "entries": {"1": good, "2": {"state": "posted"}}}))
    loaded = SpawnCache.load(path)
    assert len(loaded) == 1
    assert loaded.content_id(1) == "b1"
