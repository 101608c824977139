"""Display names and descriptions for stored artifacts."""

from __future__ import annotations

from collections.abc import Mapping

from troutgen.spawner.descriptor import ArtifactDescriptor, OrganismId


def network_name(chain_id: int, names: Mapping[int, str]) -> str:
    try:
        return names[chain_id]
    except KeyError:
        raise ValueError(f"Unrecognized network id: {chain_id}") from None


def organism_name(oid: OrganismId, names: Mapping[int, str]) -> str:
    return f"{network_name(oid.chain_id, names)} TROUT #{oid.token_id}"


def describe(descriptor: ArtifactDescriptor, names: Mapping[int, str]) -> str:
    name = organism_name(descriptor.self_id, names)
    if descriptor.left is not None and descriptor.right is not None:
        origin = f"was born to {organism_name(descriptor.left, names)} and {organism_name(descriptor.right, names)}"
    elif descriptor.attributes.genesis:
        origin = "has existed since before the dawn of time"
    else:
        origin = "was spontaneously generated"
    return f"{name} {origin}."
