"""Persisted artifact schema.

Field names on the wire are camelCase; ``self`` is exposed as ``self_id``
on the model since ``self`` cannot be a Python field name.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

CURRENT_FORMAT_VERSION = 3


class Box(BaseModel):
    key_id: int = Field(alias="keyId")
    nonce: str
    data: str

    model_config = ConfigDict(populate_by_name=True)


class OrganismId(BaseModel):
    chain_id: int = Field(alias="chainId")
    token_id: int = Field(alias="tokenId")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class Attributes(BaseModel):
    genesis: bool = False
    seasonal: bool | None = None


class ArtifactDescriptor(BaseModel):
    left: OrganismId | None = None
    right: OrganismId | None = None
    self_id: OrganismId = Field(alias="self")
    attributes: Attributes = Field(default_factory=Attributes)
    encrypted_traits: Box = Field(alias="encryptedTraits")
    generations: list[str] = Field(default_factory=list)
    format_version: int = Field(default=CURRENT_FORMAT_VERSION, alias="formatVersion")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class ArtifactDocument(BaseModel):
    """Metadata document written to storage next to the image."""

    name: str
    description: str
    image: str
    properties: ArtifactDescriptor


def format_version_of(properties: Any) -> int:
    """Schema version of a raw stored descriptor, or -1 when it has none.

    Descriptors written before the field was renamed carry ``version``.
    """
    if not isinstance(properties, dict):
        return -1
    version = properties.get("formatVersion", properties.get("version", -1))
    return version if isinstance(version, int) else -1
