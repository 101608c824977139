"""API response models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    traits_registered: int = 0


class OrganismResponse(BaseModel):
    genotype: list[dict[str, Any]]
    phenotype: dict[str, Any]


class BreedPreviewResponse(OrganismResponse):
    svg: str


class TraitInfo(BaseModel):
    name: str
    kind: str
    domain: list[Any] = Field(description="Enumerated values, or [min, max] for a range")
    depends_on: list[str] = Field(default_factory=list)
    order: int


class TraitsResponse(BaseModel):
    traits: list[TraitInfo]


class SpawnReportResponse(BaseModel):
    ok: bool
    discovered: list[int] = Field(default_factory=list)
    computed: list[int] = Field(default_factory=list)
    reused: list[int] = Field(default_factory=list)
    batches: list[list[int]] = Field(default_factory=list)
    posted: list[int] = Field(default_factory=list)
    failure: str | None = None
