"""API request models."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

SEED_MAX = 2**32 - 1


class SpawnPreviewRequest(BaseModel):
    seed: int = Field(..., ge=0, le=SEED_MAX, description="Organism seed")
    seasonal: bool = Field(default=False, description="Draw the seasonal overlay")
    format: Literal["svg", "png"] = Field(default="svg", description="Output format")


class BreedPreviewRequest(BaseModel):
    left: list[dict[str, Any]] = Field(..., description="Left parent genotype: two haploids")
    right: list[dict[str, Any]] = Field(..., description="Right parent genotype: two haploids")
    seed: int = Field(..., ge=0, le=SEED_MAX)
    seasonal: bool = False


class SpawnOrganismRequest(BaseModel):
    seed: int = Field(..., ge=0, le=SEED_MAX)
