"""POST /api/organisms/spawn — generate a root organism."""

from __future__ import annotations

from fastapi import APIRouter

from troutgen.genetics.model import spawn
from troutgen.models.requests import SpawnOrganismRequest
from troutgen.models.responses import OrganismResponse

router = APIRouter(prefix="/organisms")


@router.post("/spawn", response_model=OrganismResponse)
async def spawn_organism(req: SpawnOrganismRequest) -> OrganismResponse:
    return OrganismResponse(**spawn(req.seed).to_dict())
