"""POST /api/preview/* — render organisms without touching the ledger."""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from troutgen.genetics.model import as_genotype, breed, spawn
from troutgen.genetics.rules import GeneticsConfigError
from troutgen.models.requests import BreedPreviewRequest, SpawnPreviewRequest
from troutgen.models.responses import BreedPreviewResponse
from troutgen.render import OverlayOptions, rasterize_png, render

router = APIRouter(prefix="/preview")


@router.post("/spawn")
async def preview_spawn(req: SpawnPreviewRequest) -> Response:
    organism = spawn(req.seed)
    svg = await asyncio.to_thread(render, organism.phenotype, OverlayOptions(seasonal=req.seasonal), req.seed)
    headers = {"X-Troutgen-Seed": str(req.seed)}
    if req.format == "png":
        png = await asyncio.to_thread(rasterize_png, svg)
        return Response(content=png, media_type="image/png", headers=headers)
    return Response(content=svg, media_type="image/svg+xml", headers=headers)


@router.post("/breed", response_model=BreedPreviewResponse)
async def preview_breed(req: BreedPreviewRequest) -> BreedPreviewResponse:
    try:
        left = as_genotype(req.left)
        right = as_genotype(req.right)
    except GeneticsConfigError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    child = breed(left, right, req.seed)
    svg = await asyncio.to_thread(render, child.phenotype, OverlayOptions(seasonal=req.seasonal), req.seed)
    data = child.to_dict()
    return BreedPreviewResponse(genotype=data["genotype"], phenotype=data["phenotype"], svg=svg)
