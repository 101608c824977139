"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from troutgen import __version__
from troutgen.dependencies import get_trait_table
from troutgen.genetics.table import TraitTable
from troutgen.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(table: TraitTable = Depends(get_trait_table)) -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=__version__,
        traits_registered=len(table),
    )
