"""POST /api/tasks/run — one orchestrator pass against the configured collaborators."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from troutgen.config import Settings
from troutgen.dependencies import get_settings
from troutgen.models.responses import SpawnReportResponse
from troutgen.spawner import Spawner

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks")


@router.post("/run", response_model=SpawnReportResponse)
async def run_tasks(settings: Settings = Depends(get_settings)) -> SpawnReportResponse:
    if not settings.ledger_url or not settings.ipfs_api_url:
        raise HTTPException(status_code=503, detail="Ledger and storage endpoints are not configured")
    try:
        spawner = Spawner.from_settings(settings)
    except ValueError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e

    report = await spawner.run()
    if not report.ok:
        logger.warning("Spawn pass stopped early: %s", report.failure)
    return SpawnReportResponse(**report.to_dict())
