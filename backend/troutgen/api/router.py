"""Master API router — mounts all endpoint routers."""

from __future__ import annotations

from fastapi import APIRouter

from troutgen.api import health, organisms, preview, tasks, traits

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router)
api_router.include_router(preview.router)
api_router.include_router(organisms.router)
api_router.include_router(traits.router)
api_router.include_router(tasks.router)
