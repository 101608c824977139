"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from troutgen import __version__
from troutgen.config import settings

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.troutgen_log_level.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)


def create_app() -> FastAPI:
    app = FastAPI(
        title="troutgen",
        description="Procedural fish organisms: genetics, rendering and ledger sync",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Build the trait table up front so catalog errors fail at startup
    from troutgen.genetics.table import get_table

    get_table()

    from troutgen.api.router import api_router

    app.include_router(api_router)

    return app


app = create_app()
