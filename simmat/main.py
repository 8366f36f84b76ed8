"""HTTP service: category summaries and similarity images over ``/api``.

Run with any ASGI server, e.g. ``uvicorn simmat.main:app``.
"""

from __future__ import annotations

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from simmat import __version__
from simmat.api.router import api_router
from simmat.config import Settings, configure_logging, settings as default_settings


def create_app(settings: Settings | None = None) -> FastAPI:
    load_dotenv()
    settings = settings or default_settings
    configure_logging(settings.simmat_log_level)

    app = FastAPI(
        title="SimMat",
        description="Renders PSB category files and dissimilarity matrices as tier or distance images",
        version=__version__,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        expose_headers=["X-Grid-Size", "X-Render-Seconds"],
    )
    app.include_router(api_router)
    return app


app = create_app()
