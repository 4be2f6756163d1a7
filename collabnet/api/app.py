"""collabnet: FastAPI application factory.

Usage:
    uvicorn collabnet.api.app:create_app --factory --reload --port 8000

The snapshot is loaded from ``GRAPHML_PATH`` on first use unless one is
passed to :func:`create_app` directly.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from collabnet import __version__
from collabnet.config.settings import settings
from collabnet.graph.engine import LoadResult
from collabnet.musicbrainz.verification import MusicBrainzConfig, MusicBrainzVerifier

logger = logging.getLogger("collabnet.api")


def create_app(
    result: LoadResult | None = None,
    verifier: MusicBrainzVerifier | None = None,
    include_docs: bool = True,
) -> FastAPI:
    """Build and return the FastAPI application.

    Args:
        result: Preloaded snapshot; loaded lazily from settings if omitted
        verifier: MusicBrainz client; built from settings if omitted
        include_docs: Mount ``/docs`` and ``/redoc``
    """
    app = FastAPI(
        title="collabnet",
        description="Artist collaboration network explorer",
        version=__version__,
        docs_url="/docs" if include_docs else None,
        redoc_url="/redoc" if include_docs else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.load_result = result
    app.state.verifier = verifier or MusicBrainzVerifier(
        MusicBrainzConfig.from_settings(settings)
    )

    from collabnet.api.routes.explorer import router as explorer_router
    from collabnet.api.routes.verification import router as verification_router

    app.include_router(explorer_router)
    app.include_router(verification_router)

    @app.get("/api/health")
    async def health():
        loaded = app.state.load_result is not None
        return {"status": "ok", "version": __version__, "snapshot_loaded": loaded}

    logger.debug("collabnet API v%s assembled", __version__)
    return app
