"""Verification API: MusicBrainz-backed edge confirmation.

Endpoints:
    GET /api/verifyEdge?artistA=&artistB=&limit=   Recordings shared as performers
    GET /api/releasesForRecording?rid=&max=        Release titles of a recording
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from fastapi import APIRouter, HTTPException, Query, Request

from collabnet.musicbrainz.verification import MusicBrainzError, MusicBrainzVerifier

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["verification"])


def _verifier(request: Request) -> MusicBrainzVerifier:
    return request.app.state.verifier


@router.get("/verifyEdge")
async def verify_edge(
    request: Request,
    artistA: str = Query(""),
    artistB: str = Query(""),
    limit: int = Query(6),
) -> dict[str, Any]:
    if not artistA.strip() or not artistB.strip():
        raise HTTPException(status_code=400, detail="artistA and artistB required")
    try:
        result = await _verifier(request).verify_edge(artistA, artistB, limit)
    except (MusicBrainzError, httpx.HTTPError) as e:
        logger.warning("Edge verification failed: %s", e)
        raise HTTPException(status_code=502, detail=str(e))
    return {**result.to_dict(), "cached": result.cached}


@router.get("/releasesForRecording")
async def releases_for_recording(
    request: Request,
    rid: str = Query(""),
    max_releases: int = Query(12, alias="max"),
) -> dict[str, Any]:
    if not rid.strip():
        raise HTTPException(status_code=400, detail="rid required")
    try:
        releases = await _verifier(request).releases_for_recording(rid, max_releases)
    except (MusicBrainzError, httpx.HTTPError) as e:
        logger.warning("Release lookup failed for %s: %s", rid, e)
        raise HTTPException(status_code=502, detail=str(e))
    return {"rid": rid.strip(), "releases": releases}
