"""Explorer API: egonet, path and search queries over HTTP.

Endpoints:
    GET /api/summary   Snapshot statistics under a filter
    GET /api/search    Ranked name matches
    GET /api/egonet    Egonet subgraph around a focus
    GET /api/path      Shortest path plus its supporting subgraph

Endpoint parameters accept either node ids or names; names are resolved
the same way the explorer's query boxes resolve them. Unknown people and
unreachable targets produce empty results, not errors.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel

from collabnet.config.settings import settings
from collabnet.graph.engine import GraphEngine, LoadResult
from collabnet.graph.explorer import CollaborationExplorer
from collabnet.graph.exporters import SubgraphExporter
from collabnet.graph.graphml_loader import GraphMLLoadError
from collabnet.graph.models import EvidenceMode, NodeRecord

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["explorer"])


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------

class NodeOut(BaseModel):
    id: str
    name: str
    instruments: str = ""


class SearchResponse(BaseModel):
    query: str
    results: list[NodeOut]


class EgonetResponse(BaseModel):
    focus: str
    mode: str
    min_weight: float
    nodes: list[dict[str, Any]]
    links: list[dict[str, Any]]


class PathResponse(BaseModel):
    start: str
    end: str
    mode: str
    min_weight: float
    hop_penalty: float
    path: list[str]
    label: str
    nodes: list[dict[str, Any]]
    links: list[dict[str, Any]]


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------

def get_load_result(request: Request) -> LoadResult:
    """Return the app's snapshot, loading it from settings on first use."""
    result = request.app.state.load_result
    if result is None:
        engine = GraphEngine(
            max_nodes=settings.MAX_NODES,
            strict=settings.STRICT_INGESTION,
            hop_penalty=settings.HOP_PENALTY,
            search_limit=settings.SEARCH_LIMIT,
        )
        try:
            result = engine.build_from_graphml(settings.GRAPHML_PATH)
        except (OSError, GraphMLLoadError) as e:
            logger.error("Snapshot load failed: %s", e)
            raise HTTPException(status_code=503, detail=f"Snapshot unavailable: {e}")
        request.app.state.load_result = result
    return result


def get_explorer(result: LoadResult = Depends(get_load_result)) -> CollaborationExplorer:
    return result.explorer


def _parse_mode(mode: str) -> EvidenceMode:
    try:
        return EvidenceMode.parse(mode)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


def _resolve_id(explorer: CollaborationExplorer, value: str, fallback: str) -> str:
    if not value:
        return fallback
    node = explorer.resolve(value)
    return node.id if node else value


def _node_out(node: NodeRecord) -> NodeOut:
    return NodeOut(id=node.id, name=node.name, instruments=node.instruments)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/summary")
async def summary(
    mode: str = Query(settings.DEFAULT_EVIDENCE_MODE),
    min_weight: float = Query(0.0, ge=0),
    result: LoadResult = Depends(get_load_result),
) -> dict[str, Any]:
    """Snapshot statistics plus load stats."""
    return result.summary(_parse_mode(mode), min_weight)


@router.get("/search", response_model=SearchResponse)
async def search(
    q: str = Query("", description="Name query"),
    limit: int = Query(settings.SEARCH_LIMIT, ge=1, le=100),
    explorer: CollaborationExplorer = Depends(get_explorer),
) -> SearchResponse:
    """Prefix matches first, then substring matches."""
    matches = explorer.search_names(q, limit)
    return SearchResponse(query=q, results=[_node_out(n) for n in matches])


@router.get("/egonet", response_model=EgonetResponse)
async def egonet(
    focus: str = Query("", description="Focus node id or name"),
    mode: str = Query(settings.DEFAULT_EVIDENCE_MODE),
    min_weight: float = Query(settings.DEFAULT_MIN_WEIGHT, ge=0),
    explorer: CollaborationExplorer = Depends(get_explorer),
) -> EgonetResponse:
    """Induced subgraph on the focus and its qualifying neighbors."""
    evidence = _parse_mode(mode)
    default_focus, _, _ = explorer.default_endpoints()
    focus_id = _resolve_id(explorer, focus, default_focus)

    view = explorer.compute_egonet(focus_id, evidence, min_weight)
    data = SubgraphExporter(view, evidence, highlight_id=focus_id).to_d3_json()
    return EgonetResponse(
        focus=focus_id,
        mode=evidence.value,
        min_weight=min_weight,
        nodes=data["nodes"],
        links=data["links"],
    )


@router.get("/path", response_model=PathResponse)
async def path(
    start: str = Query("", description="Start node id or name"),
    end: str = Query("", description="End node id or name"),
    mode: str = Query(settings.DEFAULT_EVIDENCE_MODE),
    min_weight: float = Query(settings.DEFAULT_MIN_WEIGHT, ge=0),
    hop_penalty: float | None = Query(None, ge=0),
    explorer: CollaborationExplorer = Depends(get_explorer),
) -> PathResponse:
    """Strongest-evidence path and every qualifying edge along it."""
    evidence = _parse_mode(mode)
    _, default_start, default_end = explorer.default_endpoints()
    start_id = _resolve_id(explorer, start, default_start)
    end_id = _resolve_id(explorer, end, default_end)
    penalty = explorer.hop_penalty if hop_penalty is None else hop_penalty

    view = explorer.compute_path_view(start_id, end_id, evidence, min_weight, penalty)
    data = SubgraphExporter(
        view.subgraph, evidence, highlight_id=start_id, path=view.path
    ).to_d3_json()
    return PathResponse(
        start=start_id,
        end=end_id,
        mode=evidence.value,
        min_weight=min_weight,
        hop_penalty=penalty,
        path=list(view.path),
        label=explorer.describe_path(view.path),
        nodes=data["nodes"],
        links=data["links"],
    )
