"""Strongest-evidence route between two people.

Dijkstra over the filtered, undirected collaboration graph. Edge cost is
``1 / (cost_strength + 1) + hop_penalty`` so well-evidenced links are
cheap and every extra hop pays a fixed toll. Unreachable targets and
unknown ids are ordinary outcomes and yield an empty path.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

from collabnet.graph.evidence import edge_allowed, traversal_cost
from collabnet.graph.heap import MinHeap
from collabnet.graph.models import EdgeRecord, EvidenceMode, NodeRecord

logger = logging.getLogger(__name__)

DEFAULT_HOP_PENALTY = 0.25


def build_adjacency(
    node_ids: set[str] | frozenset[str],
    edges: Sequence[EdgeRecord],
    mode: EvidenceMode,
    min_weight: float,
    hop_penalty: float = DEFAULT_HOP_PENALTY,
) -> dict[str, list[tuple[str, float]]]:
    """Undirected adjacency of allowed edges between known nodes."""
    adjacency: dict[str, list[tuple[str, float]]] = {nid: [] for nid in node_ids}
    for edge in edges:
        if not edge_allowed(edge, mode, min_weight):
            continue
        if edge.source_id not in adjacency or edge.target_id not in adjacency:
            continue
        cost = traversal_cost(edge, mode, hop_penalty)
        adjacency[edge.source_id].append((edge.target_id, cost))
        adjacency[edge.target_id].append((edge.source_id, cost))
    return adjacency


def shortest_path(
    nodes: Sequence[NodeRecord],
    edges: Sequence[EdgeRecord],
    start_id: str,
    end_id: str,
    mode: EvidenceMode | str,
    min_weight: float,
    hop_penalty: float = DEFAULT_HOP_PENALTY,
) -> list[str]:
    """Return the cheapest path from ``start_id`` to ``end_id`` as node ids.

    Returns ``[]`` when either endpoint is unknown or the target cannot be
    reached under the current filters, and ``[start_id]`` when both
    endpoints are the same node.
    """
    mode = EvidenceMode.parse(mode)
    node_ids = {n.id for n in nodes}
    if start_id not in node_ids or end_id not in node_ids:
        return []
    if start_id == end_id:
        return [start_id]

    adjacency = build_adjacency(node_ids, edges, mode, min_weight, hop_penalty)

    dist: dict[str, float] = {nid: math.inf for nid in node_ids}
    prev: dict[str, str | None] = {nid: None for nid in node_ids}
    dist[start_id] = 0.0

    heap: MinHeap[str] = MinHeap()
    heap.push(start_id, (0.0, start_id))
    visited: set[str] = set()

    while heap:
        current, _ = heap.pop()
        if current in visited:
            continue  # stale entry
        visited.add(current)
        if current == end_id:
            break

        base = dist[current]
        for neighbor, cost in adjacency[current]:
            if neighbor in visited:
                continue
            candidate = base + cost
            if candidate < dist[neighbor]:
                dist[neighbor] = candidate
                prev[neighbor] = current
                heap.push(neighbor, (candidate, neighbor))

    if not math.isfinite(dist[end_id]):
        logger.debug(
            "No path %s -> %s (mode=%s, min_weight=%s)",
            start_id, end_id, mode.value, min_weight,
        )
        return []

    path: list[str] = []
    cursor: str | None = end_id
    while cursor is not None:
        path.append(cursor)
        cursor = prev[cursor]
    path.reverse()

    if path[0] != start_id:
        logger.warning("Inconsistent predecessor chain for %s -> %s", start_id, end_id)
        return []
    return path


def path_cost(
    path: Sequence[str],
    edges: Sequence[EdgeRecord],
    mode: EvidenceMode | str,
    min_weight: float,
    hop_penalty: float = DEFAULT_HOP_PENALTY,
) -> float:
    """Total traversal cost of ``path``, using the cheapest allowed edge per hop.

    Returns ``inf`` if some hop has no allowed edge; 0 for paths of fewer
    than two nodes.
    """
    mode = EvidenceMode.parse(mode)
    best: dict[frozenset[str], float] = {}
    for edge in edges:
        if not edge_allowed(edge, mode, min_weight):
            continue
        key = frozenset((edge.source_id, edge.target_id))
        cost = traversal_cost(edge, mode, hop_penalty)
        if cost < best.get(key, math.inf):
            best[key] = cost

    total = 0.0
    for a, b in zip(path, path[1:]):
        total += best.get(frozenset((a, b)), math.inf)
    return total
