"""Induced-subgraph builders for the two explorer views."""

from __future__ import annotations

from typing import Sequence

from collabnet.graph.evidence import edge_allowed
from collabnet.graph.models import EdgeRecord, EvidenceMode, NodeRecord, Subgraph


def build_egonet(
    nodes: Sequence[NodeRecord],
    edges: Sequence[EdgeRecord],
    focus_id: str,
    mode: EvidenceMode | str,
    min_weight: float,
) -> Subgraph:
    """Focus node, its qualifying neighbors, and every allowed edge among them.

    This is the full induced subgraph on the neighborhood, so links between
    two neighbors are included, not only the star around the focus. The
    focus is always present (if it exists) even with no qualifying edges.
    """
    mode = EvidenceMode.parse(mode)
    neighborhood = {focus_id}
    for edge in edges:
        if edge.touches(focus_id) and edge_allowed(edge, mode, min_weight):
            neighborhood.add(edge.other(focus_id))

    kept_nodes = tuple(n for n in nodes if n.id in neighborhood)
    kept_ids = {n.id for n in kept_nodes}
    kept_edges = tuple(
        e for e in edges
        if e.source_id in kept_ids
        and e.target_id in kept_ids
        and edge_allowed(e, mode, min_weight)
    )
    return Subgraph(nodes=kept_nodes, edges=kept_edges)


def build_path_subgraph(
    nodes: Sequence[NodeRecord],
    edges: Sequence[EdgeRecord],
    path: Sequence[str],
    mode: EvidenceMode | str,
    min_weight: float,
) -> Subgraph:
    """Nodes on ``path`` plus every allowed edge joining consecutive hops.

    All qualifying parallel edges between path-adjacent nodes are kept, not
    only the one that produced the solved cost.
    """
    mode = EvidenceMode.parse(mode)
    on_path = set(path)
    kept_nodes = tuple(n for n in nodes if n.id in on_path)

    hops: set[tuple[str, str]] = set()
    for a, b in zip(path, path[1:]):
        hops.add((a, b))
        hops.add((b, a))

    kept_edges = tuple(
        e for e in edges
        if (e.source_id, e.target_id) in hops and edge_allowed(e, mode, min_weight)
    )
    return Subgraph(nodes=kept_nodes, edges=kept_edges)
