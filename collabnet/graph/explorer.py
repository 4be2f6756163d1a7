"""Query surface over one collaboration snapshot.

:class:`CollaborationExplorer` binds a :class:`Snapshot` and exposes the
operations a presentation layer needs: egonet, shortest path plus its
supporting subgraph, and name search. Every call is a pure function of the
snapshot and its arguments, so results can be recomputed freely whenever
the user moves a slider or changes focus.
"""

from __future__ import annotations

import logging
from typing import Any

import networkx as nx

from collabnet.graph.evidence import edge_allowed
from collabnet.graph.models import (
    EvidenceMode,
    NodeRecord,
    PathResult,
    Snapshot,
    Subgraph,
)
from collabnet.graph.pathfinding import DEFAULT_HOP_PENALTY, path_cost, shortest_path
from collabnet.graph.search import DEFAULT_LIMIT, normalize, top_matches
from collabnet.graph.subgraphs import build_egonet, build_path_subgraph

logger = logging.getLogger(__name__)

NO_PATH_LABEL = "(no path found under current filters)"
PATH_SEPARATOR = " → "

# Names the explorer opens on when they exist in the snapshot.
DEFAULT_FOCUS_NAME = "Miles Davis"
DEFAULT_END_NAME = "John Coltrane"


class CollaborationExplorer:
    """Egonet, path and search queries over an immutable snapshot.

    Parameters
    ----------
    snapshot:
        The loaded network.
    hop_penalty:
        Default additive cost per traversed edge for path queries.
    search_limit:
        Default maximum number of name-search results.
    """

    def __init__(
        self,
        snapshot: Snapshot,
        hop_penalty: float = DEFAULT_HOP_PENALTY,
        search_limit: int = DEFAULT_LIMIT,
    ) -> None:
        self._snapshot = snapshot
        self._hop_penalty = hop_penalty
        self._search_limit = search_limit
        # Search candidates are presented alphabetically.
        self._nodes_by_name = sorted(
            snapshot.nodes, key=lambda n: (normalize(n.name), n.id)
        )

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def hop_penalty(self) -> float:
        return self._hop_penalty

    def node(self, node_id: str) -> NodeRecord | None:
        return self._snapshot.node_by_id.get(node_id)

    def name_of(self, node_id: str) -> str:
        node = self.node(node_id)
        return node.name if node else node_id

    # -- Egonet --------------------------------------------------------------

    def compute_egonet(
        self,
        focus_id: str,
        mode: EvidenceMode | str,
        min_weight: float,
    ) -> Subgraph:
        """Induced subgraph on ``focus_id`` and its qualifying neighbors."""
        return build_egonet(
            self._snapshot.nodes, self._snapshot.edges, focus_id, mode, min_weight
        )

    # -- Shortest path -------------------------------------------------------

    def compute_shortest_path(
        self,
        start_id: str,
        end_id: str,
        mode: EvidenceMode | str,
        min_weight: float,
        hop_penalty: float | None = None,
    ) -> list[str]:
        """Strongest-evidence route from ``start_id`` to ``end_id``."""
        penalty = self._hop_penalty if hop_penalty is None else hop_penalty
        return shortest_path(
            self._snapshot.nodes,
            self._snapshot.edges,
            start_id,
            end_id,
            mode,
            min_weight,
            penalty,
        )

    def build_path_subgraph(
        self,
        path: list[str] | tuple[str, ...],
        mode: EvidenceMode | str,
        min_weight: float,
    ) -> Subgraph:
        return build_path_subgraph(
            self._snapshot.nodes, self._snapshot.edges, path, mode, min_weight
        )

    def compute_path_view(
        self,
        start_id: str,
        end_id: str,
        mode: EvidenceMode | str,
        min_weight: float,
        hop_penalty: float | None = None,
    ) -> PathResult:
        """Solve a path and build the subgraph that supports it."""
        path = self.compute_shortest_path(start_id, end_id, mode, min_weight, hop_penalty)
        subgraph = self.build_path_subgraph(path, mode, min_weight)
        return PathResult(path=tuple(path), subgraph=subgraph)

    def path_cost(
        self,
        path: list[str] | tuple[str, ...],
        mode: EvidenceMode | str,
        min_weight: float,
        hop_penalty: float | None = None,
    ) -> float:
        penalty = self._hop_penalty if hop_penalty is None else hop_penalty
        return path_cost(path, self._snapshot.edges, mode, min_weight, penalty)

    def describe_path(self, path: list[str] | tuple[str, ...]) -> str:
        """Human-readable ``A → B → C`` label for a path."""
        if not path:
            return NO_PATH_LABEL
        return PATH_SEPARATOR.join(self.name_of(nid) for nid in path)

    # -- Search --------------------------------------------------------------

    def search_names(self, query: str, limit: int | None = None) -> list[NodeRecord]:
        """Prefix-then-substring name matches, alphabetical within each tier."""
        return top_matches(
            self._nodes_by_name,
            query,
            self._search_limit if limit is None else limit,
        )

    def resolve(self, query: str) -> NodeRecord | None:
        """Resolve a query box value to a node.

        Tries an exact id, then an exact (normalised) name, then the best
        search match.
        """
        if not query:
            return None
        by_id = self.node(query.strip())
        if by_id is not None:
            return by_id
        wanted = normalize(query)
        if not wanted:
            return None
        for node in self._nodes_by_name:
            if normalize(node.name) == wanted:
                return node
        matches = self.search_names(query, limit=1)
        return matches[0] if matches else None

    def default_endpoints(self) -> tuple[str, str, str]:
        """Initial ``(focus, start, end)`` ids for a freshly loaded snapshot."""
        nodes = self._snapshot.nodes
        if not nodes:
            return "", "", ""
        by_name = {normalize(n.name): n.id for n in nodes}
        fallback = nodes[0].id
        start = by_name.get(normalize(DEFAULT_FOCUS_NAME), fallback)
        end = by_name.get(normalize(DEFAULT_END_NAME), fallback)
        return start, start, end

    # -- Summary statistics --------------------------------------------------

    def filtered_graph(
        self,
        mode: EvidenceMode | str,
        min_weight: float,
    ) -> nx.MultiGraph:
        """networkx view of the snapshot restricted to allowed edges."""
        mode = EvidenceMode.parse(mode)
        graph = nx.MultiGraph()
        for node in self._snapshot.nodes:
            graph.add_node(node.id, name=node.name, instruments=node.instruments)
        known = self._snapshot.node_by_id
        for edge in self._snapshot.edges:
            if edge.source_id not in known or edge.target_id not in known:
                continue
            if not edge_allowed(edge, mode, min_weight):
                continue
            graph.add_edge(
                edge.source_id,
                edge.target_id,
                key=edge.id,
                instrument_weight=edge.instrument_weight,
                credit_weight=edge.credit_weight,
            )
        return graph

    def summary(
        self,
        mode: EvidenceMode | str = EvidenceMode.BOTH,
        min_weight: float = 0.0,
    ) -> dict[str, Any]:
        """High-level statistics for the snapshot under a filter."""
        mode = EvidenceMode.parse(mode)
        graph = self.filtered_graph(mode, min_weight)
        components = list(nx.connected_components(graph))
        largest = max((len(c) for c in components), default=0)
        return {
            "node_count": self._snapshot.node_count,
            "edge_count": self._snapshot.edge_count,
            "mode": mode.value,
            "min_weight": min_weight,
            "allowed_edge_count": graph.number_of_edges(),
            "connected_components": len(components),
            "largest_component_size": largest,
            "isolated_nodes": nx.number_of_isolates(graph),
            "orphan_edges": len(self._snapshot.orphan_edges()),
        }
