"""collabnet graph analytics engine.

Loads an artist collaboration network into an immutable snapshot and
answers the explorer's queries over it: the egonet of one person, the
strongest-evidence path between two people, and name search.

Usage::

    from collabnet.graph import GraphEngine, EvidenceMode

    engine = GraphEngine()
    result = engine.build_from_graphml("network_dual.graphml")

    explorer = result.explorer
    ego = explorer.compute_egonet(focus_id, EvidenceMode.BOTH, min_weight=1)
    path = explorer.compute_shortest_path(start_id, end_id, EvidenceMode.BOTH, 1)
    matches = explorer.search_names("mi")
"""

from collabnet.graph.engine import GraphEngine, LoadResult
from collabnet.graph.explorer import CollaborationExplorer
from collabnet.graph.exporters import SubgraphExporter
from collabnet.graph.graphml_loader import GraphMLLoader, GraphMLLoadError, LoadStats
from collabnet.graph.models import (
    EdgeRecord,
    EvidenceMode,
    NodeRecord,
    PathResult,
    Snapshot,
    Subgraph,
)

__all__ = [
    "CollaborationExplorer",
    "EdgeRecord",
    "EvidenceMode",
    "GraphEngine",
    "GraphMLLoadError",
    "GraphMLLoader",
    "LoadResult",
    "LoadStats",
    "NodeRecord",
    "PathResult",
    "Snapshot",
    "Subgraph",
    "SubgraphExporter",
]
