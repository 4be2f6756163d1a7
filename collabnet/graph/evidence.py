"""Evidence and filter policy.

Each edge carries two independent evidence dimensions: instrument-based
(the two people performed on the same recording) and credit-based (they
share a non-performing credit). The evidence mode picks which of them are
in play. The same ``edge_allowed`` predicate gates the egonet, the path
subgraph and the solver's working graph, so all three views agree on which
edges exist.
"""

from __future__ import annotations

from collabnet.graph.models import EdgeRecord, EvidenceMode, safe_weight

__all__ = [
    "INSTRUMENT_COST_FACTOR",
    "cost_strength",
    "display_strength",
    "edge_allowed",
    "safe_weight",
    "traversal_cost",
]

# Instrument evidence counts double when routing in BOTH mode, so paths
# prefer performer-to-performer links over purely credit-based ones.
INSTRUMENT_COST_FACTOR = 2.0


def display_strength(edge: EdgeRecord, mode: EvidenceMode) -> float:
    """Visual strength of an edge, also used for the inclusion threshold."""
    if mode is EvidenceMode.INSTRUMENT:
        return edge.instrument_weight
    if mode is EvidenceMode.CREDIT:
        return edge.credit_weight
    return edge.instrument_weight + edge.credit_weight


def cost_strength(edge: EdgeRecord, mode: EvidenceMode) -> float:
    """Strength used only for shortest-path weighting."""
    if mode is EvidenceMode.INSTRUMENT:
        return edge.instrument_weight
    if mode is EvidenceMode.CREDIT:
        return edge.credit_weight
    return edge.instrument_weight * INSTRUMENT_COST_FACTOR + edge.credit_weight


def edge_allowed(edge: EdgeRecord, mode: EvidenceMode, min_weight: float) -> bool:
    """True iff the edge's display strength meets the (inclusive) threshold."""
    return display_strength(edge, mode) >= min_weight


def traversal_cost(
    edge: EdgeRecord,
    mode: EvidenceMode,
    hop_penalty: float,
) -> float:
    """Cost of crossing ``edge``: stronger evidence is cheaper.

    The ``+ 1`` bounds the evidence term to (0, 1] and keeps zero-weight
    edges finite; ``hop_penalty`` discourages long chains of weak links.
    """
    return 1.0 / (cost_strength(edge, mode) + 1.0) + hop_penalty
