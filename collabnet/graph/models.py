"""Entity model for one loaded collaboration-network snapshot.

Nodes are people, edges are weighted collaboration evidence between two
people. Every record is immutable; a new snapshot replaces the old one
wholesale and derived views (egonets, path subgraphs, search results) are
recomputed from scratch whenever an input parameter changes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping


class EvidenceMode(str, Enum):
    """Which weight dimension(s) count toward display and traversal."""

    INSTRUMENT = "instr"
    CREDIT = "credit"
    BOTH = "both"

    @classmethod
    def parse(cls, value: EvidenceMode | str) -> EvidenceMode:
        """Resolve a mode from its value or a loose alias.

        Raises ``ValueError`` for anything unrecognised.
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        aliased = _MODE_ALIASES.get(key, key)
        try:
            return cls(aliased)
        except ValueError:
            raise ValueError(
                f"Unknown evidence mode {value!r}; expected one of "
                f"{', '.join(m.value for m in cls)}"
            ) from None


_MODE_ALIASES = {
    "instrument": "instr",
    "instruments": "instr",
    "credits": "credit",
}


def safe_weight(value: Any) -> float:
    """Coerce a raw weight field to a finite, non-negative float.

    Missing, non-numeric, NaN and infinite values all resolve to 0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


@dataclass(frozen=True)
class NodeRecord:
    """A person in the network."""

    id: str
    name: str
    instruments: str = ""


@dataclass(frozen=True)
class EdgeRecord:
    """Collaboration evidence between two people.

    Treated as undirected everywhere; parallel edges between the same pair
    are kept as separate records.
    """

    id: str
    source_id: str
    target_id: str
    instrument_weight: float = 0.0
    credit_weight: float = 0.0

    def touches(self, node_id: str) -> bool:
        return self.source_id == node_id or self.target_id == node_id

    def other(self, node_id: str) -> str:
        """Return the endpoint opposite ``node_id``."""
        return self.target_id if self.source_id == node_id else self.source_id


@dataclass(frozen=True)
class Subgraph:
    """A derived view: a node subset plus the qualifying edges among them."""

    nodes: tuple[NodeRecord, ...] = ()
    edges: tuple[EdgeRecord, ...] = ()

    @property
    def node_ids(self) -> list[str]:
        return [n.id for n in self.nodes]

    @property
    def edge_ids(self) -> list[str]:
        return [e.id for e in self.edges]

    def is_empty(self) -> bool:
        return not self.nodes


@dataclass(frozen=True)
class PathResult:
    """A solved path together with the subgraph that supports it."""

    path: tuple[str, ...]
    subgraph: Subgraph

    @property
    def found(self) -> bool:
        return bool(self.path)

    @property
    def hops(self) -> int:
        return max(0, len(self.path) - 1)


@dataclass(frozen=True)
class Snapshot:
    """One immutable loaded instance of the full node and edge sets."""

    nodes: tuple[NodeRecord, ...] = ()
    edges: tuple[EdgeRecord, ...] = ()
    node_by_id: Mapping[str, NodeRecord] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        # Frozen dataclass: the derived index is written through object.__setattr__.
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "edges", tuple(self.edges))
        object.__setattr__(self, "node_by_id", {n.id: n for n in self.nodes})

    @property
    def node_ids(self) -> frozenset[str]:
        return frozenset(self.node_by_id)

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def edge_count(self) -> int:
        return len(self.edges)

    def orphan_edges(self) -> list[EdgeRecord]:
        """Edges referencing an endpoint that is not a known node."""
        known = self.node_by_id
        return [
            e for e in self.edges
            if e.source_id not in known or e.target_id not in known
        ]

    @classmethod
    def from_records(
        cls,
        nodes: Iterable[Mapping[str, Any]],
        edges: Iterable[Mapping[str, Any]],
    ) -> Snapshot:
        """Build a snapshot from plain dicts.

        Node dicts need ``id`` and optionally ``name`` / ``instruments``.
        Edge dicts need ``source`` and ``target`` (or ``source_id`` /
        ``target_id``); weights may be given as ``instrument_weight`` /
        ``w_instr`` and ``credit_weight`` / ``w_credit`` and are coerced
        with :func:`safe_weight`.
        """
        node_records = []
        for raw in nodes:
            node_id = str(raw.get("id", "")).strip()
            if not node_id:
                continue
            node_records.append(NodeRecord(
                id=node_id,
                name=str(raw.get("name") or node_id).strip(),
                instruments=str(raw.get("instruments") or "").strip(),
            ))

        edge_records = []
        for idx, raw in enumerate(edges):
            source = str(raw.get("source_id", raw.get("source", ""))).strip()
            target = str(raw.get("target_id", raw.get("target", ""))).strip()
            instr = raw.get("instrument_weight", raw.get("w_instr"))
            credit = raw.get("credit_weight", raw.get("w_credit"))
            edge_records.append(EdgeRecord(
                id=str(raw.get("id") or f"{source}__{target}__{idx}"),
                source_id=source,
                target_id=target,
                instrument_weight=safe_weight(instr),
                credit_weight=safe_weight(credit),
            ))

        return cls(nodes=tuple(node_records), edges=tuple(edge_records))
