"""GraphML → collaboration snapshot conversion.

The network ships as a GraphML document: ``<node>`` elements are people
(``name``, ``instruments``) and ``<edge>`` elements carry the two evidence
weights (``w_instr``, ``w_credit``). Each ``<data>`` value is read as raw
text through its key's ``attr.name``, whatever ``attr.type`` the exporter
declared, so a malformed weight coerces to 0 instead of failing the load.
Edges keep document order and their declared ``source`` / ``target``.

Edges may reference endpoints that were never declared as ``<node>``.
Those references are tracked as orphans: by default the edge is kept but
its phantom endpoint is not, so it never appears in a derived view, and
the count is reported in ``LoadStats``.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping
from xml.etree import ElementTree

import networkx as nx

from collabnet.graph.models import EdgeRecord, NodeRecord, Snapshot, safe_weight

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Attribute aliases
# ---------------------------------------------------------------------------

# First present key wins.
NODE_NAME_KEYS: tuple[str, ...] = ("name", "label", "Name")
NODE_INSTRUMENT_KEYS: tuple[str, ...] = ("instruments", "instrument", "Instruments")
EDGE_INSTRUMENT_KEYS: tuple[str, ...] = ("w_instr", "wInstr", "instr")
EDGE_CREDIT_KEYS: tuple[str, ...] = ("w_credit", "wCredit", "credit")


class GraphMLLoadError(ValueError):
    """The document is not usable GraphML or has no nodes."""


@dataclass
class LoadStats:
    """Statistics from a snapshot load."""

    nodes_loaded: int = 0
    edges_loaded: int = 0
    orphan_references: int = 0
    placeholder_nodes: int = 0
    coerced_weights: int = 0
    skipped_nodes: int = 0
    orphan_edge_ids: list[str] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        return {
            "nodes_loaded": self.nodes_loaded,
            "edges_loaded": self.edges_loaded,
            "orphan_references": self.orphan_references,
            "placeholder_nodes": self.placeholder_nodes,
            "coerced_weights": self.coerced_weights,
            "skipped_nodes": self.skipped_nodes,
        }


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


class GraphMLLoader:
    """Convert GraphML documents into :class:`Snapshot` objects.

    Parameters
    ----------
    max_nodes:
        Safety cap on snapshot size. Nodes past the cap are skipped with a
        warning; edges touching them then count as orphans.
    include_orphan_nodes:
        Create placeholder nodes (named by their id) for edge endpoints
        that were never declared. Off by default, which keeps such edges
        out of every derived view.
    strict:
        Raise :class:`GraphMLLoadError` on the first orphan reference
        instead of recording it.
    """

    def __init__(
        self,
        max_nodes: int = 50_000,
        include_orphan_nodes: bool = False,
        strict: bool = False,
    ) -> None:
        self._max_nodes = max_nodes
        self._include_orphan_nodes = include_orphan_nodes
        self._strict = strict

    def load(self, path: str | Path) -> tuple[Snapshot, LoadStats]:
        """Read and convert a GraphML file."""
        path = Path(path)
        snapshot, stats = self.parse(path.read_text(encoding="utf-8"))
        logger.info(
            "Loaded %s: %d nodes, %d edges (%d orphan references, %d coerced weights)",
            path, stats.nodes_loaded, stats.edges_loaded,
            stats.orphan_references, stats.coerced_weights,
        )
        return snapshot, stats

    def parse(self, text: str) -> tuple[Snapshot, LoadStats]:
        """Convert a GraphML document held in memory."""
        try:
            root = ElementTree.fromstring(text)
        except ElementTree.ParseError as e:
            raise GraphMLLoadError(f"GraphML parse error: {e}") from e

        key_names = _key_names(root)
        nodes = [
            ((el.get("id") or "").strip(), _data_map(el, key_names))
            for el in _elements(root, "node")
        ]
        edges = [
            (
                (el.get("source") or "").strip(),
                (el.get("target") or "").strip(),
                _data_map(el, key_names),
            )
            for el in _elements(root, "edge")
        ]
        return self._convert(nodes, edges)

    def from_graph(self, graph: nx.Graph) -> tuple[Snapshot, LoadStats]:
        """Convert an already-built networkx graph.

        Every graph node counts as declared; edges follow networkx's
        iteration order.
        """
        nodes = [(str(nid).strip(), data) for nid, data in graph.nodes(data=True)]
        if graph.is_multigraph():
            edges = [
                (str(u).strip(), str(v).strip(), data)
                for u, v, _key, data in graph.edges(keys=True, data=True)
            ]
        else:
            edges = [
                (str(u).strip(), str(v).strip(), data)
                for u, v, data in graph.edges(data=True)
            ]
        return self._convert(nodes, edges)

    def _convert(
        self,
        raw_nodes: Iterable[tuple[str, Mapping[str, Any]]],
        raw_edges: Iterable[tuple[str, str, Mapping[str, Any]]],
    ) -> tuple[Snapshot, LoadStats]:
        stats = LoadStats()
        nodes: list[NodeRecord] = []
        known: set[str] = set()

        # Pass 1: nodes
        for nid, data in raw_nodes:
            if not nid or nid in known:
                continue
            if len(nodes) >= self._max_nodes:
                stats.skipped_nodes += 1
                continue
            nodes.append(_node_record(nid, data))
            known.add(nid)

        if stats.skipped_nodes:
            logger.warning(
                "Node cap reached (%d). Skipped %d nodes.",
                self._max_nodes, stats.skipped_nodes,
            )

        if not nodes:
            raise GraphMLLoadError("No nodes found in GraphML.")
        stats.nodes_loaded = len(nodes)

        # Pass 2: edges
        edges: list[EdgeRecord] = []
        for idx, (source, target, data) in enumerate(raw_edges):
            edge, coerced = _edge_record(source, target, idx, data)
            stats.coerced_weights += coerced

            missing = [nid for nid in dict.fromkeys((source, target)) if nid not in known]
            if missing:
                stats.orphan_references += len(missing)
                stats.orphan_edge_ids.append(edge.id)
                if self._strict:
                    raise GraphMLLoadError(
                        f"Edge {edge.id} references unknown node(s): {', '.join(missing)}"
                    )
                if self._include_orphan_nodes:
                    for nid in missing:
                        nodes.append(NodeRecord(id=nid, name=nid))
                        known.add(nid)
                        stats.placeholder_nodes += 1

            edges.append(edge)

        stats.edges_loaded = len(edges)
        if stats.orphan_references:
            logger.warning(
                "%d edge endpoint(s) reference undeclared nodes (%d edges affected)",
                stats.orphan_references, len(stats.orphan_edge_ids),
            )

        return Snapshot(nodes=tuple(nodes), edges=tuple(edges)), stats


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _local_name(tag: Any) -> str:
    return tag.rsplit("}", 1)[-1] if isinstance(tag, str) else ""


def _elements(root: ElementTree.Element, name: str) -> list[ElementTree.Element]:
    """All elements with local tag ``name``, in document order."""
    return [el for el in root.iter() if _local_name(el.tag) == name]


def _key_names(root: ElementTree.Element) -> dict[str, str]:
    """Map ``<key id=...>`` to its ``attr.name``."""
    names = {}
    for el in _elements(root, "key"):
        key_id = el.get("id") or ""
        attr_name = el.get("attr.name") or ""
        if key_id and attr_name:
            names[key_id] = attr_name
    return names


def _data_map(el: ElementTree.Element, key_names: Mapping[str, str]) -> dict[str, str]:
    """Raw, trimmed ``<data>`` text keyed by attribute name."""
    out = {}
    for data in _elements(el, "data"):
        key = data.get("key") or ""
        out[key_names.get(key, key)] = "".join(data.itertext()).strip()
    return out


def _first_present(data: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def _first_text(data: Mapping[str, Any], keys: tuple[str, ...]) -> str:
    """First non-blank string value among ``keys``."""
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return ""


def _node_record(node_id: str, data: Mapping[str, Any]) -> NodeRecord:
    return NodeRecord(
        id=node_id,
        name=_first_text(data, NODE_NAME_KEYS) or node_id,
        instruments=_first_text(data, NODE_INSTRUMENT_KEYS),
    )


def _is_clean_number(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, bool):
        return False
    if isinstance(value, str) and not value.strip():
        return True
    try:
        number = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(number) and number >= 0


def _edge_record(
    source: str,
    target: str,
    index: int,
    data: Mapping[str, Any],
) -> tuple[EdgeRecord, int]:
    """Build an edge record; also return how many weights needed coercion."""
    raw_instr = _first_present(data, EDGE_INSTRUMENT_KEYS)
    raw_credit = _first_present(data, EDGE_CREDIT_KEYS)
    coerced = sum(1 for raw in (raw_instr, raw_credit) if not _is_clean_number(raw))
    edge = EdgeRecord(
        id=f"{source}__{target}__{index}",
        source_id=source,
        target_id=target,
        instrument_weight=safe_weight(raw_instr),
        credit_weight=safe_weight(raw_credit),
    )
    return edge, coerced
