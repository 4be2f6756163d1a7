"""Derived-view export for external visualization tools.

Supported formats:
  - D3 JSON: for D3.js force-directed layouts (links reference node ids)
  - Cytoscape JSON: for Cytoscape.js / Sigma.js
  - GraphML: via networkx, for Gephi and friends
  - CSV: node and edge tables for spreadsheet analysis

Exports carry the evidence strength under the active mode plus the
link-width and link-distance hints the explorer's renderer uses, so a
consumer can draw the view without re-deriving anything.
"""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from typing import Any

import networkx as nx

from collabnet.graph.evidence import display_strength
from collabnet.graph.models import EdgeRecord, EvidenceMode, Subgraph

logger = logging.getLogger(__name__)


def link_width(strength: float) -> float:
    """Stroke width for an edge of the given display strength."""
    return max(1.2, min(6.0, 1.2 + strength * 0.15))


def link_distance(strength: float) -> float:
    """Preferred link length: stronger ties pull nodes closer."""
    return max(26.0, 95.0 - min(65.0, strength * 4.0))


class SubgraphExporter:
    """Export a derived view in various formats.

    Parameters
    ----------
    subgraph:
        The egonet or path subgraph to export.
    mode:
        Evidence mode used to compute per-edge strength.
    highlight_id:
        Node to flag as the focus (egonet focus or path start).
    path:
        Ordered path ids, recorded as each node's ``path_index``.
    """

    def __init__(
        self,
        subgraph: Subgraph,
        mode: EvidenceMode | str = EvidenceMode.BOTH,
        highlight_id: str = "",
        path: list[str] | tuple[str, ...] = (),
    ) -> None:
        self._subgraph = subgraph
        self._mode = EvidenceMode.parse(mode)
        self._highlight_id = highlight_id
        self._path_index = {nid: i for i, nid in enumerate(path)}

    def _strength(self, edge: EdgeRecord) -> float:
        return display_strength(edge, self._mode)

    # -- D3 JSON -------------------------------------------------------------

    def to_d3_json(self) -> dict[str, Any]:
        """Export to D3.js force-directed JSON format."""
        nodes = []
        for node in self._subgraph.nodes:
            entry: dict[str, Any] = {
                "id": node.id,
                "name": node.name,
                "instruments": node.instruments,
                "focus": node.id == self._highlight_id,
            }
            if node.id in self._path_index:
                entry["path_index"] = self._path_index[node.id]
            nodes.append(entry)

        links = []
        for edge in self._subgraph.edges:
            strength = self._strength(edge)
            links.append({
                "id": edge.id,
                "source": edge.source_id,
                "target": edge.target_id,
                "w_instr": edge.instrument_weight,
                "w_credit": edge.credit_weight,
                "strength": strength,
                "width": link_width(strength),
                "distance": link_distance(strength),
            })

        return {"mode": self._mode.value, "nodes": nodes, "links": links}

    # -- Cytoscape JSON ------------------------------------------------------

    def to_cytoscape_json(self) -> dict[str, Any]:
        """Export to Cytoscape.js JSON format for web visualization."""
        elements: list[dict[str, Any]] = []

        for node in self._subgraph.nodes:
            elements.append({
                "data": {
                    "id": node.id,
                    "label": node.name,
                    "instruments": node.instruments,
                    "focus": node.id == self._highlight_id,
                },
                "group": "nodes",
            })

        for edge in self._subgraph.edges:
            elements.append({
                "data": {
                    "id": edge.id,
                    "source": edge.source_id,
                    "target": edge.target_id,
                    "w_instr": edge.instrument_weight,
                    "w_credit": edge.credit_weight,
                    "weight": self._strength(edge),
                },
                "group": "edges",
            })

        return {"elements": elements}

    # -- GraphML -------------------------------------------------------------

    def to_networkx(self) -> nx.MultiGraph:
        """Undirected multigraph copy of the view; parallel edges are kept."""
        graph = nx.MultiGraph()
        for node in self._subgraph.nodes:
            graph.add_node(node.id, name=node.name, instruments=node.instruments)
        for edge in self._subgraph.edges:
            graph.add_edge(
                edge.source_id,
                edge.target_id,
                key=edge.id,
                w_instr=edge.instrument_weight,
                w_credit=edge.credit_weight,
                strength=self._strength(edge),
            )
        return graph

    def to_graphml(self, path: str | Path) -> None:
        """Export to GraphML, readable back by :class:`GraphMLLoader`."""
        graph = self.to_networkx()
        nx.write_graphml(graph, str(path))
        logger.info(
            "Exported GraphML to %s (%d nodes, %d edges)",
            path, graph.number_of_nodes(), graph.number_of_edges(),
        )

    # -- CSV -----------------------------------------------------------------

    def to_csv_nodes(self) -> str:
        """Export node table as CSV string."""
        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow(["id", "name", "instruments"])

        for node in self._subgraph.nodes:
            writer.writerow([node.id, node.name, node.instruments])

        return output.getvalue()

    def to_csv_edges(self) -> str:
        """Export edge table as CSV string."""
        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow(["id", "source_id", "target_id", "w_instr", "w_credit", "strength"])

        for edge in self._subgraph.edges:
            writer.writerow([
                edge.id,
                edge.source_id,
                edge.target_id,
                edge.instrument_weight,
                edge.credit_weight,
                self._strength(edge),
            ])

        return output.getvalue()

    def to_csv_files(self, directory: str | Path) -> tuple[Path, Path]:
        """Write node and edge CSV files to a directory."""
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)

        nodes_path = directory / "nodes.csv"
        edges_path = directory / "edges.csv"

        nodes_path.write_text(self.to_csv_nodes())
        edges_path.write_text(self.to_csv_edges())

        logger.info("Exported CSV to %s (nodes + edges)", directory)
        return nodes_path, edges_path
