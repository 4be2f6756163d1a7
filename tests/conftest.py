from __future__ import annotations

from pathlib import Path

import pytest

from collabnet.graph.models import EdgeRecord, NodeRecord, Snapshot

from tests.factories import QUARTET_GRAPHML, edge, node


@pytest.fixture
def quartet_nodes() -> list[NodeRecord]:
    return [
        node("miles", "Miles Davis", "trumpet(12)"),
        node("trane", "John Coltrane", "tenor saxophone(9)"),
        node("bill", "Bill Evans", "piano(7)"),
        node("red", "Red Garland"),
    ]


@pytest.fixture
def quartet_edges() -> list[EdgeRecord]:
    return [
        edge("miles", "trane", instr=5, credit=0, eid="e-mt"),
        edge("trane", "bill", instr=0, credit=5, eid="e-tb"),
        edge("miles", "red", instr=1, credit=1, eid="e-mr"),
    ]


@pytest.fixture
def quartet_snapshot(quartet_nodes, quartet_edges) -> Snapshot:
    return Snapshot(nodes=tuple(quartet_nodes), edges=tuple(quartet_edges))


@pytest.fixture
def quartet_graphml(tmp_path) -> Path:
    path = tmp_path / "quartet.graphml"
    path.write_text(QUARTET_GRAPHML, encoding="utf-8")
    return path
