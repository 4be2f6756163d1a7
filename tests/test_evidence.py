"""Tests for the entity model and the evidence/filter policy."""

from __future__ import annotations

import math

import pytest

from collabnet.graph.evidence import (
    cost_strength,
    display_strength,
    edge_allowed,
    traversal_cost,
)
from collabnet.graph.models import (
    EdgeRecord,
    EvidenceMode,
    NodeRecord,
    PathResult,
    Snapshot,
    Subgraph,
    safe_weight,
)

from tests.factories import edge, node


# ---------------------------------------------------------------------------
# EvidenceMode
# ---------------------------------------------------------------------------


class TestEvidenceMode:
    def test_parse_values(self):
        assert EvidenceMode.parse("instr") is EvidenceMode.INSTRUMENT
        assert EvidenceMode.parse("credit") is EvidenceMode.CREDIT
        assert EvidenceMode.parse("both") is EvidenceMode.BOTH

    def test_parse_aliases_and_case(self):
        assert EvidenceMode.parse("Instrument") is EvidenceMode.INSTRUMENT
        assert EvidenceMode.parse(" instruments ") is EvidenceMode.INSTRUMENT
        assert EvidenceMode.parse("CREDITS") is EvidenceMode.CREDIT

    def test_parse_member_passthrough(self):
        assert EvidenceMode.parse(EvidenceMode.BOTH) is EvidenceMode.BOTH

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="Unknown evidence mode"):
            EvidenceMode.parse("producer")

    def test_is_str(self):
        assert EvidenceMode.CREDIT == "credit"


# ---------------------------------------------------------------------------
# Weight coercion
# ---------------------------------------------------------------------------


class TestSafeWeight:
    @pytest.mark.parametrize("raw,expected", [
        (3, 3.0),
        ("2.5", 2.5),
        (" 4 ", 4.0),
        (0, 0.0),
    ])
    def test_numeric(self, raw, expected):
        assert safe_weight(raw) == expected

    @pytest.mark.parametrize("raw", [
        None, "", "abc", float("nan"), float("inf"), -1, "-3", True, [1],
    ])
    def test_invalid_is_zero(self, raw):
        assert safe_weight(raw) == 0.0


# ---------------------------------------------------------------------------
# Strength functions
# ---------------------------------------------------------------------------


class TestStrength:
    def setup_method(self):
        self.edge = edge("a", "b", instr=3, credit=2)

    def test_display_strength(self):
        assert display_strength(self.edge, EvidenceMode.INSTRUMENT) == 3
        assert display_strength(self.edge, EvidenceMode.CREDIT) == 2
        assert display_strength(self.edge, EvidenceMode.BOTH) == 5

    def test_cost_strength_doubles_instrument_in_both(self):
        assert cost_strength(self.edge, EvidenceMode.INSTRUMENT) == 3
        assert cost_strength(self.edge, EvidenceMode.CREDIT) == 2
        assert cost_strength(self.edge, EvidenceMode.BOTH) == 8

    def test_threshold_is_inclusive(self):
        assert edge_allowed(self.edge, EvidenceMode.BOTH, 5)
        assert not edge_allowed(self.edge, EvidenceMode.BOTH, 5.01)

    def test_threshold_zero_admits_empty_edges(self):
        empty = edge("a", "b")
        assert edge_allowed(empty, EvidenceMode.CREDIT, 0)
        assert not edge_allowed(empty, EvidenceMode.CREDIT, 0.5)

    def test_mode_selects_dimension(self):
        instr_only = edge("a", "b", instr=4)
        assert edge_allowed(instr_only, EvidenceMode.INSTRUMENT, 1)
        assert not edge_allowed(instr_only, EvidenceMode.CREDIT, 1)

    def test_traversal_cost(self):
        cost = traversal_cost(self.edge, EvidenceMode.BOTH, 0.25)
        assert cost == pytest.approx(1 / 9 + 0.25)

    def test_zero_weight_cost_is_finite(self):
        cost = traversal_cost(edge("a", "b"), EvidenceMode.BOTH, 0.0)
        assert cost == 1.0
        assert math.isfinite(cost)


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class TestRecords:
    def test_edge_endpoints(self):
        e = edge("a", "b")
        assert e.touches("a") and e.touches("b")
        assert not e.touches("c")
        assert e.other("a") == "b"
        assert e.other("b") == "a"

    def test_records_are_frozen(self):
        n = NodeRecord(id="a", name="A")
        with pytest.raises(Exception):
            n.name = "B"

    def test_subgraph_ids(self):
        sub = Subgraph(nodes=(node("a"), node("b")), edges=(edge("a", "b", eid="x"),))
        assert sub.node_ids == ["a", "b"]
        assert sub.edge_ids == ["x"]
        assert not sub.is_empty()
        assert Subgraph().is_empty()

    def test_path_result(self):
        assert PathResult(path=(), subgraph=Subgraph()).found is False
        result = PathResult(path=("a", "b", "c"), subgraph=Subgraph())
        assert result.found
        assert result.hops == 2
        assert PathResult(path=("a",), subgraph=Subgraph()).hops == 0


class TestSnapshot:
    def test_node_index(self, quartet_snapshot):
        assert quartet_snapshot.node_count == 4
        assert quartet_snapshot.edge_count == 3
        assert quartet_snapshot.node_by_id["miles"].name == "Miles Davis"
        assert "bill" in quartet_snapshot.node_ids

    def test_orphan_edges(self):
        snap = Snapshot(
            nodes=(node("a"), node("b")),
            edges=(edge("a", "b", eid="ok"), edge("a", "ghost", eid="bad")),
        )
        assert [e.id for e in snap.orphan_edges()] == ["bad"]

    def test_from_records(self):
        snap = Snapshot.from_records(
            nodes=[
                {"id": "a", "name": "Art Blakey", "instruments": "drums"},
                {"id": "b"},
                {"id": ""},
            ],
            edges=[
                {"source": "a", "target": "b", "w_instr": "3", "w_credit": "x"},
                {"id": "e1", "source_id": "b", "target_id": "a",
                 "instrument_weight": 1, "credit_weight": 2},
            ],
        )
        assert [n.id for n in snap.nodes] == ["a", "b"]
        assert snap.node_by_id["b"].name == "b"
        first, second = snap.edges
        assert first.id == "a__b__0"
        assert first.instrument_weight == 3.0
        assert first.credit_weight == 0.0
        assert second.id == "e1"
        assert second.credit_weight == 2.0

    def test_equality_ignores_index(self, quartet_nodes, quartet_edges):
        one = Snapshot(nodes=tuple(quartet_nodes), edges=tuple(quartet_edges))
        two = Snapshot(nodes=tuple(quartet_nodes), edges=tuple(quartet_edges))
        assert one == two

    def test_edge_record_defaults(self):
        e = EdgeRecord(id="e", source_id="a", target_id="b")
        assert e.instrument_weight == 0.0
        assert e.credit_weight == 0.0
