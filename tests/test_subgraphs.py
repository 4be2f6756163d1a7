"""Tests for the egonet and path-subgraph builders."""

from __future__ import annotations

from collabnet.graph.subgraphs import build_egonet, build_path_subgraph

from tests.factories import edge, node


class TestEgonet:
    def test_quartet_egonet(self, quartet_nodes, quartet_edges):
        sub = build_egonet(quartet_nodes, quartet_edges, "miles", "both", 1)
        assert set(sub.node_ids) == {"miles", "trane", "red"}
        assert set(sub.edge_ids) == {"e-mt", "e-mr"}

    def test_preserves_snapshot_order(self, quartet_nodes, quartet_edges):
        sub = build_egonet(quartet_nodes, quartet_edges, "trane", "both", 1)
        assert sub.node_ids == ["miles", "trane", "bill"]

    def test_includes_links_between_neighbors(self):
        nodes = [node("a"), node("b"), node("c"), node("z")]
        edges = [
            edge("a", "b", instr=2, eid="ab"),
            edge("a", "c", instr=2, eid="ac"),
            edge("b", "c", credit=3, eid="bc"),
            edge("c", "z", instr=9, eid="cz"),
        ]
        sub = build_egonet(nodes, edges, "a", "both", 1)
        assert set(sub.node_ids) == {"a", "b", "c"}
        assert set(sub.edge_ids) == {"ab", "ac", "bc"}

    def test_neighbor_link_must_pass_filter(self):
        nodes = [node("a"), node("b"), node("c")]
        edges = [
            edge("a", "b", instr=2, eid="ab"),
            edge("a", "c", instr=2, eid="ac"),
            edge("b", "c", credit=0.5, eid="bc"),
        ]
        sub = build_egonet(nodes, edges, "a", "both", 1)
        assert set(sub.edge_ids) == {"ab", "ac"}

    def test_focus_without_qualifying_edges(self, quartet_nodes, quartet_edges):
        sub = build_egonet(quartet_nodes, quartet_edges, "red", "instr", 2)
        assert sub.node_ids == ["red"]
        assert sub.edges == ()

    def test_threshold_above_strongest_edge(self, quartet_nodes, quartet_edges):
        sub = build_egonet(quartet_nodes, quartet_edges, "miles", "both", 1000)
        assert sub.node_ids == ["miles"]
        assert sub.edges == ()

    def test_unknown_focus(self, quartet_nodes, quartet_edges):
        sub = build_egonet(quartet_nodes, quartet_edges, "nobody", "both", 0)
        assert sub.is_empty()
        assert sub.edges == ()

    def test_raising_threshold_only_shrinks(self, quartet_nodes, quartet_edges):
        previous = None
        for min_weight in (0, 1, 2, 3, 5, 6):
            sub = build_egonet(quartet_nodes, quartet_edges, "miles", "both", min_weight)
            current = (set(sub.node_ids), set(sub.edge_ids))
            if previous is not None:
                assert current[0] <= previous[0]
                assert current[1] <= previous[1]
            previous = current

    def test_parallel_edges_kept(self):
        nodes = [node("a"), node("b")]
        edges = [
            edge("a", "b", instr=2, eid="p1"),
            edge("b", "a", credit=4, eid="p2"),
        ]
        sub = build_egonet(nodes, edges, "a", "both", 1)
        assert sub.edge_ids == ["p1", "p2"]

    def test_orphan_endpoint_excluded(self):
        nodes = [node("a"), node("b")]
        edges = [
            edge("a", "b", instr=2, eid="ab"),
            edge("a", "ghost", instr=9, eid="ag"),
        ]
        sub = build_egonet(nodes, edges, "a", "both", 1)
        assert sub.node_ids == ["a", "b"]
        assert sub.edge_ids == ["ab"]

    def test_mode_changes_neighborhood(self, quartet_nodes, quartet_edges):
        sub = build_egonet(quartet_nodes, quartet_edges, "miles", "credit", 1)
        assert set(sub.node_ids) == {"miles", "red"}
        assert sub.edge_ids == ["e-mr"]


class TestPathSubgraph:
    def test_quartet_path(self, quartet_nodes, quartet_edges):
        sub = build_path_subgraph(
            quartet_nodes, quartet_edges, ["miles", "trane", "bill"], "both", 1
        )
        assert set(sub.node_ids) == {"miles", "trane", "bill"}
        assert set(sub.edge_ids) == {"e-mt", "e-tb"}

    def test_all_parallel_hop_edges(self):
        nodes = [node("a"), node("b"), node("c")]
        edges = [
            edge("a", "b", instr=3, eid="ab1"),
            edge("b", "a", credit=2, eid="ab2"),
            edge("a", "b", credit=0.2, eid="ab-weak"),
            edge("b", "c", instr=1, eid="bc"),
        ]
        sub = build_path_subgraph(nodes, edges, ["a", "b", "c"], "both", 1)
        assert sub.edge_ids == ["ab1", "ab2", "bc"]

    def test_non_consecutive_edges_excluded(self):
        nodes = [node("a"), node("b"), node("c")]
        edges = [
            edge("a", "b", instr=3, eid="ab"),
            edge("b", "c", instr=3, eid="bc"),
            edge("a", "c", instr=3, eid="ac"),
        ]
        sub = build_path_subgraph(nodes, edges, ["a", "b", "c"], "both", 1)
        assert set(sub.edge_ids) == {"ab", "bc"}

    def test_empty_path(self, quartet_nodes, quartet_edges):
        sub = build_path_subgraph(quartet_nodes, quartet_edges, [], "both", 1)
        assert sub.is_empty()
        assert sub.edges == ()

    def test_single_node_path(self, quartet_nodes, quartet_edges):
        sub = build_path_subgraph(quartet_nodes, quartet_edges, ["bill"], "both", 1)
        assert sub.node_ids == ["bill"]
        assert sub.edges == ()
