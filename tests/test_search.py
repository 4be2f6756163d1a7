"""Tests for the name matcher."""

from __future__ import annotations

from collabnet.graph.search import normalize, top_matches

from tests.factories import node


def _names(nodes):
    return [n.name for n in nodes]


class TestTopMatches:
    def setup_method(self):
        self.nodes = [
            node("1", "Bill Miller"),
            node("2", "Milt Jackson"),
            node("3", "Jimmy Smith"),
            node("4", "Miles Davis"),
            node("5", "Red Garland"),
        ]

    def test_prefix_tier_before_contains_tier(self):
        result = top_matches(self.nodes, "mi")
        assert _names(result) == ["Milt Jackson", "Miles Davis", "Bill Miller", "Jimmy Smith"]

    def test_case_and_whitespace_insensitive(self):
        assert _names(top_matches(self.nodes, "  MILES ")) == ["Miles Davis"]

    def test_limit_truncates(self):
        assert _names(top_matches(self.nodes, "mi", limit=2)) == ["Milt Jackson", "Miles Davis"]

    def test_empty_query(self):
        assert top_matches(self.nodes, "") == []
        assert top_matches(self.nodes, "   ") == []

    def test_non_positive_limit(self):
        assert top_matches(self.nodes, "mi", limit=0) == []

    def test_no_match(self):
        assert top_matches(self.nodes, "zzz") == []

    def test_quartet_example(self, quartet_nodes):
        result = top_matches(quartet_nodes, "mi")
        assert result[0].name == "Miles Davis"

    def test_default_limit(self):
        many = [node(str(i), f"Sideman {i}") for i in range(30)]
        assert len(top_matches(many, "side")) == 12


class TestNormalize:
    def test_casefold(self):
        assert normalize("  Straße ") == "strasse"

    def test_none_safe(self):
        assert normalize(None) == ""
