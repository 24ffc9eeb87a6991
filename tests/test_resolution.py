"""Tests for fuzzy entity resolution."""

from unittest.mock import MagicMock

import pytest

from tiny_kg.errors import AmbiguousEntityError, EntityNotFoundError, SelectionCancelledError
from tiny_kg.graph import FuzzyResolver, KnowledgeGraph


@pytest.fixture
def people_graph():
    """Graph with Alice, Alan and Bob."""
    graph = KnowledgeGraph()
    for name in ("Alice", "Alan", "Bob"):
        graph.get_or_create(name)
    return graph


class TestMatchTiers:
    """Tests for the exact -> prefix -> substring policy."""

    def test_exact_tier_is_case_insensitive(self, people_graph):
        """Test an exact match ignores case."""
        resolver = FuzzyResolver(people_graph)

        result = resolver.match("ALICE")

        assert result.tier == "exact"
        assert [e.name for e in result.candidates] == ["Alice"]

    def test_prefix_tier(self, people_graph):
        """Test prefix matches are collected when nothing matches exactly."""
        resolver = FuzzyResolver(people_graph)

        result = resolver.match("al")

        assert result.tier == "prefix"
        assert {e.name for e in result.candidates} == {"Alice", "Alan"}
        assert result.is_ambiguous

    def test_substring_tier(self, people_graph):
        """Test substring matching is the last resort."""
        resolver = FuzzyResolver(people_graph)

        result = resolver.match("OB")

        assert result.tier == "substring"
        assert [e.name for e in result.candidates] == ["Bob"]

    def test_prefix_hit_skips_substring(self):
        """Test substring candidates are ignored once prefix finds something."""
        graph = KnowledgeGraph()
        graph.get_or_create("Alan")
        graph.get_or_create("Cal")
        resolver = FuzzyResolver(graph)

        result = resolver.match("al")

        assert result.tier == "prefix"
        assert [e.name for e in result.candidates] == ["Alan"]

    def test_exact_beats_longer_prefix(self):
        """Test an exact match wins over names it is a prefix of."""
        graph = KnowledgeGraph()
        graph.get_or_create("Alice Cooper")
        graph.get_or_create("Alice")
        resolver = FuzzyResolver(graph)

        result = resolver.match("alice")

        assert result.tier == "exact"
        assert result.candidates[0].name == "Alice"

    def test_input_is_normalized(self):
        """Test surrounding and repeated whitespace in the query is ignored."""
        graph = KnowledgeGraph()
        graph.get_or_create("New York")
        resolver = FuzzyResolver(graph)

        result = resolver.match("  new    york ")

        assert result.tier == "exact"
        assert result.query == "new york"

    def test_empty_input_matches_nothing(self, people_graph):
        """Test blank input produces no candidates."""
        resolver = FuzzyResolver(people_graph)

        result = resolver.match("   ")

        assert result.tier == "none"
        assert result.candidates == []

    def test_no_match(self, people_graph):
        """Test unrelated input produces no candidates."""
        result = FuzzyResolver(people_graph).match("zed")

        assert result.tier == "none"
        assert result.candidates == []

    def test_candidates_capped(self):
        """Test collection stops at max_suggestions."""
        graph = KnowledgeGraph()
        for i in range(20):
            graph.get_or_create(f"Item {i:02d}")

        assert len(FuzzyResolver(graph).match("item").candidates) == 16
        assert len(FuzzyResolver(graph, max_suggestions=3).match("item").candidates) == 3
        assert len(FuzzyResolver(graph, max_suggestions=3).match("tem").candidates) == 3

    def test_invalid_cap(self, people_graph):
        """Test a cap below one is rejected."""
        with pytest.raises(ValueError):
            FuzzyResolver(people_graph, max_suggestions=0)


class TestResolve:
    """Tests for resolve() and disambiguation."""

    def test_unique_match_needs_no_selector(self, people_graph):
        """Test a single candidate is returned without prompting."""
        selector = MagicMock()
        resolver = FuzzyResolver(people_graph, selector=selector)

        assert resolver.resolve("ALICE").name == "Alice"
        assert resolver.resolve("ob").name == "Bob"
        selector.assert_not_called()

    def test_selector_picks_candidate(self, people_graph):
        """Test the 1-indexed choice selects from the candidate list."""
        selector = MagicMock(return_value=2)
        resolver = FuzzyResolver(people_graph, selector=selector)

        entity = resolver.resolve("al")

        candidates = selector.call_args.args[0]
        assert len(candidates) == 2
        assert entity is candidates[1]

    def test_per_call_selector_overrides_default(self, people_graph):
        """Test a selector passed to resolve() wins over the default."""
        default = MagicMock(return_value=1)
        override = MagicMock(return_value=1)
        resolver = FuzzyResolver(people_graph, selector=default)

        resolver.resolve("al", selector=override)

        override.assert_called_once()
        default.assert_not_called()

    @pytest.mark.parametrize("choice", [0, None, 3, -1])
    def test_cancel_or_out_of_range(self, people_graph, choice):
        """Test cancel and out-of-range answers raise SelectionCancelledError."""
        resolver = FuzzyResolver(people_graph, selector=MagicMock(return_value=choice))

        with pytest.raises(SelectionCancelledError):
            resolver.resolve("al")

    def test_cancel_is_a_not_found(self, people_graph):
        """Test cancellation can be handled as not found."""
        resolver = FuzzyResolver(people_graph, selector=lambda candidates: 0)

        with pytest.raises(EntityNotFoundError):
            resolver.resolve("al")

    def test_ambiguous_without_selector(self, people_graph):
        """Test ambiguity without a selector exposes the candidates."""
        resolver = FuzzyResolver(people_graph)

        with pytest.raises(AmbiguousEntityError) as exc_info:
            resolver.resolve("al")

        assert {e.name for e in exc_info.value.candidates} == {"Alice", "Alan"}

    def test_not_found(self, people_graph):
        """Test unmatched input raises EntityNotFoundError."""
        with pytest.raises(EntityNotFoundError):
            FuzzyResolver(people_graph).resolve("Zed")

    def test_empty_input_not_found(self, people_graph):
        """Test blank input fails without prompting."""
        selector = MagicMock()

        with pytest.raises(EntityNotFoundError):
            FuzzyResolver(people_graph, selector=selector).resolve("  ")
        selector.assert_not_called()

    def test_resolution_does_not_mutate_graph(self, people_graph):
        """Test resolving never creates entities."""
        resolver = FuzzyResolver(people_graph, selector=lambda candidates: 0)

        for query in ("al", "Zed", "ALICE", ""):
            try:
                resolver.resolve(query)
            except EntityNotFoundError:
                pass

        assert len(people_graph) == 3

    def test_sees_entities_added_later(self, people_graph):
        """Test the resolver works on the live graph."""
        resolver = FuzzyResolver(people_graph)
        people_graph.get_or_create("Zed")

        assert resolver.resolve("zed").name == "Zed"
