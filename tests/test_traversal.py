"""Tests for BFS path finding."""

from unittest.mock import MagicMock

import pytest

from tiny_kg.errors import (
    EntityNotFoundError,
    PathNotFoundError,
    SelectionCancelledError,
    SourceNotFoundError,
    TargetNotFoundError,
)
from tiny_kg.graph import FuzzyResolver, KnowledgeGraph, PathFinder, format_path, path_names


@pytest.fixture
def social_graph():
    """Alice -knows-> Bob -knows-> Carol, Alice -met-> Carol, plus Isolated."""
    graph = KnowledgeGraph()
    graph.add_relationship("Alice", "knows", "Bob")
    graph.add_relationship("Bob", "knows", "Carol")
    graph.add_relationship("Alice", "met", "Carol")
    graph.get_or_create("Isolated")
    return graph


class TestFindPath:
    """Tests for PathFinder.find_path."""

    def test_prefers_fewest_hops(self, social_graph):
        """Test the direct edge beats the two-hop route."""
        path = PathFinder(social_graph).find_path("Alice", "Carol")

        assert path_names(path) == ["Alice", "Carol"]

    def test_multi_hop_path(self):
        """Test a path through intermediate entities."""
        graph = KnowledgeGraph()
        graph.add_relationship("A", "r", "B")
        graph.add_relationship("B", "r", "C")
        graph.add_relationship("C", "r", "D")

        path = PathFinder(graph).find_path("A", "D")

        assert path_names(path) == ["A", "B", "C", "D"]

    def test_no_path(self, social_graph):
        """Test an unreachable target raises PathNotFoundError."""
        with pytest.raises(PathNotFoundError) as exc_info:
            PathFinder(social_graph).find_path("Alice", "Isolated")

        assert exc_info.value.source == "Alice"
        assert exc_info.value.target == "Isolated"

    def test_edges_are_directed(self, social_graph):
        """Test edges are not followed backwards."""
        with pytest.raises(PathNotFoundError):
            PathFinder(social_graph).find_path("Carol", "Alice")

    def test_source_equals_target(self, social_graph):
        """Test a zero-hop path contains just the entity."""
        path = PathFinder(social_graph).find_path("Isolated", "Isolated")

        assert path_names(path) == ["Isolated"]

    def test_cycle_terminates(self):
        """Test cycles do not cause endless traversal."""
        graph = KnowledgeGraph()
        graph.add_relationship("A", "r", "B")
        graph.add_relationship("B", "r", "A")
        graph.get_or_create("C")

        with pytest.raises(PathNotFoundError):
            PathFinder(graph).find_path("A", "C")

    def test_accepts_entities(self, social_graph):
        """Test resolved entities can be passed directly."""
        alice = social_graph.find_exact("Alice")
        bob = social_graph.find_exact("Bob")

        path = PathFinder(social_graph).find_path(alice, bob)

        assert path == [alice, bob]

    def test_fuzzy_endpoints(self, social_graph):
        """Test raw names are resolved fuzzily by default."""
        path = PathFinder(social_graph).find_path("ali", "car")

        assert path_names(path) == ["Alice", "Carol"]

    def test_exact_mode(self, social_graph):
        """Test exact mode does not fall back to fuzzy matching."""
        finder = PathFinder(social_graph)

        assert path_names(finder.find_path("Alice", "Bob", fuzzy=False)) == ["Alice", "Bob"]
        with pytest.raises(SourceNotFoundError):
            finder.find_path("ali", "Bob", fuzzy=False)

    def test_state_does_not_leak_between_queries(self, social_graph):
        """Test a previous search does not affect the next one."""
        finder = PathFinder(social_graph)

        with pytest.raises(PathNotFoundError):
            finder.find_path("Alice", "Isolated")
        first = finder.find_path("Alice", "Bob")
        second = finder.find_path("Bob", "Carol")
        third = finder.find_path("Alice", "Carol")

        assert path_names(first) == ["Alice", "Bob"]
        assert path_names(second) == ["Bob", "Carol"]
        assert path_names(third) == ["Alice", "Carol"]

    def test_entities_carry_no_search_state(self, social_graph):
        """Test searching leaves entity records untouched."""
        before = [(e.name, e.entity_id, list(e.relationships)) for e in social_graph.entities]

        PathFinder(social_graph).find_path("Alice", "Carol")

        after = [(e.name, e.entity_id, list(e.relationships)) for e in social_graph.entities]
        assert before == after

    def test_new_edges_visible_immediately(self, social_graph):
        """Test an edge added after construction is used by the next search."""
        finder = PathFinder(social_graph)
        social_graph.add_relationship("Carol", "visits", "Isolated")

        path = finder.find_path("Alice", "Isolated")

        assert path_names(path) == ["Alice", "Carol", "Isolated"]


class TestEndpointErrors:
    """Tests for endpoint resolution failures."""

    def test_source_not_found(self, social_graph):
        """Test an unknown source raises SourceNotFoundError."""
        with pytest.raises(SourceNotFoundError) as exc_info:
            PathFinder(social_graph).find_path("Zed", "Alice")

        assert isinstance(exc_info.value.__cause__, EntityNotFoundError)

    def test_target_not_found(self, social_graph):
        """Test an unknown target raises TargetNotFoundError."""
        with pytest.raises(TargetNotFoundError):
            PathFinder(social_graph).find_path("Alice", "Zed")

    def test_source_checked_before_target(self, social_graph):
        """Test the source failure is reported when both are unknown."""
        with pytest.raises(SourceNotFoundError):
            PathFinder(social_graph).find_path("Zed", "Yan")

    def test_cancelled_selection(self):
        """Test cancelling disambiguation reports the endpoint as not found."""
        graph = KnowledgeGraph()
        graph.add_relationship("Alice", "knows", "Alan")
        resolver = FuzzyResolver(graph, selector=MagicMock(return_value=0))

        with pytest.raises(SourceNotFoundError) as exc_info:
            PathFinder(graph, resolver).find_path("al", "Alan")

        assert isinstance(exc_info.value.__cause__, SelectionCancelledError)

    def test_selection_used_for_target(self):
        """Test the selector's choice becomes the target."""
        graph = KnowledgeGraph()
        graph.add_relationship("Root", "r", "Alice")
        graph.add_relationship("Root", "r", "Alan")
        resolver = FuzzyResolver(graph, selector=MagicMock(return_value=2))

        path = PathFinder(graph, resolver).find_path("Root", "al")

        assert path_names(path) == ["Root", "Alan"]


class TestFormatting:
    """Tests for path rendering helpers."""

    def test_format_path(self, social_graph):
        """Test names are joined with an arrow."""
        path = PathFinder(social_graph).find_path("Alice", "Carol")

        assert format_path(path) == "Alice -> Carol"
        assert format_path(path, arrow=" => ") == "Alice => Carol"
