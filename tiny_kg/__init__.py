"""Tiny-KG: an in-memory directed knowledge graph with fuzzy lookup and BFS paths."""

import logging
from collections.abc import Iterable
from pathlib import Path

from .config import Config
from .errors import (
    AmbiguousEntityError,
    EmptyInputError,
    EntityNotFoundError,
    GraphIOError,
    KnowledgeGraphError,
    MalformedRelationLineError,
    PathNotFoundError,
    SelectionCancelledError,
    SourceNotFoundError,
    TargetNotFoundError,
)
from .graph import (
    Entity,
    FuzzyResolver,
    GraphStorage,
    KnowledgeGraph,
    LoadReport,
    PathFinder,
    Relationship,
    Selector,
)

logger = logging.getLogger(__name__)


class KnowledgeGraphEngine:
    """Main entry point: one graph plus the operations the CLI exposes."""

    def __init__(self, config: Config | None = None, selector: Selector | None = None):
        """Initialize the engine.

        Args:
            config: Optional configuration. If not provided, loads from config.yaml/environment.
            selector: Callback used to pick among ambiguous fuzzy matches.
        """
        self.config = config or Config.from_env()
        self.graph = KnowledgeGraph()
        self.resolver = FuzzyResolver(
            self.graph,
            max_suggestions=self.config.max_suggestions,
            selector=selector,
        )
        self.path_finder = PathFinder(self.graph, self.resolver)
        self.storage = GraphStorage()

    def add_entity(self, name: str) -> tuple[Entity, bool]:
        """Add an entity by name.

        Returns:
            Tuple of (entity, created); created is False if it already existed
        """
        return self.graph.add_entity(name)

    def add_relationship(self, source: str, relationship_type: str, target: str) -> Relationship:
        """Add a labeled relationship, creating missing endpoints."""
        return self.graph.add_relationship(source, relationship_type, target)

    def connections(self, query: str, fuzzy: bool = True) -> tuple[Entity, list[tuple[str, Entity]]]:
        """Resolve an entity and list its outgoing relationships.

        Args:
            query: Entity name (free text when fuzzy)
            fuzzy: Use fuzzy resolution instead of exact lookup

        Returns:
            Tuple of (entity, [(relationship_type, target), ...])

        Raises:
            EntityNotFoundError: If the entity cannot be resolved.
        """
        if fuzzy:
            entity = self.resolver.resolve(query)
        else:
            entity = self.graph.find_exact(query)
            if entity is None:
                raise EntityNotFoundError(query)
        return entity, self.graph.list_edges(entity)

    def find_path(self, source: str | Entity, target: str | Entity, fuzzy: bool = True) -> list[Entity]:
        """Find a shortest path between two entities.

        Raises:
            SourceNotFoundError, TargetNotFoundError, PathNotFoundError
        """
        return self.path_finder.find_path(source, target, fuzzy=fuzzy)

    def load_file(self, path: str | Path | None = None) -> LoadReport:
        """Load a relation file into the current graph.

        Args:
            path: Relation file; defaults to the configured data file
        """
        return self.storage.load_relations(self.graph, path or self.config.data_file)

    def add_lines(self, lines: Iterable[str]) -> LoadReport:
        """Add ``Source|Relationship|Target`` lines typed or piped by the user."""
        return self.storage.add_lines(self.graph, lines)

    def save_file(self, path: str | Path | None = None) -> int:
        """Save the graph as a relation file.

        Returns:
            Number of relations written
        """
        return self.storage.save_relations(self.graph, path or self.config.data_file)

    def export_dot(self, path: str | Path | None = None) -> Path:
        """Export the graph to a Graphviz DOT file."""
        return self.storage.export_dot(self.graph, path or self.config.dot_file)

    def visualize(
        self,
        output_path: str | Path | None = None,
        highlight: list[Entity] | None = None,
        max_nodes: int = 200,
        show: bool = False,
    ) -> Path:
        """Visualize the graph as an interactive HTML file.

        Args:
            output_path: Path to save HTML visualization (default from config)
            highlight: Optional path to emphasize
            max_nodes: Maximum number of nodes to display
            show: Whether to open in browser automatically

        Returns:
            The written path
        """
        from .visualization import PyVisVisualizer

        viz = PyVisVisualizer(graph=self.graph, max_nodes=max_nodes, highlight_path=highlight)
        viz.generate()
        written = viz.save(output_path or self.config.html_file)

        if show:
            viz.show()
        return written

    def get_stats(self) -> dict:
        """Get statistics about the current knowledge graph."""
        return self.graph.get_stats()

    def reset(self) -> None:
        """Drop the whole graph."""
        self.graph.clear()
        logger.info("Graph reset")


__all__ = [
    "KnowledgeGraphEngine",
    "Config",
    "Entity",
    "Relationship",
    "KnowledgeGraph",
    "LoadReport",
    "KnowledgeGraphError",
    "EmptyInputError",
    "EntityNotFoundError",
    "SourceNotFoundError",
    "TargetNotFoundError",
    "SelectionCancelledError",
    "AmbiguousEntityError",
    "PathNotFoundError",
    "MalformedRelationLineError",
    "GraphIOError",
]
