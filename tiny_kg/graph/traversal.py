"""Shortest-path search over the knowledge graph."""

from __future__ import annotations

from collections import deque

from ..errors import (
    EntityNotFoundError,
    PathNotFoundError,
    SourceNotFoundError,
    TargetNotFoundError,
)
from .models import Entity, KnowledgeGraph
from .resolution import FuzzyResolver

EntityRef = Entity | str


class PathFinder:
    """Unweighted shortest paths following relationship direction."""

    def __init__(self, graph: KnowledgeGraph, resolver: FuzzyResolver | None = None):
        """Initialize the path finder with a graph.

        Args:
            graph: KnowledgeGraph to traverse
            resolver: Resolver used for fuzzy endpoint lookup
        """
        self.graph = graph
        self.resolver = resolver or FuzzyResolver(graph)

    def find_path(
        self, source: EntityRef, target: EntityRef, fuzzy: bool = True
    ) -> list[Entity]:
        """Find a shortest path from source to target.

        Args:
            source: Source entity or raw name
            target: Target entity or raw name
            fuzzy: Resolve raw names with the fuzzy resolver instead of exact lookup

        Returns:
            Entities on the path, source first and target last

        Raises:
            SourceNotFoundError: If the source cannot be resolved.
            TargetNotFoundError: If the target cannot be resolved.
            PathNotFoundError: If the target is unreachable from the source.
        """
        try:
            source_entity = self._resolve(source, fuzzy)
        except EntityNotFoundError as e:
            raise SourceNotFoundError(e.query) from e
        try:
            target_entity = self._resolve(target, fuzzy)
        except EntityNotFoundError as e:
            raise TargetNotFoundError(e.query) from e

        return self.bfs(source_entity, target_entity)

    def bfs(self, source: Entity, target: Entity) -> list[Entity]:
        """Breadth-first search between two resolved entities.

        Visited marks and predecessors are local to this call.
        """
        visited: set[int] = {source.entity_id}
        predecessor: dict[int, int] = {}
        queue: deque[int] = deque([source.entity_id])

        while queue:
            current_id = queue.popleft()
            if current_id == target.entity_id:
                return self._reconstruct(predecessor, source.entity_id, current_id)

            for rel in self.graph.entities[current_id].relationships:
                neighbor_id = rel.target_entity_id
                if neighbor_id not in visited:
                    visited.add(neighbor_id)
                    predecessor[neighbor_id] = current_id
                    queue.append(neighbor_id)

        raise PathNotFoundError(source.name, target.name)

    def _resolve(self, ref: EntityRef, fuzzy: bool) -> Entity:
        if isinstance(ref, Entity):
            return ref
        if fuzzy:
            return self.resolver.resolve(ref)
        entity = self.graph.find_exact(ref)
        if entity is None:
            raise EntityNotFoundError(ref)
        return entity

    def _reconstruct(
        self, predecessor: dict[int, int], source_id: int, target_id: int
    ) -> list[Entity]:
        path_ids = [target_id]
        while path_ids[-1] != source_id:
            path_ids.append(predecessor[path_ids[-1]])
        path_ids.reverse()
        return [self.graph.entities[eid] for eid in path_ids]


def path_names(path: list[Entity]) -> list[str]:
    return [entity.name for entity in path]


def format_path(path: list[Entity], arrow: str = " -> ") -> str:
    """Render a path as entity names joined by an arrow."""
    return arrow.join(path_names(path))
