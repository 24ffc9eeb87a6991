"""Data models for the knowledge graph."""

import logging
from collections import Counter
from collections.abc import Iterator
from dataclasses import dataclass, field

from ..text import normalize_name, require_name

logger = logging.getLogger(__name__)


@dataclass
class Relationship:
    """Represents a directed, labeled edge between two entities."""

    source_entity_id: int
    target_entity_id: int
    relationship_type: str  # free-text label, e.g. "knows", "works for"


@dataclass
class Entity:
    """Represents an entity in the knowledge graph.

    The entity owns its outgoing relationships. ``entity_id`` is the
    entity's position in the graph's arena and never changes.
    """

    name: str
    entity_id: int
    relationships: list[Relationship] = field(default_factory=list)

    @property
    def is_isolated(self) -> bool:
        """True if the entity has no outgoing relationships."""
        return not self.relationships


@dataclass
class KnowledgeGraph:
    """Owns every entity and, through them, every relationship."""

    entities: list[Entity] = field(default_factory=list)  # id -> Entity
    entity_name_index: dict[str, int] = field(default_factory=dict)  # exact name -> id

    def __len__(self) -> int:
        return len(self.entities)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_name(name) in self.entity_name_index

    @property
    def relationship_count(self) -> int:
        return sum(len(entity.relationships) for entity in self.entities)

    def find_exact(self, name: str) -> Entity | None:
        """Lookup entity by exact (case-sensitive) normalized name.

        Args:
            name: Entity name to search for

        Returns:
            Entity if found, None otherwise
        """
        entity_id = self.entity_name_index.get(normalize_name(name))
        if entity_id is None:
            return None
        return self.entities[entity_id]

    def get_or_create(self, name: str) -> Entity:
        """Return the entity with this name, creating it if needed.

        Args:
            name: Raw entity name

        Returns:
            The existing or newly registered Entity

        Raises:
            EmptyInputError: If the name is empty after normalization.
        """
        entity, _ = self.add_entity(name)
        return entity

    def add_entity(self, name: str) -> tuple[Entity, bool]:
        """Add an entity to the graph.

        Args:
            name: Raw entity name

        Returns:
            Tuple of (entity, created). ``created`` is False if an entity with
            the same normalized name already existed.
        """
        normalized_name = require_name(name)

        existing_id = self.entity_name_index.get(normalized_name)
        if existing_id is not None:
            return self.entities[existing_id], False

        entity = Entity(name=normalized_name, entity_id=len(self.entities))
        self.entities.append(entity)
        self.entity_name_index[normalized_name] = entity.entity_id
        logger.debug("Created entity %r (id=%d)", entity.name, entity.entity_id)
        return entity, True

    def add_relationship(self, source: str, relationship_type: str, target: str) -> Relationship:
        """Add a directed relationship, creating missing endpoints.

        Parallel relationships are kept; nothing is merged.

        Args:
            source: Source entity name
            relationship_type: Relationship label
            target: Target entity name

        Returns:
            The new Relationship
        """
        # Nothing is created unless all three parts are non-empty.
        source_name = require_name(source, "source")
        label = require_name(relationship_type, "relationship")
        target_name = require_name(target, "target")

        source_entity = self.get_or_create(source_name)
        target_entity = self.get_or_create(target_name)

        relationship = Relationship(
            source_entity_id=source_entity.entity_id,
            target_entity_id=target_entity.entity_id,
            relationship_type=label,
        )
        source_entity.relationships.append(relationship)
        return relationship

    def list_edges(self, entity: Entity) -> list[tuple[str, Entity]]:
        """List outgoing (label, target) pairs, most recently added first."""
        return [
            (rel.relationship_type, self.entities[rel.target_entity_id])
            for rel in reversed(entity.relationships)
        ]

    def iter_entities(self) -> Iterator[Entity]:
        return iter(self.entities)

    def iter_relationships(self) -> Iterator[Relationship]:
        for entity in self.entities:
            yield from entity.relationships

    def get_stats(self) -> dict:
        """Get statistics about the graph.

        Returns:
            Dictionary with entity, relationship and per-label counts
        """
        relationship_types = Counter(
            rel.relationship_type for rel in self.iter_relationships()
        )
        return {
            "entities": len(self.entities),
            "relationships": sum(relationship_types.values()),
            "isolated_entities": sum(1 for entity in self.entities if entity.is_isolated),
            "relationship_types": dict(relationship_types),
        }

    def clear(self) -> None:
        """Drop every entity and relationship."""
        self.entities = []
        self.entity_name_index = {}
