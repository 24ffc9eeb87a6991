"""Fuzzy entity resolution: exact, prefix, then substring matching."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Optional

from ..errors import AmbiguousEntityError, EntityNotFoundError, SelectionCancelledError
from ..text import (
    contains_ignore_case,
    equals_ignore_case,
    normalize_name,
    startswith_ignore_case,
)
from .models import Entity, KnowledgeGraph

logger = logging.getLogger(__name__)

# Receives the candidate list, returns a 1-indexed choice; 0 or None cancels.
Selector = Callable[[list[Entity]], Optional[int]]

DEFAULT_MAX_SUGGESTIONS = 16


@dataclass
class MatchResult:
    """Candidates produced by one resolution attempt."""

    query: str
    tier: str  # exact, prefix, substring, none
    candidates: list[Entity] = field(default_factory=list)

    @property
    def is_ambiguous(self) -> bool:
        return len(self.candidates) > 1


@dataclass
class FuzzyResolver:
    """Resolve free-text input to a single entity of the graph."""

    graph: KnowledgeGraph
    max_suggestions: int = DEFAULT_MAX_SUGGESTIONS
    selector: Selector | None = None

    def __post_init__(self) -> None:
        if self.max_suggestions < 1:
            raise ValueError("max_suggestions must be at least 1")

    def match(self, raw: str) -> MatchResult:
        """Collect candidates for the input, stopping at the first non-empty tier.

        Args:
            raw: Free-text user input

        Returns:
            MatchResult with the tier that produced the candidates
        """
        query = normalize_name(raw)
        if not query:
            return MatchResult(query=query, tier="none")

        for entity in self.graph.iter_entities():
            if equals_ignore_case(entity.name, query):
                return MatchResult(query=query, tier="exact", candidates=[entity])

        prefix_matches = self._collect(query, startswith_ignore_case)
        if prefix_matches:
            return MatchResult(query=query, tier="prefix", candidates=prefix_matches)

        substring_matches = self._collect(query, contains_ignore_case)
        if substring_matches:
            return MatchResult(query=query, tier="substring", candidates=substring_matches)

        return MatchResult(query=query, tier="none")

    def resolve(self, raw: str, selector: Selector | None = None) -> Entity:
        """Resolve input to one entity, asking the selector when ambiguous.

        Args:
            raw: Free-text user input
            selector: Overrides the resolver's default selector for this call

        Returns:
            The resolved Entity

        Raises:
            EntityNotFoundError: If nothing matches.
            SelectionCancelledError: If the selector cancels or answers out of range.
            AmbiguousEntityError: If several entities match and no selector is set.
        """
        result = self.match(raw)
        if not result.candidates:
            raise EntityNotFoundError(result.query or raw)

        if not result.is_ambiguous:
            return result.candidates[0]

        selector = selector or self.selector
        if selector is None:
            raise AmbiguousEntityError(result.query, result.candidates)

        choice = selector(result.candidates)
        if choice is None or not 1 <= choice <= len(result.candidates):
            logger.info("Selection cancelled for %r (choice=%r)", result.query, choice)
            raise SelectionCancelledError(result.query)
        return result.candidates[choice - 1]

    def _collect(self, query: str, predicate: Callable[[str, str], bool]) -> list[Entity]:
        matches: list[Entity] = []
        for entity in self.graph.iter_entities():
            if predicate(entity.name, query):
                matches.append(entity)
                if len(matches) >= self.max_suggestions:
                    break
        return matches
