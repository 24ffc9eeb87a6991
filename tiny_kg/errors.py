"""Custom exceptions for Tiny-KG."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .graph.models import Entity


class KnowledgeGraphError(Exception):
    """Base exception for Tiny-KG."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class EmptyInputError(KnowledgeGraphError, ValueError):
    """A name or label was empty after normalization."""

    def __init__(self, field: str = "name"):
        super().__init__(f"Empty {field}")
        self.field = field


class EntityNotFoundError(KnowledgeGraphError, LookupError):
    """No entity matches the given input."""

    def __init__(self, query: str, message: str | None = None):
        super().__init__(message or f"Entity not found: {query!r}")
        self.query = query


class SourceNotFoundError(EntityNotFoundError):
    """The source endpoint of a path query could not be resolved."""

    def __init__(self, query: str):
        super().__init__(query, f"Source not found: {query!r}")


class TargetNotFoundError(EntityNotFoundError):
    """The target endpoint of a path query could not be resolved."""

    def __init__(self, query: str):
        super().__init__(query, f"Target not found: {query!r}")


class SelectionCancelledError(EntityNotFoundError):
    """The caller cancelled (or gave an invalid answer to) a disambiguation prompt."""

    def __init__(self, query: str):
        super().__init__(query, f"Selection cancelled for {query!r}")


class AmbiguousEntityError(KnowledgeGraphError):
    """Several entities match and no selector was available to choose one."""

    def __init__(self, query: str, candidates: list[Entity]):
        names = ", ".join(entity.name for entity in candidates)
        super().__init__(f"Ambiguous entity {query!r}: {names}")
        self.query = query
        self.candidates = candidates


class PathNotFoundError(KnowledgeGraphError):
    """The target is not reachable from the source."""

    def __init__(self, source: str, target: str):
        super().__init__(f"No path found from {source!r} to {target!r}")
        self.source = source
        self.target = target


class MalformedRelationLineError(KnowledgeGraphError, ValueError):
    """A relation line is not of the form ``Source|Relationship|Target``."""

    def __init__(self, line: str, reason: str, line_number: int = 0):
        location = f"line {line_number}: " if line_number else ""
        super().__init__(f"Invalid relation {location}{reason} ({line!r})")
        self.line = line
        self.reason = reason
        self.line_number = line_number


class GraphIOError(KnowledgeGraphError):
    """A relation, DOT or HTML file could not be opened, decoded or created."""

    def __init__(self, path: str | Path, action: str = "open"):
        super().__init__(f"Cannot {action} '{path}'")
        self.path = Path(path)
        self.action = action
