"""Graph storage, resolution and traversal module."""

from .models import Entity, Relationship, KnowledgeGraph
from .resolution import FuzzyResolver, MatchResult, Selector
from .storage import GraphStorage, LoadReport, parse_relation_line
from .traversal import PathFinder, format_path, path_names

__all__ = [
    "Entity",
    "Relationship",
    "KnowledgeGraph",
    "FuzzyResolver",
    "MatchResult",
    "Selector",
    "GraphStorage",
    "LoadReport",
    "parse_relation_line",
    "PathFinder",
    "format_path",
    "path_names",
]
