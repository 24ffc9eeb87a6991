"""Graph loading, saving and DOT export."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from ..errors import GraphIOError, MalformedRelationLineError
from ..text import normalize_name
from .models import KnowledgeGraph

logger = logging.getLogger(__name__)

DELIMITER = "|"
COMMENT_PREFIX = "#"

DOT_HEADER = """digraph KnowledgeGraph {
  rankdir=LR;
  layout=dot;
  graph [splines=true, overlap=false, ranksep=1.3, nodesep=1.0, fontsize=12, fontname="Calibri", bgcolor="#FFFFFF"];
  node [shape=box, style=filled, fontname="Calibri", fontsize=11, penwidth=1.5, color="#1A73E8", fillcolor="#E8F0FE", fontcolor="#202124"];
  edge [color="#5F6368", fontname="Calibri", fontsize=10, penwidth=1.3, arrowsize=0.85, fontcolor="#3C4043"];
"""


@dataclass
class LoadReport:
    """Outcome of a batch import."""

    loaded: int = 0
    skipped: int = 0
    errors: list[MalformedRelationLineError] = field(default_factory=list)


def parse_relation_line(line: str, line_number: int = 0) -> tuple[str, str, str]:
    """Split a ``Source|Relationship|Target`` line into normalized parts.

    Everything after the second delimiter belongs to the target.

    Args:
        line: Raw line (without the trailing newline)
        line_number: 1-based line number used in error messages

    Returns:
        Tuple of (source, relationship, target)

    Raises:
        MalformedRelationLineError: If a delimiter is missing or a part is empty.
    """
    parts = line.split(DELIMITER, 2)
    if len(parts) != 3:
        raise MalformedRelationLineError(line, "expected Source|Relationship|Target", line_number)

    source, relationship, target = (normalize_name(part) for part in parts)
    if not (source and relationship and target):
        raise MalformedRelationLineError(line, "empty field", line_number)
    return source, relationship, target


def _dot_quote(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class GraphStorage:
    """Save and load knowledge graphs."""

    def add_lines(self, graph: KnowledgeGraph, lines: Iterable[str]) -> LoadReport:
        """Add relation lines to the graph, skipping malformed ones.

        Args:
            graph: KnowledgeGraph to add to
            lines: Relation lines; blanks and ``#`` comments are ignored

        Returns:
            LoadReport with loaded/skipped counts
        """
        report = LoadReport()
        for line_number, raw_line in enumerate(lines, start=1):
            line = raw_line.strip()
            if not line or line.startswith(COMMENT_PREFIX):
                continue

            try:
                source, relationship, target = parse_relation_line(line, line_number)
            except MalformedRelationLineError as e:
                logger.warning("Skipping invalid line %d: %r", line_number, line)
                report.skipped += 1
                report.errors.append(e)
                continue

            graph.add_relationship(source, relationship, target)
            report.loaded += 1

        return report

    def load_relations(self, graph: KnowledgeGraph, path: str | Path) -> LoadReport:
        """Load relations from a text file into the graph.

        Args:
            graph: KnowledgeGraph to add to
            path: File path to load from

        Returns:
            LoadReport with loaded/skipped counts

        Raises:
            GraphIOError: If the file cannot be opened or is not valid UTF-8.
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                # Only newlines end a line; other Unicode line breaks stay inside names.
                lines = f.read().split("\n")
        except UnicodeDecodeError as e:
            raise GraphIOError(path, "decode") from e
        except OSError as e:
            raise GraphIOError(path, "open") from e

        report = self.add_lines(graph, lines)
        logger.info(
            "Loaded %d relations from '%s' (skipped %d)", report.loaded, path, report.skipped
        )
        return report

    def save_relations(self, graph: KnowledgeGraph, path: str | Path) -> int:
        """Save every relationship as a ``Source|Relationship|Target`` line.

        Delimiters inside names or labels are written as-is.

        Args:
            graph: KnowledgeGraph to save
            path: File path to save to

        Returns:
            Number of lines written
        """
        lines = [
            DELIMITER.join((entity.name, rel.relationship_type, graph.entities[rel.target_entity_id].name))
            for entity in graph.iter_entities()
            for rel in entity.relationships
        ]
        self._write(path, "".join(f"{line}\n" for line in lines))
        logger.info("Saved %d relations to '%s'", len(lines), path)
        return len(lines)

    def to_dot(self, graph: KnowledgeGraph) -> str:
        """Render the graph in Graphviz DOT.

        Args:
            graph: KnowledgeGraph to render

        Returns:
            DOT source text
        """
        body: list[str] = []
        for entity in graph.iter_entities():
            if entity.is_isolated:
                body.append(f"  {_dot_quote(entity.name)};")
            for rel in entity.relationships:
                target = graph.entities[rel.target_entity_id]
                body.append(
                    f"  {_dot_quote(entity.name)} -> {_dot_quote(target.name)}"
                    f" [label={_dot_quote(rel.relationship_type)}];"
                )
        return DOT_HEADER + "\n" + "".join(f"{line}\n" for line in body) + "}\n"

    def export_dot(self, graph: KnowledgeGraph, path: str | Path) -> Path:
        """Write the DOT rendering of the graph to a file.

        Render it with e.g. ``dot -Tpng -Gdpi=300 kg_graph.dot -o graph.png``.

        Args:
            graph: KnowledgeGraph to export
            path: Output .dot path

        Returns:
            The written path
        """
        path = Path(path)
        self._write(path, self.to_dot(graph), action="create")
        logger.info("Exported DOT to '%s'", path)
        return path

    def _write(self, path: str | Path, text: str, action: str = "write") -> None:
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                f.write(text)
        except OSError as e:
            raise GraphIOError(path, action) from e
