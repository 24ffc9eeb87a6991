"""CLI entry point for Tiny-KG."""

import argparse
import logging
import sys

from tiny_kg import Config, KnowledgeGraphEngine, KnowledgeGraphError
from tiny_kg.graph import Entity, format_path, parse_relation_line

MENU = """
[ MENU ]
 1. Add Entity
 2. Add Relationship
 3. Display Connections (fuzzy)
 4. Find Connection Path (BFS + fuzzy)
 5. Load Graph from File
 6. Batch Input (N lines: src|rel|tgt)
 7. Save Graph to File
 8. Export Graph to DOT
 9. Visualize Graph (HTML)
 0. Exit"""


def main():
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Tiny-KG: in-memory knowledge graph with fuzzy lookup and shortest paths"
    )
    parser.add_argument("-c", "--config", help="Path to config.yaml")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Interactive command
    interactive_parser = subparsers.add_parser("interactive", help="Interactive menu")
    interactive_parser.add_argument("-f", "--file", help="Relation file to load at start")

    # Connections command
    connections_parser = subparsers.add_parser(
        "connections", help="Show outgoing relationships of an entity"
    )
    connections_parser.add_argument("entity", help="Entity name (fuzzy)")
    _add_file_argument(connections_parser)

    # Path command
    path_parser = subparsers.add_parser("path", help="Find a shortest path between two entities")
    path_parser.add_argument("source", help="Source entity name")
    path_parser.add_argument("target", help="Target entity name")
    path_parser.add_argument(
        "--exact", action="store_true", help="Match names exactly instead of fuzzy matching"
    )
    _add_file_argument(path_parser)

    # Stats command
    stats_parser = subparsers.add_parser("stats", help="Show graph statistics")
    _add_file_argument(stats_parser)

    # Convert command
    convert_parser = subparsers.add_parser(
        "convert", help="Load a relation file and save it normalized"
    )
    _add_file_argument(convert_parser)
    convert_parser.add_argument("-o", "--output", required=True, help="Output relation file")

    # Export DOT command
    dot_parser = subparsers.add_parser("export-dot", help="Export graph to Graphviz DOT")
    _add_file_argument(dot_parser)
    dot_parser.add_argument("-o", "--output", help="Output .dot file (default from config)")

    # Visualize command
    visualize_parser = subparsers.add_parser("visualize", help="Visualize knowledge graph")
    _add_file_argument(visualize_parser)
    visualize_parser.add_argument("-o", "--output", help="Output HTML file (default from config)")
    visualize_parser.add_argument(
        "--path", nargs=2, metavar=("SOURCE", "TARGET"), help="Highlight a shortest path"
    )
    visualize_parser.add_argument(
        "--max-nodes", type=int, default=200, help="Maximum nodes to display (default: 200)"
    )
    visualize_parser.add_argument(
        "--open", action="store_true", help="Open the result in a browser"
    )

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    try:
        config = Config.from_yaml(args.config)
        logging.basicConfig(
            level=config.log_level,
            format="%(levelname)s %(name)s: %(message)s",
        )
        engine = KnowledgeGraphEngine(config, selector=prompt_choice)

        if args.command == "interactive":
            run_interactive(engine, args)
        elif args.command == "connections":
            run_connections(engine, args)
        elif args.command == "path":
            run_path(engine, args)
        elif args.command == "stats":
            run_stats(engine, args)
        elif args.command == "convert":
            run_convert(engine, args)
        elif args.command == "export-dot":
            run_export_dot(engine, args)
        elif args.command == "visualize":
            run_visualize(engine, args)
    except MemoryError:
        print("Fatal: memory allocation failed", file=sys.stderr)
        sys.exit(2)
    except (KnowledgeGraphError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def _add_file_argument(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "-f", "--file", help="Relation file (Source|Relationship|Target per line, default from config)"
    )


def prompt_choice(candidates: list[Entity]) -> int | None:
    """Ask the user to pick one of several matching entities.

    Returns:
        1-indexed choice, or None when the user cancels
    """
    print("\nDid you mean:")
    for i, entity in enumerate(candidates, start=1):
        print(f"  {i:2d}) {entity.name}")
    answer = _read(f"Choose (1-{len(candidates)}) or 0 to cancel: ")
    try:
        return int(answer)
    except ValueError:
        return None


def _read(prompt: str) -> str:
    try:
        return input(prompt).strip()
    except EOFError:
        return ""


def _load(engine: KnowledgeGraphEngine, path: str | None) -> None:
    report = engine.load_file(path)
    print(
        f"Loaded {report.loaded} relations from '{path or engine.config.data_file}' "
        f"(skipped {report.skipped})"
    )
    for error in report.errors:
        print(f"  Skipped line {error.line_number}: {error.line}")


def print_connections(entity: Entity, edges: list[tuple[str, Entity]]) -> None:
    print(f"\nConnections of: {entity.name}")
    print("-" * 50)
    if not edges:
        print("  (No outgoing relationships)")
        return
    print(f"  {'Target Entity':<28} | {'Relationship':<28}")
    for relationship_type, target in edges:
        print(f"  {target.name:<28} | {relationship_type:<28}")


def run_connections(engine, args):
    """Show the outgoing relationships of one entity."""
    _load(engine, args.file)
    entity, edges = engine.connections(args.entity)
    print_connections(entity, edges)


def run_path(engine, args):
    """Find and print a shortest path."""
    _load(engine, args.file)
    path = engine.find_path(args.source, args.target, fuzzy=not args.exact)
    print("\nPath found:")
    print(f"  {format_path(path)}")
    print(f"  ({len(path) - 1} hops)")


def run_stats(engine, args):
    """Show statistics for a relation file."""
    _load(engine, args.file)

    stats = engine.get_stats()
    print("Graph Statistics:")
    print(f"  Total entities: {stats['entities']}")
    print(f"  Total relationships: {stats['relationships']}")
    print(f"  Isolated entities: {stats['isolated_entities']}")

    if stats.get("relationship_types"):
        print("\n  Relationship types:")
        for rtype, count in sorted(stats["relationship_types"].items()):
            print(f"    {rtype}: {count}")


def run_convert(engine, args):
    """Load a relation file and write it back out."""
    _load(engine, args.file)
    count = engine.save_file(args.output)
    print(f"Saved {count} relations to '{args.output}'")


def run_export_dot(engine, args):
    """Export the graph to DOT."""
    _load(engine, args.file)
    path = engine.export_dot(args.output)
    print(f"DOT file exported to '{path}'")
    print(f"To render a PNG run:\n  dot -Tpng -Gdpi=300 {path} -o graph.png")


def run_visualize(engine, args):
    """Visualize a knowledge graph."""
    _load(engine, args.file)
    highlight = None
    if args.path:
        highlight = engine.find_path(*args.path)
        print(f"Highlighting: {format_path(highlight)}")
    engine.visualize(args.output, highlight=highlight, max_nodes=args.max_nodes, show=args.open)


def run_interactive(engine, args):
    """Run the interactive menu."""
    if args.file:
        try:
            _load(engine, args.file)
        except KnowledgeGraphError as e:
            print(f"Error: {e}")

    print("\nKnowledge Graph Engine. Choose 0 to exit.")

    while True:
        print(MENU)
        try:
            choice = input("Enter choice: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nGoodbye!")
            break

        if choice == "0":
            print("Goodbye!")
            break

        action = INTERACTIVE_ACTIONS.get(choice)
        if action is None:
            print("Invalid choice. Please try again.")
            continue

        try:
            action(engine)
        except KnowledgeGraphError as e:
            print(f"Error: {e}")


def _interactive_add_entity(engine):
    entity, created = engine.add_entity(_read("Enter entity name: "))
    if created:
        print(f"Entity '{entity.name}' added.")
    else:
        print(f"'{entity.name}' already exists.")


def _interactive_add_relationship(engine):
    source = _read("Source entity          : ")
    relationship_type = _read("Relationship (label)   : ")
    target = _read("Target entity          : ")
    rel = engine.add_relationship(source, relationship_type, target)
    print(f"Added: {_describe(engine, rel)}")


def _interactive_connections(engine):
    entity, edges = engine.connections(_read("Enter entity to view: "))
    print_connections(entity, edges)


def _interactive_path(engine):
    source = _read("Enter source entity: ")
    target = _read("Enter target entity: ")
    path = engine.find_path(source, target)
    print(f"\nPath found:\n  {format_path(path)}")


def _interactive_load(engine):
    path = _read(f"Enter filename (Enter for default: {engine.config.data_file}): ")
    _load(engine, path or None)


def _interactive_batch(engine):
    answer = _read("How many lines (src|rel|tgt)? ")
    count = int(answer) if answer.isdecimal() else 0
    if count <= 0:
        print("Nothing to do.")
        return

    added = 0
    while added < count:
        line = _read(f"Line {added + 1} [src|rel|tgt]: ")
        if not line or line.startswith("#"):
            print("  (skipped)")
            added += 1
            continue
        try:
            source, relationship_type, target = parse_relation_line(line)
        except KnowledgeGraphError:
            print("  Invalid format. Use: Source|Relationship|Target")
            continue
        rel = engine.add_relationship(source, relationship_type, target)
        print(f"  Added: {_describe(engine, rel)}")
        added += 1


def _interactive_save(engine):
    path = _read(f"Enter filename (Enter for default: {engine.config.data_file}): ")
    count = engine.save_file(path or None)
    print(f"Saved {count} relations to '{path or engine.config.data_file}'")


def _interactive_export_dot(engine):
    path = _read(f"Enter DOT filename (Enter for default: {engine.config.dot_file}): ")
    written = engine.export_dot(path or None)
    print(f"DOT file exported to '{written}'")


def _interactive_visualize(engine):
    path = _read(f"Enter HTML filename (Enter for default: {engine.config.html_file}): ")
    engine.visualize(path or None)


def _describe(engine, rel) -> str:
    source = engine.graph.entities[rel.source_entity_id]
    target = engine.graph.entities[rel.target_entity_id]
    return f'"{source.name}" --{rel.relationship_type}--> "{target.name}"'


INTERACTIVE_ACTIONS = {
    "1": _interactive_add_entity,
    "2": _interactive_add_relationship,
    "3": _interactive_connections,
    "4": _interactive_path,
    "5": _interactive_load,
    "6": _interactive_batch,
    "7": _interactive_save,
    "8": _interactive_export_dot,
    "9": _interactive_visualize,
}


if __name__ == "__main__":
    main()
