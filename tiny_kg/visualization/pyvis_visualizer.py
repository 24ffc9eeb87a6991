"""PyVis-based interactive knowledge graph visualizer."""

import webbrowser
from collections import defaultdict
from pathlib import Path

from pyvis.network import Network

from ..errors import GraphIOError
from ..graph.models import Entity, KnowledgeGraph, Relationship


class PyVisVisualizer:
    """Interactive HTML visualizer for knowledge graphs using PyVis."""

    # Node role color mapping
    NODE_COLORS = {
        "CONNECTED": "#1A73E8",  # Blue
        "ISOLATED": "#95a5a6",  # Gray
        "PATH": "#e67e22",  # Orange
    }
    EDGE_COLOR = "#888888"
    PATH_EDGE_COLOR = "#e74c3c"

    def __init__(
        self,
        graph: KnowledgeGraph,
        max_nodes: int = 200,
        highlight_path: list[Entity] | None = None,
    ):
        """Initialize the visualizer.

        Args:
            graph: Knowledge graph to visualize
            max_nodes: Maximum number of nodes to display
            highlight_path: Optional path (e.g. from PathFinder) to emphasize
        """
        self.graph = graph
        self.max_nodes = max_nodes
        self.highlight_path = highlight_path or []
        self.network = None
        self._output_path = None

    def generate(self) -> None:
        """Generate the interactive network visualization."""
        self.network = Network(
            height="750px",
            width="100%",
            bgcolor="#ffffff",
            font_color="#000000",
            directed=True,
            notebook=False,
        )

        # Configure physics for natural clustering
        self.network.barnes_hut(
            gravity=-50,
            central_gravity=0.3,
            spring_length=200,
            spring_strength=0.05,
            damping=0.09,
        )

        entity_ids = [entity.entity_id for entity in self.graph.iter_entities()]
        entity_degrees = self._calculate_degrees()
        path_ids = {entity.entity_id for entity in self.highlight_path}

        if len(entity_ids) > self.max_nodes:
            print(
                f"Warning: Graph has {len(entity_ids)} entities. "
                f"Displaying top {self.max_nodes} by connectivity."
            )
            # Path nodes first, then most connected
            entity_ids = sorted(
                entity_ids,
                key=lambda eid: (eid in path_ids, entity_degrees[eid]),
                reverse=True,
            )[: self.max_nodes]

        for entity_id in entity_ids:
            entity = self.graph.entities[entity_id]
            self._add_node(entity, entity_degrees[entity_id], entity_id in path_ids)

        # Add edges (only between visible nodes)
        visible = set(entity_ids)
        path_edges = self._path_edges()
        for relationship in self.graph.iter_relationships():
            if (
                relationship.source_entity_id in visible
                and relationship.target_entity_id in visible
            ):
                self._add_edge(relationship, path_edges)

        self.network.set_options(
            """
            {
                "edges": {
                    "font": {
                        "size": 12,
                        "align": "middle"
                    },
                    "smooth": {
                        "type": "continuous"
                    }
                },
                "physics": {
                    "enabled": true,
                    "stabilization": {
                        "iterations": 100
                    }
                },
                "interaction": {
                    "hover": true,
                    "tooltipDelay": 100
                }
            }
            """
        )

    def _calculate_degrees(self) -> dict[int, int]:
        """Calculate degree (in + out relationships) for each entity.

        Returns:
            Dictionary mapping entity_id to degree
        """
        degrees = defaultdict(int)
        for relationship in self.graph.iter_relationships():
            degrees[relationship.source_entity_id] += 1
            degrees[relationship.target_entity_id] += 1
        return degrees

    def _path_edges(self) -> set[tuple[int, int]]:
        return {
            (a.entity_id, b.entity_id)
            for a, b in zip(self.highlight_path, self.highlight_path[1:])
        }

    def _add_node(self, entity: Entity, degree: int, on_path: bool) -> None:
        """Add a node to the network.

        Args:
            entity: Entity to add
            degree: Number of connections (used for sizing)
            on_path: Whether the entity lies on the highlighted path
        """
        if on_path:
            color = self.NODE_COLORS["PATH"]
        elif degree == 0:
            color = self.NODE_COLORS["ISOLATED"]
        else:
            color = self.NODE_COLORS["CONNECTED"]

        # Scale node size based on degree (10-50 range)
        size = min(10 + degree * 2, 50)

        title = f"<b>{entity.name}</b><br>"
        title += f"Outgoing: {len(entity.relationships)}"

        self.network.add_node(
            entity.entity_id,
            label=entity.name,
            title=title,
            color=color,
            size=size,
            borderWidth=4 if on_path else 2,
            borderWidthSelected=4,
        )

    def _add_edge(self, relationship: Relationship, path_edges: set[tuple[int, int]]) -> None:
        """Add an edge to the network.

        Args:
            relationship: Relationship to add
            path_edges: (source, target) pairs on the highlighted path
        """
        on_path = (relationship.source_entity_id, relationship.target_entity_id) in path_edges
        self.network.add_edge(
            relationship.source_entity_id,
            relationship.target_entity_id,
            label=relationship.relationship_type,
            title=relationship.relationship_type,
            width=3 if on_path else 1,
            color=self.PATH_EDGE_COLOR if on_path else self.EDGE_COLOR,
            arrows="to",
        )

    def save(self, path: str | Path) -> Path:
        """Save the visualization as an HTML file.

        Args:
            path: Output file path

        Returns:
            The written path
        """
        if not self.network:
            raise ValueError("Generate visualization first by calling generate()")

        self._output_path = Path(path)
        try:
            self._output_path.parent.mkdir(parents=True, exist_ok=True)
            self.network.save_graph(str(self._output_path))
        except OSError as e:
            raise GraphIOError(self._output_path, "create") from e
        print(f"Visualization saved to {self._output_path}")
        return self._output_path

    def show(self) -> None:
        """Open the visualization in the default web browser."""
        if not self._output_path:
            raise ValueError("Save visualization first by calling save()")

        webbrowser.open(f"file://{self._output_path.absolute()}")
