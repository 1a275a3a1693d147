"""
Portable scene snapshots.

A snapshot is a serialization-ready projection of part of a world: an ordered
list of placeholder nodes, each with the records chosen for it. Placeholders
are ``0..n-1`` and every node reference inside a record points at another
placeholder of the same snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import networkx as nx

from sceneforge.core.models.components import Children
from sceneforge.core.models.node import Node, NodeRefs, type_path
from sceneforge.core.world import World
from sceneforge.utils.logging import get_logger

logger = get_logger("scene.snapshot")


@dataclass
class SceneNode:
    """One placeholder node and its records, keyed by type path."""

    node: Node
    records: dict[str, Any] = field(default_factory=dict)

    def get(self, record_type: type | str) -> Any | None:
        return self.records.get(type_path(record_type))

    def has(self, record_type: type | str) -> bool:
        return type_path(record_type) in self.records


@dataclass
class PortableSnapshot:
    """Ordered collection of scene nodes decoupled from live node ids."""

    nodes: list[SceneNode] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self):
        return iter(self.nodes)

    def placeholders(self) -> list[Node]:
        return [scene_node.node for scene_node in self.nodes]

    def get(self, node: Node) -> SceneNode | None:
        for scene_node in self.nodes:
            if scene_node.node == node:
                return scene_node
        return None

    def dangling_references(self) -> list[tuple[Node, str, Node]]:
        """``(node, type_path, target)`` for references leaving the snapshot."""
        present = set(self.placeholders())
        dangling = []
        for scene_node in self.nodes:
            for path, record in scene_node.records.items():
                if not isinstance(record, NodeRefs):
                    continue
                for target in record.referenced_nodes():
                    if target not in present:
                        dangling.append((scene_node.node, path, target))
        return dangling

    # ========== Graph View ==========

    def to_graph(self) -> nx.DiGraph:
        """Directed graph of placeholders with an edge per ``Children`` link."""
        graph = nx.DiGraph()
        for scene_node in self.nodes:
            graph.add_node(scene_node.node, records=list(scene_node.records))
        for scene_node in self.nodes:
            children = scene_node.get(Children)
            if children is None:
                continue
            for child in children.nodes:
                graph.add_edge(scene_node.node, child)
        return graph

    def roots(self) -> list[Node]:
        """Placeholders no ``Children`` record in the snapshot points at."""
        graph = self.to_graph()
        return [node for node in self.placeholders() if graph.in_degree(node) == 0]

    # ========== Instantiation ==========

    def instantiate(self, world: World) -> dict[Node, Node]:
        """Spawn the snapshot into ``world``.

        Returns:
            Mapping from placeholder to the newly spawned live node
        """
        node_map: dict[Node, Node] = {
            scene_node.node: world.spawn() for scene_node in self.nodes
        }

        for scene_node in self.nodes:
            live = node_map[scene_node.node]
            for path, record in scene_node.records.items():
                if isinstance(record, NodeRefs):
                    record = record.map_nodes(node_map.get)
                    if record is None:
                        continue
                elif hasattr(record, "model_copy"):
                    record = record.model_copy(deep=True)
                world.insert_raw(live, path, record)

        logger.debug(f"Instantiated {len(node_map)} nodes")
        return node_map
