"""
In-memory host hierarchy for SceneForge.

The walker and extractor only need the ``HostWorld`` protocol. ``World`` is a
small reference implementation used by the CLI, the tests and applications
that do not bring their own scene storage.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator
from typing import Any, Protocol, TypeVar, runtime_checkable

from sceneforge.core.models.components import Children, Parent
from sceneforge.core.models.node import Node, Record, type_path
from sceneforge.utils.logging import get_logger

logger = get_logger("core.world")

R = TypeVar("R", bound=Record)


# ============================================================================
# Protocols
# ============================================================================


@runtime_checkable
class HostWorld(Protocol):
    """Read side of a host hierarchy."""

    def children_of(self, node: Node) -> list[Node]:
        """Ordered children of a node; empty when it has none."""
        ...

    def records_of(self, node: Node) -> list[tuple[str, Any]]:
        """``(type_path, record)`` pairs attached to a node."""
        ...


# ============================================================================
# World
# ============================================================================


class World:
    """Node storage with at most one record per type per node.

    Usage:
        world = World()
        root = world.spawn(Name(name="Steve"), Transform())
        child = world.spawn(Transform.from_xyz(1.0, 0.5, -1.3), LeafNode())
        world.add_child(root, child)
    """

    def __init__(self):
        self._records: dict[Node, dict[str, Any]] = {}
        self._next_id = 0
        self._lock = threading.Lock()

    def __contains__(self, node: Node) -> bool:
        return node in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Node]:
        return iter(list(self._records))

    # ========== Spawning ==========

    def spawn(self, *records: Any) -> Node:
        """Create a node and attach the given records."""
        with self._lock:
            node = Node(self._next_id)
            self._next_id += 1
            self._records[node] = {}
        self.insert(node, *records)
        return node

    def despawn(self, node: Node) -> None:
        """Remove a node and unlink it from its parent."""
        parent = self.get(node, Parent)
        if parent is not None:
            self.remove_child(parent.node, node)
        del self._records[node]
        logger.debug(f"Despawned node {node}")

    # ========== Records ==========

    def insert(self, node: Node, *records: Any) -> None:
        """Attach records to a node, replacing records of the same type."""
        slots = self._slots(node)
        for record in records:
            slots[type_path(record)] = record

    def insert_raw(self, node: Node, path: str, record: Any) -> None:
        """Attach a record under an explicit type path."""
        self._slots(node)[path] = record

    def remove(self, node: Node, record_type: type | str) -> Any | None:
        return self._slots(node).pop(type_path(record_type), None)

    def get(self, node: Node, record_type: type[R]) -> R | None:
        return self._slots(node).get(type_path(record_type))

    def has(self, node: Node, record_type: type | str) -> bool:
        return type_path(record_type) in self._slots(node)

    def records_of(self, node: Node) -> list[tuple[str, Any]]:
        return list(self._slots(node).items())

    # ========== Hierarchy ==========

    def children_of(self, node: Node) -> list[Node]:
        children = self.get(node, Children)
        if children is None:
            return []
        return list(children.nodes)

    def add_child(self, parent: Node, child: Node) -> None:
        """Append ``child`` to ``parent``'s children, re-parenting if needed."""
        current = self.get(child, Parent)
        if current is not None:
            self.remove_child(current.node, child)

        children = self.get(parent, Children) or Children()
        self.insert(parent, Children(nodes=[*children.nodes, child]))
        self.insert(child, Parent(node=parent))

    def add_children(self, parent: Node, children: Iterable[Node]) -> None:
        for child in children:
            self.add_child(parent, child)

    def remove_child(self, parent: Node, child: Node) -> None:
        children = self.get(parent, Children)
        if children is not None:
            remaining = [n for n in children.nodes if n != child]
            if remaining:
                self.insert(parent, Children(nodes=remaining))
            else:
                self.remove(parent, Children)
        if child in self._records:
            self.remove(child, Parent)

    def _slots(self, node: Node) -> dict[str, Any]:
        try:
            return self._records[node]
        except KeyError:
            raise KeyError(f"Node {node} does not exist") from None
