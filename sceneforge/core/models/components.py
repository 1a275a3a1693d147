"""
Built-in record types.

Hierarchy (``Children`` / ``Parent``), positioning (``Transform`` and the
derived ``GlobalTransform``), naming and the marker records the prefab
workflow relies on.
"""

from __future__ import annotations

from pydantic import Field

from sceneforge.core.models.node import Node, NodeMapper, NodeRefs, Record

Vec3 = tuple[float, float, float]
Quat = tuple[float, float, float, float]


# ============================================================================
# Positioning
# ============================================================================


class Transform(Record):
    """Local position, rotation and scale relative to the parent node."""

    __type_path__ = "sceneforge.Transform"

    translation: Vec3 = (0.0, 0.0, 0.0)
    rotation: Quat = (0.0, 0.0, 0.0, 1.0)
    scale: Vec3 = (1.0, 1.0, 1.0)

    @classmethod
    def from_xyz(cls, x: float, y: float, z: float) -> "Transform":
        return cls(translation=(x, y, z))


class GlobalTransform(Record):
    """World-space transform, derived from the ``Transform`` chain.

    Recomputable once the hierarchy is rebuilt, so prefabs omit it.
    """

    __type_path__ = "sceneforge.GlobalTransform"

    translation: Vec3 = (0.0, 0.0, 0.0)
    rotation: Quat = (0.0, 0.0, 0.0, 1.0)
    scale: Vec3 = (1.0, 1.0, 1.0)

    @classmethod
    def from_transform(cls, transform: Transform) -> "GlobalTransform":
        return cls(**transform.model_dump())


# ============================================================================
# Hierarchy
# ============================================================================


class Children(NodeRefs, Record):
    """Ordered child references of a node (the hierarchy relation)."""

    __type_path__ = "sceneforge.Children"

    nodes: list[Node] = Field(default_factory=list)

    def referenced_nodes(self) -> list[Node]:
        return list(self.nodes)

    def map_nodes(self, mapper: NodeMapper) -> "Children":
        mapped = [mapper(node) for node in self.nodes]
        return self.model_copy(update={"nodes": [n for n in mapped if n is not None]})


class Parent(NodeRefs, Record):
    """Back reference to the parent node."""

    __type_path__ = "sceneforge.Parent"

    node: Node

    def referenced_nodes(self) -> list[Node]:
        return [self.node]

    def map_nodes(self, mapper: NodeMapper) -> "Parent | None":
        mapped = mapper(self.node)
        if mapped is None:
            return None
        return self.model_copy(update={"node": mapped})


# ============================================================================
# Naming and markers
# ============================================================================


class Name(Record):
    """Human-readable label for a node."""

    __type_path__ = "sceneforge.Name"

    name: str


class LeafNode(Record):
    """Marks a node whose subtree is not saved into prefabs."""

    __type_path__ = "sceneforge.LeafNode"


class PrefabMarker(Record):
    """Marks the root node of an instantiated prefab."""

    __type_path__ = "sceneforge.PrefabMarker"


BUILTIN_RECORDS: tuple[type[Record], ...] = (
    Name,
    Transform,
    GlobalTransform,
    Children,
    Parent,
    LeafNode,
    PrefabMarker,
)
