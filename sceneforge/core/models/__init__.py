"""
Core models: node handles, the record base class and built-in records.
"""

from sceneforge.core.models.components import (
    BUILTIN_RECORDS,
    Children,
    GlobalTransform,
    LeafNode,
    Name,
    Parent,
    PrefabMarker,
    Transform,
)
from sceneforge.core.models.node import Node, NodeRefs, Record, type_path

__all__ = [
    "Node",
    "NodeRefs",
    "Record",
    "type_path",
    "BUILTIN_RECORDS",
    "Children",
    "GlobalTransform",
    "LeafNode",
    "Name",
    "Parent",
    "PrefabMarker",
    "Transform",
]
