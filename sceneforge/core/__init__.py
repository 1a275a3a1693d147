"""
SceneForge Core - node/record models, the in-memory world and error types.
"""

from sceneforge.core.errors import (
    DecodeError,
    EncodeError,
    GraphShapeError,
    PrefabLoadError,
    PrefabSyntaxError,
    SceneForgeError,
    SourcePosition,
    StructuralError,
    UnknownTypeError,
)
from sceneforge.core.world import HostWorld, World

__all__ = [
    "HostWorld",
    "World",
    "SceneForgeError",
    "DecodeError",
    "PrefabSyntaxError",
    "StructuralError",
    "UnknownTypeError",
    "EncodeError",
    "GraphShapeError",
    "PrefabLoadError",
    "SourcePosition",
]
