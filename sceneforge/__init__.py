"""
SceneForge - save parts of a node hierarchy as prefab documents and load
them back.

Modules:
- core: node/record models, in-memory world, errors
- reflect: runtime type registry
- scene: hierarchy walker, extractor, portable snapshots
- prefabs: prefab model, document codec, asset loader
- app: configuration and CLI
"""

from sceneforge.core.errors import (
    DecodeError,
    GraphShapeError,
    PrefabLoadError,
    PrefabSyntaxError,
    SceneForgeError,
    StructuralError,
    UnknownTypeError,
)
from sceneforge.core.world import World
from sceneforge.prefabs import Prefab, PrefabLoader, deserialize, extract_prefab, serialize
from sceneforge.reflect import TypeRegistry, create_default_registry
from sceneforge.scene import FilterPolicy, PortableSnapshot, extract, walk

__version__ = "0.1.0"

__all__ = [
    "World",
    "TypeRegistry",
    "create_default_registry",
    "FilterPolicy",
    "PortableSnapshot",
    "walk",
    "extract",
    "Prefab",
    "PrefabLoader",
    "extract_prefab",
    "serialize",
    "deserialize",
    "SceneForgeError",
    "DecodeError",
    "PrefabSyntaxError",
    "StructuralError",
    "UnknownTypeError",
    "GraphShapeError",
    "PrefabLoadError",
]
