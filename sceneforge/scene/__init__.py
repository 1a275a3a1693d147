"""
Scene extraction: hierarchy walking, filtering and portable snapshots.
"""

from sceneforge.scene.extractor import FilterPolicy, extract
from sceneforge.scene.snapshot import PortableSnapshot, SceneNode
from sceneforge.scene.walker import WalkResult, walk, walk_world

__all__ = [
    "FilterPolicy",
    "extract",
    "PortableSnapshot",
    "SceneNode",
    "WalkResult",
    "walk",
    "walk_world",
]
