"""
Prefabs - named scene snapshots and their document format.

- prefab: the Prefab model and extraction shortcut
- codec: registry-driven serialize/deserialize
- loader: asset loader for ``.prefab`` files
"""

from sceneforge.prefabs.codec import deserialize, serialize
from sceneforge.prefabs.loader import PrefabLoader
from sceneforge.prefabs.prefab import PREFAB_ASSET_UUID, Prefab, extract_prefab

__all__ = [
    "Prefab",
    "PREFAB_ASSET_UUID",
    "extract_prefab",
    "serialize",
    "deserialize",
    "PrefabLoader",
]
