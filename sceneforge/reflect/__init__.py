"""
Runtime type registry used by the prefab codec.
"""

from sceneforge.reflect.registry import (
    ReadWriteLock,
    TypeRegistration,
    TypeRegistry,
    create_default_registry,
    registration_for_model,
)

__all__ = [
    "ReadWriteLock",
    "TypeRegistration",
    "TypeRegistry",
    "create_default_registry",
    "registration_for_model",
]
