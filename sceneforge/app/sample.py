"""Sample world used by ``sceneforge demo``."""

from __future__ import annotations

from sceneforge.core.models.components import (
    GlobalTransform,
    LeafNode,
    Name,
    Transform,
)
from sceneforge.core.models.node import Node
from sceneforge.core.world import World


def _transform_bundle(transform: Transform) -> tuple[Transform, GlobalTransform]:
    return transform, GlobalTransform.from_transform(transform)


def build_sample_world() -> tuple[World, Node]:
    """Steve, with a leaf child Stove whose own child is never saved.

    Returns:
        The world and the root node to save
    """
    world = World()

    root = world.spawn(Name(name="Steve"), *_transform_bundle(Transform()))
    stove = world.spawn(
        Name(name="Stove"),
        *_transform_bundle(Transform.from_xyz(1.0, 0.5, -1.3)),
        LeafNode(),
    )
    hidden = world.spawn(*_transform_bundle(Transform.from_xyz(0.0, 5.0, 0.0)))

    world.add_child(root, stove)
    world.add_child(stove, hidden)
    return world, root
