"""
Hierarchy walker.

Splits the subtree under a root into branch nodes (saved with their children)
and leaf nodes (saved, but their children are not visited).
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterable
from typing import NamedTuple

from sceneforge.core.errors import GraphShapeError
from sceneforge.core.models.components import LeafNode
from sceneforge.core.models.node import Node
from sceneforge.core.world import World
from sceneforge.utils.logging import get_logger

logger = get_logger("scene.walker")

LeafPredicate = Callable[[Node], bool]
ChildrenOf = Callable[[Node], "Iterable[Node] | None"]


class WalkResult(NamedTuple):
    """Disjoint node lists, each in discovery order."""

    branch_nodes: list[Node]
    leaf_nodes: list[Node]


def walk(
    root: Node,
    is_leaf: LeafPredicate,
    children_of: ChildrenOf,
) -> WalkResult:
    """Classify every node reachable from ``root``.

    The root is always a branch node, whatever ``is_leaf`` says about it.
    Other nodes go to ``leaf_nodes`` when ``is_leaf`` holds (and their children
    are skipped) and to ``branch_nodes`` otherwise (and their children are
    queued). Nodes are visited breadth-first in the order ``children_of``
    yields them, so the result is deterministic.

    Args:
        root: Node to start from
        is_leaf: Leaf predicate
        children_of: Child lookup; ``None`` or empty means no children

    Returns:
        WalkResult with the branch and leaf nodes

    Raises:
        GraphShapeError: If a node is reached a second time
    """
    branch_nodes = [root]
    leaf_nodes: list[Node] = []
    visited = {root}

    queue = deque(children_of(root) or ())

    while queue:
        node = queue.popleft()
        if node in visited:
            raise GraphShapeError(node)
        visited.add(node)

        if is_leaf(node):
            leaf_nodes.append(node)
        else:
            branch_nodes.append(node)
            queue.extend(children_of(node) or ())

    logger.debug(
        f"Walked from {root}: {len(branch_nodes)} branch, {len(leaf_nodes)} leaf"
    )
    return WalkResult(branch_nodes, leaf_nodes)


def walk_world(
    world: World,
    root: Node,
    is_leaf: LeafPredicate | None = None,
) -> WalkResult:
    """Walk a world's ``Children`` hierarchy.

    Without an explicit predicate, nodes carrying the ``LeafNode`` marker are
    leaves.
    """
    if is_leaf is None:
        def is_leaf(node: Node) -> bool:
            return world.has(node, LeafNode)

    return walk(root, is_leaf, world.children_of)
