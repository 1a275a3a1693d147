"""Hierarchy Walker Tests.

Tests for:
- Branch/leaf classification and the root-is-never-a-leaf rule
- Leaf subtrees are never visited
- Deterministic discovery order
- Non-tree hierarchies are rejected with GraphShapeError
"""

import unittest

from sceneforge.core.errors import GraphShapeError
from sceneforge.core.models.components import LeafNode, Name
from sceneforge.core.models.node import Node
from sceneforge.core.world import World
from sceneforge.scene.walker import WalkResult, walk, walk_world

R, A, B, C, D = (Node(i) for i in range(5))


class WalkTest(unittest.TestCase):
    """Test walk() against a plain child table."""

    def setUp(self) -> None:
        # R -> A (leaf), B ; B -> C (leaf) ; A -> D
        self.children = {R: [A, B], A: [D], B: [C]}
        self.leaves = {A, C}

    def _walk(self, root: Node = R, leaves: set | None = None) -> WalkResult:
        leaves = self.leaves if leaves is None else leaves
        return walk(root, lambda node: node in leaves, self.children.get)

    def test_branch_and_leaf_sets(self) -> None:
        """R and B are branches, A and C are leaves."""
        result = self._walk()
        self.assertEqual(result.branch_nodes, [R, B])
        self.assertEqual(result.leaf_nodes, [A, C])

    def test_sets_are_disjoint(self) -> None:
        branch_nodes, leaf_nodes = self._walk()
        self.assertFalse(set(branch_nodes) & set(leaf_nodes))

    def test_root_is_never_a_leaf(self) -> None:
        result = self._walk(leaves={R, A, C})
        self.assertEqual(result.branch_nodes[0], R)
        self.assertNotIn(R, result.leaf_nodes)
        self.assertEqual(result.leaf_nodes, [A, C])

    def test_leaf_children_are_not_visited(self) -> None:
        result = self._walk()
        self.assertNotIn(D, result.branch_nodes)
        self.assertNotIn(D, result.leaf_nodes)

    def test_missing_children_entry_means_no_children(self) -> None:
        result = walk(Node(42), lambda node: False, {}.get)
        self.assertEqual(result, WalkResult([Node(42)], []))

    def test_discovery_order(self) -> None:
        children = {Node(0): [Node(1), Node(2)], Node(1): [Node(3)], Node(2): [Node(4)]}
        result = walk(Node(0), lambda node: False, children.get)
        self.assertEqual(result.branch_nodes, [Node(0), Node(1), Node(2), Node(3), Node(4)])

    def test_walk_is_deterministic(self) -> None:
        self.assertEqual(self._walk(), self._walk())

    def test_cycle_raises_graph_shape_error(self) -> None:
        children = {Node(0): [Node(1)], Node(1): [Node(0)]}
        with self.assertRaises(GraphShapeError) as ctx:
            walk(Node(0), lambda node: False, children.get)
        self.assertEqual(ctx.exception.node, Node(0))

    def test_shared_child_raises_graph_shape_error(self) -> None:
        children = {Node(0): [Node(1), Node(2)], Node(1): [Node(3)], Node(2): [Node(3)]}
        with self.assertRaises(GraphShapeError) as ctx:
            walk(Node(0), lambda node: False, children.get)
        self.assertEqual(ctx.exception.node, Node(3))

    def test_shared_leaf_raises_graph_shape_error(self) -> None:
        children = {Node(0): [Node(1), Node(1)]}
        with self.assertRaises(GraphShapeError):
            walk(Node(0), lambda node: True, children.get)


class WalkWorldTest(unittest.TestCase):
    """Test walk_world() over the Children records of a World."""

    def setUp(self) -> None:
        self.world = World()
        self.r = self.world.spawn(Name(name="R"))
        self.a = self.world.spawn(Name(name="A"), LeafNode())
        self.b = self.world.spawn(Name(name="B"))
        self.c = self.world.spawn(Name(name="C"), LeafNode())
        self.d = self.world.spawn(Name(name="D"))
        self.world.add_children(self.r, [self.a, self.b])
        self.world.add_child(self.b, self.c)
        self.world.add_child(self.a, self.d)

    def test_leaf_marker_is_default_predicate(self) -> None:
        result = walk_world(self.world, self.r)
        self.assertEqual(result.branch_nodes, [self.r, self.b])
        self.assertEqual(result.leaf_nodes, [self.a, self.c])

    def test_marked_root_is_still_a_branch(self) -> None:
        self.world.insert(self.r, LeafNode())
        result = walk_world(self.world, self.r)
        self.assertEqual(result.branch_nodes, [self.r, self.b])

    def test_custom_predicate(self) -> None:
        result = walk_world(self.world, self.r, is_leaf=lambda node: False)
        self.assertEqual(result.branch_nodes, [self.r, self.a, self.b, self.d, self.c])
        self.assertEqual(result.leaf_nodes, [])


if __name__ == "__main__":
    unittest.main()
