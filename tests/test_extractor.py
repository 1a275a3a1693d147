"""Subgraph Extractor Tests.

Tests for:
- Per-classification deny lists (branch vs leaf)
- Placeholder numbering and reference remapping
- References to excluded nodes are dropped
- Extraction does not modify the world and is repeatable
"""

import unittest

from sceneforge.core.errors import GraphShapeError
from sceneforge.core.models.components import (
    Children,
    GlobalTransform,
    LeafNode,
    Name,
    Parent,
    Transform,
)
from sceneforge.core.models.node import Node, type_path
from sceneforge.core.world import World
from sceneforge.scene.extractor import FilterPolicy, extract
from sceneforge.scene.walker import walk_world


def _spawn_positioned(world: World, name: str, *extra) -> Node:
    transform = Transform.from_xyz(1.0, 2.0, 3.0)
    return world.spawn(
        Name(name=name),
        transform,
        GlobalTransform.from_transform(transform),
        *extra,
    )


class ExtractTest(unittest.TestCase):
    """R has children A (leaf) and B; B has child C (leaf); A has child D."""

    def setUp(self) -> None:
        self.world = World()
        self.r = _spawn_positioned(self.world, "R")
        self.a = _spawn_positioned(self.world, "A", LeafNode())
        self.b = _spawn_positioned(self.world, "B")
        self.c = _spawn_positioned(self.world, "C", LeafNode())
        self.d = _spawn_positioned(self.world, "D")
        self.world.add_children(self.r, [self.a, self.b])
        self.world.add_child(self.b, self.c)
        self.world.add_child(self.a, self.d)

        self.branch_nodes, self.leaf_nodes = walk_world(self.world, self.r)
        self.policy = FilterPolicy.hierarchy()

    def _extract(self):
        return extract(self.world, self.branch_nodes, self.leaf_nodes, self.policy)

    def _by_name(self, snapshot) -> dict:
        return {scene_node.get(Name).name: scene_node for scene_node in snapshot}

    def test_branch_nodes_come_first(self) -> None:
        snapshot = self._extract()
        names = [scene_node.get(Name).name for scene_node in snapshot]
        self.assertEqual(names, ["R", "B", "A", "C"])
        self.assertEqual(snapshot.placeholders(), [Node(0), Node(1), Node(2), Node(3)])

    def test_branch_nodes_drop_global_transform(self) -> None:
        nodes = self._by_name(self._extract())
        for name in ("R", "B"):
            self.assertFalse(nodes[name].has(GlobalTransform))
            self.assertTrue(nodes[name].has(Transform))
            self.assertTrue(nodes[name].has(Children))

    def test_leaf_nodes_drop_global_transform_and_children(self) -> None:
        nodes = self._by_name(self._extract())
        for name in ("A", "C"):
            self.assertFalse(nodes[name].has(GlobalTransform))
            self.assertFalse(nodes[name].has(Children))
            self.assertTrue(nodes[name].has(Transform))
            self.assertTrue(nodes[name].has(LeafNode))

    def test_leaf_children_are_not_extracted(self) -> None:
        nodes = self._by_name(self._extract())
        self.assertNotIn("D", nodes)

    def test_references_are_remapped_to_placeholders(self) -> None:
        nodes = self._by_name(self._extract())
        self.assertEqual(nodes["R"].get(Children).nodes, [Node(2), Node(1)])
        self.assertEqual(nodes["B"].get(Children).nodes, [Node(3)])
        self.assertEqual(nodes["A"].get(Parent).node, Node(0))
        self.assertEqual(nodes["C"].get(Parent).node, Node(1))

    def test_no_dangling_references(self) -> None:
        self.assertEqual(self._extract().dangling_references(), [])

    def test_references_to_excluded_nodes_are_dropped(self) -> None:
        snapshot = extract(self.world, [self.b], [], FilterPolicy())
        scene_node = snapshot.nodes[0]
        self.assertEqual(scene_node.get(Children).nodes, [])
        self.assertFalse(scene_node.has(Parent))
        self.assertEqual(snapshot.dangling_references(), [])

    def test_extraction_is_repeatable(self) -> None:
        self.assertEqual(self._extract(), self._extract())

    def test_world_is_not_modified(self) -> None:
        before = {node: self.world.records_of(node) for node in self.world}
        snapshot = self._extract()
        after = {node: self.world.records_of(node) for node in self.world}

        self.assertEqual(before, after)
        self.assertEqual(self.world.children_of(self.r), [self.a, self.b])
        self.assertIsNot(
            self._by_name(snapshot)["R"].get(Transform),
            self.world.get(self.r, Transform),
        )

    def test_duplicate_node_raises(self) -> None:
        with self.assertRaises(GraphShapeError):
            extract(self.world, [self.r], [self.r], self.policy)

    def test_empty_policy_keeps_everything(self) -> None:
        snapshot = extract(self.world, [self.r], [], FilterPolicy())
        self.assertTrue(snapshot.nodes[0].has(GlobalTransform))


class FilterPolicyTest(unittest.TestCase):
    """Test FilterPolicy construction."""

    def test_classes_and_type_paths_are_equivalent(self) -> None:
        by_class = FilterPolicy.create(branch_deny=[GlobalTransform], leaf_deny=[Children])
        by_path = FilterPolicy.create(
            branch_deny=["sceneforge.GlobalTransform"],
            leaf_deny=["sceneforge.Children"],
        )
        self.assertEqual(by_class, by_path)

    def test_hierarchy_policy(self) -> None:
        policy = FilterPolicy.hierarchy()
        self.assertEqual(policy.branch_deny, frozenset({type_path(GlobalTransform)}))
        self.assertEqual(
            policy.leaf_deny,
            frozenset({type_path(GlobalTransform), type_path(Children)}),
        )

    def test_deny_helpers_return_new_policy(self) -> None:
        policy = FilterPolicy()
        extended = policy.deny_branch(Name).deny_leaf(Transform)
        self.assertEqual(policy, FilterPolicy())
        self.assertIn(type_path(Name), extended.branch_deny)
        self.assertIn(type_path(Transform), extended.leaf_deny)


if __name__ == "__main__":
    unittest.main()
