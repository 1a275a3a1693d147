"""
Prefab model.

A prefab is a named portable snapshot, the unit that is written to and read
from ``.prefab`` documents.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from sceneforge.core.models.components import PrefabMarker
from sceneforge.core.models.node import Node
from sceneforge.core.world import World
from sceneforge.scene.extractor import FilterPolicy, extract
from sceneforge.scene.snapshot import PortableSnapshot
from sceneforge.scene.walker import LeafPredicate, walk_world
from sceneforge.utils.logging import get_logger

logger = get_logger("prefabs.prefab")

PREFAB_ASSET_UUID = "09433411-5448-4168-970e-02341c20e9ed"


@dataclass
class Prefab:
    """Named portable snapshot.

    Attributes:
        name: Human-meaningful identifier, not required to be unique
        scene: The snapshot this prefab owns
    """

    name: str
    scene: PortableSnapshot = field(default_factory=PortableSnapshot)

    @classmethod
    def from_world(
        cls,
        world: World,
        root: Node,
        name: str,
        policy: FilterPolicy | None = None,
        is_leaf: LeafPredicate | None = None,
    ) -> "Prefab":
        """Walk the hierarchy under ``root`` and extract it as a prefab.

        Args:
            world: World to read from
            root: Root node, always saved as a branch
            name: Prefab name
            policy: Deny filters, defaults to ``FilterPolicy.hierarchy()``
            is_leaf: Leaf predicate, defaults to the ``LeafNode`` marker
        """
        policy = policy or FilterPolicy.hierarchy()
        branch_nodes, leaf_nodes = walk_world(world, root, is_leaf)
        scene = extract(world, branch_nodes, leaf_nodes, policy)
        logger.info(
            f"Extracted prefab '{name}': {len(branch_nodes)} branch, "
            f"{len(leaf_nodes)} leaf nodes"
        )
        return cls(name=name, scene=scene)

    def spawn(self, world: World, mark_roots: bool = True) -> dict[Node, Node]:
        """Instantiate the prefab into ``world``.

        Args:
            world: Target world
            mark_roots: Attach ``PrefabMarker`` to the spawned root nodes

        Returns:
            Mapping from placeholder to live node
        """
        node_map = self.scene.instantiate(world)
        if mark_roots:
            for placeholder in self.scene.roots():
                world.insert(node_map[placeholder], PrefabMarker())
        logger.info(f"Spawned prefab '{self.name}' ({len(node_map)} nodes)")
        return node_map


def extract_prefab(
    world: World,
    root: Node,
    name: str,
    policy: FilterPolicy | None = None,
    is_leaf: LeafPredicate | None = None,
) -> Prefab:
    """Shortcut for ``Prefab.from_world``."""
    return Prefab.from_world(world, root, name, policy=policy, is_leaf=is_leaf)
