"""
Subgraph extraction.

Projects the branch and leaf nodes found by the walker into a portable
snapshot, leaving out the record types each classification denies.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from sceneforge.core.errors import GraphShapeError
from sceneforge.core.models.components import Children, GlobalTransform
from sceneforge.core.models.node import Node, NodeRefs, type_path
from sceneforge.core.world import HostWorld
from sceneforge.scene.snapshot import PortableSnapshot, SceneNode
from sceneforge.utils.logging import get_logger

logger = get_logger("scene.extractor")


def _normalize(types: Iterable[type | str]) -> frozenset[str]:
    return frozenset(type_path(t) for t in types)


@dataclass(frozen=True)
class FilterPolicy:
    """Record types to leave out, per node classification.

    Attributes:
        branch_deny: Type paths omitted from branch nodes
        leaf_deny: Type paths omitted from leaf nodes
    """

    branch_deny: frozenset[str] = field(default_factory=frozenset)
    leaf_deny: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def create(
        cls,
        branch_deny: Iterable[type | str] = (),
        leaf_deny: Iterable[type | str] = (),
    ) -> "FilterPolicy":
        """Build a policy from record classes or type paths."""
        return cls(branch_deny=_normalize(branch_deny), leaf_deny=_normalize(leaf_deny))

    @classmethod
    def hierarchy(cls) -> "FilterPolicy":
        """Default prefab policy.

        Branch nodes drop the derived ``GlobalTransform``; leaf nodes also drop
        ``Children`` since their subtrees are not saved.
        """
        return cls.create(
            branch_deny=[GlobalTransform],
            leaf_deny=[GlobalTransform, Children],
        )

    def deny_branch(self, *types: type | str) -> "FilterPolicy":
        return FilterPolicy(self.branch_deny | _normalize(types), self.leaf_deny)

    def deny_leaf(self, *types: type | str) -> "FilterPolicy":
        return FilterPolicy(self.branch_deny, self.leaf_deny | _normalize(types))


def _copy_record(record: Any) -> Any:
    if hasattr(record, "model_copy"):
        return record.model_copy(deep=True)
    return record


def extract(
    world: HostWorld,
    branch_nodes: Iterable[Node],
    leaf_nodes: Iterable[Node],
    policy: FilterPolicy,
) -> PortableSnapshot:
    """Build a snapshot of the given nodes.

    Branch nodes come first, then leaf nodes, and they are numbered ``0..n-1``
    in that order. Node references are rewritten to those placeholders;
    references to nodes outside the snapshot are dropped. The world is only
    read.

    Raises:
        GraphShapeError: If a node appears more than once
    """
    selected: list[tuple[Node, frozenset[str]]] = [
        (node, policy.branch_deny) for node in branch_nodes
    ]
    selected.extend((node, policy.leaf_deny) for node in leaf_nodes)

    placeholders: dict[Node, Node] = {}
    for node, _ in selected:
        if node in placeholders:
            raise GraphShapeError(node)
        placeholders[node] = Node(len(placeholders))

    snapshot = PortableSnapshot()
    dropped = 0

    for node, deny in selected:
        records: dict[str, Any] = {}
        for path, record in world.records_of(node):
            if path in deny:
                continue
            if isinstance(record, NodeRefs):
                record = record.map_nodes(placeholders.get)
                if record is None:
                    dropped += 1
                    continue
            else:
                record = _copy_record(record)
            records[path] = record
        snapshot.nodes.append(SceneNode(node=placeholders[node], records=records))

    logger.debug(
        f"Extracted {len(snapshot.nodes)} nodes"
        + (f", dropped {dropped} records referencing excluded nodes" if dropped else "")
    )
    return snapshot
