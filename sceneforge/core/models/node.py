"""
Node and Record primitives for SceneForge.

A Node is an opaque integer handle into a host hierarchy. All data lives in
Records: pydantic models attached to a node, identified by their type path.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, NewType

from pydantic import BaseModel, ConfigDict

Node = NewType("Node", int)

NodeMapper = Callable[[Node], "Node | None"]


def type_path(record_type: type | Any) -> str:
    """Return the type path identifying a record type.

    Accepts a class, an instance or an already resolved type path string.
    Classes may override the default ``module.QualifiedName`` path with a
    ``__type_path__`` attribute.
    """
    if isinstance(record_type, str):
        return record_type
    if not isinstance(record_type, type):
        record_type = type(record_type)
    explicit = record_type.__dict__.get("__type_path__")
    if explicit:
        return explicit
    return f"{record_type.__module__}.{record_type.__qualname__}"


class Record(BaseModel):
    """Base class for values attached to nodes."""

    model_config = ConfigDict(extra="forbid")


class NodeRefs:
    """Mixin for records that hold references to other nodes.

    Extraction maps live nodes to snapshot placeholders and instantiation maps
    them back; both go through ``map_nodes``.
    """

    def referenced_nodes(self) -> list[Node]:
        """Nodes referenced by this record."""
        raise NotImplementedError

    def map_nodes(self, mapper: NodeMapper) -> Any:
        """Return a copy with every reference passed through ``mapper``.

        ``mapper`` returns ``None`` for nodes that cannot be mapped. Such
        references are dropped; if nothing meaningful is left the method
        returns ``None`` and the record should be dropped too.
        """
        raise NotImplementedError
