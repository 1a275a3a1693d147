"""
Prefab document codec.

Documents are YAML with exactly two top-level fields, ``name`` then
``scene``::

    name: Test
    scene:
      0:
        components:
          sceneforge.Children:
            nodes:
              - 1
          sceneforge.Name:
            name: Steve
      1:
        components:
          sceneforge.Name:
            name: Stove

Record shapes are not known to the codec; every record is encoded and decoded
through the registration found under its type path in the ``TypeRegistry``.
Decoding works on the composed node tree rather than on plain Python data so
that every error can be reported with the line and column it came from.
"""

from __future__ import annotations

from typing import Any

import networkx as nx
import yaml
from pydantic import ValidationError
from yaml.constructor import ConstructorError
from yaml.nodes import MappingNode, Node as YamlNode, ScalarNode, SequenceNode
from yaml.reader import ReaderError

from sceneforge.core.errors import (
    EncodeError,
    PrefabSyntaxError,
    SourcePosition,
    StructuralError,
    UnknownTypeError,
)
from sceneforge.core.models.components import Children
from sceneforge.core.models.node import Node, type_path
from sceneforge.prefabs.prefab import Prefab
from sceneforge.reflect.registry import TypeRegistry
from sceneforge.scene.snapshot import PortableSnapshot, SceneNode
from sceneforge.utils.logging import get_logger

logger = get_logger("prefabs.codec")

PREFAB_FIELDS = ("name", "scene")
COMPONENTS_FIELD = "components"

STR_TAG = "tag:yaml.org,2002:str"
INT_TAG = "tag:yaml.org,2002:int"


# ============================================================================
# Encoding
# ============================================================================


class PrefabDumper(yaml.SafeDumper):
    """Safe dumper that indents block sequences and never emits aliases."""

    def increase_indent(self, flow: bool = False, indentless: bool = False):
        return super().increase_indent(flow, False)

    def ignore_aliases(self, data: Any) -> bool:
        return True


def _represent_tuple(dumper: yaml.SafeDumper, data: tuple) -> YamlNode:
    return dumper.represent_list(list(data))


PrefabDumper.add_representer(tuple, _represent_tuple)


def _encode_scene(scene: PortableSnapshot, registry: TypeRegistry) -> dict[int, Any]:
    encoded: dict[int, Any] = {}
    for scene_node in scene.nodes:
        placeholder = int(scene_node.node)
        if placeholder in encoded:
            raise EncodeError(f"scene node {placeholder} appears more than once", placeholder)

        components: dict[str, Any] = {}
        for path in sorted(scene_node.records):
            registration = registry.resolve(path)
            try:
                components[path] = registration.encode(scene_node.records[path])
            except Exception as e:
                raise EncodeError(
                    f"failed to encode `{path}` on node {placeholder}: {e}",
                    placeholder,
                    type_path=path,
                ) from e
        encoded[placeholder] = {COMPONENTS_FIELD: components}
    return encoded


def serialize(
    prefab: Prefab,
    registry: TypeRegistry,
    indent: int = 2,
    newline: str = "\n",
) -> str:
    """Serialize a prefab to document text.

    Components of each node are written in type-path order, so equal prefabs
    always produce identical text.

    Args:
        prefab: Prefab to write
        registry: Registry used to resolve every record type
        indent: Spaces per indentation level
        newline: Line terminator

    Returns:
        Document text

    Raises:
        UnknownTypeError: If a record type is not registered
        EncodeError: If a registered encoder fails
    """
    with registry.read():
        scene = _encode_scene(prefab.scene, registry)

    document = {"name": prefab.name, "scene": scene}
    text = yaml.dump(
        document,
        Dumper=PrefabDumper,
        indent=indent,
        line_break=newline,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )
    logger.debug(f"Serialized prefab '{prefab.name}' ({len(prefab.scene)} nodes)")
    return text


# ============================================================================
# Decoding
# ============================================================================


def _position(node: YamlNode) -> SourcePosition:
    return SourcePosition.from_mark(node.start_mark)


def _position_at(text: str, offset: int) -> SourcePosition:
    line = text.count("\n", 0, offset) + 1
    column = offset - (text.rfind("\n", 0, offset) + 1) + 1
    return SourcePosition(offset=offset, line=line, column=column)


def _describe(node: YamlNode) -> str:
    if isinstance(node, ScalarNode):
        return f"`{node.value}`"
    if isinstance(node, MappingNode):
        return "a mapping"
    return "a sequence"


def _locate(node: YamlNode, loc: tuple) -> YamlNode:
    """Follow a pydantic error location into the node tree, as far as it goes."""
    for part in loc:
        if isinstance(node, MappingNode):
            for key, value in node.value:
                if isinstance(key, ScalarNode) and key.value == str(part):
                    node = value
                    break
            else:
                break
        elif isinstance(node, SequenceNode) and isinstance(part, int) and part < len(node.value):
            node = node.value[part]
        else:
            break
    return node


class _PrefabDecoder:
    """Decodes one document. Not reusable."""

    def __init__(self, text: str, registry: TypeRegistry):
        self.text = text
        self.registry = registry
        self.loader: yaml.SafeLoader | None = None

    def decode(self) -> Prefab:
        try:
            self.loader = yaml.SafeLoader(self.text)
        except ReaderError as e:
            raise PrefabSyntaxError(
                f"unacceptable character #x{e.character:04x}: {e.reason}",
                _position_at(self.text, e.position),
            ) from e

        try:
            root = self._compose()
            return self._decode_prefab(root)
        finally:
            self.loader.dispose()

    def _compose(self) -> YamlNode:
        try:
            root = self.loader.get_single_node()
        except yaml.MarkedYAMLError as e:
            mark = e.problem_mark or e.context_mark
            message = e.problem or e.context or "invalid document"
            if e.context and e.problem:
                message = f"{e.problem} ({e.context})"
            raise PrefabSyntaxError(
                message,
                SourcePosition.from_mark(mark) if mark else None,
            ) from e

        if root is None:
            raise StructuralError(
                "expected a Prefab struct, found an empty document",
                _position_at(self.text, len(self.text)),
            )
        return root

    def _construct(self, node: YamlNode) -> Any:
        try:
            return self.loader.construct_object(node, deep=True)
        except ConstructorError as e:
            mark = e.problem_mark or e.context_mark or node.start_mark
            raise StructuralError(e.problem or "invalid value", SourcePosition.from_mark(mark)) from e
        except (ValueError, KeyError, AttributeError, TypeError) as e:
            # Tagged scalars such as `!!int abc` fail inside SafeConstructor
            scalar = self._unconstructable_scalar(node)
            tag = scalar.tag.rsplit(":", 1)[-1]
            raise StructuralError(
                f"invalid `!!{tag}` value {_describe(scalar)}",
                _position(scalar),
            ) from e

    def _unconstructable_scalar(self, node: YamlNode) -> YamlNode:
        """First scalar under ``node``, in document order, that fails to construct."""
        pending = [node]
        while pending:
            current = pending.pop()
            if isinstance(current, ScalarNode):
                constructor = self.loader.yaml_constructors.get(current.tag)
                if constructor is None:
                    continue
                try:
                    constructor(self.loader, current)
                except (ValueError, KeyError, AttributeError, TypeError):
                    return current
            elif isinstance(current, SequenceNode):
                pending.extend(reversed(current.value))
            elif isinstance(current, MappingNode):
                for key, value in reversed(current.value):
                    pending.extend((value, key))
        return node

    # ========== Prefab ==========

    def _decode_prefab(self, root: YamlNode) -> Prefab:
        if not isinstance(root, MappingNode):
            raise StructuralError(
                f"expected a Prefab struct, found {_describe(root)}",
                _position(root),
            )

        fields = root.value
        name_node = self._field(root, fields, 0)
        scene_node = self._field(root, fields, 1)

        if len(fields) > len(PREFAB_FIELDS):
            extra_key = fields[len(PREFAB_FIELDS)][0]
            raise StructuralError(
                f"unexpected field {_describe(extra_key)}, "
                f"Prefab has exactly the fields `name` and `scene`",
                _position(extra_key),
            )

        if not isinstance(name_node, ScalarNode) or name_node.tag != STR_TAG:
            raise StructuralError(
                f"invalid type for field `name`: expected a string, found {_describe(name_node)}",
                _position(name_node),
            )

        scene = self._decode_scene(scene_node)
        return Prefab(name=name_node.value, scene=scene)

    def _field(self, root: MappingNode, fields: list, index: int) -> YamlNode:
        """Return the value of the field expected at ``index``."""
        expected = PREFAB_FIELDS[index]
        if index >= len(fields):
            raise StructuralError(f"missing field `{expected}`", SourcePosition.from_mark(root.end_mark))

        key, value = fields[index]
        if not isinstance(key, ScalarNode) or key.value != expected:
            raise StructuralError(
                f"expected field `{expected}`, found {_describe(key)}",
                _position(key),
            )
        return value

    # ========== Scene ==========

    def _decode_scene(self, node: YamlNode) -> PortableSnapshot:
        if not isinstance(node, MappingNode):
            raise StructuralError(
                f"expected a mapping of scene nodes, found {_describe(node)}",
                _position(node),
            )

        snapshot = PortableSnapshot()
        seen: set[int] = set()
        record_nodes: dict[tuple[int, str], YamlNode] = {}

        for key, value in node.value:
            placeholder = self._placeholder(key)
            if placeholder in seen:
                raise StructuralError(f"duplicate scene node {placeholder}", _position(key))
            seen.add(placeholder)

            records = self._decode_components(placeholder, value, record_nodes)
            snapshot.nodes.append(SceneNode(node=Node(placeholder), records=records))

        dangling = snapshot.dangling_references()
        if dangling:
            source, path, target = dangling[0]
            raise StructuralError(
                f"`{path}` on scene node {source} references node {target}, "
                f"which is not part of the scene",
                _position(record_nodes[(source, path)]),
            )

        self._check_hierarchy(snapshot, record_nodes)
        return snapshot

    def _check_hierarchy(
        self,
        snapshot: PortableSnapshot,
        record_nodes: dict[tuple[int, str], YamlNode],
    ) -> None:
        """The ``Children`` links of a scene must form a forest."""
        children_path = type_path(Children)
        graph = snapshot.to_graph()

        for node in graph.nodes:
            parents = list(graph.predecessors(node))
            if len(parents) > 1:
                raise StructuralError(
                    f"scene node {node} is a child of more than one node "
                    f"({', '.join(str(parent) for parent in parents)})",
                    _position(record_nodes[(parents[-1], children_path)]),
                )

        try:
            cycle = nx.find_cycle(graph)
        except nx.NetworkXNoCycle:
            return
        source = cycle[0][0]
        path = " -> ".join(str(edge[0]) for edge in cycle)
        raise StructuralError(
            f"`{children_path}` forms a cycle: {path} -> {source}",
            _position(record_nodes[(source, children_path)]),
        )

    def _placeholder(self, key: YamlNode) -> int:
        if isinstance(key, ScalarNode) and key.tag == INT_TAG:
            value = self._construct(key)
            if value >= 0:
                return value
        raise StructuralError(
            f"expected a scene node id (non-negative integer), found {_describe(key)}",
            _position(key),
        )

    def _decode_components(
        self,
        placeholder: int,
        node: YamlNode,
        record_nodes: dict[tuple[int, str], YamlNode],
    ) -> dict[str, Any]:
        if (
            not isinstance(node, MappingNode)
            or len(node.value) != 1
            or not isinstance(node.value[0][0], ScalarNode)
            or node.value[0][0].value != COMPONENTS_FIELD
        ):
            raise StructuralError(
                f"scene node {placeholder} must contain exactly the field `{COMPONENTS_FIELD}`",
                _position(node),
            )

        components = node.value[0][1]
        if not isinstance(components, MappingNode):
            raise StructuralError(
                f"expected a mapping of components, found {_describe(components)}",
                _position(components),
            )

        records: dict[str, Any] = {}
        for type_key, record_node in components.value:
            if not isinstance(type_key, ScalarNode) or type_key.tag != STR_TAG:
                raise StructuralError(
                    f"expected a type path, found {_describe(type_key)}",
                    _position(type_key),
                )
            path = type_key.value
            if path in records:
                raise StructuralError(
                    f"duplicate component `{path}` on scene node {placeholder}",
                    _position(type_key),
                )

            records[path] = self._decode_record(path, type_key, record_node)
            record_nodes[(placeholder, path)] = record_node

        return records

    def _decode_record(self, path: str, type_key: YamlNode, node: YamlNode) -> Any:
        registration = self.registry.get(path)
        if registration is None:
            raise UnknownTypeError(path, _position(type_key))

        data = self._construct(node)
        try:
            return registration.decode(data)
        except ValidationError as e:
            error = e.errors()[0]
            loc = tuple(error.get("loc", ()))
            where = ".".join(str(part) for part in loc)
            detail = f"{where}: {error['msg']}" if where else error["msg"]
            raise StructuralError(
                f"invalid `{path}`: {detail}",
                _position(_locate(node, loc)),
            ) from e
        except Exception as e:
            raise StructuralError(f"invalid `{path}`: {e}", _position(node)) from e


def _decode_bytes(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        prefix = data[: e.start]
        line = prefix.count(b"\n") + 1
        column = e.start - (prefix.rfind(b"\n") + 1) + 1
        raise PrefabSyntaxError(
            "document is not valid UTF-8",
            SourcePosition(offset=e.start, line=line, column=column),
        ) from e


def deserialize(text: str | bytes, registry: TypeRegistry) -> Prefab:
    """Decode document text into a prefab.

    Fields are read by position: ``name`` must come first and ``scene``
    second, and nothing else may follow.

    Args:
        text: Document text (bytes are decoded as UTF-8)
        registry: Registry used to resolve every record type

    Returns:
        The decoded prefab

    Raises:
        PrefabSyntaxError: Malformed text
        StructuralError: Text does not match the prefab schema
        UnknownTypeError: A component type is not registered
    """
    if isinstance(text, bytes):
        text = _decode_bytes(text)

    with registry.read():
        prefab = _PrefabDecoder(text, registry).decode()

    logger.debug(f"Deserialized prefab '{prefab.name}' ({len(prefab.scene)} nodes)")
    return prefab
