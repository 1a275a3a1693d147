"""
Error types for SceneForge.

Decode failures always carry the position of the offending text so tooling
can point at it. Write-path and walker failures carry no position.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


# ============================================================================
# Source Positions
# ============================================================================


@dataclass(frozen=True)
class SourcePosition:
    """Location inside a document.

    Attributes:
        offset: 0-based character offset into the source text
        line: 1-based line number
        column: 1-based column number
    """

    offset: int
    line: int
    column: int

    @classmethod
    def from_mark(cls, mark) -> "SourcePosition":
        """Build from a PyYAML ``Mark`` (which is 0-based for line/column)."""
        return cls(offset=mark.index, line=mark.line + 1, column=mark.column + 1)

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


# ============================================================================
# Exceptions
# ============================================================================


class SceneForgeError(Exception):
    """Base exception for all SceneForge errors."""
    pass


class DecodeError(SceneForgeError):
    """A prefab document could not be decoded.

    Attributes:
        message: Human-readable description without position
        position: Where in the source the failure was detected
    """

    def __init__(self, message: str, position: SourcePosition | None = None):
        self.message = message
        self.position = position
        if position is not None:
            super().__init__(f"{message} at {position}")
        else:
            super().__init__(message)


class PrefabSyntaxError(DecodeError):
    """Malformed document text."""
    pass


class StructuralError(DecodeError):
    """Document text is well formed but does not match the prefab schema."""
    pass


class UnknownTypeError(DecodeError):
    """A type path is not present in the type registry.

    Raised by the decoder (with a position) and by the encoder (without).
    """

    def __init__(
        self,
        type_path: str,
        position: SourcePosition | None = None,
    ):
        self.type_path = type_path
        super().__init__(f"no registration found for type `{type_path}`", position)


class EncodeError(SceneForgeError):
    """A prefab could not be written.

    Attributes:
        node: Scene node being written
        type_path: Record type whose encoder failed, if any
    """

    def __init__(self, message: str, node: int, type_path: str | None = None):
        self.node = node
        self.type_path = type_path
        super().__init__(message)


class GraphShapeError(SceneForgeError):
    """The host hierarchy reachable from the root is not a tree."""

    def __init__(self, node: int):
        self.node = node
        super().__init__(f"node {node} is reachable by more than one path")


class PrefabLoadError(SceneForgeError):
    """The asset loader could not produce a prefab for a file.

    Attributes:
        path: Originating asset path
        cause: Underlying error, if any
    """

    def __init__(
        self,
        message: str,
        path: str | Path,
        cause: Exception | None = None,
    ):
        self.path = Path(path)
        self.cause = cause
        super().__init__(message)
