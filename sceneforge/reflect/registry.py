"""
Runtime type registry for SceneForge.

Maps type paths to the functions that encode and decode records of that type,
together with a description of the type's fields. The prefab codec discovers
record shapes exclusively through this table.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from types import UnionType
from typing import Any, Union, get_args, get_origin

from pydantic import BaseModel

from sceneforge.core.errors import UnknownTypeError
from sceneforge.core.models.components import BUILTIN_RECORDS
from sceneforge.core.models.node import type_path as get_type_path
from sceneforge.utils.logging import get_logger

logger = get_logger("reflect.registry")

Encoder = Callable[[Any], Any]
Decoder = Callable[[Any], Any]


# ============================================================================
# Readers-Writer Lock
# ============================================================================


class ReadWriteLock:
    """Many concurrent readers or one writer.

    Readers never wait for queued writers, so a thread already holding the
    read side may acquire it again.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False

    def acquire_read(self) -> None:
        with self._cond:
            while self._writing:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            while self._writing or self._readers:
                self._cond.wait()
            self._writing = True

    def release_write(self) -> None:
        with self._cond:
            self._writing = False
            self._cond.notify_all()

    @contextmanager
    def read(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


# ============================================================================
# Registrations
# ============================================================================


@dataclass(frozen=True)
class TypeRegistration:
    """Encoder/decoder pair and field description for one type path.

    Attributes:
        type_path: Identifier used in documents
        encode: Record -> plain data (dicts, lists, scalars)
        decode: Plain data -> record; raises on invalid input
        field_schema: Field name -> type description, in declaration order
        type: Python class, when the registration was built from one
    """

    type_path: str
    encode: Encoder
    decode: Decoder
    field_schema: dict[str, str] = field(default_factory=dict)
    type: type | None = None


def _describe_annotation(annotation: Any) -> str:
    """Readable type name, e.g. ``list[Node]`` or ``tuple[float, float, float]``."""
    origin = get_origin(annotation)
    if origin is not None:
        args = [_describe_annotation(arg) for arg in get_args(annotation)]
        if origin in (Union, UnionType):
            return " | ".join(args)
        return f"{getattr(origin, '__name__', origin)}[{', '.join(args)}]"
    if annotation is type(None):
        return "None"
    name = getattr(annotation, "__name__", None)
    return name or str(annotation).replace("typing.", "")


def registration_for_model(
    model_cls: type[BaseModel],
    type_path: str | None = None,
) -> TypeRegistration:
    """Derive a registration from a pydantic model class."""
    path = type_path or get_type_path(model_cls)

    def encode(value: BaseModel) -> dict[str, Any]:
        return value.model_dump(mode="json")

    def decode(data: Any) -> BaseModel:
        # Unit records are written as an empty mapping, but accept null too
        if data is None:
            data = {}
        return model_cls.model_validate(data)

    schema = {
        name: _describe_annotation(info.annotation)
        for name, info in model_cls.model_fields.items()
    }

    return TypeRegistration(
        type_path=path,
        encode=encode,
        decode=decode,
        field_schema=schema,
        type=model_cls,
    )


# ============================================================================
# Registry
# ============================================================================


class TypeRegistry:
    """Table of type registrations shared by encoders and decoders.

    Registration takes the write side of the lock; lookups and whole
    (de)serialization calls hold the read side, so no codec call observes a
    registration half way through.

    Usage:
        registry = TypeRegistry()
        registry.register_model(Transform)

        with registry.read():
            registration = registry.resolve("sceneforge.Transform")
    """

    def __init__(self):
        self._registrations: dict[str, TypeRegistration] = {}
        self._by_type: dict[type, str] = {}
        self._lock = ReadWriteLock()

    def __contains__(self, type_path: str) -> bool:
        return self.contains(type_path)

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._registrations)

    # ========== Registration ==========

    def add(self, registration: TypeRegistration) -> TypeRegistration:
        """Add a prepared registration, replacing any previous one."""
        with self._lock.write():
            self._registrations[registration.type_path] = registration
            if registration.type is not None:
                self._by_type[registration.type] = registration.type_path
        logger.debug(f"Registered type: {registration.type_path}")
        return registration

    def register(
        self,
        type_path: str,
        encode: Encoder,
        decode: Decoder,
        field_schema: dict[str, str] | None = None,
        type: type | None = None,
    ) -> TypeRegistration:
        """Register an explicit encoder/decoder pair under ``type_path``."""
        return self.add(
            TypeRegistration(
                type_path=type_path,
                encode=encode,
                decode=decode,
                field_schema=dict(field_schema or {}),
                type=type,
            )
        )

    def register_model(
        self,
        model_cls: type[BaseModel],
        type_path: str | None = None,
    ) -> TypeRegistration:
        """Register a pydantic model, deriving encode/decode from it."""
        return self.add(registration_for_model(model_cls, type_path))

    def register_builtins(self) -> None:
        """Register the built-in record types."""
        for model_cls in BUILTIN_RECORDS:
            self.register_model(model_cls)
        logger.debug(f"Registered {len(BUILTIN_RECORDS)} built-in record types")

    def unregister(self, type_path: str) -> None:
        with self._lock.write():
            registration = self._registrations.pop(type_path, None)
            if registration is not None and registration.type is not None:
                self._by_type.pop(registration.type, None)

    # ========== Lookup ==========

    @contextmanager
    def read(self) -> Iterator["TypeRegistry"]:
        """Hold the read lock for the duration of one encode or decode."""
        with self._lock.read():
            yield self

    def get(self, type_path: str) -> TypeRegistration | None:
        with self._lock.read():
            return self._registrations.get(type_path)

    def resolve(self, type_path: str) -> TypeRegistration:
        """Look up a registration.

        Raises:
            UnknownTypeError: If nothing is registered under ``type_path``
        """
        registration = self.get(type_path)
        if registration is None:
            raise UnknownTypeError(type_path)
        return registration

    def get_by_type(self, cls: type) -> TypeRegistration | None:
        with self._lock.read():
            path = self._by_type.get(cls)
            return self._registrations.get(path) if path else None

    def contains(self, type_path: str) -> bool:
        with self._lock.read():
            return type_path in self._registrations

    def type_paths(self) -> list[str]:
        with self._lock.read():
            return list(self._registrations)

    def iterate(self) -> Iterator[TypeRegistration]:
        with self._lock.read():
            registrations = list(self._registrations.values())
        yield from registrations

    def to_dict(self) -> dict[str, dict[str, str]]:
        """Export the field schemas of all registrations."""
        return {r.type_path: dict(r.field_schema) for r in self.iterate()}


# ============================================================================
# Convenience Functions
# ============================================================================


def create_default_registry() -> TypeRegistry:
    """Create a registry with the built-in record types."""
    registry = TypeRegistry()
    registry.register_builtins()
    return registry
