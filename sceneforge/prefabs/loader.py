"""
Prefab asset loader.

Glue between ``.prefab`` files and the codec. The asset pipeline decides when
to load and caches results; the loader only turns bytes into a prefab or a
located error message.
"""

from __future__ import annotations

from pathlib import Path

from sceneforge.core.errors import DecodeError, PrefabLoadError
from sceneforge.prefabs.codec import deserialize, serialize
from sceneforge.prefabs.prefab import PREFAB_ASSET_UUID, Prefab
from sceneforge.reflect.registry import TypeRegistry
from sceneforge.utils.logging import get_logger, log_error, log_operation

logger = get_logger("prefabs.loader")

DEFAULT_EXTENSIONS = ("prefab",)


class PrefabLoader:
    """Loads prefab assets through a shared type registry.

    Usage:
        loader = PrefabLoader(registry)
        prefab = loader.load(data, "assets/steve.prefab")
        prefab = loader.load_file("assets/steve.prefab")
    """

    asset_uuid = PREFAB_ASSET_UUID

    def __init__(
        self,
        registry: TypeRegistry,
        extensions: tuple[str, ...] | list[str] = DEFAULT_EXTENSIONS,
    ):
        """Initialize the loader.

        Args:
            registry: Process-wide registry, only read while loading
            extensions: File extensions handled, without the leading dot
        """
        self.registry = registry
        self._extensions = tuple(ext.lstrip(".").lower() for ext in extensions)

    def extensions(self) -> tuple[str, ...]:
        return self._extensions

    def handles(self, path: str | Path) -> bool:
        return Path(path).suffix.lstrip(".").lower() in self._extensions

    def load(self, data: bytes, path: str | Path) -> Prefab:
        """Decode the bytes of one asset.

        Args:
            data: Raw file contents
            path: Asset path, used in error messages only

        Raises:
            PrefabLoadError: Message formatted as ``{error} at {path}:{line}:{column}``
        """
        try:
            prefab = deserialize(data, self.registry)
        except DecodeError as e:
            location = f"{path}:{e.position}" if e.position else str(path)
            error = PrefabLoadError(f"{e.message} at {location}", path, cause=e)
            log_error(logger, "load prefab", error)
            raise error from e

        log_operation(
            logger,
            "Loaded prefab",
            {"name": prefab.name, "nodes": len(prefab.scene), "path": path},
        )
        return prefab

    def load_file(self, path: str | Path) -> Prefab:
        """Read and decode a prefab file.

        Raises:
            PrefabLoadError: Unsupported extension, unreadable file or decode error
        """
        path = Path(path)
        if not self.handles(path):
            raise PrefabLoadError(
                f"unsupported extension '{path.suffix}' for {path}, "
                f"expected one of: {', '.join(self._extensions)}",
                path,
            )

        try:
            data = path.read_bytes()
        except OSError as e:
            raise PrefabLoadError(f"could not read {path}: {e}", path, cause=e) from e

        return self.load(data, path)

    def save_file(
        self,
        prefab: Prefab,
        path: str | Path,
        indent: int = 2,
        newline: str = "\n",
    ) -> Path:
        """Serialize a prefab and write it to ``path``."""
        path = Path(path)
        text = serialize(prefab, self.registry, indent=indent, newline=newline)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        log_operation(
            logger,
            "Saved prefab",
            {"name": prefab.name, "nodes": len(prefab.scene), "path": path},
        )
        return path
