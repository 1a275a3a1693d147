"""
SceneForge Configuration.

Document layout, loader extensions, the default extraction policy and
logging settings.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from sceneforge.core.models.components import Children, GlobalTransform
from sceneforge.core.models.node import type_path
from sceneforge.scene.extractor import FilterPolicy
from sceneforge.utils.logging import LogLevel, validate_level


# ============================================================================
# Default Paths
# ============================================================================


def get_default_data_dir() -> Path:
    """Get the default data directory for SceneForge."""
    if env_path := os.environ.get("SCENEFORGE_DATA_DIR"):
        return Path(env_path)
    return Path.home() / ".sceneforge"


def get_default_config_path() -> Path:
    return get_default_data_dir() / "sceneforge_config.json"


# ============================================================================
# Configuration Classes
# ============================================================================


@dataclass
class DocumentConfig:
    """Layout of written documents."""

    indent: int = 2
    newline: str = "\n"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DocumentConfig":
        return cls(**{k: v for k, v in data.items() if hasattr(cls, k)})

    def to_dict(self) -> dict[str, Any]:
        return {"indent": self.indent, "newline": self.newline}


@dataclass
class ExtractionConfig:
    """Default deny lists, as type paths."""

    branch_deny: list[str] = field(default_factory=lambda: [type_path(GlobalTransform)])
    leaf_deny: list[str] = field(
        default_factory=lambda: [type_path(GlobalTransform), type_path(Children)]
    )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExtractionConfig":
        defaults = cls()
        return cls(
            branch_deny=list(data.get("branch_deny", defaults.branch_deny)),
            leaf_deny=list(data.get("leaf_deny", defaults.leaf_deny)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"branch_deny": list(self.branch_deny), "leaf_deny": list(self.leaf_deny)}

    def to_policy(self) -> FilterPolicy:
        return FilterPolicy.create(branch_deny=self.branch_deny, leaf_deny=self.leaf_deny)


@dataclass
class SceneForgeConfig:
    """Main configuration.

    Aggregates the sub-configurations and provides load/save functionality.
    """

    data_dir: Path = field(default_factory=get_default_data_dir)
    extensions: list[str] = field(default_factory=lambda: ["prefab"])
    document: DocumentConfig = field(default_factory=DocumentConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    log_level: LogLevel = "INFO"

    def __post_init__(self):
        if isinstance(self.data_dir, str):
            self.data_dir = Path(self.data_dir)
        self.extensions = [ext.lstrip(".").lower() for ext in self.extensions]
        if env_level := os.environ.get("SCENEFORGE_LOG_LEVEL"):
            self.log_level = env_level
        self.log_level = validate_level(self.log_level)

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> "SceneForgeConfig":
        """Load configuration from a JSON file.

        Args:
            config_path: Path to config file. If None, uses default location.

        Returns:
            SceneForgeConfig instance (defaults when the file does not exist)
        """
        if config_path is None:
            config_path = get_default_config_path()

        config_path = Path(config_path)

        if not config_path.exists():
            return cls()

        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SceneForgeConfig":
        """Create config from dictionary."""
        return cls(
            data_dir=Path(data.get("data_dir", get_default_data_dir())),
            extensions=list(data.get("extensions", ["prefab"])),
            document=DocumentConfig.from_dict(data.get("document", {})),
            extraction=ExtractionConfig.from_dict(data.get("extraction", {})),
            log_level=data.get("log_level", "INFO"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "data_dir": str(self.data_dir),
            "extensions": list(self.extensions),
            "document": self.document.to_dict(),
            "extraction": self.extraction.to_dict(),
            "log_level": self.log_level,
        }

    def save(self, config_path: str | Path | None = None) -> Path:
        """Save configuration to a JSON file.

        Returns:
            Path to saved file
        """
        if config_path is None:
            config_path = self.data_dir / "sceneforge_config.json"

        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

        return config_path

    def to_policy(self) -> FilterPolicy:
        return self.extraction.to_policy()


# ============================================================================
# Global Config Instance
# ============================================================================


_global_config: SceneForgeConfig | None = None


def get_config() -> SceneForgeConfig:
    """Get the global configuration instance."""
    global _global_config
    if _global_config is None:
        _global_config = SceneForgeConfig.load()
    return _global_config


def set_config(config: SceneForgeConfig) -> None:
    """Set the global configuration instance."""
    global _global_config
    _global_config = config


def reload_config(config_path: str | Path | None = None) -> SceneForgeConfig:
    """Reload configuration from disk."""
    global _global_config
    _global_config = SceneForgeConfig.load(config_path)
    return _global_config
