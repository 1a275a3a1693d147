"""
SceneForge application layer: configuration and CLI.
"""

from sceneforge.app.config import SceneForgeConfig, get_config, set_config

__all__ = [
    "SceneForgeConfig",
    "get_config",
    "set_config",
]
