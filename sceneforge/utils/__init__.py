"""
SceneForge Utils - Logging helpers.
"""

from sceneforge.utils.logging import (
    LOG_LEVELS,
    get_logger,
    log_error,
    log_operation,
    setup_logging,
    validate_level,
)

__all__ = [
    "LOG_LEVELS",
    "setup_logging",
    "validate_level",
    "get_logger",
    "log_operation",
    "log_error",
]
