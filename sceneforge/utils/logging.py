"""
Logging for SceneForge.

Every module logs through a child of the ``sceneforge`` logger. The CLI calls
``setup_logging`` once its configuration is known; until then a default INFO
handler writes to stderr, leaving stdout free for documents.
"""

from __future__ import annotations

import logging
import sys
import time
from typing import IO, Literal

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]

LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR")
ROOT_LOGGER_NAME = "sceneforge"


# ============================================================================
# Formatter
# ============================================================================


class SceneForgeFormatter(logging.Formatter):
    """``LEVEL [module] message`` lines, coloured by level on a terminal.

    Logger names are shown relative to ``sceneforge`` and timestamps are UTC.
    """

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    converter = time.gmtime

    def __init__(self, use_colors: bool = True, include_timestamp: bool = True):
        fmt = "%(levelname)-8s [%(module_name)-18s] %(message)s"
        if include_timestamp:
            fmt = "[%(asctime)s] " + fmt
        super().__init__(fmt, datefmt="%Y-%m-%d %H:%M:%S")
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        record.module_name = record.name.removeprefix(f"{ROOT_LOGGER_NAME}.")
        line = super().format(record)
        if not self.use_colors:
            return line
        return f"{self.LEVEL_COLORS.get(record.levelno, '')}{line}{self.RESET}"


# ============================================================================
# Setup
# ============================================================================


def validate_level(level: str) -> LogLevel:
    """Normalise a level name.

    Raises:
        ValueError: If ``level`` is not one of ``LOG_LEVELS``
    """
    normalized = level.strip().upper()
    if normalized not in LOG_LEVELS:
        raise ValueError(
            f"unknown log level '{level}', expected one of: {', '.join(LOG_LEVELS)}"
        )
    return normalized


def setup_logging(level: str = "INFO", stream: IO[str] | None = None) -> logging.Logger:
    """Route ``sceneforge`` log records to a single stream handler.

    Args:
        level: Minimum level, one of ``LOG_LEVELS`` (case-insensitive)
        stream: Destination, ``sys.stderr`` when omitted

    Returns:
        The ``sceneforge`` logger

    Raises:
        ValueError: If ``level`` is unknown
    """
    level = validate_level(level)
    stream = stream if stream is not None else sys.stderr

    handler = logging.StreamHandler(stream)
    is_tty = getattr(stream, "isatty", None)
    handler.setFormatter(SceneForgeFormatter(use_colors=bool(is_tty and is_tty())))

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)
    root_logger.handlers = [handler]
    root_logger.propagate = False
    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, e.g. ``get_logger("prefabs.codec")``."""
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


# ============================================================================
# Helpers
# ============================================================================


def _format_details(details: dict) -> str:
    return ", ".join(f"{k}={v}" for k, v in details.items())


def log_operation(logger: logging.Logger, operation: str, details: dict | None = None) -> None:
    """Log a completed operation as ``operation: key=value, ...``."""
    if details:
        logger.info(f"{operation}: {_format_details(details)}")
    else:
        logger.info(operation)


def log_error(
    logger: logging.Logger,
    operation: str,
    error: Exception,
    context: dict | None = None,
) -> None:
    """Log a failed operation with the error type and optional context."""
    msg = f"FAILED {operation}: {type(error).__name__}: {error}"
    if context:
        msg = f"{msg} | Context: {_format_details(context)}"
    logger.error(msg)


setup_logging()
