"""
Logging setup for GraphQL Metatool.

All loggers live under the ``graphql_metatool`` namespace. Output goes to
stderr because stdout carries the MCP stdio transport.
"""

import logging
import sys
from typing import Optional, Union

ROOT_LOGGER_NAME = "graphql_metatool"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_configured = False


def get_logger(name: str) -> logging.Logger:
    """Return a logger namespaced under ``graphql_metatool``.

    Args:
        name: Short component name, e.g. "tools.dynamic" or "storage"
    """
    if name.startswith(ROOT_LOGGER_NAME):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logging(
    level: Union[int, str] = logging.INFO, stream: Optional[object] = None
) -> logging.Logger:
    """Configure the package logger. Safe to call more than once.

    Args:
        level: Log level name or number
        stream: Target stream (defaults to sys.stderr)

    Returns:
        The package root logger
    """
    global _configured

    root = logging.getLogger(ROOT_LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    root.setLevel(level)

    if not _configured:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        root.propagate = False
        _configured = True

    return root
