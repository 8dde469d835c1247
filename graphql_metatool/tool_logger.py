"""
Per-call logging for core MCP tools.

Writes one line per tool invocation with arguments, duration and status.
"""

import json
from typing import Any, Dict, Optional

from .logging_config import get_logger

logger = get_logger("tool_calls")

# Long query strings are truncated in the log line
MAX_ARG_LENGTH = 200


def _shorten(value: Any) -> Any:
    if isinstance(value, str) and len(value) > MAX_ARG_LENGTH:
        return value[:MAX_ARG_LENGTH] + "..."
    return value


def log_tool_call(
    tool_name: str,
    arguments: Dict[str, Any],
    duration_ms: float,
    status: str,
    error: Optional[str] = None,
) -> None:
    """Log a tool call.

    Args:
        tool_name: Name of the invoked tool
        arguments: Call arguments (values are truncated)
        duration_ms: Wall time in milliseconds
        status: "success" or "error"
        error: Error message when status is "error"
    """
    record = {
        "tool": tool_name,
        "args": {k: _shorten(v) for k, v in arguments.items()},
        "duration_ms": round(duration_ms, 2),
        "status": status,
    }
    if error:
        record["error"] = error

    line = json.dumps(record, default=str)
    if status == "success":
        logger.info(line)
    else:
        logger.warning(line)
