"""
Uniform tool result construction.

Every tool surfaced by the server answers with ``CallToolResult``:
``{content: [{type: "text", text}], isError?}``. ``isError`` is only set
on failure.
"""

from typing import Awaitable, Callable

from mcp.types import CallToolResult, TextContent

from .logging_config import get_logger

logger = get_logger("responses")

UNKNOWN_ERROR = "Unknown error"


def text_result(text: str) -> CallToolResult:
    """Build a successful result carrying a single text block."""
    return CallToolResult(content=[TextContent(type="text", text=text)])


def error_result(text: str) -> CallToolResult:
    """Build a failed result carrying a single text block."""
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=True)


def result_text(result: CallToolResult) -> str:
    """Concatenate the text blocks of a result."""
    return "\n".join(
        block.text for block in result.content if isinstance(block, TextContent)
    )


def error_message(exc: BaseException) -> str:
    """Message of an exception, or a generic label when it has none."""
    message = str(exc)
    return message if message else UNKNOWN_ERROR


def _failure(operation: str, exc: Exception) -> CallToolResult:
    message = error_message(exc)
    logger.error(f"Error {operation}: {message}")
    return error_result(f"Error {operation}: {message}")


def with_error_handling(operation: str, fn: Callable[[], str]) -> CallToolResult:
    """Run ``fn`` and wrap its text, or its exception, in a result.

    Args:
        operation: Human readable operation, e.g. "saving tool 'get_user'"
        fn: Callable returning the success text
    """
    logger.debug(f"Started {operation}")
    try:
        text = fn()
    except Exception as e:
        return _failure(operation, e)
    logger.debug(f"Finished {operation}")
    return text_result(text)


async def with_error_handling_async(
    operation: str, fn: Callable[[], Awaitable[str]]
) -> CallToolResult:
    """Async counterpart of :func:`with_error_handling`."""
    logger.debug(f"Started {operation}")
    try:
        text = await fn()
    except Exception as e:
        return _failure(operation, e)
    logger.debug(f"Finished {operation}")
    return text_result(text)
