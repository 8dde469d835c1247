"""
Host protocol layer adapter.

The registrar talks to the MCP runtime through a small interface:
``register_tool(...) -> handle`` with ``handle.update(...)`` and
``handle.remove()``. :class:`FastMCPToolHost` implements it on top of
FastMCP by adding :class:`SavedQueryTool` instances whose ``parameters``
are the saved JSON Schema.
"""

from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol, Set

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools import Tool
from fastmcp.tools.tool import ToolResult
from mcp.types import CallToolResult, TextContent
from pydantic import Field

from ..exceptions import RegistryError
from ..logging_config import get_logger
from ..responses import result_text

logger = get_logger("host")

ToolCallback = Callable[[Dict[str, Any]], Awaitable[CallToolResult]]


class ToolHandle(Protocol):
    def update(
        self,
        title: str,
        description: str,
        input_schema: Dict[str, Any],
        handler: ToolCallback,
    ) -> None:
        ...

    def remove(self) -> None:
        ...


class ToolHost(Protocol):
    def register_tool(
        self,
        name: str,
        title: str,
        description: str,
        input_schema: Dict[str, Any],
        handler: ToolCallback,
    ) -> ToolHandle:
        ...


def to_tool_content(result: CallToolResult) -> List[TextContent]:
    """Unwrap a result for FastMCP.

    FastMCP reports a tool failure when the tool raises ``ToolError``; the
    message becomes the text of an ``isError`` result on the wire.

    Raises:
        ToolError: If ``result.isError`` is set
    """
    if result.isError:
        raise ToolError(result_text(result))
    return list(result.content)


class SavedQueryTool(Tool):
    """FastMCP tool whose input schema and callback come from a saved query."""

    handler: ToolCallback = Field(exclude=True)

    async def run(self, arguments: Dict[str, Any]) -> ToolResult:
        result = await self.handler(arguments)
        return ToolResult(content=to_tool_content(result))


class FastMCPToolHandle:
    """Handle for a saved query tool registered on a FastMCP server."""

    def __init__(self, host: "FastMCPToolHost", name: str):
        self.host = host
        self.name = name

    def update(
        self,
        title: str,
        description: str,
        input_schema: Dict[str, Any],
        handler: ToolCallback,
    ) -> None:
        """Replace the tool under the same name."""
        self.host._add(self.name, title, description, input_schema, handler)
        logger.debug(f"Updated tool '{self.name}' in FastMCP")

    def remove(self) -> None:
        """Remove the tool from the server.

        Raises:
            Exception: Whatever FastMCP raises; the tool stays registered
        """
        self.host.mcp.remove_tool(self.name)
        self.host._registered.discard(self.name)
        logger.debug(f"Removed tool '{self.name}' from FastMCP")


class FastMCPToolHost:
    """:class:`ToolHost` backed by a FastMCP server.

    The server should be created with ``on_duplicate_tools="replace"`` so
    that updates swap the tool in place.
    """

    def __init__(self, mcp: FastMCP, reserved_names: Optional[Set[str]] = None):
        self.mcp = mcp
        self._registered: Set[str] = set()
        self._reserved: Set[str] = set(reserved_names or ())

    def reserve(self, name: str) -> None:
        """Mark a name as taken by a tool registered outside this host."""
        self._reserved.add(name)

    def _add(
        self,
        name: str,
        title: str,
        description: str,
        input_schema: Dict[str, Any],
        handler: ToolCallback,
    ) -> None:
        tool = SavedQueryTool(
            name=name,
            title=title,
            description=description,
            parameters=input_schema,
            handler=handler,
        )
        self.mcp.add_tool(tool)

    def register_tool(
        self,
        name: str,
        title: str,
        description: str,
        input_schema: Dict[str, Any],
        handler: ToolCallback,
    ) -> FastMCPToolHandle:
        """
        Raises:
            RegistryError: If a tool with this name is already registered
        """
        if name in self._registered or name in self._reserved:
            raise RegistryError(f"Tool {name} is already registered")
        self._add(name, title, description, input_schema, handler)
        self._registered.add(name)
        logger.debug(f"Registered tool '{name}' with FastMCP")
        return FastMCPToolHandle(self, name)
