"""
Core tool registrar.

Registers the query execution tool and the saved query management tools
with the MCP server, honouring the DISABLE_CORE_TOOLS setting.
"""

import json
import time
from typing import Annotated, Any, Dict, List, Optional

from fastmcp import FastMCP
from mcp.types import CallToolResult, TextContent
from pydantic import Field

from graphql_metatool.dynamic_tool import (
    IdempotencyConfig,
    PaginationConfig,
    SavedQueryRegistrar,
)
from graphql_metatool.logging_config import get_logger
from graphql_metatool.responses import error_message, error_result, result_text, text_result
from graphql_metatool.tool_logger import log_tool_call
from ..host import to_tool_content

logger = get_logger("tools.core")

CORE_TOOLS_STATUS = {
    "none": "all core tools enabled",
    "management": "management tools disabled, execute_graphql_query enabled",
    "all": "all core tools disabled",
}

ToolName = Annotated[
    str,
    Field(
        pattern=r"^[a-z][a-z0-9_]*$",
        description="The unique name for this tool in snake_case format",
    ),
]


async def execute_graphql_query(client, query: str) -> CallToolResult:
    """Run a GraphQL document and return the ``data`` as pretty JSON."""
    try:
        data = await client.request(query)
    except Exception as e:
        return error_result(f"GraphQL Error: {error_message(e)}")
    return text_result(json.dumps(data, indent=2, default=str))


class CoreToolRegistrar:
    """Registers the core tools with the MCP server."""

    def __init__(self, mcp_server: FastMCP, saved_queries: SavedQueryRegistrar, client):
        """
        Initialize the core tool registrar.

        Args:
            mcp_server: FastMCP server instance
            saved_queries: Use cases behind the management tools
            client: GraphQL client for execute_graphql_query
        """
        self.mcp = mcp_server
        self.saved_queries = saved_queries
        self.client = client

    def register_all(self, disable_setting: str = "none") -> str:
        """Register the core tools allowed by ``disable_setting``.

        Returns:
            Human readable status of the core tools
        """
        if disable_setting not in CORE_TOOLS_STATUS:
            logger.warning(f"Unknown DISABLE_CORE_TOOLS value '{disable_setting}', enabling all")
            disable_setting = "none"

        if disable_setting != "all":
            self._register_execute_graphql_query()
        if disable_setting == "none":
            self._register_save_query()
            self._register_delete_saved_query()
            self._register_list_saved_queries()
            self._register_show_saved_query()

        status = CORE_TOOLS_STATUS[disable_setting]
        logger.info(f"Core tools: {status}")
        return status

    @staticmethod
    def _finish(
        tool_name: str, arguments: Dict[str, Any], start: float, result: CallToolResult
    ) -> List[TextContent]:
        duration = (time.perf_counter() - start) * 1000
        if result.isError:
            log_tool_call(tool_name, arguments, duration, "error", result_text(result))
        else:
            log_tool_call(tool_name, arguments, duration, "success")
        return to_tool_content(result)

    def _register_execute_graphql_query(self):
        @self.mcp.tool(
            name="execute_graphql_query",
            annotations={
                "title": "Execute GraphQL query",
                "readOnlyHint": False,
                "openWorldHint": True,
            },
        )
        async def execute_graphql_query_tool(
            query: Annotated[str, Field(description="The GraphQL query to execute")],
        ) -> List[TextContent]:
            """Execute arbitrary GraphQL queries against the configured endpoint."""
            start = time.perf_counter()
            result = await execute_graphql_query(self.client, query)
            return self._finish("execute_graphql_query", {"query": query}, start, result)

    def _register_save_query(self):
        @self.mcp.tool(
            name="save_query",
            annotations={
                "title": "Save Query Tool",
                "readOnlyHint": False,
                "destructiveHint": False,
                "idempotentHint": True,
                "openWorldHint": False,
            },
        )
        async def save_query(
            tool_name: ToolName,
            description: Annotated[
                str,
                Field(min_length=1, description="A human-readable description of what this tool does"),
            ],
            graphql_query: Annotated[
                str,
                Field(min_length=1, description="The GraphQL query that this tool will execute"),
            ],
            parameter_schema: Annotated[
                Dict[str, Any], Field(description="JSON Schema defining tool parameters")
            ],
            overwrite: Annotated[
                bool,
                Field(description="Whether to overwrite an existing tool with the same name"),
            ] = False,
            pagination_config: Optional[PaginationConfig] = None,
            idempotency: Optional[IdempotencyConfig] = None,
        ) -> List[TextContent]:
            """Create or update an MCP tool from a GraphQL query.

            Each ``$variable`` in the query is filled from the tool argument
            of the same name. pagination_config and idempotency are stored
            with the tool but not acted upon.
            """
            start = time.perf_counter()
            result = await self.saved_queries.save_query(
                tool_name,
                description,
                graphql_query,
                parameter_schema,
                overwrite=overwrite,
                pagination_config=pagination_config.model_dump() if pagination_config else None,
                idempotency=idempotency.model_dump() if idempotency else None,
            )
            return self._finish(
                "save_query", {"tool_name": tool_name, "overwrite": overwrite}, start, result
            )

    def _register_delete_saved_query(self):
        @self.mcp.tool(
            name="delete_saved_query",
            annotations={
                "title": "Delete Saved Query",
                "readOnlyHint": False,
                "destructiveHint": True,
                "openWorldHint": False,
            },
        )
        async def delete_saved_query(
            tool_name: Annotated[
                str, Field(description="The name of the saved query tool to delete")
            ],
        ) -> List[TextContent]:
            """Delete a saved query tool and its stored definition."""
            start = time.perf_counter()
            result = self.saved_queries.delete_saved_query(tool_name)
            return self._finish("delete_saved_query", {"tool_name": tool_name}, start, result)

    def _register_list_saved_queries(self):
        @self.mcp.tool(
            name="list_saved_queries",
            annotations={
                "title": "List Saved Queries",
                "readOnlyHint": True,
                "idempotentHint": True,
                "openWorldHint": False,
            },
        )
        async def list_saved_queries() -> List[TextContent]:
            """List all saved query tools and their descriptions."""
            start = time.perf_counter()
            result = self.saved_queries.list_saved_queries()
            return self._finish("list_saved_queries", {}, start, result)

    def _register_show_saved_query(self):
        @self.mcp.tool(
            name="show_saved_query",
            annotations={
                "title": "Show Saved Query",
                "readOnlyHint": True,
                "idempotentHint": True,
                "openWorldHint": False,
            },
        )
        async def show_saved_query(
            tool_name: Annotated[
                str, Field(description="The name of the saved query tool to show")
            ],
        ) -> List[TextContent]:
            """Show the full stored definition of a saved query tool."""
            start = time.perf_counter()
            result = self.saved_queries.show_saved_query(tool_name)
            return self._finish("show_saved_query", {"tool_name": tool_name}, start, result)
