"""
FastMCP server for GraphQL Metatool.

Wires the GraphQL client, the saved query store, the registry and the
core tools together and exposes them over stdio or HTTP.
"""

from typing import Optional

from fastmcp import FastMCP

from ..client import GraphQLClient
from ..config import Settings
from ..dynamic_tool import (
    CORE_TOOL_NAMES,
    SavedQueryRegistrar,
    ToolRegistry,
    ToolStorage,
    ensure_data_directory,
)
from ..logging_config import get_logger
from ..schema_service import SchemaService
from .host import FastMCPToolHost
from .registrars import CoreToolRegistrar

logger = get_logger("server")

SERVER_NAME = "graphql-metatool"


class GraphQLMetatoolServer:
    """MCP server exposing GraphQL execution and saved query tools."""

    def __init__(
        self,
        settings: Settings,
        client: Optional[GraphQLClient] = None,
        storage: Optional[ToolStorage] = None,
    ):
        """
        Args:
            settings: Resolved settings
            client: GraphQL client; built from ``settings`` when omitted
            storage: Tool store; ``settings.tools_dir`` when omitted
        """
        self.settings = settings
        ensure_data_directory(settings.data_dir)

        self.client = client or GraphQLClient.from_settings(settings)
        self.storage = storage or ToolStorage(settings.tools_dir)
        self.registry = ToolRegistry()
        self.schema_service = SchemaService(self.client) if settings.validate_queries else None

        self.mcp = FastMCP(SERVER_NAME, on_duplicate_tools="replace")
        self.host = FastMCPToolHost(self.mcp, reserved_names=set(CORE_TOOL_NAMES))

        self.saved_queries = SavedQueryRegistrar(
            self.host,
            self.registry,
            self.storage,
            self.client,
            schema_service=self.schema_service,
        )
        self.core_tools_status = CoreToolRegistrar(
            self.mcp, self.saved_queries, self.client
        ).register_all(settings.disable_core_tools)

        loaded = self.saved_queries.load_saved_tools()
        logger.info(
            f"GraphQL Metatool server initialized for {settings.graphql_endpoint} "
            f"({self.core_tools_status}, {loaded} saved queries)"
        )

    def run(self, transport: str = "stdio", host: str = "127.0.0.1", port: int = 8000):
        """Run the server until interrupted. Blocks."""
        if transport == "stdio":
            self.mcp.run(transport="stdio", show_banner=False)
        else:
            logger.info(f"Starting HTTP transport on {host}:{port}")
            self.mcp.run(transport="http", host=host, port=port, show_banner=False)

    async def run_async(self, transport: str = "stdio", host: str = "127.0.0.1", port: int = 8000):
        if transport == "stdio":
            await self.mcp.run_async(transport="stdio", show_banner=False)
        else:
            await self.mcp.run_async(transport="http", host=host, port=port, show_banner=False)
