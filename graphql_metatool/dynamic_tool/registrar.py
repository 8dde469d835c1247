"""
Saved query use cases.

Save, update, delete, list and show operate on three stores that must stay
in step: the file store, the in-memory registry and the host protocol
layer. Mutations persist first and touch the registry last; nothing is
awaited between those steps, so two calls cannot interleave.
"""

import json
from dataclasses import replace
from typing import Any, Dict, Optional

from mcp.types import CallToolResult

from ..exceptions import RegistryError
from ..logging_config import get_logger
from ..responses import with_error_handling, with_error_handling_async
from .registry import RegistryEntry, ToolRegistry
from .runtime import DynamicToolHandler, QueryExecutor
from .tool_spec import ToolDefinition, create_tool_definition
from .storage import ToolStorage

logger = get_logger("tools.saved_queries")

CORE_TOOL_NAMES = frozenset(
    {
        "execute_graphql_query",
        "save_query",
        "delete_saved_query",
        "list_saved_queries",
        "show_saved_query",
    }
)


class SavedQueryRegistrar:
    """Keeps saved query tools registered, persisted and callable."""

    def __init__(
        self,
        host,
        registry: ToolRegistry,
        storage: ToolStorage,
        client: QueryExecutor,
        schema_service=None,
    ):
        """
        Initialize the registrar.

        Args:
            host: :class:`~graphql_metatool.servers.host.ToolHost` to publish tools on
            registry: Registry of live saved tools
            storage: File store for tool definitions
            client: GraphQL client used by the tool handlers
            schema_service: Optional SchemaService; when given, queries are
                validated against the endpoint schema before saving
        """
        self.host = host
        self.registry = registry
        self.storage = storage
        self.client = client
        self.schema_service = schema_service

    def load_saved_tools(self) -> int:
        """Register every persisted tool. Called once at server start.

        A corrupt file aborts the load without registering anything; a tool
        that fails to register is logged and skipped.

        Returns:
            Number of tools registered
        """
        try:
            saved = self.storage.load_all()
        except Exception as e:
            logger.error(f"Failed to load saved queries: {e}")
            return 0

        logger.debug(f"Loading {len(saved)} saved queries from storage")
        loaded = 0
        for tool_name, definition in saved.items():
            # The file name is the tool identity; delete removes that file
            if definition.name != tool_name:
                logger.warning(
                    f"Saved query file '{tool_name}' names its tool '{definition.name}', "
                    f"registering it as '{tool_name}'"
                )
                definition = replace(definition, name=tool_name)
            try:
                self._register(definition)
                loaded += 1
                logger.debug(f"Registered saved query: {tool_name}")
            except Exception as e:
                logger.error(f"Failed to register saved query {tool_name}: {e}")
        return loaded

    def _register(self, definition: ToolDefinition) -> RegistryEntry:
        handler = DynamicToolHandler(definition, self.client)
        handle = self.host.register_tool(
            definition.name,
            title=definition.description,
            description=definition.description,
            input_schema=handler.input_schema(),
            handler=handler,
        )
        return self.registry.add(definition.name, definition, handle)

    def _update(self, definition: ToolDefinition) -> RegistryEntry:
        entry = self.registry.get(definition.name)
        if entry is None:
            raise RegistryError(f"Registered tool '{definition.name}' not found for update")

        handler = DynamicToolHandler(definition, self.client)
        entry.handle.update(
            title=definition.description,
            description=definition.description,
            input_schema=handler.input_schema(),
            handler=handler,
        )
        return self.registry.replace(definition.name, definition)

    async def save_query(
        self,
        tool_name: str,
        description: str,
        graphql_query: str,
        parameter_schema: Dict[str, Any],
        overwrite: bool = False,
        pagination_config: Optional[Dict[str, Any]] = None,
        idempotency: Optional[Dict[str, Any]] = None,
    ) -> CallToolResult:
        """Create a saved query tool, or replace one when ``overwrite`` is set."""

        async def _save() -> str:
            if tool_name in CORE_TOOL_NAMES:
                raise RegistryError(f"Cannot overwrite core tool '{tool_name}'")

            exists = tool_name in self.registry
            if exists and not overwrite:
                raise RegistryError(
                    f"Tool with name '{tool_name}' already exists. "
                    "Set overwrite=true to update it."
                )

            logger.debug(f"{tool_name}: parsing params")
            definition = create_tool_definition(
                tool_name,
                description,
                graphql_query,
                parameter_schema,
                pagination_config=pagination_config,
                idempotency=idempotency,
            )

            if self.schema_service is not None:
                logger.debug(f"{tool_name}: validating query against schema")
                await self.schema_service.check_query(graphql_query)
                exists = tool_name in self.registry
                if exists and not overwrite:
                    raise RegistryError(
                        f"Tool with name '{tool_name}' already exists. "
                        "Set overwrite=true to update it."
                    )

            # The steps below do not await
            logger.debug(f"{tool_name}: persisting file")
            self.storage.save(tool_name, definition)

            variables = ", ".join(definition.variables)
            count = len(definition.variables)
            if exists:
                logger.debug(f"{tool_name}: updating existing tool in MCP server")
                self._update(definition)
                return f"Successfully updated tool '{tool_name}' with {count} variables: {variables}"

            logger.debug(f"{tool_name}: registering new tool in MCP server")
            self._register(definition)
            return f"Successfully created tool '{tool_name}' with {count} variables: {variables}"

        return await with_error_handling_async(f"saving tool '{tool_name}'", _save)

    def delete_saved_query(self, tool_name: str) -> CallToolResult:
        """Unregister a saved query tool and delete its file."""

        def _delete() -> str:
            if tool_name in CORE_TOOL_NAMES:
                raise RegistryError(f"Cannot delete core tool '{tool_name}'")

            entry = self.registry.get(tool_name)
            if entry is None:
                raise RegistryError(f"Saved query '{tool_name}' not found")

            logger.debug(f"{tool_name}: removing tool from MCP server")
            entry.handle.remove()
            self.registry.remove(tool_name)

            logger.debug(f"{tool_name}: deleting tool file")
            self.storage.delete(tool_name)

            return f"Successfully deleted saved query '{tool_name}'"

        return with_error_handling(f"deleting tool '{tool_name}'", _delete)

    def list_saved_queries(self) -> CallToolResult:
        def _list() -> str:
            if not len(self.registry):
                return "No saved queries found."

            lines = []
            for tool_name in self.registry:
                definition = self.registry.get(tool_name).definition
                lines.append(f"- **{tool_name}**: {definition.description}")

            count = len(lines)
            noun = "query" if count == 1 else "queries"
            return f"Found {count} saved {noun}:\n\n" + "\n".join(lines)

        return with_error_handling("listing saved queries", _list)

    def show_saved_query(self, tool_name: str) -> CallToolResult:
        """Show the stored definition of a saved query as pretty JSON."""

        def _show() -> str:
            if tool_name not in self.registry:
                raise RegistryError(f"Saved query '{tool_name}' not found")

            definition = self.storage.load(tool_name)
            if definition is None:
                raise RegistryError(f"Tool configuration for '{tool_name}' could not be loaded")

            return (
                f"Tool definition for '{tool_name}':\n\n"
                f"```json\n{json.dumps(definition.to_dict(), indent=2)}\n```"
            )

        return with_error_handling(f"showing saved query '{tool_name}'", _show)
