"""
Invocation handlers for saved query tools.

A :class:`DynamicToolHandler` is built once per registered definition.
Each call validates the arguments, maps them onto the query's variables
and executes the stored query against the GraphQL endpoint. Every
outcome, including failures, is returned as a ``CallToolResult``.
"""

import json
from typing import Any, Dict, Optional, Protocol

from mcp.types import CallToolResult

from ..exceptions import ParameterValidationError
from ..logging_config import get_logger
from ..responses import error_message, error_result, text_result
from .schema_converter import ParameterValidator
from .tool_spec import ToolDefinition

logger = get_logger("runtime")


class QueryExecutor(Protocol):
    """Anything that can run a GraphQL document (see ``GraphQLClient``)."""

    async def request(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Any:
        ...


def build_variables(variable_names, params: Dict[str, Any]) -> Dict[str, Any]:
    """Pick the query variables out of validated parameters.

    Names absent from the parameters are omitted rather than sent as null.
    """
    return {
        name: params[name]
        for name in variable_names
        if name in params
    }


class DynamicToolHandler:
    """Callable bound into the registry for one saved tool."""

    def __init__(self, definition: ToolDefinition, client: QueryExecutor):
        self.definition = definition
        self.client = client
        self.validator = ParameterValidator(
            definition.parameter_schema, name=f"{definition.name}_parameters"
        )

    @property
    def name(self) -> str:
        return self.definition.name

    def input_schema(self) -> Dict[str, Any]:
        return self.validator.input_schema()

    async def __call__(self, params: Optional[Dict[str, Any]] = None) -> CallToolResult:
        operation = f"executing tool '{self.name}'"

        logger.debug(f"{self.name}: validating parameters")
        try:
            validated = self.validator.validate(params)
        except ParameterValidationError as e:
            logger.info(f"{self.name}: {e}")
            return error_result(f"Error {operation}: {e}")

        variables = build_variables(self.definition.variables, validated)

        logger.debug(f"{self.name}: executing GraphQL query with {sorted(variables)}")
        try:
            result = await self.client.request(self.definition.graphql_query, variables)
        except Exception as e:
            message = error_message(e)
            logger.error(f"Error {operation}: {message}")
            return error_result(f"Error {operation}: {message}")

        return text_result(json.dumps(result, indent=2, default=str))
