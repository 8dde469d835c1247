"""
Best-effort validation of GraphQL documents against the endpoint schema.

The schema is fetched once through introspection and cached. When the
endpoint does not allow introspection the failure is cached as well and
only syntax is checked from then on.
"""

from typing import Optional

from graphql import (
    GraphQLError,
    GraphQLSchema,
    build_client_schema,
    get_introspection_query,
    parse,
    validate,
)
from .exceptions import ToolValidationError
from .logging_config import get_logger
from .responses import error_message

logger = get_logger("schema")

SCHEMA_SKIPPED_WARNING = (
    "Warning: Schema introspection failed or is disabled. "
    "Query syntax validated but field validation skipped."
)
QUERY_VALID = "GraphQL query is valid"


class SchemaService:
    """Introspection cache plus query validation for one endpoint."""

    def __init__(self, client):
        """
        Args:
            client: Object with ``async request(query, variables=None)``,
                usually a :class:`~graphql_metatool.client.GraphQLClient`
        """
        self.client = client
        self._schema: Optional[GraphQLSchema] = None
        self._fetch_error: Optional[str] = None

    @property
    def fetch_error(self) -> Optional[str]:
        return self._fetch_error

    async def get_schema(self) -> Optional[GraphQLSchema]:
        """Return the endpoint schema, or None if it cannot be introspected."""
        if self._schema is not None:
            return self._schema
        if self._fetch_error is not None:
            return None

        try:
            data = await self.client.request(get_introspection_query())
        except Exception as e:
            self._fetch_error = f"Failed to fetch schema: {error_message(e)}"
            logger.warning(self._fetch_error)
            return None

        if not isinstance(data, dict) or "__schema" not in data:
            self._fetch_error = "Invalid introspection response: missing __schema"
            logger.warning(self._fetch_error)
            return None

        try:
            self._schema = build_client_schema(data)
        except (GraphQLError, TypeError) as e:
            self._fetch_error = f"Failed to build schema: {error_message(e)}"
            logger.warning(self._fetch_error)
            return None

        logger.debug("Cached GraphQL schema from introspection")
        return self._schema

    async def check_query(self, query: str) -> str:
        """Validate a document, raising on syntax or schema errors.

        Returns:
            "GraphQL query is valid", or a warning when the schema is unavailable

        Raises:
            ToolValidationError: On a syntax error or failed schema validation
        """
        try:
            document = parse(query)
        except GraphQLError as e:
            raise ToolValidationError(f"GraphQL syntax error: {e.message}") from e

        schema = await self.get_schema()
        if schema is None:
            logger.warning(SCHEMA_SKIPPED_WARNING)
            return SCHEMA_SKIPPED_WARNING

        errors = validate(schema, document)
        if errors:
            raise ToolValidationError(
                "GraphQL validation failed: " + "; ".join(error.message for error in errors)
            )
        return QUERY_VALID

    def clear_cache(self) -> None:
        self._schema = None
        self._fetch_error = None
