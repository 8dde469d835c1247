"""
Tool registrars for the GraphQL Metatool MCP server.

- CoreToolRegistrar: execute_graphql_query and the saved query management tools
"""

from .core_tools import CORE_TOOLS_STATUS, CoreToolRegistrar, execute_graphql_query

__all__ = [
    "CORE_TOOLS_STATUS",
    "CoreToolRegistrar",
    "execute_graphql_query",
]
