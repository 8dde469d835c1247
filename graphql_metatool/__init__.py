"""GraphQL Metatool

MCP server that executes GraphQL queries against a single endpoint and
turns saved, parameterized queries into live tools.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
