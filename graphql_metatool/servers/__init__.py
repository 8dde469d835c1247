"""MCP server and host protocol layer adapter."""

from .host import FastMCPToolHandle, FastMCPToolHost, SavedQueryTool, ToolHandle, ToolHost
from .mcp_server import GraphQLMetatoolServer

__all__ = [
    "FastMCPToolHandle",
    "FastMCPToolHost",
    "SavedQueryTool",
    "ToolHandle",
    "ToolHost",
    "GraphQLMetatoolServer",
]
