"""
Pytest configuration and shared fixtures for GraphQL Metatool tests.

This module provides common fixtures used across all tests, including
settings pointing at a temporary data directory, a mock GraphQL client
and a mock host protocol layer.
"""

import pytest
from pathlib import Path
from typing import Dict, Any
from unittest.mock import AsyncMock, MagicMock

from graphql_metatool.config import Settings
from graphql_metatool.dynamic_tool import ToolRegistry, ToolStorage


GET_USER_QUERY = "query GetUser($id: ID!) { user(id: $id) { id name } }"

GET_USER_SCHEMA = {
    "type": "object",
    "properties": {"id": {"type": "string"}},
    "required": ["id"],
}

LIST_USERS_QUERY = "query ListUsers($limit: Int) { users(limit: $limit) { id } }"

LIST_USERS_SCHEMA = {
    "type": "object",
    "properties": {"limit": {"type": "integer", "default": 10}},
}


@pytest.fixture
def data_dir(tmp_path) -> Path:
    """Temporary data root for stored tools."""
    return tmp_path / "data"


@pytest.fixture
def settings(data_dir) -> Settings:
    """Settings for a fake endpoint with a temporary data directory."""
    return Settings(
        graphql_endpoint="https://api.example.test/graphql",
        headers={"content-type": "application/json"},
        data_dir=data_dir,
    )


@pytest.fixture
def storage(data_dir) -> ToolStorage:
    """Tool storage in a temporary directory."""
    return ToolStorage(data_dir / "tools")


@pytest.fixture
def registry() -> ToolRegistry:
    return ToolRegistry()


@pytest.fixture
def mock_client():
    """Create a mock GraphQL client returning a fixed user."""
    client = MagicMock()
    client.request = AsyncMock(return_value={"user": {"id": "42", "name": "Ada"}})
    return client


@pytest.fixture
def mock_host():
    """Create a mock host protocol layer.

    ``register_tool`` returns a fresh handle mock per call; handles are
    collected in ``mock_host.handles`` by tool name.
    """
    host = MagicMock()
    host.handles = {}

    def register_tool(name, **kwargs):
        handle = MagicMock(name=f"handle_{name}")
        host.handles[name] = handle
        return handle

    host.register_tool = MagicMock(side_effect=register_tool)
    return host


@pytest.fixture
def get_user_args() -> Dict[str, Any]:
    """Arguments for saving the get_user tool."""
    return {
        "tool_name": "get_user",
        "description": "Fetch a user by id",
        "graphql_query": GET_USER_QUERY,
        "parameter_schema": GET_USER_SCHEMA,
    }


@pytest.fixture
def list_users_args() -> Dict[str, Any]:
    """Arguments for saving the list_users tool (limit defaults to 10)."""
    return {
        "tool_name": "list_users",
        "description": "List users",
        "graphql_query": LIST_USERS_QUERY,
        "parameter_schema": LIST_USERS_SCHEMA,
    }
