"""
Unit tests for cli.py module.

Tests all CLI commands (serve, list, show, config, version), argument
parsing and error handling for the graphql-metatool command-line interface.
"""

import json

import pytest
from unittest.mock import MagicMock, patch
from io import StringIO

from graphql_metatool import cli, __version__
from graphql_metatool.dynamic_tool import ToolDefinition, ToolStorage


@pytest.fixture
def env(monkeypatch, tmp_path):
    """Point the CLI at a fake endpoint and a temporary data directory."""
    monkeypatch.setenv("GRAPHQL_ENDPOINT", "https://api.example.test/graphql")
    monkeypatch.setenv("GRAPHQL_METATOOL_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("GRAPHQL_AUTH_TOKEN", "secret-token")
    return tmp_path / "data"


@pytest.fixture
def saved_tool(env):
    storage = ToolStorage(env / "tools")
    definition = ToolDefinition(
        "get_user",
        "Fetch a user by id",
        "query($id: ID!) { user(id: $id) { id } }",
        {"type": "object", "properties": {"id": {"type": "string"}}},
        variables=["id"],
    )
    storage.save("get_user", definition)
    return definition


class TestCLIArgumentParsing:
    """Test CLI argument parsing for all commands."""

    def test_no_command_shows_help(self):
        """Test that running without a command shows help and exits."""
        with patch("sys.stdout", new_callable=StringIO):
            with pytest.raises(SystemExit) as exc_info:
                cli.main([])
            assert exc_info.value.code == 1

    def test_invalid_command(self):
        with pytest.raises(SystemExit):
            cli.main(["invalid_command"])

    def test_invalid_transport(self):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["serve", "--transport", "sse"])
        assert exc_info.value.code == 2

    def test_help_flag(self):
        """Test that --help flag shows help."""
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["--help"])
        assert exc_info.value.code == 0


class TestServeCommand:
    """Test the serve command with a mocked server."""

    def test_serve_defaults(self, env):
        server = MagicMock()
        server.core_tools_status = "all core tools enabled"
        with patch("graphql_metatool.servers.GraphQLMetatoolServer", return_value=server) as server_cls:
            with patch.object(cli, "setup_logging") as mock_logging:
                cli.main(["serve"])

        settings = server_cls.call_args[0][0]
        assert settings.graphql_endpoint == "https://api.example.test/graphql"
        mock_logging.assert_called_once_with("INFO")
        server.run.assert_called_once_with(transport="stdio", host="127.0.0.1", port=8000)

    def test_serve_http(self, env):
        server = MagicMock()
        with patch("graphql_metatool.servers.GraphQLMetatoolServer", return_value=server):
            with patch.object(cli, "setup_logging"):
                cli.main(["serve", "--transport", "http", "--host", "0.0.0.0", "--port", "9000"])

        server.run.assert_called_once_with(transport="http", host="0.0.0.0", port=9000)

    def test_serve_without_endpoint_exits(self, monkeypatch):
        monkeypatch.delenv("GRAPHQL_ENDPOINT", raising=False)
        with patch("sys.stderr", new_callable=StringIO) as mock_stderr:
            with pytest.raises(SystemExit) as exc_info:
                cli.main(["serve"])

        assert exc_info.value.code == 1
        assert "GRAPHQL_ENDPOINT environment variable is required" in mock_stderr.getvalue()


class TestInspectionCommands:
    """Test list, show and config."""

    def test_list_empty(self, env):
        with patch("sys.stdout", new_callable=StringIO) as mock_stdout:
            cli.main(["list"])
        assert "No saved queries found." in mock_stdout.getvalue()

    def test_list_saved(self, env, saved_tool):
        with patch("sys.stdout", new_callable=StringIO) as mock_stdout:
            cli.main(["list"])
        assert "get_user: Fetch a user by id" in mock_stdout.getvalue()

    def test_show_saved(self, env, saved_tool):
        with patch("sys.stdout", new_callable=StringIO) as mock_stdout:
            cli.main(["show", "get_user"])
        assert json.loads(mock_stdout.getvalue()) == saved_tool.to_dict()

    def test_show_missing(self, env):
        with patch("sys.stderr", new_callable=StringIO) as mock_stderr:
            with pytest.raises(SystemExit) as exc_info:
                cli.main(["show", "missing"])
        assert exc_info.value.code == 1
        assert "Saved query 'missing' not found" in mock_stderr.getvalue()

    def test_list_corrupt_store_exits(self, env):
        (env / "tools").mkdir(parents=True)
        (env / "tools" / "bad.json").write_text("{}")
        with patch("sys.stderr", new_callable=StringIO) as mock_stderr:
            with pytest.raises(SystemExit) as exc_info:
                cli.main(["list"])
        assert exc_info.value.code == 1
        assert "Failed to load tools from directory" in mock_stderr.getvalue()

    def test_config_masks_headers(self, env):
        """Test config command prints settings without header values."""
        with patch("sys.stdout", new_callable=StringIO) as mock_stdout:
            cli.main(["config"])
        output = mock_stdout.getvalue()
        assert "GraphQL Metatool Configuration:" in output
        assert "https://api.example.test/graphql" in output
        assert "secret-token" not in output
        assert '"authorization": "***"' in output

    def test_version_command(self):
        """Test version command prints version."""
        with patch("sys.stdout", new_callable=StringIO) as mock_stdout:
            cli.main(["version"])
        output = mock_stdout.getvalue()
        assert "GraphQL Metatool version" in output
        assert __version__ in output
