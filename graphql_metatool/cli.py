"""GraphQL Metatool Command Line Interface

Main CLI entry point for running the server and inspecting saved queries.
"""

import argparse
import json
import sys
from typing import List, Optional

from .config import load_settings
from .dynamic_tool import ToolStorage
from .exceptions import ConfigurationError, StorageError
from .logging_config import setup_logging


def _add_config_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config", default=None, help="YAML settings file (environment variables take precedence)"
    )


def run_server(args) -> None:
    """Run the MCP server until interrupted."""
    from .servers import GraphQLMetatoolServer

    settings = load_settings(args.config)
    setup_logging(settings.log_level)
    server = GraphQLMetatoolServer(settings)
    # stdout belongs to the stdio transport
    print(f"GraphQL Metatool server ({server.core_tools_status})", file=sys.stderr)
    server.run(transport=args.transport, host=args.host, port=args.port)


def list_tools(args) -> None:
    settings = load_settings(args.config)
    tools = ToolStorage(settings.tools_dir).load_all()
    if not tools:
        print("No saved queries found.")
        return
    for name, definition in tools.items():
        print(f"{name}: {definition.description}")


def show_tool(args) -> int:
    settings = load_settings(args.config)
    storage = ToolStorage(settings.tools_dir)
    if not storage.exists(args.name):
        print(f"Saved query '{args.name}' not found", file=sys.stderr)
        return 1
    print(storage.load(args.name).to_json())
    return 0


def show_config(args) -> None:
    settings = load_settings(args.config)
    print("GraphQL Metatool Configuration:")
    print(json.dumps(settings.masked(), indent=2))


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="GraphQL Metatool: GraphQL query execution and saved query tools over MCP",
        prog="graphql-metatool",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the MCP server")
    _add_config_argument(serve_parser)
    serve_parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default="stdio",
        help="MCP transport (default: stdio)",
    )
    serve_parser.add_argument(
        "--host", default="127.0.0.1", help="HTTP host (default: 127.0.0.1)"
    )
    serve_parser.add_argument(
        "--port", type=int, default=8000, help="HTTP port (default: 8000)"
    )

    # List command
    list_parser = subparsers.add_parser("list", help="List saved query tools")
    _add_config_argument(list_parser)

    # Show command
    show_parser = subparsers.add_parser("show", help="Show a saved query definition")
    show_parser.add_argument("name", help="Saved query tool name")
    _add_config_argument(show_parser)

    # Config command
    config_parser = subparsers.add_parser(
        "config", help="Show resolved configuration (header values masked)"
    )
    _add_config_argument(config_parser)

    # Version command
    subparsers.add_parser("version", help="Show version information")

    args = parser.parse_args(argv)

    try:
        if args.command == "serve":
            run_server(args)
        elif args.command == "list":
            list_tools(args)
        elif args.command == "show":
            code = show_tool(args)
            if code:
                sys.exit(code)
        elif args.command == "config":
            show_config(args)
        elif args.command == "version":
            from . import __version__

            print(f"GraphQL Metatool version {__version__}")
        else:
            parser.print_help()
            sys.exit(1)
    except (ConfigurationError, StorageError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
