"""
Saved query tools.

- tool_spec: ToolDefinition and the variable extractor
- schema_converter: JSON Schema to runtime validator
- storage: one JSON file per tool
- registry: live tools and their host handles
- runtime: invocation handler for a saved tool
- registrar: save, update, delete, list and show use cases
"""

from .tool_spec import (
    IdempotencyConfig,
    PaginationConfig,
    ToolDefinition,
    create_tool_definition,
    extract_variables,
)
from .schema_converter import ParameterValidator, convert_json_schema
from .storage import ToolStorage, ensure_data_directory
from .registry import RegistryEntry, ToolRegistry
from .runtime import DynamicToolHandler, build_variables
from .registrar import CORE_TOOL_NAMES, SavedQueryRegistrar

__all__ = [
    "IdempotencyConfig",
    "PaginationConfig",
    "ToolDefinition",
    "create_tool_definition",
    "extract_variables",
    "ParameterValidator",
    "convert_json_schema",
    "ToolStorage",
    "ensure_data_directory",
    "RegistryEntry",
    "ToolRegistry",
    "DynamicToolHandler",
    "build_variables",
    "CORE_TOOL_NAMES",
    "SavedQueryRegistrar",
]
