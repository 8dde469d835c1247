"""Exception hierarchy for GraphQL Metatool."""

from typing import List, Optional, Tuple


class MetatoolError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(MetatoolError):
    """Settings are missing or malformed."""


class ToolValidationError(MetatoolError):
    """A tool definition failed validation (bad name, bad schema)."""


class StorageError(MetatoolError):
    """Reading, writing or deleting a persisted tool failed."""

    def __init__(self, message: str, tool_name: Optional[str] = None):
        super().__init__(message)
        self.tool_name = tool_name


class InvalidToolConfigError(StorageError):
    """A persisted tool record is structurally invalid."""

    def __init__(self, source: str):
        super().__init__(f"Invalid tool configuration in file: {source}")
        self.source = source


class RegistryError(MetatoolError):
    """The in-memory registry rejected an operation."""


class GraphQLRequestError(MetatoolError):
    """The GraphQL endpoint returned an error or could not be reached."""

    def __init__(self, message: str, errors: Optional[list] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.errors = errors or []
        self.status_code = status_code


class ParameterValidationError(MetatoolError):
    """Tool call arguments did not match the tool's parameter schema.

    ``issues`` holds (field path, reason) pairs in the order they were found.
    """

    def __init__(self, issues: List[Tuple[str, str]]):
        self.issues = issues
        super().__init__(
            "Parameter validation error: "
            + ", ".join(f"{path}: {reason}" for path, reason in issues)
        )

    @property
    def paths(self) -> List[str]:
        return [path for path, _ in self.issues]
