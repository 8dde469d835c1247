"""
File-backed persistence for saved query tools.

Each tool is stored as ``<tools_dir>/<name>.json``. The file name is the
key: ``load_all`` derives tool names from file stems.
"""

import json
from pathlib import Path
from typing import Dict, Optional, Union

from ..exceptions import InvalidToolConfigError, StorageError
from ..logging_config import get_logger
from .tool_spec import ToolDefinition, is_valid_tool_record

logger = get_logger("storage")

TOOL_FILE_SUFFIX = ".json"


def ensure_data_directory(data_dir: Union[str, Path]) -> Path:
    """Create the data root with its ``tools`` and ``types`` subdirectories."""
    data_dir = Path(data_dir)
    for path in (data_dir, data_dir / "tools", data_dir / "types"):
        path.mkdir(parents=True, exist_ok=True)
    return data_dir


class ToolStorage:
    """Durable mapping from tool name to :class:`ToolDefinition`."""

    def __init__(self, tools_dir: Union[str, Path]):
        self.tools_dir = Path(tools_dir)

    def _path_for(self, name: str) -> Path:
        return self.tools_dir / f"{name}{TOOL_FILE_SUFFIX}"

    def exists(self, name: str) -> bool:
        return self._path_for(name).exists()

    def save(self, name: str, definition: ToolDefinition) -> None:
        """Write a definition, replacing any existing file for ``name``.

        Raises:
            StorageError: If the directory or file cannot be written
        """
        try:
            self.tools_dir.mkdir(parents=True, exist_ok=True)
            with open(self._path_for(name), "w", encoding="utf-8") as f:
                f.write(definition.to_json())
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(
                f"Failed to save tool '{name}' to file: {e}", tool_name=name
            ) from e
        logger.debug(f"Saved tool '{name}' to {self._path_for(name)}")

    def load(self, name: str) -> Optional[ToolDefinition]:
        """Load one definition.

        Returns:
            The definition, or None if no file exists for ``name``

        Raises:
            StorageError: If the file cannot be read or is structurally invalid
        """
        path = self._path_for(name)
        if not path.exists():
            return None

        try:
            with open(path, "r", encoding="utf-8") as f:
                record = json.load(f)
            if not is_valid_tool_record(record):
                raise InvalidToolConfigError(str(path))
            return ToolDefinition.from_dict(record)
        except (OSError, ValueError, InvalidToolConfigError) as e:
            raise StorageError(
                f"Failed to load tool '{name}' from file: {e}", tool_name=name
            ) from e

    def load_all(self) -> Dict[str, ToolDefinition]:
        """Load every stored definition keyed by file stem.

        A missing directory yields an empty mapping. A single invalid file
        fails the whole load.

        Raises:
            StorageError: If the directory cannot be listed or any file is invalid
        """
        tools: Dict[str, ToolDefinition] = {}
        if not self.tools_dir.exists():
            return tools

        try:
            for path in sorted(self.tools_dir.iterdir()):
                if path.suffix != TOOL_FILE_SUFFIX:
                    continue
                definition = self.load(path.stem)
                if definition is not None:
                    tools[path.stem] = definition
        except (OSError, StorageError) as e:
            raise StorageError(f"Failed to load tools from directory: {e}") from e

        logger.debug(f"Loaded {len(tools)} tools from {self.tools_dir}")
        return tools

    def delete(self, name: str) -> None:
        """Remove a stored definition. Missing files are ignored.

        Raises:
            StorageError: If the file exists but cannot be removed
        """
        path = self._path_for(name)
        if not path.exists():
            return

        try:
            path.unlink()
        except OSError as e:
            raise StorageError(
                f"Failed to delete tool file '{name}': {e}", tool_name=name
            ) from e
        logger.debug(f"Deleted tool file {path}")
