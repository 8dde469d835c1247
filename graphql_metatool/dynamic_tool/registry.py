"""
In-memory registry of live saved query tools.

Pairs each :class:`ToolDefinition` with the handle the host protocol layer
returned when the tool was registered, so it can later be updated in
place or removed. Nothing here is persisted.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional

from ..exceptions import RegistryError
from .tool_spec import ToolDefinition


@dataclass
class RegistryEntry:
    """A registered tool and its host-layer handle."""

    definition: ToolDefinition
    handle: Any


class ToolRegistry:
    """Name -> :class:`RegistryEntry` mapping, in registration order."""

    def __init__(self):
        self._entries: Dict[str, RegistryEntry] = {}

    def add(self, name: str, definition: ToolDefinition, handle: Any) -> RegistryEntry:
        """
        Raises:
            RegistryError: If ``name`` is already registered
        """
        if name in self._entries:
            raise RegistryError(f"Tool '{name}' already exists in registry")
        entry = RegistryEntry(definition=definition, handle=handle)
        self._entries[name] = entry
        return entry

    def get(self, name: str) -> Optional[RegistryEntry]:
        return self._entries.get(name)

    def replace(self, name: str, definition: ToolDefinition) -> RegistryEntry:
        """Swap the definition of a registered tool, keeping its handle.

        Raises:
            RegistryError: If ``name`` is not registered
        """
        entry = self._entries.get(name)
        if entry is None:
            raise RegistryError(f"Tool '{name}' does not exist in registry")
        entry.definition = definition
        return entry

    def remove(self, name: str) -> RegistryEntry:
        """
        Raises:
            RegistryError: If ``name`` is not registered
        """
        try:
            return self._entries.pop(name)
        except KeyError:
            raise RegistryError(f"Tool '{name}' does not exist in registry") from None

    def names(self) -> List[str]:
        return list(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))
