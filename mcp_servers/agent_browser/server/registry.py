"""
Tool registry: advertised definitions plus the mapper behind each one.

Replaces a per-tool if/elif chain with an O(1) lookup, and verifies once at
startup that the advertised surface and the mapper agree.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from ..commands import CANONICAL_ACTIONS, Command
from ..errors import RegistryConsistencyError
from .definitions import MERGED_TOOL_DEFINITIONS
from .mapper import DIRECT_TOOLS, DISCRIMINATED_TOOLS, map_tool_call

logger = logging.getLogger("mcp.agent_browser.registry")

MapperFunc = Callable[[str, Any], Command]


class ToolRegistry:
    """Registry of merged tools: definition + mapper per name."""

    def __init__(self) -> None:
        # name -> (definition, mapper)
        self._tools: dict[str, tuple[dict[str, Any], MapperFunc]] = {}

    def register(self, definition: dict[str, Any], mapper: MapperFunc = map_tool_call) -> None:
        """Register a tool definition and the mapper that resolves its calls."""
        self._tools[str(definition["name"])] = (definition, mapper)

    def register_many(self, definitions: Iterable[dict[str, Any]], mapper: MapperFunc = map_tool_call) -> None:
        """Register multiple definitions sharing one mapper."""
        for definition in definitions:
            self.register(definition, mapper)

    def get(self, name: str) -> dict[str, Any] | None:
        """Get a tool definition by name."""
        entry = self._tools.get(name)
        return entry[0] if entry else None

    def has(self, name: str) -> bool:
        """Check if tool exists."""
        return name in self._tools

    def map_call(self, name: str, arguments: Any) -> Command:
        """Map a tool call to its canonical command.

        Raises:
            KeyError: If tool not found
            MappingError: If the arguments cannot be mapped
        """
        entry = self._tools.get(name)
        if entry is None:
            raise KeyError(f"Unknown tool: {name}")
        _definition, mapper = entry
        return mapper(name, arguments)

    def definitions(self) -> list[dict[str, Any]]:
        """Definitions in registration order."""
        return [definition for definition, _ in self._tools.values()]

    @property
    def tool_names(self) -> list[str]:
        """Get list of registered tool names."""
        return list(self._tools.keys())

    def __len__(self) -> int:
        return len(self._tools)

    def check_consistency(self) -> None:
        """Verify the advertised surface against the mapper tables.

        Raises RegistryConsistencyError listing every problem found.
        """
        problems = consistency_problems(self.definitions())
        if problems:
            for problem in problems:
                logger.error("registry_inconsistent: %s", problem)
            raise RegistryConsistencyError("; ".join(problems))


def consistency_problems(definitions: Iterable[dict[str, Any]]) -> list[str]:
    """All disagreements between tool definitions and the mapper tables."""
    problems: list[str] = []
    by_name: dict[str, dict[str, Any]] = {}
    for definition in definitions:
        name = str(definition.get("name") or "")
        if name in by_name:
            problems.append(f"duplicate tool definition: {name}")
        by_name[name] = definition

    mapped = set(DIRECT_TOOLS) | set(DISCRIMINATED_TOOLS)
    for name in sorted(set(by_name) - mapped):
        problems.append(f"{name}: advertised but has no mapper")
    for name in sorted(mapped - set(by_name)):
        problems.append(f"{name}: mapper exists but tool is not advertised")

    for name, definition in by_name.items():
        schema = definition.get("inputSchema") or {}
        properties = schema.get("properties") or {}
        for req in schema.get("required") or []:
            if req not in properties:
                problems.append(f"{name}: required field '{req}' missing from properties")

        if name in DIRECT_TOOLS and DIRECT_TOOLS[name] not in CANONICAL_ACTIONS:
            problems.append(f"{name}: maps to undeclared action '{DIRECT_TOOLS[name]}'")

        entry = DISCRIMINATED_TOOLS.get(name)
        if entry is None:
            continue
        field_name, table = entry
        discriminant = properties.get(field_name)
        if not isinstance(discriminant, dict) or "enum" not in discriminant:
            problems.append(f"{name}: discriminant '{field_name}' is not declared as an enum")
            continue
        declared = set(discriminant["enum"])
        resolved = set(table)
        for value in sorted(declared - resolved):
            problems.append(f"{name}: {field_name}='{value}' advertised but not mapped")
        for value in sorted(resolved - declared):
            problems.append(f"{name}: {field_name}='{value}' mapped but not advertised")
        for value, action in table.items():
            if action not in CANONICAL_ACTIONS:
                problems.append(f"{name}: {field_name}='{value}' maps to undeclared action '{action}'")

    return problems


def create_default_registry() -> ToolRegistry:
    """Create registry with all merged tools registered and verified."""
    registry = ToolRegistry()
    registry.register_many(MERGED_TOOL_DEFINITIONS)
    registry.check_consistency()
    return registry


__all__ = ["ToolRegistry", "consistency_problems", "create_default_registry"]
