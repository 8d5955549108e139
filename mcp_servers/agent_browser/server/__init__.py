"""Server package for the agent-browser MCP server.

Keep this package import light: importing `mcp_servers.agent_browser.server.*`
should not eagerly pull jsonschema and the full registry.
"""

from __future__ import annotations

from typing import Any

__all__ = ["ToolRegistry", "create_default_registry", "map_tool_call"]


def __getattr__(name: str) -> Any:  # pragma: no cover
    if name in {"ToolRegistry", "create_default_registry"}:
        from .registry import ToolRegistry, create_default_registry

        return {"ToolRegistry": ToolRegistry, "create_default_registry": create_default_registry}[name]
    if name == "map_tool_call":
        from .mapper import map_tool_call

        return map_tool_call
    raise AttributeError(name)
