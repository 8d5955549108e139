"""Protocol and tool contract definitions.

This is the single source of truth for:
- supported MCP protocol versions
- server identity
- capabilities advertised by initialize
- merged tool list
"""

from __future__ import annotations

import os
from typing import Any

from ..config import AgentBrowserConfig
from .definitions import MERGED_TOOL_DEFINITIONS

SERVER_INFO: dict[str, str] = {"name": "agent-browser-mcp", "version": "0.1.0"}

SUPPORTED_PROTOCOL_VERSIONS = ["0.1.0", "2025-06-18", "2024-11-05"]
LATEST_PROTOCOL_VERSION = SUPPORTED_PROTOCOL_VERSIONS[1]
DEFAULT_PROTOCOL_VERSION = LATEST_PROTOCOL_VERSION

CAPABILITIES: dict[str, Any] = {
    "tools": {"listChanged": False},
}

# Advertised when MCP_TOOLSET=core: lifecycle, navigation and perception.
CORE_TOOLS: frozenset[str] = frozenset(
    {
        "browser_launch",
        "browser_navigate",
        "browser_snapshot",
        "browser_screenshot",
        "browser_close",
        "browser_element_action",
        "browser_input",
        "browser_press",
        "browser_get",
        "browser_wait",
    }
)


def select_protocol(requested: Any) -> str:
    if isinstance(requested, str) and requested in SUPPORTED_PROTOCOL_VERSIONS:
        return requested
    return DEFAULT_PROTOCOL_VERSION


def initialize_result(protocol: str) -> dict[str, Any]:
    return {
        "protocolVersion": protocol,
        "serverInfo": SERVER_INFO,
        "capabilities": CAPABILITIES,
        "instructions": "",
    }


def tools_list(toolset: str | None = None) -> list[dict[str, Any]]:
    if toolset is None:
        toolset = AgentBrowserConfig.normalize_toolset(os.environ.get("MCP_TOOLSET"))
    if toolset == "core":
        # Calls to tools outside this list are still served.
        return [t for t in MERGED_TOOL_DEFINITIONS if t.get("name") in CORE_TOOLS]
    return MERGED_TOOL_DEFINITIONS


def contract_snapshot(protocol: str | None = None, toolset: str | None = None) -> dict[str, Any]:
    return {
        "protocolVersion": protocol or DEFAULT_PROTOCOL_VERSION,
        "serverInfo": SERVER_INFO,
        "tools": tools_list(toolset),
    }
