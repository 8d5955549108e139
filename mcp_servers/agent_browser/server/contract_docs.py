"""Render user-facing contract docs.

Deterministic rendering of the merged tool contract markdown, kept as a real
module so tests can verify that `contracts/merged_tools.md` stays in sync with
the live `tools/list` output.
"""

from __future__ import annotations

from typing import Any

from .mapper import DISCRIMINATED_TOOLS


def _first_line(text: Any) -> str:
    lines = str(text or "").strip().splitlines()
    return lines[0].replace("|", "\\|") if lines else ""


def render_merged_tools_markdown(snapshot: dict[str, Any]) -> str:
    tools = snapshot.get("tools") or []
    lines: list[str] = []
    lines.append("# MCP Tool Contract (Merged)")
    lines.append("")
    lines.append(f"- protocolVersion: `{snapshot.get('protocolVersion')}`")

    server_info = snapshot.get("serverInfo") or {}
    lines.append(f"- server: `{server_info.get('name')}` v`{server_info.get('version')}`")
    lines.append(f"- tools: `{len(tools)}`")
    lines.append("")

    lines.append("## Tools")
    lines.append("")
    lines.append("| name | description | commands |")
    lines.append("|---|---|---|")
    for tool in tools:
        if not isinstance(tool, dict):
            continue
        name = str(tool.get("name", ""))
        entry = DISCRIMINATED_TOOLS.get(name)
        if entry is None:
            commands = ""
        else:
            field_name, table = entry
            commands = ", ".join(f"`{field_name}={value}`→`{action}`" for value, action in table.items())
        lines.append(f"| `{name}` | {_first_line(tool.get('description'))} | {commands} |")

    lines.append("")
    lines.append("## Notes")
    lines.append("")
    lines.append("- `tools/list` is the source of truth for the tool list and input schemas.")
    lines.append("- Tool outputs are returned as MCP `content[]` text items.")
    lines.append("- On tool failure, the server sets `isError=true` and returns `Error: <message>` in `content[0].text`.")

    return "\n".join(lines) + "\n"
