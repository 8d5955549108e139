"""
Type definitions for MCP server responses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class ToolContent:
    """Single content item in tool response."""

    type: str  # always "text" on this server
    text: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to MCP content format."""
        return {"type": self.type, "text": self.text}


@dataclass(slots=True)
class ToolResult:
    """Result of a tool execution."""

    content: list[ToolContent] = field(default_factory=list)
    is_error: bool = False

    @classmethod
    def text(cls, text: str) -> ToolResult:
        """Create result with single text content."""
        return cls(content=[ToolContent(type="text", text=text)])

    @classmethod
    def texts(cls, *texts: str) -> ToolResult:
        """Create result with several text items, in order."""
        return cls(content=[ToolContent(type="text", text=t) for t in texts])

    @classmethod
    def error(cls, message: str) -> ToolResult:
        """Uniform failure shape: one text item ``Error: <message>``."""
        return cls(content=[ToolContent(type="text", text=f"Error: {message}")], is_error=True)

    def to_content_list(self) -> list[dict[str, Any]]:
        """Convert to MCP content list format."""
        return [c.to_dict() for c in self.content]

    def to_response(self) -> dict[str, Any]:
        return {"content": self.to_content_list(), "isError": self.is_error}
