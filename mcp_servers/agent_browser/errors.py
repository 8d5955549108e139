"""
Error taxonomy for the agent-browser server.

- MappingError: tool call cannot be turned into a command (unknown tool,
  unknown discriminant value, schema violation). Never retried.
- SessionError: the session could not be created, launched or switched.
- DriverError: the driver rejected a structurally valid command.
- TeardownError: closing a driver failed. Always swallowed by the caller.
- RegistryConsistencyError: tool surface and mapper disagree (startup check).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


class AgentBrowserError(Exception):
    """Base class for all agent-browser errors."""


@dataclass(eq=False)
class MappingError(AgentBrowserError):
    """Structured mapping failure with enough context to fix the call."""

    message: str
    tool: str | None = None
    argument: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.message


class SessionError(AgentBrowserError):
    pass


class DriverError(AgentBrowserError):
    pass


class TeardownError(AgentBrowserError):
    pass


class RegistryConsistencyError(AgentBrowserError):
    pass


__all__ = [
    "AgentBrowserError",
    "DriverError",
    "MappingError",
    "RegistryConsistencyError",
    "SessionError",
    "TeardownError",
]
