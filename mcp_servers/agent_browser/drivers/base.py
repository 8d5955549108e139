"""Driver contract consumed by the session manager and dispatcher."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..commands import Command


@dataclass(slots=True, frozen=True)
class DriverResponse:
    """Outcome of a single command: ``{success, data|error}``."""

    success: bool
    data: Any = None
    error: str | None = None

    @classmethod
    def ok(cls, data: Any = None) -> DriverResponse:
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> DriverResponse:
        return cls(success=False, error=error or "Unknown driver error")


@runtime_checkable
class Driver(Protocol):
    """Opaque browser automation capability.

    Implementations own the real browser (or simulator) connection. The core
    only ever calls these four methods.
    """

    def is_launched(self) -> bool: ...

    def launch(self, options: dict[str, Any]) -> None: ...

    def close(self) -> None: ...

    def execute_command(self, command: Command) -> DriverResponse: ...
