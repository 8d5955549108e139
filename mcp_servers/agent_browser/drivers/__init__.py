"""Driver backends.

Keep this package import light: the Playwright driver is only imported when a
desktop session is actually constructed.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from ..config import DESKTOP_BACKEND
from .base import Driver, DriverResponse

if TYPE_CHECKING:
    from ..config import AgentBrowserConfig

DriverFactory = Callable[["AgentBrowserConfig"], Driver]


def _playwright_factory(config: AgentBrowserConfig) -> Driver:
    from .playwright_driver import PlaywrightDriver

    return PlaywrightDriver(config)


# backend family -> factory
_DRIVER_FACTORIES: dict[str, DriverFactory] = {
    DESKTOP_BACKEND: _playwright_factory,
}


def register_driver(backend: str, factory: DriverFactory) -> None:
    """Register (or replace) the driver factory for a backend family."""
    _DRIVER_FACTORIES[backend] = factory


def driver_factories() -> dict[str, DriverFactory]:
    return dict(_DRIVER_FACTORIES)


__all__ = ["Driver", "DriverFactory", "DriverResponse", "driver_factories", "register_driver"]
