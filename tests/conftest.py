from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from mcp_servers.agent_browser.commands import Command
from mcp_servers.agent_browser.config import DESKTOP_BACKEND, IOS_BACKEND, AgentBrowserConfig
from mcp_servers.agent_browser.drivers import DriverResponse
from mcp_servers.agent_browser.session_manager import SessionManager


class FakeDriver:
    """In-memory driver: records every call, never touches a browser."""

    def __init__(
        self,
        config: AgentBrowserConfig,
        backend: str,
        *,
        fail_launch: bool = False,
        fail_close: bool = False,
        responses: dict[str, Any] | None = None,
    ) -> None:
        self.config = config
        self.backend = backend
        self.fail_launch = fail_launch
        self.fail_close = fail_close
        self.responses = dict(responses or {})
        self.launched = False
        self.launch_calls: list[dict[str, Any]] = []
        self.close_calls = 0
        self.commands: list[Command] = []

    def is_launched(self) -> bool:
        return self.launched

    def launch(self, options: dict[str, Any]) -> None:
        self.launch_calls.append(dict(options))
        if self.fail_launch:
            raise RuntimeError("browser binary not found")
        self.launched = True

    def close(self) -> None:
        self.close_calls += 1
        self.launched = False
        if self.fail_close:
            raise RuntimeError("browser process is stuck")

    def execute_command(self, command: Command) -> DriverResponse:
        self.commands.append(command)
        if command.action == "launch":
            self.launch(dict(command.params))
            return DriverResponse.ok({"launched": True})
        if command.action == "close":
            self.close()
            return DriverResponse.ok({"closed": True})
        response = self.responses.get(command.action)
        if callable(response):
            return response(command)
        if response is not None:
            return response
        return DriverResponse.ok({"action": command.action})

    @property
    def actions(self) -> list[str]:
        return [c.action for c in self.commands]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "AGENT_BROWSER_PROVIDER",
        "AGENT_BROWSER_EXECUTABLE_PATH",
        "AGENT_BROWSER_HEADED",
        "AGENT_BROWSER_CDP_URL",
        "AGENT_BROWSER_LOG_LEVEL",
        "MCP_TOOLSET",
        "MCP_TRACE",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_drivers() -> list[FakeDriver]:
    """Every FakeDriver built by ``make_manager`` factories, in creation order."""
    return []


@pytest.fixture
def make_manager(fake_drivers: list[FakeDriver]) -> Callable[..., SessionManager]:
    def _make(config: AgentBrowserConfig | None = None, **driver_kwargs: Any) -> SessionManager:
        def factory_for(backend: str) -> Callable[[AgentBrowserConfig], FakeDriver]:
            def factory(cfg: AgentBrowserConfig) -> FakeDriver:
                driver = FakeDriver(cfg, backend, **driver_kwargs)
                fake_drivers.append(driver)
                return driver

            return factory

        return SessionManager(
            config or AgentBrowserConfig(),
            factories={DESKTOP_BACKEND: factory_for(DESKTOP_BACKEND), IOS_BACKEND: factory_for(IOS_BACKEND)},
        )

    return _make
