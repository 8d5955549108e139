from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

IOS_PROVIDER = "ios"
REMOTE_PROVIDERS: tuple[str, ...] = ("browserbase", "browseruse", "kernel")
KNOWN_PROVIDERS: tuple[str, ...] = (IOS_PROVIDER, *REMOTE_PROVIDERS)

DESKTOP_BACKEND = "desktop"
IOS_BACKEND = "ios"

_TRUTHY = {"1", "true", "yes", "on"}


def expand_path(raw: str) -> str:
    return str(Path(raw).expanduser())


def provider_backend(provider: str | None) -> str:
    """Backend family that serves a provider (ios simulator vs desktop browser)."""
    return IOS_BACKEND if provider == IOS_PROVIDER else DESKTOP_BACKEND


@dataclass
class AgentBrowserConfig:
    provider: str | None = None
    executable_path: str | None = None
    headed: bool = False
    cdp_url: str | None = None
    toolset: str = "full"
    log_level: str = "INFO"

    @staticmethod
    def normalize_provider(raw: str | None) -> str | None:
        provider = (raw or "").strip().lower()
        if provider in {"", "local", "desktop", "chromium", "default"}:
            return None
        return provider

    @staticmethod
    def normalize_toolset(raw: str | None) -> str:
        toolset = (raw or "").strip().lower()
        if toolset in {"core", "minimal", "lite"}:
            return "core"
        return "full"

    @classmethod
    def from_env(cls) -> AgentBrowserConfig:
        executable = (os.environ.get("AGENT_BROWSER_EXECUTABLE_PATH") or "").strip()
        headed = (os.environ.get("AGENT_BROWSER_HEADED") or "").strip().lower() in _TRUTHY
        cdp_url = (os.environ.get("AGENT_BROWSER_CDP_URL") or "").strip()
        log_level = (os.environ.get("AGENT_BROWSER_LOG_LEVEL") or "INFO").strip().upper()
        return cls(
            provider=cls.normalize_provider(os.environ.get("AGENT_BROWSER_PROVIDER")),
            executable_path=expand_path(executable) if executable else None,
            headed=headed,
            cdp_url=cdp_url or None,
            toolset=cls.normalize_toolset(os.environ.get("MCP_TOOLSET")),
            log_level=log_level or "INFO",
        )

    def default_launch_options(self) -> dict[str, object]:
        """Launch options used when a session is launched implicitly.

        Keys are only present when the environment actually supplies them, so the
        driver's own defaults stay in effect otherwise.
        """
        options: dict[str, object] = {"headless": not self.headed}
        if self.executable_path:
            options["executablePath"] = self.executable_path
        if self.provider:
            options["provider"] = self.provider
        return options
