"""Session subsystem.

One SessionManager owns at most one live BrowserSession. The session wraps an
opaque driver and tracks its lifecycle:

    UNINITIALIZED -> LAUNCHED -> CLOSED

CLOSED is terminal. The manager drops a closed session and builds a new one on
the next request instead of relaunching the old instance.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from enum import Enum
from typing import Any

from .config import KNOWN_PROVIDERS, AgentBrowserConfig, provider_backend
from .drivers import Driver, DriverFactory, driver_factories
from .errors import SessionError, TeardownError

logger = logging.getLogger("mcp.agent_browser.session")


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LAUNCHED = "launched"
    CLOSED = "closed"


class BrowserSession:
    """A driver handle plus the provider it was built for."""

    def __init__(self, driver: Driver, *, provider: str | None, backend: str) -> None:
        self.driver = driver
        self.provider = provider
        self.backend = backend
        self._closed = False

    @property
    def state(self) -> SessionState:
        if self._closed:
            return SessionState.CLOSED
        return SessionState.LAUNCHED if self.is_launched() else SessionState.UNINITIALIZED

    def is_launched(self) -> bool:
        if self._closed:
            return False
        try:
            return bool(self.driver.is_launched())
        except Exception:  # noqa: BLE001
            return False

    def launch(self, options: Mapping[str, Any]) -> None:
        if self._closed:
            raise SessionError("Session is closed")
        try:
            self.driver.launch(dict(options))
        except SessionError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise SessionError(f"Failed to launch browser: {exc}") from exc

    def mark_closed(self) -> None:
        self._closed = True

    def close(self) -> None:
        """Close the driver. The session is CLOSED afterwards even if closing fails."""
        self._closed = True
        try:
            self.driver.close()
        except Exception as exc:  # noqa: BLE001
            raise TeardownError(str(exc) or type(exc).__name__) from exc

    def __repr__(self) -> str:
        return f"BrowserSession(provider={self.provider!r}, backend={self.backend!r}, state={self.state.value!r})"


class SessionManager:
    """
    Owner of the process-wide browser session.

    Every mutation (construction, launch, provider switch, close) runs under a
    re-entrant lock, and a new session is only published once it is fully
    constructed, so concurrent callers never observe two live drivers.
    """

    def __init__(
        self,
        config: AgentBrowserConfig | None = None,
        factories: Mapping[str, DriverFactory] | None = None,
    ) -> None:
        self.config = config or AgentBrowserConfig.from_env()
        self._factories: dict[str, DriverFactory] = dict(factories) if factories is not None else driver_factories()
        self._lock = threading.RLock()
        self._session: BrowserSession | None = None

    @property
    def current(self) -> BrowserSession | None:
        with self._lock:
            return self._session

    def effective_provider(self, requested: str | None = None) -> str | None:
        """Requested provider, else the configured default, else the local browser."""
        provider = AgentBrowserConfig.normalize_provider(requested)
        return provider if provider is not None else self.config.provider

    def get_session(self, requested_provider: str | None = None) -> BrowserSession:
        """Return the live session, building or replacing it as needed."""
        with self._lock:
            provider = self.effective_provider(requested_provider)
            backend = provider_backend(provider)

            current = self._session
            if current is not None and current.state is SessionState.CLOSED:
                self._session = current = None

            if current is not None:
                if current.backend == backend:
                    if requested_provider is not None:
                        current.provider = provider
                    return current
                logger.info(
                    "provider_switch from=%s to=%s",
                    current.provider or current.backend,
                    provider or backend,
                )
                self._session = None
                self._teardown(current)

            session = self._create(provider, backend)
            self._session = session
            return session

    def ensure_launched(self, session: BrowserSession) -> bool:
        """Launch with environment defaults if needed. Returns True when a launch happened."""
        with self._lock:
            if session.state is SessionState.CLOSED:
                raise SessionError("Session is closed; request a new session")
            if session.is_launched():
                return False
            options = self.config.default_launch_options()
            logger.info("auto_launch provider=%s headless=%s", session.provider or "local", options.get("headless"))
            session.launch(options)
            return True

    def discard(self, session: BrowserSession, *, teardown: bool = False) -> None:
        """Forget a session after an explicit close.

        With ``teardown`` the driver is closed best-effort first (used when the
        driver reported a failed close and may still hold resources).
        """
        with self._lock:
            if self._session is session:
                self._session = None
            if teardown:
                self._teardown(session)
            else:
                session.mark_closed()

    def shutdown(self) -> None:
        """Best-effort teardown of the live session (termination signal, stdin EOF)."""
        with self._lock:
            session, self._session = self._session, None
        if session is not None:
            self._teardown(session)

    def _create(self, provider: str | None, backend: str) -> BrowserSession:
        if provider is not None and provider not in KNOWN_PROVIDERS:
            raise SessionError(f"Unknown provider: {provider} (expected one of: {', '.join(KNOWN_PROVIDERS)})")
        factory = self._factories.get(backend)
        if factory is None:
            raise SessionError(f"No driver available for provider '{provider or backend}'")
        try:
            driver = factory(self.config)
        except SessionError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise SessionError(f"Failed to create {backend} driver: {exc}") from exc
        logger.info("session_created provider=%s backend=%s", provider or "local", backend)
        return BrowserSession(driver, provider=provider, backend=backend)

    @staticmethod
    def _teardown(session: BrowserSession) -> None:
        try:
            session.close()
        except TeardownError as exc:
            logger.warning("teardown_failed provider=%s error=%s", session.provider or session.backend, exc)


__all__ = ["BrowserSession", "SessionManager", "SessionState"]
