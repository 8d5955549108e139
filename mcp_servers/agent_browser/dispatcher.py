"""
Command dispatcher.

Turns a canonical Command into a ToolResult:
1. resolve the session (a launch command may request its own provider)
2. auto-launch unless the action is launch-exempt
3. stamp a fresh id and hand the command to the driver
4. normalize the driver response into MCP text content

Nothing raised below this layer escapes; every failure becomes ``Error: ...``.
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any

from .commands import Command
from .drivers import DriverResponse
from .errors import AgentBrowserError
from .server.types import ToolResult
from .session_manager import SessionManager

logger = logging.getLogger("mcp.agent_browser.dispatcher")

SCREENSHOT_PREVIEW_CHARS = 50


def new_command_id() -> str:
    return uuid.uuid4().hex


class Dispatcher:
    def __init__(self, sessions: SessionManager) -> None:
        self.sessions = sessions

    def execute(self, command: Command) -> ToolResult:
        requested_provider = command.get("provider") if command.action == "launch" else None
        try:
            session = self.sessions.get_session(requested_provider)
            if not command.launch_exempt:
                self.sessions.ensure_launched(session)

            stamped = command.with_id(new_command_id())
            logger.debug("execute id=%s action=%s", stamped.id, stamped.action)
            response: DriverResponse | None = None
            try:
                response = session.driver.execute_command(stamped)
            finally:
                if command.action == "close":
                    self.sessions.discard(session, teardown=response is None or not response.success)
        except AgentBrowserError as exc:
            logger.info("command_failed action=%s error=%s", command.action, exc)
            return ToolResult.error(str(exc))
        except Exception as exc:  # noqa: BLE001
            logger.exception("command_crashed action=%s", command.action)
            return ToolResult.error(str(exc) or type(exc).__name__)

        return normalize_response(command.action, response)


def normalize_response(action: str, response: DriverResponse) -> ToolResult:
    """Render a driver response as MCP content."""
    if not response.success:
        return ToolResult.error(response.error or "Unknown driver error")

    data = response.data

    if action == "snapshot":
        return ToolResult.text(data if isinstance(data, str) else _dump_json(data))

    if action == "screenshot" and isinstance(data, dict) and data.get("base64"):
        b64 = str(data["base64"])
        preview = f"Screenshot captured (base64: {b64[:SCREENSHOT_PREVIEW_CHARS]}...)"
        if data.get("path"):
            preview += f" saved to {data['path']}"
        return ToolResult.texts(preview, f"Full base64 data: {b64}")

    if action == "content":
        if isinstance(data, dict) and isinstance(data.get("html"), str):
            return ToolResult.text(str(data["html"]))
        return ToolResult.text(data if isinstance(data, str) else str(data))

    return ToolResult.text(_dump_json(data))


def _dump_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


__all__ = ["Dispatcher", "new_command_id", "normalize_response"]
