"""
MCP Server for browser automation through a merged tool surface.

This module provides the main entry point and protocol handling.
Tool calls flow: registry (schema + mapper) -> Command -> Dispatcher -> driver.
"""

from __future__ import annotations

import json
import logging
import os
import signal
import sys
from typing import Any

from .config import AgentBrowserConfig
from .dispatcher import Dispatcher
from .errors import MappingError
from .server.contract import (
    DEFAULT_PROTOCOL_VERSION,
    LATEST_PROTOCOL_VERSION,
    SUPPORTED_PROTOCOL_VERSIONS,
    initialize_result,
    select_protocol,
    tools_list,
)
from .server.redaction import redact_jsonrpc_for_log, redact_tool_arguments
from .server.registry import create_default_registry
from .server.types import ToolResult
from .session_manager import SessionManager

logger = logging.getLogger("mcp.agent_browser")

__all__ = [
    "SUPPORTED_PROTOCOL_VERSIONS",
    "LATEST_PROTOCOL_VERSION",
    "DEFAULT_PROTOCOL_VERSION",
    "McpServer",
    "main",
]


def _configure_logging(level: str) -> None:
    # stdout carries the protocol; logs go to stderr.
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )


def _write_message(payload: dict[str, Any]) -> None:
    """Write JSON-RPC message to stdout."""
    data = json.dumps(payload, ensure_ascii=False)
    sys.stdout.buffer.write((data + "\n").encode())
    sys.stdout.buffer.flush()


def _read_message() -> dict[str, Any] | None:
    """Read JSON-RPC message from stdin.

    Returns None on EOF, an empty dict for blank or unparsable lines.
    """
    line = sys.stdin.buffer.readline()
    if not line:
        return None
    line = line.strip()
    if not line:
        return {}
    try:
        msg = json.loads(line.decode())
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.warning("invalid_frame error=%s", exc)
        return {}
    if not isinstance(msg, dict):
        logger.warning("invalid_frame type=%s", type(msg).__name__)
        return {}
    if os.environ.get("MCP_TRACE"):
        logger.info("recv %s", redact_jsonrpc_for_log(msg))
    return msg


class McpServer:
    """MCP Server with registry-based tool mapping and a single browser session."""

    def __init__(
        self,
        config: AgentBrowserConfig | None = None,
        sessions: SessionManager | None = None,
    ) -> None:
        self.config = config or AgentBrowserConfig.from_env()
        self.sessions = sessions or SessionManager(self.config)
        self.dispatcher = Dispatcher(self.sessions)
        self.registry = create_default_registry()

    def handle_initialize(self, request_id: Any, params: dict[str, Any] | None = None) -> None:
        """Handle initialize request."""
        requested = (params or {}).get("protocolVersion") if isinstance(params, dict) else None
        protocol = select_protocol(requested)
        _write_message(
            {
                "jsonrpc": "2.0",
                "id": request_id,
                "result": initialize_result(protocol),
            }
        )

    def handle_list_tools(self, request_id: Any) -> None:
        """Handle tools/list request."""
        _write_message(
            {
                "jsonrpc": "2.0",
                "id": request_id,
                "result": {"tools": tools_list(self.config.toolset)},
            }
        )

    def _log_call(self, name: str, arguments: Any) -> None:
        """Log tool call with sanitized arguments."""
        safe_args = redact_tool_arguments(name, arguments) if isinstance(arguments, dict) else arguments
        logger.info("tool=%s args=%s", name, safe_args)

    def call_tool(self, name: str, arguments: Any) -> ToolResult:
        """Map and execute one tool call. Never raises."""
        try:
            if not name:
                return ToolResult.error("Missing tool name")
            if not self.registry.has(name):
                return ToolResult.error(f"Unknown tool: {name}")
            command = self.registry.map_call(name, arguments)
        except MappingError as e:
            logger.info("mapping_error tool=%s argument=%s reason=%s", e.tool or name, e.argument, e.message)
            return ToolResult.error(e.message)
        except Exception as exc:  # noqa: BLE001
            logger.exception("tool_call_failed")
            return ToolResult.error(str(exc) or type(exc).__name__)
        return self.dispatcher.execute(command)

    def handle_call_tool(self, request_id: Any, name: str, arguments: Any) -> None:
        """Handle tools/call request."""
        self._log_call(name, arguments)
        try:
            result = self.call_tool(name, arguments)
        except Exception as exc:  # noqa: BLE001
            logger.exception("tool_call_failed")
            result = ToolResult.error(str(exc) or type(exc).__name__)

        _write_message(
            {
                "jsonrpc": "2.0",
                "id": request_id,
                "result": result.to_response(),
            }
        )

    def dispatch(self, message: dict[str, Any]) -> None:
        """Dispatch incoming JSON-RPC message to appropriate handler."""
        if not message:
            return

        method = message.get("method")
        request_id = message.get("id")
        params = message.get("params") or {}
        if not isinstance(params, dict):
            params = {}

        if method == "initialize":
            self.handle_initialize(request_id, params)
        elif method == "notifications/initialized":
            return
        elif method in ("tools/list", "list_tools"):
            self.handle_list_tools(request_id)
        elif method in ("tools/call", "call_tool"):
            name = params.get("name")
            arguments = params.get("arguments")
            if arguments is None:
                arguments = params.get("args") or {}
            self.handle_call_tool(request_id, name or "", arguments)
        elif method == "ping":
            _write_message({"jsonrpc": "2.0", "id": request_id, "result": {"pong": True}})
        elif request_id is None:
            # Unknown notification: nothing to answer.
            return
        else:
            _write_message(
                {
                    "jsonrpc": "2.0",
                    "id": request_id,
                    "error": {"code": -32601, "message": f"Method {method} not found"},
                }
            )

    def shutdown(self) -> None:
        """Best-effort browser teardown before the process exits."""
        logger.info("shutdown")
        self.sessions.shutdown()


def _install_signal_handlers(server: McpServer) -> None:
    def _handle(signum: int, _frame: Any) -> None:
        logger.info("signal_received signum=%s", signum)
        server.shutdown()
        sys.exit(128 + signum)

    for sig in (signal.SIGINT, signal.SIGTERM):
        signal.signal(sig, _handle)


def main() -> None:
    """Main entry point for MCP server."""
    config = AgentBrowserConfig.from_env()
    _configure_logging(config.log_level)
    server = McpServer(config)
    _install_signal_handlers(server)
    try:
        while True:
            message = _read_message()
            if message is None:
                break
            server.dispatch(message)
    finally:
        server.shutdown()


if __name__ == "__main__":
    main()
