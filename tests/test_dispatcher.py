from __future__ import annotations

import json

from mcp_servers.agent_browser.commands import Command
from mcp_servers.agent_browser.dispatcher import Dispatcher, normalize_response
from mcp_servers.agent_browser.drivers import DriverResponse
from mcp_servers.agent_browser.server.mapper import map_tool_call


def _texts(result) -> list[str]:
    return [c.text for c in result.content]


# ═══════════════════════════════════════════════════════════════════════════════
# EXECUTION FLOW
# ═══════════════════════════════════════════════════════════════════════════════


def test_first_command_auto_launches_once(make_manager, fake_drivers) -> None:
    dispatcher = Dispatcher(make_manager())
    result = dispatcher.execute(map_tool_call("browser_navigate", {"url": "https://example.com"}))
    assert not result.is_error

    driver = fake_drivers[0]
    assert len(driver.launch_calls) == 1
    assert driver.actions == ["navigate"]
    assert json.loads(result.content[0].text) == {"action": "navigate"}

    dispatcher.execute(map_tool_call("browser_page_info", {"info": "title"}))
    assert len(driver.launch_calls) == 1
    assert driver.actions == ["navigate", "title"]


def test_each_command_gets_a_fresh_id(make_manager, fake_drivers) -> None:
    dispatcher = Dispatcher(make_manager())
    cmd = Command("url")
    dispatcher.execute(cmd)
    dispatcher.execute(cmd)
    ids = [c.id for c in fake_drivers[0].commands]
    assert all(ids)
    assert ids[0] != ids[1]
    assert cmd.id is None


def test_launch_exempt_actions_do_not_auto_launch(make_manager, fake_drivers) -> None:
    dispatcher = Dispatcher(make_manager())
    dispatcher.execute(Command("device_list"))
    assert fake_drivers[0].launch_calls == []

    dispatcher.execute(Command("launch", {"headless": False}))
    assert fake_drivers[0].launch_calls == [{"headless": False}]


def test_close_discards_session(make_manager, fake_drivers) -> None:
    manager = make_manager()
    dispatcher = Dispatcher(manager)
    dispatcher.execute(Command("title"))
    result = dispatcher.execute(Command("close"))
    assert json.loads(result.content[0].text) == {"closed": True}
    assert manager.current is None

    dispatcher.execute(Command("title"))
    assert len(fake_drivers) == 2
    assert len(fake_drivers[1].launch_calls) == 1


def test_close_failure_still_releases_session(make_manager, fake_drivers) -> None:
    manager = make_manager(fail_close=True)
    dispatcher = Dispatcher(manager)
    dispatcher.execute(Command("title"))
    result = dispatcher.execute(Command("close"))
    assert result.is_error
    assert _texts(result) == ["Error: browser process is stuck"]
    assert manager.current is None


def test_launch_with_new_provider_switches_session(make_manager, fake_drivers) -> None:
    manager = make_manager()
    dispatcher = Dispatcher(manager)
    dispatcher.execute(Command("launch", {"provider": "ios"}))
    ios_driver = fake_drivers[0]
    assert ios_driver.backend == "ios"

    dispatcher.execute(Command("navigate", {"url": "https://example.com"}))
    assert ios_driver.close_calls == 1
    desktop = fake_drivers[1]
    assert desktop.backend == "desktop"
    assert desktop.actions == ["navigate"]
    assert len(desktop.launch_calls) == 1


# ═══════════════════════════════════════════════════════════════════════════════
# ERRORS
# ═══════════════════════════════════════════════════════════════════════════════


def test_driver_failure_keeps_session_usable(make_manager, fake_drivers) -> None:
    manager = make_manager(responses={"click": DriverResponse.fail("Element not found: #missing")})
    dispatcher = Dispatcher(manager)
    result = dispatcher.execute(Command("click", {"selector": "#missing"}))
    assert result.is_error
    assert result.to_response() == {
        "content": [{"type": "text", "text": "Error: Element not found: #missing"}],
        "isError": True,
    }
    follow_up = dispatcher.execute(Command("url"))
    assert not follow_up.is_error
    assert len(fake_drivers) == 1


def test_driver_exception_becomes_error_text(make_manager) -> None:
    def explode(command: Command) -> DriverResponse:
        raise RuntimeError("socket closed")

    dispatcher = Dispatcher(make_manager(responses={"url": explode}))
    result = dispatcher.execute(Command("url"))
    assert _texts(result) == ["Error: socket closed"]


def test_launch_failure_becomes_error_text(make_manager) -> None:
    dispatcher = Dispatcher(make_manager(fail_launch=True))
    result = dispatcher.execute(Command("url"))
    assert result.is_error
    assert _texts(result) == ["Error: Failed to launch browser: browser binary not found"]


def test_missing_driver_becomes_error_text() -> None:
    from mcp_servers.agent_browser.config import AgentBrowserConfig
    from mcp_servers.agent_browser.session_manager import SessionManager

    dispatcher = Dispatcher(SessionManager(AgentBrowserConfig(), factories={}))
    result = dispatcher.execute(Command("launch", {"provider": "ios"}))
    assert _texts(result) == ["Error: No driver available for provider 'ios'"]


# ═══════════════════════════════════════════════════════════════════════════════
# NORMALIZATION
# ═══════════════════════════════════════════════════════════════════════════════


def test_snapshot_text_is_returned_verbatim() -> None:
    tree = '- button "Submit" [ref=e1]'
    assert _texts(normalize_response("snapshot", DriverResponse.ok(tree))) == [tree]


def test_snapshot_structure_is_serialized() -> None:
    result = normalize_response("snapshot", DriverResponse.ok({"tree": []}))
    assert json.loads(result.content[0].text) == {"tree": []}


def test_screenshot_preview_plus_full_payload() -> None:
    b64 = "A" * 120
    result = normalize_response("screenshot", DriverResponse.ok({"base64": b64, "path": "/tmp/s.png"}))
    assert _texts(result) == [
        f"Screenshot captured (base64: {'A' * 50}...) saved to /tmp/s.png",
        f"Full base64 data: {b64}",
    ]


def test_content_returns_html_directly() -> None:
    html = "<main>hi</main>"
    assert _texts(normalize_response("content", DriverResponse.ok({"html": html}))) == [html]
    assert _texts(normalize_response("content", DriverResponse.ok({"html": ""}))) == [""]


def test_other_data_is_indented_json() -> None:
    result = normalize_response("url", DriverResponse.ok({"url": "https://example.com/ü"}))
    assert result.content[0].text == '{\n  "url": "https://example.com/ü"\n}'


def test_failure_shape() -> None:
    result = normalize_response("click", DriverResponse(success=False, error=None))
    assert result.to_response() == {"content": [{"type": "text", "text": "Error: Unknown driver error"}], "isError": True}
