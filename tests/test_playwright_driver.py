"""
Unit tests for the Playwright driver.

The browser is replaced by small playwright/browser/context/page doubles; only
the driver's own translation logic (argument shaping, state, error handling)
is exercised.
"""

from __future__ import annotations

import base64
import json
from pathlib import Path
from typing import Any

import pytest
from playwright.sync_api import Error as PlaywrightError

from mcp_servers.agent_browser.commands import COMMAND_FIELDS, Command
from mcp_servers.agent_browser.config import AgentBrowserConfig
from mcp_servers.agent_browser.drivers import playwright_driver
from mcp_servers.agent_browser.drivers.playwright_driver import PlaywrightDriver, supported_actions
from mcp_servers.agent_browser.drivers.snapshot import REF_ATTRIBUTE
from mcp_servers.agent_browser.errors import DriverError


class DummyLocator:
    def __init__(self, page: DummyPage, selector: str, position: Any = None) -> None:
        self.page = page
        self.selector = selector
        self.position = position

    @property
    def first(self) -> DummyLocator:
        return DummyLocator(self.page, self.selector, 0)

    @property
    def last(self) -> DummyLocator:
        return DummyLocator(self.page, self.selector, "last")

    def nth(self, index: int) -> DummyLocator:
        return DummyLocator(self.page, self.selector, index)

    def count(self) -> int:
        return 3

    def click(self, **kwargs: Any) -> None:
        self.page.calls.append(("click", self.selector, self.position, kwargs))

    def fill(self, value: str) -> None:
        self.page.calls.append(("fill", self.selector, self.position, value))

    def press_sequentially(self, text: str, **kwargs: Any) -> None:
        self.page.calls.append(("type", self.selector, text, kwargs))

    def screenshot(self, path: str | None = None) -> bytes:
        return b"element-png"

    def inner_html(self) -> str:
        return "<b>hi</b>"


class DummyKeyboard:
    def __init__(self, page: DummyPage) -> None:
        self.page = page

    def press(self, key: str) -> None:
        self.page.calls.append(("press", key))


class DummyFrame:
    def __init__(self, name: str, url: str) -> None:
        self.name = name
        self.url = url

    def is_detached(self) -> bool:
        return False

    def content(self) -> str:
        return "<p>frame</p>"


class DummyVideo:
    def __init__(self) -> None:
        self.saved: list[str] = []

    def save_as(self, path: str) -> None:
        self.saved.append(path)


class DummyPage:
    def __init__(self, url: str = "https://example.com/") -> None:
        self.url = url
        self.calls: list[tuple] = []
        self.fail_with: Exception | None = None
        self.listeners: dict[str, Any] = {}
        self.frames: dict[str, DummyFrame] = {}
        self.video: DummyVideo | None = None
        self.eval_result: Any = None
        self.closed = False
        self.keyboard = DummyKeyboard(self)

    def on(self, event: str, callback: Any) -> None:
        self.listeners[event] = callback

    def locator(self, selector: str) -> DummyLocator:
        if self.fail_with is not None:
            raise self.fail_with
        return DummyLocator(self, selector)

    def goto(self, url: str, **kwargs: Any) -> None:
        self.url = url
        self.calls.append(("goto", url))

    def evaluate(self, script: str, *args: Any) -> Any:
        self.calls.append(("evaluate", script, *args))
        return self.eval_result

    def emulate_media(self, **kwargs: Any) -> None:
        self.calls.append(("emulate_media", kwargs))

    def screenshot(self, path: str | None = None, full_page: bool = False) -> bytes:
        self.calls.append(("screenshot", path, full_page))
        return b"page-png"

    def frame(self, name: str | None = None, url: str | None = None) -> DummyFrame | None:
        return self.frames.get(name or "")

    def content(self) -> str:
        return "<html></html>"

    def bring_to_front(self) -> None:
        self.calls.append(("bring_to_front",))

    def close(self) -> None:
        self.closed = True

    def title(self) -> str:
        return "Example"


class DummyCDPSession:
    def __init__(self) -> None:
        self.handlers: dict[str, Any] = {}
        self.sent: list[tuple[str, Any]] = []
        self.detached = False

    def on(self, event: str, callback: Any) -> None:
        self.handlers[event] = callback

    def send(self, method: str, params: Any = None) -> None:
        self.sent.append((method, params))

    def detach(self) -> None:
        self.detached = True


class DummyContext:
    def __init__(self, browser: DummyBrowser, options: dict[str, Any]) -> None:
        self.browser = browser
        self.options = options
        self.pages: list[DummyPage] = []
        self.listeners: dict[str, Any] = {}
        self.routes: list[tuple[str, Any]] = []
        self.unroutes: list[tuple[str, Any]] = []
        self.added_cookies: list[dict[str, Any]] = []
        self.permissions: list[str] = []
        self.cdp = DummyCDPSession()
        self.fail_close: Exception | None = None
        self.closed = False

    def on(self, event: str, callback: Any) -> None:
        self.listeners[event] = callback

    def route(self, url: str, handler: Any) -> None:
        self.routes.append((url, handler))

    def unroute(self, url: str, handler: Any) -> None:
        self.unroutes.append((url, handler))

    def new_page(self) -> DummyPage:
        page = DummyPage(url="about:blank")
        if "record_video_dir" in self.options:
            page.video = DummyVideo()
        self.pages.append(page)
        return page

    def storage_state(self) -> dict[str, Any]:
        return {"cookies": [], "origins": []}

    def add_cookies(self, cookies: list[dict[str, Any]]) -> None:
        self.added_cookies.extend(cookies)

    def grant_permissions(self, permissions: list[str]) -> None:
        self.permissions.extend(permissions)

    def new_cdp_session(self, page: DummyPage) -> DummyCDPSession:
        return self.cdp

    def close(self) -> None:
        if self.fail_close is not None:
            raise self.fail_close
        self.closed = True
        har_path = self.options.get("record_har_path")
        if har_path:
            har = {"log": {"version": "1.2", "entries": [{"request": {"url": "https://example.com/"}}]}}
            Path(har_path).write_text(json.dumps(har), encoding="utf-8")


class DummyBrowser:
    def __init__(self) -> None:
        self.contexts: list[DummyContext] = []
        self.connected = True
        self.closed = False

    def is_connected(self) -> bool:
        return self.connected

    def new_context(self, **options: Any) -> DummyContext:
        context = DummyContext(self, options)
        self.contexts.append(context)
        return context

    def close(self) -> None:
        self.closed = True


class DummyEngine:
    def __init__(self, browser: DummyBrowser) -> None:
        self.browser = browser
        self.launch_kwargs: dict[str, Any] | None = None

    def launch(self, **kwargs: Any) -> DummyBrowser:
        self.launch_kwargs = kwargs
        return self.browser


class DummyPlaywright:
    def __init__(self) -> None:
        self.browser = DummyBrowser()
        self.chromium = DummyEngine(self.browser)
        self.devices: dict[str, dict[str, Any]] = {}
        self.stopped = False

    def start(self) -> DummyPlaywright:
        return self

    def stop(self) -> None:
        self.stopped = True


class DummyDialog:
    def __init__(self) -> None:
        self.outcome: tuple | None = None

    def accept(self, text: str | None = None) -> None:
        self.outcome = ("accept", text)

    def dismiss(self) -> None:
        self.outcome = ("dismiss",)


class DummyRoute:
    def __init__(self) -> None:
        self.outcome: tuple | None = None

    def abort(self) -> None:
        self.outcome = ("abort",)

    def fulfill(self, **kwargs: Any) -> None:
        self.outcome = ("fulfill", kwargs)

    def continue_(self) -> None:
        self.outcome = ("continue",)


class DummyResponse:
    def __init__(self, url: str, body: bytes, headers: dict[str, str] | None = None) -> None:
        self.url = url
        self.status = 200
        self.headers = headers or {}
        self._body = body

    def body(self) -> bytes:
        return self._body


def _driver_with_page() -> tuple[PlaywrightDriver, DummyPage]:
    driver = PlaywrightDriver(AgentBrowserConfig())
    page = DummyPage()
    driver._context = object()  # type: ignore[assignment]
    driver._pages = [page]  # type: ignore[list-item]
    return driver, page


def _patch_playwright(monkeypatch: pytest.MonkeyPatch, *instances: DummyPlaywright) -> None:
    pending = list(instances)
    monkeypatch.setattr(playwright_driver, "sync_playwright", lambda: pending.pop(0))


def _launched_driver(monkeypatch: pytest.MonkeyPatch) -> tuple[PlaywrightDriver, DummyPlaywright]:
    playwright = DummyPlaywright()
    _patch_playwright(monkeypatch, playwright)
    driver = PlaywrightDriver(AgentBrowserConfig())
    driver.launch({"headless": True})
    return driver, playwright


# ═══════════════════════════════════════════════════════════════════════════════
# COMMAND TRANSLATION
# ═══════════════════════════════════════════════════════════════════════════════


def test_every_canonical_action_is_implemented() -> None:
    assert set(supported_actions()) == set(COMMAND_FIELDS)


def test_not_launched_before_launch() -> None:
    driver = PlaywrightDriver(AgentBrowserConfig())
    assert driver.is_launched() is False
    response = driver.execute_command(Command("url"))
    assert response.success is False
    assert response.error == "Browser not launched"


def test_ios_only_actions_fail_on_desktop() -> None:
    driver = PlaywrightDriver(AgentBrowserConfig())
    response = driver.execute_command(Command("device_list"))
    assert not response.success
    assert "requires the ios provider" in (response.error or "")


def test_ref_selectors_are_resolved() -> None:
    driver, page = _driver_with_page()
    response = driver.execute_command(Command("click", {"selector": "@e2", "clickCount": 2}))
    assert response.success
    assert page.calls == [("click", f'[{REF_ATTRIBUTE}="e2"]', None, {"click_count": 2})]


def test_type_passes_delay() -> None:
    driver, page = _driver_with_page()
    driver.execute_command(Command("type", {"selector": "#q", "text": "abc", "delay": 20}))
    assert page.calls == [("type", "#q", "abc", {"delay": 20.0})]


def test_emulate_media_clear_and_omit() -> None:
    driver, page = _driver_with_page()
    response = driver.execute_command(Command("emulate_media", {"colorScheme": None, "media": "print"}))
    assert response.success
    assert page.calls == [("emulate_media", {"color_scheme": "null", "media": "print"})]


def test_find_nth_last_and_fill() -> None:
    driver, page = _driver_with_page()
    response = driver.execute_command(
        Command("find_nth", {"selector": "li input", "index": -1, "subaction": "fill", "value": "x"})
    )
    assert response.success
    assert response.data == {"count": 3, "action": "fill"}
    assert page.calls == [("fill", "li input", "last", "x")]


def test_screenshot_returns_base64() -> None:
    driver, page = _driver_with_page()
    response = driver.execute_command(Command("screenshot", {"fullPage": True}))
    assert response.data == {"base64": base64.b64encode(b"page-png").decode()}
    assert page.calls == [("screenshot", None, True)]

    response = driver.execute_command(Command("screenshot", {"selector": "#logo"}))
    assert response.data == {"base64": base64.b64encode(b"element-png").decode()}


def test_playwright_error_becomes_failed_response() -> None:
    driver, page = _driver_with_page()
    page.fail_with = PlaywrightError("Timeout 30000ms exceeded.\n=== logs ===\nwaiting for locator")
    response = driver.execute_command(Command("click", {"selector": "#slow"}))
    assert response.success is False
    assert response.error == "Timeout 30000ms exceeded."


def test_dialog_policy_applies_once() -> None:
    driver, _page = _driver_with_page()
    driver.execute_command(Command("dialog_accept", {"promptText": "Ada"}))
    first, second = DummyDialog(), DummyDialog()
    driver._on_dialog(first)
    driver._on_dialog(second)
    assert first.outcome == ("accept", "Ada")
    assert second.outcome == ("dismiss",)


def test_requests_filter_and_clear() -> None:
    driver, _page = _driver_with_page()
    driver._requests = [
        {"url": "https://example.com/api/items", "method": "GET"},
        {"url": "https://cdn.example.com/app.js", "method": "GET"},
    ]
    response = driver.execute_command(Command("requests", {"filter": "/api/", "clear": True}))
    assert [r["url"] for r in response.data["requests"]] == ["https://example.com/api/items"]
    assert driver._requests == []


def test_tab_switch_out_of_range() -> None:
    driver, _page = _driver_with_page()
    response = driver.execute_command(Command("tab_switch", {"index": 4}))
    assert response.error == "Tab index out of range: 4 (tabs: 1)"


def test_content_for_selector() -> None:
    driver, _page = _driver_with_page()
    response = driver.execute_command(Command("content", {"selector": "#main"}))
    assert response.data == {"html": "<b>hi</b>"}


def test_evaluate_passes_falsy_args() -> None:
    driver, page = _driver_with_page()
    driver.execute_command(Command("evaluate", {"script": "(n) => n + 1", "args": 0}))
    driver.execute_command(Command("evaluate", {"script": "() => 1"}))
    assert page.calls == [("evaluate", "(n) => n + 1", 0), ("evaluate", "() => 1")]


def test_response_body_text_and_binary() -> None:
    driver, _page = _driver_with_page()
    driver._responses.append(
        DummyResponse("https://example.com/api/items", b'{"ok": true}', {"content-type": "application/json"})
    )
    driver._responses.append(DummyResponse("https://example.com/logo.png", b"\x89PNG\xff"))

    response = driver.execute_command(Command("response_body", {"url": "/api/items"}))
    assert response.data == {
        "url": "https://example.com/api/items",
        "status": 200,
        "headers": {"content-type": "application/json"},
        "body": '{"ok": true}',
    }

    response = driver.execute_command(Command("response_body", {"url": "logo.png"}))
    assert response.data["base64"] == base64.b64encode(b"\x89PNG\xff").decode()
    assert "body" not in response.data


def test_frame_switch_and_back_to_main() -> None:
    driver, page = _driver_with_page()
    page.frames["ad"] = DummyFrame("ad", "https://ads.example.com/")

    response = driver.execute_command(Command("frame", {"name": "ad"}))
    assert response.data == {"frame": "ad", "url": "https://ads.example.com/"}
    assert driver.execute_command(Command("content")).data == {"html": "<p>frame</p>"}

    driver.execute_command(Command("main_frame"))
    assert driver.execute_command(Command("content")).data == {"html": "<html></html>"}

    assert driver.execute_command(Command("frame", {"name": "missing"})).error == "Frame not found"


# ═══════════════════════════════════════════════════════════════════════════════
# LIFECYCLE
# ═══════════════════════════════════════════════════════════════════════════════


def test_launch_and_close(monkeypatch: pytest.MonkeyPatch) -> None:
    driver, playwright = _launched_driver(monkeypatch)
    assert driver.is_launched() is True
    assert playwright.chromium.launch_kwargs == {"headless": True}
    context = playwright.browser.contexts[0]
    assert {"page", "request", "response"} <= set(context.listeners)
    assert len(context.pages) == 1

    driver.close()
    assert context.closed
    assert playwright.browser.closed
    assert playwright.stopped
    assert driver.is_launched() is False


def test_close_reports_errors_after_full_teardown(monkeypatch: pytest.MonkeyPatch) -> None:
    driver, playwright = _launched_driver(monkeypatch)
    playwright.browser.contexts[0].fail_close = PlaywrightError("context is stuck")

    with pytest.raises(DriverError, match="context is stuck"):
        driver.close()
    assert playwright.browser.closed
    assert playwright.stopped
    assert driver.is_launched() is False


def test_relaunch_after_browser_disconnect(monkeypatch: pytest.MonkeyPatch) -> None:
    crashed, fresh = DummyPlaywright(), DummyPlaywright()
    _patch_playwright(monkeypatch, crashed, fresh)
    driver = PlaywrightDriver(AgentBrowserConfig())
    driver.launch({"headless": True})

    crashed.browser.connected = False
    crashed.browser.contexts[0].fail_close = PlaywrightError("Target page, context or browser has been closed")
    assert driver.is_launched() is False

    driver.launch({"headless": True})
    assert crashed.stopped
    assert driver.is_launched() is True
    assert driver._playwright is fresh
    assert driver.execute_command(Command("url")).data == {"url": "about:blank"}


def test_launch_rejects_ios_before_starting_playwright(monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_playwright(monkeypatch)
    driver = PlaywrightDriver(AgentBrowserConfig())
    with pytest.raises(DriverError, match="ios provider"):
        driver.launch({"provider": "ios"})
    assert driver._playwright is None


def test_remote_provider_without_endpoint_stops_playwright(monkeypatch: pytest.MonkeyPatch) -> None:
    playwright = DummyPlaywright()
    _patch_playwright(monkeypatch, playwright)
    driver = PlaywrightDriver(AgentBrowserConfig())
    with pytest.raises(DriverError, match="needs a CDP endpoint"):
        driver.launch({"provider": "browserbase"})
    assert playwright.stopped
    assert driver._playwright is None


# ═══════════════════════════════════════════════════════════════════════════════
# CONTEXT EMULATION
# ═══════════════════════════════════════════════════════════════════════════════


def test_set_device_recreates_context_on_same_url(monkeypatch: pytest.MonkeyPatch) -> None:
    driver, playwright = _launched_driver(monkeypatch)
    playwright.devices["iPhone 13"] = {
        "viewport": {"width": 390, "height": 664},
        "user_agent": "iPhone UA",
        "is_mobile": True,
        "default_browser_type": "webkit",
    }
    driver.execute_command(Command("navigate", {"url": "https://example.com/"}))
    old = driver._context

    response = driver.execute_command(Command("set_device", {"device": "iPhone 13"}))
    assert response.data == {"device": "iPhone 13", "viewport": {"width": 390, "height": 664}}
    new = driver._context
    assert new is not old
    assert old.closed
    assert new.options == {"viewport": {"width": 390, "height": 664}, "user_agent": "iPhone UA", "is_mobile": True}
    assert driver._page().url == "https://example.com/"

    assert driver.execute_command(Command("set_device", {"device": "Nokia 3310"})).error == "Unknown device: Nokia 3310"


def test_cookies_without_scope_use_page_url(monkeypatch: pytest.MonkeyPatch) -> None:
    driver, playwright = _launched_driver(monkeypatch)
    driver.execute_command(Command("navigate", {"url": "https://example.com/"}))
    cookies = [{"name": "a", "value": "1"}, {"name": "b", "value": "2", "domain": ".example.org", "path": "/"}]

    response = driver.execute_command(Command("cookies_set", {"cookies": cookies}))
    assert response.data == {"set": 2}
    assert playwright.browser.contexts[0].added_cookies == [
        {"name": "a", "value": "1", "url": "https://example.com/"},
        {"name": "b", "value": "2", "domain": ".example.org", "path": "/"},
    ]


def test_clipboard_paste_and_read(monkeypatch: pytest.MonkeyPatch) -> None:
    driver, playwright = _launched_driver(monkeypatch)
    page = driver._page()

    response = driver.execute_command(Command("clipboard", {"operation": "paste", "text": "hi"}))
    assert response.data == {"pasted": True}
    assert ("evaluate", "(text) => navigator.clipboard.writeText(text)", "hi") in page.calls
    assert page.calls[-1][0] == "press"
    assert page.calls[-1][1].endswith("+v")
    assert "clipboard-read" in playwright.browser.contexts[0].permissions

    page.eval_result = "copied text"
    assert driver.execute_command(Command("clipboard", {"operation": "read"})).data == {"text": "copied text"}


# ═══════════════════════════════════════════════════════════════════════════════
# NETWORK
# ═══════════════════════════════════════════════════════════════════════════════


def test_route_mock_replace_and_unroute(monkeypatch: pytest.MonkeyPatch) -> None:
    driver, playwright = _launched_driver(monkeypatch)
    context = playwright.browser.contexts[0]
    mock = {"status": 201, "body": "{}", "contentType": "application/json"}

    driver.execute_command(Command("route", {"url": "**/api/*", "response": mock}))
    url, handler = context.routes[-1]
    route = DummyRoute()
    handler(route)
    assert url == "**/api/*"
    assert route.outcome == ("fulfill", {"status": 201, "body": "{}", "content_type": "application/json", "headers": None})

    driver.execute_command(Command("route", {"url": "**/api/*", "abort": True}))
    assert context.unroutes == [("**/api/*", handler)]
    replacement = context.routes[-1][1]
    route = DummyRoute()
    replacement(route)
    assert route.outcome == ("abort",)

    assert driver.execute_command(Command("unroute", {"url": "**/none"})).data == {"unrouted": []}
    assert driver.execute_command(Command("unroute")).data == {"unrouted": ["**/api/*"]}
    assert context.unroutes[-1] == ("**/api/*", replacement)


# ═══════════════════════════════════════════════════════════════════════════════
# TABS & WINDOWS
# ═══════════════════════════════════════════════════════════════════════════════


def test_tab_new_and_close(monkeypatch: pytest.MonkeyPatch) -> None:
    driver, _playwright = _launched_driver(monkeypatch)

    response = driver.execute_command(Command("tab_new", {"url": "https://example.com/b"}))
    assert response.data == {"index": 1, "url": "https://example.com/b"}
    tabs = driver.execute_command(Command("tab_list")).data
    assert [t["active"] for t in tabs["tabs"]] == [False, True]

    first = driver._pages[0]
    response = driver.execute_command(Command("tab_close", {"index": 0}))
    assert response.data == {"closed": 0, "remaining": 1}
    assert first.closed
    assert driver.execute_command(Command("url")).data == {"url": "https://example.com/b"}


def test_window_new_gets_listeners_and_routes(monkeypatch: pytest.MonkeyPatch) -> None:
    driver, playwright = _launched_driver(monkeypatch)
    driver.execute_command(Command("route", {"url": "**/ads/*", "abort": True}))

    response = driver.execute_command(Command("window_new", {"viewport": {"width": 800}}))
    assert response.data == {"index": 1}
    window = playwright.browser.contexts[-1]
    assert window.options == {"viewport": {"width": 800, "height": 720}}
    assert {"page", "request", "response"} <= set(window.listeners)
    assert [url for url, _ in window.routes] == ["**/ads/*"]

    driver.execute_command(Command("unroute", {"url": "**/ads/*"}))
    assert [url for url, _ in window.unroutes] == ["**/ads/*"]

    driver.close()
    assert window.closed


# ═══════════════════════════════════════════════════════════════════════════════
# RECORDING, HAR, SCREENCAST
# ═══════════════════════════════════════════════════════════════════════════════


def test_recording_swaps_context_and_restores_it(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    driver, _playwright = _launched_driver(monkeypatch)
    driver.execute_command(Command("navigate", {"url": "https://example.com/"}))
    original, original_page = driver._context, driver._page()
    target = tmp_path / "run.webm"

    assert driver.execute_command(Command("recording_start", {"path": str(target)})).success
    recording = driver._context
    assert recording is not original
    assert "record_video_dir" in recording.options
    assert recording.options["storage_state"] == {"cookies": [], "origins": []}
    assert driver._page().url == "https://example.com/"
    video = driver._page().video

    response = driver.execute_command(Command("recording_stop"))
    assert response.data == {"path": str(target)}
    assert recording.closed
    assert video.saved == [str(target)]
    assert driver._context is original
    assert driver._page() is original_page


def test_failed_recording_stop_keeps_session_usable(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    driver, _playwright = _launched_driver(monkeypatch)
    driver.execute_command(Command("navigate", {"url": "https://example.com/"}))
    original = driver._context
    driver.execute_command(Command("recording_start", {"path": str(tmp_path / "run.webm")}))
    driver._context.fail_close = PlaywrightError("Target closed")

    response = driver.execute_command(Command("recording_stop"))
    assert response.success is False
    assert response.error == "Target closed"
    assert driver._context is original
    assert driver._capture is None
    assert driver.execute_command(Command("url")).data == {"url": "https://example.com/"}


def test_recording_restart_reports_previous_path(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    driver, _playwright = _launched_driver(monkeypatch)
    first, second = str(tmp_path / "a.webm"), str(tmp_path / "b.webm")
    driver.execute_command(Command("recording_start", {"path": first}))
    first_context = driver._context

    response = driver.execute_command(Command("recording_restart", {"path": second}))
    assert response.data == {"previous": first, "recording": True, "path": second}
    assert first_context.closed
    assert driver.execute_command(Command("recording_stop")).data == {"path": second}


def test_har_uses_native_recorder(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    driver, _playwright = _launched_driver(monkeypatch)
    missing = driver.execute_command(Command("har_stop", {"path": str(tmp_path / "x.har")}))
    assert missing.error == "No har capture in progress"

    original = driver._context
    assert driver.execute_command(Command("har_start")).success
    har_file = Path(driver._context.options["record_har_path"])

    busy = driver.execute_command(Command("recording_start", {"path": str(tmp_path / "v.webm")}))
    assert busy.error == "A har capture is already running; stop it first"

    target = tmp_path / "out" / "session.har"
    response = driver.execute_command(Command("har_stop", {"path": str(target)}))
    assert response.data == {"path": str(target), "entries": 1}
    assert json.loads(target.read_text(encoding="utf-8"))["log"]["version"] == "1.2"
    assert not har_file.exists()
    assert driver._context is original


def test_screencast_start_frames_and_stop(monkeypatch: pytest.MonkeyPatch) -> None:
    driver, playwright = _launched_driver(monkeypatch)
    cdp = playwright.browser.contexts[0].cdp

    response = driver.execute_command(Command("screencast_start", {"quality": 80}))
    assert response.data == {"started": True, "format": "jpeg", "quality": 80}
    assert cdp.sent == [("Page.startScreencast", {"format": "jpeg", "quality": 80})]

    cdp.handlers["Page.screencastFrame"]({"data": "abc", "sessionId": 7})
    assert cdp.sent[-1] == ("Page.screencastFrameAck", {"sessionId": 7})
    assert driver.execute_command(Command("screencast_start")).error == "Screencast already running"

    response = driver.execute_command(Command("screencast_stop"))
    assert response.data == {"stopped": True, "frames": 1}
    assert cdp.sent[-1] == ("Page.stopScreencast", None)
    assert cdp.detached
    assert driver.execute_command(Command("screencast_stop")).error == "No screencast running"
