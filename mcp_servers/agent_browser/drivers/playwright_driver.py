"""
Desktop driver over the Playwright sync API.

One driver owns one Playwright instance, one browser (launched, connected over
CDP, or a persistent profile) and the pages opened in it. Every canonical
action is served by a ``_cmd_<action>`` method; Playwright errors become
failed DriverResponses so the session stays usable.
"""

from __future__ import annotations

import base64
import json
import logging
import shutil
import sys
import tempfile
import time
from collections import deque
from contextlib import suppress
from pathlib import Path
from typing import TYPE_CHECKING, Any

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from ..commands import COMMAND_FIELDS
from ..config import IOS_PROVIDER, REMOTE_PROVIDERS, expand_path
from ..errors import DriverError
from .base import DriverResponse
from .snapshot import REF_ATTRIBUTE, SNAPSHOT_JS, count_refs, format_snapshot, resolve_selector

if TYPE_CHECKING:
    from playwright.sync_api import Browser, BrowserContext, Frame, Locator, Page, Playwright, Response

    from ..commands import Command
    from ..config import AgentBrowserConfig

logger = logging.getLogger("mcp.agent_browser.playwright")

_MAX_LOG_ENTRIES = 500
_MAX_TRACKED_RESPONSES = 200
_DEFAULT_SCROLL_AMOUNT = 300
_DEFAULT_WAIT_MS = 1000


class PlaywrightDriver:
    """Driver for chromium/firefox/webkit through Playwright."""

    def __init__(self, config: AgentBrowserConfig) -> None:
        self.config = config
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None
        self._persistent = False
        self._context_options: dict[str, Any] = {}
        self._pages: list[Page] = []
        self._active = 0
        self._frame: Frame | None = None

        self._console: list[dict[str, Any]] = []
        self._errors: list[dict[str, Any]] = []
        self._requests: list[dict[str, Any]] = []
        self._responses: deque[Response] = deque(maxlen=_MAX_TRACKED_RESPONSES)
        self._windows: list[BrowserContext] = []
        self._routes: dict[str, Any] = {}
        self._dialog_policy: tuple[str, str | None] | None = None
        self._screencast: dict[str, Any] | None = None
        # video or HAR capture running in a swapped-in context
        self._capture: dict[str, Any] | None = None

    # ═══════════════════════════════════════════════════════════════════════════
    # Driver protocol
    # ═══════════════════════════════════════════════════════════════════════════

    def is_launched(self) -> bool:
        if self._context is None:
            return False
        if self._browser is not None and not self._browser.is_connected():
            return False
        return True

    def launch(self, options: dict[str, Any]) -> None:
        provider = options.get("provider")
        if provider == IOS_PROVIDER:
            raise DriverError("The desktop driver cannot serve the ios provider")

        # A crashed or disconnected browser still leaves Playwright running.
        if self._playwright is not None or self._context is not None:
            with suppress(DriverError):
                self.close()

        self._playwright = sync_playwright().start()
        try:
            self._start_browser(options)
        except Exception:
            with suppress(DriverError):
                self.close()
            raise
        logger.info(
            "browser_launched engine=%s headless=%s provider=%s",
            options.get("browser") or "chromium",
            options.get("headless", True),
            provider or "local",
        )

    def close(self) -> None:
        errors: list[str] = []
        closers = []
        if self._capture is not None:
            closers.append(self._capture["previous"][0].close)
        closers.extend(window.close for window in self._windows)
        if self._context is not None:
            closers.append(self._context.close)
        if self._browser is not None and not self._persistent:
            closers.append(self._browser.close)
        if self._playwright is not None:
            closers.append(self._playwright.stop)
        for closer in closers:
            try:
                closer()
            except Exception as exc:  # noqa: BLE001
                errors.append(str(exc))
        self._reset_state()
        if errors:
            raise DriverError("; ".join(errors))

    def execute_command(self, command: Command) -> DriverResponse:
        handler = getattr(self, f"_cmd_{command.action}", None)
        if handler is None:
            return DriverResponse.fail(f"Unsupported action: {command.action}")
        try:
            return DriverResponse.ok(handler(dict(command.params)))
        except (PlaywrightError, DriverError) as exc:
            message = str(exc).strip().splitlines()[0] if str(exc).strip() else type(exc).__name__
            logger.info("driver_error id=%s action=%s error=%s", command.id, command.action, message)
            return DriverResponse.fail(message)

    # ═══════════════════════════════════════════════════════════════════════════
    # Browser / context plumbing
    # ═══════════════════════════════════════════════════════════════════════════

    def _start_browser(self, options: dict[str, Any]) -> None:
        assert self._playwright is not None
        engine_name = options.get("browser") or "chromium"
        engine = getattr(self._playwright, engine_name, None)
        if engine is None:
            raise DriverError(f"Unknown browser engine: {engine_name}")

        provider = options.get("provider")
        cdp_url = options.get("cdpUrl") or (self.config.cdp_url if provider in REMOTE_PROVIDERS else None)
        if options.get("cdpPort") is not None:
            cdp_url = f"http://127.0.0.1:{int(options['cdpPort'])}"
        if provider in REMOTE_PROVIDERS and not cdp_url:
            raise DriverError(f"Provider '{provider}' needs a CDP endpoint (cdpUrl or AGENT_BROWSER_CDP_URL)")

        self._context_options = {}
        if options.get("userAgent"):
            self._context_options["user_agent"] = options["userAgent"]
        if options.get("ignoreHTTPSErrors"):
            self._context_options["ignore_https_errors"] = True
        if options.get("storageState"):
            self._context_options["storage_state"] = expand_path(options["storageState"])

        launch_args = list(options.get("args") or [])
        if options.get("allowFileAccess") and engine_name == "chromium":
            launch_args += ["--allow-file-access-from-files", "--allow-file-access"]
        launch_kwargs: dict[str, Any] = {"headless": bool(options.get("headless", True))}
        if options.get("executablePath"):
            launch_kwargs["executable_path"] = expand_path(options["executablePath"])
        if launch_args:
            launch_kwargs["args"] = launch_args

        if cdp_url:
            if engine_name != "chromium":
                raise DriverError("CDP connections require the chromium engine")
            self._browser = engine.connect_over_cdp(cdp_url)
            context = self._browser.contexts[0] if self._browser.contexts else self._browser.new_context(**self._context_options)
            self._adopt_context(context)
        elif options.get("profile"):
            self._persistent = True
            context = engine.launch_persistent_context(
                user_data_dir=expand_path(options["profile"]),
                **launch_kwargs,
                **self._context_options,
            )
            self._browser = context.browser
            self._adopt_context(context)
        else:
            self._browser = engine.launch(**launch_kwargs)
            self._adopt_context(self._browser.new_context(**self._context_options))

    def _wire_context(self, context: BrowserContext) -> None:
        context.on("page", self._on_new_page)
        context.on("request", self._on_request)
        context.on("response", self._on_response)
        for route_url, handler in self._routes.items():
            context.route(route_url, handler)

    def _contexts(self) -> list[BrowserContext]:
        """The active context plus extra windows; routes apply to all of them."""
        return [c for c in (self._context, *self._windows) if c is not None]

    def _adopt_context(self, context: BrowserContext) -> None:
        self._context = context
        self._wire_context(context)
        pages = list(context.pages)
        if not pages:
            pages = [context.new_page()]
        for page in pages:
            self._track_page(page)
        self._active = len(self._pages) - 1
        self._frame = None

    def _recreate_context(self, **overrides: Any) -> None:
        """Replace the context with one built from the merged options, keeping the current URL."""
        if self._browser is None or self._persistent:
            raise DriverError("This setting needs a fresh browser context, which persistent/CDP sessions cannot create")
        if self._capture is not None:
            raise DriverError(f"Stop the running {self._capture['kind']} capture before changing this setting")
        url = self._page().url
        old = self._context
        self._context_options.update(overrides)
        self._pages = []
        context = self._browser.new_context(**self._context_options)
        self._adopt_context(context)
        if old is not None:
            with suppress(PlaywrightError):
                old.close()
        if url and url != "about:blank":
            self._page().goto(url)

    def _track_page(self, page: Page) -> None:
        if page in self._pages:
            return
        self._pages.append(page)
        page.on("console", self._on_console)
        page.on("pageerror", self._on_page_error)
        page.on("dialog", self._on_dialog)
        page.on("close", self._on_page_closed)

    def _reset_state(self) -> None:
        self._playwright = None
        self._browser = None
        self._context = None
        self._persistent = False
        self._pages = []
        self._active = 0
        self._frame = None
        self._windows = []
        self._routes = {}
        self._capture = None
        self._screencast = None
        self._dialog_policy = None

    def _page(self) -> Page:
        if not self._pages:
            if self._context is None:
                raise DriverError("Browser not launched")
            self._track_page(self._context.new_page())
            self._active = 0
        self._active = min(self._active, len(self._pages) - 1)
        return self._pages[self._active]

    def _target(self) -> Page | Frame:
        if self._frame is not None and not self._frame.is_detached():
            return self._frame
        self._frame = None
        return self._page()

    def _locator(self, selector: str) -> Locator:
        return self._target().locator(resolve_selector(selector))

    def _require(self, params: dict[str, Any], *keys: str) -> None:
        missing = [k for k in keys if params.get(k) is None]
        if missing:
            raise DriverError(f"Missing required field(s): {', '.join(missing)}")

    # ═══════════════════════════════════════════════════════════════════════════
    # Event listeners
    # ═══════════════════════════════════════════════════════════════════════════

    def _on_new_page(self, page: Page) -> None:
        self._track_page(page)

    def _on_page_closed(self, page: Page) -> None:
        if page in self._pages:
            index = self._pages.index(page)
            self._pages.remove(page)
            if index <= self._active and self._active > 0:
                self._active -= 1
            self._frame = None

    def _on_console(self, message: Any) -> None:
        if len(self._console) >= _MAX_LOG_ENTRIES:
            self._console.pop(0)
        self._console.append({"type": message.type, "text": message.text, "timestamp": time.time()})

    def _on_page_error(self, error: Any) -> None:
        if len(self._errors) >= _MAX_LOG_ENTRIES:
            self._errors.pop(0)
        self._errors.append({"message": str(error), "timestamp": time.time()})

    def _on_dialog(self, dialog: Any) -> None:
        policy, self._dialog_policy = self._dialog_policy, None
        with suppress(PlaywrightError):
            if policy is not None and policy[0] == "accept":
                if policy[1] is not None:
                    dialog.accept(policy[1])
                else:
                    dialog.accept()
            else:
                dialog.dismiss()

    def _on_request(self, request: Any) -> None:
        entry = {
            "url": request.url,
            "method": request.method,
            "resourceType": request.resource_type,
            "timestamp": time.time(),
        }
        if len(self._requests) >= _MAX_LOG_ENTRIES:
            self._requests.pop(0)
        self._requests.append(entry)

    def _on_response(self, response: Response) -> None:
        self._responses.append(response)

    # ═══════════════════════════════════════════════════════════════════════════
    # Lifecycle
    # ═══════════════════════════════════════════════════════════════════════════

    def _cmd_launch(self, p: dict[str, Any]) -> dict[str, Any]:
        options = self.config.default_launch_options()
        options.update(p)
        self.launch(options)
        return {"launched": True}

    def _cmd_close(self, p: dict[str, Any]) -> dict[str, Any]:
        self.close()
        return {"closed": True}

    # ═══════════════════════════════════════════════════════════════════════════
    # Navigation
    # ═══════════════════════════════════════════════════════════════════════════

    def _cmd_navigate(self, p: dict[str, Any]) -> dict[str, Any]:
        page = self._page()
        if p.get("headers"):
            page.set_extra_http_headers({str(k): str(v) for k, v in p["headers"].items()})
        page.goto(p["url"], wait_until=p.get("waitUntil") or "load")
        self._frame = None
        return {"url": page.url, "title": page.title()}

    def _cmd_back(self, p: dict[str, Any]) -> dict[str, Any]:
        page = self._page()
        page.go_back()
        return {"url": page.url}

    def _cmd_forward(self, p: dict[str, Any]) -> dict[str, Any]:
        page = self._page()
        page.go_forward()
        return {"url": page.url}

    def _cmd_reload(self, p: dict[str, Any]) -> dict[str, Any]:
        page = self._page()
        page.reload()
        return {"url": page.url}

    def _cmd_url(self, p: dict[str, Any]) -> dict[str, Any]:
        return {"url": self._page().url}

    def _cmd_title(self, p: dict[str, Any]) -> dict[str, Any]:
        return {"title": self._page().title()}

    # ═══════════════════════════════════════════════════════════════════════════
    # Perception
    # ═══════════════════════════════════════════════════════════════════════════

    def _cmd_snapshot(self, p: dict[str, Any]) -> str:
        options = {
            "attr": REF_ATTRIBUTE,
            "selector": p.get("selector"),
            "interactiveOnly": bool(p.get("interactiveOnly")),
            "cursor": bool(p.get("cursor")),
            "compact": bool(p.get("compact")),
            "depth": p.get("depth"),
        }
        nodes = self._target().evaluate(SNAPSHOT_JS, options)
        if nodes is None:
            raise DriverError(f"Selector not found: {p.get('selector')}")
        logger.debug("snapshot refs=%s", count_refs(nodes))
        return format_snapshot(nodes, compact=bool(p.get("compact")))

    def _cmd_screenshot(self, p: dict[str, Any]) -> dict[str, Any]:
        path = expand_path(p["path"]) if p.get("path") else None
        if p.get("selector"):
            raw = self._locator(p["selector"]).screenshot(path=path)
        else:
            raw = self._page().screenshot(path=path, full_page=bool(p.get("fullPage")))
        data: dict[str, Any] = {"base64": base64.b64encode(raw).decode("ascii")}
        if path:
            data["path"] = path
        return data

    def _cmd_content(self, p: dict[str, Any]) -> dict[str, Any]:
        if p.get("selector"):
            return {"html": self._locator(p["selector"]).first.inner_html()}
        return {"html": self._target().content()}

    # ═══════════════════════════════════════════════════════════════════════════
    # Element actions
    # ═══════════════════════════════════════════════════════════════════════════

    def _cmd_click(self, p: dict[str, Any]) -> dict[str, Any]:
        kwargs: dict[str, Any] = {}
        if p.get("button"):
            kwargs["button"] = p["button"]
        if p.get("clickCount") is not None:
            kwargs["click_count"] = int(p["clickCount"])
        self._locator(p["selector"]).click(**kwargs)
        return {"clicked": True}

    def _cmd_dblclick(self, p: dict[str, Any]) -> dict[str, Any]:
        kwargs = {"button": p["button"]} if p.get("button") else {}
        self._locator(p["selector"]).dblclick(**kwargs)
        return {"clicked": True}

    def _cmd_hover(self, p: dict[str, Any]) -> dict[str, Any]:
        self._locator(p["selector"]).hover()
        return {"hovered": True}

    def _cmd_focus(self, p: dict[str, Any]) -> dict[str, Any]:
        self._locator(p["selector"]).focus()
        return {"focused": True}

    def _cmd_tap(self, p: dict[str, Any]) -> dict[str, Any]:
        self._locator(p["selector"]).tap()
        return {"tapped": True}

    def _cmd_fill(self, p: dict[str, Any]) -> dict[str, Any]:
        self._locator(p["selector"]).fill(p["value"])
        return {"filled": True}

    def _cmd_type(self, p: dict[str, Any]) -> dict[str, Any]:
        kwargs = {"delay": float(p["delay"])} if p.get("delay") is not None else {}
        self._locator(p["selector"]).press_sequentially(p["text"], **kwargs)
        return {"typed": True}

    def _cmd_check(self, p: dict[str, Any]) -> dict[str, Any]:
        self._locator(p["selector"]).check()
        return {"checked": True}

    def _cmd_uncheck(self, p: dict[str, Any]) -> dict[str, Any]:
        self._locator(p["selector"]).uncheck()
        return {"checked": False}

    def _cmd_clear(self, p: dict[str, Any]) -> dict[str, Any]:
        self._locator(p["selector"]).clear()
        return {"cleared": True}

    def _cmd_select_all(self, p: dict[str, Any]) -> dict[str, Any]:
        self._locator(p["selector"]).select_text()
        return {"selected": True}

    def _cmd_select(self, p: dict[str, Any]) -> dict[str, Any]:
        selected = self._locator(p["selector"]).select_option(p["values"])
        return {"selected": selected}

    def _cmd_multiselect(self, p: dict[str, Any]) -> dict[str, Any]:
        values = p["values"] if isinstance(p["values"], list) else [p["values"]]
        selected = self._locator(p["selector"]).select_option(values)
        return {"selected": selected}

    def _cmd_set_value(self, p: dict[str, Any]) -> dict[str, Any]:
        self._locator(p["selector"]).evaluate("(el, value) => { el.value = value; }", p["value"])
        return {"value": p["value"]}

    def _cmd_press(self, p: dict[str, Any]) -> dict[str, Any]:
        if p.get("selector"):
            self._locator(p["selector"]).press(p["key"])
        else:
            self._page().keyboard.press(p["key"])
        return {"pressed": p["key"]}

    def _cmd_scroll(self, p: dict[str, Any]) -> dict[str, Any]:
        if p.get("x") is not None or p.get("y") is not None:
            x, y = p.get("x") or 0, p.get("y") or 0
            if p.get("selector"):
                self._locator(p["selector"]).evaluate("(el, [x, y]) => el.scrollTo(x, y)", [x, y])
            else:
                self._target().evaluate("([x, y]) => window.scrollTo(x, y)", [x, y])
            return {"scrolled": True, "x": x, "y": y}

        amount = p.get("amount") if p.get("amount") is not None else _DEFAULT_SCROLL_AMOUNT
        dx, dy = {
            "up": (0, -amount),
            "down": (0, amount),
            "left": (-amount, 0),
            "right": (amount, 0),
        }[p.get("direction") or "down"]
        if p.get("selector"):
            self._locator(p["selector"]).evaluate("(el, [dx, dy]) => el.scrollBy(dx, dy)", [dx, dy])
        else:
            self._page().mouse.wheel(dx, dy)
        return {"scrolled": True, "deltaX": dx, "deltaY": dy}

    def _cmd_scroll_into_view(self, p: dict[str, Any]) -> dict[str, Any]:
        self._locator(p["selector"]).scroll_into_view_if_needed()
        return {"scrolled": True}

    def _cmd_upload(self, p: dict[str, Any]) -> dict[str, Any]:
        files = p["files"] if isinstance(p["files"], list) else [p["files"]]
        files = [expand_path(f) for f in files]
        self._locator(p["selector"]).set_input_files(files)
        return {"uploaded": files}

    def _cmd_drag(self, p: dict[str, Any]) -> dict[str, Any]:
        self._locator(p["source"]).drag_to(self._locator(p["target"]))
        return {"dragged": True}

    def _cmd_dispatch_event(self, p: dict[str, Any]) -> dict[str, Any]:
        self._locator(p["selector"]).dispatch_event(p["event"], p.get("eventInit"))
        return {"dispatched": p["event"]}

    def _cmd_highlight(self, p: dict[str, Any]) -> dict[str, Any]:
        self._locator(p["selector"]).highlight()
        return {"highlighted": True}

    def _cmd_styles(self, p: dict[str, Any]) -> dict[str, Any]:
        elements = self._locator(p["selector"]).evaluate_all(
            """(els) => els.map((el) => {
                const s = getComputedStyle(el);
                const r = el.getBoundingClientRect();
                return {
                  tag: el.tagName.toLowerCase(),
                  text: (el.innerText || '').trim().slice(0, 80),
                  box: {x: r.x, y: r.y, width: r.width, height: r.height},
                  styles: {
                    fontSize: s.fontSize, fontWeight: s.fontWeight, fontFamily: s.fontFamily,
                    color: s.color, backgroundColor: s.backgroundColor, display: s.display,
                    visibility: s.visibility, opacity: s.opacity, position: s.position,
                    borderRadius: s.borderRadius, border: s.border, padding: s.padding, margin: s.margin,
                  },
                };
            })"""
        )
        return {"elements": elements}

    # ═══════════════════════════════════════════════════════════════════════════
    # Semantic locators
    # ═══════════════════════════════════════════════════════════════════════════

    def _find(self, locator: Locator, p: dict[str, Any]) -> dict[str, Any]:
        count = locator.count()
        subaction = p.get("subaction")
        if subaction is None:
            text = locator.first.inner_text() if count else None
            return {"count": count, "text": text}
        if subaction == "click":
            locator.click()
        elif subaction == "hover":
            locator.hover()
        elif subaction == "check":
            locator.check()
        elif subaction == "fill":
            self._require(p, "value")
            locator.fill(p["value"])
        else:
            raise DriverError(f"Unknown find action: {subaction}")
        return {"count": count, "action": subaction}

    def _exact(self, p: dict[str, Any]) -> dict[str, Any]:
        return {"exact": bool(p["exact"])} if p.get("exact") is not None else {}

    def _cmd_find_by_role(self, p: dict[str, Any]) -> dict[str, Any]:
        return self._find(self._target().get_by_role(p["role"], **self._exact(p)).first, p)

    def _cmd_find_by_text(self, p: dict[str, Any]) -> dict[str, Any]:
        return self._find(self._target().get_by_text(p["text"], **self._exact(p)).first, p)

    def _cmd_find_by_label(self, p: dict[str, Any]) -> dict[str, Any]:
        return self._find(self._target().get_by_label(p["label"], **self._exact(p)).first, p)

    def _cmd_find_by_placeholder(self, p: dict[str, Any]) -> dict[str, Any]:
        return self._find(self._target().get_by_placeholder(p["placeholder"], **self._exact(p)).first, p)

    def _cmd_find_by_test_id(self, p: dict[str, Any]) -> dict[str, Any]:
        return self._find(self._target().get_by_test_id(p["testId"]).first, p)

    def _cmd_find_by_title(self, p: dict[str, Any]) -> dict[str, Any]:
        return self._find(self._target().get_by_title(p["title"], **self._exact(p)).first, p)

    def _cmd_find_by_alt_text(self, p: dict[str, Any]) -> dict[str, Any]:
        return self._find(self._target().get_by_alt_text(p["text"], **self._exact(p)).first, p)

    def _cmd_find_nth(self, p: dict[str, Any]) -> dict[str, Any]:
        base = self._locator(p["selector"])
        index = int(p.get("index", 0))
        return self._find(base.last if index == -1 else base.nth(index), p)

    # ═══════════════════════════════════════════════════════════════════════════
    # Element reads
    # ═══════════════════════════════════════════════════════════════════════════

    def _cmd_get_text(self, p: dict[str, Any]) -> dict[str, Any]:
        return {"text": self._locator(p["selector"]).first.text_content()}

    def _cmd_get_inner_text(self, p: dict[str, Any]) -> dict[str, Any]:
        return {"text": self._locator(p["selector"]).first.inner_text()}

    def _cmd_get_inner_html(self, p: dict[str, Any]) -> dict[str, Any]:
        return {"html": self._locator(p["selector"]).first.inner_html()}

    def _cmd_get_value(self, p: dict[str, Any]) -> dict[str, Any]:
        return {"value": self._locator(p["selector"]).first.input_value()}

    def _cmd_get_attribute(self, p: dict[str, Any]) -> dict[str, Any]:
        value = self._locator(p["selector"]).first.get_attribute(p["attribute"])
        return {"attribute": p["attribute"], "value": value}

    def _cmd_bounding_box(self, p: dict[str, Any]) -> dict[str, Any] | None:
        return self._locator(p["selector"]).first.bounding_box()

    def _cmd_count(self, p: dict[str, Any]) -> dict[str, Any]:
        return {"count": self._locator(p["selector"]).count()}

    def _cmd_is_visible(self, p: dict[str, Any]) -> dict[str, Any]:
        return {"visible": self._locator(p["selector"]).first.is_visible()}

    def _cmd_is_enabled(self, p: dict[str, Any]) -> dict[str, Any]:
        return {"enabled": self._locator(p["selector"]).first.is_enabled()}

    def _cmd_is_checked(self, p: dict[str, Any]) -> dict[str, Any]:
        return {"checked": self._locator(p["selector"]).first.is_checked()}

    # ═══════════════════════════════════════════════════════════════════════════
    # Storage, cookies, state
    # ═══════════════════════════════════════════════════════════════════════════

    @staticmethod
    def _storage_name(p: dict[str, Any]) -> str:
        return "sessionStorage" if p.get("type") == "session" else "localStorage"

    def _cmd_storage_get(self, p: dict[str, Any]) -> dict[str, Any]:
        name = self._storage_name(p)
        if p.get("key") is not None:
            value = self._page().evaluate(f"(key) => window.{name}.getItem(key)", p["key"])
            return {"key": p["key"], "value": value}
        data = self._page().evaluate(f"() => Object.fromEntries(Object.entries(window.{name}))")
        return {"data": data}

    def _cmd_storage_set(self, p: dict[str, Any]) -> dict[str, Any]:
        name = self._storage_name(p)
        self._page().evaluate(f"([key, value]) => window.{name}.setItem(key, value)", [p["key"], p["value"]])
        return {"set": True}

    def _cmd_storage_clear(self, p: dict[str, Any]) -> dict[str, Any]:
        self._page().evaluate(f"() => window.{self._storage_name(p)}.clear()")
        return {"cleared": True}

    def _cmd_cookies_get(self, p: dict[str, Any]) -> dict[str, Any]:
        assert self._context is not None
        return {"cookies": self._context.cookies(p.get("urls") or [])}

    def _cmd_cookies_set(self, p: dict[str, Any]) -> dict[str, Any]:
        assert self._context is not None
        page_url = self._page().url
        cookies = []
        for cookie in p["cookies"]:
            cookie = dict(cookie)
            if not cookie.get("url") and not cookie.get("domain") and page_url.startswith("http"):
                cookie["url"] = page_url
            cookies.append(cookie)
        self._context.add_cookies(cookies)
        return {"set": len(cookies)}

    def _cmd_state_save(self, p: dict[str, Any]) -> dict[str, Any]:
        assert self._context is not None
        path = expand_path(p["path"])
        self._context.storage_state(path=path)
        return {"path": path}

    def _cmd_state_load(self, p: dict[str, Any]) -> dict[str, Any]:
        path = expand_path(p["path"])
        if not Path(path).is_file():
            raise DriverError(f"State file not found: {path}")
        self._recreate_context(storage_state=path)
        return {"loaded": path}

    # ═══════════════════════════════════════════════════════════════════════════
    # Context emulation
    # ═══════════════════════════════════════════════════════════════════════════

    def _cmd_set_device(self, p: dict[str, Any]) -> dict[str, Any]:
        assert self._playwright is not None
        descriptor = self._playwright.devices.get(p["device"])
        if descriptor is None:
            raise DriverError(f"Unknown device: {p['device']}")
        overrides = dict(descriptor)
        overrides.pop("default_browser_type", None)
        self._recreate_context(**overrides)
        return {"device": p["device"], "viewport": descriptor.get("viewport")}

    def _cmd_set_viewport(self, p: dict[str, Any]) -> dict[str, Any]:
        size = {"width": int(p["width"]), "height": int(p["height"])}
        self._page().set_viewport_size(size)
        return {"viewport": size}

    def _cmd_set_geolocation(self, p: dict[str, Any]) -> dict[str, Any]:
        assert self._context is not None
        geo = {"latitude": float(p["latitude"]), "longitude": float(p["longitude"])}
        if p.get("accuracy") is not None:
            geo["accuracy"] = float(p["accuracy"])
        self._context.grant_permissions(["geolocation"])
        self._context.set_geolocation(geo)
        return {"geolocation": geo}

    def _cmd_set_locale(self, p: dict[str, Any]) -> dict[str, Any]:
        self._recreate_context(locale=p["locale"])
        return {"locale": p["locale"]}

    def _cmd_set_timezone(self, p: dict[str, Any]) -> dict[str, Any]:
        self._recreate_context(timezone_id=p["timezone"])
        return {"timezone": p["timezone"]}

    def _cmd_set_offline(self, p: dict[str, Any]) -> dict[str, Any]:
        assert self._context is not None
        self._context.set_offline(bool(p["offline"]))
        return {"offline": bool(p["offline"])}

    def _cmd_emulate_media(self, p: dict[str, Any]) -> dict[str, Any]:
        # Absent keys are left unchanged; None is sent as "null" to clear the emulation.
        kwargs: dict[str, Any] = {}
        for key, kwarg in (("media", "media"), ("colorScheme", "color_scheme"), ("reducedMotion", "reduced_motion")):
            if key in p:
                kwargs[kwarg] = "null" if p[key] is None else p[key]
        self._page().emulate_media(**kwargs)
        return {"media": {k: p[k] for k in ("media", "colorScheme", "reducedMotion") if k in p}}

    def _cmd_set_headers(self, p: dict[str, Any]) -> dict[str, Any]:
        assert self._context is not None
        headers = {str(k): str(v) for k, v in p["headers"].items()}
        self._context.set_extra_http_headers(headers)
        return {"headers": sorted(headers)}

    def _cmd_set_credentials(self, p: dict[str, Any]) -> dict[str, Any]:
        self._recreate_context(http_credentials={"username": p["username"], "password": p["password"]})
        return {"credentials": True}

    # ═══════════════════════════════════════════════════════════════════════════
    # Dialogs & raw input
    # ═══════════════════════════════════════════════════════════════════════════

    def _cmd_dialog_accept(self, p: dict[str, Any]) -> dict[str, Any]:
        self._dialog_policy = ("accept", p.get("promptText"))
        return {"dialog": "accept"}

    def _cmd_dialog_dismiss(self, p: dict[str, Any]) -> dict[str, Any]:
        self._dialog_policy = ("dismiss", None)
        return {"dialog": "dismiss"}

    def _cmd_mouse_down(self, p: dict[str, Any]) -> dict[str, Any]:
        self._page().mouse.down(button=p.get("button") or "left")
        return {"down": True}

    def _cmd_mouse_up(self, p: dict[str, Any]) -> dict[str, Any]:
        self._page().mouse.up(button=p.get("button") or "left")
        return {"up": True}

    def _cmd_mouse_move(self, p: dict[str, Any]) -> dict[str, Any]:
        self._page().mouse.move(float(p["x"]), float(p["y"]))
        return {"x": p["x"], "y": p["y"]}

    def _cmd_wheel(self, p: dict[str, Any]) -> dict[str, Any]:
        if p.get("selector"):
            self._locator(p["selector"]).hover()
        dx, dy = float(p.get("deltaX") or 0), float(p.get("deltaY") or 0)
        self._page().mouse.wheel(dx, dy)
        return {"deltaX": dx, "deltaY": dy}

    def _cmd_key_down(self, p: dict[str, Any]) -> dict[str, Any]:
        self._page().keyboard.down(p["key"])
        return {"down": p["key"]}

    def _cmd_key_up(self, p: dict[str, Any]) -> dict[str, Any]:
        self._page().keyboard.up(p["key"])
        return {"up": p["key"]}

    def _cmd_keyboard(self, p: dict[str, Any]) -> dict[str, Any]:
        self._page().keyboard.press(p["keys"])
        return {"pressed": p["keys"]}

    # ═══════════════════════════════════════════════════════════════════════════
    # Network
    # ═══════════════════════════════════════════════════════════════════════════

    def _cmd_route(self, p: dict[str, Any]) -> dict[str, Any]:
        assert self._context is not None
        url = p["url"]
        abort = bool(p.get("abort"))
        mock = p.get("response")

        def handler(route: Any) -> None:
            if abort:
                route.abort()
            elif mock:
                route.fulfill(
                    status=int(mock.get("status", 200)),
                    body=mock.get("body", ""),
                    content_type=mock.get("contentType"),
                    headers=mock.get("headers"),
                )
            else:
                route.continue_()

        previous = self._routes.get(url)
        self._routes[url] = handler
        for context in self._contexts():
            if previous is not None:
                context.unroute(url, previous)
            context.route(url, handler)
        return {"routed": url, "abort": abort, "mocked": bool(mock)}

    def _cmd_unroute(self, p: dict[str, Any]) -> dict[str, Any]:
        assert self._context is not None
        url = p.get("url")
        if url:
            handlers = {url: self._routes.pop(url)} if url in self._routes else {}
        else:
            handlers, self._routes = self._routes, {}
        for context in self._contexts():
            for route_url, handler in handlers.items():
                context.unroute(route_url, handler)
        return {"unrouted": list(handlers)}

    def _cmd_requests(self, p: dict[str, Any]) -> dict[str, Any]:
        needle = p.get("filter")
        requests = [r for r in self._requests if not needle or needle in r["url"]]
        if p.get("clear"):
            self._requests = []
        return {"requests": requests}

    def _cmd_response_body(self, p: dict[str, Any]) -> dict[str, Any]:
        url = p["url"]
        response = next((r for r in reversed(self._responses) if url in r.url), None)
        if response is None:
            timeout = float(p["timeout"]) if p.get("timeout") is not None else 30000
            with self._page().expect_response(lambda r: url in r.url, timeout=timeout) as info:
                pass
            response = info.value
        body = response.body()
        try:
            text: str | None = body.decode("utf-8")
        except UnicodeDecodeError:
            text = None
        data: dict[str, Any] = {"url": response.url, "status": response.status, "headers": response.headers}
        if text is not None:
            data["body"] = text
        else:
            data["base64"] = base64.b64encode(body).decode("ascii")
        return data

    # ═══════════════════════════════════════════════════════════════════════════
    # Scripting
    # ═══════════════════════════════════════════════════════════════════════════

    def _cmd_evaluate(self, p: dict[str, Any]) -> dict[str, Any]:
        if "args" in p:
            result = self._target().evaluate(p["script"], p["args"])
        else:
            result = self._target().evaluate(p["script"])
        return {"result": result}

    def _cmd_set_content(self, p: dict[str, Any]) -> dict[str, Any]:
        self._target().set_content(p["html"])
        return {"set": True}

    def _cmd_add_script(self, p: dict[str, Any]) -> dict[str, Any]:
        self._require_any(p, "content", "url")
        self._target().add_script_tag(**{k: p[k] for k in ("content", "url") if p.get(k) is not None})
        return {"added": True}

    def _cmd_add_style(self, p: dict[str, Any]) -> dict[str, Any]:
        self._require_any(p, "content", "url")
        self._target().add_style_tag(**{k: p[k] for k in ("content", "url") if p.get(k) is not None})
        return {"added": True}

    def _cmd_add_init_script(self, p: dict[str, Any]) -> dict[str, Any]:
        assert self._context is not None
        self._context.add_init_script(p["script"])
        return {"added": True}

    def _require_any(self, params: dict[str, Any], *keys: str) -> None:
        if all(params.get(k) is None for k in keys):
            raise DriverError(f"One of {', '.join(keys)} is required")

    # ═══════════════════════════════════════════════════════════════════════════
    # Logs
    # ═══════════════════════════════════════════════════════════════════════════

    def _cmd_console(self, p: dict[str, Any]) -> dict[str, Any]:
        messages = list(self._console)
        if p.get("clear"):
            self._console = []
        return {"messages": messages}

    def _cmd_errors(self, p: dict[str, Any]) -> dict[str, Any]:
        errors = list(self._errors)
        if p.get("clear"):
            self._errors = []
        return {"errors": errors}

    # ═══════════════════════════════════════════════════════════════════════════
    # Recording & tracing
    # ═══════════════════════════════════════════════════════════════════════════

    def _cmd_screencast_start(self, p: dict[str, Any]) -> dict[str, Any]:
        assert self._context is not None
        if self._screencast is not None:
            raise DriverError("Screencast already running")
        page = self._page()
        try:
            cdp = self._context.new_cdp_session(page)
        except PlaywrightError as exc:
            raise DriverError(f"Screencast needs a chromium browser: {exc}") from exc
        state: dict[str, Any] = {"cdp": cdp, "frames": 0}

        def on_frame(event: dict[str, Any]) -> None:
            state["frames"] += 1
            state["last"] = event.get("data")
            with suppress(PlaywrightError):
                cdp.send("Page.screencastFrameAck", {"sessionId": event.get("sessionId")})

        cdp.on("Page.screencastFrame", on_frame)
        params = {"format": p.get("format") or "jpeg"}
        for key in ("quality", "maxWidth", "maxHeight"):
            if p.get(key) is not None:
                params[key] = int(p[key])
        cdp.send("Page.startScreencast", params)
        self._screencast = state
        return {"started": True, **params}

    def _cmd_screencast_stop(self, p: dict[str, Any]) -> dict[str, Any]:
        state, self._screencast = self._screencast, None
        if state is None:
            raise DriverError("No screencast running")
        with suppress(PlaywrightError):
            state["cdp"].send("Page.stopScreencast")
            state["cdp"].detach()
        return {"stopped": True, "frames": state["frames"]}

    def _cmd_trace_start(self, p: dict[str, Any]) -> dict[str, Any]:
        assert self._context is not None
        self._context.tracing.start(
            screenshots=bool(p.get("screenshots", True)),
            snapshots=bool(p.get("snapshots", True)),
        )
        return {"tracing": True}

    def _cmd_trace_stop(self, p: dict[str, Any]) -> dict[str, Any]:
        assert self._context is not None
        path = expand_path(p["path"])
        self._context.tracing.stop(path=path)
        return {"path": path}

    def _start_capture(self, kind: str, url: str | None = None, **capture_options: Any) -> dict[str, Any]:
        """Swap in a context recording ``kind``; the current one is parked until the capture stops."""
        if self._capture is not None:
            raise DriverError(f"A {self._capture['kind']} capture is already running; stop it first")
        if self._browser is None or self._persistent or self._context is None:
            raise DriverError(f"{kind} capture needs a launched (non-persistent) browser")

        current_url = self._page().url
        options = dict(self._context_options)
        options["storage_state"] = self._context.storage_state()
        context = self._browser.new_context(**options, **capture_options)
        capture = {"kind": kind, "context": context, "previous": (self._context, list(self._pages), self._active)}
        self._capture = capture
        self._pages = []
        self._adopt_context(context)
        target = url or (current_url if current_url != "about:blank" else None)
        if target:
            self._page().goto(target)
        return capture

    def _stop_capture(self, kind: str) -> dict[str, Any]:
        capture = self._capture
        if capture is None or capture["kind"] != kind:
            raise DriverError(f"No {kind} capture in progress")
        self._capture = None
        previous_context, pages, active = capture["previous"]
        try:
            capture["context"].close()
        finally:
            self._context, self._pages, self._active = previous_context, pages, active
            self._frame = None
        return capture

    def _cmd_recording_start(self, p: dict[str, Any]) -> dict[str, Any]:
        self._require(p, "path")
        video_dir = tempfile.mkdtemp(prefix="agent-browser-video-")
        capture = self._start_capture("video", p.get("url"), record_video_dir=video_dir)
        capture["path"] = expand_path(p["path"])
        return {"recording": True, "path": capture["path"]}

    def _cmd_recording_stop(self, p: dict[str, Any]) -> dict[str, Any]:
        video = self._pages[self._active].video if self._capture is not None and self._pages else None
        capture = self._stop_capture("video")
        # The video file is finalized when its context closes.
        if video is not None:
            video.save_as(capture["path"])
        return {"path": capture["path"]}

    def _cmd_recording_restart(self, p: dict[str, Any]) -> dict[str, Any]:
        running = self._capture is not None and self._capture["kind"] == "video"
        stopped = self._cmd_recording_stop({}) if running else None
        started = self._cmd_recording_start(p)
        return {"previous": stopped["path"] if stopped else None, **started}

    def _cmd_har_start(self, p: dict[str, Any]) -> dict[str, Any]:
        har_file = Path(tempfile.mkdtemp(prefix="agent-browser-har-")) / "capture.har"
        capture = self._start_capture("har", record_har_path=str(har_file))
        capture["file"] = har_file
        return {"har": True}

    def _cmd_har_stop(self, p: dict[str, Any]) -> dict[str, Any]:
        capture = self._stop_capture("har")
        har_file: Path = capture["file"]
        if not har_file.is_file():
            raise DriverError("HAR file was not written by the browser")
        path = Path(expand_path(p["path"]))
        path.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(har_file), str(path))
        entries = json.loads(path.read_text(encoding="utf-8")).get("log", {}).get("entries", [])
        return {"path": str(path), "entries": len(entries)}

    # ═══════════════════════════════════════════════════════════════════════════
    # Tabs, windows, frames
    # ═══════════════════════════════════════════════════════════════════════════

    def _cmd_tab_list(self, p: dict[str, Any]) -> dict[str, Any]:
        self._page()
        tabs = []
        for index, page in enumerate(self._pages):
            title = ""
            with suppress(PlaywrightError):
                title = page.title()
            tabs.append({"index": index, "url": page.url, "title": title, "active": index == self._active})
        return {"tabs": tabs, "active": self._active}

    def _cmd_tab_new(self, p: dict[str, Any]) -> dict[str, Any]:
        assert self._context is not None
        page = self._context.new_page()
        self._track_page(page)
        self._active = self._pages.index(page)
        self._frame = None
        if p.get("url"):
            page.goto(p["url"])
        return {"index": self._active, "url": page.url}

    def _tab_index(self, p: dict[str, Any]) -> int:
        index = int(p["index"]) if p.get("index") is not None else self._active
        if not 0 <= index < len(self._pages):
            raise DriverError(f"Tab index out of range: {index} (tabs: {len(self._pages)})")
        return index

    def _cmd_tab_switch(self, p: dict[str, Any]) -> dict[str, Any]:
        self._page()
        self._active = self._tab_index(p)
        self._frame = None
        page = self._pages[self._active]
        page.bring_to_front()
        return {"index": self._active, "url": page.url}

    def _cmd_tab_close(self, p: dict[str, Any]) -> dict[str, Any]:
        self._page()
        index = self._tab_index(p)
        page = self._pages[index]
        page.close()
        self._on_page_closed(page)
        return {"closed": index, "remaining": len(self._pages)}

    def _cmd_window_new(self, p: dict[str, Any]) -> dict[str, Any]:
        if self._browser is None or self._persistent:
            raise DriverError("New windows need a launched (non-persistent) browser")
        options = dict(self._context_options)
        if p.get("viewport"):
            options["viewport"] = {"width": 1280, "height": 720, **p["viewport"]}
        context = self._browser.new_context(**options)
        self._wire_context(context)
        self._windows.append(context)
        page = context.new_page()
        self._track_page(page)
        self._active = self._pages.index(page)
        self._frame = None
        return {"index": self._active}

    def _cmd_bring_to_front(self, p: dict[str, Any]) -> dict[str, Any]:
        self._page().bring_to_front()
        return {"active": self._active}

    def _cmd_frame(self, p: dict[str, Any]) -> dict[str, Any]:
        page = self._page()
        frame: Frame | None = None
        if p.get("selector"):
            handle = page.locator(resolve_selector(p["selector"])).element_handle()
            frame = handle.content_frame() if handle is not None else None
        elif p.get("name") or p.get("url"):
            frame = page.frame(name=p.get("name"), url=p.get("url"))
        else:
            raise DriverError("Frame switch needs selector, name or url")
        if frame is None:
            raise DriverError("Frame not found")
        self._frame = frame
        return {"frame": frame.name, "url": frame.url}

    def _cmd_main_frame(self, p: dict[str, Any]) -> dict[str, Any]:
        self._frame = None
        return {"frame": "main"}

    # ═══════════════════════════════════════════════════════════════════════════
    # Files & waits
    # ═══════════════════════════════════════════════════════════════════════════

    def _cmd_pdf(self, p: dict[str, Any]) -> dict[str, Any]:
        path = expand_path(p["path"])
        kwargs = {"format": p["format"]} if p.get("format") else {}
        self._page().pdf(path=path, **kwargs)
        return {"path": path}

    def _cmd_download(self, p: dict[str, Any]) -> dict[str, Any]:
        path = expand_path(p["path"])
        with self._page().expect_download() as info:
            self._locator(p["selector"]).click()
        download = info.value
        download.save_as(path)
        return {"path": path, "suggestedFilename": download.suggested_filename}

    def _cmd_wait(self, p: dict[str, Any]) -> dict[str, Any]:
        if p.get("selector"):
            kwargs: dict[str, Any] = {"state": p.get("state") or "visible"}
            if p.get("timeout") is not None:
                kwargs["timeout"] = float(p["timeout"])
            self._locator(p["selector"]).first.wait_for(**kwargs)
            return {"waited": p["selector"], "state": kwargs["state"]}
        timeout = float(p["timeout"]) if p.get("timeout") is not None else _DEFAULT_WAIT_MS
        self._page().wait_for_timeout(timeout)
        return {"waited": timeout}

    def _timeout_kwargs(self, p: dict[str, Any]) -> dict[str, Any]:
        return {"timeout": float(p["timeout"])} if p.get("timeout") is not None else {}

    def _cmd_wait_for_url(self, p: dict[str, Any]) -> dict[str, Any]:
        page = self._page()
        page.wait_for_url(p["url"], **self._timeout_kwargs(p))
        return {"url": page.url}

    def _cmd_wait_for_load_state(self, p: dict[str, Any]) -> dict[str, Any]:
        state = p.get("state") or "load"
        self._page().wait_for_load_state(state, **self._timeout_kwargs(p))
        return {"state": state}

    def _cmd_wait_for_function(self, p: dict[str, Any]) -> dict[str, Any]:
        handle = self._target().wait_for_function(p["expression"], **self._timeout_kwargs(p))
        return {"result": handle.json_value()}

    def _cmd_wait_for_download(self, p: dict[str, Any]) -> dict[str, Any]:
        download = self._page().wait_for_event("download", **self._timeout_kwargs(p))
        data: dict[str, Any] = {"suggestedFilename": download.suggested_filename, "url": download.url}
        if p.get("path"):
            path = expand_path(p["path"])
            download.save_as(path)
            data["path"] = path
        return data

    def _cmd_clipboard(self, p: dict[str, Any]) -> dict[str, Any]:
        assert self._context is not None
        operation = p["operation"]
        page = self._page()
        modifier = "Meta" if sys.platform == "darwin" else "Control"
        with suppress(PlaywrightError):
            self._context.grant_permissions(["clipboard-read", "clipboard-write"])

        if operation == "read":
            return {"text": page.evaluate("() => navigator.clipboard.readText()")}
        if p.get("text") is not None:
            page.evaluate("(text) => navigator.clipboard.writeText(text)", p["text"])
        if operation == "copy":
            if p.get("text") is None:
                page.keyboard.press(f"{modifier}+c")
            return {"copied": True}
        if operation == "paste":
            page.keyboard.press(f"{modifier}+v")
            return {"pasted": True}
        raise DriverError(f"Unknown clipboard operation: {operation}")

    # ═══════════════════════════════════════════════════════════════════════════
    # Mobile-only actions
    # ═══════════════════════════════════════════════════════════════════════════

    def _cmd_device_list(self, p: dict[str, Any]) -> dict[str, Any]:
        raise DriverError("device_list requires the ios provider (browser_launch provider='ios')")

    def _cmd_swipe(self, p: dict[str, Any]) -> dict[str, Any]:
        raise DriverError("swipe requires the ios provider (browser_launch provider='ios')")


def supported_actions() -> list[str]:
    """Canonical actions this driver implements."""
    return sorted(a for a in COMMAND_FIELDS if callable(getattr(PlaywrightDriver, f"_cmd_{a}", None)))


__all__ = ["PlaywrightDriver", "supported_actions"]
