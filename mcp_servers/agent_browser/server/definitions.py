"""Merged tool schema definitions.

Each advertised tool covers a cluster of canonical commands. Tools with more
than one command carry a discriminant argument (``action``, ``method``,
``setting``, ...) whose enum must list exactly the values the mapper resolves.
"""

from __future__ import annotations

from typing import Any

_SCHEMA = "http://json-schema.org/draft-07/schema#"

_SELECTOR_OR_REF = {"type": "string", "description": "CSS selector or element ref (@e1, @e2, etc.)"}
_MOUSE_BUTTON = {"type": "string", "enum": ["left", "right", "middle"]}
_LOAD_STATES = ["load", "domcontentloaded", "networkidle"]


def _schema(properties: dict[str, Any], required: list[str] | None = None) -> dict[str, Any]:
    schema: dict[str, Any] = {"$schema": _SCHEMA, "type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


# ═══════════════════════════════════════════════════════════════════════════════
# Core
# ═══════════════════════════════════════════════════════════════════════════════

LAUNCH_TOOL: dict[str, Any] = {
    "name": "browser_launch",
    "description": """Launch browser session with startup options.

Other tools launch the browser on demand with environment defaults; call this
only to pick a provider or non-default startup options. A provider from a
different backend family (ios vs desktop) replaces the running session.""",
    "inputSchema": _schema(
        {
            "headless": {"type": "boolean", "description": "Run browser in headless mode"},
            "browser": {"type": "string", "enum": ["chromium", "firefox", "webkit"], "description": "Browser engine"},
            "cdpPort": {"type": "number", "description": "Connect to local CDP port"},
            "cdpUrl": {"type": "string", "description": "Connect to CDP URL (ws/http)"},
            "executablePath": {"type": "string", "description": "Browser executable path"},
            "args": {"type": "array", "items": {"type": "string"}, "description": "Additional browser args"},
            "userAgent": {"type": "string", "description": "Context user agent"},
            "provider": {
                "type": "string",
                "enum": ["ios", "browserbase", "browseruse", "kernel"],
                "description": "Browser provider",
            },
            "ignoreHTTPSErrors": {"type": "boolean", "description": "Ignore HTTPS/TLS errors"},
            "profile": {"type": "string", "description": "Persistent profile directory path"},
            "storageState": {"type": "string", "description": "Storage state JSON path"},
            "allowFileAccess": {"type": "boolean", "description": "Enable file:// cross-origin access (Chromium)"},
        }
    ),
}

NAVIGATE_TOOL: dict[str, Any] = {
    "name": "browser_navigate",
    "description": "Navigate to a URL",
    "inputSchema": _schema(
        {
            "url": {"type": "string", "description": "The URL to navigate to"},
            "waitUntil": {
                "type": "string",
                "enum": _LOAD_STATES,
                "description": "When to consider navigation succeeded",
            },
            "headers": {"type": "object", "description": "HTTP headers to set for this origin"},
        },
        ["url"],
    ),
}

SNAPSHOT_TOOL: dict[str, Any] = {
    "name": "browser_snapshot",
    "description": """Get accessibility tree with element refs (@e1, @e2, etc.) for interaction.

USAGE:
- Full tree: browser_snapshot()
- Only actionable elements: browser_snapshot(interactiveOnly=true, compact=true)
- Then act on a ref: browser_element_action(action="click", selector="@e3")""",
    "inputSchema": _schema(
        {
            "interactiveOnly": {"type": "boolean", "description": "Only show interactive elements"},
            "cursor": {"type": "boolean", "description": "Include cursor-interactive elements"},
            "compact": {"type": "boolean", "description": "Remove empty structural elements"},
            "depth": {"type": "number", "description": "Limit tree depth"},
            "selector": {"type": "string", "description": "Scope to CSS selector"},
        }
    ),
}

SCREENSHOT_TOOL: dict[str, Any] = {
    "name": "browser_screenshot",
    "description": "Take screenshot of current page or element",
    "inputSchema": _schema(
        {
            "path": {"type": "string", "description": "File path to save screenshot (optional)"},
            "fullPage": {"type": "boolean", "description": "Capture full page scrollable screenshot"},
            "selector": {"type": ["string", "null"], "description": "CSS selector for element screenshot"},
        }
    ),
}

CLOSE_TOOL: dict[str, Any] = {
    "name": "browser_close",
    "description": "Close the browser",
    "inputSchema": _schema({}),
}

# ═══════════════════════════════════════════════════════════════════════════════
# Navigation history / page info
# ═══════════════════════════════════════════════════════════════════════════════

HISTORY_TOOL: dict[str, Any] = {
    "name": "browser_history",
    "description": "Navigate browser history",
    "inputSchema": _schema(
        {"action": {"type": "string", "enum": ["back", "forward", "reload"], "description": "History action"}},
        ["action"],
    ),
}

PAGE_INFO_TOOL: dict[str, Any] = {
    "name": "browser_page_info",
    "description": "Get current page information",
    "inputSchema": _schema(
        {"info": {"type": "string", "enum": ["url", "title"], "description": "Page info to retrieve"}},
        ["info"],
    ),
}

# ═══════════════════════════════════════════════════════════════════════════════
# Element actions & input
# ═══════════════════════════════════════════════════════════════════════════════

ELEMENT_ACTION_TOOL: dict[str, Any] = {
    "name": "browser_element_action",
    "description": "Perform action on an element (click, dblclick, hover, focus, tap)",
    "inputSchema": _schema(
        {
            "action": {
                "type": "string",
                "enum": ["click", "dblclick", "hover", "focus", "tap"],
                "description": "Action to perform",
            },
            "selector": _SELECTOR_OR_REF,
            "button": {**_MOUSE_BUTTON, "description": "Mouse button (for click)"},
            "clickCount": {"type": "number", "description": "Number of clicks (for click)"},
        },
        ["action", "selector"],
    ),
}

INPUT_TOOL: dict[str, Any] = {
    "name": "browser_input",
    "description": "Input text into an element",
    "inputSchema": _schema(
        {
            "action": {
                "type": "string",
                "enum": ["fill", "type"],
                "description": "fill: clear then input, type: append text",
            },
            "selector": {"type": "string", "description": "CSS selector or element ref"},
            "value": {"type": "string", "description": "Text value to input"},
            "delay": {"type": "number", "description": "Delay between keystrokes in ms (for type)"},
        },
        ["action", "selector", "value"],
    ),
}

INPUT_ACTION_TOOL: dict[str, Any] = {
    "name": "browser_input_action",
    "description": "Perform input control actions (check, uncheck, clear, select_all)",
    "inputSchema": _schema(
        {
            "action": {
                "type": "string",
                "enum": ["check", "uncheck", "clear", "select_all"],
                "description": "Input control action",
            },
            "selector": {"type": "string", "description": "CSS selector or element ref"},
        },
        ["action", "selector"],
    ),
}

SELECT_TOOL: dict[str, Any] = {
    "name": "browser_select",
    "description": "Select option(s) from a dropdown",
    "inputSchema": _schema(
        {
            "selector": {"type": "string", "description": "CSS selector or element ref"},
            "values": {
                "oneOf": [{"type": "string"}, {"type": "array", "items": {"type": "string"}}],
                "description": "Value(s) to select",
            },
            "multiSelect": {
                "type": "boolean",
                "description": "Select multiple options (use browser_multiselect instead)",
            },
        },
        ["selector", "values"],
    ),
}

PRESS_TOOL: dict[str, Any] = {
    "name": "browser_press",
    "description": "Press a keyboard key (Enter, Tab, Escape, etc.)",
    "inputSchema": _schema(
        {
            "key": {"type": "string", "description": "Key to press (Enter, Tab, Escape, Backspace, ArrowDown, etc.)"},
            "selector": {"type": "string", "description": "Optional element selector to focus first"},
        },
        ["key"],
    ),
}

SCROLL_TOOL: dict[str, Any] = {
    "name": "browser_scroll",
    "description": "Scroll page or element",
    "inputSchema": _schema(
        {
            "action": {"type": "string", "enum": ["scroll", "scroll_into_view"], "description": "Scroll action type"},
            "selector": {
                "type": "string",
                "description": "Element selector (for scroll_into_view or element scroll)",
            },
            "direction": {
                "type": "string",
                "enum": ["up", "down", "left", "right"],
                "description": "Scroll direction (for scroll)",
            },
            "amount": {"type": "number", "description": "Pixels to scroll (for scroll)"},
            "x": {"type": "number", "description": "X position to scroll to"},
            "y": {"type": "number", "description": "Y position to scroll to"},
        },
        ["action"],
    ),
}

# ═══════════════════════════════════════════════════════════════════════════════
# Find / read elements
# ═══════════════════════════════════════════════════════════════════════════════

FIND_TOOL: dict[str, Any] = {
    "name": "browser_find",
    "description": """Find element by accessible criteria and perform action.

USAGE:
- Click a button by role: browser_find(method="role", value="button", action="click")
- Fill a labelled input: browser_find(method="label", value="Email", action="fill", fillValue="a@b.c")
- Third match of a selector: browser_find(method="nth", selector="li", index=2)

`value` is required for every method except nth; nth needs `selector`.""",
    "inputSchema": _schema(
        {
            "method": {
                "type": "string",
                "enum": ["role", "text", "label", "placeholder", "testId", "title", "altText", "nth"],
                "description": "Find method",
            },
            "value": {"type": "string", "description": "Value to search for"},
            "exact": {"type": "boolean", "description": "Exact match (for text, title, altText)"},
            "action": {
                "type": "string",
                "enum": ["click", "hover", "fill", "check"],
                "description": "Action to perform on found element",
            },
            "fillValue": {"type": "string", "description": "Value to fill (for fill action)"},
            "index": {"type": "number", "description": "Element index (for nth method, 0-based, -1 for last)"},
            "selector": {"type": "string", "description": "CSS selector (for nth method)"},
        },
        ["method"],
    ),
}

GET_TOOL: dict[str, Any] = {
    "name": "browser_get",
    "description": "Get element content or attribute",
    "inputSchema": _schema(
        {
            "property": {
                "type": "string",
                "enum": ["text", "innerText", "innerHtml", "html", "value", "attribute", "boundingBox", "count"],
                "description": "Property to get",
            },
            "selector": {"type": "string", "description": "CSS selector or element ref"},
            "attribute": {"type": "string", "description": "Attribute name (for property=attribute)"},
        },
        ["property", "selector"],
    ),
}

CHECK_STATE_TOOL: dict[str, Any] = {
    "name": "browser_check_state",
    "description": "Check element state",
    "inputSchema": _schema(
        {
            "state": {"type": "string", "enum": ["visible", "enabled", "checked"], "description": "State to check"},
            "selector": {"type": "string", "description": "CSS selector or element ref"},
        },
        ["state", "selector"],
    ),
}

# ═══════════════════════════════════════════════════════════════════════════════
# Storage & cookies
# ═══════════════════════════════════════════════════════════════════════════════

STORAGE_TOOL: dict[str, Any] = {
    "name": "browser_storage",
    "description": "Manage localStorage or sessionStorage",
    "inputSchema": _schema(
        {
            "action": {"type": "string", "enum": ["get", "set", "clear"], "description": "Storage action"},
            "type": {"type": "string", "enum": ["local", "session"], "description": "Storage type"},
            "key": {"type": "string", "description": "Storage key (for get/set)"},
            "value": {"type": "string", "description": "Storage value (for set)"},
        },
        ["action", "type"],
    ),
}

COOKIES_TOOL: dict[str, Any] = {
    "name": "browser_cookies",
    "description": "Get or set cookies",
    "inputSchema": _schema(
        {
            "action": {"type": "string", "enum": ["get", "set"], "description": "Cookie action"},
            "cookies": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "name": {"type": "string"},
                        "value": {"type": "string"},
                        "url": {"type": "string"},
                        "domain": {"type": "string"},
                        "path": {"type": "string"},
                        "expires": {"type": "number"},
                        "httpOnly": {"type": "boolean"},
                        "secure": {"type": "boolean"},
                        "sameSite": {"type": "string", "enum": ["Strict", "Lax", "None"]},
                    },
                },
                "description": "Cookies to set (for set action)",
            },
            "urls": {"type": "array", "items": {"type": "string"}, "description": "URLs to filter cookies (for get)"},
        },
        ["action"],
    ),
}

STATE_TOOL: dict[str, Any] = {
    "name": "browser_state",
    "description": "Save or load storage state",
    "inputSchema": _schema(
        {
            "action": {"type": "string", "enum": ["save", "load"], "description": "State action"},
            "path": {"type": "string", "description": "State file path"},
        },
        ["action", "path"],
    ),
}

# ═══════════════════════════════════════════════════════════════════════════════
# Context & settings
# ═══════════════════════════════════════════════════════════════════════════════

SET_CONTEXT_TOOL: dict[str, Any] = {
    "name": "browser_set_context",
    "description": """Set browser context (device, viewport, geolocation, locale, timezone, offline, media, headers, credentials).

Each setting reads only its own fields, e.g. setting="viewport" needs width and height.
For setting="media", pass "null" (or null) to clear an emulated value; omit a field to leave it unchanged.""",
    "inputSchema": _schema(
        {
            "setting": {
                "type": "string",
                "enum": [
                    "device",
                    "viewport",
                    "geolocation",
                    "locale",
                    "timezone",
                    "offline",
                    "media",
                    "headers",
                    "credentials",
                ],
                "description": "Context setting to change",
            },
            "device": {"type": "string", "description": 'Device name (for device setting, e.g., "iPhone 14")'},
            "width": {"type": "number", "description": "Viewport width (for viewport setting)"},
            "height": {"type": "number", "description": "Viewport height (for viewport setting)"},
            "latitude": {"type": "number", "description": "Latitude (for geolocation setting)"},
            "longitude": {"type": "number", "description": "Longitude (for geolocation setting)"},
            "accuracy": {"type": "number", "description": "Accuracy in meters (for geolocation setting)"},
            "locale": {"type": "string", "description": 'Locale code e.g. "en-US" (for locale setting)'},
            "timezone": {
                "type": "string",
                "description": 'Timezone ID e.g. "America/New_York" (for timezone setting)',
            },
            "offline": {"type": "boolean", "description": "Offline mode (for offline setting)"},
            "media": {
                "type": ["string", "null"],
                "enum": ["screen", "print", "null", None],
                "description": 'Media type (for media setting, "null" clears)',
            },
            "colorScheme": {
                "type": ["string", "null"],
                "enum": ["light", "dark", "no-preference", "null", None],
                "description": 'Color scheme (for media setting, "null" clears)',
            },
            "reducedMotion": {
                "type": ["string", "null"],
                "enum": ["reduce", "no-preference", "null", None],
                "description": 'Reduced motion (for media setting, "null" clears)',
            },
            "headers": {"type": "object", "description": "HTTP headers object (for headers setting)"},
            "username": {"type": "string", "description": "Username (for credentials setting)"},
            "password": {"type": "string", "description": "Password (for credentials setting)"},
        },
        ["setting"],
    ),
}

DIALOG_TOOL: dict[str, Any] = {
    "name": "browser_dialog",
    "description": "Accept or dismiss dialogs (alert, confirm, prompt)",
    "inputSchema": _schema(
        {
            "action": {"type": "string", "enum": ["accept", "dismiss"], "description": "Dialog action"},
            "promptText": {
                "type": "string",
                "description": "Text to enter for prompt dialog (for accept action)",
            },
        },
        ["action"],
    ),
}

# ═══════════════════════════════════════════════════════════════════════════════
# Raw mouse & keyboard
# ═══════════════════════════════════════════════════════════════════════════════

MOUSE_TOOL: dict[str, Any] = {
    "name": "browser_mouse",
    "description": "Raw mouse control (down, up, move, wheel)",
    "inputSchema": _schema(
        {
            "action": {"type": "string", "enum": ["down", "up", "move", "wheel"], "description": "Mouse action"},
            "button": {**_MOUSE_BUTTON, "description": "Mouse button (for down/up)"},
            "x": {"type": "number", "description": "X coordinate (for move)"},
            "y": {"type": "number", "description": "Y coordinate (for move)"},
            "deltaX": {"type": "number", "description": "Horizontal scroll delta (for wheel)"},
            "deltaY": {"type": "number", "description": "Vertical scroll delta (for wheel)"},
            "selector": {"type": "string", "description": "Element selector (for wheel on element)"},
        },
        ["action"],
    ),
}

KEYBOARD_RAW_TOOL: dict[str, Any] = {
    "name": "browser_keyboard_raw",
    "description": "Raw keyboard control (keydown, keyup, keyboard shortcut)",
    "inputSchema": _schema(
        {
            "action": {"type": "string", "enum": ["down", "up", "shortcut"], "description": "Keyboard action"},
            "key": {"type": "string", "description": "Key to press (for down/up)"},
            "keys": {"type": "string", "description": 'Keyboard shortcut e.g. "Control+a" (for shortcut)'},
        },
        ["action"],
    ),
}

# ═══════════════════════════════════════════════════════════════════════════════
# Network
# ═══════════════════════════════════════════════════════════════════════════════

NETWORK_TOOL: dict[str, Any] = {
    "name": "browser_network",
    "description": "Network control and monitoring",
    "inputSchema": _schema(
        {
            "action": {
                "type": "string",
                "enum": ["route", "unroute", "requests"],
                "description": "Network action",
            },
            "url": {"type": "string", "description": "URL pattern (for route/unroute)"},
            "filter": {"type": "string", "description": "URL filter pattern (for requests)"},
            "clear": {"type": "boolean", "description": "Clear tracked requests (for requests)"},
            "abort": {"type": "boolean", "description": "Abort the request (for route)"},
            "response": {
                "type": "object",
                "properties": {
                    "status": {"type": "number"},
                    "body": {"type": "string"},
                    "contentType": {"type": "string"},
                    "headers": {"type": "object"},
                },
                "description": "Mock response (for route)",
            },
        },
        ["action"],
    ),
}

RESPONSE_BODY_TOOL: dict[str, Any] = {
    "name": "browser_response_body",
    "description": "Get response body for intercepted request",
    "inputSchema": _schema(
        {
            "url": {"type": "string", "description": "Request URL"},
            "timeout": {"type": "number", "description": "Timeout in ms"},
        },
        ["url"],
    ),
}

# ═══════════════════════════════════════════════════════════════════════════════
# Scripting
# ═══════════════════════════════════════════════════════════════════════════════

EVALUATE_TOOL: dict[str, Any] = {
    "name": "browser_evaluate",
    "description": "Execute JavaScript in the page",
    "inputSchema": _schema(
        {
            "script": {"type": "string", "description": "JavaScript code to execute"},
            "args": {"type": "array", "items": {"type": "string"}, "description": "Arguments for the script"},
        },
        ["script"],
    ),
}

SET_CONTENT_TOOL: dict[str, Any] = {
    "name": "browser_set_content",
    "description": "Set page HTML content",
    "inputSchema": _schema({"html": {"type": "string", "description": "HTML content to set"}}, ["html"]),
}

ADD_SCRIPT_TOOL: dict[str, Any] = {
    "name": "browser_add_script",
    "description": "Add script tag to page (content or url)",
    "inputSchema": _schema(
        {
            "content": {"type": "string", "description": "Script content"},
            "url": {"type": "string", "description": "Script URL"},
        }
    ),
}

ADD_STYLE_TOOL: dict[str, Any] = {
    "name": "browser_add_style",
    "description": "Add style tag to page (content or url)",
    "inputSchema": _schema(
        {
            "content": {"type": "string", "description": "CSS content"},
            "url": {"type": "string", "description": "CSS URL"},
        }
    ),
}

ADD_INIT_SCRIPT_TOOL: dict[str, Any] = {
    "name": "browser_add_init_script",
    "description": "Add init script (runs on every navigation)",
    "inputSchema": _schema({"script": {"type": "string", "description": "Script content"}}, ["script"]),
}

DISPATCH_EVENT_TOOL: dict[str, Any] = {
    "name": "browser_dispatch_event",
    "description": "Dispatch DOM event",
    "inputSchema": _schema(
        {
            "selector": {"type": "string", "description": "CSS selector or element ref"},
            "event": {"type": "string", "description": "Event name"},
            "eventInit": {"type": "object", "description": "Event init properties"},
        },
        ["selector", "event"],
    ),
}

# ═══════════════════════════════════════════════════════════════════════════════
# Logs & debug
# ═══════════════════════════════════════════════════════════════════════════════

LOGS_TOOL: dict[str, Any] = {
    "name": "browser_logs",
    "description": "Get console logs or page errors",
    "inputSchema": _schema(
        {
            "type": {"type": "string", "enum": ["console", "errors"], "description": "Log type"},
            "clear": {"type": "boolean", "description": "Clear logs after retrieving"},
        },
        ["type"],
    ),
}

HIGHLIGHT_TOOL: dict[str, Any] = {
    "name": "browser_highlight",
    "description": "Highlight element (for debugging)",
    "inputSchema": _schema(
        {"selector": {"type": "string", "description": "CSS selector or element ref"}},
        ["selector"],
    ),
}

STYLES_TOOL: dict[str, Any] = {
    "name": "browser_styles",
    "description": "Get computed styles of element(s)",
    "inputSchema": _schema(
        {"selector": {"type": "string", "description": "CSS selector or element ref"}},
        ["selector"],
    ),
}

# ═══════════════════════════════════════════════════════════════════════════════
# Recording & tracing
# ═══════════════════════════════════════════════════════════════════════════════

SCREENCAST_TOOL: dict[str, Any] = {
    "name": "browser_screencast",
    "description": "Control screencast for streaming",
    "inputSchema": _schema(
        {
            "action": {"type": "string", "enum": ["start", "stop"], "description": "Screencast action"},
            "format": {"type": "string", "enum": ["jpeg", "png"], "description": "Image format (for start)"},
            "quality": {"type": "number", "description": "JPEG quality 0-100 (for start)"},
            "maxWidth": {"type": "number", "description": "Max width (for start)"},
            "maxHeight": {"type": "number", "description": "Max height (for start)"},
        },
        ["action"],
    ),
}

TRACE_TOOL: dict[str, Any] = {
    "name": "browser_trace",
    "description": "Control Playwright trace",
    "inputSchema": _schema(
        {
            "action": {"type": "string", "enum": ["start", "stop"], "description": "Trace action"},
            "screenshots": {"type": "boolean", "description": "Capture screenshots (for start)"},
            "snapshots": {"type": "boolean", "description": "Capture snapshots (for start)"},
            "path": {"type": "string", "description": "Trace file path (for stop)"},
        },
        ["action"],
    ),
}

RECORDING_TOOL: dict[str, Any] = {
    "name": "browser_recording",
    "description": "Control screen recording to video",
    "inputSchema": _schema(
        {
            "action": {
                "type": "string",
                "enum": ["start", "stop", "restart"],
                "description": "Recording action",
            },
            "path": {"type": "string", "description": "Video file path (for start/restart)"},
            "url": {"type": "string", "description": "Optional URL to navigate to (for start/restart)"},
        },
        ["action"],
    ),
}

HAR_TOOL: dict[str, Any] = {
    "name": "browser_har",
    "description": "Control HAR recording",
    "inputSchema": _schema(
        {
            "action": {"type": "string", "enum": ["start", "stop"], "description": "HAR action"},
            "path": {"type": "string", "description": "HAR file path (for stop)"},
        },
        ["action"],
    ),
}

# ═══════════════════════════════════════════════════════════════════════════════
# Tabs, windows & frames
# ═══════════════════════════════════════════════════════════════════════════════

TAB_TOOL: dict[str, Any] = {
    "name": "browser_tab",
    "description": """Tab management.

USAGE:
- List tabs: browser_tab(action="list")
- Open new tab: browser_tab(action="new", url="https://example.com")
- Switch by index: browser_tab(action="switch", index=1)
- Close current: browser_tab(action="close")""",
    "inputSchema": _schema(
        {
            "action": {"type": "string", "enum": ["list", "new", "switch", "close"], "description": "Tab action"},
            "index": {"type": "number", "description": "Tab index 0-based (for switch/close)"},
            "url": {"type": "string", "description": "URL to navigate to (for new)"},
        },
        ["action"],
    ),
}

WINDOW_TOOL: dict[str, Any] = {
    "name": "browser_window",
    "description": "Window management",
    "inputSchema": _schema(
        {
            "action": {"type": "string", "enum": ["new", "bring_to_front"], "description": "Window action"},
            "viewportWidth": {"type": "number", "description": "Viewport width (for new)"},
            "viewportHeight": {"type": "number", "description": "Viewport height (for new)"},
        },
        ["action"],
    ),
}

FRAME_TOOL: dict[str, Any] = {
    "name": "browser_frame",
    "description": "Switch to iframe (by selector, name or url) or back to the main frame",
    "inputSchema": _schema(
        {
            "action": {"type": "string", "enum": ["switch", "main"], "description": "Frame action"},
            "selector": {"type": "string", "description": "CSS selector for iframe (for switch)"},
            "name": {"type": "string", "description": "Frame name (for switch)"},
            "url": {"type": "string", "description": "Frame URL (for switch)"},
        },
        ["action"],
    ),
}

# ═══════════════════════════════════════════════════════════════════════════════
# Files, waits & misc
# ═══════════════════════════════════════════════════════════════════════════════

PDF_TOOL: dict[str, Any] = {
    "name": "browser_pdf",
    "description": "Save page as PDF",
    "inputSchema": _schema(
        {
            "path": {"type": "string", "description": "File path to save PDF"},
            "format": {
                "type": "string",
                "enum": ["Letter", "Legal", "Tabloid", "Ledger", "A0", "A1", "A2", "A3", "A4", "A5", "A6"],
                "description": "Paper format",
            },
        },
        ["path"],
    ),
}

DOWNLOAD_TOOL: dict[str, Any] = {
    "name": "browser_download",
    "description": "Trigger and wait for download",
    "inputSchema": _schema(
        {
            "selector": {"type": "string", "description": "Element selector that triggers download"},
            "path": {"type": "string", "description": "Save path"},
        },
        ["selector", "path"],
    ),
}

WAIT_TOOL: dict[str, Any] = {
    "name": "browser_wait",
    "description": "Wait for element or time",
    "inputSchema": _schema(
        {
            "selector": {
                "type": "string",
                "description": "CSS selector to wait for (or wait for time if not provided)",
            },
            "timeout": {"type": "number", "description": "Timeout in ms"},
            "state": {
                "type": "string",
                "enum": ["attached", "detached", "visible", "hidden"],
                "description": "Element state",
            },
        }
    ),
}

WAIT_FOR_TOOL: dict[str, Any] = {
    "name": "browser_wait_for",
    "description": "Wait for specific conditions",
    "inputSchema": _schema(
        {
            "condition": {
                "type": "string",
                "enum": ["url", "load_state", "function", "download"],
                "description": "Wait condition",
            },
            "url": {"type": "string", "description": "URL pattern (for url)"},
            "state": {"type": "string", "enum": _LOAD_STATES, "description": "Load state (for load_state)"},
            "expression": {"type": "string", "description": "JavaScript expression (for function)"},
            "path": {"type": "string", "description": "Save path (for download)"},
            "timeout": {"type": "number", "description": "Timeout in ms"},
        },
        ["condition"],
    ),
}

CLIPBOARD_TOOL: dict[str, Any] = {
    "name": "browser_clipboard",
    "description": "Clipboard operations",
    "inputSchema": _schema(
        {
            "action": {"type": "string", "enum": ["copy", "paste", "read"], "description": "Clipboard action"},
            "text": {"type": "string", "description": "Text for copy/paste"},
        },
        ["action"],
    ),
}

UPLOAD_TOOL: dict[str, Any] = {
    "name": "browser_upload",
    "description": "Upload file(s)",
    "inputSchema": _schema(
        {
            "selector": {"type": "string", "description": "CSS selector or element ref"},
            "files": {
                "oneOf": [{"type": "string"}, {"type": "array", "items": {"type": "string"}}],
                "description": "File path(s)",
            },
        },
        ["selector", "files"],
    ),
}

DRAG_TOOL: dict[str, Any] = {
    "name": "browser_drag",
    "description": "Drag and drop",
    "inputSchema": _schema(
        {
            "source": {"type": "string", "description": "Source element selector"},
            "target": {"type": "string", "description": "Target element selector"},
        },
        ["source", "target"],
    ),
}

MULTISELECT_TOOL: dict[str, Any] = {
    "name": "browser_multiselect",
    "description": "Select multiple options from dropdown",
    "inputSchema": _schema(
        {
            "selector": {"type": "string", "description": "CSS selector or element ref"},
            "values": {"type": "array", "items": {"type": "string"}, "description": "Values to select"},
        },
        ["selector", "values"],
    ),
}

SET_VALUE_TOOL: dict[str, Any] = {
    "name": "browser_set_value",
    "description": "Set input value directly (without events)",
    "inputSchema": _schema(
        {
            "selector": {"type": "string", "description": "CSS selector or element ref"},
            "value": {"type": "string", "description": "Value to set"},
        },
        ["selector", "value"],
    ),
}

# ═══════════════════════════════════════════════════════════════════════════════
# iOS
# ═══════════════════════════════════════════════════════════════════════════════

IOS_DEVICE_LIST_TOOL: dict[str, Any] = {
    "name": "browser_ios_device_list",
    "description": "List available iOS devices/simulators",
    "inputSchema": _schema({}),
}

IOS_SWIPE_TOOL: dict[str, Any] = {
    "name": "browser_ios_swipe",
    "description": "Perform swipe gesture on iOS",
    "inputSchema": _schema(
        {
            "direction": {"type": "string", "enum": ["up", "down", "left", "right"], "description": "Swipe direction"},
            "distance": {"type": "number", "description": "Swipe distance in pixels"},
        },
        ["direction"],
    ),
}


MERGED_TOOL_DEFINITIONS: list[dict[str, Any]] = [
    LAUNCH_TOOL,
    NAVIGATE_TOOL,
    SNAPSHOT_TOOL,
    SCREENSHOT_TOOL,
    CLOSE_TOOL,
    HISTORY_TOOL,
    PAGE_INFO_TOOL,
    ELEMENT_ACTION_TOOL,
    INPUT_TOOL,
    INPUT_ACTION_TOOL,
    SELECT_TOOL,
    PRESS_TOOL,
    SCROLL_TOOL,
    FIND_TOOL,
    GET_TOOL,
    CHECK_STATE_TOOL,
    STORAGE_TOOL,
    COOKIES_TOOL,
    STATE_TOOL,
    SET_CONTEXT_TOOL,
    DIALOG_TOOL,
    MOUSE_TOOL,
    KEYBOARD_RAW_TOOL,
    NETWORK_TOOL,
    RESPONSE_BODY_TOOL,
    EVALUATE_TOOL,
    SET_CONTENT_TOOL,
    ADD_SCRIPT_TOOL,
    ADD_STYLE_TOOL,
    ADD_INIT_SCRIPT_TOOL,
    DISPATCH_EVENT_TOOL,
    LOGS_TOOL,
    HIGHLIGHT_TOOL,
    STYLES_TOOL,
    SCREENCAST_TOOL,
    TRACE_TOOL,
    RECORDING_TOOL,
    HAR_TOOL,
    TAB_TOOL,
    WINDOW_TOOL,
    FRAME_TOOL,
    PDF_TOOL,
    DOWNLOAD_TOOL,
    WAIT_TOOL,
    WAIT_FOR_TOOL,
    CLIPBOARD_TOOL,
    UPLOAD_TOOL,
    DRAG_TOOL,
    MULTISELECT_TOOL,
    SET_VALUE_TOOL,
    IOS_DEVICE_LIST_TOOL,
    IOS_SWIPE_TOOL,
]

DEFINITIONS_BY_NAME: dict[str, dict[str, Any]] = {t["name"]: t for t in MERGED_TOOL_DEFINITIONS}

__all__ = ["DEFINITIONS_BY_NAME", "MERGED_TOOL_DEFINITIONS"]
