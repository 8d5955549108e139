"""
Canonical command model.

Every tool call is normalized into exactly one Command: an ``action``
discriminant plus the fields meaningful for that action. ``COMMAND_FIELDS`` is
the declaration of the tagged union; a Command may only carry fields listed for
its action.

Field presence is significant. A missing key means "not provided" and lets the
driver keep its defaults. Keys in ``CLEARABLE_FIELDS`` may additionally be
present with the value ``None``, which asks the driver to clear a previously
emulated value.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

_SELECTOR = frozenset({"selector"})

COMMAND_FIELDS: dict[str, frozenset[str]] = {
    # Lifecycle
    "launch": frozenset(
        {
            "headless",
            "browser",
            "cdpPort",
            "cdpUrl",
            "executablePath",
            "args",
            "userAgent",
            "provider",
            "ignoreHTTPSErrors",
            "profile",
            "storageState",
            "allowFileAccess",
        }
    ),
    "close": frozenset(),
    # Navigation
    "navigate": frozenset({"url", "waitUntil", "headers"}),
    "back": frozenset(),
    "forward": frozenset(),
    "reload": frozenset(),
    "url": frozenset(),
    "title": frozenset(),
    # Perception
    "snapshot": frozenset({"interactiveOnly", "cursor", "compact", "depth", "selector"}),
    "screenshot": frozenset({"path", "fullPage", "selector"}),
    "content": _SELECTOR,
    # Element actions
    "click": frozenset({"selector", "button", "clickCount"}),
    "dblclick": frozenset({"selector", "button"}),
    "hover": _SELECTOR,
    "focus": _SELECTOR,
    "tap": _SELECTOR,
    "fill": frozenset({"selector", "value"}),
    "type": frozenset({"selector", "text", "delay"}),
    "check": _SELECTOR,
    "uncheck": _SELECTOR,
    "clear": _SELECTOR,
    "select_all": _SELECTOR,
    "select": frozenset({"selector", "values"}),
    "multiselect": frozenset({"selector", "values"}),
    "set_value": frozenset({"selector", "value"}),
    "press": frozenset({"key", "selector"}),
    "scroll": frozenset({"selector", "direction", "amount", "x", "y"}),
    "scroll_into_view": _SELECTOR,
    "upload": frozenset({"selector", "files"}),
    "drag": frozenset({"source", "target"}),
    "dispatch_event": frozenset({"selector", "event", "eventInit"}),
    "highlight": _SELECTOR,
    "styles": _SELECTOR,
    # Semantic locators
    "find_by_role": frozenset({"role", "exact", "subaction", "value"}),
    "find_by_text": frozenset({"text", "exact", "subaction", "value"}),
    "find_by_label": frozenset({"label", "exact", "subaction", "value"}),
    "find_by_placeholder": frozenset({"placeholder", "exact", "subaction", "value"}),
    "find_by_test_id": frozenset({"testId", "exact", "subaction", "value"}),
    "find_by_title": frozenset({"title", "exact", "subaction", "value"}),
    "find_by_alt_text": frozenset({"text", "exact", "subaction", "value"}),
    "find_nth": frozenset({"selector", "index", "subaction", "value"}),
    # Element reads
    "get_text": _SELECTOR,
    "get_inner_text": _SELECTOR,
    "get_inner_html": _SELECTOR,
    "get_value": _SELECTOR,
    "get_attribute": frozenset({"selector", "attribute"}),
    "bounding_box": _SELECTOR,
    "count": _SELECTOR,
    "is_visible": _SELECTOR,
    "is_enabled": _SELECTOR,
    "is_checked": _SELECTOR,
    # Storage & cookies
    "storage_get": frozenset({"type", "key"}),
    "storage_set": frozenset({"type", "key", "value"}),
    "storage_clear": frozenset({"type"}),
    "cookies_get": frozenset({"urls"}),
    "cookies_set": frozenset({"cookies"}),
    "state_save": frozenset({"path"}),
    "state_load": frozenset({"path"}),
    # Context emulation
    "set_device": frozenset({"device"}),
    "set_viewport": frozenset({"width", "height"}),
    "set_geolocation": frozenset({"latitude", "longitude", "accuracy"}),
    "set_locale": frozenset({"locale"}),
    "set_timezone": frozenset({"timezone"}),
    "set_offline": frozenset({"offline"}),
    "emulate_media": frozenset({"media", "colorScheme", "reducedMotion"}),
    "set_headers": frozenset({"headers"}),
    "set_credentials": frozenset({"username", "password"}),
    # Dialogs
    "dialog_accept": frozenset({"promptText"}),
    "dialog_dismiss": frozenset(),
    # Raw input
    "mouse_down": frozenset({"button"}),
    "mouse_up": frozenset({"button"}),
    "mouse_move": frozenset({"x", "y"}),
    "wheel": frozenset({"deltaX", "deltaY", "selector"}),
    "key_down": frozenset({"key"}),
    "key_up": frozenset({"key"}),
    "keyboard": frozenset({"keys"}),
    # Network
    "route": frozenset({"url", "abort", "response"}),
    "unroute": frozenset({"url"}),
    "requests": frozenset({"filter", "clear"}),
    "response_body": frozenset({"url", "timeout"}),
    # Scripting
    "evaluate": frozenset({"script", "args"}),
    "set_content": frozenset({"html"}),
    "add_script": frozenset({"content", "url"}),
    "add_style": frozenset({"content", "url"}),
    "add_init_script": frozenset({"script"}),
    # Logs
    "console": frozenset({"clear"}),
    "errors": frozenset({"clear"}),
    # Recording & tracing
    "screencast_start": frozenset({"format", "quality", "maxWidth", "maxHeight"}),
    "screencast_stop": frozenset(),
    "trace_start": frozenset({"screenshots", "snapshots"}),
    "trace_stop": frozenset({"path"}),
    "recording_start": frozenset({"path", "url"}),
    "recording_stop": frozenset(),
    "recording_restart": frozenset({"path", "url"}),
    "har_start": frozenset(),
    "har_stop": frozenset({"path"}),
    # Tabs, windows, frames
    "tab_list": frozenset(),
    "tab_new": frozenset({"url"}),
    "tab_switch": frozenset({"index"}),
    "tab_close": frozenset({"index"}),
    "window_new": frozenset({"viewport"}),
    "bring_to_front": frozenset(),
    "frame": frozenset({"selector", "name", "url"}),
    "main_frame": frozenset(),
    # Files & waits
    "pdf": frozenset({"path", "format"}),
    "download": frozenset({"selector", "path"}),
    "wait": frozenset({"selector", "timeout", "state"}),
    "wait_for_url": frozenset({"url", "timeout"}),
    "wait_for_load_state": frozenset({"state", "timeout"}),
    "wait_for_function": frozenset({"expression", "timeout"}),
    "wait_for_download": frozenset({"path", "timeout"}),
    "clipboard": frozenset({"operation", "text"}),
    # Mobile
    "device_list": frozenset(),
    "swipe": frozenset({"direction", "distance"}),
}

CANONICAL_ACTIONS: frozenset[str] = frozenset(COMMAND_FIELDS)

# Fields where an explicit None means "clear the emulated value".
CLEARABLE_FIELDS: dict[str, frozenset[str]] = {
    "emulate_media": frozenset({"media", "colorScheme", "reducedMotion"}),
}

# Actions that must never trigger an implicit browser launch.
LAUNCH_EXEMPT_ACTIONS: frozenset[str] = frozenset({"launch", "close", "device_list"})


@dataclass(frozen=True, slots=True)
class Command:
    """A single canonical browser operation."""

    action: str
    params: Mapping[str, Any] = field(default_factory=dict)
    id: str | None = None

    def __post_init__(self) -> None:
        allowed = COMMAND_FIELDS.get(self.action)
        if allowed is None:
            raise ValueError(f"Unknown command action: {self.action}")
        unexpected = sorted(set(self.params) - allowed)
        if unexpected:
            raise ValueError(f"Fields not valid for action '{self.action}': {', '.join(unexpected)}")
        clearable = CLEARABLE_FIELDS.get(self.action, frozenset())
        nulls = sorted(k for k, v in self.params.items() if v is None and k not in clearable)
        if nulls:
            raise ValueError(f"Fields cannot be null for action '{self.action}': {', '.join(nulls)}")
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    def __getitem__(self, key: str) -> Any:
        return self.params[key]

    def __contains__(self, key: object) -> bool:
        return key in self.params

    def get(self, key: str, default: Any = None) -> Any:
        return self.params.get(key, default)

    @property
    def launch_exempt(self) -> bool:
        return self.action in LAUNCH_EXEMPT_ACTIONS

    def with_id(self, command_id: str) -> Command:
        return replace(self, id=command_id)

    def to_dict(self) -> dict[str, Any]:
        """Wire form: ``{"id"?, "action", **fields}`` without absent fields."""
        out: dict[str, Any] = {}
        if self.id is not None:
            out["id"] = self.id
        out["action"] = self.action
        out.update(self.params)
        return out


__all__ = [
    "CANONICAL_ACTIONS",
    "CLEARABLE_FIELDS",
    "COMMAND_FIELDS",
    "LAUNCH_EXEMPT_ACTIONS",
    "Command",
]
