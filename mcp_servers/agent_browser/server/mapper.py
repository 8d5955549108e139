"""
Merged tool call -> canonical Command.

Pure translation, no I/O:
1. validate arguments against the advertised schema
2. resolve the canonical action (direct tool, or discriminant lookup)
3. enforce per-branch requirements the flat schema cannot express
4. forward only the arguments that are present and meaningful for the action

The tables below are the single source of truth for the remapping. The
registry consistency check compares them against the tool definitions.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from ..commands import CLEARABLE_FIELDS, COMMAND_FIELDS, Command
from ..errors import MappingError
from .definitions import DEFINITIONS_BY_NAME
from .validation import validate_arguments

# Tools that always produce the same canonical action.
DIRECT_TOOLS: dict[str, str] = {
    "browser_launch": "launch",
    "browser_navigate": "navigate",
    "browser_snapshot": "snapshot",
    "browser_screenshot": "screenshot",
    "browser_close": "close",
    "browser_select": "select",
    "browser_press": "press",
    "browser_response_body": "response_body",
    "browser_evaluate": "evaluate",
    "browser_set_content": "set_content",
    "browser_add_script": "add_script",
    "browser_add_style": "add_style",
    "browser_add_init_script": "add_init_script",
    "browser_dispatch_event": "dispatch_event",
    "browser_highlight": "highlight",
    "browser_styles": "styles",
    "browser_pdf": "pdf",
    "browser_download": "download",
    "browser_wait": "wait",
    "browser_upload": "upload",
    "browser_drag": "drag",
    "browser_multiselect": "multiselect",
    "browser_set_value": "set_value",
    "browser_ios_device_list": "device_list",
    "browser_ios_swipe": "swipe",
}

# tool -> (discriminant argument, {declared value: canonical action})
DISCRIMINATED_TOOLS: dict[str, tuple[str, dict[str, str]]] = {
    "browser_history": ("action", {"back": "back", "forward": "forward", "reload": "reload"}),
    "browser_page_info": ("info", {"url": "url", "title": "title"}),
    "browser_element_action": (
        "action",
        {"click": "click", "dblclick": "dblclick", "hover": "hover", "focus": "focus", "tap": "tap"},
    ),
    "browser_input": ("action", {"fill": "fill", "type": "type"}),
    "browser_input_action": (
        "action",
        {"check": "check", "uncheck": "uncheck", "clear": "clear", "select_all": "select_all"},
    ),
    "browser_scroll": ("action", {"scroll": "scroll", "scroll_into_view": "scroll_into_view"}),
    "browser_find": (
        "method",
        {
            "role": "find_by_role",
            "text": "find_by_text",
            "label": "find_by_label",
            "placeholder": "find_by_placeholder",
            "testId": "find_by_test_id",
            "title": "find_by_title",
            "altText": "find_by_alt_text",
            "nth": "find_nth",
        },
    ),
    "browser_get": (
        "property",
        {
            "text": "get_text",
            "innerText": "get_inner_text",
            "innerHtml": "get_inner_html",
            "html": "content",
            "value": "get_value",
            "attribute": "get_attribute",
            "boundingBox": "bounding_box",
            "count": "count",
        },
    ),
    "browser_check_state": ("state", {"visible": "is_visible", "enabled": "is_enabled", "checked": "is_checked"}),
    "browser_storage": ("action", {"get": "storage_get", "set": "storage_set", "clear": "storage_clear"}),
    "browser_cookies": ("action", {"get": "cookies_get", "set": "cookies_set"}),
    "browser_state": ("action", {"save": "state_save", "load": "state_load"}),
    "browser_set_context": (
        "setting",
        {
            "device": "set_device",
            "viewport": "set_viewport",
            "geolocation": "set_geolocation",
            "locale": "set_locale",
            "timezone": "set_timezone",
            "offline": "set_offline",
            "media": "emulate_media",
            "headers": "set_headers",
            "credentials": "set_credentials",
        },
    ),
    "browser_dialog": ("action", {"accept": "dialog_accept", "dismiss": "dialog_dismiss"}),
    "browser_mouse": ("action", {"down": "mouse_down", "up": "mouse_up", "move": "mouse_move", "wheel": "wheel"}),
    "browser_keyboard_raw": ("action", {"down": "key_down", "up": "key_up", "shortcut": "keyboard"}),
    "browser_network": ("action", {"route": "route", "unroute": "unroute", "requests": "requests"}),
    "browser_logs": ("type", {"console": "console", "errors": "errors"}),
    "browser_screencast": ("action", {"start": "screencast_start", "stop": "screencast_stop"}),
    "browser_trace": ("action", {"start": "trace_start", "stop": "trace_stop"}),
    "browser_recording": (
        "action",
        {"start": "recording_start", "stop": "recording_stop", "restart": "recording_restart"},
    ),
    "browser_har": ("action", {"start": "har_start", "stop": "har_stop"}),
    "browser_tab": ("action", {"list": "tab_list", "new": "tab_new", "switch": "tab_switch", "close": "tab_close"}),
    "browser_window": ("action", {"new": "window_new", "bring_to_front": "bring_to_front"}),
    "browser_frame": ("action", {"switch": "frame", "main": "main_frame"}),
    "browser_wait_for": (
        "condition",
        {
            "url": "wait_for_url",
            "load_state": "wait_for_load_state",
            "function": "wait_for_function",
            "download": "wait_for_download",
        },
    ),
    # Three synonyms for one command; the chosen value travels as `operation`.
    "browser_clipboard": ("action", {"copy": "clipboard", "paste": "clipboard", "read": "clipboard"}),
}

_FIND_VALUE_FIELD = {
    "find_by_role": "role",
    "find_by_text": "text",
    "find_by_label": "label",
    "find_by_placeholder": "placeholder",
    "find_by_test_id": "testId",
    "find_by_title": "title",
    "find_by_alt_text": "text",
    "find_nth": None,
}

# (tool, canonical action) -> {argument: command field}. A None target drops the argument.
FIELD_RENAMES: dict[tuple[str, str], dict[str, str | None]] = {
    ("browser_input", "type"): {"value": "text"},
    ("browser_clipboard", "clipboard"): {"action": "operation"},
    **{
        ("browser_find", action): {"value": target, "action": "subaction", "fillValue": "value"}
        for action, target in _FIND_VALUE_FIELD.items()
    },
}

# (tool, canonical action) -> arguments that must all be present.
BRANCH_REQUIRED: dict[tuple[str, str], tuple[str, ...]] = {
    ("browser_scroll", "scroll_into_view"): ("selector",),
    **{("browser_find", action): ("value",) for action, target in _FIND_VALUE_FIELD.items() if target},
    ("browser_find", "find_nth"): ("selector",),
    ("browser_get", "get_attribute"): ("attribute",),
    ("browser_storage", "storage_set"): ("key", "value"),
    ("browser_cookies", "cookies_set"): ("cookies",),
    ("browser_set_context", "set_device"): ("device",),
    ("browser_set_context", "set_viewport"): ("width", "height"),
    ("browser_set_context", "set_geolocation"): ("latitude", "longitude"),
    ("browser_set_context", "set_locale"): ("locale",),
    ("browser_set_context", "set_timezone"): ("timezone",),
    ("browser_set_context", "set_offline"): ("offline",),
    ("browser_set_context", "set_headers"): ("headers",),
    ("browser_set_context", "set_credentials"): ("username", "password"),
    ("browser_mouse", "mouse_move"): ("x", "y"),
    ("browser_keyboard_raw", "key_down"): ("key",),
    ("browser_keyboard_raw", "key_up"): ("key",),
    ("browser_keyboard_raw", "keyboard"): ("keys",),
    ("browser_network", "route"): ("url",),
    ("browser_trace", "trace_stop"): ("path",),
    ("browser_recording", "recording_start"): ("path",),
    ("browser_recording", "recording_restart"): ("path",),
    ("browser_har", "har_stop"): ("path",),
    ("browser_tab", "tab_switch"): ("index",),
    ("browser_wait_for", "wait_for_url"): ("url",),
    ("browser_wait_for", "wait_for_function"): ("expression",),
}

# (tool, canonical action) -> at least one of these arguments must be present.
BRANCH_ANY_OF: dict[tuple[str, str], tuple[str, ...]] = {
    ("browser_frame", "frame"): ("selector", "name", "url"),
    ("browser_add_script", "add_script"): ("content", "url"),
    ("browser_add_style", "add_style"): ("content", "url"),
}

# (tool, canonical action) -> values filled in when the argument is absent.
BRANCH_DEFAULTS: dict[tuple[str, str], dict[str, Any]] = {
    ("browser_find", "find_nth"): {"index": 0},
}

_CLEAR_SENTINEL = "null"

Finisher = Callable[[str, dict[str, Any], dict[str, Any]], None]


def _finish_find(action: str, args: dict[str, Any], fields: dict[str, Any]) -> None:
    # fillValue only means something for a follow-up fill
    if fields.get("subaction") != "fill":
        fields.pop("value", None)


def _finish_set_context(action: str, args: dict[str, Any], fields: dict[str, Any]) -> None:
    for key in CLEARABLE_FIELDS["emulate_media"]:
        if fields.get(key, "") == _CLEAR_SENTINEL:
            fields[key] = None


def _finish_window(action: str, args: dict[str, Any], fields: dict[str, Any]) -> None:
    viewport: dict[str, Any] = {}
    if args.get("viewportWidth") is not None:
        viewport["width"] = args["viewportWidth"]
    if args.get("viewportHeight") is not None:
        viewport["height"] = args["viewportHeight"]
    if viewport and action == "window_new":
        fields["viewport"] = viewport


# tool -> post-processing applied to the forwarded fields
FINISHERS: dict[str, Finisher] = {
    "browser_find": _finish_find,
    "browser_set_context": _finish_set_context,
    "browser_window": _finish_window,
}


def mapped_tool_names() -> list[str]:
    return [*DIRECT_TOOLS, *DISCRIMINATED_TOOLS]


def resolve_action(name: str, args: dict[str, Any]) -> str:
    """Canonical action for an (already validated) call."""
    direct = DIRECT_TOOLS.get(name)
    if direct is not None:
        return direct

    entry = DISCRIMINATED_TOOLS.get(name)
    if entry is None:
        raise MappingError(f"Unknown tool: {name}", tool=name)

    field_name, table = entry
    value = args.get(field_name)
    if value is None:
        raise MappingError(f"{name} requires '{field_name}'", tool=name, argument=field_name)
    action = table.get(value) if isinstance(value, str) else None
    if action is None:
        raise MappingError(
            f"Unknown {field_name} '{value}' for {name} (expected one of: {', '.join(table)})",
            tool=name,
            argument=field_name,
        )
    return action


def _check_branch(name: str, action: str, args: dict[str, Any]) -> None:
    branch = (name, action)
    required = BRANCH_REQUIRED.get(branch, ())
    missing = [key for key in required if args.get(key) is None]
    if missing:
        raise MappingError(
            f"{name} ({action}) requires: {', '.join(missing)}",
            tool=name,
            argument=missing[0],
            details={"missing": missing},
        )
    any_of = BRANCH_ANY_OF.get(branch)
    if any_of and all(args.get(key) is None for key in any_of):
        raise MappingError(
            f"{name} ({action}) requires one of: {', '.join(any_of)}",
            tool=name,
            details={"anyOf": list(any_of)},
        )


def _forward(name: str, action: str, args: dict[str, Any]) -> dict[str, Any]:
    # Only declared arguments take part; an undeclared key must never shadow a renamed field.
    declared = DEFINITIONS_BY_NAME[name]["inputSchema"].get("properties", {})
    allowed = COMMAND_FIELDS[action]
    clearable = CLEARABLE_FIELDS.get(action, frozenset())
    renames = FIELD_RENAMES.get((name, action), {})

    fields: dict[str, Any] = {}
    for key, value in args.items():
        if key not in declared:
            continue
        target = renames.get(key, key)
        if target is None or target not in allowed:
            continue
        if value is None and target not in clearable:
            continue
        fields[target] = value
    return fields


def map_tool_call(name: str, arguments: Any = None) -> Command:
    """Translate one merged tool call into exactly one canonical Command."""
    if name not in DIRECT_TOOLS and name not in DISCRIMINATED_TOOLS:
        raise MappingError(f"Unknown tool: {name}", tool=name)

    args = validate_arguments(name, arguments)
    action = resolve_action(name, args)
    _check_branch(name, action, args)

    fields = _forward(name, action, args)
    for key, value in BRANCH_DEFAULTS.get((name, action), {}).items():
        fields.setdefault(key, value)

    finisher = FINISHERS.get(name)
    if finisher is not None:
        finisher(action, args, fields)

    try:
        return Command(action, fields)
    except ValueError as exc:
        raise MappingError(str(exc), tool=name) from exc


__all__ = [
    "BRANCH_ANY_OF",
    "BRANCH_REQUIRED",
    "DIRECT_TOOLS",
    "DISCRIMINATED_TOOLS",
    "FIELD_RENAMES",
    "map_tool_call",
    "mapped_tool_names",
    "resolve_action",
]
