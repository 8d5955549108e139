"""Redaction utilities for logging.

Prefers safety over fidelity: tool arguments and traced frames lose obvious
secrets (passwords, auth headers, cookie and storage values, typed text) and
large payloads such as screenshot base64 before they reach the log.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

# Keys matched whole; "author" or "passage" must survive.
_SECRET_KEYS = {"auth", "pass", "pwd", "sid"}

# Fragments that mark a key as secret wherever they appear (headers, query
# parameters, cookie and storage objects, launch options).
_SECRET_FRAGMENTS = (
    "token",
    "secret",
    "password",
    "passwd",
    "authorization",
    "cookie",
    "session",
    "jwt",
    "bearer",
    "api-key",
    "api_key",
    "apikey",
    "credential",
)

# tool -> argument keys whose values are never logged
_TOOL_SECRET_ARGS: dict[str, set[str]] = {
    "browser_input": {"value"},
    "browser_set_value": {"value"},
    "browser_find": {"fillvalue"},
    "browser_storage": {"value"},
    "browser_cookies": {"cookies"},
    "browser_set_context": {"password", "username"},
    "browser_clipboard": {"text"},
    "browser_dialog": {"prompttext"},
}

_LOG_TEXT_CHARS = 512


def is_secret_key(key: str) -> bool:
    k = (key or "").strip().lower()
    if not k:
        return False
    return k in _SECRET_KEYS or any(fragment in k for fragment in _SECRET_FRAGMENTS)


def redact_url(url: str) -> str:
    """Redact credentials and sensitive query parameters from a URL.

    Non-sensitive parameters are kept. Returns the URL unchanged when nothing
    needed redaction.
    """
    if not isinstance(url, str) or not url:
        return url
    try:
        parts = urlsplit(url)
    except ValueError:
        return url

    changed = False
    netloc = parts.netloc
    query = parts.query

    if "@" in netloc:
        netloc = netloc.split("@", 1)[1]
        changed = True

    if query:
        pairs = parse_qsl(query, keep_blank_values=True)
        out_pairs: list[tuple[str, str]] = []
        redacted_any = False
        for k, v in pairs:
            if v and is_secret_key(k):
                out_pairs.append((k, "<redacted>"))
                redacted_any = True
            else:
                out_pairs.append((k, v))
        if redacted_any:
            query = urlencode(out_pairs, doseq=True)
            changed = True

    if not changed:
        return url
    return urlunsplit((parts.scheme, netloc, parts.path, query, parts.fragment))


def _redacted_summary(value: Any) -> str:
    if value is None:
        return "<redacted>"
    if isinstance(value, (bytes, bytearray)):
        return f"<redacted bytes len={len(value)}>"
    if isinstance(value, str):
        return f"<redacted str len={len(value)}>"
    if isinstance(value, (list, tuple, set)):
        return f"<redacted list len={len(value)}>"
    if isinstance(value, dict):
        return f"<redacted dict keys={len(value)}>"
    return "<redacted>"


def redact_headers(headers: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for k, v in (headers or {}).items():
        lk = str(k).lower()
        if is_secret_key(lk):
            out[k] = _redacted_summary(v)
        else:
            out[k] = v
    return out


def redact_tool_arguments(tool: str, args: dict[str, Any]) -> dict[str, Any]:
    """Redact tool arguments for safe logging."""
    if not isinstance(args, dict):
        return {}
    secret_args = _TOOL_SECRET_ARGS.get(tool, set())
    out: dict[str, Any] = {}
    for k, v in args.items():
        lk = str(k).lower()
        if lk in secret_args:
            out[k] = _redacted_summary(v)
        else:
            out[k] = _redact_any(v, key=lk)
    return out


def _redact_any(value: Any, *, key: str | None) -> Any:
    lk = (key or "").lower()

    if isinstance(value, dict):
        if lk == "headers":
            return redact_headers(value)
        return {k: _redact_any(v, key=str(k)) for k, v in value.items()}

    if isinstance(value, list):
        return [_redact_any(v, key=key) for v in value]

    if isinstance(value, str) and lk in {"url", "cdpurl"}:
        return redact_url(value)

    if is_secret_key(lk):
        return _redacted_summary(value)

    return value


def redact_jsonrpc_for_log(payload: dict[str, Any], *, max_text_chars: int = _LOG_TEXT_CHARS) -> dict[str, Any]:
    """Redact a JSON-RPC frame for trace logging.

    - tools/call arguments are redacted per tool
    - long text content (screenshot base64) is truncated
    """
    msg = dict(payload) if isinstance(payload, dict) else {}

    if msg.get("method") in {"tools/call", "call_tool"}:
        params = msg.get("params")
        if isinstance(params, dict):
            name = params.get("name")
            args = params.get("arguments") or params.get("args")
            if isinstance(name, str) and isinstance(args, dict):
                params = dict(params)
                params["arguments"] = redact_tool_arguments(name, args)
                params.pop("args", None)
                msg["params"] = params

    result = msg.get("result")
    if isinstance(result, dict) and isinstance(result.get("content"), list):
        content = []
        for item in result["content"]:
            if isinstance(item, dict) and isinstance(item.get("text"), str) and len(item["text"]) > max_text_chars:
                item = dict(item)
                item["text"] = item["text"][:max_text_chars] + f"… <truncated len={len(item['text'])}>"
            content.append(item)
        result = dict(result)
        result["content"] = content
        msg["result"] = result

    return msg


__all__ = ["is_secret_key", "redact_headers", "redact_jsonrpc_for_log", "redact_tool_arguments", "redact_url"]
