"""Accessibility-style page snapshot with element refs.

The page script stamps ``data-agent-ref="eN"`` on every element it reports as
interactive, so later commands can target ``@eN``. Refs are reassigned on each
snapshot; stale refs from an older snapshot stop resolving.
"""

from __future__ import annotations

import re
from typing import Any

REF_ATTRIBUTE = "data-agent-ref"

_REF_RE = re.compile(r"^(?:@|ref=)(e\d+)$")

SNAPSHOT_JS = r"""
(opts) => {
  const ATTR = opts.attr;
  const root = opts.selector ? document.querySelector(opts.selector) : document.body;
  if (!root) return null;
  document.querySelectorAll('[' + ATTR + ']').forEach((el) => el.removeAttribute(ATTR));

  const ROLE_BY_TAG = {
    a: 'link', button: 'button', select: 'combobox', textarea: 'textbox', img: 'img',
    nav: 'navigation', main: 'main', header: 'banner', footer: 'contentinfo', form: 'form',
    ul: 'list', ol: 'list', li: 'listitem', table: 'table', tr: 'row', td: 'cell',
    th: 'columnheader', h1: 'heading', h2: 'heading', h3: 'heading', h4: 'heading',
    h5: 'heading', h6: 'heading', dialog: 'dialog', option: 'option', aside: 'complementary',
    section: 'region', p: 'paragraph', summary: 'button', iframe: 'iframe',
  };
  const INTERACTIVE = new Set([
    'button', 'link', 'textbox', 'searchbox', 'checkbox', 'radio', 'combobox', 'slider',
    'menuitem', 'menuitemcheckbox', 'menuitemradio', 'tab', 'option', 'switch', 'listbox',
    'spinbutton', 'treeitem',
  ]);
  const NAME_FROM_TEXT = new Set([
    'button', 'link', 'heading', 'option', 'tab', 'menuitem', 'cell', 'columnheader',
    'listitem', 'paragraph', 'treeitem', 'switch', 'checkbox', 'radio',
  ]);

  const inputRole = (el) => {
    const t = (el.getAttribute('type') || 'text').toLowerCase();
    if (t === 'hidden') return null;
    if (t === 'checkbox') return 'checkbox';
    if (t === 'radio') return 'radio';
    if (['button', 'submit', 'reset', 'image'].includes(t)) return 'button';
    if (t === 'range') return 'slider';
    if (t === 'number') return 'spinbutton';
    if (t === 'search') return 'searchbox';
    return 'textbox';
  };
  const roleOf = (el) => {
    const explicit = el.getAttribute('role');
    if (explicit) return explicit.trim().split(/\s+/)[0];
    const tag = el.tagName.toLowerCase();
    if (tag === 'input') return inputRole(el);
    if (tag === 'a' && !el.hasAttribute('href')) return null;
    return ROLE_BY_TAG[tag] || null;
  };
  const clean = (s) => (s || '').replace(/\s+/g, ' ').trim().slice(0, 100);
  const nameOf = (el, role) => {
    const aria = el.getAttribute('aria-label');
    if (aria) return clean(aria);
    const labelledby = el.getAttribute('aria-labelledby');
    if (labelledby) {
      const text = labelledby.split(/\s+/).map((id) => {
        const ref = document.getElementById(id);
        return ref ? ref.textContent : '';
      }).join(' ');
      if (clean(text)) return clean(text);
    }
    if (el.labels && el.labels.length) return clean(el.labels[0].textContent);
    const alt = el.getAttribute('alt');
    if (alt) return clean(alt);
    if (NAME_FROM_TEXT.has(role)) {
      const text = clean(el.innerText || el.textContent);
      if (text) return text;
    }
    return clean(el.getAttribute('title') || el.getAttribute('placeholder') || '');
  };
  const hidden = (el) => {
    if (el.hidden || el.getAttribute('aria-hidden') === 'true') return true;
    const style = getComputedStyle(el);
    return style.display === 'none' || style.visibility === 'hidden';
  };

  let counter = 0;
  const walk = (el, depth) => {
    if (hidden(el)) return [];
    const role = roleOf(el);
    const interactive = !!role && INTERACTIVE.has(role);
    const pointer = opts.cursor && !interactive && getComputedStyle(el).cursor === 'pointer'
      && !(el.parentElement && getComputedStyle(el.parentElement).cursor === 'pointer');
    const keep = interactive || pointer || (!!role && !opts.interactiveOnly);

    const children = [];
    if (opts.depth == null || depth < opts.depth) {
      for (const child of el.children) children.push(...walk(child, keep ? depth + 1 : depth));
    }
    if (!keep) return children;

    const node = { role: role || 'generic', name: nameOf(el, role), children };
    if (interactive || pointer) {
      counter += 1;
      node.ref = 'e' + counter;
      el.setAttribute(ATTR, node.ref);
    }
    if (role === 'heading') node.level = Number(el.tagName.slice(1)) || Number(el.getAttribute('aria-level')) || undefined;
    if (role === 'checkbox' || role === 'radio' || role === 'switch') node.checked = !!el.checked;
    if (el.disabled) node.disabled = true;
    if (opts.compact && !node.name && !node.ref && !children.length) return [];
    return [node];
  };
  return walk(root, 0);
}
"""


def resolve_selector(selector: str) -> str:
    """Map a snapshot ref (``@e3`` or ``ref=e3``) to a CSS selector; anything else passes through."""
    match = _REF_RE.match((selector or "").strip())
    if match:
        return f'[{REF_ATTRIBUTE}="{match.group(1)}"]'
    return selector


def format_snapshot(nodes: list[dict[str, Any]] | None, *, compact: bool = False) -> str:
    """Render snapshot nodes as an indented outline, one element per line."""
    if not nodes:
        return "(empty page)"
    lines: list[str] = []
    _format(nodes, 0, lines, compact=compact)
    return "\n".join(lines)


def _format(nodes: list[dict[str, Any]], indent: int, lines: list[str], *, compact: bool) -> None:
    for node in nodes:
        children = node.get("children") or []
        if compact and not node.get("name") and not node.get("ref") and len(children) == 1:
            # Collapse anonymous single-child wrappers.
            _format(children, indent, lines, compact=compact)
            continue
        line = "  " * indent + f"- {node.get('role', 'generic')}"
        if node.get("name"):
            name = str(node["name"]).replace('"', '\\"')
            line += f' "{name}"'
        attrs = []
        if node.get("ref"):
            attrs.append(f"ref={node['ref']}")
        if node.get("level"):
            attrs.append(f"level={node['level']}")
        if "checked" in node:
            attrs.append(f"checked={'true' if node['checked'] else 'false'}")
        if node.get("disabled"):
            attrs.append("disabled")
        if attrs:
            line += " [" + ", ".join(attrs) + "]"
        lines.append(line)
        _format(children, indent + 1, lines, compact=compact)


def count_refs(nodes: list[dict[str, Any]] | None) -> int:
    total = 0
    for node in nodes or []:
        if node.get("ref"):
            total += 1
        total += count_refs(node.get("children"))
    return total


__all__ = ["REF_ATTRIBUTE", "SNAPSHOT_JS", "count_refs", "format_snapshot", "resolve_selector"]
