from __future__ import annotations

from mcp_servers.agent_browser.drivers.snapshot import REF_ATTRIBUTE, count_refs, format_snapshot, resolve_selector

_TREE = [
    {
        "role": "main",
        "name": "",
        "children": [
            {"role": "heading", "name": "Sign in", "level": 1, "children": []},
            {
                "role": "generic",
                "name": "",
                "children": [{"role": "textbox", "name": "Email", "ref": "e1", "children": []}],
            },
            {"role": "checkbox", "name": "Remember me", "ref": "e2", "checked": False, "children": []},
            {"role": "button", "name": 'Say "hi"', "ref": "e3", "disabled": True, "children": []},
        ],
    }
]


def test_resolve_selector_refs() -> None:
    assert resolve_selector("@e3") == f'[{REF_ATTRIBUTE}="e3"]'
    assert resolve_selector("ref=e12") == f'[{REF_ATTRIBUTE}="e12"]'
    assert resolve_selector(" @e1 ") == f'[{REF_ATTRIBUTE}="e1"]'


def test_resolve_selector_passes_css_through() -> None:
    assert resolve_selector("#main > a") == "#main > a"
    assert resolve_selector("@email") == "@email"


def test_format_snapshot_outline() -> None:
    assert format_snapshot(_TREE).splitlines() == [
        "- main",
        '  - heading "Sign in" [level=1]',
        "  - generic",
        '    - textbox "Email" [ref=e1]',
        '  - checkbox "Remember me" [ref=e2, checked=false]',
        '  - button "Say \\"hi\\"" [ref=e3, disabled]',
    ]


def test_format_snapshot_compact_collapses_wrappers() -> None:
    lines = format_snapshot(_TREE, compact=True).splitlines()
    assert "  - generic" not in lines
    assert '  - textbox "Email" [ref=e1]' in lines


def test_format_snapshot_empty() -> None:
    assert format_snapshot([]) == "(empty page)"
    assert format_snapshot(None) == "(empty page)"


def test_count_refs() -> None:
    assert count_refs(_TREE) == 3
    assert count_refs(None) == 0
