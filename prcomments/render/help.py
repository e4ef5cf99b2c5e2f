"""Help overlay content built from the active keymap.

Rendering helpers here are presentation-only and side-effect free.
"""

from __future__ import annotations

from ..input.keymap import Keymap, keys_label
from ..ui_theme import UITheme

EXPLORER_HELP_SECTIONS: tuple[tuple[str, tuple[tuple[str, str], ...]], ...] = (
    (
        "MOVE",
        (
            ("up", "up"),
            ("down", "down"),
            ("page_up", "page up"),
            ("page_down", "page down"),
            ("half_page_up", "half page up"),
            ("half_page_down", "half page down"),
            ("goto_top", "first entry"),
            ("goto_bottom", "last entry"),
        ),
    ),
    (
        "TREE",
        (
            ("expand", "toggle node / open URL"),
            ("collapse", "collapse / go to parent"),
            ("expand_all", "expand all"),
            ("collapse_all", "collapse all"),
        ),
    ),
    (
        "SEARCH",
        (
            ("search", "search keys and values"),
            ("next_match", "next match"),
            ("prev_match", "previous match"),
            ("toggle_filter", "show matches only"),
            ("clear_search", "clear search"),
        ),
    ),
    (
        "ACTIONS",
        (
            ("copy", "copy value"),
            ("open_url", "open URL in browser"),
            ("help", "toggle help"),
            ("quit", "back / quit"),
        ),
    ),
)


def _binding_row(theme: UITheme, keys: str, description: str) -> str:
    return f"  {theme.help_key}{keys:<16}{theme.reset} {description}"


def explorer_help_lines(keymap: Keymap, theme: UITheme) -> list[str]:
    """Return styled help rows listing every explorer binding."""
    lines: list[str] = []
    for heading, actions in EXPLORER_HELP_SECTIONS:
        if lines:
            lines.append("")
        lines.append(f"{theme.help_heading}{heading}{theme.reset}")
        for action, description in actions:
            lines.append(_binding_row(theme, keys_label(getattr(keymap, action)), description))
    lines.append("")
    lines.append(f"{theme.help_dim}Press any key to close{theme.reset}")
    return lines


def explorer_footer_hint(keymap: Keymap) -> str:
    """Short key reminder shown at the right of the explorer status row."""
    return (
        f"{keys_label(keymap.search)} search  "
        f"{keys_label(keymap.copy)} copy  "
        f"{keys_label(keymap.help)} help  "
        f"{keys_label(keymap.quit[:1])} quit"
    )


def selector_footer_hint(keymap: Keymap) -> str:
    return (
        f"{keys_label(keymap.select)} select  "
        f"{keys_label(keymap.open_url)} open  "
        f"{keys_label(keymap.search)} filter  "
        f"{keys_label(keymap.cancel)} quit"
    )
