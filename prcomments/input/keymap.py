"""Action-to-key tables for the explorer and the item selector.

A ``Keymap`` is built once per session, optionally patched with overrides
from the config file, and passed to every component that reads keys.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace

logger = logging.getLogger(__name__)

# Display names for key tokens shown in help rows.
_KEY_LABELS: dict[str, str] = {
    "UP": "↑",
    "DOWN": "↓",
    "LEFT": "←",
    "RIGHT": "→",
    "PGUP": "PgUp",
    "PGDN": "PgDn",
    "HOME": "Home",
    "END": "End",
    "ENTER": "Enter",
    "ESC": "Esc",
    "TAB": "Tab",
    "BACKSPACE": "Backspace",
    "CTRL_B": "Ctrl+B",
    "CTRL_C": "Ctrl+C",
    "CTRL_D": "Ctrl+D",
    "CTRL_F": "Ctrl+F",
    "CTRL_U": "Ctrl+U",
}


@dataclass(frozen=True)
class Keymap:
    """Key tokens bound to each user action.

    Tokens are the strings produced by ``read_key``. ``force_quit`` is checked
    by the flow before any component sees the key.
    """

    up: tuple[str, ...] = ("UP", "k")
    down: tuple[str, ...] = ("DOWN", "j")
    page_up: tuple[str, ...] = ("PGUP", "CTRL_B")
    page_down: tuple[str, ...] = ("PGDN", "CTRL_F")
    half_page_up: tuple[str, ...] = ("CTRL_U",)
    half_page_down: tuple[str, ...] = ("CTRL_D",)
    goto_top: tuple[str, ...] = ("HOME", "g")
    goto_bottom: tuple[str, ...] = ("END", "G")
    expand: tuple[str, ...] = ("ENTER", "RIGHT", "l")
    collapse: tuple[str, ...] = ("LEFT", "h")
    expand_all: tuple[str, ...] = ("E",)
    collapse_all: tuple[str, ...] = ("C",)
    search: tuple[str, ...] = ("/",)
    next_match: tuple[str, ...] = ("n",)
    prev_match: tuple[str, ...] = ("N",)
    clear_search: tuple[str, ...] = ("ESC",)
    toggle_filter: tuple[str, ...] = ("f",)
    copy: tuple[str, ...] = ("y", "c")
    open_url: tuple[str, ...] = ("o",)
    help: tuple[str, ...] = ("?",)
    quit: tuple[str, ...] = ("q", "CTRL_C")
    select: tuple[str, ...] = ("ENTER",)
    cancel: tuple[str, ...] = ("q", "ESC")
    force_quit: tuple[str, ...] = ("CTRL_C",)

    @classmethod
    def action_names(cls) -> tuple[str, ...]:
        return tuple(field.name for field in fields(cls))

    def with_overrides(self, overrides: Mapping[str, object]) -> Keymap:
        """Return a copy with actions rebound from ``overrides``.

        Unknown actions and malformed token lists are skipped with a warning.
        """
        known = set(self.action_names())
        changes: dict[str, tuple[str, ...]] = {}
        for action, tokens in overrides.items():
            if action not in known:
                logger.warning("ignoring keymap override for unknown action %r", action)
                continue
            if isinstance(tokens, str):
                tokens = [tokens]
            if not isinstance(tokens, (list, tuple)) or not tokens:
                logger.warning("ignoring malformed keymap override for %r", action)
                continue
            cleaned = tuple(str(token) for token in tokens if str(token))
            if cleaned:
                changes[action] = cleaned
        if not changes:
            return self
        return replace(self, **changes)


DEFAULT_KEYMAP = Keymap()


def key_label(token: str) -> str:
    """Return a human-readable label for one key token."""
    return _KEY_LABELS.get(token, token)


def keys_label(tokens: tuple[str, ...]) -> str:
    return "/".join(key_label(token) for token in tokens)
