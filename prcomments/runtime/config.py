"""Persistent JSON config helpers.

Stores the UI theme, keymap overrides, prefetch concurrency, and the
filter-on-search preference. All access is defensive: malformed or missing
config falls back safely.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir, user_log_dir

from ..input.keymap import DEFAULT_KEYMAP, Keymap
from ..ui_theme import DEFAULT_THEME, UITheme, normalize_theme_name, resolve_theme
from .prefetch import DEFAULT_MAX_WORKERS, clamp_max_workers

logger = logging.getLogger(__name__)

APP_NAME = "prcomments"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
LOG_PATH = Path(user_log_dir(APP_NAME, appauthor=False)) / f"{APP_NAME}.log"


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are logged and otherwise ignored.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("could not write config %s: %s", CONFIG_PATH, exc)


def load_theme_name() -> str:
    """Return the persisted UI theme name, normalized to a known theme."""
    value = load_config().get("theme")
    return normalize_theme_name(value if isinstance(value, str) else None)


def save_theme_name(theme_name: str) -> None:
    config = load_config()
    config["theme"] = normalize_theme_name(theme_name)
    save_config(config)


def load_keymap_overrides() -> dict[str, object]:
    """Return the ``keymap`` mapping of action names to key tokens."""
    value = load_config().get("keymap")
    return dict(value) if isinstance(value, dict) else {}


def load_max_workers() -> int:
    """Return prefetch concurrency, clamped to ``1..16``."""
    return clamp_max_workers(load_config().get("max_workers", DEFAULT_MAX_WORKERS))


def load_filter_on_search() -> bool:
    """Only explicit booleans are accepted; anything else means ``False``."""
    value = load_config().get("filter_on_search")
    return value if isinstance(value, bool) else False


def no_color_requested(environ: dict[str, str] | None = None) -> bool:
    """Return whether the ``NO_COLOR`` convention asks for plain output."""
    env = os.environ if environ is None else environ
    return bool(env.get("NO_COLOR", "").strip())


@dataclass(frozen=True)
class SessionConfig:
    """Settings resolved once per session and passed to every component."""

    keymap: Keymap = DEFAULT_KEYMAP
    theme: UITheme = DEFAULT_THEME
    max_workers: int = DEFAULT_MAX_WORKERS
    filter_on_search: bool = False
    selector_title: str = "Select a Pull Request"


def load_session_config(theme_name: str | None = None, *, no_color: bool = False) -> SessionConfig:
    """Build a ``SessionConfig`` from the config file and overrides.

    ``theme_name`` takes precedence over the stored theme; ``no_color`` or a
    ``NO_COLOR`` environment variable selects the plain palette.
    """
    keymap = DEFAULT_KEYMAP.with_overrides(load_keymap_overrides())
    return SessionConfig(
        keymap=keymap,
        theme=resolve_theme(theme_name or load_theme_name(), no_color=no_color or no_color_requested()),
        max_workers=load_max_workers(),
        filter_on_search=load_filter_on_search(),
    )
