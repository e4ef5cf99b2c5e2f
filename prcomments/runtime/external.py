"""Side channels leaving the TUI: browser and clipboard.

Both are best effort. Failures return ``False`` and are logged; the caller
turns them into a transient status message.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
import webbrowser
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExternalActions:
    """Callbacks the explorer and selector use for URLs and clipboard text."""

    open_url: Callable[[str], bool]
    copy_text: Callable[[str], bool]


def open_in_browser(url: str) -> bool:
    """Open ``url`` in the system browser. Returns True on success."""
    if not url:
        return False
    try:
        opened = webbrowser.open(url, new=2)
    except (webbrowser.Error, OSError) as exc:
        logger.warning("Failed to open browser for %s: %s", url, exc)
        return False
    if not opened:
        logger.info("No browser available to open %s", url)
    return bool(opened)


def clipboard_commands() -> list[list[str]]:
    """Return clipboard writer commands to try for the current platform."""
    if sys.platform == "darwin":
        return [["pbcopy"]]
    if os.name == "nt":
        return [["clip"]]
    return [
        ["wl-copy"],
        ["xclip", "-selection", "clipboard"],
        ["xsel", "--clipboard", "--input"],
    ]


def copy_to_clipboard(text: str) -> bool:
    """Best-effort clipboard copy across macOS, Windows, and common Linux tools."""
    if not text:
        return False

    for command in clipboard_commands():
        if shutil.which(command[0]) is None:
            continue
        try:
            proc = subprocess.run(
                command,
                input=text,
                text=True,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=False,
            )
        except OSError as exc:
            logger.debug("clipboard command %s failed: %s", command[0], exc)
            continue
        if proc.returncode == 0:
            return True
    logger.info("No working clipboard command found")
    return False


def default_external_actions() -> ExternalActions:
    return ExternalActions(open_url=open_in_browser, copy_text=copy_to_clipboard)
