"""Terminal control helpers for the TUI session.

Owns the raw-mode lifecycle and alternate-screen switching, and checks that
a session has real terminals to talk to before any state is built.
"""

from __future__ import annotations

import contextlib
import os
import termios
import tty
from typing import TextIO


class InteractiveUnavailableError(RuntimeError):
    """Raised when an interactive session is requested without a terminal."""


def ensure_interactive(stdin: TextIO, stdout: TextIO) -> None:
    """Raise ``InteractiveUnavailableError`` unless both streams are TTYs."""
    if not stdin.isatty():
        raise InteractiveUnavailableError("stdin is not a terminal")
    if not stdout.isatty():
        raise InteractiveUnavailableError("stdout is not a terminal")


class TerminalController:
    """Manage terminal mode transitions for one session."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Capture tty state and bind stdin/stdout file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)

    def enable_tui_mode(self) -> None:
        """Enter raw alternate-screen mode with the cursor hidden."""
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        os.write(self.stdout_fd, b"\x1b[?1049h\x1b[?25l")

    def disable_tui_mode(self) -> None:
        """Show the cursor, leave the alternate screen, and restore tty state."""
        os.write(self.stdout_fd, b"\x1b[?25h\x1b[?1049l")
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with TUI enter/exit calls."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()
