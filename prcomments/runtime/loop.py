"""Main interactive event loop for the terminal UI.

Each pass applies the terminal size, drains finished prefetch batches,
expires status messages, repaints when the flow is dirty, and waits briefly
for one key. Feature logic lives in ``UnifiedFlow`` and its components.
"""

from __future__ import annotations

import shutil
import time
from collections.abc import Callable
from dataclasses import dataclass
from os import terminal_size

from ..input import read_key
from .flow import FlowOutcome, FlowState, UnifiedFlow
from .screen import compose_screen, write_screen
from .terminal import TerminalController


@dataclass(frozen=True)
class RuntimeLoopTiming:
    """Timing constants controlling interactive loop behavior."""

    key_poll_ms: int = 50
    spinner_frame_seconds: float = 0.12


@dataclass(frozen=True)
class RuntimeLoopIO:
    """Injected terminal operations, replaced by fakes in tests."""

    read_key: Callable[[int, int], str]
    write_screen: Callable[[int, list[str]], None]
    get_terminal_size: Callable[[], terminal_size]
    monotonic: Callable[[], float] = time.monotonic


def default_loop_io() -> RuntimeLoopIO:
    return RuntimeLoopIO(
        read_key=lambda fd, timeout_ms: read_key(fd, timeout_ms=timeout_ms),
        write_screen=write_screen,
        get_terminal_size=lambda: shutil.get_terminal_size((80, 24)),
    )


def run_main_loop(
    flow: UnifiedFlow,
    stdin_fd: int,
    stdout_fd: int,
    timing: RuntimeLoopTiming = RuntimeLoopTiming(),
    io: RuntimeLoopIO | None = None,
) -> FlowOutcome:
    """Drive ``flow`` until it reaches ``QUITTING`` and return its outcome.

    Must run inside raw terminal mode; see ``run_session``.
    """
    io = io if io is not None else default_loop_io()
    spinner_frame = 0
    flow.start()

    while flow.state is not FlowState.QUITTING:
        term = io.get_terminal_size()
        flow.resize(max(1, term.columns), max(1, term.lines))

        for batch in flow.drain_prefetch_results():
            flow.handle_prefetch_complete(batch)
        if flow.state is FlowState.QUITTING:
            break

        now = io.monotonic()
        flow.tick(now)
        if flow.state is FlowState.LOADING:
            next_spinner_frame = int(now / timing.spinner_frame_seconds)
            if next_spinner_frame != spinner_frame:
                spinner_frame = next_spinner_frame
                flow.dirty = True

        if flow.dirty:
            io.write_screen(stdout_fd, compose_screen(flow, spinner_frame))
            flow.dirty = False

        try:
            key = io.read_key(stdin_fd, timing.key_poll_ms)
        except KeyboardInterrupt:
            flow.force_quit()
            break
        if key:
            flow.handle_key(key)

    assert flow.outcome is not None
    return flow.outcome


def run_session(
    flow: UnifiedFlow,
    stdin_fd: int,
    stdout_fd: int,
    timing: RuntimeLoopTiming = RuntimeLoopTiming(),
) -> FlowOutcome:
    """Run ``flow`` in raw alternate-screen mode, restoring the terminal after."""
    terminal = TerminalController(stdin_fd, stdout_fd)
    with terminal.raw_mode():
        return run_main_loop(flow, stdin_fd, stdout_fd, timing)
