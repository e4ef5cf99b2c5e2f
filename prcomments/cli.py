"""Command-line front door for prcomments.

Parses CLI options, loads a JSON document or an items file, and dispatches
into the interactive runtime, or prints colourised JSON when no terminal is
available.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from .highlight import DEFAULT_STYLE, colorize_json, format_json_text
from .items import SelectableItem, load_items_file, read_item_payload
from .runtime.app import run_explore_only, run_selection
from .runtime.config import LOG_PATH, load_session_config, no_color_requested, save_theme_name
from .runtime.flow import FlowOutcome
from .runtime.terminal import InteractiveUnavailableError
from .ui_theme import available_theme_names

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(log_file: str | None, verbose: bool) -> Path:
    """Send log records to a file; the TUI owns the terminal."""
    path = Path(log_file) if log_file else LOG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.FileHandler(path, encoding="utf-8")],
    )
    return path


def read_document(path_arg: str) -> bytes:
    """Read JSON bytes from ``path_arg`` (``-`` for stdin)."""
    if path_arg == "-":
        return sys.stdin.buffer.read()
    path = Path(path_arg)
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")
    return path.read_bytes()


def reattach_terminal_stdin() -> bool:
    """Point fd 0 back at the controlling terminal after stdin was consumed.

    Returns ``False`` when no controlling terminal can be opened.
    """
    try:
        tty_fd = os.open("/dev/tty", os.O_RDONLY)
    except OSError:
        return False
    os.dup2(tty_fd, 0)
    os.close(tty_fd)
    sys.stdin = open(0, "r", closefd=False)
    return True


def print_document(payload: bytes, style: str, no_color: bool) -> None:
    try:
        text = format_json_text(payload)
    except ValueError as exc:
        raise SystemExit(f"error: invalid JSON: {exc}") from exc
    sys.stdout.write(colorize_json(text, style, no_color=no_color))


def print_items(items: list[SelectableItem]) -> None:
    for item in items:
        line = item.title
        if item.description:
            line += f"  {item.description}"
        sys.stdout.write(line + "\n")


def report_outcome(outcome: FlowOutcome, *, print_selected: bool) -> None:
    """Print warnings and the selected payload; exit on fatal outcomes."""
    for warning in outcome.warnings:
        sys.stderr.write(f"warning: {warning}\n")
    if outcome.is_fatal:
        raise SystemExit(f"error: {outcome.error}")
    if outcome.is_selected and outcome.item is not None:
        logger.info("selected %s", outcome.item.identity)
        if print_selected and outcome.payload is not None:
            sys.stdout.buffer.write(outcome.payload)
            if not outcome.payload.endswith(b"\n"):
                sys.stdout.buffer.write(b"\n")
            sys.stdout.flush()


def main() -> None:
    """Parse CLI arguments and launch prcomments on a document or item list.

    A positional ``PATH`` explores one JSON document; ``--items`` opens the
    selector over a list of items whose payloads are prefetched in the
    background.
    """
    parser = argparse.ArgumentParser(
        description="Explore JSON documents and pull-request data as a collapsible tree."
    )
    parser.add_argument("path", nargs="?", default=None, help="JSON file to explore, or '-' for stdin.")
    parser.add_argument("--items", metavar="PATH", help="JSON file listing items to select from.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}); remembered for later sessions.",
    )
    parser.add_argument("--style", default=DEFAULT_STYLE, help="Pygments style name for --nopager output.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    parser.add_argument("--nopager", action="store_true", help="Print output directly without the interactive UI.")
    parser.add_argument(
        "--print-selected",
        action="store_true",
        help="Write the selected item's JSON to stdout after the session.",
    )
    parser.add_argument("--log-file", default=None, help=f"Log file path (default: {LOG_PATH}).")
    parser.add_argument("--verbose", action="store_true", help="Log debug records.")
    args = parser.parse_args()

    if args.path is not None and args.items is not None:
        raise SystemExit("Cannot combine positional path with --items.")
    if args.path is None and args.items is None:
        parser.error("a JSON path or --items is required")

    configure_logging(args.log_file, args.verbose)
    if args.theme:
        save_theme_name(args.theme)
    no_color = args.no_color or no_color_requested()
    interactive = not args.nopager and sys.stdout.isatty()

    if args.items is not None:
        try:
            items = load_items_file(Path(args.items))
        except ValueError as exc:
            raise SystemExit(f"error: {exc}") from exc
        if not interactive:
            print_items(items)
            return
        config = load_session_config(args.theme, no_color=no_color)
        try:
            outcome = run_selection(items, read_item_payload, config=config)
        except InteractiveUnavailableError as exc:
            raise SystemExit(f"error: {exc}") from exc
        report_outcome(outcome, print_selected=args.print_selected)
        return

    payload = read_document(args.path)
    if interactive and not sys.stdin.isatty():
        interactive = reattach_terminal_stdin()
    if not interactive:
        print_document(payload, args.style, no_color)
        return

    config = load_session_config(args.theme, no_color=no_color)
    title = "" if args.path == "-" else Path(args.path).name
    try:
        outcome = run_explore_only(payload, title=title, config=config)
    except InteractiveUnavailableError as exc:
        raise SystemExit(f"error: {exc}") from exc
    report_outcome(outcome, print_selected=False)


if __name__ == "__main__":
    main()
