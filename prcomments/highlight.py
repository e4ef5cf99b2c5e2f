"""Terminal-safe text and Pygments JSON colorizing.

Neutralizes terminal control bytes in JSON values before they reach the
screen, and renders whole payloads with Pygments for non-interactive output.
"""

from __future__ import annotations

import json
import re

from pygments import highlight as pygments_highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import JsonLexer
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

DEFAULT_STYLE = "monokai"

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_FORMATTERS: dict[str, TerminalFormatter] = {}
_VALID_STYLES: set[str] = set()
_INVALID_STYLES: set[str] = set()


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def sanitize_display_line(line: str) -> str:
    """Sanitize one rendered row, which must not carry line breaks."""
    return sanitize_terminal_text(line).replace("\r", "\\r").replace("\n", "\\n")


def normalize_style(style: str) -> str:
    """Return ``style`` when Pygments knows it, otherwise the default style."""
    if style in _VALID_STYLES:
        return style
    if style in _INVALID_STYLES:
        return DEFAULT_STYLE
    try:
        get_style_by_name(style)
    except ClassNotFound:
        _INVALID_STYLES.add(style)
        return DEFAULT_STYLE
    _VALID_STYLES.add(style)
    return style


def _formatter_for_style(style: str) -> TerminalFormatter:
    formatter = _FORMATTERS.get(style)
    if formatter is not None:
        return formatter
    formatter = TerminalFormatter(style=style)
    _FORMATTERS[style] = formatter
    return formatter


def format_json_text(data: bytes | str) -> str:
    """Pretty-print JSON text with two-space indentation.

    Raises ``ValueError`` when ``data`` is not valid JSON.
    """
    value = json.loads(data)
    return json.dumps(value, indent=2, ensure_ascii=False) + "\n"


def colorize_json(text: str, style: str = DEFAULT_STYLE, *, no_color: bool = False) -> str:
    """Return ``text`` highlighted as JSON for a terminal.

    With ``no_color`` the text is only sanitized.
    """
    safe = sanitize_terminal_text(text)
    if no_color:
        return safe
    formatter = _formatter_for_style(normalize_style(style))
    return pygments_highlight(safe, JsonLexer(), formatter)
