"""Word-preserving wrapping for JSON string values.

Wrapped lines concatenate back to the original string exactly: breaking
whitespace stays at the end of the line it follows, leading whitespace stays
on the first line, and embedded newlines end their line. Words are never split,
so a long URL simply overflows its line.
"""

from __future__ import annotations

import re

from ..ansi import text_display_width

_TOKEN_RE = re.compile(r"\s*\S+\s*")


def _wrap_paragraph(body: str, width: int) -> list[str]:
    """Greedy word wrap for one newline-free segment."""
    tokens = _TOKEN_RE.findall(body)
    if not tokens:
        # Empty or whitespace-only segment.
        return [body]

    lines: list[str] = []
    current = ""
    current_width = 0
    for token in tokens:
        # Trailing whitespace may hang past the edge; only the word must fit.
        visible_width = text_display_width(token.rstrip(), current_width)
        if current and current_width + visible_width > width:
            lines.append(current)
            current = token
            current_width = text_display_width(token)
            continue
        current += token
        current_width += text_display_width(token, current_width)
    lines.append(current)
    return lines


def wrap_value(text: str, width: int) -> list[str]:
    """Wrap ``text`` to ``width`` display columns at word boundaries.

    Returns at least one line, and ``"".join(lines) == text`` always holds.
    Lines produced by an embedded newline keep their ``"\\n"`` terminator.
    """
    if width <= 0 or not text:
        return [text]

    segments = text.split("\n")
    lines: list[str] = []
    for position, segment in enumerate(segments):
        wrapped = _wrap_paragraph(segment, width)
        if position < len(segments) - 1:
            wrapped[-1] += "\n"
        lines.extend(wrapped)
    return lines


def display_line(line: str) -> str:
    """Strip the newline terminator a wrapped line may carry."""
    return line[:-1] if line.endswith("\n") else line
