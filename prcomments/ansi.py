"""ANSI-aware text measurement and clipping utilities.

Every row written to the terminal goes through these helpers so that colour
codes and wide characters never push content past the right edge.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``.

    Tabs expand to the next 8-column stop, combining marks consume no columns,
    and East Asian wide/fullwidth characters consume two.
    """
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def text_display_width(text: str, start_col: int = 0) -> int:
    """Return display columns used by plain ``text`` starting at ``start_col``."""
    col = start_col
    for ch in text:
        col += char_display_width(ch, col)
    return col - start_col


def ansi_display_width(text: str) -> int:
    """Return display columns used by ANSI-styled ``text``."""
    return text_display_width(ANSI_ESCAPE_RE.sub("", text))


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    ANSI escape sequences are preserved verbatim and do not count toward width.
    Tabs are expanded into spaces so clipping aligns with rendered terminal cells.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n and col < max_cols:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        ch = text[i]
        w = char_display_width(ch, col)
        if ch == "\t":
            if col + w > max_cols:
                break
            out.append(" " * w)
            col += w
            i += 1
            continue
        if col + w > max_cols:
            break
        out.append(ch)
        col += w
        i += 1

    return "".join(out)


def fit_ansi_line(text: str, width: int) -> str:
    """Clip ``text`` to ``width`` columns and right-pad it with spaces."""
    clipped = clip_ansi_line(text, width)
    used = ansi_display_width(clipped)
    if used < width:
        return clipped + (" " * (width - used))
    return clipped


def selected_with_ansi(text: str, reverse: str = "\033[7m") -> str:
    """Apply selection styling without discarding existing ANSI colors."""
    if not text or not reverse:
        return text

    # Keep reverse video active even when the text contains internal resets.
    return reverse + text.replace("\033[0m", "\033[0m" + reverse) + "\033[0m"
