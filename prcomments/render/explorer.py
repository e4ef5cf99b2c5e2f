"""Explorer frame composition.

Turns a ``TreeLayout`` plus viewport state into styled screen rows: a title
header, the visible slice of physical tree rows, and a footer holding the
search prompt, a status message, or the cursor position.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..ansi import clip_ansi_line, fit_ansi_line, selected_with_ansi
from ..input.keymap import DEFAULT_KEYMAP, Keymap
from ..tree_model import JsonNode, JsonTree, NodeKind
from ..ui_theme import DEFAULT_THEME, UITheme
from .help import explorer_footer_hint, explorer_help_lines
from .layout import EntryLayout, TreeLayout

HEADER_ROWS = 2
FOOTER_ROWS = 1
CURSOR_MARKER = "● "
GLYPH_EXPANDED = "▼ "
GLYPH_COLLAPSED = "▶ "
BLANK_CELL = "  "


def viewport_rows(term_rows: int) -> int:
    """Return physical rows available for tree content."""
    return max(1, term_rows - HEADER_ROWS - FOOTER_ROWS)


@dataclass
class ExplorerRenderContext:
    tree: JsonTree
    layout: TreeLayout
    cursor: int
    top_row: int
    width: int
    height: int
    title: str = ""
    query: str = ""
    match_count: int = 0
    filter_active: bool = False
    search_editing: bool = False
    search_buffer: str = ""
    status_message: str = ""
    show_help: bool = False
    keymap: Keymap = DEFAULT_KEYMAP
    theme: UITheme = DEFAULT_THEME


def _value_style(node: JsonNode, theme: UITheme) -> str:
    if node.kind.is_container:
        return theme.json_summary
    if node.kind is NodeKind.STRING:
        return theme.json_string
    if node.kind is NodeKind.NUMBER:
        return theme.json_number
    if node.kind is NodeKind.BOOLEAN:
        return theme.json_boolean
    return theme.json_null


def _styled(text: str, style: str, theme: UITheme) -> str:
    if not style or not text:
        return text
    return f"{style}{text}{theme.reset}"


def format_entry_rows(
    row: EntryLayout,
    node: JsonNode,
    selected: bool,
    width: int,
    theme: UITheme = DEFAULT_THEME,
) -> list[str]:
    """Return every physical row for one laid-out entry, clipped to ``width``."""
    indent = "  " * node.depth
    marker = _styled(CURSOR_MARKER, theme.cursor_marker, theme) if selected else BLANK_CELL
    if node.children:
        glyph = _styled(GLYPH_EXPANDED if node.expanded else GLYPH_COLLAPSED, theme.expand_glyph, theme)
    else:
        glyph = BLANK_CELL
    key_part = ""
    if row.key:
        key_style = theme.json_key_match if row.entry.matches_search else theme.json_key
        key_part = _styled(row.key, key_style, theme) + ": "

    value_style = _value_style(node, theme)
    continuation_indent = " " * row.prefix_width
    rows: list[str] = []
    for line_no, line in enumerate(row.value_lines or ("",)):
        value = _styled(line, value_style, theme)
        if line_no == 0:
            text = indent + marker + glyph + key_part + value
        else:
            text = continuation_indent + value
        if selected:
            rows.append(selected_with_ansi(fit_ansi_line(text, width), theme.reverse))
        else:
            rows.append(clip_ansi_line(text, width))
    return rows


def visible_tree_rows(context: ExplorerRenderContext) -> list[str]:
    """Return exactly ``context.height`` rows starting at ``top_row``."""
    out: list[str] = []
    start = context.layout.entry_at_row(context.top_row)
    if start is not None:
        for row in context.layout.rows[start:]:
            node = context.tree.nodes[row.entry.node]
            physical = format_entry_rows(
                row,
                node,
                row.entry.sequence_index == context.cursor,
                context.width,
                context.theme,
            )
            skip = max(0, context.top_row - row.row_offset)
            out.extend(physical[skip:])
            if len(out) >= context.height:
                break
    if not out and context.filter_active:
        out.append(_styled("  no matching nodes", context.theme.search_hint, context.theme))
    out = out[: context.height]
    out.extend([""] * (context.height - len(out)))
    return out


def _header_rows(context: ExplorerRenderContext) -> list[str]:
    theme = context.theme
    title = "JSON Explorer"
    if context.title:
        title = f"{title}: {context.title}"
    first = clip_ansi_line(_styled(title, theme.title, theme), context.width)
    if context.query:
        summary = f"{context.match_count} matches for '{context.query}'"
        if context.filter_active:
            summary += "  [filtered]"
        second = clip_ansi_line(_styled(summary, theme.search_query, theme), context.width)
    else:
        second = ""
    return [first, second]


def _footer_row(context: ExplorerRenderContext) -> str:
    theme = context.theme
    if context.search_editing:
        prompt = "/" + context.search_buffer + "█"
        if not context.search_buffer:
            prompt += _styled(" type to search keys and values", theme.search_hint, theme)
        return clip_ansi_line(prompt, context.width)
    if context.status_message:
        return clip_ansi_line(_styled(context.status_message, theme.status, theme), context.width)
    total = len(context.layout.rows)
    position = f"{context.cursor + 1 if total else 0}/{total}"
    hint = explorer_footer_hint(context.keymap)
    gap = max(2, context.width - len(position) - len(hint))
    return clip_ansi_line(_styled(position + " " * gap + hint, theme.search_hint, theme), context.width)


def render_explorer_screen(context: ExplorerRenderContext) -> list[str]:
    """Compose all rows of the explorer screen."""
    if context.show_help:
        body = [clip_ansi_line(line, context.width) for line in explorer_help_lines(context.keymap, context.theme)]
        body = body[: context.height]
        body.extend([""] * (context.height - len(body)))
    else:
        body = visible_tree_rows(context)
    return _header_rows(context) + body + [_footer_row(context)]
