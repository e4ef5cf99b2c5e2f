"""Physical-row layout for flattened JSON trees.

Each visible entry is measured once per structural change: its prefix width,
its wrapped value lines, and the physical rows it occupies. Cursor moves reuse
the layout; only expand/collapse, search, filter, and resize rebuild it.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, replace

from ..ansi import text_display_width
from ..highlight import sanitize_display_line
from ..tree_model import FlatEntry, JsonNode, JsonTree, NodeKind, scalar_text
from .wrap import display_line, wrap_value

MIN_VALUE_WIDTH = 20
INDENT_WIDTH = 2
MARKER_WIDTH = 2
GLYPH_WIDTH = 2
# Opening and closing quote around wrapped strings.
QUOTE_MARGIN = 2


@dataclass(frozen=True)
class EntryLayout:
    """Measured rows for one visible entry."""

    entry: FlatEntry
    key: str
    prefix_width: int
    value_lines: tuple[str, ...]

    @property
    def row_span(self) -> int:
        return self.entry.row_span

    @property
    def row_offset(self) -> int:
        return self.entry.row_offset


@dataclass(frozen=True)
class TreeLayout:
    """Laid-out entries with cumulative physical row offsets."""

    width: int
    rows: tuple[EntryLayout, ...] = ()
    total_rows: int = 0

    @property
    def entries(self) -> list[FlatEntry]:
        return [row.entry for row in self.rows]

    def entry_at_row(self, physical_row: int) -> int | None:
        """Return the sequence index of the entry covering ``physical_row``."""
        if not self.rows or physical_row < 0 or physical_row >= self.total_rows:
            return None
        offsets = [row.row_offset for row in self.rows]
        return bisect_right(offsets, physical_row) - 1


def prefix_width(node: JsonNode) -> int:
    """Return display columns used before a node's value.

    Independent of the cursor: the marker column is reserved on every row.
    """
    width = node.depth * INDENT_WIDTH + MARKER_WIDTH + GLYPH_WIDTH
    if node.key:
        width += text_display_width(sanitize_display_line(node.key)) + 2
    return width


def value_width(width: int, prefix: int) -> int:
    """Return the wrap width for string values on a ``width``-column screen."""
    return max(MIN_VALUE_WIDTH, width - prefix - QUOTE_MARGIN)


def container_summary(node: JsonNode) -> str:
    count = len(node.children)
    if node.kind is NodeKind.OBJECT:
        return f"{{}} {count} keys" if node.expanded else f"{{...}} {count} keys"
    return f"[] {count} items" if node.expanded else f"[...] {count} items"


def value_lines(node: JsonNode, wrap_width: int) -> list[str]:
    """Return plain display lines for a node's value.

    Strings are wrapped and quoted: the opening quote leads the first line
    and the closing quote ends the last one.
    """
    if node.kind.is_container:
        return [container_summary(node)]
    if node.kind is not NodeKind.STRING:
        return [scalar_text(node.kind, node.value)]

    lines = [sanitize_display_line(display_line(line)) for line in wrap_value(str(node.value), wrap_width)]
    lines[0] = '"' + lines[0]
    lines[-1] = lines[-1] + '"'
    return lines


def layout_entries(tree: JsonTree, entries: list[FlatEntry], width: int) -> TreeLayout:
    """Measure ``entries`` for a ``width``-column screen.

    Returns new entries carrying ``row_span`` and ``row_offset``, where each
    offset is the sum of the spans before it.
    """
    rows: list[EntryLayout] = []
    offset = 0
    for entry in entries:
        node = tree.nodes[entry.node]
        prefix = prefix_width(node)
        lines = value_lines(node, value_width(width, prefix))
        span = max(1, len(lines))
        rows.append(
            EntryLayout(
                entry=replace(entry, row_span=span, row_offset=offset),
                key=sanitize_display_line(node.key),
                prefix_width=prefix,
                value_lines=tuple(lines),
            )
        )
        offset += span
    return TreeLayout(width=width, rows=tuple(rows), total_rows=offset)
