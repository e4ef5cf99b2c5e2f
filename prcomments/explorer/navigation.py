"""Cursor, scrolling, and expand state for one JSON explorer session.

``ExplorerView`` owns the tree, the current flattening with its physical row
layout, the cursor (a sequence index into the flattening), and the viewport's
top physical row. Structural changes re-flatten and re-lay out; cursor moves
only adjust ``top_row``.
"""

from __future__ import annotations

import logging

from ..render.layout import TreeLayout, layout_entries
from ..tree_model import (
    FlatEntry,
    JsonNode,
    JsonTree,
    expand_match_ancestors,
    filter_visible_nodes,
    find_matching_nodes,
    flatten_tree,
    index_of_node,
    iter_ancestors,
    parse_json_tree,
    restore_expanded,
    set_all_expanded,
    set_expanded,
    snapshot_expanded,
    toggle_expanded,
)

logger = logging.getLogger(__name__)


class ExplorerView:
    """Navigation controller over a ``JsonTree``.

    ``height`` is the number of physical rows available for tree content.
    """

    def __init__(self, tree: JsonTree, width: int = 80, height: int = 20) -> None:
        self.tree = tree
        self.width = max(1, width)
        self.height = max(1, height)
        self.cursor = 0
        self.top_row = 0
        self.query = ""
        self.matches: frozenset[int] = frozenset()
        self.filter_active = False
        self._filter_snapshot: tuple[bool, ...] | None = None
        self.layout = TreeLayout(width=self.width)
        self.relayout()

    @classmethod
    def from_json(cls, data: bytes | str, width: int = 80, height: int = 20) -> ExplorerView:
        """Build a view from raw JSON text; raises ``InvalidJSONError``."""
        return cls(parse_json_tree(data), width=width, height=height)

    @property
    def entries(self) -> list[FlatEntry]:
        return self.layout.entries

    @property
    def entry_count(self) -> int:
        return len(self.layout.rows)

    @property
    def current_entry(self) -> FlatEntry | None:
        if not self.layout.rows:
            return None
        return self.layout.rows[self.cursor].entry

    @property
    def current_node(self) -> JsonNode | None:
        entry = self.current_entry
        return None if entry is None else self.tree.nodes[entry.node]

    @property
    def match_count(self) -> int:
        return len(self.matches)

    # Layout -----------------------------------------------------------------

    def relayout(self, keep_node: int | None = None) -> None:
        """Re-flatten and re-measure, keeping the cursor on ``keep_node``.

        When ``keep_node`` is hidden the cursor moves to its nearest visible
        ancestor; without one the cursor index is clamped.
        """
        visible = filter_visible_nodes(self.tree, self.matches) if self.filter_active else None
        flat = flatten_tree(self.tree, self.matches, visible)
        self.layout = layout_entries(self.tree, flat, self.width)

        if keep_node is not None:
            position = self._visible_position(keep_node)
            if position is not None:
                self.cursor = position
        self.cursor = max(0, min(self.cursor, self.entry_count - 1))
        self.ensure_cursor_visible()

    def _visible_position(self, node: int) -> int | None:
        flat = self.entries
        position = index_of_node(flat, node)
        if position is not None:
            return position
        for ancestor in iter_ancestors(self.tree, node):
            position = index_of_node(flat, ancestor.index)
            if position is not None:
                return position
        return None

    def _current_node_index(self) -> int | None:
        entry = self.current_entry
        return None if entry is None else entry.node

    def resize(self, width: int, height: int) -> bool:
        """Apply a terminal resize. Returns whether anything changed.

        Repeated calls with the same size are no-ops.
        """
        width = max(1, width)
        height = max(1, height)
        if width == self.width and height == self.height:
            return False
        width_changed = width != self.width
        self.width = width
        self.height = height
        if width_changed:
            self.relayout(keep_node=self._current_node_index())
        else:
            self.ensure_cursor_visible()
        return True

    # Scrolling --------------------------------------------------------------

    @property
    def max_top_row(self) -> int:
        return max(0, self.layout.total_rows - self.height)

    def ensure_cursor_visible(self) -> None:
        """Scroll so every physical row of the cursor entry is on screen.

        Entries taller than the viewport are top-aligned.
        """
        entry = self.current_entry
        if entry is None:
            self.top_row = 0
            return
        top = self.top_row
        first = entry.row_offset
        last = entry.row_offset + entry.row_span - 1
        if entry.row_span >= self.height:
            top = first
        elif first < top:
            top = first
        elif last > top + self.height - 1:
            top = last - self.height + 1
        self.top_row = max(0, min(top, self.max_top_row))

    def cursor_fully_visible(self) -> bool:
        entry = self.current_entry
        if entry is None:
            return True
        last = entry.row_offset + entry.row_span - 1
        return entry.row_offset >= self.top_row and last <= self.top_row + self.height - 1

    # Cursor moves -----------------------------------------------------------

    def _set_cursor(self, position: int) -> bool:
        if not self.layout.rows:
            return False
        position = max(0, min(position, self.entry_count - 1))
        previous = (self.cursor, self.top_row)
        self.cursor = position
        self.ensure_cursor_visible()
        return (self.cursor, self.top_row) != previous

    def move_cursor(self, delta: int) -> bool:
        return self._set_cursor(self.cursor + delta)

    def goto_top(self) -> bool:
        return self._set_cursor(0)

    def goto_bottom(self) -> bool:
        return self._set_cursor(self.entry_count - 1)

    def page_up(self) -> bool:
        return self.move_cursor(-self.height)

    def page_down(self) -> bool:
        return self.move_cursor(self.height)

    def half_page_up(self) -> bool:
        return self.move_cursor(-max(1, self.height // 2))

    def half_page_down(self) -> bool:
        return self.move_cursor(max(1, self.height // 2))

    # Expand / collapse ------------------------------------------------------

    def toggle_expand(self) -> bool:
        """Toggle the cursor node. Childless nodes are left alone."""
        node = self.current_node
        if node is None or not toggle_expanded(self.tree, node.index):
            return False
        self.relayout(keep_node=node.index)
        return True

    def collapse_or_goto_parent(self) -> bool:
        """Collapse the cursor node, or collapse its parent and move there."""
        node = self.current_node
        if node is None:
            return False
        if node.expanded and node.children:
            set_expanded(self.tree, node.index, False)
            self.relayout(keep_node=node.index)
            return True
        parent = self.tree.parent_of(node.index)
        if parent is None:
            return False
        set_expanded(self.tree, parent.index, False)
        self.relayout(keep_node=parent.index)
        return True

    def expand_all(self) -> None:
        keep = self._current_node_index()
        set_all_expanded(self.tree, True)
        self.relayout(keep_node=keep)

    def collapse_all(self) -> None:
        keep = self._current_node_index()
        set_all_expanded(self.tree, False)
        # The root stays open so its keys remain visible.
        self.tree.root.expanded = True
        self.relayout(keep_node=keep)

    # Search and filter ------------------------------------------------------

    def apply_search(self, query: str) -> None:
        """Recompute matches for ``query`` and refresh highlighting."""
        keep = self._current_node_index()
        self.query = query
        self.matches = find_matching_nodes(self.tree, query)
        logger.debug("search %r matched %d nodes", query, len(self.matches))
        if self.filter_active:
            expand_match_ancestors(self.tree, self.matches)
        self.relayout(keep_node=keep)

    def clear_search(self) -> None:
        """Drop the query and leave filter mode, restoring expand state."""
        if self.filter_active:
            self.set_filter(False)
        self.apply_search("")

    def set_filter(self, active: bool) -> bool:
        """Enter or leave filter mode.

        Entering snapshots every expand flag and opens the ancestors of all
        matches; leaving restores the snapshot.
        """
        if active == self.filter_active:
            return False
        keep = self._current_node_index()
        if active:
            self._filter_snapshot = snapshot_expanded(self.tree)
            expand_match_ancestors(self.tree, self.matches)
        elif self._filter_snapshot is not None:
            restore_expanded(self.tree, self._filter_snapshot)
            self._filter_snapshot = None
        self.filter_active = active
        self.relayout(keep_node=keep)
        return True

    def toggle_filter(self) -> bool:
        return self.set_filter(not self.filter_active)

    def _jump_to_match(self, node_index: int) -> bool:
        # Open collapsed ancestors so the match becomes reachable.
        changed = False
        for ancestor in iter_ancestors(self.tree, node_index):
            if not ancestor.expanded:
                ancestor.expanded = True
                changed = True
        if changed:
            self.relayout(keep_node=node_index)
        else:
            position = index_of_node(self.entries, node_index)
            if position is not None:
                self._set_cursor(position)
        return True

    def find_next_match(self) -> bool:
        """Move to the next match in document order, wrapping at the end."""
        if not self.matches:
            return False
        current = self._current_node_index()
        ordered = sorted(self.matches)
        if current is None:
            return self._jump_to_match(ordered[0])
        for index in ordered:
            if index > current:
                return self._jump_to_match(index)
        return self._jump_to_match(ordered[0])

    def find_prev_match(self) -> bool:
        """Move to the previous match in document order, wrapping at the start."""
        if not self.matches:
            return False
        current = self._current_node_index()
        ordered = sorted(self.matches)
        if current is None:
            return self._jump_to_match(ordered[-1])
        for index in reversed(ordered):
            if index < current:
                return self._jump_to_match(index)
        return self._jump_to_match(ordered[-1])
