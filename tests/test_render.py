"""Screen composition tests for the explorer, selector, and loading views."""

from __future__ import annotations

import unittest

from prcomments.ansi import ansi_display_width
from prcomments.explorer import ExplorerView
from prcomments.items import SelectableItem
from prcomments.render import (
    ExplorerRenderContext,
    SelectorRenderContext,
    render_explorer_screen,
    render_loading_screen,
    render_selector_screen,
)
from prcomments.render.explorer import visible_tree_rows
from prcomments.ui_theme import DEFAULT_THEME, PLAIN_THEME

SAMPLE = '{"a": "short", "b": {"c": [1, 2, 3]}}'


def _context(view: ExplorerView, **overrides) -> ExplorerRenderContext:
    values = dict(
        tree=view.tree,
        layout=view.layout,
        cursor=view.cursor,
        top_row=view.top_row,
        width=view.width,
        height=view.height,
        query=view.query,
        match_count=view.match_count,
        filter_active=view.filter_active,
        theme=PLAIN_THEME,
    )
    values.update(overrides)
    return ExplorerRenderContext(**values)


class ExplorerRenderTests(unittest.TestCase):
    def test_rows_show_indent_glyph_key_and_value(self) -> None:
        view = ExplorerView.from_json(SAMPLE, width=40, height=10)
        view.move_cursor(1)

        rows = visible_tree_rows(_context(view))

        self.assertEqual(len(rows), 10)
        self.assertEqual(rows[0], "  ▼ {} 2 keys")
        self.assertIn('● ', rows[1])
        self.assertIn('a: "short"', rows[1])
        self.assertEqual(rows[2], "    ▼ b: {} 1 keys")
        self.assertEqual(rows[4], " " * 10 + "[0]: 1")
        self.assertEqual(rows[7:], ["", "", ""])

    def test_wrapped_value_continuation_rows_align_after_prefix(self) -> None:
        view = ExplorerView.from_json('{"m": "' + "aaaa " * 10 + '"}', width=30, height=10)

        rows = visible_tree_rows(_context(view))

        self.assertTrue(rows[1].startswith(" " * 6 + 'm: "aaaa'))
        self.assertTrue(rows[2].startswith(" " * 9 + "aaaa"))
        self.assertTrue(rows[3].rstrip().endswith('"'))

    def test_viewport_starts_mid_entry_when_scrolled(self) -> None:
        view = ExplorerView.from_json('{"m": "' + "aaaa " * 10 + '", "n": 1}', width=30, height=2)
        view.goto_bottom()

        rows = visible_tree_rows(_context(view))

        self.assertEqual(view.top_row, 3)
        self.assertTrue(rows[0].lstrip().startswith("aaaa"))
        self.assertIn("n: 1", rows[1])

    def test_rows_never_exceed_width(self) -> None:
        view = ExplorerView.from_json('{"k": "' + "long words here " * 20 + '", "u": "' + "x" * 200 + '"}', width=30)
        context = _context(view, theme=DEFAULT_THEME)

        for row in render_explorer_screen(context):
            self.assertLessEqual(ansi_display_width(row), 30)

    def test_header_reports_matches_and_filter(self) -> None:
        view = ExplorerView.from_json(SAMPLE, width=60, height=10)
        view.apply_search("c")
        view.set_filter(True)

        rows = render_explorer_screen(_context(view, title="pr.json"))

        self.assertEqual(rows[0], "JSON Explorer: pr.json")
        self.assertEqual(rows[1], "1 matches for 'c'  [filtered]")
        self.assertEqual(len(rows), 13)

    def test_filter_without_visible_nodes_shows_placeholder(self) -> None:
        view = ExplorerView.from_json(SAMPLE, width=60, height=5)
        view.apply_search("zzz")
        view.set_filter(True)

        rows = visible_tree_rows(_context(view))
        self.assertIn("no matching nodes", rows[0])

    def test_footer_prefers_search_prompt_then_status(self) -> None:
        view = ExplorerView.from_json(SAMPLE, width=60, height=5)

        editing = render_explorer_screen(_context(view, search_editing=True, search_buffer="ab"))
        self.assertTrue(editing[-1].startswith("/ab█"))

        status = render_explorer_screen(_context(view, status_message="Copied value"))
        self.assertEqual(status[-1], "Copied value")

    def test_help_overlay_replaces_tree_rows(self) -> None:
        view = ExplorerView.from_json(SAMPLE, width=60, height=30)

        rows = render_explorer_screen(_context(view, show_help=True))

        self.assertTrue(any("MOVE" in row for row in rows))
        self.assertTrue(any("search keys and values" in row for row in rows))


class SelectorRenderTests(unittest.TestCase):
    def test_items_use_two_rows_and_mark_selection(self) -> None:
        items = [
            SelectableItem("1", "acme/api#1: First", "[a→main] 2024-01-01 00:00Z by @x"),
            SelectableItem("2", "acme/api#2: Second", "[b→main] 2024-01-02 00:00Z by @y"),
        ]
        context = SelectorRenderContext(
            title="Select a Pull Request",
            items=items,
            matches=[0, 1],
            selected=1,
            list_start=0,
            width=50,
            height=6,
            warnings=("acme/api#3: timeout",),
            theme=PLAIN_THEME,
        )

        rows = render_selector_screen(context)

        self.assertEqual(len(rows), 9)
        self.assertEqual(rows[0], "Select a Pull Request")
        self.assertEqual(rows[1], "2 items  1 failed to load")
        self.assertEqual(rows[2], "  acme/api#1: First")
        self.assertIn("│ acme/api#2: Second", rows[4])
        self.assertIn("│ [b→main]", rows[5])

    def test_filter_prompt_and_empty_result(self) -> None:
        context = SelectorRenderContext(
            title="Pick",
            items=[SelectableItem("1", "one")],
            matches=[],
            selected=0,
            list_start=0,
            width=40,
            height=4,
            query="zz",
            filter_editing=True,
            theme=PLAIN_THEME,
        )

        rows = render_selector_screen(context)

        self.assertEqual(rows[1], "Filter: zz█")
        self.assertIn("No items match the filter.", rows[2])

    def test_loading_screen_cycles_spinner(self) -> None:
        first = render_loading_screen("Loading 3 items...", 0, 40, 6, theme=PLAIN_THEME)
        second = render_loading_screen("Loading 3 items...", 1, 40, 6, theme=PLAIN_THEME)

        self.assertEqual(len(first), 6)
        self.assertEqual(first[1], "  | Loading 3 items...")
        self.assertEqual(second[1], "  / Loading 3 items...")


if __name__ == "__main__":
    unittest.main()
