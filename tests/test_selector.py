"""Item selector tests: ranking, filter editing, selection, and cancel."""

from __future__ import annotations

import unittest

from prcomments.items import SelectableItem
from prcomments.runtime.external import ExternalActions
from prcomments.selector import SelectorPanel, fuzzy_score, match_items


def _items() -> list[SelectableItem]:
    return [
        SelectableItem("1", "acme/api#12: Fix pagination", "[fix→main] 2024-01-02 10:00Z by @ana", url="https://x/12"),
        SelectableItem("2", "acme/web#7: Add dark mode", "[dark→main] 2024-01-03 11:00Z by @bo"),
        SelectableItem("3", "acme/api#15: Paginate search results", "[pg→main] 2024-01-04 12:00Z by @cy"),
    ]


class _RecordingActions:
    def __init__(self) -> None:
        self.opened: list[str] = []

    def actions(self) -> ExternalActions:
        return ExternalActions(open_url=self._open, copy_text=lambda text: True)

    def _open(self, url: str) -> bool:
        self.opened.append(url)
        return True


def _panel() -> tuple[SelectorPanel, _RecordingActions]:
    recorder = _RecordingActions()
    return SelectorPanel(_items(), recorder.actions()), recorder


class MatchingTests(unittest.TestCase):
    def test_empty_query_keeps_original_order(self) -> None:
        self.assertEqual(match_items("", _items()), [0, 1, 2])

    def test_substring_hits_rank_by_position(self) -> None:
        self.assertEqual(match_items("pagin", _items()), [2, 0])

    def test_fuzzy_fallback_when_no_substring_matches(self) -> None:
        self.assertEqual(match_items("drkmd", _items()), [1])
        self.assertEqual(match_items("qqq", _items()), [])

    def test_fuzzy_score_prefers_contiguous_runs(self) -> None:
        contiguous = fuzzy_score("dark", "dark mode")
        scattered = fuzzy_score("dark", "dxaxrxk mode")

        self.assertIsNotNone(contiguous)
        self.assertIsNotNone(scattered)
        self.assertGreater(contiguous, scattered)
        self.assertIsNone(fuzzy_score("xyz", "dark mode"))


class SelectorPanelTests(unittest.TestCase):
    def test_enter_selects_current_item(self) -> None:
        panel, _ = _panel()

        panel.handle_key("j")
        panel.handle_key("ENTER")
        self.assertEqual(panel.choice.identity, "2")

    def test_typed_filter_narrows_and_keeps_selection_in_range(self) -> None:
        panel, _ = _panel()

        for key in ("/", "d", "a", "r", "k"):
            panel.handle_key(key)
        self.assertTrue(panel.filter_editing)
        self.assertEqual(panel.query, "dark")
        self.assertEqual(panel.matches, [1])

        panel.handle_key("ENTER")
        self.assertFalse(panel.filter_editing)
        self.assertIsNone(panel.choice)
        panel.handle_key("ENTER")
        self.assertEqual(panel.choice.identity, "2")

    def test_letters_are_filter_text_while_editing(self) -> None:
        panel, _ = _panel()

        for key in ("/", "q", "j"):
            panel.handle_key(key)
        self.assertEqual(panel.query, "qj")
        self.assertFalse(panel.cancelled)

    def test_escape_in_filter_clears_query(self) -> None:
        panel, _ = _panel()

        for key in ("/", "w", "e", "b", "ESC"):
            panel.handle_key(key)
        self.assertFalse(panel.filter_editing)
        self.assertEqual(panel.query, "")
        self.assertEqual(panel.matches, [0, 1, 2])

    def test_cancel_clears_active_filter_before_cancelling(self) -> None:
        panel, _ = _panel()
        for key in ("/", "a", "p", "i", "ENTER"):
            panel.handle_key(key)

        panel.handle_key("q")
        self.assertFalse(panel.cancelled)
        self.assertEqual(panel.query, "")
        panel.handle_key("q")
        self.assertTrue(panel.cancelled)

    def test_reset_forgets_previous_choice(self) -> None:
        panel, _ = _panel()
        panel.handle_key("ENTER")
        self.assertIsNotNone(panel.choice)

        panel.reset()
        self.assertIsNone(panel.choice)
        self.assertFalse(panel.cancelled)

    def test_selection_scrolls_with_two_rows_per_item(self) -> None:
        items = [SelectableItem(str(i), f"item {i}") for i in range(20)]
        panel = SelectorPanel(items, _RecordingActions().actions())
        panel.resize(6)

        for _ in range(5):
            panel.handle_key("DOWN")
        self.assertEqual(panel.selected, 5)
        self.assertEqual(panel.list_start, 3)
        panel.handle_key("HOME")
        self.assertEqual(panel.list_start, 0)
        panel.handle_key("END")
        self.assertEqual(panel.selected, 19)

    def test_open_url_uses_item_url(self) -> None:
        panel, recorder = _panel()

        panel.handle_key("o")
        self.assertEqual(recorder.opened, ["https://x/12"])
        panel.handle_key("j")
        panel.handle_key("o")
        self.assertEqual(panel.status_message, "Item has no URL")


if __name__ == "__main__":
    unittest.main()
