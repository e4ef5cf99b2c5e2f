"""Interactive item list with type-to-filter, selection, and URL opening."""

from __future__ import annotations

import logging
import time

from ..input.key_registry import KeyComboRegistry
from ..input.keymap import DEFAULT_KEYMAP, Keymap
from ..items import SelectableItem
from ..runtime.external import ExternalActions
from .matching import match_items

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Select a Pull Request"
ROWS_PER_ITEM = 2
STATUS_MESSAGE_SECONDS = 2.0


class SelectorPanel:
    """Selection list state.

    ``choice`` is set when the user picks an item and ``cancelled`` when they
    back out; the flow reads both after every key and calls ``reset`` when it
    returns here from the explorer.
    """

    def __init__(
        self,
        items: list[SelectableItem],
        actions: ExternalActions,
        keymap: Keymap = DEFAULT_KEYMAP,
        *,
        title: str = DEFAULT_TITLE,
        warnings: tuple[str, ...] = (),
    ) -> None:
        self.items = list(items)
        self.actions = actions
        self.keymap = keymap
        self.title = title
        self.warnings = warnings
        self.query = ""
        self.filter_editing = False
        self.matches: list[int] = list(range(len(self.items)))
        self.selected = 0
        self.list_start = 0
        self.height = 10
        self.choice: SelectableItem | None = None
        self.cancelled = False
        self.status_message = ""
        self.status_message_until = 0.0
        self._keys = self._build_registry()
        self._filter_keys = self._build_filter_registry()

    def _build_registry(self) -> KeyComboRegistry:
        km = self.keymap
        return (
            KeyComboRegistry()
            .bind(km.select, self.select_current)
            .bind(km.up, lambda: self.move_selection(-1))
            .bind(km.down, lambda: self.move_selection(1))
            .bind(km.page_up, lambda: self.move_selection(-self.visible_item_count()))
            .bind(km.page_down, lambda: self.move_selection(self.visible_item_count()))
            .bind(km.goto_top, lambda: self.move_selection(-len(self.matches)))
            .bind(km.goto_bottom, lambda: self.move_selection(len(self.matches)))
            .bind(km.search, self.begin_filter)
            .bind(km.open_url, self.open_current_url)
            .bind(km.cancel, self.cancel)
        )

    def _build_filter_registry(self) -> KeyComboRegistry:
        return (
            KeyComboRegistry()
            .bind(("ENTER",), self.commit_filter)
            .bind(("ESC",), self.clear_filter)
            .bind(("BACKSPACE",), self._filter_backspace)
            .bind(("CTRL_U",), lambda: self.set_query(""))
            .bind(("UP",), lambda: self.move_selection(-1))
            .bind(("DOWN",), lambda: self.move_selection(1))
        )

    @property
    def current_item(self) -> SelectableItem | None:
        if not self.matches:
            return None
        return self.items[self.matches[self.selected]]

    def visible_item_count(self) -> int:
        return max(1, self.height // ROWS_PER_ITEM)

    def resize(self, height: int) -> None:
        """Set the rows available for the item list."""
        self.height = max(ROWS_PER_ITEM, height)
        self._ensure_selection_visible()

    def reset(self) -> None:
        """Forget the last choice so returning here does not re-report it."""
        self.choice = None
        self.cancelled = False

    # Status messages --------------------------------------------------------

    def set_status_message(self, message: str, now: float | None = None) -> None:
        now = time.monotonic() if now is None else now
        self.status_message = message
        self.status_message_until = now + STATUS_MESSAGE_SECONDS

    def expire_status_message(self, now: float) -> bool:
        if self.status_message and now >= self.status_message_until:
            self.status_message = ""
            self.status_message_until = 0.0
            return True
        return False

    # Key handling -----------------------------------------------------------

    def handle_key(self, key: str) -> bool:
        """Handle one key. Returns whether it was consumed."""
        if self.filter_editing:
            if self._filter_keys.dispatch(key) is not None:
                return True
            if len(key) == 1 and key.isprintable():
                self.set_query(self.query + key)
                return True
            return False
        return self._keys.dispatch(key) is not None

    def _filter_backspace(self) -> bool:
        self.set_query(self.query[:-1])
        return True

    # Actions ----------------------------------------------------------------

    def set_query(self, query: str) -> bool:
        """Refilter items for ``query``, keeping the current item selected when possible."""
        current = self.matches[self.selected] if self.matches else None
        self.query = query
        self.matches = match_items(query, self.items)
        if current is not None and current in self.matches:
            self.selected = self.matches.index(current)
        else:
            self.selected = 0
        self.list_start = 0
        self._ensure_selection_visible()
        return True

    def begin_filter(self) -> bool:
        self.filter_editing = True
        return True

    def commit_filter(self) -> bool:
        self.filter_editing = False
        return True

    def clear_filter(self) -> bool:
        self.filter_editing = False
        return self.set_query("")

    def move_selection(self, delta: int) -> bool:
        if not self.matches:
            return False
        previous = self.selected
        self.selected = max(0, min(len(self.matches) - 1, self.selected + delta))
        self._ensure_selection_visible()
        return self.selected != previous

    def _ensure_selection_visible(self) -> None:
        visible = self.visible_item_count()
        if self.selected < self.list_start:
            self.list_start = self.selected
        elif self.selected >= self.list_start + visible:
            self.list_start = self.selected - visible + 1
        max_start = max(0, len(self.matches) - visible)
        self.list_start = max(0, min(self.list_start, max_start))

    def select_current(self) -> bool:
        item = self.current_item
        if item is None:
            return False
        self.choice = item
        logger.debug("selected item %s", item.identity)
        return True

    def cancel(self) -> bool:
        if self.query:
            # First cancel clears an active filter, like leaving the prompt.
            return self.clear_filter()
        self.cancelled = True
        return True

    def open_current_url(self) -> bool:
        item = self.current_item
        if item is None:
            return False
        if not item.url:
            self.set_status_message("Item has no URL")
            return True
        if self.actions.open_url(item.url):
            self.set_status_message(f"Opened {item.url}")
        else:
            self.set_status_message("Could not open browser")
        return True
