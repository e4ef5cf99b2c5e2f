"""Key handling for the JSON explorer: normal mode and search-edit mode."""

from __future__ import annotations

import enum
import logging
import time

from ..input.key_registry import KeyComboRegistry
from ..input.keymap import DEFAULT_KEYMAP, Keymap
from ..runtime.external import ExternalActions
from ..tree_model import copy_text, extract_url
from .navigation import ExplorerView

logger = logging.getLogger(__name__)

STATUS_MESSAGE_SECONDS = 2.0


class ExplorerAction(enum.Enum):
    """Result of one explorer key press as seen by the flow."""

    IGNORED = "ignored"
    HANDLED = "handled"
    QUIT = "quit"


class ExplorerPanel:
    """Explorer key dispatcher wrapping an ``ExplorerView``.

    Owns the search prompt buffer, the help toggle, and transient status
    messages. The quit binding is reported to the caller rather than acted on.
    """

    def __init__(
        self,
        view: ExplorerView,
        actions: ExternalActions,
        keymap: Keymap = DEFAULT_KEYMAP,
        *,
        title: str = "",
        filter_on_search: bool = False,
    ) -> None:
        self.view = view
        self.actions = actions
        self.keymap = keymap
        self.title = title
        self.filter_on_search = filter_on_search
        self.search_editing = False
        self.search_buffer = ""
        self.show_help = False
        self.status_message = ""
        self.status_message_until = 0.0
        self._normal_keys = self._build_normal_registry()
        self._search_keys = self._build_search_registry()

    def _build_normal_registry(self) -> KeyComboRegistry:
        km = self.keymap
        view = self.view
        return (
            KeyComboRegistry()
            .bind(km.up, lambda: view.move_cursor(-1))
            .bind(km.down, lambda: view.move_cursor(1))
            .bind(km.page_up, view.page_up)
            .bind(km.page_down, view.page_down)
            .bind(km.half_page_up, view.half_page_up)
            .bind(km.half_page_down, view.half_page_down)
            .bind(km.goto_top, view.goto_top)
            .bind(km.goto_bottom, view.goto_bottom)
            .bind(km.expand, self.expand_or_open)
            .bind(km.collapse, view.collapse_or_goto_parent)
            .bind(km.expand_all, view.expand_all)
            .bind(km.collapse_all, view.collapse_all)
            .bind(km.search, self.begin_search)
            .bind(km.next_match, view.find_next_match)
            .bind(km.prev_match, view.find_prev_match)
            .bind(km.clear_search, view.clear_search)
            .bind(km.toggle_filter, self.toggle_filter)
            .bind(km.copy, self.copy_current)
            .bind(km.open_url, self.open_current_url)
            .bind(km.help, self.toggle_help)
        )

    def _build_search_registry(self) -> KeyComboRegistry:
        return (
            KeyComboRegistry()
            .bind(("ENTER",), self.commit_search)
            .bind(("ESC",), self.cancel_search)
            .bind(("BACKSPACE",), self._search_backspace)
            .bind(("CTRL_U",), self._search_clear_buffer)
        )

    # Status messages --------------------------------------------------------

    def set_status_message(self, message: str, now: float | None = None) -> None:
        now = time.monotonic() if now is None else now
        self.status_message = message
        self.status_message_until = now + STATUS_MESSAGE_SECONDS

    def expire_status_message(self, now: float) -> bool:
        """Clear an elapsed status message. Returns whether one was cleared."""
        if self.status_message and now >= self.status_message_until:
            self.status_message = ""
            self.status_message_until = 0.0
            return True
        return False

    # Key handling -----------------------------------------------------------

    def handle_key(self, key: str) -> ExplorerAction:
        if self.search_editing:
            return self._handle_search_key(key)
        if self.show_help and key not in self.keymap.help and key not in self.keymap.quit:
            # Any other key dismisses the help overlay.
            self.show_help = False
            return ExplorerAction.HANDLED
        if key in self.keymap.quit:
            return ExplorerAction.QUIT
        if not self._normal_keys.handles(key):
            return ExplorerAction.IGNORED
        self._normal_keys.dispatch(key)
        return ExplorerAction.HANDLED

    def _handle_search_key(self, key: str) -> ExplorerAction:
        if self._search_keys.handles(key):
            self._search_keys.dispatch(key)
            return ExplorerAction.HANDLED
        if len(key) == 1 and key.isprintable():
            self.search_buffer += key
            return ExplorerAction.HANDLED
        return ExplorerAction.IGNORED

    def _search_backspace(self) -> bool:
        self.search_buffer = self.search_buffer[:-1]
        return True

    def _search_clear_buffer(self) -> bool:
        self.search_buffer = ""
        return True

    # Actions ----------------------------------------------------------------

    def begin_search(self) -> bool:
        self.search_editing = True
        self.search_buffer = self.view.query
        return True

    def commit_search(self) -> bool:
        """Apply the prompt text as the active query and leave edit mode."""
        self.search_editing = False
        query = self.search_buffer
        if not query:
            self.view.clear_search()
            return True
        self.view.apply_search(query)
        if self.filter_on_search:
            self.view.set_filter(True)
        if self.view.matches:
            self.view.find_next_match()
        else:
            self.set_status_message(f"No matches for '{query}'")
        return True

    def cancel_search(self) -> bool:
        """Leave edit mode, keeping the previously committed query."""
        self.search_editing = False
        self.search_buffer = self.view.query
        return True

    def toggle_filter(self) -> bool:
        if not self.view.filter_active and not self.view.query:
            self.set_status_message("Search first to filter")
            return True
        self.view.toggle_filter()
        return True

    def toggle_help(self) -> bool:
        self.show_help = not self.show_help
        return True

    def expand_or_open(self) -> bool:
        """Open the cursor node's URL when it has one, otherwise toggle it."""
        node = self.view.current_node
        if node is None:
            return False
        url = extract_url(self.view.tree, node.index)
        if url is not None:
            return self._open_url(url)
        return self.view.toggle_expand()

    def open_current_url(self) -> bool:
        node = self.view.current_node
        if node is None:
            return False
        url = extract_url(self.view.tree, node.index)
        if url is None:
            self.set_status_message("No URL under cursor")
            return True
        return self._open_url(url)

    def _open_url(self, url: str) -> bool:
        if self.actions.open_url(url):
            self.set_status_message(f"Opened {url}")
        else:
            self.set_status_message("Could not open browser")
        return True

    def copy_current(self) -> bool:
        node = self.view.current_node
        if node is None:
            return False
        text = copy_text(self.view.tree, node.index)
        if self.actions.copy_text(text):
            label = node.kind.value if node.kind.is_container else "value"
            self.set_status_message(f"Copied {label}")
        else:
            logger.info("clipboard copy failed for node %d", node.index)
            self.set_status_message("Clipboard unavailable")
        return True
