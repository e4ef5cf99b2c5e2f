"""Session state machine sequencing loading, selection, and exploration.

``UnifiedFlow`` is driven by the event loop: it receives key tokens,
resize notifications, and finished prefetch batches, and switches between
the item selector and the JSON explorer. Once it reaches ``QUITTING`` the
session's ``FlowOutcome`` is fixed.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from ..explorer import ExplorerAction, ExplorerPanel, ExplorerView
from ..items import SelectableItem
from ..render import selector_list_rows, viewport_rows
from ..selector import SelectorPanel
from ..tree_model import InvalidJSONError
from .config import SessionConfig
from .external import ExternalActions
from .prefetch import PrefetchBatch, PrefetchScheduler

logger = logging.getLogger(__name__)


class FlowState(enum.Enum):
    SELECTING_ITEM = "selecting_item"
    LOADING = "loading"
    EXPLORING_TREE = "exploring_tree"
    QUITTING = "quitting"


class OutcomeKind(enum.Enum):
    SELECTED = "selected"
    CANCELLED = "cancelled"
    FATAL = "fatal"


@dataclass(frozen=True)
class FlowOutcome:
    """How a session ended: exactly one of selected, cancelled, or fatal."""

    kind: OutcomeKind
    item: SelectableItem | None = None
    payload: bytes | None = None
    error: Exception | None = None
    warnings: tuple[str, ...] = ()

    @classmethod
    def selected(cls, item: SelectableItem, warnings: tuple[str, ...] = ()) -> FlowOutcome:
        return cls(OutcomeKind.SELECTED, item=item, payload=item.payload, warnings=warnings)

    @classmethod
    def cancelled(cls, warnings: tuple[str, ...] = ()) -> FlowOutcome:
        return cls(OutcomeKind.CANCELLED, warnings=warnings)

    @classmethod
    def fatal(cls, error: Exception, warnings: tuple[str, ...] = ()) -> FlowOutcome:
        return cls(OutcomeKind.FATAL, error=error, warnings=warnings)

    @property
    def is_selected(self) -> bool:
        return self.kind is OutcomeKind.SELECTED

    @property
    def is_cancelled(self) -> bool:
        return self.kind is OutcomeKind.CANCELLED

    @property
    def is_fatal(self) -> bool:
        return self.kind is OutcomeKind.FATAL


class UnifiedFlow:
    """Explicit state machine over selector, loading screen, and explorer.

    Construct with one of the ``for_*`` class methods. ``dirty`` is raised
    whenever the screen needs repainting and cleared by the event loop.
    """

    def __init__(
        self,
        state: FlowState,
        config: SessionConfig,
        actions: ExternalActions,
        *,
        selector: SelectorPanel | None = None,
        explorer: ExplorerPanel | None = None,
        scheduler: PrefetchScheduler | None = None,
        pending_items: Sequence[SelectableItem] = (),
    ) -> None:
        self._state = state
        self.config = config
        self.actions = actions
        self.selector = selector
        self.explorer = explorer
        self.scheduler = scheduler
        self.pending_items = tuple(pending_items)
        self.allow_back = selector is not None or scheduler is not None
        self.selected_item: SelectableItem | None = None
        self.warnings: tuple[str, ...] = ()
        self.outcome: FlowOutcome | None = None
        self.width = 80
        self.height = 24
        self.dirty = True
        self._batch_id: int | None = None
        if selector is not None:
            selector.resize(selector_list_rows(self.height))

    # Construction -----------------------------------------------------------

    @classmethod
    def for_selection(
        cls,
        items: Sequence[SelectableItem],
        config: SessionConfig,
        actions: ExternalActions,
    ) -> UnifiedFlow:
        """Start in the selector with items that already carry payloads."""
        selector = SelectorPanel(list(items), actions, config.keymap, title=config.selector_title)
        return cls(FlowState.SELECTING_ITEM, config, actions, selector=selector)

    @classmethod
    def for_prefetch(
        cls,
        items: Sequence[SelectableItem],
        scheduler: PrefetchScheduler,
        config: SessionConfig,
        actions: ExternalActions,
    ) -> UnifiedFlow:
        """Start on the loading screen; ``start`` launches the prefetch."""
        return cls(FlowState.LOADING, config, actions, scheduler=scheduler, pending_items=items)

    @classmethod
    def for_json(
        cls,
        payload: bytes | str,
        config: SessionConfig,
        actions: ExternalActions,
        *,
        title: str = "",
    ) -> UnifiedFlow:
        """Start straight in the explorer. Raises ``InvalidJSONError``."""
        flow = cls(FlowState.EXPLORING_TREE, config, actions)
        flow.explorer = flow._build_explorer(payload, title)
        return flow

    def _build_explorer(self, payload: bytes | str, title: str) -> ExplorerPanel:
        view = ExplorerView.from_json(
            payload,
            width=self.width,
            height=viewport_rows(self.height),
        )
        return ExplorerPanel(
            view,
            self.actions,
            self.config.keymap,
            title=title,
            filter_on_search=self.config.filter_on_search,
        )

    # Properties -------------------------------------------------------------

    @property
    def state(self) -> FlowState:
        return self._state

    @property
    def loading_message(self) -> str:
        return f"Loading {len(self.pending_items)} items..."

    def _transition(self, state: FlowState) -> None:
        logger.debug("flow %s -> %s", self._state.value, state.value)
        self._state = state
        self.dirty = True

    def _quit(self, outcome: FlowOutcome) -> None:
        if self._state is FlowState.QUITTING:
            return
        self.outcome = outcome
        logger.debug("session outcome: %s", outcome.kind.value)
        self._transition(FlowState.QUITTING)

    # Lifecycle --------------------------------------------------------------

    def start(self) -> None:
        """Launch background work for the initial state."""
        if self._state is FlowState.LOADING and self.scheduler is not None and self._batch_id is None:
            self._batch_id = self.scheduler.start(self.pending_items)

    def drain_prefetch_results(self) -> list[PrefetchBatch]:
        if self.scheduler is None:
            return []
        return self.scheduler.drain_results()

    def resize(self, width: int, height: int) -> None:
        """Propagate a terminal size to the active component; idempotent."""
        if (width, height) == (self.width, self.height):
            return
        self.width = width
        self.height = height
        if self.selector is not None:
            self.selector.resize(selector_list_rows(height))
        if self.explorer is not None:
            self.explorer.view.resize(width, viewport_rows(height))
        self.dirty = True

    def tick(self, now: float) -> None:
        """Expire transient status messages."""
        for panel in (self.selector, self.explorer):
            if panel is not None and panel.expire_status_message(now):
                self.dirty = True

    # Events -----------------------------------------------------------------

    def handle_prefetch_complete(self, batch: PrefetchBatch) -> None:
        if self._state is not FlowState.LOADING:
            return
        if self._batch_id is not None and batch.batch_id not in (0, self._batch_id):
            return
        if batch.cancelled:
            self._quit(FlowOutcome.cancelled())
            return
        self.warnings = batch.warnings
        error = batch.fatal_error
        if error is not None:
            self._quit(FlowOutcome.fatal(error, self.warnings))
            return
        self.selector = SelectorPanel(
            batch.items,
            self.actions,
            self.config.keymap,
            title=self.config.selector_title,
            warnings=self.warnings,
        )
        self.selector.resize(selector_list_rows(self.height))
        self._transition(FlowState.SELECTING_ITEM)

    def handle_key(self, key: str) -> None:
        if not key or self._state is FlowState.QUITTING:
            return
        if key in self.config.keymap.force_quit:
            self.force_quit()
            return
        self.dirty = True
        if self._state is FlowState.SELECTING_ITEM:
            self._handle_selector_key(key)
        elif self._state is FlowState.LOADING:
            if key in self.config.keymap.cancel or key in self.config.keymap.quit:
                self.force_quit()
        elif self._state is FlowState.EXPLORING_TREE:
            self._handle_explorer_key(key)

    def _handle_selector_key(self, key: str) -> None:
        assert self.selector is not None
        self.selector.handle_key(key)
        if self.selector.choice is not None:
            self._enter_explorer(self.selector.choice)
        elif self.selector.cancelled:
            self._quit(FlowOutcome.cancelled(self.warnings))

    def _handle_explorer_key(self, key: str) -> None:
        assert self.explorer is not None
        if self.explorer.handle_key(key) is not ExplorerAction.QUIT:
            return
        if self.allow_back and self.selector is not None:
            self._back_to_selector()
        else:
            self._quit(self._exit_outcome())

    def _enter_explorer(self, item: SelectableItem) -> None:
        if item.payload is None:
            self._quit(FlowOutcome.fatal(ValueError(f"no data prefetched for {item.title}"), self.warnings))
            return
        try:
            self.explorer = self._build_explorer(item.payload, item.title)
        except InvalidJSONError as exc:
            self._quit(FlowOutcome.fatal(exc, self.warnings))
            return
        self.selected_item = item
        self._transition(FlowState.EXPLORING_TREE)

    def _back_to_selector(self) -> None:
        assert self.selector is not None
        self.explorer = None
        self.selected_item = None
        self.selector.reset()
        self._transition(FlowState.SELECTING_ITEM)

    def _exit_outcome(self) -> FlowOutcome:
        if self._state is FlowState.EXPLORING_TREE and self.selected_item is not None:
            return FlowOutcome.selected(self.selected_item, self.warnings)
        return FlowOutcome.cancelled(self.warnings)

    def force_quit(self) -> None:
        """End the session now, cancelling any prefetch in flight."""
        if self.scheduler is not None:
            self.scheduler.cancel()
        self._quit(self._exit_outcome())
