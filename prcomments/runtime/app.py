"""Session bootstrap for selection and explore-only runs.

Checks for a usable terminal, resolves session config and side channels,
builds the initial ``UnifiedFlow``, and runs it in raw mode.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from typing import TextIO

from ..items import SelectableItem
from ..tree_model import InvalidJSONError
from .config import SessionConfig, load_session_config
from .external import ExternalActions, default_external_actions
from .flow import FlowOutcome, UnifiedFlow
from .loop import RuntimeLoopTiming, run_session
from .prefetch import FetchFn, PrefetchFailedError, PrefetchScheduler, reuse_known_payloads
from .terminal import ensure_interactive

logger = logging.getLogger(__name__)


def build_selection_flow(
    items: Sequence[SelectableItem],
    fetch: FetchFn | None,
    config: SessionConfig,
    actions: ExternalActions,
) -> UnifiedFlow | FlowOutcome:
    """Return the initial flow for a selection session, or a fatal outcome.

    Items lacking payloads send the session through the loading screen first;
    items that already carry one are reused without fetching.
    """
    if not items:
        return FlowOutcome.fatal(PrefetchFailedError("no items to select"))
    if all(item.payload is not None for item in items):
        return UnifiedFlow.for_selection(items, config, actions)
    if fetch is None:
        return FlowOutcome.fatal(ValueError("items without payloads need a fetch function"))
    scheduler = PrefetchScheduler(reuse_known_payloads(fetch), max_workers=config.max_workers)
    return UnifiedFlow.for_prefetch(items, scheduler, config, actions)


def run_selection(
    items: Sequence[SelectableItem],
    fetch: FetchFn | None = None,
    *,
    config: SessionConfig | None = None,
    actions: ExternalActions | None = None,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
    timing: RuntimeLoopTiming = RuntimeLoopTiming(),
) -> FlowOutcome:
    """Let the user pick one of ``items`` and explore its payload.

    Raises ``InteractiveUnavailableError`` before building any state when
    stdin or stdout is not a terminal.
    """
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    ensure_interactive(stdin, stdout)
    config = config if config is not None else load_session_config()
    actions = actions if actions is not None else default_external_actions()

    flow = build_selection_flow(items, fetch, config, actions)
    if isinstance(flow, FlowOutcome):
        return flow
    logger.info("starting selection session with %d items", len(items))
    return run_session(flow, stdin.fileno(), stdout.fileno(), timing)


def run_explore_only(
    payload: bytes | str,
    *,
    title: str = "",
    config: SessionConfig | None = None,
    actions: ExternalActions | None = None,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
    timing: RuntimeLoopTiming = RuntimeLoopTiming(),
) -> FlowOutcome:
    """Explore one JSON document with no selector to return to.

    Malformed JSON yields a fatal outcome without touching the terminal.
    """
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    ensure_interactive(stdin, stdout)
    config = config if config is not None else load_session_config()
    actions = actions if actions is not None else default_external_actions()

    try:
        flow = UnifiedFlow.for_json(payload, config, actions, title=title)
    except InvalidJSONError as exc:
        return FlowOutcome.fatal(exc)
    logger.info("starting explore-only session")
    return run_session(flow, stdin.fileno(), stdout.fileno(), timing)
