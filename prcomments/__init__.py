"""Public package surface for prcomments.

Exports the session entrypoints, their outcome type, and the item record
handed to the selector. Implementation lives in submodules.
"""

from __future__ import annotations

from .items import SelectableItem
from .runtime import run_explore_only, run_selection
from .runtime.flow import FlowOutcome, OutcomeKind


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = [
    "FlowOutcome",
    "OutcomeKind",
    "SelectableItem",
    "main",
    "run_explore_only",
    "run_selection",
]
