"""Public runtime orchestration entry points.

This package groups the session bootstraps (``run_selection`` and
``run_explore_only``) with the prefetch, flow, and event-loop layers they
compose.
"""

from __future__ import annotations


def run_selection(*args, **kwargs):
    """Lazily import the selection entrypoint to avoid package-import cycles."""
    from .app import run_selection as _run_selection

    return _run_selection(*args, **kwargs)


def run_explore_only(*args, **kwargs):
    """Lazily import the explore-only entrypoint to avoid package-import cycles."""
    from .app import run_explore_only as _run_explore_only

    return _run_explore_only(*args, **kwargs)


__all__ = [
    "run_explore_only",
    "run_selection",
]
