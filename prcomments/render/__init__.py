"""Rendering: value wrapping, physical-row layout, and screen composition.

Renderers return lists of styled rows; writing them to the terminal is the
runtime's job.
"""

from .explorer import ExplorerRenderContext, render_explorer_screen, viewport_rows
from .layout import MIN_VALUE_WIDTH, EntryLayout, TreeLayout, layout_entries
from .selector import (
    SPINNER_FRAMES,
    SelectorRenderContext,
    render_loading_screen,
    render_selector_screen,
    selector_list_rows,
)
from .wrap import wrap_value

__all__ = [
    "MIN_VALUE_WIDTH",
    "SPINNER_FRAMES",
    "EntryLayout",
    "ExplorerRenderContext",
    "SelectorRenderContext",
    "TreeLayout",
    "layout_entries",
    "render_explorer_screen",
    "render_loading_screen",
    "render_selector_screen",
    "selector_list_rows",
    "viewport_rows",
    "wrap_value",
]
