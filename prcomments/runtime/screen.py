"""Frame composition for the active flow state and raw frame output."""

from __future__ import annotations

import os

from ..render import (
    ExplorerRenderContext,
    SelectorRenderContext,
    render_explorer_screen,
    render_loading_screen,
    render_selector_screen,
    selector_list_rows,
    viewport_rows,
)
from .flow import FlowState, UnifiedFlow


def compose_screen(flow: UnifiedFlow, spinner_frame: int = 0) -> list[str]:
    """Return the rows to paint for the flow's current state."""
    theme = flow.config.theme
    keymap = flow.config.keymap
    width, height = flow.width, flow.height

    if flow.state is FlowState.EXPLORING_TREE and flow.explorer is not None:
        panel = flow.explorer
        view = panel.view
        return render_explorer_screen(
            ExplorerRenderContext(
                tree=view.tree,
                layout=view.layout,
                cursor=view.cursor,
                top_row=view.top_row,
                width=width,
                height=viewport_rows(height),
                title=panel.title,
                query=view.query,
                match_count=view.match_count,
                filter_active=view.filter_active,
                search_editing=panel.search_editing,
                search_buffer=panel.search_buffer,
                status_message=panel.status_message,
                show_help=panel.show_help,
                keymap=keymap,
                theme=theme,
            )
        )

    if flow.state is FlowState.SELECTING_ITEM and flow.selector is not None:
        selector = flow.selector
        return render_selector_screen(
            SelectorRenderContext(
                title=selector.title,
                items=selector.items,
                matches=selector.matches,
                selected=selector.selected,
                list_start=selector.list_start,
                width=width,
                height=selector_list_rows(height),
                query=selector.query,
                filter_editing=selector.filter_editing,
                warnings=selector.warnings,
                status_message=selector.status_message,
                keymap=keymap,
                theme=theme,
            )
        )

    if flow.state is FlowState.LOADING:
        return render_loading_screen(flow.loading_message, spinner_frame, width, height, keymap, theme)
    return []


def write_screen(fd: int, rows: list[str]) -> None:
    """Write a full-screen redraw of ``rows`` to ``fd``."""
    out: list[str] = ["\033[H\033[J"]
    for index, row in enumerate(rows):
        if index:
            out.append("\r\n")
        out.append(row)
        if "\033" in row:
            out.append("\033[0m")
    os.write(fd, "".join(out).encode("utf-8", errors="replace"))
