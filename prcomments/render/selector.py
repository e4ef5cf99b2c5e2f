"""Item selector and loading screen composition."""

from __future__ import annotations

from dataclasses import dataclass

from ..ansi import clip_ansi_line, fit_ansi_line, selected_with_ansi
from ..input.keymap import DEFAULT_KEYMAP, Keymap, keys_label
from ..items import SelectableItem
from ..ui_theme import DEFAULT_THEME, UITheme
from .help import selector_footer_hint

SPINNER_FRAMES: tuple[str, ...] = ("|", "/", "-", "\\")
SELECTOR_CHROME_ROWS = 3
SELECTED_MARKER = "│ "


def selector_list_rows(term_rows: int) -> int:
    """Return rows available for the item list."""
    return max(1, term_rows - SELECTOR_CHROME_ROWS)


@dataclass
class SelectorRenderContext:
    title: str
    items: list[SelectableItem]
    matches: list[int]
    selected: int
    list_start: int
    width: int
    height: int
    query: str = ""
    filter_editing: bool = False
    warnings: tuple[str, ...] = ()
    status_message: str = ""
    keymap: Keymap = DEFAULT_KEYMAP
    theme: UITheme = DEFAULT_THEME


def _styled(text: str, style: str, theme: UITheme) -> str:
    if not style or not text:
        return text
    return f"{style}{text}{theme.reset}"


def _summary_row(context: SelectorRenderContext) -> str:
    theme = context.theme
    if context.filter_editing or context.query:
        cursor = "█" if context.filter_editing else ""
        prompt = f"Filter: {context.query}{cursor}"
        return _styled(prompt, theme.search_query, theme)
    summary = f"{len(context.items)} items"
    if context.warnings:
        return summary + "  " + _styled(f"{len(context.warnings)} failed to load", theme.warning, theme)
    return _styled(summary, theme.search_hint, theme)


def _item_rows(context: SelectorRenderContext) -> list[str]:
    theme = context.theme
    rows: list[str] = []
    if not context.matches:
        rows.append(_styled("  No items match the filter.", theme.search_hint, theme))
        return rows
    for position in range(context.list_start, len(context.matches)):
        item = context.items[context.matches[position]]
        if position == context.selected:
            title = SELECTED_MARKER + _styled(item.title, theme.selector_selected, theme)
            description = SELECTED_MARKER + _styled(item.description, theme.selector_description, theme)
            rows.append(selected_with_ansi(fit_ansi_line(title, context.width), theme.reverse))
            rows.append(selected_with_ansi(fit_ansi_line(description, context.width), theme.reverse))
        else:
            rows.append(clip_ansi_line("  " + item.title, context.width))
            rows.append(clip_ansi_line("  " + _styled(item.description, theme.selector_description, theme), context.width))
        if len(rows) >= context.height:
            break
    return rows


def render_selector_screen(context: SelectorRenderContext) -> list[str]:
    """Compose all rows of the selector screen."""
    theme = context.theme
    header = [
        clip_ansi_line(_styled(context.title, theme.title, theme), context.width),
        clip_ansi_line(_summary_row(context), context.width),
    ]
    body = _item_rows(context)[: context.height]
    body.extend([""] * (context.height - len(body)))
    if context.status_message:
        footer = _styled(context.status_message, theme.status, theme)
    else:
        footer = _styled(selector_footer_hint(context.keymap), theme.search_hint, theme)
    return header + body + [clip_ansi_line(footer, context.width)]


def render_loading_screen(
    message: str,
    spinner_frame: int,
    width: int,
    height: int,
    keymap: Keymap = DEFAULT_KEYMAP,
    theme: UITheme = DEFAULT_THEME,
) -> list[str]:
    """Compose the loading screen shown while payloads are prefetched."""
    spinner = SPINNER_FRAMES[spinner_frame % len(SPINNER_FRAMES)]
    rows = [
        "",
        clip_ansi_line(f"  {_styled(spinner, theme.status, theme)} {message}", width),
        "",
        clip_ansi_line(_styled(f"  {keys_label(keymap.cancel)} cancel", theme.search_hint, theme), width),
    ]
    rows = rows[: max(1, height)]
    rows.extend([""] * (height - len(rows)))
    return rows
