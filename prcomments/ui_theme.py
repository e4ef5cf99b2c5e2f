"""UI theme definitions and selection helpers.

Themes are ANSI palettes for the explorer, selector, and chrome rows. JSON
highlighting for non-interactive output uses a Pygments style instead.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reset: str
    reverse: str
    title: str
    status: str
    warning: str
    cursor_marker: str
    expand_glyph: str
    json_key: str
    json_key_match: str
    json_string: str
    json_number: str
    json_boolean: str
    json_null: str
    json_summary: str
    search_query: str
    search_hint: str
    selector_selected: str
    selector_description: str
    help_heading: str
    help_key: str
    help_dim: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    reverse="\033[48;5;237m",
    title="\033[1;38;5;170m",
    status="\033[38;5;170m",
    warning="\033[38;5;214m",
    cursor_marker="\033[38;5;170m",
    expand_glyph="\033[38;5;244m",
    json_key="\033[38;5;39m",
    json_key_match="\033[1;38;5;226m",
    json_string="\033[38;5;142m",
    json_number="\033[38;5;170m",
    json_boolean="\033[38;5;208m",
    json_null="\033[38;5;241m",
    json_summary="\033[38;5;241m",
    search_query="\033[1;38;5;81m",
    search_hint="\033[2;38;5;250m",
    selector_selected="\033[1;38;5;170m",
    selector_description="\033[38;5;241m",
    help_heading="\033[1;38;5;81m",
    help_key="\033[38;5;229m",
    help_dim="\033[2;38;5;250m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    reverse="\033[48;5;24m",
    title="\033[1;38;5;45m",
    status="\033[38;5;45m",
    warning="\033[38;5;215m",
    cursor_marker="\033[38;5;45m",
    expand_glyph="\033[38;5;73m",
    json_key="\033[38;5;117m",
    json_key_match="\033[1;38;5;229m",
    json_string="\033[38;5;114m",
    json_number="\033[38;5;153m",
    json_boolean="\033[38;5;215m",
    json_null="\033[2;38;5;110m",
    json_summary="\033[2;38;5;110m",
    search_query="\033[1;38;5;45m",
    search_hint="\033[2;38;5;110m",
    selector_selected="\033[1;38;5;45m",
    selector_description="\033[2;38;5;110m",
    help_heading="\033[1;38;5;45m",
    help_key="\033[38;5;153m",
    help_dim="\033[2;38;5;110m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    reverse="\033[7m",
    title="",
    status="",
    warning="",
    cursor_marker="",
    expand_glyph="",
    json_key="",
    json_key_match="",
    json_string="",
    json_number="",
    json_boolean="",
    json_null="",
    json_summary="",
    search_query="",
    search_hint="",
    selector_selected="",
    selector_description="",
    help_heading="",
    help_key="",
    help_dim="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode.

    ``no_color`` selects the plain palette, which keeps reverse video so the
    cursor row stays visible on monochrome terminals.
    """
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
