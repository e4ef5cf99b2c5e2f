"""Item selector shown before exploring a payload."""

from .matching import fuzzy_score, match_items
from .panel import DEFAULT_TITLE, SelectorPanel

__all__ = ["DEFAULT_TITLE", "SelectorPanel", "fuzzy_score", "match_items"]
