"""JSON tree model: arena construction, flattening, search, and node values.

The tree is built once per explorer session. Expand flags are the only
mutable state; every structural change re-flattens into fresh entries.
"""

from __future__ import annotations

from .build import (
    AUTO_EXPAND_LEVELS,
    InvalidJSONError,
    auto_expanded,
    build_tree,
    iter_ancestors,
    iter_subtree,
    kind_of,
    parse_json_tree,
    restore_expanded,
    set_all_expanded,
    set_expanded,
    snapshot_expanded,
    subtree_value,
    toggle_expanded,
)
from .flatten import flatten_tree, index_of_node
from .search import expand_match_ancestors, filter_visible_nodes, find_matching_nodes
from .types import FlatEntry, JsonNode, JsonTree, NodeKind
from .values import copy_text, extract_url, scalar_text

__all__ = [
    "AUTO_EXPAND_LEVELS",
    "FlatEntry",
    "InvalidJSONError",
    "JsonNode",
    "JsonTree",
    "NodeKind",
    "auto_expanded",
    "build_tree",
    "copy_text",
    "expand_match_ancestors",
    "extract_url",
    "filter_visible_nodes",
    "find_matching_nodes",
    "flatten_tree",
    "index_of_node",
    "iter_ancestors",
    "iter_subtree",
    "kind_of",
    "parse_json_tree",
    "restore_expanded",
    "scalar_text",
    "set_all_expanded",
    "set_expanded",
    "snapshot_expanded",
    "subtree_value",
    "toggle_expanded",
]
