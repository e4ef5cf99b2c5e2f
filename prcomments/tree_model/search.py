"""Search matching and filter-mode visibility for JSON trees."""

from __future__ import annotations

from .build import iter_ancestors
from .types import JsonTree
from .values import scalar_text


def node_matches(tree: JsonTree, index: int, folded_query: str) -> bool:
    """Return whether one node's key or scalar value contains ``folded_query``."""
    node = tree.nodes[index]
    if folded_query in node.key.casefold():
        return True
    if node.kind.is_container:
        return False
    return folded_query in scalar_text(node.kind, node.value).casefold()


def find_matching_nodes(tree: JsonTree, query: str) -> frozenset[int]:
    """Return arena indices whose key or scalar value contains ``query``.

    Matching is a case-insensitive substring test. An empty query matches
    nothing: no query means no highlighting, not "everything matches".
    """
    if not query:
        return frozenset()
    folded = query.casefold()
    return frozenset(node.index for node in tree.nodes if node_matches(tree, node.index, folded))


def filter_visible_nodes(tree: JsonTree, matches: frozenset[int]) -> frozenset[int]:
    """Return matches plus every ancestor, keeping each match reachable."""
    visible: set[int] = set()
    for index in matches:
        visible.add(index)
        for ancestor in iter_ancestors(tree, index):
            if ancestor.index in visible:
                break
            visible.add(ancestor.index)
    return frozenset(visible)


def expand_match_ancestors(tree: JsonTree, matches: frozenset[int]) -> None:
    """Expand every container on the path from the root to each match."""
    for index in matches:
        for ancestor in iter_ancestors(tree, index):
            ancestor.expanded = True
