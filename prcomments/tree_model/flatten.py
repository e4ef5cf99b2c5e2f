"""Tree flattening into cursor-addressable entry lists."""

from __future__ import annotations

from collections.abc import Collection

from .types import FlatEntry, JsonTree


def flatten_tree(
    tree: JsonTree,
    matches: Collection[int] = frozenset(),
    visible: Collection[int] | None = None,
) -> list[FlatEntry]:
    """Return visible nodes in depth-first pre-order.

    Children are visited only when their parent is expanded. ``matches`` marks
    entries for search highlighting and ``visible`` (filter mode) restricts
    output to a node subset; a node outside ``visible`` hides its subtree.
    A fresh list is built on every call.
    """
    entries: list[FlatEntry] = []
    if not tree.nodes:
        return entries

    stack = [tree.ROOT]
    while stack:
        index = stack.pop()
        if visible is not None and index not in visible:
            continue
        node = tree.nodes[index]
        position = len(entries)
        entries.append(
            FlatEntry(
                node=index,
                sequence_index=position,
                depth=node.depth,
                matches_search=index in matches,
                row_offset=position,
            )
        )
        if node.expanded and node.children:
            stack.extend(reversed(node.children))
    return entries


def index_of_node(entries: list[FlatEntry], node: int) -> int | None:
    """Return the sequence index showing ``node``, or ``None`` when hidden."""
    for entry in entries:
        if entry.node == node:
            return entry.sequence_index
    return None
