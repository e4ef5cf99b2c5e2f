"""JSON tree construction and expand-state helpers."""

from __future__ import annotations

import json
from collections.abc import Iterator

from .types import JsonNode, JsonTree, NodeKind

# The synthetic root is not a level of its own: the root plus the first two
# levels of keys start expanded.
AUTO_EXPAND_LEVELS = 2


class InvalidJSONError(ValueError):
    """Raised when explorer input cannot be decoded as JSON."""


def kind_of(value: object) -> NodeKind:
    """Classify a decoded JSON value."""
    if value is None:
        return NodeKind.NULL
    # bool is an int subclass, so it has to be checked first.
    if isinstance(value, bool):
        return NodeKind.BOOLEAN
    if isinstance(value, (int, float)):
        return NodeKind.NUMBER
    if isinstance(value, str):
        return NodeKind.STRING
    if isinstance(value, dict):
        return NodeKind.OBJECT
    if isinstance(value, (list, tuple)):
        return NodeKind.ARRAY
    raise TypeError(f"unsupported JSON value type: {type(value).__name__}")


def auto_expanded(depth: int) -> bool:
    """Return the initial expand flag for a node at ``depth``."""
    return depth <= AUTO_EXPAND_LEVELS


def build_tree(value: object, key: str = "") -> JsonTree:
    """Build a ``JsonTree`` arena from a decoded JSON value.

    Nodes are appended in depth-first pre-order, so arena order matches the
    fully expanded display order. Uses an explicit stack so deeply nested
    documents cannot exhaust the interpreter recursion limit.
    """
    tree = JsonTree()
    # (value, key, depth, parent index)
    stack: list[tuple[object, str, int, int | None]] = [(value, key, 0, None)]
    pending_children: dict[int, list[int]] = {}

    while stack:
        item, item_key, depth, parent = stack.pop()
        kind = kind_of(item)
        node = JsonNode(
            index=len(tree.nodes),
            key=item_key,
            kind=kind,
            depth=depth,
            value=None if kind.is_container else item,
            parent=parent,
            expanded=auto_expanded(depth),
        )
        tree.nodes.append(node)
        if parent is not None:
            pending_children[parent].append(node.index)

        if kind is NodeKind.OBJECT:
            pending_children[node.index] = []
            pairs = [(child, str(child_key)) for child_key, child in item.items()]
        elif kind is NodeKind.ARRAY:
            pending_children[node.index] = []
            pairs = [(child, f"[{idx}]") for idx, child in enumerate(item)]
        else:
            continue
        for child, child_key in reversed(pairs):
            stack.append((child, child_key, depth + 1, node.index))

    for index, children in pending_children.items():
        tree.nodes[index].children = tuple(children)
    return tree


def parse_json_tree(data: bytes | str) -> JsonTree:
    """Decode JSON text and build its tree.

    Raises ``InvalidJSONError`` for malformed input; there is no partial tree.
    """
    try:
        value = json.loads(data)
    except (ValueError, RecursionError) as exc:
        raise InvalidJSONError(f"invalid JSON: {exc}") from exc
    return build_tree(value)


def iter_subtree(tree: JsonTree, index: int) -> Iterator[JsonNode]:
    """Yield ``index`` and all of its descendants in pre-order."""
    stack = [index]
    while stack:
        node = tree.nodes[stack.pop()]
        yield node
        stack.extend(reversed(node.children))


def iter_ancestors(tree: JsonTree, index: int) -> Iterator[JsonNode]:
    """Yield ancestors of ``index`` from its parent up to the root."""
    parent = tree.nodes[index].parent
    while parent is not None:
        node = tree.nodes[parent]
        yield node
        parent = node.parent


def toggle_expanded(tree: JsonTree, index: int) -> bool:
    """Flip the expand flag of a node with children.

    Returns whether anything changed; childless nodes are left alone.
    """
    node = tree.nodes[index]
    if not node.children:
        return False
    node.expanded = not node.expanded
    return True


def set_expanded(tree: JsonTree, index: int, expanded: bool) -> bool:
    """Set one node's expand flag, returning whether it changed."""
    node = tree.nodes[index]
    if not node.children or node.expanded == expanded:
        return False
    node.expanded = expanded
    return True


def set_all_expanded(tree: JsonTree, expanded: bool) -> None:
    """Expand or collapse every node in the tree."""
    for node in tree.nodes:
        node.expanded = expanded


def snapshot_expanded(tree: JsonTree) -> tuple[bool, ...]:
    """Capture every node's expand flag in arena order."""
    return tuple(node.expanded for node in tree.nodes)


def restore_expanded(tree: JsonTree, snapshot: tuple[bool, ...]) -> None:
    """Restore expand flags captured by :func:`snapshot_expanded`."""
    for node, expanded in zip(tree.nodes, snapshot):
        node.expanded = expanded


def subtree_value(tree: JsonTree, index: int) -> object:
    """Rebuild the decoded JSON value rooted at ``index``."""
    node = tree.nodes[index]
    if not node.kind.is_container:
        return node.value

    built: dict[int, object] = {}
    for current in reversed(list(iter_subtree(tree, index))):
        if current.kind is NodeKind.OBJECT:
            built[current.index] = {tree.nodes[c].key: built.pop(c) for c in current.children}
        elif current.kind is NodeKind.ARRAY:
            built[current.index] = [built.pop(c) for c in current.children]
        else:
            built[current.index] = current.value
    return built[index]
