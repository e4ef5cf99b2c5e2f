"""Scalar formatting, copy payloads, and URL detection for tree nodes."""

from __future__ import annotations

import json
import re

from .build import subtree_value
from .types import JsonTree, NodeKind

URL_RE = re.compile(r"https?://\S+")
URL_KEY_HINTS: tuple[str, ...] = ("url", "link", "permalink", "href")


def scalar_text(kind: NodeKind, value: object) -> str:
    """Return the plain string form of a scalar value.

    JSON literals keep their JSON spelling (``true``, ``false``, ``null``)
    and numbers are formatted the way ``json.dumps`` writes them.
    """
    if kind is NodeKind.STRING:
        return str(value)
    if kind is NodeKind.NULL:
        return "null"
    if kind is NodeKind.BOOLEAN:
        return "true" if value else "false"
    if kind is NodeKind.NUMBER:
        return json.dumps(value)
    return ""


def copy_text(tree: JsonTree, index: int) -> str:
    """Return clipboard text for one node.

    Objects and arrays are serialized back to indented JSON; scalars copy as
    their plain value (strings unquoted).
    """
    node = tree.nodes[index]
    if node.kind.is_container:
        return json.dumps(subtree_value(tree, index), indent=2, ensure_ascii=False)
    return scalar_text(node.kind, node.value)


def extract_url(tree: JsonTree, index: int) -> str | None:
    """Return the URL a node points at, or ``None`` when it is not URL-like.

    A string value containing an ``http(s)://`` URL qualifies, as does any
    scalar under a key that hints at a link (``url``, ``link``, ``permalink``,
    ``href``) whose text contains one.
    """
    node = tree.nodes[index]
    if node.kind.is_container:
        return None
    text = scalar_text(node.kind, node.value)
    match = URL_RE.search(text)
    if match is None:
        return None
    if node.kind is NodeKind.STRING:
        return match.group(0)
    key = node.key.casefold()
    if any(hint in key for hint in URL_KEY_HINTS):
        return match.group(0)
    return None
