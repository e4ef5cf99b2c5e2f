"""JSON tree datatypes shared by the explorer modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class NodeKind(str, Enum):
    """JSON value kind carried by one tree node."""

    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"

    @property
    def is_container(self) -> bool:
        return self in (NodeKind.OBJECT, NodeKind.ARRAY)


@dataclass
class JsonNode:
    """One key/value pair or array element stored in a ``JsonTree`` arena.

    ``children`` and ``parent`` are arena indices. The parent link is only
    used for lookups such as "collapse the enclosing node".
    """

    index: int
    key: str
    kind: NodeKind
    depth: int
    value: object = None
    parent: int | None = None
    children: tuple[int, ...] = ()
    expanded: bool = False

    @property
    def has_children(self) -> bool:
        return bool(self.children)


@dataclass
class JsonTree:
    """Index-based arena holding every node of one decoded JSON document.

    Index ``0`` is always the synthetic root. Children order is fixed at
    construction; only ``expanded`` flags change afterwards.
    """

    nodes: list[JsonNode] = field(default_factory=list)

    ROOT = 0

    @property
    def root(self) -> JsonNode:
        return self.nodes[self.ROOT]

    def __len__(self) -> int:
        return len(self.nodes)

    def __getitem__(self, index: int) -> JsonNode:
        return self.nodes[index]

    def parent_of(self, index: int) -> JsonNode | None:
        parent = self.nodes[index].parent
        return None if parent is None else self.nodes[parent]


@dataclass(frozen=True)
class FlatEntry:
    """One visible tree node in the current flattening.

    ``row_span`` and ``row_offset`` are filled in by the layout engine; a
    freshly flattened entry spans one row at offset equal to its position.
    Entries are only valid until the next expand/collapse/search change.
    """

    node: int
    sequence_index: int
    depth: int
    matches_search: bool = False
    row_span: int = 1
    row_offset: int = 0
