"""Arena-backed node tree.

Nodes live in a flat list owned by ``Document`` and refer to each other by
integer index.  ``children`` is the only owning relation; ``parent``,
``prev`` and ``next`` are plain indices kept consistent by every mutating
method so that callers never touch links directly.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum

# Elements without an end tag
VOID_ELEMENTS: frozenset[str] = frozenset(
    (
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "source",
        "track",
        "wbr",
    )
)


class NodeKind(Enum):
    """Closed set of node variants produced by the parser adapter."""

    TEXT = "text"
    ELEMENT = "element"
    COMMENT = "comment"
    OTHER = "other"


@dataclass(slots=True)
class Node:
    """One arena slot.

    Attributes:
        kind: Node variant.
        data: Text payload (TEXT, still entity-encoded) or raw markup
              (COMMENT, OTHER).  Unused for elements.
        tag: Lowercase tag name for elements.
        attrs: Attribute name -> raw value (``None`` for bare attributes).
        children: Owned child ids in document order.
        parent: Parent id, ``None`` for root-level or detached nodes.
        prev: Previous sibling id.
        next: Next sibling id.
    """

    kind: NodeKind
    data: str = ""
    tag: str = ""
    attrs: dict[str, str | None] = field(default_factory=dict)
    children: list[int] = field(default_factory=list)
    parent: int | None = None
    prev: int | None = None
    next: int | None = None

    @property
    def is_text(self) -> bool:
        return self.kind is NodeKind.TEXT

    @property
    def is_element(self) -> bool:
        return self.kind is NodeKind.ELEMENT


class Document:
    """Mutable node arena with a top-level ``roots`` sequence."""

    __slots__ = ("_attached_roots", "nodes", "roots")

    def __init__(self) -> None:
        self.nodes: list[Node] = []
        self.roots: list[int] = []
        self._attached_roots: set[int] = set()

    def __getitem__(self, node_id: int) -> Node:
        return self.nodes[node_id]

    def __len__(self) -> int:
        return len(self.nodes)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def _add(self, node: Node) -> int:
        self.nodes.append(node)
        return len(self.nodes) - 1

    def new_text(self, data: str) -> int:
        return self._add(Node(NodeKind.TEXT, data=data))

    def new_comment(self, markup: str) -> int:
        return self._add(Node(NodeKind.COMMENT, data=markup))

    def new_other(self, markup: str) -> int:
        return self._add(Node(NodeKind.OTHER, data=markup))

    def new_element(
        self,
        tag: str,
        attrs: dict[str, str | None] | None = None,
        children: Iterable[int] = (),
    ) -> int:
        """Create an element and adopt *children* (detaching them first)."""
        node_id = self._add(Node(NodeKind.ELEMENT, tag=tag, attrs=dict(attrs or {})))
        for child in children:
            self.append_child(node_id, child)
        return node_id

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def container(self, node_id: int) -> list[int]:
        """Return the sequence that owns *node_id* (parent's children or roots)."""
        parent = self.nodes[node_id].parent
        return self.roots if parent is None else self.nodes[parent].children

    def index_of(self, node_id: int) -> int:
        """Position of an attached node inside its owning sequence."""
        if not self.is_attached(node_id):
            msg = f"Node {node_id} is not attached to the tree"
            raise ValueError(msg)
        return self.container(node_id).index(node_id)

    def is_attached(self, node_id: int) -> bool:
        node = self.nodes[node_id]
        if node.parent is not None:
            return True
        return node_id in self._attached_roots

    def iter_preorder(
        self, opaque_tags: Iterable[str] = ()
    ) -> Iterator[tuple[int, bool]]:
        """Yield ``(node_id, inside_opaque)`` in document order.

        Children of an element whose tag is in *opaque_tags* are still
        yielded, flagged ``True``, so callers decide whether to skip them.
        """
        opaque = frozenset(opaque_tags)
        stack: list[tuple[int, bool]] = [(r, False) for r in reversed(self.roots)]
        while stack:
            node_id, hidden = stack.pop()
            yield node_id, hidden
            node = self.nodes[node_id]
            if not node.children:
                continue
            child_hidden = hidden or (node.is_element and node.tag in opaque)
            stack.extend((c, child_hidden) for c in reversed(node.children))

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def _relink(self, parent: int | None) -> None:
        """Rewrite parent/sibling links for every member of a sequence."""
        seq = self.roots if parent is None else self.nodes[parent].children
        previous: int | None = None
        for node_id in seq:
            node = self.nodes[node_id]
            node.parent = parent
            node.prev = previous
            node.next = None
            if previous is not None:
                self.nodes[previous].next = node_id
            previous = node_id
        if parent is None:
            self._attached_roots = set(seq)

    def _detach(self, node_id: int) -> None:
        if not self.is_attached(node_id):
            return
        parent = self.nodes[node_id].parent
        seq = self.container(node_id)
        seq.remove(node_id)
        node = self.nodes[node_id]
        node.parent = node.prev = node.next = None
        self._relink(parent)

    def splice(self, parent: int | None, index: int, new_ids: Iterable[int]) -> None:
        """Insert *new_ids* into *parent*'s sequence at *index*.

        Nodes that are already attached elsewhere are moved.
        """
        ids = list(new_ids)
        for node_id in ids:
            if node_id == parent:
                msg = f"Cannot insert node {node_id} into itself"
                raise ValueError(msg)
            self._detach(node_id)
        seq = self.roots if parent is None else self.nodes[parent].children
        seq[index:index] = ids
        self._relink(parent)

    def append_child(self, parent: int | None, child: int) -> None:
        seq = self.roots if parent is None else self.nodes[parent].children
        # An index past the end still appends if child is moved within seq
        self.splice(parent, len(seq), [child])

    def insert_before(self, anchor: int, new_ids: Iterable[int]) -> None:
        self.splice(self.nodes[anchor].parent, self.index_of(anchor), new_ids)

    def insert_after(self, anchor: int, new_ids: Iterable[int]) -> None:
        self.splice(self.nodes[anchor].parent, self.index_of(anchor) + 1, new_ids)

    def replace(self, old: int, new: int) -> None:
        """Put *new* in *old*'s slot and detach *old*."""
        self._detach(new)
        parent = self.nodes[old].parent
        seq = self.container(old)
        seq[seq.index(old)] = new
        node = self.nodes[old]
        node.parent = node.prev = node.next = None
        self._relink(parent)

    def remove(self, node_id: int) -> None:
        """Detach *node_id*; a no-op when it is already detached."""
        self._detach(node_id)
