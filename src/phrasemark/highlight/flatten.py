"""Text flattening: the searchable character stream of a document.

``iter_text_nodes`` is shared with the node locator; both passes must visit
text nodes in the same order for offsets to line up.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from phrasemark.dom.node import Document

DEFAULT_OPAQUE_TAGS: tuple[str, ...] = ("script",)


def iter_text_nodes(
    document: Document, opaque_tags: Iterable[str] = DEFAULT_OPAQUE_TAGS
) -> Iterator[tuple[int, str]]:
    """Yield ``(node_id, data)`` for every visible, non-empty text node."""
    for node_id, hidden in document.iter_preorder(opaque_tags):
        if hidden:
            continue
        node = document[node_id]
        if node.is_text and node.data:
            yield node_id, node.data


def flatten(
    document: Document, opaque_tags: Iterable[str] = DEFAULT_OPAQUE_TAGS
) -> str:
    """Concatenate visible text in document order (entities still encoded)."""
    return "".join(data for _node_id, data in iter_text_nodes(document, opaque_tags))
