"""Splice marker elements into the tree for bound matches."""

from __future__ import annotations

import logging

from phrasemark.dom.node import Document
from phrasemark.highlight.matcher import Match

logger = logging.getLogger(__name__)


def _marker(document: Document, marker_tag: str, text: str) -> int:
    return document.new_element(marker_tag, children=[document.new_text(text)])


def _text_pieces(document: Document, *texts: str) -> list[int]:
    return [document.new_text(text) for text in texts if text]


def _wrap_in_place(document: Document, node_id: int, marker_tag: str) -> None:
    """Replace *node_id* with a marker whose only child is *node_id*."""
    marker = document.new_element(marker_tag)
    document.replace(node_id, marker)
    document.append_child(marker, node_id)


def apply_matches(
    matches: list[Match], document: Document, marker_tag: str = "mark"
) -> Document:
    """Wrap every match in a ``marker_tag`` element, mutating *document*.

    Nodes holding a match endpoint are split into before / marked / after
    pieces and then removed.  When the previous match ended in the same
    node, its ``after`` piece already holds the text up to this match, so
    this match's ``before`` piece is skipped.
    """
    superseded: dict[int, None] = {}
    previous: Match | None = None

    for match in matches:
        start, end = match.start, match.end
        if start.node is None or end.node is None:
            msg = f"Match at [{start.index}, {end.index}) has not been bound"
            raise ValueError(msg)
        shares_start = previous is not None and previous.end.node == start.node
        before = "" if shares_start else start.before

        if match.single_node:
            pieces = _text_pieces(document, before)
            pieces.append(_marker(document, marker_tag, match.text))
            pieces.extend(_text_pieces(document, end.after))
            document.insert_before(start.node, pieces)
        else:
            head = _text_pieces(document, before)
            head.append(_marker(document, marker_tag, start.after))
            document.insert_after(start.node, head)

            tail = [_marker(document, marker_tag, end.before)]
            tail.extend(_text_pieces(document, end.after))
            document.insert_before(end.node, tail)

            for node_id in match.intermediate:
                _wrap_in_place(document, node_id, marker_tag)

        superseded[start.node] = None
        superseded[end.node] = None
        previous = match

    for node_id in superseded:
        document.remove(node_id)

    logger.debug(
        "Inserted markers for %d match(es), removed %d node(s)",
        len(matches),
        len(superseded),
    )
    return document
