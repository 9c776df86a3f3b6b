"""Bind match offsets to the text nodes that hold them.

A single pre-order pass over the visible text nodes (same iterator as
``flatten``) with a running cursor over the flat text.  For each node
``[node_start, node_end)``:

- a match start binds when ``node_end > start`` (a start on a boundary
  belongs to the next node);
- a match end binds when ``node_end >= end`` (an end on a boundary belongs
  to this node);
- nodes passed while a match is open are fully covered and are recorded as
  intermediate nodes.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from phrasemark.dom.node import Document
from phrasemark.highlight.flatten import DEFAULT_OPAQUE_TAGS, iter_text_nodes
from phrasemark.highlight.matcher import Match, Position

logger = logging.getLogger(__name__)


class UnboundMatchError(ValueError):
    """A match endpoint lies outside every visible text node."""


def _bind(
    position: Position,
    node_id: int,
    data: str,
    node_start: int,
    prev_end: int,
    next_start: int,
) -> None:
    local = position.index - node_start
    position.node = node_id
    position.before = data[max(prev_end - node_start, 0) : local]
    position.after = data[local : max(min(next_start - node_start, len(data)), local)]


def bind_matches(
    matches: list[Match],
    document: Document,
    opaque_tags: Iterable[str] = DEFAULT_OPAQUE_TAGS,
) -> list[Match]:
    """Attach node bindings, split text and intermediate nodes to *matches*.

    Args:
        matches: Ordered, non-overlapping matches in flat-text coordinates.
        document: Tree the matches were found in.
        opaque_tags: Same opaque containers used when flattening.

    Returns:
        The same list, enriched in place.

    Raises:
        UnboundMatchError: If traversal ends before every endpoint is bound.
    """
    if not matches:
        return matches

    i = 0
    cursor = 0
    for node_id, data in iter_text_nodes(document, opaque_tags):
        if i >= len(matches):
            break
        node_start = cursor
        node_end = cursor + len(data)
        cursor = node_end

        while i < len(matches):
            match = matches[i]
            prev_end = matches[i - 1].end.index if i > 0 else node_start
            next_start = (
                matches[i + 1].start.index if i + 1 < len(matches) else node_end
            )

            if match.start.node is None:
                if node_end <= match.start.index:
                    break
                _bind(match.start, node_id, data, node_start, prev_end, next_start)
            elif node_end < match.end.index:
                match.intermediate.append(node_id)
                break

            if node_end < match.end.index:
                # Open match; following nodes are intermediate until the end
                break
            _bind(match.end, node_id, data, node_start, prev_end, next_start)
            i += 1

    unbound = [m for m in matches if not m.is_bound]
    if unbound:
        first = unbound[0]
        msg = (
            f"{len(unbound)} match(es) could not be bound to text nodes; "
            f"first spans [{first.start.index}, {first.end.index}) "
            f"but visible text ends at {cursor}"
        )
        raise UnboundMatchError(msg)

    logger.debug(
        "Bound %d match(es); %d span multiple nodes",
        len(matches),
        sum(1 for m in matches if not m.single_node),
    )
    return matches
