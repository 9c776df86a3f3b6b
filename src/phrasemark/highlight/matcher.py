"""Literal, case-insensitive phrase matching over flattened text."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

# \s also covers U+00A0 once entities are decoded
_WHITESPACE_RUN = re.compile(r"\s+")


@dataclass
class Position:
    """One match endpoint.

    Attributes:
        index: Offset into the flat (encoded) text.
        node: Text node the offset falls in; set by the node locator.
        before: Node text preceding the offset, bounded by the previous
                match's end.
        after: Node text following the offset, bounded by the next match's
               start.
    """

    index: int
    node: int | None = None
    before: str = ""
    after: str = ""


@dataclass
class Match:
    """A single occurrence of the query.

    Created by ``find_matches`` with offsets only, enriched by the node
    locator, consumed by the tree mutator.
    """

    start: Position
    end: Position
    text: str
    intermediate: list[int] = field(default_factory=list)

    @property
    def is_bound(self) -> bool:
        return self.start.node is not None and self.end.node is not None

    @property
    def single_node(self) -> bool:
        return self.start.node == self.end.node


def compile_query(query: str) -> re.Pattern[str]:
    """Build the search pattern for *query*.

    Every character is literal except interior whitespace runs, which match
    any run of whitespace.  Leading and trailing whitespace stays literal.
    """
    core = query.strip()
    if not core:
        return re.compile(re.escape(query), re.IGNORECASE)
    lead = query[: len(query) - len(query.lstrip())]
    trail = query[len(query.rstrip()) :]
    body = r"\s+".join(re.escape(part) for part in _WHITESPACE_RUN.split(core))
    return re.compile(re.escape(lead) + body + re.escape(trail), re.IGNORECASE)


def find_matches(query: str, text: str) -> list[Match]:
    """Find every non-overlapping occurrence of *query* in *text*.

    Returns:
        Matches in document order; empty when *query* is empty or absent
        from *text*.
    """
    if not query or not text:
        return []
    pattern = compile_query(query)
    return [
        Match(start=Position(found.start()), end=Position(found.end()), text=found[0])
        for found in pattern.finditer(text)
        if found.end() > found.start()
    ]
