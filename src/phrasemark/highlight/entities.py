"""Entity-aware offset correction.

Text nodes keep their character references encoded (``&nbsp;``), so the
flat text is in *raw* coordinates.  Matching happens against the decoded
text, where one reference is a single character, and match boundaries are
then translated back to raw coordinates:

- every reference wholly before a boundary shifts it right by
  ``len(raw) - len(decoded)``;
- a boundary that falls on or inside a reference is widened to cover the
  whole reference (start snaps to its ``&``, end to its ``;``).
"""

from __future__ import annotations

import html as html_module
import logging
import re
from bisect import bisect_left, bisect_right
from collections.abc import Callable
from dataclasses import dataclass
from functools import cached_property
from typing import TypeAlias

from phrasemark.highlight.matcher import Match, Position, find_matches

logger = logging.getLogger(__name__)

Decoder: TypeAlias = Callable[[str], str]

# &name; | &#digits; | &#xhex;
ENTITY_PATTERN = re.compile(r"&(?:[A-Za-z][A-Za-z0-9]*|#[xX][0-9A-Fa-f]+|#[0-9]+);")


def default_decode(text: str) -> str:
    """Decode all named and numeric character references."""
    return html_module.unescape(text)


@dataclass
class EntityOccurrence:
    """One character reference in the raw text, ``raw[start:end]``."""

    start: int
    end: int
    raw: str
    decoder: Decoder = default_decode

    @cached_property
    def decoded(self) -> str:
        return self.decoder(self.raw)

    @property
    def delta(self) -> int:
        return len(self.raw) - len(self.decoded)


def scan_entities(raw: str, decode: Decoder = default_decode) -> list[EntityOccurrence]:
    """Enumerate the character references in *raw* that *decode* resolves.

    Well-formed but unknown references (``&foo;``) decode to themselves and
    stay plain text.
    """
    occurrences = (
        EntityOccurrence(found.start(), found.end(), found[0], decode)
        for found in ENTITY_PATTERN.finditer(raw)
    )
    return [occ for occ in occurrences if occ.decoded != occ.raw]


class OffsetTable:
    """Translation between decoded and raw offsets of one text."""

    __slots__ = ("_dec_ends", "_dec_starts", "_raw_ends", "_raw_starts", "decoded")

    def __init__(self, raw: str, occurrences: list[EntityOccurrence]) -> None:
        self._dec_starts: list[int] = []
        self._dec_ends: list[int] = []
        self._raw_starts: list[int] = []
        self._raw_ends: list[int] = []

        parts: list[str] = []
        raw_pos = 0
        dec_len = 0
        for occ in occurrences:
            segment = raw[raw_pos : occ.start]
            parts.append(segment)
            dec_len += len(segment)
            self._dec_starts.append(dec_len)
            self._raw_starts.append(occ.start)
            parts.append(occ.decoded)
            dec_len += len(occ.decoded)
            self._dec_ends.append(dec_len)
            self._raw_ends.append(occ.end)
            raw_pos = occ.end
        parts.append(raw[raw_pos:])
        self.decoded = "".join(parts)

    def __len__(self) -> int:
        return len(self._dec_starts)

    @classmethod
    def build(cls, raw: str, decode: Decoder = default_decode) -> OffsetTable:
        return cls(raw, scan_entities(raw, decode))

    def to_raw_start(self, index: int) -> int:
        """Raw offset for a decoded start offset."""
        i = bisect_right(self._dec_starts, index) - 1
        if i < 0:
            return index
        if index < self._dec_ends[i]:
            return self._raw_starts[i]
        return self._raw_ends[i] + (index - self._dec_ends[i])

    def to_raw_end(self, index: int) -> int:
        """Raw offset for a decoded (exclusive) end offset."""
        i = bisect_left(self._dec_starts, index) - 1
        if i < 0:
            return index
        if index <= self._dec_ends[i]:
            return self._raw_ends[i]
        return self._raw_ends[i] + (index - self._dec_ends[i])


def correct_matches(
    query: str, raw: str, decode: Decoder = default_decode
) -> list[Match]:
    """Find *query* in *raw* and return matches in raw coordinates.

    When decoding does not change the length there is nothing to correct and
    the raw text is searched directly.
    """
    decoded = decode(raw)
    if len(decoded) == len(raw):
        return find_matches(query, raw)

    table = OffsetTable.build(raw, decode)
    found = find_matches(query, table.decoded)
    logger.debug(
        "Correcting %d match(es) across %d entity reference(s)",
        len(found),
        len(table),
    )

    corrected: list[Match] = []
    for match in found:
        start = table.to_raw_start(match.start.index)
        end = table.to_raw_end(match.end.index)
        corrected.append(
            Match(start=Position(start), end=Position(end), text=raw[start:end])
        )
    return corrected
