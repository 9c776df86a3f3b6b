"""Phrase highlighting entry point.

Pipeline: parse -> flatten -> decode/correct -> match -> locate -> mutate
-> serialize.  Each call parses its own tree, so calls are independent;
the tree is mutated in place and never shared outside the call.
"""

# Pattern: Functional Core (pure function over an owned, short-lived tree)

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from phrasemark.config import get_settings
from phrasemark.dom.parser import ParserOptions, parse_html
from phrasemark.dom.serializer import SerializerOptions, to_html
from phrasemark.highlight.entities import Decoder, correct_matches, default_decode
from phrasemark.highlight.flatten import flatten
from phrasemark.highlight.locator import bind_matches
from phrasemark.highlight.matcher import Match
from phrasemark.highlight.mutator import apply_matches

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HighlightOptions:
    """Per-call options.

    ``marker_tag`` and ``opaque_tags`` fall back to ``get_settings()`` when
    left as ``None``.  ``decode`` is the entity decoding primitive.
    """

    parser: ParserOptions = field(default_factory=ParserOptions)
    serializer: SerializerOptions = field(default_factory=SerializerOptions)
    marker_tag: str | None = None
    opaque_tags: Iterable[str] | None = None
    decode: Decoder = default_decode


def _resolve(options: HighlightOptions) -> tuple[str, tuple[str, ...]]:
    settings = get_settings().highlight
    marker_tag = options.marker_tag or settings.marker_tag
    opaque_tags = (
        settings.opaque_tags
        if options.opaque_tags is None
        else tuple(tag.lower() for tag in options.opaque_tags)
    )
    return marker_tag, opaque_tags


def find_in_html(
    query: str | None, html: str, options: HighlightOptions | None = None
) -> list[Match]:
    """Return matches of *query* in the visible text of *html*.

    Offsets are in flattened, entity-encoded text coordinates; nodes are
    not bound.
    """
    if not query or not html:
        return []
    options = options or HighlightOptions()
    _marker_tag, opaque_tags = _resolve(options)
    document = parse_html(html, options.parser)
    return correct_matches(query, flatten(document, opaque_tags), options.decode)


def count_matches(
    query: str | None, html: str, options: HighlightOptions | None = None
) -> int:
    """Number of occurrences ``highlight`` would mark."""
    return len(find_in_html(query, html, options))


def highlight(
    query: str | None, html: str, options: HighlightOptions | None = None
) -> str:
    """Wrap every occurrence of *query* in the visible text of *html*.

    Args:
        query: Literal phrase; case-insensitive, interior whitespace matches
            any whitespace run.  Empty or ``None`` returns *html* unchanged.
        html: HTML fragment or document.
        options: Parser/serializer options, marker tag, opaque containers
            and entity decoder.

    Returns:
        Highlighted HTML, or *html* itself when nothing matched.
    """
    return highlight_with_count(query, html, options)[0]


def highlight_with_count(
    query: str | None, html: str, options: HighlightOptions | None = None
) -> tuple[str, int]:
    """Like ``highlight`` but also return the number of markers applied."""
    if not query or not html:
        return html, 0

    options = options or HighlightOptions()
    marker_tag, opaque_tags = _resolve(options)

    document = parse_html(html, options.parser)
    text = flatten(document, opaque_tags)
    matches = correct_matches(query, text, options.decode)
    if not matches:
        logger.debug("[HIGHLIGHT] No matches for %r in %d chars", query, len(text))
        return html, 0

    bind_matches(matches, document, opaque_tags)
    apply_matches(matches, document, marker_tag)
    result = to_html(document, options.serializer)

    logger.debug(
        "[HIGHLIGHT] %d match(es) for %r; %d -> %d bytes",
        len(matches),
        query,
        len(html),
        len(result),
    )
    return result, len(matches)
