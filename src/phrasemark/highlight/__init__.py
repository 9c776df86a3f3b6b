"""Phrase matching and marker insertion over the node arena."""

from phrasemark.highlight.core import (
    HighlightOptions,
    count_matches,
    find_in_html,
    highlight,
    highlight_with_count,
)
from phrasemark.highlight.entities import OffsetTable, correct_matches
from phrasemark.highlight.flatten import flatten
from phrasemark.highlight.locator import UnboundMatchError, bind_matches
from phrasemark.highlight.matcher import Match, Position, compile_query, find_matches
from phrasemark.highlight.mutator import apply_matches

__all__ = [
    "HighlightOptions",
    "Match",
    "OffsetTable",
    "Position",
    "UnboundMatchError",
    "apply_matches",
    "bind_matches",
    "compile_query",
    "correct_matches",
    "count_matches",
    "find_in_html",
    "find_matches",
    "flatten",
    "highlight",
    "highlight_with_count",
]
