"""selectolax adapter: HTML text -> ``Document`` arena.

lexbor decodes character references while tokenizing, but the highlighter
needs text nodes in their encoded form so match boundaries can be placed on
the original entity boundaries.  Every ``&`` is therefore swapped for a
private-use sentinel before parsing (nothing is left for lexbor to decode)
and swapped back when the arena is built.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any

from selectolax.lexbor import LexborHTMLParser

from phrasemark.dom.node import Document

logger = logging.getLogger(__name__)

# selectolax reports text nodes with this pseudo tag
_TEXT_TAG = "-text"

# lexbor keeps template content outside the element's children
_RAW_TAGS = frozenset(("template",))

_SENTINEL_RANGE = range(0xE000, 0xF900)

_COMMENT = re.compile(r"<!--.*?(?:-->|\Z)", re.DOTALL)
_DOCUMENT_MARKUP = re.compile(r"<(?:!doctype|html|head|body)[\s>/]", re.IGNORECASE)


@dataclass(frozen=True)
class ParserOptions:
    """Options forwarded to the parser adapter.

    Attributes:
        fragment: ``True`` to treat input as a body fragment, ``False`` for a
                  full document, ``None`` to decide from the input.
    """

    fragment: bool | None = None


def is_full_document(html: str) -> bool:
    """Return True when *html* carries a doctype or its own document wrappers.

    An explicit ``<html>``, ``<head>`` or ``<body>`` start tag anywhere
    outside a comment counts, so authored wrappers and their attributes are
    kept rather than stripped as synthesised ones.
    """
    return _DOCUMENT_MARKUP.search(_COMMENT.sub("", html)) is not None


def _pick_sentinel(html: str) -> str:
    """Return a private-use character that does not occur in *html*."""
    for code in _SENTINEL_RANGE:
        char = chr(code)
        if char not in html:
            return char
    msg = "No free private-use character available to protect entities"
    raise ValueError(msg)


class _ArenaBuilder:
    """Copies a selectolax tree into a ``Document``."""

    def __init__(self, sentinel: str) -> None:
        self.sentinel = sentinel
        self.document = Document()

    def _restore(self, value: str) -> str:
        return value.replace(self.sentinel, "&")

    def add(self, node: Any, parent: int | None) -> None:
        tag = node.tag
        if tag == _TEXT_TAG:
            text = node.text_content
            if text:
                node_id = self.document.new_text(self._restore(text))
                self.document.append_child(parent, node_id)
            return

        if tag and tag[0].isalpha() and tag not in _RAW_TAGS:
            attrs = {
                self._restore(name): None if value is None else self._restore(value)
                for name, value in node.attributes.items()
            }
            node_id = self.document.new_element(tag, attrs)
            self.document.append_child(parent, node_id)
            self.add_children(node, node_id)
            return

        markup = self._restore(node.html or "")
        if not markup:
            return
        if markup.startswith("<!--"):
            node_id = self.document.new_comment(markup)
        else:
            node_id = self.document.new_other(markup)
        self.document.append_child(parent, node_id)

    def add_children(self, node: Any, parent: int | None) -> None:
        child = node.child
        while child is not None:
            self.add(child, parent)
            child = child.next


def _document_level_nodes(tree: LexborHTMLParser) -> list[Any]:
    """Return the document node's children (doctype, comments, <html>)."""
    root = tree.root
    if root is None:
        return []
    first = root
    while first.prev is not None:
        first = first.prev
    nodes = []
    node = first
    while node is not None:
        nodes.append(node)
        node = node.next
    return nodes


def parse_html(html: str, options: ParserOptions | None = None) -> Document:
    """Parse *html* into a ``Document`` whose text keeps entity encoding.

    Fragments (the default for input without a doctype or an explicit
    ``html``/``head``/``body`` start tag) drop the wrappers lexbor
    synthesises; ``head`` children come first, then ``body`` children.

    Args:
        html: HTML source.
        options: Parser options; see ``ParserOptions``.

    Returns:
        A detached arena owned by the caller.
    """
    options = options or ParserOptions()
    fragment = (
        not is_full_document(html) if options.fragment is None else options.fragment
    )

    sentinel = _pick_sentinel(html)
    tree = LexborHTMLParser(html.replace("&", sentinel))
    builder = _ArenaBuilder(sentinel)

    for node in _document_level_nodes(tree):
        if not fragment or node.tag != "html":
            builder.add(node, None)
            continue
        for section in (tree.head, tree.body):
            if section is not None:
                builder.add_children(section, None)

    logger.debug(
        "Parsed %d bytes into %d nodes (fragment=%s)",
        len(html),
        len(builder.document),
        fragment,
    )
    return builder.document
