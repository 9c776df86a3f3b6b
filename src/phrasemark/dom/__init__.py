"""Node arena plus the parser and serializer adapters around it."""

from phrasemark.dom.node import Document, Node, NodeKind
from phrasemark.dom.parser import ParserOptions, parse_html
from phrasemark.dom.serializer import SerializerOptions, to_html

__all__ = [
    "Document",
    "Node",
    "NodeKind",
    "ParserOptions",
    "SerializerOptions",
    "parse_html",
    "to_html",
]
