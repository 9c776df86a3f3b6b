"""Serialise a ``Document`` arena back to HTML text.

Text and comment payloads are already in their source (encoded) form and
are written verbatim; only attribute quoting needs escaping.
"""

from __future__ import annotations

from dataclasses import dataclass

from phrasemark.dom.node import VOID_ELEMENTS, Document, NodeKind


@dataclass(frozen=True)
class SerializerOptions:
    """Options forwarded to the serializer.

    Attributes:
        self_close_void: Write void elements as ``<br/>`` instead of ``<br>``.
    """

    self_close_void: bool = False


def _escape_attr_value(value: str) -> str:
    return value.replace('"', "&quot;")


def _start_tag(tag: str, attrs: dict[str, str | None], *, self_close: bool) -> str:
    parts = [tag]
    for name, value in attrs.items():
        if value is None:
            parts.append(name)
        else:
            parts.append(f'{name}="{_escape_attr_value(value)}"')
    close = "/>" if self_close else ">"
    return "<" + " ".join(parts) + close


def to_html(document: Document, options: SerializerOptions | None = None) -> str:
    """Serialise every root of *document* in order."""
    options = options or SerializerOptions()
    out: list[str] = []

    def _emit(node_id: int) -> None:
        node = document[node_id]
        match node.kind:
            case NodeKind.TEXT | NodeKind.COMMENT | NodeKind.OTHER:
                out.append(node.data)
            case NodeKind.ELEMENT:
                if node.tag in VOID_ELEMENTS:
                    out.append(
                        _start_tag(
                            node.tag, node.attrs, self_close=options.self_close_void
                        )
                    )
                    return
                out.append(_start_tag(node.tag, node.attrs, self_close=False))
                for child in node.children:
                    _emit(child)
                out.append(f"</{node.tag}>")

    for root in document.roots:
        _emit(root)
    return "".join(out)
