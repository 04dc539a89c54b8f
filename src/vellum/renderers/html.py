"""HTML serializer for output trees.

Turns the interpreter's output tree into an HTML string, for hosts that
mount markup rather than element objects, and for snapshots in tests.

Rules:
- Text is escaped; ``inner_html`` is emitted verbatim
- ``style`` dicts become ``prop: value; ...`` declarations
- ``True`` props are written as bare boolean attributes, ``False`` and
  ``None`` props are omitted
- Void elements (``br``, ``hr``, ``img``, ``input``) have no closing tag

Thread Safety:
    Pure functions over the given tree. Safe to call from any thread.

"""

from __future__ import annotations

from typing import Any

from vellum.output import VOID_TAGS, Element, Fragment, OutputNode
from vellum.utils.text import escape_attr, escape_html


def _style(style: dict[str, Any]) -> str:
    return "; ".join(f"{prop}: {value}" for prop, value in style.items() if value is not None)


def _attrs(props: dict[str, Any]) -> str:
    parts: list[str] = []
    for name, value in props.items():
        if value is None or value is False:
            continue
        if value is True:
            parts.append(f" {name}")
            continue
        if name == "style" and isinstance(value, dict):
            value = _style(value)
            if not value:
                continue
        parts.append(f' {name}="{escape_attr(str(value))}"')
    return "".join(parts)


def _render(node: OutputNode, parts: list[str]) -> None:
    if isinstance(node, str):
        parts.append(escape_html(node))
        return
    if isinstance(node, Fragment):
        for child in node.children:
            _render(child, parts)
        return

    parts.append(f"<{node.tag}{_attrs(node.props)}>")
    if node.tag in VOID_TAGS:
        return
    if node.inner_html is not None:
        parts.append(node.inner_html)
    else:
        for child in node.children:
            _render(child, parts)
    parts.append(f"</{node.tag}>")


def to_html(node: OutputNode) -> str:
    """Serialize an output tree to HTML.

    Example:
        >>> to_html(Element("p", {"class": "x"}, ["a < b"]))
        '<p class="x">a &lt; b</p>'

    """
    parts: list[str] = []
    _render(node, parts)
    return "".join(parts)


class HtmlRenderer:
    """Output tree to HTML renderer.

    Conforms to the ``OutputRenderer`` protocol. Stateless; one instance
    can be shared.
    """

    __slots__ = ()

    def render(self, node: OutputNode) -> str:
        return to_html(node)


def element_to_html(element: Element) -> str:
    """Serialize only the children of ``element`` (like ``innerHTML``)."""
    if element.inner_html is not None:
        return element.inner_html
    parts: list[str] = []
    for child in element.children:
        _render(child, parts)
    return "".join(parts)
