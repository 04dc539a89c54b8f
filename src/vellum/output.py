"""Output tree produced by the tree interpreter.

The output tree is a small view-element graph, shaped like the render tree
it was produced from:

- ``str`` leaves are text nodes
- ``Element`` is a tag with props and ordered children
- ``Fragment`` groups siblings without a wrapper (used when a code fence is
  preceded by a last-modified marker, and as the root of a pass)

Elements are mutable so the footnote emitter can attach back-references
and a host can mount a result into a document tree. Equality is
structural; the last-modified handle is compared by identity.

Example:
    >>> el = Element("p", children=["Hello ", Element("em", children=["you"])])
    >>> el.text_content()
    'Hello you'

"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

# Elements that never have children
VOID_TAGS = frozenset({"br", "hr", "img", "input"})


@dataclass(slots=True)
class Element:
    """An output element.

    Attributes:
        tag: Element tag name (e.g., "p", "h2", "span")
        props: Attributes. ``class`` holds class names, ``style`` a dict of
            CSS properties, booleans mark boolean attributes.
        children: Ordered child nodes
        inner_html: Opaque pre-escaped markup used instead of children

    """

    tag: str
    props: dict[str, Any] = field(default_factory=dict)
    children: list[OutputNode] = field(default_factory=list)
    inner_html: str | None = None

    @property
    def id(self) -> str | None:
        return self.props.get("id")

    @property
    def class_name(self) -> str | None:
        return self.props.get("class")

    def append(self, child: OutputNode) -> None:
        self.children.append(child)

    def text_content(self) -> str:
        """Concatenated descendant text, like the DOM property."""
        return "".join(_text_of(child) for child in self.children)


@dataclass(slots=True)
class Fragment:
    """Siblings without a wrapping element."""

    children: list[OutputNode] = field(default_factory=list)

    def text_content(self) -> str:
        return "".join(_text_of(child) for child in self.children)


type OutputNode = str | Element | Fragment


def _text_of(node: OutputNode) -> str:
    if isinstance(node, str):
        return node
    return node.text_content()


def iter_elements(node: OutputNode) -> Iterator[Element]:
    """Yield every element in the tree, depth-first in document order."""
    if isinstance(node, str):
        return
    if isinstance(node, Element):
        yield node
    for child in node.children:
        yield from iter_elements(child)


def find_element_by_id(node: OutputNode, element_id: str) -> Element | None:
    """Find the first element whose ``id`` prop equals ``element_id``."""
    for el in iter_elements(node):
        if el.props.get("id") == element_id:
            return el
    return None


def find_elements_by_class(node: OutputNode, class_name: str) -> list[Element]:
    """Find all elements carrying ``class_name`` among their classes."""
    return [
        el
        for el in iter_elements(node)
        if class_name in (el.props.get("class") or "").split()
    ]
