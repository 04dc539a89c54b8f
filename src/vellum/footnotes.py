"""Footnote section emission.

Footnote definitions are collected during the main pass and emitted once,
after the whole main tree, as a single labeled section::

    <section class="footnotes">
      <h2 id="footnote-label">Footnotes</h2>
      <ol>
        <li id="user-content-fn-1"><p>Note text <a href="#user-content-fnref-1">↩</a></p></li>
      </ol>
    </section>

Items are keyed by encounter order, not by the numeric footnote id. The
anchor ids must match the ones written by footnote references.
"""

from __future__ import annotations

from collections.abc import Sequence

from vellum.config import PreviewConfig, get_preview_config
from vellum.nodes import FootnoteDef
from vellum.output import VOID_TAGS, Element, Fragment, OutputNode
from vellum.session import LAST_MODIFIED_CLASS

FOOTNOTE_LABEL_ID = "footnote-label"
FOOTNOTES_CLASS = "footnotes"

FOOTNOTE_BACKREF_STYLE: dict[str, str] = {
    "font-family": "monospace",
    "font-size": "1.25em",
    "margin": "0 0.25em",
}


def footnote_anchor(footnote_id: int | str) -> str:
    """Anchor id of a footnote body."""
    return f"user-content-fn-{footnote_id}"


def footnote_ref_anchor(footnote_id: int | str) -> str:
    """Anchor id of the in-text reference to a footnote."""
    return f"user-content-fnref-{footnote_id}"


def backref_link(footnote_id: int | str, config: PreviewConfig | None = None) -> Element:
    """The "back to content" link closing a footnote body."""
    config = config or get_preview_config()
    return Element(
        "a",
        {
            "href": f"#{footnote_ref_anchor(footnote_id)}",
            "aria-label": config.backref_label,
            "style": dict(FOOTNOTE_BACKREF_STYLE),
        },
        [config.backref_text],
    )


def _holds_children(element: Element) -> bool:
    return (
        element.tag not in VOID_TAGS
        and element.inner_html is None
        and element.class_name != LAST_MODIFIED_CLASS
    )


def attach_backref(body: list[OutputNode], link: Element) -> None:
    """Append ``link`` inside the last top-level node of a footnote body.

    When the last node can hold children (a fragment, or an element that
    is not void, carries no raw markup and is not a last-modified marker)
    the link goes at the end of its children, so a paragraph body reads
    ``<p>text ↩</p>``. Otherwise, including an empty body, it is appended
    to the body itself.
    """
    last = body[-1] if body else None
    if isinstance(last, Element) and _holds_children(last):
        last.children.append(link)
    elif isinstance(last, Fragment):
        last.children.append(link)
    else:
        body.append(link)


def build_footnotes_section(
    definitions: Sequence[FootnoteDef],
    bodies: Sequence[list[OutputNode]],
    config: PreviewConfig | None = None,
) -> Element | None:
    """Assemble the footnote section from rendered bodies.

    Args:
        definitions: Collected definitions, in encounter order
        bodies: Rendered children of each definition, same order
        config: Preview configuration (active config if None)

    Returns:
        The section element, or None when nothing was collected.

    """
    if not definitions:
        return None
    config = config or get_preview_config()

    items: list[OutputNode] = []
    for definition, body in zip(definitions, bodies, strict=True):
        children = list(body)
        attach_backref(children, backref_link(definition.id, config))
        items.append(Element("li", {"id": footnote_anchor(definition.id)}, children))

    return Element(
        "section",
        {"class": FOOTNOTES_CLASS},
        [
            Element("h2", {"id": FOOTNOTE_LABEL_ID}, [config.footnote_title]),
            Element("ol", {}, items),
        ],
    )
