"""Tests for footnote collection and the footnote section."""

import asyncio

from vellum import TreeInterpreter
from vellum.footnotes import (
    FOOTNOTE_BACKREF_STYLE,
    attach_backref,
    backref_link,
    build_footnotes_section,
    footnote_anchor,
    footnote_ref_anchor,
)
from vellum.nodes import FootnoteDef, FootnoteRef, Modified, Paragraph, RawHtml, ThematicBreak
from vellum.output import Element, Fragment


def _section(tree) -> Element:  # type: ignore[no-untyped-def]
    result = asyncio.run(TreeInterpreter().run(tree))
    section = result.root.children[-1]
    assert isinstance(section, Element)
    assert section.props == {"class": "footnotes"}
    return section


class TestAnchors:
    def test_anchor_ids(self) -> None:
        assert footnote_anchor(1) == "user-content-fn-1"
        assert footnote_ref_anchor("x") == "user-content-fnref-x"

    def test_backref_link(self) -> None:
        link = backref_link(4)
        assert link.tag == "a"
        assert link.props["href"] == "#user-content-fnref-4"
        assert link.props["aria-label"] == "Back to content"
        assert link.props["style"] == FOOTNOTE_BACKREF_STYLE
        assert link.children == ["↩"]


class TestAttachBackref:
    """Placement of the back-reference inside a footnote body."""

    def test_text_body_appends_to_body(self) -> None:
        body = ["note"]
        link = backref_link(1)
        attach_backref(body, link)
        assert body == ["note", link]

    def test_element_body_appends_inside_last(self) -> None:
        p = Element("p", {}, ["note"])
        body = [p]
        link = backref_link(1)
        attach_backref(body, link)
        assert body == [p]
        assert p.children == ["note", link]

    def test_raw_html_body_appends_after(self) -> None:
        span = Element("span", {}, inner_html="<b>x</b>")
        body = [span]
        attach_backref(body, backref_link(1))
        assert span.children == []
        assert len(body) == 2

    def test_void_element_body_appends_after(self) -> None:
        hr = Element("hr")
        body = [hr]
        link = backref_link(1)
        attach_backref(body, link)
        assert hr.children == []
        assert body == [hr, link]

    def test_marker_body_appends_after(self) -> None:
        marker = Element("span", {"class": "last-modified-marker"})
        body = [marker]
        link = backref_link(1)
        attach_backref(body, link)
        assert marker.children == []
        assert body == [marker, link]

    def test_fragment_body_appends_inside(self) -> None:
        fragment = Fragment(["a"])
        attach_backref([fragment], backref_link(1))
        assert len(fragment.children) == 2

    def test_empty_body(self) -> None:
        body: list = []
        link = backref_link(1)
        attach_backref(body, link)
        assert body == [link]


class TestFootnoteSection:
    """Section emitted after the main content."""

    def test_no_definitions_no_section(self) -> None:
        assert build_footnotes_section([], []) is None
        result = asyncio.run(TreeInterpreter().run([Paragraph(("x", FootnoteRef(id=1)))]))
        assert len(result.root.children) == 1

    def test_text_body_backref(self) -> None:
        section = _section([FootnoteDef(id=1, children=("note",))])
        heading, ol = section.children
        assert heading == Element("h2", {"id": "footnote-label"}, ["Footnotes"])
        (li,) = ol.children
        assert li.props == {"id": "user-content-fn-1"}
        assert li.children[0] == "note"
        assert li.children[1].props["href"] == "#user-content-fnref-1"

    def test_paragraph_body_backref_inside_paragraph(self) -> None:
        section = _section([FootnoteDef(id=1, children=(Paragraph(("note",)),))])
        (li,) = section.children[1].children
        (p,) = li.children
        assert p.tag == "p"
        assert p.children[0] == "note"
        assert p.children[1].props["href"] == "#user-content-fnref-1"

    def test_raw_html_body_backref_after(self) -> None:
        section = _section([FootnoteDef(id=1, children=(RawHtml(raw="<b>x</b>"),))])
        (li,) = section.children[1].children
        assert li.children[0].inner_html == "<b>x</b>"
        assert li.children[1].tag == "a"

    def test_body_ending_in_rule_keeps_backref(self) -> None:
        section = _section([FootnoteDef(id=1, children=(Paragraph(("note",)), ThematicBreak()))])
        (li,) = section.children[1].children
        p, hr, backref = li.children
        assert p == Element("p", {}, ["note"])
        assert hr == Element("hr")
        assert backref.props["href"] == "#user-content-fnref-1"

    def test_body_ending_in_marker_keeps_marker_empty(self) -> None:
        section = _section([FootnoteDef(id=1, children=("note", Modified()))])
        (li,) = section.children[1].children
        text, marker, backref = li.children
        assert text == "note"
        assert marker == Element("span", {"class": "last-modified-marker"})
        assert backref.props["href"] == "#user-content-fnref-1"

    def test_encounter_order_not_id_order(self) -> None:
        section = _section(
            [
                FootnoteDef(id=2, children=("second",)),
                Paragraph(("body",)),
                FootnoteDef(id=1, children=("first",)),
            ]
        )
        ids = [li.props["id"] for li in section.children[1].children]
        assert ids == ["user-content-fn-2", "user-content-fn-1"]

    def test_section_follows_main_content(self) -> None:
        result = asyncio.run(
            TreeInterpreter().run(
                [FootnoteDef(id=1, children=("n",)), Paragraph(("main",))]
            )
        )
        first, last = result.root.children
        assert first == Element("p", {}, ["main"])
        assert last.tag == "section"

    def test_nested_definition_is_not_emitted(self) -> None:
        inner = FootnoteDef(id=2, children=("inner",))
        section = _section([FootnoteDef(id=1, children=("outer", inner))])
        ids = [li.props["id"] for li in section.children[1].children]
        assert ids == ["user-content-fn-1"]
