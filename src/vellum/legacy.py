"""Legacy synchronous renderer.

Builds the output tree by appending directly into a parent element, the
way a DOM-building preview does, without any collaborators: fences are
always plain code, math is left as text for an in-page typesetter.

Prefer ``TreeInterpreter``; this variant stays for hosts that cannot run
an event loop. Both share the session trackers, so table alignment and
footnote anchors behave the same.

Example:
    >>> root = Element("div", {"id": "preview-root"})
    >>> PreviewContent(root).render([Paragraph(("hi",))])
    >>> root.children
    [Element(tag='p', props={}, children=['hi'], inner_html=None)]

"""

from __future__ import annotations

from collections.abc import Sequence

from vellum.config import get_preview_config
from vellum.errors import MountError
from vellum.fence import MATH_BLOCK_CLASS, MATH_INLINE_CLASS
from vellum.footnotes import (
    FOOTNOTE_LABEL_ID,
    FOOTNOTES_CLASS,
    attach_backref,
    footnote_anchor,
    footnote_ref_anchor,
)
from vellum.interpreter import (
    SEARCH_MATCH_CLASS,
    SEARCH_MATCH_CURRENT_CLASS,
    SEARCH_MATCH_CURRENT_START_CLASS,
    SEARCH_MATCH_START_CLASS,
    TASK_LIST_ITEM_CLASS,
    describe,
)
from vellum.nodes import (
    BlockQuote,
    Checkbox,
    Code,
    Emoji,
    Emphasis,
    FootnoteDef,
    FootnoteRef,
    Heading,
    Image,
    LineBreak,
    Link,
    ListItem,
    Match,
    MatchCurrent,
    MatchCurrentStart,
    MatchStart,
    MathExpr,
    Modified,
    OrderedList,
    Paragraph,
    Pre,
    RawHtml,
    RenderTreeElem,
    Strikethrough,
    Strong,
    Table,
    TableBody,
    TableDataCell,
    TableHead,
    TableHeaderCell,
    TableRow,
    TaskListItem,
    ThematicBreak,
    UnorderedList,
    raw_text,
)
from vellum.output import Element, OutputNode, find_element_by_id
from vellum.session import RenderSession
from vellum.utils.logger import get_logger

logger = get_logger(__name__)

PREVIEW_ROOT_ID = "preview-root"
SR_ONLY_CLASS = "sr-only"
BACKREF_CLASS = "data-footnote-backref"


class PreviewContent:
    """Mount point for the legacy renderer.

    Raises:
        MountError: If the host document has no ``preview-root`` element.

    """

    def __init__(self, document: OutputNode, root_id: str = PREVIEW_ROOT_ID) -> None:
        root = find_element_by_id(document, root_id)
        if root is None:
            raise MountError(root_id)
        self.root_elem = root

    def render(self, tree: Sequence[RenderTreeElem]) -> None:
        """Replace the root's content with the rendered tree."""
        self.root_elem.children.clear()
        self.root_elem.inner_html = None
        renderer = SyncTreeRenderer()
        for elem in tree:
            renderer.render(elem, self.root_elem)
        renderer.end(self.root_elem)


class SyncTreeRenderer:
    """Render elements synchronously into a parent element."""

    def __init__(self, session: RenderSession | None = None) -> None:
        self.session = session or RenderSession()

    @property
    def match_count(self) -> int:
        return self.session.matches.count

    @property
    def last_modified(self) -> Element | None:
        return self.session.last_modified.handle

    def render(self, elem: RenderTreeElem, parent: Element) -> None:
        if isinstance(elem, str):
            parent.append(elem)
            return

        match elem:
            case Image():
                props = {"src": elem.src, "alt": raw_text(elem)}
                if elem.title:
                    props["title"] = elem.title
                parent.append(Element("img", props))
                return
            case FootnoteDef():
                self.session.footnotes.collect(elem)
                return
            case RawHtml():
                parent.append(Element("span", {}, inner_html=elem.raw))
                return
            case Modified():
                parent.append(self.session.last_modified.create())
                return

        node = self._create(elem)
        if node is None:
            logger.error("Unknown render tree element: %s", describe(elem))
            return

        for child in getattr(elem, "children", ()):
            self.render(child, node)
        parent.append(node)

    def _create(self, elem: RenderTreeElem) -> Element | None:
        """Create the (still empty) element for a node."""
        match elem:
            case Paragraph():
                return Element("p")
            case Heading():
                return Element(f"h{elem.level}", {"id": elem.id} if elem.id else {})
            case Link():
                props = {"href": elem.href}
                if elem.title:
                    props["title"] = elem.title
                return Element("a", props)
            case LineBreak():
                return Element("br")
            case BlockQuote():
                return Element("blockquote")
            case Emphasis():
                return Element("em")
            case Strong():
                return Element("strong")
            case Strikethrough():
                return Element("del")
            case Pre():
                return Element("pre")
            case Code():
                return Element("code", {"class": f"language-{elem.lang}"} if elem.lang else {})
            case OrderedList():
                return Element("ol", {"start": elem.start} if elem.start is not None else {})
            case UnorderedList():
                return Element("ul")
            case ListItem():
                return Element("li")
            case TaskListItem():
                return Element("li", {"class": TASK_LIST_ITEM_CLASS})
            case Emoji():
                return Element("span", {"title": elem.name, "role": "img"})
            case Table():
                self.session.tables.enter_table(elem.align)
                return Element("table")
            case TableHead():
                return Element("thead")
            case TableBody():
                return Element("tbody")
            case TableRow():
                self.session.tables.enter_row()
                return Element("tr")
            case TableHeaderCell():
                return Element("th", self._cell_props())
            case TableDataCell():
                return Element("td", self._cell_props())
            case Checkbox():
                return Element("input", {"type": "checkbox", "disabled": True, "checked": elem.checked})
            case ThematicBreak():
                return Element("hr")
            case FootnoteRef():
                link = Element(
                    "a",
                    {
                        "href": f"#{footnote_anchor(elem.id)}",
                        "id": footnote_ref_anchor(elem.id),
                        "aria-describedby": FOOTNOTE_LABEL_ID,
                    },
                    [str(elem.id)],
                )
                return Element("sup", {}, [link])
            case MathExpr():
                class_name = MATH_INLINE_CLASS if elem.inline else MATH_BLOCK_CLASS
                return Element("span", {"class": class_name}, [elem.expr])
            case Match():
                return Element("span", {"class": SEARCH_MATCH_CLASS})
            case MatchCurrent():
                return Element("span", {"class": SEARCH_MATCH_CURRENT_CLASS})
            case MatchStart():
                self.session.matches.increment()
                return Element("span", {"class": SEARCH_MATCH_START_CLASS})
            case MatchCurrentStart():
                self.session.matches.increment()
                return Element("span", {"class": SEARCH_MATCH_CURRENT_START_CLASS})
            case _:
                return None

    def _cell_props(self) -> dict:
        align = self.session.tables.next_column_align()
        return {"style": {"text-align": align}} if align else {}

    def end(self, parent: Element) -> None:
        """Append the footnote section, if any footnote was collected."""
        definitions = list(self.session.footnotes.definitions)
        if not definitions:
            return
        config = get_preview_config()

        ol = Element("ol")
        for definition in definitions:
            li = Element("li", {"id": footnote_anchor(definition.id)})
            for child in definition.children:
                self.render(child, li)
            backref = Element(
                "a",
                {
                    "href": f"#{footnote_ref_anchor(definition.id)}",
                    "class": BACKREF_CLASS,
                    "aria-label": config.backref_label,
                },
                [config.backref_text],
            )
            attach_backref(li.children, backref)
            ol.append(li)

        heading = Element(
            "h2", {"id": FOOTNOTE_LABEL_ID, "class": SR_ONLY_CLASS}, [config.footnote_title]
        )
        parent.append(Element("section", {"class": FOOTNOTES_CLASS}, [heading, ol]))
