"""Render tree interpreter.

Walks a render tree depth-first and produces the output tree, while the
per-pass ``RenderSession`` tracks table alignment, footnotes, search
matches and the last-modified marker.

Concurrency:
    Rendering is cooperative. Only nodes backed by a collaborator (code
    fences, math, footnote bodies) suspend, and only their own branch
    waits. Siblings are fanned out with ``asyncio.gather`` and joined by
    position, so output order always equals input order no matter which
    collaborator finishes first.

    Session bookkeeping is done eagerly while the awaitables are built,
    which happens depth-first in document order. That keeps stateful
    kinds deterministic: every table cell reads the column cursor of its
    own row, even while several rows are awaiting collaborators at once.
    Fence and math nodes are wrapped in tasks at the same point, so each
    collaborator call starts in document order too, whatever the nesting
    depth. Collaborators that number fences rely on this.

Usage:
    >>> import asyncio
    >>> from vellum.nodes import Paragraph, MatchStart
    >>> result = asyncio.run(TreeInterpreter().run([Paragraph((MatchStart(("x",)),))]))
    >>> result.match_count
    1

"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Sequence
from dataclasses import dataclass
from typing import Any

from vellum.errors import RenderError
from vellum.fence import (
    MATH_BLOCK_CLASS,
    MATH_INLINE_CLASS,
    FenceRenderer,
    FenceResult,
    MathRenderer,
    PlainFenceRenderer,
    PlainMathRenderer,
)
from vellum.footnotes import (
    FOOTNOTE_LABEL_ID,
    build_footnotes_section,
    footnote_anchor,
    footnote_ref_anchor,
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
    UnknownElem,
    UnorderedList,
    raw_text,
)
from vellum.output import Element, Fragment, OutputNode
from vellum.session import RenderSession
from vellum.utils.logger import get_logger

logger = get_logger(__name__)

TASK_LIST_ITEM_CLASS = "task-list-item"
TASK_LIST_CHECKBOX_CLASS = "task-list-item-checkbox"

SEARCH_MATCH_CLASS = "search-text"
SEARCH_MATCH_CURRENT_CLASS = "search-text-current"
SEARCH_MATCH_START_CLASS = "search-text-start"
SEARCH_MATCH_CURRENT_START_CLASS = "search-text-current-start"

# Containers that map one-to-one onto an output tag
_SIMPLE_TAGS: dict[type, str] = {
    Paragraph: "p",
    BlockQuote: "blockquote",
    Emphasis: "em",
    Strong: "strong",
    Strikethrough: "del",
    Pre: "pre",
    UnorderedList: "ul",
    ListItem: "li",
    TableHead: "thead",
    TableBody: "tbody",
}


@dataclass(frozen=True, slots=True)
class RenderResult:
    """Outcome of one render pass.

    Attributes:
        root: Main content followed by the footnote section, if any
        last_modified: The last marker created in the pass, for auto-scroll
        match_count: Number of search match spans in the document

    """

    root: Fragment
    last_modified: Element | None
    match_count: int


async def _resolved(node: OutputNode | None) -> OutputNode | None:
    return node


def describe(elem: Any) -> str:
    """Compact description of an element for diagnostics."""
    if isinstance(elem, UnknownElem):
        return json.dumps(elem.raw, default=repr, ensure_ascii=False)
    text = repr(elem)
    return text if len(text) <= 200 else text[:197] + "..."


class TreeInterpreter:
    """Interpret one render tree into an output tree.

    One-shot: each instance owns a fresh ``RenderSession`` and renders a
    single tree. Create a new interpreter for every pass; collaborators
    that must keep identity across passes are passed in by the caller.

    Args:
        fence: Fence collaborator (declines everything if None)
        math: Math collaborator (plain spans if None)
        session: Pre-built session (a fresh one if None)

    """

    __slots__ = ("_fence", "_math", "_session", "_used")

    def __init__(
        self,
        fence: FenceRenderer | None = None,
        math: MathRenderer | None = None,
        session: RenderSession | None = None,
    ) -> None:
        self._fence: FenceRenderer = fence or PlainFenceRenderer()
        self._math: MathRenderer = math or PlainMathRenderer()
        self._session = session or RenderSession()
        self._used = False

    @property
    def session(self) -> RenderSession:
        return self._session

    async def run(self, tree: Sequence[RenderTreeElem]) -> RenderResult:
        """Render a whole tree, then the footnote section.

        Raises:
            RuntimeError: If this interpreter already rendered a tree.

        """
        if self._used:
            raise RuntimeError("TreeInterpreter renders a single tree; create a new one per pass")
        self._used = True

        logger.debug("Rendering preview tree with %d top-level elements", len(tree))
        children = await self._join(self._visit_all(tree))

        # Collection is a side effect of the main pass, which has fully joined here
        footnotes = await self._render_footnotes()
        if footnotes is not None:
            children.append(footnotes)

        return RenderResult(
            root=Fragment(children),
            last_modified=self._session.last_modified.handle,
            match_count=self._session.matches.count,
        )

    # =========================================================================
    # Fan-out / join
    # =========================================================================

    def _visit_all(
        self, elems: Sequence[RenderTreeElem]
    ) -> list[Awaitable[OutputNode | None]]:
        return [self._visit(elem, i) for i, elem in enumerate(elems)]

    async def _join(self, pending: list[Awaitable[OutputNode | None]]) -> list[OutputNode]:
        """Await all siblings and reassemble them by position.

        Positions that rendered to nothing (footnote definitions, unknown
        kinds) are dropped; the rest keep their input order.
        """
        results = await asyncio.gather(*pending)
        return [node for node in results if node is not None]

    def _element(
        self, tag: str, props: dict[str, Any], children: Sequence[RenderTreeElem]
    ) -> Awaitable[OutputNode | None]:
        pending = self._visit_all(children)
        return self._assemble(tag, props, pending)

    async def _assemble(
        self, tag: str, props: dict[str, Any], pending: list[Awaitable[OutputNode | None]]
    ) -> OutputNode:
        return Element(tag, props, await self._join(pending))

    # =========================================================================
    # Dispatch
    # =========================================================================

    def _visit(self, elem: RenderTreeElem, position: int) -> Awaitable[OutputNode | None]:
        """Do the node's bookkeeping now and return the rest as an awaitable."""
        session = self._session

        match elem:
            case str():
                return _resolved(elem)
            case Heading():
                props = {"id": elem.id} if elem.id else {}
                return self._element(f"h{elem.level}", props, elem.children)
            case Link():
                return self._element("a", self._link_props(elem), elem.children)
            case Image():
                props = {"src": elem.src, "alt": raw_text(elem)}
                if elem.title:
                    props["title"] = elem.title
                return _resolved(Element("img", props))
            case LineBreak():
                return _resolved(Element("br"))
            case ThematicBreak():
                return _resolved(Element("hr"))
            case Code():
                # Started now so collaborators see fences in document order
                return asyncio.ensure_future(self._code(elem, position))
            case OrderedList():
                props = {"start": elem.start} if elem.start is not None else {}
                return self._element("ol", props, elem.children)
            case TaskListItem():
                return self._element("li", {"class": TASK_LIST_ITEM_CLASS}, elem.children)
            case Checkbox():
                return _resolved(
                    Element(
                        "input",
                        {
                            "type": "checkbox",
                            "disabled": True,
                            "checked": elem.checked,
                            "class": TASK_LIST_CHECKBOX_CLASS,
                        },
                    )
                )
            case Emoji():
                props = {"title": elem.name, "role": "img", "aria-label": f"{elem.name} emoji"}
                return self._element("span", props, elem.children)
            case Table():
                session.tables.enter_table(elem.align)
                return self._element("table", {}, elem.children)
            case TableRow():
                session.tables.enter_row()
                return self._element("tr", {}, elem.children)
            case TableHeaderCell():
                return self._element("th", self._cell_props(), elem.children)
            case TableDataCell():
                return self._element("td", self._cell_props(), elem.children)
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
                return _resolved(Element("sup", {}, [link]))
            case FootnoteDef():
                # Rendered at the bottom of the page
                session.footnotes.collect(elem)
                return _resolved(None)
            case MathExpr():
                return asyncio.ensure_future(self._math_expr(elem, position))
            case RawHtml():
                # Relative paths in the markup are not rewritten
                return _resolved(Element("span", {}, inner_html=elem.raw))
            case Modified():
                return _resolved(session.last_modified.create())
            case Match():
                return self._element("span", {"class": SEARCH_MATCH_CLASS}, elem.children)
            case MatchCurrent():
                return self._element("span", {"class": SEARCH_MATCH_CURRENT_CLASS}, elem.children)
            case MatchStart():
                session.matches.increment()
                return self._element("span", {"class": SEARCH_MATCH_START_CLASS}, elem.children)
            case MatchCurrentStart():
                session.matches.increment()
                return self._element(
                    "span", {"class": SEARCH_MATCH_CURRENT_START_CLASS}, elem.children
                )
            case (
                Paragraph()
                | BlockQuote()
                | Emphasis()
                | Strong()
                | Strikethrough()
                | Pre()
                | UnorderedList()
                | ListItem()
                | TableHead()
                | TableBody()
            ):
                return self._element(_SIMPLE_TAGS[type(elem)], {}, elem.children)
            case _:
                logger.error("Unknown render tree element: %s", describe(elem))
                return _resolved(None)

    # =========================================================================
    # Kind helpers
    # =========================================================================

    @staticmethod
    def _link_props(link: Link) -> dict[str, Any]:
        if link.auto:
            return {"href": link.href}
        title = link.href
        if link.title and link.title != title:
            title = f'"{link.title}" {title}'
        return {"title": title, "href": link.href}

    def _cell_props(self) -> dict[str, Any]:
        tables = self._session.tables
        if not tables.active:
            logger.warning("Table cell outside of a table; rendering without alignment")
        align = tables.next_column_align()
        return {"style": {"text-align": align}} if align else {}

    async def _code(self, code: Code, position: int) -> OutputNode:
        rendered = await self._render_fence(code, position)
        if rendered is None:
            return Element("code", {}, await self._join(self._visit_all(code.children)))

        node, modified = rendered
        if not modified:
            return node
        return Fragment([self._session.last_modified.create(), node])

    async def _render_fence(self, code: Code, position: int) -> FenceResult | None:
        try:
            result = await self._fence.render(code, position)
            if result is None:
                return None
            if not isinstance(result, tuple) or len(result) != 2:
                raise RenderError("fence", f"expected FenceResult or None, got {result!r}")
            return FenceResult(*result)
        except Exception:
            logger.warning(
                "Fence rendering failed, falling back to plain code: %s",
                describe(code),
                exc_info=True,
            )
            return None

    async def _math_expr(self, math: MathExpr, position: int) -> OutputNode:
        class_name = MATH_INLINE_CLASS if math.inline else MATH_BLOCK_CLASS
        try:
            node = await self._math.render(math.expr, class_name, position)
            if node is None:
                raise RenderError("math", "renderer returned None")
            return node
        except Exception:
            logger.warning("Math typesetting failed: %s", describe(math), exc_info=True)
            return Element("span", {"class": class_name}, [math.expr])

    async def _render_footnotes(self) -> Element | None:
        collector = self._session.footnotes
        definitions = list(collector.definitions)
        if not definitions:
            return None
        logger.debug("Rendering %d footnotes", len(definitions))

        bodies = await asyncio.gather(
            *(self._join(self._visit_all(definition.children)) for definition in definitions)
        )
        if len(collector) > len(definitions):
            logger.warning(
                "Footnote definitions inside footnotes are not rendered: %s",
                [d.id for d in collector.definitions[len(definitions) :]],
            )
        return build_footnotes_section(definitions, bodies)
