"""Typed render tree nodes for Vellum.

The render tree is the intermediate document representation produced by an
upstream Markdown parser and consumed by the tree interpreter. A leaf is a
plain ``str``; every other element is one of the node kinds below.

All nodes are frozen dataclasses with slots for:
- Type safety: the closed kind set is a union the interpreter matches on
- Immutability: the same tree can be rendered by several passes
- Pattern matching: Python 3.10+ match statements work naturally

Each node class carries its wire discriminant in ``TAG`` (the ``t`` field
of the JSON shape, see ``vellum.serialization``).

Node Kinds:
Node (base)
├── Block containers: Paragraph, Heading, BlockQuote, Pre, OrderedList,
│   UnorderedList, ListItem, TaskListItem, Table, TableHead, TableBody,
│   TableRow, TableHeaderCell, TableDataCell, FootnoteDef
├── Inline containers: Link, Image, Emphasis, Strong, Strikethrough, Code,
│   Emoji, Match, MatchCurrent, MatchStart, MatchCurrentStart
├── Leaves: LineBreak, ThematicBreak, Checkbox, FootnoteRef, MathExpr,
│   RawHtml, Modified
└── UnknownElem (forward-compatible catch-all, never produced by a known tag)

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Literal

type TableAlign = Literal["left", "center", "right"] | None

# =============================================================================
# Base Node
# =============================================================================


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all render tree nodes."""

    TAG: ClassVar[str] = ""


# =============================================================================
# Block Containers
# =============================================================================


@dataclass(frozen=True, slots=True)
class Paragraph(Node):
    """Paragraph block. Wire tag ``p``."""

    TAG: ClassVar[str] = "p"

    children: tuple[RenderTreeElem, ...] = ()


@dataclass(frozen=True, slots=True)
class Heading(Node):
    """Heading of level 1 to 6. Wire tag ``h``.

    ``id`` is an explicit anchor id from the source. It is copied through
    verbatim; duplicate ids are not de-duplicated.

    """

    TAG: ClassVar[str] = "h"

    level: Literal[1, 2, 3, 4, 5, 6] = 1
    children: tuple[RenderTreeElem, ...] = ()
    id: str | None = None


@dataclass(frozen=True, slots=True)
class BlockQuote(Node):
    TAG: ClassVar[str] = "blockquote"

    children: tuple[RenderTreeElem, ...] = ()


@dataclass(frozen=True, slots=True)
class Pre(Node):
    """Code fence container. Wire tag ``pre``.

    Always wraps a single ``Code`` child carrying the fence language.

    """

    TAG: ClassVar[str] = "pre"

    children: tuple[RenderTreeElem, ...] = ()


@dataclass(frozen=True, slots=True)
class OrderedList(Node):
    """Ordered list. Wire tag ``ol``; ``start`` is omitted when it is 1."""

    TAG: ClassVar[str] = "ol"

    children: tuple[RenderTreeElem, ...] = ()
    start: int | None = None


@dataclass(frozen=True, slots=True)
class UnorderedList(Node):
    TAG: ClassVar[str] = "ul"

    children: tuple[RenderTreeElem, ...] = ()


@dataclass(frozen=True, slots=True)
class ListItem(Node):
    TAG: ClassVar[str] = "li"

    children: tuple[RenderTreeElem, ...] = ()


@dataclass(frozen=True, slots=True)
class TaskListItem(Node):
    """List item starting with a ``Checkbox``. Wire tag ``task-list``."""

    TAG: ClassVar[str] = "task-list"

    children: tuple[RenderTreeElem, ...] = ()


@dataclass(frozen=True, slots=True)
class Table(Node):
    """Table with one declared alignment per column. Wire tag ``table``.

    Children are a ``TableHead`` followed by a ``TableBody``.

    """

    TAG: ClassVar[str] = "table"

    align: tuple[TableAlign, ...] = ()
    children: tuple[RenderTreeElem, ...] = ()


@dataclass(frozen=True, slots=True)
class TableHead(Node):
    TAG: ClassVar[str] = "thead"

    children: tuple[RenderTreeElem, ...] = ()


@dataclass(frozen=True, slots=True)
class TableBody(Node):
    TAG: ClassVar[str] = "tbody"

    children: tuple[RenderTreeElem, ...] = ()


@dataclass(frozen=True, slots=True)
class TableRow(Node):
    TAG: ClassVar[str] = "tr"

    children: tuple[RenderTreeElem, ...] = ()


@dataclass(frozen=True, slots=True)
class TableHeaderCell(Node):
    TAG: ClassVar[str] = "th"

    children: tuple[RenderTreeElem, ...] = ()


@dataclass(frozen=True, slots=True)
class TableDataCell(Node):
    TAG: ClassVar[str] = "td"

    children: tuple[RenderTreeElem, ...] = ()


@dataclass(frozen=True, slots=True)
class FootnoteDef(Node):
    """Footnote definition. Wire tag ``fn-def``.

    Never rendered where it appears; collected and emitted in the footnote
    section after the main tree. ``id`` is the numeric id assigned by the
    parser (shared with the matching ``FootnoteRef``), ``name`` the label
    written in the source.

    """

    TAG: ClassVar[str] = "fn-def"

    id: int | str = 0
    children: tuple[RenderTreeElem, ...] = ()
    name: str | None = None


# =============================================================================
# Inline Containers
# =============================================================================


@dataclass(frozen=True, slots=True)
class Link(Node):
    """Hyperlink. Wire tag ``a``.

    ``auto`` marks a bare URL detected by the parser rather than a link
    written by the author.

    """

    TAG: ClassVar[str] = "a"

    href: str = ""
    children: tuple[RenderTreeElem, ...] = ()
    title: str | None = None
    auto: bool = False


@dataclass(frozen=True, slots=True)
class Image(Node):
    """Image. Wire tag ``img``; the children are the alt text."""

    TAG: ClassVar[str] = "img"

    src: str = ""
    children: tuple[RenderTreeElem, ...] = ()
    title: str | None = None


@dataclass(frozen=True, slots=True)
class Emphasis(Node):
    TAG: ClassVar[str] = "em"

    children: tuple[RenderTreeElem, ...] = ()


@dataclass(frozen=True, slots=True)
class Strong(Node):
    TAG: ClassVar[str] = "strong"

    children: tuple[RenderTreeElem, ...] = ()


@dataclass(frozen=True, slots=True)
class Strikethrough(Node):
    TAG: ClassVar[str] = "del"

    children: tuple[RenderTreeElem, ...] = ()


@dataclass(frozen=True, slots=True)
class Code(Node):
    """Inline code, or the content of a code fence. Wire tag ``code``.

    ``lang`` is only present on fenced code with an info string. The raw
    source is the flattened text of the children.

    """

    TAG: ClassVar[str] = "code"

    children: tuple[RenderTreeElem, ...] = ()
    lang: str | None = None

    @property
    def source(self) -> str:
        """Raw fence source."""
        return raw_text(self)


@dataclass(frozen=True, slots=True)
class Emoji(Node):
    TAG: ClassVar[str] = "emoji"

    name: str = ""
    children: tuple[RenderTreeElem, ...] = ()


@dataclass(frozen=True, slots=True)
class Match(Node):
    """Text inside a search match that is not the current one."""

    TAG: ClassVar[str] = "match"

    children: tuple[RenderTreeElem, ...] = ()


@dataclass(frozen=True, slots=True)
class MatchCurrent(Node):
    """Text inside the currently focused search match."""

    TAG: ClassVar[str] = "match-current"

    children: tuple[RenderTreeElem, ...] = ()


@dataclass(frozen=True, slots=True)
class MatchStart(Node):
    """First node of a search match span. Counted once per occurrence."""

    TAG: ClassVar[str] = "match-start"

    children: tuple[RenderTreeElem, ...] = ()


@dataclass(frozen=True, slots=True)
class MatchCurrentStart(Node):
    """First node of the currently focused match span. Counted."""

    TAG: ClassVar[str] = "match-current-start"

    children: tuple[RenderTreeElem, ...] = ()


# =============================================================================
# Leaves
# =============================================================================


@dataclass(frozen=True, slots=True)
class LineBreak(Node):
    TAG: ClassVar[str] = "br"


@dataclass(frozen=True, slots=True)
class ThematicBreak(Node):
    TAG: ClassVar[str] = "hr"


@dataclass(frozen=True, slots=True)
class Checkbox(Node):
    """Task list marker. Only appears inside a ``TaskListItem``."""

    TAG: ClassVar[str] = "checkbox"

    checked: bool = False


@dataclass(frozen=True, slots=True)
class FootnoteRef(Node):
    TAG: ClassVar[str] = "fn-ref"

    id: int | str = 0


@dataclass(frozen=True, slots=True)
class MathExpr(Node):
    """Math expression typeset by the math collaborator. Wire tag ``math``."""

    TAG: ClassVar[str] = "math"

    expr: str = ""
    inline: bool = True


@dataclass(frozen=True, slots=True)
class RawHtml(Node):
    """Raw markup passed through as-is. Wire tag ``html``.

    Relative paths inside the markup are not rewritten against the
    previewed document's directory.

    """

    TAG: ClassVar[str] = "html"

    raw: str = ""


@dataclass(frozen=True, slots=True)
class Modified(Node):
    """Position of the most recent source change. Wire tag ``modified``."""

    TAG: ClassVar[str] = "modified"


# =============================================================================
# Catch-all
# =============================================================================


@dataclass(frozen=True, slots=True)
class UnknownElem(Node):
    """Element whose kind is unknown or whose fields are malformed.

    Keeps the raw wire object for diagnostics. ``children`` holds whatever
    could be decoded from ``c`` so text flattening still sees it.

    """

    tag: str = ""
    raw: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)
    children: tuple[RenderTreeElem, ...] = ()


type Container = (
    Paragraph
    | Heading
    | BlockQuote
    | Pre
    | OrderedList
    | UnorderedList
    | ListItem
    | TaskListItem
    | Table
    | TableHead
    | TableBody
    | TableRow
    | TableHeaderCell
    | TableDataCell
    | FootnoteDef
    | Link
    | Image
    | Emphasis
    | Strong
    | Strikethrough
    | Code
    | Emoji
    | Match
    | MatchCurrent
    | MatchStart
    | MatchCurrentStart
)

type RenderTreeElem = (
    str
    | Container
    | LineBreak
    | ThematicBreak
    | Checkbox
    | FootnoteRef
    | MathExpr
    | RawHtml
    | Modified
    | UnknownElem
)

# Registry of wire tags to node classes
NODE_TYPES: dict[str, type[Node]] = {
    cls.TAG: cls
    for cls in (
        Paragraph,
        Heading,
        BlockQuote,
        Pre,
        OrderedList,
        UnorderedList,
        ListItem,
        TaskListItem,
        Table,
        TableHead,
        TableBody,
        TableRow,
        TableHeaderCell,
        TableDataCell,
        FootnoteDef,
        Link,
        Image,
        Emphasis,
        Strong,
        Strikethrough,
        Code,
        Emoji,
        Match,
        MatchCurrent,
        MatchStart,
        MatchCurrentStart,
        LineBreak,
        ThematicBreak,
        Checkbox,
        FootnoteRef,
        MathExpr,
        RawHtml,
        Modified,
    )
}


def raw_text(elem: RenderTreeElem) -> str:
    """Flatten all descendant text of an element into one string.

    Concatenates depth-first, ignoring node boundaries. Used for image alt
    text and fence sources.

    Example:
        >>> raw_text(Image(src="a.png", children=("a ", Strong(("cat",)))))
        'a cat'

    """
    if isinstance(elem, str):
        return elem
    children = getattr(elem, "children", None)
    if children is None:
        return ""
    return "".join(raw_text(child) for child in children)
