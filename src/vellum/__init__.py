"""
Vellum — Render-tree interpreter for Markdown previews

Turns the typed render tree produced by an upstream Markdown parser into a
presentable output tree, while tracking table alignment, footnotes, search
match counts and the position of the most recent edit.

Quick Start:
    >>> import asyncio
    >>> from vellum import from_json, render, to_html
    >>> tree = from_json('[{"t": "p", "c": ["Hello ", {"t": "em", "c": ["World"]}]}]')
    >>> result = asyncio.run(render(tree))
    >>> to_html(result.root)
    '<p>Hello <em>World</em></p>'

    >>> # Or keep a preview around across passes
    >>> from vellum import MarkdownPreview
    >>> preview = MarkdownPreview()
    >>> preview.render_sync(tree).match_count
    0

Installation:
    pip install vellum-preview           # Core interpreter (zero deps)
    pip install vellum-preview[syntax]   # + Syntax highlighting via Rosettes
"""

from collections.abc import Sequence

from vellum.config import (
    PreviewConfig,
    get_preview_config,
    preview_config_context,
    reset_preview_config,
    set_preview_config,
)
from vellum.errors import MountError, RenderError, TreeFormatError, VellumError
from vellum.fence import (
    CodeFenceRenderer,
    DiagramEngine,
    FenceRenderer,
    FenceResult,
    MathRenderer,
    PlainFenceRenderer,
    PlainMathRenderer,
)
from vellum.interpreter import RenderResult, TreeInterpreter
from vellum.legacy import PreviewContent, SyncTreeRenderer
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
    Node,
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
from vellum.output import Element, Fragment, OutputNode, find_element_by_id
from vellum.preview import MarkdownPreview
from vellum.renderers.html import HtmlRenderer, to_html
from vellum.serialization import from_dict, from_json, from_list, to_dict, to_json
from vellum.session import RenderSession

__version__ = "0.1.0"


async def render(
    tree: Sequence[RenderTreeElem],
    *,
    fence: FenceRenderer | None = None,
    math: MathRenderer | None = None,
) -> RenderResult:
    """Render a render tree in a fresh session.

    Args:
        tree: Top-level render tree elements
        fence: Fence collaborator (plain code if None)
        math: Math collaborator (plain spans if None)

    Returns:
        The output root, the last-modified marker handle and the number of
        search matches.

    Example:
        >>> import asyncio
        >>> result = asyncio.run(render([Paragraph(("hi",))]))
        >>> result.root.children
        [Element(tag='p', props={}, children=['hi'], inner_html=None)]
    """
    return await TreeInterpreter(fence, math).run(tree)


__all__ = [
    # Main API
    "render",
    "MarkdownPreview",
    "TreeInterpreter",
    "RenderResult",
    "RenderSession",
    # Legacy
    "PreviewContent",
    "SyncTreeRenderer",
    # Collaborators
    "CodeFenceRenderer",
    "DiagramEngine",
    "FenceRenderer",
    "FenceResult",
    "MathRenderer",
    "PlainFenceRenderer",
    "PlainMathRenderer",
    # Configuration
    "PreviewConfig",
    "get_preview_config",
    "preview_config_context",
    "reset_preview_config",
    "set_preview_config",
    # Errors
    "MountError",
    "RenderError",
    "TreeFormatError",
    "VellumError",
    # Serialization
    "from_dict",
    "from_json",
    "from_list",
    "to_dict",
    "to_json",
    # Output
    "Element",
    "Fragment",
    "HtmlRenderer",
    "OutputNode",
    "find_element_by_id",
    "to_html",
    # Nodes
    "BlockQuote",
    "Checkbox",
    "Code",
    "Emoji",
    "Emphasis",
    "FootnoteDef",
    "FootnoteRef",
    "Heading",
    "Image",
    "LineBreak",
    "Link",
    "ListItem",
    "Match",
    "MatchCurrent",
    "MatchCurrentStart",
    "MatchStart",
    "MathExpr",
    "Modified",
    "Node",
    "OrderedList",
    "Paragraph",
    "Pre",
    "RawHtml",
    "RenderTreeElem",
    "Strikethrough",
    "Strong",
    "Table",
    "TableBody",
    "TableDataCell",
    "TableHead",
    "TableHeaderCell",
    "TableRow",
    "TaskListItem",
    "ThematicBreak",
    "UnknownElem",
    "UnorderedList",
    "raw_text",
]
