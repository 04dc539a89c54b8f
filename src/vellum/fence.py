"""Fence and math collaborators.

The interpreter hands every ``code`` node to a fence renderer before
falling back to plain code. A fence renderer either declines (returns
``None``) or returns a rendered node plus a *modified* flag telling whether
the content changed since the previous stable render of the same fence.
Modified fences get a last-modified marker so the host can scroll to them.

Protocols:
- FenceRenderer: ``await render(code, position) -> FenceResult | None``
- MathRenderer: ``await render(expression, class_name, position) -> OutputNode``
- DiagramEngine: ``await render(source, diagram_id, theme) -> str`` (SVG)

The default ``CodeFenceRenderer`` routes ``mermaid`` fences to a diagram
engine, ``math`` fences to a math renderer and other languages to the
syntax highlighter. Its diagram numbering and content fingerprints are
owned by the caller and survive across passes, so re-rendering an
unchanged document keeps every diagram stable.

Example:
    fence = CodeFenceRenderer(diagram=MyMermaid(), math=PlainMathRenderer())
    fence.reset_ids()  # once per pass
    result = await fence.render(Code(("graph TD; A-->B",), lang="mermaid"))

"""

from __future__ import annotations

from typing import NamedTuple, Protocol

from vellum import highlighting
from vellum.config import WindowTheme
from vellum.nodes import Code
from vellum.output import Element, OutputNode
from vellum.utils.hashing import fence_fingerprint
from vellum.utils.logger import get_logger

logger = get_logger(__name__)

MATH_INLINE_CLASS = "math-expr-inline"
MATH_BLOCK_CLASS = "math-expr-block"
DIAGRAM_CLASS = "mermaid-diagram"


class FenceResult(NamedTuple):
    """A specialized fence rendering.

    Attributes:
        node: Rendered output replacing the plain ``<code>`` element
        modified: Content differs from the previous stable render

    """

    node: OutputNode
    modified: bool


class FenceRenderer(Protocol):
    """Renders code fence content that needs special handling."""

    async def render(self, code: Code, position: int | None = None) -> FenceResult | None:
        """Render a fence.

        Args:
            code: The ``code`` node (``lang`` and source)
            position: Index of the node among its siblings

        Returns:
            None for plain code, otherwise the rendered node and modified flag.

        Contract:
            - SHOULD NOT raise for malformed fence content; the interpreter
              treats any exception as None anyway
        """
        ...


class MathRenderer(Protocol):
    """Typesets math expressions."""

    async def render(
        self, expression: str, class_name: str, position: int | None = None
    ) -> OutputNode:
        """Typeset ``expression`` with presentation class ``class_name``."""
        ...


class DiagramEngine(Protocol):
    """Turns diagram source into SVG markup."""

    async def render(self, source: str, diagram_id: str, theme: WindowTheme) -> str:
        ...


class PlainMathRenderer:
    """Math renderer without a typesetting engine.

    Emits the expression text inside a span of the presentation class; an
    in-page script such as MathJax can typeset it after mounting.
    """

    async def render(
        self, expression: str, class_name: str, position: int | None = None
    ) -> OutputNode:
        return Element("span", {"class": class_name}, [expression])


class PlainFenceRenderer:
    """Fence renderer that never specializes anything."""

    async def render(self, code: Code, position: int | None = None) -> FenceResult | None:
        return None


class CodeFenceRenderer:
    """Default fence renderer: diagrams, math fences and highlighting.

    Args:
        diagram: Engine for ``mermaid`` fences (None leaves them plain)
        math: Renderer for ``math`` fences (None leaves them plain)
        highlight: Highlight other fence languages when a highlighter exists
        theme: Window theme passed to the diagram engine

    Thread Safety:
        Instances carry cross-pass state (ids and fingerprints). Use one per
        preview and render one pass at a time.

    """

    DIAGRAM_LANGS: frozenset[str] = frozenset({"mermaid"})
    MATH_LANGS: frozenset[str] = frozenset({"math"})

    def __init__(
        self,
        diagram: DiagramEngine | None = None,
        math: MathRenderer | None = None,
        *,
        highlight: bool = True,
        theme: WindowTheme = "light",
    ) -> None:
        self._diagram = diagram
        self._math = math
        self._highlight = highlight
        self._theme: WindowTheme = theme
        self._counters: dict[str, int] = {}
        self._fingerprints: dict[str, str] = {}

    @property
    def theme(self) -> WindowTheme:
        return self._theme

    @theme.setter
    def theme(self, theme: WindowTheme) -> None:
        if theme != self._theme:
            # Every diagram re-renders with the new theme; that is not an edit
            self._fingerprints.clear()
        self._theme = theme

    def reset_ids(self) -> None:
        """Restart fence numbering. Call once at the start of every pass."""
        self._counters.clear()

    def _next_id(self, prefix: str) -> str:
        n = self._counters.get(prefix, 0) + 1
        self._counters[prefix] = n
        return f"{prefix}-{n}"

    def _is_modified(self, fence_id: str, source: str) -> bool:
        fingerprint = fence_fingerprint(source)
        previous = self._fingerprints.get(fence_id)
        self._fingerprints[fence_id] = fingerprint
        return previous is not None and previous != fingerprint

    async def render(self, code: Code, position: int | None = None) -> FenceResult | None:
        lang = code.lang
        if not lang:
            return None

        try:
            if lang in self.DIAGRAM_LANGS and self._diagram is not None:
                return await self._render_diagram(code.source)
            if lang in self.MATH_LANGS and self._math is not None:
                return await self._render_math(code.source, position)
            if self._highlight and highlighting.supports_language(lang):
                return self._render_highlighted(code.source, lang)
        except Exception:
            logger.warning("Fence rendering failed for language %r", lang, exc_info=True)
            return None

        return None

    async def _render_diagram(self, source: str) -> FenceResult:
        diagram_id = self._next_id("diagram")
        svg = await self._diagram.render(source, diagram_id, self._theme)  # type: ignore[union-attr]
        node = Element("div", {"class": DIAGRAM_CLASS, "id": diagram_id}, inner_html=svg)
        return FenceResult(node, self._is_modified(diagram_id, source))

    async def _render_math(self, source: str, position: int | None) -> FenceResult:
        fence_id = self._next_id("math")
        node = await self._math.render(source, MATH_BLOCK_CLASS, position)  # type: ignore[union-attr]
        return FenceResult(node, self._is_modified(fence_id, source))

    def _render_highlighted(self, source: str, lang: str) -> FenceResult | None:
        markup = highlighting.highlight(source, lang)
        if markup is None:
            return None
        node = Element("code", {"class": f"language-{lang}"}, inner_html=markup)
        return FenceResult(node, False)
