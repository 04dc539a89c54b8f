"""High-level preview facade.

``MarkdownPreview`` is what a host holds on to for the lifetime of a
preview window. It owns the collaborators whose identity must survive
across passes (diagram numbering and fingerprints, theme) and creates a
fresh interpreter and session for every pass.

Example:
    preview = MarkdownPreview(fence=CodeFenceRenderer(diagram=engine))
    preview.theme = "dark"
    result = await preview.render_json(payload)
    preview.mount(result, host_document)
    scroll_into_view(result.last_modified)

Cancellation:
    There is no cancellation primitive. A newer pass supersedes an older
    one; the caller drops the older result.

"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

from vellum.config import PreviewConfig, WindowTheme, preview_config_context
from vellum.errors import MountError
from vellum.fence import CodeFenceRenderer, FenceRenderer, MathRenderer, PlainMathRenderer
from vellum.interpreter import RenderResult, TreeInterpreter
from vellum.legacy import PREVIEW_ROOT_ID
from vellum.nodes import RenderTreeElem
from vellum.output import OutputNode, find_element_by_id
from vellum.serialization import from_json, from_list
from vellum.utils.logger import get_logger

logger = get_logger(__name__)


class MarkdownPreview:
    """Render render trees pass after pass with stable collaborators.

    Args:
        fence: Fence collaborator; a ``CodeFenceRenderer`` sharing ``math``
            when None
        math: Math collaborator; ``PlainMathRenderer`` when None
        config: Preview configuration active during each pass

    """

    def __init__(
        self,
        fence: FenceRenderer | None = None,
        math: MathRenderer | None = None,
        config: PreviewConfig | None = None,
    ) -> None:
        self.config = config or PreviewConfig()
        self.math: MathRenderer = math or PlainMathRenderer()
        self.fence: FenceRenderer = fence or CodeFenceRenderer(
            math=self.math,
            highlight=self.config.highlight,
            theme=self.config.theme,
        )
        self.theme = self.config.theme

    @property
    def theme(self) -> WindowTheme:
        return self._theme

    @theme.setter
    def theme(self, theme: WindowTheme) -> None:
        self._theme = theme
        if hasattr(self.fence, "theme"):
            self.fence.theme = theme

    async def render(self, tree: Sequence[RenderTreeElem]) -> RenderResult:
        """Render one pass with a fresh session."""
        reset_ids = getattr(self.fence, "reset_ids", None)
        if reset_ids is not None:
            reset_ids()

        interpreter = TreeInterpreter(self.fence, self.math)
        with preview_config_context(self.config):
            result = await interpreter.run(tree)
        logger.debug("Rendered preview with %d search matches", result.match_count)
        return result

    async def render_json(self, data: str | bytes | list) -> RenderResult:
        """Decode a wire payload (JSON text or decoded list) and render it.

        Raises:
            TreeFormatError: If the payload is not a render tree.

        """
        tree = from_list(data) if isinstance(data, list) else from_json(data)
        return await self.render(tree)

    def render_sync(self, tree: Sequence[RenderTreeElem]) -> RenderResult:
        """Run a pass on a private event loop.

        Must not be called from inside a running event loop.
        """
        return asyncio.run(self.render(tree))

    @staticmethod
    def mount(
        result: RenderResult, document: OutputNode, root_id: str = PREVIEW_ROOT_ID
    ) -> None:
        """Replace the content of the mount element with the result.

        Raises:
            MountError: If ``document`` has no element with id ``root_id``.

        """
        root = find_element_by_id(document, root_id)
        if root is None:
            raise MountError(root_id)
        root.inner_html = None
        root.children[:] = [result.root]
