"""Tests for the MarkdownPreview facade across render passes."""

import asyncio
import json

import pytest

from vellum import MarkdownPreview, PreviewConfig, render, to_html
from vellum.errors import MountError, TreeFormatError
from vellum.fence import CodeFenceRenderer
from vellum.nodes import Code, Paragraph, Pre
from vellum.output import Element, Fragment, find_elements_by_class


class RecordingEngine:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str, str]] = []

    async def render(self, source: str, diagram_id: str, theme: str) -> str:
        self.calls.append((source, diagram_id, theme))
        return "<svg></svg>"


def _diagram_doc(*sources: str) -> list:
    return [Pre((Code((s,), lang="mermaid"),)) for s in sources]


@pytest.fixture
def engine() -> RecordingEngine:
    return RecordingEngine()


@pytest.fixture
def preview(engine: RecordingEngine) -> MarkdownPreview:
    return MarkdownPreview(fence=CodeFenceRenderer(diagram=engine))


class TestPasses:
    """Repeated passes through one preview."""

    def test_render_sync(self) -> None:
        result = MarkdownPreview().render_sync([Paragraph(("hi",))])
        assert to_html(result.root) == "<p>hi</p>"

    def test_module_level_render(self) -> None:
        result = asyncio.run(render([Paragraph(("hi",))]))
        assert result.root == Fragment([Element("p", {}, ["hi"])])

    def test_diagram_ids_stable_across_passes(
        self, preview: MarkdownPreview, engine: RecordingEngine
    ) -> None:
        preview.render_sync(_diagram_doc("a", "b"))
        preview.render_sync(_diagram_doc("a", "b"))
        ids = [call[1] for call in engine.calls]
        assert ids[:2] == ids[2:]
        assert sorted(ids[:2]) == ["diagram-1", "diagram-2"]

    def test_unchanged_document_has_no_marker(self, preview: MarkdownPreview) -> None:
        preview.render_sync(_diagram_doc("graph TD; A-->B"))
        result = preview.render_sync(_diagram_doc("graph TD; A-->B"))
        assert result.last_modified is None

    def test_edited_diagram_gets_marker(self, preview: MarkdownPreview) -> None:
        preview.render_sync(_diagram_doc("graph TD; A-->B"))
        result = preview.render_sync(_diagram_doc("graph TD; A-->C"))
        assert result.last_modified is not None
        markers = find_elements_by_class(result.root, "last-modified-marker")
        assert markers == [result.last_modified]

    def test_theme_is_forwarded(self, preview: MarkdownPreview, engine: RecordingEngine) -> None:
        preview.theme = "dark"
        preview.render_sync(_diagram_doc("a"))
        assert engine.calls[-1][2] == "dark"

    def test_theme_switch_does_not_mark_diagrams(self, preview: MarkdownPreview) -> None:
        preview.render_sync(_diagram_doc("a"))
        preview.theme = "dark"
        result = preview.render_sync(_diagram_doc("a"))
        assert result.last_modified is None

    def test_config_theme_reaches_default_fence(self) -> None:
        preview = MarkdownPreview(config=PreviewConfig(theme="dark"))
        assert preview.fence.theme == "dark"

    def test_config_active_during_pass(self) -> None:
        from vellum.nodes import FootnoteDef

        preview = MarkdownPreview(config=PreviewConfig(footnote_title="Notes"))
        result = preview.render_sync([FootnoteDef(id=1, children=("x",))])
        assert "<h2 id=\"footnote-label\">Notes</h2>" in to_html(result.root)


class TestWirePayloads:
    def test_render_json_text(self) -> None:
        payload = json.dumps([{"t": "p", "c": ["hi"]}])
        result = asyncio.run(MarkdownPreview().render_json(payload))
        assert to_html(result.root) == "<p>hi</p>"

    def test_render_json_list(self) -> None:
        result = asyncio.run(MarkdownPreview().render_json([{"t": "match-start", "c": ["x"]}]))
        assert result.match_count == 1

    def test_render_json_rejects_non_list(self) -> None:
        with pytest.raises(TreeFormatError):
            asyncio.run(MarkdownPreview().render_json('{"t": "p"}'))


class TestMount:
    def test_mount_replaces_root_content(self) -> None:
        document = Element("body", {}, [Element("div", {"id": "preview-root"}, ["old"])])
        result = MarkdownPreview().render_sync([Paragraph(("new",))])
        MarkdownPreview.mount(result, document)
        assert document.children[0].children == [result.root]

    def test_mount_missing_root(self) -> None:
        result = MarkdownPreview().render_sync([])
        with pytest.raises(MountError, match="#preview-root"):
            MarkdownPreview.mount(result, Element("body"))
