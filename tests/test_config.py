"""Tests for ContextVar-based preview configuration.

Validates defaults, context manager behavior, task isolation and that the
active config reaches the footnote section.
"""

import asyncio
from threading import Thread

import pytest

from vellum import (
    PreviewConfig,
    TreeInterpreter,
    get_preview_config,
    preview_config_context,
    reset_preview_config,
    set_preview_config,
)
from vellum.nodes import FootnoteDef
from vellum.output import find_element_by_id


class TestPreviewConfigDataclass:
    """Test PreviewConfig frozen dataclass behavior."""

    def test_default_values(self) -> None:
        """Defaults match the stock preview."""
        config = PreviewConfig()
        assert config.theme == "light"
        assert config.highlight is True
        assert config.footnote_title == "Footnotes"
        assert config.backref_text == "↩"
        assert config.backref_label == "Back to content"

    def test_immutability(self) -> None:
        """Config is frozen and cannot be modified."""
        config = PreviewConfig()
        with pytest.raises(AttributeError):
            config.theme = "dark"  # type: ignore[misc]

    def test_from_dict_ignores_unknown_keys(self) -> None:
        """Host configuration may carry unrelated sections."""
        config = PreviewConfig.from_dict({"theme": "dark", "keymaps": {"j": "down"}})
        assert config.theme == "dark"
        assert config.footnote_title == "Footnotes"

    def test_from_dict_empty(self) -> None:
        assert PreviewConfig.from_dict({}) == PreviewConfig()


class TestContextVarFunctions:
    """Test get/set/reset functions."""

    def teardown_method(self) -> None:
        """Reset config after each test."""
        reset_preview_config()

    def test_default_config(self) -> None:
        assert get_preview_config() == PreviewConfig()

    def test_set_and_get(self) -> None:
        set_preview_config(PreviewConfig(theme="system"))
        assert get_preview_config().theme == "system"

    def test_reset_restores_default(self) -> None:
        set_preview_config(PreviewConfig(footnote_title="Notes"))
        reset_preview_config()
        assert get_preview_config().footnote_title == "Footnotes"


class TestPreviewConfigContext:
    """Test preview_config_context context manager."""

    def test_nested_contexts(self) -> None:
        with preview_config_context(PreviewConfig(theme="dark")):
            with preview_config_context(PreviewConfig(footnote_title="Notes")):
                assert get_preview_config().theme == "light"
                assert get_preview_config().footnote_title == "Notes"
            assert get_preview_config().theme == "dark"
        assert get_preview_config() == PreviewConfig()

    def test_context_restores_on_exception(self) -> None:
        with pytest.raises(ValueError, match="boom"):
            with preview_config_context(PreviewConfig(theme="dark")):
                raise ValueError("boom")
        assert get_preview_config().theme == "light"

    def test_footnote_section_uses_active_config(self) -> None:
        """Title and back-reference text come from the active config."""
        config = PreviewConfig(footnote_title="Notes", backref_text="^", backref_label="Up")
        tree = [FootnoteDef(id=1, children=("note",))]

        with preview_config_context(config):
            result = asyncio.run(TreeInterpreter().run(tree))

        label = find_element_by_id(result.root, "footnote-label")
        assert label is not None
        assert label.children == ["Notes"]
        item = find_element_by_id(result.root, "user-content-fn-1")
        backref = item.children[-1]
        assert backref.children == ["^"]
        assert backref.props["aria-label"] == "Up"


class TestThreadIsolation:
    """Each thread sees its own config."""

    def test_thread_isolation(self) -> None:
        results: dict[int, str] = {}

        def worker(thread_id: int, title: str) -> None:
            set_preview_config(PreviewConfig(footnote_title=title))
            results[thread_id] = get_preview_config().footnote_title

        threads = [Thread(target=worker, args=(i, f"Notes {i}")) for i in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results == {i: f"Notes {i}" for i in range(4)}
        assert get_preview_config().footnote_title == "Footnotes"
