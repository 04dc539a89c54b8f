"""ContextVar-based preview configuration for Vellum.

Provides task-local configuration using Python's ContextVars (PEP 567).
Config is set by ``MarkdownPreview`` for the duration of a render pass and
read by the interpreter and the footnote section renderer.

Thread Safety:
    ContextVars are local to the thread and to each asyncio task (tasks copy
    the context they were created in), so concurrent passes cannot observe
    each other's configuration.

Usage:
    from vellum.config import PreviewConfig, preview_config_context

    with preview_config_context(PreviewConfig(footnote_title="Notes")):
        result = asyncio.run(TreeInterpreter().run(tree))

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Literal

type WindowTheme = Literal["light", "dark", "system"]


@dataclass(frozen=True, slots=True)
class PreviewConfig:
    """Immutable preview configuration.

    Attributes:
        theme: Window theme forwarded to diagram collaborators
        highlight: Allow syntax highlighting of code fences
        footnote_title: Heading text of the footnote section
        backref_text: Text of the footnote back-reference link
        backref_label: Accessible label of the back-reference link

    """

    theme: WindowTheme = "light"
    highlight: bool = True
    footnote_title: str = "Footnotes"
    backref_text: str = "↩"
    backref_label: str = "Back to content"

    @classmethod
    def from_dict(cls, config_dict: dict) -> "PreviewConfig":
        """Create PreviewConfig from dictionary.

        Only includes keys that are valid PreviewConfig fields; unknown keys
        are ignored so host configuration files can carry other sections.

        Args:
            config_dict: Dictionary with config values. Keys should match
                PreviewConfig attribute names.

        Returns:
            New PreviewConfig instance with values from dict.

        Example:
            >>> config = PreviewConfig.from_dict({"theme": "dark", "keymaps": {}})
            >>> config.theme
            'dark'

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


_DEFAULT_CONFIG: PreviewConfig = PreviewConfig()

_preview_config: ContextVar[PreviewConfig] = ContextVar(
    "preview_config",
    default=_DEFAULT_CONFIG,
)


def get_preview_config() -> PreviewConfig:
    """Get the active preview configuration for this context."""
    return _preview_config.get()


def set_preview_config(config: PreviewConfig) -> None:
    """Set preview configuration for the current context.

    Args:
        config: PreviewConfig instance to use for this context.

    """
    _preview_config.set(config)


def reset_preview_config() -> None:
    """Reset to the default configuration."""
    _preview_config.set(_DEFAULT_CONFIG)


@contextmanager
def preview_config_context(config: PreviewConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Args:
        config: PreviewConfig to use within the context.

    Example:
        >>> with preview_config_context(PreviewConfig(theme="dark")):
        ...     get_preview_config().theme
        'dark'

    Restores the previous config even if an exception is raised.

    """
    previous = _preview_config.get()
    _preview_config.set(config)
    try:
        yield
    finally:
        _preview_config.set(previous)


__all__ = [
    "PreviewConfig",
    "WindowTheme",
    "get_preview_config",
    "preview_config_context",
    "reset_preview_config",
    "set_preview_config",
]
