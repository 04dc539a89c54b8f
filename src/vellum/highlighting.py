"""Syntax highlighting protocol and injection for Vellum.

Provides optional syntax highlighting for code fences. When
vellum-preview[syntax] is installed, Rosettes is used automatically.
Without a highlighter, fences render as plain code.

Usage:
    # Automatic with vellum-preview[syntax]
    from vellum.fence import CodeFenceRenderer
    fence = CodeFenceRenderer()  # highlights if rosettes is installed

    # Manual injection
    from vellum.highlighting import set_highlighter

    def my_highlighter(code: str, language: str) -> str:
        return f'<span class="hl">{escape(code)}</span>'

    set_highlighter(my_highlighter)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol


class Highlighter(Protocol):
    """Protocol for syntax highlighters.

    Highlighters take code and language and return HTML markup with
    syntax highlighting applied.
    """

    def highlight(self, code: str, language: str) -> str:
        """Highlight code with syntax colors.

        Contract:
            - MUST escape HTML entities in code
            - MUST use CSS classes (not inline styles)
            - MAY raise; callers treat failures as "no highlighting"
        """
        ...

    def supports_language(self, language: str) -> bool:
        """Check if highlighter supports the given language.

        Contract:
            - MUST NOT raise exceptions
        """
        ...


SimpleHighlighter = Callable[[str, str], str]

_highlighter: Highlighter | SimpleHighlighter | None = None
_tried_rosettes: bool = False


def set_highlighter(highlighter: Highlighter | SimpleHighlighter | None) -> None:
    """Set the global syntax highlighter.

    Args:
        highlighter: A Highlighter protocol implementation, or a simple
            function that takes (code, language) and returns HTML.
            Pass None to clear the highlighter.
    """
    global _highlighter, _tried_rosettes
    _highlighter = highlighter
    # An explicit choice (including None) disables auto-detection
    _tried_rosettes = True


def _try_import_rosettes() -> bool:
    """Try to import and configure the Rosettes highlighter."""
    global _highlighter, _tried_rosettes

    if _tried_rosettes:
        return _highlighter is not None

    _tried_rosettes = True

    try:
        import rosettes  # type: ignore[import-not-found]
    except ImportError:
        return False

    class RosettesHighlighter:
        """Rosettes-based syntax highlighter implementing Highlighter protocol."""

        def highlight(self, code: str, language: str) -> str:
            result: str = rosettes.highlight(code, language=language)
            return result

        def supports_language(self, language: str) -> bool:
            try:
                result: bool = rosettes.supports_language(language)
                return result
            except Exception:
                return False

    _highlighter = RosettesHighlighter()
    return True


def get_highlighter() -> Highlighter | SimpleHighlighter | None:
    """Get the current highlighter, loading Rosettes on first use."""
    if _highlighter is None:
        _try_import_rosettes()
    return _highlighter


def supports_language(language: str) -> bool:
    """Whether the configured highlighter can handle ``language``.

    Simple callables are assumed to handle every language.
    """
    highlighter = get_highlighter()
    if highlighter is None:
        return False
    if hasattr(highlighter, "supports_language"):
        return bool(highlighter.supports_language(language))
    return True


def highlight(code: str, language: str) -> str | None:
    """Highlight code using the configured highlighter.

    Returns:
        HTML markup, or None when no highlighter is available.
    """
    highlighter = get_highlighter()
    if highlighter is None:
        return None
    if hasattr(highlighter, "highlight") and callable(highlighter.highlight):
        return highlighter.highlight(code, language)
    if callable(highlighter):
        return highlighter(code, language)
    return None
