"""Text helpers for HTML serialization of output trees."""

from __future__ import annotations

import html as html_module


def escape_html(text: str) -> str:
    """Escape text for an HTML text node.

    Escapes ``&``, ``<`` and ``>`` only; quotes are left alone because
    text nodes never sit inside an attribute.

    Examples:
        >>> escape_html("a < b & c")
        'a &lt; b &amp; c'
    """
    if not text:
        return ""
    return html_module.escape(text, quote=False)


def escape_attr(text: str) -> str:
    """Escape text for use in a double-quoted attribute value.

    Examples:
        >>> escape_attr('"Title" https://example.com')
        '&quot;Title&quot; https://example.com'
    """
    if not text:
        return ""
    return html_module.escape(text, quote=True).replace("'", "&#x27;")
