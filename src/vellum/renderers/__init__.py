"""Vellum output serializers.

Serializers turn an interpreter output tree into a concrete format.

Available Renderers:
- HtmlRenderer: Serializes the output tree to an HTML string

"""

from vellum.renderers.html import HtmlRenderer, element_to_html, to_html
from vellum.renderers.protocol import OutputRenderer

__all__ = ["HtmlRenderer", "OutputRenderer", "element_to_html", "to_html"]
