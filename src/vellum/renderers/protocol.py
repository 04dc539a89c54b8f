"""OutputRenderer protocol — stable interface for output tree serializers.

Any serializer that implements ``render(node) -> str`` conforms to this
protocol. The built-in ``HtmlRenderer`` is the reference implementation.

Example:
    from vellum.renderers.protocol import OutputRenderer

    def publish(renderer: OutputRenderer, result: RenderResult) -> str:
        return renderer.render(result.root)

"""

from typing import Protocol

from vellum.output import OutputNode


class OutputRenderer(Protocol):
    """Protocol for output tree serializers."""

    def render(self, node: OutputNode) -> str:
        """Serialize an output tree to a string.

        Args:
            node: Root of the output tree (usually ``RenderResult.root``).

        Returns:
            Serialized output.

        """
        ...
