"""Exception classes for Vellum.

Provides standardized exceptions for error handling throughout Vellum.

Most rendering problems are node-local and never raise: they are logged
and the offending node degrades to empty or plain output. Only failures
with no sensible fallback surface as exceptions.
"""

from __future__ import annotations


class VellumError(Exception):
    """Base exception for all Vellum errors.

    Subclass this for specific error categories.
    """

    pass


class TreeFormatError(VellumError):
    """The payload handed to the interpreter is not a render tree.

    Raised when the root of a wire payload is not a sequence of elements
    (or is not valid JSON at all). Malformed individual elements do not
    raise; they are kept as ``UnknownElem`` and rendered as nothing.
    """

    def __init__(self, message: str, payload: object = None) -> None:
        """Initialize tree format error.

        Args:
            message: Error description
            payload: The offending payload (optional, kept for diagnostics)
        """
        self.payload = payload
        super().__init__(message)


class RenderError(VellumError):
    """A collaborator broke its rendering contract.

    Raised when a fence or math collaborator returns a value of the wrong
    shape. The interpreter logs it and falls back to plain rendering.
    """

    def __init__(self, collaborator: str, message: str) -> None:
        """Initialize render error.

        Args:
            collaborator: Name of the failing collaborator (e.g., "fence")
            message: Description of the violation
        """
        self.collaborator = collaborator
        super().__init__(f"{collaborator}: {message}")


class MountError(VellumError):
    """The output tree has nowhere to attach.

    Fatal to the render invocation: there is no degraded behavior for a
    missing mount target.
    """

    def __init__(self, target_id: str) -> None:
        """Initialize mount error.

        Args:
            target_id: Element id that was looked up
        """
        self.target_id = target_id
        super().__init__(f"The root element to mount Markdown preview is not found: #{target_id}")
