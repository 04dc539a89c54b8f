"""Logger namespacing for Vellum.

Every module logs through ``get_logger(__name__)``. Names are forced under
the ``vellum`` namespace so a host can tune the whole preview with one
logger (``logging.getLogger("vellum")``), whether a name comes from a
package module or from a short label such as ``"fence"``.

Levels used across the package:
    debug: pass start, footnote emission
    warning: collaborator failures, malformed wire elements
    error: unknown render tree kinds
"""

from __future__ import annotations

import logging

_NAMESPACE = "vellum"


def get_logger(name: str) -> logging.Logger:
    """Logger for ``name`` inside the ``vellum`` namespace.

    Example:
        >>> get_logger("fence").name
        'vellum.fence'
        >>> get_logger("vellum.interpreter").name
        'vellum.interpreter'
    """
    if name != _NAMESPACE and not name.startswith(f"{_NAMESPACE}."):
        name = f"{_NAMESPACE}.{name}"
    return logging.getLogger(name)
