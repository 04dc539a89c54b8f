"""Utility modules for Vellum.

Provides:
- text: escape_html, escape_attr for HTML serialization
- hashing: hash_str, fence_fingerprint for fence content fingerprints
- logger: get_logger for logging
"""

from vellum.utils.hashing import fence_fingerprint, hash_str
from vellum.utils.logger import get_logger
from vellum.utils.text import escape_attr, escape_html

__all__ = [
    "escape_attr",
    "escape_html",
    "fence_fingerprint",
    "get_logger",
    "hash_str",
]
