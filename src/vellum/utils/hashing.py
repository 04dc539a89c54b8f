"""Content fingerprints for fence sources.

``CodeFenceRenderer`` remembers one fingerprint per fence id between
passes. A different fingerprint under the same id means the fence was
edited since the previous pass.

Example:
    >>> from vellum.utils.hashing import fence_fingerprint
    >>> fence_fingerprint("hello world")
    'b94d27b9934d3e08'
"""

import hashlib

FINGERPRINT_LENGTH = 16


def hash_str(content: str, truncate: int | None = None, *, algorithm: str = "sha256") -> str:
    """Hex digest of ``content`` encoded as UTF-8.

    Args:
        content: Text to hash
        truncate: Keep only the first N hex characters (full digest if None)
        algorithm: Any name accepted by ``hashlib.new``

    """
    digest = hashlib.new(algorithm, content.encode("utf-8")).hexdigest()
    return digest if truncate is None else digest[:truncate]


def fence_fingerprint(source: str) -> str:
    """Short fingerprint of a fence source."""
    return hash_str(source, FINGERPRINT_LENGTH)
