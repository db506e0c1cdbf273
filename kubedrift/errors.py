"""Exception hierarchy for kubedrift.

Graph operations and the annotation passes never raise; these errors come
from the edges of the engine (hashing, snapshot loading, filter patterns).
"""

from __future__ import annotations


class KubeDriftError(Exception):
    """Base class for every error raised by kubedrift."""


class HashingError(KubeDriftError):
    """Raised when a subtree cannot be serialized for content hashing."""


class SnapshotLoadError(KubeDriftError):
    """Raised when a snapshot file cannot be read or has the wrong shape."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Failed to load snapshot '{source}': {reason}")
        self.source = source
        self.reason = reason


class PatternError(KubeDriftError):
    """Raised when a filter pattern is empty or not a valid regex."""
