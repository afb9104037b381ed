"""
Snapshot cache package.

Provides the immutable item snapshot, the index builder, and the controller
that keeps the snapshot fresh.
"""

from .controller import DEFAULT_TTL_SECONDS, CacheController
from .snapshot import Snapshot, build_snapshot

__all__ = [
    "DEFAULT_TTL_SECONDS",
    "CacheController",
    "Snapshot",
    "build_snapshot",
]
