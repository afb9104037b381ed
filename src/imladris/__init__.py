"""
Imladris.

A searchable collection of tagged links and images whose authoritative copy
lives in a Google Sheet, served through an in-process snapshot cache.

Usage:
    # List every item
    imladris show

    # Add a link
    imladris add https://example.com --tag reference

    # Check configuration
    imladris info
"""

__version__ = "0.1.0"

from .cache import CacheController, Snapshot, build_snapshot
from .items import COLUMNS, InvalidItemError, Item, ItemKind
from .query import FilterResult, QueryEngine
from .service import ImladrisService

__all__ = [
    "COLUMNS",
    "CacheController",
    "FilterResult",
    "ImladrisService",
    "InvalidItemError",
    "Item",
    "ItemKind",
    "QueryEngine",
    "Snapshot",
    "build_snapshot",
]
