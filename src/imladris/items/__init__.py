"""
Item records and the row codec.

Provides the Item model, the sheet column schema, and conversion between
rows and items.
"""

from .base import COLUMNS, InvalidItemError, Item, ItemKind, Row
from .codec import decode_row, encode_item, get_cell, pad_row

__all__ = [
    "COLUMNS",
    "InvalidItemError",
    "Item",
    "ItemKind",
    "Row",
    "decode_row",
    "encode_item",
    "get_cell",
    "pad_row",
]
