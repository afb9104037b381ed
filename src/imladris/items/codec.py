"""
Row codec.

Converts between positional spreadsheet rows and Item records. Rows coming
back from the sheet may be short; every accessor tolerates that.
"""

from collections.abc import Callable, Iterable, Sequence
from uuid import uuid4

from loguru import logger

from .base import (
    COLUMNS,
    DESCRIPTION_INDEX,
    ID_INDEX,
    LINK_INDEX,
    NAME_INDEX,
    TAG_SEPARATOR,
    TAGS_INDEX,
    TYPE_INDEX,
    InvalidItemError,
    Item,
    ItemKind,
    Row,
)


def get_cell(row: Sequence, column_index: int) -> str | None:
    """Return a cell value, or None if it is missing or empty.

    A short row and an explicitly empty cell are indistinguishable here.
    """
    if column_index >= len(row):
        return None
    cell = row[column_index]
    if cell is None:
        return None
    cell = str(cell)
    if len(cell) == 0:
        return None
    return cell


def pad_row(row: Sequence, width: int = len(COLUMNS)) -> Row:
    """Extend a row with empty cells up to width."""
    row = list(row)
    if len(row) < width:
        row.extend([""] * (width - len(row)))
    return row


def decode_tags(cell: str | None) -> list[str] | None:
    """Split a Tags cell into lowercase tags, None when the cell is empty."""
    if cell is None:
        return None
    return cell.lower().split(TAG_SEPARATOR)


def encode_tags(tags: Iterable[str] | None) -> str:
    """Join tags into a single Tags cell."""
    if tags is None:
        return ""
    return TAG_SEPARATOR.join(tags)


def decode_kind(cell: str | None, row_label: str = "") -> ItemKind | None:
    """Decode a Type cell, logging and returning None for unknown kinds."""
    if cell is None:
        return None
    try:
        return ItemKind.parse(cell)
    except InvalidItemError as e:
        logger.warning("{}{}", row_label, e)
        return None


def decode_row(row: Sequence, row_number: int | None = None) -> Item | None:
    """
    Decode a row into an Item.

    Args:
        row: Cells in COLUMNS order
        row_number: Remote row number, only used in log messages

    Returns:
        The decoded Item, or None if the row is shorter than the schema
        or has no id.
    """
    label = f"Row {row_number}: " if row_number is not None else ""

    if len(row) < len(COLUMNS):
        logger.warning(
            "{}skipping malformed row with {} of {} columns", label, len(row), len(COLUMNS)
        )
        return None

    item_id = get_cell(row, ID_INDEX)
    if item_id is None:
        logger.warning("{}skipping invalid row since it has no id", label)
        return None

    return Item(
        id=item_id,
        link=get_cell(row, LINK_INDEX),
        kind=decode_kind(get_cell(row, TYPE_INDEX), label),
        name=get_cell(row, NAME_INDEX),
        tags=decode_tags(get_cell(row, TAGS_INDEX)),
        description=get_cell(row, DESCRIPTION_INDEX),
    )


def encode_item(
    link: str,
    kind: str | ItemKind,
    name: str | None = None,
    tags: Iterable[str] | None = None,
    description: str | None = None,
    id_factory: Callable[[], object] = uuid4,
) -> tuple[Item, Row]:
    """
    Build a new Item and its full-width row.

    Args:
        link: Target URL, required
        kind: "link" or "image", case-insensitive
        name: Display name, defaults to the link
        tags: Tags to attach; stored lowercase
        description: Optional description
        id_factory: Callable producing a fresh unique id

    Returns:
        Tuple of (item, row) where row follows COLUMNS order

    Raises:
        InvalidItemError: If link is empty or kind is not supported
    """
    if not link:
        raise InvalidItemError("Item link cannot be empty")
    parsed_kind = ItemKind.parse(kind)

    item_id = str(id_factory())
    name = name or link
    tag_list = [tag.lower() for tag in tags] if tags else None
    tag_cell = encode_tags(tag_list)

    item = Item(
        id=item_id,
        link=link,
        kind=parsed_kind,
        name=name,
        tags=decode_tags(tag_cell or None),
        description=description or None,
    )
    row = [item_id, link, parsed_kind.value, name, tag_cell, description or ""]
    return item, row
