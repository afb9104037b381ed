"""
Snapshot of the item collection and the index builder that produces it.

A snapshot is built in one pass over the fetched rows and never modified
afterwards; the cache controller swaps in a new one on every rebuild.
"""

from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime, timezone
from types import MappingProxyType

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..items.base import Item
from ..items.codec import decode_row


class Snapshot(BaseModel):
    """Materialized view of all items plus id and tag indexes.

    Positions are 0-based indexes into ``items``, unrelated to sheet row numbers.
    """

    model_config = ConfigDict(frozen=True)

    items: tuple[Item, ...] = Field(default=(), description="Decoded items in sheet order")
    id_index: Mapping[str, int] = Field(
        default_factory=dict,
        validate_default=True,
        description="Item id -> position, last occurrence wins",
    )
    tag_index: Mapping[str, tuple[int, ...]] = Field(
        default_factory=dict,
        validate_default=True,
        description="Tag -> ascending positions of items carrying it",
    )
    built_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the snapshot was built",
    )

    @field_validator("id_index", "tag_index", mode="after")
    @classmethod
    def _read_only(cls, value: Mapping) -> Mapping:
        return MappingProxyType(dict(value))

    def __len__(self) -> int:
        return len(self.items)

    def get(self, item_id: str) -> Item | None:
        """Look up an item by id, None if unknown or the index is inconsistent."""
        position = self.id_index.get(item_id)
        if position is None:
            return None
        if position < 0 or position >= len(self.items):
            logger.error("Internal index {} for id '{}' is invalid", position, item_id)
            return None
        return self.items[position]

    def with_tag(self, tag: str) -> list[Item]:
        """Return items carrying a tag, in sheet order."""
        return [self.items[p] for p in self.tag_index.get(tag.lower(), ())]

    @property
    def tags(self) -> list[str]:
        """All known tags, sorted."""
        return sorted(self.tag_index)


def build_snapshot(
    rows: Iterable[Sequence],
    starting_row: int = 2,
    built_at: datetime | None = None,
) -> Snapshot:
    """
    Index fetched rows into a Snapshot.

    Rows that fail to decode are skipped without taking a position. Duplicate
    ids are reported and the later row wins in the id index; both rows stay
    in ``items``.

    Args:
        rows: Rows in sheet order
        starting_row: Sheet row number of the first row, for log messages
        built_at: Build timestamp, defaults to now

    Returns:
        The new Snapshot
    """
    logger.info("Reindexing database")
    items: list[Item] = []
    id_index: dict[str, int] = {}
    tag_positions: dict[str, list[int]] = {}

    position = 0
    for i, row in enumerate(rows):
        row_number = starting_row + i
        item = decode_row(row, row_number)
        if item is None:
            continue

        items.append(item)

        if item.id in id_index:
            logger.warning("Duplicate id found '{}' on row {}", item.id, row_number)
        id_index[item.id] = position

        if item.tags is not None:
            for tag in item.tags:
                tag_positions.setdefault(tag, []).append(position)

        position += 1

    logger.debug("Indexed {} items with {} distinct tags", len(items), len(tag_positions))
    return Snapshot(
        items=tuple(items),
        id_index=id_index,
        tag_index={tag: tuple(positions) for tag, positions in tag_positions.items()},
        built_at=built_at or datetime.now(timezone.utc),
    )
