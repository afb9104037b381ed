"""
Query engine over the item collection.

Point lookups are answered from the cached snapshot. Filters, updates and
deletes always read live rows from the store, so they never act on stale data.
"""

from collections.abc import Callable, Sequence

from loguru import logger
from pydantic import BaseModel, Field

from .cache.controller import CacheController
from .items.base import COLUMNS, Item, Row
from .store.base import RemoteStoreError, RowStore

CellPredicate = Callable[[str], bool]
RowMutator = Callable[[Row], Row]


class FilterResult(BaseModel):
    """Rows matched by a filter, paired with their sheet row numbers."""

    positions: list[int] = Field(default_factory=list, description="1-based sheet row numbers")
    rows: list[Row] = Field(default_factory=list, description="Matching rows as fetched")

    def __len__(self) -> int:
        return len(self.positions)

    def __bool__(self) -> bool:
        return bool(self.positions)


class QueryEngine:
    """Answers lookups from the cache and runs filters and writes against the store."""

    def __init__(
        self,
        cache: CacheController,
        store: RowStore,
        columns: Sequence[str] = COLUMNS,
        starting_row: int | None = None,
        invalidate_on_write: bool = False,
    ):
        """
        Initialize the engine.

        Args:
            cache: Controller owning the snapshot
            store: Row store used for filters and writes
            columns: Column schema used to resolve column names
            starting_row: Row number of the first data row, defaults to the store's
            invalidate_on_write: Invalidate the cache after every successful write,
                so later lookups observe the change
        """
        self.cache = cache
        self.store = store
        self.columns = tuple(columns)
        self.starting_row = starting_row if starting_row is not None else store.starting_row
        self.invalidate_on_write = invalidate_on_write

    async def get_by_id(self, item_id: str, force_update: bool = False) -> Item | None:
        """
        Look up an item by id.

        Args:
            item_id: Item identifier
            force_update: Rebuild the cache before looking up

        Returns:
            The item, or None if unknown or no data is cached
        """
        await self.cache.ensure_fresh(force_update)
        snapshot = self.cache.get_snapshot()
        if snapshot is None:
            logger.error("No data cached")
            return None

        item = snapshot.get(item_id)
        if item is None and item_id not in snapshot.id_index:
            logger.info("Id '{}' does not exist in database", item_id)
        return item

    async def get_by_tag(self, tag: str, force_update: bool = False) -> list[Item]:
        """Return cached items carrying a tag, in sheet order."""
        await self.cache.ensure_fresh(force_update)
        snapshot = self.cache.get_snapshot()
        if snapshot is None:
            logger.error("No data cached")
            return []
        return snapshot.with_tag(tag)

    async def filter(
        self,
        column: str,
        predicate: CellPredicate,
        first_only: bool = False,
    ) -> FilterResult:
        """
        Find live rows whose cell in a column satisfies a predicate.

        Rows too short to have the column are skipped.

        Args:
            column: Column name, e.g. "Id" or "Tags"
            predicate: Called with the cell value
            first_only: Stop at the first match

        Returns:
            FilterResult in sheet order; empty if the column is unknown or the
            store could not be read
        """
        if column not in self.columns:
            logger.error("Database does not contain matching column '{}'", column)
            return FilterResult()
        column_index = self.columns.index(column)

        try:
            rows = await self.store.fetch_all()
        except RemoteStoreError as e:
            logger.error("Could not filter rows: {}", e)
            return FilterResult()

        result = FilterResult()
        for i, row in enumerate(rows):
            if column_index >= len(row):
                continue
            if predicate(row[column_index]):
                result.positions.append(self.starting_row + i)
                result.rows.append(row)
                if first_only:
                    break

        logger.debug("Filter on '{}' matched {} rows", column, len(result))
        return result

    async def update(
        self,
        column: str,
        predicate: CellPredicate,
        mutator: RowMutator,
        first_only: bool = False,
    ) -> list[int]:
        """
        Rewrite the rows matched by a filter.

        The mutator gets a copy of each matching row and returns its
        replacement. Replacements of the wrong width are skipped; the rest are
        written back in one batch.

        Returns:
            Sheet row numbers the store actually wrote
        """
        matches = await self.filter(column, predicate, first_only)
        if not matches:
            return []

        positions: list[int] = []
        rows: list[Row] = []
        for position, row in zip(matches.positions, matches.rows, strict=True):
            mutated = mutator(list(row))
            if len(mutated) != len(self.columns):
                logger.warning(
                    "Skipping row {} since the mutated row has {} columns instead of {}",
                    position,
                    len(mutated),
                    len(self.columns),
                )
                continue
            positions.append(position)
            rows.append(mutated)

        if not positions:
            return []

        try:
            written = await self.store.batch_update(positions, rows)
        except RemoteStoreError as e:
            logger.error("Could not update rows: {}", e)
            return []

        if written:
            self._after_write()
        return written

    async def delete(
        self,
        column: str,
        predicate: CellPredicate,
        first_only: bool = False,
    ) -> list[int]:
        """
        Delete the rows matched by a filter.

        Returns:
            Sheet row numbers the store actually deleted, highest first
        """
        matches = await self.filter(column, predicate, first_only)
        if not matches:
            return []

        try:
            deleted = await self.store.delete_rows(matches.positions)
        except RemoteStoreError as e:
            logger.error("Could not delete rows: {}", e)
            return []

        if deleted:
            self._after_write()
        return deleted

    def _after_write(self) -> None:
        if self.invalidate_on_write:
            self.cache.invalidate()
