"""In-memory row store.

Keeps rows in a Python list laid out like the sheet, so positions behave the
same way as with Google Sheets. Useful for local development and tests.
"""

from collections.abc import Sequence

from loguru import logger

from ..items.base import COLUMNS, Row
from .base import RowStore


class InMemoryRowStore(RowStore):
    """List-backed implementation of RowStore."""

    def __init__(
        self,
        rows: Sequence[Row] | None = None,
        columns: Sequence[str] = COLUMNS,
        starting_row: int = 2,
    ):
        """Initialize the store.

        Args:
            rows: Initial data rows, first one at starting_row
            columns: Column schema
            starting_row: Row number of the first data row

        """
        super().__init__(columns=columns, starting_row=starting_row)
        self.rows: list[Row] = [list(row) for row in rows or []]
        self.fetch_count = 0
        logger.debug("InMemoryRowStore initialized with {} rows", len(self.rows))

    def _index(self, position: int) -> int | None:
        index = position - self.starting_row
        if 0 <= index < len(self.rows):
            return index
        return None

    async def fetch_all(self) -> list[Row]:
        """Return a copy of every row."""
        self.fetch_count += 1
        return [list(row) for row in self.rows]

    async def append(self, row: Row) -> bool:
        """Append a row at the end of the table."""
        if not self._check_append(row):
            return False
        self.rows.append(list(row))
        logger.debug("Appended row {}", self.starting_row + len(self.rows) - 1)
        return True

    async def batch_update(self, positions: Sequence[int], rows: Sequence[Row]) -> list[int]:
        """Overwrite rows in place."""
        written: list[int] = []
        for position, row in self._prepare_updates(positions, rows):
            index = self._index(position)
            if index is None:
                logger.warning("Skipping row {} since it is outside the table", position)
                continue
            self.rows[index] = row
            written.append(position)
        logger.debug("Updated {} rows", len(written))
        return written

    async def delete_rows(self, positions: Sequence[int]) -> list[int]:
        """Delete rows, highest position first."""
        if not positions:
            logger.warning("Row positions list is empty")
            return []

        deleted: list[int] = []
        for position in self._descending(positions):
            index = self._index(position)
            if index is None:
                logger.warning("Skipping row {} since it is outside the table", position)
                continue
            logger.debug("Deleting row {}", position)
            del self.rows[index]
            deleted.append(position)
        return deleted
