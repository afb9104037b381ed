"""
Abstract base class for row stores.

Enables swapping between Google Sheets and an in-memory table. Positions are
1-based remote row numbers, the same numbers the spreadsheet shows.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from loguru import logger

from ..items.base import COLUMNS, Row


class RemoteStoreError(Exception):
    """Raised when the remote store cannot be reached or rejects a request."""


class RowStore(ABC):
    """Abstract interface for the authoritative row storage."""

    # Backends that drop trailing empty cells return rows that only look short
    trims_trailing_cells = False

    def __init__(self, columns: Sequence[str] = COLUMNS, starting_row: int = 2):
        self.columns = tuple(columns)
        self.starting_row = starting_row

    @abstractmethod
    async def fetch_all(self) -> list[Row]:
        """
        Fetch every data row, in sheet order.

        Returns:
            List of rows; individual rows may be shorter than the schema

        Raises:
            RemoteStoreError: If the backend request fails
        """
        pass

    @abstractmethod
    async def append(self, row: Row) -> bool:
        """
        Append one row after the last data row.

        Args:
            row: Cells in column order

        Returns:
            True if the row was written, False if it was refused
        """
        pass

    @abstractmethod
    async def batch_update(self, positions: Sequence[int], rows: Sequence[Row]) -> list[int]:
        """
        Overwrite rows at the given positions in a single request.

        Args:
            positions: 1-based row numbers
            rows: Full-width replacement rows, one per position

        Returns:
            Row numbers that were written, in the given order
        """
        pass

    @abstractmethod
    async def delete_rows(self, positions: Sequence[int]) -> list[int]:
        """
        Delete rows at the given positions.

        Args:
            positions: 1-based row numbers, in any order

        Returns:
            Row numbers that were deleted, highest first
        """
        pass

    def _check_append(self, row: Row) -> bool:
        """Refuse rows wider than the schema."""
        if len(row) > len(self.columns):
            logger.error(
                "Store only supports up to {} columns, refusing row with {}",
                len(self.columns),
                len(row),
            )
            return False
        return True

    def _prepare_updates(
        self, positions: Sequence[int], rows: Sequence[Row]
    ) -> list[tuple[int, Row]]:
        """Pair positions with rows, dropping rows of the wrong width."""
        if len(positions) != len(rows):
            logger.error(
                "Row positions length ({}) must match row values length ({})",
                len(positions),
                len(rows),
            )
            return []

        updates = []
        for position, row in zip(positions, rows, strict=True):
            if len(row) != len(self.columns):
                logger.warning(
                    "Skipping row {} since it has {} columns instead of {}",
                    position,
                    len(row),
                    len(self.columns),
                )
                continue
            updates.append((position, list(row)))
        return updates

    @staticmethod
    def _descending(positions: Sequence[int]) -> list[int]:
        """Order positions so earlier deletions never shift later ones."""
        return sorted(set(positions), reverse=True)
