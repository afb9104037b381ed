"""
Cache controller.

Owns the current Snapshot and decides when it has to be rebuilt from the row
store. Concurrent refresh requests share a single in-flight rebuild.
"""

import asyncio
import time
from collections.abc import Callable

from loguru import logger

from ..items.codec import pad_row
from ..store.base import RemoteStoreError, RowStore
from .snapshot import Snapshot, build_snapshot

DEFAULT_TTL_SECONDS = 30.0


class CacheController:
    """Holds the item snapshot and rebuilds it once it expires."""

    def __init__(
        self,
        store: RowStore,
        ttl: float = DEFAULT_TTL_SECONDS,
        starting_row: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the controller with no snapshot.

        Args:
            store: Row store to rebuild from
            ttl: Seconds a snapshot stays fresh
            starting_row: Row number of the first data row, defaults to the store's
            clock: Monotonic time source in seconds
        """
        self.store = store
        self.ttl = ttl
        self.starting_row = starting_row if starting_row is not None else store.starting_row
        self.clock = clock
        self._snapshot: Snapshot | None = None
        self._last_build: float | None = None
        # Bumped by invalidate(); a rebuild marks the cache fresh only if it is unchanged
        self._generation = 0
        self._rebuild_task: asyncio.Task | None = None

    @property
    def snapshot(self) -> Snapshot | None:
        """The current snapshot, None before the first successful build."""
        return self._snapshot

    def get_snapshot(self) -> Snapshot | None:
        return self._snapshot

    @property
    def last_build(self) -> float | None:
        """Clock reading taken when the current snapshot's rebuild started."""
        return self._last_build

    @property
    def is_building(self) -> bool:
        return self._rebuild_task is not None and not self._rebuild_task.done()

    def is_stale(self, now: float | None = None) -> bool:
        """Check whether the next access must rebuild."""
        if self._snapshot is None or self._last_build is None:
            return True
        if now is None:
            now = self.clock()
        return now - self._last_build >= self.ttl

    def invalidate(self) -> None:
        """Force the next ensure_fresh() call to rebuild."""
        logger.debug("Cache invalidated")
        self._generation += 1
        self._last_build = None

    async def ensure_fresh(self, force_update: bool = False) -> bool:
        """
        Make sure the snapshot is fresh, rebuilding it if needed.

        Args:
            force_update: Rebuild even if the snapshot has not expired

        Returns:
            True if the snapshot was already fresh, False if a rebuild ran.
            The value is advisory: a failed rebuild also returns False and
            leaves the previous snapshot in place.
        """
        if not force_update and not self.is_stale():
            return True

        if self.is_building:
            logger.debug("Joining in-flight rebuild")
        else:
            self._rebuild_task = asyncio.create_task(self._rebuild())

        # Shielded so one cancelled waiter does not abort the shared rebuild
        await asyncio.shield(self._rebuild_task)
        return False

    async def _rebuild(self) -> None:
        started = self.clock()
        generation = self._generation
        try:
            rows = await self.store.fetch_all()
        except RemoteStoreError as e:
            logger.error("Could not refresh cache: {}", e)
            return

        if self.store.trims_trailing_cells:
            width = len(self.store.columns)
            rows = [pad_row(row, width) for row in rows]

        snapshot = build_snapshot(rows, starting_row=self.starting_row)
        self._snapshot = snapshot
        if generation == self._generation:
            self._last_build = started
        else:
            logger.debug("Cache was invalidated during rebuild, keeping it stale")
        logger.info("Cache rebuilt with {} items", len(snapshot))
