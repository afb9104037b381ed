"""Pytest fixtures and configuration for imladris tests.

This module provides shared fixtures for testing the row codec, the snapshot
cache, the query engine and the store adapters.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from loguru import logger

from imladris.cache.controller import CacheController
from imladris.items.base import COLUMNS
from imladris.query import QueryEngine
from imladris.store.base import RowStore
from imladris.store.memory import InMemoryRowStore

# --- Helpers ---


class FakeClock:
    """Manually advanced time source for cache expiry tests."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class GatedRowStore(InMemoryRowStore):
    """In-memory store whose fetches block until the gate is opened."""

    def __init__(self, rows=None):
        super().__init__(rows)
        self.gate = asyncio.Event()

    async def fetch_all(self):
        await self.gate.wait()
        return await super().fetch_all()


# --- Sample Data Fixtures ---


@pytest.fixture
def sample_rows() -> list[list[str]]:
    """Rows as they come back from the sheet, starting at row 2."""
    return [
        ["id-1", "https://google.com", "link", "Google", "search,Tools", "Search engine"],
        ["id-2", "https://i.imgur.com/cat.png", "image", "Cat", "cats,funny", ""],
        ["", "https://nobody.com", "link", "No id", "", ""],
        ["id-3", "https://python.org", "LINK", "Python", "tools", "Language"],
        ["id-4", "https://short.com", "link"],
    ]


# --- Store Fixtures ---


@pytest.fixture
def memory_store(sample_rows) -> InMemoryRowStore:
    """Create an in-memory store holding the sample rows."""
    return InMemoryRowStore(sample_rows)


@pytest.fixture
def mock_store(sample_rows) -> RowStore:
    """Create a mock row store."""
    store = MagicMock(spec=RowStore)
    store.starting_row = 2
    store.columns = COLUMNS
    store.trims_trailing_cells = False

    async def mock_fetch_all() -> list[list[str]]:
        """Return a copy of the sample rows."""
        return [list(row) for row in sample_rows]

    store.fetch_all = AsyncMock(side_effect=mock_fetch_all)
    store.append = AsyncMock(return_value=True)
    store.batch_update = AsyncMock(side_effect=lambda positions, rows: list(positions))
    store.delete_rows = AsyncMock(side_effect=lambda positions: sorted(set(positions), reverse=True))

    return store


# --- Core Fixtures ---


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def gated_store(sample_rows) -> GatedRowStore:
    """Create an in-memory store whose fetches wait for store.gate."""
    return GatedRowStore(sample_rows)


@pytest.fixture
def cache(memory_store, clock) -> CacheController:
    """Create a cache controller over the in-memory store."""
    return CacheController(memory_store, ttl=30.0, clock=clock)


@pytest.fixture
def engine(cache, memory_store) -> QueryEngine:
    """Create a query engine over the in-memory store."""
    return QueryEngine(cache, memory_store)


# --- Logging Fixtures ---


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during a test."""
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
