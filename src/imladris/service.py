"""
Item service.

Wires the row store, the snapshot cache, the query engine and the optional
image host into the operations callers use.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING
from uuid import uuid4

from loguru import logger

from .cache.controller import CacheController
from .images.base import ImageStore, ImageStoreError
from .items.base import InvalidItemError, Item, ItemKind
from .items.codec import encode_item
from .query import CellPredicate, FilterResult, QueryEngine, RowMutator
from .store import create_row_store
from .store.base import RemoteStoreError, RowStore

if TYPE_CHECKING:
    from .config import Settings


class ImladrisService:
    """Facade over the item collection."""

    def __init__(
        self,
        store: RowStore,
        image_store: ImageStore | None = None,
        cache_ttl: float = 30.0,
        invalidate_on_write: bool = False,
        id_factory: Callable[[], object] = uuid4,
    ):
        self.store = store
        self.image_store = image_store
        self.cache = CacheController(store, ttl=cache_ttl)
        self.engine = QueryEngine(self.cache, store, invalidate_on_write=invalidate_on_write)
        self.id_factory = id_factory

    @classmethod
    def from_settings(cls, settings: Settings) -> ImladrisService:
        """Build the service from application settings."""
        if settings.store_type == "sheets":
            store = create_row_store(
                "sheets",
                credentials_file=settings.credentials_path,
                spreadsheet_id=settings.spreadsheet_id,
                starting_row=settings.starting_row,
                sheet_name=settings.sheet_name,
                sheet_id=settings.sheet_id,
                timeout=settings.request_timeout,
            )
        else:
            store = create_row_store(settings.store_type, starting_row=settings.starting_row)

        image_store = None
        if settings.imgur_client_id:
            from .images import create_image_store

            image_store = create_image_store(
                "imgur", client_id=settings.imgur_client_id, timeout=settings.request_timeout
            )
        else:
            logger.debug("IMGUR_CLIENT_ID not set - image uploads disabled")

        return cls(
            store,
            image_store=image_store,
            cache_ttl=settings.cache_ttl_seconds,
            invalidate_on_write=settings.invalidate_on_write,
        )

    async def add_item(
        self,
        link: str,
        kind: str | ItemKind,
        name: str | None = None,
        tags: Iterable[str] | None = None,
        description: str | None = None,
    ) -> Item | None:
        """
        Append a new item to the sheet.

        Args:
            link: Target URL
            kind: "link" or "image", case-insensitive
            name: Display name, defaults to the link
            tags: Optional tags
            description: Optional description

        Returns:
            The created item, or None if it was invalid or could not be written
        """
        try:
            item, row = encode_item(link, kind, name, tags, description, self.id_factory)
        except InvalidItemError as e:
            logger.error("Invalid item: {}", e)
            return None

        try:
            written = await self.store.append(row)
        except RemoteStoreError as e:
            logger.error("Could not add item: {}", e)
            return None

        if not written:
            return None
        logger.info("Added {} item {}", item.kind.value, item.id)
        if self.engine.invalidate_on_write:
            self.cache.invalidate()
        return item

    async def add_image(
        self,
        source_type: str,
        payload: str,
        name: str | None = None,
        tags: Iterable[str] | None = None,
        description: str | None = None,
    ) -> Item | None:
        """
        Upload an image and add an image item linking to it.

        If the item cannot be written the upload is deleted again.

        Args:
            source_type: "file", "base64" or "url"
            payload: Image data or its URL

        Returns:
            The created item, or None on failure
        """
        if self.image_store is None:
            logger.error("No image store configured")
            return None

        try:
            uploaded = await self.image_store.upload(source_type, payload)
        except (ImageStoreError, ValueError) as e:
            logger.error("Could not upload image: {}", e)
            return None

        item = await self.add_item(uploaded.link, ItemKind.IMAGE, name, tags, description)
        if item is None:
            logger.warning(
                "Removing uploaded image {} since the item was not added", uploaded.external_id
            )
            await self.image_store.delete(uploaded.delete_token)
        return item

    async def refresh(self, force_update: bool = True) -> bool:
        """Rebuild the cache; returns True if it was already fresh."""
        return await self.cache.ensure_fresh(force_update)

    async def all_items(self, force_update: bool = False) -> list[Item]:
        """Return every cached item in sheet order."""
        await self.cache.ensure_fresh(force_update)
        snapshot = self.cache.get_snapshot()
        return list(snapshot.items) if snapshot is not None else []

    async def get_item_by_id(self, item_id: str, force_update: bool = False) -> Item | None:
        return await self.engine.get_by_id(item_id, force_update)

    async def get_items_by_tag(self, tag: str, force_update: bool = False) -> list[Item]:
        return await self.engine.get_by_tag(tag, force_update)

    async def filter_items(
        self, column: str, predicate: CellPredicate, first_only: bool = False
    ) -> FilterResult:
        return await self.engine.filter(column, predicate, first_only)

    async def update_items(
        self,
        column: str,
        predicate: CellPredicate,
        mutator: RowMutator,
        first_only: bool = False,
    ) -> list[int]:
        return await self.engine.update(column, predicate, mutator, first_only)

    async def delete_items(
        self, column: str, predicate: CellPredicate, first_only: bool = False
    ) -> list[int]:
        return await self.engine.delete(column, predicate, first_only)

    async def aclose(self) -> None:
        """Release HTTP clients held by the backends."""
        for backend in (self.store, self.image_store):
            aclose = getattr(backend, "aclose", None)
            if aclose is not None:
                await aclose()
