"""
Row store package.

Provides a factory function to create the configured row store.
"""

from .base import RemoteStoreError, RowStore
from .memory import InMemoryRowStore
from .sheets import ServiceAccountTokenProvider, SheetsRowStore, column_letter


def create_row_store(store_type: str = "sheets", **kwargs) -> RowStore:
    """
    Factory function to create a row store.

    Args:
        store_type: Type of store ("sheets" or "memory")
        **kwargs: Backend-specific arguments. For "sheets", credentials_file
            may be passed instead of token_provider.

    Returns:
        Configured RowStore instance

    Raises:
        ValueError: If store_type is not recognized
    """
    if store_type == "sheets":
        if "token_provider" not in kwargs:
            kwargs["token_provider"] = ServiceAccountTokenProvider(kwargs.pop("credentials_file"))
        else:
            kwargs.pop("credentials_file", None)
        return SheetsRowStore(**kwargs)
    elif store_type == "memory":
        return InMemoryRowStore(
            rows=kwargs.get("rows"),
            starting_row=kwargs.get("starting_row", 2),
        )
    else:
        raise ValueError(f"Unknown row store type: {store_type}")


__all__ = [
    "RemoteStoreError",
    "RowStore",
    "InMemoryRowStore",
    "SheetsRowStore",
    "ServiceAccountTokenProvider",
    "column_letter",
    "create_row_store",
]
