"""
Image hosting package.

Provides a factory function to create the configured image host.
"""

from .base import SOURCE_TYPES, ImageStore, ImageStoreError, UploadedImage
from .imgur import ImgurImageStore


def create_image_store(
    provider_type: str = "imgur",
    client_id: str = "",
    timeout: float = 30.0,
) -> ImageStore:
    """Create an image store instance.

    Args:
        provider_type: Type of host ("imgur")
        client_id: API client id for the host
        timeout: HTTP timeout in seconds

    Returns:
        Configured ImageStore instance

    Raises:
        ValueError: If provider_type is not recognized or client_id is empty

    """
    if provider_type == "imgur":
        return ImgurImageStore(client_id=client_id, timeout=timeout)
    else:
        raise ValueError(f"Unknown image store: {provider_type}")


__all__ = [
    "SOURCE_TYPES",
    "ImageStore",
    "ImageStoreError",
    "ImgurImageStore",
    "UploadedImage",
    "create_image_store",
]
