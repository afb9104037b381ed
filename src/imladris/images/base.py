"""
Abstract base class for image hosting.

Image items link to a hosted copy of the image; the hosting service is
swappable behind this interface.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

SOURCE_TYPES = ("file", "base64", "url")


class ImageStoreError(Exception):
    """Raised when the image host rejects a request or cannot be reached."""


class UploadedImage(BaseModel):
    """An image accepted by the host."""

    external_id: str = Field(description="Host-side image identifier")
    link: str = Field(description="Public URL of the hosted image")
    delete_token: str = Field(description="Token required to delete the image later")


class ImageStore(ABC):
    """Abstract interface for image hosts."""

    @abstractmethod
    async def upload(self, source_type: str, payload: str) -> UploadedImage:
        """
        Upload an image.

        Args:
            source_type: How payload is encoded ("file", "base64" or "url")
            payload: The image data or its URL

        Returns:
            The hosted image
        """
        pass

    @abstractmethod
    async def delete(self, delete_token: str) -> bool:
        """Delete a hosted image, returning True on success."""
        pass
