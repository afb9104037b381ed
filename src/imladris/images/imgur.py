"""Imgur image host.

Anonymous uploads authenticated with an application client id.
"""

import httpx
from loguru import logger

from .base import SOURCE_TYPES, ImageStore, ImageStoreError, UploadedImage

IMGUR_API_URL = "https://api.imgur.com/3"


class ImgurImageStore(ImageStore):
    """Imgur implementation of ImageStore."""

    def __init__(
        self,
        client_id: str,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the Imgur client.

        Args:
            client_id: Imgur application client id
            timeout: HTTP timeout in seconds
            client: Optional shared HTTP client; closed by aclose() only if owned

        Raises:
            ValueError: If client_id is empty

        """
        if not client_id:
            raise ValueError("Imgur client id is required")

        self.headers = {
            "Authorization": f"Client-ID {client_id}",
            "Accept": "application/json",
        }
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def _send(self, method: str, path: str, **kwargs) -> dict:
        try:
            response = await self.client.request(
                method, f"{IMGUR_API_URL}/{path}", headers=self.headers, **kwargs
            )
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ImageStoreError(f"Imgur API returned an error: {e}") from e

        if not body.get("success", False):
            raise ImageStoreError(f"Imgur API request failed with status {body.get('status')}")
        return body

    async def upload(self, source_type: str, payload: str) -> UploadedImage:
        """Upload an image to Imgur.

        Raises:
            ValueError: If source_type is not supported
            ImageStoreError: If Imgur rejects the upload

        """
        if source_type not in SOURCE_TYPES:
            allowed = ", ".join(SOURCE_TYPES)
            raise ValueError(f"Image type not supported: '{source_type}' (must be one of {allowed})")

        logger.debug("Uploading image to Imgur (type={})", source_type)
        body = await self._send("POST", "image", json={"type": source_type, "image": payload})
        data = body.get("data") or {}
        image = UploadedImage(
            external_id=data.get("id", ""),
            link=data.get("link", ""),
            delete_token=data.get("deletehash", ""),
        )
        logger.info("Uploaded image {} to {}", image.external_id, image.link)
        return image

    async def delete(self, delete_token: str) -> bool:
        """Delete an image by its delete hash."""
        try:
            await self._send("DELETE", f"image/{delete_token}")
        except ImageStoreError as e:
            logger.error("Could not delete image: {}", e)
            return False
        logger.info("Deleted image with delete hash {}", delete_token)
        return True

    async def aclose(self) -> None:
        """Close the HTTP client if this store created it."""
        if self._owns_client:
            await self.client.aclose()
