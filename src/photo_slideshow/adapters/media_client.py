"""Download client for signed media URLs."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from photo_slideshow.adapters.http_errors import send_vendor_request
from photo_slideshow.domain.photos import PhotoBytes

_DEFAULT_MIME_TYPE = "application/octet-stream"


class MediaClient(Protocol):
    """Interface for downloading photo bytes."""

    async def download(self, url: str, access_token: str) -> PhotoBytes:
        """Download bytes from a signed URL."""


@dataclass
class HttpxMediaClient(MediaClient):
    """Media download client using httpx."""

    http_client: httpx.AsyncClient
    timeout: float = 60.0

    @classmethod
    def create(cls, timeout: float = 60.0) -> "HttpxMediaClient":
        """Create a media client with a managed httpx session."""
        return cls(
            http_client=httpx.AsyncClient(follow_redirects=True), timeout=timeout
        )

    async def download(self, url: str, access_token: str) -> PhotoBytes:
        """Download bytes, raising VendorUnavailable with the vendor status."""
        response = await send_vendor_request(
            self.http_client,
            "GET",
            url,
            action="Download photo",
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=self.timeout,
        )
        content_type = response.headers.get("Content-Type") or _DEFAULT_MIME_TYPE
        return PhotoBytes(
            content=response.content,
            mime_type=content_type.split(";")[0].strip(),
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
