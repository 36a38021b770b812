"""Serve photo bytes from the byte cache or the vendor."""

import logging
from dataclasses import dataclass
from http import HTTPStatus

from photo_slideshow.adapters.media_client import MediaClient
from photo_slideshow.domain.errors import NotAuthenticated, NotFound, VendorUnavailable
from photo_slideshow.domain.photos import PhotoBytes, PhotoDescriptor
from photo_slideshow.services.cache import ByteCache
from photo_slideshow.services.photo_cache import PhotoCache
from photo_slideshow.services.tokens import AccessTokenProvider

# Signed URLs answer these once they expire; a missing URL is reported as GONE.
_EXPIRED_URL_STATUSES = {HTTPStatus.UNAUTHORIZED, HTTPStatus.FORBIDDEN, HTTPStatus.GONE}
_FALLBACK_MIME_TYPE = "image/jpeg"

_logger = logging.getLogger(__name__)


@dataclass
class ImageProxy:
    """Resolves photo ids to bytes with a write-through disk cache."""

    photo_cache: PhotoCache
    byte_cache: ByteCache
    media_client: MediaClient
    token_provider: AccessTokenProvider
    width: int = 1920
    height: int = 1080

    async def resolve(self, photo_id: str) -> PhotoBytes:
        """Return bytes for a photo, refreshing expired URLs once."""
        cached = self.byte_cache.get(photo_id)
        if cached is not None:
            return PhotoBytes(content=cached, mime_type=self._mime_type(photo_id))

        descriptor = self._lookup(photo_id)
        try:
            photo = await self._download(descriptor)
        except VendorUnavailable as exc:
            if exc.status_code not in _EXPIRED_URL_STATUSES:
                raise
            _logger.info(
                "Source URL for photo %s rejected (status=%s); refreshing",
                photo_id,
                exc.status_code,
            )
            await self.photo_cache.refresh()
            photo = await self._download(self._lookup(photo_id))

        if self.photo_cache.find(photo_id) is None:
            _logger.info("Photo %s was removed during download; not caching", photo_id)
            return photo
        try:
            self.byte_cache.put(photo_id, photo.content)
        except OSError:
            _logger.exception("Failed to cache bytes for photo %s", photo_id)
        return photo

    def _lookup(self, photo_id: str) -> PhotoDescriptor:
        descriptor = self.photo_cache.find(photo_id)
        if descriptor is None:
            raise NotFound(f"Photo {photo_id} not found")
        return descriptor

    async def _download(self, descriptor: PhotoDescriptor) -> PhotoBytes:
        if not descriptor.source_url:
            raise VendorUnavailable(
                f"Photo {descriptor.id} has no source URL",
                status_code=HTTPStatus.GONE,
            )
        access_token = await self.token_provider.get_access_token()
        if access_token is None:
            raise NotAuthenticated("Google Photos is not connected")
        url = f"{descriptor.source_url}=w{self.width}-h{self.height}"
        photo = await self.media_client.download(url, access_token)
        mime_type = descriptor.mime_type or photo.mime_type or _FALLBACK_MIME_TYPE
        return PhotoBytes(content=photo.content, mime_type=mime_type)

    def _mime_type(self, photo_id: str) -> str:
        descriptor = self.photo_cache.find(photo_id)
        if descriptor is not None and descriptor.mime_type:
            return descriptor.mime_type
        return _FALLBACK_MIME_TYPE
