"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from photo_slideshow.adapters.file_byte_cache import FileByteCache
from photo_slideshow.adapters.google_oauth_client import HttpxGoogleOAuthClient
from photo_slideshow.adapters.json_credential_store import JsonFileCredentialStore
from photo_slideshow.adapters.media_client import HttpxMediaClient
from photo_slideshow.adapters.picker_client import HttpxPickerClient
from photo_slideshow.config import Settings
from photo_slideshow.services.image_proxy import ImageProxy
from photo_slideshow.services.photo_cache import PhotoCache
from photo_slideshow.services.picker import PickerService
from photo_slideshow.services.tokens import TokenService
from photo_slideshow.services.uploads import LocalPhotoLibrary


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    token_service: TokenService
    picker_service: PickerService
    photo_cache: PhotoCache
    image_proxy: ImageProxy
    local_library: LocalPhotoLibrary
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    data_dir = Path(resolved_settings.data_dir)
    credential_store = JsonFileCredentialStore(data_dir)
    byte_cache = FileByteCache(data_dir / "photo-cache")
    oauth_client = HttpxGoogleOAuthClient.create(
        client_id=resolved_settings.google_client_id,
        client_secret=resolved_settings.google_client_secret,
        redirect_uri=resolved_settings.picker_redirect_uri,
        timeout=resolved_settings.http_timeout_seconds,
    )
    picker_client = HttpxPickerClient.create(
        timeout=resolved_settings.http_timeout_seconds
    )
    media_client = HttpxMediaClient.create(
        timeout=resolved_settings.http_timeout_seconds
    )
    token_service = TokenService(
        credential_store=credential_store, oauth_client=oauth_client
    )
    photo_cache = PhotoCache(
        token_provider=token_service,
        picker_client=picker_client,
        credential_store=credential_store,
        byte_cache=byte_cache,
        ttl_seconds=resolved_settings.photo_cache_ttl_seconds,
    )
    image_proxy = ImageProxy(
        photo_cache=photo_cache,
        byte_cache=byte_cache,
        media_client=media_client,
        token_provider=token_service,
        width=resolved_settings.image_width,
        height=resolved_settings.image_height,
    )

    async def close_resources() -> None:
        await oauth_client.close()
        await picker_client.close()
        await media_client.close()

    return AppContainer(
        settings=resolved_settings,
        token_service=token_service,
        picker_service=PickerService(
            token_provider=token_service, picker_client=picker_client
        ),
        photo_cache=photo_cache,
        image_proxy=image_proxy,
        local_library=LocalPhotoLibrary(Path(resolved_settings.uploads_dir)),
        close_resources=close_resources,
    )
