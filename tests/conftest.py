"""Shared test fixtures."""

import random
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from photo_slideshow.adapters.google_oauth_client import OAuthClient
from photo_slideshow.adapters.media_client import MediaClient
from photo_slideshow.adapters.picker_client import PickerClient
from photo_slideshow.config import Settings
from photo_slideshow.containers import AppContainer
from photo_slideshow.domain.errors import VendorUnavailable
from photo_slideshow.domain.photos import PhotoBytes, PickerSession, SessionConfig
from photo_slideshow.domain.tokens import TokenSet
from photo_slideshow.services.cache import InMemoryByteCache
from photo_slideshow.services.credentials import CredentialStore
from photo_slideshow.services.image_proxy import ImageProxy
from photo_slideshow.services.photo_cache import PhotoCache
from photo_slideshow.services.picker import PickerService
from photo_slideshow.services.tokens import AccessTokenProvider, TokenService
from photo_slideshow.services.uploads import LocalPhotoLibrary

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


def media_item(
    item_id: str,
    *,
    base_url: str | None = None,
    filename: str | None = None,
    mime_type: str = "image/jpeg",
) -> dict[str, object]:
    """Build a Picker API media item payload."""
    if base_url is None:
        base_url = f"https://lh3.googleusercontent.com/{item_id}"
    media_file: dict[str, object] = {
        "mimeType": mime_type,
        "filename": filename or f"{item_id}.jpg",
    }
    if base_url:
        media_file["baseUrl"] = base_url
    return {"id": item_id, "type": "PHOTO", "mediaFile": media_file}


@dataclass
class FakeClock:
    """Manually advanced clock."""

    now: datetime = NOW

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@dataclass
class InMemoryCredentialStore(CredentialStore):
    """In-memory credential store for tests."""

    tokens: TokenSet | None = None
    config: SessionConfig | None = None
    config_saves: int = 0

    def load_tokens(self) -> TokenSet | None:
        return self.tokens

    def save_tokens(self, tokens: TokenSet) -> None:
        self.tokens = tokens

    def delete_tokens(self) -> None:
        self.tokens = None

    def load_config(self) -> SessionConfig | None:
        return self.config

    def save_config(self, config: SessionConfig) -> None:
        self.config_saves += 1
        self.config = config

    def delete_config(self) -> None:
        self.config = None


@dataclass
class StaticTokenProvider(AccessTokenProvider):
    """Token provider returning a fixed token."""

    token: str | None = "access-token"

    async def get_access_token(self) -> str | None:
        return self.token


@dataclass
class FakePickerClient(PickerClient):
    """Fake Picker client serving items per session."""

    items: dict[str, list[dict[str, object]]] = field(default_factory=dict)
    fail_status: int | None = None
    fail: bool = False
    media_items_set: bool = False
    list_calls: list[str] = field(default_factory=list)
    deleted_sessions: list[str] = field(default_factory=list)

    async def create_session(self, access_token: str) -> PickerSession:
        self._maybe_fail()
        return PickerSession(
            id="sess-new",
            picker_uri="https://photos.google.com/picker/sess-new",
            expire_time="2026-01-01T13:00:00Z",
        )

    async def poll_session(self, session_id: str, access_token: str) -> PickerSession:
        self._maybe_fail()
        return PickerSession(
            id=session_id,
            picker_uri=f"https://photos.google.com/picker/{session_id}",
            expire_time="2026-01-01T13:00:00Z",
            media_items_set=self.media_items_set,
        )

    async def list_all_media_items(
        self, session_id: str, access_token: str
    ) -> list[dict[str, object]]:
        self.list_calls.append(session_id)
        self._maybe_fail()
        return list(self.items.get(session_id, []))

    async def delete_session(self, session_id: str, access_token: str) -> None:
        self._maybe_fail()
        self.deleted_sessions.append(session_id)

    def _maybe_fail(self) -> None:
        if self.fail:
            raise VendorUnavailable("picker down", status_code=self.fail_status)


@dataclass
class FakeMediaClient(MediaClient):
    """Fake media client replaying queued outcomes."""

    outcomes: list[PhotoBytes | VendorUnavailable] = field(default_factory=list)
    urls: list[str] = field(default_factory=list)

    async def download(self, url: str, access_token: str) -> PhotoBytes:
        self.urls.append(url)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, VendorUnavailable):
            raise outcome
        return outcome


@dataclass
class FakeOAuthClient(OAuthClient):
    """Fake OAuth client with canned token responses."""

    exchange_payload: dict[str, object] = field(
        default_factory=lambda: {
            "access_token": "fresh-access",
            "refresh_token": "refresh-1",
            "token_type": "Bearer",
            "expires_in": 3599,
        }
    )
    refresh_payload: dict[str, object] = field(
        default_factory=lambda: {
            "access_token": "renewed-access",
            "token_type": "Bearer",
            "expires_in": 3599,
        }
    )
    refresh_error: VendorUnavailable | None = None
    refreshed_with: list[str] = field(default_factory=list)

    def authorization_url(self, state: str | None = None) -> str:
        return "https://accounts.google.com/o/oauth2/v2/auth?client_id=test"

    async def exchange_code(self, code: str) -> dict[str, object]:
        return self.exchange_payload

    async def refresh_access_token(self, refresh_token: str) -> dict[str, object]:
        self.refreshed_with.append(refresh_token)
        if self.refresh_error is not None:
            raise self.refresh_error
        return self.refresh_payload


@pytest.fixture
def settings() -> Settings:
    return Settings(
        google_client_id="client-id",
        google_client_secret="client-secret",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def credential_store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture
def picker_client() -> FakePickerClient:
    return FakePickerClient()


@pytest.fixture
def token_provider() -> StaticTokenProvider:
    return StaticTokenProvider()


@pytest.fixture
def byte_cache() -> InMemoryByteCache:
    return InMemoryByteCache()


@pytest.fixture
def media_client() -> FakeMediaClient:
    return FakeMediaClient()


@pytest.fixture
def photo_cache(
    token_provider: StaticTokenProvider,
    picker_client: FakePickerClient,
    credential_store: InMemoryCredentialStore,
    byte_cache: InMemoryByteCache,
    clock: FakeClock,
) -> PhotoCache:
    return PhotoCache(
        token_provider=token_provider,
        picker_client=picker_client,
        credential_store=credential_store,
        byte_cache=byte_cache,
        clock=clock,
        rng=random.Random(7),
    )


@pytest.fixture
def container(
    settings: Settings,
    credential_store: InMemoryCredentialStore,
    picker_client: FakePickerClient,
    byte_cache: InMemoryByteCache,
    media_client: FakeMediaClient,
    clock: FakeClock,
    tmp_path: Path,
) -> AppContainer:
    credential_store.tokens = TokenSet(
        access_token="access-token",
        refresh_token="refresh-1",
        expires_in=3599,
        saved_at=int(NOW.timestamp()),
    )
    token_service = TokenService(
        credential_store=credential_store,
        oauth_client=FakeOAuthClient(),
        clock=clock,
    )
    photo_cache = PhotoCache(
        token_provider=token_service,
        picker_client=picker_client,
        credential_store=credential_store,
        byte_cache=byte_cache,
        clock=clock,
        rng=random.Random(7),
    )
    image_proxy = ImageProxy(
        photo_cache=photo_cache,
        byte_cache=byte_cache,
        media_client=media_client,
        token_provider=token_service,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        token_service=token_service,
        picker_service=PickerService(
            token_provider=token_service, picker_client=picker_client
        ),
        photo_cache=photo_cache,
        image_proxy=image_proxy,
        local_library=LocalPhotoLibrary(tmp_path / "uploads"),
        close_resources=close_resources,
    )
