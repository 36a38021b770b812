"""Tests for token lifecycle and merging."""

import asyncio

from photo_slideshow.domain.errors import VendorUnavailable
from photo_slideshow.domain.tokens import TokenSet, merge_tokens
from photo_slideshow.services.tokens import TokenService
from tests.conftest import NOW, FakeClock, FakeOAuthClient, InMemoryCredentialStore


def _service(
    store: InMemoryCredentialStore, oauth: FakeOAuthClient, clock: FakeClock
) -> TokenService:
    return TokenService(credential_store=store, oauth_client=oauth, clock=clock)


def test_merge_tokens_keeps_refresh_token_when_omitted() -> None:
    current = TokenSet(
        access_token="old",
        refresh_token="refresh-1",
        token_type="Bearer",
        expires_in=3599,
        saved_at=1,
    )

    merged = merge_tokens(current, {"access_token": "new", "expires_in": 1800}, NOW)

    assert merged.access_token == "new"
    assert merged.refresh_token == "refresh-1"
    assert merged.expires_in == 1800
    assert merged.token_type == "Bearer"
    assert merged.saved_at == int(NOW.timestamp())


def test_merge_tokens_without_current_starts_fresh() -> None:
    merged = merge_tokens(None, {"access_token": "a", "refresh_token": "r"}, NOW)

    assert merged.access_token == "a"
    assert merged.refresh_token == "r"


def test_get_access_token_absent_when_not_connected(clock: FakeClock) -> None:
    service = _service(InMemoryCredentialStore(), FakeOAuthClient(), clock)

    assert asyncio.run(service.get_access_token()) is None


def test_get_access_token_returns_valid_token_without_refresh(
    clock: FakeClock,
) -> None:
    store = InMemoryCredentialStore(
        tokens=TokenSet(
            access_token="current",
            refresh_token="refresh-1",
            expires_in=3599,
            saved_at=int(NOW.timestamp()),
        )
    )
    oauth = FakeOAuthClient()

    token = asyncio.run(_service(store, oauth, clock).get_access_token())

    assert token == "current"
    assert oauth.refreshed_with == []


def test_get_access_token_refreshes_and_persists_merged_tokens(
    clock: FakeClock,
) -> None:
    store = InMemoryCredentialStore(
        tokens=TokenSet(
            access_token="stale",
            refresh_token="refresh-1",
            expires_in=3599,
            saved_at=int(NOW.timestamp()),
        )
    )
    oauth = FakeOAuthClient()
    clock.advance(3600)

    token = asyncio.run(_service(store, oauth, clock).get_access_token())

    assert token == "renewed-access"
    assert oauth.refreshed_with == ["refresh-1"]
    assert store.tokens is not None
    assert store.tokens.access_token == "renewed-access"
    assert store.tokens.refresh_token == "refresh-1"
    assert store.tokens.saved_at == int(clock.now.timestamp())


def test_get_access_token_absent_when_refresh_fails(clock: FakeClock) -> None:
    store = InMemoryCredentialStore(
        tokens=TokenSet(
            access_token="stale",
            refresh_token="refresh-1",
            expires_in=60,
            saved_at=int(NOW.timestamp()),
        )
    )
    oauth = FakeOAuthClient(refresh_error=VendorUnavailable("denied", 400))

    token = asyncio.run(_service(store, oauth, clock).get_access_token())

    assert token is None
    assert store.tokens.access_token == "stale"


def test_connect_stores_exchanged_tokens(clock: FakeClock) -> None:
    store = InMemoryCredentialStore()
    service = _service(store, FakeOAuthClient(), clock)

    asyncio.run(service.connect("auth-code"))

    assert service.is_connected()
    assert store.tokens is not None
    assert store.tokens.refresh_token == "refresh-1"
