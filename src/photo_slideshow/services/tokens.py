"""Access token lifecycle."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from photo_slideshow.adapters.google_oauth_client import OAuthClient
from photo_slideshow.domain.errors import VendorUnavailable
from photo_slideshow.domain.tokens import TokenSet, merge_tokens
from photo_slideshow.services.credentials import CredentialStore

_logger = logging.getLogger(__name__)


class AccessTokenProvider(Protocol):
    """Source of bearer tokens for vendor calls."""

    async def get_access_token(self) -> str | None:
        """Return a usable access token, or None when not connected."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class TokenService(AccessTokenProvider):
    """Keeps the stored OAuth token set usable."""

    credential_store: CredentialStore
    oauth_client: OAuthClient
    clock: Callable[[], datetime] = field(default=_utcnow)

    def authorization_url(self, state: str | None = None) -> str:
        """Return the URL that starts the picker connection."""
        return self.oauth_client.authorization_url(state)

    async def connect(self, code: str) -> TokenSet:
        """Exchange an authorization code and persist the resulting tokens."""
        response = await self.oauth_client.exchange_code(code)
        tokens = self.on_renew(response)
        self.credential_store.save_tokens(tokens)
        return tokens

    def is_connected(self) -> bool:
        """Return true when tokens are stored."""
        tokens = self.credential_store.load_tokens()
        return tokens is not None and bool(tokens.access_token or tokens.refresh_token)

    def on_renew(self, renewal: dict[str, object]) -> TokenSet:
        """Merge a token endpoint response over the stored tokens."""
        return merge_tokens(self.credential_store.load_tokens(), renewal, self.clock())

    async def get_access_token(self) -> str | None:
        """Return the stored token while valid, refreshing it when expired."""
        tokens = self.credential_store.load_tokens()
        if tokens is None:
            return None
        if not tokens.is_expired(self.clock()):
            return tokens.access_token
        if not tokens.refresh_token:
            _logger.warning("Access token expired and no refresh token is stored")
            return None
        try:
            renewal = await self.oauth_client.refresh_access_token(tokens.refresh_token)
        except VendorUnavailable as exc:
            _logger.warning(
                "Token refresh failed (status=%s): %s", exc.status_code, exc
            )
            return None
        merged = self.on_renew(renewal)
        self.credential_store.save_tokens(merged)
        return merged.access_token
