"""Google OAuth client for the Photos Picker scope."""

from dataclasses import dataclass
from typing import Protocol
from urllib.parse import urlencode

import httpx

from photo_slideshow.adapters.http_errors import read_json_object, send_vendor_request

AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"  # noqa: S105
PICKER_SCOPE = "https://www.googleapis.com/auth/photospicker.mediaitems.readonly"


class OAuthClient(Protocol):
    """Interface for the OAuth authorization code and refresh flows."""

    def authorization_url(self, state: str | None = None) -> str:
        """Return the consent screen URL."""

    async def exchange_code(self, code: str) -> dict[str, object]:
        """Exchange an authorization code for tokens."""

    async def refresh_access_token(self, refresh_token: str) -> dict[str, object]:
        """Obtain a new access token from a refresh token."""


@dataclass
class HttpxGoogleOAuthClient(OAuthClient):
    """Google OAuth client using httpx."""

    client_id: str
    client_secret: str
    redirect_uri: str
    http_client: httpx.AsyncClient
    timeout: float = 20.0

    @classmethod
    def create(
        cls,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        timeout: float = 20.0,
    ) -> "HttpxGoogleOAuthClient":
        """Create an OAuth client with a managed httpx session."""
        return cls(
            client_id=client_id,
            client_secret=client_secret,
            redirect_uri=redirect_uri,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    def authorization_url(self, state: str | None = None) -> str:
        """Return the consent screen URL requesting offline access."""
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": PICKER_SCOPE,
            "access_type": "offline",
            "prompt": "consent",
        }
        if state:
            params["state"] = state
        return f"{AUTHORIZE_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> dict[str, object]:
        """Exchange an authorization code for tokens."""
        return await self._token_request(
            {
                "code": code,
                "redirect_uri": self.redirect_uri,
                "grant_type": "authorization_code",
            },
            action="Exchange authorization code",
        )

    async def refresh_access_token(self, refresh_token: str) -> dict[str, object]:
        """Obtain a new access token from a refresh token."""
        return await self._token_request(
            {"refresh_token": refresh_token, "grant_type": "refresh_token"},
            action="Refresh access token",
        )

    async def _token_request(
        self, data: dict[str, str], *, action: str
    ) -> dict[str, object]:
        response = await send_vendor_request(
            self.http_client,
            "POST",
            TOKEN_URL,
            action=action,
            data={
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                **data,
            },
            timeout=self.timeout,
        )
        return read_json_object(response, action=action)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
