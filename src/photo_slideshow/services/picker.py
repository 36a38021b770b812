"""Picker session operations exposed to the admin page."""

from dataclasses import dataclass

from photo_slideshow.adapters.picker_client import PickerClient
from photo_slideshow.domain.errors import NotAuthenticated
from photo_slideshow.domain.photos import PickerSession
from photo_slideshow.services.tokens import AccessTokenProvider


@dataclass
class PickerService:
    """Creates and polls picker sessions.

    Polling cadence (every 2s, giving up after 10 minutes) is owned by the
    client; each call here is a single vendor request.
    """

    token_provider: AccessTokenProvider
    picker_client: PickerClient

    async def create_session(self) -> PickerSession:
        """Start a new picker session."""
        return await self.picker_client.create_session(await self._access_token())

    async def poll_session(self, session_id: str) -> PickerSession:
        """Return the current state of a picker session."""
        return await self.picker_client.poll_session(
            session_id, await self._access_token()
        )

    async def _access_token(self) -> str:
        access_token = await self.token_provider.get_access_token()
        if access_token is None:
            raise NotAuthenticated("Google Photos is not connected")
        return access_token
