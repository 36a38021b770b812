"""Google Photos Picker API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from photo_slideshow.adapters.http_errors import read_json_object, send_vendor_request
from photo_slideshow.domain.photos import PickerSession

PICKER_BASE_URL = "https://photospicker.googleapis.com/v1"
_PAGE_SIZE = 100


class PickerClient(Protocol):
    """Interface for Picker API interactions."""

    async def create_session(self, access_token: str) -> PickerSession:
        """Create a picker session."""

    async def poll_session(self, session_id: str, access_token: str) -> PickerSession:
        """Return the current state of a picker session."""

    async def list_all_media_items(
        self, session_id: str, access_token: str
    ) -> list[dict[str, object]]:
        """Return every media item picked in a session."""

    async def delete_session(self, session_id: str, access_token: str) -> None:
        """Delete a picker session."""


@dataclass
class HttpxPickerClient(PickerClient):
    """HTTPX-backed Picker API client."""

    http_client: httpx.AsyncClient
    base_url: str = PICKER_BASE_URL
    timeout: float = 20.0

    @classmethod
    def create(
        cls, base_url: str = PICKER_BASE_URL, timeout: float = 20.0
    ) -> "HttpxPickerClient":
        """Create a Picker client with a managed httpx session."""
        return cls(http_client=httpx.AsyncClient(), base_url=base_url, timeout=timeout)

    async def create_session(self, access_token: str) -> PickerSession:
        """Create a picker session."""
        response = await send_vendor_request(
            self.http_client,
            "POST",
            f"{self.base_url}/sessions",
            action="Create picker session",
            headers=_auth_headers(access_token),
            json={},
            timeout=self.timeout,
        )
        return _parse_session(
            read_json_object(response, action="Create picker session")
        )

    async def poll_session(self, session_id: str, access_token: str) -> PickerSession:
        """Fetch a picker session's status."""
        response = await send_vendor_request(
            self.http_client,
            "GET",
            f"{self.base_url}/sessions/{session_id}",
            action="Poll picker session",
            headers=_auth_headers(access_token),
            timeout=self.timeout,
        )
        return _parse_session(read_json_object(response, action="Poll picker session"))

    async def list_all_media_items(
        self, session_id: str, access_token: str
    ) -> list[dict[str, object]]:
        """Follow pagination until every picked item is collected."""
        items: list[dict[str, object]] = []
        page_token: str | None = None
        while True:
            params: dict[str, object] = {
                "sessionId": session_id,
                "pageSize": _PAGE_SIZE,
            }
            if page_token:
                params["pageToken"] = page_token
            response = await send_vendor_request(
                self.http_client,
                "GET",
                f"{self.base_url}/mediaItems",
                action="List picked media items",
                headers=_auth_headers(access_token),
                params=params,
                timeout=self.timeout,
            )
            payload = read_json_object(response, action="List picked media items")
            items.extend(
                item
                for item in payload.get("mediaItems") or []
                if isinstance(item, dict)
            )
            page_token = payload.get("nextPageToken")
            if not page_token:
                return items

    async def delete_session(self, session_id: str, access_token: str) -> None:
        """Delete a picker session."""
        await send_vendor_request(
            self.http_client,
            "DELETE",
            f"{self.base_url}/sessions/{session_id}",
            action="Delete picker session",
            headers=_auth_headers(access_token),
            timeout=self.timeout,
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _auth_headers(access_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {access_token}"}


def _parse_session(payload: dict[str, object]) -> PickerSession:
    return PickerSession(
        id=str(payload["id"]),
        picker_uri=payload.get("pickerUri"),
        expire_time=payload.get("expireTime"),
        media_items_set=bool(payload.get("mediaItemsSet", False)),
    )
