"""Translate httpx failures into vendor errors."""

import httpx

from photo_slideshow.domain.errors import VendorUnavailable


async def send_vendor_request(
    http_client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    action: str,
    **kwargs: object,
) -> httpx.Response:
    """Send a request and raise VendorUnavailable on transport or status errors."""
    try:
        response = await http_client.request(method, url, **kwargs)
    except httpx.HTTPError as exc:
        raise VendorUnavailable(f"{action} failed: {exc}") from exc
    try:
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise VendorUnavailable(
            f"{action} failed with status {response.status_code}",
            status_code=response.status_code,
        ) from exc
    return response


def read_json_object(response: httpx.Response, *, action: str) -> dict[str, object]:
    """Decode a JSON object body, raising VendorUnavailable on anything else."""
    try:
        payload = response.json()
    except ValueError as exc:
        raise VendorUnavailable(f"{action} returned a non-JSON body") from exc
    if not isinstance(payload, dict):
        raise VendorUnavailable(f"{action} returned an unexpected payload")
    return payload
