"""Picker connection endpoints and the admin token guard."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from fastapi.responses import RedirectResponse

from photo_slideshow.config import parse_admin_token
from photo_slideshow.domain.errors import VendorUnavailable

if TYPE_CHECKING:
    from photo_slideshow.containers import AppContainer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _get_admin_token(request: Request) -> str | None:
    container: AppContainer = request.app.state.container
    return parse_admin_token(container.settings.admin_token)


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str | None = Depends(_get_admin_token),
) -> None:
    """Ensure requests include the admin token when one is configured."""
    if admin_token is None:
        return
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/url", dependencies=[Depends(require_admin)])
async def authorization_url(request: Request) -> dict[str, str]:
    """Return the Google consent URL for the picker scope."""
    container: AppContainer = request.app.state.container
    return {"url": container.token_service.authorization_url()}


@router.get("/callback")
async def oauth_callback(
    request: Request, code: str | None = None, error: str | None = None
) -> RedirectResponse:
    """Finish the OAuth flow and return to the admin page."""
    container: AppContainer = request.app.state.container
    if error or not code:
        logger.warning("OAuth callback without code (error=%s)", error)
        return RedirectResponse("/admin.html?error=auth", status_code=302)
    try:
        await container.token_service.connect(code)
    except VendorUnavailable as exc:
        logger.warning("OAuth code exchange failed: %s", exc)
        return RedirectResponse("/admin.html?error=auth", status_code=302)
    logger.info("Google Photos connected")
    return RedirectResponse("/admin.html", status_code=302)


@router.get("/status")
async def connection_status(request: Request) -> dict[str, object]:
    """Report whether Google Photos is connected and how many photos are cached."""
    container: AppContainer = request.app.state.container
    connected = container.token_service.is_connected()
    photos = await container.photo_cache.list_photos() if connected else []
    return {"connected": connected, "photoCount": len(photos)}


@router.post("/disconnect", dependencies=[Depends(require_admin)])
async def disconnect(request: Request) -> dict[str, bool]:
    """Drop tokens, selection and cached bytes."""
    container: AppContainer = request.app.state.container
    await container.photo_cache.disconnect()
    return {"ok": True}
