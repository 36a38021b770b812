"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from http import HTTPStatus
from urllib.parse import quote

from fastapi import Depends, FastAPI, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse, JSONResponse, Response

from photo_slideshow.api.auth import require_admin
from photo_slideshow.api.auth import router as auth_router
from photo_slideshow.api.models import ConfirmRequest, RestoreRequest, ShuffleRequest
from photo_slideshow.app_logging import configure_logging
from photo_slideshow.containers import AppContainer
from photo_slideshow.domain.errors import (
    NotAuthenticated,
    NotFound,
    PhotoSlideshowError,
    ValidationError,
    VendorUnavailable,
)
from photo_slideshow.domain.photos import PhotoDescriptor, PhotoOrigin

_MAX_FILES_PER_UPLOAD = 50


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(auth_router)

    @app.exception_handler(PhotoSlideshowError)
    async def handle_domain_error(
        request: Request, exc: PhotoSlideshowError
    ) -> JSONResponse:
        status_code = _status_for(exc)
        if status_code >= HTTPStatus.INTERNAL_SERVER_ERROR:
            logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse({"error": str(exc)}, status_code=status_code)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            {"error": "Invalid request", "detail": exc.errors()},
            status_code=HTTPStatus.BAD_REQUEST,
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/api/photos")
    async def list_photos(request: Request) -> list[dict[str, str]]:
        """List vendor photos followed by local uploads."""
        state_container: AppContainer = request.app.state.container
        vendor_photos = await state_container.photo_cache.list_photos()
        local_photos = state_container.local_library.list_photos()
        return [_photo_payload(photo) for photo in [*vendor_photos, *local_photos]]

    @app.get("/api/photos/{photo_id}/image")
    async def photo_image(photo_id: str, request: Request) -> Response:
        """Serve bytes for a vendor photo."""
        state_container: AppContainer = request.app.state.container
        photo = await state_container.image_proxy.resolve(photo_id)
        return Response(
            content=photo.content,
            media_type=photo.mime_type,
            headers={"Cache-Control": "private, max-age=86400"},
        )

    @app.post("/api/photos/shuffle", dependencies=[Depends(require_admin)])
    async def shuffle_photos(
        body: ShuffleRequest, request: Request
    ) -> dict[str, object]:
        """Pick a random subset (or reorder all) of the picked photos."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.photo_cache.shuffle(body.count)
        return {
            "ok": True,
            "photoCount": result.photo_count,
            "totalAvailable": result.total_available,
        }

    @app.post("/api/photos/restore")
    async def restore_photos(
        body: RestoreRequest, request: Request
    ) -> dict[str, object]:
        """Seed an empty server cache from the client's saved list."""
        state_container: AppContainer = request.app.state.container
        items = [
            item.to_descriptor()
            for item in body.items
            if item.source == PhotoOrigin.VENDOR.value
        ]
        restored = state_container.photo_cache.restore(items)
        return {"ok": True, "restored": restored}

    @app.delete("/api/photos/{photo_id}", dependencies=[Depends(require_admin)])
    async def delete_photo(photo_id: str, request: Request) -> dict[str, str]:
        """Remove a photo from the slideshow."""
        state_container: AppContainer = request.app.state.container
        if state_container.local_library.contains(photo_id):
            state_container.local_library.delete(photo_id)
        else:
            state_container.photo_cache.delete_one(photo_id)
        return {"deleted": photo_id}

    @app.post("/api/picker/session", dependencies=[Depends(require_admin)])
    async def create_picker_session(request: Request) -> dict[str, object]:
        """Start a Google Photos picker session."""
        state_container: AppContainer = request.app.state.container
        session = await state_container.picker_service.create_session()
        return {
            "id": session.id,
            "pickerUri": session.picker_uri,
            "expireTime": session.expire_time,
        }

    @app.get(
        "/api/picker/session/{session_id}", dependencies=[Depends(require_admin)]
    )
    async def poll_picker_session(
        session_id: str, request: Request
    ) -> dict[str, object]:
        """Report whether the user finished picking."""
        state_container: AppContainer = request.app.state.container
        session = await state_container.picker_service.poll_session(session_id)
        return {
            "mediaItemsSet": session.media_items_set,
            "pickerUri": session.picker_uri,
            "expireTime": session.expire_time,
        }

    @app.post("/api/picker/confirm", dependencies=[Depends(require_admin)])
    async def confirm_selection(
        body: ConfirmRequest, request: Request
    ) -> dict[str, object]:
        """Adopt the photos picked in a session."""
        state_container: AppContainer = request.app.state.container
        photo_count = await state_container.photo_cache.confirm(body.session_id)
        return {"ok": True, "photoCount": photo_count}

    @app.post("/api/upload", dependencies=[Depends(require_admin)])
    async def upload_photos(
        request: Request, photos: list[UploadFile] = File(...)
    ) -> dict[str, object]:
        """Store uploaded photos in the local library."""
        state_container: AppContainer = request.app.state.container
        if len(photos) > _MAX_FILES_PER_UPLOAD:
            raise ValidationError(
                f"At most {_MAX_FILES_PER_UPLOAD} files per upload"
            )
        uploaded = []
        for upload in photos:
            content = await upload.read()
            descriptor = state_container.local_library.save(
                upload.filename or "", content
            )
            uploaded.append(
                {"filename": descriptor.filename, "url": descriptor.source_url}
            )
        return {"uploaded": uploaded}

    @app.get("/uploads/{filename}")
    async def uploaded_file(filename: str, request: Request) -> FileResponse:
        """Serve a locally uploaded photo."""
        state_container: AppContainer = request.app.state.container
        path = state_container.local_library.path_for(filename)
        return FileResponse(path)

    return app


def _status_for(exc: PhotoSlideshowError) -> int:
    """Map domain errors to HTTP status codes."""
    if isinstance(exc, NotAuthenticated):
        return HTTPStatus.UNAUTHORIZED
    if isinstance(exc, NotFound):
        return HTTPStatus.NOT_FOUND
    if isinstance(exc, ValidationError):
        return HTTPStatus.BAD_REQUEST
    if isinstance(exc, VendorUnavailable) and exc.status_code is not None:
        if HTTPStatus.BAD_REQUEST <= exc.status_code < 600:  # noqa: PLR2004
            return int(exc.status_code)
    return HTTPStatus.BAD_GATEWAY


def _photo_payload(photo: PhotoDescriptor) -> dict[str, str]:
    """Client-facing representation of a photo."""
    if photo.origin is PhotoOrigin.VENDOR:
        url = f"/api/photos/{quote(photo.id, safe='')}/image"
    else:
        url = photo.source_url
    return {
        "id": photo.id,
        "url": url,
        "filename": photo.filename,
        "mimeType": photo.mime_type,
        "source": photo.origin.value,
    }
