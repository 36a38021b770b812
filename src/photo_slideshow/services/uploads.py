"""Locally uploaded photos."""

import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote
from uuid import uuid4

from photo_slideshow.domain.errors import NotFound, ValidationError
from photo_slideshow.domain.photos import PhotoDescriptor, PhotoOrigin

ALLOWED_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".webp", ".heic"})
MAX_UPLOAD_BYTES = 50 * 1024 * 1024

_logger = logging.getLogger(__name__)


@dataclass
class LocalPhotoLibrary:
    """Stores uploads under a directory with generated names."""

    directory: Path
    max_bytes: int = MAX_UPLOAD_BYTES

    def __post_init__(self) -> None:
        self.directory = Path(self.directory)

    def list_photos(self) -> list[PhotoDescriptor]:
        """Return uploaded photos, newest first."""
        if not self.directory.is_dir():
            return []
        files = [
            path
            for path in self.directory.iterdir()
            if path.is_file() and path.suffix.lower() in ALLOWED_EXTENSIONS
        ]
        files.sort(key=lambda path: path.stat().st_mtime, reverse=True)
        return [_to_descriptor(path) for path in files]

    def save(self, original_name: str, content: bytes) -> PhotoDescriptor:
        """Store an upload under a fresh name that keeps its extension."""
        extension = Path(original_name).suffix.lower()
        if extension not in ALLOWED_EXTENSIONS:
            raise ValidationError(f"File type {extension or '(none)'} not allowed")
        if len(content) > self.max_bytes:
            raise ValidationError(f"{original_name} exceeds the upload size limit")
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / f"{uuid4()}{extension}"
        path.write_bytes(content)
        _logger.info("Stored upload %s as %s", original_name, path.name)
        return _to_descriptor(path)

    def contains(self, filename: str) -> bool:
        """Return true when an upload with this name exists."""
        try:
            return self.path_for(filename).is_file()
        except (NotFound, ValidationError):
            return False

    def path_for(self, filename: str) -> Path:
        """Return the path of an upload, rejecting traversal."""
        path = self.directory / filename
        if path.parent != self.directory or filename in {"", ".", ".."}:
            raise ValidationError("Invalid filename")
        if not path.is_file():
            raise NotFound(f"Photo {filename} not found")
        return path

    def delete(self, filename: str) -> None:
        """Remove an upload."""
        self.path_for(filename).unlink()
        _logger.info("Deleted upload %s", filename)


def _to_descriptor(path: Path) -> PhotoDescriptor:
    mime_type, _ = mimetypes.guess_type(path.name)
    return PhotoDescriptor(
        id=path.name,
        source_url=f"/uploads/{quote(path.name)}",
        mime_type=mime_type or "application/octet-stream",
        filename=path.name,
        origin=PhotoOrigin.LOCAL,
    )
