"""On-disk byte cache for resolved photos."""

import hashlib
from dataclasses import dataclass
from pathlib import Path

from photo_slideshow.services.cache import ByteCache


@dataclass
class FileByteCache(ByteCache):
    """Stores one blob per photo id under a directory."""

    directory: Path

    def __post_init__(self) -> None:
        self.directory = Path(self.directory)

    def get(self, key: str) -> bytes | None:
        """Return cached bytes if present."""
        path = self._path(key)
        if not path.is_file():
            return None
        return path.read_bytes()

    def put(self, key: str, content: bytes) -> None:
        """Write bytes for a key."""
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_bytes(content)
        tmp_path.replace(path)

    def delete(self, key: str) -> None:
        """Remove a cached blob."""
        self._path(key).unlink(missing_ok=True)

    def clear(self) -> None:
        """Remove every cached blob."""
        if not self.directory.is_dir():
            return
        for path in self.directory.glob("*.bin"):
            path.unlink(missing_ok=True)

    def _path(self, key: str) -> Path:
        # Vendor ids may contain characters that are unsafe in file names.
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self.directory / f"{digest}.bin"
