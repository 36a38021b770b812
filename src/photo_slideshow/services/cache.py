"""Byte cache abstractions."""

from dataclasses import dataclass
from typing import Protocol


class ByteCache(Protocol):
    """Cache interface for resolved image bytes keyed by photo id."""

    def get(self, key: str) -> bytes | None:
        """Return cached bytes if present."""

    def put(self, key: str, content: bytes) -> None:
        """Store bytes for a key, replacing any previous value."""

    def delete(self, key: str) -> None:
        """Remove a cached entry; missing keys are ignored."""

    def clear(self) -> None:
        """Remove every cached entry."""


@dataclass
class InMemoryByteCache(ByteCache):
    """In-memory byte cache.

    Entries never expire: a photo id always maps to the same content.
    """

    _entries: dict[str, bytes]

    def __init__(self) -> None:
        self._entries = {}

    def get(self, key: str) -> bytes | None:
        """Return cached bytes if present."""
        return self._entries.get(key)

    def put(self, key: str, content: bytes) -> None:
        """Store bytes for a key."""
        self._entries[key] = content

    def delete(self, key: str) -> None:
        """Remove a cached entry."""
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Remove every cached entry."""
        self._entries.clear()
