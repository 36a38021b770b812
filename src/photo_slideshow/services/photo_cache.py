"""In-memory cache of picked photos, refreshed from the Picker API."""

import logging
import random
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta

from photo_slideshow.adapters.picker_client import PickerClient
from photo_slideshow.domain.errors import (
    NotAuthenticated,
    NotFound,
    ValidationError,
    VendorUnavailable,
)
from photo_slideshow.domain.photos import PhotoDescriptor, PhotoOrigin, SessionConfig
from photo_slideshow.services.cache import ByteCache
from photo_slideshow.services.credentials import CredentialStore
from photo_slideshow.services.tokens import AccessTokenProvider

DEFAULT_TTL_SECONDS = 50 * 60

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True)
class ShuffleResult:
    """Outcome of a shuffle."""

    photo_count: int
    total_available: int


@dataclass
class PhotoCache:
    """Holds the resolved photo list for the current picker selection.

    The cache favours availability: refresh failures keep serving the last
    known photos instead of emptying the slideshow. Mutations are not locked,
    so concurrent refresh/confirm/shuffle calls resolve as last writer wins.
    """

    token_provider: AccessTokenProvider
    picker_client: PickerClient
    credential_store: CredentialStore
    byte_cache: ByteCache
    ttl_seconds: int = DEFAULT_TTL_SECONDS
    clock: Callable[[], datetime] = field(default=_utcnow)
    rng: random.Random = field(default_factory=random.Random)
    items: list[PhotoDescriptor] = field(default_factory=list)
    fetched_at: datetime | None = None

    def is_stale(self) -> bool:
        """Return true when the cache has never been fetched or outlived its TTL."""
        if self.fetched_at is None:
            return True
        return self.clock() - self.fetched_at > timedelta(seconds=self.ttl_seconds)

    def find(self, photo_id: str) -> PhotoDescriptor | None:
        """Return the cached descriptor for an id, if present."""
        for item in self.items:
            if item.id == photo_id:
                return item
        return None

    async def list_photos(self) -> list[PhotoDescriptor]:
        """Return cached photos, refreshing first when stale."""
        if self.is_stale():
            await self.refresh()
        return list(self.items)

    async def refresh(self) -> None:
        """Reload the selection from the vendor; never raises."""
        config = self.credential_store.load_config()
        if config is None:
            self._reset()
            return
        if not config.session_id:
            self._fall_back_to_snapshot(config)
            return
        access_token = await self.token_provider.get_access_token()
        if access_token is None:
            _logger.info("No access token; serving saved snapshot")
            self._fall_back_to_snapshot(config)
            return
        try:
            raw_items = await self.picker_client.list_all_media_items(
                config.session_id, access_token
            )
        except VendorUnavailable as exc:
            _logger.warning(
                "Photo refresh failed (status=%s); keeping %s cached photos",
                exc.status_code,
                len(self.items),
            )
            if not self.items:
                self._fall_back_to_snapshot(config)
            return

        descriptors = _resolve_descriptors(raw_items, config.selected_ids)
        self._replace(descriptors)
        try:
            self.credential_store.save_config(
                replace(config, saved_snapshot=descriptors, updated_at=self.clock())
            )
        except OSError:
            _logger.exception("Failed to persist photo snapshot")

    async def confirm(self, session_id: str) -> int:
        """Replace the cache with everything picked in a session."""
        access_token = await self._require_access_token()
        raw_items = await self.picker_client.list_all_media_items(
            session_id, access_token
        )
        descriptors = _resolve_descriptors(raw_items, None)
        self._replace(descriptors)
        now = self.clock()
        self.credential_store.save_config(
            SessionConfig(
                session_id=session_id,
                selected_ids=[item.id for item in descriptors],
                saved_snapshot=descriptors,
                created_at=now,
                updated_at=now,
            )
        )
        _logger.info(
            "Confirmed picker session %s with %s photos", session_id, len(descriptors)
        )
        return len(descriptors)

    async def shuffle(self, count: int) -> ShuffleResult:
        """Reorder the full picked pool and keep ``count`` photos (0 keeps all)."""
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise ValidationError("count must be a non-negative integer")
        config = self.credential_store.load_config()
        if config is None or not config.session_id:
            raise ValidationError("No picker selection to shuffle")
        access_token = await self._require_access_token()
        raw_items = await self.picker_client.list_all_media_items(
            config.session_id, access_token
        )
        pool = _resolve_descriptors(raw_items, None)
        shuffled = _fisher_yates(pool, self.rng)
        if count > 0:
            shuffled = shuffled[: max(1, min(count, len(pool)))]
        self._replace(shuffled)
        self.credential_store.save_config(
            replace(
                config,
                selected_ids=[item.id for item in shuffled],
                saved_snapshot=shuffled,
                updated_at=self.clock(),
            )
        )
        return ShuffleResult(photo_count=len(shuffled), total_available=len(pool))

    def restore(self, items: Iterable[PhotoDescriptor]) -> bool:
        """Seed an empty cache from a client-held snapshot."""
        restored = _dedupe(items)
        if self.items or not restored:
            return False
        self.items = restored
        now = self.clock()
        config = self.credential_store.load_config() or SessionConfig(
            session_id=None, created_at=now
        )
        self.credential_store.save_config(
            replace(config, saved_snapshot=restored, updated_at=now)
        )
        _logger.info("Restored %s photos from client snapshot", len(restored))
        return True

    def delete_one(self, photo_id: str) -> None:
        """Remove a photo from memory, selection, snapshot and byte cache."""
        config = self.credential_store.load_config()
        in_memory = self.find(photo_id) is not None
        in_config = config is not None and (
            photo_id in (config.selected_ids or [])
            or any(item.id == photo_id for item in config.saved_snapshot)
        )
        if not in_memory and not in_config:
            raise NotFound(f"Photo {photo_id} not found")

        self.items = [item for item in self.items if item.id != photo_id]
        if config is not None:
            updated = replace(
                config,
                selected_ids=[
                    item_id
                    for item_id in _selection_ids(config, self.items)
                    if item_id != photo_id
                ],
                saved_snapshot=[
                    item for item in config.saved_snapshot if item.id != photo_id
                ],
                updated_at=self.clock(),
            )
            try:
                self.credential_store.save_config(updated)
            except OSError:
                _logger.exception("Failed to persist deletion of photo %s", photo_id)
        try:
            self.byte_cache.delete(photo_id)
        except OSError:
            _logger.exception("Failed to delete cached bytes for photo %s", photo_id)

    async def disconnect(self) -> None:
        """Forget the selection, tokens and cached bytes."""
        config = self.credential_store.load_config()
        if config is not None and config.session_id:
            access_token = await self.token_provider.get_access_token()
            if access_token:
                try:
                    await self.picker_client.delete_session(
                        config.session_id, access_token
                    )
                except VendorUnavailable as exc:
                    _logger.warning("Failed to delete picker session: %s", exc)
        self._reset()
        for label, step in (
            ("config", self.credential_store.delete_config),
            ("tokens", self.credential_store.delete_tokens),
            ("byte cache", self.byte_cache.clear),
        ):
            try:
                step()
            except OSError:
                _logger.exception("Failed to clear %s on disconnect", label)

    async def _require_access_token(self) -> str:
        access_token = await self.token_provider.get_access_token()
        if access_token is None:
            raise NotAuthenticated("Google Photos is not connected")
        return access_token

    def _replace(self, descriptors: list[PhotoDescriptor]) -> None:
        self.items = descriptors
        now = self.clock()
        if self.fetched_at is None or now > self.fetched_at:
            self.fetched_at = now

    def _fall_back_to_snapshot(self, config: SessionConfig) -> None:
        if config.saved_snapshot:
            self.items = _dedupe(config.saved_snapshot)
        else:
            self._reset()

    def _reset(self) -> None:
        self.items = []
        self.fetched_at = None


def _to_descriptor(raw: dict[str, object]) -> PhotoDescriptor | None:
    """Map a picked media item; placeholders without a file are skipped."""
    media_file = raw.get("mediaFile") or {}
    if not isinstance(media_file, dict):
        return None
    base_url = media_file.get("baseUrl") or raw.get("baseUrl")
    item_id = raw.get("id")
    if not base_url or not item_id:
        return None
    return PhotoDescriptor(
        id=str(item_id),
        source_url=str(base_url),
        mime_type=str(media_file.get("mimeType") or raw.get("mimeType") or ""),
        filename=str(media_file.get("filename") or raw.get("filename") or ""),
        origin=PhotoOrigin.VENDOR,
    )


def _resolve_descriptors(
    raw_items: list[dict[str, object]], selected_ids: list[str] | None
) -> list[PhotoDescriptor]:
    resolved = _dedupe(
        descriptor
        for descriptor in (_to_descriptor(raw) for raw in raw_items)
        if descriptor is not None
    )
    if selected_ids is None:
        return resolved
    by_id = {item.id: item for item in resolved}
    return [
        by_id[item_id] for item_id in dict.fromkeys(selected_ids) if item_id in by_id
    ]


def _selection_ids(
    config: SessionConfig, items: list[PhotoDescriptor]
) -> list[str]:
    """Explicit selection ids; an unfiltered config pins its snapshot and memory."""
    if config.selected_ids is not None:
        return config.selected_ids
    return [item.id for item in _dedupe([*config.saved_snapshot, *items])]


def _dedupe(items: Iterable[PhotoDescriptor]) -> list[PhotoDescriptor]:
    seen: set[str] = set()
    unique: list[PhotoDescriptor] = []
    for item in items:
        if item.id in seen:
            continue
        seen.add(item.id)
        unique.append(item)
    return unique


def _fisher_yates(
    items: list[PhotoDescriptor], rng: random.Random
) -> list[PhotoDescriptor]:
    shuffled = list(items)
    for index in range(len(shuffled) - 1, 0, -1):
        swap = rng.randint(0, index)
        shuffled[index], shuffled[swap] = shuffled[swap], shuffled[index]
    return shuffled
