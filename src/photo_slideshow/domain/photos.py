"""Domain models for photos and picker sessions."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum


class PhotoOrigin(StrEnum):
    """Where a photo's bytes come from."""

    VENDOR = "google"
    LOCAL = "local"


@dataclass(frozen=True)
class PhotoDescriptor:
    """A resolved photo that the slideshow can display."""

    id: str
    source_url: str
    mime_type: str
    filename: str
    origin: PhotoOrigin = PhotoOrigin.VENDOR

    def to_dict(self) -> dict[str, str]:
        """Serialize to the persisted document shape."""
        return {
            "id": self.id,
            "sourceUrl": self.source_url,
            "mimeType": self.mime_type,
            "filename": self.filename,
            "origin": self.origin.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "PhotoDescriptor":
        """Parse a persisted descriptor."""
        origin = data.get("origin") or PhotoOrigin.VENDOR.value
        return cls(
            id=str(data["id"]),
            source_url=str(data.get("sourceUrl") or ""),
            mime_type=str(data.get("mimeType") or ""),
            filename=str(data.get("filename") or ""),
            origin=PhotoOrigin(str(origin)),
        )


@dataclass(frozen=True)
class SessionConfig:
    """Persisted picker selection state."""

    session_id: str | None
    selected_ids: list[str] | None = None
    saved_snapshot: list[PhotoDescriptor] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_dict(self) -> dict[str, object]:
        """Serialize to the persisted document shape."""
        return {
            "sessionId": self.session_id,
            "selectedIds": (
                list(self.selected_ids) if self.selected_ids is not None else None
            ),
            "savedSnapshot": [item.to_dict() for item in self.saved_snapshot],
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "SessionConfig":
        """Parse a persisted config document."""
        selected = data.get("selectedIds")
        snapshot = data.get("savedSnapshot") or []
        return cls(
            session_id=data.get("sessionId") or None,
            selected_ids=(
                [str(item) for item in selected] if isinstance(selected, list) else None
            ),
            saved_snapshot=[
                PhotoDescriptor.from_dict(item)
                for item in snapshot
                if isinstance(item, dict) and item.get("id")
            ],
            created_at=_parse_datetime(data.get("createdAt")),
            updated_at=_parse_datetime(data.get("updatedAt")),
        )


@dataclass(frozen=True)
class PickerSession:
    """A vendor picker session handle."""

    id: str
    picker_uri: str | None
    expire_time: str | None
    media_items_set: bool = False


@dataclass(frozen=True)
class PhotoBytes:
    """Image content ready to be served."""

    content: bytes
    mime_type: str


def _parse_datetime(value: object) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None
