"""OAuth token models."""

from dataclasses import dataclass, replace
from datetime import datetime

_EXPIRY_SKEW_SECONDS = 60


@dataclass(frozen=True)
class TokenSet:
    """Vendor OAuth credentials."""

    access_token: str | None
    refresh_token: str | None = None
    token_type: str | None = None
    expires_in: int | None = None
    scope: str | None = None
    saved_at: int | None = None

    def is_expired(self, now: datetime) -> bool:
        """Return true when the access token is missing or about to expire."""
        if not self.access_token:
            return True
        if not self.expires_in or not self.saved_at:
            return False
        deadline = self.saved_at + self.expires_in - _EXPIRY_SKEW_SECONDS
        return now.timestamp() >= deadline

    def to_dict(self) -> dict[str, object]:
        """Serialize to the persisted token document."""
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "token_type": self.token_type,
            "expires_in": self.expires_in,
            "scope": self.scope,
            "saved_at": self.saved_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "TokenSet":
        """Parse a token document or an OAuth token response."""
        expires_in = data.get("expires_in")
        saved_at = data.get("saved_at")
        return cls(
            access_token=data.get("access_token"),
            refresh_token=data.get("refresh_token"),
            token_type=data.get("token_type"),
            expires_in=int(expires_in) if isinstance(expires_in, int | float) else None,
            scope=data.get("scope"),
            saved_at=int(saved_at) if isinstance(saved_at, int | float) else None,
        )


def merge_tokens(
    current: TokenSet | None, renewal: dict[str, object], now: datetime
) -> TokenSet:
    """Merge a token endpoint response over the stored token set.

    Refresh responses usually omit ``refresh_token``; fields missing from the
    renewal keep their stored values.
    """
    merged = current or TokenSet(access_token=None)
    updates = {
        key: value
        for key, value in TokenSet.from_dict(renewal).to_dict().items()
        if value is not None and key != "saved_at"
    }
    return replace(merged, **updates, saved_at=int(now.timestamp()))
