"""Persistence interface for credentials and picker selection state."""

from typing import Protocol

from photo_slideshow.domain.photos import SessionConfig
from photo_slideshow.domain.tokens import TokenSet


class CredentialStore(Protocol):
    """Whole-document key-value persistence.

    Saves overwrite the stored document; callers merge in memory first.
    """

    def load_tokens(self) -> TokenSet | None:
        """Return stored tokens, if any."""

    def save_tokens(self, tokens: TokenSet) -> None:
        """Persist the token set."""

    def delete_tokens(self) -> None:
        """Remove stored tokens."""

    def load_config(self) -> SessionConfig | None:
        """Return the stored session config, if any."""

    def save_config(self, config: SessionConfig) -> None:
        """Persist the session config."""

    def delete_config(self) -> None:
        """Remove the stored session config."""
