"""JSON file-backed credential store."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from photo_slideshow.domain.photos import SessionConfig
from photo_slideshow.domain.tokens import TokenSet
from photo_slideshow.services.credentials import CredentialStore

_TOKENS_FILE = "tokens.json"
_CONFIG_FILE = "config.json"

_logger = logging.getLogger(__name__)


@dataclass
class JsonFileCredentialStore(CredentialStore):
    """Stores tokens and picker config as JSON documents in a directory."""

    directory: Path

    def __post_init__(self) -> None:
        self.directory = Path(self.directory)

    def load_tokens(self) -> TokenSet | None:
        """Return stored tokens, if any."""
        data = self._read(_TOKENS_FILE)
        return TokenSet.from_dict(data) if data is not None else None

    def save_tokens(self, tokens: TokenSet) -> None:
        """Persist the token set."""
        self._write(_TOKENS_FILE, tokens.to_dict())
        _logger.info(
            "Persisted tokens (has_refresh=%s)", bool(tokens.refresh_token)
        )

    def delete_tokens(self) -> None:
        """Remove stored tokens."""
        (self.directory / _TOKENS_FILE).unlink(missing_ok=True)

    def load_config(self) -> SessionConfig | None:
        """Return the stored session config, if any."""
        data = self._read(_CONFIG_FILE)
        return SessionConfig.from_dict(data) if data is not None else None

    def save_config(self, config: SessionConfig) -> None:
        """Persist the session config."""
        self._write(_CONFIG_FILE, config.to_dict())

    def delete_config(self) -> None:
        """Remove the stored session config."""
        (self.directory / _CONFIG_FILE).unlink(missing_ok=True)

    def _read(self, name: str) -> dict[str, object] | None:
        path = self.directory / name
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            _logger.exception("Failed to read %s", path)
            return None
        return data if isinstance(data, dict) else None

    def _write(self, name: str, data: dict[str, object]) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / name
        path.write_text(
            json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8"
        )
