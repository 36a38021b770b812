"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    google_client_id: str
    google_client_secret: str
    base_url: str = "http://localhost:8000"
    data_dir: str = "data"
    uploads_dir: str = "uploads"
    admin_token: str | None = None
    photo_cache_ttl_seconds: int = 50 * 60
    http_timeout_seconds: float = 20.0
    image_width: int = 1920
    image_height: int = 1080
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def picker_redirect_uri(self) -> str:
        """OAuth redirect URI for the picker connection."""
        return f"{self.base_url.rstrip('/')}/auth/callback"


def parse_admin_token(raw: str | None) -> str | None:
    """Normalize the admin token; blank disables the guard."""
    if raw is None:
        return None
    cleaned = raw.strip()
    return cleaned or None
