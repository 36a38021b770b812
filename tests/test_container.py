"""Tests for container wiring."""

import asyncio
from pathlib import Path

from photo_slideshow.config import Settings
from photo_slideshow.containers import build_container


def test_build_container_creates_services(tmp_path: Path) -> None:
    settings = Settings(
        google_client_id="client-id",
        google_client_secret="client-secret",
        base_url="https://frame.example/",
        data_dir=str(tmp_path / "data"),
        uploads_dir=str(tmp_path / "uploads"),
        image_width=800,
        image_height=480,
    )

    container = build_container(settings)

    assert container.photo_cache.ttl_seconds == settings.photo_cache_ttl_seconds
    assert container.image_proxy.width == 800
    assert container.local_library.directory == tmp_path / "uploads"
    assert settings.picker_redirect_uri == "https://frame.example/auth/callback"
    asyncio.run(container.close_resources())
