"""ASGI entrypoint for the photo slideshow API."""

from photo_slideshow.api.app import create_app
from photo_slideshow.containers import build_container

app = create_app(build_container())
