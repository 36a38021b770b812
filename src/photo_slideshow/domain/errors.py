"""Error taxonomy for the photo slideshow."""


class PhotoSlideshowError(Exception):
    """Base class for errors surfaced to the HTTP layer."""


class VendorUnavailable(PhotoSlideshowError):
    """A vendor API call failed, timed out, or returned a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NotAuthenticated(PhotoSlideshowError):
    """No usable access token is available."""


class NotFound(PhotoSlideshowError):
    """The requested photo is unknown."""


class ValidationError(PhotoSlideshowError):
    """Request parameters are malformed."""
