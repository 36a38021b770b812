"""Pydantic request models for the slideshow API."""

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from photo_slideshow.domain.photos import PhotoDescriptor, PhotoOrigin


class ShuffleRequest(BaseModel):
    """Body of a shuffle request; 0 reorders every photo."""

    count: StrictInt = Field(default=0, ge=0)


class ConfirmRequest(BaseModel):
    """Body of a picker confirmation."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId", min_length=1)


class RestoreItem(BaseModel):
    """A photo previously listed to the client.

    Clients send back the entries they got from the photo list, where ``url``
    points at this server's image proxy. Only an absolute ``baseUrl`` or
    ``url`` is kept as the vendor source; otherwise the source URL stays empty
    and the image proxy resolves it through a refresh on first use.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(min_length=1)
    filename: str = ""
    mime_type: str = Field(default="", alias="mimeType")
    base_url: str = Field(default="", alias="baseUrl")
    url: str = ""
    source: str = PhotoOrigin.VENDOR.value

    def to_descriptor(self) -> PhotoDescriptor:
        """Convert to a vendor photo descriptor."""
        return PhotoDescriptor(
            id=self.id,
            source_url=_absolute_url(self.base_url) or _absolute_url(self.url),
            mime_type=self.mime_type,
            filename=self.filename,
            origin=PhotoOrigin.VENDOR,
        )


class RestoreRequest(BaseModel):
    """Body of a snapshot restore."""

    items: list[RestoreItem] = Field(default_factory=list)


def _absolute_url(value: str) -> str:
    """Return value when it is an absolute http(s) URL, else an empty string."""
    return value if value.startswith(("https://", "http://")) else ""
