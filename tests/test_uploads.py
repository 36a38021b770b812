"""Tests for the local photo library."""

import os
from pathlib import Path

import pytest

from photo_slideshow.domain.errors import NotFound, ValidationError
from photo_slideshow.domain.photos import PhotoOrigin
from photo_slideshow.services.uploads import LocalPhotoLibrary


def test_save_keeps_extension_under_generated_name(tmp_path: Path) -> None:
    library = LocalPhotoLibrary(tmp_path)

    photo = library.save("Holiday.JPG", b"bytes")

    assert photo.filename.endswith(".jpg")
    assert photo.filename != "Holiday.JPG"
    assert photo.origin is PhotoOrigin.LOCAL
    assert photo.source_url == f"/uploads/{photo.filename}"
    assert photo.mime_type == "image/jpeg"
    assert (tmp_path / photo.filename).read_bytes() == b"bytes"


@pytest.mark.parametrize("name", ["notes.txt", "script", "archive.jpg.exe"])
def test_save_rejects_disallowed_types(tmp_path: Path, name: str) -> None:
    with pytest.raises(ValidationError):
        LocalPhotoLibrary(tmp_path).save(name, b"bytes")


def test_save_rejects_oversized_files(tmp_path: Path) -> None:
    library = LocalPhotoLibrary(tmp_path, max_bytes=3)

    with pytest.raises(ValidationError):
        library.save("big.png", b"four")


def test_list_photos_newest_first(tmp_path: Path) -> None:
    library = LocalPhotoLibrary(tmp_path)
    older = library.save("a.png", b"a")
    newer = library.save("b.png", b"b")
    os.utime(tmp_path / older.filename, (1_000, 1_000))
    os.utime(tmp_path / newer.filename, (2_000, 2_000))
    (tmp_path / "readme.txt").write_text("skip", encoding="utf-8")

    photos = library.list_photos()

    assert [photo.filename for photo in photos] == [newer.filename, older.filename]


def test_list_photos_without_directory(tmp_path: Path) -> None:
    assert LocalPhotoLibrary(tmp_path / "missing").list_photos() == []


@pytest.mark.parametrize("name", ["../secret.jpg", "nested/x.jpg", "..", ""])
def test_path_for_rejects_traversal(tmp_path: Path, name: str) -> None:
    library = LocalPhotoLibrary(tmp_path / "uploads")

    with pytest.raises(ValidationError):
        library.path_for(name)
    assert library.contains(name) is False


def test_delete_removes_upload(tmp_path: Path) -> None:
    library = LocalPhotoLibrary(tmp_path)
    photo = library.save("a.webp", b"a")

    library.delete(photo.filename)

    assert library.contains(photo.filename) is False
    with pytest.raises(NotFound):
        library.delete(photo.filename)
