import os

import pytest

from category_api.config import IMAGE_SIZES
from category_api.utils.image import InvalidImageError
from category_api.utils.storage import DerivativeStorageError, derivative_name
from .conftest import make_image


def _files(upload_dir):
    return sorted(p.name for p in upload_dir.iterdir())


def test_save_writes_one_file_per_width(store, upload_dir, png_bytes):
    filename = store.save(png_bytes, "Cover.PNG")

    assert filename.endswith(".png")
    assert len(filename) == 16 + len(".png")
    assert _files(upload_dir) == sorted(f"{w}_{filename}" for w in IMAGE_SIZES)
    assert store.exists(filename)


def test_filenames_are_unique(store, png_bytes):
    assert store.new_filename("a.png", png_bytes) != store.new_filename("a.png", png_bytes)


def test_missing_or_foreign_extension_uses_decoded_format(store):
    jpeg = make_image(fmt="JPEG")
    assert store.new_filename("upload", jpeg).endswith(".jpg")
    assert store.new_filename("upload.exe", jpeg).endswith(".jpg")


def test_invalid_image_writes_nothing(store, upload_dir):
    with pytest.raises(InvalidImageError):
        store.save(b"garbage", "broken.png")
    assert _files(upload_dir) == []


def test_failed_write_removes_partial_set(store, upload_dir, png_bytes, monkeypatch):
    original = store._write_atomic
    calls = []

    def flaky(path, contents):
        calls.append(path)
        if len(calls) == 3:
            raise OSError("disk full")
        original(path, contents)

    monkeypatch.setattr(store, "_write_atomic", flaky)

    with pytest.raises(DerivativeStorageError):
        store.save(png_bytes, "cover.png")
    assert _files(upload_dir) == []


def test_delete_removes_every_width(store, upload_dir, png_bytes):
    filename = store.save(png_bytes, "cover.png")

    assert store.delete(filename) == len(IMAGE_SIZES)
    assert _files(upload_dir) == []
    assert not any(os.path.exists(p) for p in store.paths(filename))


def test_delete_tolerates_missing_files(store, upload_dir, png_bytes):
    filename = store.save(png_bytes, "cover.png")
    os.remove(upload_dir / derivative_name(300, filename))

    assert store.delete(filename) == len(IMAGE_SIZES) - 1
    assert store.delete(filename) == 0
    assert store.delete("") == 0
