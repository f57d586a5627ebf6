"""Shared fixtures.

Every test gets its own upload directory and SQLite file under pytest's
``tmp_path`` so derivative files and rows never leak between tests.
"""

import io
import struct
import zlib

import pytest
from fastapi.testclient import TestClient
from PIL import Image
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from category_api.db import models  # noqa: F401  (register tables)
from category_api.db.base_class import Base
from category_api.db.database import get_db
from category_api.main import create_app
from category_api.utils.storage import DerivativeStore


def make_image(width=400, height=200, fmt="PNG", mode="RGB", color=(200, 30, 30)):
    """Encode a solid-colour image in memory."""
    if mode == "RGBA" and len(color) == 3:
        color = color + (128,)
    img = Image.new(mode, (width, height), color=color)
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


def make_png_claiming_size(width, height):
    """
    A 1x1 one-bit PNG whose header claims *width* x *height*.
    Pillow reads the size from the header, so nothing large is allocated.
    """
    data = bytearray(make_image(1, 1, mode="1", color=1))
    # signature(8) + length(4) + b"IHDR"(4), then width and height
    data[16:24] = struct.pack(">II", width, height)
    ihdr_end = 8 + 4 + 4 + 13
    data[ihdr_end:ihdr_end + 4] = struct.pack(">I", zlib.crc32(bytes(data[12:ihdr_end])))
    return bytes(data)


@pytest.fixture
def upload_dir(tmp_path):
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def store(upload_dir):
    return DerivativeStore(str(upload_dir))


@pytest.fixture
def session_factory(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def client(upload_dir, session_factory):
    app = create_app(upload_dir=str(upload_dir))

    def _get_test_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_test_db
    return TestClient(app)


@pytest.fixture
def png_bytes():
    return make_image()
