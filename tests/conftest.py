"""
Shared fixtures: a raw directory of generated images and app/client factories.
"""

from io import BytesIO
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from thumbd.core.config import Settings
from thumbd.main import create_app

# name -> (size, mode)
RAW_IMAGES = {
    "accidentally_save_file.gif": ((480, 270), "P"),
    "blocked_us.png": ((300, 400), "RGBA"),
    "carlton_pls.jpg": ((640, 480), "RGB"),
    "lemur_pudding_cups.jpeg": ((1024, 768), "RGB"),
    "tiny.png": ((50, 40), "RGB"),
}

_PIL_FORMATS = {"gif": "GIF", "png": "PNG", "jpg": "JPEG", "jpeg": "JPEG"}


def make_image_bytes(size, mode: str, fmt: str) -> bytes:
    """Deterministic gradient image encoded as ``fmt``."""
    horizontal = Image.linear_gradient("L").rotate(90).resize(size)
    vertical = Image.linear_gradient("L").resize(size)
    im = Image.merge("RGB", (horizontal, vertical, Image.new("L", size, 128)))
    if mode == "RGBA":
        im = im.convert("RGBA")
        im.putalpha(200)
    elif mode == "P":
        im = im.convert("P", palette=Image.Palette.ADAPTIVE)
    out = BytesIO()
    im.save(out, _PIL_FORMATS[fmt])
    return out.getvalue()


@pytest.fixture
def raw_dir(tmp_path: Path) -> Path:
    path = tmp_path / "raw"
    path.mkdir()
    for name, (size, mode) in RAW_IMAGES.items():
        (path / name).write_bytes(make_image_bytes(size, mode, name.rsplit(".", 1)[1]))
    return path


@pytest.fixture
def thumb_dir(tmp_path: Path) -> Path:
    return tmp_path / "thumbs"


@pytest.fixture
def make_settings(raw_dir: Path, thumb_dir: Path):
    def _make(fmt: str = "png", width: int = 200, height: int = 200) -> Settings:
        return Settings(
            _env_file=None,
            RAW_DIR=str(raw_dir),
            THUMB_DIR=str(thumb_dir),
            THUMB_FORMAT=fmt,
            THUMB_WIDTH=width,
            THUMB_HEIGHT=height,
        )

    return _make


@pytest.fixture
def client(make_settings):
    """Fixture for a png/200x200 test client"""
    return TestClient(create_app(make_settings()))
