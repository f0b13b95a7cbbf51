"""
conftest.py

Test configuration for wallfetch tests.

Defines pytest fixtures for supplying test data across the entire test suite. Test images are
generated with Pillow rather than checked in. Fixtures used within only a single module are defined
directly in that module.
"""

import io
import json
from pathlib import Path

import pytest
from PIL import Image


def make_image_bytes(format: str = "JPEG", size=(64, 36), color=(200, 120, 40), mode="RGB") -> bytes:
    """
    Encode a solid colour image in memory. Different colours give different bytes.
    """

    buffer = io.BytesIO()
    Image.new(mode, size, color).save(buffer, format=format)
    return buffer.getvalue()


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_image_bytes("JPEG")


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes("PNG", mode="RGBA", color=(10, 200, 90, 128))


@pytest.fixture
def image_dir(tmp_path) -> Path:
    """
    Folder of small images named after what they show, in 16:9 and 4:3.
    """

    folder = tmp_path / "images"
    folder.mkdir()

    (folder / "forest-landscape.jpg").write_bytes(make_image_bytes("JPEG", (64, 36)))
    (folder / "city-night.png").write_bytes(make_image_bytes("PNG", (40, 30)))
    (folder / "notes.txt").write_text("not an image")

    return folder


@pytest.fixture
def test_image(image_dir) -> Path:
    return image_dir / "forest-landscape.jpg"


@pytest.fixture
def config_dir(tmp_path, image_dir, monkeypatch) -> Path:
    """
    A complete wallfetch config directory: two categories, a local directory supplier and a url
    supplier, and the cache inside tmp_path. WALLFETCH_CONFIG_DIR points at it for the test.
    """

    directory = tmp_path / "config"
    (directory / "suppliers").mkdir(parents=True)

    (directory / "suppliers" / "local.json").write_text(
        json.dumps({"type": "directory", "path": str(image_dir)})
    )
    (directory / "suppliers" / "web.json").write_text(
        json.dumps(
            {
                "type": "url",
                "url": "https://images.example.com/search?q={tags}&ratios={ratios}",
                "results_path": "data",
                "image_key": "path",
            }
        )
    )

    config = {
        "WALLFETCH_CACHE_DIR": str(tmp_path / "cache"),
        "categories": [
            {"name": "nature", "tags": ["landscape"], "aspect_ratios": ["16:9"]},
            {"name": "city", "tags": ["city"]},
        ],
        "suppliers": [
            {"name": "local", "file": "suppliers/local.json"},
            {"name": "web", "file": "suppliers/web.json"},
        ],
        "set_command": None,
    }
    (directory / "config.json").write_text(json.dumps(config))

    monkeypatch.setenv("WALLFETCH_CONFIG_DIR", str(directory))
    return directory


def first(items):
    """Deterministic stand-in for random.choice."""

    return items[0]


@pytest.fixture
def chooser():
    return first
