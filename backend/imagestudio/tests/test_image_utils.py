"""Tests for data URI parsing and saving."""

from __future__ import annotations

import base64

import pytest
from PIL import Image

from imagestudio.core.image_utils import extension_for, parse_data_uri, save_data_uri
from imagestudio.core.storage import safe_join


def test_parse_data_uri(png_data_uri):
    mime_type, data = parse_data_uri(png_data_uri)
    assert mime_type == "image/png"
    assert data.startswith(b"\x89PNG")


@pytest.mark.parametrize(
    "uri",
    [
        "https://example.com/x.png",
        "data:text/plain;base64,SGVsbG8=",
        "data:image/png,rawbytes",
        "data:image/png;base64,",
    ],
)
def test_parse_rejects_non_image_uris(uri):
    with pytest.raises(ValueError):
        parse_data_uri(uri)


def test_parse_rejects_bad_base64():
    with pytest.raises(ValueError, match="Invalid base64"):
        parse_data_uri("data:image/png;base64,@@@not-base64@@@")


def test_save_writes_verified_image(png_data_uri, tmp_path):
    path = save_data_uri(png_data_uri, "fox", out_dir=tmp_path)

    assert path == tmp_path / "fox.png"
    with Image.open(path) as img:
        assert img.size == (2, 2)
    assert not (tmp_path / "fox.png.tmp").exists()


def test_save_rejects_corrupt_image(tmp_path):
    uri = "data:image/png;base64," + base64.b64encode(b"definitely not a png").decode()
    with pytest.raises(ValueError, match="not a readable image"):
        save_data_uri(uri, "broken", out_dir=tmp_path)
    assert list(tmp_path.iterdir()) == []


@pytest.mark.parametrize("name", ["../escape", "/tmp/elsewhere", "sub\\dir", ""])
def test_save_requires_bare_name(png_data_uri, tmp_path, name):
    with pytest.raises(ValueError, match="bare stem expected"):
        save_data_uri(png_data_uri, name, out_dir=tmp_path)
    assert list(tmp_path.iterdir()) == []


def test_safe_join_blocks_traversal(tmp_path):
    with pytest.raises(ValueError, match="Path traversal blocked"):
        safe_join(str(tmp_path), "..", "escape.png")


def test_extension_for():
    assert extension_for("image/png") == ".png"
    assert extension_for("image/jpeg") == ".jpg"


def test_safe_join_allows_normal_paths():
    path = safe_join("data", "generated", "img.png")
    assert "generated" in path
    assert ".." not in path
