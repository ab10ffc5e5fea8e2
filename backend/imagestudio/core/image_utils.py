"""Helpers for turning generated data URIs into image files.

The generation pipeline only ever hands back inline ``data:image/...`` URIs.
These helpers back the download/save actions of the API and CLI.
"""

from __future__ import annotations

import base64
import binascii
import io
import mimetypes
import os
import re
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from imagestudio.core.logging import log
from imagestudio.core.paths import get_data_path
from imagestudio.core.storage import atomic_write_bytes, safe_join

DATA_URI_PATTERN = re.compile(r"^data:(?P<mime>image/[\w.+-]+);base64,(?P<data>.*)$", re.DOTALL)

# Preferred extensions; mimetypes is inconsistent across platforms for these
EXTENSIONS = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/webp": ".webp",
    "image/gif": ".gif",
}


def parse_data_uri(uri: str) -> tuple[str, bytes]:
    """Split a base64 image data URI into its MIME type and decoded bytes.

    Args:
        uri: ``data:image/<subtype>;base64,<payload>`` string

    Returns:
        Tuple of (mime_type, image_bytes)

    Raises:
        ValueError: If the URI is not a base64 image data URI or payload is invalid
    """
    match = DATA_URI_PATTERN.match(uri)
    if not match:
        raise ValueError(f"Not a base64 image data URI: {uri[:40]}...")

    try:
        data = base64.b64decode(match.group("data"), validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload in data URI: {e}") from e

    if not data:
        raise ValueError("Data URI contains an empty payload")

    return match.group("mime"), data


def extension_for(mime_type: str) -> str:
    """Return a file extension (with dot) for an image MIME type."""
    return EXTENSIONS.get(mime_type) or mimetypes.guess_extension(mime_type) or ".img"


def check_stem(name: str) -> None:
    """Reject file stems that are empty or carry a directory component."""
    if not name or "/" in name or "\\" in name or os.path.isabs(name):
        raise ValueError(f"Invalid file name (bare stem expected): {name!r}")


def save_data_uri(uri: str, name: str, out_dir: str | Path | None = None) -> Path:
    """Decode a generated image data URI and write it to disk.

    The payload is opened with Pillow before writing so a corrupt image never
    lands on disk.

    Args:
        uri: Image data URI returned by the generator
        name: File stem (no extension, no path separators)
        out_dir: Target directory (default: <data>/generated)

    Returns:
        Path to the written file

    Raises:
        ValueError: If the URI is invalid, the bytes are not a readable image,
            or name is not a bare file stem
        OSError: If the file cannot be written
    """
    check_stem(name)
    mime_type, data = parse_data_uri(uri)

    try:
        with Image.open(io.BytesIO(data)) as img:
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise ValueError(f"Data URI payload is not a readable image ({mime_type}): {e}") from e

    target_dir = Path(out_dir) if out_dir is not None else get_data_path("generated")
    target_dir.mkdir(parents=True, exist_ok=True)

    path = Path(safe_join(str(target_dir), f"{name}{extension_for(mime_type)}"))
    atomic_write_bytes(str(path), data)

    log.info(f"IMAGE_SAVED path={path} mime={mime_type} size_kb={len(data) // 1024}")
    return path
