from __future__ import annotations

import os


def safe_join(*parts: str) -> str:
    """Joins path components and validates against path traversal attacks.

    Args:
        *parts: Path components to join

    Returns:
        Normalized safe path

    Raises:
        ValueError: If path contains traversal attempts (..)
    """
    # Check both forward and backward slashes for cross-platform security
    for part in parts:
        path_parts = part.replace("\\", "/").split("/")
        if ".." in path_parts:
            raise ValueError(f"Path traversal blocked: {part}")

    return os.path.normpath(os.path.join(*parts))


def atomic_write_bytes(path: str, content: bytes) -> None:
    """Atomically writes binary content to file using temp + rename.

    Args:
        path: Path to file
        content: Bytes to write
    """
    tmp = path + ".tmp"
    try:
        with open(tmp, "wb") as f:
            f.write(content)
        os.replace(tmp, path)
    finally:
        if os.path.exists(tmp):
            os.remove(tmp)
