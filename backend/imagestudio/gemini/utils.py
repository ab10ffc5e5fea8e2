"""Utility functions for handling untrusted provider payloads.

Provides:
- Tolerant field access (dicts or attribute objects)
- Logging utilities (redaction, truncation, response dumps)
"""

from __future__ import annotations

import json
from typing import Any


def get_field(obj: Any, name: str) -> Any:
    """
    Read a field from a dict or an attribute-style object.

    Args:
        obj: Dict, object, or None
        name: Field/key name

    Returns:
        Field value, or None if absent or obj is None
    """
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def redact(text: str, max_length: int = 300) -> str:
    """
    Truncate text for safe logging or caller-facing previews.

    Args:
        text: Text to truncate
        max_length: Maximum length before truncation

    Returns:
        Text cut to max_length with a "..." marker when truncated
    """
    if len(text) > max_length:
        return text[:max_length] + "..."
    return text


def dump_response(response: Any) -> str:
    """
    Serialize a provider response for operator logs.

    Prefers the full raw provider payload when the envelope carries one.

    Args:
        response: ModelResponse, dict, or any object

    Returns:
        JSON string (non-serializable values rendered with str())
    """
    payload = get_field(response, "raw")
    if payload is None:
        if hasattr(response, "model_dump"):
            payload = response.model_dump(exclude={"raw"})
        else:
            payload = response

    try:
        return json.dumps(payload, indent=2, default=str, ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(payload)
