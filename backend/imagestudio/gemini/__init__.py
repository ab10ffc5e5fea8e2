"""Gemini API client package.

Exports:
    GeminiImageClient: Client for joint TEXT+IMAGE generation
    GeminiConfig: Client configuration constants
"""

from .client import GeminiConfig, GeminiImageClient

__all__ = ["GeminiImageClient", "GeminiConfig"]
