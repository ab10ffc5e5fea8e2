"""Abstract image model interface (provider-agnostic)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from imagestudio.gemini.models import ModelRequest, ModelResponse


class ImageModelClient(ABC):
    """Abstract base class for image-capable generative model clients.

    Allows swapping the provider (or injecting a fake in tests) without
    changing orchestration code.
    """

    @abstractmethod
    def invoke(self, model_request: ModelRequest) -> ModelResponse:
        """Issue one generation call and return the raw response envelope.

        Args:
            model_request: Model id, composed prompt, modalities, safety settings

        Returns:
            ModelResponse envelope; no field is guaranteed to be present

        Raises:
            RuntimeError: On transport failures
        """

    def close(self) -> None:
        """Close client resources (optional, override if needed)."""
        pass

    def __enter__(self) -> ImageModelClient:
        """Context manager entry."""
        return self

    def __exit__(self, *args) -> None:
        """Context manager exit."""
        self.close()
