from __future__ import annotations

from utils.errors import ConfigurationError, TranslationError

__all__ = ["TranslationError", "ConfigurationError", "ProviderError", "RateLimitError", "AlignmentError"]


class ProviderError(TranslationError):
    """The remote translation call failed for a language group."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class RateLimitError(ProviderError):
    """The remote translation provider rejected the call as rate limited."""


class AlignmentError(ProviderError):
    """The provider response does not line up with the texts that were sent."""
