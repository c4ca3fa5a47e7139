from __future__ import annotations


class TranslationError(Exception):
    """Base class for translation engine errors."""


class ConfigurationError(TranslationError, ValueError):
    """Invalid batcher, translator or environment configuration."""
