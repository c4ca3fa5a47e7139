"""
Translation request coalescing engine

Components:
- TranslationBatcher: debounced, single-flight request coalescer
- BatchExecutor: per-language grouping, dedup and fail-soft distribution
- TranslationSession: selected language + cache + batcher for one UI session
- Translators: batch endpoint, Google Cloud Translation, mock
"""
from .base import BaseTranslator, ProviderRequest, TranslationContext
from .batcher import BatcherState, BatcherStats, TranslationBatcher
from .endpoint import EndpointTranslator
from .errors import (
    AlignmentError,
    ConfigurationError,
    ProviderError,
    RateLimitError,
    TranslationError,
)
from .executor import BatchExecutor, PendingTranslation
from .factory import build_translator, get_available_engines, AVAILABLE_ENGINES
from .google import GoogleTranslator
from .mock import MockTranslator
from .session import TranslationSession

__all__ = [
    "BaseTranslator",
    "ProviderRequest",
    "TranslationContext",
    "BatcherState",
    "BatcherStats",
    "TranslationBatcher",
    "BatchExecutor",
    "PendingTranslation",
    "EndpointTranslator",
    "GoogleTranslator",
    "MockTranslator",
    "build_translator",
    "get_available_engines",
    "AVAILABLE_ENGINES",
    "TranslationSession",
    "TranslationError",
    "ConfigurationError",
    "ProviderError",
    "RateLimitError",
    "AlignmentError",
]
