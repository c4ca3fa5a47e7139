from .cache import TranslationCache, make_cache_key
from .batching import partition_by, take_front
from .text import deduplicate_texts
from .errors import ConfigurationError, TranslationError

__all__ = [
    "TranslationCache",
    "make_cache_key",
    "partition_by",
    "take_front",
    "deduplicate_texts",
    "ConfigurationError",
    "TranslationError",
]
