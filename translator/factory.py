"""
Translator Factory

Factory for creating translator instances.
Supports: translation endpoint, Google Cloud Translation, mock
"""
from __future__ import annotations

from typing import Optional

from config import SETTINGS
from .base import BaseTranslator
from .endpoint import EndpointTranslator
from .errors import ConfigurationError
from .google import GoogleTranslator
from .mock import MockTranslator


# Available translation engines
AVAILABLE_ENGINES = {
    "endpoint": "Batch translation endpoint",
    "google": "Google Cloud Translation",
    "mock": "Mock (development)",
}


def get_available_engines() -> dict[str, str]:
    """Get available translation engines with display names."""
    return AVAILABLE_ENGINES.copy()


def build_translator(
    engine_name: Optional[str] = None,
    *,
    proxy: Optional[str] = None,
    endpoint_url: Optional[str] = None,
    google_api_key: Optional[str] = None,
) -> BaseTranslator:
    """Build a translator instance.

    Args:
        engine_name: Name of the engine (endpoint, google, mock). Falls back to
            ``TRANSLATION_PROVIDER``.
        proxy: Optional proxy URL
        endpoint_url: Override for the batch endpoint URL
        google_api_key: Google Cloud Translation API key

    Returns:
        BaseTranslator instance

    Raises:
        ConfigurationError: If engine is not supported or required params missing
    """
    engine = (engine_name or SETTINGS.translator.provider or "").lower()
    timeout = SETTINGS.translator.session_timeout
    proxy = proxy or SETTINGS.translator.proxy_url

    if engine == "endpoint":
        return EndpointTranslator(
            url=endpoint_url or SETTINGS.translator.endpoint_url,
            proxy=proxy,
            timeout=timeout,
        )

    if engine == "google":
        key = google_api_key or SETTINGS.secrets.google_api_key
        if not key:
            raise ConfigurationError(
                "GOOGLE_TRANSLATE_API_KEY is required when the google engine is selected"
            )
        return GoogleTranslator(
            api_key=key,
            api_url=SETTINGS.secrets.google_api_url,
            proxy=proxy,
            timeout=timeout,
        )

    if engine == "mock":
        return MockTranslator()

    raise ConfigurationError(
        f"Unsupported translator engine: {engine_name!r}. Must be one of: {', '.join(AVAILABLE_ENGINES)}"
    )
