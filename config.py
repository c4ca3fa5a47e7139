from __future__ import annotations

from dataclasses import dataclass, field
import os

from utils.errors import ConfigurationError


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from e


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from e


@dataclass(slots=True)
class RetryPolicy:
    max_attempts: int = 3
    initial_delay: float = 0.5
    backoff_factor: float = 2.0
    backoff_jitter: float = 0.25


@dataclass(slots=True)
class BatcherSettings:
    batch_delay_ms: int = field(default_factory=lambda: _env_int("TRANSLATION_BATCH_DELAY_MS", 50))
    max_batch_size: int = field(default_factory=lambda: _env_int("TRANSLATION_MAX_BATCH_SIZE", 100))
    batch_throttle_ms: int = field(default_factory=lambda: _env_int("TRANSLATION_BATCH_THROTTLE_MS", 0))
    error_cooldown_s: float = 10.0


@dataclass(slots=True)
class TranslatorSettings:
    provider: str = field(default_factory=lambda: os.getenv("TRANSLATION_PROVIDER", "endpoint"))
    endpoint_url: str = field(default_factory=lambda: os.getenv("TRANSLATION_ENDPOINT_URL", "http://localhost:3000/api/translate"))
    session_timeout: float = field(default_factory=lambda: _env_float("TRANSLATION_TIMEOUT", 30.0))
    proxy_url: str | None = field(default_factory=lambda: os.getenv("TRANSLATION_PROXY"))


@dataclass(slots=True)
class EngineSecrets:
    google_api_key: str | None = field(default_factory=lambda: os.getenv("GOOGLE_TRANSLATE_API_KEY"))
    google_api_url: str = field(default_factory=lambda: os.getenv("GOOGLE_TRANSLATE_API_URL", "https://translation.googleapis.com/language/translate/v2"))


@dataclass(slots=True)
class AppSettings:
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    batcher: BatcherSettings = field(default_factory=BatcherSettings)
    translator: TranslatorSettings = field(default_factory=TranslatorSettings)
    secrets: EngineSecrets = field(default_factory=EngineSecrets)
    default_target_lang: str = field(default_factory=lambda: os.getenv("TRANSLATION_TARGET", "zh-CN"))


SETTINGS = AppSettings()
