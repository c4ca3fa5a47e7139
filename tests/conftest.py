"""Shared fakes for the translation engine tests."""

from __future__ import annotations

import asyncio
import inspect
from typing import Callable, Iterable, List, Optional

import pytest

from config import RetryPolicy
from translator.base import BaseTranslator, ProviderRequest
from translator.batcher import TranslationBatcher
from translator.errors import ProviderError
from utils.cache import TranslationCache


class RecordingTranslator(BaseTranslator):
    """Fake provider that records each grouped call."""

    name = "recording"

    def __init__(
        self,
        *,
        fail_langs: Iterable[str] = (),
        delay: float = 0.0,
        error_factory: Callable[[], Exception] = lambda: ProviderError("provider unavailable"),
        responder: Optional[Callable[[ProviderRequest], List[str]]] = None,
    ) -> None:
        super().__init__()
        self.calls: List[ProviderRequest] = []
        self.stack_depths: List[int] = []
        self.fail_langs = set(fail_langs)
        self.delay = delay
        self.error_factory = error_factory
        self.responder = responder
        self.close_calls = 0

    async def translate_texts(self, request: ProviderRequest) -> List[str]:
        self.calls.append(ProviderRequest(list(request.texts), request.target_lang, request.context))
        self.stack_depths.append(len(inspect.stack(0)))
        if self.delay:
            await asyncio.sleep(self.delay)
        if request.target_lang in self.fail_langs:
            raise self.error_factory()
        if self.responder is not None:
            return self.responder(request)
        return [f"{request.target_lang}:{text}" for text in request.texts]

    async def close(self) -> None:
        self.close_calls += 1


@pytest.fixture
def translator() -> RecordingTranslator:
    return RecordingTranslator()


@pytest.fixture
def cache() -> TranslationCache:
    return TranslationCache()


@pytest.fixture
def no_retry() -> RetryPolicy:
    return RetryPolicy(max_attempts=1, initial_delay=0.0, backoff_jitter=0.0)


@pytest.fixture
def make_batcher(cache: TranslationCache, translator: RecordingTranslator, no_retry: RetryPolicy):
    def factory(**kwargs) -> TranslationBatcher:
        kwargs.setdefault("translator", translator)
        kwargs.setdefault("retry_policy", no_retry)
        kwargs.setdefault("batch_delay_ms", 10)
        kwargs.setdefault("max_batch_size", 100)
        kwargs.setdefault("batch_throttle_ms", 0)
        return TranslationBatcher(cache, **kwargs)

    return factory
