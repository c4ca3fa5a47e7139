from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, MutableMapping, Sequence

from loguru import logger

from config import SETTINGS, RetryPolicy
from utils.batching import partition_by
from utils.text import deduplicate_texts

from .base import BaseTranslator, ProviderRequest, TranslationContext
from .errors import RateLimitError


ErrorCallback = Callable[[Exception, bool], None]


@dataclass(slots=True)
class PendingTranslation:
    """One queued ``translate()`` call, owned by the batcher until settled."""

    text: str
    cache_key: str
    target_lang: str
    context: TranslationContext | None
    future: asyncio.Future = field(repr=False)

    def settle(self, translation: str) -> None:
        # The awaiting caller may have been cancelled or the request settled already.
        if not self.future.done():
            self.future.set_result(translation)


class BatchExecutor:
    """Send one drawn batch to the translator, one call per language group."""

    def __init__(
        self,
        translator: BaseTranslator,
        retry_policy: RetryPolicy | None = None,
        *,
        batch_throttle_ms: int = 0,
        on_error: ErrorCallback | None = None,
    ) -> None:
        self.translator = translator
        self.retry_policy = retry_policy or SETTINGS.retry
        self.batch_throttle_ms = batch_throttle_ms
        self.on_error = on_error

    async def execute(self, batch: Sequence[PendingTranslation], cache: MutableMapping[str, str]) -> None:
        if not batch:
            return

        groups = partition_by(batch, lambda request: (request.target_lang, request.context))
        for index, ((target_lang, context), requests) in enumerate(groups.items()):
            if index and self.batch_throttle_ms:
                await asyncio.sleep(self.batch_throttle_ms / 1000)
            await self._execute_group(requests, target_lang, context, cache)

    async def _execute_group(
        self,
        requests: List[PendingTranslation],
        target_lang: str,
        context: TranslationContext | None,
        cache: MutableMapping[str, str],
    ) -> None:
        unique_texts = deduplicate_texts([request.text for request in requests]).unique_texts
        provider_request = ProviderRequest(texts=unique_texts, target_lang=target_lang, context=context)

        async def action() -> List[str]:
            translations = await self.translator.translate_texts(provider_request)
            return self.translator.check_alignment(unique_texts, translations)

        try:
            translations = await self._retry(action, target_lang=target_lang)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Translation of {} texts to {} failed, falling back to source text: {}",
                len(unique_texts),
                target_lang,
                exc,
            )
            for request in requests:
                request.settle(request.text)
            self._notify(exc)
            return

        translation_map = dict(zip(unique_texts, translations))
        for request in requests:
            translation = translation_map.get(request.text) or request.text
            cache[request.cache_key] = translation
            request.settle(translation)

        logger.debug(
            "Translated {} requests ({} unique texts) to {}",
            len(requests),
            len(unique_texts),
            target_lang,
        )

    async def _retry(self, action: Callable[[], Awaitable[List[str]]], *, target_lang: str) -> List[str]:
        attempt = 0
        delay = self.retry_policy.initial_delay
        while True:
            attempt += 1
            try:
                return await action()
            except Exception as exc:  # noqa: BLE001
                logger.debug("Translation attempt {} to {} failed: {}", attempt, target_lang, exc)
                if attempt >= self.retry_policy.max_attempts:
                    raise
                jitter = random.uniform(0, self.retry_policy.backoff_jitter)
                await asyncio.sleep(delay + jitter)
                delay *= self.retry_policy.backoff_factor

    def _notify(self, exc: Exception) -> None:
        if self.on_error is None:
            return
        try:
            self.on_error(exc, isinstance(exc, RateLimitError))
        except Exception:  # noqa: BLE001
            logger.exception("Translation error callback raised")
