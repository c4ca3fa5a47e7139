"""Coalesce fine-grained translation requests into batched provider calls."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import List, MutableMapping, Optional

from loguru import logger

from config import SETTINGS, RetryPolicy
from utils.batching import take_front

from .base import BaseTranslator, TranslationContext
from .errors import ConfigurationError
from .executor import BatchExecutor, ErrorCallback, PendingTranslation
from .factory import build_translator

MAX_BATCH_SIZE_LIMIT = 100


class BatcherState(Enum):
    IDLE = "idle"
    PROCESSING = "processing"


@dataclass(frozen=True, slots=True)
class BatcherStats:
    queue_size: int
    processing: bool
    cache_size: int
    scheduled: bool


class TranslationBatcher:
    """Queue ``translate()`` calls and flush them as grouped provider requests.

    Requests wait up to ``batch_delay_ms`` for others to join. A full queue
    (``max_batch_size``) flushes immediately. At most one batch runs at a time;
    anything queued meanwhile is drained on the next loop tick once it
    finishes. ``translate()`` never raises for provider failures and resolves
    with the source text instead.
    """

    def __init__(
        self,
        cache: MutableMapping[str, str],
        *,
        translator: BaseTranslator | None = None,
        batch_delay_ms: int | None = None,
        max_batch_size: int | None = None,
        retry_policy: RetryPolicy | None = None,
        batch_throttle_ms: int | None = None,
        on_error: ErrorCallback | None = None,
    ) -> None:
        batch_delay_ms = SETTINGS.batcher.batch_delay_ms if batch_delay_ms is None else batch_delay_ms
        max_batch_size = SETTINGS.batcher.max_batch_size if max_batch_size is None else max_batch_size
        if not 1 <= max_batch_size <= MAX_BATCH_SIZE_LIMIT:
            raise ConfigurationError(
                f"max_batch_size must be between 1 and {MAX_BATCH_SIZE_LIMIT}, got {max_batch_size}"
            )
        if batch_delay_ms < 0:
            raise ConfigurationError(f"batch_delay_ms must not be negative, got {batch_delay_ms}")

        self.cache = cache
        self.batch_delay_ms = batch_delay_ms
        self.max_batch_size = max_batch_size
        self._executor = BatchExecutor(
            translator or build_translator(),
            retry_policy,
            batch_throttle_ms=SETTINGS.batcher.batch_throttle_ms if batch_throttle_ms is None else batch_throttle_ms,
            on_error=on_error,
        )
        self._queue: List[PendingTranslation] = []
        self._state = BatcherState.IDLE
        self._timer: Optional[asyncio.TimerHandle] = None
        self._task: Optional[asyncio.Task] = None

    async def translate(
        self,
        text: str,
        cache_key: str,
        target_lang: str,
        context: TranslationContext | None = None,
    ) -> str:
        if cache_key in self.cache:
            return self.cache[cache_key]

        loop = asyncio.get_running_loop()
        request = PendingTranslation(
            text=text,
            cache_key=cache_key,
            target_lang=target_lang,
            context=context,
            future=loop.create_future(),
        )
        self._queue.append(request)
        self._schedule(loop)
        return await request.future

    def _schedule(self, loop: asyncio.AbstractEventLoop) -> None:
        if len(self._queue) >= self.max_batch_size and self._state is BatcherState.IDLE:
            self._cancel_timer()
            self._start_batch(loop)
            return

        if self._state is BatcherState.PROCESSING:
            return

        if self._timer is None:
            self._timer = loop.call_later(self.batch_delay_ms / 1000, self._on_timer, loop)

    def _on_timer(self, loop: asyncio.AbstractEventLoop) -> None:
        self._timer = None
        if self._state is BatcherState.IDLE:
            self._start_batch(loop)

    def _start_batch(self, loop: asyncio.AbstractEventLoop) -> None:
        self._state = BatcherState.PROCESSING
        self._task = loop.create_task(self._run_batch())

    async def _run_batch(self) -> None:
        batch = take_front(self._queue, self.max_batch_size)
        try:
            if batch:
                logger.debug("Processing batch of {} translations", len(batch))
                await self._executor.execute(batch, self.cache)
        finally:
            # Requests left unsettled by a cancelled batch still get their source text.
            for request in batch:
                request.settle(request.text)
            self._task = None
            if self._queue:
                asyncio.get_running_loop().call_soon(self._continue)
            else:
                self._state = BatcherState.IDLE

    def _continue(self) -> None:
        if not self._queue:
            self._state = BatcherState.IDLE
            return
        self._start_batch(asyncio.get_running_loop())

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def clear_pending(self) -> int:
        """Cancel the debounce timer and discard undispatched requests.

        Discarded requests resolve with their source text. A batch already in
        flight is left to finish.
        """
        self._cancel_timer()
        discarded, self._queue = self._queue, []
        for request in discarded:
            request.settle(request.text)
        if discarded:
            logger.debug("Discarded {} pending translations", len(discarded))
        return len(discarded)

    def clear(self) -> int:
        return self.clear_pending()

    @property
    def pending_count(self) -> int:
        return len(self._queue)

    @property
    def state(self) -> BatcherState:
        return self._state

    def get_stats(self) -> BatcherStats:
        return BatcherStats(
            queue_size=len(self._queue),
            processing=self._state is BatcherState.PROCESSING,
            cache_size=len(self.cache),
            scheduled=self._timer is not None,
        )
