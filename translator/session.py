"""Per-session wiring of selected language, cache and batcher."""
from __future__ import annotations

import time
from typing import Callable, Optional, Sequence

from loguru import logger

from config import SETTINGS, AppSettings
from utils.cache import TranslationCache

from .base import BaseTranslator, TranslationContext, TranslationScenario
from .batcher import TranslationBatcher
from .factory import build_translator

NoticeCallback = Callable[[str, str], None]


class TranslationSession:
    """Adapter between a UI session and its :class:`TranslationBatcher`.

    Holds the selected target language and the session cache, and creates the
    batcher on first use. When translation is off, requests return the source
    text untouched.
    """

    def __init__(
        self,
        cache: TranslationCache | None = None,
        *,
        translator: BaseTranslator | None = None,
        settings: AppSettings | None = None,
        notify: NoticeCallback | None = None,
    ) -> None:
        self.cache = cache if cache is not None else TranslationCache()
        self.settings = settings or SETTINGS
        self.notify = notify
        self.selected_language: Optional[str] = None
        self._translator = translator
        self._owns_translator = translator is None
        self._batcher: Optional[TranslationBatcher] = None
        self._last_notice_at: Optional[float] = None

    @property
    def batcher(self) -> TranslationBatcher:
        if self._batcher is None:
            if self._translator is None:
                self._translator = build_translator()
            batcher_settings = self.settings.batcher
            self._batcher = TranslationBatcher(
                self.cache,
                translator=self._translator,
                batch_delay_ms=batcher_settings.batch_delay_ms,
                max_batch_size=batcher_settings.max_batch_size,
                retry_policy=self.settings.retry,
                batch_throttle_ms=batcher_settings.batch_throttle_ms,
                on_error=self._on_error,
            )
        return self._batcher

    @property
    def has_batcher(self) -> bool:
        return self._batcher is not None

    async def request_translation(
        self,
        text: str,
        cache_key: str,
        scenario: TranslationScenario | None = None,
        *,
        video_title: str | None = None,
        topic_keywords: Sequence[str] | None = None,
    ) -> str:
        if not self.selected_language:
            return text

        context = None
        if scenario:
            context = TranslationContext(
                scenario=scenario,
                video_title=video_title,
                topic_keywords=tuple(topic_keywords or ()),
            )
        return await self.batcher.translate(text, cache_key, self.selected_language, context)

    def change_language(self, language: Optional[str]) -> None:
        self.selected_language = language
        if self._batcher is None:
            return
        if not language:
            self._batcher.clear()
            self._batcher = None
        else:
            self._batcher.clear_pending()

    async def aclose(self) -> None:
        if self._batcher is not None:
            self._batcher.clear()
            self._batcher = None
        if self._owns_translator and self._translator is not None:
            await self._translator.close()
            self._translator = None

    def _on_error(self, error: Exception, is_rate_limit: bool) -> None:
        now = time.monotonic()
        cooldown = self.settings.batcher.error_cooldown_s
        if self._last_notice_at is not None and now - self._last_notice_at < cooldown:
            return
        self._last_notice_at = now

        if is_rate_limit:
            title = "Translation rate limit exceeded"
            description = "Please wait a moment and try again. Some translations may not be available."
        else:
            title = "Translation failed"
            description = "Unable to translate content. Showing original text."
        logger.warning("{}: {}", title, error)
        if self.notify:
            self.notify(title, description)
