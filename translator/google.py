"""
Google Cloud Translation (v2 REST) translator.

Uses an API key; blank texts are never sent and keep their original position.
"""
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

import aiohttp

from .base import BaseTranslator, ProviderRequest
from .errors import AlignmentError, ConfigurationError, ProviderError, RateLimitError


class GoogleTranslator(BaseTranslator):
    """Google Cloud Translation v2 client.

    Features:
    - Batch translation of up to ``max_texts_per_request`` strings per call
    - Blank texts passed through untouched
    - HTTP errors mapped to provider errors
    """

    name = "google"
    max_texts_per_request = 128

    API_URL = "https://translation.googleapis.com/language/translate/v2"

    def __init__(
        self,
        *,
        api_key: str,
        api_url: str | None = None,
        timeout: float = 30.0,
        proxy: str | None = None,
    ) -> None:
        if not api_key:
            raise ConfigurationError("Google Translate API key is required")

        super().__init__(timeout=timeout, proxy=proxy)
        self.api_key = api_key
        self.api_url = api_url or self.API_URL
        self._session: Optional[aiohttp.ClientSession] = None
        self.logger = logging.getLogger(self.__class__.__name__)

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def close(self) -> None:
        if self._session:
            await self._session.close()
            self._session = None

    async def translate_texts(self, request: ProviderRequest) -> List[str]:
        texts = list(request.texts)
        if not texts:
            return []

        index_map = [i for i, text in enumerate(texts) if text and text.strip()]
        if not index_map:
            return texts

        non_empty = [texts[i] for i in index_map]
        translated: List[str] = []
        for start in range(0, len(non_empty), self.max_texts_per_request):
            chunk = non_empty[start:start + self.max_texts_per_request]
            translated.extend(await self._translate_chunk(chunk, request.target_lang))

        self.check_alignment(non_empty, translated)

        result = list(texts)
        for original_index, translation in zip(index_map, translated):
            result[original_index] = translation or texts[original_index]
        return result

    async def _translate_chunk(self, texts: List[str], target_lang: str) -> List[str]:
        session = await self._get_session()
        payload = {"q": texts, "target": target_lang, "format": "text"}

        try:
            async with session.post(
                self.api_url,
                params={"key": self.api_key},
                json=payload,
                proxy=self.proxy,
            ) as resp:
                if resp.status == 429:
                    raise RateLimitError("Google Translate: quota or rate limit exceeded", status=resp.status)

                if resp.status != 200:
                    body = await resp.text()
                    raise ProviderError(
                        f"Google Translate error: HTTP {resp.status} - {body[:200]}",
                        status=resp.status,
                    )

                data = await resp.json(content_type=None)

        except asyncio.TimeoutError as e:
            raise ProviderError(f"Google Translate timed out after {self.timeout}s") from e
        except aiohttp.ClientError as e:
            raise ProviderError(f"Google Translate connection error: {e}") from e

        try:
            items = data["data"]["translations"]
        except (KeyError, TypeError) as e:
            raise AlignmentError(f"Unexpected Google Translate response: {str(data)[:200]}") from e

        return [item.get("translatedText", "") for item in items]
