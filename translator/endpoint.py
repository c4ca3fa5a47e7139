"""
Endpoint Translator

Talks to the application's own batch translation route:
POST {"texts": [...], "targetLanguage": "..."} -> {"translations": [...]}.
"""
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

import aiohttp

from .base import BaseTranslator, ProviderRequest
from .errors import AlignmentError, ConfigurationError, ProviderError, RateLimitError


class EndpointTranslator(BaseTranslator):
    """Batch translator backed by a JSON HTTP endpoint.

    The endpoint is treated as an opaque remote procedure. Any transport
    failure, non-2xx status or malformed body is raised as a
    :class:`ProviderError` so the batch executor can fall back to the source
    text for the affected group.
    """

    name = "endpoint"

    def __init__(
        self,
        *,
        url: str,
        timeout: float = 30.0,
        proxy: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        if not url:
            raise ConfigurationError("Translation endpoint URL is required")

        super().__init__(timeout=timeout, proxy=proxy)
        self.url = url
        self.headers = {"Content-Type": "application/json", **(headers or {})}
        self._session: Optional[aiohttp.ClientSession] = None
        self.logger = logging.getLogger(self.__class__.__name__)

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            self._session = aiohttp.ClientSession(headers=self.headers, timeout=timeout)
        return self._session

    async def close(self) -> None:
        if self._session:
            await self._session.close()
            self._session = None

    def build_payload(self, request: ProviderRequest) -> dict:
        payload: dict = {
            "texts": list(request.texts),
            "targetLanguage": request.target_lang,
        }
        if request.context is not None:
            payload["context"] = request.context.to_payload()
        return payload

    async def translate_texts(self, request: ProviderRequest) -> List[str]:
        texts = list(request.texts)
        if not texts:
            return []

        session = await self._get_session()

        try:
            async with session.post(
                self.url,
                json=self.build_payload(request),
                proxy=self.proxy,
            ) as resp:
                if resp.status == 429:
                    raise RateLimitError("Translation endpoint: too many requests", status=resp.status)

                if resp.status < 200 or resp.status >= 300:
                    body = await resp.text()
                    raise ProviderError(
                        f"Translation endpoint error: HTTP {resp.status} - {body[:200]}",
                        status=resp.status,
                    )

                try:
                    data = await resp.json(content_type=None)
                except ValueError as e:
                    raise AlignmentError(f"Translation endpoint returned invalid JSON: {e}") from e

        except asyncio.TimeoutError as e:
            raise ProviderError(f"Translation endpoint timed out after {self.timeout}s") from e
        except aiohttp.ClientError as e:
            raise ProviderError(f"Translation endpoint connection error: {e}") from e

        translations = data.get("translations") if isinstance(data, dict) else None
        if not isinstance(translations, list):
            raise AlignmentError("Translation endpoint response has no 'translations' list")

        self.logger.debug(f"Endpoint translated {len(texts)} texts to {request.target_lang}")
        return self.check_alignment(texts, [str(item) if item is not None else "" for item in translations])
