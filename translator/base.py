from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Literal, Sequence, Tuple

from .errors import AlignmentError

TranslationScenario = Literal["transcript", "chat", "topic", "general"]


@dataclass(frozen=True, slots=True)
class TranslationContext:
    scenario: TranslationScenario = "general"
    video_title: str | None = None
    topic_keywords: Tuple[str, ...] = ()

    def to_payload(self) -> dict:
        payload: dict = {"scenario": self.scenario}
        if self.video_title:
            payload["videoTitle"] = self.video_title
        if self.topic_keywords:
            payload["topicKeywords"] = list(self.topic_keywords)
        return payload


@dataclass(slots=True)
class ProviderRequest:
    texts: Sequence[str]
    target_lang: str
    context: TranslationContext | None = None


class BaseTranslator(ABC):
    name: str = "base"

    def __init__(self, *, timeout: float = 30.0, proxy: str | None = None) -> None:
        self.timeout = timeout
        self.proxy = proxy

    @abstractmethod
    async def translate_texts(self, request: ProviderRequest) -> List[str]:
        """Translate a group of texts, returning translations aligned 1:1 with ``request.texts``."""

    async def close(self) -> None:
        """Release network resources held by the translator."""

    @staticmethod
    def check_alignment(texts: Sequence[str], translations: Sequence[str]) -> List[str]:
        if len(translations) != len(texts):
            raise AlignmentError(
                f"Provider returned {len(translations)} translations for {len(texts)} texts"
            )
        return list(translations)
