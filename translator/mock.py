from __future__ import annotations

from typing import List

from .base import BaseTranslator, ProviderRequest


class MockTranslator(BaseTranslator):
    """Local development translator that tags texts with the target language."""

    name = "mock"

    async def translate_texts(self, request: ProviderRequest) -> List[str]:
        prefix = f"[{request.target_lang.upper()}]"
        return [text if not text or not text.strip() else f"{prefix} {text}" for text in request.texts]
