"""Tests for the per-session adapter around the batcher."""

from __future__ import annotations

import asyncio
import time
from dataclasses import replace

import pytest

from config import SETTINGS, RetryPolicy
from translator.base import TranslationContext
from translator.session import TranslationSession
from utils.cache import TranslationCache

from tests.conftest import RecordingTranslator


@pytest.fixture
def settings():
    return replace(
        SETTINGS,
        retry=RetryPolicy(max_attempts=1, initial_delay=0.0, backoff_jitter=0.0),
        batcher=replace(SETTINGS.batcher, batch_delay_ms=10, max_batch_size=50, batch_throttle_ms=0),
    )


@pytest.mark.asyncio
async def test_passthrough_without_language(settings) -> None:
    translator = RecordingTranslator()
    session = TranslationSession(translator=translator, settings=settings)

    assert await session.request_translation("Hello", "seg-1:ja") == "Hello"
    assert translator.calls == []
    assert session.has_batcher is False


@pytest.mark.asyncio
async def test_translates_with_context(settings) -> None:
    translator = RecordingTranslator()
    cache = TranslationCache()
    session = TranslationSession(cache, translator=translator, settings=settings)
    session.change_language("ja")

    result = await session.request_translation(
        "Compound Components",
        "topic-1:ja",
        "topic",
        video_title="Advanced React Patterns",
        topic_keywords=["react", "patterns"],
    )

    assert result == "ja:Compound Components"
    assert cache["topic-1:ja"] == result
    assert translator.calls[0].context == TranslationContext(
        scenario="topic",
        video_title="Advanced React Patterns",
        topic_keywords=("react", "patterns"),
    )


@pytest.mark.asyncio
async def test_switching_off_drops_batcher(settings) -> None:
    translator = RecordingTranslator()
    slow_settings = replace(settings, batcher=replace(settings.batcher, batch_delay_ms=10_000))
    session = TranslationSession(translator=translator, settings=slow_settings)
    session.change_language("ja")

    pending = asyncio.create_task(session.request_translation("Hello", "seg-1:ja"))
    await asyncio.sleep(0)
    session.change_language(None)

    assert await pending == "Hello"
    assert session.has_batcher is False
    assert translator.calls == []


@pytest.mark.asyncio
async def test_language_change_keeps_batcher(settings) -> None:
    translator = RecordingTranslator()
    session = TranslationSession(translator=translator, settings=settings)
    session.change_language("ja")
    batcher = session.batcher

    session.change_language("es")

    assert session.batcher is batcher
    assert await session.request_translation("Hola", "seg-1:es") == "es:Hola"


@pytest.mark.asyncio
async def test_error_notice_is_rate_limited(settings, monkeypatch) -> None:
    notices = []
    translator = RecordingTranslator(fail_langs={"ja"})
    session = TranslationSession(
        translator=translator,
        settings=settings,
        notify=lambda title, description: notices.append(title),
    )
    session.change_language("ja")

    assert await session.request_translation("one", "1:ja") == "one"
    assert await session.request_translation("two", "2:ja") == "two"
    assert notices == ["Translation failed"]

    original_monotonic = time.monotonic
    monkeypatch.setattr(time, "monotonic", lambda: original_monotonic() + 11)
    assert await session.request_translation("three", "3:ja") == "three"
    assert notices == ["Translation failed", "Translation failed"]


@pytest.mark.asyncio
async def test_aclose_keeps_external_translator(settings) -> None:
    translator = RecordingTranslator()
    session = TranslationSession(translator=translator, settings=settings)
    session.change_language("ja")
    await session.request_translation("Hello", "seg-1:ja")

    await session.aclose()

    assert session.has_batcher is False
    assert translator.close_calls == 0


@pytest.mark.asyncio
async def test_aclose_closes_owned_translator(settings, monkeypatch) -> None:
    translator = RecordingTranslator()
    monkeypatch.setattr("translator.session.build_translator", lambda: translator)
    session = TranslationSession(settings=settings)
    session.change_language("ja")
    assert await session.request_translation("Hello", "seg-1:ja") == "ja:Hello"

    await session.aclose()

    assert translator.close_calls == 1
