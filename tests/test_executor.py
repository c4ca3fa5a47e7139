"""Tests for grouping and result distribution in the batch executor."""

from __future__ import annotations

import asyncio

import pytest

from config import RetryPolicy
from translator.base import TranslationContext
from translator.executor import BatchExecutor, PendingTranslation

from tests.conftest import RecordingTranslator


def _pending(text: str, key: str, lang: str, context: TranslationContext | None = None) -> PendingTranslation:
    return PendingTranslation(
        text=text,
        cache_key=key,
        target_lang=lang,
        context=context,
        future=asyncio.get_running_loop().create_future(),
    )


@pytest.mark.asyncio
async def test_empty_batch_is_noop(no_retry) -> None:
    translator = RecordingTranslator()
    await BatchExecutor(translator, no_retry).execute([], {})
    assert translator.calls == []


@pytest.mark.asyncio
async def test_contexts_split_groups(no_retry) -> None:
    translator = RecordingTranslator()
    chat = TranslationContext(scenario="chat")
    batch = [
        _pending("a", "a", "ja"),
        _pending("b", "b", "ja", chat),
        _pending("c", "c", "ja"),
    ]
    cache: dict = {}

    await BatchExecutor(translator, no_retry).execute(batch, cache)

    assert [(call.texts, call.context) for call in translator.calls] == [(["a", "c"], None), (["b"], chat)]
    assert [request.future.result() for request in batch] == ["ja:a", "ja:b", "ja:c"]
    assert cache == {"a": "ja:a", "b": "ja:b", "c": "ja:c"}


@pytest.mark.asyncio
async def test_throttle_waits_between_groups(no_retry, monkeypatch) -> None:
    sleeps = []
    real_sleep = asyncio.sleep

    async def fake_sleep(delay):
        sleeps.append(delay)
        await real_sleep(0)

    monkeypatch.setattr("translator.executor.asyncio.sleep", fake_sleep)
    translator = RecordingTranslator()
    batch = [_pending("a", "a", "ja"), _pending("b", "b", "es"), _pending("c", "c", "fr")]

    await BatchExecutor(translator, no_retry, batch_throttle_ms=200).execute(batch, {})

    assert sleeps == [0.2, 0.2]
    assert len(translator.calls) == 3


@pytest.mark.asyncio
async def test_retries_back_off_then_fall_back(monkeypatch) -> None:
    sleeps = []

    async def fake_sleep(delay):
        sleeps.append(delay)

    monkeypatch.setattr("translator.executor.asyncio.sleep", fake_sleep)
    translator = RecordingTranslator(fail_langs={"ja"})
    policy = RetryPolicy(max_attempts=3, initial_delay=0.5, backoff_factor=2.0, backoff_jitter=0.0)
    batch = [_pending("a", "a", "ja")]
    cache: dict = {}

    await BatchExecutor(translator, policy).execute(batch, cache)

    assert len(translator.calls) == 3
    assert sleeps == [0.5, 1.0]
    assert batch[0].future.result() == "a"
    assert cache == {}
