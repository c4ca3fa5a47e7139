from __future__ import annotations

from typing import Dict, Iterator, MutableMapping


def make_cache_key(unit_id: str, target_lang: str) -> str:
    return f"{unit_id}:{target_lang}"


class TranslationCache(MutableMapping[str, str]):
    """In-memory ``cache_key -> translation`` store owned by the caller.

    One instance is typically shared by every batcher of a session. Eviction is
    left to the owner; the batcher only reads and sets entries.
    """

    def __init__(self, initial: Dict[str, str] | None = None) -> None:
        self._store: Dict[str, str] = dict(initial or {})

    def __getitem__(self, key: str) -> str:
        return self._store[key]

    def __setitem__(self, key: str, value: str) -> None:
        self._store[key] = value

    def __delitem__(self, key: str) -> None:
        del self._store[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._store)

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return key in self._store

    def set(self, key: str, value: str) -> None:
        self._store[key] = value

    def delete(self, key: str) -> None:
        self._store.pop(key, None)

    def __repr__(self) -> str:
        return f"TranslationCache(size={len(self._store)})"
