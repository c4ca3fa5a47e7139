from __future__ import annotations

from typing import Callable, Dict, Hashable, List, Sequence, TypeVar

T = TypeVar("T")


def take_front(queue: List[T], max_items: int) -> List[T]:
    """Remove and return up to ``max_items`` entries from the front of ``queue``."""
    batch = queue[:max_items]
    del queue[:max_items]
    return batch


def partition_by(items: Sequence[T], key: Callable[[T], Hashable]) -> Dict[Hashable, List[T]]:
    """Group items by ``key``; groups and their members keep first-occurrence order."""
    groups: Dict[Hashable, List[T]] = {}
    for item in items:
        groups.setdefault(key(item), []).append(item)
    return groups
