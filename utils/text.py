from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence


@dataclass(slots=True)
class DeduplicationResult:
    unique_texts: List[str]
    groups: List[List[int]]  # Each group contains indexes pointing back to the source list


def deduplicate_texts(texts: Sequence[str]) -> DeduplicationResult:
    """Collapse identical source strings, keeping first-occurrence order."""
    unique: List[str] = []
    groups: List[List[int]] = []
    positions: Dict[str, int] = {}
    for idx, text in enumerate(texts):
        match_index = positions.get(text)
        if match_index is None:
            positions[text] = len(unique)
            unique.append(text)
            groups.append([idx])
        else:
            groups[match_index].append(idx)
    return DeduplicationResult(unique_texts=unique, groups=groups)
