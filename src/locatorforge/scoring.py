from __future__ import annotations

from typing import Iterable, Sequence

from .config import KIND_PREFERENCE
from .models import Reliability, SelectorInfo, SelectorKind

RELIABILITY_RANK: dict[Reliability, int] = {
    "high": 0,
    "medium": 1,
    "low": 2,
}


def reliability_rank(reliability: str) -> int:
    return RELIABILITY_RANK.get(reliability, len(RELIABILITY_RANK))  # type: ignore[arg-type]


def kind_rank(kind: str, kind_preference: Sequence[SelectorKind] = KIND_PREFERENCE) -> int:
    try:
        return list(kind_preference).index(kind)  # type: ignore[arg-type]
    except ValueError:
        return len(kind_preference)


def rank_candidates(
    candidates: Iterable[SelectorInfo],
    kind_preference: Sequence[SelectorKind] = KIND_PREFERENCE,
) -> list[SelectorInfo]:
    # sorted() is stable, so equal keys keep discovery order
    return sorted(
        candidates,
        key=lambda item: (reliability_rank(item.reliability), kind_rank(item.kind, kind_preference)),
    )


def is_ranked(candidates: Sequence[SelectorInfo], kind_preference: Sequence[SelectorKind] = KIND_PREFERENCE) -> bool:
    keys = [(reliability_rank(item.reliability), kind_rank(item.kind, kind_preference)) for item in candidates]
    return all(left <= right for left, right in zip(keys, keys[1:]))
