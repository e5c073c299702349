from collections.abc import Sequence
from difflib import get_close_matches
from typing import TypeVar

from checkly.core.errors import AmbiguousError
from checkly.core.models import GoalDefinition, Task

__all__ = ["find_in_pool"]

FUZZY_MATCH_CUTOFF = 0.8

T = TypeVar("T", Task, GoalDefinition)


def _match_id_prefix(ref: str, pool: Sequence[T]) -> T | None:
    exact = next((item for item in pool if item.id == ref), None)
    if exact:
        return exact
    ref_lower = ref.lower()
    matches = [item for item in pool if len(ref_lower) >= 2 and item.id.startswith(ref_lower)]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        sample = [item.id[:8] for item in matches[:3]]
        raise AmbiguousError(ref, count=len(matches), sample=sample)
    return None


def _match_substring(ref: str, pool: Sequence[T]) -> T | None:
    ref_lower = ref.lower()
    exact = next((item for item in pool if item.title.lower() == ref_lower), None)
    if exact:
        return exact
    matches = [item for item in pool if ref_lower in item.title.lower()]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        sample = [item.title for item in matches[:3]]
        raise AmbiguousError(ref, count=len(matches), sample=sample)
    return None


def _match_fuzzy(ref: str, pool: Sequence[T]) -> T | None:
    titles = [item.title.lower() for item in pool]
    matches = get_close_matches(ref.lower(), titles, n=1, cutoff=FUZZY_MATCH_CUTOFF)
    if matches:
        return pool[titles.index(matches[0])]
    return None


def find_in_pool(ref: str, pool: Sequence[T]) -> T | None:
    """Resolve `ref` by id (or id prefix), then title substring, then close title match."""
    if not pool or not ref.strip():
        return None
    return _match_id_prefix(ref, pool) or _match_substring(ref, pool) or _match_fuzzy(ref, pool)
