"""Generic grouping and ranking primitives shared by every aggregation."""

from collections.abc import Callable, Hashable, Iterable, Sequence
from enum import Enum
from itertools import islice
from typing import Any, TypeVar

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


class SortDirection(str, Enum):
    """Sort order for ``order_by``."""

    ASC = "asc"
    DESC = "desc"


def group_by(items: Iterable[T], key: Callable[[T], K]) -> dict[K, list[T]]:
    """Group items by a derived key.

    Groups appear in order of their first member, and items keep their input
    order within each group.
    """
    groups: dict[K, list[T]] = {}
    for item in items:
        groups.setdefault(key(item), []).append(item)
    return groups


def order_by(
    items: Iterable[T],
    key: Callable[[T], Any],
    direction: SortDirection | str = SortDirection.ASC,
) -> list[T]:
    """Stable sort of items by key.

    Descending order is a direct descending sort, not a reversed ascending one, so
    items with equal keys keep their input order in both directions.
    """
    direction = SortDirection(direction)
    return sorted(items, key=key, reverse=direction is SortDirection.DESC)


def reverse(items: Iterable[T]) -> list[T]:
    """Reverse a sequence as-is.

    Applied after an ascending ``order_by`` this also inverts the order of ties;
    use ``order_by(..., SortDirection.DESC)`` when ties must stay in input order.
    """
    return list(items)[::-1]


def take(items: Iterable[T], n: int) -> list[T]:
    """First ``n`` items, fewer if the input is shorter; nothing when ``n <= 0``."""
    if n <= 0:
        return []
    if isinstance(items, Sequence):
        return list(items[:n])
    return list(islice(items, n))
