"""
Pending queue of keys waiting for the next dispatch.
"""
from dataclasses import dataclass
from typing import Any, Generic, List, TypeVar

from .result import SharedResult
from .types import CacheKey

T = TypeVar("T")


@dataclass
class PendingLoad(Generic[T]):
    """A queued key together with the result it must settle."""

    cache_key: CacheKey
    """Normalized key"""

    request_key: Any
    """Original argument passed to get(); this is what the loader receives"""

    result: SharedResult[T]
    """Shared result to settle with the loader outcome"""


class PendingQueue(Generic[T]):
    """
    FIFO queue of loads awaiting dispatch.

    Only cache misses are enqueued, so a cache key appears at most once
    per dispatch cycle.
    """

    def __init__(self) -> None:
        self._items: List[PendingLoad[T]] = []

    def enqueue(self, load: PendingLoad[T]) -> bool:
        """
        Append a load.

        Returns:
            True if the queue was empty before this call
        """
        was_empty = not self._items
        self._items.append(load)
        return was_empty

    def drain(self) -> List[PendingLoad[T]]:
        """Remove and return every queued load, in enqueue order."""
        items, self._items = self._items, []
        return items

    def keys(self) -> List[CacheKey]:
        """Cache keys currently queued, in enqueue order."""
        return [item.cache_key for item in self._items]

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(list(self._items))
