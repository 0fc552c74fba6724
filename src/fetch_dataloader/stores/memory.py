"""
Memory store implementation for fetch_dataloader.
"""
from typing import Dict, Iterator, List, Optional, Tuple, Type

from ..errors import CacheEntryExistsError
from ..result import SharedResult
from ..types import CacheKey, ResultCacheStore


def _slot(key: CacheKey) -> Tuple[Type, CacheKey]:
    # True == 1 == 1.0 in Python; keep them as distinct entries.
    return (type(key), key)


class MemoryResultCache(ResultCacheStore):
    """
    In-memory result cache.

    Entries live as long as the cache itself; there is no expiry or eviction.
    """

    def __init__(self) -> None:
        self._entries: Dict[Tuple[Type, CacheKey], Tuple[CacheKey, SharedResult]] = {}

    def get(self, key: CacheKey) -> Optional[SharedResult]:
        """Get the result stored for a cache key."""
        entry = self._entries.get(_slot(key))
        return entry[1] if entry is not None else None

    def set(self, key: CacheKey, result: SharedResult) -> None:
        """Store a result. Raises CacheEntryExistsError if the key is taken."""
        slot = _slot(key)
        if slot in self._entries:
            raise CacheEntryExistsError(key)
        self._entries[slot] = (key, result)

    def has(self, key: CacheKey) -> bool:
        """Check if a cache key has an entry."""
        return _slot(key) in self._entries

    def size(self) -> int:
        """Get current number of entries."""
        return len(self._entries)

    def keys(self) -> List[CacheKey]:
        """Get all cache keys in insertion order."""
        return [key for key, _ in self._entries.values()]

    def items(self) -> Iterator[Tuple[CacheKey, SharedResult]]:
        """Iterate over (cache key, result) pairs in insertion order."""
        return iter(list(self._entries.values()))


def create_memory_result_cache() -> MemoryResultCache:
    """Create a memory result cache."""
    return MemoryResultCache()
