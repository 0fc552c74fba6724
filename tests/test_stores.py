"""
Tests for the in-memory result cache.
"""
import pytest

from fetch_dataloader import (
    CacheEntryExistsError,
    MemoryResultCache,
    ResultCacheStore,
    SharedResult,
    create_memory_result_cache,
)


class TestMemoryResultCache:
    """Tests for MemoryResultCache."""

    def test_implements_interface(self, memory_result_cache: MemoryResultCache) -> None:
        """Should be a ResultCacheStore."""
        assert isinstance(memory_result_cache, ResultCacheStore)

    def test_factory(self) -> None:
        """Should create an empty cache."""
        cache = create_memory_result_cache()

        assert isinstance(cache, MemoryResultCache)
        assert cache.size() == 0

    def test_get_missing_returns_none(self, memory_result_cache: MemoryResultCache) -> None:
        """Should return None without creating an entry."""
        assert memory_result_cache.get("missing") is None
        assert memory_result_cache.size() == 0
        assert "missing" not in memory_result_cache

    async def test_set_and_get(self, memory_result_cache: MemoryResultCache) -> None:
        """Should return the stored result object."""
        result = SharedResult("a")
        memory_result_cache.set("a", result)

        assert memory_result_cache.get("a") is result
        assert memory_result_cache.has("a") is True
        assert len(memory_result_cache) == 1

    async def test_set_refuses_overwrite(self, memory_result_cache: MemoryResultCache) -> None:
        """Should keep the first result and raise on overwrite."""
        first = SharedResult("a")
        memory_result_cache.set("a", first)

        with pytest.raises(CacheEntryExistsError) as exc_info:
            memory_result_cache.set("a", SharedResult("a"))

        assert exc_info.value.key == "a"
        assert exc_info.value.code == "CACHE_ENTRY_EXISTS"
        assert memory_result_cache.get("a") is first

    async def test_bool_int_float_are_distinct(
        self, memory_result_cache: MemoryResultCache
    ) -> None:
        """Should not merge True, 1 and 1.0 into one entry."""
        memory_result_cache.set(1, SharedResult(1))
        memory_result_cache.set(True, SharedResult(True))
        memory_result_cache.set(1.0, SharedResult(1.0))

        assert memory_result_cache.size() == 3
        assert memory_result_cache.get(True).key is True
        assert memory_result_cache.get(1.0).key == 1.0
        assert isinstance(memory_result_cache.get(1.0).key, float)

    async def test_keys_and_items_in_insertion_order(
        self, memory_result_cache: MemoryResultCache
    ) -> None:
        """Should expose keys and entries in insertion order."""
        results = {key: SharedResult(key) for key in ("b", 0, "null")}
        for key, result in results.items():
            memory_result_cache.set(key, result)

        assert memory_result_cache.keys() == ["b", 0, "null"]
        assert list(memory_result_cache.items()) == list(results.items())
