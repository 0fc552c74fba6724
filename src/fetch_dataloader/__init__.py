"""
Per-execution request batching and deduplication (DataLoader) for asyncio.
"""
from .types import (
    CacheKey,
    LoaderFn,
    DataLoaderConfig,
    ResultCacheStore,
    DataLoaderEventType,
    DataLoaderEvent,
    DataLoaderEventListener,
)
from .errors import (
    DataLoaderError,
    InvalidArgumentError,
    LoaderError,
    CacheEntryExistsError,
)
from .keys import build_cache_key, serialize_key
from .result import ResultState, SharedResult
from .queue import PendingLoad, PendingQueue
from .scheduler import TickScheduler
from .dataloader import (
    DataLoader,
    create_dataloader,
    DEFAULT_DATALOADER_CONFIG,
    merge_dataloader_config,
)
from .context import LoaderContext
from .stores import (
    MemoryResultCache,
    create_memory_result_cache,
)


__all__ = [
    # Types
    "CacheKey",
    "LoaderFn",
    "DataLoaderConfig",
    "ResultCacheStore",
    "DataLoaderEventType",
    "DataLoaderEvent",
    "DataLoaderEventListener",
    # Errors
    "DataLoaderError",
    "InvalidArgumentError",
    "LoaderError",
    "CacheEntryExistsError",
    # Keys
    "build_cache_key",
    "serialize_key",
    # Results
    "ResultState",
    "SharedResult",
    # Queue and scheduling
    "PendingLoad",
    "PendingQueue",
    "TickScheduler",
    # DataLoader
    "DataLoader",
    "create_dataloader",
    "DEFAULT_DATALOADER_CONFIG",
    "merge_dataloader_config",
    "LoaderContext",
    # Stores
    "MemoryResultCache",
    "create_memory_result_cache",
]

__version__ = "1.0.0"
