"""
Per-execution request batching and deduplication (DataLoader).

Every key requested during one event-loop turn is collected and the
loader is invoked once per distinct key on the next turn. Results are
cached for the lifetime of the DataLoader instance.
"""
import asyncio
import inspect
import logging
import time
from typing import Any, Callable, Dict, Generic, Iterable, List, Optional, Set, TypeVar

from .errors import InvalidArgumentError, LoaderError
from .keys import build_cache_key
from .queue import PendingLoad, PendingQueue
from .result import SharedResult
from .scheduler import TickScheduler
from .stores.memory import MemoryResultCache
from .types import (
    CacheKey,
    DataLoaderConfig,
    DataLoaderEvent,
    DataLoaderEventListener,
    DataLoaderEventType,
    LoaderFn,
    ResultCacheStore,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING: Any = object()

DEFAULT_DATALOADER_CONFIG = DataLoaderConfig(
    name="dataloader",
    sort_keys=True,
    cache_key_fn=None,
)


def merge_dataloader_config(
    config: Optional[DataLoaderConfig] = None,
) -> DataLoaderConfig:
    """Merge user config with defaults."""
    if config is None:
        return DataLoaderConfig(
            name=DEFAULT_DATALOADER_CONFIG.name,
            sort_keys=DEFAULT_DATALOADER_CONFIG.sort_keys,
            cache_key_fn=DEFAULT_DATALOADER_CONFIG.cache_key_fn,
        )

    return DataLoaderConfig(
        name=config.name or DEFAULT_DATALOADER_CONFIG.name,
        sort_keys=config.sort_keys
        if config.sort_keys is not None
        else DEFAULT_DATALOADER_CONFIG.sort_keys,
        cache_key_fn=config.cache_key_fn or DEFAULT_DATALOADER_CONFIG.cache_key_fn,
    )


class DataLoader(Generic[T]):
    """
    DataLoader - coalesces key lookups issued in the same event-loop turn.

    get() never blocks: it returns a SharedResult immediately. The first
    cache miss of a turn schedules dispatch() on the loop; dispatch() then
    calls the loader exactly once for every key queued since the last
    dispatch. Repeated keys, in the same turn or later, are served from the
    cache, including keys whose load failed (the error is replayed).

    One instance is meant to serve one logical execution, such as one
    GraphQL request.

    Example:
        async def fetch_user(user_id):
            return await db.fetch_user(user_id)

        users = DataLoader(fetch_user)

        # One call to fetch_user for id 1, one for id 2
        a, b, c = await asyncio.gather(users.get(1), users.get(1), users.get(2))
    """

    def __init__(
        self,
        loader: LoaderFn,
        config: Optional[DataLoaderConfig] = None,
        store: Optional[ResultCacheStore] = None,
        scheduler: Optional[TickScheduler] = None,
    ) -> None:
        if loader is None or not callable(loader):
            raise InvalidArgumentError("loader might be a function.")

        self.loader = loader
        self.config = merge_dataloader_config(config)
        self.cache: ResultCacheStore = store if store is not None else MemoryResultCache()
        self.queue: PendingQueue[T] = PendingQueue()
        self._scheduler = scheduler or TickScheduler()
        self._scheduled = False
        self._tasks: Set[asyncio.Future] = set()
        self._listeners: Set[DataLoaderEventListener] = set()
        self._counters: Dict[str, int] = {
            "dispatches": 0,
            "loads": 0,
            "hits": 0,
            "misses": 0,
        }

    @property
    def name(self) -> str:
        return self.config.name or "dataloader"

    @property
    def scheduled(self) -> bool:
        """Whether a dispatch is armed for the current turn."""
        return self._scheduled

    def build_cache_key(self, request_key: Any) -> CacheKey:
        """Derive the cache key for a request key."""
        if self.config.cache_key_fn is not None:
            return self.config.cache_key_fn(request_key)
        return build_cache_key(request_key, sort_keys=bool(self.config.sort_keys))

    def get(self, request_key: Any = _MISSING) -> SharedResult[T]:
        """
        Get the shared result for a key, queueing a load on cache miss.

        A missing argument does not raise; the returned result fails with
        InvalidArgumentError instead.

        Args:
            request_key: The key passed to the loader

        Returns:
            The SharedResult for this key (the same object for equal keys)
        """
        if request_key is _MISSING:
            return SharedResult.failed(InvalidArgumentError("args are missing."))

        cache_key = self.build_cache_key(request_key)

        cached = self.cache.get(cache_key)
        if cached is not None:
            self._counters["hits"] += 1
            logger.debug(f"[{self.name}] cache hit for {cache_key!r} ({cached.state.value})")
            self._emit(DataLoaderEventType.CACHE_HIT, cache_key, {"state": cached.state.value})
            return cached

        result: SharedResult[T] = SharedResult(cache_key)
        self.cache.set(cache_key, result)
        self._counters["misses"] += 1
        logger.debug(f"[{self.name}] cache miss for {cache_key!r}, queued")
        self._emit(DataLoaderEventType.CACHE_MISS, cache_key)

        was_empty = self.queue.enqueue(PendingLoad(cache_key, request_key, result))
        if was_empty and not self._scheduled:
            self._scheduled = True
            self.schedule(self.dispatch)

        return result

    def get_many(self, request_keys: Iterable[Any]) -> List[SharedResult[T]]:
        """Call get() for every key, preserving order."""
        return [self.get(request_key) for request_key in request_keys]

    async def load(self, request_key: Any = _MISSING) -> T:
        """Await the value for a single key."""
        return await self.get(request_key)

    async def load_many(
        self,
        request_keys: Iterable[Any],
        return_exceptions: bool = False,
    ) -> List[Any]:
        """
        Await the values for several keys, in request order.

        Args:
            request_keys: Keys to load
            return_exceptions: Return errors in place of values instead of
                raising the first one
        """
        results = self.get_many(request_keys)
        values = await asyncio.gather(*results, return_exceptions=return_exceptions)
        return list(values)

    def schedule(self, fn: Callable[[], None]) -> None:
        """Run fn after the current event-loop step."""
        self._scheduler.schedule(fn)

    def dispatch(self) -> None:
        """
        Invoke the loader once for every queued key.

        The queue is drained before any loader runs, so keys requested
        while this batch is loading start a new batch.
        """
        self._scheduled = False
        batch = self.queue.drain()
        if not batch:
            return

        self._counters["dispatches"] += 1
        keys = [load.cache_key for load in batch]
        logger.debug(f"[{self.name}] dispatching {len(batch)} key(s): {keys!r}")
        self._emit(DataLoaderEventType.DISPATCH_START, None, {"keys": keys, "size": len(batch)})

        for load in batch:
            self._start_load(load)

    def _start_load(self, load: PendingLoad[T]) -> None:
        load.result.mark_in_flight()
        self._counters["loads"] += 1

        try:
            outcome = self.loader(load.request_key)
        except Exception as error:
            self._reject(load, error)
            return

        if not inspect.isawaitable(outcome):
            self._resolve(load, outcome)
            return

        task = asyncio.ensure_future(outcome)
        self._tasks.add(task)
        task.add_done_callback(lambda done, load=load: self._settle(load, done))

    def _settle(self, load: PendingLoad[T], task: "asyncio.Future[Any]") -> None:
        self._tasks.discard(task)

        if task.cancelled():
            self._reject(
                load,
                LoaderError(
                    f"Loader was cancelled for key: {load.request_key!r}",
                    key=load.request_key,
                ),
            )
            return

        error = task.exception()
        if error is not None:
            self._reject(load, error)
        else:
            self._resolve(load, task.result())

    def _resolve(self, load: PendingLoad[T], value: T) -> None:
        load.result.set_result(value)
        self._emit(DataLoaderEventType.LOAD_SUCCESS, load.cache_key)

    def _reject(self, load: PendingLoad[T], error: BaseException) -> None:
        logger.warning(f"[{self.name}] load failed for {load.cache_key!r}: {error}")
        load.result.set_exception(error)
        self._emit(
            DataLoaderEventType.LOAD_ERROR,
            load.cache_key,
            {"error": str(error), "error_type": type(error).__name__},
        )

    def get_stats(self) -> Dict[str, Any]:
        """Get cache, queue and dispatch counters."""
        return {
            "name": self.name,
            "cached": self.cache.size(),
            "pending": len(self.queue),
            "in_flight": len(self._tasks),
            "scheduled": self._scheduled,
            **self._counters,
        }

    def on(self, listener: DataLoaderEventListener) -> Callable[[], None]:
        """Add event listener."""
        self._listeners.add(listener)
        return lambda: self._listeners.discard(listener)

    def off(self, listener: DataLoaderEventListener) -> None:
        """Remove event listener."""
        self._listeners.discard(listener)

    def _emit(
        self,
        event_type: DataLoaderEventType,
        key: Any,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Emit an event to all listeners."""
        if not self._listeners:
            return

        event = DataLoaderEvent(
            type=event_type,
            key=key,
            timestamp=time.time(),
            loader=self.name,
            metadata=metadata,
        )
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(f"[{self.name}] event listener failed for {event_type.value}")

    def __repr__(self) -> str:
        return (
            f"<DataLoader name={self.name!r} cached={self.cache.size()} "
            f"pending={len(self.queue)}>"
        )


def create_dataloader(
    loader: LoaderFn,
    config: Optional[DataLoaderConfig] = None,
    store: Optional[ResultCacheStore] = None,
) -> DataLoader:
    """Create a DataLoader instance."""
    return DataLoader(loader, config, store)
