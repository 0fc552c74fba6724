"""
Types for fetch_dataloader package.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    Dict,
    Hashable,
    Iterator,
    List,
    Optional,
    Tuple,
    Union,
)

if TYPE_CHECKING:
    from .result import SharedResult

CacheKey = Hashable
"""Identity derived from a request key; see keys.build_cache_key."""

LoaderFn = Callable[[Any], Union[Awaitable[Any], Any]]
"""Loader mapping one request key to one (usually awaitable) outcome."""


@dataclass
class DataLoaderConfig:
    """Configuration for a DataLoader instance."""

    name: Optional[str] = None
    """Label used in log lines, events and stats."""

    sort_keys: Optional[bool] = None
    """Sort mapping keys when serializing structured request keys. Default: True"""

    cache_key_fn: Optional[Callable[[Any], CacheKey]] = None
    """Custom request-key normalizer replacing build_cache_key."""


class ResultCacheStore(ABC):
    """Result cache interface: one SharedResult per cache key, never replaced."""

    @abstractmethod
    def get(self, key: CacheKey) -> Optional["SharedResult"]:
        """Get the result stored for a cache key."""
        pass

    @abstractmethod
    def set(self, key: CacheKey, result: "SharedResult") -> None:
        """Store a result. Raises CacheEntryExistsError if the key is taken."""
        pass

    @abstractmethod
    def has(self, key: CacheKey) -> bool:
        """Check if a cache key has an entry."""
        pass

    @abstractmethod
    def size(self) -> int:
        """Get current number of entries."""
        pass

    @abstractmethod
    def keys(self) -> List[CacheKey]:
        """Get all cache keys in insertion order."""
        pass

    @abstractmethod
    def items(self) -> Iterator[Tuple[CacheKey, "SharedResult"]]:
        """Iterate over (cache key, result) pairs in insertion order."""
        pass

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, key: object) -> bool:
        return self.has(key)  # type: ignore[arg-type]


class DataLoaderEventType(str, Enum):
    """Event types for dataloader operations."""

    CACHE_HIT = "cache:hit"
    CACHE_MISS = "cache:miss"
    DISPATCH_START = "dispatch:start"
    LOAD_SUCCESS = "load:success"
    LOAD_ERROR = "load:error"


@dataclass
class DataLoaderEvent:
    """Dataloader event."""

    type: DataLoaderEventType
    key: Any
    timestamp: float
    loader: str = "dataloader"
    metadata: Optional[Dict[str, Any]] = None


DataLoaderEventListener = Callable[[DataLoaderEvent], None]
"""Event listener type."""
